"""Order Console: current result set and selected row."""
from order_console.core.errors import ValidationError
from order_console.schemas.order import OrderRow, Selection


def plant_mismatch_message(selection: Selection, plant: str) -> str:
    return (
        f"Order {selection.order_no} was selected in plant {selection.plant}, not {plant}. "
        f"Please search again in plant {plant}."
    )


class SelectionTracker:
    """Rows of the latest search, the plant they were listed in, and the row picked from them."""

    def __init__(self):
        self.rows: list[OrderRow] = []
        self.plant: str | None = None
        self.selection: Selection | None = None

    def replace_rows(self, rows: list[OrderRow], plant: str) -> None:
        """New result set. Any previous selection is dropped."""
        self.rows = list(rows)
        self.plant = plant
        self.selection = None

    def select(self, order_no: str) -> Selection:
        for row in self.rows:
            if row.order_no == order_no:
                self.selection = Selection(
                    order_no=row.order_no,
                    execution_status=row.execution_status,
                    parent_sfc=row.parent_sfc,
                    plant=self.plant,
                )
                return self.selection
        raise ValidationError(f"Order {order_no} is not in the current result list.")

    def conflict(self, plant: str) -> ValidationError | None:
        """A ValidationError when the selection was made in another plant."""
        if self.selection is not None and self.selection.plant != plant:
            return ValidationError(plant_mismatch_message(self.selection, plant))
        return None
