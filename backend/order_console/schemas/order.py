"""Order Console: order search, row and selection schemas."""
from datetime import date
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

PLACEHOLDER = "-"


class OrderStatus(str, Enum):
    NEW = "NEW"
    RELEASABLE = "RELEASABLE"
    ACTIVE = "ACTIVE"
    HOLD = "HOLD"
    NOT_IN_EXECUTION = "NOT_IN_EXECUTION"
    COMPLETED = "COMPLETED"
    DISCARDED = "DISCARDED"
    DONE = "DONE"


class SfcStatus(str, Enum):
    NEW = "NEW"
    IN_QUEUE = "IN_QUEUE"
    HOLD = "HOLD"
    ACTIVE = "ACTIVE"
    DONE = "DONE"
    INVALID = "INVALID"


# --- Search ---

class FilterCriteria(BaseModel):
    """Raw search input as typed by the operator. Empty strings mean "not set"."""

    material: str = ""
    execution_status: str = ""
    order_number: str = ""
    date_from: date | None = None
    date_to: date | None = None

    @field_validator("material", "execution_status", "order_number", mode="before")
    @classmethod
    def _strip(cls, value):
        if value is None:
            return ""
        return str(value).strip()


class ValidatedQuery(BaseModel):
    model_config = ConfigDict(frozen=True)

    material: str = ""
    execution_status: str = ""
    order_number: str = ""
    date_from: date | None = None
    date_to: date | None = None

    @property
    def has_date_range(self) -> bool:
        return self.date_from is not None and self.date_to is not None

    def to_params(self) -> dict[str, str]:
        """Order-list query parameters. Omitted fields are never sent."""
        params: dict[str, str] = {}
        if self.material:
            params["material"] = self.material
        if self.execution_status:
            params["executionStatus"] = self.execution_status
        if self.order_number:
            params["orderNumber"] = self.order_number
        if self.date_from:
            params["dateFrom"] = self.date_from.isoformat()
        if self.date_to:
            params["dateTo"] = self.date_to.isoformat()
        return params


# --- Rows ---

class OrderRow(BaseModel):
    """Display projection of an order plus enrichment. Never persisted."""

    order_no: str = PLACEHOLDER
    parent_sfc: str = PLACEHOLDER
    material_line: str = PLACEHOLDER
    material_desc: str = ""
    execution_status: str = PLACEHOLDER
    build_qty: str = PLACEHOLDER
    done_qty: str = PLACEHOLDER
    dm_released_qty: str = PLACEHOLDER
    available_qty: str = PLACEHOLDER
    scheduled_start_end: str = PLACEHOLDER
    scheduled_start_date: str | None = None
    scheduled_completion_date: str | None = None
    priority: str = PLACEHOLDER
    enabled: bool = False
    # Set when enrichment was attempted and failed; None means "no data" or not enrichable
    enrichment_error: str | None = None


class Selection(BaseModel):
    """The row picked by the operator, captured at selection time with the plant it was listed in."""

    model_config = ConfigDict(frozen=True)

    order_no: str
    execution_status: str
    parent_sfc: str = PLACEHOLDER
    plant: str


class LastSearch(BaseModel):
    """Criteria and plant of the search the displayed rows came from."""

    model_config = ConfigDict(frozen=True)

    criteria: FilterCriteria
    plant: str


class SearchResult(BaseModel):
    ok: bool
    message: str = ""
    error: str | None = None
    rows: list[OrderRow] = []
    items_heading: str = "Items (00)"


# --- Requests (HTTP surface) ---

class SelectOrderRequest(BaseModel):
    order_no: str = Field(..., min_length=1)


class AdjustQuantityRequest(BaseModel):
    quantity: float
    parent_sfc: str | None = None


class DiscardOrderRequest(BaseModel):
    order_no: str | None = None
