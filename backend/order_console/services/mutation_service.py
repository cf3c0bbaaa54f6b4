"""Order Console: one-shot SFC quantity and order discard mutations."""
import logging

from order_console.core.dm_client import DmApiClient
from order_console.core.errors import TransportError, ValidationError
from order_console.schemas.action import ActionResult
from order_console.schemas.order import PLACEHOLDER

logger = logging.getLogger(__name__)


class MutationService:
    """Neither call retries nor touches local state; refreshing is up to the caller."""

    def __init__(self, client: DmApiClient):
        self.client = client

    async def adjust_quantity(self, parent_sfc: str | None, new_quantity: float | None, plant: str) -> ActionResult:
        """Set a new quantity on the order's parent SFC."""
        if not parent_sfc or parent_sfc == PLACEHOLDER:
            return self._invalid(ValidationError("The selected order has no parent SFC."))
        if new_quantity is None or new_quantity <= 0:
            return self._invalid(ValidationError("Quantity must be a positive number."))

        try:
            await self.client.set_sfc_quantity(plant, parent_sfc, new_quantity)
        except TransportError as exc:
            return ActionResult(ok=False, message=f"Error while setting the new qty.\n{exc.message}", error=exc.code)

        logger.info("Set quantity of SFC %s to %s", parent_sfc, new_quantity)
        return ActionResult(ok=True, message="New qty set Successfully!")

    async def discard_order(self, order_no: str | None, plant: str) -> ActionResult:
        if not order_no or order_no == PLACEHOLDER:
            return self._invalid(ValidationError("Please select an order first."))

        try:
            await self.client.discard_order(plant, order_no)
        except TransportError as exc:
            return ActionResult(ok=False, message=f"Error while discarding Order.\n{exc.message}", error=exc.code)

        logger.info("Discarded order %s", order_no)
        return ActionResult(ok=True, message="Order Discarded Successfully!")

    @staticmethod
    def _invalid(error: ValidationError) -> ActionResult:
        return ActionResult(ok=False, message=error.message, error=error.code)
