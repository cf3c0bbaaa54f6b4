"""Order Console: parent SFC / released quantity enrichment of order rows."""
import asyncio
import logging

from pydantic import BaseModel, ConfigDict

from order_console.config import Settings
from order_console.core.dm_client import DmApiClient
from order_console.core.errors import ParseError, PartialEnrichmentFailure, TransportError
from order_console.schemas.order import PLACEHOLDER, OrderRow
from order_console.services.order_mapping import (
    find_parent_sfc,
    is_number,
    map_order_to_row,
    resolve_detail_uom,
    resolve_uom,
    with_uom,
)

logger = logging.getLogger(__name__)


class EnrichmentOutcome(BaseModel):
    """Per-row result. All None means "nothing to show", `error` set means "fetch failed"."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    parent_sfc: str | None = None
    dm_released_qty: str | None = None
    error: PartialEnrichmentFailure | None = None


def released_quantity(sfc_detail: dict, order_detail: dict) -> int | float | None:
    """
    DM released quantity of the parent SFC.
    The SFC's own `quantity` wins; otherwise it is derived from the order's
    releasedQuantity minus every SFC but the parent.
    """
    quantity = sfc_detail.get("quantity")
    if is_number(quantity):
        return quantity
    released = order_detail.get("releasedQuantity")
    sfcs = order_detail.get("sfcs") or []
    if is_number(released):
        return released - len(sfcs) + 1
    return None


class EnrichmentPipeline:
    """Concurrent per-order detail lookups, recombined in request order."""

    def __init__(self, client: DmApiClient, settings: Settings):
        self.client = client
        self.enrichable_statuses = set(settings.ENRICHABLE_STATUSES)
        self.enabled_statuses = list(settings.ENABLED_STATUSES)
        self.concurrency = max(1, settings.ENRICHMENT_CONCURRENCY)

    async def enrich(self, orders: list[dict], plant: str) -> list[OrderRow]:
        outcomes = await self.enrich_outcomes(orders, plant)
        rows = []
        for raw, outcome in zip(orders, outcomes):
            row = map_order_to_row(raw, self.enabled_statuses)
            row.parent_sfc = outcome.parent_sfc or PLACEHOLDER
            row.dm_released_qty = outcome.dm_released_qty or PLACEHOLDER
            row.enrichment_error = outcome.error.message if outcome.error else None
            rows.append(row)
        return rows

    async def enrich_outcomes(self, orders: list[dict], plant: str) -> list[EnrichmentOutcome]:
        semaphore = asyncio.Semaphore(self.concurrency)

        async def _bounded(raw: dict) -> EnrichmentOutcome:
            if raw.get("executionStatus") not in self.enrichable_statuses:
                return EnrichmentOutcome()
            async with semaphore:
                return await self.enrich_one(raw, plant)

        # gather preserves argument order regardless of completion order
        return list(await asyncio.gather(*(_bounded(raw) for raw in orders)))

    async def enrich_one(self, raw: dict, plant: str) -> EnrichmentOutcome:
        order_no = raw.get("order")
        if not isinstance(order_no, str) or not order_no:
            return self._failed("", "Order has no order number")

        try:
            detail = await self.client.get_order_detail(plant, order_no)
        except (TransportError, ParseError) as exc:
            return self._failed(order_no, f"Order detail unavailable: {exc.message}")

        sfcs = detail.get("sfcs") or []
        if not isinstance(sfcs, list):
            return self._failed(order_no, "Order detail has no SFC list")

        parent_sfc = find_parent_sfc(sfcs, order_no)
        if parent_sfc is None:
            return EnrichmentOutcome()

        try:
            sfc_detail = await self.client.get_sfc_detail(plant, parent_sfc)
        except (TransportError, ParseError) as exc:
            return self._failed(order_no, f"SFC detail unavailable: {exc.message}", parent_sfc=parent_sfc)

        quantity = released_quantity(sfc_detail, detail)
        if quantity is None:
            return EnrichmentOutcome(parent_sfc=parent_sfc)

        uom = resolve_detail_uom(detail, fallback=resolve_uom(raw))
        return EnrichmentOutcome(parent_sfc=parent_sfc, dm_released_qty=with_uom(quantity, uom))

    @staticmethod
    def _failed(order_no: str, message: str, parent_sfc: str | None = None) -> EnrichmentOutcome:
        logger.warning("Enrichment degraded for order %s: %s", order_no or "<unknown>", message)
        return EnrichmentOutcome(parent_sfc=parent_sfc, error=PartialEnrichmentFailure(order_no, message))
