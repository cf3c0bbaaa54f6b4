"""Order Console: order list lookup and client-side re-filtering."""
import logging

from order_console.config import Settings
from order_console.core.dm_client import DmApiClient
from order_console.schemas.order import ValidatedQuery
from order_console.services.order_mapping import timestamp_date

logger = logging.getLogger(__name__)


def within_date_range(raw: dict, query: ValidatedQuery) -> bool:
    """
    Fully-contained policy: start and completion dates must both fall inside
    [date_from, date_to], whole days inclusive. Orders missing either date are dropped.
    """
    start = timestamp_date(raw.get("scheduledStartDate"))
    end = timestamp_date(raw.get("scheduledCompletionDate"))
    if start is None or end is None:
        return False
    return start >= query.date_from and end <= query.date_to


def apply_client_filters(orders: list[dict], query: ValidatedQuery) -> list[dict]:
    """Re-apply the query locally in case the backend filter is looser."""
    if query.has_date_range:
        orders = [o for o in orders if within_date_range(o, query)]
    if query.execution_status:
        orders = [o for o in orders if o.get("executionStatus") == query.execution_status]
    if query.order_number:
        orders = [o for o in orders if isinstance(o.get("order"), str) and query.order_number in o["order"]]
    return orders


class OrderQueryService:
    """Single-page order search for a plant."""

    def __init__(self, client: DmApiClient, settings: Settings):
        self.client = client
        self.page_size = settings.ORDER_LIST_PAGE_SIZE

    async def fetch_orders(self, query: ValidatedQuery, plant: str) -> list[dict]:
        """
        Fetch and re-filter raw orders.
        TransportError / ParseError propagate: a failed lookup never yields a partial list.
        """
        orders = await self.client.list_orders(plant, query.to_params(), size=self.page_size)
        filtered = apply_client_filters(orders, query)
        if len(filtered) != len(orders):
            logger.info("Client-side filter dropped %d of %d orders", len(orders) - len(filtered), len(orders))
        return filtered
