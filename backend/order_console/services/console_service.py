"""Order Console: facade tying search, selection and actions together.

One console serves one operator. It owns the displayed rows, the selection and
the last search with its plant, and re-runs that search after every action so
the rows never go stale.
"""
import logging

from order_console.config import Settings
from order_console.core.dm_client import DmApiClient
from order_console.core.errors import ParseError, TransportError, ValidationError
from order_console.schemas.action import ActionResult, CompletionResult
from order_console.schemas.order import FilterCriteria, LastSearch, SearchResult, Selection
from order_console.services.completion_service import CompletionWorkflow
from order_console.services.enrichment import EnrichmentPipeline
from order_console.services.filter_normalizer import FilterPolicy, normalize
from order_console.services.mutation_service import MutationService
from order_console.services.order_query_service import OrderQueryService
from order_console.services.selection import SelectionTracker

logger = logging.getLogger(__name__)


def items_heading(count: int) -> str:
    return f"Items ({count:02d})"


class OrderConsole:
    def __init__(self, client: DmApiClient, settings: Settings):
        self.policy = FilterPolicy.from_settings(settings)
        self.query_service = OrderQueryService(client, settings)
        self.enrichment = EnrichmentPipeline(client, settings)
        self.completion = CompletionWorkflow(client)
        self.mutations = MutationService(client)
        self.tracker = SelectionTracker()
        self.last_search: LastSearch | None = None

    @property
    def selection(self) -> Selection | None:
        return self.tracker.selection

    @property
    def heading(self) -> str:
        return items_heading(len(self.tracker.rows))

    async def search(self, criteria: FilterCriteria, plant: str) -> SearchResult:
        """Validate, fetch, enrich. Validation failures leave the current rows untouched."""
        query = normalize(criteria, self.policy)
        if isinstance(query, ValidationError):
            logger.info("Search rejected: %s", query.message)
            return SearchResult(
                ok=False,
                message=query.message,
                error=query.code,
                rows=self.tracker.rows,
                items_heading=self.heading,
            )

        # Rows and last_search are only written together, after the awaits
        try:
            orders = await self.query_service.fetch_orders(query, plant)
        except (TransportError, ParseError) as exc:
            self.last_search = LastSearch(criteria=criteria, plant=plant)
            self.tracker.replace_rows([], plant)
            return SearchResult(ok=False, message=f"Failed to fetch orders: {exc.message}", error=exc.code)

        rows = await self.enrichment.enrich(orders, plant)
        self.last_search = LastSearch(criteria=criteria, plant=plant)
        self.tracker.replace_rows(rows, plant)
        return SearchResult(ok=True, rows=rows, items_heading=items_heading(len(rows)))

    async def refresh(self) -> SearchResult | None:
        """Re-run the last accepted search in its own plant, if any."""
        if self.last_search is None:
            return None
        return await self.search(self.last_search.criteria, self.last_search.plant)

    def select_order(self, order_no: str) -> Selection:
        return self.tracker.select(order_no)

    async def complete_selected(self, plant: str) -> CompletionResult:
        """Run the completion workflow for the selection, then refresh whatever happened."""
        result = await self.completion.complete(self.tracker.selection, plant)
        await self.refresh()
        return result

    async def adjust_quantity(self, new_quantity: float, plant: str, parent_sfc: str | None = None) -> ActionResult:
        """Without an explicit SFC the selection's parent SFC is used, in the plant it was selected in."""
        if parent_sfc is None and self.tracker.selection is not None:
            conflict = self.tracker.conflict(plant)
            if conflict is not None:
                result = self._refused(conflict)
            else:
                result = await self.mutations.adjust_quantity(
                    self.tracker.selection.parent_sfc, new_quantity, self.tracker.selection.plant
                )
        else:
            result = await self.mutations.adjust_quantity(parent_sfc, new_quantity, plant)
        await self.refresh()
        return result

    async def discard_order(self, plant: str, order_no: str | None = None) -> ActionResult:
        if order_no is None and self.tracker.selection is not None:
            conflict = self.tracker.conflict(plant)
            if conflict is not None:
                result = self._refused(conflict)
            else:
                result = await self.mutations.discard_order(self.tracker.selection.order_no, self.tracker.selection.plant)
        else:
            result = await self.mutations.discard_order(order_no, plant)
        await self.refresh()
        return result

    @staticmethod
    def _refused(error: ValidationError) -> ActionResult:
        logger.info("Action refused: %s", error.message)
        return ActionResult(ok=False, message=error.message, error=error.code)
