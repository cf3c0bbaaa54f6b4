"""Order Console: order completion workflow.

Completion is driven by the status captured when the operator picked the row:

    no selection        -> IDLE, nothing sent
    other plant         -> REJECTED_PLANT, nothing sent
    ACTIVE              -> REJECTED_ACTIVE, nothing sent
    NOT_IN_EXECUTION    -> INVALIDATING_WORKLIST: fetch the order's SFC worklist
                           and invalidate every NEW / IN_QUEUE / HOLD SFC, one at a time
    anything else       -> REJECTED_STATUS, nothing sent

Remote calls use the plant the order was listed in. Invalidation failures are
collected per SFC and never stop the loop. Refreshing the order list afterwards
is the caller's job (see OrderConsole).
"""
import logging

from pydantic import BaseModel, ConfigDict

from order_console.core.dm_client import DmApiClient
from order_console.core.errors import ParseError, TransportError, WorkflowRejection
from order_console.schemas.action import CompletionResult, CompletionState
from order_console.schemas.order import OrderStatus, Selection, SfcStatus
from order_console.services.selection import plant_mismatch_message

logger = logging.getLogger(__name__)

INVALIDATABLE_SFC_STATUSES = {SfcStatus.NEW.value, SfcStatus.IN_QUEUE.value, SfcStatus.HOLD.value}

MSG_SELECT_FIRST = "Please select an order first."
MSG_ACTIVE_SFCS = "There are Active SFCs, Kindly Complete those SFCs first."
MSG_WRONG_STATUS = "Only orders with status ACTIVE or NOT IN EXECUTION can be completed."
MSG_COMPLETED = "SFC deleted and order completed."


class CompletionRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    order_no: str
    plant: str
    execution_status: str


def sfc_status(entry: dict) -> str | None:
    """Worklist status is either a plain string or {"code": ..., "description": ...}."""
    status = entry.get("status")
    if isinstance(status, dict):
        return status.get("description") or status.get("code")
    if isinstance(status, str):
        return status
    return None


def select_invalidatable(worklist: list[dict], order_no: str) -> list[str]:
    """SFC ids of this order that may still be invalidated, in worklist order."""
    return [
        entry["sfc"]
        for entry in worklist
        if entry.get("order") == order_no
        and isinstance(entry.get("sfc"), str)
        and sfc_status(entry) in INVALIDATABLE_SFC_STATUSES
    ]


def _rejected(state: CompletionState, rejection: WorkflowRejection, order_no: str | None = None) -> CompletionResult:
    logger.info("Completion refused (%s) for order %s: %s", state.value, order_no, rejection.message)
    return CompletionResult(
        ok=False,
        state=state,
        order_no=order_no,
        message=rejection.message,
        error=rejection.code,
    )


class CompletionWorkflow:
    """Decides and runs the remote calls that complete one selected order."""

    def __init__(self, client: DmApiClient):
        self.client = client

    async def complete(self, selection: Selection | None, plant: str | None = None) -> CompletionResult:
        """`plant` is the caller's current plant; the selection's own plant is what gets used."""
        if selection is None or not selection.order_no:
            return _rejected(CompletionState.IDLE, WorkflowRejection(MSG_SELECT_FIRST))
        if plant is not None and plant != selection.plant:
            return _rejected(
                CompletionState.REJECTED_PLANT,
                WorkflowRejection(plant_mismatch_message(selection, plant)),
                selection.order_no,
            )

        request = CompletionRequest(
            order_no=selection.order_no,
            plant=selection.plant,
            execution_status=selection.execution_status,
        )

        if request.execution_status == OrderStatus.ACTIVE.value:
            return _rejected(CompletionState.REJECTED_ACTIVE, WorkflowRejection(MSG_ACTIVE_SFCS), request.order_no)
        if request.execution_status == OrderStatus.NOT_IN_EXECUTION.value:
            return await self._invalidate_worklist(request)
        return _rejected(CompletionState.REJECTED_STATUS, WorkflowRejection(MSG_WRONG_STATUS), request.order_no)

    async def _invalidate_worklist(self, request: CompletionRequest) -> CompletionResult:
        state = CompletionState.INVALIDATING_WORKLIST
        try:
            worklist = await self.client.get_sfc_worklist(request.plant, request.order_no)
        except ParseError as exc:
            return CompletionResult(ok=False, state=state, order_no=request.order_no, message=exc.message, error=exc.code)
        except TransportError as exc:
            return CompletionResult(
                ok=False, state=state, order_no=request.order_no, message=f"Error: {exc.message}", error=exc.code
            )

        if not worklist:
            return CompletionResult(
                ok=False,
                state=state,
                order_no=request.order_no,
                message=f"No SFCs found for Order {request.order_no}.",
            )

        invalidated: list[str] = []
        failures: list[str] = []
        # One invalidation in flight at a time
        for sfc in select_invalidatable(worklist, request.order_no):
            try:
                await self.client.invalidate_sfc(request.plant, sfc)
            except TransportError as exc:
                if exc.status_code is not None:
                    failures.append(f"Failed to invalidate SFC {sfc}: {exc.message}")
                else:
                    failures.append(f"Error invalidating SFC {sfc}: {exc.message}")
                continue
            invalidated.append(sfc)
            logger.info("Invalidated SFC %s of order %s", sfc, request.order_no)

        if failures:
            return CompletionResult(
                ok=False,
                state=state,
                order_no=request.order_no,
                message=f"Invalidated {len(invalidated)} of {len(invalidated) + len(failures)} SFCs "
                f"for Order {request.order_no}.",
                error=TransportError.code,
                failures=failures,
                invalidated_sfcs=invalidated,
            )
        return CompletionResult(
            ok=True,
            state=state,
            order_no=request.order_no,
            message=MSG_COMPLETED,
            invalidated_sfcs=invalidated,
        )
