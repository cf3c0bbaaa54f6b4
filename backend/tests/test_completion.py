# =============================================================================
# ORDER CONSOLE - TEST COMPLETION WORKFLOW
# =============================================================================

import httpx
import pytest

from order_console.core.dm_client import SFC_INVALIDATE_PATH, SFC_WORKLIST_PATH
from order_console.schemas.action import CompletionState
from order_console.schemas.order import Selection
from order_console.services.completion_service import (
    MSG_ACTIVE_SFCS,
    MSG_COMPLETED,
    MSG_SELECT_FIRST,
    MSG_WRONG_STATUS,
    CompletionWorkflow,
    select_invalidatable,
)
from tests.factories import WorklistSfcFactory
from tests.fake_dm import PLANT

pytestmark = pytest.mark.asyncio


def _selection(status: str, order_no: str = "ORD0001", plant: str = PLANT) -> Selection:
    return Selection(order_no=order_no, execution_status=status, parent_sfc=f"{order_no}-01", plant=plant)


def _worklist(*entries) -> httpx.Response:
    return httpx.Response(200, json=list(entries))


class TestRejections:
    """Refusals never touch the network."""

    async def test_no_selection(self, dm_client, fake_dm):
        result = await CompletionWorkflow(dm_client).complete(None, PLANT)

        assert result.state == CompletionState.IDLE
        assert result.ok is False
        assert result.message == MSG_SELECT_FIRST
        assert result.error == "WORKFLOW_REJECTION"
        assert fake_dm.calls == []

    async def test_active_order(self, dm_client, fake_dm):
        result = await CompletionWorkflow(dm_client).complete(_selection("ACTIVE"), PLANT)

        assert result.state == CompletionState.REJECTED_ACTIVE
        assert result.message == MSG_ACTIVE_SFCS
        assert fake_dm.calls == []

    @pytest.mark.parametrize("status", ["NEW", "COMPLETED", "DISCARDED", "-"])
    async def test_other_status(self, dm_client, fake_dm, status):
        result = await CompletionWorkflow(dm_client).complete(_selection(status), PLANT)

        assert result.state == CompletionState.REJECTED_STATUS
        assert result.message == MSG_WRONG_STATUS
        assert fake_dm.calls == []

    async def test_selection_from_other_plant(self, dm_client, fake_dm):
        result = await CompletionWorkflow(dm_client).complete(_selection("NOT_IN_EXECUTION", plant="P200"), "P999")

        assert result.state == CompletionState.REJECTED_PLANT
        assert result.ok is False
        assert "plant P200, not P999" in result.message
        assert fake_dm.calls == []


class TestWorklistInvalidation:

    async def test_invalidates_only_new_queue_and_hold(self, dm_client, fake_dm):
        fake_dm.on(
            "GET",
            SFC_WORKLIST_PATH,
            _worklist(
                WorklistSfcFactory(sfc="ORD0001-01", status_code="NEW"),
                WorklistSfcFactory(sfc="ORD0001-02", status_code="ACTIVE"),
                WorklistSfcFactory(sfc="ORD0001-03", status_code="HOLD"),
            ),
        )
        fake_dm.on("PATCH", SFC_INVALIDATE_PATH, httpx.Response(200, json={}))

        result = await CompletionWorkflow(dm_client).complete(_selection("NOT_IN_EXECUTION"), PLANT)

        calls = fake_dm.calls_to("PATCH", SFC_INVALIDATE_PATH)
        assert [c.url.params["sfc"] for c in calls] == ["ORD0001-01", "ORD0001-03"]
        assert all(c.url.params["plant"] == PLANT for c in calls)
        assert result.ok is True
        assert result.state == CompletionState.INVALIDATING_WORKLIST
        assert result.message == MSG_COMPLETED
        assert result.invalidated_sfcs == ["ORD0001-01", "ORD0001-03"]
        worklist_call = fake_dm.calls_to("GET", SFC_WORKLIST_PATH)[0]
        assert worklist_call.url.params["filter.order"] == "ORD0001"

    async def test_calls_use_the_selection_plant(self, dm_client, fake_dm):
        fake_dm.on(
            "GET",
            SFC_WORKLIST_PATH,
            _worklist(WorklistSfcFactory(sfc="ORD0001-01", status_code="NEW")),
        )
        fake_dm.on("PATCH", SFC_INVALIDATE_PATH, httpx.Response(200))

        result = await CompletionWorkflow(dm_client).complete(_selection("NOT_IN_EXECUTION", plant="P200"))

        assert result.ok is True
        assert [c.url.params["plant"] for c in fake_dm.calls] == ["P200", "P200"]

    async def test_failure_does_not_stop_the_loop(self, dm_client, fake_dm):
        fake_dm.on(
            "GET",
            SFC_WORKLIST_PATH,
            _worklist(
                WorklistSfcFactory(sfc="ORD0001-01", status_code="NEW"),
                WorklistSfcFactory(sfc="ORD0001-02", status_code="ACTIVE"),
                WorklistSfcFactory(sfc="ORD0001-03", status_code="HOLD"),
            ),
        )

        def _invalidate(request):
            if request.url.params["sfc"] == "ORD0001-01":
                return httpx.Response(409, json={"error": {"message": "SFC is in work"}})
            return httpx.Response(200)

        fake_dm.on("PATCH", SFC_INVALIDATE_PATH, _invalidate)

        result = await CompletionWorkflow(dm_client).complete(_selection("NOT_IN_EXECUTION"), PLANT)

        assert len(fake_dm.calls_to("PATCH", SFC_INVALIDATE_PATH)) == 2
        assert result.ok is False
        assert result.failures == ["Failed to invalidate SFC ORD0001-01: SFC is in work"]
        assert result.invalidated_sfcs == ["ORD0001-03"]

    async def test_network_error_on_one_sfc(self, dm_client, fake_dm):
        fake_dm.on(
            "GET",
            SFC_WORKLIST_PATH,
            _worklist(
                WorklistSfcFactory(sfc="ORD0001-01", status_code="IN_QUEUE"),
                WorklistSfcFactory(sfc="ORD0001-02", status_code="IN_QUEUE"),
            ),
        )

        def _invalidate(request):
            if request.url.params["sfc"] == "ORD0001-02":
                raise httpx.ReadTimeout("timed out", request=request)
            return httpx.Response(200)

        fake_dm.on("PATCH", SFC_INVALIDATE_PATH, _invalidate)

        result = await CompletionWorkflow(dm_client).complete(_selection("NOT_IN_EXECUTION"), PLANT)

        assert result.invalidated_sfcs == ["ORD0001-01"]
        assert result.failures == ["Error invalidating SFC ORD0001-02: timed out"]

    async def test_skips_sfcs_of_other_orders(self, dm_client, fake_dm):
        fake_dm.on(
            "GET",
            SFC_WORKLIST_PATH,
            _worklist(
                WorklistSfcFactory(order="ORD0002", sfc="ORD0002-01", status_code="NEW"),
                {"order": "ORD0001", "sfc": "ORD0001-05", "status": "NEW"},
            ),
        )
        fake_dm.on("PATCH", SFC_INVALIDATE_PATH, httpx.Response(200))

        result = await CompletionWorkflow(dm_client).complete(_selection("NOT_IN_EXECUTION"), PLANT)

        assert result.invalidated_sfcs == ["ORD0001-05"]

    async def test_empty_body_means_no_sfcs(self, dm_client, fake_dm):
        fake_dm.on("GET", SFC_WORKLIST_PATH, httpx.Response(200, content=b"  "))

        result = await CompletionWorkflow(dm_client).complete(_selection("NOT_IN_EXECUTION"), PLANT)

        assert result.ok is False
        assert result.message == "No SFCs found for Order ORD0001."
        assert fake_dm.calls_to("PATCH", SFC_INVALIDATE_PATH) == []

    async def test_invalid_json_aborts(self, dm_client, fake_dm):
        fake_dm.on("GET", SFC_WORKLIST_PATH, httpx.Response(200, content=b"{not json"))

        result = await CompletionWorkflow(dm_client).complete(_selection("NOT_IN_EXECUTION"), PLANT)

        assert result.ok is False
        assert result.message == "Invalid JSON in SFC List API response."
        assert result.error == "PARSE_ERROR"
        assert fake_dm.calls_to("PATCH", SFC_INVALIDATE_PATH) == []

    async def test_worklist_transport_failure_aborts(self, dm_client, fake_dm):
        fake_dm.on("GET", SFC_WORKLIST_PATH, httpx.Response(502, text="Bad gateway"))

        result = await CompletionWorkflow(dm_client).complete(_selection("NOT_IN_EXECUTION"), PLANT)

        assert result.ok is False
        assert result.message == "Error: Bad gateway"
        assert result.error == "TRANSPORT_ERROR"


async def test_select_invalidatable_accepts_code_only_status():
    worklist = [{"order": "O1", "sfc": "O1-1", "status": {"code": "HOLD"}}, {"order": "O1", "sfc": "O1-2"}]

    assert select_invalidatable(worklist, "O1") == ["O1-1"]
