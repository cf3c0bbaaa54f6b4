"""Order Console: results of state-changing actions."""
from enum import Enum

from pydantic import BaseModel


class ActionResult(BaseModel):
    """Outcome reported back to the operator. `error` is an error code, or None on success."""

    ok: bool
    message: str
    error: str | None = None
    failures: list[str] = []


class CompletionState(str, Enum):
    IDLE = "IDLE"
    REJECTED_ACTIVE = "REJECTED_ACTIVE"
    INVALIDATING_WORKLIST = "INVALIDATING_WORKLIST"
    REJECTED_STATUS = "REJECTED_STATUS"
    REJECTED_PLANT = "REJECTED_PLANT"


class CompletionResult(ActionResult):
    state: CompletionState
    order_no: str | None = None
    invalidated_sfcs: list[str] = []
