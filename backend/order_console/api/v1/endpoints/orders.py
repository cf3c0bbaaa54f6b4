"""Order Console: order search and completion API endpoints."""
from typing import Any

from fastapi import APIRouter, HTTPException

from order_console.api.deps import Console, Plant
from order_console.core.errors import ValidationError
from order_console.schemas.action import ActionResult, CompletionResult
from order_console.schemas.common import ApiResponse
from order_console.schemas.order import (
    AdjustQuantityRequest,
    DiscardOrderRequest,
    FilterCriteria,
    OrderRow,
    SelectOrderRequest,
    Selection,
)
from order_console.services.console_service import OrderConsole

router = APIRouter()


def _action_response(result: ActionResult, console: OrderConsole) -> ApiResponse:
    """Action outcome plus the result list as refreshed after the action."""
    return ApiResponse(
        data=result,
        error=result.error,
        meta={
            "message": result.message,
            "items_heading": console.heading,
            "rows": [row.model_dump() for row in console.tracker.rows],
        },
    )


@router.post("/search", response_model=ApiResponse[list[OrderRow]])
async def search_orders(criteria: FilterCriteria, console: Console, plant: Plant) -> Any:
    """Search orders and enrich open ones. Resets the selection."""
    result = await console.search(criteria, plant)
    return ApiResponse(
        data=result.rows,
        error=result.error,
        meta={"message": result.message, "items_heading": result.items_heading},
    )


@router.post("/select", response_model=ApiResponse[Selection])
async def select_order(request: SelectOrderRequest, console: Console) -> Any:
    """Pick a row of the current result list."""
    try:
        selection = console.select_order(request.order_no)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
    return ApiResponse(data=selection)


@router.get("/selection", response_model=ApiResponse[Selection])
async def get_selection(console: Console) -> Any:
    return ApiResponse(data=console.selection)


@router.post("/complete", response_model=ApiResponse[CompletionResult])
async def complete_order(console: Console, plant: Plant) -> Any:
    """Complete the selected order, then refresh the result list."""
    result = await console.complete_selected(plant)
    return _action_response(result, console)


@router.post("/adjust-quantity", response_model=ApiResponse[ActionResult])
async def adjust_quantity(request: AdjustQuantityRequest, console: Console, plant: Plant) -> Any:
    """Set a new quantity on the selected order's parent SFC (or the one given)."""
    result = await console.adjust_quantity(request.quantity, plant, parent_sfc=request.parent_sfc)
    return _action_response(result, console)


@router.post("/discard", response_model=ApiResponse[ActionResult])
async def discard_order(request: DiscardOrderRequest, console: Console, plant: Plant) -> Any:
    """Discard the selected order (or the one given)."""
    result = await console.discard_order(plant, order_no=request.order_no)
    return _action_response(result, console)
