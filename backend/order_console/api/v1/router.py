"""Order Console: API v1 router aggregation."""
from fastapi import APIRouter

from order_console.api.v1.endpoints import orders

api_router = APIRouter()

api_router.include_router(orders.router, prefix="/orders", tags=["orders"])
