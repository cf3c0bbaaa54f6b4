"""Order Console: plant context middleware."""
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

PLANT_HEADER = "X-Plant"


class PlantContextMiddleware(BaseHTTPMiddleware):
    """
    Extract the plant chosen by the host session from the X-Plant header.
    Every DM query and mutation of the request is scoped to it.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        plant = request.headers.get(PLANT_HEADER, "").strip()
        request.state.plant = plant or None

        response = await call_next(request)
        return response


def get_plant_from_request(request: Request) -> str | None:
    """Plant set by the middleware, or None when the caller sent none."""
    return getattr(request.state, "plant", None)
