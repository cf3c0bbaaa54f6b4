"""Order Console: FastAPI dependencies (console, plant)."""
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from order_console.core.plant import get_plant_from_request
from order_console.services.console_service import OrderConsole


def get_console(request: Request) -> OrderConsole:
    """The process-wide console built in the app lifespan."""
    return request.app.state.console


def get_plant(request: Request) -> str:
    """Plant from X-Plant, falling back to DEFAULT_PLANT."""
    plant = get_plant_from_request(request) or request.app.state.settings.DEFAULT_PLANT
    if not plant:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Plant is required (X-Plant header)")
    return plant


Console = Annotated[OrderConsole, Depends(get_console)]
Plant = Annotated[str, Depends(get_plant)]
