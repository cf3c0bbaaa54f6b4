"""
Order Console: FastAPI ASGI entry point
"""
import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from order_console.api.v1.router import api_router
from order_console.config import Settings, get_settings
from order_console.core.dm_client import DmApiClient, build_http_client
from order_console.core.plant import PlantContextMiddleware
from order_console.services.console_service import OrderConsole


def create_app(settings: Settings | None = None, transport: httpx.AsyncBaseTransport | None = None) -> FastAPI:
    """Build the app. `transport` replaces the network layer of the DM client (tests)."""
    settings = settings or get_settings()
    logging.basicConfig(level=settings.LOG_LEVEL.upper())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """DM API client for the process lifetime."""
        client = DmApiClient(build_http_client(settings, transport=transport))
        app.state.settings = settings
        app.state.console = OrderConsole(client, settings)
        yield
        await client.aclose()

    app = FastAPI(
        title="Order Console",
        description="Search manufacturing orders and drive order completion against Digital Manufacturing",
        version="0.1.0",
        docs_url="/api/v1/docs",
        redoc_url="/api/v1/redoc",
        openapi_url="/api/v1/openapi.json",
        lifespan=lifespan,
    )
    app.add_middleware(PlantContextMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router, prefix="/api/v1")

    @app.get("/health")
    async def health():
        """Health check for load balancers and Docker."""
        return {"status": "ok", "service": "order-console"}

    return app


app = create_app()
