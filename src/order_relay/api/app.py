"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from order_relay.api.auth import router as auth_router
from order_relay.api.orders import router as orders_router
from order_relay.api.session_middleware import SessionMiddleware
from order_relay.app_logging import configure_logging
from order_relay.config import parse_cors_origins
from order_relay.containers import AppContainer


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)
    settings = container.settings

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "Order relay starting",
            extra={"environment": settings.environment, "order_form": settings.order_form},
        )
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.add_middleware(
        SessionMiddleware,
        store=container.session_store,
        secret=settings.session_secret,
        ttl_seconds=settings.session_ttl_seconds,
        cookie_name=settings.session_cookie_name,
        secure=settings.secure_cookies,
    )
    origins = parse_cors_origins(settings.cors_allow_origins)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=origins != ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(auth_router)
    app.include_router(orders_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app
