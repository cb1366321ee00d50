"""
M-Pesa Gateway - Webhook Service Entry Point

Receives Daraja callbacks (STK results, C2B validation and confirmation,
asynchronous operation results and queue timeouts) and exposes a thin
payment API over the gateway client.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import structlog
from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse

from mpesa_gateway import __version__
from mpesa_gateway.core.logging import setup_logging
from mpesa_gateway.core.metrics import get_metrics, get_metrics_content_type
from mpesa_gateway.presentation.api import api_router
from mpesa_gateway.presentation.api.v1.callbacks import CallbackHandlers
from mpesa_gateway.presentation.middleware import (
    LoggingMiddleware,
    RequestContextMiddleware,
    error_handler_middleware,
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Set up logging on startup and note shutdown."""
    setup_logging()

    logger = structlog.get_logger(__name__)
    logger.info("application_started", version=__version__)

    yield

    logger.info("application_stopped")


def create_app(handlers: Optional[CallbackHandlers] = None) -> FastAPI:
    """
    Build the webhook service.

    Args:
        handlers: Hooks that receive normalized callback records. Without
            them callbacks are still parsed, logged and acknowledged.
    """
    app = FastAPI(
        title="M-Pesa Gateway",
        description="Daraja callback receiver and payment API",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.callback_handlers = handlers or CallbackHandlers()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(RequestContextMiddleware)

    error_handler_middleware(app)

    app.include_router(api_router)

    @app.get("/metrics", include_in_schema=False)
    async def metrics() -> Response:
        """Prometheus metrics endpoint."""
        return Response(
            content=get_metrics(),
            media_type=get_metrics_content_type(),
        )

    @app.get("/", include_in_schema=False)
    async def root():
        """Redirect to API documentation."""
        return RedirectResponse(url="/docs")

    return app


app = create_app()
