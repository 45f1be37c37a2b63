"""
Makeline Service - Main FastAPI Application.

Drains newly placed orders from the order queue into the order store and
exposes their status over HTTP.
"""
from contextlib import asynccontextmanager
from typing import Optional
import logging
import time

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import api.dependencies  # noqa: F401  (loads .env before settings are read)
from api.routes import health, orders
from core.application.services.order_service import OrderService
from core.domain.exceptions import (
    InvalidStatusTransitionError,
    MalformedRequestError,
    OperationTimeoutError,
    OrderNotFoundError,
    OrderServiceError,
)
from core.infrastructure.bus import RedisStreamOrderQueue
from core.infrastructure.database import open_order_repository
from core.infrastructure.logging import configure_logging
from core.settings import AppSettings, get_app_settings


logger = logging.getLogger(__name__)


# =============================================================================
# LIFESPAN
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the order store and queue once and share them for the process lifetime."""
    settings = get_app_settings()
    logger.info("🚀 Makeline service starting up...")

    queue = RedisStreamOrderQueue(
        redis_url=settings.queue.uri,
        stream_name=settings.queue.name,
        consumer_group=settings.queue.group,
        consumer_name=settings.queue.consumer,
        batch_size=settings.queue.batch_size,
        username=settings.queue.username,
        password=settings.queue.password,
    )

    async with open_order_repository(settings.db) as repository:
        app.state.order_service = OrderService(
            repository=repository,
            queue=queue,
            timeout_seconds=settings.service.request_timeout_seconds,
        )
        try:
            yield
        finally:
            await queue.disconnect()
            logger.info("👋 Makeline service shutting down...")


# =============================================================================
# EXCEPTION HANDLERS
# =============================================================================

def _error_response(request: Request, status_code: int, error: str) -> JSONResponse:
    # Never echo storage/queue error text back to the client.
    return JSONResponse(
        status_code=status_code,
        content={"error": error, "path": request.url.path},
    )


async def malformed_request_handler(request: Request, exc: MalformedRequestError):
    logger.warning(f"Bad request on {request.method} {request.url.path}: {exc}")
    return _error_response(request, status.HTTP_400_BAD_REQUEST, "Bad request")


async def validation_error_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Invalid body on {request.method} {request.url.path}: {exc.errors()}")
    return _error_response(request, status.HTTP_400_BAD_REQUEST, "Bad request")


async def not_found_handler(request: Request, exc: OrderNotFoundError):
    logger.info(f"Order {exc.order_id} not found ({request.method} {request.url.path})")
    return _error_response(request, status.HTTP_404_NOT_FOUND, "Order not found")


async def invalid_transition_handler(request: Request, exc: InvalidStatusTransitionError):
    logger.warning(f"Rejected status change on {request.url.path}: {exc}")
    return _error_response(request, status.HTTP_409_CONFLICT, "Invalid status transition")


async def order_service_error_handler(request: Request, exc: OrderServiceError):
    kind = "Timed out" if isinstance(exc, OperationTimeoutError) else "Failed"
    context = f" (order {exc.order_id})" if exc.order_id else ""
    logger.error(f"{kind} handling {request.method} {request.url.path}{context}: {exc}", exc_info=exc)
    return _error_response(request, status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {exc}", exc_info=exc)
    return _error_response(request, status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


# =============================================================================
# CREATE FASTAPI APP
# =============================================================================

def create_app(settings: Optional[AppSettings] = None) -> FastAPI:
    """Build the FastAPI application."""
    settings = settings or get_app_settings()
    configure_logging(settings.service.log_level)

    app = FastAPI(
        title="Makeline Service",
        description="Moves orders from the order queue into the order store and tracks their status.",
        version=settings.service.app_version or "0.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.service.cors_origins,
        allow_methods=["GET", "PUT", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log all requests with timing."""
        start_time = time.time()
        response = await call_next(request)
        duration = time.time() - start_time
        logger.info(
            f"{request.method} {request.url.path} "
            f"[{response.status_code}] ({duration:.3f}s)"
        )
        return response

    app.add_exception_handler(MalformedRequestError, malformed_request_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(OrderNotFoundError, not_found_handler)
    app.add_exception_handler(InvalidStatusTransitionError, invalid_transition_handler)
    app.add_exception_handler(OrderServiceError, order_service_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(health.router, tags=["Health"])
    app.include_router(orders.router, tags=["Orders"])

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    import uvicorn

    settings = get_app_settings()
    uvicorn.run(app, host="0.0.0.0", port=settings.service.port)


if __name__ == "__main__":
    run()
