"""
PuttyBox FastAPI Application
Main entry point: order lifecycle API, real-time channel and status sweeper
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging
import uvicorn
from contextlib import asynccontextmanager
import anyio
from typing import Optional

from api.routes import (
    users,
    orders,
    plan_orders,
    notifications,
    subscriptions,
    plans,
    admin,
    health,
    realtime,
)

from adapters.broadcast import WebSocketHub
from app.clock import SystemClock
from app.config import settings
from domain.models import init_database, SessionLocal
from services.notification_service import NotificationEmitter
from services.order_service import OrderService
from services.sweeper import OrderSweeper

from api.middleware import (
    RequestLoggingMiddleware,
    validation_exception_handler,
    http_exception_handler,
    service_exception_handler,
    general_exception_handler,
)
from app.exceptions import ServiceValidationError

# Setup logging with configured level and format
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()), format=settings.log_format
)
_logger = logging.getLogger("puttybox.main")


async def _init_database_with_retries() -> None:
    last_exc: Optional[Exception] = None
    for attempt in range(1, settings.db_init_attempts + 1):
        try:
            # Run blocking init in a thread to avoid blocking the event loop
            await anyio.to_thread.run_sync(init_database)
            _logger.info("Database initialization succeeded")
            return
        except Exception as exc:
            last_exc = exc
            _logger.warning(
                "Database init attempt %d/%d failed: %s",
                attempt,
                settings.db_init_attempts,
                exc,
            )
            if attempt < settings.db_init_attempts:
                await anyio.sleep(settings.db_init_delay_sec)
    _logger.error("Database initialization failed after %d attempts", settings.db_init_attempts)
    raise last_exc


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for application startup and shutdown.
    Initializes the database with retries and runs the status sweeper.
    """
    _logger.info(f"Starting {settings.app_name} in {settings.environment.value} mode")
    await _init_database_with_retries()

    async with anyio.create_task_group() as tg:
        if settings.sweeper_enabled:
            tg.start_soon(app.state.sweeper.run)
        else:
            _logger.info("Status sweeper disabled; statuses advance on read only")
        try:
            yield
        finally:
            _logger.info(f"Shutting down {settings.app_name}")
            tg.cancel_scope.cancel()


# Create FastAPI application with enhanced configuration
app = FastAPI(
    title=settings.api_title,
    version=settings.app_version,
    description=settings.api_description,
    lifespan=lifespan,
    debug=settings.debug,
    openapi_url=(
        f"{settings.api_prefix}/openapi.json" if not settings.is_production() else None
    ),
    docs_url=f"{settings.api_prefix}/docs" if not settings.is_production() else None,
    redoc_url=f"{settings.api_prefix}/redoc" if not settings.is_production() else None,
)

# Shared collaborators, wired once per process
app.state.clock = SystemClock()
app.state.broadcaster = WebSocketHub()
app.state.emitter = NotificationEmitter(app.state.broadcaster)
app.state.order_service = OrderService(app.state.emitter, app.state.broadcaster, settings)
app.state.sweeper = OrderSweeper(
    SessionLocal,
    app.state.order_service,
    clock=app.state.clock,
    interval=settings.sweep_interval_sec,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add request logging middleware
app.add_middleware(RequestLoggingMiddleware)

# Register exception handlers
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(ServiceValidationError, service_exception_handler)
app.add_exception_handler(Exception, general_exception_handler)

# Include routers
app.include_router(users.router, prefix=settings.api_prefix)
app.include_router(orders.router, prefix=settings.api_prefix)
app.include_router(plan_orders.router, prefix=settings.api_prefix)
app.include_router(notifications.router, prefix=settings.api_prefix)
app.include_router(subscriptions.router, prefix=settings.api_prefix)
app.include_router(plans.router, prefix=settings.api_prefix)
app.include_router(admin.router, prefix=settings.api_prefix)
app.include_router(health.router, prefix=settings.api_prefix)
app.include_router(realtime.router, prefix=settings.api_prefix)


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development(),
        log_level=settings.log_level.lower(),
    )
