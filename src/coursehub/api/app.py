"""FastAPI application setup."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from coursehub.api.dependencies import close_services, init_services
from coursehub.api.models import APIResponse
from coursehub.api.routes import courses, gateway, presets, registration, schedules
from coursehub.catalog import CatalogError, CourseNotFoundError
from coursehub.config import load_settings
from coursehub.gateway import GatewayConnectionError, GatewayError
from coursehub.planner import InvalidScheduleRequestError, PlannerError, PresetNotFoundError
from coursehub.registration import (
    IntentNotFoundError,
    InvalidIntentError,
    QueueRunner,
    RegistrationError,
)
from coursehub.services import build_services

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from coursehub.config import Settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    # Startup
    settings = app.state.settings or load_settings()
    services = init_services(build_services(settings))

    runner: QueueRunner | None = None
    if app.state.start_runner:
        runner = QueueRunner(services.queue, interval_seconds=settings.tick_interval_seconds)
        runner.start()

    yield
    # Shutdown
    if runner is not None:
        runner.stop()
    close_services()


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=APIResponse[None](data=None, error=message).model_dump(),
    )


def create_app(settings: Settings | None = None, start_runner: bool = True) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Runtime settings. Loaded from the environment on startup if omitted.
        start_runner: Whether to sweep the registration queue in the background.
    """
    app = FastAPI(
        title="CourseHub API",
        description="REST API for CourseHub - Schedule Builder and Registration Queue",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Store config for lifespan manager
    app.state.settings = settings
    app.state.start_runner = start_runner

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handlers
    @app.exception_handler(CourseNotFoundError)
    async def course_not_found_handler(
        _request: Request, exc: CourseNotFoundError
    ) -> JSONResponse:
        return _error(status.HTTP_404_NOT_FOUND, str(exc))

    @app.exception_handler(IntentNotFoundError)
    async def intent_not_found_handler(
        _request: Request, _exc: IntentNotFoundError
    ) -> JSONResponse:
        return _error(status.HTTP_404_NOT_FOUND, "Registration intent not found")

    @app.exception_handler(PresetNotFoundError)
    async def preset_not_found_handler(
        _request: Request, exc: PresetNotFoundError
    ) -> JSONResponse:
        return _error(status.HTTP_404_NOT_FOUND, str(exc))

    @app.exception_handler(InvalidScheduleRequestError)
    async def invalid_schedule_handler(
        _request: Request, exc: InvalidScheduleRequestError
    ) -> JSONResponse:
        return _error(status.HTTP_400_BAD_REQUEST, str(exc))

    @app.exception_handler(InvalidIntentError)
    async def invalid_intent_handler(_request: Request, exc: InvalidIntentError) -> JSONResponse:
        return _error(status.HTTP_400_BAD_REQUEST, str(exc))

    @app.exception_handler(GatewayConnectionError)
    async def gateway_connection_handler(
        _request: Request, exc: GatewayConnectionError
    ) -> JSONResponse:
        return _error(status.HTTP_400_BAD_REQUEST, str(exc))

    @app.exception_handler(CatalogError)
    @app.exception_handler(PlannerError)
    @app.exception_handler(RegistrationError)
    @app.exception_handler(GatewayError)
    async def internal_error_handler(_request: Request, exc: Exception) -> JSONResponse:
        logger.error("Unhandled %s: %s", type(exc).__name__, exc)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")

    # Include routers
    app.include_router(courses.router, prefix="/api/v1")
    app.include_router(presets.router, prefix="/api/v1")
    app.include_router(schedules.router, prefix="/api/v1")
    app.include_router(registration.router, prefix="/api/v1")
    app.include_router(gateway.router, prefix="/api/v1")

    return app


# Default app instance
app = create_app()
