"""
Shared FastAPI App Factory

Provides common app setup for production and test environments.
"""

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from src.platform.config.core_setting import settings
from src.platform.exception.exception_handlers import register_exception_handlers
from src.platform.observability.tracing import TracingConfig
from src.service.ticketing.driving_adapter.http_controller.check_in_controller import (
    router as check_in_router,
)
from src.service.ticketing.driving_adapter.http_controller.event_controller import (
    router as event_router,
)
from src.service.ticketing.driving_adapter.http_controller.guest_list_controller import (
    router as guest_list_router,
)
from src.service.ticketing.driving_adapter.http_controller.reservation_controller import (
    router as reservation_router,
)
from src.service.ticketing.driving_adapter.http_controller.ticket_controller import (
    router as ticket_router,
)
from src.service.venue_access.driving_adapter.http_controller.access_grant_controller import (
    router as access_grant_router,
)
from src.service.venue_access.driving_adapter.http_controller.pos_controller import (
    router as pos_router,
)
from src.service.venue_access.driving_adapter.http_controller.spend_rule_controller import (
    router as spend_rule_router,
)
from src.service.venue_access.driving_adapter.http_controller.venue_stream_controller import (
    router as venue_stream_router,
)


def create_app(
    *,
    lifespan: Callable[[FastAPI], AbstractAsyncContextManager[Any]],
    title_suffix: str = '',
    description: str = 'Venue Access Platform',
    service_name: str = 'venue-access',
) -> FastAPI:
    """
    Create a configured FastAPI application.

    Args:
        lifespan: Async context manager for app lifespan (startup/shutdown)
        title_suffix: Optional suffix for app title (e.g., " (Test)")
        description: App description
        service_name: Service name for tracing

    Returns:
        Configured FastAPI application
    """
    title = f'{settings.PROJECT_NAME}{title_suffix}'

    app = FastAPI(
        title=title,
        description=description,
        version=settings.VERSION,
        lifespan=lifespan,
    )

    # Auto-instrument FastAPI (must be done before mounting routes)
    tracing_config = TracingConfig(service_name=service_name)
    tracing_config.instrument_fastapi(app=app)

    app.add_middleware(
        CORSMiddleware,  # type: ignore
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=['*'],
        allow_headers=['*'],
    )

    register_exception_handlers(app)

    # Ticketing
    app.include_router(event_router, prefix='/api/event', tags=['event'])
    app.include_router(reservation_router, prefix='/api/reservation', tags=['reservation'])
    app.include_router(ticket_router, prefix='/api/ticket', tags=['ticket'])
    app.include_router(check_in_router, prefix='/api/check_in', tags=['check_in'])
    app.include_router(guest_list_router, prefix='/api/guest_list', tags=['guest_list'])

    # Venue access
    app.include_router(pos_router, prefix='/api/pos', tags=['pos'])
    app.include_router(spend_rule_router, prefix='/api/spend_rule', tags=['spend_rule'])
    app.include_router(access_grant_router, prefix='/api/access_grant', tags=['access_grant'])
    app.include_router(venue_stream_router, prefix='/api/venue', tags=['venue'])

    _register_common_endpoints(app)

    return app


def _register_common_endpoints(app: FastAPI) -> None:
    """Register health and metrics endpoints."""

    @app.get('/health')
    async def health_check() -> dict[str, str]:
        """Health check endpoint for container orchestration."""
        return {'status': 'healthy', 'service': settings.PROJECT_NAME}

    @app.get('/metrics')
    async def get_metrics() -> PlainTextResponse:
        """Prometheus metrics endpoint."""
        return PlainTextResponse(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
