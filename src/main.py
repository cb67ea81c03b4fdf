"""
Production FastAPI Application

Ticketing, guest list, check-in and POS-driven venue access in one service,
plus the periodic jobs (hold expiry, POS sync, no-show reconciliation).
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import anyio
from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from src.platform.app_factory import create_app
from src.platform.config.core_setting import settings
from src.platform.config.di import container
from src.platform.config.wire_modules import WIRE_MODULES
from src.platform.job.periodic_job import run_periodically
from src.platform.logging.loguru_io import Logger
from src.platform.observability.tracing import TracingConfig


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage unified application lifespan: startup and shutdown."""
    Logger.base.info('🚀 [Venue Access] Starting up...')

    tracing = TracingConfig(service_name='venue-access')
    tracing.setup()
    Logger.base.info('📊 [Venue Access] OpenTelemetry tracing configured')

    container.wire(modules=WIRE_MODULES)
    Logger.base.info('🔌 [Venue Access] Dependency injection wired')

    database = container.database()
    if settings.AUTO_CREATE_TABLES:
        await database.create_db_and_tables()
    tracing.instrument_sqlalchemy(engine=database.engine)
    Logger.base.info('🗄️  [Venue Access] Database engine ready + instrumented')

    async with anyio.create_task_group() as tg:
        if settings.ENABLE_BACKGROUND_JOBS:
            tg.start_soon(
                lambda: run_periodically(
                    name='expire_reservations',
                    interval_seconds=settings.RESERVATION_EXPIRY_INTERVAL_SECONDS,
                    job=container.expire_reservations_use_case().execute,
                )
            )
            tg.start_soon(
                lambda: run_periodically(
                    name='pos_sync',
                    interval_seconds=settings.POS_SYNC_INTERVAL_SECONDS,
                    job=container.sync_pos_transactions_use_case().sync_all_active,
                )
            )
            tg.start_soon(
                lambda: run_periodically(
                    name='reconcile_no_shows',
                    interval_seconds=settings.NO_SHOW_RECONCILE_INTERVAL_SECONDS,
                    job=container.reconcile_no_shows_use_case().reconcile_ended_events,
                )
            )
            Logger.base.info('⏰ [Venue Access] Background jobs started')

        Logger.base.info('✅ [Venue Access] Ready to serve requests')

        yield

        Logger.base.info('🛑 [Venue Access] Shutting down...')
        tg.cancel_scope.cancel()

    await database.dispose()
    Logger.base.info('🗄️  [Venue Access] Database engine disposed')

    tracing.shutdown()
    Logger.base.info('📊 [Venue Access] Tracing shutdown complete')

    container.unwire()

    Logger.base.info('👋 [Venue Access] Shutdown complete')


app = create_app(
    lifespan=lifespan,
    description='Venue Access Platform - ticketing, guest lists, check-in and spend-based access',
)


@app.get('/')
async def root() -> RedirectResponse:
    """Root endpoint - redirect to docs."""
    return RedirectResponse(url='/docs')
