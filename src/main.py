"""
Production FastAPI Application
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from src.platform.app_factory import create_app
from src.platform.config.di import container
from src.platform.config.wire_modules import WIRE_MODULES
from src.platform.database.orm_db_setting import (
    create_db_and_tables,
    dispose_engine,
    get_engine,
)
from src.platform.logging.loguru_io import Logger
from src.platform.observability.tracing import TracingConfig


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifespan: startup and shutdown."""
    Logger.base.info('🚀 [Ticket Inventory] Starting up...')

    tracing = TracingConfig(service_name='ticket-inventory')
    tracing.setup()
    Logger.base.info('📊 [Ticket Inventory] OpenTelemetry tracing configured')

    container.wire(modules=WIRE_MODULES)
    Logger.base.info('🔌 [Ticket Inventory] Dependency injection wired')

    engine = get_engine()
    tracing.instrument_sqlalchemy(engine=engine)
    await create_db_and_tables()
    Logger.base.info('🗄️  [Ticket Inventory] Database ready + instrumented')

    Logger.base.info('✅ [Ticket Inventory] Ready to serve requests')

    yield

    Logger.base.info('🛑 [Ticket Inventory] Shutting down...')

    await dispose_engine()
    Logger.base.info('🗄️  [Ticket Inventory] Database engine disposed')

    tracing.shutdown()
    Logger.base.info('📊 [Ticket Inventory] Tracing shutdown complete')

    container.unwire()

    Logger.base.info('👋 [Ticket Inventory] Shutdown complete')


app = create_app(lifespan=lifespan)


@app.get('/')
async def root() -> RedirectResponse:
    """Root endpoint - redirect to docs."""
    return RedirectResponse(url='/docs')
