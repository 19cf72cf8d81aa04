"""
Production FastAPI Application

HTTP API plus the background notification worker.
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
from src.platform.database.orm_db_setting import create_db_and_tables, dispose_engine, get_engine
from src.platform.logging.loguru_io import Logger
from src.platform.observability.tracing import TracingConfig


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifespan: startup and shutdown."""
    Logger.base.info('🚀 [Event Inventory] Starting up...')

    tracing = TracingConfig(service_name='event-inventory-service')
    tracing.setup()
    Logger.base.info('📊 [Event Inventory] OpenTelemetry tracing configured')

    # Wire dependency injection for all modules
    container.wire(modules=WIRE_MODULES)
    Logger.base.info('🔌 [Event Inventory] Dependency injection wired')

    if settings.STORAGE_BACKEND == 'postgres':
        await create_db_and_tables()
        tracing.instrument_sqlalchemy(engine=get_engine())
        Logger.base.info('🗄️  [Event Inventory] Database engine ready + instrumented')
    else:
        Logger.base.warning('🧪 [Event Inventory] In-memory storage, data is lost on restart')

    dispatcher = container.notification_dispatcher()

    async with anyio.create_task_group() as tg:
        tg.start_soon(dispatcher.run)
        Logger.base.info('✅ [Event Inventory] Ready to serve requests')

        yield

        Logger.base.info('🛑 [Event Inventory] Shutting down...')
        # Closing the stream lets the worker drain what is queued and return
        await dispatcher.close()

    container.notification_dispatcher.reset()

    if settings.STORAGE_BACKEND == 'postgres':
        await dispose_engine()
        Logger.base.info('🗄️  [Event Inventory] Database engine disposed')

    # Shutdown tracing (flush remaining spans)
    tracing.shutdown()
    container.unwire()

    Logger.base.info('👋 [Event Inventory] Shutdown complete')


app = create_app(lifespan=lifespan)


@app.get('/')
async def root() -> RedirectResponse:
    """Root endpoint - redirect to docs."""
    return RedirectResponse(url='/docs')
