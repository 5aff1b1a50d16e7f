"""
Back Office FastAPI Application

HTTP API plus the in-process notification dispatcher.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import anyio
from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from src.platform.app_factory import create_app
from src.platform.config.di import container
from src.platform.config.wire_modules import WIRE_MODULES
from src.platform.database.orm_db_setting import engine_manager
from src.platform.logging.loguru_io import Logger
from src.platform.observability.tracing import TracingConfig


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    Logger.base.info('🚀 [Back Office] Starting up...')

    tracing = TracingConfig(service_name='backoffice-service')
    tracing.setup()
    Logger.base.info('📊 [Back Office] OpenTelemetry tracing configured')

    container.wire(modules=WIRE_MODULES)
    Logger.base.info('🔌 [Back Office] Dependency injection wired')

    tracing.instrument_sqlalchemy(engine=engine_manager.get_engine())
    Logger.base.info('🗄️  [Back Office] Database engine ready + instrumented')

    dispatcher = container.notification_dispatcher()
    async with anyio.create_task_group() as tg:
        tg.start_soon(dispatcher.run)
        Logger.base.info('✅ [Back Office] Notification dispatcher running')

        yield

        Logger.base.info('🛑 [Back Office] Shutting down...')
        await dispatcher.close()
        tg.cancel_scope.cancel()

    await engine_manager.dispose()
    Logger.base.info('🗄️  [Back Office] Database engine disposed')

    tracing.shutdown()
    container.unwire()

    Logger.base.info('👋 [Back Office] Shutdown complete')


app = create_app(lifespan=lifespan)


@app.get('/')
async def root() -> RedirectResponse:
    """Root endpoint - redirect to docs."""
    return RedirectResponse(url='/docs')
