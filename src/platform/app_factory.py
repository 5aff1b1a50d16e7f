"""
Back office FastAPI app assembly, shared by main.py and the HTTP tests.

The lifespan is injected so tests can skip tracing and the notification
dispatcher while exercising exactly the same routes and error mapping.
"""

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from pathlib import Path
from typing import Any

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from fastapi.staticfiles import StaticFiles
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from src.platform.config.core_setting import settings
from src.platform.exception.exception_handlers import register_exception_handlers
from src.platform.observability.tracing import TracingConfig
from src.service.backoffice.driving_adapter.http_controller import (
    audit_controller,
    payment_controller,
    reservation_controller,
    scan_controller,
    ticket_controller,
)


# (router, prefix, tag); payments are nested under their reservation
ROUTES: tuple[tuple[APIRouter, str, str], ...] = (
    (reservation_controller.router, '/api/reservation', 'reservation'),
    (payment_controller.router, '/api', 'payment'),
    (ticket_controller.router, '/api/ticket', 'ticket'),
    (scan_controller.router, '/api/scan', 'scan'),
    (audit_controller.router, '/api/audit', 'audit'),
)


def create_app(
    *,
    lifespan: Callable[[FastAPI], AbstractAsyncContextManager[Any]],
    title_suffix: str = '',
    service_name: str = 'backoffice-service',
) -> FastAPI:
    app = FastAPI(
        title=f'{settings.PROJECT_NAME}{title_suffix}',
        description='Payments, signed tickets, entrance scanning and audit for reservations',
        version=settings.VERSION,
        lifespan=lifespan,
    )

    # Instrumentation wraps the ASGI app, so it goes on before any route
    TracingConfig(service_name=service_name).instrument_fastapi(app=app)

    app.add_middleware(
        CORSMiddleware,  # type: ignore
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=['*'],
        allow_headers=['*'],
    )
    register_exception_handlers(app)

    _mount_uploads(app)
    for router, prefix, tag in ROUTES:
        app.include_router(router, prefix=prefix, tags=[tag])
    _register_probe_endpoints(app)

    return app


def _mount_uploads(app: FastAPI) -> None:
    """Proof images, QR PNGs and ticket PDFs are served straight from UPLOAD_DIR"""
    upload_dir = Path(settings.UPLOAD_DIR)
    upload_dir.mkdir(parents=True, exist_ok=True)
    app.mount(settings.UPLOAD_URL_PREFIX, StaticFiles(directory=upload_dir), name='uploads')


def _register_probe_endpoints(app: FastAPI) -> None:
    @app.get('/health', tags=['probe'])
    async def health_check() -> dict[str, str]:
        return {'status': 'healthy', 'service': settings.PROJECT_NAME, 'version': settings.VERSION}

    @app.get('/metrics', tags=['probe'])
    async def get_metrics() -> PlainTextResponse:
        return PlainTextResponse(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
