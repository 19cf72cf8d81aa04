"""
FastAPI application assembly

`create_app` is shared by `src.main` and the test client; only the lifespan differs.
"""

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from typing import Any

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from src.platform.config.core_setting import settings
from src.platform.exception.exception_handlers import register_exception_handlers
from src.platform.observability.tracing import TracingConfig
from src.service.ticketing.driving_adapter.http_controller.archive_controller import (
    router as archive_router,
)
from src.service.ticketing.driving_adapter.http_controller.booking_controller import (
    router as booking_router,
)
from src.service.ticketing.driving_adapter.http_controller.event_controller import (
    router as event_router,
)


# Paths are absolute on each router (see route_constant)
SERVICE_ROUTERS: tuple[APIRouter, ...] = (event_router, booking_router, archive_router)


def create_app(
    *,
    lifespan: Callable[[FastAPI], AbstractAsyncContextManager[Any]],
    title_suffix: str = '',
    description: str = 'Event inventory, booking and archival',
    service_name: str = 'event-inventory-service',
) -> FastAPI:
    app = FastAPI(
        title=f'{settings.PROJECT_NAME}{title_suffix}',
        description=description,
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

    for router in SERVICE_ROUTERS:
        app.include_router(router)
    app.include_router(_operational_router())
    return app


def _operational_router() -> APIRouter:
    router = APIRouter(tags=['operations'])

    @router.get('/health')
    async def health_check() -> dict[str, str]:
        return {'status': 'healthy', 'service': settings.PROJECT_NAME}

    @router.get('/metrics')
    async def get_metrics() -> PlainTextResponse:
        """Ledger, booking and archive counters in Prometheus text format."""
        return PlainTextResponse(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    return router
