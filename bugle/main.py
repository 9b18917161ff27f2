"""Daily Bugle Services — one FastAPI application per deployable service.

Invariants:
    - Routes registered explicitly per service (no auto-discovery)
    - Global error handlers map BugleError → structured JSON responses on every service
    - CORS configured from settings, credentials allowed (the session is a cookie)
    - Store handle (and the content service's discussion client) created in the
      lifespan, kept on app.state, closed on shutdown

Design Decisions:
    - create_app(service) builds each service from the same parts; the four
      module-level apps are the uvicorn entry points, e.g.
      `uvicorn bugle.main:content_app --port 3002`
    - Guard policy fixed per app at build time from settings
      (content → CONTENT_GUARD, discussion → DISCUSSION_GUARD)
"""

import logging
from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from bugle.api.error_handlers import register_error_handlers
from bugle.api.routes import ads, comments, health, stories, users
from bugle.config import Settings, get_settings
from bugle.core.domain_types import ServiceName
from bugle.infrastructure.database import DatabaseSessionManager
from bugle.infrastructure.discussion_client import DiscussionClient
from bugle.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)

_SERVICE_ROUTERS: dict[ServiceName, list[APIRouter]] = {
    ServiceName.IDENTITY: [users.router],
    ServiceName.CONTENT: [stories.router],
    ServiceName.DISCUSSION: [comments.router],
    ServiceName.ADS: [ads.router],
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings: Settings = app.state.settings
    service: ServiceName = app.state.service
    setup_logging(settings.log_level, settings.log_format)
    app.state.db_manager = DatabaseSessionManager(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    if service == ServiceName.CONTENT:
        app.state.discussion_client = DiscussionClient(
            settings.discussion_service_url,
            timeout_seconds=settings.cascade_timeout_seconds,
        )
    logger.info(f"{service.value} service started", extra={"service": service.value})
    yield
    logger.info(f"{service.value} service shutting down", extra={"service": service.value})
    if service == ServiceName.CONTENT:
        await app.state.discussion_client.close()
    await app.state.db_manager.close()


def _guard_policy(service: ServiceName, settings: Settings) -> str:
    if service == ServiceName.DISCUSSION:
        return settings.discussion_guard
    return settings.content_guard


def create_app(service: ServiceName, settings: Settings | None = None) -> FastAPI:
    """Build the ASGI application for one service."""
    settings = settings or get_settings()
    app = FastAPI(
        title=f"Daily Bugle {service.value} service",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.service = service
    app.state.settings = settings
    app.state.guard_policy = _guard_policy(service, settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)

    app.include_router(health.router)
    for router in _SERVICE_ROUTERS[service]:
        app.include_router(router)
    return app


identity_app = create_app(ServiceName.IDENTITY)
content_app = create_app(ServiceName.CONTENT)
discussion_app = create_app(ServiceName.DISCUSSION)
ads_app = create_app(ServiceName.ADS)
