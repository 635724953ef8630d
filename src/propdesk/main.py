"""FastAPI application factory with the authorization gateway in front of every page."""

from contextlib import asynccontextmanager
from datetime import datetime
from pathlib import Path
from typing import AsyncIterator, Optional

import uvicorn
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from propdesk.core.config import Settings
from propdesk.core.logging import configure_logging, get_logger
from propdesk.gateway.middleware import AuthGatewayMiddleware, Gateway
from propdesk.gateway.session import KeyProvider, static_key_provider

configure_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan context manager for startup and shutdown events."""
    start_time = datetime.now()
    logger.info("app.startup", message="PropDesk starting up", timestamp=start_time.isoformat())

    from propdesk.api.health import set_app_start_time
    from propdesk.core.sentry import init_sentry

    set_app_start_time(start_time)
    init_sentry()

    yield

    logger.info("app.shutdown", message="PropDesk shutting down gracefully")


def _setup_middleware(app: FastAPI, gateway: Gateway) -> None:
    """Configure all middleware in correct order."""
    # Last added = first executed: request ID -> gateway -> Sentry context -> routes
    from propdesk.middleware.logging import RequestIDMiddleware
    from propdesk.middleware.sentry import SentryContextMiddleware

    app.add_middleware(SentryContextMiddleware)
    app.add_middleware(AuthGatewayMiddleware, gateway=gateway)
    app.add_middleware(RequestIDMiddleware)


def _mount_static(app: FastAPI, static_dir: str) -> None:
    """Mount static files directory."""
    static_path = Path(static_dir).resolve()
    if static_path.exists():
        app.mount("/static", StaticFiles(directory=str(static_path)), name="static")
    else:
        logger.warning("app.static_missing", static_dir=str(static_path))


def _register_routers(app: FastAPI) -> None:
    """Register all API and frontend routers."""
    from propdesk.api.auth import router as auth_router
    from propdesk.api.health import router as health_router
    from propdesk.api.routes import auth_pages_router, dashboard_router

    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(auth_pages_router)
    app.include_router(dashboard_router)


def create_app(
    settings: Optional[Settings] = None,
    key_provider: Optional[KeyProvider] = None,
) -> FastAPI:
    """
    Application factory for PropDesk.

    Settings come from the environment unless given. The signing key provider
    defaults to the configured secret; pass one in to fetch keys elsewhere.
    """
    settings = settings or Settings.from_env()
    gateway_config = settings.gateway_config()
    gateway = Gateway(
        gateway_config,
        key_provider or static_key_provider(settings.session_secret_key),
    )

    app = FastAPI(
        title="PropDesk",
        description="Property and client management for real estate businesses",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.gateway = gateway

    from propdesk.core.exception_handlers import register_exception_handlers

    register_exception_handlers(app)

    _setup_middleware(app, gateway)
    _mount_static(app, settings.static_dir)
    _register_routers(app)

    logger.info(
        "app.configured",
        environment=settings.environment,
        allow_list=list(gateway_config.route_allow_list),
    )

    return app


def run() -> None:
    """Development server entrypoint."""
    uvicorn.run(
        "propdesk.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
