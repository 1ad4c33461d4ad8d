"""
FastAPI application wiring for controllers that use the helpers
"""
from typing import Optional

from fastapi import APIRouter, FastAPI
from starlette.middleware.sessions import SessionMiddleware

from minimalizer.core.config import Settings, get_settings
from minimalizer.core.logging_config import LoggingConfig
from minimalizer.core.middleware import LoggingContextMiddleware

logger = LoggingConfig.get_logger(__name__)


def install(app: FastAPI, settings: Optional[Settings] = None) -> FastAPI:
    """Add the session (flash storage) and logging middlewares to an app"""
    settings = settings or get_settings()
    app.add_middleware(LoggingContextMiddleware)
    # Added last so it wraps the logging middleware and the session is
    # available to every handler.
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.secret_key,
        session_cookie=settings.session_cookie,
        https_only=settings.app_env == "production",
    )
    return app


def create_app(*routers: APIRouter, settings: Optional[Settings] = None) -> FastAPI:
    """Build a FastAPI app with the given routers and the helper middlewares"""
    settings = settings or get_settings()
    LoggingConfig.configure()

    app = FastAPI(title=settings.app_name)
    for router in routers:
        app.include_router(router)
    install(app, settings)

    logger.info(f"Created {settings.app_name} app in {settings.app_env} mode with {len(routers)} router(s)")
    return app
