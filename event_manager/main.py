import logging
import secrets
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any, Optional

import redis.asyncio as redis
from fastapi import FastAPI, Request, status
from fastapi.responses import HTMLResponse, PlainTextResponse, RedirectResponse
from pythonjsonlogger.json import JsonFormatter
from redis.exceptions import RedisError
from starlette.exceptions import HTTPException as StarletteHTTPException

from event_manager.api.endpoints.organiser import LOGIN_URL
from event_manager.api.templating import templates
from event_manager.core.database_manager import DatabaseManager
from event_manager.core.errors import (
    InsufficientAvailabilityError,
    InvalidInputError,
    NotFoundError,
    UnauthenticatedError,
)
from event_manager.core.sessions import SessionStore
from event_manager.core.settings import Settings, get_settings

from .api.api import api_router

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    """Structured JSON logs on stderr"""
    log_handler = logging.StreamHandler()
    formatter = JsonFormatter(
        """
        {
            "level": "%(levelname)s",
            "time": "%(asctime)s",
            "message": "%(message)s",
            "loggerName": "%(name)s",
            "processName": "%(processName)s",
            "fileName": "%(filename)s",
            "lineNumber": "%(lineno)d"
        }
        """
    )
    log_handler.setFormatter(formatter)
    logging.basicConfig(handlers=[log_handler], level=settings.monitoring.LOG_LEVEL)


def _session_secret(settings: Settings) -> str:
    secret = settings.security.SESSION_SECRET
    if secret:
        return secret
    logger.warning(
        "SECURITY_SESSION_SECRET is not set; using a per-process secret. "
        "Organiser sessions will not survive a restart or be shared between workers."
    )
    return secrets.token_urlsafe(32)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings: Settings = app.state.settings
    db_manager: DatabaseManager = app.state.db
    logger.info("Starting %s", settings.PROJECT_NAME, extra=settings.summary())

    try:
        if settings.SEED_DEFAULTS:
            await db_manager.create_all()
            await db_manager.seed_defaults()

        db_health = await db_manager.health_check()
        if db_health.get("status") == "healthy":
            logger.info("Database connection verified")
        else:
            logger.warning("Database health check failed: %s", db_health)

        yield

    finally:
        logger.info("Shutting down %s", settings.PROJECT_NAME)
        try:
            await app.state.redis.aclose()
        except RedisError as e:
            logger.error(f"Error closing Redis connection: {e}")
        await db_manager.close()


def create_app(
    settings: Optional[Settings] = None, redis_client: Optional[Any] = None
) -> FastAPI:
    """
    Build the application around one database manager and one session store.

    Both live on ``app.state``; request handlers reach them through the
    dependencies in ``event_manager.api.deps``.
    """
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="Event listings and ticket booking for attendees, "
        "with a password-protected organiser area.",
        version=settings.VERSION,
        lifespan=lifespan,
    )

    if redis_client is None:
        redis_client = redis.from_url(settings.redis.redis_url, decode_responses=True)

    app.state.settings = settings
    app.state.db = DatabaseManager(settings.database)
    app.state.redis = redis_client
    app.state.sessions = SessionStore(
        redis_client,
        _session_secret(settings),
        settings.security.SESSION_TTL_SECONDS,
        algorithm=settings.security.SESSION_ALGORITHM,
    )

    app.include_router(api_router)
    _register_exception_handlers(app)
    _register_root_routes(app)
    return app


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(InvalidInputError)  # type: ignore[misc]
    async def invalid_input_handler(
        request: Request, exc: InvalidInputError
    ) -> PlainTextResponse:
        return PlainTextResponse(exc.message, status_code=status.HTTP_400_BAD_REQUEST)

    @app.exception_handler(InsufficientAvailabilityError)  # type: ignore[misc]
    async def insufficient_availability_handler(
        request: Request, exc: InsufficientAvailabilityError
    ) -> PlainTextResponse:
        return PlainTextResponse(exc.message, status_code=status.HTTP_400_BAD_REQUEST)

    @app.exception_handler(NotFoundError)  # type: ignore[misc]
    async def not_found_handler(
        request: Request, exc: NotFoundError
    ) -> PlainTextResponse:
        return PlainTextResponse(exc.message, status_code=status.HTTP_404_NOT_FOUND)

    @app.exception_handler(UnauthenticatedError)  # type: ignore[misc]
    async def unauthenticated_handler(
        request: Request, exc: UnauthenticatedError
    ) -> RedirectResponse:
        return RedirectResponse(url=LOGIN_URL, status_code=status.HTTP_303_SEE_OTHER)

    @app.exception_handler(StarletteHTTPException)  # type: ignore[misc]
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> PlainTextResponse:
        # A path served under another method is still an unmatched route
        if exc.status_code in (
            status.HTTP_404_NOT_FOUND,
            status.HTTP_405_METHOD_NOT_ALLOWED,
        ):
            logger.info("Route not found: %s %s", request.method, request.url.path)
            return PlainTextResponse(
                f"Route not found: {request.method} {request.url.path}",
                status_code=status.HTTP_404_NOT_FOUND,
            )
        return PlainTextResponse(
            str(exc.detail), status_code=exc.status_code, headers=exc.headers
        )

    @app.exception_handler(Exception)  # type: ignore[misc]
    async def general_exception_handler(
        request: Request, exc: Exception
    ) -> PlainTextResponse:
        logger.exception("Unhandled exception occurred: %s", exc)
        return PlainTextResponse(
            "Internal Server Error",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )


def _register_root_routes(app: FastAPI) -> None:
    @app.get("/", response_class=HTMLResponse, tags=["Root"], summary="Landing Page")  # type: ignore[misc]
    async def root(request: Request) -> Any:
        return templates.TemplateResponse(request, "home.html", {})

    @app.get("/health", tags=["Health"], summary="Health Check")  # type: ignore[misc]
    async def health_check(request: Request) -> dict[str, Any]:
        """Database and Redis connectivity"""
        db_health = await request.app.state.db.health_check()
        try:
            await request.app.state.redis.ping()
            redis_health: dict[str, Any] = {"status": "healthy"}
        except RedisError as e:
            logger.error(f"Redis health check failed: {e}")
            redis_health = {"status": "error", "message": str(e)}

        healthy = all(
            component["status"] == "healthy" for component in (db_health, redis_health)
        )
        return {
            "status": "healthy" if healthy else "degraded",
            "version": request.app.state.settings.VERSION,
            "database": db_health,
            "redis": redis_health,
        }


app = create_app()
