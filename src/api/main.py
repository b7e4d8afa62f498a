import logging
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.adapters.sqlite.migrator import SQLiteMigrator
from src.adapters.sqlite.repos import SQLiteCrossingRepo
from src.api.deps import get_settings, load_cached_rules
from src.api.routes import auth, entries, stats
from src.app_shell.config import validate_ops_rules
from src.shell.http.health import create_health_router, service_health

logger = logging.getLogger(__name__)

# (method, resource path) -> message for unexpected failures
FAILURE_MESSAGES: dict[tuple[str, str], str] = {
    ("GET", "/api/auth"): "Failed to fetch user",
    ("GET", "/api/entries"): "Failed to fetch entries",
    ("POST", "/api/entries"): "Failed to create entry",
    ("DELETE", "/api/entries"): "Failed to delete entry",
    ("GET", "/api/stats"): "Failed to calculate stats",
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    logging.basicConfig(level=logging.INFO)
    settings = get_settings()

    # Load rules, validate and migrate on startup (fail-fast)
    try:
        rules = load_cached_rules(settings.rules_path)
        settings.data_dir.mkdir(parents=True, exist_ok=True)
        validate_ops_rules(rules, settings.data_dir)
        SQLiteMigrator(settings.db_path).run_migrations()
        logger.info("Rules loaded from %s", settings.rules_path)
    except (OSError, ValueError, RuntimeError) as e:
        logger.critical("Startup failed: %s", e)
        sys.exit(1)

    service_health.database_ping = SQLiteCrossingRepo(settings.db_path).ping
    service_health.mark_started()

    yield
    logger.info("Shutting down")


def create_app() -> FastAPI:
    settings = get_settings()
    rules = load_cached_rules(settings.rules_path)

    app = FastAPI(
        title=rules.api.title,
        version=rules.api.version,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # --- Routers ---
    app.include_router(auth.router, prefix="/api/auth", tags=["Auth"])
    app.include_router(entries.router, prefix="/api/entries", tags=["Entries"])
    app.include_router(stats.router, prefix="/api/stats", tags=["Stats"])
    app.include_router(create_health_router(version=rules.api.version))

    app.add_middleware(
        CORSMiddleware,
        allow_origins=rules.api.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Validation error", "details": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        resource = "/".join(request.url.path.rstrip("/").split("/")[:3])
        message = FAILURE_MESSAGES.get((request.method, resource), "Internal server error")
        logger.exception(
            "%s %s failed: %s", request.method, request.url.path, message, exc_info=exc
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": message},
        )

    @app.get("/")
    def root() -> dict[str, Any]:
        """Service info."""
        return {
            "message": rules.api.title,
            "version": rules.api.version,
            "endpoints": {
                "health": "/api/health",
                "auth": "/api/auth",
                "entries": "/api/entries",
                "stats": "/api/stats",
            },
            "timestamp": datetime.now(UTC).isoformat(),
        }

    return app


app = create_app()
