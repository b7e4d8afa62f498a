"""
Health endpoints.

- /api/health: status, database connectivity, version, uptime and server time
- /health/ready: 503 until startup has finished and the database answers
- /health/live: the process is serving requests
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


@dataclass
class ServiceHealth:
    """Startup state and storage ping reported by the health endpoints."""

    database_ping: Callable[[], Any] | None = None
    started_at: float | None = None

    def mark_started(self) -> None:
        self.started_at = time.monotonic()

    @property
    def started(self) -> bool:
        return self.started_at is not None

    @property
    def uptime_seconds(self) -> float:
        if self.started_at is None:
            return 0.0
        return round(time.monotonic() - self.started_at, 3)

    def database_error(self) -> str | None:
        """Ping storage. Returns the failure text, or None when it answers."""
        if self.database_ping is None:
            return None
        try:
            self.database_ping()
        except Exception as e:
            logger.warning("Database health check failed: %s", e)
            return str(e)
        return None


service_health = ServiceHealth()


def create_health_router(version: str, health: ServiceHealth | None = None) -> APIRouter:
    """Health routes for ``health``, defaulting to the process-wide state."""
    router = APIRouter(tags=["Health"])
    state = health or service_health

    @router.get("/api/health", response_model=None)
    def health_check() -> JSONResponse:
        error = state.database_error()
        body: dict[str, Any] = {
            "status": "OK" if error is None else "ERROR",
            "database": "connected" if error is None else "disconnected",
            "version": version,
            "uptime_seconds": state.uptime_seconds,
            "timestamp": datetime.now(UTC).isoformat(),
        }
        if error is not None:
            body["error"] = error
            return JSONResponse(content=body, status_code=status.HTTP_503_SERVICE_UNAVAILABLE)
        return JSONResponse(content=body)

    @router.get("/health/ready", response_model=None)
    def readiness_check() -> JSONResponse:
        database_ok = state.database_error() is None
        ready = state.started and database_ok
        return JSONResponse(
            content={"ready": ready, "started": state.started, "database": database_ok},
            status_code=status.HTTP_200_OK if ready else status.HTTP_503_SERVICE_UNAVAILABLE,
        )

    @router.get("/health/live", response_model=None)
    def liveness_check() -> JSONResponse:
        return JSONResponse(content={"alive": True, "uptime_seconds": state.uptime_seconds})

    return router
