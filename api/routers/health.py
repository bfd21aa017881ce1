"""Liveness and readiness probes."""

import time
from datetime import UTC, datetime
from typing import Literal

import structlog
from fastapi import APIRouter
from pydantic import BaseModel, Field
from redis.exceptions import RedisError

from api.config import API_VERSION, Settings
from api.deps import SettingsDep
from worker.redis import get_redis_connection

router = APIRouter(tags=["Health"])
logger = structlog.get_logger()

_server_start_time = time.time()

CheckStatus = Literal["healthy", "unhealthy", "skipped"]


class HealthResponse(BaseModel):
    status: Literal["healthy", "unhealthy"]
    timestamp: str = Field(..., description="ISO 8601 timestamp")
    version: str
    uptime_seconds: int


class DependencyCheck(BaseModel):
    status: CheckStatus
    latency_ms: float | None = None
    error: str | None = None


class ReadyResponse(HealthResponse):
    """Readiness plus the state of each collaborator."""

    result_store: Literal["redis", "memory"]
    checks: dict[str, DependencyCheck]


def _check_redis(settings: Settings) -> DependencyCheck:
    if settings.redis_url is None:
        return DependencyCheck(status="skipped")
    start = time.perf_counter()
    try:
        get_redis_connection().ping()
    except RedisError as e:
        logger.warning("Redis readiness check failed", error=str(e))
        return DependencyCheck(status="unhealthy", error=str(e))
    return DependencyCheck(
        status="healthy",
        latency_ms=round((time.perf_counter() - start) * 1000, 2),
    )


def _check_generation(settings: Settings) -> DependencyCheck:
    # Presence of credentials only; providers are not called from a probe
    return DependencyCheck(status="healthy" if settings.generation_enabled else "skipped")


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Liveness: the process is up. Collaborators are not contacted."""
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(UTC).isoformat(),
        version=API_VERSION,
        uptime_seconds=int(time.time() - _server_start_time),
    )


@router.get("/ready", response_model=ReadyResponse)
async def readiness_check(settings: SettingsDep) -> ReadyResponse:
    """
    Readiness: Redis is pinged when it backs the result store.

    Without a Redis URL the in-memory store is used and the check is skipped.
    A missing generation provider only disables rewrites and fact checks, so
    it never makes the service unready.
    """
    checks = {
        "redis": _check_redis(settings),
        "generation": _check_generation(settings),
    }
    return ReadyResponse(
        status="unhealthy" if checks["redis"].status == "unhealthy" else "healthy",
        timestamp=datetime.now(UTC).isoformat(),
        version=API_VERSION,
        uptime_seconds=int(time.time() - _server_start_time),
        result_store="memory" if settings.redis_url is None else "redis",
        checks=checks,
    )
