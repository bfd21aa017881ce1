"""Redis connection for the result store."""

from functools import lru_cache

from redis import ConnectionPool, Redis

from api.config import get_settings

RESULT_KEY_PREFIX = "aiso:result:"


@lru_cache
def get_redis_pool() -> ConnectionPool:
    """
    Shared connection pool, built on first use.

    Raises:
        RuntimeError: No Redis URL is configured; callers should use the
            in-memory store instead
    """
    settings = get_settings()
    if settings.redis_url is None:
        raise RuntimeError("REDIS_URL is not configured")
    return ConnectionPool.from_url(
        str(settings.redis_url),
        decode_responses=True,
        max_connections=10,
        socket_timeout=5,
        socket_connect_timeout=2,
    )


def get_redis_connection() -> Redis:
    return Redis(connection_pool=get_redis_pool())
