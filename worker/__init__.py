"""AISO Content Audit - Worker Package."""

# Lazy imports to avoid requiring all dependencies at import time
# Use explicit imports when these are needed:
# from worker.tasks.audit import AuditEngine, AuditResult
# from worker.redis import get_redis_connection

__all__ = [
    "AuditEngine",
    "AuditResult",
    "get_redis_connection",
]


from typing import Any


def __getattr__(name: str) -> Any:
    """Lazy import for worker submodules."""
    if name in ("AuditEngine", "AuditResult"):
        from worker.tasks.audit import AuditEngine, AuditResult

        return locals()[name]
    elif name == "get_redis_connection":
        from worker.redis import get_redis_connection

        return get_redis_connection
    raise AttributeError(f"module 'worker' has no attribute '{name}'")
