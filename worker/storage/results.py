"""Write-once storage for produced audit artifacts.

Artifacts are stored as their ``to_dict()`` JSON form, keyed by run id.
Saving the same id twice is a conflict.
"""

import json
import threading
from abc import ABC, abstractmethod

import structlog
from redis import Redis

from api.exceptions import ConflictError
from worker.redis import RESULT_KEY_PREFIX

logger = structlog.get_logger(__name__)


class ResultStore(ABC):
    """Persistence contract for audit artifacts."""

    @abstractmethod
    def save(self, run_id: str, result: dict) -> None:
        """
        Store an artifact.

        Raises:
            ConflictError: An artifact already exists for this id
        """
        ...

    @abstractmethod
    def get(self, run_id: str) -> dict | None:
        """Return the artifact for an id, or None."""
        ...


class InMemoryResultStore(ResultStore):
    """Process-local store, used when no Redis is configured and in tests."""

    def __init__(self) -> None:
        self._results: dict[str, str] = {}
        self._lock = threading.Lock()

    def save(self, run_id: str, result: dict) -> None:
        payload = json.dumps(result, default=str)
        with self._lock:
            if run_id in self._results:
                raise ConflictError(f"Result '{run_id}' already exists")
            self._results[run_id] = payload

    def get(self, run_id: str) -> dict | None:
        payload = self._results.get(run_id)
        return json.loads(payload) if payload is not None else None

    def __len__(self) -> int:
        return len(self._results)


class RedisResultStore(ResultStore):
    """Redis-backed store; ``SET NX`` makes the write-once check atomic."""

    def __init__(self, redis: Redis, ttl_seconds: int | None = None):
        self.redis = redis
        self.ttl_seconds = ttl_seconds

    def _key(self, run_id: str) -> str:
        return f"{RESULT_KEY_PREFIX}{run_id}"

    def save(self, run_id: str, result: dict) -> None:
        created = self.redis.set(
            self._key(run_id),
            json.dumps(result, default=str),
            nx=True,
            ex=self.ttl_seconds,
        )
        if not created:
            raise ConflictError(f"Result '{run_id}' already exists")
        logger.debug("result_saved", run_id=run_id, ttl=self.ttl_seconds)

    def get(self, run_id: str) -> dict | None:
        payload = self.redis.get(self._key(run_id))
        return json.loads(payload) if payload is not None else None
