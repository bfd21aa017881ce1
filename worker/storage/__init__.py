"""Persistence for produced audit artifacts."""

from worker.storage.results import InMemoryResultStore, RedisResultStore, ResultStore

__all__ = ["InMemoryResultStore", "RedisResultStore", "ResultStore"]
