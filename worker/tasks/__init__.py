"""Audit pipeline entry points."""

from worker.tasks.audit import AuditEngine, AuditResult

__all__ = [
    "AuditEngine",
    "AuditResult",
]
