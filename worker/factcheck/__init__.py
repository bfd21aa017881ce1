"""Fact-check collaborator client."""

from worker.factcheck.checker import (
    ClaimCheck,
    ClaimStatus,
    FactChecker,
    FactCheckResult,
    LLMFactChecker,
)

__all__ = [
    "ClaimCheck",
    "ClaimStatus",
    "FactCheckResult",
    "FactChecker",
    "LLMFactChecker",
]
