"""Competitive benchmarking and insight generation."""

from worker.benchmark.comparison import (
    AuditOutcome,
    BenchmarkConfig,
    Benchmarker,
    ComparisonResult,
    RankedScore,
    Ranking,
    rank_outcomes,
)
from worker.benchmark.insights import Insights, ScoreSummary, generate_insights

__all__ = [
    "AuditOutcome",
    "BenchmarkConfig",
    "Benchmarker",
    "ComparisonResult",
    "Insights",
    "RankedScore",
    "Ranking",
    "ScoreSummary",
    "generate_insights",
    "rank_outcomes",
]
