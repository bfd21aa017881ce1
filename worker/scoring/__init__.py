"""Scoring package for content quality evaluation."""

from worker.scoring.aeo import AEOScore, score_aeo
from worker.scoring.calculator import (
    LOCAL_WEIGHTS,
    NATIONAL_WEIGHTS,
    ContentScores,
    ScoreComponents,
    active_weights,
    calculate_aiso_score,
    composite_score,
)
from worker.scoring.engagement import EngagementScore, score_engagement
from worker.scoring.geo import GEOScore, LocalContext, score_geo
from worker.scoring.readability import ReadabilityScore, score_readability
from worker.scoring.seo import SEOScore, score_seo

__all__ = [
    # Composite
    "LOCAL_WEIGHTS",
    "NATIONAL_WEIGHTS",
    "ContentScores",
    "ScoreComponents",
    "active_weights",
    "calculate_aiso_score",
    "composite_score",
    # Dimensions
    "AEOScore",
    "EngagementScore",
    "GEOScore",
    "LocalContext",
    "ReadabilityScore",
    "SEOScore",
    "score_aeo",
    "score_engagement",
    "score_geo",
    "score_readability",
    "score_seo",
]
