"""Composite AISO score calculator.

Runs every dimension scorer over a piece of content and folds the
results into one weighted 0-100 AISO score. Two fixed weight sets are
used: national (no local context) and local (adds the GEO dimension).
When a dimension has no value, most commonly fact-check when no checker
ran, it is dropped and the remaining weights are renormalized.
"""

from dataclasses import dataclass, replace

import structlog

from worker.extraction.structure import HtmlStructure
from worker.scoring.aeo import AEOScore, score_aeo
from worker.scoring.engagement import EngagementScore, score_engagement
from worker.scoring.geo import GEOScore, LocalContext, score_geo
from worker.scoring.readability import ReadabilityScore, score_readability
from worker.scoring.seo import SEOScore, score_seo

logger = structlog.get_logger(__name__)

NATIONAL_WEIGHTS: dict[str, float] = {
    "fact_check": 0.30,
    "aeo": 0.25,
    "seo": 0.15,
    "readability": 0.15,
    "engagement": 0.15,
}

LOCAL_WEIGHTS: dict[str, float] = {
    "fact_check": 0.25,
    "aeo": 0.20,
    "geo": 0.10,
    "seo": 0.15,
    "readability": 0.15,
    "engagement": 0.15,
}


@dataclass(frozen=True)
class ScoreComponents:
    """Per-dimension scores, each 0-100."""

    seo: int
    readability: int
    engagement: int
    aeo: int
    geo: int | None = None
    fact_check: int | None = None

    def get(self, dimension: str) -> int | None:
        return getattr(self, dimension)

    def to_dict(self) -> dict:
        return {
            "seo": self.seo,
            "readability": self.readability,
            "engagement": self.engagement,
            "aeo": self.aeo,
            "geo": self.geo,
            "fact_check": self.fact_check,
        }


def active_weights(components: ScoreComponents, local: bool) -> dict[str, float]:
    """
    Pick the weight set and renormalize it over dimensions that have a value.

    Args:
        components: Dimension scores
        local: Use the local weight set (GEO included)

    Returns:
        Weights for the present dimensions, summing to 1.0
    """
    base = LOCAL_WEIGHTS if local else NATIONAL_WEIGHTS
    present = {name: weight for name, weight in base.items() if components.get(name) is not None}
    total = sum(present.values())
    if total == 0:
        return {}
    return {name: weight / total for name, weight in present.items()}


def composite_score(components: ScoreComponents, local: bool = False) -> int:
    """Weighted AISO score, rounded to an integer."""
    weights = active_weights(components, local)
    weighted = sum(components.get(name) * weight for name, weight in weights.items())
    return max(0, min(100, round(weighted)))


@dataclass
class ContentScores:
    """Everything the scorer produces for one piece of content."""

    components: ScoreComponents
    aiso_score: int
    weights: dict[str, float]
    seo_details: SEOScore
    readability_details: ReadabilityScore
    engagement_details: EngagementScore
    aeo_details: AEOScore
    geo_details: GEOScore | None = None
    local: bool = False

    @property
    def overall_score(self) -> int:
        """Unweighted mean of SEO, readability and engagement."""
        c = self.components
        return round((c.seo + c.readability + c.engagement) / 3)

    def with_fact_check(self, fact_check_score: int | None) -> "ContentScores":
        """Return a copy whose composite includes (or drops) a fact-check score."""
        components = replace(self.components, fact_check=fact_check_score)
        return replace(
            self,
            components=components,
            aiso_score=composite_score(components, self.local),
            weights=active_weights(components, self.local),
        )

    def to_dict(self) -> dict:
        return {
            "aiso_score": self.aiso_score,
            "overall_score": self.overall_score,
            "components": self.components.to_dict(),
            "weights": {name: round(weight, 4) for name, weight in self.weights.items()},
            "seo_details": self.seo_details.to_dict(),
            "readability_details": self.readability_details.to_dict(),
            "engagement_details": self.engagement_details.to_dict(),
            "aeo_details": self.aeo_details.to_dict(),
            "geo_details": self.geo_details.to_dict() if self.geo_details else None,
        }


def calculate_aiso_score(
    text: str,
    title: str = "",
    meta_description: str = "",
    fact_check_score: int | None = None,
    local_context: LocalContext | None = None,
    html_structure: HtmlStructure | None = None,
) -> ContentScores:
    """
    Score content on every dimension and combine into the AISO score.

    Args:
        text: Markdown-like content
        title: Page title
        meta_description: Meta description
        fact_check_score: 0-100 verdict from a fact checker, if one ran
        local_context: Business location; enables GEO and the local weights
        html_structure: Page structure counts, when audited from a URL

    Returns:
        ContentScores
    """
    seo = score_seo(text, title, meta_description, html_structure)
    readability = score_readability(text)
    engagement = score_engagement(text)
    aeo = score_aeo(text, html_structure)
    geo = score_geo(text, local_context) if local_context is not None else None
    local = local_context is not None

    components = ScoreComponents(
        seo=seo.score,
        readability=readability.score,
        engagement=engagement.score,
        aeo=aeo.score,
        geo=geo.score if geo else None,
        fact_check=fact_check_score,
    )
    aiso = composite_score(components, local)

    logger.debug(
        "content_scored",
        aiso_score=aiso,
        aeo=aeo.score,
        seo=seo.score,
        readability=readability.score,
        engagement=engagement.score,
        geo=components.geo,
        fact_check=fact_check_score,
    )

    return ContentScores(
        components=components,
        aiso_score=aiso,
        weights=active_weights(components, local),
        seo_details=seo,
        readability_details=readability,
        engagement_details=engagement,
        aeo_details=aeo,
        geo_details=geo,
        local=local,
    )
