"""Competitive insights from a set of audit outcomes."""

import math
from dataclasses import dataclass, field

# (score key, display name)
DIMENSIONS = [
    ("aeo", "AI Answer Optimization"),
    ("seo", "Search Engine Optimization"),
    ("readability", "Content Readability"),
    ("engagement", "User Engagement"),
]

SIGNIFICANT_GAP = 10


@dataclass
class ScoreSummary:
    """The scores compared across sites."""

    overall: int
    aeo: int
    seo: int
    readability: int
    engagement: int

    def get(self, key: str) -> int:
        return getattr(self, key)

    def to_dict(self) -> dict:
        return {
            "overall": self.overall,
            "aeo": self.aeo,
            "seo": self.seo,
            "readability": self.readability,
            "engagement": self.engagement,
        }


@dataclass
class Insights:
    winning: list[str] = field(default_factory=list)
    losing: list[str] = field(default_factory=list)
    opportunities: list[str] = field(default_factory=list)
    narrative: str = ""

    def to_dict(self) -> dict:
        return {
            "winning": self.winning,
            "losing": self.losing,
            "opportunities": self.opportunities,
            "narrative": self.narrative,
        }


def _points(diff: float) -> int:
    """Absolute gap rounded half up."""
    return math.floor(abs(diff) + 0.5)


def _mean(values: list[int]) -> float:
    return sum(values) / len(values) if values else 0.0


def narrative_for(target_overall: int, overall_diff: float) -> str:
    """Pick the summary sentence for the overall gap to competitors."""
    gap = _points(overall_diff)
    if overall_diff < -20:
        return (
            f"Your site scores {target_overall}/100 for AI readiness, which is {gap} points "
            "below your competitors. When customers ask ChatGPT or Perplexity for "
            "recommendations, your competitors are more likely to be featured. "
            "We can close this gap."
        )
    if overall_diff < 0:
        return (
            f"Your site is {gap} points behind competitors in AI readiness. Small improvements "
            "now can make a big difference in AI search visibility."
        )
    if overall_diff < SIGNIFICANT_GAP:
        return (
            f"You're neck-and-neck with competitors at {target_overall}/100, {gap} points "
            "ahead of their average. Strategic optimization can help you pull ahead in AI "
            "search results."
        )
    return (
        f"Great news! You're {gap} points ahead of competitors. Let's maintain this "
        "advantage and push even further ahead."
    )


def generate_insights(
    target: ScoreSummary | None,
    competitors: list[ScoreSummary],
) -> Insights:
    """
    Compare a target against the mean of its competitors.

    Args:
        target: Target scores, or None when the target could not be audited
        competitors: Scores of the competitors that audited successfully

    Returns:
        Insights with per-dimension wins, losses and opportunities
    """
    if target is None:
        return Insights(
            losing=["Unable to audit target site"],
            opportunities=["Fix site accessibility issues"],
            narrative=(
                "We encountered issues auditing your site, which may indicate technical "
                "problems that need addressing."
            ),
        )

    if not competitors:
        return Insights(
            opportunities=["Unable to compare - competitor sites could not be audited"],
            narrative=f"Your site scores {target.overall}/100 for AI readiness.",
        )

    insights = Insights()
    for key, name in DIMENSIONS:
        diff = target.get(key) - _mean([c.get(key) for c in competitors])
        if diff >= SIGNIFICANT_GAP:
            insights.winning.append(f"{name}: {_points(diff)} points ahead of competitors")
        elif diff <= -SIGNIFICANT_GAP:
            insights.losing.append(f"{name}: {_points(diff)} points behind competitors")
            insights.opportunities.append(f"Improve {name.lower()} to match industry standard")

    overall_diff = target.overall - _mean([c.overall for c in competitors])
    insights.narrative = narrative_for(target.overall, overall_diff)
    return insights
