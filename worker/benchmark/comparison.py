"""Competitive benchmark: audit a target and its competitors side by side."""

import asyncio
from dataclasses import dataclass, field

import structlog

from api.exceptions import ValidationError
from worker.benchmark.insights import Insights, ScoreSummary, generate_insights
from worker.errors import PartialBatchFailure
from worker.scoring.geo import LocalContext
from worker.tasks.audit import AuditEngine, AuditResult

logger = structlog.get_logger(__name__)


@dataclass
class BenchmarkConfig:
    """Configuration for a benchmark run."""

    min_competitors: int = 1
    max_competitors: int = 3
    max_workers: int = 4


@dataclass
class AuditOutcome:
    """Result of auditing one URL in a batch; failures are kept, not raised."""

    url: str
    success: bool
    is_target: bool = False
    scores: ScoreSummary | None = None
    title: str | None = None
    domain: str | None = None
    error: str | None = None

    @classmethod
    def from_result(cls, url: str, result: AuditResult, is_target: bool) -> "AuditOutcome":
        components = result.scores.components
        return cls(
            url=url,
            success=True,
            is_target=is_target,
            scores=ScoreSummary(
                overall=result.aiso_score,
                aeo=components.aeo,
                seo=components.seo,
                readability=components.readability,
                engagement=components.engagement,
            ),
            title=result.title,
            domain=result.domain,
        )

    @classmethod
    def from_failure(cls, failure: PartialBatchFailure, is_target: bool) -> "AuditOutcome":
        return cls(
            url=failure.url,
            success=False,
            is_target=is_target,
            error=str(failure.cause) or type(failure.cause).__name__,
        )

    def to_dict(self) -> dict:
        return {
            "url": self.url,
            "success": self.success,
            "scores": self.scores.to_dict() if self.scores else None,
            "title": self.title,
            "domain": self.domain,
            "error": self.error,
        }


@dataclass
class RankedScore:
    url: str
    score: int
    is_target: bool

    def to_dict(self) -> dict:
        return {"url": self.url, "score": self.score, "is_target": self.is_target}


@dataclass
class Ranking:
    position: int | None  # target's 1-based rank, None when the target failed
    total: int
    ordered_scores: list[RankedScore] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "position": self.position,
            "total": self.total,
            "ordered_scores": [s.to_dict() for s in self.ordered_scores],
        }


@dataclass
class ComparisonResult:
    target: AuditOutcome
    competitors: list[AuditOutcome]
    ranking: Ranking
    insights: Insights

    def to_dict(self) -> dict:
        return {
            "target": self.target.to_dict(),
            "competitors": [c.to_dict() for c in self.competitors],
            "ranking": self.ranking.to_dict(),
            "insights": self.insights.to_dict(),
        }


def rank_outcomes(outcomes: list[AuditOutcome]) -> Ranking:
    """
    Rank successful outcomes by overall score, highest first.

    ``sorted`` is stable, so tied scores keep their input order.
    """
    ranked = sorted(
        (o for o in outcomes if o.success and o.scores is not None),
        key=lambda o: o.scores.overall,
        reverse=True,
    )
    ordered = [RankedScore(url=o.url, score=o.scores.overall, is_target=o.is_target) for o in ranked]
    position = next((i for i, s in enumerate(ordered, start=1) if s.is_target), None)
    return Ranking(position=position, total=len(ordered), ordered_scores=ordered)


class Benchmarker:
    """Audits a target URL against competitors concurrently."""

    def __init__(self, engine: AuditEngine, config: BenchmarkConfig | None = None):
        self.engine = engine
        self.config = config or BenchmarkConfig()

    def _validate(self, competitor_urls: list[str]) -> None:
        count = len(competitor_urls)
        if not self.config.min_competitors <= count <= self.config.max_competitors:
            raise ValidationError(
                f"Between {self.config.min_competitors} and {self.config.max_competitors} "
                f"competitor URLs are required, got {count}",
                field="competitor_urls",
            )

    async def _audit_one(
        self,
        semaphore: asyncio.Semaphore,
        url: str,
        is_target: bool,
        local_context: LocalContext | None,
    ) -> AuditOutcome:
        async with semaphore:
            try:
                result = await self.engine.audit_url(url, local_context)
            except Exception as e:
                failure = PartialBatchFailure(url, e)
                logger.warning(
                    "benchmark_audit_failed",
                    url=url,
                    is_target=is_target,
                    error_type=type(e).__name__,
                    error=str(e),
                )
                return AuditOutcome.from_failure(failure, is_target)
        return AuditOutcome.from_result(url, result, is_target)

    async def compare(
        self,
        target_url: str,
        competitor_urls: list[str],
        local_context: LocalContext | None = None,
    ) -> ComparisonResult:
        """
        Audit every URL and compare the target against its competitors.

        Raises:
            ValidationError: Competitor count outside the configured range
        """
        self._validate(competitor_urls)

        semaphore = asyncio.Semaphore(self.config.max_workers)
        urls = [target_url, *competitor_urls]

        async with asyncio.TaskGroup() as group:
            tasks = [
                group.create_task(self._audit_one(semaphore, url, index == 0, local_context))
                for index, url in enumerate(urls)
            ]
        outcomes = [task.result() for task in tasks]

        target, competitors = outcomes[0], outcomes[1:]
        ranking = rank_outcomes(outcomes)
        insights = generate_insights(
            target.scores if target.success else None,
            [c.scores for c in competitors if c.success and c.scores is not None],
        )

        logger.info(
            "benchmark_complete",
            target_url=target_url,
            competitors=len(competitors),
            failed=sum(1 for o in outcomes if not o.success),
            position=ranking.position,
        )
        return ComparisonResult(
            target=target,
            competitors=competitors,
            ranking=ranking,
            insights=insights,
        )
