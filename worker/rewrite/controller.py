"""Iterative rewrite controller.

Runs score -> diagnose -> rewrite -> rescore until the best composite
reaches the threshold or the iteration budget runs out. A failed
generation (timeout, unavailable provider, unparseable output) leaves the
content unchanged for that iteration; the session carries on.

The best result is a fold over the iterations: a later iteration only
replaces the best when its composite is strictly greater, so the best
score never goes down.
"""

import asyncio
from dataclasses import dataclass, field
from enum import StrEnum
from functools import reduce

import structlog

from worker.errors import DownstreamUnavailable, GenerationParseError
from worker.factcheck.checker import FactChecker, FactCheckResult
from worker.generation.models import GenerationRequest
from worker.generation.parser import ParsedPayload, ParseError, parse_payload
from worker.generation.providers import GenerationProvider
from worker.rewrite.directive import RewriteDirective, build_directive
from worker.scoring.calculator import ContentScores, calculate_aiso_score
from worker.scoring.geo import LocalContext

logger = structlog.get_logger(__name__)


class RewritePhase(StrEnum):
    SCORING = "scoring"
    DIAGNOSING = "diagnosing"
    REWRITING = "rewriting"
    RESCORING = "rescoring"
    CONVERGED = "converged"
    NEXT_ITERATION = "next_iteration"
    MAX_ITERATIONS_REACHED = "max_iterations_reached"


@dataclass
class RewriteConfig:
    """Configuration for a rewrite session."""

    threshold: int = 90
    max_iterations: int = 3
    generation_timeout_seconds: float = 90.0
    model: str = "openai/gpt-4o-mini"
    max_tokens: int = 8000
    temperature: float = 0.7


@dataclass
class RewriteIteration:
    """One pass through the loop."""

    number: int
    content: str
    title: str
    meta_description: str
    scores: ContentScores
    delta: int  # composite change vs. the previous iteration
    phase: RewritePhase
    parse_failed: bool = False
    error: str | None = None
    changes: list[str] = field(default_factory=list)
    fact_check: FactCheckResult | None = None

    @property
    def composite(self) -> int:
        return self.scores.aiso_score

    @property
    def no_op(self) -> bool:
        return self.error is not None

    def to_dict(self) -> dict:
        return {
            "number": self.number,
            "composite": self.composite,
            "delta": self.delta,
            "phase": self.phase.value,
            "parse_failed": self.parse_failed,
            "error": self.error,
            "changes": self.changes,
            "components": self.scores.components.to_dict(),
        }


@dataclass(frozen=True)
class BestSoFar:
    content: str
    title: str
    meta_description: str
    score: int
    iteration: int  # 0 is the original content
    scores: ContentScores


def fold_best(best: BestSoFar, iteration: RewriteIteration) -> BestSoFar:
    """Keep the current best unless the iteration scored strictly higher."""
    if iteration.composite > best.score:
        return BestSoFar(
            content=iteration.content,
            title=iteration.title,
            meta_description=iteration.meta_description,
            score=iteration.composite,
            iteration=iteration.number,
            scores=iteration.scores,
        )
    return best


@dataclass
class RewriteSession:
    """State and outcome of one rewrite run."""

    original_content: str
    original_title: str
    original_meta_description: str
    original_scores: ContentScores
    threshold: int
    max_iterations: int
    iterations: list[RewriteIteration] = field(default_factory=list)
    stop_reason: RewritePhase = RewritePhase.SCORING

    @property
    def original_score(self) -> int:
        return self.original_scores.aiso_score

    @property
    def best(self) -> BestSoFar:
        start = BestSoFar(
            content=self.original_content,
            title=self.original_title,
            meta_description=self.original_meta_description,
            score=self.original_score,
            iteration=0,
            scores=self.original_scores,
        )
        return reduce(fold_best, self.iterations, start)

    @property
    def best_content(self) -> str:
        return self.best.content

    @property
    def best_score(self) -> int:
        return self.best.score

    @property
    def improvement(self) -> int:
        return self.best_score - self.original_score

    def to_dict(self) -> dict:
        best = self.best
        return {
            "original_score": self.original_score,
            "best_score": best.score,
            "improvement": self.improvement,
            "best_iteration": best.iteration,
            "best_content": best.content,
            "best_title": best.title,
            "best_meta_description": best.meta_description,
            "best_scores": best.scores.to_dict(),
            "threshold": self.threshold,
            "iterations_run": len(self.iterations),
            "stop_reason": self.stop_reason.value,
            "iterations": [i.to_dict() for i in self.iterations],
        }


class RewriteController:
    """Drives rewrite sessions against a generation provider."""

    def __init__(
        self,
        provider: GenerationProvider | None,
        config: RewriteConfig | None = None,
        fact_checker: FactChecker | None = None,
    ):
        self.provider = provider
        self.config = config or RewriteConfig()
        self.fact_checker = fact_checker

    async def score(
        self,
        content: str,
        title: str,
        meta_description: str,
        local_context: LocalContext | None,
    ) -> tuple[ContentScores, FactCheckResult | None]:
        """Score content, running the fact checker when one is configured."""
        fact_check = None
        if self.fact_checker is not None:
            try:
                fact_check = await self.fact_checker.check(content)
            except DownstreamUnavailable as e:
                logger.warning("fact_check_unavailable", service=e.service, error=str(e))

        scores = calculate_aiso_score(
            content,
            title,
            meta_description,
            fact_check_score=fact_check.overall_score if fact_check else None,
            local_context=local_context,
        )
        return scores, fact_check

    async def _generate(self, content: str, directive: RewriteDirective) -> ParsedPayload:
        """
        Ask the provider for a rewrite.

        Raises:
            DownstreamUnavailable: No provider, provider error or timeout
            GenerationParseError: Output had no usable payload
        """
        if self.provider is None:
            raise DownstreamUnavailable("generation", "no generation provider configured")

        request = GenerationRequest(
            prompt=directive.to_prompt(content),
            purpose="rewrite",
            model=self.config.model,
            temperature=self.config.temperature,
            max_tokens=self.config.max_tokens,
        )

        try:
            response = await asyncio.wait_for(
                self.provider.generate(request),
                timeout=self.config.generation_timeout_seconds,
            )
        except TimeoutError as e:
            raise DownstreamUnavailable(
                "generation", f"timed out after {self.config.generation_timeout_seconds}s"
            ) from e

        if not response.success:
            message = response.error.message if response.error else "generation failed"
            raise DownstreamUnavailable("generation", message)

        parsed = parse_payload(response.content)
        if isinstance(parsed, ParseError):
            raise GenerationParseError(parsed.reason)
        return parsed

    async def run(
        self,
        content: str,
        title: str = "",
        meta_description: str = "",
        scores: ContentScores | None = None,
        local_context: LocalContext | None = None,
        fact_check: FactCheckResult | None = None,
    ) -> RewriteSession:
        """
        Run a rewrite session.

        Args:
            content: Original content
            title: Page title
            meta_description: Meta description
            scores: Existing scores for the content (scored here when omitted)
            local_context: Business location for GEO scoring
            fact_check: Existing fact-check verdicts, used for the first directive

        Returns:
            RewriteSession with the best content found
        """
        threshold = self.config.threshold
        max_iterations = self.config.max_iterations

        if scores is None:
            scores, fact_check = await self.score(content, title, meta_description, local_context)

        session = RewriteSession(
            original_content=content,
            original_title=title,
            original_meta_description=meta_description,
            original_scores=scores,
            threshold=threshold,
            max_iterations=max_iterations,
        )

        if session.best_score >= threshold:
            session.stop_reason = RewritePhase.CONVERGED
            logger.info("rewrite_not_needed", score=session.best_score, threshold=threshold)
            return session

        current_content, current_title, current_meta = content, title, meta_description
        current_scores, current_fact_check = scores, fact_check

        for number in range(1, max_iterations + 1):
            claims = (
                [c.claim for c in current_fact_check.problematic_claims()]
                if current_fact_check
                else []
            )
            directive = build_directive(
                current_scores,
                threshold,
                number,
                max_iterations,
                session.original_score,
                claims,
            )

            parse_failed = False
            error = None
            changes: list[str] = []
            try:
                payload = await self._generate(current_content, directive)
            except GenerationParseError as e:
                parse_failed = True
                error = f"unparseable generation output: {e}"
            except DownstreamUnavailable as e:
                error = str(e)
            else:
                current_content = payload.content
                current_title = payload.title or current_title
                current_meta = payload.meta_description or current_meta
                changes = payload.changes

            if error:
                logger.warning("rewrite_iteration_no_op", iteration=number, error=error)

            new_scores, new_fact_check = await self.score(
                current_content, current_title, current_meta, local_context
            )

            iteration = RewriteIteration(
                number=number,
                content=current_content,
                title=current_title,
                meta_description=current_meta,
                scores=new_scores,
                delta=new_scores.aiso_score - current_scores.aiso_score,
                phase=RewritePhase.RESCORING,
                parse_failed=parse_failed,
                error=error,
                changes=changes,
                fact_check=new_fact_check,
            )
            session.iterations.append(iteration)

            if session.best_score >= threshold:
                iteration.phase = RewritePhase.CONVERGED
            elif number == max_iterations:
                iteration.phase = RewritePhase.MAX_ITERATIONS_REACHED
            else:
                iteration.phase = RewritePhase.NEXT_ITERATION

            logger.info(
                "rewrite_iteration_complete",
                iteration=number,
                composite=iteration.composite,
                delta=iteration.delta,
                best_score=session.best_score,
                phase=iteration.phase.value,
            )

            current_scores = new_scores
            if new_fact_check is not None:
                current_fact_check = new_fact_check

            if iteration.phase != RewritePhase.NEXT_ITERATION:
                session.stop_reason = iteration.phase
                break

        if session.stop_reason == RewritePhase.SCORING:
            # zero-iteration budget
            session.stop_reason = RewritePhase.MAX_ITERATIONS_REACHED

        logger.info(
            "rewrite_session_complete",
            original_score=session.original_score,
            best_score=session.best_score,
            iterations=len(session.iterations),
            stop_reason=session.stop_reason.value,
        )
        return session
