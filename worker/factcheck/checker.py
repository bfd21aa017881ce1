"""Fact-check collaborator.

Asks a generation model to list the factual claims in a piece of content
with a verdict for each, then folds the verdicts into a 0-100 score.
"""

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import StrEnum

import structlog

from worker.errors import DownstreamUnavailable
from worker.generation.models import GenerationRequest
from worker.generation.parser import ParseError, parse_array
from worker.generation.providers import GenerationProvider

logger = structlog.get_logger(__name__)

SERVICE_NAME = "fact_check"

FACT_CHECK_PROMPT = """You are a fact-checking expert. Analyze the following content and identify the factual claims a reader would want verified.

Content:
{content}

For each factual claim:
1. Extract the specific claim
2. Assign a status: "verified" (widely documented), "uncertain" (plausible but thinly sourced or disputed), or "unverified" (no support you know of)
3. Provide a confidence score (0-100)
4. List source URLs that support or refute the claim, if you know any

Focus on objective facts like statistics, dates, quotes, research findings, and technical specifications.
Ignore subjective opinions or general statements.

Return ONLY a JSON array with this structure:
[
  {{
    "claim": "string",
    "status": "verified|uncertain|unverified",
    "confidence": number,
    "sources": ["url1", "url2"]
  }}
]"""


class ClaimStatus(StrEnum):
    VERIFIED = "verified"
    UNCERTAIN = "uncertain"
    UNVERIFIED = "unverified"


STATUS_POINTS = {
    ClaimStatus.VERIFIED: 100,
    ClaimStatus.UNCERTAIN: 50,
    ClaimStatus.UNVERIFIED: 0,
}


@dataclass
class ClaimCheck:
    claim: str
    status: ClaimStatus
    confidence: int = 0
    sources: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "claim": self.claim,
            "status": self.status.value,
            "confidence": self.confidence,
            "sources": self.sources,
        }


@dataclass
class FactCheckResult:
    """Verdicts for every claim plus the aggregate score."""

    claims: list[ClaimCheck] = field(default_factory=list)

    def _count(self, status: ClaimStatus) -> int:
        return sum(1 for claim in self.claims if claim.status == status)

    @property
    def total_claims(self) -> int:
        return len(self.claims)

    @property
    def verified_claims(self) -> int:
        return self._count(ClaimStatus.VERIFIED)

    @property
    def uncertain_claims(self) -> int:
        return self._count(ClaimStatus.UNCERTAIN)

    @property
    def unverified_claims(self) -> int:
        return self._count(ClaimStatus.UNVERIFIED)

    @property
    def overall_score(self) -> int:
        """Mean verdict points; content with no checkable claims scores 100."""
        if not self.claims:
            return 100
        return round(sum(STATUS_POINTS[c.status] for c in self.claims) / len(self.claims))

    def problematic_claims(self) -> list[ClaimCheck]:
        """Claims a rewrite should soften or source."""
        return [c for c in self.claims if c.status != ClaimStatus.VERIFIED]

    def to_dict(self) -> dict:
        return {
            "overall_score": self.overall_score,
            "total_claims": self.total_claims,
            "verified_claims": self.verified_claims,
            "uncertain_claims": self.uncertain_claims,
            "unverified_claims": self.unverified_claims,
            "claims": [c.to_dict() for c in self.claims],
        }


class FactChecker(ABC):
    """Interface for fact-check collaborators."""

    @abstractmethod
    async def check(self, content: str) -> FactCheckResult:
        """
        Check the claims in a piece of content.

        Raises:
            DownstreamUnavailable: The checker could not produce a verdict
        """
        ...


def _parse_claim(item: object) -> ClaimCheck | None:
    if not isinstance(item, dict):
        return None
    claim = str(item.get("claim") or "").strip()
    if not claim:
        return None
    try:
        status = ClaimStatus(str(item.get("status", "")).strip().lower())
    except ValueError:
        status = ClaimStatus.UNCERTAIN
    try:
        confidence = max(0, min(100, int(item.get("confidence") or 0)))
    except (TypeError, ValueError):
        confidence = 0
    sources = item.get("sources") or []
    return ClaimCheck(
        claim=claim,
        status=status,
        confidence=confidence,
        sources=[str(s) for s in sources] if isinstance(sources, list) else [],
    )


class LLMFactChecker(FactChecker):
    """Fact checker backed by a generation provider."""

    def __init__(
        self,
        provider: GenerationProvider,
        model: str = "openai/gpt-4o-mini",
        timeout_seconds: float = 90.0,
        max_tokens: int = 3000,
    ):
        self.provider = provider
        self.model = model
        self.timeout_seconds = timeout_seconds
        self.max_tokens = max_tokens

    async def check(self, content: str) -> FactCheckResult:
        request = GenerationRequest(
            prompt=FACT_CHECK_PROMPT.format(content=content),
            purpose="fact_check",
            model=self.model,
            temperature=0.0,
            max_tokens=self.max_tokens,
        )

        try:
            response = await asyncio.wait_for(
                self.provider.generate(request), timeout=self.timeout_seconds
            )
        except TimeoutError as e:
            raise DownstreamUnavailable(
                SERVICE_NAME, f"timed out after {self.timeout_seconds}s"
            ) from e

        if not response.success:
            message = response.error.message if response.error else "generation failed"
            raise DownstreamUnavailable(SERVICE_NAME, message)

        parsed = parse_array(response.content)
        if isinstance(parsed, ParseError):
            raise DownstreamUnavailable(SERVICE_NAME, f"unreadable verdicts ({parsed.reason})")

        claims = [claim for claim in map(_parse_claim, parsed) if claim is not None]
        result = FactCheckResult(claims=claims)

        logger.info(
            "fact_check_complete",
            total_claims=result.total_claims,
            verified=result.verified_claims,
            overall_score=result.overall_score,
        )
        return result
