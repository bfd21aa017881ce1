"""Single-page audit pipeline.

Extraction -> structure analysis -> accessibility scan -> optional fact
check -> scoring, producing one AuditResult. Audits of raw text skip the
fetch, the structure analysis and the accessibility scan.
"""

import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime

import structlog

from worker.accessibility.scanner import AccessibilityScanResult, scan_html
from worker.crawler.fetcher import CrawlerAccess
from worker.crawler.url import extract_domain
from worker.errors import DownstreamUnavailable
from worker.extraction.extractor import ContentExtractor
from worker.extraction.structure import HtmlStructure
from worker.factcheck.checker import FactChecker, FactCheckResult
from worker.scoring.calculator import ContentScores, calculate_aiso_score
from worker.scoring.geo import LocalContext

logger = structlog.get_logger(__name__)


@dataclass
class AuditResult:
    """Everything produced by auditing one page or piece of text."""

    content: str
    title: str
    meta_description: str
    scores: ContentScores
    url: str | None = None
    html_structure: HtmlStructure | None = None
    accessibility: AccessibilityScanResult | None = None
    fact_check: FactCheckResult | None = None
    crawler_access: CrawlerAccess | None = None
    local_context: LocalContext | None = None
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def domain(self) -> str | None:
        return extract_domain(self.url) if self.url else None

    @property
    def aiso_score(self) -> int:
        return self.scores.aiso_score

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "url": self.url,
            "domain": self.domain,
            "title": self.title,
            "meta_description": self.meta_description,
            "content": self.content,
            "word_count": len(self.content.split()),
            "aiso_score": self.aiso_score,
            "scores": self.scores.to_dict(),
            "html_structure": self.html_structure.to_dict() if self.html_structure else None,
            "accessibility": self.accessibility.to_dict() if self.accessibility else None,
            "fact_check": self.fact_check.to_dict() if self.fact_check else None,
            "crawler_access": self.crawler_access.to_dict() if self.crawler_access else None,
            "local_context": self.local_context.to_dict() if self.local_context else None,
            "created_at": self.created_at.isoformat(),
        }


class AuditEngine:
    """Runs single-page audits."""

    def __init__(
        self,
        extractor: ContentExtractor | None = None,
        fact_checker: FactChecker | None = None,
    ):
        self.extractor = extractor or ContentExtractor()
        self.fact_checker = fact_checker

    async def _fact_check(self, content: str) -> FactCheckResult | None:
        if self.fact_checker is None:
            return None
        try:
            return await self.fact_checker.check(content)
        except DownstreamUnavailable as e:
            # Score without the fact-check term
            logger.warning("fact_check_unavailable", service=e.service, error=str(e))
            return None

    async def audit_url(self, url: str, local_context: LocalContext | None = None) -> AuditResult:
        """
        Fetch, extract and score a URL.

        Raises:
            ExtractionError: The page could not be fetched or had no content
        """
        page = await self.extractor.extract_url(url)

        accessibility = scan_html(page.html, page.final_url)
        fact_check = await self._fact_check(page.content)

        scores = calculate_aiso_score(
            page.content,
            page.title,
            page.meta_description,
            fact_check_score=fact_check.overall_score if fact_check else None,
            local_context=local_context,
            html_structure=page.html_structure,
        )

        result = AuditResult(
            url=page.final_url,
            content=page.content,
            title=page.title,
            meta_description=page.meta_description,
            scores=scores,
            html_structure=page.html_structure,
            accessibility=accessibility,
            fact_check=fact_check,
            crawler_access=page.crawler_access,
            local_context=local_context,
        )

        logger.info(
            "audit_complete",
            url=result.url,
            aiso_score=result.aiso_score,
            accessibility_score=accessibility.accessibility_score,
            fact_checked=fact_check is not None,
        )
        return result

    async def audit_text(
        self,
        content: str,
        title: str = "",
        meta_description: str = "",
        local_context: LocalContext | None = None,
    ) -> AuditResult:
        """Score raw content without fetching anything."""
        fact_check = await self._fact_check(content)
        scores = calculate_aiso_score(
            content,
            title,
            meta_description,
            fact_check_score=fact_check.overall_score if fact_check else None,
            local_context=local_context,
        )

        result = AuditResult(
            content=content,
            title=title,
            meta_description=meta_description,
            scores=scores,
            fact_check=fact_check,
            local_context=local_context,
        )
        logger.info("text_audit_complete", aiso_score=result.aiso_score, words=len(content.split()))
        return result
