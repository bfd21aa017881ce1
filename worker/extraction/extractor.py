"""Main content extractor for audited pages."""

from dataclasses import dataclass, field

import structlog
from bs4 import BeautifulSoup

from worker.crawler.fetcher import CrawlerAccess, Fetcher, FetchResult
from worker.crawler.url import normalize_url
from worker.errors import ExtractionError, ExtractionFailure
from worker.extraction.cleaner import (
    MIN_CONTENT_CHARS,
    locate_main_content,
    normalize_whitespace,
    strip_noise,
)
from worker.extraction.structure import HtmlStructure, analyze_html_structure

logger = structlog.get_logger(__name__)

# Markers of block pages, challenge pages and error pages served with a 200
ERROR_PAGE_MARKERS = [
    "403 forbidden",
    "404 not found",
    "500 internal server error",
    "502 bad gateway",
    "503 service unavailable",
    "access denied",
    "permission denied",
    "page not found",
    "attention required! | cloudflare",
    "ray id",
    "captcha",
    "verify you are human",
    "please enable javascript",
    "this site requires javascript",
]


@dataclass
class ExtractedPage:
    """A page with extracted content and structure signals."""

    url: str
    final_url: str
    title: str
    meta_description: str
    content: str
    html: str
    html_structure: HtmlStructure
    locator: str
    crawler_access: CrawlerAccess = field(default_factory=CrawlerAccess)

    @property
    def word_count(self) -> int:
        return len(self.content.split())

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "url": self.url,
            "final_url": self.final_url,
            "title": self.title,
            "meta_description": self.meta_description,
            "word_count": self.word_count,
            "locator": self.locator,
            "html_structure": self.html_structure.to_dict(),
            "crawler_access": self.crawler_access.to_dict(),
        }


@dataclass
class ExtractorConfig:
    """Configuration for content extraction."""

    user_agents: list[str] = field(
        default_factory=lambda: ["AISOAuditBot/1.0 (+https://aiso.studio/bot)"]
    )
    timeout: float = 15.0
    max_retries: int = 1
    min_content_length: int = MIN_CONTENT_CHARS
    max_content_length: int = 50000


def is_error_page(content: str, title: str) -> bool:
    """Check if extracted content looks like a block or error page."""
    lower_title = title.lower()
    lower_head = content[:500].lower()
    return any(marker in lower_title or marker in lower_head for marker in ERROR_PAGE_MARKERS)


def _page_title(soup: BeautifulSoup) -> str:
    if soup.title and soup.title.get_text(strip=True):
        return normalize_whitespace(soup.title.get_text())
    h1 = soup.find("h1")
    return normalize_whitespace(h1.get_text()) if h1 else ""


def _meta_description(soup: BeautifulSoup) -> str:
    for attrs in ({"name": "description"}, {"property": "og:description"}):
        meta = soup.find("meta", attrs=attrs)
        if meta and meta.get("content"):
            return normalize_whitespace(meta["content"])
    return ""


class ContentExtractor:
    """Fetches a page and extracts its main content."""

    def __init__(self, config: ExtractorConfig | None = None, fetcher: Fetcher | None = None):
        self.config = config or ExtractorConfig()
        self.fetcher = fetcher or Fetcher(
            user_agent=self.config.user_agents[0],
            timeout=self.config.timeout,
            max_retries=self.config.max_retries,
        )

    def extract_html(self, html: str, url: str, final_url: str | None = None) -> ExtractedPage:
        """
        Extract content from already-fetched HTML.

        Structure signals are captured before noise stripping mutates the
        document.

        Raises:
            ExtractionError: NO_CONTENT_FOUND when no content region qualifies
        """
        soup = BeautifulSoup(html, "html.parser")

        html_structure = analyze_html_structure(soup, final_url or url, html)
        title = _page_title(soup)
        meta_description = _meta_description(soup)

        strip_noise(soup)
        located = locate_main_content(soup, self.config.min_content_length)
        if located is None:
            raise ExtractionError(ExtractionFailure.NO_CONTENT_FOUND, url)

        content = located.text[: self.config.max_content_length]

        return ExtractedPage(
            url=url,
            final_url=final_url or url,
            title=title,
            meta_description=meta_description,
            content=content,
            html=html,
            html_structure=html_structure,
            locator=located.locator,
        )

    async def extract_url(self, url: str) -> ExtractedPage:
        """
        Fetch a URL and extract its main content.

        Each configured user agent is tried in order. An agent that gets an
        HTTP error, a network failure or an error page is recorded as blocked
        and the next agent is tried.

        Raises:
            ExtractionError: NETWORK, BLOCKED or NO_CONTENT_FOUND
        """
        url = normalize_url(url)
        access = CrawlerAccess()
        last_fetch: FetchResult | None = None
        saw_error_page = False
        no_content: ExtractionError | None = None

        for agent in self.config.user_agents:
            fetch = await self.fetcher.fetch(url, user_agent=agent)
            last_fetch = fetch

            if not fetch.success or fetch.html is None:
                access.blocked_agents.append(agent)
                logger.info(
                    "fetch_agent_failed",
                    url=url,
                    status_code=fetch.status_code,
                    error=fetch.error,
                )
                continue

            try:
                page = self.extract_html(fetch.html, url, fetch.final_url)
            except ExtractionError as e:
                # Agents may be served different markup
                no_content = e
                continue

            if is_error_page(page.content, page.title):
                access.blocked_agents.append(agent)
                saw_error_page = True
                logger.info("fetch_agent_error_page", url=url, title=page.title)
                continue

            access.successful_agent = agent
            page.crawler_access = access
            logger.info(
                "content_extracted",
                url=url,
                locator=page.locator,
                words=page.word_count,
            )
            return page

        if no_content is not None:
            raise no_content
        if saw_error_page:
            raise ExtractionError(ExtractionFailure.BLOCKED, url)

        detail = last_fetch.error if last_fetch else None
        raise ExtractionError(ExtractionFailure.NETWORK, url, detail)
