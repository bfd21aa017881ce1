"""HTTP fetcher with retry logic and user-agent fallback."""

import asyncio
from dataclasses import dataclass, field
from datetime import UTC, datetime

import httpx
import structlog

logger = structlog.get_logger(__name__)

ACCEPT_HEADER = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"


@dataclass
class FetchResult:
    """Result of fetching a URL."""

    url: str
    final_url: str  # After redirects
    status_code: int
    content_type: str | None
    html: str | None
    error: str | None
    fetch_time_ms: int
    fetched_at: datetime
    user_agent: str = ""

    @property
    def success(self) -> bool:
        """Check if fetch was successful."""
        return 200 <= self.status_code < 300 and self.html is not None


@dataclass
class CrawlerAccess:
    """Which user agents were turned away while fetching a page."""

    blocked_agents: list[str] = field(default_factory=list)
    successful_agent: str | None = None

    @property
    def fully_blocked(self) -> bool:
        return self.successful_agent is None and bool(self.blocked_agents)

    def to_dict(self) -> dict:
        return {
            "blocked_agents": self.blocked_agents,
            "successful_agent": self.successful_agent,
            "fully_blocked": self.fully_blocked,
        }


def _looks_like_markup(content_type: str) -> bool:
    content_type = content_type.lower()
    if not content_type:
        return True
    return "html" in content_type or "xml" in content_type or "text/plain" in content_type


class Fetcher:
    """HTTP fetcher with retries and a bounded per-request timeout."""

    def __init__(
        self,
        user_agent: str,
        timeout: float = 15.0,
        max_retries: int = 1,
        retry_delay: float = 1.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.user_agent = user_agent
        self.timeout = timeout
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            max_redirects=5,
            transport=self._transport,
        )

    async def fetch(self, url: str, user_agent: str | None = None) -> FetchResult:
        """
        Fetch a URL with retries.

        Args:
            url: The URL to fetch
            user_agent: Override for the configured user agent

        Returns:
            FetchResult with response data or error
        """
        agent = user_agent or self.user_agent
        start_time = datetime.now(UTC)
        error: str | None = None

        for attempt in range(self.max_retries + 1):
            try:
                async with self._client() as client:
                    response = await client.get(
                        url,
                        headers={
                            "User-Agent": agent,
                            "Accept": ACCEPT_HEADER,
                            "Accept-Language": "en-US,en;q=0.5",
                        },
                    )

                fetch_time = int((datetime.now(UTC) - start_time).total_seconds() * 1000)
                content_type = response.headers.get("content-type", "")

                html = None
                error = None
                if response.is_success and _looks_like_markup(content_type):
                    html = response.text
                elif not response.is_success:
                    error = f"HTTP error: {response.status_code}"
                else:
                    error = f"Unsupported content type: {content_type}"

                # Server errors are worth another attempt, client errors are not
                if response.status_code >= 500 and attempt < self.max_retries:
                    await asyncio.sleep(self.retry_delay * (attempt + 1))
                    continue

                return FetchResult(
                    url=url,
                    final_url=str(response.url),
                    status_code=response.status_code,
                    content_type=content_type,
                    html=html,
                    error=error,
                    fetch_time_ms=fetch_time,
                    fetched_at=start_time,
                    user_agent=agent,
                )

            except httpx.TimeoutException:
                error = f"Request timed out after {self.timeout}s"
                if attempt < self.max_retries:
                    logger.warning("fetch_timeout_retry", url=url, attempt=attempt + 1)
                    await asyncio.sleep(self.retry_delay * (attempt + 1))
                    continue

            except (httpx.HTTPError, httpx.InvalidURL) as e:
                error = str(e) or type(e).__name__
                if attempt < self.max_retries:
                    logger.warning(
                        "fetch_error_retry",
                        url=url,
                        error=error,
                        attempt=attempt + 1,
                    )
                    await asyncio.sleep(self.retry_delay * (attempt + 1))
                    continue

        # All retries exhausted
        fetch_time = int((datetime.now(UTC) - start_time).total_seconds() * 1000)
        return FetchResult(
            url=url,
            final_url=url,
            status_code=0,
            content_type=None,
            html=None,
            error=error,
            fetch_time_ms=fetch_time,
            fetched_at=start_time,
            user_agent=agent,
        )
