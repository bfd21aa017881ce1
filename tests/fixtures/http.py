"""In-process HTTP collaborators for fetch and extraction tests."""

import httpx

from worker.crawler.fetcher import Fetcher
from worker.extraction.extractor import ContentExtractor, ExtractorConfig

Pages = dict[str, tuple[int, str]]

NOT_FOUND = (404, "<html><head><title>404 Not Found</title></head></html>")


def make_transport(pages: Pages) -> httpx.MockTransport:
    """
    Serve canned pages keyed by URL.

    Values are ``(status_code, html)``; unknown URLs get a 404.
    """

    def handler(request: httpx.Request) -> httpx.Response:
        status_code, html = pages.get(str(request.url), NOT_FOUND)
        return httpx.Response(
            status_code,
            text=html,
            headers={"content-type": "text/html; charset=utf-8"},
        )

    return httpx.MockTransport(handler)


def make_extractor(pages: Pages, user_agents: list[str] | None = None) -> ContentExtractor:
    """Build a ContentExtractor whose fetcher never leaves the process."""
    config = ExtractorConfig(user_agents=user_agents or ["AISOAuditBot/1.0", "Mozilla/5.0 Chrome"])
    fetcher = Fetcher(
        user_agent=config.user_agents[0],
        timeout=config.timeout,
        max_retries=0,
        retry_delay=0,
        transport=make_transport(pages),
    )
    return ContentExtractor(config, fetcher)
