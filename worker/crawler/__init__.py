"""Crawler package for page fetching."""

from worker.crawler.fetcher import CrawlerAccess, Fetcher, FetchResult
from worker.crawler.url import (
    extract_domain,
    is_countable_link,
    is_internal_link,
    normalize_url,
    strip_www,
)

__all__ = [
    # Fetcher
    "CrawlerAccess",
    "Fetcher",
    "FetchResult",
    # URL utilities
    "extract_domain",
    "is_countable_link",
    "is_internal_link",
    "normalize_url",
    "strip_www",
]
