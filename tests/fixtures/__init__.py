"""Shared HTML pages and generation payloads for tests."""

from tests.fixtures.pages import (
    ARTICLE_HTML,
    BLOCKED_HTML,
    COMPETITOR_HTML,
    EMPTY_SHELL_HTML,
    article_page,
    rewrite_payload,
)

__all__ = [
    "ARTICLE_HTML",
    "BLOCKED_HTML",
    "COMPETITOR_HTML",
    "EMPTY_SHELL_HTML",
    "article_page",
    "rewrite_payload",
]
