"""Integration tests for the full single-page audit pipeline.

These run the real extractor, scanner, scorer and fact checker end to end;
only the network and the generation model are replaced in-process.
"""

import json

import pytest

from tests.fixtures import COMPETITOR_HTML
from tests.fixtures.http import make_extractor
from worker.benchmark.comparison import Benchmarker
from worker.factcheck.checker import LLMFactChecker
from worker.generation.providers import MockProvider
from worker.scoring.geo import LocalContext
from worker.tasks.audit import AuditEngine

URL = "https://www.example.com/water-heaters"
RIVAL = "https://www.rival.com/water-heaters"


def claim_verdicts(*statuses: str) -> str:
    return json.dumps(
        [
            {"claim": f"Claim {i}", "status": status, "confidence": 90, "sources": []}
            for i, status in enumerate(statuses)
        ]
    )


@pytest.fixture
def engine(pages) -> AuditEngine:
    return AuditEngine(make_extractor(pages))


@pytest.mark.asyncio
async def test_audit_url_end_to_end(engine: AuditEngine) -> None:
    result = await engine.audit_url(URL)

    assert result.url == URL
    assert result.domain == "example.com"
    assert "tankless water heater" in result.content
    # Chrome is stripped before scoring
    assert "Subscribe to our newsletter" not in result.content
    assert "Copyright 2024" not in result.content

    assert result.html_structure is not None
    assert result.html_structure.h1_count == 1
    assert result.accessibility is not None
    assert result.crawler_access.successful_agent == "AISOAuditBot/1.0"
    assert result.fact_check is None
    assert result.scores.components.fact_check is None
    assert result.scores.components.geo is None

    d = result.to_dict()
    assert set(d) == {
        "id",
        "url",
        "domain",
        "title",
        "meta_description",
        "content",
        "word_count",
        "aiso_score",
        "scores",
        "html_structure",
        "accessibility",
        "fact_check",
        "crawler_access",
        "local_context",
        "created_at",
    }
    assert d["aiso_score"] == result.scores.aiso_score
    assert d["crawler_access"]["fully_blocked"] is False


@pytest.mark.asyncio
async def test_audit_text_skips_page_analysis(engine: AuditEngine) -> None:
    content = "Tankless water heaters heat water on demand. " * 5

    result = await engine.audit_text(content, title="Tankless water heaters")

    assert result.url is None
    assert result.domain is None
    assert result.html_structure is None
    assert result.accessibility is None
    assert 0 <= result.aiso_score <= 100


@pytest.mark.asyncio
async def test_local_context_adds_geo(engine: AuditEngine) -> None:
    context = LocalContext(city="Austin", state="TX")

    result = await engine.audit_url(URL, context)

    assert result.scores.components.geo is not None
    assert result.to_dict()["local_context"]["city"] == "Austin"


@pytest.mark.asyncio
async def test_fact_check_feeds_the_score(pages) -> None:
    provider = MockProvider(responses=[claim_verdicts("verified", "unverified")])
    engine = AuditEngine(make_extractor(pages), LLMFactChecker(provider))

    result = await engine.audit_url(URL)

    assert result.fact_check is not None
    assert result.fact_check.overall_score == 50
    assert result.scores.components.fact_check == 50
    assert "fact_check" in result.scores.weights
    assert len(provider.calls) == 1


@pytest.mark.asyncio
async def test_unreadable_fact_check_is_left_out(pages) -> None:
    provider = MockProvider(responses=["I could not find any claims, sorry."])
    engine = AuditEngine(make_extractor(pages), LLMFactChecker(provider))

    result = await engine.audit_url(URL)

    assert result.fact_check is None
    assert "fact_check" not in result.scores.weights


@pytest.mark.asyncio
async def test_benchmark_end_to_end(pages, engine: AuditEngine) -> None:
    pages[RIVAL] = (200, COMPETITOR_HTML)

    comparison = await Benchmarker(engine).compare(URL, [RIVAL])

    assert comparison.target.success
    assert comparison.competitors[0].success
    assert comparison.ranking.total == 2
    # The full article outscores the two-paragraph competitor
    assert comparison.ranking.position == 1
    assert comparison.insights.to_dict()
