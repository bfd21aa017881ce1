"""Tests for the fact-check collaborator."""

import json

import pytest

from worker.errors import DownstreamUnavailable
from worker.factcheck.checker import (
    ClaimCheck,
    ClaimStatus,
    FactCheckResult,
    LLMFactChecker,
)
from worker.generation.models import ProviderError, ProviderType
from worker.generation.providers import MockProvider


def verdicts(*statuses: str) -> str:
    claims = [
        {"claim": f"Claim {i}", "status": status, "confidence": 80, "sources": []}
        for i, status in enumerate(statuses)
    ]
    return f"Here are the claims:\n```json\n{json.dumps(claims)}\n```"


class TestFactCheckResult:
    """Tests for verdict aggregation."""

    def test_no_claims_scores_100(self) -> None:
        assert FactCheckResult().overall_score == 100

    def test_mean_of_verdict_points(self) -> None:
        result = FactCheckResult(
            claims=[
                ClaimCheck("a", ClaimStatus.VERIFIED),
                ClaimCheck("b", ClaimStatus.UNCERTAIN),
                ClaimCheck("c", ClaimStatus.UNVERIFIED),
                ClaimCheck("d", ClaimStatus.VERIFIED),
            ]
        )

        # (100 + 50 + 0 + 100) / 4
        assert result.overall_score == 62
        assert result.verified_claims == 2
        assert [c.claim for c in result.problematic_claims()] == ["b", "c"]

    def test_to_dict(self) -> None:
        d = FactCheckResult(claims=[ClaimCheck("a", ClaimStatus.UNVERIFIED)]).to_dict()

        assert d["overall_score"] == 0
        assert d["unverified_claims"] == 1
        assert d["claims"][0]["status"] == "unverified"


class TestLLMFactChecker:
    """Tests for LLMFactChecker."""

    @pytest.mark.asyncio
    async def test_parses_verdicts(self) -> None:
        provider = MockProvider(responses=[verdicts("verified", "verified", "uncertain")])
        result = await LLMFactChecker(provider).check("Some content with 45% facts.")

        assert result.total_claims == 3
        assert result.overall_score == 83
        assert provider.calls[0].purpose == "fact_check"
        assert "45% facts" in provider.calls[0].prompt

    @pytest.mark.asyncio
    async def test_unknown_status_is_uncertain(self) -> None:
        provider = MockProvider(responses=[verdicts("probably")])
        result = await LLMFactChecker(provider).check("content")

        assert result.claims[0].status == ClaimStatus.UNCERTAIN

    @pytest.mark.asyncio
    async def test_empty_array_scores_100(self) -> None:
        provider = MockProvider(responses=["[]"])
        result = await LLMFactChecker(provider).check("An opinion piece.")

        assert result.total_claims == 0
        assert result.overall_score == 100

    @pytest.mark.asyncio
    async def test_provider_failure_raises_downstream_unavailable(self) -> None:
        error = ProviderError(provider=ProviderType.MOCK, error_type="api_error", message="HTTP 503")
        checker = LLMFactChecker(MockProvider(responses=[error]))

        with pytest.raises(DownstreamUnavailable) as exc_info:
            await checker.check("content")

        assert exc_info.value.service == "fact_check"

    @pytest.mark.asyncio
    async def test_unreadable_output_raises_downstream_unavailable(self) -> None:
        checker = LLMFactChecker(MockProvider(responses=["I could not find any claims."]))

        with pytest.raises(DownstreamUnavailable):
            await checker.check("content")

    @pytest.mark.asyncio
    async def test_timeout_raises_downstream_unavailable(self) -> None:
        provider = MockProvider(responses=["[]"], delay_seconds=1.0)
        checker = LLMFactChecker(provider, timeout_seconds=0.01)

        with pytest.raises(DownstreamUnavailable) as exc_info:
            await checker.check("content")

        assert "timed out" in str(exc_info.value)
