"""Tests for generation providers."""

import json

import httpx
import pytest

from worker.generation.models import GenerationRequest, ProviderError, ProviderType, UsageStats
from worker.generation.providers import (
    MockProvider,
    OpenAIProvider,
    OpenRouterProvider,
    ProviderConfig,
    get_provider,
)


def completion(content: str) -> dict:
    return {
        "choices": [{"message": {"role": "assistant", "content": content}}],
        "usage": {"prompt_tokens": 1000, "completion_tokens": 500, "total_tokens": 1500},
    }


class TestChatCompletionsProvider:
    """Tests for the OpenAI-compatible HTTP providers."""

    @pytest.mark.asyncio
    async def test_openrouter_success(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=completion("Rewritten text"))

        provider = OpenRouterProvider(
            ProviderConfig(api_key="sk-test"), transport=httpx.MockTransport(handler)
        )
        response = await provider.generate(
            GenerationRequest(prompt="Rewrite this", system_prompt="You are an editor")
        )

        assert response.success
        assert response.content == "Rewritten text"
        assert response.provider == ProviderType.OPENROUTER
        assert response.usage.total_tokens == 1500
        assert response.usage.estimated_cost_usd > 0

        request = seen[0]
        assert str(request.url) == "https://openrouter.ai/api/v1/chat/completions"
        assert request.headers["Authorization"] == "Bearer sk-test"
        assert request.headers["X-Title"] == "AISO Content Audit"
        body = json.loads(request.content)
        assert body["model"] == "openai/gpt-4o-mini"
        assert body["messages"][0] == {"role": "system", "content": "You are an editor"}

    @pytest.mark.asyncio
    async def test_openai_strips_vendor_prefix(self) -> None:
        models: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            models.append(json.loads(request.content)["model"])
            return httpx.Response(200, json=completion("ok"))

        provider = OpenAIProvider(ProviderConfig(api_key="sk"), transport=httpx.MockTransport(handler))
        response = await provider.generate(GenerationRequest(prompt="p"))

        assert response.success
        assert models == ["gpt-4o-mini"]

    @pytest.mark.asyncio
    async def test_api_error_is_returned_not_raised(self) -> None:
        provider = OpenRouterProvider(
            ProviderConfig(api_key="sk"),
            transport=httpx.MockTransport(lambda request: httpx.Response(503, text="overloaded")),
        )
        response = await provider.generate(GenerationRequest(prompt="p"))

        assert not response.success
        assert response.error.error_type == "api_error"
        assert response.error.retryable

    @pytest.mark.asyncio
    async def test_client_error_is_not_retryable(self) -> None:
        provider = OpenRouterProvider(
            ProviderConfig(api_key="bad"),
            transport=httpx.MockTransport(lambda request: httpx.Response(401, text="unauthorized")),
        )
        response = await provider.generate(GenerationRequest(prompt="p"))

        assert response.error.error_type == "api_error"
        assert not response.error.retryable

    @pytest.mark.asyncio
    async def test_timeout(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        provider = OpenRouterProvider(ProviderConfig(api_key="sk"), transport=httpx.MockTransport(handler))
        response = await provider.generate(GenerationRequest(prompt="p"))

        assert not response.success
        assert response.error.error_type == "timeout"

    @pytest.mark.asyncio
    async def test_connection_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        provider = OpenRouterProvider(ProviderConfig(api_key="sk"), transport=httpx.MockTransport(handler))
        response = await provider.generate(GenerationRequest(prompt="p"))

        assert response.error.error_type == "exception"

    @pytest.mark.asyncio
    async def test_malformed_body(self) -> None:
        provider = OpenRouterProvider(
            ProviderConfig(api_key="sk"),
            transport=httpx.MockTransport(lambda request: httpx.Response(200, json={"choices": []})),
        )
        response = await provider.generate(GenerationRequest(prompt="p"))

        assert response.error.error_type == "bad_response"
        assert not response.error.retryable


class TestMockProvider:
    """Tests for the scripted mock provider."""

    @pytest.mark.asyncio
    async def test_serves_script_in_order_then_repeats_last(self) -> None:
        provider = MockProvider(responses=["first", "second"])
        contents = [(await provider.generate(GenerationRequest(prompt="p"))).content for _ in range(3)]

        assert contents == ["first", "second", "second"]
        assert len(provider.calls) == 3

    @pytest.mark.asyncio
    async def test_scripted_failure(self) -> None:
        error = ProviderError(provider=ProviderType.MOCK, error_type="api_error", message="down")
        provider = MockProvider(responses=[error])
        response = await provider.generate(GenerationRequest(prompt="p"))

        assert not response.success
        assert response.error is error

    @pytest.mark.asyncio
    async def test_instances_are_independent(self) -> None:
        a = MockProvider(responses=["a1", "a2"])
        b = MockProvider(responses=["b1", "b2"])
        await a.generate(GenerationRequest(prompt="p"))

        response = await b.generate(GenerationRequest(prompt="p"))
        assert response.content == "b1"


class TestGetProvider:
    def test_factory(self) -> None:
        assert isinstance(get_provider(ProviderType.OPENROUTER, ProviderConfig(api_key="k")), OpenRouterProvider)
        assert isinstance(get_provider(ProviderType.OPENAI), OpenAIProvider)
        assert isinstance(get_provider(ProviderType.MOCK), MockProvider)

    def test_estimate_cost(self) -> None:
        provider = get_provider(ProviderType.OPENAI)
        cost = provider._estimate_cost("gpt-4o-mini", UsageStats(prompt_tokens=1_000_000))

        assert cost == pytest.approx(0.15)
