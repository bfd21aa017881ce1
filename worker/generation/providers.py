"""Generation providers - unified interface for chat-completion models.

Providers never raise for transport or API failures; they return a
GenerationResponse with ``success=False`` and a ProviderError so callers
can decide how to degrade.
"""

import asyncio
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass

import httpx
import structlog

from worker.generation.models import (
    GenerationRequest,
    GenerationResponse,
    ProviderError,
    ProviderType,
    UsageStats,
)

logger = structlog.get_logger(__name__)

# Approximate pricing per 1M tokens: (input, output)
MODEL_PRICING: dict[str, tuple[float, float]] = {
    "gpt-4o": (2.5, 10.0),
    "gpt-4o-mini": (0.15, 0.6),
    "gpt-4-turbo": (10.0, 30.0),
    "openai/gpt-4o": (2.5, 10.0),
    "openai/gpt-4o-mini": (0.15, 0.6),
    "anthropic/claude-3.5-sonnet": (3.0, 15.0),
    "anthropic/claude-3-haiku": (0.25, 1.25),
}


@dataclass
class ProviderConfig:
    """Configuration for a generation provider."""

    api_key: str = ""
    base_url: str = ""
    timeout_seconds: float = 90.0


class GenerationProvider(ABC):
    """Abstract base class for generation providers."""

    provider_type: ProviderType

    def __init__(self, config: ProviderConfig):
        self.config = config

    @abstractmethod
    async def generate(self, request: GenerationRequest) -> GenerationResponse:
        """Run a single generation request."""
        ...

    def _estimate_cost(self, model: str, usage: UsageStats) -> float:
        input_price, output_price = MODEL_PRICING.get(model, (1.0, 3.0))
        return (usage.prompt_tokens / 1_000_000) * input_price + (
            usage.completion_tokens / 1_000_000
        ) * output_price

    def _failure(
        self,
        request: GenerationRequest,
        model: str,
        start_time: float,
        error_type: str,
        message: str,
        retryable: bool = True,
    ) -> GenerationResponse:
        latency_ms = (time.perf_counter() - start_time) * 1000
        logger.warning(
            "generation_failed",
            provider=self.provider_type.value,
            model=model,
            error_type=error_type,
            message=message[:200],
        )
        return GenerationResponse(
            request_id=request.id,
            provider=self.provider_type,
            model=model,
            content="",
            success=False,
            latency_ms=latency_ms,
            error=ProviderError(
                provider=self.provider_type,
                error_type=error_type,
                message=message,
                retryable=retryable,
            ),
        )


class ChatCompletionsProvider(GenerationProvider):
    """Shared client for OpenAI-compatible /chat/completions endpoints."""

    default_base_url = ""

    def __init__(self, config: ProviderConfig, transport: httpx.AsyncBaseTransport | None = None):
        super().__init__(config)
        if not config.base_url:
            config.base_url = self.default_base_url
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.config.api_key}",
            "Content-Type": "application/json",
        }

    def _model_name(self, model: str) -> str:
        return model

    async def generate(self, request: GenerationRequest) -> GenerationResponse:
        start_time = time.perf_counter()
        model = self._model_name(request.model)

        payload = {
            "model": model,
            "messages": request.to_messages(),
            "temperature": request.temperature,
            "max_tokens": request.max_tokens,
        }

        try:
            async with httpx.AsyncClient(
                timeout=self.config.timeout_seconds, transport=self._transport
            ) as client:
                response = await client.post(
                    f"{self.config.base_url}/chat/completions",
                    headers=self._headers(),
                    json=payload,
                )
        except httpx.TimeoutException:
            return self._failure(
                request,
                model,
                start_time,
                "timeout",
                f"Request timed out after {self.config.timeout_seconds}s",
            )
        except httpx.HTTPError as e:
            return self._failure(request, model, start_time, "exception", str(e))

        if response.status_code != 200:
            return self._failure(
                request,
                model,
                start_time,
                "api_error",
                f"HTTP {response.status_code}: {response.text}",
                retryable=response.status_code >= 500,
            )

        try:
            data = response.json()
            content = data["choices"][0]["message"]["content"] or ""
        except (ValueError, KeyError, IndexError, TypeError) as e:
            return self._failure(
                request, model, start_time, "bad_response", f"Malformed response: {e}", False
            )

        usage_data = data.get("usage") or {}
        usage = UsageStats(
            prompt_tokens=usage_data.get("prompt_tokens", 0),
            completion_tokens=usage_data.get("completion_tokens", 0),
            total_tokens=usage_data.get("total_tokens", 0),
        )
        usage.estimated_cost_usd = self._estimate_cost(model, usage)

        return GenerationResponse(
            request_id=request.id,
            provider=self.provider_type,
            model=model,
            content=content,
            raw_response=data,
            usage=usage,
            latency_ms=(time.perf_counter() - start_time) * 1000,
            success=True,
        )


class OpenRouterProvider(ChatCompletionsProvider):
    """OpenRouter aggregator provider - primary generation provider."""

    provider_type = ProviderType.OPENROUTER
    default_base_url = "https://openrouter.ai/api/v1"

    def _headers(self) -> dict[str, str]:
        headers = super()._headers()
        headers["HTTP-Referer"] = "https://aiso.studio"
        headers["X-Title"] = "AISO Content Audit"
        return headers


class OpenAIProvider(ChatCompletionsProvider):
    """Direct OpenAI provider - fallback."""

    provider_type = ProviderType.OPENAI
    default_base_url = "https://api.openai.com/v1"

    def _model_name(self, model: str) -> str:
        # OpenRouter names carry a vendor prefix
        return model.removeprefix("openai/")


class MockProvider(GenerationProvider):
    """
    Scripted provider for tests.

    Responses are served in order; the last one repeats once the script runs
    out. A ProviderError entry produces a failed response. ``delay_seconds``
    makes every call sleep first, for exercising caller timeouts.
    """

    provider_type = ProviderType.MOCK

    def __init__(
        self,
        responses: list[str | ProviderError] | None = None,
        delay_seconds: float = 0.0,
        config: ProviderConfig | None = None,
    ):
        super().__init__(config or ProviderConfig())
        self.responses = list(responses or [])
        self.delay_seconds = delay_seconds
        self.calls: list[GenerationRequest] = []

    async def generate(self, request: GenerationRequest) -> GenerationResponse:
        self.calls.append(request)
        if self.delay_seconds:
            await asyncio.sleep(self.delay_seconds)

        if self.responses:
            index = min(len(self.calls), len(self.responses)) - 1
            scripted = self.responses[index]
        else:
            scripted = ""

        if isinstance(scripted, ProviderError):
            return GenerationResponse(
                request_id=request.id,
                provider=self.provider_type,
                model=request.model,
                content="",
                success=False,
                latency_ms=1.0,
                error=scripted,
            )

        usage = UsageStats(
            prompt_tokens=len(request.prompt.split()) * 4,
            completion_tokens=len(scripted.split()) * 4,
        )
        usage.total_tokens = usage.prompt_tokens + usage.completion_tokens

        return GenerationResponse(
            request_id=request.id,
            provider=self.provider_type,
            model=request.model,
            content=scripted,
            usage=usage,
            latency_ms=1.0,
            success=True,
        )


def get_provider(
    provider_type: ProviderType,
    config: ProviderConfig | None = None,
) -> GenerationProvider:
    """Factory function to get a generation provider."""
    if config is None:
        config = ProviderConfig()

    providers: dict[ProviderType, type[GenerationProvider]] = {
        ProviderType.OPENROUTER: OpenRouterProvider,
        ProviderType.OPENAI: OpenAIProvider,
        ProviderType.MOCK: MockProvider,
    }

    provider_class = providers.get(provider_type)
    if provider_class is None:
        raise ValueError(f"Unknown provider type: {provider_type}")

    if provider_class is MockProvider:
        return MockProvider(config=config)
    return provider_class(config)
