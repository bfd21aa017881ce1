"""Data models for the generation layer."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from uuid import UUID, uuid4


class ProviderType(StrEnum):
    """Supported generation providers."""

    OPENROUTER = "openrouter"
    OPENAI = "openai"
    MOCK = "mock"


@dataclass
class UsageStats:
    """Token usage and cost tracking."""

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0
    estimated_cost_usd: float = 0.0

    def to_dict(self) -> dict:
        return {
            "prompt_tokens": self.prompt_tokens,
            "completion_tokens": self.completion_tokens,
            "total_tokens": self.total_tokens,
            "estimated_cost_usd": round(self.estimated_cost_usd, 6),
        }


@dataclass
class ProviderError:
    """Error from a provider."""

    provider: ProviderType
    error_type: str  # api_error, timeout, exception, bad_response, mock_failure
    message: str
    retryable: bool = True
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def to_dict(self) -> dict:
        return {
            "provider": self.provider.value,
            "error_type": self.error_type,
            "message": self.message,
            "retryable": self.retryable,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass
class GenerationRequest:
    """A single prompt for a generation model."""

    prompt: str
    system_prompt: str = ""
    id: UUID = field(default_factory=uuid4)
    purpose: str = ""  # rewrite, fact_check

    model: str = "openai/gpt-4o-mini"
    temperature: float = 0.7
    max_tokens: int = 8000

    def to_messages(self) -> list[dict[str, str]]:
        messages = []
        if self.system_prompt:
            messages.append({"role": "system", "content": self.system_prompt})
        messages.append({"role": "user", "content": self.prompt})
        return messages

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "purpose": self.purpose,
            "model": self.model,
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }


@dataclass
class GenerationResponse:
    """Response from a single generation call."""

    request_id: UUID
    provider: ProviderType
    model: str

    content: str
    raw_response: dict = field(default_factory=dict)

    usage: UsageStats = field(default_factory=UsageStats)
    latency_ms: float = 0.0

    success: bool = True
    error: ProviderError | None = None

    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def to_dict(self) -> dict:
        return {
            "request_id": str(self.request_id),
            "provider": self.provider.value,
            "model": self.model,
            "content": self.content[:500] + "..." if len(self.content) > 500 else self.content,
            "usage": self.usage.to_dict(),
            "latency_ms": round(self.latency_ms, 2),
            "success": self.success,
            "error": self.error.to_dict() if self.error else None,
            "created_at": self.created_at.isoformat(),
        }
