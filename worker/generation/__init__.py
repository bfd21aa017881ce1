"""Generation collaborator: chat-completion providers and payload parsing."""

from worker.generation.models import (
    GenerationRequest,
    GenerationResponse,
    ProviderError,
    ProviderType,
    UsageStats,
)
from worker.generation.parser import ParsedPayload, ParseError, parse_array, parse_payload
from worker.generation.providers import (
    GenerationProvider,
    MockProvider,
    OpenAIProvider,
    OpenRouterProvider,
    ProviderConfig,
    get_provider,
)

__all__ = [
    "GenerationProvider",
    "GenerationRequest",
    "GenerationResponse",
    "MockProvider",
    "OpenAIProvider",
    "OpenRouterProvider",
    "ParseError",
    "ParsedPayload",
    "ProviderConfig",
    "ProviderError",
    "ProviderType",
    "UsageStats",
    "get_provider",
    "parse_array",
    "parse_payload",
]
