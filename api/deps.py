"""FastAPI dependencies for dependency injection."""

from functools import lru_cache
from typing import Annotated

import structlog
from fastapi import Depends

from api.config import Settings, get_settings
from worker.benchmark.comparison import BenchmarkConfig, Benchmarker
from worker.extraction.extractor import ContentExtractor, ExtractorConfig
from worker.factcheck.checker import FactChecker, LLMFactChecker
from worker.generation.providers import (
    GenerationProvider,
    OpenAIProvider,
    OpenRouterProvider,
    ProviderConfig,
)
from worker.storage.results import InMemoryResultStore, RedisResultStore, ResultStore
from worker.tasks.audit import AuditEngine

logger = structlog.get_logger()

__all__ = [
    "AuditEngineDep",
    "BenchmarkerDep",
    "FactCheckerDep",
    "ProviderDep",
    "ResultStoreDep",
    "SettingsDep",
]


# Settings dependency
SettingsDep = Annotated[Settings, Depends(get_settings)]


@lru_cache
def get_result_store() -> ResultStore:
    """Get the process-wide result store (Redis when configured)."""
    settings = get_settings()
    if settings.redis_url is None:
        logger.info("Using in-memory result store")
        return InMemoryResultStore()

    from worker.redis import get_redis_connection

    return RedisResultStore(get_redis_connection(), ttl_seconds=settings.result_ttl_seconds)


ResultStoreDep = Annotated[ResultStore, Depends(get_result_store)]


def get_generation_provider(settings: SettingsDep) -> GenerationProvider | None:
    """OpenRouter when configured, OpenAI as fallback, otherwise no provider."""
    if settings.openrouter_api_key:
        return OpenRouterProvider(
            ProviderConfig(
                api_key=settings.openrouter_api_key,
                timeout_seconds=settings.generation_timeout_seconds,
            )
        )
    if settings.openai_api_key:
        return OpenAIProvider(
            ProviderConfig(
                api_key=settings.openai_api_key,
                timeout_seconds=settings.generation_timeout_seconds,
            )
        )
    return None


ProviderDep = Annotated[GenerationProvider | None, Depends(get_generation_provider)]


def get_fact_checker(settings: SettingsDep, provider: ProviderDep) -> FactChecker | None:
    if provider is None or not settings.fact_check_enabled:
        return None
    return LLMFactChecker(
        provider,
        model=settings.generation_model,
        timeout_seconds=settings.generation_timeout_seconds,
    )


FactCheckerDep = Annotated[FactChecker | None, Depends(get_fact_checker)]


def get_audit_engine(settings: SettingsDep, fact_checker: FactCheckerDep) -> AuditEngine:
    extractor = ContentExtractor(
        ExtractorConfig(
            user_agents=settings.crawler_user_agents,
            timeout=settings.crawler_timeout,
            max_retries=settings.crawler_max_retries,
            max_content_length=settings.crawler_max_content_chars,
        )
    )
    return AuditEngine(extractor=extractor, fact_checker=fact_checker)


AuditEngineDep = Annotated[AuditEngine, Depends(get_audit_engine)]


def get_benchmarker(settings: SettingsDep, engine: AuditEngineDep) -> Benchmarker:
    return Benchmarker(
        engine,
        BenchmarkConfig(
            max_competitors=settings.benchmark_max_competitors,
            max_workers=settings.benchmark_max_workers,
        ),
    )


BenchmarkerDep = Annotated[Benchmarker, Depends(get_benchmarker)]
