"""Application configuration using pydantic-settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, RedisDsn
from pydantic_settings import BaseSettings, SettingsConfigDict

API_VERSION = "0.1.0"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    env: Literal["development", "production", "test"] = "development"
    debug: bool = False
    log_level: str = "INFO"

    # API Server
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    cors_origins: list[str] = Field(default_factory=lambda: ["http://localhost:3000"])

    # Result storage (in-memory when unset)
    redis_url: RedisDsn | None = None
    result_ttl_seconds: int = 60 * 60 * 24 * 30  # 30 days

    # Crawler
    crawler_timeout: float = 15.0
    crawler_max_retries: int = 1
    crawler_max_content_chars: int = 50000
    crawler_user_agents: list[str] = Field(
        default_factory=lambda: [
            "AISOAuditBot/1.0 (+https://aiso.studio/bot)",
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
        ]
    )

    # Generation providers
    openrouter_api_key: str | None = None
    openai_api_key: str | None = None
    generation_model: str = "openai/gpt-4o-mini"
    generation_timeout_seconds: float = 90.0
    generation_max_tokens: int = 8000
    fact_check_enabled: bool = True

    # Rewrite policy
    rewrite_threshold: int = 90
    rewrite_max_iterations: int = 3

    # Benchmark
    benchmark_max_competitors: int = 3
    benchmark_max_workers: int = 4

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.env == "production"

    @property
    def generation_enabled(self) -> bool:
        """Check if a generation provider is configured (has at least one API key)."""
        return bool(self.openrouter_api_key or self.openai_api_key)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
