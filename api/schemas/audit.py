"""Audit, comparison and rewrite request schemas."""

from pydantic import BaseModel, Field, field_validator, model_validator

from worker.crawler.url import normalize_url
from worker.scoring.geo import LocalContext

MIN_CONTENT_LENGTH = 100


def _normalize_http_url(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("URL must not be empty")
    if "://" not in value:
        value = f"https://{value}"
    if not value.startswith(("http://", "https://")):
        raise ValueError("Only http and https URLs are supported")
    return normalize_url(value)


class LocalContextIn(BaseModel):
    """Location details enabling the GEO dimension."""

    city: str = Field(..., min_length=1, max_length=100)
    state: str | None = Field(None, max_length=100)
    service_areas: list[str] = Field(default_factory=list, max_length=20)
    neighborhoods: list[str] = Field(default_factory=list, max_length=20)

    def to_domain(self) -> LocalContext:
        return LocalContext(
            city=self.city,
            state=self.state or "",
            service_areas=list(self.service_areas),
            neighborhoods=list(self.neighborhoods),
        )


class AuditCreate(BaseModel):
    """
    Request to audit a page.

    Exactly one of ``url`` or ``content`` must be given. Raw content skips
    extraction and the accessibility scan.
    """

    url: str | None = None
    content: str | None = None
    title: str | None = Field(None, max_length=500)
    meta_description: str | None = Field(None, max_length=1000)
    local_context: LocalContextIn | None = None

    @field_validator("url")
    @classmethod
    def normalize_target_url(cls, v: str | None) -> str | None:
        return _normalize_http_url(v) if v is not None else None

    @model_validator(mode="after")
    def check_source(self) -> "AuditCreate":
        if (self.url is None) == (self.content is None):
            raise ValueError("Provide exactly one of 'url' or 'content'")
        if self.content is not None and len(self.content.strip()) < MIN_CONTENT_LENGTH:
            raise ValueError(f"Content must be at least {MIN_CONTENT_LENGTH} characters")
        return self


class CompareRequest(BaseModel):
    """Request to benchmark a target page against competitors."""

    target_url: str
    competitor_urls: list[str] = Field(..., min_length=1)
    local_context: LocalContextIn | None = None

    @field_validator("target_url")
    @classmethod
    def normalize_target(cls, v: str) -> str:
        return _normalize_http_url(v)

    @field_validator("competitor_urls")
    @classmethod
    def normalize_competitors(cls, v: list[str]) -> list[str]:
        return [_normalize_http_url(url) for url in v]


class RewriteRequest(BaseModel):
    """Request to iteratively rewrite content toward a score threshold."""

    content: str = Field(..., min_length=MIN_CONTENT_LENGTH)
    title: str | None = Field(None, max_length=500)
    meta_description: str | None = Field(None, max_length=1000)
    threshold: int | None = Field(None, ge=0, le=100)
    max_iterations: int | None = Field(None, ge=0, le=10)
    local_context: LocalContextIn | None = None
