"""Response envelopes shared by every endpoint.

Successful calls return ``{"data": ...}``; failures return
``{"error": {"code", "message", "field"?, "details"?}}``.
"""

from enum import StrEnum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ErrorCode(StrEnum):
    """Machine-readable error codes returned to API callers."""

    NOT_FOUND = "not_found"
    VALIDATION_ERROR = "validation_error"
    CONFLICT = "conflict"
    EXTERNAL_SERVICE_ERROR = "external_service_error"
    EXTRACTION_FAILED = "extraction_failed"
    INTERNAL_ERROR = "internal_error"


class ErrorDetail(BaseModel):
    code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Actionable, human-readable message")
    field: str | None = Field(None, description="Request field that failed validation")
    details: dict[str, Any] | None = Field(None, description="Extra context, e.g. the failure reason")


class ErrorResponse(BaseModel):
    """Error envelope."""

    error: ErrorDetail

    @classmethod
    def build(
        cls,
        code: str,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Render an envelope as a JSON-ready dict, leaving out empty keys."""
        envelope = cls(error=ErrorDetail(code=code, message=message, field=field, details=details))
        return envelope.model_dump(exclude_none=True)


class SuccessResponse(BaseModel, Generic[T]):
    """Success envelope."""

    data: T
