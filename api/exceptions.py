"""API-level exceptions, rendered as error envelopes by the app's handlers."""

from typing import Any

from fastapi import status

from api.schemas.responses import ErrorCode


class AisoError(Exception):
    """Base exception for the AISO audit API."""

    def __init__(
        self,
        message: str,
        code: str = "error",
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: dict[str, Any] | None = None,
        field: str | None = None,
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        self.field = field
        super().__init__(message)


class NotFoundError(AisoError):
    """No stored artifact for the requested id."""

    def __init__(self, resource: str, identifier: str | None = None):
        message = f"{resource} not found"
        if identifier:
            message = f"{resource} with id '{identifier}' not found"
        super().__init__(
            message=message,
            code=ErrorCode.NOT_FOUND,
            status_code=status.HTTP_404_NOT_FOUND,
        )


class ValidationError(AisoError):
    """Input that passed schema validation but is unusable, e.g. a competitor count."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(
            message=message,
            code=ErrorCode.VALIDATION_ERROR,
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            field=field,
        )


class ConflictError(AisoError):
    """An artifact already exists for this id; stored results are write-once."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            code=ErrorCode.CONFLICT,
            status_code=status.HTTP_409_CONFLICT,
        )


class ExternalServiceError(AisoError):
    """A collaborator the request depends on is missing or failed."""

    def __init__(self, service: str, message: str):
        super().__init__(
            message=f"{service}: {message}",
            code=ErrorCode.EXTERNAL_SERVICE_ERROR,
            status_code=status.HTTP_502_BAD_GATEWAY,
            details={"service": service},
        )
