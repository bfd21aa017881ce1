"""Error taxonomy for the audit pipeline.

Only ``ExtractionError`` is surfaced to callers. The others are raised and
caught inside the pipeline: a ``GenerationParseError`` turns a rewrite
iteration into a no-op, ``DownstreamUnavailable`` drops the fact-check term
from the composite, and ``PartialBatchFailure`` is recorded on a single
benchmark outcome.
"""

from enum import StrEnum


class AuditPipelineError(Exception):
    """Base class for audit pipeline errors."""


class ExtractionFailure(StrEnum):
    """Why content extraction failed."""

    NETWORK = "network"
    NO_CONTENT_FOUND = "no_content_found"
    BLOCKED = "blocked"


_EXTRACTION_MESSAGES = {
    ExtractionFailure.NETWORK: "Could not fetch the page",
    ExtractionFailure.NO_CONTENT_FOUND: (
        "Could not find meaningful content on this page; "
        "the content may require script execution to render"
    ),
    ExtractionFailure.BLOCKED: (
        "The website is blocking automated access (bot protection, captcha "
        "or login wall); try auditing a different URL or paste the content directly"
    ),
}


class ExtractionError(AuditPipelineError):
    """Content could not be extracted from a URL."""

    def __init__(self, reason: ExtractionFailure, url: str, detail: str | None = None):
        self.reason = reason
        self.url = url
        self.detail = detail
        message = _EXTRACTION_MESSAGES[reason]
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class GenerationParseError(AuditPipelineError):
    """Generated text did not contain a usable structured payload."""


class DownstreamUnavailable(AuditPipelineError):
    """A collaborator service (fact-check, generation) could not be reached."""

    def __init__(self, service: str, message: str):
        self.service = service
        super().__init__(f"{service}: {message}")


class PartialBatchFailure(AuditPipelineError):
    """One URL in a benchmark batch failed to audit."""

    def __init__(self, url: str, cause: BaseException):
        self.url = url
        self.cause = cause
        super().__init__(f"{url}: {cause}")
