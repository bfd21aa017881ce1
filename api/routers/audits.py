"""Audit, benchmark and rewrite endpoints."""

import uuid

import structlog
from fastapi import APIRouter, status

from api.deps import (
    AuditEngineDep,
    BenchmarkerDep,
    FactCheckerDep,
    ProviderDep,
    ResultStoreDep,
    SettingsDep,
)
from api.exceptions import ExternalServiceError, NotFoundError
from api.schemas.audit import AuditCreate, CompareRequest, RewriteRequest
from api.schemas.responses import ErrorResponse, SuccessResponse
from worker.rewrite.controller import RewriteConfig, RewriteController

router = APIRouter(prefix="/audits", tags=["audits"])
logger = structlog.get_logger()


@router.post(
    "",
    response_model=SuccessResponse[dict],
    status_code=status.HTTP_201_CREATED,
    summary="Audit a page or raw content",
    responses={422: {"model": ErrorResponse}},
)
async def create_audit(
    audit_in: AuditCreate,
    engine: AuditEngineDep,
    store: ResultStoreDep,
) -> SuccessResponse[dict]:
    """
    Audit a URL or a block of raw content.

    - URLs are fetched, extracted, scanned for accessibility and scored
    - Raw content is scored directly
    - The result is stored and can be read back by id
    """
    local_context = audit_in.local_context.to_domain() if audit_in.local_context else None

    if audit_in.url is not None:
        result = await engine.audit_url(audit_in.url, local_context)
    else:
        result = await engine.audit_text(
            audit_in.content,
            title=audit_in.title or "",
            meta_description=audit_in.meta_description or "",
            local_context=local_context,
        )

    payload = result.to_dict()
    store.save(result.id, payload)
    logger.info("Audit stored", audit_id=result.id, aiso_score=result.aiso_score)
    return SuccessResponse(data=payload)


@router.post(
    "/compare",
    response_model=SuccessResponse[dict],
    status_code=status.HTTP_201_CREATED,
    summary="Benchmark a page against competitors",
    responses={422: {"model": ErrorResponse}},
)
async def compare_pages(
    compare_in: CompareRequest,
    benchmarker: BenchmarkerDep,
    store: ResultStoreDep,
) -> SuccessResponse[dict]:
    """
    Audit a target URL and its competitors, then rank and compare them.

    Failed competitor audits are reported per URL and do not fail the request.
    """
    local_context = compare_in.local_context.to_domain() if compare_in.local_context else None
    comparison = await benchmarker.compare(
        compare_in.target_url,
        compare_in.competitor_urls,
        local_context,
    )

    comparison_id = str(uuid.uuid4())
    payload = {"id": comparison_id, **comparison.to_dict()}
    store.save(comparison_id, payload)
    return SuccessResponse(data=payload)


@router.post(
    "/rewrite",
    response_model=SuccessResponse[dict],
    status_code=status.HTTP_201_CREATED,
    summary="Rewrite content toward a target score",
    responses={502: {"model": ErrorResponse}},
)
async def rewrite_content(
    rewrite_in: RewriteRequest,
    settings: SettingsDep,
    provider: ProviderDep,
    fact_checker: FactCheckerDep,
    store: ResultStoreDep,
) -> SuccessResponse[dict]:
    """
    Run an iterative rewrite session.

    Returns the best-scoring version found, which may be the original
    content when no rewrite improved on it.
    """
    if provider is None:
        raise ExternalServiceError("generation", "no generation provider is configured")

    config = RewriteConfig(
        threshold=(
            rewrite_in.threshold
            if rewrite_in.threshold is not None
            else settings.rewrite_threshold
        ),
        max_iterations=(
            rewrite_in.max_iterations
            if rewrite_in.max_iterations is not None
            else settings.rewrite_max_iterations
        ),
        generation_timeout_seconds=settings.generation_timeout_seconds,
        model=settings.generation_model,
        max_tokens=settings.generation_max_tokens,
    )
    controller = RewriteController(provider, config, fact_checker)
    session = await controller.run(
        rewrite_in.content,
        title=rewrite_in.title or "",
        meta_description=rewrite_in.meta_description or "",
        local_context=rewrite_in.local_context.to_domain() if rewrite_in.local_context else None,
    )

    session_id = str(uuid.uuid4())
    payload = {"id": session_id, **session.to_dict()}
    store.save(session_id, payload)
    return SuccessResponse(data=payload)


@router.get(
    "/{audit_id}",
    response_model=SuccessResponse[dict],
    summary="Get a stored audit",
    responses={404: {"model": ErrorResponse}},
)
async def get_audit(audit_id: str, store: ResultStoreDep) -> SuccessResponse[dict]:
    """Read back a stored audit, comparison or rewrite session."""
    payload = store.get(audit_id)
    if payload is None:
        raise NotFoundError("Audit", audit_id)
    return SuccessResponse(data=payload)
