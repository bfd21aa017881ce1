"""Versioned API surface."""

from fastapi import APIRouter

from api.config import API_VERSION
from api.routers import audits

router = APIRouter()
router.include_router(audits.router)


@router.get("/")
async def v1_root() -> dict[str, str | list[str]]:
    """List the v1 resources."""
    return {
        "version": "1",
        "api_version": API_VERSION,
        "status": "active",
        "resources": ["/v1/audits", "/v1/audits/compare", "/v1/audits/rewrite"],
    }
