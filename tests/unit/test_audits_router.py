"""Tests for the audit, compare and rewrite endpoints."""

import pytest
from httpx import AsyncClient

from api.deps import get_generation_provider
from api.main import app
from tests.fixtures import BLOCKED_HTML, COMPETITOR_HTML, rewrite_payload

TARGET = "https://www.example.com/water-heaters"
RIVAL = "https://www.rival.com/water-heaters"

RAW_CONTENT = (
    "Tankless water heaters heat water on demand. They last longer than tank models "
    "and use less energy, which makes them a good fit for most homes."
)


@pytest.mark.asyncio
async def test_audit_url(client: AsyncClient) -> None:
    response = await client.post("/v1/audits", json={"url": TARGET})

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["url"] == TARGET
    assert data["domain"] == "example.com"
    assert 0 <= data["aiso_score"] <= 100
    assert data["accessibility"] is not None
    assert data["html_structure"] is not None
    assert data["scores"]["components"]["geo"] is None


@pytest.mark.asyncio
async def test_audit_url_without_scheme(client: AsyncClient) -> None:
    response = await client.post("/v1/audits", json={"url": "www.example.com/water-heaters"})

    assert response.status_code == 201
    assert response.json()["data"]["url"] == TARGET


@pytest.mark.asyncio
async def test_audit_is_stored(client: AsyncClient) -> None:
    created = (await client.post("/v1/audits", json={"url": TARGET})).json()["data"]

    response = await client.get(f"/v1/audits/{created['id']}")

    assert response.status_code == 200
    assert response.json()["data"]["aiso_score"] == created["aiso_score"]


@pytest.mark.asyncio
async def test_audit_content(client: AsyncClient) -> None:
    response = await client.post(
        "/v1/audits",
        json={"content": RAW_CONTENT, "title": "Tankless water heaters"},
    )

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["url"] is None
    assert data["title"] == "Tankless water heaters"
    assert data["accessibility"] is None


@pytest.mark.asyncio
async def test_audit_with_local_context(client: AsyncClient) -> None:
    response = await client.post(
        "/v1/audits",
        json={
            "content": RAW_CONTENT,
            "local_context": {"city": "Austin", "state": "TX"},
        },
    )

    assert response.status_code == 201
    assert response.json()["data"]["scores"]["components"]["geo"] is not None


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [
        {},
        {"url": TARGET, "content": RAW_CONTENT},
        {"content": "too short"},
        {"url": "ftp://example.com/file"},
    ],
)
async def test_audit_rejects_invalid_input(client: AsyncClient, body: dict) -> None:
    response = await client.post("/v1/audits", json=body)

    assert response.status_code == 422
    assert response.json()["error"]["code"] == "validation_error"


@pytest.mark.asyncio
async def test_unreachable_url(client: AsyncClient) -> None:
    response = await client.post("/v1/audits", json={"url": "https://www.example.com/missing"})

    assert response.status_code == 422
    error = response.json()["error"]
    assert error["code"] == "extraction_failed"
    assert error["details"]["reason"] == "network"
    assert error["details"]["url"] == "https://www.example.com/missing"


@pytest.mark.asyncio
async def test_blocked_url(client: AsyncClient, pages) -> None:
    pages["https://www.example.com/protected"] = (200, BLOCKED_HTML)

    response = await client.post("/v1/audits", json={"url": "https://www.example.com/protected"})

    assert response.status_code == 422
    error = response.json()["error"]
    assert error["details"]["reason"] == "blocked"
    assert "paste the content directly" in error["message"]


@pytest.mark.asyncio
async def test_get_unknown_audit(client: AsyncClient) -> None:
    response = await client.get("/v1/audits/does-not-exist")

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "not_found"


@pytest.mark.asyncio
async def test_compare(client: AsyncClient, pages) -> None:
    pages[RIVAL] = (200, COMPETITOR_HTML)

    response = await client.post(
        "/v1/audits/compare",
        json={"target_url": TARGET, "competitor_urls": [RIVAL]},
    )

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["target"]["success"] is True
    assert data["competitors"][0]["url"] == RIVAL
    assert data["ranking"]["total"] == 2
    assert data["ranking"]["position"] in (1, 2)

    stored = await client.get(f"/v1/audits/{data['id']}")
    assert stored.json()["data"]["ranking"] == data["ranking"]


@pytest.mark.asyncio
async def test_compare_keeps_failed_competitors(client: AsyncClient) -> None:
    response = await client.post(
        "/v1/audits/compare",
        json={"target_url": TARGET, "competitor_urls": ["https://www.gone.com/page"]},
    )

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["competitors"][0]["success"] is False
    assert data["competitors"][0]["error"]
    assert data["ranking"] == {
        "position": 1,
        "total": 1,
        "ordered_scores": [
            {"url": TARGET, "score": data["target"]["scores"]["overall"], "is_target": True}
        ],
    }


@pytest.mark.asyncio
async def test_compare_rejects_too_many_competitors(client: AsyncClient) -> None:
    competitors = [f"https://www.rival{i}.com/" for i in range(4)]

    response = await client.post(
        "/v1/audits/compare",
        json={"target_url": TARGET, "competitor_urls": competitors},
    )

    assert response.status_code == 422
    assert response.json()["error"]["code"] == "validation_error"


@pytest.mark.asyncio
async def test_rewrite(client: AsyncClient, mock_provider) -> None:
    mock_provider.responses = [rewrite_payload(RAW_CONTENT + " Call us today for a quote.")]

    response = await client.post(
        "/v1/audits/rewrite",
        json={"content": RAW_CONTENT, "threshold": 100, "max_iterations": 1},
    )

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["iterations_run"] == 1
    assert data["stop_reason"] in ("converged", "max_iterations_reached")
    assert data["best_score"] >= data["original_score"]
    assert len(mock_provider.calls) == 1

    stored = await client.get(f"/v1/audits/{data['id']}")
    assert stored.status_code == 200


@pytest.mark.asyncio
async def test_rewrite_without_provider(client: AsyncClient) -> None:
    app.dependency_overrides[get_generation_provider] = lambda: None

    response = await client.post("/v1/audits/rewrite", json={"content": RAW_CONTENT})

    assert response.status_code == 502
    error = response.json()["error"]
    assert error["code"] == "external_service_error"
    assert error["details"]["service"] == "generation"


@pytest.mark.asyncio
async def test_compare_count_error_names_the_field(client: AsyncClient) -> None:
    competitors = [f"https://www.rival{i}.com/" for i in range(4)]

    response = await client.post(
        "/v1/audits/compare",
        json={"target_url": TARGET, "competitor_urls": competitors},
    )

    assert response.json()["error"]["field"] == "competitor_urls"
