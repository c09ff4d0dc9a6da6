"""Tests for bulk operation endpoints (validation + auth).

These tests use dependency overrides for auth (not JWT cookies) because
they check request/response shapes without database setup: every case
here is rejected before the first query.
"""

import uuid
from collections.abc import AsyncGenerator
from unittest.mock import AsyncMock, patch

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from pydantic import SecretStr

from job_tracker.api.deps import get_current_user_id
from job_tracker.core.config import settings
from job_tracker.main import create_app
from job_tracker.repositories.job_application_repository import (
    JobApplicationRepository,
)
from tests.conftest import TEST_AUTH_SECRET, TEST_USER_ID

_BULK_URL = "/api/v1/applications/bulk"


@pytest.fixture
def app() -> FastAPI:
    """Fresh app per test."""
    return create_app()


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Authenticated client that bypasses JWT validation."""

    async def override_get_current_user_id() -> uuid.UUID:
        return TEST_USER_ID

    app.dependency_overrides[get_current_user_id] = override_get_current_user_id

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.pop(get_current_user_id, None)


@pytest.fixture
async def unauthenticated_client(
    app: FastAPI, monkeypatch: pytest.MonkeyPatch
) -> AsyncGenerator[AsyncClient, None]:
    """Auth enabled, no cookie: 401 before any DB query."""
    monkeypatch.setattr(settings, "auth_enabled", True)
    monkeypatch.setattr(settings, "auth_secret", SecretStr(TEST_AUTH_SECRET))

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


class TestBulkUpdateApplications:
    """Tests for PUT /api/v1/applications/bulk."""

    @pytest.mark.asyncio
    async def test_empty_ids_rejected(self, client: AsyncClient) -> None:
        """An empty id list is a validation error, not a no-op."""
        response = await client.put(
            _BULK_URL, json={"ids": [], "updates": {"status": "Offer"}}
        )
        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["message"] == "No application ids provided"

    @pytest.mark.asyncio
    async def test_empty_updates_rejected(self, client: AsyncClient) -> None:
        """Updates must name at least one field."""
        response = await client.put(
            _BULK_URL, json={"ids": [str(uuid.uuid4())], "updates": {}}
        )
        assert response.status_code == 400
        assert response.json()["error"]["message"] == "No updates provided"

    @pytest.mark.asyncio
    async def test_missing_ids_rejected(self, client: AsyncClient) -> None:
        """Body must include ids."""
        response = await client.put(_BULK_URL, json={"updates": {"status": "Offer"}})
        assert response.status_code == 400
        assert "ids" in response.text

    @pytest.mark.asyncio
    async def test_invalid_uuid_rejected(self, client: AsyncClient) -> None:
        """Malformed ids are a 400."""
        response = await client.put(
            _BULK_URL, json={"ids": ["nope"], "updates": {"status": "Offer"}}
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_invalid_status_rejected(self, client: AsyncClient) -> None:
        """Update values are validated like a single update."""
        response = await client.put(
            _BULK_URL,
            json={"ids": [str(uuid.uuid4())], "updates": {"status": "Ghosted"}},
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_requires_auth(self, unauthenticated_client: AsyncClient) -> None:
        """No session cookie means 401."""
        response = await unauthenticated_client.put(
            _BULK_URL, json={"ids": [str(uuid.uuid4())], "updates": {"status": "Offer"}}
        )
        assert response.status_code == 401
        assert response.json()["error"]["code"] == "UNAUTHORIZED"


class TestBulkDeleteApplications:
    """Tests for DELETE /api/v1/applications/bulk."""

    @pytest.mark.asyncio
    async def test_empty_ids_rejected(self, client: AsyncClient) -> None:
        """An empty id list is a validation error."""
        response = await client.request("DELETE", _BULK_URL, json={"ids": []})
        assert response.status_code == 400
        assert response.json()["error"]["message"] == "No application ids provided"

    @pytest.mark.asyncio
    async def test_missing_body_rejected(self, client: AsyncClient) -> None:
        """A body is required."""
        response = await client.request("DELETE", _BULK_URL)
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_requires_auth(self, unauthenticated_client: AsyncClient) -> None:
        """No session cookie means 401."""
        response = await unauthenticated_client.request(
            "DELETE", _BULK_URL, json={"ids": [str(uuid.uuid4())]}
        )
        assert response.status_code == 401


class TestEmptyIdsTouchNothing:
    """A rejected bulk request never reaches the repository."""

    @pytest.mark.asyncio
    async def test_bulk_update(self, client: AsyncClient) -> None:
        with patch.object(
            JobApplicationRepository, "get_many", new_callable=AsyncMock
        ) as get_many, patch.object(
            JobApplicationRepository, "apply_updates", new_callable=AsyncMock
        ) as apply_updates:
            response = await client.put(
                _BULK_URL, json={"ids": [], "updates": {"status": "Offer"}}
            )
        assert response.status_code == 400
        get_many.assert_not_awaited()
        apply_updates.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_bulk_delete(self, client: AsyncClient) -> None:
        with patch.object(
            JobApplicationRepository, "bulk_delete", new_callable=AsyncMock
        ) as bulk_delete:
            response = await client.request("DELETE", _BULK_URL, json={"ids": []})
        assert response.status_code == 400
        bulk_delete.assert_not_awaited()


class TestListValidation:
    """List query errors that surface before any query runs."""

    @pytest.mark.asyncio
    async def test_unknown_sort_field(self, client: AsyncClient) -> None:
        """Sorting by a column outside the whitelist is a 400."""
        response = await client.get(
            "/api/v1/applications", params={"sort_field": "user_id"}
        )
        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["details"][0]["field"] == "sort_field"

    @pytest.mark.asyncio
    async def test_invalid_date_filter(self, client: AsyncClient) -> None:
        """A malformed date bound is a 400."""
        response = await client.get(
            "/api/v1/applications", params={"date_from": "yesterday"}
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_nul_in_search(self, client: AsyncClient) -> None:
        """A percent-encoded NUL is rejected before reaching SQL."""
        response = await client.get("/api/v1/applications?search=a%00b")
        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["details"][0]["loc"] == ["search"]


class TestNulInBodies:
    """JSON \\u0000 escapes in text fields are a 400, not a backend error."""

    @pytest.mark.asyncio
    async def test_create(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/v1/applications",
            content='{"company_name": "Ac\\u0000me", "position_title": "Dev"}',
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["details"][0]["loc"] == ["body", "company_name"]

    @pytest.mark.asyncio
    async def test_bulk_update(self, client: AsyncClient) -> None:
        response = await client.put(
            _BULK_URL,
            json={"ids": [str(uuid.uuid4())], "updates": {"notes": "a\x00b"}},
        )
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"
