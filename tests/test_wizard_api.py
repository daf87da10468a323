"""Wizard endpoint tests."""

import pytest
from httpx import AsyncClient


@pytest.mark.api
@pytest.mark.asyncio
class TestWizard:
    """Test provider wizard endpoints."""

    async def test_wizard_requires_auth(self, client: AsyncClient):
        resp = await client.get("/api/wizard/")

        assert resp.status_code == 401
        assert resp.json()["error"]["code"] == "UNAUTHENTICATED"

    async def test_wizard_rejects_garbage_token(self, client: AsyncClient):
        resp = await client.get(
            "/api/wizard/", headers={"Authorization": "Bearer not-a-jwt"}
        )

        assert resp.status_code == 401

    async def test_get_progress(self, client: AsyncClient, auth_headers):
        resp = await client.get("/api/wizard/", headers=auth_headers)

        assert resp.status_code == 200
        data = resp.json()
        assert data["current_step"] == 1
        assert data["total_steps"] == 3
        assert data["completed_steps"] == []
        assert data["is_complete"] is False
        assert [s["key"] for s in data["steps"]] == ["basic_info", "preferences", "confirm"]

    async def test_invalid_step_returns_field_errors(
        self, client: AsyncClient, auth_headers, basic_info
    ):
        resp = await client.post(
            "/api/wizard/advance",
            headers=auth_headers,
            json={**basic_info, "email": "jane-at-x"},
        )

        assert resp.status_code == 422
        error = resp.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["details"]["step"] == 1
        assert error["details"]["errors"] == {"email": "Please enter a valid email address"}

        # Input survives the failure
        progress = (await client.get("/api/wizard/", headers=auth_headers)).json()
        assert progress["current_step"] == 1
        assert progress["pending_input"]["email"] == "jane-at-x"

    async def test_save_pending(self, client: AsyncClient, auth_headers):
        resp = await client.patch(
            "/api/wizard/pending", headers=auth_headers, json={"full_name": "Ja"}
        )

        assert resp.status_code == 200
        assert resp.json()["pending_input"] == {"full_name": "Ja"}
        assert resp.json()["completed_steps"] == []

    async def test_empty_advance_keeps_saved_input(self, client: AsyncClient, auth_headers):
        saved = {"full_name": "Jane Doe", "email": "jane@x.com"}
        await client.patch("/api/wizard/pending", headers=auth_headers, json=saved)

        resp = await client.post("/api/wizard/advance", headers=auth_headers)

        assert resp.status_code == 422
        errors = resp.json()["error"]["details"]["errors"]
        assert "phone" in errors
        assert "full_name" not in errors
        progress = (await client.get("/api/wizard/", headers=auth_headers)).json()
        assert progress["pending_input"] == saved

    async def test_full_flow(self, client: AsyncClient, auth_headers, basic_info, preferences):
        resp = await client.post("/api/wizard/advance", headers=auth_headers, json=basic_info)
        assert resp.status_code == 200
        assert resp.json()["current_step"] == 2

        resp = await client.post("/api/wizard/advance", headers=auth_headers, json=preferences)
        assert resp.status_code == 200
        assert resp.json()["current_step"] == 3

        resp = await client.post("/api/wizard/advance", headers=auth_headers)
        assert resp.status_code == 200
        data = resp.json()
        assert data["is_complete"] is True
        assert data["current_step"] == 3
        assert data["completed_steps"] == [1, 2]
        assert data["draft"]["full_name"] == "Jane Doe"
        assert data["draft"]["years_experience"] == "10"

    async def test_retreat_and_jump(self, client: AsyncClient, auth_headers, basic_info):
        await client.post("/api/wizard/advance", headers=auth_headers, json=basic_info)

        resp = await client.post("/api/wizard/retreat", headers=auth_headers)
        assert resp.status_code == 200
        assert resp.json()["current_step"] == 1

        resp = await client.post("/api/wizard/retreat", headers=auth_headers)
        assert resp.status_code == 422
        assert resp.json()["error"]["code"] == "STEP_NOT_REACHABLE"

        resp = await client.post("/api/wizard/jump/3", headers=auth_headers)
        assert resp.status_code == 422

        resp = await client.post("/api/wizard/jump/1", headers=auth_headers)
        assert resp.status_code == 200
        assert resp.json()["completed_steps"] == [1]

    async def test_start_over(self, client: AsyncClient, auth_headers, basic_info):
        await client.post("/api/wizard/advance", headers=auth_headers, json=basic_info)

        resp = await client.delete("/api/wizard/", headers=auth_headers)
        assert resp.status_code == 200
        assert resp.json()["current_step"] == 1

        progress = (await client.get("/api/wizard/", headers=auth_headers)).json()
        assert progress["completed_steps"] == []
        assert progress["draft"]["full_name"] is None

    async def test_drafts_are_isolated_per_user(
        self, client: AsyncClient, auth_headers, other_auth_headers, basic_info
    ):
        await client.post("/api/wizard/advance", headers=auth_headers, json=basic_info)

        progress = (await client.get("/api/wizard/", headers=other_auth_headers)).json()

        assert progress["current_step"] == 1
        assert progress["draft"]["full_name"] is None

    async def test_edit_published_profile(
        self, client: AsyncClient, auth_headers, store, complete_draft, owner_id
    ):
        await store.insert(
            {**complete_draft, "slug": "jane-doe", "user_id": owner_id, "is_public": True}
        )

        resp = await client.post("/api/wizard/edit/jane-doe", headers=auth_headers)

        assert resp.status_code == 200
        data = resp.json()
        assert data["current_step"] == 1
        assert data["completed_steps"] == [1, 2]
        assert data["draft"]["email"] == "jane@x.com"
        assert data["published_slug"] == "jane-doe"

    async def test_edit_someone_elses_profile(
        self, client: AsyncClient, other_auth_headers, store, complete_draft, owner_id
    ):
        await store.insert(
            {**complete_draft, "slug": "jane-doe", "user_id": owner_id, "is_public": True}
        )

        resp = await client.post("/api/wizard/edit/jane-doe", headers=other_auth_headers)

        assert resp.status_code == 404
        assert resp.json()["error"]["code"] == "PROFILE_NOT_FOUND"
