"""
API tests for the HTTP surface.

The application runs in-process via httpx's ASGI transport. The database is
the per-test in-memory SQLite engine, and the LLM-backed dependencies and
the admin authorizer are overridden.

Test classes:
- TestHealth: liveness and readiness
- TestExercisesApi: POST /api/exercises
- TestTopicsApi: topic listing and admin editing
- TestVersionsApi: version listing and restore
- TestUserApi: stats, settings and auth status
"""

from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
import pytest_asyncio

from grammar_drills.db.base import get_db
from grammar_drills.dependencies import AdminAuthorizer, get_admin_authorizer
from grammar_drills.main import app
from grammar_drills.middleware.error_handling import GenerationError
from grammar_drills.routers.exercises import (
    get_exercise_content_client,
    get_prompt_refiner,
)
from grammar_drills.services.exercises import PromptRefiner, RefinedPrompt

ADMIN_ID = "admin-1"
USER_ID = "learner-1"


def make_payloads(count: int) -> list[dict]:
    return [{"n": i, "correct_german_sentence": f"Satz {i}."} for i in range(count)]


@pytest.fixture
def content_client():
    client = MagicMock()
    client.generate_exercises = AsyncMock(return_value=make_payloads(10))
    return client


@pytest_asyncio.fixture
async def client(session_maker, content_client, mock_llm_client):
    """HTTP client against the app with test dependencies."""

    async def override_get_db():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_exercise_content_client] = lambda: content_client
    app.dependency_overrides[get_prompt_refiner] = lambda: PromptRefiner(
        mock_llm_client, enabled=False
    )
    app.dependency_overrides[get_admin_authorizer] = lambda: AdminAuthorizer([ADMIN_ID])

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as http_client:
        yield http_client

    app.dependency_overrides.clear()


def as_user(user_id: str) -> dict:
    """Request headers carrying the identity cookie."""
    return {"Cookie": f"user_id={user_id}"}


async def create_topic(client, name="Konjunktionen", prompt="Generate exercises") -> dict:
    response = await client.post(
        "/api/topics",
        json={"name": name, "prompt": prompt},
        headers=as_user(ADMIN_ID),
    )
    assert response.status_code == 201
    return response.json()


class TestHealth:
    @pytest.mark.asyncio
    async def test_liveness(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.text == "OK"

    @pytest.mark.asyncio
    async def test_readiness(self, client):
        response = await client.get("/api/health/ready")

        assert response.json() == {"ready": True}


class TestExercisesApi:
    """Tests for POST /api/exercises."""

    @pytest.mark.asyncio
    async def test_user_batch_triggers_generation(self, client, content_client):
        """A logged-in user on an empty cache gets freshly generated exercises."""
        topic = await create_topic(client)

        response = await client.post(
            "/api/exercises", json={"topic_id": topic["id"]}, headers=as_user(USER_ID)
        )

        data = response.json()
        assert response.status_code == 200
        assert data["count"] == 10
        assert data["generated_count"] == 10
        assert data["refined_prompt"] is None
        assert sorted(ex["n"] for ex in data["exercises"]) == list(range(10))
        content_client.generate_exercises.assert_awaited_once_with("Generate exercises")

    @pytest.mark.asyncio
    async def test_refined_prompt_is_returned(self, client, content_client):
        """When generation ran on a refined prompt, the response carries it."""
        refiner = MagicMock()
        refiner.refine = AsyncMock(
            return_value=RefinedPrompt(text="Refined: vary the situations", refined=True)
        )
        app.dependency_overrides[get_prompt_refiner] = lambda: refiner
        topic = await create_topic(client)

        response = await client.post(
            "/api/exercises", json={"topic_id": topic["id"]}, headers=as_user(USER_ID)
        )

        assert response.status_code == 200
        assert response.json()["refined_prompt"] == "Refined: vary the situations"
        content_client.generate_exercises.assert_awaited_once_with("Refined: vary the situations")

    @pytest.mark.asyncio
    async def test_anonymous_batch_never_generates(self, client, content_client):
        topic = await create_topic(client)

        response = await client.post("/api/exercises", json={"topic_id": topic["id"]})

        assert response.status_code == 200
        assert response.json() == {
            "exercises": [],
            "count": 0,
            "generated_count": 0,
            "refined_prompt": None,
        }
        content_client.generate_exercises.assert_not_called()

    @pytest.mark.asyncio
    async def test_anonymous_served_from_cache(self, client):
        topic = await create_topic(client)
        await client.post("/api/exercises", json={"topic_id": topic["id"]}, headers=as_user(USER_ID))

        response = await client.post("/api/exercises", json={"topic_id": topic["id"]})

        assert response.json()["count"] == 10

    @pytest.mark.asyncio
    async def test_unknown_topic(self, client):
        response = await client.post("/api/exercises", json={"topic_id": "missing"})

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_generation_failure_is_502(self, client, content_client):
        content_client.generate_exercises.side_effect = GenerationError("Model returned no exercises")
        topic = await create_topic(client)

        response = await client.post(
            "/api/exercises", json={"topic_id": topic["id"]}, headers=as_user(USER_ID)
        )

        assert response.status_code == 502
        assert response.json()["error"] == "generation_failed"

    @pytest.mark.asyncio
    async def test_missing_topic_id_is_rejected(self, client):
        response = await client.post("/api/exercises", json={})

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_unknown_fields_are_rejected(self, client):
        response = await client.post("/api/exercises", json={"topic_id": "x", "extra": 1})

        assert response.status_code == 422


class TestTopicsApi:
    """Tests for /api/topics."""

    @pytest.mark.asyncio
    async def test_list_and_get(self, client):
        topic = await create_topic(client, name="Präpositionen")

        listed = await client.get("/api/topics")
        single = await client.get(f"/api/topics/{topic['id']}")

        assert [t["name"] for t in listed.json()] == ["Präpositionen"]
        assert single.json()["prompt"] == "Generate exercises"

    @pytest.mark.asyncio
    async def test_create_requires_admin(self, client):
        response = await client.post(
            "/api/topics",
            json={"name": "T", "prompt": "p"},
            headers=as_user(USER_ID),
        )

        assert response.status_code == 403
        assert response.json()["error"] == "forbidden"

    @pytest.mark.asyncio
    async def test_create_requires_login(self, client):
        response = await client.post("/api/topics", json={"name": "T", "prompt": "p"})

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_admin_not_configured(self, client):
        """Without configured admins every admin call is forbidden."""
        app.dependency_overrides[get_admin_authorizer] = lambda: AdminAuthorizer([])

        response = await client.post(
            "/api/topics",
            json={"name": "T", "prompt": "p"},
            headers=as_user(ADMIN_ID),
        )

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_update_appends_version(self, client):
        topic = await create_topic(client)

        response = await client.put(
            f"/api/topics/{topic['id']}",
            json={"prompt": "New prompt"},
            headers=as_user(ADMIN_ID),
        )
        versions = await client.get(f"/api/versions/{topic['id']}")

        assert response.status_code == 200
        assert response.json()["name"] == "Konjunktionen"
        assert response.json()["prompt"] == "New prompt"
        assert [v["version"] for v in versions.json()] == [1, 2]

    @pytest.mark.asyncio
    async def test_update_requires_prompt(self, client):
        topic = await create_topic(client)

        response = await client.put(
            f"/api/topics/{topic['id']}",
            json={"name": "Renamed"},
            headers=as_user(ADMIN_ID),
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_delete(self, client):
        topic = await create_topic(client)

        response = await client.delete(f"/api/topics/{topic['id']}", headers=as_user(ADMIN_ID))
        missing = await client.get(f"/api/topics/{topic['id']}")

        assert response.status_code == 204
        assert missing.status_code == 404


class TestVersionsApi:
    """Tests for /api/versions."""

    @pytest.mark.asyncio
    async def test_versions_of_unknown_topic(self, client):
        response = await client.get("/api/versions/missing")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_restore(self, client):
        topic = await create_topic(client, prompt="first")
        await client.put(
            f"/api/topics/{topic['id']}", json={"prompt": "second"}, headers=as_user(ADMIN_ID)
        )
        first = (await client.get(f"/api/versions/{topic['id']}")).json()[0]

        response = await client.post(
            f"/api/versions/{topic['id']}/restore/{first['id']}", headers=as_user(ADMIN_ID)
        )

        assert response.status_code == 200
        assert response.json()["prompt"] == "first"

    @pytest.mark.asyncio
    async def test_restore_version_of_other_topic(self, client):
        topic_a = await create_topic(client, name="A")
        topic_b = await create_topic(client, name="B")
        version_b = (await client.get(f"/api/versions/{topic_b['id']}")).json()[0]

        response = await client.post(
            f"/api/versions/{topic_a['id']}/restore/{version_b['id']}",
            headers=as_user(ADMIN_ID),
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_restore_requires_admin(self, client):
        topic = await create_topic(client)
        version = (await client.get(f"/api/versions/{topic['id']}")).json()[0]

        response = await client.post(
            f"/api/versions/{topic['id']}/restore/{version['id']}", headers=as_user(USER_ID)
        )

        assert response.status_code == 403


class TestUserApi:
    """Tests for /api/user and /api/auth."""

    @pytest.mark.asyncio
    async def test_stats_require_login(self, client):
        response = await client.get("/api/user/stats")

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_stats_round_trip(self, client):
        payload = {"total_exercises": 12, "total_mistakes": 3, "total_hints": 2, "total_time": 340}

        saved = await client.post("/api/user/stats", json=payload, headers=as_user(USER_ID))
        loaded = await client.get("/api/user/stats", headers=as_user(USER_ID))

        assert saved.status_code == 200
        assert loaded.json()["total_exercises"] == 12
        assert loaded.json()["total_time"] == 340

    @pytest.mark.asyncio
    async def test_negative_stats_rejected(self, client):
        response = await client.post(
            "/api/user/stats", json={"total_exercises": -1}, headers=as_user(USER_ID)
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_settings(self, client):
        response = await client.post(
            "/api/user/settings", json={"last_topic_id": "topic-1"}, headers=as_user(USER_ID)
        )

        assert response.json()["last_topic_id"] == "topic-1"

    @pytest.mark.asyncio
    async def test_auth_status(self, client):
        anonymous = await client.get("/api/auth/status")
        logged_in = await client.get("/api/auth/status", headers=as_user(USER_ID))

        assert anonymous.json() == {"logged_in": False}
        assert logged_in.json() == {"logged_in": True, "user_id": USER_ID}

    @pytest.mark.asyncio
    async def test_is_admin(self, client):
        admin = await client.get("/api/auth/is_admin", headers=as_user(ADMIN_ID))
        user = await client.get("/api/auth/is_admin", headers=as_user(USER_ID))

        assert admin.json() == {"is_admin": True}
        assert user.json() == {"is_admin": False}
