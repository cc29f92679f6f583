"""Tests for the sync server and its HTTP client."""

import httpx
import pytest
from fastapi.testclient import TestClient

from vital_log.config import AppConfig, ServerConfig, StorageConfig
from vital_log.errors import RemoteStoreError
from vital_log.models.exercises import ExerciseType
from vital_log.models.templates import CustomWorkout, TemplateExercise
from vital_log.services.sync import SyncService
from vital_log.store import MEASUREMENT_SESSIONS, HttpRemoteStore, LocalStore, init_db
from vital_log.web import create_app

from conftest import NOW, make_session, make_workout


@pytest.fixture
def client(app_config):
    with TestClient(create_app(app_config)) as test_client:
        yield test_client


@pytest.fixture
def secured_client(temp_dir):
    config = AppConfig(storage=StorageConfig(data_dir=temp_dir), server=ServerConfig(token="secret"))
    with TestClient(create_app(config)) as test_client:
        yield test_client


class TestServer:
    """Tests for the sync server routes."""

    def test_health(self, client):
        """Test the health endpoint."""
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_empty_collection(self, client):
        """Test a never-written collection is empty."""
        response = client.get("/users/alice/collections/measurement_sessions")

        assert response.status_code == 200
        assert response.json() == {"collection": "measurement_sessions", "items": []}

    def test_replace_and_fetch(self, client):
        """Test a replaced collection is returned in full."""
        items = [make_session(NOW, [(120, 80, 72)]).to_dict()]

        response = client.put("/users/alice/collections/measurement_sessions", json={"items": items})
        assert response.json() == {"collection": "measurement_sessions", "count": 1}

        fetched = client.get("/users/alice/collections/measurement_sessions").json()["items"]
        assert fetched == items

    def test_users_are_isolated(self, client):
        """Test one user's collection is invisible to another."""
        items = [make_workout(NOW, ExerciseType.SQUAT, [(5, 225)]).to_dict()]
        client.put("/users/alice/collections/workout_sessions", json={"items": items})

        response = client.get("/users/bob/collections/workout_sessions")

        assert response.json()["items"] == []

    def test_unknown_collection(self, client):
        """Test unknown collection names are 404."""
        assert client.get("/users/alice/collections/meals").status_code == 404
        assert client.put("/users/alice/collections/meals", json={"items": []}).status_code == 404

    def test_malformed_items_rejected(self, client):
        """Test malformed items are rejected without a write."""
        response = client.put(
            "/users/alice/collections/measurement_sessions", json={"items": [{"id": "x"}]}
        )

        assert response.status_code == 422
        items = client.get("/users/alice/collections/measurement_sessions").json()["items"]
        assert items == []

    def test_custom_workouts_collection(self, client):
        """Test saved custom workouts are a syncable collection."""
        plan = CustomWorkout(
            name="Legs", exercises=[TemplateExercise(ExerciseType.SQUAT, sets=5, reps=5)]
        )

        response = client.put(
            "/users/alice/collections/custom_workouts", json={"items": [plan.to_dict()]}
        )

        assert response.status_code == 200
        items = client.get("/users/alice/collections/custom_workouts").json()["items"]
        assert items[0]["name"] == "Legs"

    def test_profile(self, client, sample_profile):
        """Test profile storage."""
        assert client.get("/users/alice/profile").status_code == 404

        response = client.put("/users/alice/profile", json={"profile": sample_profile.to_dict()})
        assert response.json() == {"status": "saved"}

        profile = client.get("/users/alice/profile").json()["profile"]
        assert profile["email"] == "test@example.com"

    def test_malformed_profile(self, client):
        """Test a profile missing required fields is rejected."""
        response = client.put("/users/alice/profile", json={"profile": {"id": "alice"}})

        assert response.status_code == 422

    def test_nested_items_of_wrong_shape_rejected(self, client, sample_profile):
        """Test lists where nested objects belong are 422, not a server error."""
        workout = make_workout(NOW, ExerciseType.SQUAT, [(8, 135)]).to_dict()
        workout["exercise_sessions"][0]["sets"] = [[8, 135]]
        profile = sample_profile.to_dict()
        profile["preferences"] = []

        response = client.put("/users/alice/collections/workout_sessions", json={"items": [workout]})
        assert response.status_code == 422
        assert "Item 0 is malformed" in response.json()["detail"]

        response = client.put("/users/alice/profile", json={"profile": profile})
        assert response.status_code == 422
        assert client.get("/users/alice/profile").status_code == 404

    def test_token_required(self, secured_client):
        """Test requests without the bearer token are rejected."""
        assert secured_client.get("/users/alice/profile").status_code == 401
        response = secured_client.get(
            "/users/alice/collections/workout_sessions",
            headers={"Authorization": "Bearer wrong"},
        )
        assert response.status_code == 401

    def test_token_accepted(self, secured_client):
        """Test requests with the bearer token succeed."""
        response = secured_client.get(
            "/users/alice/collections/workout_sessions",
            headers={"Authorization": "Bearer secret"},
        )

        assert response.status_code == 200
        assert secured_client.get("/health").status_code == 200


class TestHttpRemoteStore:
    """Tests for HttpRemoteStore against the in-process server."""

    @pytest.fixture
    def transport(self, app_config):
        return httpx.ASGITransport(app=create_app(app_config))

    @pytest.mark.asyncio
    async def test_collection_round_trip(self, app_config, transport):
        """Test replace and fetch over HTTP."""
        await init_db(app_config.storage.db_path)
        remote = HttpRemoteStore("http://testserver/", "alice", transport=transport)
        items = [make_session(NOW, [(120, 80, 72)]).to_dict()]

        await remote.replace_all(MEASUREMENT_SESSIONS, items)

        assert await remote.fetch_all(MEASUREMENT_SESSIONS) == items

    @pytest.mark.asyncio
    async def test_missing_profile(self, app_config, transport, sample_profile):
        """Test a missing profile is None rather than an error."""
        await init_db(app_config.storage.db_path)
        remote = HttpRemoteStore("http://testserver", "alice", transport=transport)

        assert await remote.get_profile() is None
        await remote.set_profile(sample_profile.to_dict())
        assert (await remote.get_profile())["id"] == "user-1"

    @pytest.mark.asyncio
    async def test_unknown_collection(self, app_config, transport):
        """Test an unknown collection raises."""
        await init_db(app_config.storage.db_path)
        remote = HttpRemoteStore("http://testserver", "alice", transport=transport)

        with pytest.raises(RemoteStoreError) as exc_info:
            await remote.fetch_all("meals")
        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_rejected_token(self, temp_dir):
        """Test a wrong token surfaces as a RemoteStoreError with the status."""
        config = AppConfig(storage=StorageConfig(data_dir=temp_dir), server=ServerConfig(token="secret"))
        await init_db(config.storage.db_path)
        transport = httpx.ASGITransport(app=create_app(config))
        remote = HttpRemoteStore("http://testserver", "alice", token="wrong", transport=transport)

        with pytest.raises(RemoteStoreError) as exc_info:
            await remote.fetch_all(MEASUREMENT_SESSIONS)
        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_sync_through_server(self, app_config, transport, db_path):
        """Test a full push then pull between two devices through the server."""
        await init_db(app_config.storage.db_path)
        laptop = LocalStore(db_path, namespace="laptop")
        phone = LocalStore(db_path, namespace="phone")
        session = make_session(NOW, [(120, 80, 72)])
        await laptop.save_measurement_sessions([session])

        remote = HttpRemoteStore("http://testserver", "alice", transport=transport)
        assert await SyncService(laptop, remote).push_all()
        assert await SyncService(phone, remote).pull_all()

        assert [s.id for s in await phone.load_measurement_sessions()] == [session.id]
