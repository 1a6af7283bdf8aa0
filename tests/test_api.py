from __future__ import annotations

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from serenity.config.app_config import AppConfig
from serenity.main import create_app
from serenity.pipeline.functions import TherapyPipeline
from serenity.pipeline.runner import TaskRunner
from serenity.services.activity_service import ActivityService, get_activity_service
from serenity.services.chat_service import ChatService, get_chat_service
from tests.fakes import ScriptedModel

ANXIOUS = {
    "emotionalState": "anxious",
    "themes": ["work"],
    "riskLevel": 2,
    "recommendedApproach": "grounding",
    "progressIndicators": [],
}


@pytest.fixture
def model() -> ScriptedModel:
    return ScriptedModel()


@pytest.fixture
def client(model: ScriptedModel, app_config: AppConfig):
    runner = TherapyPipeline(model).register(TaskRunner())
    chat_service = ChatService(runner=runner, app_config=app_config)
    activity_service = ActivityService(
        runner=runner,
        app_config=app_config,
        clock=lambda: datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
    )
    app = create_app()
    app.dependency_overrides[get_chat_service] = lambda: chat_service
    app.dependency_overrides[get_activity_service] = lambda: activity_service
    with TestClient(app) as test_client:
        yield test_client


def test_health_and_readiness(client: TestClient) -> None:
    assert client.get("/health").json() == {"status": "ok"}
    assert client.get("/ready").json() == {"ready": True}


def test_chat_session_lifecycle(client: TestClient, model: ScriptedModel) -> None:
    created = client.post("/chat/sessions", params={"user_id": "alice"})
    assert created.status_code == 201
    session_id = created.json()["sessionId"]

    model.replies.extend([ANXIOUS, "Let's try a grounding exercise together."])
    sent = client.post(
        f"/chat/sessions/{session_id}/messages",
        params={"user_id": "alice"},
        json={"message": "I feel anxious"},
    )
    assert sent.status_code == 200
    body = sent.json()
    assert body["response"] == "Let's try a grounding exercise together."
    assert body["analysis"] == ANXIOUS
    assert body["metadata"]["technique"] == "grounding"

    history = client.get(f"/chat/sessions/{session_id}/history", params={"user_id": "alice"}).json()
    assert [m["role"] for m in history] == ["user", "assistant"]
    assert history[1]["metadata"]["analysis"]["emotionalState"] == "anxious"

    session = client.get(f"/chat/sessions/{session_id}", params={"user_id": "alice"}).json()
    assert session["memory"]["userProfile"]["emotionalState"] == ["anxious"]

    listed = client.get("/chat/sessions", params={"user_id": "alice"}).json()
    assert [s["sessionId"] for s in listed] == [session_id]

    deleted = client.delete(f"/chat/sessions/{session_id}", params={"user_id": "alice"})
    assert deleted.status_code == 204
    missing = client.get(f"/chat/sessions/{session_id}", params={"user_id": "alice"})
    assert missing.status_code == 404


def test_other_users_cannot_reach_a_session(client: TestClient) -> None:
    session_id = client.post("/chat/sessions", params={"user_id": "alice"}).json()["sessionId"]

    response = client.post(
        f"/chat/sessions/{session_id}/messages",
        params={"user_id": "mallory"},
        json={"message": "hello"},
    )

    assert response.status_code == 404


def test_empty_message_is_rejected(client: TestClient) -> None:
    session_id = client.post("/chat/sessions", params={"user_id": "alice"}).json()["sessionId"]

    response = client.post(
        f"/chat/sessions/{session_id}/messages",
        params={"user_id": "alice"},
        json={"message": ""},
    )

    assert response.status_code == 422


def test_activity_logging_and_duplicates(client: TestClient, model: ScriptedModel) -> None:
    model.replies.append({"recommendations": [{"name": "Short walk"}]})
    payload = {"type": "meditation", "name": "Body scan", "duration": 10, "moodScore": 55}

    first = client.post("/activity", params={"user_id": "alice"}, json=payload)
    duplicate = client.post("/activity", params={"user_id": "alice"}, json=payload)

    assert first.status_code == 201
    assert duplicate.status_code == 200
    assert duplicate.json()["id"] == first.json()["id"]
    today = client.get("/activity/today", params={"user_id": "alice"}).json()
    assert [a["name"] for a in today] == ["Body scan"]
    history = client.get("/activity/history", params={"user_id": "alice"}).json()
    assert history[0]["moodScore"] == 55


def test_invalid_activity_type_is_rejected(client: TestClient) -> None:
    response = client.post("/activity", params={"user_id": "alice"}, json={"type": "skydiving", "name": "Jump"})

    assert response.status_code == 422


def test_path_like_user_ids_are_rejected(client: TestClient) -> None:
    session = client.post("/chat/sessions", params={"user_id": "../../escaped"})
    activity = client.post(
        "/activity", params={"user_id": "../escaped"}, json={"type": "meditation", "name": "Body scan"}
    )
    history = client.get("/activity/history", params={"user_id": "../escaped"})

    assert session.status_code == 400
    assert activity.status_code == 400
    assert history.status_code == 400
