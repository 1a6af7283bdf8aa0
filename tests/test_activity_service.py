from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from serenity.config.app_config import AppConfig
from serenity.models.activity import ActivityRequest
from serenity.models.enums import ActivityType
from serenity.pipeline.runner import TaskRunner
from serenity.pipeline.steps import StepRunner
from serenity.services.activity_service import ActivityService
from serenity.utils.error_handler import InvalidUserIdError


class Clock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


def _service(app_config: AppConfig, clock: Clock, runner: TaskRunner | None = None) -> ActivityService:
    return ActivityService(runner=runner or TaskRunner(), app_config=app_config, clock=clock)


def test_duplicate_within_five_seconds_returns_existing(app_config: AppConfig) -> None:
    clock = Clock(datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc))
    service = _service(app_config, clock)
    request = ActivityRequest(type=ActivityType.MEDITATION, name="Body scan", duration=10)

    first, created = service.log_activity("alice", request)
    clock.now += timedelta(seconds=3)
    second, created_again = service.log_activity("alice", request)

    assert created is True
    assert created_again is False
    assert second.id == first.id


def test_same_activity_after_the_window_is_stored(app_config: AppConfig) -> None:
    clock = Clock(datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc))
    service = _service(app_config, clock)
    request = ActivityRequest(type=ActivityType.GAME, name="Breathing pattern")

    service.log_activity("alice", request)
    clock.now += timedelta(seconds=6)
    _, created = service.log_activity("alice", request)

    assert created is True
    assert len(service.get_history("alice")) == 2


def test_today_and_history_are_newest_first(app_config: AppConfig) -> None:
    clock = Clock(datetime(2024, 4, 30, 22, 0, tzinfo=timezone.utc))
    service = _service(app_config, clock)

    service.log_activity("alice", ActivityRequest(type=ActivityType.WALKING, name="Evening walk"))
    clock.now = datetime(2024, 5, 1, 8, 0, tzinfo=timezone.utc)
    service.log_activity("alice", ActivityRequest(type=ActivityType.MOOD, name="Mood check", mood_score=70))
    clock.now = datetime(2024, 5, 1, 9, 0, tzinfo=timezone.utc)
    service.log_activity("alice", ActivityRequest(type=ActivityType.READING, name="Novel"))

    assert [a.name for a in service.get_today_activities("alice")] == ["Novel", "Mood check"]
    assert [a.name for a in service.get_history("alice")] == ["Novel", "Mood check", "Evening walk"]
    assert service.get_history("bob") == []


def test_activities_are_reloaded_from_disk(app_config: AppConfig) -> None:
    clock = Clock(datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc))
    _service(app_config, clock).log_activity(
        "alice", ActivityRequest(type=ActivityType.JOURNALING, name="Gratitude list")
    )

    history = _service(app_config, clock).get_history("alice")

    assert [a.name for a in history] == ["Gratitude list"]
    assert history[0].timestamp == clock.now


def test_logging_emits_a_mood_updated_event(app_config: AppConfig) -> None:
    received: list[object] = []

    async def handler(event: object, step: StepRunner) -> None:
        received.append(event)

    runner = TaskRunner()
    runner.register("capture", "mood/updated", handler)
    clock = Clock(datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc))
    service = _service(app_config, clock, runner)

    async def scenario() -> None:
        service.log_activity("alice", ActivityRequest(type=ActivityType.MOOD, name="Mood", mood_score=40))
        service.log_activity("alice", ActivityRequest(type=ActivityType.EXERCISE, name="Yoga", duration=20))
        service.notify_activity_logged("alice")
        await runner.drain()

    asyncio.run(scenario())

    [payload] = received
    assert payload["userId"] == "alice"
    assert [m["score"] for m in payload["recentMoods"]] == [40]
    assert payload["completedActivities"] == [{"type": "exercise", "name": "Yoga", "duration": 20}]


def test_user_ids_that_leave_the_data_dir_are_rejected(app_config: AppConfig, tmp_path: Path) -> None:
    clock = Clock(datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc))
    service = _service(app_config, clock)
    request = ActivityRequest(type=ActivityType.MEDITATION, name="Body scan")

    for user_id in ["../escaped", "../../etc/passwd", ".."]:
        with pytest.raises(InvalidUserIdError):
            service.log_activity(user_id, request)

    assert not list(tmp_path.rglob("*.json"))
