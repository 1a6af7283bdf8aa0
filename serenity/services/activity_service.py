"""Service for logging wellness activities.

Activities are stored per user in ``<data_dir>/activities/<user>.json``.
Logging a new activity emits a ``mood/updated`` event so the pipeline
can recommend follow-up activities in the background.
"""

from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from pathlib import Path
from typing import Callable, Dict

from loguru import logger

from ..config.app_config import AppConfig, get_app_config
from ..models.activity import Activity, ActivityRequest
from ..models.enums import ActivityType
from ..models.events import MOOD_UPDATED_EVENT
from ..pipeline.runner import TaskRunner
from ..utils.error_handler import StorageError
from ..utils.helpers import user_data_dir
from .pipeline_service import get_task_runner

DUPLICATE_WINDOW = timedelta(seconds=5)
RECENT_HISTORY_SIZE = 10


class ActivityService:
    """Record activities and trigger recommendations from them."""

    def __init__(
        self,
        runner: TaskRunner | None = None,
        app_config: AppConfig | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.app_config = app_config or get_app_config()
        self.runner = runner or get_task_runner()
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._root = Path(self.app_config.data_dir) / "activities"
        self._activities: Dict[str, list[Activity]] = {}

    def log_activity(self, user_id: str, request: ActivityRequest) -> tuple[Activity, bool]:
        """Store an activity unless an identical one was just logged.

        An activity with the same type and name logged by the same user
        within five seconds is treated as a duplicate submission.

        Returns
        -------
        tuple[Activity, bool]
            The stored activity and whether it was newly created.
        """
        now = self._clock()
        activities = self._load(user_id)
        for existing in activities:
            if (
                existing.type == request.type
                and existing.name == request.name
                and existing.timestamp >= now - DUPLICATE_WINDOW
            ):
                logger.info("Duplicate activity detected for user {}, skipping.", user_id)
                return existing, False

        activity = Activity(user_id=user_id, timestamp=now, **request.model_dump())
        activities.append(activity)
        self._persist(user_id)
        logger.bind(type=activity.type.value, mood_score=activity.mood_score).info(
            "Activity logged for user {}", user_id
        )
        return activity, True

    def notify_activity_logged(self, user_id: str) -> None:
        """Emit a ``mood/updated`` event for the user's recent history.

        Must be called from a running event loop; delivery happens in
        the background.
        """
        recent = self.get_history(user_id)[:RECENT_HISTORY_SIZE]
        self.runner.send_background(
            MOOD_UPDATED_EVENT,
            {
                "userId": user_id,
                "recentMoods": [
                    {"score": a.mood_score, "note": a.mood_note, "timestamp": a.timestamp.isoformat()}
                    for a in recent
                    if a.type == ActivityType.MOOD or a.mood_score is not None
                ],
                "completedActivities": [
                    {"type": a.type.value, "name": a.name, "duration": a.duration}
                    for a in recent
                    if a.type != ActivityType.MOOD and a.completed
                ],
            },
        )

    def get_today_activities(self, user_id: str) -> list[Activity]:
        """Return activities logged since midnight UTC, newest first."""
        start = self._clock().replace(hour=0, minute=0, second=0, microsecond=0)
        end = start + timedelta(days=1)
        return [a for a in self.get_history(user_id) if start <= a.timestamp < end]

    def get_history(self, user_id: str) -> list[Activity]:
        """Return all of the user's activities, newest first."""
        return sorted(self._load(user_id), key=lambda a: a.timestamp, reverse=True)

    # ------------------------------------------------------------------
    # Persistence helpers

    def _path(self, user_id: str) -> Path:
        return user_data_dir(self._root, user_id).with_name(f"{user_id}.json")

    def _load(self, user_id: str) -> list[Activity]:
        if user_id in self._activities:
            return self._activities[user_id]
        activities: list[Activity] = []
        path = self._path(user_id)
        if path.is_file():
            try:
                with path.open("r", encoding="utf-8") as handle:
                    activities = [Activity.model_validate(item) for item in json.load(handle)]
            except (OSError, ValueError) as exc:
                logger.warning("Failed to load activities from {}: {}", path, exc)
        self._activities[user_id] = activities
        return activities

    def _persist(self, user_id: str) -> None:
        path = self._path(user_id)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            payload = [a.model_dump(mode="json", by_alias=True) for a in self._activities[user_id]]
            with path.open("w", encoding="utf-8") as handle:
                json.dump(payload, handle, ensure_ascii=True, indent=2)
        except OSError as exc:
            logger.exception("Failed to persist activities for user {}", user_id)
            raise StorageError("Failed to persist activity") from exc


@lru_cache()
def get_activity_service() -> ActivityService:
    return ActivityService()
