"""Models for logged wellness activities."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import Field

from .base import CamelModel
from .chat_message import utcnow
from .enums import ActivityType


class ActivityRequest(CamelModel):
    """Payload accepted when a user logs an activity."""

    type: ActivityType
    name: str = Field(..., min_length=1)
    description: str | None = None
    duration: float | None = Field(default=None, ge=0)
    difficulty: str | None = None
    feedback: str | None = None
    mood_score: float | None = Field(default=None, ge=0, le=100)
    mood_note: str | None = None


class Activity(ActivityRequest):
    """A stored activity record."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    user_id: str
    completed: bool = True
    timestamp: datetime = Field(default_factory=utcnow)
