"""Event payloads consumed by the pipeline functions and their results."""

from __future__ import annotations

from typing import Any

from pydantic import ConfigDict, Field, field_validator

from .analysis import ActivityRecommendations, AnalysisResult, SessionAnalysis
from .base import CamelModel
from .chat_message import ChatMessage
from .memory import Memory

CHAT_MESSAGE_EVENT = "therapy/session.message"
SESSION_CREATED_EVENT = "therapy/session.created"
MOOD_UPDATED_EVENT = "mood/updated"


class ChatMessageEvent(CamelModel):
    """Immutable input to one run of the chat message pipeline.

    Messages belonging to one session must be submitted in the order
    the user sent them; memory accumulates sequentially and the
    pipeline does not reorder events itself.
    """

    model_config = ConfigDict(frozen=True)

    message: str
    history: list[ChatMessage] = Field(default_factory=list)
    memory: Memory = Field(default_factory=Memory)
    goals: list[Any] = Field(default_factory=list)
    system_prompt: str | None = None

    @field_validator("history", "goals", mode="before")
    @classmethod
    def _null_list_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("memory", mode="before")
    @classmethod
    def _null_memory_as_empty(cls, value: Any) -> Any:
        return Memory() if value is None else value


class ChatPipelineResult(CamelModel):
    """Reply, analysis and memory returned by the chat message pipeline."""

    response: str
    analysis: AnalysisResult
    updated_memory: Memory


class SessionAnalysisEvent(CamelModel):
    """A completed session whose notes or transcript should be analysed."""

    model_config = ConfigDict(frozen=True)

    session_id: str
    notes: str | None = None
    transcript: str | None = None


class SessionAnalysisResult(CamelModel):
    message: str
    analysis: SessionAnalysis


class MoodUpdatedEvent(CamelModel):
    """Mood and activity history used to recommend new activities."""

    model_config = ConfigDict(frozen=True)

    user_id: str | None = None
    recent_moods: list[Any] = Field(default_factory=list)
    completed_activities: list[Any] = Field(default_factory=list)
    preferences: dict[str, Any] = Field(default_factory=dict)


class RecommendationResult(CamelModel):
    message: str
    recommendations: ActivityRecommendations
