"""Per-session conversational memory threaded through the pipeline."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from .base import CamelModel


class UserProfile(CamelModel):
    """Emotional history and current risk assessment for the user."""

    emotional_state: list[str] = Field(default_factory=list)
    risk_level: int | float = 0
    preferences: dict[str, Any] = Field(default_factory=dict)


class SessionContext(CamelModel):
    """Themes raised so far and the technique currently in use."""

    conversation_themes: list[str] = Field(default_factory=list)
    current_technique: str | None = None


class Memory(CamelModel):
    """Accumulated emotional and thematic state for one session.

    Emotional states and themes only ever grow within a session;
    ``risk_level`` holds the latest assessment.  Instances are treated
    as values: the memory-update step returns a new copy instead of
    mutating its input.
    """

    user_profile: UserProfile = Field(default_factory=UserProfile)
    session_context: SessionContext = Field(default_factory=SessionContext)
