"""Model representing a full therapy chat session."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import List

from pydantic import Field

from .base import CamelModel
from .chat_message import ChatMessage, utcnow
from .memory import Memory


class ChatSession(CamelModel):
    """Represents a conversation between a user and the AI therapist.

    A session is owned by exactly one user and identified by a
    ``session_id`` that is globally unique and never changes.  The
    ``messages`` field holds the chronological sequence of messages and
    ``memory`` the conversational state produced by the last pipeline
    run, which seeds the next one.
    """

    session_id: str = Field(
        default_factory=lambda: str(uuid.uuid4()),
        description="Unique identifier for the session.",
    )
    user_id: str = Field(..., description="Identifier of the user who owns this session.")
    messages: List[ChatMessage] = Field(
        default_factory=list,
        description="Chronological list of messages in the session.",
    )
    memory: Memory = Field(default_factory=Memory)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    def add_message(self, message: ChatMessage) -> None:
        """Append a new message and refresh ``updated_at``."""
        self.messages.append(message)
        self.updated_at = utcnow()
