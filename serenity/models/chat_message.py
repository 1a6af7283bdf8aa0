"""Models representing chat messages and related structures."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import ConfigDict, Field

from .analysis import AnalysisResult
from .base import CamelModel
from .enums import MessageRole


def utcnow() -> datetime:
    """Return the current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


class MessageMetadata(CamelModel):
    """Optional therapy context attached to a message."""

    model_config = ConfigDict(frozen=True)

    technique: str | None = None
    goal: str | None = None
    progress: list[Any] | None = None
    analysis: AnalysisResult | None = None


class ChatMessage(CamelModel):
    """Represents a single message in a therapy session.

    Messages are immutable once created.  The ``timestamp`` orders
    messages within a session; it is generated automatically when the
    caller does not supply one.  Assistant replies carry the analysis
    of the user message they answer in ``metadata.analysis``.
    """

    model_config = ConfigDict(frozen=True)

    role: MessageRole
    content: str
    timestamp: datetime = Field(default_factory=utcnow)
    metadata: MessageMetadata | None = None
