"""Request and response models for the chat API."""

from typing import Any

from pydantic import Field

from .analysis import AnalysisResult
from .base import CamelModel


class SendMessageRequest(CamelModel):
    """Represents a message sent by the user to a therapy session.

    The message must be a non-empty string and is limited to 2000
    characters so that a single turn cannot overload the model.
    """

    message: str = Field(
        ...,
        min_length=1,
        max_length=2000,
        description="The user's message content.",
    )


class CreateSessionResponse(CamelModel):
    message: str
    session_id: str


class SendMessageResponse(CamelModel):
    """The therapist's reply together with the analysis behind it."""

    response: str
    message: str
    analysis: AnalysisResult
    metadata: dict[str, Any] = Field(default_factory=dict)
