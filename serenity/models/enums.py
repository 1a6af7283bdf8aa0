"""Enumerations used across models."""

from enum import Enum


class MessageRole(str, Enum):
    """Enum for message roles in a therapy conversation.

    ``USER`` denotes the client's message and ``ASSISTANT`` the reply
    produced by the therapy pipeline.
    """

    USER = "user"
    ASSISTANT = "assistant"


class ActivityType(str, Enum):
    """Kinds of wellness activity a user can log."""

    MEDITATION = "meditation"
    EXERCISE = "exercise"
    WALKING = "walking"
    READING = "reading"
    JOURNALING = "journaling"
    THERAPY = "therapy"
    GAME = "game"
    MOOD = "mood"
