"""Test doubles shared across the test modules."""

from __future__ import annotations

import json
from typing import Any

from serenity.services.llm_service import GenerationResult, ModelResponse


class ScriptedModel:
    """Model double that replays scripted replies in order.

    A string becomes a normal text reply, a dict is returned as JSON
    text, an exception is raised and anything else is returned as the
    raw result object.
    """

    def __init__(self, *replies: Any) -> None:
        self.replies = list(replies)
        self.prompts: list[str] = []

    async def generate_content(self, prompt: str) -> Any:
        self.prompts.append(prompt)
        if not self.replies:
            raise RuntimeError("No scripted reply left")
        reply = self.replies.pop(0)
        if isinstance(reply, BaseException):
            raise reply
        if isinstance(reply, dict):
            reply = json.dumps(reply)
        if isinstance(reply, str):
            return GenerationResult(response=ModelResponse(reply))
        return reply
