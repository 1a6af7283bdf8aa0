"""Response-generation step: produce the therapist's reply."""

from __future__ import annotations

import json
from typing import Any, Sequence

from loguru import logger

from ..models.analysis import AnalysisResult
from ..models.memory import Memory
from ..prompts import THERAPEUTIC_RESPONSE_PROMPT
from ..services.llm_service import GenerativeModel
from ..utils.text_extraction import extract_text

FALLBACK_RESPONSE = "I'm here to support you. Could you tell me more about what's on your mind?"


class EmptyResponseError(ValueError):
    """Raised when the model returns no usable text."""


def build_response_prompt(
    system_prompt: str | None,
    message: str,
    analysis: AnalysisResult,
    memory: Memory,
    goals: Sequence[Any],
) -> str:
    return THERAPEUTIC_RESPONSE_PROMPT.format(
        system_prompt=system_prompt or "",
        message=message,
        analysis=analysis.model_dump_json(by_alias=True),
        memory=memory.model_dump_json(by_alias=True),
        goals=json.dumps(list(goals), default=str),
    )


async def generate_response(
    model: GenerativeModel,
    message: str,
    analysis: AnalysisResult,
    memory: Memory,
    goals: Sequence[Any],
    system_prompt: str | None = None,
) -> str:
    """Return the therapeutic reply, or :data:`FALLBACK_RESPONSE` on failure."""
    try:
        prompt = build_response_prompt(system_prompt, message, analysis, memory, goals)
        result = await model.generate_content(prompt)
        response_text = await extract_text(result, "generate-response")
        logger.debug("Generated response: {}", response_text)
        if not response_text:
            raise EmptyResponseError("Empty response")
        return response_text
    except Exception:
        logger.bind(message=message).exception("Error generating response")
        return FALLBACK_RESPONSE
