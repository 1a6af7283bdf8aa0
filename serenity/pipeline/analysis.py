"""Message-analysis step: classify the emotional content of a message."""

from __future__ import annotations

import json
from typing import Any, Sequence

from loguru import logger
from pydantic import ValidationError

from ..models.analysis import AnalysisResult, neutral_analysis
from ..models.memory import Memory
from ..prompts import MESSAGE_ANALYSIS_PROMPT
from ..services.llm_service import GenerativeModel
from ..utils.structured_output import StructuredOutputError, parse_json_object
from ..utils.text_extraction import extract_text


def build_analysis_prompt(message: str, memory: Memory, goals: Sequence[Any]) -> str:
    context = json.dumps(
        {"memory": memory.model_dump(mode="json", by_alias=True), "goals": list(goals)},
        default=str,
    )
    return MESSAGE_ANALYSIS_PROMPT.format(message=message, context=context)


async def analyze_message(
    model: GenerativeModel,
    message: str,
    memory: Memory,
    goals: Sequence[Any],
) -> AnalysisResult:
    """Return the model's analysis of ``message``.

    Any model or parsing failure yields :func:`neutral_analysis`; a
    failed analysis must never block the reply.
    """
    try:
        result = await model.generate_content(build_analysis_prompt(message, memory, goals))
        raw_text = await extract_text(result, "analysis")
        logger.debug("Raw analysis text: {}", raw_text)
        return AnalysisResult.model_validate(parse_json_object(raw_text))
    except (StructuredOutputError, ValidationError) as exc:
        logger.bind(message=message).error("Unparsable message analysis: {}", exc)
    except Exception:
        logger.bind(message=message).exception("Error in message analysis")
    return neutral_analysis()
