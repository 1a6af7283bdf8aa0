"""Normalise generative model results into plain text.

Model clients have returned text in several shapes over time: a
``response`` attribute that is a method, a coroutine or an object with
a ``text()`` method, or an ``output`` list of content fragments.  The
helpers here classify the result into one of those shapes in a fixed
order and never raise, so the pipeline steps only ever see a string.
"""

from __future__ import annotations

import inspect
import json
from enum import Enum
from typing import Any

from loguru import logger


class ResultShape(str, Enum):
    """Known result shapes, listed in probing order."""

    CALLABLE_RESPONSE = "callable_response"
    AWAITABLE_RESPONSE = "awaitable_response"
    TEXT_RESPONSE = "text_response"
    OUTPUT_LIST = "output_list"
    OTHER = "other"


def _field(obj: Any, name: str) -> Any:
    """Read ``name`` from an attribute or a mapping key."""
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


def classify_result(result: Any) -> ResultShape:
    """Return the first known shape that ``result`` matches."""
    response = _field(result, "response")
    if callable(response):
        return ResultShape.CALLABLE_RESPONSE
    if inspect.isawaitable(response):
        return ResultShape.AWAITABLE_RESPONSE
    if response is not None and callable(_field(response, "text")):
        return ResultShape.TEXT_RESPONSE
    if isinstance(_field(result, "output"), list):
        return ResultShape.OUTPUT_LIST
    return ResultShape.OTHER


async def _resolve(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


def _serialise(value: Any) -> str:
    if isinstance(value, (dict, list)):
        return json.dumps(value, default=str).strip()
    return str(value).strip()


async def _render(value: Any) -> str:
    """Render a resolved response object as text."""
    if value is None:
        return ""
    text = _field(value, "text")
    if callable(text):
        return str(await _resolve(text())).strip()
    return _serialise(value)


def _collect_output(output: list[Any]) -> str:
    lines = []
    for item in output:
        if not item:
            lines.append("")
            continue
        content = _field(item, "content")
        if content:
            lines.append(
                " ".join((_field(part, "text") or "") if part else "" for part in content)
            )
        else:
            lines.append(_field(item, "text") or "")
    return "\n".join(lines).strip()


async def extract_text(result: Any, label: str = "") -> str:
    """Return the best-effort plain text carried by a model result.

    Failures are logged with ``label`` and produce an empty string; the
    exception never reaches the caller.  The result is only read, so
    repeated calls on the same object return the same text.
    """
    try:
        if result is None:
            return ""

        shape = classify_result(result)
        response = _field(result, "response")

        if shape is ResultShape.CALLABLE_RESPONSE:
            return await _render(await _resolve(response()))
        if shape is ResultShape.AWAITABLE_RESPONSE:
            return await _render(await response)
        if shape is ResultShape.TEXT_RESPONSE:
            return str(await _resolve(response.text())).strip()
        if shape is ResultShape.OUTPUT_LIST:
            collected = _collect_output(_field(result, "output"))
            if collected:
                return collected

        return _serialise(result)
    except Exception:
        logger.bind(label=label).exception("Error extracting text from model result")
        return ""
