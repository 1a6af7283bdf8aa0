"""Best-effort parsing of JSON objects embedded in model output.

Models asked for "JSON only" still wrap the object in prose or code
fences now and then.  ``parse_json_object`` tries a strict parse, then
the span from the first ``{`` to the last ``}``, and otherwise fails
closed.  No partial-field recovery is attempted.
"""

from __future__ import annotations

import json
import re
from typing import Any

_OBJECT_SPAN = re.compile(r"\{[\s\S]*\}")


class StructuredOutputError(ValueError):
    """Raised when model output does not contain a JSON object."""


def _loads_object(content: str) -> dict[str, Any] | None:
    try:
        parsed = json.loads(content)
    except ValueError:
        return None
    return parsed if isinstance(parsed, dict) else None


def parse_json_object(content: str) -> dict[str, Any]:
    """Return the JSON object carried by ``content``.

    Raises
    ------
    StructuredOutputError
        If neither the whole text nor its brace-delimited span parses to
        a JSON object.
    """
    stripped = content.strip()
    parsed = _loads_object(stripped)
    if parsed is not None:
        return parsed

    match = _OBJECT_SPAN.search(stripped)
    if match:
        parsed = _loads_object(match.group(0).strip())
        if parsed is not None:
            return parsed

    raise StructuredOutputError(f"No JSON object found in model output: {stripped[:80]!r}")
