"""Memory-update step: fold an analysis into the session memory."""

from __future__ import annotations

from ..models.analysis import AnalysisResult
from ..models.memory import Memory


def update_memory(memory: Memory, analysis: AnalysisResult) -> Memory:
    """Return a new memory with ``analysis`` appended.

    The emotional state and themes are appended when present and the
    risk level is replaced by the latest assessment.  ``memory`` itself
    is left untouched.
    """
    updated = memory.model_copy(deep=True)
    if analysis.emotional_state:
        updated.user_profile.emotional_state.append(analysis.emotional_state)
    if analysis.themes:
        updated.session_context.conversation_themes.extend(analysis.themes)
    if analysis.risk_level is not None:
        updated.user_profile.risk_level = analysis.risk_level
    return updated
