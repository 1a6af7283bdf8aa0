"""Prompt templates used by the pipeline steps."""

from .analysis import MESSAGE_ANALYSIS_PROMPT  # noqa: F401
from .recommendations import ACTIVITY_RECOMMENDATIONS_PROMPT  # noqa: F401
from .response import THERAPEUTIC_RESPONSE_PROMPT  # noqa: F401
from .session import SESSION_ANALYSIS_PROMPT  # noqa: F401
from .system import THERAPIST_SYSTEM_PROMPT  # noqa: F401
