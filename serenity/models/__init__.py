"""Expose commonly used model classes at the package level.

Importing these classes here allows consumers to write concise imports like::

    from serenity.models import ChatMessage, ChatSession, Memory

These names refer to the underlying Pydantic models defined in their
respective modules.
"""

from .activity import Activity, ActivityRequest  # noqa: F401
from .analysis import AnalysisResult, SessionAnalysis, neutral_analysis  # noqa: F401
from .chat_message import ChatMessage, MessageMetadata  # noqa: F401
from .chat_session import ChatSession  # noqa: F401
from .enums import ActivityType, MessageRole  # noqa: F401
from .events import ChatMessageEvent, ChatPipelineResult  # noqa: F401
from .memory import Memory, SessionContext, UserProfile  # noqa: F401
