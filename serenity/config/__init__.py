"""Configuration package.

Settings are split by concern so each subsystem loads only the
environment variables it needs.
"""

from .app_config import AppConfig, get_app_config  # noqa: F401
from .llm_config import LlmConfig, get_llm_config  # noqa: F401
