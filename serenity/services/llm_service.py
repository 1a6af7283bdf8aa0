"""Service encapsulating interactions with the generative model.

Uses LangChain's ChatOpenAI integration, which talks to any
OpenAI-compatible endpoint.  The pipeline only needs one operation,
``generate_content(prompt)``; its result exposes the reply through
``result.response.text()`` and is consumed via
:func:`serenity.utils.text_extraction.extract_text`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol

from loguru import logger
from langchain_core.messages import BaseMessage, HumanMessage
from langchain_openai import ChatOpenAI

from ..config.llm_config import LlmConfig, get_llm_config


class GenerativeModel(Protocol):
    """Anything that turns a prompt into an opaque model result."""

    async def generate_content(self, prompt: str) -> Any:
        ...


@dataclass(frozen=True)
class ModelResponse:
    """Reply returned by :class:`GenerativeModelClient`."""

    content: str
    usage: dict[str, Any] = field(default_factory=dict)

    def text(self) -> str:
        return self.content


@dataclass(frozen=True)
class GenerationResult:
    response: ModelResponse


def _message_text(message: BaseMessage) -> str:
    """Flatten LangChain message content, which may be a list of parts."""
    content = message.content
    if isinstance(content, str):
        return content
    parts = []
    for part in content:
        if isinstance(part, str):
            parts.append(part)
        elif isinstance(part, dict) and part.get("type") == "text":
            parts.append(part.get("text", ""))
    return "".join(parts)


class GenerativeModelClient:
    """Client for generating text from the configured chat model.

    The client wraps :class:`~langchain_openai.ChatOpenAI` and is built
    solely from a :class:`LlmConfig`.  If a ``base_url`` is configured
    the client talks to that endpoint, otherwise to the default OpenAI
    endpoint.  ``max_tokens`` and ``timeout`` are forwarded verbatim.
    The client holds no per-request state, so concurrent pipeline runs
    may share one instance.
    """

    def __init__(self, llm_config: LlmConfig | None = None, llm: ChatOpenAI | None = None) -> None:
        self.llm_config = llm_config or get_llm_config()

        if llm is None:
            llm_kwargs: dict[str, object] = {
                "api_key": self.llm_config.api_key,
                "model": self.llm_config.model,
                "temperature": self.llm_config.temperature,
            }
            if self.llm_config.base_url:
                llm_kwargs["base_url"] = self.llm_config.base_url
            if self.llm_config.max_tokens:
                llm_kwargs["max_tokens"] = self.llm_config.max_tokens
            if self.llm_config.timeout:
                llm_kwargs["timeout"] = self.llm_config.timeout
            llm = ChatOpenAI(**llm_kwargs)
        self.llm = llm

    async def generate_content(self, prompt: str) -> GenerationResult:
        """Send ``prompt`` as a single human message and wrap the reply.

        Errors from the model propagate; each pipeline step decides its
        own fallback.
        """
        logger.debug("Generating content for prompt of {} characters", len(prompt))
        message = await self.llm.ainvoke([HumanMessage(content=prompt)])
        usage = dict(getattr(message, "usage_metadata", None) or {})
        return GenerationResult(response=ModelResponse(_message_text(message), usage))

    def get_model_info(self) -> dict[str, object]:
        """Return the model name and tuning parameters in use."""
        return {
            "model": self.llm_config.model,
            "temperature": self.llm_config.temperature,
            "max_tokens": self.llm_config.max_tokens,
            "timeout": self.llm_config.timeout,
        }
