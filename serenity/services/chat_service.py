"""Orchestration service combining session storage and the pipeline.

The ChatService records the user's message, hands the session history
and memory to the chat message pipeline, then persists the reply with
its analysis and the updated memory for the next turn.  It centralises
error handling so controllers can remain thin.
"""

from __future__ import annotations

import asyncio
from functools import lru_cache

from loguru import logger

from ..config.app_config import AppConfig, get_app_config
from ..models.chat_message import ChatMessage, MessageMetadata
from ..models.chat_request import SendMessageResponse
from ..models.chat_session import ChatSession
from ..models.enums import MessageRole
from ..models.events import CHAT_MESSAGE_EVENT, ChatPipelineResult
from ..pipeline.runner import TaskRunner
from ..prompts import THERAPIST_SYSTEM_PROMPT
from ..utils.error_handler import ChatError, PipelineError
from .pipeline_service import get_task_runner
from .session_store import SessionStore


class ChatService:
    """Coordinates session persistence and the chat message pipeline.

    Messages of one session are processed one at a time, in the order
    they arrive, because the pipeline folds each analysis into the
    memory produced by the previous turn.
    """

    def __init__(
        self,
        runner: TaskRunner | None = None,
        store: SessionStore | None = None,
        app_config: AppConfig | None = None,
        system_prompt: str = THERAPIST_SYSTEM_PROMPT,
    ) -> None:
        self.app_config = app_config or get_app_config()
        self.runner = runner or get_task_runner()
        self.store = store or SessionStore(self.app_config.data_dir)
        self.system_prompt = system_prompt
        self._locks: dict[str, asyncio.Lock] = {}

    def create_session(self, user_id: str) -> ChatSession:
        return self.store.create_session(user_id)

    def list_sessions(self, user_id: str) -> list[ChatSession]:
        return self.store.list_sessions(user_id)

    def get_session(self, user_id: str, session_id: str) -> ChatSession:
        return self.store.get_session(user_id, session_id)

    def get_history(self, user_id: str, session_id: str) -> list[ChatMessage]:
        return list(self.store.get_session(user_id, session_id).messages)

    def delete_session(self, user_id: str, session_id: str) -> None:
        self.store.delete_session(user_id, session_id)
        self._locks.pop(session_id, None)

    async def send_message(self, user_id: str, session_id: str, message: str) -> SendMessageResponse:
        """Run the pipeline for ``message`` and persist its outcome.

        Raises
        ------
        SessionNotFoundError
            If the session does not belong to the user.
        ChatError
            If the pipeline could not be delivered or persistence fails.
        """
        session = self.store.get_session(user_id, session_id)
        lock = self._locks.setdefault(session_id, asyncio.Lock())
        async with lock:
            log = logger.bind(user_id=user_id, session_id=session_id)
            log.info("Processing message for session")
            history = list(session.messages)
            self.store.add_message(
                user_id, session_id, ChatMessage(role=MessageRole.USER, content=message)
            )

            try:
                result: ChatPipelineResult = await self.runner.invoke(
                    CHAT_MESSAGE_EVENT,
                    {
                        "message": message,
                        "history": history,
                        "memory": session.memory,
                        "goals": [],
                        "systemPrompt": self.system_prompt,
                    },
                )
            except PipelineError as exc:
                log.exception("Chat pipeline failed")
                raise ChatError("Failed to process message") from exc

            metadata = MessageMetadata(
                technique=result.analysis.recommended_approach,
                goal="Provide support",
                progress=[
                    {
                        "emotionalState": result.analysis.emotional_state,
                        "riskLevel": result.analysis.risk_level,
                    }
                ],
                analysis=result.analysis,
            )
            self.store.add_message(
                user_id,
                session_id,
                ChatMessage(role=MessageRole.ASSISTANT, content=result.response, metadata=metadata),
            )
            self.store.save_memory(user_id, session_id, result.updated_memory)
            log.info("Reply stored for session")

            return SendMessageResponse(
                response=result.response,
                message=result.response,
                analysis=result.analysis,
                metadata=metadata.model_dump(mode="json", by_alias=True, exclude={"analysis"}),
            )


@lru_cache()
def get_chat_service() -> ChatService:
    """Dependency injector for ChatService instances.

    FastAPI will call this function to obtain a singleton
    ChatService.  The lru_cache decorator ensures only one
    instance exists.
    """
    return ChatService()
