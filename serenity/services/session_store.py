"""Persistence for chat sessions and their memory.

Sessions are kept in memory, keyed by user and session id, and each
change is snapshotted to ``<data_dir>/sessions/<user>/<session>.json``
so history and memory survive restarts.  Snapshots on disk are loaded
when the store is created.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict

from loguru import logger

from ..models.chat_message import ChatMessage
from ..models.chat_session import ChatSession
from ..models.memory import Memory
from ..utils.error_handler import SessionNotFoundError, StorageError
from ..utils.helpers import user_data_dir


class SessionStore:
    """Own every user's sessions and persist them as JSON snapshots."""

    def __init__(self, data_dir: str | Path) -> None:
        self._root = Path(data_dir) / "sessions"
        # Mapping of user_id -> session_id -> ChatSession
        self._sessions: Dict[str, Dict[str, ChatSession]] = {}
        self._load_existing_sessions()

    def create_session(self, user_id: str) -> ChatSession:
        user_data_dir(self._root, user_id)
        session = ChatSession(user_id=user_id)
        self._sessions.setdefault(user_id, {})[session.session_id] = session
        self._persist_session(session)
        logger.info("Created chat session {} for user {}", session.session_id, user_id)
        return session

    def get_session(self, user_id: str, session_id: str) -> ChatSession:
        """Return a session owned by ``user_id``.

        Raises
        ------
        SessionNotFoundError
            If the user has no session with that id.
        """
        session = self._sessions.get(user_id, {}).get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    def list_sessions(self, user_id: str) -> list[ChatSession]:
        """Return the user's sessions, most recently updated first."""
        sessions = list(self._sessions.get(user_id, {}).values())
        return sorted(sessions, key=lambda session: session.updated_at, reverse=True)

    def add_message(self, user_id: str, session_id: str, message: ChatMessage) -> ChatSession:
        session = self.get_session(user_id, session_id)
        session.add_message(message)
        self._persist_session(session)
        return session

    def save_memory(self, user_id: str, session_id: str, memory: Memory) -> ChatSession:
        session = self.get_session(user_id, session_id)
        session.memory = memory
        self._persist_session(session)
        return session

    def delete_session(self, user_id: str, session_id: str) -> None:
        """Delete a session and its snapshot.

        Raises
        ------
        SessionNotFoundError
            If the user has no session with that id.
        """
        self.get_session(user_id, session_id)
        del self._sessions[user_id][session_id]
        path = self._session_path(user_id, session_id)
        try:
            path.unlink(missing_ok=True)
        except OSError:
            logger.warning("Failed to delete session snapshot at {}", path)
        logger.info("Deleted chat session {} for user {}", session_id, user_id)

    # ------------------------------------------------------------------
    # Persistence helpers

    def _session_path(self, user_id: str, session_id: str) -> Path:
        return user_data_dir(self._root, user_id) / f"{session_id}.json"

    def _persist_session(self, session: ChatSession) -> None:
        path = self._session_path(session.user_id, session.session_id)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            payload = session.model_dump(mode="json", by_alias=True)
            with path.open("w", encoding="utf-8") as handle:
                json.dump(payload, handle, ensure_ascii=True, indent=2)
        except OSError as exc:
            logger.exception("Failed to persist session {}", session.session_id)
            raise StorageError("Failed to persist session") from exc

    def _load_existing_sessions(self) -> None:
        if not self._root.is_dir():
            return
        for user_dir in self._root.iterdir():
            if not user_dir.is_dir():
                continue
            for snapshot in user_dir.glob("*.json"):
                try:
                    with snapshot.open("r", encoding="utf-8") as handle:
                        session = ChatSession.model_validate(json.load(handle))
                except (OSError, ValueError) as exc:
                    logger.warning("Failed to load session snapshot {}: {}", snapshot, exc)
                    continue
                self._sessions.setdefault(session.user_id, {})[session.session_id] = session
        logger.debug(
            "Loaded {} stored session(s)",
            sum(len(sessions) for sessions in self._sessions.values()),
        )
