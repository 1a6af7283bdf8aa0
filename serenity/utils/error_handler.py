"""Error handling utilities and custom exceptions."""

from __future__ import annotations

from fastapi import Request
from fastapi.responses import JSONResponse
from loguru import logger


class SerenityError(Exception):
    """Base class for errors raised by the application."""


class ChatError(SerenityError):
    """Exception raised when a chat operation fails."""


class StorageError(SerenityError):
    """Raised when sessions or activities cannot be written to disk."""


class InvalidUserIdError(SerenityError):
    """Raised when a user id cannot be used to name stored data."""

    def __init__(self, user_id: str) -> None:
        super().__init__(f"Invalid user id: {user_id!r}")
        self.user_id = user_id


class SessionNotFoundError(SerenityError):
    """Raised when a chat session does not exist for the requesting user."""

    def __init__(self, session_id: str) -> None:
        super().__init__(f"Session {session_id} not found")
        self.session_id = session_id


class PipelineError(SerenityError):
    """Raised when a pipeline run still fails after its last delivery attempt."""

    def __init__(self, function_id: str, run_id: str, attempts: int) -> None:
        super().__init__(
            f"Function {function_id} failed after {attempts} attempt(s) (run {run_id})"
        )
        self.function_id = function_id
        self.run_id = run_id
        self.attempts = attempts


async def http_exception_handler(request: Request, exc: SerenityError) -> JSONResponse:
    """Convert an application error into an HTTP response.

    Missing sessions map to 404, unusable user ids to 400 and every
    other error to 500.
    """
    if isinstance(exc, SessionNotFoundError):
        status_code = 404
    elif isinstance(exc, InvalidUserIdError):
        status_code = 400
    else:
        status_code = 500
    logger.error("{} occurred: {}", type(exc).__name__, exc)
    return JSONResponse(
        status_code=status_code,
        content={"detail": str(exc)},
    )
