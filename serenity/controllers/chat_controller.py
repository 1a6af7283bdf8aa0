"""API controller for therapy chat sessions.

The caller identifies itself with the ``user_id`` query parameter;
authentication is handled in front of this service.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from loguru import logger

from ..models.chat_message import ChatMessage
from ..models.chat_request import CreateSessionResponse, SendMessageRequest, SendMessageResponse
from ..models.chat_session import ChatSession
from ..services.chat_service import ChatService, get_chat_service
from ..utils.error_handler import ChatError, InvalidUserIdError, SessionNotFoundError

router = APIRouter(prefix="/chat", tags=["Chat"])


@router.post(
    "/sessions",
    response_model=CreateSessionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_session_endpoint(
    user_id: str,
    service: ChatService = Depends(get_chat_service),
) -> CreateSessionResponse:
    """Start a new therapy session for the user."""
    try:
        session = service.create_session(user_id)
        return CreateSessionResponse(
            message="Chat session created successfully",
            session_id=session.session_id,
        )
    except InvalidUserIdError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception("Failed to create session")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create session",
        ) from exc


@router.get("/sessions", response_model=list[ChatSession])
async def list_sessions_endpoint(
    user_id: str,
    service: ChatService = Depends(get_chat_service),
) -> list[ChatSession]:
    """List all sessions for a user, most recently active first."""
    logger.info("Listing sessions for user: {}", user_id)
    return service.list_sessions(user_id)


@router.get("/sessions/{session_id}", response_model=ChatSession)
async def get_session_endpoint(
    session_id: str,
    user_id: str,
    service: ChatService = Depends(get_chat_service),
) -> ChatSession:
    """Retrieve a single session for a user."""
    try:
        return service.get_session(user_id, session_id)
    except SessionNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Session not found") from exc


@router.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_session_endpoint(
    session_id: str,
    user_id: str,
    service: ChatService = Depends(get_chat_service),
) -> None:
    """Delete a specific session for a user."""
    try:
        service.delete_session(user_id, session_id)
        return None
    except SessionNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Session not found") from exc


@router.post("/sessions/{session_id}/messages", response_model=SendMessageResponse)
async def send_message_endpoint(
    session_id: str,
    user_id: str,
    request: SendMessageRequest,
    service: ChatService = Depends(get_chat_service),
) -> SendMessageResponse:
    """Send a message and return the therapist's reply with its analysis."""
    try:
        return await service.send_message(user_id, session_id, request.message)
    except SessionNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Session not found") from exc
    except ChatError as exc:
        logger.error("ChatError: {}", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(exc),
        ) from exc
    except Exception as exc:
        logger.exception("Unhandled exception during message processing")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error",
        ) from exc


@router.get("/sessions/{session_id}/history", response_model=list[ChatMessage])
async def get_history_endpoint(
    session_id: str,
    user_id: str,
    service: ChatService = Depends(get_chat_service),
) -> list[ChatMessage]:
    """Return the session's messages in chronological order."""
    try:
        return service.get_history(user_id, session_id)
    except SessionNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Session not found") from exc
