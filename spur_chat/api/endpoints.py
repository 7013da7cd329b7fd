"""API endpoints for the chat service."""

from datetime import UTC, datetime

from fastapi import APIRouter, Depends, Request

from spur_chat import __version__
from spur_chat.models.conversation import (
    ChatRequest,
    ChatResponse,
    ConversationDetailResponse,
    ErrorResponse,
    HealthResponse,
)
from spur_chat.services.conversation import ConversationService

router = APIRouter()

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
    503: {"model": ErrorResponse},
    504: {"model": ErrorResponse},
}


def get_conversation_service(request: Request) -> ConversationService:
    """Conversation service built at startup."""
    return request.app.state.conversation_service


@router.post("/chat/message", response_model=ChatResponse, responses=ERROR_RESPONSES, tags=["Chat"])
async def send_message(
    request: ChatRequest,
    service: ConversationService = Depends(get_conversation_service),
) -> ChatResponse:
    """Send a message and receive the assistant's reply.

    Omit ``sessionId`` to start a new conversation; the returned ``sessionId``
    continues it.
    """
    result = await service.process_message(request.message, request.session_id)
    return ChatResponse(reply=result.reply, session_id=result.session_id)


@router.get(
    "/chat/{session_id}",
    response_model=ConversationDetailResponse,
    responses=ERROR_RESPONSES,
    tags=["Chat"],
)
async def get_conversation(
    session_id: str,
    service: ConversationService = Depends(get_conversation_service),
) -> ConversationDetailResponse:
    """Get a conversation with its full message history, oldest first."""
    record = await service.get_conversation(session_id)
    return ConversationDetailResponse.from_record(record)


@router.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check() -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(
        status="ok",
        timestamp=datetime.now(UTC),
        version=__version__,
    )
