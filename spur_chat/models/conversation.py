"""Request and response models for the chat HTTP API."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from spur_chat.models.messages import ConversationWithMessages, Sender


class ChatRequest(BaseModel):
    """Request model for the send-message endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    message: str
    session_id: str | None = Field(default=None, alias="sessionId")


class ChatResponse(BaseModel):
    """Response model for the send-message endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    reply: str
    session_id: str = Field(alias="sessionId")


class ConversationView(BaseModel):
    """Conversation header as returned to clients."""

    id: str
    created_at: datetime


class MessageView(BaseModel):
    """Message as returned to clients."""

    id: str
    conversation_id: str
    sender: Sender
    text: str
    created_at: datetime


class ConversationDetailResponse(BaseModel):
    """Response model for the conversation history endpoint."""

    conversation: ConversationView
    messages: list[MessageView]

    @classmethod
    def from_record(cls, record: ConversationWithMessages) -> "ConversationDetailResponse":
        return cls(
            conversation=ConversationView(id=record.conversation.id, created_at=record.conversation.created_at),
            messages=[
                MessageView(
                    id=m.id,
                    conversation_id=m.conversation_id,
                    sender=m.sender,
                    text=m.text,
                    created_at=m.created_at,
                )
                for m in record.messages
            ],
        )


class HealthResponse(BaseModel):
    """Response model for health check endpoint."""

    status: str
    timestamp: datetime
    version: str


class ErrorResponse(BaseModel):
    """Body of every error response."""

    error: str
    status: int
