"""Conversation service: the orchestration core of the chat backend."""

import re
from dataclasses import dataclass

from spur_chat.exceptions import ChatError, NotFoundError, ValidationError
from spur_chat.models.llm import LLMMessage
from spur_chat.models.messages import ConversationWithMessages
from spur_chat.repositories.base import ConversationRepository
from spur_chat.services.completion import CompletionGateway
from spur_chat.utils.logging import get_logger, preview

logger = get_logger(__name__)

SESSION_ID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
    re.IGNORECASE,
)


def normalize_session_id(session_id: str | None) -> str | None:
    """Validate a client-supplied session id.

    Args:
        session_id: Raw value from the client, possibly blank

    Returns:
        Lowercased id, or None when the value is absent or blank

    Raises:
        ValidationError: If the value is not a UUID v4
    """
    if session_id is None:
        return None
    if not isinstance(session_id, str):
        raise ValidationError("Invalid session id format")

    candidate = session_id.strip()
    if not candidate:
        return None
    if not SESSION_ID_PATTERN.match(candidate):
        raise ValidationError("Invalid session id format", {"session_id": preview(candidate, 64)})
    return candidate.lower()


@dataclass(frozen=True)
class ChatConfig:
    """Limits applied to every chat request."""

    max_message_length: int = 2000
    max_history_messages: int = 10


@dataclass(frozen=True)
class ChatReply:
    """Result of processing one user message."""

    reply: str
    session_id: str


class ConversationService:
    """Runs one chat turn: validate, persist, ask the model, persist the answer.

    The service holds no mutable state of its own. Two requests for the same
    conversation may run concurrently and read the same history snapshot;
    ordering only guarantees that a user turn is stored before the model is
    called and its reply is stored after.
    """

    def __init__(
        self,
        repository: ConversationRepository,
        completion: CompletionGateway,
        config: ChatConfig | None = None,
    ):
        """Initialize conversation service.

        Args:
            repository: Persistence gateway for conversations and messages
            completion: Gateway that produces assistant replies
            config: Message and history limits
        """
        self.repository = repository
        self.completion = completion
        self.config = config or ChatConfig()

    def validate_message(self, message: str) -> str:
        """Trim and check a user message.

        Returns:
            The trimmed message

        Raises:
            ValidationError: If the message is not a string, blank, or too long
        """
        if not isinstance(message, str):
            raise ValidationError("Message must be a string")

        trimmed = message.strip()
        if not trimmed:
            raise ValidationError("Message cannot be empty")

        limit = self.config.max_message_length
        if len(trimmed) > limit:
            raise ValidationError(
                f"Message is too long. Maximum {limit} characters allowed.",
                {"max_length": limit, "length": len(trimmed)},
            )
        return trimmed

    async def process_message(self, message: str, session_id: str | None = None) -> ChatReply:
        """Process a user message and return the assistant reply.

        A new conversation is created when no session id is given. A given
        session id must name an existing conversation.

        If the completion gateway fails, the user message stays stored
        without an answer and the error propagates; resubmitting with the
        same session id continues the conversation.

        Raises:
            ValidationError: Bad message or malformed session id
            NotFoundError: Session id does not name a stored conversation
            UpstreamError: Completion gateway failure (or a subclass)
            StorageError: Persistence failure (or a subclass)
        """
        text = self.validate_message(message)
        requested_id = normalize_session_id(session_id)

        if requested_id is None:
            conversation_id = await self.repository.create_conversation()
            logger.info(f"Created conversation {conversation_id}")
        else:
            if not await self.repository.conversation_exists(requested_id):
                logger.warning(f"Unknown session id: {requested_id}")
                raise NotFoundError(
                    "Conversation",
                    requested_id,
                    "Conversation not found. Please start a new chat.",
                )
            conversation_id = requested_id

        logger.info(f"Processing message for session {conversation_id}: {preview(text)}")
        user_message = await self.repository.save_message(conversation_id, "user", text)

        window = await self.repository.get_history(conversation_id, self.config.max_history_messages)
        history = [LLMMessage(role=m.sender, content=m.text) for m in window if m.id != user_message.id]
        logger.debug(f"History window for {conversation_id}: {len(history)} prior turns")

        try:
            reply = await self.completion.generate(history, text)
        except ChatError as e:
            logger.warning(
                f"Completion failed for session {conversation_id} ({e.error_kind}); user turn left unanswered"
            )
            raise

        await self.repository.save_message(conversation_id, "assistant", reply)
        logger.info(f"Generated response for session {conversation_id}: {preview(reply)}")

        return ChatReply(reply=reply, session_id=conversation_id)

    async def get_conversation(self, session_id: str) -> ConversationWithMessages:
        """Fetch a conversation and all of its messages, oldest first.

        Raises:
            ValidationError: Malformed or blank session id
            NotFoundError: No such conversation
        """
        conversation_id = normalize_session_id(session_id)
        if conversation_id is None:
            raise ValidationError("Session ID is required")

        record = await self.repository.get_conversation_with_messages(conversation_id)
        if record is None:
            raise NotFoundError("Conversation", conversation_id)
        return record
