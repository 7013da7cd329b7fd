"""Persistence gateway interface consumed by the chat service."""

from typing import Protocol

from spur_chat.models.messages import ConversationWithMessages, Message, Sender


class ConversationRepository(Protocol):
    """Interface for conversation storage.

    Every call is atomic on its own; callers never need a transaction that
    spans two calls. Implementations generate ids and timestamps themselves.
    """

    async def conversation_exists(self, conversation_id: str) -> bool:
        """Return True if a conversation with this id is stored."""
        ...

    async def create_conversation(self) -> str:
        """Insert a new conversation stamped with the current time and return its id."""
        ...

    async def save_message(self, conversation_id: str, sender: Sender, text: str) -> Message:
        """Insert a message stamped with the current time and return it.

        Raises:
            StorageConstraintError: If the conversation does not exist
        """
        ...

    async def get_history(self, conversation_id: str, limit: int) -> list[Message]:
        """Return the most recent ``limit`` messages, oldest first."""
        ...

    async def get_conversation_with_messages(self, conversation_id: str) -> ConversationWithMessages | None:
        """Return the conversation with all of its messages, or None if it does not exist."""
        ...
