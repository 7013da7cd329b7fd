"""In-memory conversation storage for local development and tests."""

import uuid
from datetime import UTC, datetime

from spur_chat.exceptions import StorageConstraintError
from spur_chat.models.messages import SENDERS, Conversation, ConversationWithMessages, Message, Sender


class InMemoryConversationRepository:
    """Dict-backed repository with the same contract as the SQL one.

    Data lives for the lifetime of the process only.
    """

    def __init__(self):
        """Initialize empty storage."""
        self.conversations: dict[str, Conversation] = {}
        self.messages: dict[str, list[Message]] = {}

    async def conversation_exists(self, conversation_id: str) -> bool:
        return conversation_id in self.conversations

    async def create_conversation(self) -> str:
        conversation_id = str(uuid.uuid4())
        self.conversations[conversation_id] = Conversation(id=conversation_id, created_at=datetime.now(UTC))
        self.messages[conversation_id] = []
        return conversation_id

    async def save_message(self, conversation_id: str, sender: Sender, text: str) -> Message:
        if sender not in SENDERS:
            raise ValueError(f"Invalid sender: {sender}")
        if conversation_id not in self.conversations:
            raise StorageConstraintError(StorageConstraintError.REFERENCE, details={"conversation_id": conversation_id})

        thread = self.messages[conversation_id]
        created_at = datetime.now(UTC)
        if thread and created_at < thread[-1].created_at:
            created_at = thread[-1].created_at

        message = Message(
            id=str(uuid.uuid4()),
            conversation_id=conversation_id,
            sender=sender,
            text=text,
            created_at=created_at,
        )
        thread.append(message)
        return message

    async def get_history(self, conversation_id: str, limit: int) -> list[Message]:
        if limit <= 0:
            return []
        return list(self.messages.get(conversation_id, [])[-limit:])

    async def get_conversation_with_messages(self, conversation_id: str) -> ConversationWithMessages | None:
        conversation = self.conversations.get(conversation_id)
        if conversation is None:
            return None
        return ConversationWithMessages(conversation=conversation, messages=list(self.messages[conversation_id]))

    def get_message_count(self) -> int:
        """Get the number of stored messages across all conversations."""
        return sum(len(thread) for thread in self.messages.values())
