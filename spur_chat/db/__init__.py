"""Database engine lifecycle and schema."""

from spur_chat.db.resources import DatabaseResource
from spur_chat.db.schema import conversations, messages, metadata

__all__ = ["DatabaseResource", "conversations", "messages", "metadata"]
