"""Conversation persistence gateways."""

from spur_chat.repositories.base import ConversationRepository
from spur_chat.repositories.memory import InMemoryConversationRepository
from spur_chat.repositories.sql import SqlConversationRepository

__all__ = ["ConversationRepository", "InMemoryConversationRepository", "SqlConversationRepository"]
