"""Conversation and message records."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal, get_args

Sender = Literal["user", "assistant"]

SENDERS: tuple[str, ...] = get_args(Sender)


@dataclass(frozen=True)
class Conversation:
    """A durable thread of messages."""

    id: str
    created_at: datetime


@dataclass(frozen=True)
class Message:
    """A single persisted turn of a conversation."""

    id: str
    conversation_id: str
    sender: Sender
    text: str
    created_at: datetime


@dataclass(frozen=True)
class ConversationWithMessages:
    """A conversation together with every message, oldest first."""

    conversation: Conversation
    messages: list[Message] = field(default_factory=list)
