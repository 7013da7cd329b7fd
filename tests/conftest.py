"""Shared fixtures for the chat backend tests."""

from collections.abc import Sequence

import pytest
from fastapi.testclient import TestClient

from spur_chat.config import AppSettings, LLMSettings, Settings
from spur_chat.exceptions import ChatError
from spur_chat.main import create_app
from spur_chat.models.llm import LLMMessage
from spur_chat.repositories.memory import InMemoryConversationRepository
from spur_chat.services.conversation import ChatConfig, ConversationService


class FakeCompletion:
    """Completion gateway that records its calls and answers from a script."""

    def __init__(self, reply: str = "Hello! How can I help you today?"):
        self.reply = reply
        self.error: ChatError | None = None
        self.calls: list[tuple[list[LLMMessage], str]] = []

    async def generate(self, history: Sequence[LLMMessage], new_message: str) -> str:
        self.calls.append((list(history), new_message))
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def repository():
    return InMemoryConversationRepository()


@pytest.fixture
def completion():
    return FakeCompletion()


@pytest.fixture
def service(repository, completion):
    return ConversationService(repository, completion, ChatConfig(max_message_length=2000, max_history_messages=10))


@pytest.fixture
def settings():
    return Settings(
        APP=AppSettings(ENVIRONMENT="test", STORAGE_BACKEND="memory", LOG_LEVEL="WARNING"),
        LLM=LLMSettings(ANTHROPIC_API_KEY="test-key"),
    )


@pytest.fixture
def client(settings, repository, completion):
    app = create_app(settings, repository=repository, completion=completion)
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
