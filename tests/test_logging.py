"""Tests for logging configuration."""

import logging

import pytest

from spur_chat.config import AppSettings, LLMSettings, Settings
from spur_chat.main import create_app
from spur_chat.repositories.memory import InMemoryConversationRepository
from spur_chat.utils.logging import LogConfig, get_logger, preview, setup_logging


@pytest.fixture(autouse=True)
def restore_package_level():
    package_logger = logging.getLogger("spur_chat")
    original = package_logger.level
    yield
    package_logger.setLevel(original)


def build_app(level: str, completion):
    settings = Settings(
        APP=AppSettings(ENVIRONMENT="test", STORAGE_BACKEND="memory", LOG_LEVEL=level),
        LLM=LLMSettings(ANTHROPIC_API_KEY="test-key"),
    )
    return create_app(settings, repository=InMemoryConversationRepository(), completion=completion)


class TestLogLevelFromSettings:
    """The LOG_LEVEL setting controls the project's module loggers."""

    def test_debug_enables_module_debug_lines(self, completion, monkeypatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        build_app("DEBUG", completion)

        assert logging.getLogger("spur_chat.services.conversation").isEnabledFor(logging.DEBUG)

    def test_warning_hides_module_info_lines(self, completion, monkeypatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        build_app("WARNING", completion)

        module_logger = logging.getLogger("spur_chat.services.conversation")
        assert not module_logger.isEnabledFor(logging.INFO)
        assert module_logger.isEnabledFor(logging.WARNING)

    def test_noisy_loggers_stay_at_warning(self):
        setup_logging(LogConfig(level="DEBUG"))
        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
        assert logging.getLogger("anthropic").level == logging.WARNING


class TestGetLogger:
    """Tests for get_logger."""

    def test_inherits_level_by_default(self):
        assert get_logger("spur_chat.tests.inherit").level == logging.NOTSET

    def test_explicit_level(self):
        assert get_logger("spur_chat.tests.explicit", "error").level == logging.ERROR

    def test_preview(self):
        assert preview("short") == "short"
        assert preview("a" * 60) == "a" * 50 + "..."
