"""Tests for the conversation orchestration service."""

import uuid

import pytest

from spur_chat.exceptions import NotFoundError, UpstreamBusyError, ValidationError
from spur_chat.services.conversation import ChatConfig, ConversationService, normalize_session_id


class TestNormalizeSessionId:
    """Tests for session id validation."""

    def test_none_and_blank(self):
        assert normalize_session_id(None) is None
        assert normalize_session_id("") is None
        assert normalize_session_id("   ") is None

    def test_valid_id_is_lowercased(self):
        value = str(uuid.uuid4())
        assert normalize_session_id(value.upper()) == value
        assert normalize_session_id(f"  {value}  ") == value

    @pytest.mark.parametrize(
        "value",
        [
            "not-a-uuid",
            "12345",
            # version 1 uuid
            "6fa459ea-ee8a-11ca-b79a-0a0027000003",
            str(uuid.uuid4()) + "0",
        ],
    )
    def test_invalid_ids(self, value):
        with pytest.raises(ValidationError, match="Invalid session id format"):
            normalize_session_id(value)

    def test_non_string(self):
        with pytest.raises(ValidationError):
            normalize_session_id(123)


class TestValidateMessage:
    """Tests for message validation."""

    def test_trims(self, service):
        assert service.validate_message("  hi  ") == "hi"

    def test_rejects_non_string(self, service):
        with pytest.raises(ValidationError, match="Message must be a string"):
            service.validate_message(None)

    def test_rejects_blank(self, service):
        with pytest.raises(ValidationError, match="Message cannot be empty"):
            service.validate_message("\n\t ")

    def test_length_measured_after_trim(self, service):
        assert service.validate_message("  " + "a" * 2000 + "  ") == "a" * 2000

    def test_rejects_too_long(self, service):
        with pytest.raises(ValidationError) as exc_info:
            service.validate_message("a" * 2001)
        assert exc_info.value.details == {"max_length": 2000, "length": 2001}


class TestProcessMessage:
    """Tests for ConversationService.process_message."""

    @pytest.mark.asyncio
    async def test_creates_conversation(self, service, repository, completion):
        """First message creates a conversation and stores both turns."""
        result = await service.process_message("Hi")

        assert result.reply == completion.reply
        assert await repository.conversation_exists(result.session_id)
        assert [m.sender for m in repository.messages[result.session_id]] == ["user", "assistant"]

    @pytest.mark.asyncio
    async def test_first_turn_has_empty_history(self, service, completion):
        """The new user message is never part of the history handed to the model."""
        await service.process_message("Hi")

        history, new_message = completion.calls[0]
        assert history == []
        assert new_message == "Hi"

    @pytest.mark.asyncio
    async def test_history_is_recent_window_oldest_first(self, repository, completion):
        """History holds at most the configured window of the latest prior turns."""
        service = ConversationService(repository, completion, ChatConfig(max_history_messages=4))

        session_id = (await service.process_message("m1")).session_id
        for text in ["m2", "m3", "m4"]:
            await service.process_message(text, session_id)

        history, new_message = completion.calls[-1]
        assert new_message == "m4"
        # Window of 4 includes the new user turn, which is then excluded
        assert [(t.role, t.content) for t in history] == [
            ("assistant", completion.reply),
            ("user", "m3"),
            ("assistant", completion.reply),
        ]

    @pytest.mark.asyncio
    async def test_unknown_session(self, service, repository, completion):
        """A well-formed unknown id writes nothing and calls nothing."""
        with pytest.raises(NotFoundError):
            await service.process_message("Hi", str(uuid.uuid4()))

        assert repository.conversations == {}
        assert completion.calls == []

    @pytest.mark.asyncio
    async def test_validation_precedes_storage(self, service, repository):
        """Invalid input never creates a conversation."""
        with pytest.raises(ValidationError):
            await service.process_message("", None)
        with pytest.raises(ValidationError):
            await service.process_message("Hi", "bogus")

        assert repository.conversations == {}

    @pytest.mark.asyncio
    async def test_completion_failure_keeps_user_turn(self, service, repository, completion):
        """On provider failure the user turn stays stored without an answer."""
        completion.error = UpstreamBusyError()

        with pytest.raises(UpstreamBusyError):
            await service.process_message("Hi")

        (session_id,) = repository.conversations
        assert [(m.sender, m.text) for m in repository.messages[session_id]] == [("user", "Hi")]

    @pytest.mark.asyncio
    async def test_retry_sees_unanswered_turn(self, service, repository, completion):
        """After a failure the unanswered user turn appears in the next history."""
        session_id = (await service.process_message("Hi")).session_id
        completion.error = UpstreamBusyError()
        with pytest.raises(UpstreamBusyError):
            await service.process_message("Question", session_id)

        completion.error = None
        await service.process_message("Question", session_id)

        history, _ = completion.calls[-1]
        assert [t.content for t in history][-1] == "Question"

    @pytest.mark.asyncio
    async def test_uppercase_session_id(self, service):
        """Session ids are accepted regardless of case."""
        session_id = (await service.process_message("Hi")).session_id
        result = await service.process_message("Again", session_id.upper())
        assert result.session_id == session_id


class TestGetConversation:
    """Tests for ConversationService.get_conversation."""

    @pytest.mark.asyncio
    async def test_returns_messages(self, service):
        session_id = (await service.process_message("Hi")).session_id

        record = await service.get_conversation(session_id)

        assert record.conversation.id == session_id
        assert [m.text for m in record.messages][0] == "Hi"
        timestamps = [m.created_at for m in record.messages]
        assert timestamps == sorted(timestamps)

    @pytest.mark.asyncio
    async def test_blank_id(self, service):
        with pytest.raises(ValidationError, match="Session ID is required"):
            await service.get_conversation("  ")

    @pytest.mark.asyncio
    async def test_unknown_id(self, service):
        with pytest.raises(NotFoundError):
            await service.get_conversation(str(uuid.uuid4()))

    @pytest.mark.asyncio
    async def test_read_does_not_write(self, service, repository):
        session_id = (await service.process_message("Hi")).session_id
        count = repository.get_message_count()

        await service.get_conversation(session_id)
        await service.get_conversation(session_id)

        assert repository.get_message_count() == count
