"""Tests for the Anthropic client wrapper."""

import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock, Mock

import anthropic
import httpx
import pytest

from spur_chat.clients.anthropic import AnthropicClient, AnthropicConfig, AnthropicMessage
from spur_chat.exceptions import (
    ConfigurationError,
    ErrorKind,
    UpstreamAuthError,
    UpstreamBusyError,
    UpstreamError,
    UpstreamTimeoutError,
)

REQUEST = httpx.Request("POST", "https://api.anthropic.com/v1/messages")


def status_error(error_class: type[anthropic.APIStatusError], status_code: int) -> anthropic.APIStatusError:
    response = httpx.Response(status_code, request=REQUEST)
    return error_class(f"status {status_code}", response=response, body=None)


def make_client(config: AnthropicConfig | None = None) -> tuple[AnthropicClient, AsyncMock]:
    sdk = Mock()
    sdk.messages.create = AsyncMock()
    return AnthropicClient(config=config, client=sdk), sdk.messages.create


def sdk_message(*blocks, stop_reason: str = "end_turn"):
    return SimpleNamespace(
        content=list(blocks),
        stop_reason=stop_reason,
        model="claude-test",
        usage=SimpleNamespace(input_tokens=12, output_tokens=7),
    )


class TestAnthropicClientInit:
    """Tests for client construction."""

    def test_missing_api_key(self, monkeypatch):
        monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
        with pytest.raises(ConfigurationError, match="ANTHROPIC_API_KEY"):
            AnthropicClient()

    def test_sdk_retries_disabled(self):
        client = AnthropicClient(api_key="test-key", config=AnthropicConfig(timeout=12.0))
        assert client.client.max_retries == 0
        assert client.config.timeout == 12.0


class TestCreateMessage:
    """Tests for AnthropicClient.create_message."""

    @pytest.mark.asyncio
    async def test_joins_text_blocks(self):
        client, create = make_client(AnthropicConfig(model="claude-test", max_tokens=500, temperature=0.7))
        create.return_value = sdk_message(
            SimpleNamespace(type="text", text="Hello "),
            SimpleNamespace(type="tool_use", id="x"),
            SimpleNamespace(type="text", text="there"),
        )

        response = await client.create_message([AnthropicMessage(role="user", content="Hi")], "system")

        assert response.text == "Hello there"
        assert response.usage.total_tokens == 19
        kwargs = create.call_args.kwargs
        assert kwargs["model"] == "claude-test"
        assert kwargs["max_tokens"] == 500
        assert kwargs["temperature"] == 0.7
        assert kwargs["system"] == "system"
        assert kwargs["messages"] == [{"role": "user", "content": "Hi"}]

    @pytest.mark.asyncio
    async def test_overall_timeout(self):
        client, create = make_client(AnthropicConfig(timeout=0.01))

        async def slow(**kwargs):
            await asyncio.sleep(1)

        create.side_effect = slow

        with pytest.raises(UpstreamTimeoutError):
            await client.create_message([AnthropicMessage(role="user", content="Hi")], "system")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("error", "expected", "kind"),
        [
            (status_error(anthropic.AuthenticationError, 401), UpstreamAuthError, ErrorKind.UPSTREAM_AUTH),
            (status_error(anthropic.PermissionDeniedError, 403), UpstreamAuthError, ErrorKind.UPSTREAM_AUTH),
            (status_error(anthropic.RateLimitError, 429), UpstreamBusyError, ErrorKind.UPSTREAM_BUSY),
            (status_error(anthropic.InternalServerError, 500), UpstreamBusyError, ErrorKind.UPSTREAM_BUSY),
            (status_error(anthropic.BadRequestError, 400), UpstreamError, ErrorKind.UPSTREAM),
            (anthropic.APITimeoutError(request=REQUEST), UpstreamTimeoutError, ErrorKind.UPSTREAM_TIMEOUT),
            (anthropic.APIConnectionError(request=REQUEST), UpstreamError, ErrorKind.UPSTREAM),
        ],
    )
    async def test_error_translation(self, error, expected, kind):
        client, create = make_client()
        create.side_effect = error

        with pytest.raises(expected) as exc_info:
            await client.create_message([AnthropicMessage(role="user", content="Hi")], "system")

        assert exc_info.value.error_kind == kind
        assert exc_info.value.__cause__ is error
        # Provider detail never reaches the client-facing message
        assert "status" not in exc_info.value.message
