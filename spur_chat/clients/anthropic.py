"""Anthropic API client with timeout handling and error translation."""

import asyncio
import os
from dataclasses import dataclass
from typing import Literal

import anthropic
from anthropic import AsyncAnthropic
from anthropic.types import Message
from pydantic import BaseModel

from spur_chat.exceptions import (
    ConfigurationError,
    UpstreamAuthError,
    UpstreamBusyError,
    UpstreamError,
    UpstreamTimeoutError,
)
from spur_chat.models.llm import LLMResponse, LLMUsage
from spur_chat.utils.logging import get_logger

logger = get_logger(__name__)


class AnthropicMessage(BaseModel):
    """Message format for Anthropic API."""

    role: Literal["user", "assistant"]
    content: str


@dataclass
class AnthropicConfig:
    """Configuration for Anthropic API client."""

    model: str = "claude-3-5-sonnet-20241022"
    max_tokens: int = 500
    temperature: float = 0.7
    timeout: float = 30.0  # seconds, whole request


class AnthropicClient:
    """Low-level Anthropic API client.

    Makes exactly one provider call per request. Retries are left to the
    caller, so the SDK's own retry loop is switched off.
    """

    api_key: str
    client: AsyncAnthropic
    config: AnthropicConfig

    def __init__(
        self,
        api_key: str | None = None,
        config: AnthropicConfig | None = None,
        client: AsyncAnthropic | None = None,
    ):
        """Initialize Anthropic client.

        Args:
            api_key: Anthropic API key (defaults to ANTHROPIC_API_KEY env var)
            config: Client configuration
            client: Pre-built SDK client, mainly for tests
        """
        self.config = config or AnthropicConfig()

        if client is not None:
            self.client = client
            return

        anthropic_api_key = api_key or os.getenv("ANTHROPIC_API_KEY")
        if not anthropic_api_key:
            raise ConfigurationError("ANTHROPIC_API_KEY environment variable is required")

        self.api_key = anthropic_api_key
        self.client = AsyncAnthropic(api_key=self.api_key, max_retries=0, timeout=self.config.timeout)

    async def create_message(self, messages: list[AnthropicMessage], system_prompt: str) -> LLMResponse:
        """Create a message with the Claude API.

        Args:
            messages: Conversation turns, oldest first, ending with the new user turn
            system_prompt: System prompt for Claude

        Returns:
            Provider-agnostic response holding the concatenated text blocks

        Raises:
            UpstreamAuthError: Provider rejected the credentials
            UpstreamBusyError: Provider is rate limiting or failing with 5xx
            UpstreamTimeoutError: No answer within the configured timeout
            UpstreamError: Any other provider failure
        """
        request_params = {
            "model": self.config.model,
            "max_tokens": self.config.max_tokens,
            "temperature": self.config.temperature,
            "system": system_prompt,
            "messages": [msg.model_dump() for msg in messages],
        }

        logger.debug(f"Making Anthropic API call with model: {self.config.model}, {len(messages)} messages")
        try:
            async with asyncio.timeout(self.config.timeout):
                response: Message = await self.client.messages.create(**request_params)
        except TimeoutError as e:
            logger.warning(f"Anthropic call exceeded {self.config.timeout}s")
            raise UpstreamTimeoutError(details={"timeout": self.config.timeout}) from e
        except anthropic.APIError as e:
            raise self._translate_error(e) from e

        usage = None
        if response.usage:
            usage = LLMUsage(input_tokens=response.usage.input_tokens, output_tokens=response.usage.output_tokens)
            logger.debug(f"Token usage - Input: {usage.input_tokens}, Output: {usage.output_tokens}")

        text = "".join(block.text for block in response.content if block.type == "text")

        logger.debug(f"Response received - Stop reason: {response.stop_reason}, Content blocks: {len(response.content)}")

        return LLMResponse(
            text=text,
            stop_reason=response.stop_reason,
            usage=usage,
            model=response.model,
        )

    def _translate_error(self, error: anthropic.APIError) -> UpstreamError:
        """Map an SDK exception onto the upstream error taxonomy."""
        status_code = getattr(error, "status_code", None)
        logger.error(f"Anthropic API error: status={status_code}, type={type(error).__name__}, message={error.message}")

        if isinstance(error, anthropic.APITimeoutError):
            return UpstreamTimeoutError(details={"timeout": self.config.timeout})
        if isinstance(error, anthropic.AuthenticationError | anthropic.PermissionDeniedError):
            return UpstreamAuthError(details={"status_code": status_code})
        if isinstance(error, anthropic.RateLimitError):
            return UpstreamBusyError(details={"status_code": status_code})
        if isinstance(error, anthropic.APIStatusError) and error.status_code >= 500:
            return UpstreamBusyError(
                "AI service is temporarily unavailable. Please try again.",
                details={"status_code": status_code},
            )
        return UpstreamError(details={"status_code": status_code})
