"""Completion gateway: prompt assembly on top of the provider client."""

from collections.abc import Sequence
from typing import Protocol

from spur_chat.clients.anthropic import AnthropicClient, AnthropicMessage
from spur_chat.exceptions import EmptyReplyError
from spur_chat.models.llm import LLMMessage
from spur_chat.services.prompts import SYSTEM_PROMPT
from spur_chat.utils.logging import get_logger

logger = get_logger(__name__)


class CompletionGateway(Protocol):
    """Interface for reply generation used by the chat service."""

    async def generate(self, history: Sequence[LLMMessage], new_message: str) -> str:
        """Generate the assistant reply to ``new_message`` given prior turns.

        Args:
            history: Prior turns, oldest first, not including ``new_message``
            new_message: The user's latest message

        Returns:
            Reply text, never empty

        Raises:
            UpstreamError: Or one of its subclasses when the provider fails
        """
        ...


class CompletionService:
    """Builds the provider prompt and turns the answer into reply text."""

    def __init__(self, client: AnthropicClient, system_prompt: str = SYSTEM_PROMPT):
        """Initialize completion service.

        Args:
            client: Provider client that performs the call
            system_prompt: Fixed instructions sent with every request
        """
        self.client = client
        self.system_prompt = system_prompt

    def build_messages(self, history: Sequence[LLMMessage], new_message: str) -> list[AnthropicMessage]:
        """Assemble prior turns plus the new user turn in provider format.

        Leading assistant turns are dropped so the payload always opens with
        a user turn, which can happen when the history window cuts a
        conversation between a question and its answer.
        """
        turns = list(history)
        while turns and turns[0].role == "assistant":
            turns.pop(0)

        messages = [AnthropicMessage(role=turn.role, content=turn.content) for turn in turns]
        messages.append(AnthropicMessage(role="user", content=new_message))
        return messages

    async def generate(self, history: Sequence[LLMMessage], new_message: str) -> str:
        messages = self.build_messages(history, new_message)
        logger.debug(f"Requesting completion with {len(messages) - 1} prior turns")

        response = await self.client.create_message(messages, self.system_prompt)

        reply = response.text.strip()
        if not reply:
            logger.error(f"LLM returned empty response (stop reason: {response.stop_reason})")
            raise EmptyReplyError(details={"stop_reason": response.stop_reason})

        if response.usage:
            logger.info(f"Reply from {response.model} used {response.usage.total_tokens} tokens")
        return reply
