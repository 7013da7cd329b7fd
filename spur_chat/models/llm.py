"""LLM-related data models and types (provider-agnostic)."""

from dataclasses import dataclass
from typing import Literal

from pydantic import BaseModel


class LLMMessage(BaseModel):
    """A prior turn handed to the completion gateway."""

    role: Literal["user", "assistant"]
    content: str


@dataclass
class LLMUsage:
    """Token usage information from the LLM provider."""

    input_tokens: int = 0
    output_tokens: int = 0

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens


@dataclass
class LLMResponse:
    """Provider-agnostic response from the completion client."""

    text: str
    stop_reason: str | None
    usage: LLMUsage | None
    model: str
