"""
Unified request models for the gateway.
"""

from typing import TYPE_CHECKING, Optional, List, Dict, Any
from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from ..core.config import GatewayConfig

# Anthropic requires max_tokens on every request
ANTHROPIC_DEFAULT_MAX_TOKENS = 1024

OPENAI_OPTIONAL_FIELDS = (
    "model",
    "temperature",
    "max_tokens",
    "stream",
    "top_p",
    "frequency_penalty",
    "presence_penalty",
    "stop",
)

ANTHROPIC_OPTIONAL_FIELDS = ("model", "temperature", "top_p", "stream")


class ChatMessage(BaseModel):
    """
    A single conversation message.

    Only the shape is checked; role, content and any extra keys are
    forwarded exactly as received.
    """
    model_config = ConfigDict(extra="allow")

    role: Any
    content: Any

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump()


class ChatCompletionParams(BaseModel):
    """
    Arguments of the ``chat_completion`` tool.

    Every field is optional here; ``messages`` is checked after defaults
    are applied. ``None`` means the caller did not supply a value.
    Values are not type-checked or coerced; the upstream API validates them.
    """
    model_config = ConfigDict(extra="ignore")

    model: Optional[Any] = Field(default=None, description="Model identifier")
    messages: Optional[List[ChatMessage]] = Field(default=None, description="Conversation messages")

    temperature: Optional[Any] = None
    max_tokens: Optional[Any] = None
    stream: Optional[Any] = None
    top_p: Optional[Any] = None
    frequency_penalty: Optional[Any] = None
    presence_penalty: Optional[Any] = None
    stop: Optional[Any] = None

    def with_defaults(self, config: "GatewayConfig") -> "ChatCompletionParams":
        """Return a copy with configured defaults filled in for absent values."""
        return self.model_copy(update={
            "model": self.model or config.default_model,
            "temperature": (
                self.temperature if self.temperature is not None else config.default_temperature
            ),
            "max_tokens": (
                self.max_tokens if self.max_tokens is not None else config.default_max_tokens
            ),
        })

    def to_openai_format(self) -> Dict[str, Any]:
        """Convert to OpenAI chat completions format."""
        data = {
            "messages": [m.to_wire() for m in self.messages or []],
        }

        for field in OPENAI_OPTIONAL_FIELDS:
            value = getattr(self, field)
            if value is not None:
                data[field] = value

        return data

    def to_anthropic_format(self) -> Dict[str, Any]:
        """Convert to Anthropic messages format."""
        # Only the first system message is honored
        system = None
        messages = []

        for m in self.messages or []:
            if m.role == "system":
                if system is None:
                    system = m.content
            else:
                messages.append(m.to_wire())

        data = {
            "messages": messages,
            "max_tokens": (
                self.max_tokens if self.max_tokens is not None else ANTHROPIC_DEFAULT_MAX_TOKENS
            ),
        }

        if system is not None:
            data["system"] = system

        for field in ANTHROPIC_OPTIONAL_FIELDS:
            value = getattr(self, field)
            if value is not None:
                data[field] = value

        if self.stop is not None:
            data["stop_sequences"] = self.stop if isinstance(self.stop, list) else [self.stop]

        return data
