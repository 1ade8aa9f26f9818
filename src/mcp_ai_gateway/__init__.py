"""
MCP AI Gateway

An MCP server that forwards chat completions to one configured AI API:
- Single ``chat_completion`` tool
- OpenAI-style or Anthropic-style upstream wire format
- Configuration from environment variables or a YAML file
- Raw upstream responses, no format conversion
"""

__version__ = "1.0.0"

from .core.config import ApiFormat, GatewayConfig, load_config
from .core.interface import AbstractGateway
from .core.registry import GatewayRegistry, get_registry
from .models.request import ChatCompletionParams, ChatMessage
from .models.response import CompletionResult

__all__ = [
    "AbstractGateway",
    "ApiFormat",
    "GatewayRegistry",
    "GatewayConfig",
    "get_registry",
    "load_config",
    "ChatCompletionParams",
    "ChatMessage",
    "CompletionResult",
]
