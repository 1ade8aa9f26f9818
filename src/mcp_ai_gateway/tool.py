"""
Descriptor for the ``chat_completion`` tool.
"""

from typing import Any, Dict, Optional

from mcp import types

from .core.config import GatewayConfig

TOOL_NAME = "chat_completion"


def _with_default(text: str, default: Optional[Any]) -> str:
    if default is None:
        return text
    return f"{text} (default: {default})"


def build_description(config: GatewayConfig) -> str:
    """Tool description naming the configured provider format."""
    description = (
        f"Send a chat completion request to the configured AI API provider "
        f"({config.api_format.value.upper()}). "
        f"Supports parameters like model, messages, temperature, max_tokens, stream, etc. "
        f"Returns the raw response from the API without format conversion."
    )
    if config.description:
        description += f"\n\n{config.description}"
    return description


def build_input_schema(config: GatewayConfig) -> Dict[str, Any]:
    """JSON Schema for the tool arguments."""
    return {
        "type": "object",
        "properties": {
            "model": {
                "type": "string",
                "description": _with_default("Model to use for completion", config.default_model),
            },
            "messages": {
                "type": "array",
                "description": "Array of message objects with role and content",
                "items": {
                    "type": "object",
                    "properties": {
                        "role": {
                            "type": "string",
                            "enum": ["system", "user", "assistant"],
                        },
                        "content": {
                            "type": "string",
                        },
                    },
                    "required": ["role", "content"],
                },
            },
            "temperature": {
                "type": "number",
                "description": _with_default(
                    "Controls randomness in the response", config.default_temperature
                ),
                "minimum": 0,
                "maximum": 2,
            },
            "max_tokens": {
                "type": "number",
                "description": _with_default(
                    "Maximum number of tokens to generate", config.default_max_tokens
                ),
                "minimum": 1,
            },
            "stream": {
                "type": "boolean",
                "description": "Whether to stream the response",
                "default": False,
            },
            "top_p": {
                "type": "number",
                "description": "Controls diversity via nucleus sampling",
                "minimum": 0,
                "maximum": 1,
            },
            "frequency_penalty": {
                "type": "number",
                "description": "Penalizes new tokens based on their frequency",
                "minimum": -2,
                "maximum": 2,
            },
            "presence_penalty": {
                "type": "number",
                "description": "Penalizes new tokens based on whether they appear in the text",
                "minimum": -2,
                "maximum": 2,
            },
            "stop": {
                "oneOf": [
                    {"type": "string"},
                    {
                        "type": "array",
                        "items": {"type": "string"},
                    },
                ],
                "description": "Up to 4 sequences where the API will stop generating further tokens",
            },
        },
        "required": ["messages"],
    }


def build_tool(config: GatewayConfig) -> types.Tool:
    """Build the MCP tool descriptor."""
    return types.Tool(
        name=TOOL_NAME,
        description=build_description(config),
        inputSchema=build_input_schema(config),
    )
