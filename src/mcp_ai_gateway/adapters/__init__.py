"""
Gateway adapters for the supported wire formats.
"""

from .openai_adapter import OpenAIAdapter
from .anthropic_adapter import AnthropicAdapter

__all__ = [
    "OpenAIAdapter",
    "AnthropicAdapter",
]
