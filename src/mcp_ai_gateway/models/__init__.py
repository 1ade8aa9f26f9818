"""
Gateway data models.
"""

from .request import ChatCompletionParams, ChatMessage, ANTHROPIC_DEFAULT_MAX_TOKENS
from .response import CompletionResult

__all__ = [
    "ChatCompletionParams",
    "ChatMessage",
    "ANTHROPIC_DEFAULT_MAX_TOKENS",
    "CompletionResult",
]
