"""
Anthropic-style API adapter.

Speaks the messages format: system instructions are lifted into a
top-level field and the key travels in ``x-api-key``.
"""

from typing import Any, Dict

from ..core.config import ApiFormat
from ..core.interface import AbstractGateway
from ..models.request import ChatCompletionParams


class AnthropicAdapter(AbstractGateway):
    """Anthropic messages API adapter."""

    @property
    def api_format(self) -> ApiFormat:
        return ApiFormat.ANTHROPIC

    def build_headers(self) -> Dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "x-api-key": self._config.api_key,
        }

        if self._config.anthropic_version:
            headers["anthropic-version"] = self._config.anthropic_version

        return headers

    def resolve_url(self) -> str:
        # Used exactly as configured
        return self._config.api_endpoint

    def build_request_body(self, params: ChatCompletionParams) -> Dict[str, Any]:
        return params.to_anthropic_format()
