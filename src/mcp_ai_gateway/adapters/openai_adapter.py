"""
OpenAI-style API adapter.

Speaks the chat completions format: system messages stay inline and the
key is sent as a bearer token.
"""

from typing import Any, Dict

from ..core.config import ApiFormat
from ..core.interface import AbstractGateway
from ..models.request import ChatCompletionParams

CHAT_COMPLETIONS_PATH = "/chat/completions"


class OpenAIAdapter(AbstractGateway):
    """OpenAI-compatible chat completions adapter."""

    @property
    def api_format(self) -> ApiFormat:
        return ApiFormat.OPENAI

    def build_headers(self) -> Dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self._config.api_key}",
        }

        if self._config.openai_organization:
            headers["OpenAI-Organization"] = self._config.openai_organization

        return headers

    def resolve_url(self) -> str:
        """Append the chat completions path unless the endpoint already has it."""
        url = self._config.api_endpoint
        if url.endswith(CHAT_COMPLETIONS_PATH):
            return url
        if url.endswith("/"):
            return url + CHAT_COMPLETIONS_PATH.lstrip("/")
        return url + CHAT_COMPLETIONS_PATH

    def build_request_body(self, params: ChatCompletionParams) -> Dict[str, Any]:
        return params.to_openai_format()
