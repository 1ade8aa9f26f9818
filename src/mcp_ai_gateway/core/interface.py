"""
Abstract Gateway interface definition.

Defines the contract each wire-format adapter implements. The shared
request path (defaults, validation, dispatch, error classification) lives
here; adapters only supply headers, endpoint and body shape.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import httpx

from .config import ApiFormat, GatewayConfig
from .errors import (
    GatewayConnectionError,
    GatewayInvalidRequestError,
    GatewayRequestError,
    GatewayTimeoutError,
)
from ..models.request import ChatCompletionParams
from ..models.response import CompletionResult

logger = logging.getLogger(__name__)


class AbstractGateway(ABC):
    """
    Abstract base class for upstream API adapters.

    One instance serves every invocation of a running server. The HTTP
    client is created on first use and shared across concurrent calls.
    """

    def __init__(
        self,
        config: GatewayConfig,
        name: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize adapter.

        Args:
            config: Gateway configuration
            name: Instance name used in logs and errors
            transport: Optional httpx transport, mainly for tests
        """
        self._config = config
        self._name = name or f"{self.api_format.value}-gateway"
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def name(self) -> str:
        return self._name

    @property
    def config(self) -> GatewayConfig:
        return self._config

    @property
    @abstractmethod
    def api_format(self) -> ApiFormat:
        """Wire format this adapter speaks."""
        pass

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    @abstractmethod
    def build_headers(self) -> Dict[str, str]:
        """
        Build authentication and content headers.

        Returns:
            Header mapping for every upstream request
        """
        pass

    @abstractmethod
    def resolve_url(self) -> str:
        """
        Resolve the URL requests are posted to.

        Returns:
            Absolute endpoint URL
        """
        pass

    @abstractmethod
    def build_request_body(self, params: ChatCompletionParams) -> Dict[str, Any]:
        """
        Translate merged parameters into the provider's request body.

        Args:
            params: Parameters with defaults already applied

        Returns:
            JSON-serializable request body
        """
        pass

    async def connect(self) -> None:
        """Initialize the shared HTTP client."""
        if self._client is not None:
            return

        self._client = httpx.AsyncClient(
            headers=self.build_headers(),
            timeout=self._config.request_timeout,
            proxy=self._config.proxy_url,
            transport=self._transport,
            follow_redirects=True,
        )

        logger.info(f"Connected {self._name} to {self.resolve_url()}")

    async def disconnect(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None
            logger.info(f"Disconnected {self._name}")

    def prepare(self, params: ChatCompletionParams) -> Dict[str, Any]:
        """
        Apply defaults, validate and translate parameters.

        Raises:
            GatewayInvalidRequestError: If messages are missing or empty
        """
        merged = params.with_defaults(self._config)

        if not merged.messages:
            raise GatewayInvalidRequestError(
                "messages parameter is required and cannot be empty",
                gateway=self._name,
            )

        return self.build_request_body(merged)

    async def chat_completion(self, params: ChatCompletionParams) -> CompletionResult:
        """
        Forward a chat completion to the upstream API.

        Args:
            params: Caller-supplied parameters

        Returns:
            The upstream response, unmodified
        """
        body = self.prepare(params)

        if not self._client:
            await self.connect()

        url = self.resolve_url()
        logger.debug(f"POST {url} model={body.get('model')} messages={len(body['messages'])}")

        try:
            response = await self._client.post(url, json=body)
        except httpx.TimeoutException as e:
            raise GatewayTimeoutError(str(e) or "Request timed out", gateway=self._name)
        except httpx.RequestError as e:
            raise GatewayConnectionError(str(e) or e.__class__.__name__, gateway=self._name)

        self._check_response_errors(response)

        return CompletionResult.from_httpx(response)

    def _check_response_errors(self, response: httpx.Response) -> None:
        """Raise GatewayRequestError for any non-success status."""
        if response.is_success:
            return

        message = _extract_error_message(response) or (
            f"Request failed with status code {response.status_code}"
        )
        logger.warning(f"{self._name} upstream returned {response.status_code}: {message}")

        raise GatewayRequestError(
            message,
            gateway=self._name,
            status_code=response.status_code,
            body=response.text,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r}, format={self.api_format.value!r})"


def _extract_error_message(response: httpx.Response) -> Optional[str]:
    """Pull ``error.message`` out of a JSON error body, if present."""
    try:
        data = response.json()
    except ValueError:
        return None

    if not isinstance(data, dict):
        return None

    error = data.get("error")
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])

    return None
