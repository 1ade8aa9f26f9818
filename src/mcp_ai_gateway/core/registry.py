"""
Gateway registry mapping API formats to adapter classes.
"""

import logging
from typing import Dict, List, Optional, Type

import httpx

from .config import ApiFormat, GatewayConfig
from .interface import AbstractGateway
from .errors import GatewayNotFoundError

logger = logging.getLogger(__name__)


class GatewayRegistry:
    """
    Registry for gateway adapters.

    Each ``ApiFormat`` maps to exactly one adapter class.
    """

    def __init__(self):
        """Initialize the registry."""
        self._adapters: Dict[ApiFormat, Type[AbstractGateway]] = {}

    def register_adapter(
        self,
        api_format: ApiFormat,
        adapter_class: Type[AbstractGateway]
    ) -> None:
        """
        Register a gateway adapter class.

        Args:
            api_format: Wire format the adapter speaks
            adapter_class: Adapter class to register
        """
        self._adapters[api_format] = adapter_class
        logger.debug(f"Registered gateway adapter: {api_format.value}")

    def get_adapter(self, api_format: ApiFormat) -> Type[AbstractGateway]:
        """
        Get the adapter class for a format.

        Raises:
            GatewayNotFoundError: If no adapter is registered
        """
        if api_format not in self._adapters:
            raise GatewayNotFoundError(f"No adapter registered for format: {api_format.value}")
        return self._adapters[api_format]

    def list_formats(self) -> List[str]:
        """List registered formats."""
        return [f.value for f in self._adapters]

    def create_gateway(
        self,
        config: GatewayConfig,
        name: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> AbstractGateway:
        """
        Create the gateway for a configuration.

        Args:
            config: Gateway configuration
            name: Optional instance name
            transport: Optional httpx transport

        Returns:
            Configured gateway instance
        """
        adapter_class = self.get_adapter(config.api_format)
        instance = adapter_class(config, name=name, transport=transport)

        logger.info(f"Created gateway instance: {instance.name} (format: {config.api_format.value})")
        return instance


# Global registry instance
_registry: Optional[GatewayRegistry] = None


def get_registry() -> GatewayRegistry:
    """Get the global gateway registry with the built-in adapters."""
    global _registry
    if _registry is None:
        from ..adapters import AnthropicAdapter, OpenAIAdapter

        _registry = GatewayRegistry()
        _registry.register_adapter(ApiFormat.OPENAI, OpenAIAdapter)
        _registry.register_adapter(ApiFormat.ANTHROPIC, AnthropicAdapter)
    return _registry
