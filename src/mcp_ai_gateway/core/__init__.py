"""
Core gateway components.
"""

from .config import ApiFormat, GatewayConfig, load_config
from .errors import (
    GatewayError,
    GatewayConfigurationError,
    GatewayNotFoundError,
    GatewayToolNotFoundError,
    GatewayInvalidRequestError,
    GatewayRequestError,
    GatewayConnectionError,
    GatewayTimeoutError,
)
from .interface import AbstractGateway
from .registry import GatewayRegistry, get_registry

__all__ = [
    "AbstractGateway",
    "ApiFormat",
    "GatewayRegistry",
    "GatewayConfig",
    "get_registry",
    "load_config",
    "GatewayError",
    "GatewayConfigurationError",
    "GatewayNotFoundError",
    "GatewayToolNotFoundError",
    "GatewayInvalidRequestError",
    "GatewayRequestError",
    "GatewayConnectionError",
    "GatewayTimeoutError",
]
