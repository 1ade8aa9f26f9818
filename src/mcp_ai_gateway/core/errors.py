"""
Gateway error types.
"""

from typing import Optional


class GatewayError(Exception):
    """Base exception for gateway errors."""

    def __init__(self, message: str, gateway: str = None):
        self.message = message
        self.gateway = gateway
        super().__init__(message)


class GatewayConfigurationError(GatewayError):
    """Raised when the gateway configuration is missing or invalid."""
    pass


class GatewayNotFoundError(GatewayError):
    """Raised when no adapter is registered for an API format."""
    pass


class GatewayToolNotFoundError(GatewayError):
    """Raised when an unknown tool is requested."""

    def __init__(self, tool_name: str, gateway: str = None):
        super().__init__(f"Unknown tool: {tool_name}", gateway)
        self.tool_name = tool_name


class GatewayInvalidRequestError(GatewayError):
    """Raised when request parameters are rejected before dispatch."""
    pass


class GatewayRequestError(GatewayError):
    """Raised when the upstream API answers with a non-success status."""

    def __init__(
        self,
        message: str,
        gateway: str = None,
        status_code: Optional[int] = None,
        body: Optional[str] = None,
    ):
        super().__init__(message, gateway)
        self.status_code = status_code
        self.body = body


class GatewayConnectionError(GatewayError):
    """Raised when connection to the upstream API fails."""
    pass


class GatewayTimeoutError(GatewayConnectionError):
    """Raised when the upstream request times out."""
    pass
