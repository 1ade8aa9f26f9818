"""
MCP server exposing the ``chat_completion`` tool.

Handlers are registered directly on the low-level server so that failures
travel on the JSON-RPC error channel with proper error codes.
"""

import logging
from typing import Any, Dict, List, Optional

from mcp import types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server
from mcp.shared.exceptions import McpError
from pydantic import ValidationError

from . import __version__
from .core.config import GatewayConfig
from .core.errors import (
    GatewayConnectionError,
    GatewayInvalidRequestError,
    GatewayRequestError,
    GatewayToolNotFoundError,
)
from .core.interface import AbstractGateway
from .core.registry import get_registry
from .models.request import ChatCompletionParams
from .tool import TOOL_NAME, build_tool

logger = logging.getLogger(__name__)

SERVER_NAME = "mcp-ai-gateway"


def _mcp_error(code: int, message: str) -> McpError:
    return McpError(types.ErrorData(code=code, message=message))


def to_mcp_error(error: Exception) -> McpError:
    """Classify an exception raised while serving a tool call."""
    if isinstance(error, GatewayToolNotFoundError):
        return _mcp_error(types.METHOD_NOT_FOUND, error.message)

    if isinstance(error, GatewayInvalidRequestError):
        return _mcp_error(types.INVALID_PARAMS, error.message)

    if isinstance(error, ValidationError):
        details = "; ".join(
            f"{'.'.join(str(p) for p in e['loc'])}: {e['msg']}" for e in error.errors()
        )
        return _mcp_error(types.INTERNAL_ERROR, f"Unexpected error: malformed arguments: {details}")

    if isinstance(error, GatewayRequestError):
        status_code = error.status_code or 500
        return _mcp_error(
            types.INTERNAL_ERROR,
            f"API request failed ({status_code}): {error.message}",
        )

    if isinstance(error, GatewayConnectionError):
        return _mcp_error(types.INTERNAL_ERROR, f"API request failed (500): {error.message}")

    return _mcp_error(types.INTERNAL_ERROR, f"Unexpected error: {error}")


class GatewayServer:
    """Binds a gateway adapter to an MCP server."""

    def __init__(self, config: GatewayConfig, gateway: Optional[AbstractGateway] = None):
        self._config = config
        self._gateway = gateway or get_registry().create_gateway(config)
        self._tool = build_tool(config)

        self._server = Server(SERVER_NAME, version=__version__)
        self._server.request_handlers[types.ListToolsRequest] = self._handle_list_tools
        self._server.request_handlers[types.CallToolRequest] = self._handle_call_tool

    @property
    def server(self) -> Server:
        return self._server

    @property
    def gateway(self) -> AbstractGateway:
        return self._gateway

    async def list_tools(self) -> List[types.Tool]:
        return [self._tool]

    async def call_tool(
        self,
        name: str,
        arguments: Optional[Dict[str, Any]] = None,
    ) -> List[types.TextContent]:
        """
        Run a tool call.

        Args:
            name: Requested tool name
            arguments: Tool arguments

        Returns:
            A single text block holding the upstream response

        Raises:
            McpError: For every failure, classified by error code
        """
        try:
            if name != TOOL_NAME:
                raise GatewayToolNotFoundError(name, gateway=self._gateway.name)

            params = ChatCompletionParams.model_validate(arguments or {})
            result = await self._gateway.chat_completion(params)

        except (GatewayToolNotFoundError, GatewayInvalidRequestError) as e:
            logger.info(f"Rejected tool call {name!r}: {e}")
            raise to_mcp_error(e)
        except (GatewayRequestError, GatewayConnectionError) as e:
            logger.warning(f"Upstream request failed: {e}")
            raise to_mcp_error(e)
        except ValidationError as e:
            logger.warning(f"Malformed arguments for tool call {name!r}: {e}")
            raise to_mcp_error(e)
        except Exception as e:
            logger.exception(f"Unexpected error during tool call {name!r}")
            raise to_mcp_error(e)

        return [types.TextContent(type="text", text=result.to_text())]

    async def _handle_list_tools(self, req: types.ListToolsRequest) -> types.ServerResult:
        tools = await self.list_tools()
        return types.ServerResult(types.ListToolsResult(tools=tools))

    async def _handle_call_tool(self, req: types.CallToolRequest) -> types.ServerResult:
        content = await self.call_tool(req.params.name, req.params.arguments)
        return types.ServerResult(types.CallToolResult(content=content))

    async def run(self) -> None:
        """Serve over stdio until the client disconnects."""
        await self._gateway.connect()
        try:
            async with stdio_server() as (read_stream, write_stream):
                logger.info(f"{SERVER_NAME} {__version__} started ({self._config.api_format.value})")
                await self._server.run(
                    read_stream,
                    write_stream,
                    self._server.create_initialization_options(),
                )
        finally:
            await self._gateway.disconnect()
