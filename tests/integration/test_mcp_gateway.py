"""
Integration tests for the MCP server surface.

Tests:
- Tool discovery and the tool descriptor
- Tool invocation against a mocked upstream
- Error classification onto MCP error codes
"""

import json

import httpx
import pytest
from mcp import types
from mcp.shared.exceptions import McpError

from mcp_ai_gateway.core.config import ApiFormat, GatewayConfig
from mcp_ai_gateway.core.registry import get_registry
from mcp_ai_gateway.server import GatewayServer
from mcp_ai_gateway.tool import TOOL_NAME, build_tool, build_input_schema


MESSAGES = [{"role": "user", "content": "Hello"}]


def make_config(**overrides) -> GatewayConfig:
    values = {"api_key": "sk-test-key", "api_endpoint": "https://api.example.com/v1"}
    values.update(overrides)
    return GatewayConfig(**values)


class Upstream:
    """Mock upstream API recording requests."""

    def __init__(self, response=None, exc=None):
        self.response = response or httpx.Response(200, json={"id": "chatcmpl-1"})
        self.exc = exc
        self.requests = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.exc is not None:
            raise self.exc(request)
        return self.response


def make_server(upstream: Upstream, **overrides) -> GatewayServer:
    config = make_config(**overrides)
    gateway = get_registry().create_gateway(config, transport=httpx.MockTransport(upstream.handler))
    return GatewayServer(config, gateway=gateway)


class TestToolDescriptor:
    """Test the chat_completion tool descriptor."""

    def test_single_tool(self):
        """Test exactly one tool named chat_completion."""
        tool = build_tool(make_config())
        assert tool.name == "chat_completion"
        assert tool.inputSchema["required"] == ["messages"]

    @pytest.mark.parametrize("api_format,label", [
        (ApiFormat.OPENAI, "(OPENAI)"),
        (ApiFormat.ANTHROPIC, "(ANTHROPIC)"),
    ])
    def test_description_names_format(self, api_format, label):
        """Test the description states the uppercased format."""
        tool = build_tool(make_config(api_format=api_format))
        assert label in tool.description
        assert "without format conversion." in tool.description

    def test_custom_description_appended(self):
        """Test operator text follows a blank line."""
        tool = build_tool(make_config(description="Routes to the internal cluster."))
        assert tool.description.endswith(
            "without format conversion.\n\nRoutes to the internal cluster."
        )

    def test_defaults_shown(self):
        """Test configured defaults appear in property descriptions."""
        schema = build_input_schema(make_config(
            default_model="gpt-4o-mini",
            default_temperature=0.0,
            default_max_tokens=512,
        ))
        properties = schema["properties"]
        assert properties["model"]["description"].endswith("(default: gpt-4o-mini)")
        assert properties["temperature"]["description"].endswith("(default: 0.0)")
        assert properties["max_tokens"]["description"].endswith("(default: 512)")

    def test_defaults_hidden_when_unset(self):
        """Test descriptions carry no default marker without config."""
        properties = build_input_schema(make_config())["properties"]
        for name in ("model", "temperature", "max_tokens"):
            assert "default:" not in properties[name]["description"]

    def test_schema_constraints(self):
        """Test advertised ranges and types."""
        properties = build_input_schema(make_config())["properties"]
        assert (properties["temperature"]["minimum"], properties["temperature"]["maximum"]) == (0, 2)
        assert properties["max_tokens"]["minimum"] == 1
        assert properties["stream"] == {
            "type": "boolean",
            "description": "Whether to stream the response",
            "default": False,
        }
        assert (properties["top_p"]["minimum"], properties["top_p"]["maximum"]) == (0, 1)
        for name in ("frequency_penalty", "presence_penalty"):
            assert (properties[name]["minimum"], properties[name]["maximum"]) == (-2, 2)
        assert properties["stop"]["oneOf"] == [
            {"type": "string"},
            {"type": "array", "items": {"type": "string"}},
        ]
        assert properties["messages"]["items"]["properties"]["role"]["enum"] == [
            "system", "user", "assistant",
        ]


class TestMCPToolDiscovery:
    """Test tools/list handling."""

    @pytest.mark.asyncio
    async def test_list_tools(self):
        """Test listing returns the single tool."""
        server = make_server(Upstream())
        tools = await server.list_tools()
        assert [t.name for t in tools] == [TOOL_NAME]

    @pytest.mark.asyncio
    async def test_list_tools_handler(self):
        """Test the registered request handler."""
        server = make_server(Upstream())
        handler = server.server.request_handlers[types.ListToolsRequest]
        result = await handler(types.ListToolsRequest(method="tools/list"))
        assert [t.name for t in result.root.tools] == [TOOL_NAME]

    def test_tools_capability_advertised(self):
        """Test the server advertises tool support."""
        server = make_server(Upstream())
        options = server.server.create_initialization_options()
        assert options.server_name == "mcp-ai-gateway"
        assert options.capabilities.tools is not None


class TestMCPToolInvocation:
    """Test tools/call handling."""

    @pytest.mark.asyncio
    async def test_invoke_tool_success(self):
        """Test the upstream body comes back verbatim as one text block."""
        body = {"id": "chatcmpl-1", "choices": [{"message": {"role": "assistant", "content": "Hi"}}]}
        upstream = Upstream(httpx.Response(200, json=body))
        server = make_server(upstream)

        content = await server.call_tool(TOOL_NAME, {"model": "gpt-4o-mini", "messages": MESSAGES})

        assert len(content) == 1
        assert content[0].type == "text"
        assert json.loads(content[0].text) == body
        assert content[0].text == json.dumps(body, indent=2)
        assert str(upstream.requests[0].url) == "https://api.example.com/v1/chat/completions"

    @pytest.mark.asyncio
    async def test_call_tool_handler(self):
        """Test the registered request handler wraps content."""
        server = make_server(Upstream())
        handler = server.server.request_handlers[types.CallToolRequest]
        result = await handler(types.CallToolRequest(
            method="tools/call",
            params=types.CallToolRequestParams(name=TOOL_NAME, arguments={"messages": MESSAGES}),
        ))
        assert result.root.content[0].text == json.dumps({"id": "chatcmpl-1"}, indent=2)

    @pytest.mark.asyncio
    async def test_anthropic_translation(self):
        """Test an Anthropic server reshapes the request."""
        upstream = Upstream()
        server = make_server(
            upstream,
            api_format=ApiFormat.ANTHROPIC,
            api_endpoint="https://api.anthropic.com/v1/messages",
            default_model="claude-3-haiku",
        )

        await server.call_tool(TOOL_NAME, {
            "messages": [{"role": "system", "content": "S"}] + MESSAGES,
            "frequency_penalty": 1,
        })

        assert json.loads(upstream.requests[0].content) == {
            "model": "claude-3-haiku",
            "messages": MESSAGES,
            "max_tokens": 1024,
            "system": "S",
        }

    @pytest.mark.asyncio
    async def test_unknown_tool(self):
        """Test unknown tools fail with METHOD_NOT_FOUND and no HTTP call."""
        upstream = Upstream()
        server = make_server(upstream)

        with pytest.raises(McpError) as exc_info:
            await server.call_tool("summarize", {"messages": MESSAGES})

        assert exc_info.value.error.code == types.METHOD_NOT_FOUND
        assert "summarize" in exc_info.value.error.message
        assert upstream.requests == []

    @pytest.mark.parametrize("arguments", [
        {"messages": []},
        {},
        None,
    ])
    @pytest.mark.asyncio
    async def test_missing_messages(self, arguments):
        """Test absent or empty messages fail with INVALID_PARAMS."""
        upstream = Upstream()
        server = make_server(upstream)

        with pytest.raises(McpError) as exc_info:
            await server.call_tool(TOOL_NAME, arguments)

        assert exc_info.value.error.code == types.INVALID_PARAMS
        assert "messages" in exc_info.value.error.message
        assert upstream.requests == []

    @pytest.mark.asyncio
    async def test_arguments_forwarded_unvalidated(self):
        """Test values outside the advertised schema reach the upstream unchanged."""
        upstream = Upstream()
        server = make_server(upstream)
        messages = [
            {"role": "robot", "content": "x"},
            {"role": "user", "content": [{"type": "text", "text": "Hello"}]},
        ]

        await server.call_tool(TOOL_NAME, {
            "messages": messages,
            "max_tokens": 100.5,
            "temperature": "0.7",
            "stream": "yes",
        })

        assert json.loads(upstream.requests[0].content) == {
            "messages": messages,
            "max_tokens": 100.5,
            "temperature": "0.7",
            "stream": "yes",
        }

    @pytest.mark.parametrize("messages", [
        "hello",
        [{"content": "no role"}],
        ["not a mapping"],
    ])
    @pytest.mark.asyncio
    async def test_malformed_messages(self, messages):
        """Test structurally broken messages fail with INTERNAL_ERROR and no HTTP call."""
        upstream = Upstream()
        server = make_server(upstream)

        with pytest.raises(McpError) as exc_info:
            await server.call_tool(TOOL_NAME, {"messages": messages})

        assert exc_info.value.error.code == types.INTERNAL_ERROR
        assert exc_info.value.error.message.startswith("Unexpected error: malformed arguments:")
        assert upstream.requests == []

    @pytest.mark.asyncio
    async def test_rate_limited(self):
        """Test an upstream 429 maps to INTERNAL_ERROR with status and message."""
        upstream = Upstream(httpx.Response(429, json={"error": {"message": "rate limited"}}))
        server = make_server(upstream)

        with pytest.raises(McpError) as exc_info:
            await server.call_tool(TOOL_NAME, {"messages": MESSAGES})

        error = exc_info.value.error
        assert error.code == types.INTERNAL_ERROR
        assert "429" in error.message
        assert "rate limited" in error.message
        assert error.message == "API request failed (429): rate limited"

    @pytest.mark.asyncio
    async def test_anthropic_error_body(self):
        """Test Anthropic error envelopes are read the same way."""
        upstream = Upstream(httpx.Response(400, json={
            "type": "error",
            "error": {"type": "invalid_request_error", "message": "max_tokens: too large"},
        }))
        server = make_server(upstream, api_format=ApiFormat.ANTHROPIC)

        with pytest.raises(McpError) as exc_info:
            await server.call_tool(TOOL_NAME, {"messages": MESSAGES})

        assert exc_info.value.error.message == "API request failed (400): max_tokens: too large"

    @pytest.mark.asyncio
    async def test_timeout(self):
        """Test a timeout maps to INTERNAL_ERROR with the default status."""
        upstream = Upstream(exc=lambda request: httpx.ReadTimeout("timed out", request=request))
        server = make_server(upstream)

        with pytest.raises(McpError) as exc_info:
            await server.call_tool(TOOL_NAME, {"messages": MESSAGES})

        assert exc_info.value.error.code == types.INTERNAL_ERROR
        assert exc_info.value.error.message == "API request failed (500): timed out"

    @pytest.mark.asyncio
    async def test_unexpected_error(self):
        """Test any other failure maps to INTERNAL_ERROR."""
        upstream = Upstream(exc=lambda request: RuntimeError("boom"))
        server = make_server(upstream)

        with pytest.raises(McpError) as exc_info:
            await server.call_tool(TOOL_NAME, {"messages": MESSAGES})

        assert exc_info.value.error.code == types.INTERNAL_ERROR
        assert exc_info.value.error.message == "Unexpected error: boom"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
