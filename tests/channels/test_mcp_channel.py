"""Tests for the MCP sampling channel."""

import pytest
from types import SimpleNamespace
from unittest.mock import AsyncMock

from mcp import types
from mcp.shared.exceptions import McpError

from agentic_sampling.channels import McpSamplingChannel, client_supports_sampling_tools
from agentic_sampling.core import ChannelError, build_sampling_request
from agentic_sampling.tools import ADD_TOOL
from agentic_sampling.types import SamplingMessage, SamplingResponse, TextContent


@pytest.fixture
def sampling_request():
    return build_sampling_request(
        [SamplingMessage.user_text("what is 1+1")],
        [ADD_TOOL],
        force_final=False,
        max_tokens=100,
    )


@pytest.fixture
def session():
    session = SimpleNamespace(send_request=AsyncMock())
    session.send_request.return_value = SamplingResponse(
        content=[TextContent(text="2")], stop_reason="endTurn"
    )
    return session


def test_build_request(sampling_request) -> None:
    """Test the sampling/createMessage wire request."""
    request = McpSamplingChannel(None).build_request(sampling_request)
    wire = request.model_dump(by_alias=True, mode="json", exclude_none=True)

    assert wire["method"] == "sampling/createMessage"
    params = wire["params"]
    assert params["maxTokens"] == 100
    assert params["toolChoice"] == {"mode": "auto"}
    assert params["tools"][0]["name"] == "add"
    assert params["tools"][0]["inputSchema"] == ADD_TOOL.input_schema
    assert params["messages"] == [
        {"role": "user", "content": [{"type": "text", "text": "what is 1+1"}]}
    ]


async def test_create_message(session, sampling_request) -> None:
    channel = McpSamplingChannel(session)
    response = await channel.create_message(sampling_request)

    assert response.first_text() == "2"
    sent, result_type = session.send_request.call_args.args
    assert sent.method == "sampling/createMessage"
    assert result_type is SamplingResponse


async def test_client_rejection(session, sampling_request) -> None:
    session.send_request.side_effect = McpError(
        types.ErrorData(code=types.INVALID_REQUEST, message="sampling not supported")
    )

    with pytest.raises(ChannelError, match="sampling not supported") as exc_info:
        await McpSamplingChannel(session).create_message(sampling_request)
    assert exc_info.value.source == "mcp"


async def test_invalid_client_response(session, sampling_request) -> None:
    async def send_request(request, result_type):
        return result_type.model_validate({
            "role": "assistant",
            "content": [{"type": "video", "data": "x"}],
        })

    session.send_request.side_effect = send_request

    with pytest.raises(ChannelError, match="Invalid sampling response") as exc_info:
        await McpSamplingChannel(session).create_message(sampling_request)
    assert exc_info.value.source == "mcp"


def test_get_name() -> None:
    assert McpSamplingChannel(None).get_name() == "mcp"


def test_client_supports_sampling_tools() -> None:
    """Test detection of the sampling.tools client capability."""
    with_tools = types.ClientCapabilities.model_validate({"sampling": {"tools": {}}})
    without_tools = types.ClientCapabilities.model_validate({"sampling": {}})
    no_sampling = types.ClientCapabilities()

    assert client_supports_sampling_tools(with_tools)
    assert not client_supports_sampling_tools(without_tools)
    assert not client_supports_sampling_tools(no_sampling)
    assert not client_supports_sampling_tools(None)
