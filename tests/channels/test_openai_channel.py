"""Tests for the OpenAI sampling channel."""

import json

import pytest
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

from agentic_sampling.channels import OpenAISamplingChannel
from agentic_sampling.core import ChannelConfig, ChannelError, ConfigError, build_sampling_request
from agentic_sampling.tools import ECHO_TOOL
from agentic_sampling.types import (
    SamplingMessage,
    TextContent,
    ToolResultContent,
    ToolUseContent,
)


def _completion(content=None, tool_calls=None, finish_reason="stop"):
    message = SimpleNamespace(content=content, tool_calls=tool_calls)
    return SimpleNamespace(
        choices=[SimpleNamespace(message=message, finish_reason=finish_reason)],
        model="gpt-test",
    )


def _tool_call(call_id, name, arguments):
    return SimpleNamespace(id=call_id, function=SimpleNamespace(name=name, arguments=arguments))


@pytest.fixture
def mock_client():
    """Patch the OpenAI client class."""
    with patch("agentic_sampling.channels.openai.AsyncOpenAI") as mock:
        client = mock.return_value
        client.chat.completions.create = AsyncMock()
        yield client


@pytest.fixture
def channel(mock_client) -> OpenAISamplingChannel:
    return OpenAISamplingChannel(ChannelConfig(api_key="test-key", model="gpt-test"))


@pytest.fixture
def sampling_request():
    history = [
        SamplingMessage.user_text("say hi twice"),
        SamplingMessage(role="assistant", content=[
            ToolUseContent(id="c1", name="echo", input={"message": "hi"}),
            ToolUseContent(id="c2", name="echo", input={"message": "hi"}),
        ]),
        SamplingMessage(role="user", content=[
            ToolResultContent(tool_use_id="c1", content=[TextContent(text="hi")]),
            ToolResultContent(tool_use_id="c2", content=[TextContent(text="hi")]),
        ]),
    ]
    return build_sampling_request(history, [ECHO_TOOL], force_final=False, max_tokens=64)


def test_requires_model(mock_client) -> None:
    with pytest.raises(ConfigError, match="model must be configured"):
        OpenAISamplingChannel(ChannelConfig(api_key="test-key"))


def test_base_url_passed_to_client() -> None:
    with patch("agentic_sampling.channels.openai.AsyncOpenAI") as mock:
        OpenAISamplingChannel(ChannelConfig(api_key="k", model="m", base_url="http://local/v1"))
    mock.assert_called_once_with(api_key="k", base_url="http://local/v1")


async def test_request_format(channel, mock_client, sampling_request) -> None:
    """Test flattening block turns into Chat Completions messages."""
    mock_client.chat.completions.create.return_value = _completion("hi hi")
    await channel.create_message(sampling_request)

    kwargs = mock_client.chat.completions.create.call_args.kwargs
    assert kwargs["model"] == "gpt-test"
    assert kwargs["max_tokens"] == 64
    assert kwargs["tool_choice"] == "auto"
    assert kwargs["tools"][0] == {
        "type": "function",
        "function": {
            "name": "echo",
            "description": ECHO_TOOL.description,
            "parameters": ECHO_TOOL.input_schema,
        },
    }

    messages = kwargs["messages"]
    assert messages[0] == {"role": "system", "content": sampling_request.system_prompt}
    assert messages[1] == {"role": "user", "content": "say hi twice"}
    assert messages[2]["role"] == "assistant"
    assert messages[2]["content"] is None
    assert [c["id"] for c in messages[2]["tool_calls"]] == ["c1", "c2"]
    assert json.loads(messages[2]["tool_calls"][0]["function"]["arguments"]) == {"message": "hi"}
    assert messages[3:] == [
        {"role": "tool", "tool_call_id": "c1", "content": "hi"},
        {"role": "tool", "tool_call_id": "c2", "content": "hi"},
    ]


async def test_tool_calls_response(channel, mock_client, sampling_request) -> None:
    mock_client.chat.completions.create.return_value = _completion(
        tool_calls=[_tool_call("call_1", "echo", '{"message": "yo"}')],
        finish_reason="tool_calls",
    )
    response = await channel.create_message(sampling_request)

    assert response.stop_reason == "toolUse"
    assert response.content == [ToolUseContent(id="call_1", name="echo", input={"message": "yo"})]


async def test_malformed_arguments_kept_raw(channel, mock_client, sampling_request) -> None:
    mock_client.chat.completions.create.return_value = _completion(
        tool_calls=[_tool_call("call_1", "echo", "{not json")],
        finish_reason="tool_calls",
    )
    response = await channel.create_message(sampling_request)

    assert response.tool_uses()[0].input == "{not json"


async def test_text_response(channel, mock_client, sampling_request) -> None:
    mock_client.chat.completions.create.return_value = _completion("done", finish_reason="length")
    response = await channel.create_message(sampling_request)

    assert response.first_text() == "done"
    assert response.stop_reason == "maxTokens"
    assert response.model == "gpt-test"


async def test_no_choices(channel, mock_client, sampling_request) -> None:
    mock_client.chat.completions.create.return_value = SimpleNamespace(choices=[], model="gpt-test")

    with pytest.raises(ChannelError, match="no choices"):
        await channel.create_message(sampling_request)


async def test_api_error(channel, mock_client, sampling_request) -> None:
    mock_client.chat.completions.create.side_effect = Exception("rate limited")

    with pytest.raises(ChannelError, match="Error in OpenAI request: rate limited"):
        await channel.create_message(sampling_request)
