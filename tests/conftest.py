"""Common test fixtures for the entire test suite."""

import pytest
from typing import Any, Callable, List, Optional, Union

from agentic_sampling.channels.base import SamplingChannel
from agentic_sampling.core import SamplingSettings
from agentic_sampling.tools import create_default_registry
from agentic_sampling.types import (
    SamplingRequest,
    SamplingResponse,
    TextContent,
    ToolUseContent,
)


class ScriptedChannel(SamplingChannel):
    """Sampling channel that replays prepared responses and records requests.

    A scripted Exception is raised instead of returned.
    """

    def __init__(self, responses: List[Union[SamplingResponse, Exception]]):
        self.responses = list(responses)
        self.requests: List[SamplingRequest] = []

    def get_name(self) -> str:
        return "scripted"

    async def create_message(self, request: SamplingRequest) -> SamplingResponse:
        self.requests.append(request)
        if not self.responses:
            raise AssertionError("ScriptedChannel ran out of responses")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture(autouse=True)
def clear_env(monkeypatch):
    """Fixture to ensure no environment variables affect tests.

    This fixture runs automatically for all tests to ensure a clean environment.
    """
    env_vars = [
        "OPENAI_API_KEY", "OPENAI_MODEL", "OPENAI_BASE_URL",
        "ANTHROPIC_API_KEY", "ANTHROPIC_MODEL",
        "SAMPLING_CHANNEL", "SYSTEM_PROMPT", "TEMPERATURE",
        "DEFAULT_MAX_TOKENS", "DEFAULT_MAX_ITERATIONS", "DEFAULT_TOOLS",
        "RESOURCE_PAGE_SIZE", "SUBSCRIPTION_INTERVAL",
    ]
    for var in env_vars:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def settings() -> SamplingSettings:
    """Settings with defaults only, ignoring any .env file."""
    return SamplingSettings(env_file=None)


@pytest.fixture
def registry():
    """Registry holding the bundled echo and add tools."""
    return create_default_registry()


@pytest.fixture
def text_response():
    """Factory for final-answer responses.

    Example:
        def test_something(text_response):
            response = text_response("4")
    """
    def _make_response(text: str, stop_reason: Optional[str] = "endTurn") -> SamplingResponse:
        return SamplingResponse(
            role="assistant",
            content=[TextContent(text=text)],
            model="test-model",
            stop_reason=stop_reason,
        )
    return _make_response


@pytest.fixture
def tool_use_response():
    """Factory for responses requesting tools.

    Each call is a ``(id, name, input)`` tuple.

    Example:
        def test_something(tool_use_response):
            response = tool_use_response(("t1", "add", {"a": 2, "b": 3}))
    """
    def _make_response(*calls: tuple, text: Optional[str] = None) -> SamplingResponse:
        content: List[Any] = []
        if text is not None:
            content.append(TextContent(text=text))
        content.extend(
            ToolUseContent(id=call_id, name=name, input=tool_input)
            for call_id, name, tool_input in calls
        )
        return SamplingResponse(
            role="assistant",
            content=content,
            model="test-model",
            stop_reason="toolUse",
        )
    return _make_response


@pytest.fixture
def scripted_channel() -> Callable[..., ScriptedChannel]:
    """Factory for channels replaying the given responses in order.

    Example:
        def test_something(scripted_channel, text_response):
            channel = scripted_channel(text_response("done"))
    """
    def _make_channel(*responses: Union[SamplingResponse, Exception]) -> ScriptedChannel:
        return ScriptedChannel(list(responses))
    return _make_channel

