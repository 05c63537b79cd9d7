"""Tests for per-iteration request construction."""

from agentic_sampling.core import build_sampling_request
from agentic_sampling.core.settings import DEFAULT_SYSTEM_PROMPT
from agentic_sampling.tools import ADD_TOOL
from agentic_sampling.types import SamplingMessage


def test_auto_tool_choice_before_last_iteration() -> None:
    history = [SamplingMessage.user_text("hi")]
    request = build_sampling_request(history, [ADD_TOOL], force_final=False, max_tokens=100)

    assert request.tool_choice.mode == "auto"
    assert request.system_prompt == DEFAULT_SYSTEM_PROMPT
    assert request.temperature == 0.7
    assert request.max_tokens == 100
    assert request.tools == [ADD_TOOL]


def test_forced_final_answer() -> None:
    request = build_sampling_request(
        [SamplingMessage.user_text("hi")], [ADD_TOOL], force_final=True, max_tokens=100
    )
    assert request.tool_choice.mode == "none"


def test_history_is_copied() -> None:
    """Test that later history changes do not leak into a sent request."""
    history = [SamplingMessage.user_text("hi")]
    request = build_sampling_request(history, [], force_final=False, max_tokens=10)
    history.append(SamplingMessage.user_text("later"))

    assert len(request.messages) == 1


def test_wire_shape() -> None:
    """Test the camelCase wire form of a request."""
    request = build_sampling_request(
        [SamplingMessage.user_text("hi")],
        [ADD_TOOL],
        force_final=False,
        max_tokens=50,
        temperature=0.2,
        system_prompt="Be brief.",
    )
    wire = request.to_wire()

    assert wire["messages"] == [{"role": "user", "content": [{"type": "text", "text": "hi"}]}]
    assert wire["toolChoice"] == {"mode": "auto"}
    assert wire["systemPrompt"] == "Be brief."
    assert wire["maxTokens"] == 50
    assert wire["temperature"] == 0.2
    assert wire["tools"][0]["name"] == "add"
    assert wire["tools"][0]["inputSchema"]["required"] == ["a", "b"]
    assert wire["tools"][0]["annotations"] == {
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False,
    }
