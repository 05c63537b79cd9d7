"""Tests for the ToolExecutor class."""

import pytest
from typing import Any, Dict

from agentic_sampling.core import InvocationContext, ToolExecutor, ToolInputError, ToolRegistry
from agentic_sampling.core.executor import render_result
from agentic_sampling.types import ToolDeclaration


@pytest.fixture
def executor(registry) -> ToolExecutor:
    """Create an executor over the bundled tools."""
    return ToolExecutor(registry)


async def test_execute_add(executor: ToolExecutor) -> None:
    """Test executing the add tool."""
    outcome = await executor.execute("add", {"a": 2, "b": 3})
    assert outcome.content == "5"
    assert outcome.is_error is False


async def test_execute_add_floats(executor: ToolExecutor) -> None:
    outcome = await executor.execute("add", {"a": 1.5, "b": 2.25})
    assert outcome.content == "3.75"


async def test_execute_add_numeric_string(executor: ToolExecutor) -> None:
    outcome = await executor.execute("add", {"a": "2", "b": 2})
    assert outcome.content == "4"
    assert outcome.is_error is False


async def test_execute_echo(executor: ToolExecutor) -> None:
    outcome = await executor.execute("echo", {"message": "hello"})
    assert outcome.content == "hello"
    assert not outcome.is_error


async def test_unknown_tool(executor: ToolExecutor) -> None:
    """Test that an unknown tool yields an error outcome instead of raising."""
    outcome = await executor.execute("multiply", {"a": 2, "b": 3})
    assert outcome.content == "Unknown tool: multiply"
    assert outcome.is_error is True


async def test_invalid_input_is_error_outcome(executor: ToolExecutor) -> None:
    """Test that validation failures are reported back, not raised."""
    outcome = await executor.execute("add", {"a": "two", "b": 3})
    assert outcome.is_error
    assert outcome.content == "Error: Both a and b must be numbers"


async def test_non_object_input_is_error_outcome(executor: ToolExecutor) -> None:
    outcome = await executor.execute("echo", "not an object")
    assert outcome.is_error
    assert outcome.content == "Error: tool input must be an object"


async def test_handler_exception_is_error_outcome() -> None:
    """Test that handler failures are caught and described."""
    def failing(params: Dict[str, Any]) -> str:
        raise RuntimeError("boom")

    registry = ToolRegistry()
    registry.register(ToolDeclaration(name="fail", description="Always fails"), failing)
    outcome = await ToolExecutor(registry).execute("fail", {})

    assert outcome.is_error
    assert outcome.content == "Error executing fail: boom"


async def test_async_handler() -> None:
    """Test that async handlers are awaited."""
    async def shout(params: Dict[str, Any]) -> str:
        return params["text"].upper()

    registry = ToolRegistry()
    registry.register(ToolDeclaration(name="shout", description="Shout"), shout)
    outcome = await ToolExecutor(registry).execute("shout", {"text": "hi"})

    assert outcome.content == "HI"


async def test_validator_runs_before_handler() -> None:
    calls = []

    def validator(params: Dict[str, Any]) -> None:
        raise ToolInputError("rejected")

    def handler(params: Dict[str, Any]) -> str:
        calls.append(params)
        return "ran"

    registry = ToolRegistry()
    registry.register(ToolDeclaration(name="guarded", description="Guarded"), handler, validator)
    outcome = await ToolExecutor(registry).execute("guarded", {})

    assert outcome.content == "Error: rejected"
    assert calls == []


async def test_context_counts_calls(executor: ToolExecutor) -> None:
    """Test that known tool calls are counted on the caller's context."""
    context = InvocationContext(session_id="s1")
    await executor.execute("add", {"a": 1, "b": 1}, context)
    await executor.execute("add", {"a": "x", "b": 1}, context)
    await executor.execute("echo", {"message": "m"}, context)
    await executor.execute("unknown", {}, context)

    assert context.call_counts["add"] == 2
    assert context.call_counts["echo"] == 1
    assert context.total_calls == 3


@pytest.mark.parametrize("value, expected", [
    ("text", "text"),
    (5, "5"),
    (5.0, "5"),
    (0.1 + 0.2, "0.30000000000000004"),
    (True, "true"),
    ({"k": [1, 2]}, '{"k": [1, 2]}'),
    (None, "null"),
])
def test_render_result(value, expected) -> None:
    assert render_result(value) == expected
