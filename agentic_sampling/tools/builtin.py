"""Bundled tools offered to the model during agentic sampling.

Public Interface:
    - ECHO_TOOL, ADD_TOOL: tool declarations
    - echo_handler(), add_handler(): local implementations
    - VALIDATORS: per-tool input validation table
    - create_default_registry(): registry holding the bundled tools

Examples:
    >>> add_handler({"a": 2, "b": 2})
    4
    >>> add_handler({"a": "2", "b": 2})
    4
    >>> validate_add({"a": "x", "b": 2})
    Traceback (most recent call last):
    ...
    agentic_sampling.core.errors.ToolInputError: Both a and b must be numbers
"""

import math
from typing import Any, Dict, Optional, Union

from agentic_sampling.core.errors import ToolInputError
from agentic_sampling.core.registry import ToolRegistry
from agentic_sampling.types import ToolAnnotations, ToolDeclaration, ToolValidator

_PURE_TOOL = ToolAnnotations(
    read_only_hint=True,
    destructive_hint=False,
    idempotent_hint=True,
    open_world_hint=False,
)

ECHO_TOOL = ToolDeclaration(
    name="echo",
    description="Echoes back the input message",
    input_schema={
        "type": "object",
        "properties": {
            "message": {"type": "string", "description": "Message to echo"},
        },
        "required": ["message"],
    },
    annotations=_PURE_TOOL,
)

ADD_TOOL = ToolDeclaration(
    name="add",
    description="Adds two numbers together",
    input_schema={
        "type": "object",
        "properties": {
            "a": {"type": "number", "description": "First number"},
            "b": {"type": "number", "description": "Second number"},
        },
        "required": ["a", "b"],
    },
    annotations=_PURE_TOOL,
)


def _as_number(value: Any) -> Optional[Union[int, float]]:
    """Coerce an operand to a finite number, or return None.

    Numeric strings such as ``"2"`` or ``" 1.5 "`` are accepted; blank
    strings and booleans are not.
    """
    # bool is an int subclass but never a valid operand
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            value = int(text)
        except ValueError:
            try:
                value = float(text)
            except ValueError:
                return None
    if not isinstance(value, (int, float)) or not math.isfinite(value):
        return None
    return value


def validate_echo(params: Dict[str, Any]) -> None:
    if "message" not in params or params["message"] is None:
        raise ToolInputError("message is required")


def validate_add(params: Dict[str, Any]) -> None:
    if _as_number(params.get("a")) is None or _as_number(params.get("b")) is None:
        raise ToolInputError("Both a and b must be numbers")


def echo_handler(params: Dict[str, Any]) -> str:
    return str(params["message"])


def add_handler(params: Dict[str, Any]) -> Union[int, float]:
    return _as_number(params["a"]) + _as_number(params["b"])


VALIDATORS: Dict[str, ToolValidator] = {
    "echo": validate_echo,
    "add": validate_add,
}


def create_default_registry() -> ToolRegistry:
    """Create a registry holding the bundled echo and add tools."""
    registry = ToolRegistry()
    registry.register(ECHO_TOOL, echo_handler, VALIDATORS["echo"])
    registry.register(ADD_TOOL, add_handler, VALIDATORS["add"])
    return registry
