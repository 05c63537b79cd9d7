"""Local tool executor for agentic sampling.

This module runs the tools requested by the sampling provider. Tool input
comes from the model, so it is treated as untrusted: every failure is turned
into an error outcome that is fed back to the model instead of an exception.
"""

import inspect
import json
import logging
from typing import Any, Optional

from agentic_sampling.core.context import InvocationContext
from agentic_sampling.core.errors import ToolInputError
from agentic_sampling.core.registry import ToolRegistry
from agentic_sampling.types import ToolOutcome
from agentic_sampling.utils.log_utils import sanitize_log_message

logger = logging.getLogger(__name__)


def render_result(value: Any) -> str:
    """Render a handler's return value as tool result text."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (int, float)):
        return str(value)
    return json.dumps(value, ensure_ascii=False, default=str)


class ToolExecutor:
    """Executor for running registered tools against model-supplied input.

    The executor only knows the tools of the registry it was built with; a
    request for any other name produces an "Unknown tool" error outcome.
    """

    def __init__(self, registry: ToolRegistry) -> None:
        """Initialize a tool executor.

        Args:
            registry: The tools this executor may run
        """
        self._registry = registry

    async def execute(
        self,
        name: str,
        tool_input: Any,
        context: Optional[InvocationContext] = None,
    ) -> ToolOutcome:
        """Execute one tool. Never raises.

        Args:
            name: The name of the tool requested by the model
            tool_input: The input supplied by the model
            context: Optional caller context whose call counts are updated

        Returns:
            The tool outcome, with ``is_error`` set on any failure
        """
        tool = self._registry.lookup(name)
        if tool is None:
            logger.warning("Unknown tool requested", extra={"tool_name": name})
            return ToolOutcome(content=f"Unknown tool: {name}", is_error=True)

        if context is not None:
            context.record_call(name)

        try:
            if not isinstance(tool_input, dict):
                raise ToolInputError("tool input must be an object")
            if tool.validator is not None:
                tool.validator(tool_input)

            result = tool.handler(tool_input)
            if inspect.isawaitable(result):
                result = await result
            return ToolOutcome(content=render_result(result))
        except ToolInputError as e:
            logger.info("Rejected tool input", extra={
                "tool_name": name,
                "error": sanitize_log_message(str(e))
            })
            return ToolOutcome(content=f"Error: {e}", is_error=True)
        except Exception as e:
            logger.error("Tool execution failed", extra={
                "tool_name": name,
                "error": sanitize_log_message(str(e))
            })
            return ToolOutcome(content=f"Error executing {name}: {e}", is_error=True)
