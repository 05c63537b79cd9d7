"""Tool registry for agentic sampling.

This module provides the catalog of tools that can be offered to a sampling
provider, each paired with its local handler and input validator.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from agentic_sampling.core.errors import NoValidToolsError
from agentic_sampling.types import ToolDeclaration, ToolHandler, ToolValidator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegisteredTool:
    """A declaration together with the code that executes it locally."""

    declaration: ToolDeclaration
    handler: ToolHandler
    validator: Optional[ToolValidator] = None

    @property
    def name(self) -> str:
        return self.declaration.name


class ToolRegistry:
    """Registry for managing tool declarations and their handlers.

    A registry is filled once and then only read. Invocations narrow it with
    :meth:`select`, which returns a new registry and leaves this one untouched,
    so a single registry can be shared by concurrent invocations.
    """

    def __init__(self) -> None:
        """Initialize an empty tool registry."""
        self._tools: Dict[str, RegisteredTool] = {}

    def register(
        self,
        declaration: ToolDeclaration,
        handler: ToolHandler,
        validator: Optional[ToolValidator] = None,
    ) -> None:
        """Register a tool.

        Args:
            declaration: The declaration offered to the model
            handler: Sync or async callable implementing the tool
            validator: Optional callable raising ToolInputError on bad input

        Raises:
            ValueError: If a tool with the same name already exists
        """
        if declaration.name in self._tools:
            raise ValueError(f"Tool '{declaration.name}' is already registered")
        self._tools[declaration.name] = RegisteredTool(declaration, handler, validator)

    def get(self, name: str) -> RegisteredTool:
        """Get a registered tool by name.

        Raises:
            KeyError: If no tool with the given name exists
        """
        if name not in self._tools:
            raise KeyError(f"No tool named '{name}' is registered")
        return self._tools[name]

    def lookup(self, name: str) -> Optional[RegisteredTool]:
        return self._tools.get(name)

    def names(self) -> List[str]:
        return list(self._tools)

    def declarations(self) -> List[ToolDeclaration]:
        """Get the declarations of all registered tools, in registration order."""
        return [tool.declaration for tool in self._tools.values()]

    def select(self, names: Iterable[str]) -> "ToolRegistry":
        """Build a registry holding only the requested, known tools.

        Unknown names are dropped silently. The order of the result follows
        the requested order; repeated names appear once.

        Args:
            names: Tool names requested by the caller

        Returns:
            A new registry with the selected tools

        Raises:
            NoValidToolsError: If no requested name is known
        """
        requested = list(names)
        selected = ToolRegistry()
        for name in requested:
            tool = self._tools.get(name)
            if tool is not None and name not in selected._tools:
                selected._tools[name] = tool

        dropped = [name for name in requested if name not in self._tools]
        if dropped:
            logger.debug("Ignoring unknown tools", extra={"tool_names": dropped})

        if not selected._tools:
            raise NoValidToolsError(self.names())
        return selected

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)
