"""Tools bundled with agentic sampling."""

from .builtin import (
    ADD_TOOL,
    ECHO_TOOL,
    VALIDATORS,
    add_handler,
    create_default_registry,
    echo_handler,
)

__all__ = [
    "ADD_TOOL",
    "ECHO_TOOL",
    "VALIDATORS",
    "add_handler",
    "create_default_registry",
    "echo_handler",
]
