"""Core module for agentic sampling."""

from .errors import (
    AgenticSamplingError,
    CatalogError,
    ChannelError,
    ConfigError,
    InvalidCursorError,
    NoValidToolsError,
    ResourceNotFoundError,
    ToolInputError,
)
from .context import InvocationContext
from .settings import ChannelConfig, SamplingSettings
from .registry import RegisteredTool, ToolRegistry
from .executor import ToolExecutor
from .request_builder import build_sampling_request
from .loop import AgenticSamplingLoop, LoopPhase, LoopState, run_agentic_sampling

__all__ = [
    "AgenticSamplingError",
    "CatalogError",
    "ChannelError",
    "ConfigError",
    "InvalidCursorError",
    "NoValidToolsError",
    "ResourceNotFoundError",
    "ToolInputError",
    "InvocationContext",
    "ChannelConfig",
    "SamplingSettings",
    "RegisteredTool",
    "ToolRegistry",
    "ToolExecutor",
    "build_sampling_request",
    "AgenticSamplingLoop",
    "LoopPhase",
    "LoopState",
    "run_agentic_sampling",
]
