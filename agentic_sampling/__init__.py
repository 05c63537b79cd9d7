"""Agentic Sampling: a tool-use loop driven through MCP sampling.

This package runs a bounded agentic loop: a prompt is sent to an LLM with
tools available, tool calls in the response are executed locally, their
results are fed back, and the loop repeats until a final answer or the
iteration limit.

Key Components:
    - Types: SamplingMessage, SamplingRequest, SamplingResponse and content blocks
    - ToolRegistry / ToolExecutor: declared tools and their safe execution
    - AgenticSamplingLoop: the iteration state machine
    - Channels: MCP client sampling, Anthropic and OpenAI
    - Server: FastMCP server exposing the loop, the tools and a resource catalog

Example:
    ```python
    from agentic_sampling import AgenticSamplingRequest, run_agentic_sampling
    from agentic_sampling.channels import create_channel

    channel = create_channel("anthropic")
    result = await run_agentic_sampling(
        channel,
        AgenticSamplingRequest(prompt="What is 2 + 3?"),
    )
    print(result.to_text())
    ```
"""

from agentic_sampling.types import (
    AgenticSamplingRequest,
    AgenticSamplingResult,
    SamplingMessage,
    SamplingRequest,
    SamplingResponse,
    ToolCallRecord,
    ToolDeclaration,
)
from agentic_sampling.core import (
    AgenticSamplingError,
    AgenticSamplingLoop,
    SamplingSettings,
    ToolExecutor,
    ToolRegistry,
    run_agentic_sampling,
)
from agentic_sampling.tools import create_default_registry

__all__ = [
    "AgenticSamplingRequest",
    "AgenticSamplingResult",
    "SamplingMessage",
    "SamplingRequest",
    "SamplingResponse",
    "ToolCallRecord",
    "ToolDeclaration",
    "AgenticSamplingError",
    "AgenticSamplingLoop",
    "SamplingSettings",
    "ToolExecutor",
    "ToolRegistry",
    "run_agentic_sampling",
    "create_default_registry",
]

__version__ = "0.1.0"
