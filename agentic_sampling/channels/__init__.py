"""Sampling channels for agentic sampling.

This module contains the channel interface and its implementations:
- MCP: sampling requests sent back to the connected MCP client
- Anthropic Messages API and OpenAI Chat Completions API
"""

from .base import SamplingChannel
from .anthropic import AnthropicSamplingChannel
from .openai import OpenAISamplingChannel
from .mcp import McpSamplingChannel, client_supports_sampling_tools
from .factory import create_channel

__all__ = [
    "SamplingChannel",
    "AnthropicSamplingChannel",
    "OpenAISamplingChannel",
    "McpSamplingChannel",
    "client_supports_sampling_tools",
    "create_channel",
]
