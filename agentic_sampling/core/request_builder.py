"""Construction of the per-iteration sampling request."""

from typing import List, Sequence

from agentic_sampling.core.settings import DEFAULT_SYSTEM_PROMPT, DEFAULT_TEMPERATURE
from agentic_sampling.types import (
    SamplingMessage,
    SamplingRequest,
    ToolChoice,
    ToolDeclaration,
)


def build_sampling_request(
    history: Sequence[SamplingMessage],
    tools: List[ToolDeclaration],
    *,
    force_final: bool,
    max_tokens: int,
    temperature: float = DEFAULT_TEMPERATURE,
    system_prompt: str = DEFAULT_SYSTEM_PROMPT,
) -> SamplingRequest:
    """Build one round-trip request.

    Args:
        history: Conversation so far; copied, so later turns do not leak in
        tools: Tool declarations offered to the model
        force_final: Ask for a final answer instead of more tool calls
        max_tokens: Maximum tokens for the response
        temperature: Sampling temperature
        system_prompt: System instruction for the model

    Returns:
        The sampling request for this iteration
    """
    return SamplingRequest(
        messages=list(history),
        tools=list(tools),
        tool_choice=ToolChoice(mode="none" if force_final else "auto"),
        system_prompt=system_prompt,
        max_tokens=max_tokens,
        temperature=temperature,
    )
