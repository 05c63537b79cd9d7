"""Agentic sampling loop.

Drives a multi-turn exchange with a sampling provider: the model may ask for
tools, the tools run locally, their results go back into the conversation,
and the exchange repeats until the model gives a final answer or the
iteration bound is reached.

Per-iteration flow:
    1. Increment the iteration counter; on the last permitted iteration set
       tool choice to "none" so the model answers instead of calling tools
    2. Build the request from the full history and the selected tools
    3. Send it through the sampling channel and wait for the response
    4. On ``toolUse``: append the assistant turn verbatim, run every
       requested tool in order and append one user turn holding only the
       tool results
    5. On any other stop reason: take the first text block as the answer

Example:
    ```python
    loop = AgenticSamplingLoop(create_default_registry(), channel)
    result = await loop.run(AgenticSamplingRequest(prompt="what is 2+2"))
    print(result.to_text())
    ```
"""

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from agentic_sampling.channels.base import SamplingChannel
from agentic_sampling.core.context import InvocationContext
from agentic_sampling.core.executor import ToolExecutor
from agentic_sampling.core.registry import ToolRegistry
from agentic_sampling.core.request_builder import build_sampling_request
from agentic_sampling.core.settings import SamplingSettings
from agentic_sampling.types import (
    AgenticSamplingRequest,
    AgenticSamplingResult,
    SamplingMessage,
    SamplingResponse,
    StopReason,
    ToolCallRecord,
    ToolResultContent,
    TextContent,
)
from agentic_sampling.utils.log_utils import preview, sanitize_log_message

logger = logging.getLogger(__name__)

MISSING_TOOL_USE_ANSWER = "Error: Received toolUse stop reason but no tool_use blocks"


def iteration_limit_answer(max_iterations: int) -> str:
    return f"[Reached maximum iterations ({max_iterations}) without final response]"


class LoopPhase(Enum):
    """States of one orchestration run."""

    AWAITING_RESPONSE = "awaiting_response"
    EXECUTING_TOOLS = "executing_tools"
    TERMINATED = "terminated"


@dataclass
class LoopState:
    """Mutable state of a single run. Never shared between runs."""

    max_iterations: int
    history: List[SamplingMessage] = field(default_factory=list)
    iteration: int = 0
    phase: LoopPhase = LoopPhase.AWAITING_RESPONSE
    final_answer: Optional[str] = None
    stop_reason: Optional[str] = None
    tool_calls: List[ToolCallRecord] = field(default_factory=list)

    @property
    def is_last_iteration(self) -> bool:
        return self.iteration >= self.max_iterations

    def terminate(self, answer: str) -> None:
        self.final_answer = answer
        self.phase = LoopPhase.TERMINATED


class AgenticSamplingLoop:
    """Orchestrates tool-enabled sampling against one channel.

    The loop instance holds only read-only collaborators; all per-run state
    lives in a LoopState created by :meth:`run`, so one instance may serve
    concurrent runs.

    Attributes:
        registry: Catalog the requested tools are selected from
        channel: Channel used for every round trip
        settings: Generation defaults (system prompt, temperature)
    """

    def __init__(
        self,
        registry: ToolRegistry,
        channel: SamplingChannel,
        settings: Optional[SamplingSettings] = None,
    ) -> None:
        self.registry = registry
        self.channel = channel
        self.settings = settings or SamplingSettings(env_file=None)

    async def run(
        self,
        request: AgenticSamplingRequest,
        context: Optional[InvocationContext] = None,
    ) -> AgenticSamplingResult:
        """Run the loop until a final answer or the iteration bound.

        Args:
            request: Prompt, limits and the names of the tools to offer
            context: Optional caller-owned context updated by tool calls

        Returns:
            The final answer, iterations used and the tool-call audit trail

        Raises:
            NoValidToolsError: If no requested tool is known; raised before
                any round trip
            ChannelError: If a round trip fails; nothing is retried
        """
        tools = self.registry.select(request.tool_names)
        declarations = tools.declarations()
        executor = ToolExecutor(tools)

        start_time = time.time()
        logger.info("Starting agentic sampling", extra={
            "prompt": preview(request.prompt),
            "channel": self.channel.get_name(),
            "num_tools": len(declarations),
            "max_iterations": request.max_iterations
        })

        state = LoopState(
            max_iterations=request.max_iterations,
            history=[SamplingMessage.user_text(request.prompt)],
        )

        while state.phase is LoopPhase.AWAITING_RESPONSE and state.iteration < state.max_iterations:
            state.iteration += 1
            logger.debug("Sampling iteration", extra={
                "iteration": state.iteration,
                "max_iterations": state.max_iterations,
                "force_final": state.is_last_iteration
            })

            sampling_request = build_sampling_request(
                state.history,
                declarations,
                force_final=state.is_last_iteration,
                max_tokens=request.max_tokens,
                temperature=self.settings.temperature,
                system_prompt=self.settings.system_prompt,
            )

            try:
                response = await self.channel.create_message(sampling_request)
            except Exception as e:
                logger.error("Sampling round trip failed", extra={
                    "iteration": state.iteration,
                    "error": sanitize_log_message(str(e))
                })
                raise

            state.stop_reason = response.stop_reason
            logger.debug("Received sampling response", extra={
                "iteration": state.iteration,
                "stop_reason": response.stop_reason
            })

            if response.stop_reason == StopReason.TOOL_USE:
                await self._handle_tool_use(state, response, executor, context)
            else:
                answer = response.first_text()
                if answer is None:
                    answer = response.serialized_content()
                state.terminate(answer)

        if state.final_answer is None:
            logger.warning("Iteration limit reached without final response", extra={
                "max_iterations": state.max_iterations
            })
            state.terminate(iteration_limit_answer(state.max_iterations))

        duration = time.time() - start_time
        logger.info("Agentic sampling completed", extra={
            "iterations": state.iteration,
            "num_tool_calls": len(state.tool_calls),
            "stop_reason": state.stop_reason,
            "duration_ms": int(duration * 1000)
        })

        return AgenticSamplingResult(
            iterations_used=state.iteration,
            final_answer=state.final_answer,
            tool_calls=state.tool_calls,
            stop_reason=state.stop_reason,
        )

    async def _handle_tool_use(
        self,
        state: LoopState,
        response: SamplingResponse,
        executor: ToolExecutor,
        context: Optional[InvocationContext],
    ) -> None:
        tool_uses = response.tool_uses()
        if not tool_uses:
            logger.error("stopReason=toolUse but no tool_use blocks found", extra={
                "iteration": state.iteration
            })
            state.terminate(MISSING_TOOL_USE_ANSWER)
            return

        # Keep the whole assistant turn, text included, so the model sees its
        # own reasoning next to the calls it made.
        state.history.append(SamplingMessage(role="assistant", content=response.content))
        state.phase = LoopPhase.EXECUTING_TOOLS

        results: List[ToolResultContent] = []
        for tool_use in tool_uses:
            logger.info("Executing tool", extra={
                "tool_name": tool_use.name,
                "tool_use_id": tool_use.id
            })
            outcome = await executor.execute(tool_use.name, tool_use.input, context)
            state.tool_calls.append(ToolCallRecord(
                name=tool_use.name,
                arguments=tool_use.input,
                result=outcome.content,
                is_error=outcome.is_error,
            ))
            results.append(ToolResultContent(
                tool_use_id=tool_use.id,
                content=[TextContent(text=outcome.content)],
                is_error=outcome.is_error,
            ))

        state.history.append(SamplingMessage(role="user", content=results))
        state.phase = LoopPhase.AWAITING_RESPONSE


async def run_agentic_sampling(
    channel: SamplingChannel,
    request: AgenticSamplingRequest,
    registry: Optional[ToolRegistry] = None,
    settings: Optional[SamplingSettings] = None,
    context: Optional[InvocationContext] = None,
) -> AgenticSamplingResult:
    """Run one orchestration with the bundled tools unless a registry is given."""
    if registry is None:
        from agentic_sampling.tools import create_default_registry
        registry = create_default_registry()
    loop = AgenticSamplingLoop(registry, channel, settings)
    return await loop.run(request, context)
