"""OpenAI sampling channel."""

import json
import logging
from typing import Any, Dict, List

from openai import AsyncOpenAI

from agentic_sampling.channels.base import SamplingChannel
from agentic_sampling.core.errors import ChannelError, ConfigError
from agentic_sampling.core.settings import ChannelConfig
from agentic_sampling.types import (
    ContentBlock,
    SamplingMessage,
    SamplingRequest,
    SamplingResponse,
    TextContent,
    ToolResultContent,
    ToolUseContent,
)
from agentic_sampling.utils.log_utils import sanitize_log_message

logger = logging.getLogger(__name__)

FINISH_REASONS = {
    "tool_calls": "toolUse",
    "function_call": "toolUse",
    "stop": "endTurn",
    "length": "maxTokens",
}


class OpenAISamplingChannel(SamplingChannel):
    """Sends sampling requests to the OpenAI Chat Completions API.

    Chat Completions has no content-block turns, so each history turn is
    flattened: assistant tool_use blocks become ``tool_calls`` and every
    tool_result block becomes its own ``tool`` message.
    """

    def __init__(self, config: ChannelConfig):
        """Initialize the OpenAI channel.

        Args:
            config: Channel configuration with API key, model and base URL

        Raises:
            ConfigError: If no model is configured or the client cannot be created
        """
        if not config.model:
            raise ConfigError("An OpenAI model must be configured", source="openai")
        self.config = config

        try:
            self._client = AsyncOpenAI(api_key=config.api_key, base_url=config.base_url)
        except Exception as e:
            raise ConfigError(f"Failed to initialize OpenAI client: {str(e)}", source="openai")

    def get_name(self) -> str:
        return "openai"

    async def create_message(self, request: SamplingRequest) -> SamplingResponse:
        """Run one round trip through ``chat.completions.create``.

        Raises:
            ChannelError: If the API call fails or returns no choices
        """
        kwargs: Dict[str, Any] = {
            "model": self.config.model,
            "messages": self._format_messages(request),
            "max_tokens": request.max_tokens,
        }
        if request.temperature is not None:
            kwargs["temperature"] = request.temperature
        if request.tools:
            kwargs["tools"] = self._format_tools(request)
            kwargs["tool_choice"] = request.tool_choice.mode

        try:
            response = await self._client.chat.completions.create(**kwargs)
        except Exception as e:
            logger.error("OpenAI request failed", extra={
                "error": sanitize_log_message(str(e))
            })
            raise ChannelError(f"Error in OpenAI request: {str(e)}", source="openai") from e

        if not response.choices:
            raise ChannelError("OpenAI response contained no choices", source="openai")

        choice = response.choices[0]
        return SamplingResponse(
            role="assistant",
            content=self._parse_message(choice.message),
            model=getattr(response, "model", None),
            stop_reason=FINISH_REASONS.get(choice.finish_reason, choice.finish_reason),
        )

    def _format_messages(self, request: SamplingRequest) -> List[Dict[str, Any]]:
        messages: List[Dict[str, Any]] = []
        if request.system_prompt:
            messages.append({"role": "system", "content": request.system_prompt})
        for message in request.messages:
            messages.extend(self._format_turn(message))
        return messages

    def _format_turn(self, message: SamplingMessage) -> List[Dict[str, Any]]:
        results = [b for b in message.content if isinstance(b, ToolResultContent)]
        if results:
            return [
                {
                    "role": "tool",
                    "tool_call_id": block.tool_use_id,
                    "content": "\n".join(item.text for item in block.content),
                }
                for block in results
            ]

        text = "\n".join(b.text for b in message.content if isinstance(b, TextContent))
        formatted: Dict[str, Any] = {"role": message.role, "content": text or None}
        tool_calls = [
            {
                "id": block.id,
                "type": "function",
                "function": {"name": block.name, "arguments": json.dumps(block.input)},
            }
            for block in message.content
            if isinstance(block, ToolUseContent)
        ]
        if tool_calls:
            formatted["tool_calls"] = tool_calls
        return [formatted]

    def _format_tools(self, request: SamplingRequest) -> List[Dict[str, Any]]:
        return [
            {
                "type": "function",
                "function": {
                    "name": tool.name,
                    "description": tool.description,
                    "parameters": tool.input_schema,
                },
            }
            for tool in request.tools
        ]

    def _parse_message(self, message: Any) -> List[ContentBlock]:
        content: List[ContentBlock] = []
        if message.content:
            content.append(TextContent(text=message.content))
        for tool_call in message.tool_calls or []:
            try:
                arguments = json.loads(tool_call.function.arguments or "{}")
            except json.JSONDecodeError:
                # Leave malformed arguments to the executor, which rejects non-objects
                arguments = tool_call.function.arguments
            content.append(ToolUseContent(
                id=tool_call.id,
                name=tool_call.function.name,
                input=arguments,
            ))
        return content
