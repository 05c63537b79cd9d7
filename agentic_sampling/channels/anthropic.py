"""Anthropic sampling channel."""

import logging
from typing import Any, Dict, List

from anthropic import AsyncAnthropic

from agentic_sampling.channels.base import SamplingChannel
from agentic_sampling.core.errors import ChannelError, ConfigError
from agentic_sampling.core.settings import ChannelConfig
from agentic_sampling.types import (
    ContentBlock,
    ImageContent,
    SamplingRequest,
    SamplingResponse,
    TextContent,
    ToolResultContent,
    ToolUseContent,
)
from agentic_sampling.utils.log_utils import sanitize_log_message

logger = logging.getLogger(__name__)

STOP_REASONS = {
    "tool_use": "toolUse",
    "end_turn": "endTurn",
    "max_tokens": "maxTokens",
    "stop_sequence": "stopSequence",
}


class AnthropicSamplingChannel(SamplingChannel):
    """Sends sampling requests to the Anthropic Messages API."""

    def __init__(self, config: ChannelConfig):
        """Initialize the Anthropic channel.

        Args:
            config: Channel configuration with API key and model

        Raises:
            ConfigError: If no model is configured or the client cannot be created
        """
        if not config.model:
            raise ConfigError("An Anthropic model must be configured", source="anthropic")
        self.config = config

        try:
            self._client = AsyncAnthropic(api_key=config.api_key)
        except Exception as e:
            raise ConfigError(f"Failed to initialize Anthropic client: {str(e)}", source="anthropic")

    def get_name(self) -> str:
        return "anthropic"

    async def create_message(self, request: SamplingRequest) -> SamplingResponse:
        """Run one round trip through ``messages.create``.

        Raises:
            ChannelError: If the API call fails
        """
        kwargs: Dict[str, Any] = {
            "model": self.config.model,
            "messages": self._format_messages(request),
            "max_tokens": request.max_tokens,
        }
        if request.system_prompt:
            kwargs["system"] = request.system_prompt
        if request.temperature is not None:
            kwargs["temperature"] = request.temperature
        if request.tools:
            kwargs["tools"] = self._format_tools(request)
            kwargs["tool_choice"] = {"type": request.tool_choice.mode}

        try:
            response = await self._client.messages.create(**kwargs)
        except Exception as e:
            logger.error("Anthropic request failed", extra={
                "error": sanitize_log_message(str(e))
            })
            raise ChannelError(f"Error in Anthropic request: {str(e)}", source="anthropic") from e

        return SamplingResponse(
            role="assistant",
            content=self._parse_content(response.content),
            model=getattr(response, "model", None),
            stop_reason=STOP_REASONS.get(response.stop_reason, response.stop_reason),
        )

    def _format_messages(self, request: SamplingRequest) -> List[Dict[str, Any]]:
        return [
            {
                "role": message.role,
                "content": [self._format_block(block) for block in message.content],
            }
            for message in request.messages
        ]

    def _format_block(self, block: ContentBlock) -> Dict[str, Any]:
        if isinstance(block, TextContent):
            return {"type": "text", "text": block.text}
        if isinstance(block, ImageContent):
            return {
                "type": "image",
                "source": {"type": "base64", "media_type": block.mime_type, "data": block.data},
            }
        if isinstance(block, ToolUseContent):
            return {"type": "tool_use", "id": block.id, "name": block.name, "input": block.input}
        if isinstance(block, ToolResultContent):
            return {
                "type": "tool_result",
                "tool_use_id": block.tool_use_id,
                "content": [{"type": "text", "text": item.text} for item in block.content],
                "is_error": block.is_error,
            }
        raise ChannelError(f"Unsupported content block: {block.type}", source="anthropic")

    def _format_tools(self, request: SamplingRequest) -> List[Dict[str, Any]]:
        return [
            {
                "name": tool.name,
                "description": tool.description,
                "input_schema": tool.input_schema,
            }
            for tool in request.tools
        ]

    def _parse_content(self, blocks: Any) -> List[ContentBlock]:
        content: List[ContentBlock] = []
        for block in blocks:
            if block.type == "text":
                content.append(TextContent(text=block.text))
            elif block.type == "tool_use":
                content.append(ToolUseContent(id=block.id, name=block.name, input=block.input))
            else:
                logger.debug("Skipping unsupported response block", extra={
                    "block_type": block.type
                })
        return content
