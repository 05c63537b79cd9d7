from agentic_sampling.types.models import (
    AudioContent,
    DEFAULT_TOOL_NAMES,
    AgenticSamplingRequest,
    AgenticSamplingResult,
    ContentBlock,
    ImageContent,
    SamplingMessage,
    SamplingRequest,
    SamplingResponse,
    StopReason,
    TextContent,
    ToolAnnotations,
    ToolCallRecord,
    ToolChoice,
    ToolDeclaration,
    ToolHandler,
    ToolInput,
    ToolOutcome,
    ToolResultContent,
    ToolUseContent,
    ToolValidator,
    serialize_arguments,
)

__all__ = [
    "AudioContent",
    "DEFAULT_TOOL_NAMES",
    "AgenticSamplingRequest",
    "AgenticSamplingResult",
    "ContentBlock",
    "ImageContent",
    "SamplingMessage",
    "SamplingRequest",
    "SamplingResponse",
    "StopReason",
    "TextContent",
    "ToolAnnotations",
    "ToolCallRecord",
    "ToolChoice",
    "ToolDeclaration",
    "ToolHandler",
    "ToolInput",
    "ToolOutcome",
    "ToolResultContent",
    "ToolUseContent",
    "ToolValidator",
    "serialize_arguments",
]
