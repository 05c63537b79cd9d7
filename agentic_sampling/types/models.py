"""Type definitions for agentic sampling.

This module contains the data model shared by the orchestration loop, the
sampling channels and the MCP server: content blocks, conversation turns,
tool declarations, sampling requests/responses and the caller-facing
invocation request and result.

Content blocks (text, image, audio, tool_use, tool_result) form a tagged
union discriminated on ``type``. Attribute names are snake_case; the
camelCase names used on the MCP wire are kept as aliases,
so ``model_dump(by_alias=True)`` produces the wire shape and both spellings
are accepted on input.
"""

import json
from enum import Enum
from typing import (
    Annotated,
    Any,
    Awaitable,
    Callable,
    Dict,
    List,
    Literal,
    Optional,
    Union,
)

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


DEFAULT_TOOL_NAMES = ("echo", "add")


class WireModel(BaseModel):
    """Base model accepting both attribute names and wire aliases."""

    model_config = ConfigDict(populate_by_name=True)

    def to_wire(self) -> Dict[str, Any]:
        """Dump the model in its JSON wire shape."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class TextContent(WireModel):
    """Plain text content block."""

    type: Literal["text"] = "text"
    text: str


class ImageContent(WireModel):
    """Base64 image content block."""

    type: Literal["image"] = "image"
    data: str
    mime_type: str = Field(alias="mimeType")


class AudioContent(WireModel):
    """Base64 audio content block."""

    type: Literal["audio"] = "audio"
    data: str
    mime_type: str = Field(alias="mimeType")


class ToolUseContent(WireModel):
    """A tool invocation requested by the model.

    Attributes:
        id: Identifier echoed back by exactly one tool result
        name: Name of the requested tool
        input: Arguments chosen by the model; not validated here
    """

    type: Literal["tool_use"] = "tool_use"
    id: str
    name: str
    input: Any = Field(default_factory=dict)


class ToolResultContent(WireModel):
    """The outcome of a tool invocation, sent back to the model."""

    type: Literal["tool_result"] = "tool_result"
    tool_use_id: str = Field(alias="toolUseId")
    content: List[TextContent] = Field(default_factory=list)
    is_error: bool = Field(False, alias="isError")


ContentBlock = Annotated[
    Union[TextContent, ImageContent, AudioContent, ToolUseContent, ToolResultContent],
    Field(discriminator="type"),
]


def _as_block_list(value: Any) -> Any:
    if isinstance(value, (dict, BaseModel)):
        return [value]
    return value


class SamplingMessage(WireModel):
    """One conversation turn.

    A turn that carries tool results must contain nothing but tool results;
    sampling providers reject mixed turns.
    """

    role: Literal["user", "assistant"]
    content: List[ContentBlock]

    @field_validator("content", mode="before")
    @classmethod
    def _normalize_content(cls, value: Any) -> Any:
        return _as_block_list(value)

    @model_validator(mode="after")
    def _check_tool_results(self) -> "SamplingMessage":
        kinds = {block.type for block in self.content}
        if "tool_result" in kinds and kinds != {"tool_result"}:
            raise ValueError(
                "A message carrying tool results must contain only tool results"
            )
        return self

    @classmethod
    def user_text(cls, text: str) -> "SamplingMessage":
        return cls(role="user", content=[TextContent(text=text)])


class ToolAnnotations(WireModel):
    """Advisory capability hints for a tool. Never enforced locally."""

    read_only_hint: Optional[bool] = Field(None, alias="readOnlyHint")
    destructive_hint: Optional[bool] = Field(None, alias="destructiveHint")
    idempotent_hint: Optional[bool] = Field(None, alias="idempotentHint")
    open_world_hint: Optional[bool] = Field(None, alias="openWorldHint")


class ToolDeclaration(WireModel):
    """Declaration of a tool offered to the sampling provider.

    Attributes:
        name: Unique tool name within a declared set
        description: Human-readable description shown to the model
        input_schema: JSON schema describing the expected input
        annotations: Advisory hints (read-only, destructive, ...)
    """

    name: str
    description: str
    input_schema: Dict[str, Any] = Field(
        default_factory=lambda: {"type": "object", "properties": {}},
        alias="inputSchema",
    )
    annotations: Optional[ToolAnnotations] = None


class ToolChoice(WireModel):
    """Tool choice policy sent with a sampling request."""

    mode: Literal["auto", "none"] = "auto"


class StopReason(str, Enum):
    """Stop reasons understood by the orchestration loop."""

    TOOL_USE = "toolUse"
    END_TURN = "endTurn"
    MAX_TOKENS = "maxTokens"
    STOP_SEQUENCE = "stopSequence"


class SamplingRequest(WireModel):
    """A single round-trip request to the sampling provider."""

    messages: List[SamplingMessage]
    tools: List[ToolDeclaration] = Field(default_factory=list)
    tool_choice: ToolChoice = Field(default_factory=ToolChoice, alias="toolChoice")
    system_prompt: Optional[str] = Field(None, alias="systemPrompt")
    max_tokens: int = Field(alias="maxTokens")
    temperature: Optional[float] = None


class SamplingResponse(WireModel):
    """The provider's answer to a sampling request.

    ``content`` may arrive as a single block or a list; it is always stored
    as a list.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    role: Literal["user", "assistant"] = "assistant"
    content: List[ContentBlock] = Field(default_factory=list)
    model: Optional[str] = None
    stop_reason: Optional[str] = Field(None, alias="stopReason")

    @field_validator("content", mode="before")
    @classmethod
    def _normalize_content(cls, value: Any) -> Any:
        return _as_block_list(value)

    def tool_uses(self) -> List[ToolUseContent]:
        return [block for block in self.content if isinstance(block, ToolUseContent)]

    def first_text(self) -> Optional[str]:
        for block in self.content:
            if isinstance(block, TextContent):
                return block.text
        return None

    def serialized_content(self) -> str:
        return json.dumps(
            [block.to_wire() for block in self.content], ensure_ascii=False
        )


class ToolOutcome(BaseModel):
    """Result of executing one tool locally."""

    content: str
    is_error: bool = False


def serialize_arguments(arguments: Any) -> str:
    """Compact JSON rendering used in the audit trail."""
    return json.dumps(arguments, separators=(",", ":"), ensure_ascii=False, default=str)


class ToolCallRecord(BaseModel):
    """One entry of the tool-call audit trail."""

    name: str
    arguments: Any = None
    result: str
    is_error: bool = False

    def format(self) -> str:
        return f"{self.name}({serialize_arguments(self.arguments)}) => {self.result}"


class AgenticSamplingRequest(WireModel):
    """Caller-facing input of one orchestration run.

    Attributes:
        prompt: The prompt sent to the model as the first user turn
        max_tokens: Maximum tokens per sampling response
        max_iterations: Upper bound on sampling round trips (safety limit)
        tool_names: Names of tools to make available to the model
    """

    prompt: str
    max_tokens: int = Field(1000, ge=1, alias="maxTokens")
    max_iterations: int = Field(5, ge=1, alias="maxIterations")
    tool_names: List[str] = Field(
        default_factory=lambda: list(DEFAULT_TOOL_NAMES), alias="toolNames"
    )


class AgenticSamplingResult(WireModel):
    """Outcome of one orchestration run."""

    iterations_used: int = Field(alias="iterationsUsed")
    final_answer: str = Field(alias="finalAnswer")
    tool_calls: List[ToolCallRecord] = Field(default_factory=list)
    stop_reason: Optional[str] = Field(None, alias="stopReason")

    @property
    def tool_call_audit(self) -> List[str]:
        return [record.format() for record in self.tool_calls]

    def to_text(self) -> str:
        """Render the single textual response returned to the caller."""
        text = f"Agentic sampling completed in {self.iterations_used} iteration(s).\n"
        if self.tool_calls:
            lines = "\n".join(f"  - {entry}" for entry in self.tool_call_audit)
            text += f"\nTool calls:\n{lines}\n"
        text += f"\nFinal response:\n{self.final_answer}"
        return text


# Handlers may be sync or async and receive the (validated) tool input.
ToolInput = Dict[str, Any]
SyncToolHandler = Callable[[ToolInput], Any]
AsyncToolHandler = Callable[[ToolInput], Awaitable[Any]]
ToolHandler = Union[SyncToolHandler, AsyncToolHandler]
ToolValidator = Callable[[ToolInput], None]
