"""MCP sampling channel.

Sends ``sampling/createMessage`` requests back to the connected MCP client,
offering tools and a tool choice policy, and validates the client's answer
into a SamplingResponse.

Example:
    ```python
    @server.tool()
    async def ask(prompt: str, ctx: Context) -> str:
        channel = McpSamplingChannel(ctx.session)
        result = await run_agentic_sampling(channel, AgenticSamplingRequest(prompt=prompt))
        return result.to_text()
    ```
"""

import logging
from typing import Any, Literal, Optional

from mcp import types
from mcp.shared.exceptions import McpError
from pydantic import ConfigDict, ValidationError

from agentic_sampling.channels.base import SamplingChannel
from agentic_sampling.core.errors import ChannelError
from agentic_sampling.types import SamplingRequest, SamplingResponse
from agentic_sampling.utils.log_utils import sanitize_log_message

logger = logging.getLogger(__name__)

CREATE_MESSAGE_METHOD = "sampling/createMessage"


class CreateMessageWithToolsParams(types.RequestParams):
    """Free-form params, so tool_use and tool_result blocks in the history
    and the tool declarations are sent exactly as built."""

    model_config = ConfigDict(extra="allow")


class CreateMessageWithToolsRequest(
    types.Request[CreateMessageWithToolsParams, Literal["sampling/createMessage"]]
):
    """``sampling/createMessage`` request whose params carry tools."""

    method: Literal["sampling/createMessage"] = CREATE_MESSAGE_METHOD
    params: CreateMessageWithToolsParams


def client_supports_sampling_tools(capabilities: Optional[types.ClientCapabilities]) -> bool:
    """Check whether a client declared the ``sampling.tools`` capability."""
    if capabilities is None or capabilities.sampling is None:
        return False
    sampling = capabilities.sampling
    tools = getattr(sampling, "tools", None)
    if tools is None and sampling.model_extra:
        tools = sampling.model_extra.get("tools")
    return tools is not None


class McpSamplingChannel(SamplingChannel):
    """Sampling channel backed by an MCP server session.

    Attributes:
        session: The server session connected to the sampling client
    """

    def __init__(self, session: Any):
        self.session = session

    def get_name(self) -> str:
        return "mcp"

    def build_request(self, request: SamplingRequest) -> CreateMessageWithToolsRequest:
        return CreateMessageWithToolsRequest(
            method=CREATE_MESSAGE_METHOD,
            params=CreateMessageWithToolsParams(**request.to_wire()),
        )

    async def create_message(self, request: SamplingRequest) -> SamplingResponse:
        """Send the request to the client and wait for its response.

        Raises:
            ChannelError: If the client rejects the request or returns a response that is
                not a valid sampling result
        """
        try:
            return await self.session.send_request(
                self.build_request(request),
                SamplingResponse,
            )
        except McpError as e:
            logger.error("Sampling request rejected by client", extra={
                "error": sanitize_log_message(str(e))
            })
            raise ChannelError(f"Sampling request failed: {e}", source="mcp") from e
        except ValidationError as e:
            logger.error("Invalid sampling response from client", extra={
                "error": sanitize_log_message(str(e))
            })
            raise ChannelError(f"Invalid sampling response: {e}", source="mcp") from e
