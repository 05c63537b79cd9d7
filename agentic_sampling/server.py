"""MCP server exposing agentic sampling.

Serves three tools over stdio:
- ``trigger-agentic-sampling``: runs the agentic sampling loop, sending
  sampling requests back to the client (or to a provider API when
  ``SAMPLING_CHANNEL`` is ``anthropic``/``openai``)
- ``echo`` and ``add``: the bundled tools, callable directly

and the resource catalog with pagination and subscriptions.

Usage:
    agentic-sampling-server --log-level DEBUG --log-dir logs
"""

import argparse
import asyncio
import logging
from typing import Any, Callable, Dict, List, Optional

from dotenv import load_dotenv
from mcp import types
from mcp.server.fastmcp import Context, FastMCP
from mcp.server.fastmcp.exceptions import ToolError
from mcp.server.stdio import stdio_server
from mcp.shared.exceptions import McpError

from agentic_sampling.channels import (
    McpSamplingChannel,
    SamplingChannel,
    client_supports_sampling_tools,
    create_channel,
)
from agentic_sampling.core import (
    AgenticSamplingLoop,
    CatalogError,
    InvocationContext,
    NoValidToolsError,
    SamplingSettings,
    ToolExecutor,
    ToolRegistry,
)
from agentic_sampling.logging_config import setup_logging
from agentic_sampling.resources import ResourceCatalog, SubscriptionManager
from agentic_sampling.tools import ADD_TOOL, ECHO_TOOL, create_default_registry
from agentic_sampling.types import AgenticSamplingRequest
from agentic_sampling.utils.log_utils import sanitize_log_message

logger = logging.getLogger(__name__)

SERVER_NAME = "agentic-sampling"
TRIGGER_TOOL_NAME = "trigger-agentic-sampling"
TRIGGER_TOOL_DESCRIPTION = (
    "Demonstrates sampling with tools - sends a prompt to LLM with tools available, "
    "handles tool calls in a loop until final response. "
    "Requires client to support sampling.tools capability."
)

ChannelFactory = Callable[[], SamplingChannel]


class ResourceHandlers:
    """MCP request handlers for the resource catalog.

    Subscriptions are tracked per session; each session gets its own
    notifier that sends ``notifications/resources/updated``.
    """

    def __init__(self, catalog: ResourceCatalog, interval: float = 10.0) -> None:
        self.catalog = catalog
        self.interval = interval
        self._managers: Dict[int, SubscriptionManager] = {}

    def manager_for(self, session: Any) -> SubscriptionManager:
        key = id(session)
        if key not in self._managers:
            async def notify(uri: str) -> None:
                await session.send_resource_updated(uri)

            self._managers[key] = SubscriptionManager(notify, self.interval)
        return self._managers[key]

    def subscribe(self, session: Any, uri: str) -> None:
        manager = self.manager_for(session)
        manager.subscribe(uri)
        manager.start()

    async def unsubscribe(self, session: Any, uri: str) -> None:
        key = id(session)
        manager = self._managers.get(key)
        if manager is None:
            return
        manager.unsubscribe(uri)
        if not manager.subscriptions:
            await manager.stop()
            del self._managers[key]

    async def close(self) -> None:
        for manager in self._managers.values():
            await manager.stop()
        self._managers.clear()

    def register(self, lowlevel: Any) -> None:
        """Install the catalog handlers on a low-level MCP server."""

        def _catalog_call(fn: Callable[[], Any]) -> Any:
            try:
                return fn()
            except CatalogError as e:
                raise McpError(types.ErrorData(code=types.INVALID_PARAMS, message=str(e))) from e

        async def list_resources(req: types.ListResourcesRequest) -> types.ServerResult:
            params = req.params
            cursor = getattr(params, "cursor", None) if params else None
            if cursor is None:
                cursor = getattr(req, "cursor", None)
            return types.ServerResult(_catalog_call(lambda: self.catalog.list_resources(cursor)))

        async def list_templates(req: types.ListResourceTemplatesRequest) -> types.ServerResult:
            return types.ServerResult(
                types.ListResourceTemplatesResult(resourceTemplates=self.catalog.list_templates())
            )

        async def read_resource(req: types.ReadResourceRequest) -> types.ServerResult:
            uri = str(req.params.uri)
            contents = _catalog_call(lambda: self.catalog.read_resource(uri))
            return types.ServerResult(types.ReadResourceResult(contents=contents))

        async def subscribe(req: types.SubscribeRequest) -> types.ServerResult:
            self.subscribe(lowlevel.request_context.session, str(req.params.uri))
            return types.ServerResult(types.EmptyResult())

        async def unsubscribe(req: types.UnsubscribeRequest) -> types.ServerResult:
            await self.unsubscribe(lowlevel.request_context.session, str(req.params.uri))
            return types.ServerResult(types.EmptyResult())

        lowlevel.request_handlers[types.ListResourcesRequest] = list_resources
        lowlevel.request_handlers[types.ListResourceTemplatesRequest] = list_templates
        lowlevel.request_handlers[types.ReadResourceRequest] = read_resource
        lowlevel.request_handlers[types.SubscribeRequest] = subscribe
        lowlevel.request_handlers[types.UnsubscribeRequest] = unsubscribe


class AgenticSamplingServer:
    """FastMCP server wiring the tools and the resource catalog.

    Attributes:
        mcp: The FastMCP server
        resources: Resource catalog handlers
        settings: Settings used for defaults
    """

    def __init__(
        self,
        settings: Optional[SamplingSettings] = None,
        channel_factory: Optional[ChannelFactory] = None,
        registry: Optional[ToolRegistry] = None,
        catalog: Optional[ResourceCatalog] = None,
    ) -> None:
        self.settings = settings or SamplingSettings()
        self.registry = registry or create_default_registry()
        self.channel_factory = channel_factory
        self.resources = ResourceHandlers(
            catalog or ResourceCatalog(page_size=self.settings.resource_page_size),
            interval=self.settings.subscription_interval,
        )
        self.mcp = FastMCP(SERVER_NAME)
        self._register_tools()
        self.resources.register(self.mcp._mcp_server)

    def _register_tools(self) -> None:
        executor = ToolExecutor(self.registry)
        defaults = self.settings

        @self.mcp.tool(name=ECHO_TOOL.name, description=ECHO_TOOL.description)
        async def echo(message: str) -> str:
            outcome = await executor.execute(ECHO_TOOL.name, {"message": message})
            if outcome.is_error:
                raise ToolError(outcome.content)
            return outcome.content

        @self.mcp.tool(name=ADD_TOOL.name, description=ADD_TOOL.description)
        async def add(a: float, b: float) -> str:
            outcome = await executor.execute(ADD_TOOL.name, {"a": a, "b": b})
            if outcome.is_error:
                raise ToolError(outcome.content)
            return outcome.content

        @self.mcp.tool(name=TRIGGER_TOOL_NAME, description=TRIGGER_TOOL_DESCRIPTION)
        async def trigger_agentic_sampling(
            prompt: str,
            ctx: Context,
            max_tokens: int = defaults.default_max_tokens,
            max_iterations: int = defaults.default_max_iterations,
            available_tools: Optional[List[str]] = None,
        ) -> str:
            return await self.trigger(
                prompt,
                max_tokens=max_tokens,
                max_iterations=max_iterations,
                available_tools=available_tools,
                session=ctx.session,
            )

    def _channel_for(self, session: Any) -> SamplingChannel:
        if self.channel_factory is not None:
            return self.channel_factory()

        client_params = getattr(session, "client_params", None)
        capabilities = client_params.capabilities if client_params else None
        if not client_supports_sampling_tools(capabilities):
            raise ToolError("Client does not support sampling with tools (sampling.tools capability)")
        return McpSamplingChannel(session)

    async def trigger(
        self,
        prompt: str,
        max_tokens: Optional[int] = None,
        max_iterations: Optional[int] = None,
        available_tools: Optional[List[str]] = None,
        session: Any = None,
    ) -> str:
        """Run agentic sampling for one tool call and render the response.

        Raises:
            ToolError: If the client cannot sample with tools or no requested
                tool is known
            ChannelError: If a sampling round trip fails
        """
        request = AgenticSamplingRequest(
            prompt=prompt,
            max_tokens=max_tokens if max_tokens is not None else self.settings.default_max_tokens,
            max_iterations=(
                max_iterations if max_iterations is not None else self.settings.default_max_iterations
            ),
            tool_names=available_tools if available_tools is not None else self.settings.default_tools,
        )
        channel = self._channel_for(session)
        loop = AgenticSamplingLoop(self.registry, channel, self.settings)

        try:
            result = await loop.run(request, InvocationContext())
        except NoValidToolsError as e:
            raise ToolError(f"Error: {e}") from e
        return result.to_text()

    async def serve_stdio(self) -> None:
        """Serve over stdio, advertising resource subscriptions."""
        lowlevel = self.mcp._mcp_server
        options = lowlevel.create_initialization_options()
        options.capabilities.resources = types.ResourcesCapability(subscribe=True, listChanged=False)

        logger.info("Starting server over stdio", extra={"server_name": SERVER_NAME})
        try:
            async with stdio_server() as (read_stream, write_stream):
                await lowlevel.run(read_stream, write_stream, options)
        finally:
            await self.resources.close()


def create_server(
    settings: Optional[SamplingSettings] = None,
    channel_factory: Optional[ChannelFactory] = None,
) -> AgenticSamplingServer:
    """Create the server, choosing the sampling channel from settings."""
    settings = settings or SamplingSettings()
    if channel_factory is None and settings.sampling_channel != "mcp":
        channel = create_channel(settings.sampling_channel, settings=settings)
        channel_factory = lambda: channel
    return AgenticSamplingServer(settings, channel_factory)


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Agentic sampling MCP server")
    parser.add_argument(
        "--log-level", "-l",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level"
    )
    parser.add_argument(
        "--log-dir",
        type=str,
        default=None,
        help="Directory for rotating log files"
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    """Console entry point."""
    args = parse_arguments(argv)
    load_dotenv()
    setup_logging(getattr(logging, args.log_level), args.log_dir)

    try:
        server = create_server()
        asyncio.run(server.serve_stdio())
    except KeyboardInterrupt:
        logger.info("Server interrupted")
    except Exception as e:
        logger.error("Server error", extra={"error": sanitize_log_message(str(e))}, exc_info=True)
        raise


if __name__ == "__main__":
    main()
