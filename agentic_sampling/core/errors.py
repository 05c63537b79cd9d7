"""Error classes for the agentic sampling package."""

from typing import Optional


class AgenticSamplingError(Exception):
    """Base exception for all agentic sampling errors."""

    def __init__(self, message: str, *, source: Optional[str] = None):
        self.source = source
        super().__init__(message)

    def __str__(self) -> str:
        if self.source:
            return f"[{self.source}] {super().__str__()}"
        return super().__str__()


class ConfigError(AgenticSamplingError):
    """Raised when an invocation or a channel is misconfigured."""
    pass


class NoValidToolsError(ConfigError):
    """Raised when none of the requested tool names resolve to a known tool."""

    def __init__(self, available: list[str]):
        self.available = available
        super().__init__(
            f"No valid tools specified. Available tools: {', '.join(available)}"
        )


class ChannelError(AgenticSamplingError):
    """Raised when a round trip to the sampling provider fails."""
    pass


class ToolInputError(AgenticSamplingError):
    """Raised by tool validators when the model supplied unusable input."""
    pass


class CatalogError(AgenticSamplingError):
    """Base exception for resource catalog errors."""
    pass


class ResourceNotFoundError(CatalogError):
    """Raised when a resource URI is not served by the catalog."""

    def __init__(self, uri: str):
        self.uri = uri
        super().__init__(f"Unknown resource: {uri}")


class InvalidCursorError(CatalogError):
    """Raised when a pagination cursor cannot be decoded."""
    pass
