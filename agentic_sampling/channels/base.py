"""Sampling channel interface.

A sampling channel performs one request/response round trip with a remote
language model. The orchestration loop only depends on this interface.
"""

from abc import ABC, abstractmethod

from agentic_sampling.types import SamplingRequest, SamplingResponse


class SamplingChannel(ABC):
    """Base interface for sampling channels."""

    @abstractmethod
    def get_name(self) -> str:
        """Get the name of the channel (e.g. 'mcp', 'anthropic')."""
        pass

    @abstractmethod
    async def create_message(self, request: SamplingRequest) -> SamplingResponse:
        """Send one sampling request and wait for the response.

        Args:
            request: The request built for the current iteration

        Returns:
            The provider's response

        Raises:
            ChannelError: If the round trip fails
        """
        pass
