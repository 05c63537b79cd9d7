"""Creation of provider-backed sampling channels from settings."""

import logging
from dataclasses import asdict
from typing import Callable, Dict, Optional

from agentic_sampling.channels.anthropic import AnthropicSamplingChannel
from agentic_sampling.channels.base import SamplingChannel
from agentic_sampling.channels.openai import OpenAISamplingChannel
from agentic_sampling.core.errors import ConfigError
from agentic_sampling.core.settings import ChannelConfig, SamplingSettings
from agentic_sampling.utils.log_utils import redact_sensitive_data

logger = logging.getLogger(__name__)

CHANNEL_TYPES: Dict[str, Callable[[ChannelConfig], SamplingChannel]] = {
    "anthropic": AnthropicSamplingChannel,
    "openai": OpenAISamplingChannel,
}


def create_channel(
    kind: str,
    config: Optional[ChannelConfig] = None,
    settings: Optional[SamplingSettings] = None,
) -> SamplingChannel:
    """Create a provider-backed sampling channel.

    MCP channels are bound to a live session and are created by the server,
    not here.

    Args:
        kind: "anthropic" or "openai"
        config: Explicit channel configuration; read from settings if omitted
        settings: Settings used when no config is given

    Returns:
        The sampling channel

    Raises:
        ConfigError: If the kind is unsupported or the config is incomplete
    """
    if kind not in CHANNEL_TYPES:
        raise ConfigError(f"Unsupported sampling channel: {kind}")

    if config is None:
        config = ChannelConfig.from_settings(kind, settings)
    if not config.is_configured:
        raise ConfigError("Channel requires an API key and a model", source=kind)

    logger.debug("Creating sampling channel", extra={
        "channel": kind,
        "config": redact_sensitive_data(asdict(config))
    })
    return CHANNEL_TYPES[kind](config)
