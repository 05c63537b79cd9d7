"""Settings for agentic sampling.

This module provides configuration for the orchestration loop, the resource
catalog and the sampling channels, with support for reading from environment
variables and a ``.env`` file.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from agentic_sampling.core.errors import ConfigError
from agentic_sampling.types import DEFAULT_TOOL_NAMES

DEFAULT_SYSTEM_PROMPT = (
    "You are a helpful assistant with access to tools. "
    "Use them when needed to answer questions accurately. "
    "When you have the final answer, respond with just the answer."
)
DEFAULT_TEMPERATURE = 0.7

ChannelKind = Literal["mcp", "anthropic", "openai"]


class SamplingSettings(BaseSettings):
    """Global settings for agentic sampling.

    Loop defaults apply when a caller does not override them; channel
    settings are only needed when sampling goes straight to a provider API
    instead of back through the MCP client.
    """

    # Orchestration loop
    system_prompt: str = Field(DEFAULT_SYSTEM_PROMPT, description="System prompt for every round trip")
    temperature: float = Field(DEFAULT_TEMPERATURE, ge=0.0, le=2.0, description="Sampling temperature")
    default_max_tokens: int = Field(1000, ge=1, description="Default max tokens per response")
    default_max_iterations: int = Field(5, ge=1, description="Default iteration bound")
    default_tools: List[str] = Field(default_factory=lambda: list(DEFAULT_TOOL_NAMES))

    # Resource catalog
    resource_page_size: int = Field(10, ge=1, description="Resources per listing page")
    subscription_interval: float = Field(10.0, gt=0, description="Seconds between update notifications")

    # Sampling channel
    sampling_channel: ChannelKind = Field("mcp", description="Where sampling requests are sent")

    anthropic_api_key: Optional[str] = Field(None, description="Anthropic API key")
    anthropic_model: str = Field("claude-sonnet-4-5", description="Default Anthropic model")

    openai_api_key: Optional[str] = Field(None, description="OpenAI API key")
    openai_model: str = Field("gpt-4o", description="Default OpenAI model")
    openai_base_url: Optional[str] = Field(None, description="Optional OpenAI API base URL")

    model_config = SettingsConfigDict(
        case_sensitive=False,
        extra="ignore",
    )

    def __init__(self, env_file: Optional[str] = ".env", **kwargs):
        super().__init__(_env_file=env_file, **kwargs)


@dataclass
class ChannelConfig:
    """Configuration for one provider-backed sampling channel.

    Attributes:
        api_key: The API key for the provider
        model: The model name to use
        base_url: Optional base URL for the API
        extra_config: Additional provider-specific configuration
    """

    api_key: Optional[str] = None
    model: Optional[str] = None
    base_url: Optional[str] = None
    extra_config: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_settings(
        cls, kind: str, settings: Optional[SamplingSettings] = None
    ) -> "ChannelConfig":
        """Create a channel config from settings.

        Args:
            kind: The provider to load config for ("anthropic" or "openai")
            settings: Optional settings instance, loaded from env if not provided

        Returns:
            A ChannelConfig for the provider

        Raises:
            ConfigError: If the provider is not supported
        """
        if settings is None:
            settings = SamplingSettings()

        channel_configs = {
            "anthropic": lambda: cls(
                api_key=settings.anthropic_api_key,
                model=settings.anthropic_model,
            ),
            "openai": lambda: cls(
                api_key=settings.openai_api_key,
                model=settings.openai_model,
                base_url=settings.openai_base_url,
            ),
        }

        if kind not in channel_configs:
            raise ConfigError(f"Unsupported sampling channel: {kind}")

        return channel_configs[kind]()

    @property
    def is_configured(self) -> bool:
        """Check that a model and an API key are present."""
        return bool(self.model) and bool(self.api_key)
