"""Utilities shared across the agentic sampling package."""

from .log_utils import preview, redact_sensitive_data, sanitize_log_message

__all__ = ["preview", "redact_sensitive_data", "sanitize_log_message"]
