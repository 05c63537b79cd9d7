"""Utility functions for logging."""

import re
from typing import Any, Dict

SENSITIVE_KEYS = ("api_key", "secret", "password", "token", "authorization", "credential")

_SENSITIVE_PATTERNS = [
    (re.compile(r"sk-(?:ant-)?[\w\-]{8,}"), "sk-****"),  # provider API keys
    (re.compile(r"Bearer\s+[\w\-\.]+"), "Bearer ****"),
    (re.compile(r"(api_key|key|password|token|secret)=[\w\-\.]+"), r"\1=****"),
]


def redact_sensitive_data(data: Dict[str, Any]) -> Dict[str, Any]:
    """Redact sensitive values from a dictionary before logging it.

    Args:
        data: Dictionary of values to log

    Returns:
        A copy with sensitive string values shortened and others masked
    """
    if not isinstance(data, dict):
        return data

    def _redact(key: str, value: Any) -> Any:
        if isinstance(value, dict):
            return redact_sensitive_data(value)
        if value is None or not any(s in key.lower() for s in SENSITIVE_KEYS):
            return value
        if isinstance(value, str) and len(value) > 8:
            return f"{value[:4]}...{value[-4:]}"
        return "****"

    return {k: _redact(k, v) for k, v in data.items()}


def sanitize_log_message(message: str) -> str:
    """Remove credentials from a log message.

    Args:
        message: Log message to sanitize

    Returns:
        Sanitized message
    """
    result = message
    for pattern, replacement in _SENSITIVE_PATTERNS:
        result = pattern.sub(replacement, result)
    return result


def preview(text: str, limit: int = 50) -> str:
    """Shorten user text for log lines."""
    if len(text) <= limit:
        return text
    return f"{text[:limit]}..."
