"""Per-invocation context owned by the caller."""

from collections import Counter
from dataclasses import dataclass, field
from typing import Optional


@dataclass
class InvocationContext:
    """State that belongs to one caller rather than to the process.

    Attributes:
        session_id: Identifier of the calling session, if any
        call_counts: Number of calls made to each tool through this context
    """

    session_id: Optional[str] = None
    call_counts: Counter = field(default_factory=Counter)

    def record_call(self, tool_name: str) -> int:
        self.call_counts[tool_name] += 1
        return self.call_counts[tool_name]

    @property
    def total_calls(self) -> int:
        return sum(self.call_counts.values())
