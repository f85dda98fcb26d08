"""Event dataclasses for observability hooks.

These events are emitted by the narrative pipeline at key points to provide
visibility into what's happening during generation.
"""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class AttemptStartEvent:
    """Emitted when a generation attempt starts."""

    event_type: str
    narrative_fn: str
    entry_rule: str
    attempt: int
    max_attempts: int
    seed: int
    voice: str | None = None
    tags: list[str] = field(default_factory=list)
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass
class RepetitionCheckEvent:
    """Emitted after a candidate passage is checked for repetition."""

    attempt: int
    max_attempts: int
    passed: bool
    issues: list[str] = field(default_factory=list)
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass
class PassageAcceptedEvent:
    """Emitted when a passage is accepted and recorded."""

    text: str
    attempts: int
    generation: int
    duration_ms: float
    forced: bool = False  # Accepted on the final attempt despite issues
    timestamp: datetime = field(default_factory=datetime.now)
