"""Observability module for narrative pipeline monitoring.

Provides hooks and observers for real-time visibility into generation
attempts, repetition checks and accepted passages.
"""

from narrative_engine.observability.events import (
    AttemptStartEvent,
    PassageAcceptedEvent,
    RepetitionCheckEvent,
)
from narrative_engine.observability.hooks import (
    CompositeHook,
    NullHook,
    ObservabilityHook,
)
from narrative_engine.observability.console_observer import RichConsoleObserver

__all__ = [
    # Events
    "AttemptStartEvent",
    "PassageAcceptedEvent",
    "RepetitionCheckEvent",
    # Hooks
    "ObservabilityHook",
    "NullHook",
    "CompositeHook",
    # Observers
    "RichConsoleObserver",
]
