"""Observability hook protocol and implementations.

The ObservabilityHook protocol defines the interface for receiving events
from the narrative pipeline. Implementations can render to console, write
to files, or aggregate statistics.
"""

from typing import Protocol, runtime_checkable

from narrative_engine.observability.events import (
    AttemptStartEvent,
    PassageAcceptedEvent,
    RepetitionCheckEvent,
)


@runtime_checkable
class ObservabilityHook(Protocol):
    """Protocol for observability hooks.

    Implement this protocol to receive events from the narrative pipeline.
    """

    def on_attempt_start(self, event: AttemptStartEvent) -> None:
        """Called when a generation attempt starts."""
        ...

    def on_repetition_check(self, event: RepetitionCheckEvent) -> None:
        """Called after a candidate is checked for repetition."""
        ...

    def on_passage_accepted(self, event: PassageAcceptedEvent) -> None:
        """Called when a passage is accepted."""
        ...


class NullHook:
    """No-op hook for when observability is disabled.

    This is the default hook; it satisfies the protocol and does nothing.
    """

    def on_attempt_start(self, event: AttemptStartEvent) -> None:
        pass

    def on_repetition_check(self, event: RepetitionCheckEvent) -> None:
        pass

    def on_passage_accepted(self, event: PassageAcceptedEvent) -> None:
        pass


class CompositeHook:
    """Combines multiple hooks into one.

    Events are dispatched to all hooks in order.
    """

    def __init__(self, hooks: list[ObservabilityHook]) -> None:
        """Initialize with a list of hooks.

        Args:
            hooks: List of hooks to dispatch events to.
        """
        self.hooks = hooks

    def on_attempt_start(self, event: AttemptStartEvent) -> None:
        for hook in self.hooks:
            hook.on_attempt_start(event)

    def on_repetition_check(self, event: RepetitionCheckEvent) -> None:
        for hook in self.hooks:
            hook.on_repetition_check(event)

    def on_passage_accepted(self, event: PassageAcceptedEvent) -> None:
        for hook in self.hooks:
            hook.on_passage_accepted(event)
