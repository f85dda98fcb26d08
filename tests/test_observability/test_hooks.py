"""Tests for observability hooks."""

from io import StringIO
from unittest.mock import MagicMock

from rich.console import Console

from narrative_engine.observability import (
    AttemptStartEvent,
    CompositeHook,
    NullHook,
    ObservabilityHook,
    PassageAcceptedEvent,
    RepetitionCheckEvent,
    RichConsoleObserver,
)


def _attempt(attempt: int = 1, voice: str | None = None) -> AttemptStartEvent:
    return AttemptStartEvent(
        event_type="confrontation",
        narrative_fn="confrontation",
        entry_rule="confrontation_opening",
        attempt=attempt,
        max_attempts=3,
        seed=42,
        voice=voice,
        tags=["fn:confrontation", "mood:tense"],
    )


def _observer(show_tags: bool = False) -> tuple[RichConsoleObserver, StringIO]:
    buffer = StringIO()
    console = Console(file=buffer, force_terminal=False, width=120)
    return RichConsoleObserver(console=console, show_tags=show_tags), buffer


class TestProtocol:
    """Tests for protocol conformance."""

    def test_null_hook_satisfies_protocol(self):
        assert isinstance(NullHook(), ObservabilityHook)

    def test_console_observer_satisfies_protocol(self):
        assert isinstance(RichConsoleObserver(), ObservabilityHook)

    def test_null_hook_does_nothing(self):
        hook = NullHook()
        hook.on_attempt_start(_attempt())
        hook.on_repetition_check(RepetitionCheckEvent(attempt=1, max_attempts=3, passed=True))
        hook.on_passage_accepted(
            PassageAcceptedEvent(text="x", attempts=1, generation=0, duration_ms=1.0)
        )


class TestCompositeHook:
    """Tests for CompositeHook dispatch."""

    def test_dispatches_to_all_hooks_in_order(self):
        calls = []
        first = MagicMock()
        first.on_attempt_start.side_effect = lambda e: calls.append("first")
        second = MagicMock()
        second.on_attempt_start.side_effect = lambda e: calls.append("second")

        event = _attempt()
        CompositeHook([first, second]).on_attempt_start(event)

        assert calls == ["first", "second"]
        first.on_attempt_start.assert_called_once_with(event)

    def test_dispatches_every_event_type(self):
        inner = MagicMock()
        composite = CompositeHook([inner])
        check = RepetitionCheckEvent(attempt=1, max_attempts=3, passed=False, issues=["x"])
        accepted = PassageAcceptedEvent(text="x", attempts=2, generation=4, duration_ms=3.0)

        composite.on_repetition_check(check)
        composite.on_passage_accepted(accepted)

        inner.on_repetition_check.assert_called_once_with(check)
        inner.on_passage_accepted.assert_called_once_with(accepted)


class TestRichConsoleObserver:
    """Tests for console rendering."""

    def test_attempt_rendering(self):
        observer, buffer = _observer()
        observer.on_attempt_start(_attempt(voice="host"))
        output = buffer.getvalue()
        assert "attempt 1/3" in output
        assert "confrontation_opening" in output
        assert "seed 42" in output
        assert "voice=host" in output
        assert "tags:" not in output

    def test_tags_shown_when_enabled(self):
        observer, buffer = _observer(show_tags=True)
        observer.on_attempt_start(_attempt())
        assert "tags: fn:confrontation, mood:tense" in buffer.getvalue()

    def test_repetition_statuses(self):
        observer, buffer = _observer()
        observer.on_repetition_check(RepetitionCheckEvent(attempt=1, max_attempts=3, passed=True))
        observer.on_repetition_check(
            RepetitionCheckEvent(attempt=2, max_attempts=3, passed=False, issues=["opening"])
        )
        observer.on_repetition_check(
            RepetitionCheckEvent(attempt=3, max_attempts=3, passed=False, issues=["opening"])
        )
        output = buffer.getvalue()
        assert "passed" in output
        assert "retry" in output
        assert "issues kept" in output
        assert "! opening" in output

    def test_accepted_and_summary(self):
        observer, buffer = _observer()
        observer.on_attempt_start(_attempt(1))
        observer.on_attempt_start(_attempt(2))
        observer.on_passage_accepted(
            PassageAcceptedEvent(text="x", attempts=2, generation=0, duration_ms=1.5, forced=True)
        )
        observer.print_summary()
        output = buffer.getvalue()
        assert "accepted" in output
        assert "(forced)" in output
        assert "Passages: 1" in output
        assert "2.00 per passage" in output

    def test_summary_empty_after_reset(self):
        observer, buffer = _observer()
        observer.on_attempt_start(_attempt())
        observer.on_passage_accepted(
            PassageAcceptedEvent(text="x", attempts=1, generation=0, duration_ms=1.0)
        )
        observer.reset()
        buffer.truncate(0)
        buffer.seek(0)
        observer.print_summary()
        assert buffer.getvalue() == ""
