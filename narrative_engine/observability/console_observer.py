"""Rich console observer for real-time pipeline visibility."""

from rich.console import Console

from narrative_engine.observability.events import (
    AttemptStartEvent,
    PassageAcceptedEvent,
    RepetitionCheckEvent,
)


class RichConsoleObserver:
    """Pretty console output using Rich.

    Renders attempts, repetition checks and accepted passages with colors
    and timing information.
    """

    def __init__(
        self,
        console: Console | None = None,
        show_tags: bool = False,
        indent: str = "  ",
    ) -> None:
        """Initialize the console observer.

        Args:
            console: Rich Console instance. Creates new one if not provided.
            show_tags: Print the selection tags for each attempt.
            indent: Indentation string for nested output.
        """
        self.console = console or Console()
        self.show_tags = show_tags
        self.indent = indent
        self._accepted = 0
        self._total_attempts = 0

    def on_attempt_start(self, event: AttemptStartEvent) -> None:
        """Render attempt start."""
        self._total_attempts += 1
        voice_str = f" voice=[yellow]{event.voice}[/]" if event.voice else ""
        self.console.print(
            f"{self.indent}[cyan]attempt {event.attempt}/{event.max_attempts}[/] "
            f"{event.event_type} -> [blue]{event.entry_rule}[/] "
            f"(seed {event.seed}){voice_str}"
        )
        if self.show_tags and event.tags:
            self.console.print(
                f"{self.indent}{self.indent}tags: {', '.join(event.tags)}", style="dim"
            )

    def on_repetition_check(self, event: RepetitionCheckEvent) -> None:
        """Render repetition check result."""
        if event.passed:
            status = "[green]passed[/]"
        elif event.attempt < event.max_attempts:
            status = "[yellow]retry[/]"
        else:
            status = "[red]issues kept[/]"

        self.console.print(f"{self.indent}[magenta]repetition[/] {status}")

        if not event.passed:
            for issue in event.issues[:3]:
                self.console.print(f"{self.indent}{self.indent}! {issue}", style="dim red")

    def on_passage_accepted(self, event: PassageAcceptedEvent) -> None:
        """Render accepted passage summary."""
        self._accepted += 1
        forced_str = " [yellow](forced)[/]" if event.forced else ""
        self.console.print(
            f"{self.indent}[green]accepted[/] generation {event.generation} after "
            f"{event.attempts} attempt(s), {event.duration_ms:.1f}ms{forced_str}"
        )

    def print_summary(self) -> None:
        """Print how many attempts the accepted passages took."""
        if not self._accepted:
            return
        average = self._total_attempts / self._accepted
        self.console.print(
            f"\n[bold]Passages:[/] {self._accepted}  "
            f"[bold]Attempts:[/] {self._total_attempts} ({average:.2f} per passage)"
        )

    def reset(self) -> None:
        """Reset counters."""
        self._accepted = 0
        self._total_attempts = 0
