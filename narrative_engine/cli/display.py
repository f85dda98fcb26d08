"""Rich display helpers for CLI output."""

from collections.abc import Sequence

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from narrative_engine.grammar.linter import LintReport


# Shared console instance
console = Console()


def display_passage(text: str, title: str | None = None) -> None:
    """Display a generated passage in a panel.

    Args:
        text: Generated passage.
        title: Optional panel title.
    """
    console.print(Panel(Text(text), title=title, border_style="dim", padding=(1, 2)))


def display_error(message: str) -> None:
    """Display error message."""
    console.print(f"[bold red]Error:[/bold red] {message}")


def display_success(message: str) -> None:
    """Display success message."""
    console.print(f"[bold green]{message}[/bold green]")


def display_info(message: str) -> None:
    """Display info message."""
    console.print(f"[dim]{message}[/dim]")


def display_lint_report(report: LintReport) -> None:
    """Display lint findings as a table followed by a summary line.

    Args:
        report: Linter output.
    """
    if report.errors or report.warnings:
        table = Table(title="Grammar Lint")
        table.add_column("Level", style="bold")
        table.add_column("Message", style="white")
        for error in report.errors:
            table.add_row("[red]ERROR[/red]", error)
        for warning in report.warnings:
            table.add_row("[yellow]WARN[/yellow]", warning)
        console.print(table)

    console.print(f"{len(report.errors)} error(s), {len(report.warnings)} warning(s)")


def display_bulk_stats(
    passages: Sequence[str],
    errors: int,
    unique_openings: int,
    average_length: float,
    top_words: Sequence[tuple[str, int]],
) -> None:
    """Display variety statistics for a bulk generation run.

    Args:
        passages: Generated passages.
        errors: Number of failed narrations.
        unique_openings: Distinct first sentences among the passages.
        average_length: Mean passage length in characters.
        top_words: Most frequent words with their counts.
    """
    console.print()
    console.print(
        Panel(
            f"[bold]{len(passages)}[/bold] passages, [bold]{errors}[/bold] errors",
            title="Bulk Generation",
            style="cyan",
        )
    )
    console.print(f"Unique openings: {unique_openings} / {len(passages)}")
    console.print(f"Average length: {average_length:.0f} chars")

    if top_words:
        table = Table(title="Top Words")
        table.add_column("Word", style="cyan")
        table.add_column("Count", justify="right")
        for word, count in top_words:
            table.add_row(word, str(count))
        console.print(table)

    if passages:
        display_passage(passages[0], title="Sample")


def prompt_input(prompt: str = "> ") -> str:
    """Get input from user with styled prompt.

    Args:
        prompt: Prompt string.

    Returns:
        User input.
    """
    return console.input(f"[bold cyan]{prompt}[/bold cyan]")
