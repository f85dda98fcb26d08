"""Main CLI application for the narrative engine."""

import logging

import typer
from rich.logging import RichHandler

from narrative_engine.cli.commands.lint import lint
from narrative_engine.cli.commands.preview import preview
from narrative_engine.cli.commands.train import train
from narrative_engine.cli.display import console
from narrative_engine.config import get_settings

# Create main app
app = typer.Typer(
    name="narrative",
    help="Procedural narrative generation from grammars, voices and Markov models",
    add_completion=False,
)

app.command()(train)
app.command()(lint)
app.command()(preview)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging"),
) -> None:
    """Narrative Engine - turn simulation events into prose.

    Use 'narrative train' to build Markov models, 'narrative lint' to check
    grammars and 'narrative preview' to try them out.
    """
    level = "DEBUG" if verbose else get_settings().log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


if __name__ == "__main__":
    app()
