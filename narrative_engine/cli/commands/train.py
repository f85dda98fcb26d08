"""Markov corpus training command."""

from pathlib import Path

import typer

from narrative_engine.cli.display import console, display_error, display_success
from narrative_engine.markov.exceptions import MarkovLoadError
from narrative_engine.markov.storage import save_model
from narrative_engine.markov.trainer import MAX_NGRAM, MIN_NGRAM, MarkovTrainer


def train(
    input_path: Path = typer.Option(..., "--input", "-i", help="Corpus text file"),
    output_path: Path = typer.Option(..., "--output", "-o", help="Model file (.json or .yaml)"),
    ngram: int = typer.Option(2, "--ngram", "-n", help="N-gram depth (2, 3 or 4)"),
) -> None:
    """Train a Markov model from a text corpus.

    Lines of the form [tag] start a tagged region; text after them also
    feeds that tag's transition table.
    """
    if not MIN_NGRAM <= ngram <= MAX_NGRAM:
        display_error(f"--ngram must be between {MIN_NGRAM} and {MAX_NGRAM}")
        raise typer.Exit(1)

    try:
        text = input_path.read_text(encoding="utf-8")
    except OSError as e:
        display_error(f"Could not read '{input_path}': {e}")
        raise typer.Exit(1)

    console.print(f"Training {ngram}-gram model from '{input_path}'...")
    model = MarkovTrainer.train(text, ngram)

    transition_count = sum(len(options) for options in model.transitions.values())
    console.print(
        f"Model trained: {len(model.transitions)} unique prefixes, "
        f"{transition_count} transitions"
    )
    if model.tags:
        console.print(f"Tags found: {', '.join(sorted(model.tags))}")

    try:
        save_model(model, output_path)
    except MarkovLoadError as e:
        display_error(str(e))
        raise typer.Exit(1)

    display_success(f"Model saved to '{output_path}'")
