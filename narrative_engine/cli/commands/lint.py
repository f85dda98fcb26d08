"""Grammar linting command."""

from pathlib import Path
from typing import Optional

import typer

from narrative_engine.cli.display import console, display_error, display_lint_report
from narrative_engine.grammar.exceptions import GrammarLoadError
from narrative_engine.grammar.linter import lint_grammars
from narrative_engine.grammar.loader import load_grammars
from narrative_engine.markov.exceptions import MarkovLoadError
from narrative_engine.markov.storage import load_models_dir


def lint(
    path: Path = typer.Argument(..., help="Grammar file or directory"),
    models_dir: Optional[Path] = typer.Option(
        None, "--models-dir", "-m", help="Directory of Markov models to check references against"
    ),
) -> None:
    """Lint grammar rules for coverage and authoring defects.

    Exits with status 1 when errors are found.
    """
    if not path.exists():
        display_error(f"Path '{path}' does not exist")
        raise typer.Exit(1)

    try:
        grammars = load_grammars([path])
    except GrammarLoadError as e:
        display_error(f"Failed to load grammar: {e}")
        raise typer.Exit(1)

    console.print(f"Loaded {len(grammars)} grammar rules")

    model_ids: set[str] = set()
    if models_dir is not None:
        try:
            model_ids = set(load_models_dir(models_dir))
        except (MarkovLoadError, OSError) as e:
            display_error(f"Failed to load models: {e}")
            raise typer.Exit(1)

    report = lint_grammars(grammars, model_ids)
    display_lint_report(report)

    if not report.ok:
        raise typer.Exit(1)
