"""Grammar file loading.

Grammar files are YAML or JSON mappings of rule name to rule record (see
``narrative_engine.grammar.schemas``). Several files merge in order, later
files overriding same-named rules, which lets a genre overlay replace rules
from a base grammar.
"""

import json
import logging
from collections.abc import Iterable
from pathlib import Path

import yaml
from pydantic import ValidationError

from narrative_engine.grammar.engine import GrammarSet
from narrative_engine.grammar.exceptions import GrammarLoadError, TemplateParseError

logger = logging.getLogger(__name__)

GRAMMAR_SUFFIXES = (".yaml", ".yml", ".json")


def load_grammar_file(file_path: Path) -> GrammarSet:
    """Load a single grammar file.

    Args:
        file_path: Path to a YAML or JSON grammar file.

    Returns:
        The parsed GrammarSet.

    Raises:
        FileNotFoundError: If the file does not exist.
        GrammarLoadError: If the file cannot be parsed or is invalid.
    """
    file_path = Path(file_path)
    if not file_path.exists():
        raise FileNotFoundError(f"Grammar file not found: {file_path}")

    suffix = file_path.suffix.lower()
    if suffix not in GRAMMAR_SUFFIXES:
        raise GrammarLoadError(
            f"Unsupported file format: {suffix}. Use .yaml, .yml, or .json"
        )

    try:
        with open(file_path, encoding="utf-8") as f:
            if suffix == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise GrammarLoadError(f"Failed to parse {file_path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise GrammarLoadError(f"Grammar file {file_path} must contain a mapping of rules")

    try:
        grammars = GrammarSet.from_mapping(data)
    except ValidationError as e:
        raise GrammarLoadError(f"Invalid grammar in {file_path}: {e}") from e
    except TemplateParseError as e:
        raise GrammarLoadError(f"Template error in {file_path}: {e}") from e

    logger.debug(f"Loaded {len(grammars)} rules from {file_path}")
    return grammars


def load_grammars(paths: Iterable[Path]) -> GrammarSet:
    """Load and merge grammar files and directories in order.

    Directories are searched recursively for files named ``grammar.*`` or
    ``*_grammar.*``, merged in sorted path order. Explicit file paths are
    loaded whatever their name.
    """
    merged = GrammarSet()
    for path in paths:
        for file_path in _grammar_files(Path(path)):
            merged.merge(load_grammar_file(file_path))
    return merged


def _grammar_files(path: Path) -> list[Path]:
    if path.is_dir():
        files = sorted(
            p
            for p in path.rglob("*")
            if p.is_file()
            and p.suffix.lower() in GRAMMAR_SUFFIXES
            and (p.stem == "grammar" or p.stem.endswith("_grammar"))
        )
        if not files:
            logger.warning(
                f"No grammar files in {path}; only files named grammar.* or *_grammar.* "
                f"are loaded from a directory"
            )
        return files
    return [path]
