"""Markov model persistence.

Models are stored as JSON (or YAML by file suffix) mirroring the training
structure exactly, so a save/load round trip reproduces the model:

    {
      "n": 2,
      "transitions": [{"prefix": ["<S>"], "next": [["The", 3], ["A", 1]]}],
      "tagged_transitions": {"tense": [...]}
    }
"""

import json
import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError

from narrative_engine.markov.exceptions import MarkovLoadError
from narrative_engine.markov.model import MarkovModel, TransitionTable
from narrative_engine.markov.trainer import MAX_NGRAM, MIN_NGRAM

logger = logging.getLogger(__name__)

MODEL_SUFFIXES = (".json", ".yaml", ".yml")


class TransitionRecord(BaseModel):
    """One prefix and its observed continuations."""

    prefix: list[str]
    next: list[tuple[str, int]]


class MarkovModelRecord(BaseModel):
    """Serialized form of a MarkovModel."""

    n: int = Field(ge=MIN_NGRAM, le=MAX_NGRAM)
    transitions: list[TransitionRecord] = Field(default_factory=list)
    tagged_transitions: dict[str, list[TransitionRecord]] = Field(default_factory=dict)


def model_to_record(model: MarkovModel) -> MarkovModelRecord:
    """Convert a model to its serializable record."""
    return MarkovModelRecord(
        n=model.n,
        transitions=_table_to_records(model.transitions),
        tagged_transitions={
            tag: _table_to_records(table) for tag, table in model.tagged_transitions.items()
        },
    )


def record_to_model(record: MarkovModelRecord) -> MarkovModel:
    """Rebuild a model from its record."""
    return MarkovModel(
        n=record.n,
        transitions=_records_to_table(record.transitions),
        tagged_transitions={
            tag: _records_to_table(records)
            for tag, records in record.tagged_transitions.items()
        },
    )


def save_model(model: MarkovModel, path: Path) -> None:
    """Write a model to disk.

    Raises:
        MarkovLoadError: If the file cannot be written.
    """
    path = Path(path)
    data = model_to_record(model).model_dump(mode="json")
    try:
        with open(path, "w", encoding="utf-8") as f:
            if path.suffix.lower() in (".yaml", ".yml"):
                yaml.safe_dump(data, f, sort_keys=False, allow_unicode=True)
            else:
                json.dump(data, f, ensure_ascii=False, indent=1)
    except OSError as e:
        raise MarkovLoadError(f"Failed to write model to {path}: {e}") from e


def load_model(path: Path) -> MarkovModel:
    """Read a model from disk.

    Raises:
        MarkovLoadError: If the file is missing, unparsable or invalid.
    """
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            if path.suffix.lower() in (".yaml", ".yml"):
                data = yaml.safe_load(f)
            else:
                data = json.load(f)
    except (OSError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise MarkovLoadError(f"Failed to read model from {path}: {e}") from e

    try:
        record = MarkovModelRecord.model_validate(data)
    except ValidationError as e:
        raise MarkovLoadError(f"Invalid model file {path}: {e}") from e

    return record_to_model(record)


def load_models_dir(directory: Path) -> dict[str, MarkovModel]:
    """Load every model file in a directory, keyed by file stem (corpus id)."""
    models: dict[str, MarkovModel] = {}
    for path in sorted(Path(directory).iterdir()):
        if path.is_file() and path.suffix.lower() in MODEL_SUFFIXES:
            models[path.stem] = load_model(path)
            logger.debug(f"Loaded Markov model '{path.stem}' from {path}")
    return models


def _table_to_records(table: TransitionTable) -> list[TransitionRecord]:
    return [
        TransitionRecord(prefix=list(prefix), next=list(options))
        for prefix, options in table.items()
    ]


def _records_to_table(records: list[TransitionRecord]) -> TransitionTable:
    return {
        tuple(record.prefix): [(token, count) for token, count in record.next]
        for record in records
    }
