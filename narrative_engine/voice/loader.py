"""Voice file loading.

Voice files are YAML or JSON lists of voice records:

    - id: 1
      name: host
      grammar_weights: {greeting: 1.5}
      vocabulary:
        preferred: [indeed, delightful]
        avoided: [whatever]
      quirks:
        - {pattern: "you understand", frequency: 0.2}
    - id: 2
      name: gossip
      parent: 1
      structure_prefs: {sentence_length: [5, 12], question_frequency: 0.3}
"""

import json
import logging
from collections.abc import Iterable
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from narrative_engine.schema.entity import VoiceId
from narrative_engine.voice.exceptions import VoiceLoadError
from narrative_engine.voice.registry import VoiceRegistry
from narrative_engine.voice.types import (
    MarkovBinding,
    Quirk,
    StructurePrefs,
    VocabularyPool,
    Voice,
)

logger = logging.getLogger(__name__)

VOICE_SUFFIXES = (".yaml", ".yml", ".json")


class VocabularyRecord(BaseModel):
    preferred: list[str] = Field(default_factory=list)
    avoided: list[str] = Field(default_factory=list)


class MarkovBindingRecord(BaseModel):
    corpus_id: str
    weight: float = Field(default=1.0, ge=0.0)
    tags: list[str] = Field(default_factory=list)


class StructurePrefsRecord(BaseModel):
    sentence_length: tuple[int, int] = (8, 18)
    clause_complexity: float = Field(default=0.5, ge=0.0, le=1.0)
    question_frequency: float = Field(default=0.1, ge=0.0, le=1.0)


class QuirkRecord(BaseModel):
    pattern: str = Field(min_length=1)
    frequency: float = Field(ge=0.0, le=1.0)


class VoiceRecord(BaseModel):
    """A voice as authored."""

    id: int = Field(ge=0)
    name: str
    parent: int | None = None
    grammar_weights: dict[str, float] = Field(default_factory=dict)
    vocabulary: VocabularyRecord = Field(default_factory=VocabularyRecord)
    markov_bindings: list[MarkovBindingRecord] = Field(default_factory=list)
    structure_prefs: StructurePrefsRecord = Field(default_factory=StructurePrefsRecord)
    quirks: list[QuirkRecord] = Field(default_factory=list)

    def to_voice(self) -> Voice:
        """Convert the record to a Voice."""
        return Voice(
            id=VoiceId(self.id),
            name=self.name,
            parent=VoiceId(self.parent) if self.parent is not None else None,
            grammar_weights=dict(self.grammar_weights),
            vocabulary=VocabularyPool(
                preferred=set(self.vocabulary.preferred),
                avoided=set(self.vocabulary.avoided),
            ),
            markov_bindings=[
                MarkovBinding(corpus_id=b.corpus_id, weight=b.weight, tags=tuple(b.tags))
                for b in self.markov_bindings
            ],
            structure_prefs=StructurePrefs(
                sentence_length=self.structure_prefs.sentence_length,
                clause_complexity=self.structure_prefs.clause_complexity,
                question_frequency=self.structure_prefs.question_frequency,
            ),
            quirks=[Quirk(pattern=q.pattern, frequency=q.frequency) for q in self.quirks],
        )


_VOICE_LIST = TypeAdapter(list[VoiceRecord])


def load_voices_file(file_path: Path) -> list[Voice]:
    """Load the voices defined in a single file.

    Args:
        file_path: Path to a YAML or JSON voice file.

    Returns:
        Voices in file order.

    Raises:
        FileNotFoundError: If the file does not exist.
        VoiceLoadError: If the file cannot be parsed or is invalid.
    """
    file_path = Path(file_path)
    if not file_path.exists():
        raise FileNotFoundError(f"Voice file not found: {file_path}")

    suffix = file_path.suffix.lower()
    if suffix not in VOICE_SUFFIXES:
        raise VoiceLoadError(f"Unsupported file format: {suffix}. Use .yaml, .yml, or .json")

    try:
        with open(file_path, encoding="utf-8") as f:
            data = json.load(f) if suffix == ".json" else yaml.safe_load(f)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise VoiceLoadError(f"Failed to parse {file_path}: {e}") from e

    try:
        records = _VOICE_LIST.validate_python(data or [])
    except ValidationError as e:
        raise VoiceLoadError(f"Invalid voices in {file_path}: {e}") from e

    return [record.to_voice() for record in records]


def load_voices(registry: VoiceRegistry, paths: Iterable[Path]) -> int:
    """Register voices from files and directories.

    Directories are searched recursively for files named ``voices.*`` or
    ``*_voices.*``.

    Returns:
        Number of voices registered.
    """
    count = 0
    for path in paths:
        for file_path in _voice_files(Path(path)):
            for voice in load_voices_file(file_path):
                registry.register(voice)
                count += 1
            logger.debug(f"Loaded voices from {file_path}")
    return count


def _voice_files(path: Path) -> list[Path]:
    if path.is_dir():
        files = sorted(
            p
            for p in path.rglob("*")
            if p.is_file()
            and p.suffix.lower() in VOICE_SUFFIXES
            and (p.stem == "voices" or p.stem.endswith("_voices"))
        )
        if not files:
            logger.warning(
                f"No voice files in {path}; only files named voices.* or *_voices.* "
                f"are loaded from a directory"
            )
        return files
    return [path]
