"""Narrative quality control: repetition detection and the variety pass."""

from narrative_engine.narrator.context import (
    NarrativeContext,
    OverusedWord,
    RepeatedOpening,
    RepetitionIssue,
    StructuralMonotony,
)
from narrative_engine.narrator.variety import SYNONYMS, TRANSITIONS, VarietyPass

__all__ = [
    "NarrativeContext",
    "OverusedWord",
    "RepeatedOpening",
    "RepetitionIssue",
    "StructuralMonotony",
    "SYNONYMS",
    "TRANSITIONS",
    "VarietyPass",
]
