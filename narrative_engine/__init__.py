"""Procedural narrative text engine.

Turns structured simulation events into prose by expanding hand-authored
stochastic grammars, filling gaps with n-gram phrase models, shaping the
result through voices and repairing passages that repeat themselves.

Usage:
    from narrative_engine import NarrativeEngine, WorldState, load_grammars

    engine = NarrativeEngine(load_grammars([path]), seed=42)
    text = engine.narrate(event, WorldState.from_entities(entities))
"""

from narrative_engine.config import Settings, get_settings
from narrative_engine.grammar import (
    GrammarSet,
    SelectionContext,
    Template,
    lint_grammars,
    load_grammars,
)
from narrative_engine.markov import MarkovBlender, MarkovModel, MarkovTrainer
from narrative_engine.narrator import NarrativeContext, VarietyPass
from narrative_engine.pipeline import (
    ExpansionError,
    GenerationFailedError,
    NarrativeEngine,
    PipelineError,
    VoiceResolutionError,
    WorldState,
)
from narrative_engine.schema import (
    CustomFunction,
    Entity,
    EntityId,
    EntityRef,
    Event,
    Mood,
    NarrativeFunction,
    Outcome,
    Pronouns,
    Relationship,
    Stakes,
    VoiceId,
)
from narrative_engine.voice import Voice, VoiceRegistry, load_voices

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Configuration
    "Settings",
    "get_settings",
    # Grammar
    "GrammarSet",
    "SelectionContext",
    "Template",
    "lint_grammars",
    "load_grammars",
    # Markov
    "MarkovBlender",
    "MarkovModel",
    "MarkovTrainer",
    # Narrator
    "NarrativeContext",
    "VarietyPass",
    # Pipeline
    "ExpansionError",
    "GenerationFailedError",
    "NarrativeEngine",
    "PipelineError",
    "VoiceResolutionError",
    "WorldState",
    # Schema
    "CustomFunction",
    "Entity",
    "EntityId",
    "EntityRef",
    "Event",
    "Mood",
    "NarrativeFunction",
    "Outcome",
    "Pronouns",
    "Relationship",
    "Stakes",
    "VoiceId",
    # Voices
    "Voice",
    "VoiceRegistry",
    "load_voices",
]
