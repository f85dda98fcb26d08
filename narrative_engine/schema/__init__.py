"""Plain data records read by the narrative engine."""

from narrative_engine.schema.entity import (
    Entity,
    EntityId,
    PronounForm,
    Pronouns,
    Value,
    VoiceId,
    format_value,
)
from narrative_engine.schema.event import EntityRef, Event, Mood, Outcome, Stakes
from narrative_engine.schema.narrative_fn import (
    AnyNarrativeFunction,
    CustomFunction,
    NarrativeFunction,
    parse_narrative_function,
)
from narrative_engine.schema.relationship import Relationship

__all__ = [
    # Entities
    "Entity",
    "EntityId",
    "PronounForm",
    "Pronouns",
    "Value",
    "VoiceId",
    "format_value",
    "Relationship",
    # Events
    "EntityRef",
    "Event",
    "Mood",
    "Outcome",
    "Stakes",
    # Narrative functions
    "AnyNarrativeFunction",
    "CustomFunction",
    "NarrativeFunction",
    "parse_narrative_function",
]
