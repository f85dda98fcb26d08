"""Event records - the sole input to the narrative pipeline."""

from dataclasses import dataclass, field
from enum import Enum

from narrative_engine.schema.entity import EntityId, Value
from narrative_engine.schema.narrative_fn import AnyNarrativeFunction


class Mood(str, Enum):
    """The emotional tone of an event."""

    NEUTRAL = "neutral"
    TENSE = "tense"
    WARM = "warm"
    DREAD = "dread"
    EUPHORIC = "euphoric"
    SOMBER = "somber"
    CHAOTIC = "chaotic"
    INTIMATE = "intimate"

    @property
    def tag(self) -> str:
        return f"mood:{self.value}"


class Stakes(str, Enum):
    """The level of consequences at play."""

    TRIVIAL = "trivial"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def tag(self) -> str:
        return f"stakes:{self.value}"


class Outcome(str, Enum):
    """The result of an event."""

    SUCCESS = "success"
    FAILURE = "failure"
    PARTIAL = "partial"
    AMBIGUOUS = "ambiguous"


@dataclass(frozen=True)
class EntityRef:
    """A reference to an entity participating in an event in some role."""

    entity_id: EntityId
    role: str


@dataclass
class Event:
    """A structured record of something that happened in the simulation.

    Attributes:
        event_type: Game-defined event type (e.g. "accusation").
        participants: Participants in listed order.
        narrative_fn: What the event means narratively.
        mood: Emotional tone.
        stakes: Level of consequences.
        location: Optional location entity.
        outcome: Optional result.
        metadata: Free-form extra data.
    """

    event_type: str
    participants: list[EntityRef]
    narrative_fn: AnyNarrativeFunction
    mood: Mood = Mood.NEUTRAL
    stakes: Stakes = Stakes.MEDIUM
    location: EntityRef | None = None
    outcome: Outcome | None = None
    metadata: dict[str, Value] = field(default_factory=dict)
