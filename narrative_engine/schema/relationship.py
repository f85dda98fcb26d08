"""Relationship records between entities."""

from dataclasses import dataclass, field


@dataclass
class Relationship:
    """A typed, directional edge between two entities.

    The engine uses relationships to choose language without understanding
    the game's own relationship semantics. Intensity is clamped to 0.0-1.0.
    """

    source: int
    target: int
    rel_type: str
    intensity: float = 0.5
    tags: set[str] = field(default_factory=set)

    def __post_init__(self) -> None:
        self.intensity = max(0.0, min(1.0, self.intensity))
