"""Read-only world state handed to the engine."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from narrative_engine.schema.entity import Entity, EntityId


@dataclass
class WorldState:
    """Entity lookup by id. The engine never mutates it."""

    entities: Mapping[EntityId, Entity] = field(default_factory=dict)

    @classmethod
    def from_entities(cls, entities: Iterable[Entity]) -> "WorldState":
        """Build a world keyed by each entity's id."""
        return cls({entity.id: entity for entity in entities})

    def get(self, entity_id: EntityId) -> Entity | None:
        return self.entities.get(entity_id)
