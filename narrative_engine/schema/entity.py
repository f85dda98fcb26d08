"""Entity records.

An entity is anything that can take part in an event: a person, creature,
place, object or abstract concept. The engine only reads entities; callers
own them.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import NewType

from narrative_engine.schema.relationship import Relationship

EntityId = NewType("EntityId", int)
VoiceId = NewType("VoiceId", int)

# Property values an entity may carry
Value = str | int | float | bool


class PronounForm(str, Enum):
    """Grammatical slot a pronoun fills."""

    SUBJECT = "subject"
    OBJECT = "object"
    POSSESSIVE = "possessive"
    POSSESSIVE_STANDALONE = "possessive_standalone"
    REFLEXIVE = "reflexive"


class Pronouns(str, Enum):
    """Pronoun set used to render pronoun references for an entity."""

    SHE_HER = "she/her"
    HE_HIM = "he/him"
    THEY_THEM = "they/them"
    IT_ITS = "it/its"

    def render(self, form: PronounForm) -> str:
        """Render this pronoun set in the given grammatical form.

        Examples:
            >>> Pronouns.SHE_HER.render(PronounForm.POSSESSIVE_STANDALONE)
            'hers'
        """
        return _PRONOUN_TABLE[self][form]


_PRONOUN_TABLE: dict[Pronouns, dict[PronounForm, str]] = {
    Pronouns.SHE_HER: {
        PronounForm.SUBJECT: "she",
        PronounForm.OBJECT: "her",
        PronounForm.POSSESSIVE: "her",
        PronounForm.POSSESSIVE_STANDALONE: "hers",
        PronounForm.REFLEXIVE: "herself",
    },
    Pronouns.HE_HIM: {
        PronounForm.SUBJECT: "he",
        PronounForm.OBJECT: "him",
        PronounForm.POSSESSIVE: "his",
        PronounForm.POSSESSIVE_STANDALONE: "his",
        PronounForm.REFLEXIVE: "himself",
    },
    Pronouns.THEY_THEM: {
        PronounForm.SUBJECT: "they",
        PronounForm.OBJECT: "them",
        PronounForm.POSSESSIVE: "their",
        PronounForm.POSSESSIVE_STANDALONE: "theirs",
        PronounForm.REFLEXIVE: "themselves",
    },
    Pronouns.IT_ITS: {
        PronounForm.SUBJECT: "it",
        PronounForm.OBJECT: "it",
        PronounForm.POSSESSIVE: "its",
        PronounForm.POSSESSIVE_STANDALONE: "its",
        PronounForm.REFLEXIVE: "itself",
    },
}


def format_value(value: Value) -> str:
    """Stringify a property value for insertion into prose."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


@dataclass
class Entity:
    """A participant in narrative events.

    Attributes:
        id: Unique entity identifier.
        name: Display name used for ``{entity.name}``.
        pronouns: Pronoun set for pronoun references.
        tags: Free-form tags that become selection tags when bound.
        relationships: Outgoing relationships to other entities.
        voice_id: Voice used when this entity drives a narration.
        properties: Typed properties readable via ``{entity.FIELD}``.
    """

    id: EntityId
    name: str
    pronouns: Pronouns = Pronouns.THEY_THEM
    tags: set[str] = field(default_factory=set)
    relationships: list[Relationship] = field(default_factory=list)
    voice_id: VoiceId | None = None
    properties: dict[str, Value] = field(default_factory=dict)
