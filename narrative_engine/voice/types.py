"""Voice type definitions.

A voice is a persona bundle that biases rule weighting, vocabulary and
stylistic quirks for a speaker, narrator or document type.
"""

from dataclasses import dataclass, field

from narrative_engine.schema.entity import VoiceId


@dataclass
class VocabularyPool:
    """Preferred and avoided words for a voice."""

    preferred: set[str] = field(default_factory=set)
    avoided: set[str] = field(default_factory=set)


@dataclass(frozen=True)
class MarkovBinding:
    """Binds a voice to a Markov corpus with a blend weight and style tags."""

    corpus_id: str
    weight: float = 1.0
    tags: tuple[str, ...] = ()


@dataclass(frozen=True)
class StructurePrefs:
    """Structural preferences for generated text.

    Attributes:
        sentence_length: (min, max) word count range for sentences.
        clause_complexity: 0.0 simple to 1.0 complex clause structure.
        question_frequency: Probability of generating questions.
    """

    sentence_length: tuple[int, int] = (8, 18)
    clause_complexity: float = 0.5
    question_frequency: float = 0.1


@dataclass(frozen=True)
class Quirk:
    """A verbal tic occasionally injected into a passage.

    Attributes:
        pattern: Text inserted as ", <pattern>" before a sentence end.
        frequency: Per-passage injection probability (0.0-1.0).
    """

    pattern: str
    frequency: float


@dataclass
class Voice:
    """A voice definition with an optional single parent.

    Attributes:
        id: Unique voice id.
        name: Human-readable name.
        parent: Parent voice id to inherit from.
        grammar_weights: Rule name -> selection weight multiplier.
        vocabulary: Preferred/avoided words.
        markov_bindings: Markov corpora this voice draws on.
        structure_prefs: Sentence structure preferences.
        quirks: Verbal tics.
    """

    id: VoiceId
    name: str
    parent: VoiceId | None = None
    grammar_weights: dict[str, float] = field(default_factory=dict)
    vocabulary: VocabularyPool = field(default_factory=VocabularyPool)
    markov_bindings: list[MarkovBinding] = field(default_factory=list)
    structure_prefs: StructurePrefs = field(default_factory=StructurePrefs)
    quirks: list[Quirk] = field(default_factory=list)


@dataclass
class ResolvedVoice:
    """A voice with its inheritance chain flattened; has no parent pointer."""

    id: VoiceId
    name: str
    grammar_weights: dict[str, float] = field(default_factory=dict)
    vocabulary: VocabularyPool = field(default_factory=VocabularyPool)
    markov_bindings: list[MarkovBinding] = field(default_factory=list)
    structure_prefs: StructurePrefs = field(default_factory=StructurePrefs)
    quirks: list[Quirk] = field(default_factory=list)
