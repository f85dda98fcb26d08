"""Grammar type definitions.

Immutable dataclasses for template segments, parsed templates, weighted
alternatives and tag-gated rules.
"""

from dataclasses import dataclass, field

from narrative_engine.schema.entity import PronounForm


@dataclass(frozen=True)
class Literal:
    """Text emitted verbatim."""

    text: str


@dataclass(frozen=True)
class RuleRef:
    """Reference to another rule, expanded recursively."""

    name: str


@dataclass(frozen=True)
class MarkovRef:
    """Reference to a Markov corpus, generated with a style tag."""

    corpus: str
    tag: str


@dataclass(frozen=True)
class EntityField:
    """Reference to a field of the bound entity (``name`` or a property)."""

    field: str


@dataclass(frozen=True)
class PronounRef:
    """Pronoun of the entity bound to the role of the same name."""

    form: PronounForm


TemplateSegment = Literal | RuleRef | MarkovRef | EntityField | PronounRef


@dataclass(frozen=True)
class Template:
    """A parsed template: an ordered sequence of segments.

    Attributes:
        source: The authored template text.
        segments: Parsed segments in order.
    """

    source: str
    segments: tuple[TemplateSegment, ...] = field(default_factory=tuple)

    @classmethod
    def parse(cls, text: str) -> "Template":
        """Parse template text.

        Raises:
            TemplateParseError: If the brace syntax is malformed.
        """
        from narrative_engine.grammar.parser import parse_template

        return parse_template(text)

    def rule_refs(self) -> list[str]:
        """Names of every rule this template references."""
        return [seg.name for seg in self.segments if isinstance(seg, RuleRef)]

    def markov_refs(self) -> list[MarkovRef]:
        """Every Markov reference in this template."""
        return [seg for seg in self.segments if isinstance(seg, MarkovRef)]


@dataclass(frozen=True)
class Alternative:
    """A weighted template within a rule.

    Attributes:
        weight: Non-negative selection weight.
        template: The parsed template.
    """

    weight: int
    template: Template

    def __post_init__(self) -> None:
        if self.weight < 0:
            raise ValueError(f"Alternative weight must be non-negative, got {self.weight}")


@dataclass
class GrammarRule:
    """A named rule with tag preconditions and weighted alternatives.

    Attributes:
        name: Rule name, unique within a grammar set.
        requires: Tags that must all be active for the rule to match.
        excludes: Tags any of which disqualifies the rule.
        alternatives: Weighted templates in authored order.
    """

    name: str
    requires: frozenset[str] = field(default_factory=frozenset)
    excludes: frozenset[str] = field(default_factory=frozenset)
    alternatives: list[Alternative] = field(default_factory=list)

    def matches(self, active_tags: set[str] | frozenset[str]) -> bool:
        """Check the rule's tag preconditions against the active tags."""
        return self.requires <= active_tags and not (self.excludes & active_tags)
