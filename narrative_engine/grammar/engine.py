"""Grammar expansion engine.

A GrammarSet is a lookup table of named rules. Expansion picks a weighted
alternative and expands its segments in order, descending into rule
references through an explicit work stack. The depth counter lives on the
SelectionContext and is checked on every rule entry, so the cap holds no
matter how the rules reference each other or how high it is set.
"""

import logging
import random
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from narrative_engine.grammar.exceptions import (
    EntityBindingNotFoundError,
    EntityFieldNotFoundError,
    GrammarMarkovError,
    MaxDepthExceededError,
    NoAlternativesError,
    RuleNotFoundError,
    SelectionError,
)
from narrative_engine.grammar.schemas import GrammarFile, rule_from_record
from narrative_engine.grammar.types import (
    Alternative,
    EntityField,
    GrammarRule,
    Literal,
    MarkovRef,
    PronounRef,
    RuleRef,
    TemplateSegment,
)
from narrative_engine.markov.exceptions import MarkovError
from narrative_engine.markov.model import MarkovModel
from narrative_engine.schema.entity import Entity, format_value

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 20
DEFAULT_MARKOV_MIN_WORDS = 5
DEFAULT_MARKOV_MAX_WORDS = 20

SUBJECT_ROLE = "subject"

_LEAVE_RULE = object()


@dataclass
class SelectionContext:
    """Transient state threaded through one expansion call.

    Attributes:
        active_tags: Tags visible to rules; grows as rules propagate their
            own ``requires`` tags to nested expansions.
        bindings: Role -> entity. Entities are borrowed from the caller.
        depth: Current expansion depth.
        voice_weights: Rule name -> weight multiplier from the active voice.
        markov_models: Corpus id -> model, borrowed from the engine.
        max_depth: Depth cap; exceeding it is an error.
        markov_min_words: Minimum words for inline Markov references.
        markov_max_words: Maximum words for inline Markov references.
    """

    active_tags: set[str] = field(default_factory=set)
    bindings: dict[str, Entity] = field(default_factory=dict)
    depth: int = 0
    voice_weights: dict[str, float] = field(default_factory=dict)
    markov_models: Mapping[str, MarkovModel] = field(default_factory=dict)
    max_depth: int = DEFAULT_MAX_DEPTH
    markov_min_words: int = DEFAULT_MARKOV_MIN_WORDS
    markov_max_words: int = DEFAULT_MARKOV_MAX_WORDS

    def add_tag(self, tag: str) -> None:
        self.active_tags.add(tag)

    def bind(self, role: str, entity: Entity) -> None:
        self.bindings[role] = entity


class GrammarSet:
    """A set of named grammar rules with recursive expansion.

    Example:
        grammars = GrammarSet.from_mapping({
            "greeting": {"alternatives": [[1, "Hi {entity.name}."]]},
        })
        ctx = SelectionContext()
        ctx.bind("subject", margaret)
        grammars.expand("greeting", ctx, random.Random(1))  # "Hi Margaret."
    """

    def __init__(self, rules: Mapping[str, GrammarRule] | None = None) -> None:
        self.rules: dict[str, GrammarRule] = dict(rules or {})

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "GrammarSet":
        """Build a grammar set from authoring data (rule name -> record).

        Raises:
            pydantic.ValidationError: If the data doesn't match the schema.
            TemplateParseError: If any template is malformed.
        """
        grammar_file = GrammarFile.model_validate(dict(data))
        return cls(
            {name: rule_from_record(name, record) for name, record in grammar_file.root.items()}
        )

    def __len__(self) -> int:
        return len(self.rules)

    def __contains__(self, rule_name: object) -> bool:
        return rule_name in self.rules

    def get(self, rule_name: str) -> GrammarRule | None:
        return self.rules.get(rule_name)

    def add_rule(self, rule: GrammarRule) -> None:
        """Add or replace a rule by name."""
        self.rules[rule.name] = rule

    def merge(self, other: "GrammarSet") -> None:
        """Merge another set into this one; its rules replace same-named rules."""
        for name, rule in other.rules.items():
            if name in self.rules:
                logger.debug(f"Rule '{name}' overridden by merged grammar set")
            self.rules[name] = rule

    def find_matching_rules(self, context: SelectionContext) -> list[GrammarRule]:
        """Rules whose tag preconditions hold for the context's active tags."""
        return sorted(
            (rule for rule in self.rules.values() if rule.matches(context.active_tags)),
            key=lambda rule: rule.name,
        )

    def expand(self, rule_name: str, context: SelectionContext, rng: random.Random) -> str:
        """Expand a rule into text.

        Expansion runs on an explicit work stack rather than the Python call
        stack, so ``context.max_depth`` is the only limit on nesting.

        Args:
            rule_name: Rule to expand.
            context: Selection context; its tags and depth are updated.
            rng: Random generator used for every choice in the expansion.

        Returns:
            The expanded text.

        Raises:
            RuleNotFoundError: If the rule (or a referenced rule) is missing.
            NoAlternativesError: If a rule has no alternatives.
            SelectionError: If every effective weight is zero.
            MaxDepthExceededError: If expansion exceeds ``context.max_depth``.
            EntityBindingNotFoundError: If a referenced role is unbound.
            EntityFieldNotFoundError: If a referenced property is missing.
            GrammarMarkovError: If Markov generation fails.
        """
        base_depth = context.depth
        output: list[str] = []
        # Pending work, last item first; _LEAVE_RULE closes a rule's depth level.
        stack: list[TemplateSegment | object] = [RuleRef(rule_name)]

        try:
            while stack:
                item = stack.pop()
                if item is _LEAVE_RULE:
                    context.depth -= 1
                elif isinstance(item, RuleRef):
                    alternative = self._enter_rule(item.name, context, rng)
                    stack.append(_LEAVE_RULE)
                    stack.extend(reversed(alternative.template.segments))
                else:
                    output.append(self._expand_segment(item, context, rng))
        finally:
            context.depth = base_depth

        return "".join(output)

    def _enter_rule(
        self,
        rule_name: str,
        context: SelectionContext,
        rng: random.Random,
    ) -> Alternative:
        """Select an alternative for a rule and step one level deeper."""
        rule = self.rules.get(rule_name)
        if rule is None:
            raise RuleNotFoundError(rule_name)
        if not rule.alternatives:
            raise NoAlternativesError(rule_name)

        context.active_tags.update(rule.requires)
        alternative = self._select_alternative(rule, context, rng)

        context.depth += 1
        if context.depth > context.max_depth:
            raise MaxDepthExceededError(rule_name, context.max_depth)
        return alternative

    def _select_alternative(
        self,
        rule: GrammarRule,
        context: SelectionContext,
        rng: random.Random,
    ) -> Alternative:
        """Weighted random choice, scaled by the voice multiplier for this rule."""
        multiplier = context.voice_weights.get(rule.name, 1.0)
        weights = [alt.weight * multiplier for alt in rule.alternatives]

        if any(w < 0 for w in weights):
            raise SelectionError(rule.name, f"negative voice multiplier {multiplier}")
        if sum(weights) <= 0:
            raise SelectionError(rule.name, "all effective weights are zero")

        return rng.choices(rule.alternatives, weights=weights, k=1)[0]

    def _expand_segment(
        self,
        segment: TemplateSegment,
        context: SelectionContext,
        rng: random.Random,
    ) -> str:
        if isinstance(segment, Literal):
            return segment.text
        if isinstance(segment, MarkovRef):
            return self._expand_markov(segment, context, rng)
        if isinstance(segment, EntityField):
            return self._expand_entity_field(segment, context)
        if isinstance(segment, PronounRef):
            return self._expand_pronoun(segment, context)
        raise TypeError(f"Unknown template segment: {segment!r}")

    def _expand_markov(
        self,
        segment: MarkovRef,
        context: SelectionContext,
        rng: random.Random,
    ) -> str:
        model = context.markov_models.get(segment.corpus)
        if model is None:
            return f"[markov:{segment.corpus}:{segment.tag}]"

        try:
            return model.generate(
                rng, segment.tag, context.markov_min_words, context.markov_max_words
            )
        except MarkovError as tagged_error:
            logger.debug(
                f"Markov tag '{segment.tag}' failed for corpus '{segment.corpus}' "
                f"({tagged_error}); falling back to untagged generation"
            )

        try:
            return model.generate(
                rng, None, context.markov_min_words, context.markov_max_words
            )
        except MarkovError as e:
            raise GrammarMarkovError(segment.corpus, segment.tag, e) from e

    def _expand_entity_field(self, segment: EntityField, context: SelectionContext) -> str:
        entity = context.bindings.get(SUBJECT_ROLE)
        if entity is None:
            entity = next(iter(context.bindings.values()), None)
        if entity is None:
            raise EntityBindingNotFoundError(SUBJECT_ROLE)

        if segment.field == "name":
            return entity.name
        if segment.field not in entity.properties:
            raise EntityFieldNotFoundError(entity.name, segment.field)
        return format_value(entity.properties[segment.field])

    def _expand_pronoun(self, segment: PronounRef, context: SelectionContext) -> str:
        role = segment.form.value
        entity = context.bindings.get(role) or context.bindings.get(SUBJECT_ROLE)
        if entity is None:
            raise EntityBindingNotFoundError(role)
        return entity.pronouns.render(segment.form)
