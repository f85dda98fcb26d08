"""Pydantic schemas for grammar authoring data.

Authoring files map rule names to rule records:

    confrontation_opening:
      requires: [mood:tense]
      excludes: []
      alternatives:
        - weight: 3
          text: "{entity.name} set down {possessive} glass."
        - [1, "Nobody moved."]
"""

from typing import Any

from pydantic import BaseModel, Field, RootModel, model_validator

from narrative_engine.grammar.exceptions import TemplateParseError
from narrative_engine.grammar.parser import parse_template
from narrative_engine.grammar.types import Alternative, GrammarRule


class AlternativeRecord(BaseModel):
    """One weighted template as authored."""

    weight: int = Field(default=1, ge=0)
    text: str

    @model_validator(mode="before")
    @classmethod
    def _accept_pairs(cls, data: Any) -> Any:
        """Allow the compact ``[weight, text]`` form."""
        if isinstance(data, (list, tuple)):
            if len(data) != 2:
                raise ValueError("alternative pairs must be [weight, text]")
            return {"weight": data[0], "text": data[1]}
        return data


class RuleRecord(BaseModel):
    """A rule as authored."""

    requires: list[str] = Field(default_factory=list)
    excludes: list[str] = Field(default_factory=list)
    alternatives: list[AlternativeRecord] = Field(default_factory=list)


class GrammarFile(RootModel[dict[str, RuleRecord]]):
    """A whole grammar file: rule name to rule record."""

    pass


def rule_from_record(name: str, record: RuleRecord) -> GrammarRule:
    """Build a GrammarRule, parsing each alternative's template.

    Raises:
        TemplateParseError: If any template is malformed. The message is
            prefixed with the rule name.
    """
    alternatives = []
    for alt in record.alternatives:
        try:
            template = parse_template(alt.text)
        except TemplateParseError as e:
            raise TemplateParseError(
                f"Rule '{name}': {e.reason}", e.template, e.position
            ) from e
        alternatives.append(Alternative(weight=alt.weight, template=template))

    return GrammarRule(
        name=name,
        requires=frozenset(record.requires),
        excludes=frozenset(record.excludes),
        alternatives=alternatives,
    )
