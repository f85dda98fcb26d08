"""Grammar linting.

Checks a merged grammar set for authoring defects: missing entry rules,
low-variety rules, references to rules or Markov corpora that don't exist,
and rules that can only ever recurse into themselves.
"""

from collections.abc import Collection
from dataclasses import dataclass, field

from narrative_engine.grammar.engine import GrammarSet
from narrative_engine.schema.narrative_fn import NarrativeFunction

MIN_RECOMMENDED_ALTERNATIVES = 3


@dataclass
class LintReport:
    """Result of linting a grammar set.

    Attributes:
        errors: Defects that will fail expansion.
        warnings: Coverage or quality concerns.
    """

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def lint_grammars(grammars: GrammarSet, model_ids: Collection[str] = ()) -> LintReport:
    """Lint a grammar set.

    Args:
        grammars: The merged grammar set.
        model_ids: Known Markov corpus ids. Markov references are only
            checked when this is non-empty.

    Returns:
        LintReport with errors and warnings.
    """
    report = LintReport()

    for fn in NarrativeFunction:
        entry_rule = f"{fn.fn_name}_opening"
        if entry_rule not in grammars:
            report.warnings.append(
                f"No '{entry_rule}' rule found for narrative function '{fn.fn_name}'"
            )

    for name in sorted(grammars.rules):
        rule = grammars.rules[name]

        if len(rule.alternatives) < MIN_RECOMMENDED_ALTERNATIVES:
            report.warnings.append(
                f"Rule '{name}' has only {len(rule.alternatives)} alternatives "
                f"(minimum {MIN_RECOMMENDED_ALTERNATIVES} recommended)"
            )

        for alt in rule.alternatives:
            if model_ids:
                for ref in alt.template.markov_refs():
                    if ref.corpus not in model_ids:
                        report.warnings.append(
                            f"Rule '{name}' references Markov corpus '{ref.corpus}' "
                            "which is not in loaded models"
                        )
            for ref_name in alt.template.rule_refs():
                if ref_name not in grammars:
                    report.errors.append(
                        f"Rule '{name}' references non-existent rule '{ref_name}'"
                    )

        if rule.alternatives and all(
            name in alt.template.rule_refs() for alt in rule.alternatives
        ):
            report.errors.append(
                f"Rule '{name}' has no non-recursive alternative (infinite recursion)"
            )

    return report
