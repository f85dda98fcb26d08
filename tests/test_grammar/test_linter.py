"""Tests for grammar linting."""

from narrative_engine.grammar.engine import GrammarSet
from narrative_engine.grammar.linter import lint_grammars
from narrative_engine.grammar.loader import load_grammars
from narrative_engine.schema.narrative_fn import NarrativeFunction


def _three(text):
    return [[1, text], [1, text], [1, text]]


class TestLintErrors:
    """Tests for lint errors."""

    def test_dangling_reference(self):
        grammars = GrammarSet.from_mapping({"r": {"alternatives": _three("{missing}")}})
        report = lint_grammars(grammars)
        assert not report.ok
        assert any("non-existent rule 'missing'" in e for e in report.errors)

    def test_self_recursive_rule(self):
        grammars = GrammarSet.from_mapping({"loop": {"alternatives": _three("x {loop}")}})
        report = lint_grammars(grammars)
        assert any("infinite recursion" in e for e in report.errors)

    def test_recursion_with_escape_is_fine(self):
        grammars = GrammarSet.from_mapping({
            "list": {"alternatives": [[1, "x {list}"], [1, "x"], [1, "y"]]}
        })
        assert lint_grammars(grammars).ok


class TestLintWarnings:
    """Tests for lint warnings."""

    def test_missing_entry_rules(self):
        report = lint_grammars(GrammarSet())
        assert len(report.warnings) == len(list(NarrativeFunction))
        assert report.ok

    def test_few_alternatives(self):
        grammars = GrammarSet.from_mapping({"thin": {"alternatives": [[1, "only"]]}})
        report = lint_grammars(grammars)
        assert any("'thin' has only 1 alternatives" in w for w in report.warnings)

    def test_unknown_markov_corpus(self):
        grammars = GrammarSet.from_mapping({"r": {"alternatives": _three("{markov:ghost:tense}")}})
        report = lint_grammars(grammars, {"drama"})
        assert any("'ghost'" in w for w in report.warnings)

    def test_markov_not_checked_without_models(self):
        grammars = GrammarSet.from_mapping({"r": {"alternatives": _three("{markov:ghost:tense}")}})
        report = lint_grammars(grammars)
        assert not any("ghost" in w for w in report.warnings)


class TestBundledGrammar:
    """The bundled genre pack lints clean."""

    def test_social_drama_has_no_errors_or_warnings(self, social_drama_dir):
        report = lint_grammars(load_grammars([social_drama_dir]), {"social_drama"})
        assert report.errors == []
        assert report.warnings == []
