"""Tests for grammar file loading."""

import json
import logging
import random

import pytest

from narrative_engine.grammar.engine import SelectionContext
from narrative_engine.grammar.exceptions import GrammarLoadError
from narrative_engine.grammar.loader import load_grammar_file, load_grammars


class TestLoadGrammarFile:
    """Tests for loading single files."""

    def test_load_yaml(self, tmp_path):
        path = tmp_path / "grammar.yaml"
        path.write_text(
            "greeting:\n"
            "  requires: [mood:warm]\n"
            "  alternatives:\n"
            "    - [2, \"Hello.\"]\n"
            "    - {weight: 1, text: \"Hi.\"}\n"
        )
        grammars = load_grammar_file(path)
        rule = grammars.get("greeting")
        assert rule.requires == frozenset({"mood:warm"})
        assert len(rule.alternatives) == 2

    def test_load_json(self, tmp_path):
        path = tmp_path / "grammar.json"
        path.write_text(json.dumps({"r": {"alternatives": [[1, "json"]]}}))
        grammars = load_grammar_file(path)
        assert grammars.expand("r", SelectionContext(), random.Random(0)) == "json"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_grammar_file(tmp_path / "nope.yaml")

    def test_unsupported_suffix(self, tmp_path):
        path = tmp_path / "grammar.ron"
        path.write_text("()")
        with pytest.raises(GrammarLoadError, match="Unsupported"):
            load_grammar_file(path)

    def test_bad_template_names_rule(self, tmp_path):
        path = tmp_path / "grammar.yaml"
        path.write_text("broken:\n  alternatives:\n    - [1, \"oops {\"]\n")
        with pytest.raises(GrammarLoadError, match="broken"):
            load_grammar_file(path)

    def test_negative_weight_rejected(self, tmp_path):
        path = tmp_path / "grammar.yaml"
        path.write_text("r:\n  alternatives:\n    - [-1, \"x\"]\n")
        with pytest.raises(GrammarLoadError):
            load_grammar_file(path)

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "grammar.yaml"
        path.write_text("- just\n- a list\n")
        with pytest.raises(GrammarLoadError, match="mapping"):
            load_grammar_file(path)


class TestLoadGrammars:
    """Tests for merging files and directories."""

    def test_later_files_override(self, tmp_path):
        base = tmp_path / "base_grammar.yaml"
        base.write_text("r:\n  alternatives:\n    - [1, \"base\"]\n")
        overlay = tmp_path / "overlay.yaml"
        overlay.write_text("r:\n  alternatives:\n    - [1, \"overlay\"]\n")

        grammars = load_grammars([base, overlay])
        assert grammars.expand("r", SelectionContext(), random.Random(0)) == "overlay"

    def test_directory_loads_grammar_files_only(self, tmp_path):
        nested = tmp_path / "genre"
        nested.mkdir()
        (nested / "grammar.yaml").write_text("a:\n  alternatives:\n    - [1, \"a\"]\n")
        (nested / "extra_grammar.yml").write_text("b:\n  alternatives:\n    - [1, \"b\"]\n")
        (nested / "voices.yaml").write_text("- id: 1\n  name: narrator\n")

        grammars = load_grammars([tmp_path])
        assert sorted(grammars.rules) == ["a", "b"]

    def test_directory_without_grammar_files_warns(self, tmp_path, caplog):
        (tmp_path / "confrontation.yaml").write_text("a:\n  alternatives:\n    - [1, \"a\"]\n")

        with caplog.at_level(logging.WARNING):
            grammars = load_grammars([tmp_path])

        assert len(grammars) == 0
        assert "No grammar files" in caplog.text

    def test_bundled_social_drama(self, social_drama_dir):
        grammars = load_grammars([social_drama_dir])
        assert "confrontation_opening" in grammars
