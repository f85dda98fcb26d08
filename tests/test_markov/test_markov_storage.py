"""Tests for Markov model persistence."""

import pytest

from narrative_engine.markov.exceptions import MarkovLoadError
from narrative_engine.markov.storage import load_model, load_models_dir, save_model


class TestSaveLoad:
    """Tests for writing and reading models."""

    def test_json_round_trip(self, tmp_path, bigram_model):
        path = tmp_path / "drama.json"
        save_model(bigram_model, path)
        assert load_model(path) == bigram_model

    def test_yaml_round_trip(self, tmp_path, bigram_model):
        path = tmp_path / "drama.yaml"
        save_model(bigram_model, path)
        assert load_model(path) == bigram_model

    def test_missing_file(self, tmp_path):
        with pytest.raises(MarkovLoadError):
            load_model(tmp_path / "absent.json")

    def test_invalid_depth(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text('{"n": 9, "transitions": []}')
        with pytest.raises(MarkovLoadError):
            load_model(path)


class TestLoadModelsDir:
    """Tests for loading a model directory."""

    def test_keyed_by_stem(self, tmp_path, bigram_model):
        save_model(bigram_model, tmp_path / "social_drama.json")
        (tmp_path / "notes.txt").write_text("ignored")
        models = load_models_dir(tmp_path)
        assert list(models) == ["social_drama"]
        assert models["social_drama"].n == 2
