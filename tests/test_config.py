"""Tests for engine configuration."""

from narrative_engine.config import Settings, get_settings


class TestSettingsDefaults:
    """Tests for default configuration values."""

    def test_defaults(self, monkeypatch):
        """Defaults match the documented engine constants."""
        for name in ("DEFAULT_SEED", "MAX_DEPTH", "MAX_RETRIES", "CONTEXT_WINDOW"):
            monkeypatch.delenv(f"NARRATIVE_{name}", raising=False)
        settings = Settings(_env_file=None)
        assert settings.default_seed == 42
        assert settings.max_depth == 20
        assert settings.max_retries == 3
        assert settings.context_window == 5
        assert settings.markov_min_words == 5
        assert settings.markov_max_words == 20
        assert settings.variant_stride == 1000


class TestSettingsEnvironment:
    """Tests for environment overrides."""

    def test_env_prefix(self, monkeypatch):
        """NARRATIVE_ prefixed variables override defaults."""
        monkeypatch.setenv("NARRATIVE_DEFAULT_SEED", "7")
        monkeypatch.setenv("NARRATIVE_MAX_RETRIES", "5")
        settings = Settings(_env_file=None)
        assert settings.default_seed == 7
        assert settings.max_retries == 5

    def test_get_settings_cached(self):
        """get_settings returns the same instance."""
        assert get_settings() is get_settings()
