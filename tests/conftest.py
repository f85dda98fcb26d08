"""Core test fixtures for narrative engine tests."""

from pathlib import Path

import pytest

from narrative_engine.config import Settings
from narrative_engine.genre_data import genre_dir
from narrative_engine.grammar.engine import GrammarSet
from narrative_engine.markov.model import MarkovModel
from narrative_engine.markov.trainer import MarkovTrainer
from narrative_engine.pipeline.world import WorldState
from narrative_engine.schema.entity import Entity, EntityId, Pronouns, VoiceId

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def settings() -> Settings:
    """Default settings, ignoring any .env file."""
    return Settings(_env_file=None)


@pytest.fixture
def margaret() -> Entity:
    """The anxious host."""
    return Entity(
        id=EntityId(1),
        name="Margaret",
        pronouns=Pronouns.SHE_HER,
        tags={"host", "anxious"},
        properties={"title": "Lady", "age": 52, "wealthy": True},
    )


@pytest.fixture
def james() -> Entity:
    """Her husband, harboring a secret."""
    return Entity(
        id=EntityId(2),
        name="James",
        pronouns=Pronouns.HE_HIM,
        tags={"guest", "secretive"},
    )


@pytest.fixture
def dining_room() -> Entity:
    """The setting."""
    return Entity(
        id=EntityId(100),
        name="the dining room",
        pronouns=Pronouns.IT_ITS,
        tags={"location", "formal"},
    )


@pytest.fixture
def world(margaret, james, dining_room) -> WorldState:
    return WorldState.from_entities([margaret, james, dining_room])


@pytest.fixture
def corpus_text() -> str:
    """Small tagged corpus."""
    return (FIXTURES_DIR / "test_corpus.txt").read_text(encoding="utf-8")


@pytest.fixture
def bigram_model(corpus_text) -> MarkovModel:
    return MarkovTrainer.train(corpus_text, 2)


@pytest.fixture
def greeting_grammar() -> GrammarSet:
    """Single-rule grammar producing a fixed greeting."""
    return GrammarSet.from_mapping({
        "greeting": {
            "requires": [],
            "excludes": [],
            "alternatives": [[1, "Hi {entity.name}."]],
        }
    })


@pytest.fixture
def social_drama_dir() -> Path:
    return genre_dir("social_drama")


@pytest.fixture
def host_voice_id() -> VoiceId:
    return VoiceId(100)
