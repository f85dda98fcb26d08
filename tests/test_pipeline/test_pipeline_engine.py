"""Tests for the narrative engine pipeline."""

import logging

import pytest

from narrative_engine.config import Settings
from narrative_engine.grammar.engine import GrammarSet
from narrative_engine.grammar.exceptions import RuleNotFoundError
from narrative_engine.grammar.loader import load_grammars
from narrative_engine.observability.events import (
    AttemptStartEvent,
    PassageAcceptedEvent,
    RepetitionCheckEvent,
)
from narrative_engine.pipeline.engine import RETRY_SEED_PRIME, NarrativeEngine
from narrative_engine.pipeline.exceptions import (
    ExpansionError,
    GenerationFailedError,
    VoiceResolutionError,
)
from narrative_engine.pipeline.world import WorldState
from narrative_engine.schema.entity import Entity, EntityId, Pronouns, VoiceId
from narrative_engine.schema.event import EntityRef, Event, Mood, Stakes
from narrative_engine.schema.narrative_fn import CustomFunction, NarrativeFunction
from narrative_engine.voice.loader import load_voices
from narrative_engine.voice.registry import VoiceRegistry
from narrative_engine.voice.types import Quirk, Voice


class RecordingHook:
    """Collects every hook event."""

    def __init__(self):
        self.attempts: list[AttemptStartEvent] = []
        self.checks: list[RepetitionCheckEvent] = []
        self.accepted: list[PassageAcceptedEvent] = []

    def on_attempt_start(self, event: AttemptStartEvent) -> None:
        self.attempts.append(event)

    def on_repetition_check(self, event: RepetitionCheckEvent) -> None:
        self.checks.append(event)

    def on_passage_accepted(self, event: PassageAcceptedEvent) -> None:
        self.accepted.append(event)


@pytest.fixture
def hook() -> RecordingHook:
    return RecordingHook()


@pytest.fixture
def fixed_grammar() -> GrammarSet:
    """Grammar whose confrontation always expands to the same sentence."""
    return GrammarSet.from_mapping({
        "confrontation_opening": {
            "alternatives": [[1, "{entity.name} set down {possessive} glass."]],
        },
        "betrayal": {"alternatives": [[1, "{entity.name} looked at {object}."]]},
        "speech": {"alternatives": [[1, "{subject} spoke."]]},
        "broken": {"alternatives": [[1, "It was {missing_rule}."]]},
        "gossip": {"alternatives": [[1, "Word spread: {markov:test:tense}"]]},
        "rumor": {"alternatives": [[1, "Word spread: {markov:missing:tense}"]]},
    })


@pytest.fixture
def varied_grammar() -> GrammarSet:
    return GrammarSet.from_mapping({
        "confrontation_opening": {
            "alternatives": [
                [1, "{entity.name} set down {possessive} glass. {beat}"],
                [1, "Nobody moved while {entity.name} spoke. {beat}"],
                [1, "A chair scraped as {entity.name} stood. {beat}"],
                [1, "The candles guttered. {beat}"],
            ],
        },
        "beat": {
            "alternatives": [
                [1, "Silence settled over the table."],
                [1, "Someone coughed."],
                [1, "A fork rang against china."],
                [1, "The clock ticked on."],
            ],
        },
    })


def _confrontation(*participants: EntityRef, **kwargs) -> Event:
    return Event(
        event_type="confrontation",
        participants=list(participants),
        narrative_fn=NarrativeFunction.CONFRONTATION,
        **kwargs,
    )


def _subject_object() -> list[EntityRef]:
    return [EntityRef(EntityId(1), "subject"), EntityRef(EntityId(2), "object")]


def _make_engine(grammars, settings, hook=None, voices=None, seed=10, **kwargs) -> NarrativeEngine:
    return NarrativeEngine(grammars, voices=voices, seed=seed, settings=settings, hook=hook, **kwargs)


class TestNarrate:
    """Tests for basic narration."""

    def test_expands_entry_rule(self, fixed_grammar, settings, world):
        engine = _make_engine(fixed_grammar, settings)
        text = engine.narrate(_confrontation(*_subject_object()), world)
        assert text == "Margaret set down her glass."

    def test_entry_rule_falls_back_to_function_name(self, fixed_grammar, settings, world):
        engine = _make_engine(fixed_grammar, settings)
        event = Event(
            event_type="betrayal",
            participants=_subject_object(),
            narrative_fn=NarrativeFunction.BETRAYAL,
        )
        assert engine.narrate(event, world) == "Margaret looked at him."

    def test_custom_function_entry_rule(self, fixed_grammar, settings, world):
        engine = _make_engine(fixed_grammar, settings)
        event = Event(
            event_type="speech",
            participants=[EntityRef(EntityId(1), "speaker")],
            narrative_fn=CustomFunction("speech"),
        )
        assert engine.narrate(event, world) == "she spoke."

    def test_event_mapping_overrides_function(self, fixed_grammar, settings, world):
        engine = _make_engine(fixed_grammar, settings)
        engine.map_event_type("toast", NarrativeFunction.CONFRONTATION)
        event = Event(
            event_type="toast",
            participants=_subject_object(),
            narrative_fn=NarrativeFunction.ALLIANCE,
        )
        assert engine.narrate(event, world) == "Margaret set down her glass."

    def test_missing_participant_skipped(self, fixed_grammar, settings, world, caplog):
        engine = _make_engine(fixed_grammar, settings)
        event = _confrontation(EntityRef(EntityId(99), "subject"), EntityRef(EntityId(2), "object"))
        with caplog.at_level(logging.WARNING):
            text = engine.narrate(event, world)
        assert text == "James set down his glass."
        assert "not found in world" in caplog.text

    def test_inline_markov_model(self, fixed_grammar, settings, world, bigram_model):
        engine = _make_engine(fixed_grammar, settings, markov_models={"test": bigram_model})
        event = Event("gossip", _subject_object(), CustomFunction("gossip"))
        text = engine.narrate(event, world)
        assert text.startswith("Word spread: ")
        assert "[markov:" not in text
        assert len(text) > len("Word spread: ")

    def test_missing_markov_model_placeholder(self, fixed_grammar, settings, world):
        engine = _make_engine(fixed_grammar, settings)
        event = Event("rumor", _subject_object(), CustomFunction("rumor"))
        assert engine.narrate(event, world) == "Word spread: [markov:missing:tense]"

    def test_mentions_recorded(self, fixed_grammar, settings, world):
        engine = _make_engine(fixed_grammar, settings)
        event = _confrontation(*_subject_object(), location=EntityRef(EntityId(100), "location"))
        engine.narrate(event, world)
        assert engine.context.entity_mentions(EntityId(1)) == 1
        assert engine.context.entity_mentions(EntityId(2)) == 1
        assert engine.context.entity_mentions(EntityId(100)) == 1


class TestTags:
    """Tests for selection tags derived from events."""

    def test_event_tags(self, fixed_grammar, settings, world, hook):
        engine = _make_engine(fixed_grammar, settings, hook=hook)
        event = _confrontation(
            *_subject_object(),
            mood=Mood.TENSE,
            stakes=Stakes.HIGH,
            location=EntityRef(EntityId(100), "location"),
        )
        engine.narrate(event, world)
        tags = set(hook.attempts[0].tags)
        assert {"mood:tense", "stakes:high", "fn:confrontation", "intensity:high"} <= tags
        assert {"host", "anxious", "guest", "secretive"} <= tags
        assert {"location", "formal"} <= tags

    def test_low_intensity(self, fixed_grammar, settings, world, hook):
        engine = _make_engine(fixed_grammar, settings, hook=hook)
        engine.map_event_type("joke", NarrativeFunction.COMIC_RELIEF)
        grammar_event = Event("joke", _subject_object(), NarrativeFunction.COMIC_RELIEF)
        engine.grammars.merge(
            GrammarSet.from_mapping({"comic_relief": {"alternatives": [[1, "Laughter."]]}})
        )
        engine.narrate(grammar_event, world)
        assert "intensity:low" in hook.attempts[0].tags
        assert "intensity:high" not in hook.attempts[0].tags


class TestDeterminism:
    """Tests for seeded reproducibility."""

    def test_same_seed_same_output(self, varied_grammar, settings, world):
        event = _confrontation(*_subject_object())
        first = _make_engine(varied_grammar, settings, seed=7)
        second = _make_engine(varied_grammar, settings, seed=7)
        assert [first.narrate(event, world) for _ in range(5)] == [
            second.narrate(event, world) for _ in range(5)
        ]

    def test_seed_advances_with_generation(self, fixed_grammar, settings, world, hook):
        engine = _make_engine(fixed_grammar, settings, hook=hook, seed=10)
        event = _confrontation(*_subject_object())
        engine.narrate(event, world)
        engine.narrate(event, world)
        assert [a.seed for a in hook.attempts] == [
            10,
            11,
            11 + RETRY_SEED_PRIME,
            11 + 2 * RETRY_SEED_PRIME,
        ]
        assert engine.generation == 2

    def test_reset_reproduces(self, varied_grammar, settings, world):
        engine = _make_engine(varied_grammar, settings, seed=3)
        event = _confrontation(*_subject_object())
        before = [engine.narrate(event, world) for _ in range(3)]
        engine.reset()
        assert engine.generation == 0
        assert len(engine.context) == 0
        assert [engine.narrate(event, world) for _ in range(3)] == before

    def test_reset_with_new_seed(self, fixed_grammar, settings, world, hook):
        engine = _make_engine(fixed_grammar, settings, hook=hook, seed=3)
        engine.reset(seed=500)
        engine.narrate(_confrontation(*_subject_object()), world)
        assert hook.attempts[0].seed == 500


class TestRetries:
    """Tests for the repetition retry loop."""

    def test_forced_acceptance_on_last_attempt(self, fixed_grammar, settings, world, hook):
        engine = _make_engine(fixed_grammar, settings, hook=hook)
        event = _confrontation(*_subject_object())
        first = engine.narrate(event, world)
        second = engine.narrate(event, world)

        assert first == second
        assert hook.accepted[0].attempts == 1
        assert hook.accepted[0].forced is False
        assert hook.accepted[1].attempts == settings.max_retries
        assert hook.accepted[1].forced is True
        assert [c.passed for c in hook.checks] == [True, False, False, False]
        assert len(engine.context) == 2

    def test_zero_retries_fails(self, fixed_grammar, world):
        engine = _make_engine(fixed_grammar, Settings(_env_file=None, max_retries=0))
        with pytest.raises(GenerationFailedError) as exc_info:
            engine.narrate(_confrontation(*_subject_object()), world)
        assert exc_info.value.attempts == 0
        assert engine.generation == 0

    def test_expansion_error_not_retried(self, fixed_grammar, settings, world, hook):
        engine = _make_engine(fixed_grammar, settings, hook=hook)
        event = Event("broken", _subject_object(), CustomFunction("broken"))
        with pytest.raises(ExpansionError) as exc_info:
            engine.narrate(event, world)
        assert isinstance(exc_info.value.cause, RuleNotFoundError)
        assert len(hook.attempts) == 1
        assert engine.generation == 0

    def test_missing_entry_rule(self, fixed_grammar, settings, world):
        engine = _make_engine(fixed_grammar, settings)
        event = Event("loss", _subject_object(), NarrativeFunction.LOSS)
        with pytest.raises(ExpansionError) as exc_info:
            engine.narrate(event, world)
        assert exc_info.value.rule_name == "loss"


class TestVariants:
    """Tests for narrate_variants."""

    def test_variant_seeds_and_counter(self, fixed_grammar, settings, world, hook):
        engine = _make_engine(fixed_grammar, settings, hook=hook, seed=10)
        variants = engine.narrate_variants(_confrontation(*_subject_object()), 3, world)

        assert len(variants) == 3
        first_attempt_seeds = [a.seed for a in hook.attempts if a.attempt == 1]
        stride = settings.variant_stride
        assert first_attempt_seeds == [10, 10 + stride, 10 + 2 * stride]
        assert engine.generation == 3
        assert len(engine.context) == 3

    def test_zero_variants(self, fixed_grammar, settings, world):
        engine = _make_engine(fixed_grammar, settings)
        assert engine.narrate_variants(_confrontation(*_subject_object()), 0, world) == []
        assert engine.generation == 0

    def test_negative_count(self, fixed_grammar, settings, world):
        engine = _make_engine(fixed_grammar, settings)
        with pytest.raises(ValueError):
            engine.narrate_variants(_confrontation(*_subject_object()), -1, world)

    def test_counter_restored_after_error(self, fixed_grammar, settings, world):
        engine = _make_engine(fixed_grammar, settings)
        event = Event("broken", _subject_object(), CustomFunction("broken"))
        with pytest.raises(ExpansionError):
            engine.narrate_variants(event, 3, world)
        assert engine.generation == 0


class TestVoices:
    """Tests for voice selection and application."""

    @pytest.fixture
    def voices(self) -> VoiceRegistry:
        registry = VoiceRegistry()
        registry.register(Voice(id=VoiceId(1), name="formal", quirks=[Quirk("of course", 1.0)]))
        registry.register(Voice(id=VoiceId(2), name="loop_a", parent=VoiceId(3)))
        registry.register(Voice(id=VoiceId(3), name="loop_b", parent=VoiceId(2)))
        return registry

    def test_narrate_as_applies_voice(self, fixed_grammar, settings, world, voices, hook):
        engine = _make_engine(fixed_grammar, settings, hook=hook, voices=voices)
        text = engine.narrate_as(_confrontation(*_subject_object()), VoiceId(1), world)
        assert text == "Margaret set down her glass, of course."
        assert hook.attempts[0].voice == "formal"

    def test_narrate_as_unknown_voice(self, fixed_grammar, settings, world, voices):
        engine = _make_engine(fixed_grammar, settings, voices=voices)
        with pytest.raises(VoiceResolutionError) as exc_info:
            engine.narrate_as(_confrontation(*_subject_object()), VoiceId(404), world)
        assert exc_info.value.voice_id == 404

    def test_cyclic_voice(self, fixed_grammar, settings, world, voices):
        engine = _make_engine(fixed_grammar, settings, voices=voices)
        with pytest.raises(VoiceResolutionError):
            engine.narrate_as(_confrontation(*_subject_object()), VoiceId(2), world)

    def test_participant_voice_selected(self, fixed_grammar, settings, voices):
        speaker = Entity(id=EntityId(1), name="Ada", pronouns=Pronouns.SHE_HER, voice_id=VoiceId(1))
        world = WorldState.from_entities([speaker])
        engine = _make_engine(fixed_grammar, settings, voices=voices)
        text = engine.narrate(_confrontation(EntityRef(EntityId(1), "subject")), world)
        assert text == "Ada set down her glass, of course."

    def test_unknown_participant_voice(self, fixed_grammar, settings, voices, caplog):
        speaker = Entity(id=EntityId(1), name="Ada", pronouns=Pronouns.SHE_HER, voice_id=VoiceId(77))
        world = WorldState.from_entities([speaker])
        engine = _make_engine(fixed_grammar, settings, voices=voices)
        with caplog.at_level(logging.WARNING):
            text = engine.narrate(_confrontation(EntityRef(EntityId(1), "subject")), world)
        assert text == "Ada set down her glass."
        assert "unknown voice" in caplog.text


class TestSocialDrama:
    """End-to-end narration with the bundled genre data."""

    def test_bundled_genre(self, social_drama_dir, settings, world, host_voice_id):
        grammars = load_grammars([social_drama_dir])
        voices = VoiceRegistry()
        load_voices(voices, [social_drama_dir])
        event = _confrontation(
            *_subject_object(),
            mood=Mood.TENSE,
            stakes=Stakes.HIGH,
            location=EntityRef(EntityId(100), "location"),
        )

        first = NarrativeEngine(grammars, voices, seed=42, settings=settings)
        second = NarrativeEngine(grammars, voices, seed=42, settings=settings)
        texts = [first.narrate_as(event, host_voice_id, world) for _ in range(4)]

        assert all(text.strip() for text in texts)
        assert texts == [second.narrate_as(event, host_voice_id, world) for _ in range(4)]
