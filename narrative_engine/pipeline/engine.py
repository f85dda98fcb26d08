"""Narrative pipeline: Event -> text orchestration.

Wires grammar expansion, voice selection, inline Markov generation, the
variety pass and repetition checking together with seeded retries.

Every attempt reseeds one ``random.Random`` from
``seed + generation + retry * RETRY_SEED_PRIME``, so output is fully
reproducible for a fixed seed and fixed inputs.
"""

import logging
import random
import time
from collections.abc import Mapping
from dataclasses import dataclass, field

from narrative_engine.config import Settings, get_settings
from narrative_engine.grammar.engine import SUBJECT_ROLE, GrammarSet, SelectionContext
from narrative_engine.grammar.exceptions import GrammarError
from narrative_engine.markov.model import MarkovModel
from narrative_engine.narrator.context import NarrativeContext
from narrative_engine.narrator.variety import VarietyPass
from narrative_engine.observability.events import (
    AttemptStartEvent,
    PassageAcceptedEvent,
    RepetitionCheckEvent,
)
from narrative_engine.observability.hooks import NullHook, ObservabilityHook
from narrative_engine.pipeline.exceptions import (
    ExpansionError,
    GenerationFailedError,
    VoiceResolutionError,
)
from narrative_engine.pipeline.world import WorldState
from narrative_engine.schema.entity import Entity, EntityId, VoiceId
from narrative_engine.schema.event import Event
from narrative_engine.schema.narrative_fn import AnyNarrativeFunction
from narrative_engine.voice.exceptions import VoiceCycleError
from narrative_engine.voice.registry import VoiceRegistry
from narrative_engine.voice.types import ResolvedVoice

logger = logging.getLogger(__name__)

RETRY_SEED_PRIME = 7919

INTENSITY_HIGH = 0.7
INTENSITY_LOW = 0.3


@dataclass
class _EventBindings:
    """Tags and role bindings derived once per narration call."""

    narrative_fn: AnyNarrativeFunction
    tags: set[str] = field(default_factory=set)
    bindings: dict[str, Entity] = field(default_factory=dict)
    mentioned: list[EntityId] = field(default_factory=list)


class NarrativeEngine:
    """Turns events into prose.

    The engine owns the narrative context and the generation counter; it is
    not safe to share one engine between concurrent callers.

    Args:
        grammars: Rules to expand.
        voices: Voice registry. Defaults to an empty registry.
        markov_models: Corpus id -> model for inline Markov references.
        seed: Base seed. Defaults to ``settings.default_seed``.
        event_mappings: Event type -> narrative function overrides.
        settings: Engine settings. Defaults to ``get_settings()``.
        hook: Observability hook. Defaults to NullHook.

    Example:
        engine = NarrativeEngine(grammars, voices, seed=42)
        text = engine.narrate(event, WorldState.from_entities([margaret, james]))
    """

    def __init__(
        self,
        grammars: GrammarSet,
        voices: VoiceRegistry | None = None,
        markov_models: Mapping[str, MarkovModel] | None = None,
        seed: int | None = None,
        event_mappings: Mapping[str, AnyNarrativeFunction] | None = None,
        settings: Settings | None = None,
        hook: ObservabilityHook | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.grammars = grammars
        self.voices = voices if voices is not None else VoiceRegistry()
        self.markov_models: dict[str, MarkovModel] = dict(markov_models or {})
        self.seed = self.settings.default_seed if seed is None else seed
        self.event_mappings: dict[str, AnyNarrativeFunction] = dict(event_mappings or {})
        self.hook = hook or NullHook()
        self.variety = VarietyPass()
        self._context = NarrativeContext(self.settings.context_window)
        self._generation = 0

    @property
    def context(self) -> NarrativeContext:
        return self._context

    @property
    def generation(self) -> int:
        """Number of passages accepted so far (the seed offset for the next one)."""
        return self._generation

    def map_event_type(self, event_type: str, narrative_fn: AnyNarrativeFunction) -> None:
        """Narrate events of ``event_type`` as ``narrative_fn``, whatever they declare."""
        self.event_mappings[event_type] = narrative_fn

    def reset(self, seed: int | None = None) -> None:
        """Clear the narrative context and generation counter.

        Args:
            seed: New base seed; keeps the current one if omitted.
        """
        if seed is not None:
            self.seed = seed
        self._context.clear()
        self._generation = 0

    def narrate(self, event: Event, world: WorldState) -> str:
        """Generate a passage for an event.

        The voice comes from the first participant with an assigned voice;
        with none, the passage is generated without a voice.

        Raises:
            ExpansionError: If the grammar cannot expand the entry rule.
            VoiceResolutionError: If the participant's voice chain is cyclic.
            GenerationFailedError: If no attempt could run.
        """
        voice = self._select_voice(event, world)
        return self._generate(event, world, voice)

    def narrate_as(self, event: Event, voice_id: VoiceId, world: WorldState) -> str:
        """Generate a passage using an explicit voice.

        Raises:
            VoiceResolutionError: If the voice is unknown or cyclic.
            ExpansionError: If the grammar cannot expand the entry rule.
            GenerationFailedError: If no attempt could run.
        """
        voice = self._resolve_voice(voice_id)
        if voice is None:
            raise VoiceResolutionError(voice_id)
        return self._generate(event, world, voice)

    def narrate_variants(self, event: Event, count: int, world: WorldState) -> list[str]:
        """Generate several alternative passages for one event.

        Variant ``i`` runs with the generation counter at
        ``saved + i * settings.variant_stride`` so variants draw from widely
        separated seeds. Afterwards the counter sits at ``saved + count``,
        as if ``count`` passages had been narrated one by one.

        Args:
            event: Event to narrate.
            count: Number of variants.
            world: World state.

        Returns:
            ``count`` passages, each recorded in the narrative context.
        """
        if count < 0:
            raise ValueError(f"count must be non-negative, got {count}")

        voice = self._select_voice(event, world)
        saved = self._generation
        variants: list[str] = []
        try:
            for i in range(count):
                self._generation = saved + i * self.settings.variant_stride
                variants.append(self._generate(event, world, voice))
        finally:
            self._generation = saved + len(variants)
        return variants

    def _generate(self, event: Event, world: WorldState, voice: ResolvedVoice | None) -> str:
        start = time.perf_counter()
        prepared = self._prepare(event, world)
        entry_rule = self._entry_rule(prepared.narrative_fn)
        max_attempts = self.settings.max_retries

        candidate: str | None = None
        forced = False
        attempts = 0
        for attempt in range(max_attempts):
            attempts = attempt + 1
            seed = self.seed + self._generation + attempt * RETRY_SEED_PRIME
            rng = random.Random(seed)
            selection = self._selection_context(prepared, voice)

            self.hook.on_attempt_start(
                AttemptStartEvent(
                    event_type=event.event_type,
                    narrative_fn=prepared.narrative_fn.fn_name,
                    entry_rule=entry_rule,
                    attempt=attempts,
                    max_attempts=max_attempts,
                    seed=seed,
                    voice=voice.name if voice else None,
                    tags=sorted(selection.active_tags),
                )
            )
            logger.debug(f"Attempt {attempts}/{max_attempts} for '{entry_rule}' with seed {seed}")

            try:
                text = self.grammars.expand(entry_rule, selection, rng)
            except GrammarError as e:
                raise ExpansionError(entry_rule, e) from e

            if voice is not None:
                text = self.variety.apply(text, voice, self._context, rng)

            issues = self._context.check_repetition(text)
            is_last = attempts == max_attempts
            self.hook.on_repetition_check(
                RepetitionCheckEvent(
                    attempt=attempts,
                    max_attempts=max_attempts,
                    passed=not issues,
                    issues=[str(issue) for issue in issues],
                )
            )

            candidate = text
            if not issues:
                break
            if is_last:
                forced = True
                logger.debug(f"Accepting passage with {len(issues)} repetition issue(s)")
                break
            logger.debug(f"Retrying '{entry_rule}': {issues}")

        if candidate is None:
            raise GenerationFailedError(max_attempts)

        self._context.record(candidate, mentioned=prepared.mentioned)
        generation = self._generation
        self._generation += 1

        if attempts > 1:
            logger.info(f"Accepted passage for '{event.event_type}' after {attempts} attempts")

        self.hook.on_passage_accepted(
            PassageAcceptedEvent(
                text=candidate,
                attempts=attempts,
                generation=generation,
                duration_ms=(time.perf_counter() - start) * 1000,
                forced=forced,
            )
        )
        return candidate

    def _prepare(self, event: Event, world: WorldState) -> _EventBindings:
        """Derive selection tags and role bindings from the event."""
        narrative_fn = self.event_mappings.get(event.event_type, event.narrative_fn)
        prepared = _EventBindings(narrative_fn=narrative_fn)

        prepared.tags.add(event.mood.tag)
        prepared.tags.add(event.stakes.tag)
        prepared.tags.add(f"fn:{narrative_fn.fn_name}")
        if narrative_fn.intensity >= INTENSITY_HIGH:
            prepared.tags.add("intensity:high")
        elif narrative_fn.intensity <= INTENSITY_LOW:
            prepared.tags.add("intensity:low")

        first_participant: Entity | None = None
        for ref in event.participants:
            entity = world.get(ref.entity_id)
            if entity is None:
                logger.warning(
                    f"Participant {ref.entity_id} ({ref.role}) not found in world; skipping"
                )
                continue
            if first_participant is None:
                first_participant = entity
            prepared.bindings[ref.role] = entity
            prepared.tags.update(entity.tags)
            prepared.mentioned.append(entity.id)

        if first_participant is not None and SUBJECT_ROLE not in prepared.bindings:
            prepared.bindings[SUBJECT_ROLE] = first_participant

        if event.location is not None:
            location = world.get(event.location.entity_id)
            if location is None:
                logger.warning(f"Location {event.location.entity_id} not found in world; skipping")
            else:
                prepared.tags.update(location.tags)
                prepared.mentioned.append(location.id)

        return prepared

    def _selection_context(
        self, prepared: _EventBindings, voice: ResolvedVoice | None
    ) -> SelectionContext:
        """Fresh selection context for one attempt."""
        return SelectionContext(
            active_tags=set(prepared.tags),
            bindings=dict(prepared.bindings),
            voice_weights=dict(voice.grammar_weights) if voice else {},
            markov_models=self.markov_models,
            max_depth=self.settings.max_depth,
            markov_min_words=self.settings.markov_min_words,
            markov_max_words=self.settings.markov_max_words,
        )

    def _entry_rule(self, narrative_fn: AnyNarrativeFunction) -> str:
        opening = f"{narrative_fn.fn_name}_opening"
        if opening in self.grammars:
            return opening
        return narrative_fn.fn_name

    def _select_voice(self, event: Event, world: WorldState) -> ResolvedVoice | None:
        """Voice of the first participant that has one assigned."""
        for ref in event.participants:
            entity = world.get(ref.entity_id)
            if entity is None or entity.voice_id is None:
                continue
            voice = self._resolve_voice(entity.voice_id)
            if voice is None:
                logger.warning(
                    f"Entity '{entity.name}' has unknown voice {entity.voice_id}; "
                    f"narrating without a voice"
                )
            return voice
        return None

    def _resolve_voice(self, voice_id: VoiceId) -> ResolvedVoice | None:
        try:
            return self.voices.resolve(voice_id)
        except VoiceCycleError as e:
            raise VoiceResolutionError(voice_id, e) from e
