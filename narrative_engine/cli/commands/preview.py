"""Interactive preview shell for testing grammars and voices."""

from collections import Counter
from pathlib import Path
from typing import Optional

import typer

from narrative_engine.cli.display import (
    console,
    display_bulk_stats,
    display_error,
    display_info,
    display_passage,
    display_success,
    prompt_input,
)
from narrative_engine.config import get_settings
from narrative_engine.genre_data import GENRE_DATA_DIR, available_genres
from narrative_engine.grammar.engine import GrammarSet
from narrative_engine.grammar.exceptions import GrammarLoadError
from narrative_engine.grammar.loader import load_grammars
from narrative_engine.markov.exceptions import MarkovLoadError
from narrative_engine.markov.model import MarkovModel
from narrative_engine.markov.storage import load_models_dir
from narrative_engine.narrator.context import normalize_word
from narrative_engine.observability.console_observer import RichConsoleObserver
from narrative_engine.observability.hooks import ObservabilityHook
from narrative_engine.pipeline.engine import NarrativeEngine
from narrative_engine.pipeline.exceptions import PipelineError
from narrative_engine.pipeline.world import WorldState
from narrative_engine.schema.entity import Entity, EntityId, VoiceId
from narrative_engine.schema.event import EntityRef, Event, Mood, Stakes
from narrative_engine.schema.narrative_fn import NarrativeFunction
from narrative_engine.voice.exceptions import VoiceLoadError
from narrative_engine.voice.loader import load_voices
from narrative_engine.voice.registry import VoiceRegistry

BULK_MOODS = (Mood.TENSE, Mood.NEUTRAL, Mood.WARM, Mood.DREAD, Mood.SOMBER)

HELP_TEXT = """\
Commands:
  event <fn> <mood> <stakes>  Generate from a synthetic event
  voice <name>                Set active voice (or 'none' to clear)
  entity <name> <tags>        Define a named entity (tags comma-separated)
  seed <n>                    Set RNG seed
  bulk <n>                    Generate n passages with variety statistics
  help                        Show this help
  quit                        Exit
"""


def top_words(passages: list[str], limit: int = 10) -> list[tuple[str, int]]:
    """Most frequent words longer than three letters, edges trimmed of punctuation."""
    word_counts: Counter[str] = Counter()
    for passage in passages:
        for raw in passage.split():
            word = normalize_word(raw)
            if len(word) > 3:
                word_counts[word] += 1
    return word_counts.most_common(limit)


class PreviewSession:
    """State and command handling for the preview shell.

    Entities defined in the session become event participants in id order:
    the first is bound as "subject", the second as "object".
    """

    def __init__(
        self,
        grammars: GrammarSet,
        voices: VoiceRegistry,
        markov_models: dict[str, MarkovModel],
        seed: int,
        hook: ObservabilityHook | None = None,
    ) -> None:
        self.grammars = grammars
        self.voices = voices
        self.markov_models = markov_models
        self.seed = seed
        self.hook = hook
        self.entities: dict[EntityId, Entity] = {}
        self.active_voice: VoiceId | None = None
        self._next_entity_id = 1
        self.engine = self._build_engine()

    def _build_engine(self) -> NarrativeEngine:
        return NarrativeEngine(
            self.grammars,
            voices=self.voices,
            markov_models=self.markov_models,
            seed=self.seed,
            hook=self.hook,
        )

    def handle(self, line: str) -> bool:
        """Run one command line.

        Returns:
            False when the session should end.
        """
        parts = line.split()
        if not parts:
            return True

        command, args = parts[0].lower(), parts[1:]
        if command in ("quit", "exit", "q"):
            display_info("Goodbye.")
            return False

        handlers = {
            "help": self._help,
            "h": self._help,
            "?": self._help,
            "event": self._event,
            "voice": self._voice,
            "entity": self._entity,
            "seed": self._seed,
            "bulk": self._bulk,
        }
        handler = handlers.get(command)
        if handler is None:
            display_error(f"Unknown command: '{command}'. Type 'help' for available commands.")
        else:
            handler(args)
        return True

    def _help(self, args: list[str]) -> None:
        console.print(HELP_TEXT, markup=False, highlight=False)
        console.print("Narrative functions: " + ", ".join(fn.value for fn in NarrativeFunction))
        console.print("Moods: " + ", ".join(mood.value for mood in Mood))
        console.print("Stakes: " + ", ".join(stakes.value for stakes in Stakes))
        voice_names = ", ".join(voice.name for voice in self.voices.voices()) or "none loaded"
        console.print(f"Voices: {voice_names}")
        console.print(f"Bundled genres: {', '.join(available_genres())} (in {GENRE_DATA_DIR})")

    def _event(self, args: list[str]) -> None:
        if len(args) < 3:
            display_info("Usage: event <fn> <mood> <stakes>")
            return

        try:
            narrative_fn = NarrativeFunction(args[0].lower())
        except ValueError:
            display_error(f"Unknown narrative function: {args[0]}")
            return
        try:
            mood = Mood(args[1].lower())
        except ValueError:
            display_error(f"Unknown mood: {args[1]}")
            return
        try:
            stakes = Stakes(args[2].lower())
        except ValueError:
            display_error(f"Unknown stakes: {args[2]}")
            return

        event = Event(
            event_type=f"preview_{narrative_fn.fn_name}",
            participants=self._participants(),
            narrative_fn=narrative_fn,
            mood=mood,
            stakes=stakes,
        )
        try:
            text = self._narrate(self.engine, event)
        except PipelineError as e:
            display_error(str(e))
            return
        display_passage(text, title=f"{narrative_fn.fn_name} / {mood.tag} / {stakes.tag}")

    def _voice(self, args: list[str]) -> None:
        if not args:
            current = self.active_voice if self.active_voice is not None else "none"
            display_info(f"Usage: voice <name> (or 'none'). Current: {current}")
            return

        name = args[0]
        if name == "none":
            self.active_voice = None
            display_success("Active voice cleared.")
            return

        voice = self.voices.find_by_name(name)
        if voice is None:
            display_error(f"Voice '{name}' not found.")
            return
        self.active_voice = voice.id
        display_success(f"Active voice set to '{name}' ({voice.id})")

    def _entity(self, args: list[str]) -> None:
        if len(args) < 2:
            display_info("Usage: entity <name> <tag1,tag2,...>")
            for entity in self.entities.values():
                tags = ", ".join(sorted(entity.tags))
                console.print(f"  {entity.name} (id={entity.id}) tags=[{tags}]", markup=False)
            return

        entity_id = EntityId(self._next_entity_id)
        self._next_entity_id += 1
        self.entities[entity_id] = Entity(
            id=entity_id,
            name=args[0],
            tags={tag.strip() for tag in args[1].split(",") if tag.strip()},
            voice_id=self.active_voice,
        )
        display_success(f"Entity '{args[0]}' created with id={entity_id}")

    def _seed(self, args: list[str]) -> None:
        if not args:
            display_info(f"Current seed: {self.seed}")
            return
        try:
            self.seed = int(args[0])
        except ValueError:
            display_error(f"Invalid seed: {args[0]}")
            return
        self.engine = self._build_engine()
        display_success(f"Seed set to {self.seed}")

    def _bulk(self, args: list[str]) -> None:
        if not args:
            display_info("Usage: bulk <n>")
            return
        try:
            count = int(args[0])
        except ValueError:
            count = 0
        if count <= 0:
            display_error(f"Invalid count: {args[0]}")
            return
        if not self.entities:
            display_error("No entities defined. Use 'entity' to create one first.")
            return

        engine = self._build_engine()
        functions = list(NarrativeFunction)
        participants = self._participants()
        passages: list[str] = []
        errors = 0

        for i in range(count):
            narrative_fn = functions[i % len(functions)]
            event = Event(
                event_type=f"bulk_{narrative_fn.fn_name}",
                participants=participants,
                narrative_fn=narrative_fn,
                mood=BULK_MOODS[i % len(BULK_MOODS)],
                stakes=Stakes.HIGH,
            )
            try:
                passages.append(self._narrate(engine, event))
            except PipelineError:
                errors += 1

        openings = {passage.split(".")[0].strip() for passage in passages}
        average = sum(len(p) for p in passages) / len(passages) if passages else 0.0

        display_bulk_stats(passages, errors, len(openings), average, top_words(passages))

    def _participants(self) -> list[EntityRef]:
        ids = sorted(self.entities)
        return [EntityRef(entity_id, role) for entity_id, role in zip(ids, ("subject", "object"))]

    def _narrate(self, engine: NarrativeEngine, event: Event) -> str:
        world = WorldState(self.entities)
        if self.active_voice is not None:
            return engine.narrate_as(event, self.active_voice, world)
        return engine.narrate(event, world)


def preview(
    grammars_path: Path = typer.Option(..., "--grammars", "-g", help="Grammar file or directory"),
    voices_path: Optional[Path] = typer.Option(
        None, "--voices", "-v", help="Voices file or directory"
    ),
    models_path: Optional[Path] = typer.Option(
        None, "--models", "-m", help="Directory of Markov models"
    ),
    seed: Optional[int] = typer.Option(None, "--seed", "-s", help="Initial RNG seed"),
    trace: bool = typer.Option(False, "--trace", "-t", help="Show generation attempts"),
) -> None:
    """Interactive generation shell for testing grammars and voices."""
    try:
        grammars = load_grammars([grammars_path])
    except (GrammarLoadError, FileNotFoundError) as e:
        display_error(f"Failed to load grammars: {e}")
        raise typer.Exit(1)

    voices = VoiceRegistry()
    if voices_path is not None:
        try:
            load_voices(voices, [voices_path])
        except (VoiceLoadError, FileNotFoundError) as e:
            display_error(f"Failed to load voices: {e}")
            raise typer.Exit(1)

    markov_models: dict[str, MarkovModel] = {}
    if models_path is not None:
        try:
            markov_models = load_models_dir(models_path)
        except (MarkovLoadError, OSError) as e:
            display_error(f"Failed to load models: {e}")
            raise typer.Exit(1)

    initial_seed = get_settings().default_seed if seed is None else seed
    hook = RichConsoleObserver(console=console) if trace else None
    session = PreviewSession(grammars, voices, markov_models, initial_seed, hook=hook)

    console.print(f"Loaded {len(grammars)} grammar rules, {len(voices)} voices")
    console.print(f"Seed: {initial_seed}")
    display_info("Type 'help' for commands.")

    while True:
        try:
            line = prompt_input("preview> ")
        except (EOFError, KeyboardInterrupt):
            console.print()
            break
        if not session.handle(line):
            break
