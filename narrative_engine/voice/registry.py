"""Voice registry with single-parent inheritance resolution."""

import logging

from narrative_engine.schema.entity import VoiceId
from narrative_engine.voice.exceptions import VoiceCycleError
from narrative_engine.voice.types import ResolvedVoice, StructurePrefs, VocabularyPool, Voice

logger = logging.getLogger(__name__)


class VoiceRegistry:
    """Owns registered voices and resolves their inheritance chains."""

    def __init__(self) -> None:
        self._voices: dict[VoiceId, Voice] = {}

    def register(self, voice: Voice) -> None:
        """Register a voice, replacing any voice with the same id."""
        self._voices[voice.id] = voice

    def get(self, voice_id: VoiceId) -> Voice | None:
        return self._voices.get(voice_id)

    def find_by_name(self, name: str) -> Voice | None:
        """Find a voice by name (first registered match)."""
        for voice in self._voices.values():
            if voice.name == name:
                return voice
        return None

    def voices(self) -> list[Voice]:
        """All voices in registration order."""
        return list(self._voices.values())

    def __contains__(self, voice_id: object) -> bool:
        return voice_id in self._voices

    def __len__(self) -> int:
        return len(self._voices)

    def resolve(self, voice_id: VoiceId) -> ResolvedVoice | None:
        """Resolve a voice by flattening its inheritance chain.

        Folds from the root ancestor down to the requested voice:
        - grammar_weights: inserted key by key, child overrides parent
        - vocabulary: preferred/avoided sets are unioned
        - markov_bindings, quirks: concatenated, parent entries first
        - structure_prefs: replaced wholesale, so the voice's own wins

        A missing parent ends the chain with a warning.

        Args:
            voice_id: Voice to resolve.

        Returns:
            ResolvedVoice, or None if the voice is not registered.

        Raises:
            VoiceCycleError: If the parent chain contains a cycle.
        """
        voice = self._voices.get(voice_id)
        if voice is None:
            return None

        chain = self._ancestor_chain(voice)

        grammar_weights: dict[str, float] = {}
        preferred: set[str] = set()
        avoided: set[str] = set()
        markov_bindings = []
        quirks = []
        structure_prefs = StructurePrefs()

        for ancestor in reversed(chain):
            for rule_name, weight in ancestor.grammar_weights.items():
                grammar_weights[rule_name] = weight
            preferred |= ancestor.vocabulary.preferred
            avoided |= ancestor.vocabulary.avoided
            markov_bindings.extend(ancestor.markov_bindings)
            structure_prefs = ancestor.structure_prefs
            quirks.extend(ancestor.quirks)

        return ResolvedVoice(
            id=voice.id,
            name=voice.name,
            grammar_weights=grammar_weights,
            vocabulary=VocabularyPool(preferred=preferred, avoided=avoided),
            markov_bindings=markov_bindings,
            structure_prefs=structure_prefs,
            quirks=quirks,
        )

    def _ancestor_chain(self, voice: Voice) -> list[Voice]:
        """The voice followed by its ancestors, nearest first."""
        chain = [voice]
        visited = {voice.id}
        current = voice

        while current.parent is not None:
            if current.parent in visited:
                raise VoiceCycleError([v.id for v in chain] + [current.parent])
            parent = self._voices.get(current.parent)
            if parent is None:
                logger.warning(
                    f"Voice '{current.name}' ({current.id}) has unknown parent "
                    f"{current.parent}; resolving without it"
                )
                break
            chain.append(parent)
            visited.add(parent.id)
            current = parent

        return chain
