"""Voice definitions, inheritance resolution and loading."""

from narrative_engine.voice.exceptions import VoiceCycleError, VoiceError, VoiceLoadError
from narrative_engine.voice.loader import VoiceRecord, load_voices, load_voices_file
from narrative_engine.voice.registry import VoiceRegistry
from narrative_engine.voice.types import (
    MarkovBinding,
    Quirk,
    ResolvedVoice,
    StructurePrefs,
    VocabularyPool,
    Voice,
)

__all__ = [
    "MarkovBinding",
    "Quirk",
    "ResolvedVoice",
    "StructurePrefs",
    "VocabularyPool",
    "Voice",
    "VoiceCycleError",
    "VoiceError",
    "VoiceLoadError",
    "VoiceRecord",
    "VoiceRegistry",
    "load_voices",
    "load_voices_file",
]
