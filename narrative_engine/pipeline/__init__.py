"""Narrative pipeline orchestration."""

from narrative_engine.pipeline.engine import RETRY_SEED_PRIME, NarrativeEngine
from narrative_engine.pipeline.exceptions import (
    ExpansionError,
    GenerationFailedError,
    PipelineError,
    VoiceResolutionError,
)
from narrative_engine.pipeline.world import WorldState

__all__ = [
    "ExpansionError",
    "GenerationFailedError",
    "NarrativeEngine",
    "PipelineError",
    "RETRY_SEED_PRIME",
    "VoiceResolutionError",
    "WorldState",
]
