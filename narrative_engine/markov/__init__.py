"""Markov phrase generation.

Provides n-gram training, generation, multi-model blending and persistence.

Usage:
    >>> import random
    >>> from narrative_engine.markov import MarkovTrainer
    >>> model = MarkovTrainer.train("The door opened. The lamp flickered.", 2)
    >>> text = model.generate(random.Random(7), min_words=2, max_words=10)
"""

from narrative_engine.markov.blender import MarkovBlender
from narrative_engine.markov.exceptions import (
    MarkovError,
    MarkovLoadError,
    NoDataError,
    NoSentenceStartError,
)
from narrative_engine.markov.model import MarkovModel, TransitionTable
from narrative_engine.markov.storage import load_model, load_models_dir, save_model
from narrative_engine.markov.tokens import reassemble_tokens, tokenize
from narrative_engine.markov.trainer import MarkovTrainer

__all__ = [
    "MarkovBlender",
    "MarkovError",
    "MarkovLoadError",
    "MarkovModel",
    "MarkovTrainer",
    "NoDataError",
    "NoSentenceStartError",
    "TransitionTable",
    "load_model",
    "load_models_dir",
    "reassemble_tokens",
    "save_model",
    "tokenize",
]
