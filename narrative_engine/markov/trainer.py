"""Markov model training from raw text.

Corpora may contain tag region markers: a line consisting only of
``[tag]`` applies that tag to every following line until the next marker.
Tagged text is counted in both the untagged table and the tag's table.
"""

import logging

from narrative_engine.markov.model import MarkovModel, TransitionTable
from narrative_engine.markov.tokens import (
    SENTENCE_END,
    SENTENCE_START,
    split_into_sentences,
    tokenize,
)

logger = logging.getLogger(__name__)

MIN_NGRAM = 2
MAX_NGRAM = 4

# prefix -> {next token: count}, insertion-ordered
_CountTable = dict[tuple[str, ...], dict[str, int]]


class MarkovTrainer:
    """Trains Markov models from raw text."""

    @staticmethod
    def train(text: str, n: int) -> MarkovModel:
        """Train a model with the given n-gram depth.

        Args:
            text: Raw corpus text, optionally with ``[tag]`` marker lines.
            n: N-gram depth, 2 to 4.

        Returns:
            The trained MarkovModel.

        Raises:
            ValueError: If n is outside 2-4.
        """
        if not MIN_NGRAM <= n <= MAX_NGRAM:
            raise ValueError(f"n-gram depth must be {MIN_NGRAM}-{MAX_NGRAM}, got {n}")

        counts: _CountTable = {}
        tagged_counts: dict[str, _CountTable] = {}
        current_tag: str | None = None

        for line in text.splitlines():
            stripped = line.strip()
            if not stripped:
                continue

            tag = parse_tag_marker(stripped)
            if tag is not None:
                current_tag = tag
                continue

            for sentence in split_into_sentences(tokenize(stripped)):
                padded = [SENTENCE_START] * (n - 1) + sentence + [SENTENCE_END]
                for i in range(len(padded) - n + 1):
                    prefix = tuple(padded[i : i + n - 1])
                    next_token = padded[i + n - 1]
                    _add_transition(counts, prefix, next_token)
                    if current_tag is not None:
                        tag_table = tagged_counts.setdefault(current_tag, {})
                        _add_transition(tag_table, prefix, next_token)

        model = MarkovModel(
            n=n,
            transitions=_freeze(counts),
            tagged_transitions={tag: _freeze(table) for tag, table in tagged_counts.items()},
        )
        logger.debug(
            f"Trained {n}-gram model: {len(model.transitions)} prefixes, "
            f"tags={model.tags}"
        )
        return model


def parse_tag_marker(line: str) -> str | None:
    """Return the tag if the line is a ``[tag]`` marker, else None."""
    if line.startswith("[") and line.endswith("]") and len(line) > 2:
        return line[1:-1]
    return None


def _add_transition(table: _CountTable, prefix: tuple[str, ...], next_token: str) -> None:
    entries = table.setdefault(prefix, {})
    entries[next_token] = entries.get(next_token, 0) + 1


def _freeze(table: _CountTable) -> TransitionTable:
    return {prefix: list(entries.items()) for prefix, entries in table.items()}
