"""Trained n-gram model and chain walking."""

import random
from collections.abc import Callable
from dataclasses import dataclass, field

from narrative_engine.markov.exceptions import NoDataError, NoSentenceStartError
from narrative_engine.markov.tokens import (
    SENTENCE_END,
    SENTENCE_START,
    is_punctuation,
    reassemble_tokens,
)

# prefix of n-1 tokens -> [(next token, count)]
TransitionTable = dict[tuple[str, ...], list[tuple[str, int]]]

# Safety cap on chain steps, as a multiple of max_words
ITERATION_FACTOR = 3


@dataclass
class MarkovModel:
    """An n-gram phrase model.

    Built once by MarkovTrainer and treated as immutable afterwards.

    Attributes:
        n: N-gram depth (2 for bigrams, 3 for trigrams, 4 max).
        transitions: Untagged transition table.
        tagged_transitions: Tag -> transition table for style-conditioned
            generation.
    """

    n: int
    transitions: TransitionTable = field(default_factory=dict)
    tagged_transitions: dict[str, TransitionTable] = field(default_factory=dict)

    def table_for(self, tag: str | None) -> TransitionTable:
        """Get the transition table for a tag (None for untagged).

        Raises:
            NoDataError: If the tag has no table or the table is empty.
        """
        if tag is None:
            table = self.transitions
        else:
            table = self.tagged_transitions.get(tag)
            if table is None:
                raise NoDataError(tag)
        if not table:
            raise NoDataError(tag)
        return table

    def generate(
        self,
        rng: random.Random,
        tag: str | None = None,
        min_words: int = 5,
        max_words: int = 20,
    ) -> str:
        """Generate text by walking the chain from the sentence-start state.

        Args:
            rng: Random generator; same seed gives the same output.
            tag: Style tag, or None for the untagged table.
            min_words: Stop at the first sentence end once this many words
                (punctuation excluded) have been produced.
            max_words: Hard word limit; output is cut back to the last
                complete sentence when it is reached.

        Returns:
            Generated text.

        Raises:
            NoDataError: If there is no table for the tag.
            NoSentenceStartError: If nothing could be generated.
        """
        table = self.table_for(tag)

        def pick(state: tuple[str, ...]) -> str | None:
            return pick_next(table, state, rng)

        tokens = walk_chain(self.n, pick, min_words, max_words)
        return reassemble_tokens(tokens)

    @property
    def tags(self) -> list[str]:
        """Tags with their own transition tables."""
        return list(self.tagged_transitions)


def pick_next(
    table: TransitionTable,
    state: tuple[str, ...],
    rng: random.Random,
) -> str | None:
    """Sample the next token weighted by count; None if the state is unseen."""
    options = table.get(state)
    if not options:
        return None
    tokens = [token for token, _ in options]
    counts = [count for _, count in options]
    if sum(counts) <= 0:
        return None
    return rng.choices(tokens, weights=counts, k=1)[0]


def walk_chain(
    n: int,
    pick: Callable[[tuple[str, ...]], str | None],
    min_words: int,
    max_words: int,
) -> list[str]:
    """Walk a chain using ``pick`` to choose each next token.

    Shared by single-model generation and blending.

    Raises:
        NoSentenceStartError: If no tokens were produced.
    """
    start_state = (SENTENCE_START,) * (n - 1)
    state = start_state
    tokens: list[str] = []
    word_count = 0
    last_sentence_end = 0

    for _ in range(max_words * ITERATION_FACTOR):
        next_token = pick(state)
        if next_token is None:
            break

        if next_token == SENTENCE_END:
            last_sentence_end = len(tokens)
            if word_count >= min_words:
                break
            state = start_state
            continue

        if not is_punctuation(next_token):
            word_count += 1

        tokens.append(next_token)
        state = (*state[1:], next_token)

        if word_count >= max_words:
            if last_sentence_end > 0:
                del tokens[last_sentence_end:]
            break

    if not tokens:
        raise NoSentenceStartError()
    return tokens
