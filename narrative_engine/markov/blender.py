"""Blending several Markov models at each sampling step."""

import random

from narrative_engine.markov.exceptions import NoDataError
from narrative_engine.markov.model import MarkovModel, walk_chain
from narrative_engine.markov.tokens import reassemble_tokens


class MarkovBlender:
    """Generates text from the weighted union of several models.

    At every step each model contributes its local probability for each
    candidate token (count / total for the current state), scaled by the
    model's blend weight. Source models are never modified.
    """

    @staticmethod
    def generate(
        models: list[tuple[MarkovModel, float]],
        rng: random.Random,
        tag: str | None = None,
        min_words: int = 5,
        max_words: int = 20,
    ) -> str:
        """Generate blended text.

        Args:
            models: (model, blend weight) pairs. The first model's n-gram
                depth drives the walk.
            rng: Random generator.
            tag: Style tag; a model without it falls back to its untagged table.
            min_words: Minimum word count before stopping at a sentence end.
            max_words: Hard word limit.

        Raises:
            NoDataError: If no models are given.
            NoSentenceStartError: If nothing could be generated.
        """
        if not models:
            raise NoDataError(tag)

        n = models[0][0].n

        def pick(state: tuple[str, ...]) -> str | None:
            return pick_next_blended(models, state, tag, rng)

        return reassemble_tokens(walk_chain(n, pick, min_words, max_words))


def pick_next_blended(
    models: list[tuple[MarkovModel, float]],
    state: tuple[str, ...],
    tag: str | None,
    rng: random.Random,
) -> str | None:
    """Sample the next token from the blended distribution."""
    combined: dict[str, float] = {}

    for model, blend_weight in models:
        if tag is not None and tag in model.tagged_transitions:
            table = model.tagged_transitions[tag]
        else:
            table = model.transitions

        options = table.get(state)
        if not options:
            continue
        total = sum(count for _, count in options)
        if total == 0:
            continue
        for token, count in options:
            combined[token] = combined.get(token, 0.0) + count / total * blend_weight

    if not combined or sum(combined.values()) <= 0:
        return None

    tokens = list(combined)
    return rng.choices(tokens, weights=[combined[t] for t in tokens], k=1)[0]
