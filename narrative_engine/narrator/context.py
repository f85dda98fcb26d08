"""Rolling narrative context for repetition and monotony detection.

The context keeps the last N accepted passages. A candidate passage is
checked against that window before it is accepted:

- RepeatedOpening: its first three words match a recent opening
- OverusedWord: a significant word would reach OVERUSE_THRESHOLD uses
- StructuralMonotony: sentence lengths across the window barely vary
"""

import logging
import re
import statistics
from collections import Counter, deque
from collections.abc import Iterable
from dataclasses import dataclass

from narrative_engine.schema.entity import EntityId

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_SIZE = 5
OPENING_WORDS = 3
SIGNIFICANT_WORD_MIN_LENGTH = 5
OVERUSE_THRESHOLD = 4
MONOTONY_MIN_PASSAGES = 3
MONOTONY_MAX_STD_DEV = 2.0
MONOTONY_MIN_MEAN = 3.0

STOPWORDS = frozenset({
    "a", "about", "above", "after", "again", "against", "all", "almost", "along",
    "already", "also", "although", "always", "among", "an", "and", "another",
    "any", "anyone", "anything", "are", "around", "as", "at", "be", "because",
    "been", "before", "behind", "being", "below", "between", "both", "but", "by",
    "could", "did", "does", "doing", "down", "during", "each", "either", "enough",
    "even", "every", "everyone", "everything", "few", "for", "from", "further",
    "had", "has", "have", "having", "he", "her", "here", "hers", "herself", "him",
    "himself", "his", "how", "however", "i", "if", "in", "into", "is", "it", "its",
    "itself", "just", "least", "less", "like", "might", "more", "most", "much",
    "must", "my", "neither", "never", "no", "nor", "not", "nothing", "now", "of",
    "off", "often", "on", "once", "only", "or", "other", "others", "ought", "our",
    "ours", "out", "over", "own", "perhaps", "quite", "rather", "same", "shall",
    "she", "should", "since", "so", "some", "someone", "something", "still",
    "such", "than", "that", "the", "their", "theirs", "them", "themselves", "then",
    "there", "these", "they", "thing", "things", "this", "those", "though",
    "through", "to", "toward", "towards", "under", "until", "upon", "very", "was",
    "we", "were", "what", "whatever", "when", "where", "whether", "which", "while",
    "who", "whom", "whose", "why", "will", "with", "within", "without", "would",
    "yet", "you", "your", "yours", "yourself",
})

_SENTENCE_SPLIT = re.compile(r"[.!?]+")
_WORD_EDGE = re.compile(r"^[^\w]+|[^\w]+$")


@dataclass(frozen=True)
class RepeatedOpening:
    """The candidate starts the same way as a recent passage."""

    opening: str


@dataclass(frozen=True)
class OverusedWord:
    """A significant word would be used ``count`` times across the window."""

    word: str
    count: int


@dataclass(frozen=True)
class StructuralMonotony:
    """Sentence lengths across the window are too uniform."""

    std_dev: float
    mean: float


RepetitionIssue = RepeatedOpening | OverusedWord | StructuralMonotony


def normalize_word(word: str) -> str:
    """Lowercase a word and strip surrounding punctuation."""
    return _WORD_EDGE.sub("", word).lower()


def extract_opening(text: str) -> str:
    """The first three words of a passage, normalized and space-joined."""
    words = [normalize_word(w) for w in text.split()[:OPENING_WORDS]]
    return " ".join(w for w in words if w)


def significant_words(text: str) -> list[str]:
    """Words long enough to count toward overuse, stopwords removed.

    Examples:
        >>> significant_words("The lantern flickered in the lantern room.")
        ['lantern', 'flickered', 'lantern']
    """
    words = []
    for raw in text.split():
        word = normalize_word(raw)
        if len(word) >= SIGNIFICANT_WORD_MIN_LENGTH and word not in STOPWORDS:
            words.append(word)
    return words


def sentence_lengths(text: str) -> list[int]:
    """Word count of each non-empty sentence in a passage."""
    lengths = []
    for sentence in _SENTENCE_SPLIT.split(text):
        count = len(sentence.split())
        if count:
            lengths.append(count)
    return lengths


class NarrativeContext:
    """Sliding window of recently accepted passages.

    Owned by the engine and only mutated when a passage is accepted.

    Args:
        window_size: Number of recent passages to remember.
    """

    def __init__(self, window_size: int = DEFAULT_WINDOW_SIZE) -> None:
        if window_size < 1:
            raise ValueError(f"window_size must be at least 1, got {window_size}")
        self.window_size = window_size
        self._passages: deque[str] = deque(maxlen=window_size)
        self._openings: deque[str] = deque(maxlen=window_size)
        self._word_counts: Counter[str] = Counter()
        self._entity_mentions: Counter[EntityId] = Counter()

    @property
    def recent_passages(self) -> list[str]:
        return list(self._passages)

    @property
    def recent_openings(self) -> list[str]:
        return list(self._openings)

    def __len__(self) -> int:
        return len(self._passages)

    def word_frequency(self, word: str) -> int:
        """Occurrences of a significant word across the current window."""
        return self._word_counts.get(word.lower(), 0)

    def entity_mentions(self, entity_id: EntityId) -> int:
        """Lifetime number of accepted passages that mentioned an entity."""
        return self._entity_mentions.get(entity_id, 0)

    def record(self, text: str, mentioned: Iterable[EntityId] = ()) -> None:
        """Record an accepted passage.

        Args:
            text: The accepted passage.
            mentioned: Entity ids that took part in the passage.
        """
        self._passages.append(text)
        self._openings.append(extract_opening(text))
        self._recount_words()
        for entity_id in mentioned:
            self._entity_mentions[entity_id] += 1

    def clear(self) -> None:
        """Forget every recorded passage and mention."""
        self._passages.clear()
        self._openings.clear()
        self._word_counts.clear()
        self._entity_mentions.clear()

    def check_repetition(self, text: str) -> list[RepetitionIssue]:
        """Check a candidate passage against the window.

        Args:
            text: Candidate passage, not yet recorded.

        Returns:
            Issues found, openings first, then overused words in
            alphabetical order, then monotony. Empty when the passage is fine.
        """
        issues: list[RepetitionIssue] = []

        opening = extract_opening(text)
        if opening and opening in self._openings:
            issues.append(RepeatedOpening(opening))

        candidate_counts = Counter(significant_words(text))
        for word in sorted(candidate_counts):
            total = self._word_counts.get(word, 0) + candidate_counts[word]
            if total >= OVERUSE_THRESHOLD:
                issues.append(OverusedWord(word, total))

        monotony = self._check_monotony(text)
        if monotony is not None:
            issues.append(monotony)

        if issues:
            logger.debug(f"Repetition issues: {issues}")
        return issues

    def _check_monotony(self, text: str) -> StructuralMonotony | None:
        if len(self._passages) < MONOTONY_MIN_PASSAGES:
            return None

        lengths = []
        for passage in (*self._passages, text):
            lengths.extend(sentence_lengths(passage))
        if len(lengths) < 2:
            return None

        std_dev = statistics.pstdev(lengths)
        mean = statistics.fmean(lengths)
        if std_dev < MONOTONY_MAX_STD_DEV and mean > MONOTONY_MIN_MEAN:
            return StructuralMonotony(std_dev=std_dev, mean=mean)
        return None

    def _recount_words(self) -> None:
        self._word_counts = Counter()
        for passage in self._passages:
            self._word_counts.update(significant_words(passage))
