"""Variety pass: post-expansion text transforms driven by a voice.

Applied in a fixed order:
1. Avoided vocabulary is rotated out for synonyms
2. Voice quirks are injected by probability
3. Remaining repetition issues get a minimal fix
"""

import logging
import random
import re
from collections.abc import Mapping, Sequence

from narrative_engine.narrator.context import (
    NarrativeContext,
    OverusedWord,
    RepeatedOpening,
    RepetitionIssue,
    StructuralMonotony,
    normalize_word,
)
from narrative_engine.voice.types import ResolvedVoice

logger = logging.getLogger(__name__)

SYNONYMS: dict[str, tuple[str, ...]] = {
    "angry": ("furious", "incensed", "livid"),
    "asked": ("inquired", "wondered", "pressed"),
    "beautiful": ("lovely", "striking", "exquisite"),
    "big": ("large", "vast", "sizable"),
    "cold": ("chilly", "frigid", "icy"),
    "dark": ("dim", "shadowed", "murky"),
    "evening": ("night", "dusk", "twilight"),
    "fast": ("quick", "swift", "rapid"),
    "glanced": ("looked", "peered", "peeked"),
    "good": ("fine", "decent", "worthy"),
    "happy": ("glad", "pleased", "content"),
    "hello": ("greetings", "good evening", "welcome"),
    "important": ("significant", "crucial", "vital"),
    "looked": ("glanced", "gazed", "peered"),
    "moment": ("instant", "beat", "second"),
    "nervous": ("uneasy", "anxious", "jittery"),
    "nice": ("pleasant", "agreeable", "charming"),
    "okay": ("fine", "acceptable", "all right"),
    "quiet": ("hushed", "still", "silent"),
    "quietly": ("softly", "silently", "under their breath"),
    "really": ("truly", "genuinely", "honestly"),
    "room": ("chamber", "hall", "parlor"),
    "sad": ("sorrowful", "downcast", "mournful"),
    "said": ("remarked", "noted", "stated"),
    "shouted": ("yelled", "bellowed", "cried"),
    "silence": ("stillness", "hush", "quiet"),
    "slowly": ("gradually", "unhurriedly", "leisurely"),
    "small": ("little", "slight", "modest"),
    "smiled": ("grinned", "beamed", "smirked"),
    "strange": ("odd", "peculiar", "curious"),
    "suddenly": ("abruptly", "all at once", "without warning"),
    "table": ("board", "counter", "desk"),
    "tense": ("taut", "strained", "fraught"),
    "terrible": ("dreadful", "awful", "appalling"),
    "thing": ("matter", "affair", "business"),
    "turned": ("swiveled", "rotated", "wheeled"),
    "very": ("quite", "remarkably", "exceedingly"),
    "walked": ("strode", "stepped", "ambled"),
    "whatever": ("anything", "no matter", "regardless"),
    "whispered": ("murmured", "breathed", "muttered"),
    "words": ("remarks", "phrases", "comments"),
}

TRANSITIONS: tuple[str, ...] = (
    "Meanwhile,",
    "Just then,",
    "Moments later,",
    "Before long,",
    "All the while,",
    "At that,",
    "In the stillness that followed,",
    "Without warning,",
)

# Sentence starters that lose their capital after a transitional phrase.
COMMON_STARTERS = frozenset({
    "a", "an", "and", "as", "at", "but", "each", "every", "for", "he", "her",
    "his", "in", "it", "its", "no", "nobody", "on", "one", "she", "so", "some",
    "someone", "that", "the", "their", "then", "there", "these", "they", "this",
    "those", "we", "with", "you",
})

# Periods after these words do not end a sentence.
ABBREVIATIONS = frozenset({"dr", "mr", "mrs", "ms", "st", "rev", "col", "capt", "prof", "sr", "jr"})

# Quirks are not injected before a period this close to the start.
MIN_QUIRK_OFFSET = 10

_SENTENCE = re.compile(r"[^.!?]*[.!?]+|[^.!?]+$")
_SENTENCE_PERIOD = re.compile(r"(?P<word>\S*)\.(?=\s|$)")


def match_case(original: str, replacement: str) -> str:
    """Carry a leading capital from ``original`` over to ``replacement``."""
    if original[:1].isupper() and replacement:
        return replacement[0].upper() + replacement[1:]
    return replacement


class VarietyPass:
    """Rotates vocabulary, injects quirks and repairs repetition.

    Args:
        synonyms: Word -> replacement choices. Defaults to SYNONYMS.
        transitions: Phrases used to vary a repeated opening.
    """

    def __init__(
        self,
        synonyms: Mapping[str, Sequence[str]] | None = None,
        transitions: Sequence[str] = TRANSITIONS,
    ) -> None:
        self.synonyms = dict(SYNONYMS if synonyms is None else synonyms)
        self.transitions = tuple(transitions)

    def apply(
        self,
        text: str,
        voice: ResolvedVoice,
        context: NarrativeContext,
        rng: random.Random,
    ) -> str:
        """Run every transform over a freshly expanded passage.

        Args:
            text: Expanded passage.
            voice: Resolved voice supplying avoided words and quirks.
            context: Narrative context used to detect repetition.
            rng: Random generator for every choice made here.

        Returns:
            The transformed passage.
        """
        for word in sorted(voice.vocabulary.avoided):
            text = self.replace_word(text, word, rng)

        for quirk in voice.quirks:
            if rng.random() < quirk.frequency:
                text = self.insert_quirk(text, quirk.pattern, rng)

        for issue in context.check_repetition(text):
            text = self.remediate(text, issue, rng)

        return text

    def replace_word(self, text: str, word: str, rng: random.Random) -> str:
        """Replace whole-word occurrences of ``word`` with random synonyms.

        Matching ignores case; each occurrence draws its own synonym and
        keeps the occurrence's leading capital. Words without synonyms are
        left alone.
        """
        choices = self.synonyms.get(word.lower())
        if not choices:
            return text

        pattern = re.compile(rf"\b{re.escape(word)}\b", re.IGNORECASE)
        return pattern.sub(lambda m: match_case(m.group(0), rng.choice(choices)), text)

    def insert_quirk(self, text: str, pattern: str, rng: random.Random) -> str:
        """Insert ", <pattern>" before a sentence-ending period.

        A period ends a sentence when whitespace or the end of the text
        follows it and it does not close a title abbreviation ("Mr.").
        Candidates are such periods past MIN_QUIRK_OFFSET other than the
        final one; with none available the final one is used. Text without
        a sentence-ending period is returned unchanged.
        """
        periods = [
            m.end("word")
            for m in _SENTENCE_PERIOD.finditer(text)
            if normalize_word(m.group("word")) not in ABBREVIATIONS
        ]
        if not periods:
            return text

        candidates = [i for i in periods[:-1] if i >= MIN_QUIRK_OFFSET]
        position = rng.choice(candidates) if candidates else periods[-1]
        return f"{text[:position]}, {pattern}{text[position:]}"

    def remediate(self, text: str, issue: RepetitionIssue, rng: random.Random) -> str:
        """Apply the minimal fix for one repetition issue."""
        if isinstance(issue, RepeatedOpening):
            return self.vary_opening(text, rng)
        if isinstance(issue, OverusedWord):
            return self.replace_word(text, issue.word, rng)
        if isinstance(issue, StructuralMonotony):
            return split_long_sentence(text)
        return text

    def vary_opening(self, text: str, rng: random.Random) -> str:
        """Lead the passage with a transitional phrase.

        A common sentence starter after the phrase is lowercased; anything
        else (a name, "I") keeps its capital.
        """
        stripped = text.lstrip()
        if not stripped:
            return text

        transition = rng.choice(self.transitions)
        first_word = stripped.split(maxsplit=1)[0]
        if normalize_word(first_word) in COMMON_STARTERS:
            stripped = stripped[0].lower() + stripped[1:]
        return f"{transition} {stripped}"


def split_long_sentence(text: str) -> str:
    """Split the longest sentence containing " and " into two sentences."""
    best = None
    for match in _SENTENCE.finditer(text):
        sentence = match.group(0)
        if " and " not in sentence:
            continue
        if best is None or len(sentence.split()) > len(best.group(0).split()):
            best = match
    if best is None:
        return text

    sentence = best.group(0)
    split_at = sentence.index(" and ")
    head = sentence[:split_at].rstrip(" ,;")
    tail = sentence[split_at + len(" and ") :].lstrip()
    if not head.strip() or not tail:
        return text

    return f"{text[: best.start()]}{head}. {tail[0].upper()}{tail[1:]}{text[best.end() :]}"
