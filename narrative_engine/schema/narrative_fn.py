"""Narrative function taxonomy.

A narrative function names the abstract shape of what is happening
(a confrontation, a loss) independent of how a genre words it. Each
built-in function carries fixed pacing, valence and intensity scalars.
"""

from dataclasses import dataclass
from enum import Enum


class NarrativeFunction(str, Enum):
    """Built-in narrative functions."""

    REVELATION = "revelation"
    ESCALATION = "escalation"
    CONFRONTATION = "confrontation"
    BETRAYAL = "betrayal"
    ALLIANCE = "alliance"
    DISCOVERY = "discovery"
    LOSS = "loss"
    COMIC_RELIEF = "comic_relief"
    FORESHADOWING = "foreshadowing"
    STATUS_CHANGE = "status_change"

    @property
    def fn_name(self) -> str:
        """Name used in ``fn:`` tags and entry rule names."""
        return self.value

    @property
    def pacing(self) -> float:
        """How quickly the moment moves (0.0 slow - 1.0 fast)."""
        return FUNCTION_SCALARS[self][0]

    @property
    def valence(self) -> float:
        """Emotional direction (-1.0 negative - 1.0 positive)."""
        return FUNCTION_SCALARS[self][1]

    @property
    def intensity(self) -> float:
        """Dramatic weight (0.0 - 1.0)."""
        return FUNCTION_SCALARS[self][2]


# (pacing, valence, intensity)
FUNCTION_SCALARS: dict[NarrativeFunction, tuple[float, float, float]] = {
    NarrativeFunction.REVELATION: (0.6, 0.0, 0.8),
    NarrativeFunction.ESCALATION: (0.8, -0.3, 0.7),
    NarrativeFunction.CONFRONTATION: (0.7, -0.5, 0.9),
    NarrativeFunction.BETRAYAL: (0.5, -0.9, 0.9),
    NarrativeFunction.ALLIANCE: (0.4, 0.7, 0.5),
    NarrativeFunction.DISCOVERY: (0.5, 0.3, 0.6),
    NarrativeFunction.LOSS: (0.3, -0.8, 0.8),
    NarrativeFunction.COMIC_RELIEF: (0.6, 0.8, 0.2),
    NarrativeFunction.FORESHADOWING: (0.3, -0.2, 0.4),
    NarrativeFunction.STATUS_CHANGE: (0.4, 0.0, 0.5),
}

CUSTOM_PACING = 0.5
CUSTOM_VALENCE = 0.0
CUSTOM_INTENSITY = 0.5


@dataclass(frozen=True)
class CustomFunction:
    """A game-defined narrative function outside the built-in taxonomy."""

    name: str

    @property
    def fn_name(self) -> str:
        return self.name

    @property
    def pacing(self) -> float:
        return CUSTOM_PACING

    @property
    def valence(self) -> float:
        return CUSTOM_VALENCE

    @property
    def intensity(self) -> float:
        return CUSTOM_INTENSITY


AnyNarrativeFunction = NarrativeFunction | CustomFunction


def parse_narrative_function(name: str) -> AnyNarrativeFunction:
    """Parse a function name into a built-in or custom narrative function.

    Examples:
        >>> parse_narrative_function("Comic_Relief")
        <NarrativeFunction.COMIC_RELIEF: 'comic_relief'>
        >>> parse_narrative_function("trade")
        CustomFunction(name='trade')
    """
    normalized = name.strip().lower()
    try:
        return NarrativeFunction(normalized)
    except ValueError:
        return CustomFunction(name.strip())
