"""Markov exception definitions."""


class MarkovError(Exception):
    """Base exception for Markov operations."""

    pass


class NoDataError(MarkovError):
    """The model is empty or has no table for the requested tag.

    Attributes:
        tag: The requested tag, or None for the untagged table.
    """

    def __init__(self, tag: str | None = None) -> None:
        if tag is None:
            message = "No data for generation (model is empty)"
        else:
            message = f"No data for generation with tag '{tag}'"
        super().__init__(message)
        self.tag = tag


class NoSentenceStartError(MarkovError):
    """Generation produced no tokens from the start state."""

    def __init__(self) -> None:
        super().__init__("No sentence start found")


class MarkovLoadError(MarkovError):
    """Error reading or writing a serialized model."""

    pass
