"""Voice exception definitions."""


class VoiceError(Exception):
    """Base exception for voice operations."""

    pass


class VoiceCycleError(VoiceError):
    """A voice's parent chain loops back on itself.

    Attributes:
        chain: Voice ids walked before the repeat, starting at the
            requested voice.
    """

    def __init__(self, chain: list[int]) -> None:
        path = " -> ".join(str(voice_id) for voice_id in chain)
        super().__init__(f"Voice inheritance cycle: {path}")
        self.chain = chain


class VoiceLoadError(VoiceError):
    """Error loading voice definitions from a file."""

    pass
