"""Pipeline exception definitions.

Authoring defects (missing rules, missing fields) surface as
ExpansionError and are never retried. Repetition is handled inside the
retry loop and never raises.
"""


class PipelineError(Exception):
    """Base exception for narration failures.

    Attributes:
        cause: The underlying exception, if any.
    """

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class ExpansionError(PipelineError):
    """Grammar expansion (or inline Markov generation) failed."""

    def __init__(self, rule_name: str, cause: Exception) -> None:
        super().__init__(f"Expansion of '{rule_name}' failed: {cause}", cause)
        self.rule_name = rule_name


class VoiceResolutionError(PipelineError):
    """A requested voice is unknown or its inheritance chain is broken."""

    def __init__(self, voice_id: int, cause: Exception | None = None) -> None:
        reason = f": {cause}" if cause else ""
        super().__init__(f"Could not resolve voice {voice_id}{reason}", cause)
        self.voice_id = voice_id


class GenerationFailedError(PipelineError):
    """No attempt produced a passage."""

    def __init__(self, attempts: int) -> None:
        super().__init__(f"Generation failed after {attempts} attempts")
        self.attempts = attempts
