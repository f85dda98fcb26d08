"""Grammar exception definitions.

Every expansion failure is terminal for the current expansion call;
nothing here is retried internally.
"""


class TemplateParseError(ValueError):
    """Malformed brace syntax in a template string.

    Attributes:
        reason: What was wrong, without the location suffix.
        template: The template source that failed to parse.
        position: Character offset where the problem was found.
    """

    def __init__(self, message: str, template: str, position: int) -> None:
        super().__init__(f"{message} at position {position} in template {template!r}")
        self.reason = message
        self.template = template
        self.position = position


class GrammarError(Exception):
    """Base exception for grammar expansion."""

    pass


class RuleNotFoundError(GrammarError):
    """A rule name was looked up but does not exist in the grammar set."""

    def __init__(self, rule_name: str) -> None:
        super().__init__(f"Rule not found: '{rule_name}'")
        self.rule_name = rule_name


class MaxDepthExceededError(GrammarError):
    """Expansion went deeper than the configured depth cap.

    Attributes:
        rule_name: Rule being expanded when the cap was hit.
        max_depth: The cap that was exceeded.
    """

    def __init__(self, rule_name: str, max_depth: int) -> None:
        super().__init__(
            f"Maximum expansion depth {max_depth} exceeded while expanding '{rule_name}'"
        )
        self.rule_name = rule_name
        self.max_depth = max_depth


class NoAlternativesError(GrammarError):
    """A rule has no alternatives to choose from."""

    def __init__(self, rule_name: str) -> None:
        super().__init__(f"Rule '{rule_name}' has no alternatives")
        self.rule_name = rule_name


class SelectionError(GrammarError):
    """Weighted selection failed, e.g. every effective weight is zero."""

    def __init__(self, rule_name: str, reason: str) -> None:
        super().__init__(f"Could not select an alternative for '{rule_name}': {reason}")
        self.rule_name = rule_name
        self.reason = reason


class EntityBindingNotFoundError(GrammarError):
    """A template referenced an entity role with nothing bound to it."""

    def __init__(self, role: str) -> None:
        super().__init__(f"No entity bound for role '{role}'")
        self.role = role


class EntityFieldNotFoundError(GrammarError):
    """A template referenced an entity property that does not exist."""

    def __init__(self, entity_name: str, field_name: str) -> None:
        super().__init__(f"Entity '{entity_name}' has no field '{field_name}'")
        self.entity_name = entity_name
        self.field_name = field_name


class GrammarMarkovError(GrammarError):
    """An inline Markov reference failed even after the untagged fallback.

    The underlying MarkovError is chained as ``__cause__``.
    """

    def __init__(self, corpus: str, tag: str, cause: Exception) -> None:
        super().__init__(f"Markov generation failed for corpus '{corpus}' tag '{tag}': {cause}")
        self.corpus = corpus
        self.tag = tag
        self.cause = cause


class GrammarLoadError(GrammarError):
    """Error loading authoring data from a grammar file."""

    pass
