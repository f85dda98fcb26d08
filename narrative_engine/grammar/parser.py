"""Template mini-language parser.

Parses authored template strings into segments in a single left-to-right
pass:

    {{ / }}                  literal braces
    {subject} {object} ...   pronoun reference (see PRONOUN_NAMES)
    {markov:CORPUS:TAG}      Markov reference, both parts required
    {entity.FIELD}           entity field reference
    {anything_else}          rule reference
"""

from narrative_engine.grammar.exceptions import TemplateParseError
from narrative_engine.grammar.types import (
    EntityField,
    Literal,
    MarkovRef,
    PronounRef,
    RuleRef,
    Template,
    TemplateSegment,
)
from narrative_engine.schema.entity import PronounForm

PRONOUN_NAMES: dict[str, PronounForm] = {form.value: form for form in PronounForm}

MARKOV_PREFIX = "markov:"
ENTITY_PREFIX = "entity."


def parse_template(text: str) -> Template:
    """Parse a template string into a Template.

    Args:
        text: Authored template text.

    Returns:
        Template with literal text coalesced between references.

    Raises:
        TemplateParseError: On nested, unclosed, unmatched or empty braces,
            or a malformed markov/entity reference.

    Examples:
        >>> parse_template("Hello, {entity.name}.").segments
        (Literal(text='Hello, '), EntityField(field='name'), Literal(text='.'))
    """
    segments: list[TemplateSegment] = []
    literal: list[str] = []
    i = 0
    length = len(text)

    while i < length:
        char = text[i]

        if char == "{":
            if i + 1 < length and text[i + 1] == "{":
                literal.append("{")
                i += 2
                continue

            close = _find_reference_end(text, i)
            if literal:
                segments.append(Literal("".join(literal)))
                literal = []
            segments.append(_parse_reference(text[i + 1 : close], text, i))
            i = close + 1
            continue

        if char == "}":
            if i + 1 < length and text[i + 1] == "}":
                literal.append("}")
                i += 2
                continue
            raise TemplateParseError("Unmatched closing brace", text, i)

        literal.append(char)
        i += 1

    if literal:
        segments.append(Literal("".join(literal)))

    return Template(source=text, segments=tuple(segments))


def _find_reference_end(text: str, start: int) -> int:
    """Find the closing brace of the reference opened at ``start``."""
    j = start + 1
    while j < len(text):
        if text[j] == "{":
            raise TemplateParseError("Nested braces are not allowed", text, j)
        if text[j] == "}":
            return j
        j += 1
    raise TemplateParseError("Unclosed brace", text, start)


def _parse_reference(body: str, text: str, position: int) -> TemplateSegment:
    """Classify the contents of a ``{...}`` reference."""
    if not body:
        raise TemplateParseError("Empty braces", text, position)

    if body in PRONOUN_NAMES:
        return PronounRef(PRONOUN_NAMES[body])

    if body.startswith(MARKOV_PREFIX):
        parts = body[len(MARKOV_PREFIX) :].split(":", 1)
        if len(parts) != 2 or not parts[0] or not parts[1]:
            raise TemplateParseError(
                "Markov reference needs both corpus and tag ({markov:CORPUS:TAG})",
                text,
                position,
            )
        return MarkovRef(corpus=parts[0], tag=parts[1])

    if body.startswith(ENTITY_PREFIX):
        field_name = body[len(ENTITY_PREFIX) :]
        if not field_name:
            raise TemplateParseError("Entity reference needs a field name", text, position)
        return EntityField(field=field_name)

    return RuleRef(body)
