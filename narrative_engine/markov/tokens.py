"""Tokenization helpers shared by training and generation."""

SENTENCE_START = "<S>"
SENTENCE_END = "</S>"

SENTENCE_ENDERS = frozenset(".!?")
PUNCTUATION = frozenset(".!?,;:\"'")


def is_punctuation(token: str) -> bool:
    """Check if a token starts with punctuation (and so isn't a word)."""
    return bool(token) and token[0] in PUNCTUATION


def tokenize(text: str) -> list[str]:
    """Split on whitespace and peel punctuation into standalone tokens.

    Examples:
        >>> tokenize("Hello, world.")
        ['Hello', ',', 'world', '.']
    """
    tokens: list[str] = []
    for word in text.split():
        current: list[str] = []
        for char in word:
            if char in PUNCTUATION:
                if current:
                    tokens.append("".join(current))
                    current = []
                tokens.append(char)
            else:
                current.append(char)
        if current:
            tokens.append("".join(current))
    return tokens


def split_into_sentences(tokens: list[str]) -> list[list[str]]:
    """Split tokens into sentences at sentence-ending punctuation.

    Trailing tokens without a sentence ender form a final sentence.
    """
    sentences: list[list[str]] = []
    current: list[str] = []
    for token in tokens:
        current.append(token)
        if len(token) == 1 and token in SENTENCE_ENDERS:
            sentences.append(current)
            current = []
    if current:
        sentences.append(current)
    return sentences


def reassemble_tokens(tokens: list[str]) -> str:
    """Join tokens into text, attaching punctuation to the previous word.

    Examples:
        >>> reassemble_tokens(["Hello", ",", "world", "."])
        'Hello, world.'
    """
    parts: list[str] = []
    for i, token in enumerate(tokens):
        if i > 0 and not (len(token) == 1 and token in PUNCTUATION):
            parts.append(" ")
        parts.append(token)
    return "".join(parts)
