"""Stochastic grammar runtime.

Provides the template parser, tag-gated weighted rules, recursive
expansion, file loading and linting.

Usage:
    >>> import random
    >>> from narrative_engine.grammar import GrammarSet, SelectionContext
    >>> grammars = GrammarSet.from_mapping({"hello": {"alternatives": [[1, "Hello."]]}})
    >>> grammars.expand("hello", SelectionContext(), random.Random(0))
    'Hello.'
"""

# Types
from narrative_engine.grammar.types import (
    Alternative,
    EntityField,
    GrammarRule,
    Literal,
    MarkovRef,
    PronounRef,
    RuleRef,
    Template,
    TemplateSegment,
)

# Parser
from narrative_engine.grammar.parser import parse_template

# Engine
from narrative_engine.grammar.engine import GrammarSet, SelectionContext

# Errors
from narrative_engine.grammar.exceptions import (
    EntityBindingNotFoundError,
    EntityFieldNotFoundError,
    GrammarError,
    GrammarLoadError,
    GrammarMarkovError,
    MaxDepthExceededError,
    NoAlternativesError,
    RuleNotFoundError,
    SelectionError,
    TemplateParseError,
)

# Tooling
from narrative_engine.grammar.linter import LintReport, lint_grammars
from narrative_engine.grammar.loader import load_grammar_file, load_grammars

__all__ = [
    # Types
    "Alternative",
    "EntityField",
    "GrammarRule",
    "Literal",
    "MarkovRef",
    "PronounRef",
    "RuleRef",
    "Template",
    "TemplateSegment",
    # Parser
    "parse_template",
    # Engine
    "GrammarSet",
    "SelectionContext",
    # Errors
    "EntityBindingNotFoundError",
    "EntityFieldNotFoundError",
    "GrammarError",
    "GrammarLoadError",
    "GrammarMarkovError",
    "MaxDepthExceededError",
    "NoAlternativesError",
    "RuleNotFoundError",
    "SelectionError",
    "TemplateParseError",
    # Tooling
    "LintReport",
    "lint_grammars",
    "load_grammar_file",
    "load_grammars",
]
