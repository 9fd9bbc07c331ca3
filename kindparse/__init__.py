"""Lexer, parser, syntax tree and syntax diagnostics for the Kind2 language."""

__version__ = "0.1.0"

__all__ = [
    "diagnostic",
    "expressions",
    "lexer",
    "patterns",
    "span",
    "state",
    "terms",
    "tokens",
    "toplevel",
    "tree",
]