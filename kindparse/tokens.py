"""Tokens produced by the lexer."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any


class TokenKind(enum.Enum):
    """Every kind of token. Fixed tokens carry their spelling as value."""

    LPAR = "("
    RPAR = ")"
    LBRACKET = "["
    RBRACKET = "]"
    LBRACE = "{"
    RBRACE = "}"
    EQ = "="
    COLON = ":"
    SEMI = ";"
    FAT_ARROW = "=>"
    DOLLAR = "$"
    COMMA = ","
    RIGHT_ARROW = "->"
    DOT_DOT = ".."
    DOT = "."
    TILDE = "~"
    COLON_COLON = "::"

    HELP = "help"
    LOWER_ID = "lower identifier"
    UPPER_ID = "upper identifier"

    RETURN = "return"
    ASK = "ask"
    WITH = "with"

    CHAR = "char"
    STR = "string"
    NUM60 = "u60"
    NUM120 = "u120"
    NAT = "nat"
    FLOAT = "float"
    HOLE = "_"

    PLUS = "+"
    MINUS = "-"
    STAR = "*"
    SLASH = "/"
    PERCENT = "%"
    AMPERSAND = "&"
    BAR = "|"
    HAT = "^"
    GREATER_GREATER = ">>"
    LESS_LESS = "<<"
    LESS = "<"
    LESS_EQ = "<="
    EQ_EQ = "=="
    GREATER_EQ = ">="
    GREATER = ">"
    BANG_EQ = "!="
    BANG = "!"

    PLUS_EQ = "+="
    AT_EQ = "@="
    AT = "@"

    HASH_HASH = "##"
    HASH = "#"

    COMMENT = "comment"
    EOF = "End of file"
    ERROR = "ERROR"


_DATA_KINDS = frozenset(
    {
        TokenKind.HELP,
        TokenKind.LOWER_ID,
        TokenKind.UPPER_ID,
        TokenKind.CHAR,
        TokenKind.STR,
        TokenKind.NUM60,
        TokenKind.NUM120,
        TokenKind.NAT,
        TokenKind.FLOAT,
        TokenKind.COMMENT,
    }
)


@dataclass(frozen=True)
class Token:
    """A token with its payload.

    ``value`` holds the main payload (identifier text, literal value, comment
    text or the diagnostic of an error token). ``aux`` holds the secondary
    payload: the auxiliary part of an upper identifier, the doc flag of a
    comment, or the fractional part of a float.
    """

    kind: TokenKind
    value: Any = None
    aux: Any = None

    def same_variant(self, other: Token) -> bool:
        return self.kind is other.kind

    def is_lower_id(self) -> bool:
        return self.kind is TokenKind.LOWER_ID

    def is_doc(self) -> bool:
        return self.kind is TokenKind.COMMENT and bool(self.aux)

    def is_upper_id(self) -> bool:
        return self.kind is TokenKind.UPPER_ID

    def is_str(self) -> bool:
        return self.kind is TokenKind.STR

    def is_num60(self) -> bool:
        return self.kind is TokenKind.NUM60

    def is_num120(self) -> bool:
        return self.kind is TokenKind.NUM120

    def is_char(self) -> bool:
        return self.kind is TokenKind.CHAR

    def is_eof(self) -> bool:
        return self.kind is TokenKind.EOF

    def __str__(self) -> str:
        kind = self.kind
        if kind not in _DATA_KINDS:
            return kind.value
        if kind is TokenKind.HELP:
            return f"?{self.value}"
        if kind is TokenKind.LOWER_ID:
            return str(self.value)
        if kind is TokenKind.UPPER_ID:
            return str(self.value) if self.aux is None else f"{self.value}/{self.aux}"
        if kind is TokenKind.CHAR:
            return f"'{self.value}'"
        if kind is TokenKind.STR:
            return f'"{self.value}"'
        if kind is TokenKind.NUM60:
            return str(self.value)
        if kind is TokenKind.NUM120:
            return f"{self.value}u120"
        if kind is TokenKind.NAT:
            return f"{self.value}n"
        if kind is TokenKind.FLOAT:
            return f"{self.value}.{self.aux}"
        prefix = "docstring" if self.aux else "comment"
        return f"{prefix} '{self.value}'"