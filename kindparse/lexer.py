"""Lexer turning source text into tokens with their source ranges."""

from __future__ import annotations

from typing import Callable, Optional

from kindparse.diagnostic import (
    EncodeSequence,
    InvalidEscapeSequence,
    InvalidNumberRepresentation,
    InvalidNumberType,
    SyntaxDiagnostic,
    UnexpectedChar,
    UnfinishedChar,
    UnfinishedComment,
    UnfinishedString,
)
from kindparse.span import Range
from kindparse.tokens import Token, TokenKind

Report = Callable[[SyntaxDiagnostic], None]
Lexed = tuple[Token, Range]

_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"
_U32_MAX = 2**32 - 1
_U64_MAX = 2**64 - 1
_U128_MAX = 2**128 - 1

_KEYWORDS = {
    "return": TokenKind.RETURN,
    "ask": TokenKind.ASK,
    "with": TokenKind.WITH,
}

_SINGLE = {
    "(": TokenKind.LPAR,
    ")": TokenKind.RPAR,
    "[": TokenKind.LBRACKET,
    "]": TokenKind.RBRACKET,
    "~": TokenKind.TILDE,
    "{": TokenKind.LBRACE,
    "}": TokenKind.RBRACE,
    ";": TokenKind.SEMI,
    "$": TokenKind.DOLLAR,
    ",": TokenKind.COMMA,
    "*": TokenKind.STAR,
    "%": TokenKind.PERCENT,
    "&": TokenKind.AMPERSAND,
    "|": TokenKind.BAR,
    "^": TokenKind.HAT,
}

# First character -> (token when alone, {second character: combined token}).
_COMPOUND = {
    ".": (TokenKind.DOT, {".": TokenKind.DOT_DOT}),
    "#": (TokenKind.HASH, {"#": TokenKind.HASH_HASH}),
    "=": (TokenKind.EQ, {">": TokenKind.FAT_ARROW, "=": TokenKind.EQ_EQ}),
    ">": (TokenKind.GREATER, {">": TokenKind.GREATER_GREATER, "=": TokenKind.GREATER_EQ}),
    "<": (TokenKind.LESS, {"<": TokenKind.LESS_LESS, "=": TokenKind.LESS_EQ}),
    ":": (TokenKind.COLON, {":": TokenKind.COLON_COLON}),
    "+": (TokenKind.PLUS, {"=": TokenKind.PLUS_EQ}),
    "@": (TokenKind.AT, {"=": TokenKind.AT_EQ}),
    "-": (TokenKind.MINUS, {">": TokenKind.RIGHT_ARROW}),
    "!": (TokenKind.BANG, {"=": TokenKind.BANG_EQ}),
}

_ESCAPES = {
    "'": "'",
    '"': '"',
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "0": "\0",
    "\\": "\\",
}


def _width(chr_: str) -> int:
    return 1 if chr_ < "\x80" else len(chr_.encode("utf-8", "surrogatepass"))


def _is_ascii_alnum(chr_: str) -> bool:
    return chr_.isascii() and chr_.isalnum()


def _is_whitespace(chr_: str) -> bool:
    return chr_ in (" ", "\r", "\t")


def _is_valid_id(chr_: str) -> bool:
    return _is_ascii_alnum(chr_) or chr_ in ("_", "$", ".")


def _is_valid_upper_start(chr_: str) -> bool:
    return "A" <= chr_ <= "Z"


def _is_valid_id_start(chr_: str) -> bool:
    return _is_ascii_alnum(chr_) or chr_ == "_"


def _is_digit(chr_: str, base: int) -> bool:
    return chr_.isascii() and chr_.lower() in _DIGITS[:base]


def _parse_unsigned(digits: str, base: int, limit: int) -> Optional[int]:
    if not digits:
        return None
    value = int(digits, base)
    return value if value <= limit else None


def _parse_code_point(text: Optional[str], base: int) -> Optional[str]:
    if text is None:
        return None
    body = text[1:] if text.startswith("+") else text
    if not body or not all(_is_digit(c, base) for c in body):
        return None
    value = int(body, base)
    if value > _U32_MAX or value > 0x10FFFF or 0xD800 <= value <= 0xDFFF:
        return None
    return chr(value)


class Lexer:
    """Turns source text into tokens, reporting lexical errors as it goes.

    Diagnostics of error tokens met by :meth:`next_token` are handed to
    ``report``; without one they are collected in ``diagnostics``.
    """

    def __init__(self, text: str, ctx: int = 0, report: Optional[Report] = None) -> None:
        self.text = text
        self.ctx = ctx
        self.pos = 0
        self.comment_depth = 0
        self.diagnostics: list[SyntaxDiagnostic] = []
        self._index = 0
        self._report: Report = report if report is not None else self.diagnostics.append

    # Character level helpers

    def _peek(self) -> Optional[str]:
        return self.text[self._index] if self._index < len(self.text) else None

    def _next_char(self) -> Optional[str]:
        chr_ = self._peek()
        if chr_ is None:
            return None
        self._index += 1
        self.pos += _width(chr_)
        return chr_

    def _accumulate_while(self, condition: Callable[[str], bool]) -> str:
        start = self._index
        while self._index < len(self.text) and condition(self.text[self._index]):
            self.pos += _width(self.text[self._index])
            self._index += 1
        return self.text[start : self._index]

    def _next_chars(self, size: int) -> Optional[str]:
        start = self._index
        for _ in range(size):
            if self._next_char() is None:
                return None
        return self.text[start : self._index]

    def _mk_range(self, start: int) -> Range:
        return Range(start, self.pos, self.ctx)

    def _one_column(self, start: int) -> Range:
        return Range(start, start + 1, self.ctx)

    def _single(self, kind: TokenKind, start: int, value: object = None) -> Lexed:
        self._next_char()
        return Token(kind, value), self._mk_range(start)

    @staticmethod
    def _error(diagnostic: SyntaxDiagnostic, rng: Range) -> Lexed:
        return Token(TokenKind.ERROR, diagnostic), rng

    def _is_linebreak(self) -> bool:
        self._accumulate_while(_is_whitespace)
        count = len(self._accumulate_while(lambda c: c == "\n"))
        self._accumulate_while(_is_whitespace)
        return count > 0

    # Public entry points

    def next_token(self) -> tuple[bool, Token, Range]:
        """Next meaningful token, with whether a line break preceded it.

        Error tokens are reported and plain comments skipped.
        """
        while True:
            is_break = self._is_linebreak()
            token, rng = self.lex_token()
            if token.kind is TokenKind.ERROR:
                self._report(token.value)
                continue
            if token.kind is TokenKind.COMMENT and not token.aux:
                continue
            return is_break, token, rng

    def lex_token(self) -> Lexed:
        """Lex one raw token, which may be a comment or an error token."""
        while (chr_ := self._peek()) is not None and (_is_whitespace(chr_) or chr_ == "\n"):
            if _is_whitespace(chr_):
                self._accumulate_while(_is_whitespace)
            else:
                self._accumulate_while(lambda c: c in ("\n", "\r"))

        start = self.pos
        chr_ = self._peek()
        if chr_ is None:
            return Token(TokenKind.EOF), self._mk_range(start)

        if chr_ == ".":
            return self._compound(chr_, start)
        if chr_.isascii() and chr_.isdigit():
            return self._lex_number()
        if _is_valid_upper_start(chr_):
            first = self._accumulate_while(_is_valid_id)
            aux = None
            if self._peek() == "/":
                self._next_char()
                aux = self._accumulate_while(_is_valid_id)
            return Token(TokenKind.UPPER_ID, first, aux), self._mk_range(start)
        if chr_ == "_":
            self._accumulate_while(_is_valid_id)
            return Token(TokenKind.HOLE), self._mk_range(start)
        if _is_valid_id_start(chr_):
            word = self._accumulate_while(_is_valid_id)
            kind = _KEYWORDS.get(word)
            token = Token(kind) if kind is not None else Token(TokenKind.LOWER_ID, word)
            return token, self._mk_range(start)
        if chr_ in _SINGLE:
            return self._single(_SINGLE[chr_], start)
        if chr_ == "/":
            self._next_char()
            nxt = self._peek()
            if nxt == "/":
                return self._lex_comment(start)
            if nxt == "*":
                return self._lex_multiline_comment(start)
            return Token(TokenKind.SLASH), self._mk_range(start)
        if chr_ in _COMPOUND:
            return self._compound(chr_, start)
        if chr_ == '"':
            return self._lex_string()
        if chr_ == "?":
            self._next_char()
            name = self._accumulate_while(_is_valid_id)
            return Token(TokenKind.HELP, name), self._mk_range(start)
        if chr_ == "'":
            return self._lex_char_literal(start)

        self._next_char()
        rng = self._mk_range(start)
        return self._error(UnexpectedChar(chr_, rng), rng)

    def _compound(self, chr_: str, start: int) -> Lexed:
        alone, follow = _COMPOUND[chr_]
        self._next_char()
        nxt = self._peek()
        if nxt is not None and nxt in follow:
            return self._single(follow[nxt], start)
        return Token(alone), self._mk_range(start)

    # Comments

    def _lex_comment(self, start: int) -> Lexed:
        self._next_char()
        is_doc = False
        if self._peek() == "!":
            self._next_char()
            is_doc = True
        text = self._accumulate_while(lambda c: c != "\n")
        return Token(TokenKind.COMMENT, text, is_doc), self._mk_range(start)

    def _lex_multiline_comment(self, start: int) -> Lexed:
        self._next_char()
        content_start = self._index
        self.comment_depth += 1
        while (chr_ := self._peek()) is not None:
            if chr_ == "*":
                self._next_char()
                if self._peek() == "/":
                    self.comment_depth -= 1
                    if self.comment_depth == 0:
                        self._next_char()
                        break
            elif chr_ == "/":
                self._next_char()
                if self._peek() == "*":
                    self.comment_depth += 1
            self._next_char()
        if self.comment_depth != 0:
            rng = self._mk_range(start)
            return self._error(UnfinishedComment(rng), rng)
        text = self.text[content_start : self._index - 2]
        return Token(TokenKind.COMMENT, text, False), self._mk_range(start)

    # Literals

    def _lex_char_encoded(self, start: int, size: int, base: int, err: EncodeSequence) -> str:
        chr_ = _parse_code_point(self._next_chars(size), base)
        if chr_ is None:
            raise InvalidEscapeSequence(err, self._mk_range(start))
        return chr_

    def _lex_escaped_char(self, start: int) -> str:
        chr_ = self._peek()
        if chr_ is None:
            raise UnfinishedString(self._one_column(start))
        self._next_char()
        if chr_ in _ESCAPES:
            return _ESCAPES[chr_]
        if chr_ == "x":
            return self._lex_char_encoded(start, 2, 16, EncodeSequence.HEXA)
        if chr_ == "u":
            return self._lex_char_encoded(start, 4, 16, EncodeSequence.UNICODE)
        return chr_

    def _lex_num_with_base(self, num_start: int, base: int, err: EncodeSequence) -> Lexed:
        num = self._accumulate_while(lambda c: _is_digit(c, base) or c == "_") or "0"
        digits = num.replace("_", "")
        type_start = self.pos

        def number(kind: TokenKind, limit: int) -> Lexed:
            value = _parse_unsigned(digits, base, limit)
            rng = self._mk_range(num_start)
            if value is None:
                return self._error(InvalidNumberRepresentation(err, rng), rng)
            return Token(kind, value), rng

        suffix = self._peek()
        if suffix in ("n", "N"):
            self._next_char()
            return number(TokenKind.NAT, _U128_MAX)
        if suffix in ("u", "U"):
            self._next_char()
            type_ = self._accumulate_while(lambda c: c.isascii() and c.isdigit())
            if type_ == "60":
                return number(TokenKind.NUM60, _U64_MAX)
            if type_ == "120":
                return number(TokenKind.NUM120, _U128_MAX)
            rng = self._mk_range(type_start)
            return self._error(InvalidNumberType(f"u{type_}", rng), rng)
        return number(TokenKind.NUM60, _U64_MAX)

    def _lex_number(self) -> Lexed:
        start = self.pos
        if self._peek() == "0":
            self._next_char()
            prefix = self._peek()
            if prefix in ("x", "X"):
                self._next_char()
                return self._lex_num_with_base(start, 16, EncodeSequence.HEXA)
            if prefix in ("o", "O"):
                self._next_char()
                return self._lex_num_with_base(start, 8, EncodeSequence.OCTAL)
            if prefix in ("b", "B"):
                self._next_char()
                return self._lex_num_with_base(start, 2, EncodeSequence.BINARY)
        return self._lex_num_with_base(start, 10, EncodeSequence.DECIMAL)

    def _lex_char(self) -> str:
        start = self.pos
        chr_ = self._peek()
        if chr_ is None:
            raise UnfinishedChar(self._mk_range(start))
        self._next_char()
        if chr_ == "\\":
            return self._lex_escaped_char(start)
        return chr_

    def _lex_char_literal(self, start: int) -> Lexed:
        self._next_char()
        try:
            chr_ = self._lex_char()
        except SyntaxDiagnostic as err:
            return self._error(err, self._mk_range(start))
        nxt = self._peek()
        if nxt == "'":
            return self._single(TokenKind.CHAR, start, chr_)
        rng = self._mk_range(start)
        if nxt is None:
            return self._error(UnfinishedChar(rng), rng)
        return self._error(UnexpectedChar(nxt, rng), rng)

    def _lex_string(self) -> Lexed:
        start = self.pos
        self._next_char()
        chars: list[str] = []
        error: Optional[Lexed] = None
        while (chr_ := self._peek()) is not None:
            chr_start = self.pos
            if chr_ == '"':
                break
            if chr_ == "\\":
                self._next_char()
                try:
                    chars.append(self._lex_escaped_char(chr_start))
                except SyntaxDiagnostic as err:
                    self._accumulate_while(lambda c: c != '"')
                    error = self._error(err, self._mk_range(start))
                continue
            chars.append(chr_)
            self._next_char()

        closing = self._next_char()
        if error is not None:
            return error
        if closing == '"':
            return Token(TokenKind.STR, "".join(chars)), self._mk_range(start)
        return self._error(UnfinishedString(self._one_column(start)), self._mk_range(start))


def tokenize(
    text: str, ctx: int = 0
) -> tuple[list[tuple[Token, Range]], list[SyntaxDiagnostic]]:
    """Lex ``text`` up to the end of file.

    Returns the meaningful tokens (without the final end-of-file token) and
    the diagnostics reported on the way.
    """
    lexer = Lexer(text, ctx)
    tokens: list[tuple[Token, Range]] = []
    while True:
        _, token, rng = lexer.next_token()
        if token.is_eof():
            return tokens, lexer.diagnostics
        tokens.append((token, rng))