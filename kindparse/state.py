"""Token buffer and the primitive operations the parser is built on."""

from __future__ import annotations

from collections import deque
from typing import Callable, Iterable, NoReturn, Optional, TypeVar

from kindparse.diagnostic import SyntaxDiagnostic, Unclosed, UnexpectedToken
from kindparse.lexer import Lexer
from kindparse.span import Range
from kindparse.tokens import Token, TokenKind

T = TypeVar("T")

_LOOKAHEAD = 3


class ParserState:
    """Keeps three tokens of lookahead over a lexer.

    ``eaten`` counts consumed tokens so that :meth:`try_single` can tell a
    failure on the first token from a failure after consuming input.
    Diagnostics reported by the lexer or through :meth:`send_diagnostic`
    are collected in ``diagnostics``; only the latter set ``failed``.
    """

    def __init__(self, text: str, ctx: int = 0) -> None:
        self.diagnostics: list[SyntaxDiagnostic] = []
        self.failed = False
        self.eaten = 0
        self._lexer = Lexer(text, ctx, self.diagnostics.append)
        self._queue: deque[tuple[bool, Token, Range]] = deque(
            self._lexer.next_token() for _ in range(_LOOKAHEAD)
        )

    def advance(self) -> tuple[Token, Range]:
        """Consume the current token and return it with its range."""
        _, token, rng = self._queue.popleft()
        self._queue.append(self._lexer.next_token())
        self.eaten += 1
        return token, rng

    def is_linebreak(self) -> bool:
        """Whether a line break precedes the current token."""
        return self._queue[0][0]

    def get(self) -> Token:
        return self._queue[0][1]

    def peek(self, lookahead: int) -> Token:
        return self._queue[lookahead][1]

    def range(self) -> Range:
        return self._queue[0][2]

    def fail(self, expect: Iterable[Token]) -> NoReturn:
        """Raise an unexpected-token error at the current token."""
        raise UnexpectedToken(self.get(), self.range(), tuple(expect))

    def send_diagnostic(self, diagnostic: SyntaxDiagnostic) -> None:
        self.diagnostics.append(diagnostic)
        self.failed = True

    def eat_closing_keyword(self, expect: TokenKind, range: Range) -> None:
        """Consume a closing token; at end of file report what was left open."""
        if self.check_and_eat(expect):
            return
        if self.get().is_eof():
            raise Unclosed(range)
        self.fail([Token(expect)])

    def eat_variant(self, expect: TokenKind) -> tuple[Token, Range]:
        if self.get().kind is expect:
            return self.advance()
        self.fail([Token(expect)])

    def eat_id(self, expect: str) -> tuple[Token, Range]:
        token = self.get()
        if token.is_lower_id() and token.value == expect:
            return self.advance()
        self.fail([Token(TokenKind.LOWER_ID, expect)])

    def eat(self, expect: Callable[[Token], Optional[T]]) -> T:
        """Consume the current token if ``expect`` maps it to a value."""
        result = expect(self.get())
        if result is None:
            self.fail([])
        self.advance()
        return result

    def check_and_eat(self, expect: TokenKind) -> bool:
        if self.get().kind is expect:
            self.advance()
            return True
        return False

    def check_actual(self, expect: TokenKind) -> bool:
        return self.get().kind is expect

    def check_actual_id(self, expect: str) -> bool:
        token = self.get()
        return token.is_lower_id() and token.value == expect

    def try_single(self, fun: Callable[[ParserState], T]) -> Optional[T]:
        """Run ``fun``; give ``None`` if it fails without consuming a token."""
        current = self.eaten
        try:
            return fun(self)
        except SyntaxDiagnostic:
            if self.eaten == current:
                return None
            raise