import pytest

from kindparse.diagnostic import Unclosed, UnexpectedChar, UnexpectedToken
from kindparse.span import Range
from kindparse.tokens import Token, TokenKind
from kindparse.state import ParserState


def test_lookahead_holds_three_tokens():
    state = ParserState("foo bar")
    assert state.get() == Token(TokenKind.LOWER_ID, "foo")
    assert state.peek(1) == Token(TokenKind.LOWER_ID, "bar")
    assert state.peek(2).is_eof()


def test_advance_returns_current_token_and_range():
    state = ParserState("foo bar")
    expected = (state.get(), state.range())
    assert state.advance() == expected
    assert state.get().value == "bar"
    assert state.eaten == 1


def test_range_of_first_token():
    state = ParserState("foo")
    assert state.range() == Range(0, 3, 0)


def test_advance_past_end_keeps_eof():
    state = ParserState("x")
    state.advance()
    state.advance()
    assert state.get().is_eof()


def test_is_linebreak():
    state = ParserState("a\nb c")
    assert state.is_linebreak() is False
    state.advance()
    assert state.is_linebreak() is True
    state.advance()
    assert state.is_linebreak() is False


def test_fail_raises_unexpected_token_at_current():
    state = ParserState("foo")
    with pytest.raises(UnexpectedToken) as info:
        state.fail([Token(TokenKind.COLON)])
    assert info.value.token == state.get()
    assert info.value.range == state.range()
    assert info.value.expected == (Token(TokenKind.COLON),)


def test_eat_variant_success_and_failure():
    state = ParserState("( x")
    token, _ = state.eat_variant(TokenKind.LPAR)
    assert token.kind is TokenKind.LPAR
    with pytest.raises(UnexpectedToken) as info:
        state.eat_variant(TokenKind.RPAR)
    assert info.value.expected == (Token(TokenKind.RPAR),)
    assert state.get().value == "x"


def test_eat_closing_keyword_at_eof_reports_unclosed():
    state = ParserState("(")
    opening = state.range()
    state.advance()
    with pytest.raises(Unclosed) as info:
        state.eat_closing_keyword(TokenKind.RPAR, opening)
    assert info.value.range == opening


def test_eat_closing_keyword_on_other_token():
    state = ParserState("( ]")
    opening = state.range()
    state.advance()
    with pytest.raises(UnexpectedToken):
        state.eat_closing_keyword(TokenKind.RPAR, opening)


def test_eat_closing_keyword_consumes():
    state = ParserState(") y")
    state.eat_closing_keyword(TokenKind.RPAR, state.range())
    assert state.get().value == "y"


def test_eat_id():
    state = ParserState("into in")
    token, _ = state.eat_id("into")
    assert token.value == "into"
    with pytest.raises(UnexpectedToken) as info:
        state.eat_id("into")
    assert info.value.expected == (Token(TokenKind.LOWER_ID, "into"),)


def test_eat_with_mapper():
    state = ParserState("foo 7")
    name = state.eat(lambda t: t.value if t.is_lower_id() else None)
    assert name == "foo"
    with pytest.raises(UnexpectedToken):
        state.eat(lambda t: t.value if t.is_lower_id() else None)
    assert state.eaten == 1


def test_check_and_eat_and_check_actual():
    state = ParserState(": x")
    assert state.check_actual(TokenKind.COLON) is True
    assert state.check_and_eat(TokenKind.SEMI) is False
    assert state.check_and_eat(TokenKind.COLON) is True
    assert state.check_actual_id("x") is True
    assert state.check_actual_id("y") is False


def test_try_single_without_consuming_gives_none():
    state = ParserState("x")
    assert state.try_single(lambda s: s.eat_variant(TokenKind.LPAR)) is None
    assert state.get().value == "x"


def test_try_single_after_consuming_reraises():
    state = ParserState("x y")

    def consume_then_fail(s):
        s.advance()
        s.fail([])

    with pytest.raises(UnexpectedToken) as info:
        state.try_single(consume_then_fail)
    assert info.value.token.value == "y"


def test_try_single_returns_result():
    state = ParserState("x")
    token, _ = state.try_single(lambda s: s.eat_variant(TokenKind.LOWER_ID))
    assert token.value == "x"


def test_send_diagnostic_marks_failed():
    state = ParserState("x")
    diag = Unclosed(state.range())
    state.send_diagnostic(diag)
    assert state.failed is True
    assert state.diagnostics == [diag]


def test_lexer_errors_are_collected_and_skipped():
    state = ParserState("a ` b")
    assert state.get().value == "a"
    assert state.peek(1).value == "b"
    assert [type(d) for d in state.diagnostics] == [UnexpectedChar]
    assert state.failed is False