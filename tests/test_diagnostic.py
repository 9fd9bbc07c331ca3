import pytest

from kindparse.diagnostic import (
    CannotUseUse,
    Color,
    EncodeSequence,
    IgnoreRestShouldBeOnTheEnd,
    ImportsCannotHaveAlias,
    InvalidEscapeSequence,
    InvalidNumberRepresentation,
    InvalidNumberType,
    LowerCasedDefinition,
    MatchScrutineeShouldBeAName,
    NotAClauseOfDef,
    Severity,
    SyntaxDiagnostic,
    Unclosed,
    UnexpectedChar,
    UnexpectedToken,
    UnfinishedChar,
    UnfinishedComment,
    UnfinishedString,
    UnusedDocString,
    encode_name,
)
from kindparse.span import Range
from kindparse.tokens import Token, TokenKind

R = Range(3, 7, 2)
R2 = Range(10, 14, 2)


def all_diagnostics():
    return [
        UnfinishedString(R),
        IgnoreRestShouldBeOnTheEnd(R),
        UnusedDocString(R),
        UnfinishedChar(R),
        LowerCasedDefinition("foo", R),
        NotAClauseOfDef(R, R2),
        UnfinishedComment(R),
        InvalidEscapeSequence(EncodeSequence.HEXA, R),
        InvalidNumberRepresentation(EncodeSequence.BINARY, R),
        UnexpectedChar("`", R),
        UnexpectedToken(Token(TokenKind.EOF), R),
        UnexpectedToken(Token(TokenKind.COMMENT, "d", True), R),
        UnexpectedToken(Token(TokenKind.LPAR), R),
        Unclosed(R),
        CannotUseUse(R),
        ImportsCannotHaveAlias(R),
        InvalidNumberType("u32", R),
        MatchScrutineeShouldBeAName(R),
    ]


def test_encode_names():
    assert encode_name(EncodeSequence.HEXA) == "hexadecimal"
    assert encode_name(EncodeSequence.DECIMAL) == "decimal"
    assert encode_name(EncodeSequence.OCTAL) == "octal"
    assert encode_name(EncodeSequence.BINARY) == "binary"
    assert encode_name(EncodeSequence.UNICODE) == "unicode"


def test_frame_codes_are_distinct():
    codes = [d.to_frame().code for d in all_diagnostics()]
    assert len(set(codes)) == len(codes)


def test_frame_severity_matches_severity():
    assert UnusedDocString(R).to_frame().severity is Severity.WARNING
    assert Unclosed(R).to_frame().severity is Severity.ERROR
    for diag in all_diagnostics():
        assert diag.to_frame().severity == diag.severity()


def test_only_unused_docstring_is_warning():
    warnings = [d for d in all_diagnostics() if d.severity() is Severity.WARNING]
    assert warnings == [UnusedDocString(R)]


@pytest.mark.parametrize("diag", all_diagnostics())
def test_syntax_ctx_comes_from_range(diag):
    assert diag.syntax_ctx() == R.ctx


def test_every_frame_has_one_main_marker():
    assert sum(m.main for m in NotAClauseOfDef(R, R2).to_frame().positions) == 1
    for diag in all_diagnostics():
        assert sum(m.main for m in diag.to_frame().positions) == 1


def test_titles_with_formatting():
    assert (
        InvalidEscapeSequence(EncodeSequence.UNICODE, R).to_frame().title
        == "The unicode character sequence is invalid!"
    )
    assert (
        InvalidNumberRepresentation(EncodeSequence.OCTAL, R).to_frame().title
        == "The octal number sequence is invalid!"
    )
    assert UnexpectedChar("`", R).to_frame().title == "The char '`' is invalid"
    assert InvalidNumberType("u32", R).to_frame().title == "The u32 number type is invalid"


def test_unexpected_token_variants():
    eof = UnexpectedToken(Token(TokenKind.EOF), R).to_frame()
    assert eof.title == "Unexpected end of file."
    assert eof.positions[0].no_code is True

    doc = UnexpectedToken(Token(TokenKind.COMMENT, "x", True), R).to_frame()
    assert doc.title == "Unexpected documentation comment."

    other = UnexpectedToken(Token(TokenKind.FAT_ARROW), R).to_frame()
    assert other.title == "Unexpected token '=>'."
    assert other.positions[0].no_code is False


def test_lower_cased_definition_hint():
    frame = LowerCasedDefinition("foo", R).to_frame()
    assert frame.hints == ["Change it to 'Foo'"]
    assert frame.positions[0].position == R


def test_not_a_clause_markers_order():
    frame = NotAClauseOfDef(R, R2).to_frame()
    first, second = frame.positions
    assert first.position == R2 and first.main and first.color is Color.FST
    assert second.position == R and not second.main and second.color is Color.SND


def test_unused_docstring_marker_color():
    assert UnusedDocString(R).to_frame().positions[0].color is Color.FOR


def test_diagnostics_are_raisable():
    with pytest.raises(SyntaxDiagnostic) as info:
        raise Unclosed(R)
    assert info.value == Unclosed(R)
    assert str(info.value) == "Unclosed parenthesis."


def test_equality_and_hash():
    assert UnfinishedString(R) == UnfinishedString(R)
    assert UnfinishedString(R) != UnfinishedChar(R)
    assert UnfinishedString(R) != UnfinishedString(R2)
    assert len({UnfinishedString(R), UnfinishedString(R)}) == 1