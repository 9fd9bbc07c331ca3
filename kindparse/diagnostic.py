"""Syntax diagnostics raised or reported by the lexer and the parser."""

from __future__ import annotations

import enum
from abc import ABCMeta, abstractmethod
from dataclasses import dataclass, field, fields
from typing import Optional

from kindparse.span import Range
from kindparse.tokens import Token, TokenKind


class EncodeSequence(enum.Enum):
    HEXA = "hexa"
    DECIMAL = "decimal"
    OCTAL = "octal"
    BINARY = "binary"
    UNICODE = "unicode"


_ENCODE_NAMES = {
    EncodeSequence.HEXA: "hexadecimal",
    EncodeSequence.DECIMAL: "decimal",
    EncodeSequence.OCTAL: "octal",
    EncodeSequence.BINARY: "binary",
    EncodeSequence.UNICODE: "unicode",
}


def encode_name(encode: EncodeSequence) -> str:
    """Human readable name of a number or escape encoding."""
    return _ENCODE_NAMES[encode]


class Severity(enum.Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class Color(enum.Enum):
    FST = "fst"
    SND = "snd"
    THR = "thr"
    FOR = "for"
    FUL = "ful"


@dataclass(frozen=True)
class Marker:
    position: Range
    color: Color
    text: str
    no_code: bool = False
    main: bool = True


@dataclass(frozen=True)
class DiagnosticFrame:
    code: int
    severity: Severity
    title: str
    subtitles: list[str] = field(default_factory=list)
    hints: list[str] = field(default_factory=list)
    positions: list[Marker] = field(default_factory=list)


def _here(rng: Range, text: str = "Here!", *, no_code: bool = False) -> list[Marker]:
    return [Marker(rng, Color.FST, text, no_code=no_code, main=True)]


class SyntaxDiagnostic(Exception, metaclass=ABCMeta):
    """Base of every syntax diagnostic; subclasses are dataclasses."""

    def _key(self) -> tuple:
        return tuple(getattr(self, f.name) for f in fields(self))  # type: ignore[arg-type]

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other) and self._key() == other._key()  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        return hash((type(self), self._key()))

    def __str__(self) -> str:
        return self.to_frame().title

    @property
    def _main_range(self) -> Range:
        return self.range  # type: ignore[attr-defined]

    def syntax_ctx(self) -> Optional[int]:
        return self._main_range.ctx

    def severity(self) -> Severity:
        return Severity.ERROR

    @abstractmethod
    def to_frame(self) -> DiagnosticFrame:
        """Describe the diagnostic for rendering."""


@dataclass(eq=False)
class UnfinishedString(SyntaxDiagnostic):
    range: Range

    def to_frame(self) -> DiagnosticFrame:
        return DiagnosticFrame(
            code=1,
            severity=Severity.ERROR,
            title="Unfinished String",
            hints=[
                "You need to close the string with another quote, take a look at the beggining"
            ],
            positions=_here(self.range, "The string starts in this position!"),
        )


@dataclass(eq=False)
class IgnoreRestShouldBeOnTheEnd(SyntaxDiagnostic):
    range: Range

    def to_frame(self) -> DiagnosticFrame:
        return DiagnosticFrame(
            code=2,
            severity=Severity.ERROR,
            title="Invalid position of the '..' operator",
            hints=["Put it on the end of the clause or remove it."],
            positions=_here(self.range, "It should not be in the middle of this!"),
        )


@dataclass(eq=False)
class UnusedDocString(SyntaxDiagnostic):
    range: Range

    def severity(self) -> Severity:
        return Severity.WARNING

    def to_frame(self) -> DiagnosticFrame:
        return DiagnosticFrame(
            code=3,
            severity=Severity.WARNING,
            title="This entire documentation comment is in a invalid position",
            hints=["Take a look at the rules for doc comments in guide/doc_strings.md"],
            positions=[
                Marker(
                    self.range,
                    Color.FOR,
                    "Remove the entire comment or transform it in a simple comment with '//'",
                )
            ],
        )


@dataclass(eq=False)
class UnfinishedChar(SyntaxDiagnostic):
    range: Range

    def to_frame(self) -> DiagnosticFrame:
        return DiagnosticFrame(
            code=4,
            severity=Severity.ERROR,
            title="Unfinished Char",
            hints=[
                "You need to close the character with another quote, take a look at the beginning"
            ],
            positions=_here(self.range, "The char starts in this position!"),
        )


@dataclass(eq=False)
class LowerCasedDefinition(SyntaxDiagnostic):
    name: str
    range: Range

    def to_frame(self) -> DiagnosticFrame:
        fixed = self.name[:1].upper() + self.name[1:]
        return DiagnosticFrame(
            code=5,
            severity=Severity.ERROR,
            title="The definition name must be capitalized.",
            hints=[f"Change it to '{fixed}'"],
            positions=_here(self.range, "Wrong case for this name"),
        )


@dataclass(eq=False)
class NotAClauseOfDef(SyntaxDiagnostic):
    definition: Range
    clause: Range

    @property
    def _main_range(self) -> Range:
        return self.definition

    def to_frame(self) -> DiagnosticFrame:
        return DiagnosticFrame(
            code=6,
            severity=Severity.ERROR,
            title="Unexpected capitalized name that does not refer to the definition",
            hints=["If you indend to make another clause, just replace the name in red."],
            positions=[
                Marker(self.clause, Color.FST, "This is the unexpected token", main=True),
                Marker(
                    self.definition,
                    Color.SND,
                    "This is the definition. All clauses should use the same name.",
                    main=False,
                ),
            ],
        )


@dataclass(eq=False)
class UnfinishedComment(SyntaxDiagnostic):
    range: Range

    def to_frame(self) -> DiagnosticFrame:
        return DiagnosticFrame(
            code=7,
            severity=Severity.ERROR,
            title="Unfinished Comment",
            hints=["You need to close the string with '*/', take a look at the beggining"],
            positions=_here(self.range, "The comment starts in this position!"),
        )


@dataclass(eq=False)
class InvalidEscapeSequence(SyntaxDiagnostic):
    kind: EncodeSequence
    range: Range

    def to_frame(self) -> DiagnosticFrame:
        return DiagnosticFrame(
            code=8,
            severity=Severity.ERROR,
            title=f"The {encode_name(self.kind)} character sequence is invalid!",
            positions=_here(self.range),
        )


@dataclass(eq=False)
class InvalidNumberRepresentation(SyntaxDiagnostic):
    kind: EncodeSequence
    range: Range

    def to_frame(self) -> DiagnosticFrame:
        return DiagnosticFrame(
            code=9,
            severity=Severity.ERROR,
            title=f"The {encode_name(self.kind)} number sequence is invalid!",
            positions=_here(self.range),
        )


@dataclass(eq=False)
class UnexpectedChar(SyntaxDiagnostic):
    char: str
    range: Range

    def to_frame(self) -> DiagnosticFrame:
        return DiagnosticFrame(
            code=10,
            severity=Severity.ERROR,
            title=f"The char '{self.char}' is invalid",
            hints=["Try to remove it!"],
            positions=_here(self.range),
        )


@dataclass(eq=False)
class UnexpectedToken(SyntaxDiagnostic):
    token: Token
    range: Range
    expected: tuple[Token, ...] = ()

    def to_frame(self) -> DiagnosticFrame:
        if self.token.kind is TokenKind.EOF:
            return DiagnosticFrame(
                code=11,
                severity=Severity.ERROR,
                title="Unexpected end of file.",
                positions=_here(self.range, no_code=True),
            )
        if self.token.kind is TokenKind.COMMENT:
            return DiagnosticFrame(
                code=12,
                severity=Severity.ERROR,
                title="Unexpected documentation comment.",
                hints=["Remove this documentation comment or place it in a correct place."],
                positions=_here(self.range),
            )
        return DiagnosticFrame(
            code=13,
            severity=Severity.ERROR,
            title=f"Unexpected token '{self.token}'.",
            positions=_here(self.range),
        )


@dataclass(eq=False)
class Unclosed(SyntaxDiagnostic):
    range: Range

    def to_frame(self) -> DiagnosticFrame:
        return DiagnosticFrame(
            code=14,
            severity=Severity.ERROR,
            title="Unclosed parenthesis.",
            positions=_here(self.range, "Starts here! try to add another one"),
        )


@dataclass(eq=False)
class CannotUseUse(SyntaxDiagnostic):
    range: Range

    def to_frame(self) -> DiagnosticFrame:
        return DiagnosticFrame(
            code=15,
            severity=Severity.ERROR,
            title="Can only use the 'use' statement in the beggining of the file",
            positions=_here(self.range, "Move it to the beggining"),
        )


@dataclass(eq=False)
class ImportsCannotHaveAlias(SyntaxDiagnostic):
    range: Range

    def to_frame(self) -> DiagnosticFrame:
        return DiagnosticFrame(
            code=16,
            severity=Severity.ERROR,
            title="The upper cased name cannot have an alias",
            positions=_here(self.range, "Use the entire name here!"),
        )


@dataclass(eq=False)
class InvalidNumberType(SyntaxDiagnostic):
    type_name: str
    range: Range

    def to_frame(self) -> DiagnosticFrame:
        return DiagnosticFrame(
            code=17,
            severity=Severity.ERROR,
            title=f"The {self.type_name} number type is invalid",
            positions=_here(self.range),
        )


@dataclass(eq=False)
class MatchScrutineeShouldBeAName(SyntaxDiagnostic):
    range: Range

    def to_frame(self) -> DiagnosticFrame:
        return DiagnosticFrame(
            code=18,
            severity=Severity.ERROR,
            title="Match scrutinee should be a identifier!",
            hints=["Use the '=' inside the scrutinee! More details on <website>"],
            positions=_here(self.range),
        )