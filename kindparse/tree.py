"""Concrete syntax tree produced by the parser."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Optional, Union

from kindparse.span import Range


@dataclass
class Ident:
    """A plain (lower case) identifier with its source range."""

    name: str
    range: Range

    def __str__(self) -> str:
        return self.name


@dataclass
class QualifiedIdent:
    """An upper case identifier, optionally with an auxiliary part after '/'."""

    root: str
    aux: Optional[str]
    range: Range

    def __str__(self) -> str:
        return self.root if self.aux is None else f"{self.root}/{self.aux}"


class Operator(enum.Enum):
    """Binary operators; each value is the operator's spelling."""

    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    MOD = "%"
    AND = "&"
    OR = "|"
    XOR = "^"
    SHR = ">>"
    SHL = "<<"
    LTN = "<"
    LTE = "<="
    EQL = "=="
    GTE = ">="
    GTN = ">"
    NEQ = "!="


class LiteralKind(enum.Enum):
    TYPE = "type"
    NUM_TYPE_U60 = "u60 type"
    NUM_TYPE_F60 = "f60 type"
    NUM_U60 = "u60"
    NUM_U120 = "u120"
    NAT = "nat"
    CHAR = "char"
    STRING = "string"
    HELP = "help"


@dataclass
class Literal:
    """A literal; ``value`` is absent for the type literals."""

    kind: LiteralKind
    value: object = None


# Expressions


class Expr:
    """Base of every expression node. Each node carries a ``range``."""

    range: Range


@dataclass
class Var(Expr):
    name: Ident
    range: Range


@dataclass
class Constr(Expr):
    name: QualifiedIdent
    args: list[Binding]
    range: Range


@dataclass
class Lit(Expr):
    lit: Literal
    range: Range


@dataclass
class App(Expr):
    fun: Expr
    args: list[AppBinding]
    range: Range


@dataclass
class Lambda(Expr):
    param: Ident
    typ: Optional[Expr]
    body: Expr
    erased: bool
    range: Range


@dataclass
class All(Expr):
    param: Optional[Ident]
    typ: Expr
    body: Expr
    erased: bool
    range: Range


@dataclass
class Sigma(Expr):
    param: Optional[Ident]
    fst: Expr
    snd: Expr
    range: Range


@dataclass
class Ann(Expr):
    val: Expr
    typ: Expr
    range: Range


@dataclass
class Binary(Expr):
    op: Operator
    fst: Expr
    snd: Expr
    range: Range


@dataclass
class ListExpr(Expr):
    args: list[Expr]
    range: Range


@dataclass
class Hole(Expr):
    range: Range


@dataclass
class Pair(Expr):
    fst: Expr
    snd: Expr
    range: Range


@dataclass
class Let(Expr):
    name: Destruct
    val: Expr
    next: Expr
    range: Range


@dataclass
class Open(Expr):
    type_name: QualifiedIdent
    var_name: Ident
    motive: Optional[Expr]
    next: Expr
    range: Range


@dataclass
class Do(Expr):
    typ: QualifiedIdent
    sttm: Sttm
    range: Range


@dataclass
class Match(Expr):
    typ: QualifiedIdent
    scrutinee: Ident
    with_vars: list[tuple[Ident, Optional[Expr]]]
    value: Optional[Expr]
    cases: list[Case]
    motive: Optional[Expr]
    range: Range


@dataclass
class If(Expr):
    cond: Expr
    then_: Expr
    else_: Expr
    range: Range


@dataclass
class Subst(Expr):
    name: Ident
    redx: int
    indx: int
    expr: Expr
    range: Range


@dataclass
class SeqGet:
    """Read the selected field."""


@dataclass
class SeqSet:
    """Replace the selected field with ``expr``."""

    expr: Expr


@dataclass
class SeqMut:
    """Update the selected field with the function ``expr``."""

    expr: Expr


SeqOperation = Union[SeqGet, SeqSet, SeqMut]


@dataclass
class SeqRecord(Expr):
    typ: Expr
    expr: Expr
    fields: list[Ident]
    operation: SeqOperation
    range: Range


# Bindings of applications and constructors


@dataclass
class NamedBinding:
    range: Range
    name: Ident
    expr: Expr


@dataclass
class PositionalBinding:
    expr: Expr

    @property
    def range(self) -> Range:
        return self.expr.range


Binding = Union[NamedBinding, PositionalBinding]


@dataclass
class AppBinding:
    data: Expr
    erased: bool = False


# Destructuring and match cases


@dataclass
class DestructIdent:
    name: Ident

    @property
    def range(self) -> Range:
        return self.name.range


@dataclass
class FieldBinding:
    name: Ident


@dataclass
class RenamedBinding:
    name: Ident
    renamed: Ident


CaseBinding = Union[FieldBinding, RenamedBinding]


@dataclass
class DestructPattern:
    range: Range
    typ: QualifiedIdent
    bindings: list[CaseBinding]
    ignore_rest: Optional[Range]


Destruct = Union[DestructIdent, DestructPattern]


@dataclass
class Case:
    constructor: Ident
    bindings: list[CaseBinding]
    value: Expr
    ignore_rest: Optional[Range]


# Statements of do blocks


@dataclass
class Ask:
    name: Destruct
    expr: Expr
    next: Sttm
    range: Range


@dataclass
class LetSttm:
    name: Destruct
    val: Expr
    next: Sttm
    range: Range


@dataclass
class Return:
    expr: Expr
    range: Range


@dataclass
class RetExpr:
    expr: Expr
    range: Range


@dataclass
class ExprSttm:
    expr: Expr
    next: Sttm
    range: Range


Sttm = Union[Ask, LetSttm, Return, RetExpr, ExprSttm]


# Patterns


class Pat:
    """Base of every pattern node. Each node carries a ``range``."""

    range: Range


@dataclass
class PatVar(Pat):
    name: Ident
    range: Range


@dataclass
class PatApp(Pat):
    name: QualifiedIdent
    args: list[Pat]
    range: Range


@dataclass
class PatU60(Pat):
    value: int
    range: Range


@dataclass
class PatU120(Pat):
    value: int
    range: Range


@dataclass
class PatChar(Pat):
    value: str
    range: Range


@dataclass
class PatStr(Pat):
    value: str
    range: Range


@dataclass
class PatList(Pat):
    items: list[Pat]
    range: Range


@dataclass
class PatHole(Pat):
    range: Range


# Top level


@dataclass
class Argument:
    hidden: bool
    erased: bool
    name: Ident
    typ: Optional[Expr]
    range: Range


@dataclass
class Rule:
    name: QualifiedIdent
    pats: list[Pat]
    body: Expr
    range: Range


@dataclass
class AttrIdent:
    range: Range
    ident: Ident


@dataclass
class AttrNumber:
    range: Range
    value: int


@dataclass
class AttrString:
    range: Range
    value: str


@dataclass
class AttrList:
    range: Range
    items: list[AttributeStyle]


AttributeStyle = Union[AttrIdent, AttrNumber, AttrString, AttrList]


@dataclass
class Attribute:
    name: Ident
    args: list[AttributeStyle]
    value: Optional[AttributeStyle]
    range: Range


@dataclass
class Entry:
    name: QualifiedIdent
    docs: list[str]
    args: list[Argument]
    typ: Expr
    rules: list[Rule]
    attrs: list[Attribute]
    range: Range
    generated_by: Optional[str] = None


@dataclass
class Constructor:
    name: Ident
    attrs: list[Attribute]
    docs: list[str]
    args: list[Argument]
    typ: Optional[Expr]


@dataclass
class SumTypeDecl:
    name: QualifiedIdent
    docs: list[str]
    parameters: list[Argument]
    indices: list[Argument]
    constructors: list[Constructor]
    attrs: list[Attribute]


@dataclass
class RecordField:
    name: Ident
    docs: list[str]
    typ: Expr


@dataclass
class RecordDecl:
    name: QualifiedIdent
    docs: list[str]
    constructor: Ident
    parameters: list[Argument]
    fields: list[RecordField]
    attrs: list[Attribute]
    cons_attrs: list[Attribute]


TopLevel = Union[SumTypeDecl, RecordDecl, Entry]


@dataclass
class Module:
    """A parsed file: its top level items and its ``use`` aliases (alias -> origin)."""

    entries: list[TopLevel] = field(default_factory=list)
    uses: dict[str, str] = field(default_factory=dict)