"""Parsing of whole files: definitions, type declarations, attributes and uses."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from kindparse.diagnostic import (
    CannotUseUse,
    ImportsCannotHaveAlias,
    LowerCasedDefinition,
    NotAClauseOfDef,
    SyntaxDiagnostic,
)
from kindparse.expressions import ExprParser
from kindparse.patterns import PatParser
from kindparse.span import Range
from kindparse.tokens import Token, TokenKind
from kindparse.tree import (
    Argument,
    AttrIdent,
    AttrList,
    AttrNumber,
    AttrString,
    Attribute,
    AttributeStyle,
    Constructor,
    Entry,
    Expr,
    Hole,
    Ident,
    Module,
    Pat,
    PatVar,
    RecordDecl,
    RecordField,
    Rule,
    SumTypeDecl,
    TopLevel,
)

_ENTRY_CONTINUATIONS = frozenset(
    {
        TokenKind.COLON,
        TokenKind.LPAR,
        TokenKind.LBRACE,
        TokenKind.LESS,
        TokenKind.MINUS,
        TokenKind.PLUS,
    }
)

_BINDING_CLOSERS = {
    TokenKind.LPAR: TokenKind.RPAR,
    TokenKind.LESS: TokenKind.GREATER,
}


@dataclass
class ParseResult:
    """Outcome of parsing a file.

    ``failed`` is set when the parser itself reported a diagnostic; lexical
    diagnostics are collected in ``diagnostics`` without setting it.
    """

    module: Module
    failed: bool
    diagnostics: list[SyntaxDiagnostic] = field(default_factory=list)


class Parser(ExprParser, PatParser):
    """Parser for whole files of the language."""

    # Lookahead checks

    def _is_top_level_entry_continuation(self) -> bool:
        return self.peek(1).kind in _ENTRY_CONTINUATIONS

    def _is_top_level_entry(self) -> bool:
        return self.get().is_upper_id() and self._is_top_level_entry_continuation()

    def _is_safe_level_start(self) -> bool:
        return (
            self.check_actual_id("type")
            or self.check_actual_id("record")
            or self.check_actual(TokenKind.HASH)
            or self.get().is_doc()
        )

    # Attributes

    def _parse_attr_list_items(self) -> list[AttributeStyle]:
        items: list[AttributeStyle] = []
        while (item := self.try_single(lambda p: p._parse_attr_style())) is not None:
            items.append(item)
            if not self.check_and_eat(TokenKind.COMMA):
                break
        return items

    def _parse_attr_args(self) -> tuple[list[AttributeStyle], Range]:
        args: list[AttributeStyle] = []
        rng = self.range()
        if self.check_and_eat(TokenKind.LBRACKET):
            args = self._parse_attr_list_items()
            start = rng
            rng = self.range()
            self.eat_closing_keyword(TokenKind.RBRACKET, start)
        return args, rng

    def _parse_attr_style(self) -> AttributeStyle:
        token = self.get()
        rng = self.range()
        if token.is_lower_id() or (token.is_upper_id() and token.aux is None):
            return AttrIdent(rng, self.parse_any_id())
        if token.is_num60():
            self.advance()
            return AttrNumber(rng, token.value)
        if token.is_str():
            self.advance()
            return AttrString(rng, token.value)
        if token.kind is TokenKind.LBRACKET:
            self.advance()
            items = self._parse_attr_list_items()
            end = self.range()
            self.eat_closing_keyword(TokenKind.RBRACKET, rng)
            return AttrList(rng.mix(end), items)
        self.fail([])

    def _parse_attr(self) -> Attribute:
        start = self.range()
        self.eat_variant(TokenKind.HASH)
        name = self.parse_id()
        args, last = self._parse_attr_args()
        value: Optional[AttributeStyle] = None
        if self.check_and_eat(TokenKind.EQ):
            value = self._parse_attr_style()
            last = value.range
        return Attribute(name, args, value, start.mix(last))

    def parse_attrs(self) -> list[Attribute]:
        """Parse the attributes (``#name[args] = value``) before an item."""
        attrs: list[Attribute] = []
        while (attr := self.try_single(lambda p: p._parse_attr())) is not None:
            attrs.append(attr)
        return attrs

    # Arguments, docs and rules

    def _parse_argument(self) -> Argument:
        start = self.range()
        erased = self.check_and_eat(TokenKind.MINUS)
        keep = self.check_and_eat(TokenKind.PLUS)

        closer = _BINDING_CLOSERS.get(self.get().kind)
        if closer is None:
            self.fail(
                [
                    Token(TokenKind.PLUS),
                    Token(TokenKind.MINUS),
                    Token(TokenKind.LPAR),
                    Token(TokenKind.LESS),
                ]
            )
        self.advance()

        hidden = closer is TokenKind.GREATER
        name = self.parse_id()
        typ = self.parse_expr(False) if self.check_and_eat(TokenKind.COLON) else None
        if hidden:
            erased = not keep

        _, end = self.eat_variant(closer)
        return Argument(hidden, erased, name, typ, start.mix(end))

    def _parse_arguments(self) -> list[Argument]:
        args: list[Argument] = []
        while (arg := self.try_single(lambda p: p._parse_argument())) is not None:
            args.append(arg)
        return args

    def _parse_docs(self) -> list[str]:
        docs: list[str] = []
        while self.get().kind is TokenKind.COMMENT:
            docs.append(self.get().value)
            self.advance()
        return docs

    def _parse_rule(self, name: str) -> Rule:
        start = self.range()
        token = self.get()
        if not token.is_upper_id():
            self.fail([])
        spelled = token.value if token.aux is None else f"{token.value}/{token.aux}"
        if spelled != name:
            self.fail([])
        ident = self.parse_upper_id()

        pats: list[Pat] = []
        while not self.check_actual(TokenKind.EQ) and not self.get().is_eof():
            pats.append(self.parse_pat())
        self.eat_variant(TokenKind.EQ)
        body = self.parse_expr(False)
        return Rule(ident, pats, body, start.mix(body.range))

    def _parse_rules(self, name: str) -> list[Rule]:
        rules: list[Rule] = []
        while (rule := self.try_single(lambda p: p._parse_rule(name))) is not None:
            rules.append(rule)
        return rules

    # Definitions

    def parse_entry(self, docs: list[str], attrs: list[Attribute]) -> Entry:
        """Parse a definition: its name, arguments, type and rules."""
        start = self.range()

        if self.get().is_lower_id() and self._is_top_level_entry_continuation():
            ident = self.parse_id()
            raise LowerCasedDefinition(ident.name, ident.range)

        if not self._is_top_level_entry():
            self.fail([])

        ident = self.parse_upper_id()
        args = self._parse_arguments()

        if not self.check_actual(TokenKind.COLON) and not self.check_actual(TokenKind.LBRACE):
            self.fail([])

        typ: Expr
        if self.check_and_eat(TokenKind.COLON):
            typ = self.parse_expr(False)
        else:
            typ = Hole(start)

        rules: list[Rule] = []
        if self.check_actual(TokenKind.LBRACE):
            start = self.range()
            self.eat_variant(TokenKind.LBRACE)
            body = self.parse_expr(True)
            end = self.range()
            self.eat_closing_keyword(TokenKind.RBRACE, start)
            pats: list[Pat] = [PatVar(arg.name, arg.range) for arg in args]
            rules.append(Rule(ident, pats, body, end))

        rules.extend(self._parse_rules(str(ident)))
        end = rules[-1].range if rules else typ.range

        if self.get().is_upper_id() and not self._is_top_level_entry_continuation():
            raise NotAClauseOfDef(ident.range, self.range())

        return Entry(ident, docs, args, typ, rules, attrs, start.mix(end))

    # Type declarations

    def parse_constructor(self) -> Constructor:
        """Parse one constructor of a sum type."""
        attrs = self.parse_attrs()
        docs = self._parse_docs()
        name = self.parse_any_id()
        args = self._parse_arguments()
        typ = self.parse_expr(False) if self.check_and_eat(TokenKind.COLON) else None
        self.check_and_eat(TokenKind.SEMI)
        return Constructor(name, attrs, docs, args, typ)

    def parse_sum_type_def(self, docs: list[str], attrs: list[Attribute]) -> SumTypeDecl:
        """Parse ``type Name params [~ indices] { constructors }``."""
        self.eat_id("type")
        name = self.parse_upper_id()
        parameters = self._parse_arguments()
        indices = self._parse_arguments() if self.check_and_eat(TokenKind.TILDE) else []

        rng = self.range()
        self.eat_variant(TokenKind.LBRACE)

        constructors: list[Constructor] = []
        while not self.check_actual(TokenKind.RBRACE) and not self.get().is_eof():
            constructors.append(self.parse_constructor())

        self.eat_closing_keyword(TokenKind.RBRACE, rng)
        return SumTypeDecl(name, docs, parameters, indices, constructors, attrs)

    def parse_record_def(self, docs: list[str], attrs: list[Attribute]) -> RecordDecl:
        """Parse ``record Name params { [constructor c,] fields }``."""
        self.eat_id("record")
        name = self.parse_upper_id()
        parameters = self._parse_arguments()

        rng = self.range()
        self.eat_variant(TokenKind.LBRACE)

        cons_attrs = self.parse_attrs()

        if self.check_actual_id("constructor"):
            self.eat_id("constructor")
            constructor = self.parse_id()
            self.check_and_eat(TokenKind.COMMA)
        else:
            constructor = Ident("new", name.range)

        fields: list[RecordField] = []
        while not self.check_actual(TokenKind.RBRACE) and not self.get().is_eof():
            field_docs = self._parse_docs()
            field_name = self.parse_id()
            self.eat_variant(TokenKind.COLON)
            typ = self.parse_expr(False)
            fields.append(RecordField(field_name, field_docs, typ))

        self.eat_closing_keyword(TokenKind.RBRACE, rng)
        return RecordDecl(name, docs, constructor, parameters, fields, attrs, cons_attrs)

    # Files

    def _parse_top_level(self) -> TopLevel:
        docs = self._parse_docs()
        attrs = self.parse_attrs()
        if self.check_actual_id("type"):
            return self.parse_sum_type_def(docs, attrs)
        if self.check_actual_id("record"):
            return self.parse_record_def(docs, attrs)
        if self._is_top_level_entry_continuation():
            return self.parse_entry(docs, attrs)
        if self.check_actual_id("use"):
            raise CannotUseUse(self.range())
        self.fail([])

    def _parse_use(self) -> tuple[str, str]:
        self.eat_id("use")
        origin = self.parse_upper_id()
        self.eat_id("as")
        alias = self.parse_upper_id()
        if origin.aux is not None:
            raise ImportsCannotHaveAlias(origin.range)
        if alias.aux is not None:
            raise ImportsCannotHaveAlias(alias.range)
        return str(origin), str(alias)

    def parse_module(self) -> Module:
        """Parse a whole file, recovering after errors at the next safe item."""
        module = Module()

        while self.check_actual_id("use"):
            try:
                origin, alias = self._parse_use()
            except SyntaxDiagnostic as err:
                self.send_diagnostic(err)
                break
            module.uses[alias] = origin

        while not self.get().is_eof():
            try:
                module.entries.append(self._parse_top_level())
            except SyntaxDiagnostic as err:
                self.advance()
                self.send_diagnostic(err)
                while (
                    not self._is_safe_level_start() or not self.is_linebreak()
                ) and not self.get().is_eof():
                    self.advance()

        try:
            self.eat_variant(TokenKind.EOF)
        except SyntaxDiagnostic as err:
            self.send_diagnostic(err)

        return module


def parse_book(text: str, ctx_id: int = 0) -> ParseResult:
    """Parse the source ``text`` of one file in syntax context ``ctx_id``."""
    parser = Parser(text, ctx_id)
    module = parser.parse_module()
    return ParseResult(module, parser.failed, parser.diagnostics)