"""Parsing of atoms, applications, arrows and annotations."""

from __future__ import annotations

from typing import Optional

from kindparse.diagnostic import UnusedDocString
from kindparse.span import Range
from kindparse.state import ParserState
from kindparse.tokens import Token, TokenKind
from kindparse.tree import (
    All,
    Ann,
    App,
    AppBinding,
    Binary,
    Binding,
    Constr,
    Expr,
    Hole,
    Ident,
    ListExpr,
    Lit,
    Literal,
    LiteralKind,
    NamedBinding,
    Operator,
    PositionalBinding,
    QualifiedIdent,
    Var,
)

_OPERATORS = {
    TokenKind.PLUS: Operator.ADD,
    TokenKind.MINUS: Operator.SUB,
    TokenKind.STAR: Operator.MUL,
    TokenKind.SLASH: Operator.DIV,
    TokenKind.PERCENT: Operator.MOD,
    TokenKind.AMPERSAND: Operator.AND,
    TokenKind.BAR: Operator.OR,
    TokenKind.HAT: Operator.XOR,
    TokenKind.GREATER_GREATER: Operator.SHR,
    TokenKind.LESS_LESS: Operator.SHL,
    TokenKind.LESS: Operator.LTN,
    TokenKind.LESS_EQ: Operator.LTE,
    TokenKind.EQ_EQ: Operator.EQL,
    TokenKind.GREATER_EQ: Operator.GTE,
    TokenKind.GREATER: Operator.GTN,
    TokenKind.BANG_EQ: Operator.NEQ,
}

_UPPER_LITERALS = {
    "Type": LiteralKind.TYPE,
    "Data.U60": LiteralKind.NUM_TYPE_U60,
    "Data.F60": LiteralKind.NUM_TYPE_F60,
}

_VALUE_LITERALS = {
    TokenKind.NUM60: LiteralKind.NUM_U60,
    TokenKind.NAT: LiteralKind.NAT,
    TokenKind.NUM120: LiteralKind.NUM_U120,
    TokenKind.CHAR: LiteralKind.CHAR,
    TokenKind.STR: LiteralKind.STRING,
}


class TermParser(ParserState):
    """Parser for the term layer of expressions.

    Nested full expressions go through :meth:`parse_expr`, which here only
    covers annotations; richer parsers override it with the whole grammar.
    """

    # Entry point for nested expressions

    def parse_expr(self, multiline: bool) -> Expr:
        """Parse an expression; this layer knows only annotated terms."""
        self._ignore_docs()
        return self.parse_ann(multiline)

    # Identifiers

    def parse_id(self) -> Ident:
        rng = self.range()
        name = self.eat(lambda t: t.value if t.is_lower_id() else None)
        return Ident(name, rng)

    def parse_any_id(self) -> Ident:
        rng = self.range()

        def pick(token: Token) -> Optional[str]:
            if token.is_lower_id():
                return token.value
            if token.is_upper_id() and token.aux is None:
                return token.value
            if token.is_num60():
                return str(token.value)
            return None

        return Ident(self.eat(pick), rng)

    def parse_upper_id(self) -> QualifiedIdent:
        rng = self.range()
        root, aux = self.eat(lambda t: (t.value, t.aux) if t.is_upper_id() else None)
        return QualifiedIdent(root, aux, rng)

    # Helpers shared with richer parsers

    def _ignore_docs(self) -> None:
        start = self.range()
        last = start
        unused = False
        while self.get().kind is TokenKind.COMMENT:
            last = self.range()
            self.advance()
            unused = True
        if unused:
            self.send_diagnostic(UnusedDocString(start.mix(last)))

    def _is_operator(self) -> bool:
        return self.peek(1).kind in _OPERATORS

    def _eat_operator(self) -> Operator:
        return self.eat(lambda t: _OPERATORS.get(t.kind))

    def _is_named_parameter(self) -> bool:
        return (
            self.get().kind is TokenKind.LPAR
            and self.peek(1).is_lower_id()
            and self.peek(2).kind is TokenKind.EQ
        )

    def _parse_num_lit(self) -> int:
        self._ignore_docs()
        token = self.get()
        if token.is_num60():
            self.advance()
            return token.value
        self.fail([])

    def _parse_hole(self) -> Hole:
        rng = self.range()
        self.advance()
        return Hole(rng)

    # Atoms

    def _parse_var(self) -> Var:
        name = self.parse_id()
        return Var(name, name.range)

    def _parse_single_upper(self) -> Expr:
        ident = self.parse_upper_id()
        kind = _UPPER_LITERALS.get(str(ident))
        if kind is not None:
            return Lit(Literal(kind), ident.range)
        return Constr(ident, [], ident.range)

    def _parse_data(self, multiline: bool) -> Expr:
        ident = self.parse_upper_id()
        kind = _UPPER_LITERALS.get(str(ident))
        if kind is not None:
            return Lit(Literal(kind), ident.range)
        end, spine = self._parse_call_tail(ident.range, multiline)
        return Constr(ident, spine, ident.range.mix(end))

    def _parse_value_literal(self, kind: LiteralKind, value: object) -> Lit:
        rng = self.range()
        self.advance()
        return Lit(Literal(kind, value), rng)

    def _parse_help(self, name: str) -> Lit:
        rng = self.range()
        self.advance()
        return Lit(Literal(LiteralKind.HELP, Ident(name, rng)), rng)

    def _parse_binary_op(self) -> Binary:
        start = self.range()
        self.advance()  # '('
        op = self._eat_operator()
        fst = self.parse_atom()
        snd = self.parse_atom()
        end = self.range()
        self.eat_closing_keyword(TokenKind.RPAR, start)
        return Binary(op, fst, snd, start.mix(end))

    def _parse_list(self) -> ListExpr:
        start = self.range()
        self.advance()  # '['

        if self.check_actual(TokenKind.RBRACKET):
            _, end = self.advance()
            return ListExpr([], end.mix(start))

        args: list[Expr] = [self.parse_atom()]
        with_comma: Optional[bool] = None

        while True:
            ate_comma = self.check_and_eat(TokenKind.COMMA)
            if with_comma is None:
                with_comma = ate_comma
            if with_comma:
                self.check_and_eat(TokenKind.COMMA)
                item = self.try_single(lambda p: p.parse_expr(False))
            else:
                item = self.try_single(lambda p: p.parse_atom())
            if item is None:
                break
            args.append(item)

        _, end = self.eat_variant(TokenKind.RBRACKET)
        return ListExpr(args, start.mix(end))

    def _parse_paren(self) -> Expr:
        if self._is_operator():
            return self._parse_binary_op()
        start = self.range()
        self.advance()  # '('
        expr = self.parse_expr(True)
        end = self.range()
        self.eat_closing_keyword(TokenKind.RPAR, start)
        expr.range = start.mix(end)
        return expr

    def parse_atom(self) -> Expr:
        self._ignore_docs()
        token = self.get()
        kind = token.kind
        if kind is TokenKind.UPPER_ID:
            return self._parse_single_upper()
        if kind is TokenKind.LOWER_ID:
            return self._parse_var()
        if kind in _VALUE_LITERALS:
            return self._parse_value_literal(_VALUE_LITERALS[kind], token.value)
        if kind is TokenKind.HELP:
            return self._parse_help(token.value)
        if kind is TokenKind.LBRACKET:
            return self._parse_list()
        if kind is TokenKind.LPAR:
            return self._parse_paren()
        if kind is TokenKind.HOLE:
            return self._parse_hole()
        self.fail([Token(TokenKind.LOWER_ID, "")])

    # Bindings and applications

    def _parse_binding(self) -> Binding:
        self._ignore_docs()
        if self._is_named_parameter():
            start = self.range()
            self.advance()  # '('
            name = self.parse_id()
            self.advance()  # '='
            expr = self.parse_expr(True)
            end = self.range()
            self.eat_closing_keyword(TokenKind.RPAR, start)
            return NamedBinding(start.mix(end), name, expr)
        return PositionalBinding(self.parse_atom())

    def _parse_app_binding(self) -> AppBinding:
        self._ignore_docs()
        if self.check_and_eat(TokenKind.TILDE):
            start = self.range()
            self.eat_variant(TokenKind.LPAR)
            expr = self.parse_expr(True)
            self.eat_closing_keyword(TokenKind.RPAR, start)
            return AppBinding(expr, True)
        return AppBinding(self.parse_atom(), False)

    def _continues_call(self, multiline: bool) -> bool:
        return (multiline or not self.is_linebreak()) and not self.get().is_eof()

    def _parse_call_tail(self, start: Range, multiline: bool) -> tuple[Range, list[Binding]]:
        spine: list[Binding] = []
        end = start
        while self._continues_call(multiline):
            binding = self.try_single(lambda p: p._parse_binding())
            if binding is None:
                break
            end = binding.range
            spine.append(binding)
        return end, spine

    def parse_call(self, multiline: bool) -> Expr:
        if self.get().is_upper_id():
            return self._parse_data(multiline)
        fun = self.parse_atom()
        start = fun.range
        end = start
        args: list[AppBinding] = []
        while self._continues_call(multiline):
            binding = self.try_single(lambda p: p._parse_app_binding())
            if binding is None:
                break
            end = binding.data.range
            args.append(binding)
        if not args:
            return fun
        return App(fun, args, start.mix(end))

    # Arrows and annotations

    def parse_arrow(self, multiline: bool) -> Expr:
        expr = self.parse_call(multiline)
        while self.check_and_eat(TokenKind.RIGHT_ARROW):
            body = self.parse_expr(False)
            expr = All(None, expr, body, False, expr.range.mix(body.range))
        return expr

    def parse_ann(self, multiline: bool) -> Expr:
        expr = self.parse_arrow(multiline)
        if self.check_and_eat(TokenKind.COLON_COLON):
            typ = self.parse_arrow(multiline)
            return Ann(expr, typ, expr.range.mix(typ.range))
        return expr