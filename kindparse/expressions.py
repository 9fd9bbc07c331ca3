"""Parsing of full expressions and of the statements of do blocks."""

from __future__ import annotations

from typing import Optional

from kindparse.diagnostic import IgnoreRestShouldBeOnTheEnd, MatchScrutineeShouldBeAName
from kindparse.span import Range
from kindparse.terms import TermParser
from kindparse.tokens import TokenKind
from kindparse.tree import (
    All,
    Ann,
    Ask,
    Case,
    CaseBinding,
    Destruct,
    DestructIdent,
    DestructPattern,
    Do,
    Expr,
    ExprSttm,
    FieldBinding,
    Ident,
    If,
    Lambda,
    Let,
    LetSttm,
    Match,
    Open,
    Pair,
    RenamedBinding,
    RetExpr,
    Return,
    SeqGet,
    SeqMut,
    SeqOperation,
    SeqRecord,
    SeqSet,
    Sigma,
    Sttm,
    Subst,
    Var,
)


class ExprParser(TermParser):
    """Parser for the whole expression grammar, including do notation."""

    # Lookahead checks

    def _is_pi_type(self) -> bool:
        return (
            self.get().kind is TokenKind.LPAR
            and self.peek(1).is_lower_id()
            and self.peek(2).kind is TokenKind.COLON
        )

    def _is_lambda(self) -> bool:
        return self.get().is_lower_id() and self.peek(1).kind is TokenKind.FAT_ARROW

    def _is_sigma_type(self) -> bool:
        return (
            self.get().kind is TokenKind.LBRACKET
            and self.peek(1).is_lower_id()
            and self.peek(2).kind is TokenKind.COLON
        )

    # Binders

    def _parse_lambda(self, erased: bool) -> Lambda:
        name_span = self.range()
        param = self.parse_id()
        self.advance()  # '=>'
        body = self.parse_expr(False)
        return Lambda(param, None, body, erased, name_span.mix(body.range))

    def _parse_pi_or_lambda(self, erased: bool) -> Expr:
        start = self.range()
        self.advance()  # '('
        param = self.parse_id()
        self.advance()  # ':'
        typ = self.parse_expr(False)
        par_range = self.range()
        self.eat_closing_keyword(TokenKind.RPAR, start)

        if self.check_and_eat(TokenKind.FAT_ARROW):
            body = self.parse_expr(False)
            return Lambda(param, typ, body, erased, start.mix(body.range))
        if self.check_and_eat(TokenKind.RIGHT_ARROW):
            body = self.parse_expr(False)
            return All(param, typ, body, erased, start.mix(body.range))
        val = Var(param, start.mix(par_range))
        return Ann(val, typ, start.mix(typ.range))

    def _parse_sigma_type(self) -> Sigma:
        start = self.range()
        self.advance()  # '['
        param = self.parse_id()
        self.advance()  # ':'
        fst = self.parse_expr(False)
        self.eat_closing_keyword(TokenKind.RBRACKET, start)
        self.eat_variant(TokenKind.RIGHT_ARROW)
        snd = self.parse_expr(False)
        return Sigma(param, fst, snd, start.mix(snd.range))

    def _parse_erased(self) -> Expr:
        self.advance()  # '~'
        if self._is_lambda():
            return self._parse_lambda(True)
        if self._is_pi_type():
            return self._parse_pi_or_lambda(True)
        self.fail([])

    # Destructuring

    def _parse_pat_destruct_bindings(
        self,
    ) -> tuple[Optional[Range], list[CaseBinding], Optional[Range]]:
        ignore_rest: Optional[Range] = None
        bindings: list[CaseBinding] = []
        rng: Optional[Range] = None
        while True:
            kind = self.get().kind
            if kind is TokenKind.LOWER_ID:
                rng = self.range()
                bindings.append(FieldBinding(self.parse_id()))
            elif kind is TokenKind.LPAR:
                start = self.range()
                self.advance()
                name = self.parse_id()
                self.eat_variant(TokenKind.EQ)
                renamed = self.parse_id()
                rng = self.range()
                self.eat_closing_keyword(TokenKind.RPAR, start)
                bindings.append(RenamedBinding(name, renamed))
            elif kind is TokenKind.DOT_DOT:
                ignore_rest = self.range()
                rng = ignore_rest
                self.advance()
                continue
            else:
                break
            if ignore_rest is not None:
                raise IgnoreRestShouldBeOnTheEnd(ignore_rest)
        return rng, bindings, ignore_rest

    def _parse_destruct(self) -> Destruct:
        if self.get().is_upper_id():
            upper = self.parse_upper_id()
            rng, bindings, ignore_rest = self._parse_pat_destruct_bindings()
            full = upper.range.mix(rng if rng is not None else upper.range)
            return DestructPattern(full, upper, bindings, ignore_rest)
        return DestructIdent(self.parse_id())

    def _parse_typed_ident(self) -> tuple[Ident, Optional[Expr]]:
        start = self.range()
        if self.check_and_eat(TokenKind.LPAR):
            name = self.parse_id()
            self.eat_variant(TokenKind.COLON)
            typ = self.parse_expr(True)
            self.eat_closing_keyword(TokenKind.RPAR, start)
            return name, typ
        return self.parse_id(), None

    # Keyword forms

    def _parse_substitution(self) -> Subst:
        start = self.range()
        self.advance()  # 'specialize'
        name = self.parse_id()
        self.eat_id("into")
        self.eat_variant(TokenKind.HASH)
        redx = self._parse_num_lit()
        self.eat_id("in")
        expr = self.parse_expr(False)
        return Subst(name, redx, 0, expr, start.mix(expr.range))

    def _parse_open(self) -> Open:
        start = self.range()
        self.advance()  # 'open'
        type_name = self.parse_upper_id()
        var_name = self.parse_id()

        def motive_of(parser: ExprParser) -> Expr:
            parser.eat_variant(TokenKind.COLON)
            return parser.parse_expr(False)

        motive = self.try_single(motive_of)
        self.check_and_eat(TokenKind.SEMI)
        nxt = self.parse_expr(False)
        return Open(type_name, var_name, motive, nxt, start.mix(nxt.range))

    def _parse_let(self) -> Let:
        start = self.range()
        self.advance()  # 'let'
        name = self._parse_destruct()
        self.eat_variant(TokenKind.EQ)
        val = self.parse_expr(False)
        self.check_and_eat(TokenKind.SEMI)
        nxt = self.parse_expr(False)
        return Let(name, val, nxt, start.mix(nxt.range))

    def _parse_sigma_pair(self) -> Pair:
        start = self.range()
        self.advance()  # '$'
        fst = self.parse_atom()
        snd = self.parse_atom()
        return Pair(fst, snd, start.mix(snd.range))

    def _parse_if(self) -> If:
        start = self.range()
        self.advance()  # 'if'
        cond = self.parse_expr(False)
        self.eat_variant(TokenKind.LBRACE)
        then_ = self.parse_expr(False)
        self.eat_variant(TokenKind.RBRACE)
        self.eat_id("else")
        self.eat_variant(TokenKind.LBRACE)
        else_ = self.parse_expr(False)
        _, end = self.eat_variant(TokenKind.RBRACE)
        return If(cond, then_, else_, start.mix(end))

    def _parse_match(self) -> Match:
        start = self.range()
        self.advance()  # 'match'
        typ = self.parse_upper_id()

        scrutinee_expr = self.parse_expr(False)
        if not isinstance(scrutinee_expr, Var):
            raise MatchScrutineeShouldBeAName(scrutinee_expr.range)
        scrutinee = scrutinee_expr.name

        value = self.parse_expr(False) if self.check_and_eat(TokenKind.EQ) else None

        with_vars: list[tuple[Ident, Optional[Expr]]] = []
        if self.check_and_eat(TokenKind.WITH):
            while (typed := self.try_single(lambda p: p._parse_typed_ident())) is not None:
                with_vars.append(typed)

        self.eat_variant(TokenKind.LBRACE)

        cases: list[Case] = []
        while not self.check_actual(TokenKind.RBRACE):
            constructor = self.parse_any_id()
            _, bindings, ignore_rest = self._parse_pat_destruct_bindings()
            self.eat_variant(TokenKind.FAT_ARROW)
            case_value = self.parse_expr(False)
            self.check_and_eat(TokenKind.SEMI)
            cases.append(Case(constructor, bindings, case_value, ignore_rest))

        _, end = self.eat_variant(TokenKind.RBRACE)

        motive: Optional[Expr] = None
        if self.check_and_eat(TokenKind.COLON):
            motive = self.parse_expr(False)
            end = motive.range

        return Match(typ, scrutinee, with_vars, value, cases, motive, start.mix(end))

    def parse_seq(self) -> SeqRecord:
        """Parse a record access or update: ``!Type expr .field ... [= e | @= f]``."""
        start = self.range()
        self.eat_variant(TokenKind.BANG)
        typ = self.parse_atom()
        expr = self.parse_atom()
        fields: list[Ident] = []
        end = self.range()
        while self.get().kind is TokenKind.DOT:
            self.advance()
            end = self.range()
            fields.append(self.parse_id())
        operation: SeqOperation
        if self.check_and_eat(TokenKind.EQ):
            value = self.parse_expr(False)
            end = value.range
            operation = SeqSet(value)
        elif self.check_and_eat(TokenKind.AT_EQ):
            value = self.parse_expr(False)
            end = value.range
            operation = SeqMut(value)
        else:
            operation = SeqGet()
        return SeqRecord(typ, expr, fields, operation, start.mix(end))

    # Do notation

    def _parse_ask(self) -> Ask:
        start = self.range()
        self.advance()  # 'ask'
        name = self._parse_destruct()
        self.eat_variant(TokenKind.EQ)
        expr = self.parse_expr(False)
        self.check_and_eat(TokenKind.SEMI)
        nxt = self.parse_sttm()
        return Ask(name, expr, nxt, start.mix(expr.range))

    def _parse_monadic_let(self) -> LetSttm:
        start = self.range()
        self.advance()  # 'let'
        destruct = self._parse_destruct()
        self.eat_variant(TokenKind.EQ)
        val = self.parse_expr(False)
        self.check_and_eat(TokenKind.SEMI)
        nxt = self.parse_sttm()
        return LetSttm(destruct, val, nxt, start.mix(destruct.range))

    def _parse_return(self) -> Return:
        start = self.range()
        self.advance()  # 'return'
        expr = self.parse_expr(False)
        self.check_and_eat(TokenKind.SEMI)
        return Return(expr, start.mix(expr.range))

    def parse_sttm(self) -> Sttm:
        """Parse the statements of a do block up to its closing brace."""
        start = self.range()
        if self.check_actual(TokenKind.ASK):
            return self._parse_ask()
        if self.check_actual(TokenKind.RETURN):
            return self._parse_return()
        if self.check_actual_id("let"):
            return self._parse_monadic_let()
        expr = self.parse_expr(False)
        if self.check_actual(TokenKind.RBRACE):
            return RetExpr(expr, start.mix(expr.range))
        self.check_and_eat(TokenKind.SEMI)
        nxt = self.parse_sttm()
        return ExprSttm(expr, nxt, start.mix(nxt.range))

    def _parse_do(self) -> Do:
        start = self.range()
        self.advance()  # 'do'
        typ = self.parse_upper_id()
        self.eat_variant(TokenKind.LBRACE)
        sttm = self.parse_sttm()
        _, end = self.eat_variant(TokenKind.RBRACE)
        return Do(typ, sttm, start.mix(end))

    # Entry point

    def parse_expr(self, multiline: bool) -> Expr:
        self._ignore_docs()
        if self.check_actual_id("do"):
            return self._parse_do()
        if self.check_actual_id("match"):
            return self._parse_match()
        if self.check_actual_id("let"):
            return self._parse_let()
        if self.check_actual_id("if"):
            return self._parse_if()
        if self.check_actual_id("open"):
            return self._parse_open()
        if self.check_actual_id("specialize"):
            return self._parse_substitution()
        if self.check_actual(TokenKind.DOLLAR):
            return self._parse_sigma_pair()
        if self._is_lambda():
            return self._parse_lambda(False)
        if self._is_pi_type():
            return self._parse_pi_or_lambda(False)
        if self._is_sigma_type():
            return self._parse_sigma_type()
        if self.check_actual(TokenKind.BANG):
            return self.parse_seq()
        if self.check_actual(TokenKind.TILDE):
            return self._parse_erased()
        return self.parse_ann(multiline)