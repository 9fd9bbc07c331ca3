"""Parsing of the patterns on the left of rules."""

from __future__ import annotations

from kindparse.terms import TermParser
from kindparse.tokens import TokenKind
from kindparse.tree import (
    Pat,
    PatApp,
    PatChar,
    PatHole,
    PatList,
    PatStr,
    PatU60,
    PatU120,
    PatVar,
)


class PatParser(TermParser):
    """Parser for patterns."""

    def _is_pat_cons(self) -> bool:
        return self.get().kind is TokenKind.LPAR and self.peek(1).is_upper_id()

    def _parse_pat_constructor(self) -> PatApp:
        start = self.range()
        self.advance()  # '('
        name = self.parse_upper_id()
        pats: list[Pat] = []
        while (pat := self.try_single(lambda p: p.parse_pat())) is not None:
            pats.append(pat)
        _, end = self.eat_variant(TokenKind.RPAR)
        return PatApp(name, pats, start.mix(end))

    def _parse_literal(self, kind: TokenKind, node: type) -> Pat:
        start = self.range()
        value = self.eat(lambda t: t.value if t.kind is kind else None)
        return node(value, start)

    def _parse_pat_group(self) -> Pat:
        start = self.range()
        self.advance()  # '('
        pat = self.parse_pat()
        _, end = self.eat_variant(TokenKind.RPAR)
        pat.range = start.mix(end)
        return pat

    def _parse_pat_var(self) -> PatVar:
        ident = self.parse_id()
        return PatVar(ident, ident.range)

    def _parse_pat_single_cons(self) -> PatApp:
        ident = self.parse_upper_id()
        return PatApp(ident, [], ident.range)

    def _parse_pat_hole(self) -> PatHole:
        rng = self.range()
        self.eat_variant(TokenKind.HOLE)
        return PatHole(rng)

    def _parse_pat_list(self) -> PatList:
        start = self.range()
        self.advance()  # opening token

        if self.check_actual(TokenKind.RBRACKET):
            _, end = self.advance()
            return PatList([], end.mix(start))

        items: list[Pat] = [self.parse_pat()]
        with_comma = None
        while True:
            ate_comma = self.check_and_eat(TokenKind.COMMA)
            if with_comma is None:
                with_comma = ate_comma
            if with_comma:
                self.check_and_eat(TokenKind.COMMA)
            item = self.try_single(lambda p: p.parse_pat())
            if item is None:
                break
            items.append(item)

        _, end = self.eat_variant(TokenKind.RBRACKET)
        return PatList(items, end.mix(start))

    def parse_pat(self) -> Pat:
        token = self.get()
        if self._is_pat_cons():
            return self._parse_pat_constructor()
        if token.is_str():
            return self._parse_literal(TokenKind.STR, PatStr)
        if token.is_num60():
            return self._parse_literal(TokenKind.NUM60, PatU60)
        if token.is_num120():
            return self._parse_literal(TokenKind.NUM120, PatU120)
        if token.is_char():
            return self._parse_literal(TokenKind.CHAR, PatChar)
        if self.check_actual(TokenKind.LPAR):
            return self._parse_pat_group()
        if token.is_lower_id():
            return self._parse_pat_var()
        if token.is_upper_id():
            return self._parse_pat_single_cons()
        if self.check_actual(TokenKind.LBRACE):
            return self._parse_pat_list()
        if self.check_actual(TokenKind.HOLE):
            return self._parse_pat_hole()
        self.fail([])