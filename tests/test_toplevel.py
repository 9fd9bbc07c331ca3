import pytest

from kindparse.diagnostic import (
    CannotUseUse,
    ImportsCannotHaveAlias,
    LowerCasedDefinition,
    NotAClauseOfDef,
    Unclosed,
    UnexpectedChar,
    UnexpectedToken,
)
from kindparse.span import Range
from kindparse.toplevel import Parser, parse_book
from kindparse.tree import (
    AttrIdent,
    AttrList,
    AttrNumber,
    AttrString,
    Binary,
    Constr,
    Entry,
    Lit,
    Operator,
    PatVar,
    RecordDecl,
    SumTypeDecl,
)


def test_simple_entry():
    text = "Main : U60\nMain = 1"
    result = parse_book(text)
    assert not result.failed
    assert result.diagnostics == []
    [entry] = result.module.entries
    assert isinstance(entry, Entry)
    assert str(entry.name) == "Main"
    assert isinstance(entry.typ, Constr)
    assert str(entry.typ.name) == "U60"
    assert len(entry.rules) == 1
    assert entry.rules[0].pats == []
    assert isinstance(entry.rules[0].body, Lit)
    assert entry.rules[0].body.lit.value == 1
    assert entry.range == Range(0, len(text), 0)


def test_entry_with_arguments_and_patterns():
    text = "Add (a: U60) (b: U60) : U60\nAdd a b = (+ a b)\n"
    [entry] = parse_book(text).module.entries
    assert [arg.name.name for arg in entry.args] == ["a", "b"]
    assert all(not arg.hidden and not arg.erased for arg in entry.args)
    rule = entry.rules[0]
    assert all(isinstance(pat, PatVar) for pat in rule.pats)
    assert [pat.name.name for pat in rule.pats] == ["a", "b"]
    assert isinstance(rule.body, Binary)
    assert rule.body.op is Operator.ADD


def test_hidden_and_erased_arguments():
    text = "Foo <a: Type> +<b: Type> -(c: Type) (d: Type) : Type"
    [entry] = parse_book(text).module.entries
    flags = [(arg.name.name, arg.hidden, arg.erased) for arg in entry.args]
    assert flags == [
        ("a", True, True),
        ("b", True, False),
        ("c", False, True),
        ("d", False, False),
    ]


def test_brace_body_becomes_first_rule():
    text = "Main (x: U60) : U60 {\n  2\n}"
    [entry] = parse_book(text).module.entries
    assert len(entry.rules) == 1
    rule = entry.rules[0]
    assert isinstance(rule.body, Lit)
    assert rule.body.lit.value == 2
    assert [pat.name.name for pat in rule.pats] == ["x"]
    close = text.index("}")
    assert rule.range == Range(close, close + 1, 0)


def test_parse_entry_directly():
    entry = Parser("Main : U60\nMain = 1").parse_entry(["doc"], [])
    assert entry.docs == ["doc"]
    assert str(entry.rules[0].name) == "Main"


def test_lower_cased_definition_is_reported():
    result = parse_book("main : U60\nmain = 1\n")
    assert result.failed
    assert result.module.entries == []
    assert any(isinstance(d, LowerCasedDefinition) for d in result.diagnostics)


def test_lower_cased_definition_raises_from_parse_entry():
    with pytest.raises(LowerCasedDefinition):
        Parser("main : U60").parse_entry([], [])


def test_not_a_clause_of_def():
    result = parse_book("Main : U60\nMain = 1\nFoo = 2")
    assert result.failed
    assert result.module.entries == []
    assert isinstance(result.diagnostics[0], NotAClauseOfDef)


def test_sum_type():
    text = "type Maybe (t: Type) {\n  none\n  some (value: t)\n}"
    [decl] = parse_book(text).module.entries
    assert isinstance(decl, SumTypeDecl)
    assert str(decl.name) == "Maybe"
    assert [p.name.name for p in decl.parameters] == ["t"]
    assert decl.indices == []
    assert [c.name.name for c in decl.constructors] == ["none", "some"]
    assert decl.constructors[1].args[0].name.name == "value"


def test_sum_type_indices():
    [decl] = parse_book("type Vec (t: Type) ~ (n: Nat) {\n}").module.entries
    assert [i.name.name for i in decl.indices] == ["n"]
    assert decl.constructors == []


def test_unclosed_sum_type():
    with pytest.raises(Unclosed):
        Parser("type Foo {\n  bar").parse_sum_type_def([], [])


def test_parse_constructor_directly():
    cons = Parser("some (value: t) : Maybe t;").parse_constructor()
    assert cons.name.name == "some"
    assert [a.name.name for a in cons.args] == ["value"]
    assert cons.typ is not None and isinstance(cons.typ, Constr)


def test_record_with_default_constructor():
    text = "record Pair (a: Type) (b: Type) {\n  fst : a\n  snd : b\n}"
    [decl] = parse_book(text).module.entries
    assert isinstance(decl, RecordDecl)
    assert decl.constructor.name == "new"
    assert [f.name.name for f in decl.fields] == ["fst", "snd"]
    assert [p.name.name for p in decl.parameters] == ["a", "b"]


def test_record_with_named_constructor():
    text = "record Pair {\n  constructor mk,\n  fst : U60\n}"
    decl = Parser(text).parse_record_def([], [])
    assert decl.constructor.name == "mk"
    assert [f.name.name for f in decl.fields] == ["fst"]


def test_attributes():
    text = "#inline\n#derive[match, open]\n#kdl_name = Foo\nMain : U60\nMain = 1"
    [entry] = parse_book(text).module.entries
    assert [a.name.name for a in entry.attrs] == ["inline", "derive", "kdl_name"]
    derive = entry.attrs[1]
    assert all(isinstance(arg, AttrIdent) for arg in derive.args)
    assert [arg.ident.name for arg in derive.args] == ["match", "open"]
    value = entry.attrs[2].value
    assert isinstance(value, AttrIdent)
    assert value.ident.name == "Foo"


def test_attribute_value_styles():
    attrs = Parser('#a = 3\n#b = "x"\n#c = [1, [2]]').parse_attrs()
    assert isinstance(attrs[0].value, AttrNumber) and attrs[0].value.value == 3
    assert isinstance(attrs[1].value, AttrString) and attrs[1].value.value == "x"
    outer = attrs[2].value
    assert isinstance(outer, AttrList)
    assert isinstance(outer.items[0], AttrNumber)
    assert isinstance(outer.items[1], AttrList)
    assert outer.items[1].items[0].value == 2


def test_doc_comments():
    text = "//! Doc line\nMain : U60\nMain = 1"
    [entry] = parse_book(text).module.entries
    assert entry.docs == [" Doc line"]


def test_uses():
    result = parse_book("use Data.List as L\nMain : U60\nMain = 1")
    assert result.module.uses == {"L": "Data.List"}
    assert len(result.module.entries) == 1
    assert not result.failed


def test_use_alias_with_aux_part():
    result = parse_book("use Foo as Bar/baz\nMain : U60\nMain = 1")
    assert result.failed
    assert isinstance(result.diagnostics[0], ImportsCannotHaveAlias)
    assert result.module.uses == {}
    assert len(result.module.entries) == 1


def test_use_after_definitions():
    result = parse_book("Main : U60\nMain = 1\nuse Foo as Bar")
    assert result.failed
    assert isinstance(result.diagnostics[0], CannotUseUse)
    assert len(result.module.entries) == 1


def test_recovery_at_next_safe_item():
    text = "Main : U60\nMain = 1\n)\ntype Unit {\n  new\n}"
    result = parse_book(text)
    assert result.failed
    assert [type(e) for e in result.module.entries] == [Entry, SumTypeDecl]
    assert len(result.diagnostics) == 1
    assert isinstance(result.diagnostics[0], UnexpectedToken)


def test_lexical_errors_do_not_set_failed():
    result = parse_book("Main : U60\nMain = 1\n`")
    assert not result.failed
    assert len(result.diagnostics) == 1
    assert isinstance(result.diagnostics[0], UnexpectedChar)
    assert len(result.module.entries) == 1


def test_context_index_reaches_ranges():
    [entry] = parse_book("Main : U60\nMain = 1", 3).module.entries
    assert entry.name.range == Range(0, 4, 3)