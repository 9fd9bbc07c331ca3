# kindparse

A lexer and parser for the Kind2 language. It turns source text into a
concrete syntax tree (`kindparse.tree`) and collects syntax diagnostics
(`kindparse.diagnostic`) instead of stopping at the first error. It has no
dependencies outside the standard library.

## Installation

```
pip install kindparse
```

## Parsing a file

```python
from pathlib import Path

from kindparse.toplevel import parse_book

result = parse_book(Path("Main.kind2").read_text(), 0)

for item in result.module.entries:
    print(item)

for alias, origin in result.module.uses.items():
    print(alias, "->", origin)

for diagnostic in result.diagnostics:
    frame = diagnostic.to_frame()
    print(frame.code, frame.severity.value, frame.title)
```

`parse_book(text, ctx_id=0)` returns a `ParseResult` with:

- `module`: a `Module` whose `entries` are `Entry`, `SumTypeDecl` and
  `RecordDecl` items, and whose `uses` maps each `use ... as ...` alias to
  its origin;
- `diagnostics`: every diagnostic reported, by the lexer and the parser;
- `failed`: `True` when the parser reported a diagnostic. Lexical
  diagnostics (bad characters, unfinished strings, invalid numbers) are
  listed in `diagnostics` but do not set `failed`.

After an error the parser skips ahead to the next line that starts with
`type`, `record`, an attribute (`#`) or a doc comment (`//!`) and carries on.
The `ctx_id` is stored in every `Range` so that positions can be traced back
to the file they came from. Ranges are byte offsets (`start`, `end`).

## Parsing smaller pieces

The parser classes take the source text and an optional context id:

```python
from kindparse.expressions import ExprParser
from kindparse.toplevel import Parser

expr = ExprParser("(x: U60) => (+ x 1)").parse_expr(False)

parser = Parser("Nat.zero")
pattern = parser.parse_pat()
```

- `kindparse.terms.TermParser`: atoms, applications, arrows and `::`
  annotations.
- `kindparse.expressions.ExprParser`: the full expression grammar
  (`let`, `match`, `if`, `open`, `specialize`, `do` blocks, lambdas,
  pi and sigma types, pairs, record access with `!`).
- `kindparse.patterns.PatParser`: patterns of rules.
- `kindparse.toplevel.Parser`: all of the above plus definitions, sum types,
  records, attributes and `use` lines (`parse_module`, `parse_entry`,
  `parse_sum_type_def`, `parse_record_def`, `parse_constructor`,
  `parse_attrs`).

Failures inside these methods are raised as `SyntaxDiagnostic` exceptions.

## Tokens only

```python
from kindparse.lexer import tokenize

tokens, diagnostics = tokenize("Main : U60 { 1 + 2 }", 0)
for token, span in tokens:
    print(token.kind.name, token, span.start, span.end)
```

`tokenize` drops plain comments and the final end-of-file token, and returns
the lexical diagnostics alongside the tokens. `kindparse.lexer.Lexer` gives
raw tokens one at a time with `lex_token()`, or meaningful ones with
`next_token()`.

## Diagnostics

Each `SyntaxDiagnostic` subclass (`UnfinishedString`, `UnexpectedToken`,
`LowerCasedDefinition`, `NotAClauseOfDef`, ...) is an exception and can be
turned into a `DiagnosticFrame` with `to_frame()`. A frame carries a numeric
code, a `Severity`, a title, hints and the `Marker`s that point into the
source. `severity()` is `Severity.WARNING` only for `UnusedDocString`;
`syntax_ctx()` gives the context id of the diagnostic's main range.

## What it does not do

The package stops at the syntax tree. It does not resolve `use` aliases
across files, check or evaluate programs, render diagnostics against source
text, or provide a command-line tool. Float literals are not lexed.