# regolib

Building blocks for working with Rego policies in Python: the node classes of
a policy module's syntax tree, the value model with Rego's ordering and
equality rules, and a library of Rego built-in functions.

## Installation

```
pip install regolib
```

For running the test suite:

```
pip install "regolib[test]"
pytest
```

## Syntax tree

`regolib.ast` defines the operators (`BinOp`, `ArithOp`, `BoolOp`,
`AssignOp`), `Span` (file, line, column and text, with `error()` to format a
message pointing at it) and dataclasses for expressions, literals, queries,
rules, packages, imports and `Module`. Nodes compare and hash by identity.

## Values

Rego values map onto Python types:

| Rego      | Python                    |
|-----------|---------------------------|
| null      | `None`                    |
| boolean   | `bool`                    |
| number    | `int` / `float`           |
| string    | `str`                     |
| array     | `tuple`                   |
| set       | `frozenset`               |
| object    | `frozendict`              |
| undefined | `UNDEFINED` (an `UndefinedType` singleton) |

`regolib.values` converts between plain Python data and Rego values
(`from_python`, `to_python`), reads and writes JSON (`from_json`, `to_json`;
sets are written as arrays), names a value's kind (`type_name`) and compares
values the Rego way, where null < boolean < number < string < array < object
< set:

```python
from regolib.ast import BoolOp
from regolib.values import compare, from_python

compare(BoolOp.LT, from_python(None), from_python(False))  # True
```

`sort_key` gives a key usable with `sorted` that follows the same order.

## Built-in functions

Each group of built-ins lives in its own module: `aggregates`, `arrays`,
`bitwise`, `conversions`, `numbers`, `sets`, `regexes`, `deprecated`,
`strings`, `objects`, `graph`, `encoding`, `crypto`, `globmatch`,
`jwtdecode`, `timefns` and `versions`. Every function takes its arguments
followed by a `strict` flag. Arguments of the wrong type raise `RegoError`;
for a number of built-ins (casts, `count`, `numbers.range`, `substring`,
`format_int` and others) strict mode decides between raising `RegoError` and
returning `UNDEFINED`.

`regolib.registry` looks built-ins up by their Rego names and checks the
number of arguments when calling them:

```python
from regolib.registry import call, lookup

call("count", ["hello"], strict=True)             # 5
call("strings.reverse", ["abc"], strict=True)     # "cba"
lookup("array.concat")                            # a Builtin with its arity
```

Deprecated built-ins such as `all`, `any`, `cast_*`, `set_diff` and
`re_match` are found by `lookup` too, marked `deprecated=True`.

`opa_runtime` reports the version, feature names and the sorted lists of
built-in and deprecated built-in names; its `commit` field is read with
`git rev-parse HEAD` and is empty when that fails. `must_cache` returns the
path for built-ins whose result must stay the same within one evaluation
(`opa.runtime`, `rand.intn`, `time.now_ns`, `uuid.rfc4122`) and `None`
otherwise.

`print` writes its arguments to standard error and returns `True`.

## What it does not do

- There is no lexer, parser or policy evaluator: the syntax tree classes are
  provided, but building trees from policy text and running queries is left
  to the caller. There is no command-line tool.
- `http.send` performs no request and always returns `UNDEFINED`;
  `io.jwt.decode_verify` verifies nothing and always returns `UNDEFINED`.
- Of the time built-ins, only `time.add_date`, `time.clock`, `time.date`,
  `time.now_ns`, `time.parse_rfc3339_ns` and `time.weekday` are available.
- Regular expressions use Python's `re` syntax.

## Errors

Every failure a built-in reports is a `regolib.values.RegoError`; catch it to
handle policy evaluation errors.