"""Abstract syntax tree for Rego policies.

Nodes compare and hash by identity, so a node can be used as a key for
per-node bookkeeping without being confused with a structurally equal node.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional, Union


class BinOp(enum.Enum):
    AND = "&"
    OR = "|"


class ArithOp(enum.Enum):
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    MOD = "%"


class BoolOp(enum.Enum):
    LT = "<"
    LE = "<="
    EQ = "=="
    GE = ">="
    GT = ">"
    NE = "!="


class AssignOp(enum.Enum):
    EQ = "="
    COLEQ = ":="


@dataclass(frozen=True)
class Span:
    """A located piece of policy text."""

    file: str
    line: int
    col: int
    text: str

    def error(self, message: str) -> str:
        """Format an error message that points at this span."""
        return f"{self.file}:{self.line}:{self.col}: error: {message}"


@dataclass(eq=False)
class Expr:
    span: Span


@dataclass(eq=False)
class StringExpr(Expr):
    pass


@dataclass(eq=False)
class RawStringExpr(Expr):
    pass


@dataclass(eq=False)
class NumberExpr(Expr):
    pass


@dataclass(eq=False)
class TrueExpr(Expr):
    pass


@dataclass(eq=False)
class FalseExpr(Expr):
    pass


@dataclass(eq=False)
class NullExpr(Expr):
    pass


@dataclass(eq=False)
class VarExpr(Expr):
    pass


@dataclass(eq=False)
class ArrayExpr(Expr):
    items: list[Expr]


@dataclass(eq=False)
class SetExpr(Expr):
    items: list[Expr]


@dataclass(eq=False)
class ObjectExpr(Expr):
    fields: list[tuple[Span, Expr, Expr]]


@dataclass(eq=False)
class ArrayCompr(Expr):
    term: Expr
    query: Query


@dataclass(eq=False)
class SetCompr(Expr):
    term: Expr
    query: Query


@dataclass(eq=False)
class ObjectCompr(Expr):
    key: Expr
    value: Expr
    query: Query


@dataclass(eq=False)
class CallExpr(Expr):
    fcn: Expr
    params: list[Expr]


@dataclass(eq=False)
class UnaryExpr(Expr):
    expr: Expr


@dataclass(eq=False)
class RefDot(Expr):
    refr: Expr
    field: Span


@dataclass(eq=False)
class RefBrack(Expr):
    refr: Expr
    index: Expr


@dataclass(eq=False)
class BinExpr(Expr):
    op: BinOp
    lhs: Expr
    rhs: Expr


@dataclass(eq=False)
class BoolExpr(Expr):
    op: BoolOp
    lhs: Expr
    rhs: Expr


@dataclass(eq=False)
class ArithExpr(Expr):
    op: ArithOp
    lhs: Expr
    rhs: Expr


@dataclass(eq=False)
class AssignExpr(Expr):
    op: AssignOp
    lhs: Expr
    rhs: Expr


@dataclass(eq=False)
class Membership(Expr):
    key: Optional[Expr]
    value: Expr
    collection: Expr


@dataclass(eq=False)
class SomeVars:
    span: Span
    vars: list[Span]


@dataclass(eq=False)
class SomeIn:
    span: Span
    key: Optional[Expr]
    value: Expr
    collection: Expr


@dataclass(eq=False)
class ExprLiteral:
    span: Span
    expr: Expr


@dataclass(eq=False)
class NotExpr:
    span: Span
    expr: Expr


@dataclass(eq=False)
class Every:
    span: Span
    key: Optional[Span]
    value: Span
    domain: Expr
    query: Query


Literal = Union[SomeVars, SomeIn, ExprLiteral, NotExpr, Every]


@dataclass(eq=False)
class WithModifier:
    span: Span
    refr: Expr
    as_: Expr


@dataclass(eq=False)
class LiteralStmt:
    span: Span
    literal: Literal
    with_mods: list[WithModifier]


@dataclass(eq=False)
class Query:
    span: Span
    stmts: list[LiteralStmt]


@dataclass(eq=False)
class RuleAssign:
    span: Span
    op: AssignOp
    value: Expr


@dataclass(eq=False)
class RuleBody:
    span: Span
    assign: Optional[RuleAssign]
    query: Query


@dataclass(eq=False)
class ComprHead:
    span: Span
    refr: Expr
    assign: Optional[RuleAssign]


@dataclass(eq=False)
class SetHead:
    span: Span
    refr: Expr
    key: Optional[Expr]


@dataclass(eq=False)
class FuncHead:
    span: Span
    refr: Expr
    args: list[Expr]
    assign: Optional[RuleAssign]


RuleHead = Union[ComprHead, SetHead, FuncHead]


@dataclass(eq=False)
class SpecRule:
    span: Span
    head: RuleHead
    bodies: list[RuleBody]


@dataclass(eq=False)
class DefaultRule:
    span: Span
    refr: Expr
    args: list[Expr]
    op: AssignOp
    value: Expr


Rule = Union[SpecRule, DefaultRule]


@dataclass(eq=False)
class Package:
    span: Span
    refr: Expr


@dataclass(eq=False)
class Import:
    span: Span
    refr: Expr
    as_: Optional[Span]


@dataclass(eq=False)
class Module:
    package: Package
    imports: list[Import]
    policy: list[Rule]
    rego_v1: bool