import dataclasses

import pytest

from regolib.ast import (
    ArithExpr,
    ArithOp,
    ArrayExpr,
    AssignOp,
    BoolExpr,
    BoolOp,
    CallExpr,
    ComprHead,
    DefaultRule,
    ExprLiteral,
    Import,
    LiteralStmt,
    Membership,
    Module,
    NumberExpr,
    Package,
    Query,
    RefDot,
    RuleAssign,
    RuleBody,
    SetHead,
    Span,
    SpecRule,
    StringExpr,
    VarExpr,
)


@pytest.fixture
def span():
    return Span("policy.rego", 3, 7, "x")


@pytest.mark.parametrize(
    "build",
    [
        lambda s: StringExpr(s),
        lambda s: VarExpr(s),
        lambda s: ArrayExpr(s, [NumberExpr(s)]),
        lambda s: CallExpr(s, VarExpr(s), []),
        lambda s: RefDot(s, VarExpr(s), s),
        lambda s: BoolExpr(s, BoolOp.LT, NumberExpr(s), NumberExpr(s)),
        lambda s: ArithExpr(s, ArithOp.ADD, NumberExpr(s), NumberExpr(s)),
        lambda s: Membership(s, None, VarExpr(s), VarExpr(s)),
    ],
)
def test_expression_span(span, build):
    assert build(span).span is span


def test_nodes_compare_by_identity(span):
    first = VarExpr(span)
    second = VarExpr(span)
    assert first == first
    assert len({first, second, first}) == 2


def test_nodes_usable_as_keys(span):
    node = NumberExpr(span)
    table = {node: "seen"}
    assert table[node] == "seen"
    assert NumberExpr(span) not in table


def test_span_error_points_at_location(span):
    message = span.error("bad thing")
    assert message.startswith("policy.rego:3:7")
    assert message.endswith("bad thing")


def test_span_is_frozen(span):
    with pytest.raises(dataclasses.FrozenInstanceError):
        span.line = 10
    assert span.line == 3


def test_spans_compare_by_value():
    first = Span("a", 1, 1, "t")
    same = Span("a", 1, 1, "t")
    other = Span("a", 1, 2, "t")
    assert len({first, same}) == 1
    assert len({first, same, other}) == 2


def test_module_structure(span):
    refr = VarExpr(span)
    value = NumberExpr(span)
    stmt = LiteralStmt(span, ExprLiteral(span, value), [])
    query = Query(span, [stmt])
    body = RuleBody(span, None, query)
    head = ComprHead(span, refr, RuleAssign(span, AssignOp.COLEQ, value))
    rule = SpecRule(span, head, [body])
    default = DefaultRule(span, refr, [], AssignOp.EQ, value)
    module = Module(Package(span, refr), [Import(span, refr, None)], [rule, default], True)

    assert module.policy[0].head.refr is refr
    assert module.policy[0].bodies[0].query.stmts[0].literal.expr is value
    assert module.policy[1].op is AssignOp.EQ
    assert module.imports[0].as_ is None
    assert module.rego_v1 is True


def test_set_head_key_optional(span):
    head = SetHead(span, VarExpr(span), None)
    assert head.key is None
    assert head.span is span