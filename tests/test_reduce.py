#!/usr/bin/env pytest

import pytest

from solrange import (
    NULL,
    Array,
    Bool,
    BuiltIn,
    ConcreteType,
    DynBytes,
    Int,
    Loc,
    Mode,
    Ordering,
    RangeConcrete,
    RangeExpr,
    RangeOp,
    SolcRange,
    String,
    Uint,
    UserType,
    VarGraph,
    evaluate,
    evaluate_range,
    exec_op,
    kernels,
    range_eq,
    range_ord,
    simplify,
    simplify_range,
)

from .helpers import hi, i256, lo, u256, uint_var


def test_evaluate_literal_add(graph: VarGraph) -> None:
    assert evaluate(u256(5) + u256(7), graph) == u256(12)


def test_evaluate_is_idempotent(graph: VarGraph) -> None:
    x = uint_var(graph, "x", (u256(1), u256(10)))
    result = evaluate((hi(x) * u256(3)).min(u256(100)), graph)
    assert result == u256(30)
    assert evaluate(result, graph) == result
    assert simplify(result, graph) == result
    assert evaluate(NULL, graph) is NULL


def test_fallback_symbolic(graph: VarGraph) -> None:
    x = uint_var(graph, "x", symbolic=True)
    tree = hi(x) + u256(1)
    assert evaluate(tree, graph) == tree
    assert evaluate(tree, graph) is tree
    assert tree.dependent_on() == {x}


def test_fallback_keeps_original_operands(graph: VarGraph) -> None:
    x = uint_var(graph, "x")
    # the left operand reduces, but the sum can't be computed
    tree = (u256(2) + u256(3)) + hi(x)
    result = evaluate(tree, graph)
    assert result is tree
    assert isinstance(result, RangeExpr)
    assert result.lhs == u256(2) + u256(3)


def test_fallback_kernel_refuses(graph: VarGraph) -> None:
    tree = u256(1) / u256(0)
    assert evaluate(tree, graph) is tree
    tree = u256(1) + RangeConcrete(String("a"))
    assert evaluate(tree, graph) is tree
    tree = RangeConcrete(Bool(True)).and_(u256(1))
    assert evaluate(tree, graph) is tree


def test_evaluate_through_references(graph: VarGraph) -> None:
    x = uint_var(graph, "x", (u256(0), u256(10)))
    y = uint_var(graph, "y", (lo(x) + u256(1), hi(x) + u256(1)))
    z = uint_var(graph, "z", (lo(y) * u256(2), hi(y) * hi(y)))
    assert evaluate(lo(z), graph) == u256(2)
    assert evaluate(hi(z), graph) == u256(121)
    assert evaluate_range(SolcRange(lo(z), hi(z)), graph) == SolcRange(
        u256(2), u256(121)
    )


def test_unknown_range_stays_symbolic(graph: VarGraph) -> None:
    x = uint_var(graph, "x")
    s = graph.declare("s", UserType("MyStruct"))
    assert evaluate(lo(x), graph) == lo(x)
    assert evaluate(hi(s), graph) == hi(s)


def test_concrete_typed_variable(graph: VarGraph) -> None:
    c = graph.declare("c", ConcreteType(Uint(256, 42)), Loc(0, 5, 7))
    assert evaluate(lo(c), graph) == u256(42)
    assert evaluate(hi(c), graph) == u256(42)
    result = evaluate(hi(c), graph)
    assert isinstance(result, RangeConcrete)
    assert result.loc == Loc(0, 5, 7)
    # simplify leaves symbolic variables alone, even concrete ones
    graph.set_symbolic(c, True)
    assert simplify(hi(c) + u256(1), graph) == hi(c) + u256(1)
    graph.set_symbolic(c, False)
    assert simplify(hi(c) + u256(1), graph) == u256(43)


def test_simplify_keeps_symbolic_references(graph: VarGraph) -> None:
    x = uint_var(graph, "x", (u256(0), u256(10)), symbolic=True)
    y = uint_var(graph, "y", (u256(3), u256(4)))
    tree = hi(x) + hi(y)
    assert evaluate(tree, graph) == u256(14)
    assert simplify(tree, graph) is tree
    assert simplify(hi(y) * u256(2), graph) == u256(8)
    assert simplify(hi(x), graph) == hi(x)
    assert simplify_range(SolcRange(lo(x), hi(y)), graph) == SolcRange(lo(x), u256(4))

    graph.set_symbolic(x, False)
    assert simplify(tree, graph) == u256(14)


def test_simplify_evaluates_resolved_bounds(graph: VarGraph) -> None:
    x = uint_var(graph, "x", (u256(0), u256(10)), symbolic=True)
    y = uint_var(graph, "y", (u256(0), hi(x) - u256(1)))
    # y isn't symbolic, so its bound is fully evaluated
    assert simplify(hi(y), graph) == u256(9)


def test_exec_op_modes(graph: VarGraph) -> None:
    x = uint_var(graph, "x", (u256(1), u256(2)), symbolic=True)
    tree = lo(x).max(u256(0))
    assert exec_op(tree, graph, Mode.EVAL) == u256(1)
    assert exec_op(tree, graph, Mode.SIMPLIFY) is tree


def test_unary(graph: VarGraph) -> None:
    assert evaluate(RangeConcrete(Bool(False)).not_(), graph) == RangeConcrete(
        Bool(True)
    )
    assert evaluate(~u256(0), graph) == u256((1 << 256) - 1)
    x = uint_var(graph, "x")
    tree = ~hi(x)
    assert evaluate(tree, graph) is tree


def test_comparison_results(graph: VarGraph) -> None:
    x = uint_var(graph, "x", (u256(5), u256(10)))
    assert evaluate(lo(x).lt(hi(x)), graph) == RangeConcrete(Bool(True))
    assert evaluate(lo(x).eq(u256(5)), graph) == RangeConcrete(Bool(True))
    assert evaluate(hi(x).neq(u256(10)), graph) == RangeConcrete(Bool(False))
    assert evaluate(i256(-1).gte(lo(x)), graph) == RangeConcrete(Bool(False))


def test_range_eq(graph: VarGraph) -> None:
    x = uint_var(graph, "x", (u256(3), u256(3)))
    assert range_eq(lo(x) + u256(1), u256(4), graph)
    assert range_eq(u256(4), hi(x) + u256(1), graph)
    assert not range_eq(lo(x), u256(4), graph)
    assert range_eq(RangeConcrete(DynBytes(b"ab")), RangeConcrete(String("ab")), graph)

    y = uint_var(graph, "y", symbolic=True)
    assert not range_eq(hi(y), hi(y), graph)
    assert not range_eq(NULL, NULL, graph)


def test_range_ord(graph: VarGraph) -> None:
    assert range_ord(i256(-3), u256(5)) == Ordering.LESS
    assert range_ord(u256(5), u256(5)) == Ordering.EQUAL
    one, two, three = Uint(256, 1), Uint(256, 2), Uint(256, 3)
    assert (
        range_ord(RangeConcrete(Array((one, two))), RangeConcrete(Array((one, two, three))))
        is None
    )
    # order never evaluates
    assert range_ord(u256(1) + u256(1), u256(2)) is None
    x = uint_var(graph, "x", (u256(3), u256(3)))
    assert range_ord(lo(x), u256(3)) is None
    assert range_ord(NULL, u256(3)) is None


def test_rewrite_then_evaluate(graph: VarGraph) -> None:
    x = uint_var(graph, "x", (u256(10), u256(20)))
    y = uint_var(graph, "y", (u256(1), u256(2)))
    tree = lo(x) - hi(y)
    assert evaluate(tree, graph) == u256(8)

    x2 = graph.fork(x)
    graph.set_range(x2, SolcRange(u256(100), u256(200)))
    forked = tree.update_deps({x: x2})
    assert forked == lo(x2) - hi(y)
    assert forked.dependent_on() == {x2, y}
    assert evaluate(forked, graph) == u256(98)
    assert evaluate(tree, graph) == u256(8)


def test_wraparound_bounds(graph: VarGraph) -> None:
    x = uint_var(graph, "x", (u256(0), u256((1 << 256) - 1)))
    assert evaluate(hi(x) + u256(1), graph) == u256(0)
    assert evaluate(lo(x) - u256(1), graph) == u256((1 << 256) - 1)


@pytest.mark.parametrize("value", [0, 1, 255])
def test_cast_through_reference(graph: VarGraph, value: int) -> None:
    x = graph.declare("x", BuiltIn("uint8", SolcRange.exact(Uint(8, value))))
    tree = hi(x).cast(RangeConcrete(Int(8, 0)))
    expected = value - 256 if value > 127 else value
    assert evaluate(tree, graph) == RangeConcrete(Int(8, expected))


def test_missing_binary_kernel_fails_loudly(
    graph: VarGraph, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.delitem(kernels.BINARY_KERNELS, RangeOp.ADD)
    with pytest.raises(NotImplementedError):
        evaluate(u256(1) + u256(2), graph)
    with pytest.raises(NotImplementedError):
        simplify(u256(1) + u256(2), graph)
    assert evaluate(u256(3) * u256(2), graph) == u256(6)


def test_missing_unary_kernel_fails_loudly(
    graph: VarGraph, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.delitem(kernels.UNARY_KERNELS, RangeOp.NOT)
    with pytest.raises(NotImplementedError):
        evaluate(RangeConcrete(Bool(True)).not_(), graph)
    assert evaluate(~u256(0), graph) == u256((1 << 256) - 1)
