"""
Reduction of range elements against a variable graph.

There are two modes, sharing a single walker:

  * EVAL collapses as much as possible: every variable reference with a known
    range is replaced by its (evaluated) bound.
  * SIMPLIFY is the same, except that references to symbolic variables are
    left in place so the result still describes the range in terms of the
    program's free inputs.

Reduction never fails on partial information. If an operator can't be
computed yet, the original expression is returned unchanged so that it can be
reduced again once more of the graph is known.
"""

from __future__ import annotations

import logging

from line_profiler import profile

from .common import Loc, Mode, Ordering
from .compare import concrete_eq, concrete_ord
from .elem import Dynamic, Elem, Null, RangeConcrete, RangeExpr, RangeUnary
from .graph import BuiltIn, ConcreteType, Graph, SolcRange
from .kernels import BINARY_KERNELS, UNARY_KERNELS

logger = logging.getLogger(__name__)


@profile
def walk(elem: Elem, graph: Graph, mode: Mode) -> Elem:
    """Reduce an element bottom-up in the given mode."""
    match elem:
        case RangeConcrete() | Null():
            return elem
        case Dynamic():
            return resolve(elem, graph, mode)
        case RangeExpr() | RangeUnary():
            return exec_op(elem, graph, mode)


def evaluate(elem: Elem, graph: Graph) -> Elem:
    return walk(elem, graph, Mode.EVAL)


def simplify(elem: Elem, graph: Graph) -> Elem:
    return walk(elem, graph, Mode.SIMPLIFY)


def resolve(dy: Dynamic, graph: Graph, mode: Mode) -> Elem:
    """
    Look up the bound that a variable reference points to.

    Variables of a concrete type resolve to their value, whichever side was
    requested. Variables without a known range resolve to themselves.
    """
    if mode == Mode.SIMPLIFY and graph.is_symbolic(dy.idx):
        return dy
    var = graph.resolve(dy.idx)
    match var.ty:
        case BuiltIn(_, SolcRange() as rng):
            return evaluate(rng.side(dy.side), graph)
        case ConcreteType(value):
            return RangeConcrete(value, var.loc or Loc.IMPLICIT)
        case _:
            return dy


@profile
def exec_op(expr: RangeExpr | RangeUnary, graph: Graph, mode: Mode) -> Elem:
    """Reduce the operands of an expression and apply its operator."""
    match expr:
        case RangeExpr(lhs, op, rhs):
            if (kernel := BINARY_KERNELS.get(op)) is None:
                raise NotImplementedError(f"unsupported binary operator: {op.name}")
            result = kernel(walk(lhs, graph, mode), walk(rhs, graph, mode))
        case RangeUnary(op, term):
            if (unary := UNARY_KERNELS.get(op)) is None:
                raise NotImplementedError(f"unsupported unary operator: {op.name}")
            result = unary(walk(term, graph, mode))
    if result is None:
        logger.debug("%s: leaving %r unreduced", mode.value, expr)
        return expr
    return result


def range_eq(a: Elem, b: Elem, graph: Graph) -> bool:
    """Return True iff both elements evaluate to equal concrete values."""
    match (evaluate(a, graph), evaluate(b, graph)):
        case (RangeConcrete(x), RangeConcrete(y)):
            return concrete_eq(x, y)
        case _:
            return False


def range_ord(a: Elem, b: Elem) -> Ordering | None:
    """
    Order two elements without evaluating them.

    Only concrete elements are comparable; evaluate first to compare anything
    else.
    """
    match (a, b):
        case (RangeConcrete(x), RangeConcrete(y)):
            return concrete_ord(x, y)
        case _:
            return None


def evaluate_range(rng: SolcRange, graph: Graph) -> SolcRange:
    return SolcRange(evaluate(rng.min, graph), evaluate(rng.max, graph))


def simplify_range(rng: SolcRange, graph: Graph) -> SolcRange:
    return SolcRange(simplify(rng.min, graph), simplify(rng.max, graph))
