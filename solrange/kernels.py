"""
Numeric kernels, one per operator.

Each kernel takes already-reduced operands and returns the computed element,
or None if the result can't be computed concretely: an operand is still
symbolic, the kinds don't support the operator, or the operation would revert
(e.g. division by zero). Integer results wrap to the width of the left-hand
operand, matching EVM arithmetic.
"""
# ruff: noqa: D103

from __future__ import annotations

from typing import Callable, Mapping

from .common import Loc, Ordering, RangeOp
from .compare import concrete_eq, concrete_ord
from .concrete import (
    Array,
    Bool,
    Bytes,
    Concrete,
    Int,
    Uint,
    wrap_signed,
    wrap_unsigned,
)
from .elem import Elem, RangeConcrete

type BinaryKernel = Callable[[Elem, Elem], Elem | None]
type UnaryKernel = Callable[[Elem], Elem | None]


def _numeric(lhs: Elem, rhs: Elem) -> tuple[Uint | Int, int, int, Loc] | None:
    match (lhs, rhs):
        case (
            RangeConcrete((Uint(_, a) | Int(_, a)) as x, loc),
            RangeConcrete(Uint(_, b) | Int(_, b)),
        ):
            return (x, a, b, loc)
        case _:
            return None


def _wrap(kind: Uint | Int, value: int, loc: Loc) -> RangeConcrete:
    match kind:
        case Uint(width):
            return RangeConcrete(Uint(width, wrap_unsigned(value, width)), loc)
        case Int(width):
            return RangeConcrete(Int(width, wrap_signed(value, width)), loc)


def _bool(value: bool, lhs: Elem) -> RangeConcrete:
    assert isinstance(lhs, RangeConcrete)
    return RangeConcrete(Bool(value), lhs.loc)


def _ordered(lhs: Elem, rhs: Elem) -> Ordering | None:
    match (lhs, rhs):
        case (RangeConcrete(a), RangeConcrete(b)):
            return concrete_ord(a, b)
        case _:
            return None


# Arithmetic


def range_add(lhs: Elem, rhs: Elem) -> Elem | None:
    match _numeric(lhs, rhs):
        case (x, a, b, loc):
            return _wrap(x, a + b, loc)
        case None:
            return None


def range_sub(lhs: Elem, rhs: Elem) -> Elem | None:
    match _numeric(lhs, rhs):
        case (x, a, b, loc):
            return _wrap(x, a - b, loc)
        case None:
            return None


def range_mul(lhs: Elem, rhs: Elem) -> Elem | None:
    match _numeric(lhs, rhs):
        case (x, a, b, loc):
            return _wrap(x, a * b, loc)
        case None:
            return None


def range_div(lhs: Elem, rhs: Elem) -> Elem | None:
    match _numeric(lhs, rhs):
        case (x, a, b, loc) if b != 0:
            # Solidity rounds towards zero
            q = abs(a) // abs(b)
            return _wrap(x, -q if (a < 0) != (b < 0) else q, loc)
        case _:
            return None


def range_mod(lhs: Elem, rhs: Elem) -> Elem | None:
    match _numeric(lhs, rhs):
        case (x, a, b, loc) if b != 0:
            # the remainder takes the sign of the dividend
            r = abs(a) % abs(b)
            return _wrap(x, -r if a < 0 else r, loc)
        case _:
            return None


def range_exp(lhs: Elem, rhs: Elem) -> Elem | None:
    match _numeric(lhs, rhs):
        case (Uint(width) | Int(width) as x, a, b, loc) if b >= 0:
            return _wrap(x, pow(a, b, 1 << width), loc)
        case _:
            return None


def range_shl(lhs: Elem, rhs: Elem) -> Elem | None:
    match _numeric(lhs, rhs):
        case (Uint(width) | Int(width) as x, a, b, loc) if b >= 0:
            return _wrap(x, a << b if b < width else 0, loc)
        case _:
            return None


def range_shr(lhs: Elem, rhs: Elem) -> Elem | None:
    match _numeric(lhs, rhs):
        case (Uint(width) | Int(width) as x, a, b, loc) if b >= 0:
            if b >= width:
                return _wrap(x, -1 if a < 0 else 0, loc)
            # arithmetic shift for signed values, since `a` carries its sign
            return _wrap(x, a >> b, loc)
        case _:
            return None


# Selection


def range_min(lhs: Elem, rhs: Elem) -> Elem | None:
    match _ordered(lhs, rhs):
        case None:
            return None
        case Ordering.GREATER:
            return rhs
        case _:
            return lhs


def range_max(lhs: Elem, rhs: Elem) -> Elem | None:
    match _ordered(lhs, rhs):
        case None:
            return None
        case Ordering.LESS:
            return rhs
        case _:
            return lhs


# Comparison


def range_lt(lhs: Elem, rhs: Elem) -> Elem | None:
    if (o := _ordered(lhs, rhs)) is None:
        return None
    return _bool(o == Ordering.LESS, lhs)


def range_gt(lhs: Elem, rhs: Elem) -> Elem | None:
    if (o := _ordered(lhs, rhs)) is None:
        return None
    return _bool(o == Ordering.GREATER, lhs)


def range_lte(lhs: Elem, rhs: Elem) -> Elem | None:
    if (o := _ordered(lhs, rhs)) is None:
        return None
    return _bool(o != Ordering.GREATER, lhs)


def range_gte(lhs: Elem, rhs: Elem) -> Elem | None:
    if (o := _ordered(lhs, rhs)) is None:
        return None
    return _bool(o != Ordering.LESS, lhs)


def range_ord_eq(lhs: Elem, rhs: Elem) -> Elem | None:
    match (lhs, rhs):
        case (RangeConcrete(Array() as a), RangeConcrete(Array() as b)):
            return _bool(concrete_eq(a, b), lhs)
        case _:
            if (o := _ordered(lhs, rhs)) is None:
                return None
            return _bool(o == Ordering.EQUAL, lhs)


def range_neq(lhs: Elem, rhs: Elem) -> Elem | None:
    match range_ord_eq(lhs, rhs):
        case RangeConcrete(Bool(value), loc):
            return RangeConcrete(Bool(not value), loc)
        case _:
            return None


# Logic


def range_and(lhs: Elem, rhs: Elem) -> Elem | None:
    match (lhs, rhs):
        case (RangeConcrete(Bool(a)), RangeConcrete(Bool(b))):
            return _bool(a and b, lhs)
        case _:
            return None


def range_or(lhs: Elem, rhs: Elem) -> Elem | None:
    match (lhs, rhs):
        case (RangeConcrete(Bool(a)), RangeConcrete(Bool(b))):
            return _bool(a or b, lhs)
        case _:
            return None


def range_not(term: Elem) -> Elem | None:
    match term:
        case RangeConcrete(Bool(a), loc):
            return RangeConcrete(Bool(not a), loc)
        case _:
            return None


# Bitwise


def _bitwise(lhs: Elem, rhs: Elem, fn: Callable[[int, int], int]) -> Elem | None:
    match (lhs, rhs):
        case (RangeConcrete(Uint(w, a) as x, loc), RangeConcrete(Uint(v, b))) if w == v:
            return _wrap(x, fn(a, b), loc)
        case (RangeConcrete(Int(w, a) as x, loc), RangeConcrete(Int(v, b))) if w == v:
            return _wrap(x, fn(a, b), loc)
        case (RangeConcrete(Bytes(n, a), loc), RangeConcrete(Bytes(m, b))) if n == m:
            return RangeConcrete(Bytes(n, bytes(fn(p, q) for p, q in zip(a, b))), loc)
        case _:
            return None


def range_bit_and(lhs: Elem, rhs: Elem) -> Elem | None:
    return _bitwise(lhs, rhs, lambda a, b: a & b)


def range_bit_or(lhs: Elem, rhs: Elem) -> Elem | None:
    return _bitwise(lhs, rhs, lambda a, b: a | b)


def range_bit_xor(lhs: Elem, rhs: Elem) -> Elem | None:
    return _bitwise(lhs, rhs, lambda a, b: a ^ b)


def range_bit_not(term: Elem) -> Elem | None:
    match term:
        case RangeConcrete(Uint(width, a), loc):
            return RangeConcrete(Uint(width, a ^ ((1 << width) - 1)), loc)
        case RangeConcrete(Int(width, a), loc):
            return RangeConcrete(Int(width, ~a), loc)
        case RangeConcrete(Bytes(n, a), loc):
            return RangeConcrete(Bytes(n, bytes(b ^ 0xFF for b in a)), loc)
        case _:
            return None


# Conversion


def range_cast(lhs: Elem, rhs: Elem) -> Elem | None:
    match (lhs, rhs):
        case (RangeConcrete(a, loc), RangeConcrete(b)):
            val: Concrete | None = a.cast(b)
            return None if val is None else RangeConcrete(val, loc)
        case _:
            return None


BINARY_KERNELS: dict[RangeOp, BinaryKernel] = {
    RangeOp.ADD: range_add,
    RangeOp.SUB: range_sub,
    RangeOp.MUL: range_mul,
    RangeOp.DIV: range_div,
    RangeOp.MOD: range_mod,
    RangeOp.EXP: range_exp,
    RangeOp.SHL: range_shl,
    RangeOp.SHR: range_shr,
    RangeOp.MIN: range_min,
    RangeOp.MAX: range_max,
    RangeOp.LT: range_lt,
    RangeOp.GT: range_gt,
    RangeOp.LTE: range_lte,
    RangeOp.GTE: range_gte,
    RangeOp.EQ: range_ord_eq,
    RangeOp.NEQ: range_neq,
    RangeOp.AND: range_and,
    RangeOp.OR: range_or,
    RangeOp.BIT_AND: range_bit_and,
    RangeOp.BIT_OR: range_bit_or,
    RangeOp.BIT_XOR: range_bit_xor,
    RangeOp.CAST: range_cast,
}

UNARY_KERNELS: dict[RangeOp, UnaryKernel] = {
    RangeOp.NOT: range_not,
    RangeOp.BIT_NOT: range_bit_not,
}


def check_tables(
    binary: Mapping[RangeOp, BinaryKernel], unary: Mapping[RangeOp, UnaryKernel]
) -> None:
    """Raise unless every operator has exactly one kernel of the right arity."""
    if missing := set(RangeOp) - binary.keys() - unary.keys():
        raise NotImplementedError(
            "operators without a kernel: " + ", ".join(sorted(op.name for op in missing))
        )
    if wrong := {op for op in binary if op.unary} | {op for op in unary if not op.unary}:
        raise TypeError(
            "kernels of the wrong arity: " + ", ".join(sorted(op.name for op in wrong))
        )


check_tables(BINARY_KERNELS, UNARY_KERNELS)
