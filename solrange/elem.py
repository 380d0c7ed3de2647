"""
Range elements: the recursive data type that describes a variable's bounds.

An element is one of:

  * `Dynamic`: the current lower or upper bound of another variable,
  * `RangeConcrete`: a known constant,
  * `RangeExpr` / `RangeUnary`: a deferred operation over other elements,
  * `Null`: an absent value.

Elements are immutable. New trees are built with the operator overloads and
builder methods defined on `RangeElem`; reduction lives in `reduce.py`.
"""
# ruff: noqa: D101, D102, D105

from __future__ import annotations

import abc
import logging
from dataclasses import dataclass, field
from typing import Iterable, Mapping, override

from .common import DynSide, Loc, NodeIdx, RangeOp
from .concrete import Concrete

logger = logging.getLogger(__name__)


class RangeElem(abc.ABC):
    __slots__ = ()

    # Instances are immutable, so copies can share structure.
    def __copy__(self) -> Elem:
        return self  # pyright: ignore[reportReturnType]

    def __deepcopy__(self, memo: object, /) -> Elem:
        return self  # pyright: ignore[reportReturnType]

    @abc.abstractmethod
    def children(self) -> Iterable[Elem]: ...

    @abc.abstractmethod
    def update_deps(self, mapping: Mapping[NodeIdx, NodeIdx]) -> Elem:
        """Retarget every variable reference found in `mapping`."""
        ...

    def dependent_on(self) -> frozenset[NodeIdx]:
        """Return the variables this element refers to, transitively."""
        deps = set[NodeIdx]()
        for child in self.children():
            deps.update(child.dependent_on())
        return frozenset(deps)

    def _binary(self, op: RangeOp, other: Elem) -> RangeExpr:
        return RangeExpr(self, op, other)  # pyright: ignore[reportArgumentType]

    # Arithmetic
    def __add__(self, other: Elem) -> RangeExpr:
        return self._binary(RangeOp.ADD, other)

    def __sub__(self, other: Elem) -> RangeExpr:
        return self._binary(RangeOp.SUB, other)

    def __mul__(self, other: Elem) -> RangeExpr:
        return self._binary(RangeOp.MUL, other)

    def __truediv__(self, other: Elem) -> RangeExpr:
        return self._binary(RangeOp.DIV, other)

    def __mod__(self, other: Elem) -> RangeExpr:
        return self._binary(RangeOp.MOD, other)

    def __pow__(self, other: Elem) -> RangeExpr:
        return self._binary(RangeOp.EXP, other)

    def __lshift__(self, other: Elem) -> RangeExpr:
        return self._binary(RangeOp.SHL, other)

    def __rshift__(self, other: Elem) -> RangeExpr:
        return self._binary(RangeOp.SHR, other)

    # Bitwise
    def __and__(self, other: Elem) -> RangeExpr:
        return self._binary(RangeOp.BIT_AND, other)

    def __or__(self, other: Elem) -> RangeExpr:
        return self._binary(RangeOp.BIT_OR, other)

    def __xor__(self, other: Elem) -> RangeExpr:
        return self._binary(RangeOp.BIT_XOR, other)

    def __invert__(self) -> RangeUnary:
        return RangeUnary(RangeOp.BIT_NOT, self)  # pyright: ignore[reportArgumentType]

    # Comparison. Note that `==` keeps its structural meaning; use `eq()` to
    # build an equality expression.
    def eq(self, other: Elem) -> RangeExpr:
        return self._binary(RangeOp.EQ, other)

    def neq(self, other: Elem) -> RangeExpr:
        return self._binary(RangeOp.NEQ, other)

    def lt(self, other: Elem) -> RangeExpr:
        return self._binary(RangeOp.LT, other)

    def gt(self, other: Elem) -> RangeExpr:
        return self._binary(RangeOp.GT, other)

    def lte(self, other: Elem) -> RangeExpr:
        return self._binary(RangeOp.LTE, other)

    def gte(self, other: Elem) -> RangeExpr:
        return self._binary(RangeOp.GTE, other)

    # Selection, logic and conversion
    def min(self, other: Elem) -> RangeExpr:
        return self._binary(RangeOp.MIN, other)

    def max(self, other: Elem) -> RangeExpr:
        return self._binary(RangeOp.MAX, other)

    def and_(self, other: Elem) -> RangeExpr:
        return self._binary(RangeOp.AND, other)

    def or_(self, other: Elem) -> RangeExpr:
        return self._binary(RangeOp.OR, other)

    def not_(self) -> RangeUnary:
        return RangeUnary(RangeOp.NOT, self)  # pyright: ignore[reportArgumentType]

    def cast(self, other: Elem) -> RangeExpr:
        """Convert this element to the type of `other`, a literal exemplar."""
        return self._binary(RangeOp.CAST, other)


@dataclass(frozen=True, slots=True, repr=False)
class Dynamic(RangeElem):
    """A reference to one side of another variable's range."""

    idx: NodeIdx
    side: DynSide
    loc: Loc = field(default=Loc.IMPLICIT, compare=False)

    def __repr__(self) -> str:
        return f"${self.idx}.{self.side}"

    @override
    def children(self) -> Iterable[Elem]:
        return ()

    @override
    def dependent_on(self) -> frozenset[NodeIdx]:
        return frozenset((self.idx,))

    @override
    def update_deps(self, mapping: Mapping[NodeIdx, NodeIdx]) -> Elem:
        if (new := mapping.get(self.idx)) is None:
            return self
        logger.debug("retarget %s -> $%d", self, new)
        return Dynamic(new, self.side, self.loc)


@dataclass(frozen=True, slots=True, repr=False)
class RangeConcrete(RangeElem):
    val: Concrete
    loc: Loc = field(default=Loc.IMPLICIT, compare=False)

    def __repr__(self) -> str:
        return repr(self.val)

    @override
    def children(self) -> Iterable[Elem]:
        return ()

    @override
    def update_deps(self, mapping: Mapping[NodeIdx, NodeIdx]) -> Elem:
        return self


@dataclass(frozen=True, slots=True, repr=False)
class RangeExpr(RangeElem):
    """A binary operation over two elements."""

    lhs: Elem
    op: RangeOp
    rhs: Elem

    def __post_init__(self) -> None:
        assert not self.op.unary, f"{self.op.name} is a unary operator"

    def __repr__(self) -> str:
        if self.op in (RangeOp.MIN, RangeOp.MAX, RangeOp.CAST):
            return f"{self.op}({self.lhs!r}, {self.rhs!r})"
        return f"({self.lhs!r} {self.op} {self.rhs!r})"

    @override
    def children(self) -> Iterable[Elem]:
        return (self.lhs, self.rhs)

    @override
    def update_deps(self, mapping: Mapping[NodeIdx, NodeIdx]) -> Elem:
        return RangeExpr(
            self.lhs.update_deps(mapping), self.op, self.rhs.update_deps(mapping)
        )


@dataclass(frozen=True, slots=True, repr=False)
class RangeUnary(RangeElem):
    """A unary operation (logical or bitwise negation) over one element."""

    op: RangeOp
    term: Elem

    def __post_init__(self) -> None:
        assert self.op.unary, f"{self.op.name} is not a unary operator"

    def __repr__(self) -> str:
        return f"{self.op}{self.term!r}"

    @override
    def children(self) -> Iterable[Elem]:
        return (self.term,)

    @override
    def update_deps(self, mapping: Mapping[NodeIdx, NodeIdx]) -> Elem:
        return RangeUnary(self.op, self.term.update_deps(mapping))


@dataclass(frozen=True, slots=True, repr=False)
class Null(RangeElem):
    def __repr__(self) -> str:
        return "null"

    @override
    def children(self) -> Iterable[Elem]:
        return ()

    @override
    def update_deps(self, mapping: Mapping[NodeIdx, NodeIdx]) -> Elem:
        return self


NULL = Null()

type Elem = Dynamic | RangeConcrete | RangeExpr | RangeUnary | Null


def lit(val: Concrete, loc: Loc = Loc.IMPLICIT) -> RangeConcrete:
    """Wrap a concrete value as a range element."""
    return RangeConcrete(val, loc)
