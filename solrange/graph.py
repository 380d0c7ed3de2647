"""
The variable graph that range elements are resolved against.

The reduction code only depends on the `Graph` protocol. `VarGraph` is a
simple in-memory implementation, used by the test suite and by callers that
don't maintain a graph of their own.
"""
# ruff: noqa: D101, D102

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Mapping, Protocol

from .common import DynSide, Loc, NodeIdx
from .concrete import Concrete
from .elem import Elem, RangeConcrete

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SolcRange:
    """The lower and upper bounds of a variable."""

    min: Elem
    max: Elem

    @classmethod
    def exact(cls, val: Concrete, loc: Loc = Loc.IMPLICIT) -> SolcRange:
        elem = RangeConcrete(val, loc)
        return cls(elem, elem)

    @classmethod
    def default_for(cls, exemplar: Concrete) -> SolcRange | None:
        """Return the full range of the exemplar's type, if it is bounded."""
        lo, hi = exemplar.type_min(), exemplar.type_max()
        if lo is None or hi is None:
            return None
        return cls(RangeConcrete(lo), RangeConcrete(hi))

    def range_min(self) -> Elem:
        return self.min

    def range_max(self) -> Elem:
        return self.max

    def side(self, side: DynSide) -> Elem:
        match side:
            case DynSide.MIN:
                return self.min
            case DynSide.MAX:
                return self.max

    def dependent_on(self) -> frozenset[NodeIdx]:
        return self.min.dependent_on() | self.max.dependent_on()

    def update_deps(self, mapping: Mapping[NodeIdx, NodeIdx]) -> SolcRange:
        return SolcRange(self.min.update_deps(mapping), self.max.update_deps(mapping))


@dataclass(frozen=True, slots=True)
class BuiltIn:
    """An elementary type (uint256, bool, ...), possibly with a known range."""

    name: str
    range: SolcRange | None = None


@dataclass(frozen=True, slots=True)
class ConcreteType:
    """A variable known to hold exactly one value."""

    value: Concrete


@dataclass(frozen=True, slots=True)
class UserType:
    """A struct, contract or other type that carries no range."""

    name: str


type VarType = BuiltIn | ConcreteType | UserType


@dataclass(frozen=True, slots=True)
class ContextVar:
    name: str
    ty: VarType
    loc: Loc | None = None


class Graph(Protocol):
    def resolve(self, idx: NodeIdx) -> ContextVar: ...

    def is_symbolic(self, idx: NodeIdx) -> bool: ...


class VarGraph:
    """An in-memory, append-only table of variables."""

    def __init__(self) -> None:
        self._vars = list[ContextVar]()
        self._symbolic = set[NodeIdx]()

    def __len__(self) -> int:
        return len(self._vars)

    def _check(self, idx: NodeIdx) -> None:
        if not 0 <= idx < len(self._vars):
            raise ValueError(f"unknown variable: {idx}")

    def declare(
        self,
        name: str,
        ty: VarType,
        loc: Loc | None = None,
        symbolic: bool = False,
    ) -> NodeIdx:
        idx = len(self._vars)
        self._vars.append(ContextVar(name, ty, loc))
        if symbolic:
            self._symbolic.add(idx)
        logger.debug("declare $%d: %s %r", idx, name, ty)
        return idx

    def resolve(self, idx: NodeIdx) -> ContextVar:
        self._check(idx)
        return self._vars[idx]

    def is_symbolic(self, idx: NodeIdx) -> bool:
        self._check(idx)
        return idx in self._symbolic

    def set_symbolic(self, idx: NodeIdx, symbolic: bool) -> None:
        self._check(idx)
        if symbolic:
            self._symbolic.add(idx)
        else:
            self._symbolic.discard(idx)

    def set_range(self, idx: NodeIdx, rng: SolcRange | None) -> None:
        var = self.resolve(idx)
        match var.ty:
            case BuiltIn(name):
                self._vars[idx] = replace(var, ty=BuiltIn(name, rng))
            case other:
                raise TypeError(f"cannot set range of {var.name}: {other}")
        logger.debug("set range $%d: %r", idx, rng)

    def fork(self, idx: NodeIdx) -> NodeIdx:
        """Copy a variable into a fresh index, e.g. when entering a new context."""
        var = self.resolve(idx)
        return self.declare(var.name, var.ty, var.loc, self.is_symbolic(idx))
