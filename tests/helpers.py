"""Test helpers for building literals and variables."""

from solrange import (
    BuiltIn,
    DynSide,
    Dynamic,
    Int,
    NodeIdx,
    RangeConcrete,
    SolcRange,
    Uint,
    VarGraph,
)
from solrange.elem import Elem


def u256(value: int) -> RangeConcrete:
    return RangeConcrete(Uint(256, value))


def i256(value: int) -> RangeConcrete:
    return RangeConcrete(Int(256, value))


def lo(idx: NodeIdx) -> Dynamic:
    return Dynamic(idx, DynSide.MIN)


def hi(idx: NodeIdx) -> Dynamic:
    return Dynamic(idx, DynSide.MAX)


def uint_var(
    graph: VarGraph,
    name: str,
    bounds: tuple[Elem, Elem] | None = None,
    symbolic: bool = False,
) -> NodeIdx:
    """Declare a uint256 variable with the given bounds (or no range at all)."""
    rng = None if bounds is None else SolcRange(*bounds)
    return graph.declare(name, BuiltIn("uint256", rng), symbolic=symbolic)
