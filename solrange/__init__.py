"""A symbolic range-expression engine for Solidity program analysis."""
# ruff: noqa: F401

from .common import DynSide, Loc, Mode, NodeIdx, Ordering, RangeOp
from .compare import concrete_eq, concrete_ord
from .concrete import (
    Address,
    Array,
    Bool,
    Bytes,
    Concrete,
    DynBytes,
    Int,
    String,
    Uint,
)
from .elem import (
    NULL,
    Dynamic,
    Elem,
    Null,
    RangeConcrete,
    RangeElem,
    RangeExpr,
    RangeUnary,
    lit,
)
from .graph import (
    BuiltIn,
    ConcreteType,
    ContextVar,
    Graph,
    SolcRange,
    UserType,
    VarGraph,
    VarType,
)
from .reduce import (
    evaluate,
    evaluate_range,
    exec_op,
    range_eq,
    range_ord,
    simplify,
    simplify_range,
    walk,
)
