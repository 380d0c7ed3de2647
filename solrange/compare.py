"""
Equality and partial ordering of concrete values.

Values are first compared as unsigned 256-bit integers. Anything that has no
unsigned representation is either a negative `Int` (which orders below every
unsigned value) or a non-numeric kind compared structurally.
"""

from __future__ import annotations

from line_profiler import profile

from .common import Ordering
from .concrete import Array, Concrete, DynBytes, Int, String


@profile
def concrete_eq(a: Concrete, b: Concrete) -> bool:
    """Return True iff the two values are known to be equal."""
    match (a.into_u256(), b.into_u256()):
        case (int(x), int(y)):
            return x == y
        case (int(), None) | (None, int()):
            return False
        case _:
            pass
    match (a, b):
        case (Int(_, x), Int(_, y)):
            return x == y
        case (DynBytes(x), DynBytes(y)):
            return x == y
        case (String(x), String(y)):
            return x == y
        case (DynBytes(x), String(y)):
            return x == y.encode()
        case (String(x), DynBytes(y)):
            return x.encode() == y
        case (Array(x), Array(y)):
            return len(x) == len(y) and all(concrete_eq(p, q) for p, q in zip(x, y))
        case _:
            return False


@profile
def concrete_ord(a: Concrete, b: Concrete) -> Ordering | None:
    """Order the two values, or return None if they are not comparable."""
    match (a.into_u256(), b.into_u256()):
        case (int(x), int(y)):
            return Ordering.of(x, y)
        case (int(), None):
            # an Int that can't be made unsigned is negative
            return Ordering.GREATER if isinstance(b, Int) else None
        case (None, int()):
            return Ordering.LESS if isinstance(a, Int) else None
        case _:
            pass
    match (a, b):
        case (Int(_, x), Int(_, y)):
            return Ordering.of(x, y)
        case (DynBytes(x), DynBytes(y)):
            return Ordering.of(x, y)
        case (String(x), String(y)):
            return Ordering.of(x, y)
        case (DynBytes(x), String(y)):
            return Ordering.of(x, y.encode())
        case (String(x), DynBytes(y)):
            return Ordering.of(x.encode(), y)
        case _:
            return None
