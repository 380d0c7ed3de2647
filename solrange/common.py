"""Shared vocabulary: node indices, locations, sides, operators and modes."""
# ruff: noqa: D101, D102

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import ClassVar

type NodeIdx = int


@dataclass(frozen=True, slots=True)
class Loc:
    """A span in a source file; `Loc.IMPLICIT` when there is none."""

    IMPLICIT: ClassVar[Loc]

    file_no: int
    start: int
    end: int

    def __repr__(self) -> str:
        if self.file_no < 0:
            return "Loc(implicit)"
        return f"Loc({self.file_no}:{self.start}-{self.end})"


Loc.IMPLICIT = Loc(-1, 0, 0)


class DynSide(Enum):
    MIN = "range_min"
    MAX = "range_max"

    def __str__(self) -> str:
        return self.value


class Ordering(IntEnum):
    LESS = -1
    EQUAL = 0
    GREATER = 1

    @classmethod
    def of(cls, a: int | bytes | str, b: int | bytes | str) -> Ordering:
        assert type(a) is type(b)
        if a < b:  # pyright: ignore[reportOperatorIssue]
            return cls.LESS
        elif a > b:  # pyright: ignore[reportOperatorIssue]
            return cls.GREATER
        return cls.EQUAL


class RangeOp(Enum):
    # arithmetic
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    MOD = "%"
    EXP = "**"
    SHL = "<<"
    SHR = ">>"
    # selection
    MIN = "min"
    MAX = "max"
    # comparison
    LT = "<"
    GT = ">"
    LTE = "<="
    GTE = ">="
    EQ = "=="
    NEQ = "!="
    # logic
    AND = "&&"
    OR = "||"
    NOT = "!"
    # bitwise
    BIT_AND = "&"
    BIT_OR = "|"
    BIT_XOR = "^"
    BIT_NOT = "~"
    # conversion
    CAST = "cast"

    @property
    def unary(self) -> bool:
        return self in UNARY_OPS

    def __str__(self) -> str:
        return self.value


UNARY_OPS = frozenset((RangeOp.NOT, RangeOp.BIT_NOT))


class Mode(Enum):
    """Selects how variable references are resolved during a reduction."""

    EVAL = "eval"
    SIMPLIFY = "simplify"
