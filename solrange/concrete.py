"""
Concrete Solidity values.

Each kind is an immutable dataclass that validates its payload on
construction. Integers are stored as Python ints: `Uint` holds the unsigned
value and `Int` the signed one, both within the bounds of their width.
"""
# ruff: noqa: D101, D102

from __future__ import annotations

from dataclasses import dataclass

UINT256_MAX = (1 << 256) - 1
ADDRESS_WIDTH = 160


def wrap_unsigned(value: int, width: int) -> int:
    return value & ((1 << width) - 1)


def wrap_signed(value: int, width: int) -> int:
    # https://stackoverflow.com/a/9147327 (CC BY-SA 3.0)
    value = wrap_unsigned(value, width)
    if value & (1 << (width - 1)):
        return value - (1 << width)
    return value


def _check_width(width: int) -> None:
    if width <= 0 or width > 256 or width % 8 != 0:
        raise ValueError(f"invalid integer width: {width}")


@dataclass(frozen=True, slots=True)
class Uint:
    width: int
    value: int

    def __post_init__(self) -> None:
        _check_width(self.width)
        if not 0 <= self.value < (1 << self.width):
            raise ValueError(f"invalid uint{self.width}: {self.value}")

    def __repr__(self) -> str:
        return f"uint{self.width}({self.value})"

    def into_u256(self) -> int | None:
        return self.value

    def type_min(self) -> Concrete | None:
        return Uint(self.width, 0)

    def type_max(self) -> Concrete | None:
        return Uint(self.width, (1 << self.width) - 1)

    def cast(self, target: Concrete) -> Concrete | None:
        return _cast_integer(self.value, target)


@dataclass(frozen=True, slots=True)
class Int:
    width: int
    value: int

    def __post_init__(self) -> None:
        _check_width(self.width)
        bound = 1 << (self.width - 1)
        if not -bound <= self.value < bound:
            raise ValueError(f"invalid int{self.width}: {self.value}")

    def __repr__(self) -> str:
        return f"int{self.width}({self.value})"

    def into_u256(self) -> int | None:
        # negative values have no unsigned representation
        return self.value if self.value >= 0 else None

    def type_min(self) -> Concrete | None:
        return Int(self.width, -(1 << (self.width - 1)))

    def type_max(self) -> Concrete | None:
        return Int(self.width, (1 << (self.width - 1)) - 1)

    def cast(self, target: Concrete) -> Concrete | None:
        return _cast_integer(self.value, target)


@dataclass(frozen=True, slots=True)
class Bool:
    value: bool

    def __post_init__(self) -> None:
        if type(self.value) is not bool:
            raise ValueError(f"invalid bool: {self.value!r}")

    def __repr__(self) -> str:
        return "true" if self.value else "false"

    def into_u256(self) -> int | None:
        return int(self.value)

    def type_min(self) -> Concrete | None:
        return Bool(False)

    def type_max(self) -> Concrete | None:
        return Bool(True)

    def cast(self, target: Concrete) -> Concrete | None:
        match target:
            case Bool():
                return self
            case _:
                return None


@dataclass(frozen=True, slots=True)
class Address:
    value: int

    def __post_init__(self) -> None:
        if not 0 <= self.value < (1 << ADDRESS_WIDTH):
            raise ValueError(f"invalid address: {self.value}")

    def __repr__(self) -> str:
        return "0x" + self.value.to_bytes(ADDRESS_WIDTH // 8).hex()

    def into_u256(self) -> int | None:
        return self.value

    def type_min(self) -> Concrete | None:
        return Address(0)

    def type_max(self) -> Concrete | None:
        return Address((1 << ADDRESS_WIDTH) - 1)

    def cast(self, target: Concrete) -> Concrete | None:
        match target:
            case Address():
                return self
            case Uint(width) if width >= ADDRESS_WIDTH:
                return Uint(width, self.value)
            case Bytes(20):
                return Bytes(20, self.value.to_bytes(20))
            case _:
                return None


@dataclass(frozen=True, slots=True)
class Bytes:
    """A fixed-size byte array, `bytes1` through `bytes32`."""

    size: int
    value: bytes

    def __post_init__(self) -> None:
        if not 1 <= self.size <= 32:
            raise ValueError(f"invalid bytes size: {self.size}")
        if type(self.value) is not bytes:
            raise ValueError(f"invalid bytes{self.size}: {self.value!r}")
        if len(self.value) != self.size:
            raise ValueError(f"expected {self.size} bytes, got {len(self.value)}")

    def __repr__(self) -> str:
        return f"bytes{self.size}(0x{self.value.hex()})"

    def into_u256(self) -> int | None:
        # fixed bytes are left-aligned in a word
        return int.from_bytes(self.value.ljust(32, b"\x00"))

    def type_min(self) -> Concrete | None:
        return Bytes(self.size, b"\x00" * self.size)

    def type_max(self) -> Concrete | None:
        return Bytes(self.size, b"\xff" * self.size)

    def cast(self, target: Concrete) -> Concrete | None:
        match target:
            case Bytes(size):
                return Bytes(size, self.value[:size].ljust(size, b"\x00"))
            case DynBytes():
                return DynBytes(self.value)
            case Uint(width) if width == self.size * 8:
                return Uint(width, int.from_bytes(self.value))
            case Address() if self.size == 20:
                return Address(int.from_bytes(self.value))
            case _:
                return None


@dataclass(frozen=True, slots=True)
class DynBytes:
    value: bytes

    def __post_init__(self) -> None:
        if type(self.value) is not bytes:
            raise ValueError(f"invalid bytes: {self.value!r}")

    def __repr__(self) -> str:
        return f"bytes(0x{self.value.hex()})"

    def into_u256(self) -> int | None:
        return None

    def type_min(self) -> Concrete | None:
        return None

    def type_max(self) -> Concrete | None:
        return None

    def cast(self, target: Concrete) -> Concrete | None:
        match target:
            case DynBytes():
                return self
            case Bytes(size):
                return Bytes(size, self.value[:size].ljust(size, b"\x00"))
            case String():
                try:
                    return String(self.value.decode())
                except UnicodeDecodeError:
                    return None
            case _:
                return None


@dataclass(frozen=True, slots=True)
class String:
    value: str

    def __post_init__(self) -> None:
        if type(self.value) is not str:
            raise ValueError(f"invalid string: {self.value!r}")

    def __repr__(self) -> str:
        return repr(self.value)

    def into_u256(self) -> int | None:
        return None

    def type_min(self) -> Concrete | None:
        return None

    def type_max(self) -> Concrete | None:
        return None

    def cast(self, target: Concrete) -> Concrete | None:
        match target:
            case String():
                return self
            case DynBytes():
                return DynBytes(self.value.encode())
            case _:
                return None


@dataclass(frozen=True, slots=True)
class Array:
    values: tuple[Concrete, ...]

    def __post_init__(self) -> None:
        # lists are accepted, but stored as a tuple to stay hashable
        object.__setattr__(self, "values", tuple(self.values))

    def __repr__(self) -> str:
        return "[" + ", ".join(repr(v) for v in self.values) + "]"

    def into_u256(self) -> int | None:
        return None

    def type_min(self) -> Concrete | None:
        return None

    def type_max(self) -> Concrete | None:
        return None

    def cast(self, target: Concrete) -> Concrete | None:
        match target:
            case Array((exemplar, *_)):
                values = tuple(v.cast(exemplar) for v in self.values)
                if any(v is None for v in values):
                    return None
                return Array(values)  # pyright: ignore[reportArgumentType]
            case Array(()):
                return self
            case _:
                return None


type Concrete = Uint | Int | Bool | Address | Bytes | DynBytes | String | Array


def _cast_integer(value: int, target: Concrete) -> Concrete | None:
    match target:
        case Uint(width):
            return Uint(width, wrap_unsigned(value, width))
        case Int(width):
            return Int(width, wrap_signed(value, width))
        case Address():
            return Address(wrap_unsigned(value, ADDRESS_WIDTH))
        case Bytes(size):
            return Bytes(size, wrap_unsigned(value, size * 8).to_bytes(size))
        case _:
            return None
