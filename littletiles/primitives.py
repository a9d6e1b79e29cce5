"""Value types shared by the tile, group and blueprint codecs."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Dict, Iterator, List, Mapping, Tuple


class InvalidFormat(Exception):
    """Raised when a tag tree does not have the shape of a blueprint.

    ``path`` locates the offending node, e.g. ``c[1].t["minecraft:stone"][2]``.
    """

    def __init__(self, message: str, path: str = ""):
        super().__init__(message)
        self.message = message
        self.path = path

    def within(self, prefix: str) -> "InvalidFormat":
        if not self.path:
            path = prefix
        elif self.path.startswith("["):
            path = prefix + self.path
        else:
            path = f"{prefix}.{self.path}"
        return InvalidFormat(self.message, path)

    def __str__(self) -> str:
        if self.path:
            return f"{self.path}: {self.message}"
        return self.message


def to_signed32(v: int) -> int:
    v &= 0xFFFFFFFF
    return v - 0x1_0000_0000 if v & 0x8000_0000 else v


def to_signed16(v: int) -> int:
    v &= 0xFFFF
    return v - 0x1_0000 if v & 0x8000 else v


@dataclass(frozen=True)
class Pos:
    """A position in little units (block coordinates times the group grid)."""

    x: int
    y: int
    z: int

    def __add__(self, other: "Pos") -> "Pos":
        return Pos(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: "Pos") -> "Pos":
        return Pos(self.x - other.x, self.y - other.y, self.z - other.z)

    def to_list(self) -> List[int]:
        return [self.x, self.y, self.z]


@dataclass(frozen=True)
class Color:
    r: int = 0
    g: int = 0
    b: int = 0
    a: int = 0

    @classmethod
    def from_int(cls, value: int) -> "Color":
        """Unpack a 32-bit RGBA word, red in the highest byte."""
        c = value & 0xFFFFFFFF
        return cls(r=(c >> 24) & 0xFF, g=(c >> 16) & 0xFF, b=(c >> 8) & 0xFF, a=c & 0xFF)

    def to_int(self) -> int:
        """Pack into the signed 32-bit word stored in color markers."""
        for name in ("r", "g", "b", "a"):
            channel = getattr(self, name)
            if not 0 <= channel <= 0xFF:
                raise InvalidFormat(f"color channel {name}={channel} outside 0..255")
        return to_signed32((self.r << 24) | (self.g << 16) | (self.b << 8) | self.a)


class Axis(enum.IntEnum):
    X = 0
    Y = 1
    Z = 2


class BoxCorner(enum.IntEnum):
    """The eight box corners in wire order (East/West, Up/Down, North/South)."""

    EUN = 0
    EUS = 1
    EDN = 2
    EDS = 3
    WUN = 4
    WUS = 5
    WDN = 6
    WDS = 7


class Flipped(enum.IntFlag):
    EAST = 0b000001
    WEST = 0b000010
    SOUTH = 0b000100
    NORTH = 0b001000
    UP = 0b010000
    DOWN = 0b100000


NONE_FLIPPED = Flipped(0)

CORNER_SLOTS = len(BoxCorner) * len(Axis)


def flag_index(corner: BoxCorner, axis: Axis) -> int:
    return 3 * int(corner) + int(axis)


@dataclass(frozen=True)
class CornerOffsets:
    """Per-corner, per-axis signed 16-bit offsets stored in flag-index order.

    A zero slot and an absent slot are the same thing.
    """

    values: Tuple[int, ...] = (0,) * CORNER_SLOTS

    def __post_init__(self) -> None:
        values = tuple(int(v) for v in self.values)
        if len(values) != CORNER_SLOTS:
            raise ValueError(f"expected {CORNER_SLOTS} corner offsets, got {len(values)}")
        for v in values:
            if not -0x8000 <= v <= 0x7FFF:
                raise ValueError(f"corner offset {v} does not fit in 16 bits")
        object.__setattr__(self, "values", values)

    @classmethod
    def zero(cls) -> "CornerOffsets":
        return cls()

    @classmethod
    def from_mapping(cls, offsets: Mapping[Tuple[BoxCorner, Axis], int]) -> "CornerOffsets":
        values = [0] * CORNER_SLOTS
        for (corner, axis), v in offsets.items():
            values[flag_index(corner, axis)] = v
        return cls(tuple(values))

    def __getitem__(self, key: Tuple[BoxCorner, Axis]) -> int:
        corner, axis = key
        return self.values[flag_index(corner, axis)]

    def items(self) -> Iterator[Tuple[BoxCorner, Axis, int]]:
        """Yield the non-zero slots, corners outer and axes inner."""
        for corner in BoxCorner:
            for axis in Axis:
                v = self.values[flag_index(corner, axis)]
                if v:
                    yield corner, axis, v

    def to_mapping(self) -> Dict[Tuple[BoxCorner, Axis], int]:
        return {(corner, axis): v for corner, axis, v in self.items()}

    def is_zero(self) -> bool:
        return not any(self.values)
