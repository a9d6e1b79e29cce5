from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence, Union

from .primitives import NONE_FLIPPED, CornerOffsets, Flipped, InvalidFormat, Pos
from .transform import decode_transform, encode_transform

BOX_INTS = 6


@dataclass(frozen=True)
class Box:
    min_pos: Pos
    max_pos: Pos


@dataclass(frozen=True)
class TransformableBox:
    min_pos: Pos
    max_pos: Pos
    flips: Flipped = NONE_FLIPPED
    corners: CornerOffsets = field(default_factory=CornerOffsets.zero)


Tile = Union[Box, TransformableBox]


def _bbox_ints(tile: Tile) -> List[int]:
    return tile.min_pos.to_list() + tile.max_pos.to_list()


def encode_tile(tile: Tile) -> List[int]:
    """Flatten a tile into ``min xyz, max xyz[, transform words...]``."""
    if isinstance(tile, TransformableBox):
        return _bbox_ints(tile) + encode_transform(tile.flips, tile.corners)
    return _bbox_ints(tile)


def decode_tile(arr: Sequence[int]) -> Tile:
    n = len(arr)
    if n < BOX_INTS:
        raise InvalidFormat(f"tile array has {n} ints, expected at least {BOX_INTS}")
    min_pos = Pos(arr[0], arr[1], arr[2])
    max_pos = Pos(arr[3], arr[4], arr[5])
    if n == BOX_INTS:
        return Box(min_pos, max_pos)
    flips, corners = decode_transform(arr[BOX_INTS:])
    return TransformableBox(min_pos, max_pos, flips, corners)
