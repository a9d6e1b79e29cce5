"""Top-level blueprint: a root group plus counts and a bounding box.

The blueprint fields live in the same compound as the root group's:
  boxes  Int           number of boxes, carried as written
  tiles  Int           number of tiles, carried as written
  min    IntArray[3]   minimum corner
  size   IntArray[3]   extent, so max = min + size
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .group import Group, get_int_field, get_int_array_field, parse_group, serialize_group
from .nbt import Compound, Int, IntArray, load_nbt, save_nbt
from .primitives import InvalidFormat, Pos, to_signed32


@dataclass(frozen=True)
class Blueprint:
    boxes: int
    tiles: int
    min_pos: Pos
    max_pos: Pos
    root: Group

    @property
    def size(self) -> Pos:
        return self.max_pos - self.min_pos

    def counts_consistent(self) -> bool:
        return self.boxes == self.root.count_boxes() and self.tiles == self.root.count_tiles()


def _get_pos(nbt: dict, name: str) -> Pos:
    arr = get_int_array_field(nbt, name)
    if len(arr) != 3:
        raise InvalidFormat(f"expected 3 ints, got {len(arr)}", name)
    return Pos(arr[0], arr[1], arr[2])


def parse_blueprint(nbt: dict) -> Blueprint:
    boxes = get_int_field(nbt, "boxes") & 0xFFFFFFFF
    tiles = get_int_field(nbt, "tiles") & 0xFFFFFFFF
    min_pos = _get_pos(nbt, "min")
    size = _get_pos(nbt, "size")
    root = parse_group(nbt)
    return Blueprint(boxes=boxes, tiles=tiles, min_pos=min_pos, max_pos=min_pos + size, root=root)


def serialize_blueprint(bp: Blueprint) -> Compound:
    nbt = serialize_group(bp.root)
    nbt["boxes"] = Int(to_signed32(bp.boxes))
    nbt["tiles"] = Int(to_signed32(bp.tiles))
    nbt["min"] = IntArray(bp.min_pos.to_list())
    nbt["size"] = IntArray(bp.size.to_list())
    return nbt


def load_blueprint(path: Path) -> Blueprint:
    return parse_blueprint(load_nbt(path))


def save_blueprint(path: Path, bp: Blueprint, compressed: bool = True) -> None:
    save_nbt(path, serialize_blueprint(bp), compressed=compressed)
