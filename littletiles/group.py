"""Recursive mapping between groups and their NBT compounds.

Group compound fields:
  grid  Int            grid resolution of the group
  c     List[Compound] child groups (always written, may be empty)
  s     Compound       structure, copied through untouched
  e     Compound       extension, copied through untouched
  t     Compound       material name -> flat List[IntArray]

Within a material list a one-element IntArray is a color marker that applies
to the tile arrays following it, until the next marker.
"""

from __future__ import annotations

import copy
import json
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional

from .nbt import Compound, Int, IntArray, TagList
from .primitives import Color, InvalidFormat
from .tiles import Tile, decode_tile, encode_tile

GRID_MAX = 0xFFFF

ColorTiles = Dict[Color, List[Tile]]
MaterialTiles = Dict[str, ColorTiles]


@dataclass(frozen=True)
class Group:
    grid: int
    children: List["Group"] = field(default_factory=list)
    tiles: MaterialTiles = field(default_factory=dict)
    structure: Optional[Compound] = None
    extension: Optional[Compound] = None
    # Element kind written for an empty "c" list; TAG_End when None.
    children_kind: Optional[int] = field(default=None, compare=False, repr=False)

    def iter_groups(self) -> Iterator["Group"]:
        """Depth-first, this group first."""
        yield self
        for child in self.children:
            yield from child.iter_groups()

    def count_boxes(self) -> int:
        return sum(len(ts) for g in self.iter_groups() for ct in g.tiles.values() for ts in ct.values())

    def count_tiles(self) -> int:
        return sum(1 for g in self.iter_groups() for ct in g.tiles.values() for ts in ct.values() if ts)


def _key(name: str) -> str:
    return json.dumps(name)


def get_int_field(nbt: dict, name: str) -> int:
    value = nbt.get(name)
    if not isinstance(value, Int):
        if value is None:
            raise InvalidFormat(f"missing int field '{name}'")
        raise InvalidFormat(f"field '{name}' is {type(value).__name__}, expected Int")
    return int(value)


def get_int_array_field(nbt: dict, name: str) -> List[int]:
    value = nbt.get(name)
    if not isinstance(value, IntArray):
        if value is None:
            raise InvalidFormat(f"missing int array field '{name}'")
        raise InvalidFormat(f"field '{name}' is {type(value).__name__}, expected IntArray")
    return list(value)


def _get_optional_compound(nbt: dict, name: str) -> Optional[Compound]:
    value = nbt.get(name)
    if value is None:
        return None
    if not isinstance(value, dict):
        raise InvalidFormat(f"field '{name}' is {type(value).__name__}, expected Compound")
    return copy.deepcopy(value if isinstance(value, Compound) else Compound(value))


def _children_list(nbt: dict) -> TagList:
    clist = nbt.get("c")
    if clist is None:
        return TagList()
    if not isinstance(clist, TagList):
        raise InvalidFormat(f"field 'c' is {type(clist).__name__}, expected List")
    return clist


def _parse_children(clist: TagList) -> List[Group]:
    children = []
    for i, item in enumerate(clist):
        if not isinstance(item, dict):
            raise InvalidFormat(f"child is {type(item).__name__}, expected Compound", f"c[{i}]")
        try:
            children.append(parse_group(item))
        except InvalidFormat as exc:
            raise exc.within(f"c[{i}]") from None
    return children


def _parse_material(flat: list) -> ColorTiles:
    color_tiles: ColorTiles = {}
    current = Color()
    for i, tag in enumerate(flat):
        if not isinstance(tag, IntArray):
            raise InvalidFormat(f"tile entry is {type(tag).__name__}, expected IntArray", f"[{i}]")
        if len(tag) == 1:
            current = Color.from_int(tag[0])
            continue
        try:
            tile = decode_tile(tag)
        except InvalidFormat as exc:
            raise exc.within(f"[{i}]") from None
        color_tiles.setdefault(current, []).append(tile)
    return color_tiles


def _parse_tiles(nbt: dict) -> MaterialTiles:
    table = nbt.get("t")
    if table is None:
        raise InvalidFormat("missing tile table 't'")
    if not isinstance(table, dict):
        raise InvalidFormat(f"field 't' is {type(table).__name__}, expected Compound")
    tiles: MaterialTiles = {}
    for material, flat in table.items():
        where = f"t[{_key(material)}]"
        if not isinstance(flat, TagList):
            raise InvalidFormat(f"material list is {type(flat).__name__}, expected List", where)
        try:
            tiles[str(material)] = _parse_material(flat)
        except InvalidFormat as exc:
            raise exc.within(where) from None
    return tiles


def parse_group(nbt: dict) -> Group:
    """Decode a group compound. The compound itself is left untouched."""
    grid = get_int_field(nbt, "grid")
    if not 0 <= grid <= GRID_MAX:
        raise InvalidFormat(f"grid {grid} outside 0..{GRID_MAX}", "grid")
    clist = _children_list(nbt)
    children = _parse_children(clist)
    children_kind = clist.subtype if not clist else None
    structure = _get_optional_compound(nbt, "s")
    extension = _get_optional_compound(nbt, "e")
    tiles = _parse_tiles(nbt)
    return Group(
        grid=grid,
        children=children,
        tiles=tiles,
        structure=structure,
        extension=extension,
        children_kind=children_kind,
    )


def _serialize_material(color_tiles: ColorTiles) -> TagList:
    flat = TagList()
    for color, tiles in color_tiles.items():
        flat.append(IntArray([color.to_int()]))
        for tile in tiles:
            flat.append(IntArray(encode_tile(tile)))
    return flat


def serialize_group(group: Group) -> Compound:
    nbt = Compound()
    nbt["grid"] = Int(group.grid)
    children = [serialize_group(child) for child in group.children]
    nbt["c"] = TagList(children, subtype=None if children else group.children_kind)
    if group.structure is not None:
        nbt["s"] = copy.deepcopy(group.structure)
    if group.extension is not None:
        nbt["e"] = copy.deepcopy(group.extension)
    table = Compound()
    for material, color_tiles in group.tiles.items():
        table[material] = _serialize_material(color_tiles)
    nbt["t"] = table
    return nbt
