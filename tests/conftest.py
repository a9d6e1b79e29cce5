from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from littletiles.nbt import Compound, Int, IntArray, String, TagList  # noqa: E402


def tile_list(*arrays) -> TagList:
    return TagList(IntArray(a) for a in arrays)


def group_nbt(grid: int, tiles: dict, children=(), structure=None) -> Compound:
    # Same key order serialize_group writes, so the bytes can be compared.
    nbt = Compound()
    nbt["grid"] = Int(grid)
    nbt["c"] = TagList(children)
    if structure is not None:
        nbt["s"] = structure
    nbt["t"] = Compound((material, tile_list(*arrays)) for material, arrays in tiles.items())
    return nbt


def fixed() -> Compound:
    return Compound(id=String("fixed"))


@pytest.fixture()
def blueprint_nbt() -> Compound:
    lime = group_nbt(4, {"minecraft:lime_wool": [[-1], [0, 0, 4, 1, 1, 5]]}, structure=fixed())
    purple = group_nbt(4, {"minecraft:purple_wool": [[-1], [1, 0, 5, 2, 1, 6]]}, children=[lime], structure=fixed())
    red = group_nbt(4, {"minecraft:red_wool": [[-1], [2, 0, 6, 3, 1, 7]]}, children=[purple], structure=fixed())
    stone = group_nbt(
        4,
        {
            "minecraft:stone": [
                [-1],
                [3, 0, 3, 4, 1, 4],
                [3, 0, 4, 4, 1, 5],
                [4, 0, 3, 5, 1, 4],
                [4, 0, 4, 5, 1, 5],
            ]
        },
        structure=fixed(),
    )
    root = group_nbt(4, {"minecraft:white_wool": [[-1], [3, 0, 7, 4, 1, 8]]}, children=[stone, red])
    root["boxes"] = Int(8)
    root["tiles"] = Int(5)
    root["min"] = IntArray([0, 0, 3])
    root["size"] = IntArray([5, 1, 5])
    return root
