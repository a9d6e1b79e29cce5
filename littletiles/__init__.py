"""Codec between LittleTiles blueprint NBT and a typed voxel model."""

from .blueprint import Blueprint, load_blueprint, parse_blueprint, save_blueprint, serialize_blueprint
from .group import Group, parse_group, serialize_group
from .primitives import Axis, BoxCorner, Color, CornerOffsets, Flipped, InvalidFormat, Pos
from .tiles import Box, Tile, TransformableBox, decode_tile, encode_tile
from .transform import decode_transform, encode_transform

__all__ = [
    "Axis",
    "Blueprint",
    "Box",
    "BoxCorner",
    "Color",
    "CornerOffsets",
    "Flipped",
    "Group",
    "InvalidFormat",
    "Pos",
    "Tile",
    "TransformableBox",
    "decode_tile",
    "decode_transform",
    "encode_tile",
    "encode_transform",
    "load_blueprint",
    "parse_blueprint",
    "parse_group",
    "save_blueprint",
    "serialize_blueprint",
    "serialize_group",
]
