from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from .blueprint import Blueprint
from .group import Group
from .primitives import Color
from .tiles import TransformableBox


class ColorSummary(BaseModel):
    rgba: List[int] = Field(min_length=4, max_length=4)
    boxes: int
    transformable: int


class GroupSummary(BaseModel):
    grid: int
    materials: Dict[str, List[ColorSummary]]
    structure_id: Optional[str] = None
    has_extension: bool = False
    children: List["GroupSummary"] = Field(default_factory=list)


GroupSummary.model_rebuild()


class BlueprintSummary(BaseModel):
    boxes: int
    tiles: int
    counted_boxes: int
    counted_tiles: int
    counts_consistent: bool
    min: List[int]
    max: List[int]
    size: List[int]
    group_count: int
    root: GroupSummary


def _color_rgba(color: Color) -> List[int]:
    return [color.r, color.g, color.b, color.a]


def summarize_group(group: Group) -> GroupSummary:
    materials: Dict[str, List[ColorSummary]] = {}
    for material, color_tiles in group.tiles.items():
        materials[material] = [
            ColorSummary(
                rgba=_color_rgba(color),
                boxes=len(tiles),
                transformable=sum(1 for t in tiles if isinstance(t, TransformableBox)),
            )
            for color, tiles in color_tiles.items()
        ]
    structure_id = None
    if group.structure is not None and isinstance(group.structure.get("id"), str):
        structure_id = str(group.structure["id"])
    return GroupSummary(
        grid=group.grid,
        materials=materials,
        structure_id=structure_id,
        has_extension=group.extension is not None,
        children=[summarize_group(child) for child in group.children],
    )


def summarize_blueprint(bp: Blueprint) -> BlueprintSummary:
    return BlueprintSummary(
        boxes=bp.boxes,
        tiles=bp.tiles,
        counted_boxes=bp.root.count_boxes(),
        counted_tiles=bp.root.count_tiles(),
        counts_consistent=bp.counts_consistent(),
        min=bp.min_pos.to_list(),
        max=bp.max_pos.to_list(),
        size=bp.size.to_list(),
        group_count=sum(1 for _ in bp.root.iter_groups()),
        root=summarize_group(bp.root),
    )
