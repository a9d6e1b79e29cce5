#!/usr/bin/env python3
"""Inspect and round-trip LittleTiles blueprint .nbt files.

Usage:
  littletiles inspect blueprint.nbt
  littletiles roundtrip blueprint.nbt [--output out.nbt]
  littletiles self-test --output /tmp/bp.nbt

Environment:
  LITTLETILES_LOG_LEVEL  logging level (default INFO)
  LITTLETILES_COMPRESS   gzip written files, true/false (default true)
"""

from __future__ import annotations

import argparse
import gzip
import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from .blueprint import Blueprint, load_blueprint, parse_blueprint, save_blueprint, serialize_blueprint
from .group import Group
from .models import summarize_blueprint
from .nbt import NBTError, dumps_nbt, loads_nbt
from .primitives import Axis, BoxCorner, Color, CornerOffsets, Flipped, InvalidFormat, Pos
from .tiles import Box, TransformableBox

LOG = logging.getLogger("littletiles")


@dataclass
class CliSettings:
    log_level: str
    compress: bool

    @classmethod
    def from_env(cls) -> "CliSettings":
        log_level = os.environ.get("LITTLETILES_LOG_LEVEL", "INFO").upper()
        compress = os.environ.get("LITTLETILES_COMPRESS", "true").lower() == "true"
        return cls(log_level=log_level, compress=compress)


def _uncompressed(raw: bytes) -> bytes:
    try:
        return gzip.decompress(raw)
    except OSError:
        return raw


def _cmd_inspect(path: Path) -> int:
    bp = load_blueprint(path)
    summary = summarize_blueprint(bp)
    if not summary.counts_consistent:
        LOG.warning(
            "Declared counts boxes=%s tiles=%s differ from counted boxes=%s tiles=%s",
            summary.boxes,
            summary.tiles,
            summary.counted_boxes,
            summary.counted_tiles,
        )
    print(summary.model_dump_json(indent=2))
    return 0


def _cmd_roundtrip(path: Path, output: Optional[Path], compress: bool) -> int:
    raw = path.read_bytes()
    name, root = loads_nbt(raw)
    bp = parse_blueprint(root)

    out = output or path.with_name(path.name + ".roundtrip.nbt")
    encoded = dumps_nbt(serialize_blueprint(bp), name=name)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_bytes(gzip.compress(encoded) if compress else encoded)

    identical = _uncompressed(raw) == encoded
    print(f"IN : {path}")
    print(f"OUT: {out}")
    print("IDENTICAL" if identical else "DIFF")
    return 0 if identical else 1


def _sample_blueprint() -> Blueprint:
    white = Color(255, 255, 255, 255)
    corners = CornerOffsets.from_mapping(
        {
            (BoxCorner.EUN, Axis.X): -2,
            (BoxCorner.EUS, Axis.Y): 3,
            (BoxCorner.WDS, Axis.Z): 1,
        }
    )
    child = Group(
        grid=16,
        tiles={"minecraft:stone": {Color(128, 128, 128, 255): [Box(Pos(0, 0, 0), Pos(8, 8, 8))]}},
    )
    root = Group(
        grid=4,
        children=[child],
        tiles={
            "minecraft:white_wool": {
                white: [
                    Box(Pos(0, 0, 0), Pos(1, 1, 1)),
                    TransformableBox(Pos(1, 0, 0), Pos(2, 1, 1), Flipped.UP | Flipped.EAST, corners),
                ]
            }
        },
    )
    return Blueprint(boxes=3, tiles=2, min_pos=Pos(0, 0, 0), max_pos=Pos(2, 2, 2), root=root)


def _cmd_self_test(output: Path, compress: bool) -> int:
    expected = _sample_blueprint()
    save_blueprint(output, expected, compressed=compress)

    # Read back to catch obvious codec mistakes.
    got = load_blueprint(output)
    if got != expected:
        LOG.error("self-test: blueprint differs after reload")
        return 1
    if not got.counts_consistent():
        LOG.error("self-test: counts inconsistent after reload")
        return 1
    LOG.info("self-test: wrote and reloaded %s", output)
    return 0


def main(argv: List[str]) -> int:
    settings = CliSettings.from_env()
    ap = argparse.ArgumentParser(description="Inspect and round-trip LittleTiles blueprint .nbt files")
    ap.add_argument("--log-level", default=settings.log_level, help="Logging level (default: %(default)s)")
    compress = ap.add_mutually_exclusive_group()
    compress.add_argument("--gzip", dest="compress", action="store_true", help="Write gzipped NBT")
    compress.add_argument("--no-gzip", dest="compress", action="store_false", help="Write uncompressed NBT")
    ap.set_defaults(compress=settings.compress)
    sub = ap.add_subparsers(dest="command", required=True)

    p_inspect = sub.add_parser("inspect", help="Print a JSON summary of a blueprint")
    p_inspect.add_argument("path")

    p_round = sub.add_parser("roundtrip", help="Decode and re-encode a blueprint, compare tag bytes")
    p_round.add_argument("path")
    p_round.add_argument("--output", help="Output path (default: <path>.roundtrip.nbt)")

    p_self = sub.add_parser("self-test", help="Write a small blueprint and verify it by reloading it")
    p_self.add_argument("--output", required=True)

    args = ap.parse_args(argv)
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    if args.command == "self-test":
        return _cmd_self_test(Path(args.output), args.compress)

    path = Path(args.path)
    if not path.exists():
        print(f"Missing blueprint: {path}", file=sys.stderr)
        return 2

    try:
        if args.command == "inspect":
            return _cmd_inspect(path)
        output = Path(args.output) if args.output else None
        return _cmd_roundtrip(path, output, args.compress)
    except (InvalidFormat, NBTError) as exc:
        print(f"ERROR: {path}: {exc}", file=sys.stderr)
        return 1


def run() -> None:
    raise SystemExit(main(sys.argv[1:]))


if __name__ == "__main__":
    run()
