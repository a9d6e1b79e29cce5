"""Bit-packed payload of a transformable (per-corner deformed) box.

Word 0:
  bit 31      format marker, always written, ignored on read
  bits 24-29  flip flags
  bits 0-23   one presence bit per (corner, axis) slot at 3 * corner + axis

Following words hold the present offsets two per word, high half first, in
ascending slot order. An odd count leaves the last low half zero.
"""

from __future__ import annotations

from typing import List, Sequence, Tuple

from .primitives import (
    CORNER_SLOTS,
    CornerOffsets,
    Flipped,
    InvalidFormat,
    to_signed16,
    to_signed32,
)

FORMAT_MARKER = 0x8000_0000
FLIP_SHIFT = 24
FLIP_MASK = 0x3F
PRESENCE_MASK = (1 << CORNER_SLOTS) - 1


def encode_transform(flips: Flipped, offsets: CornerOffsets) -> List[int]:
    presence = 0
    data: List[int] = []
    for index, v in enumerate(offsets.values):
        if v:
            presence |= 1 << index
            data.append(v)

    header = FORMAT_MARKER | ((int(flips) & FLIP_MASK) << FLIP_SHIFT) | presence
    words = [to_signed32(header)]
    for i in range(0, len(data), 2):
        hi = data[i] & 0xFFFF
        lo = data[i + 1] & 0xFFFF if i + 1 < len(data) else 0
        words.append(to_signed32((hi << 16) | lo))
    return words


def _unpack_halves(words: Sequence[int]) -> List[int]:
    out: List[int] = []
    for w in words:
        u = w & 0xFFFFFFFF
        out.append(to_signed16(u >> 16))
        out.append(to_signed16(u))
    return out


def decode_transform(words: Sequence[int]) -> Tuple[Flipped, CornerOffsets]:
    if not words:
        raise InvalidFormat("transform payload is empty")
    header = words[0] & 0xFFFFFFFF
    flips = Flipped((header >> FLIP_SHIFT) & FLIP_MASK)
    presence = header & PRESENCE_MASK

    halves = _unpack_halves(words[1:])
    values = [0] * CORNER_SLOTS
    consumed = 0
    for index in range(CORNER_SLOTS):
        if not (presence >> index) & 1:
            continue
        if consumed >= len(halves):
            raise InvalidFormat(
                f"presence bit {index} set but only {len(halves)} offset values in payload"
            )
        values[index] = halves[consumed]
        consumed += 1
    return flips, CornerOffsets(tuple(values))
