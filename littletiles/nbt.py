"""Typed NBT tag tree with a big-endian binary reader/writer.

Values keep their tag kind (``Int`` vs ``Short``, ``IntArray`` vs a list of
ints) so a document can be read and written back byte for byte.
"""

from __future__ import annotations

import gzip
import struct
import zlib
from pathlib import Path
from typing import Iterable, Optional, Tuple


TAG_END = 0
TAG_BYTE = 1
TAG_SHORT = 2
TAG_INT = 3
TAG_LONG = 4
TAG_FLOAT = 5
TAG_DOUBLE = 6
TAG_BYTE_ARRAY = 7
TAG_STRING = 8
TAG_LIST = 9
TAG_COMPOUND = 10
TAG_INT_ARRAY = 11
TAG_LONG_ARRAY = 12

GZIP_MAGIC = b"\x1f\x8b"


class NBTError(Exception):
    pass


class Byte(int):
    tag_id = TAG_BYTE

    def __repr__(self) -> str:
        return f"Byte({int(self)})"


class Short(int):
    tag_id = TAG_SHORT

    def __repr__(self) -> str:
        return f"Short({int(self)})"


class Int(int):
    tag_id = TAG_INT

    def __repr__(self) -> str:
        return f"Int({int(self)})"


class Long(int):
    tag_id = TAG_LONG

    def __repr__(self) -> str:
        return f"Long({int(self)})"


class Float(float):
    tag_id = TAG_FLOAT

    def __repr__(self) -> str:
        return f"Float({float(self)!r})"


class Double(float):
    tag_id = TAG_DOUBLE

    def __repr__(self) -> str:
        return f"Double({float(self)!r})"


class String(str):
    tag_id = TAG_STRING


class ByteArray(bytes):
    tag_id = TAG_BYTE_ARRAY


class IntArray(list):
    tag_id = TAG_INT_ARRAY

    def __repr__(self) -> str:
        return f"IntArray({list(self)!r})"


class LongArray(list):
    tag_id = TAG_LONG_ARRAY

    def __repr__(self) -> str:
        return f"LongArray({list(self)!r})"


class TagList(list):
    """TAG_List. ``subtype`` is the element kind of an empty list (TAG_End if None)."""

    tag_id = TAG_LIST

    def __init__(self, items: Iterable = (), subtype: Optional[int] = None):
        super().__init__(items)
        self.subtype = subtype

    def __repr__(self) -> str:
        return f"TagList({list(self)!r})"


class Compound(dict):
    tag_id = TAG_COMPOUND

    def __repr__(self) -> str:
        return f"Compound({dict(self)!r})"


class _Buf:
    __slots__ = ("b", "o")

    def __init__(self, b: bytes):
        self.b = b
        self.o = 0

    def _take(self, n: int) -> bytes:
        if self.o + n > len(self.b):
            raise NBTError("unexpected EOF")
        v = self.b[self.o : self.o + n]
        self.o += n
        return v

    def read_u8(self) -> int:
        return self._take(1)[0]

    def read_i8(self) -> int:
        return struct.unpack(">b", self._take(1))[0]

    def read_i16(self) -> int:
        return struct.unpack(">h", self._take(2))[0]

    def read_u16(self) -> int:
        return struct.unpack(">H", self._take(2))[0]

    def read_i32(self) -> int:
        return struct.unpack(">i", self._take(4))[0]

    def read_i64(self) -> int:
        return struct.unpack(">q", self._take(8))[0]

    def read_f32(self) -> float:
        return struct.unpack(">f", self._take(4))[0]

    def read_f64(self) -> float:
        return struct.unpack(">d", self._take(8))[0]

    def read_bytes(self, n: int) -> bytes:
        return self._take(n)

    def read_length(self, what: str) -> int:
        ln = self.read_i32()
        if ln < 0:
            raise NBTError(f"negative {what} length")
        return ln

    def read_string(self) -> str:
        ln = self.read_u16()
        try:
            return self.read_bytes(ln).decode("utf-8", errors="strict")
        except UnicodeDecodeError as exc:
            raise NBTError(f"invalid UTF-8 in string: {exc}") from exc


def _read_tag_payload(tag: int, buf: _Buf):
    if tag == TAG_BYTE:
        return Byte(buf.read_i8())
    if tag == TAG_SHORT:
        return Short(buf.read_i16())
    if tag == TAG_INT:
        return Int(buf.read_i32())
    if tag == TAG_LONG:
        return Long(buf.read_i64())
    if tag == TAG_FLOAT:
        return Float(buf.read_f32())
    if tag == TAG_DOUBLE:
        return Double(buf.read_f64())
    if tag == TAG_BYTE_ARRAY:
        ln = buf.read_length("byte array")
        return ByteArray(buf.read_bytes(ln))
    if tag == TAG_STRING:
        return String(buf.read_string())
    if tag == TAG_LIST:
        inner = buf.read_u8()
        ln = buf.read_length("list")
        if ln and inner == TAG_END:
            raise NBTError("non-empty list of TAG_End")
        return TagList((_read_tag_payload(inner, buf) for _ in range(ln)), subtype=inner)
    if tag == TAG_COMPOUND:
        out = Compound()
        while True:
            t = buf.read_u8()
            if t == TAG_END:
                return out
            name = buf.read_string()
            out[name] = _read_tag_payload(t, buf)
    if tag == TAG_INT_ARRAY:
        ln = buf.read_length("int array")
        return IntArray(struct.unpack(f">{ln}i", buf.read_bytes(4 * ln)))
    if tag == TAG_LONG_ARRAY:
        ln = buf.read_length("long array")
        return LongArray(struct.unpack(f">{ln}q", buf.read_bytes(8 * ln)))
    raise NBTError(f"unknown tag {tag}")


def loads_nbt(raw: bytes) -> Tuple[str, Compound]:
    """Parse an NBT document, gzipped or not. Returns ``(root_name, root)``."""
    if raw[:2] == GZIP_MAGIC:
        try:
            raw = gzip.decompress(raw)
        except (OSError, EOFError, zlib.error) as exc:
            raise NBTError(f"corrupt gzip stream: {exc}") from exc

    buf = _Buf(raw)
    t = buf.read_u8()
    if t != TAG_COMPOUND:
        raise NBTError(f"unexpected root tag: {t} (expected compound)")
    name = buf.read_string()
    root = _read_tag_payload(TAG_COMPOUND, buf)
    return name, root


def load_nbt(path: Path) -> Compound:
    _, root = loads_nbt(Path(path).read_bytes())
    return root


# --- writer ---
def _enc_u8(v: int) -> bytes:
    return bytes([v & 0xFF])


def _enc_i32(v: int) -> bytes:
    return struct.pack(">i", int(v))


def _enc_string(s: str) -> bytes:
    b = s.encode("utf-8", errors="strict")
    if len(b) > 65535:
        raise NBTError("string too long for NBT")
    return struct.pack(">H", len(b)) + b


def tag_id_of(value) -> int:
    tag_id = getattr(value, "tag_id", None)
    if tag_id is not None:
        return tag_id
    if isinstance(value, bool):
        return TAG_BYTE
    if isinstance(value, int):
        return TAG_INT
    if isinstance(value, float):
        return TAG_DOUBLE
    if isinstance(value, str):
        return TAG_STRING
    if isinstance(value, (bytes, bytearray)):
        return TAG_BYTE_ARRAY
    if isinstance(value, dict):
        return TAG_COMPOUND
    if isinstance(value, list):
        return TAG_LIST
    raise NBTError(f"cannot encode {type(value).__name__} as NBT")


def _list_subtype(items: list) -> int:
    if not items:
        subtype = getattr(items, "subtype", None)
        return TAG_END if subtype is None else subtype
    kinds = {tag_id_of(v) for v in items}
    if len(kinds) != 1:
        raise NBTError(f"list mixes tag kinds {sorted(kinds)}")
    return kinds.pop()


def _tag_payload(tag: int, value) -> bytes:
    try:
        if tag == TAG_BYTE:
            return struct.pack(">b", int(value))
        if tag == TAG_SHORT:
            return struct.pack(">h", int(value))
        if tag == TAG_INT:
            return _enc_i32(value)
        if tag == TAG_LONG:
            return struct.pack(">q", int(value))
        if tag == TAG_FLOAT:
            return struct.pack(">f", float(value))
        if tag == TAG_DOUBLE:
            return struct.pack(">d", float(value))
    except struct.error as exc:
        raise NBTError(f"value {value!r} out of range for tag {tag}") from exc
    if tag == TAG_BYTE_ARRAY:
        return _enc_i32(len(value)) + bytes(value)
    if tag == TAG_STRING:
        return _enc_string(value)
    if tag == TAG_LIST:
        inner = _list_subtype(value)
        return _enc_u8(inner) + _enc_i32(len(value)) + b"".join(_tag_payload(inner, v) for v in value)
    if tag == TAG_COMPOUND:
        return _compound_payload(value)
    if tag == TAG_INT_ARRAY:
        try:
            return _enc_i32(len(value)) + struct.pack(f">{len(value)}i", *value)
        except struct.error as exc:
            raise NBTError(f"int array value out of range: {exc}") from exc
    if tag == TAG_LONG_ARRAY:
        try:
            return _enc_i32(len(value)) + struct.pack(f">{len(value)}q", *value)
        except struct.error as exc:
            raise NBTError(f"long array value out of range: {exc}") from exc
    raise NBTError(f"unknown tag {tag}")


def _compound_payload(items: dict) -> bytes:
    parts = []
    for name, value in items.items():
        tag = tag_id_of(value)
        parts.append(_enc_u8(tag) + _enc_string(name) + _tag_payload(tag, value))
    return b"".join(parts) + _enc_u8(TAG_END)


def dumps_nbt(root: dict, name: str = "", compressed: bool = False) -> bytes:
    raw = _enc_u8(TAG_COMPOUND) + _enc_string(name) + _compound_payload(root)
    if compressed:
        return gzip.compress(raw)
    return raw


def save_nbt(path: Path, root: dict, compressed: bool = True, name: str = "") -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(dumps_nbt(root, name=name, compressed=compressed))
