from __future__ import annotations

import gzip

import pytest

from littletiles.nbt import (
    TAG_END,
    TAG_INT_ARRAY,
    TAG_STRING,
    Byte,
    ByteArray,
    Compound,
    Double,
    Float,
    Int,
    IntArray,
    Long,
    LongArray,
    NBTError,
    Short,
    String,
    TagList,
    dumps_nbt,
    load_nbt,
    loads_nbt,
    save_nbt,
)


def every_kind() -> Compound:
    return Compound(
        b=Byte(-3),
        s=Short(1000),
        i=Int(-70000),
        l=Long(2**40),
        f=Float(0.5),
        d=Double(-1.25),
        ba=ByteArray(b"\x00\xff"),
        st=String("minecraft:stone"),
        li=TagList([Short(1), Short(2)]),
        nested=Compound(x=IntArray([1, -1])),
        ia=IntArray([]),
        la=LongArray([-(2**63), 2**63 - 1]),
        empty=TagList(),
    )


def test_every_kind_round_trips_with_kinds():
    raw = dumps_nbt(every_kind(), name="root")
    name, root = loads_nbt(raw)
    assert name == "root"
    assert root == every_kind()
    assert {k: type(v) for k, v in root.items()} == {k: type(v) for k, v in every_kind().items()}
    assert dumps_nbt(root, name="root") == raw


def test_gzipped_documents_are_detected():
    raw = dumps_nbt(every_kind())
    assert loads_nbt(gzip.compress(raw)) == loads_nbt(raw)
    assert gzip.decompress(dumps_nbt(every_kind(), compressed=True)) == raw


def test_list_subtypes():
    _, root = loads_nbt(dumps_nbt(Compound(a=TagList(), b=TagList([IntArray([1])]))))
    assert root["a"].subtype == TAG_END
    assert root["b"].subtype == TAG_INT_ARRAY


def test_plain_python_values_are_mapped():
    _, root = loads_nbt(dumps_nbt({"n": 3, "s": "x", "c": {"d": 1.5}}))
    assert type(root["n"]) is Int
    assert type(root["s"]) is String
    assert type(root["c"]["d"]) is Double


def test_mixed_list_is_rejected():
    with pytest.raises(NBTError, match="mixes"):
        dumps_nbt(Compound(x=TagList([Int(1), Short(1)])))


def test_out_of_range_value_is_rejected():
    with pytest.raises(NBTError):
        dumps_nbt(Compound(x=Byte(300)))
    with pytest.raises(NBTError):
        dumps_nbt(Compound(x=IntArray([2**31])))


def test_truncated_document_raises():
    raw = dumps_nbt(every_kind())
    with pytest.raises(NBTError, match="EOF"):
        loads_nbt(raw[:-5])


def test_root_must_be_compound():
    with pytest.raises(NBTError, match="root tag"):
        loads_nbt(b"\x03\x00\x00\x00\x00\x00\x01")


def test_unknown_tag_raises():
    with pytest.raises(NBTError, match="unknown tag 13"):
        loads_nbt(b"\x0a\x00\x00\x0d\x00\x01x")


def test_negative_length_raises():
    with pytest.raises(NBTError, match="negative int array length"):
        loads_nbt(b"\x0a\x00\x00\x0b\x00\x01x\xff\xff\xff\xff")


def test_save_and_load_file(tmp_path):
    path = tmp_path / "sub" / "doc.nbt"
    save_nbt(path, every_kind())
    assert load_nbt(path) == every_kind()


def test_empty_list_keeps_declared_kind():
    raw = dumps_nbt(Compound(names=TagList(subtype=TAG_STRING)))
    assert raw[3:4] == b"\x09"
    assert raw[-6:] == b"\x08\x00\x00\x00\x00\x00"
    _, root = loads_nbt(raw)
    assert root["names"].subtype == TAG_STRING
    assert dumps_nbt(root) == raw


def test_truncated_gzip_raises_nbt_error():
    packed = dumps_nbt(every_kind(), compressed=True)
    with pytest.raises(NBTError, match="corrupt gzip"):
        loads_nbt(packed[:-6])
    with pytest.raises(NBTError, match="corrupt gzip"):
        loads_nbt(b"\x1f\x8b\x08\x00")


def test_corrupt_gzip_body_raises_nbt_error():
    packed = bytearray(dumps_nbt(every_kind(), compressed=True))
    packed[12:20] = b"\xff" * 8
    with pytest.raises(NBTError):
        loads_nbt(bytes(packed))


def test_invalid_utf8_string_raises_nbt_error():
    with pytest.raises(NBTError, match="UTF-8"):
        loads_nbt(b"\x0a\x00\x00\x08\x00\x01x\x00\x01\xff\x00")
