import struct

import pytest

from assetgen.packing.errors import EmptyInputError
from assetgen.packing.models import ModelBundleEncoder, ModelGroup


def _parse(blob: bytes):
    (model_count,) = struct.unpack_from("<I", blob, 0)
    off = 4
    models = []
    for _ in range(model_count):
        name = blob[off : off + 32].rstrip(b"\x00").decode("latin-1")
        (file_count,) = struct.unpack_from("<I", blob, off + 32)
        off += 36
        files = []
        for _ in range(file_count):
            fname = blob[off : off + 32].rstrip(b"\x00").decode("latin-1")
            start, length = struct.unpack_from("<II", blob, off + 32)
            files.append((fname, start, length))
            off += 40
        models.append((name, files))
    return models, off


def test_two_model_scenario():
    enc = ModelBundleEncoder()
    enc.add_model_file("m2", "f2", bytes([1]))
    enc.add_model_file("m1", "f1", bytes([9, 9]))
    blob = enc.pack_models()

    models, header_len = _parse(blob)
    assert header_len == 4 + 2 * (32 + 4 + 40)
    assert models == [
        ("m1", [("f1", header_len, 2)]),
        ("m2", [("f2", header_len + 2, 1)]),
    ]
    assert blob[header_len:] == b"\x09\x09\x01"
    assert blob[4:36] == b"m1" + b"\x00" * 30


def test_files_sorted_and_offsets_run_across_models():
    enc = ModelBundleEncoder()
    enc.add_model_file("wn9_b", "wn9_index", b"I" * 3)
    enc.add_model_file("wn9_b", "_MODEL_INFO_", b"M" * 5)
    enc.add_model_file("wn9_b", "wn9_data", b"D" * 7)
    enc.add_model_file("wn9_a", "wn9_data", b"d" * 2)
    blob = enc.pack_models()
    models, header_len = _parse(blob)

    assert [m[0] for m in models] == ["wn9_a", "wn9_b"]
    assert [f[0] for f in models[1][1]] == ["_MODEL_INFO_", "wn9_data", "wn9_index"]

    cursor = header_len
    for _, files in models:
        for _, start, length in files:
            assert start == cursor
            cursor += length
    assert cursor == len(blob)
    assert blob[header_len:] == b"dd" + b"M" * 5 + b"D" * 7 + b"I" * 3


def test_overwrite_replaces_file_bytes():
    enc = ModelBundleEncoder()
    enc.add_model_file("m", "f", b"old-bytes")
    enc.add_model_file("m", "f", b"new")
    models, header_len = _parse(enc.pack_models())
    assert models == [("m", [("f", header_len, 3)])]


def test_group_without_files_still_listed():
    enc = ModelBundleEncoder()
    enc.add_model_file("full", "f", b"\x01")
    enc.models["empty"] = ModelGroup("empty")
    models, _ = _parse(enc.pack_models())
    assert ("empty", []) in models


def test_insertion_order_does_not_matter():
    a = ModelBundleEncoder()
    a.add_model_file("x", "2", b"b")
    a.add_model_file("y", "1", b"c")
    a.add_model_file("x", "1", b"a")
    b = ModelBundleEncoder()
    b.add_model_file("y", "1", b"c")
    b.add_model_file("x", "1", b"a")
    b.add_model_file("x", "2", b"b")
    assert a.pack_models() == b.pack_models()


def test_long_names_are_truncated_silently():
    enc = ModelBundleEncoder()
    long_name = "wn9_" + "x" * 40
    enc.add_model_file(long_name, "f", b"\x00")
    blob = enc.pack_models()
    assert blob[4:36] == long_name[:32].encode("ascii")
    assert enc.warnings == []


def test_empty_and_cleared_encoder_raise():
    enc = ModelBundleEncoder()
    with pytest.raises(EmptyInputError):
        enc.pack_models()
    enc.add_model_file("m", "f", b"\x00")
    enc.clear()
    with pytest.raises(EmptyInputError):
        enc.pack_models()


def test_stats():
    enc = ModelBundleEncoder()
    enc.add_model_file("m1", "a", b"\x00" * 4)
    enc.add_model_file("m1", "b", b"\x00" * 6)
    enc.add_model_file("m2", "a", b"\x00")
    assert enc.get_stats() == {
        "model_count": 2,
        "file_count": 3,
        "total_size": 11,
        "models": ["m1", "m2"],
    }
