import io
import struct
import zlib

from PIL import Image

from assetgen.packing.assets import AssetTableEncoder
from assetgen.packing.formats import FormatTag, classify


def _png(width: int, height: int, fmt: str = "PNG") -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (width, height), (255, 0, 0)).save(buf, format=fmt)
    return buf.getvalue()


def _split_header(width: int, height: int) -> bytes:
    return b"_SJPG__" + b"\x00" * 7 + struct.pack("<HH", width, height) + b"\x00" * 8


def _png_chunk(kind: bytes, body: bytes) -> bytes:
    crc = zlib.crc32(kind + body) & 0xFFFFFFFF
    return struct.pack(">I", len(body)) + kind + body + struct.pack(">I", crc)


def _png_header_only(width: int, height: int) -> bytes:
    ihdr = struct.pack(">IIBBBBB", width, height, 8, 2, 0, 0, 0)
    return (
        b"\x89PNG\r\n\x1a\n" + _png_chunk(b"IHDR", ihdr) + _png_chunk(b"IEND", b"")
    )


def _dims(enc):
    return {i.name: (i.width, i.height) for i in enc.resolve()}


def test_classify_by_lowercase_extension():
    assert classify("a.SJPG") is FormatTag.SPLIT_IMAGE
    assert classify("a.sqoi") is FormatTag.SPLIT_IMAGE
    assert classify("a.JPEG") is FormatTag.RASTER
    assert classify("a.webp") is FormatTag.RASTER
    assert classify("a.bin") is FormatTag.OTHER
    assert classify("png") is FormatTag.RASTER  # no dot: whole name is the ext


def test_split_image_header_fields():
    enc = AssetTableEncoder()
    enc.add_file("face.sjpg", _split_header(320, 240))
    enc.add_file("ICON.SPNG", _split_header(16, 24))
    assert _dims(enc) == {"face.sjpg": (320, 240), "ICON.SPNG": (16, 24)}
    assert enc.warnings == []


def test_split_image_short_header_falls_back_to_zero():
    enc = AssetTableEncoder()
    enc.add_file("tiny.sqoi", b"\x01" * 10)
    assert _dims(enc) == {"tiny.sqoi": (0, 0)}
    assert [w.code for w in enc.warnings] == ["W_DIMENSION_SNIFF"]


def test_raster_images_are_sniffed():
    enc = AssetTableEncoder()
    enc.add_file("red.png", _png(7, 5))
    enc.add_file("red.gif", _png(3, 9, "GIF"))
    enc.add_file("red.bmp", _png(2, 2, "BMP"))
    assert _dims(enc) == {
        "red.png": (7, 5),
        "red.gif": (3, 9),
        "red.bmp": (2, 2),
    }


def test_corrupt_raster_yields_zero_and_warning():
    enc = AssetTableEncoder()
    enc.add_file("broken.png", b"definitely not a png")
    assert _dims(enc) == {"broken.png": (0, 0)}
    assert [w.code for w in enc.warnings] == ["W_DIMENSION_SNIFF"]
    # still packs
    assert len(enc.generate()) > 12


def test_explicit_dimensions_bypass_sniffing():
    enc = AssetTableEncoder()
    enc.add_file("red.png", _png(7, 5), width=100, height=50)
    enc.add_file("face.sjpg", _split_header(320, 240), width=1)
    assert _dims(enc) == {"red.png": (100, 50), "face.sjpg": (1, 0)}


def test_resolution_does_not_mutate_entries():
    enc = AssetTableEncoder()
    entry = enc.add_file("red.png", _png(4, 4))
    enc.generate()
    assert (entry.width, entry.height) == (0, 0)
    assert (enc.entries[0].width, enc.entries[0].height) == (0, 0)


def test_non_image_extensions_are_not_sniffed():
    enc = AssetTableEncoder()
    enc.add_file("font.bin", _png(7, 5))
    assert _dims(enc) == {"font.bin": (0, 0)}
    assert enc.warnings == []


def test_oversized_raster_header_yields_zero_and_warning():
    # 400M pixels is past Pillow's decompression bomb limit.
    enc = AssetTableEncoder()
    enc.add_file("big.png", _png_header_only(20000, 20000))
    blob = enc.generate()
    assert blob[12 + 32 + 8 : 12 + 32 + 12] == b"\x00\x00\x00\x00"
    assert [w.code for w in enc.warnings] == ["W_DIMENSION_SNIFF"]


def test_repeated_generate_does_not_duplicate_sniff_warnings():
    enc = AssetTableEncoder()
    enc.add_file("broken.png", b"not a png")
    enc.add_file("x" * 40 + ".bin", b"\x00")
    first = enc.generate()
    assert enc.generate() == first
    enc.resolve()
    assert sorted(w.code for w in enc.warnings) == [
        "W_DIMENSION_SNIFF",
        "W_NAME_TOO_LONG",
    ]
