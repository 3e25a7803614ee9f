"""Low-level layout helpers (name packing, integers, checksum)."""

from __future__ import annotations

import locale
import struct
from typing import Iterable

from .constants import CHECKSUM_MASK, NAME_FIELD_SIZE

__all__ = [
    "pack_name_string",
    "pack_name_latin",
    "pack_u16",
    "pack_u32",
    "compute_checksum",
    "collation_key",
]


def pack_name_string(name: str, size: int = NAME_FIELD_SIZE) -> bytes:
    """UTF-8 encode ``name`` into exactly ``size`` bytes.

    Longer names are cut at the byte level (a multi-byte character may be
    split); shorter ones are zero-padded. No terminator is reserved.
    """
    name_bytes = name.encode("utf-8")[:size]
    return name_bytes + b"\x00" * (size - len(name_bytes))


def pack_name_latin(name: str, size: int = NAME_FIELD_SIZE) -> bytes:
    """Pack the low byte of each UTF-16 code unit of ``name``.

    Characters outside the BMP take two units (a surrogate pair), so they
    occupy two bytes of the field.
    """
    units = name.encode("utf-16-le", "surrogatepass")
    name_bytes = units[0::2][:size]
    return name_bytes + b"\x00" * (size - len(name_bytes))


def pack_u32(value: int) -> bytes:
    return struct.pack("<I", value & 0xFFFFFFFF)


def pack_u16(value: int) -> bytes:
    return struct.pack("<H", value & 0xFFFF)


def compute_checksum(*chunks: Iterable[int]) -> int:
    total = 0
    for chunk in chunks:
        total += sum(chunk)
    return total & CHECKSUM_MASK


def collation_key(value: str) -> str:
    """Locale-aware sort key; code point order under the C locale."""
    return locale.strxfrm(value)
