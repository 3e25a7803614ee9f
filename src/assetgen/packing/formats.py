"""File format tags and image dimension sniffing.

Each file name maps to one :class:`FormatTag`; the tag selects how (and
whether) width/height are derived when the caller did not supply them.
"""

from __future__ import annotations

import io
import struct
from enum import Enum
from typing import Callable, Dict, Tuple

from PIL import Image, UnidentifiedImageError

from .constants import (
    RASTER_IMAGE_EXTENSIONS,
    SPLIT_IMAGE_EXTENSIONS,
    SPLIT_IMAGE_HEIGHT_OFFSET,
    SPLIT_IMAGE_WIDTH_OFFSET,
)

__all__ = [
    "FormatTag",
    "Dimensions",
    "SniffError",
    "extension_of",
    "base_name_of",
    "classify",
    "sniff_dimensions",
]

Dimensions = Tuple[int, int]


class SniffError(ValueError):
    pass


class FormatTag(Enum):
    OTHER = "other"
    SPLIT_IMAGE = "split_image"  # .sjpg / .spng / .sqoi, fixed header fields
    RASTER = "raster"  # decoded with Pillow


def extension_of(name: str) -> str:
    """Text after the last dot; the whole name when there is no dot."""
    return name.rsplit(".", 1)[-1]


def base_name_of(name: str) -> str:
    """Name without its trailing ``.ext`` (kept when ext contains a slash)."""
    head, dot, ext = name.rpartition(".")
    if not dot or not ext or "/" in ext:
        return name
    return head


def classify(name: str) -> FormatTag:
    ext = extension_of(name).lower()
    if ext in SPLIT_IMAGE_EXTENSIONS:
        return FormatTag.SPLIT_IMAGE
    if ext in RASTER_IMAGE_EXTENSIONS:
        return FormatTag.RASTER
    return FormatTag.OTHER


def _no_dimensions(data: bytes) -> Dimensions:
    return 0, 0


def _split_image_dimensions(data: bytes) -> Dimensions:
    try:
        (width,) = struct.unpack_from("<H", data, SPLIT_IMAGE_WIDTH_OFFSET)
        (height,) = struct.unpack_from("<H", data, SPLIT_IMAGE_HEIGHT_OFFSET)
    except struct.error as e:
        raise SniffError(f"header too short ({len(data)} bytes)") from e
    return width, height


def _raster_dimensions(data: bytes) -> Dimensions:
    # Image.open only parses the header; pixel data is never decoded here.
    try:
        with Image.open(io.BytesIO(data)) as img:
            width, height = img.size
    except (
        UnidentifiedImageError,
        Image.DecompressionBombError,
        OSError,
        ValueError,
    ) as e:
        raise SniffError(str(e) or type(e).__name__) from e
    return width, height


_STRATEGIES: Dict[FormatTag, Callable[[bytes], Dimensions]] = {
    FormatTag.OTHER: _no_dimensions,
    FormatTag.SPLIT_IMAGE: _split_image_dimensions,
    FormatTag.RASTER: _raster_dimensions,
}


def sniff_dimensions(tag: FormatTag, data: bytes) -> Dimensions:
    """Return (width, height) for ``data`` per ``tag``.

    Raises :class:`SniffError` when the bytes cannot be read; callers treat
    that as (0, 0).
    """
    return _STRATEGIES[tag](data)
