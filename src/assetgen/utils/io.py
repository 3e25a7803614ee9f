"""IO helpers: bounded reads, data-source resolution, atomic writes."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Any, Mapping

__all__ = [
    "DataError",
    "safe_read_file",
    "read_entry_data",
    "atomic_write_bytes",
    "MAX_FILE_SIZE",
]

MAX_FILE_SIZE = 64 * 1024 * 1024
MAX_HEX_STRING_LENGTH = 2 * 1024 * 1024


class DataError(RuntimeError):
    pass


def _resolve_under(base_dir: Path, rel: str) -> Path:
    """Resolve ``rel`` against ``base_dir``; it may not leave that directory."""
    base = base_dir.resolve()
    resolved = (base / rel).resolve()
    if not resolved.is_relative_to(base):
        raise DataError(f"file path escapes spec directory: {rel}")
    return resolved


def safe_read_file(path: Path, max_size: int = MAX_FILE_SIZE) -> bytes:
    if not path.is_file():
        raise DataError(f"File not found: {path}")
    size = path.stat().st_size
    if size > max_size:
        raise DataError(f"File too large: {size}>{max_size}")
    return path.read_bytes()


def read_entry_data(
    entry: Mapping[str, Any], base_dir: Path, max_size: int = MAX_FILE_SIZE
) -> bytes:
    """Resolve the bytes of a spec entry from exactly one data source.

    Sources: ``file`` (path relative to the spec), ``data_hex`` or ``data``
    (inline text, UTF-8 encoded).
    """
    sources = [
        k for k in ("file", "data_hex", "data") if entry.get(k) is not None
    ]
    if not sources:
        raise DataError("No data source (file|data_hex|data) provided")
    if len(sources) > 1:
        raise DataError(f"Multiple data sources: {sources}")
    src = sources[0]
    value = entry[src]
    if src == "data_hex":
        if not isinstance(value, str):
            raise DataError("data_hex must be string")
        h = "".join(value.split())
        if len(h) > MAX_HEX_STRING_LENGTH:
            raise DataError("hex string too long")
        if len(h) % 2:
            raise DataError("hex string must have even length")
        try:
            return bytes.fromhex(h)
        except ValueError as e:
            raise DataError(f"invalid hex: {e}") from e
    if src == "file":
        if not isinstance(value, str):
            raise DataError("file path must be string")
        return safe_read_file(_resolve_under(base_dir, value), max_size)
    if isinstance(value, str):
        return value.encode("utf-8")
    if isinstance(value, bytes):
        return value
    raise DataError("data must be str or bytes")


def atomic_write_bytes(path: Path, data: bytes) -> int:
    """Write ``data`` next to ``path`` then rename over it."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{path.name}.", suffix=".tmp", dir=path.parent
    )
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        tmp_path.replace(path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise
    return len(data)
