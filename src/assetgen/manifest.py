"""Manifest generation for built blobs.

The manifest is an optional JSON summary written next to ``assets.bin`` or
``srmodels.bin``. It records what went into the blob and where, so a build
can be checked without parsing it.
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any, Iterable, Sequence

from .packing.assets import ResolvedFileInfo
from .packing.errors import PackWarning
from .packing.models import ModelGroup, header_length

__all__ = [
    "asset_manifest_dict",
    "model_manifest_dict",
    "write_manifest",
]

MANIFEST_VERSION = 1


def _warnings(warnings: Iterable[PackWarning]) -> list[dict[str, Any]]:
    return [w.to_dict() for w in warnings]


def asset_manifest_dict(
    blob: bytes,
    infos: Sequence[ResolvedFileInfo],
    *,
    checksum: int,
    warnings: Iterable[PackWarning] = (),
) -> dict[str, Any]:
    d: dict[str, Any] = {
        "version": MANIFEST_VERSION,
        "kind": "assets",
        "file_size": len(blob),
        "sha256": hashlib.sha256(blob).hexdigest(),
        "checksum": f"0x{checksum:04X}",
        "entries": [
            {
                "name": i.name,
                "size": i.size,
                "offset": i.offset,
                "width": i.width,
                "height": i.height,
            }
            for i in infos
        ],
    }
    w = _warnings(warnings)
    if w:
        d["warnings"] = w
    return d


def model_manifest_dict(
    blob: bytes,
    groups: Sequence[ModelGroup],
    *,
    warnings: Iterable[PackWarning] = (),
) -> dict[str, Any]:
    cursor = header_length(list(groups))
    models = []
    for group in groups:
        files = []
        for name, data in group.sorted_files():
            files.append({"name": name, "start": cursor, "length": len(data)})
            cursor += len(data)
        models.append({"name": group.name, "files": files})
    d: dict[str, Any] = {
        "version": MANIFEST_VERSION,
        "kind": "models",
        "file_size": len(blob),
        "sha256": hashlib.sha256(blob).hexdigest(),
        "models": models,
    }
    w = _warnings(warnings)
    if w:
        d["warnings"] = w
    return d


def write_manifest(data: dict[str, Any], output_path: Path) -> Path:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, sort_keys=True)
        f.write("\n")
    return output_path
