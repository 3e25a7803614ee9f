"""Build spec loading (JSON/YAML)."""

from __future__ import annotations
from pathlib import Path
from typing import Any
import json

import yaml

from ..packing.errors import spec_error
from ..utils.io import DataError, read_entry_data
from .models import AssetSpec, BuildSpec, ModelGroupSpec

__all__ = ["load_spec", "parse_spec_dict"]


def load_spec(path: str | Path) -> BuildSpec:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(p)
    text = p.read_text(encoding="utf-8")
    try:
        if p.suffix.lower() in {".yaml", ".yml"}:
            data: Any = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise spec_error(f"Malformed build spec: {e}", {"file": str(p)}) from e
    if not isinstance(data, dict):
        raise spec_error("Root of build spec must be an object")
    return parse_spec_dict(data, p.parent)


def _dimension(entry: dict[str, Any], key: str, where: str) -> int:
    value = entry.get(key, 0) or 0
    if not isinstance(value, int) or not 0 <= value <= 0xFFFF:
        raise spec_error(
            f"{key} must be an integer in [0, 65535]",
            {"path": where, "value": value},
        )
    return value


def _parse_assets(items: Any, base_dir: Path) -> list[AssetSpec]:
    if not isinstance(items, list):
        raise spec_error("assets must be a list")
    out: list[AssetSpec] = []
    for i, entry in enumerate(items):
        where = f"assets[{i}]"
        if not isinstance(entry, dict):
            raise spec_error("asset entry must be an object", {"path": where})
        name = entry.get("name")
        if name is None and isinstance(entry.get("file"), str):
            name = Path(entry["file"]).name
        if not isinstance(name, str) or not name:
            raise spec_error("asset entry needs a name", {"path": where})
        try:
            data = read_entry_data(entry, base_dir)
        except DataError as e:
            raise spec_error(str(e), {"path": where}) from e
        out.append(
            AssetSpec(
                name=name,
                data=data,
                width=_dimension(entry, "width", where),
                height=_dimension(entry, "height", where),
            )
        )
    return out


def _parse_models(section: Any, base_dir: Path, spec: BuildSpec) -> None:
    if not isinstance(section, dict):
        raise spec_error("models must be an object")
    share = section.get("share")
    if share is not None and not isinstance(share, str):
        raise spec_error("models.share must be a string")
    spec.share = share
    load = section.get("load", [])
    if not isinstance(load, list) or not all(isinstance(n, str) for n in load):
        raise spec_error("models.load must be a list of names")
    spec.share_models = list(load)
    groups = section.get("groups", [])
    if not isinstance(groups, list):
        raise spec_error("models.groups must be a list")
    for i, group in enumerate(groups):
        where = f"models.groups[{i}]"
        if not isinstance(group, dict) or not isinstance(group.get("name"), str):
            raise spec_error("model group needs a name", {"path": where})
        files = group.get("files", {})
        if not isinstance(files, dict):
            raise spec_error("files must map names to paths", {"path": where})
        parsed: dict[str, bytes] = {}
        for file_name, source in files.items():
            entry = source if isinstance(source, dict) else {"file": source}
            try:
                parsed[str(file_name)] = read_entry_data(entry, base_dir)
            except DataError as e:
                raise spec_error(
                    str(e), {"path": f"{where}.files.{file_name}"}
                ) from e
        spec.model_groups.append(ModelGroupSpec(group["name"], parsed))


def parse_spec_dict(data: dict[str, Any], base_dir: Path) -> BuildSpec:
    spec = BuildSpec(
        output=data.get("output"),
        models_output=data.get("models_output"),
    )
    if "assets" in data:
        spec.assets = _parse_assets(data["assets"], base_dir)
    if "models" in data:
        _parse_models(data["models"], base_dir, spec)
    return spec
