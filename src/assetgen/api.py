"""High-level build API.

Wraps the encoders with disk IO, reporter tasks and optional manifests.
Outputs are written atomically: a failed build never leaves a partial
blob behind.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from .logging import get_logger
from .manifest import asset_manifest_dict, model_manifest_dict, write_manifest
from .packing.assets import AssetTableEncoder, ResolvedFileInfo
from .packing.errors import PackWarning, empty_input
from .packing.models import ModelBundleEncoder
from .packing.share import ShareFetcher, fetcher_for
from .reporting import get_reporter, section, task
from .spec.loader import load_spec
from .spec.models import BuildSpec
from .utils.io import atomic_write_bytes, safe_read_file

__all__ = [
    "AssetBuildOptions",
    "ModelBuildOptions",
    "BuildResult",
    "collect_directory",
    "plan_assets",
    "build_assets",
    "build_models",
    "build_from_spec",
]


@dataclass(slots=True)
class AssetBuildOptions:
    input_dir: Path
    output_path: Path
    manifest_path: Path | None = None


@dataclass(slots=True)
class ModelBuildOptions:
    output_path: Path
    # Fetched from the share by name
    share_models: List[str] = field(default_factory=list)
    # Local directories; each becomes a group named after the directory
    model_dirs: List[Path] = field(default_factory=list)
    share: str | None = None
    chip: str | None = None
    manifest_path: Path | None = None
    # Abort when a share model is incomplete instead of packing it partially
    require_complete: bool = False


@dataclass(slots=True)
class BuildResult:
    output_file: Path
    bytes_written: int
    warnings: List[PackWarning] = field(default_factory=list)
    incomplete_models: List[str] = field(default_factory=list)


def collect_directory(path: Path) -> list[tuple[str, bytes]]:
    """Regular files directly inside ``path`` (hidden files skipped)."""
    if not path.is_dir():
        raise NotADirectoryError(path)
    return [
        (p.name, safe_read_file(p))
        for p in sorted(path.iterdir())
        if p.is_file() and not p.name.startswith(".")
    ]


def _asset_encoder(
    files: Iterable[tuple[str, bytes, int, int]],
) -> AssetTableEncoder:
    enc = AssetTableEncoder()
    for name, data, width, height in files:
        enc.add_file(name, data, width=width, height=height)
    return enc


def plan_assets(input_dir: Path) -> List[ResolvedFileInfo]:
    """Resolve order, offsets and dimensions without packing."""
    enc = _asset_encoder(
        (name, data, 0, 0) for name, data in collect_directory(input_dir)
    )
    return enc.resolve()


def _pack_assets(
    enc: AssetTableEncoder, output_path: Path, manifest_path: Path | None
) -> BuildResult:
    rep = get_reporter()
    with task("pack.assets", f"Pack {output_path.name}") as progress:
        infos = enc.resolve(progress)
        blob = enc.pack(infos, progress)
        checksum = int.from_bytes(blob[4:8], "little")
        rep.annotate(
            "pack.assets",
            files=len(infos),
            bytes=len(blob),
            checksum=f"0x{checksum:04X}",
        )
    bytes_written = atomic_write_bytes(output_path, blob)
    if manifest_path is not None:
        write_manifest(
            asset_manifest_dict(
                blob, infos, checksum=checksum, warnings=enc.warnings
            ),
            manifest_path,
        )
        get_logger().info("Emitted manifest: %s", manifest_path.name)
    rep.status(
        f"Build summary: file={output_path.name} bytes={bytes_written} "
        f"files={len(infos)} checksum=0x{checksum:04X} warnings={len(enc.warnings)}"
    )
    return BuildResult(output_path, bytes_written, list(enc.warnings))


def build_assets(options: AssetBuildOptions) -> BuildResult:
    files = collect_directory(options.input_dir)
    enc = _asset_encoder((name, data, 0, 0) for name, data in files)
    stats = enc.get_stats()
    get_reporter().status(
        f"Input summary: files={stats['file_count']} bytes={stats['total_size']} "
        f"types={','.join(f'{k}:{v}' for k, v in sorted(stats['file_types'].items()))}"
    )
    return _pack_assets(enc, options.output_path, options.manifest_path)


def _load_models(
    enc: ModelBundleEncoder,
    names: Sequence[str],
    fetcher: ShareFetcher,
    chip: Optional[str],
) -> List[str]:
    logger = get_logger()
    incomplete: List[str] = []
    for name in names:
        if chip and not ModelBundleEncoder.is_valid_model(name, chip):
            logger.warning("Model %s is not supported on %s", name, chip)
        if not enc.load_model_from_share(name, fetcher):
            incomplete.append(name)
    return incomplete


def _pack_models(
    enc: ModelBundleEncoder,
    output_path: Path,
    manifest_path: Path | None,
    incomplete: List[str],
) -> BuildResult:
    rep = get_reporter()
    with task("pack.models", f"Pack {output_path.name}"):
        blob = enc.pack_models()
        stats = enc.get_stats()
        rep.annotate(
            "pack.models", models=stats["model_count"], bytes=len(blob)
        )
    bytes_written = atomic_write_bytes(output_path, blob)
    if manifest_path is not None:
        write_manifest(
            model_manifest_dict(
                blob, enc.sorted_models(), warnings=enc.warnings
            ),
            manifest_path,
        )
        get_logger().info("Emitted manifest: %s", manifest_path.name)
    rep.status(
        f"Build summary: file={output_path.name} bytes={bytes_written} "
        f"models={stats['model_count']} files={stats['file_count']} "
        f"incomplete={len(incomplete)}"
    )
    return BuildResult(
        output_path, bytes_written, list(enc.warnings), incomplete
    )


def build_models(
    options: ModelBuildOptions, fetcher: ShareFetcher | None = None
) -> BuildResult:
    enc = ModelBundleEncoder()
    for model_dir in options.model_dirs:
        for file_name, data in collect_directory(model_dir):
            enc.add_model_file(model_dir.name, file_name, data)
    incomplete: List[str] = []
    if options.share_models:
        incomplete = _load_models(
            enc,
            options.share_models,
            fetcher or fetcher_for(options.share),
            options.chip,
        )
    if incomplete and options.require_complete:
        raise RuntimeError(f"Incomplete models: {', '.join(incomplete)}")
    return _pack_models(
        enc, options.output_path, options.manifest_path, incomplete
    )


def build_from_spec(
    spec_path: Path,
    output_path: Path | None = None,
    *,
    models_output: Path | None = None,
    manifest_path: Path | None = None,
    fetcher: ShareFetcher | None = None,
) -> List[BuildResult]:
    """Build every blob a spec declares; returns one result per blob."""
    spec: BuildSpec = load_spec(spec_path)
    base = spec_path.parent
    results: List[BuildResult] = []
    if spec.assets:
        out = output_path or (base / (spec.output or "assets.bin"))
        with section("Assets"):
            enc = _asset_encoder(
                (a.name, a.data, a.width, a.height) for a in spec.assets
            )
            results.append(_pack_assets(enc, out, manifest_path))
    if spec.has_models:
        out = models_output or (base / (spec.models_output or "srmodels.bin"))
        models_manifest = (
            manifest_path.with_name(manifest_path.stem + ".models.json")
            if manifest_path is not None and spec.assets
            else manifest_path
        )
        with section("Models"):
            menc = ModelBundleEncoder()
            for group in spec.model_groups:
                for file_name, data in group.files.items():
                    menc.add_model_file(group.name, file_name, data)
            incomplete: List[str] = []
            if spec.share_models:
                incomplete = _load_models(
                    menc,
                    spec.share_models,
                    fetcher or fetcher_for(spec.share),
                    None,
                )
            results.append(
                _pack_models(menc, out, models_manifest, incomplete)
            )
    if not results:
        raise empty_input("assets or models")
    return results
