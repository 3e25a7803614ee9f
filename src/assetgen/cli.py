"""Command line interface for assetgen."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .api import (
    AssetBuildOptions,
    ModelBuildOptions,
    build_assets,
    build_from_spec,
    build_models,
    plan_assets,
)
from .logging import configure_logging, get_logger
from .packing.errors import PackError
from .packing.models import ModelBundleEncoder
from .packing.share import default_share_root
from .reporting import (
    JsonLinesReporter,
    PlainReporter,
    RichReporter,
    SilentReporter,
    get_reporter,
    set_reporter,
    set_verbosity,
)


def _assets_cmd(args: argparse.Namespace) -> int:
    if args.dry_run:
        infos = plan_assets(args.input_dir)
        rows = [
            {
                "name": i.name,
                "size": i.size,
                "offset": i.offset,
                "width": i.width,
                "height": i.height,
            }
            for i in infos
        ]
        print(json.dumps(rows, indent=2))
        return 0
    build_assets(
        AssetBuildOptions(
            input_dir=args.input_dir,
            output_path=args.output,
            manifest_path=args.manifest,
        )
    )
    return 0


def _models_cmd(args: argparse.Namespace) -> int:
    result = build_models(
        ModelBuildOptions(
            output_path=args.output,
            share_models=list(args.model or []),
            model_dirs=list(args.dir or []),
            share=args.share,
            chip=args.chip,
            manifest_path=args.manifest,
            require_complete=args.strict,
        )
    )
    return 1 if result.incomplete_models and args.strict else 0


def _build_cmd(args: argparse.Namespace) -> int:
    build_from_spec(
        args.spec,
        args.output,
        models_output=args.models_output,
        manifest_path=args.manifest,
    )
    return 0


def _list_models_cmd(args: argparse.Namespace) -> int:
    tiers = ModelBundleEncoder.available_models()
    if args.chip:
        tiers = {
            tier: [
                m
                for m in models
                if ModelBundleEncoder.is_valid_model(m, args.chip)
            ]
            for tier, models in tiers.items()
        }
    print(json.dumps(tiers, indent=2))
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="assetgen",
        description="Pack firmware assets (assets.bin) and wakenet models (srmodels.bin)",
    )
    p.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (repeatable)",
    )
    p.add_argument(
        "-r",
        "--reporter",
        choices=["plain", "rich", "json", "silent"],
        default="plain",
        help="Select reporter backend: plain (default), rich, json (JSONL events), silent",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    a = sub.add_parser("assets", help="Pack a directory into assets.bin")
    a.add_argument("input_dir", type=Path)
    a.add_argument("output", type=Path, nargs="?", default=Path("assets.bin"))
    a.add_argument(
        "--manifest", type=Path, help="Optional path to write manifest JSON"
    )
    a.add_argument(
        "--dry-run",
        dest="dry_run",
        action="store_true",
        help="Print the resolved file table as JSON, write nothing",
    )
    a.set_defaults(func=_assets_cmd)

    m = sub.add_parser("models", help="Pack wakenet models into srmodels.bin")
    m.add_argument("output", type=Path, nargs="?", default=Path("srmodels.bin"))
    m.add_argument(
        "--model",
        action="append",
        help="Model to fetch from the share (repeatable)",
    )
    m.add_argument(
        "--dir",
        type=Path,
        action="append",
        help="Local model directory; packed as a group named after it (repeatable)",
    )
    m.add_argument(
        "--share",
        default=None,
        help=f"Share root URL or directory (default: {default_share_root()})",
    )
    m.add_argument("--chip", help="Target chip, e.g. esp32s3 or esp32c3")
    m.add_argument(
        "--manifest", type=Path, help="Optional path to write manifest JSON"
    )
    m.add_argument(
        "--strict",
        action="store_true",
        help="Fail instead of packing incomplete models",
    )
    m.set_defaults(func=_models_cmd)

    b = sub.add_parser("build", help="Build blobs from a YAML/JSON spec")
    b.add_argument("spec", type=Path)
    b.add_argument("output", type=Path, nargs="?")
    b.add_argument("--models-output", dest="models_output", type=Path)
    b.add_argument(
        "--manifest", type=Path, help="Optional path to write manifest JSON"
    )
    b.set_defaults(func=_build_cmd)

    lm = sub.add_parser("list-models", help="List known wakenet models")
    lm.add_argument("--chip", help="Only models valid for this chip")
    lm.set_defaults(func=_list_models_cmd)

    return p


def _select_reporter(requested: str) -> None:
    if requested == "json":
        set_reporter(JsonLinesReporter())
    elif requested == "silent":
        set_reporter(SilentReporter())
    elif requested == "rich" and sys.stderr.isatty():
        set_reporter(RichReporter())
    else:
        # rich without a TTY falls back to plain
        set_reporter(PlainReporter())


def main(argv: list[str] | None = None) -> int:
    argv = argv if argv is not None else sys.argv[1:]
    parser = build_parser()
    args = parser.parse_args(argv)
    _select_reporter(args.reporter)
    set_verbosity(args.verbose)
    configure_logging(args.verbose)
    try:
        return args.func(args)
    except (PackError, RuntimeError, OSError) as e:
        get_logger().error("%s", e)
        return 1
    finally:
        get_reporter().flush()


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
