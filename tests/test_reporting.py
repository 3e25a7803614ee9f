import io
import logging

from assetgen.logging import configure_logging, get_logger
from assetgen.packing.assets import AssetTableEncoder
from assetgen.reporting import PlainReporter, set_reporter, set_verbosity, task


def test_plain_reporter_prints_milestones_and_summary():
    stream = io.StringIO()
    set_reporter(PlainReporter(stream=stream, use_color=False))
    enc = AssetTableEncoder()
    enc.add_file("a.bin", b"\x01")
    with task("pack", "Pack assets.bin") as progress:
        enc.generate(progress)
    out = stream.getvalue()
    assert "100.0% Done" in out
    assert "Merging a.bin" not in out  # per-file lines need -v
    assert "✔ Pack assets.bin" in out


def test_plain_reporter_verbose_shows_per_file_lines():
    stream = io.StringIO()
    set_reporter(PlainReporter(stream=stream, use_color=False))
    set_verbosity(1)
    enc = AssetTableEncoder()
    enc.add_file("a.bin", b"\x01")
    with task("pack", "Pack") as progress:
        enc.generate(progress)
    assert "Merging a.bin" in stream.getvalue()


def test_encoder_warnings_reach_reporter():
    stream = io.StringIO()
    set_reporter(PlainReporter(stream=stream, use_color=False))
    configure_logging(0)
    try:
        AssetTableEncoder().add_file("n" * 40 + ".bin", b"")
    finally:
        for h in list(get_logger().handlers):
            get_logger().removeHandler(h)
        get_logger().setLevel(logging.NOTSET)
    assert "WARN: W_NAME_TOO_LONG" in stream.getvalue()
