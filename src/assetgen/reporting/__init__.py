"""Console reporters for assetgen runs.

``get_reporter()`` returns the active backend (plain on stderr unless the
CLI selected another); encoders feed it through ``task(...)`` callbacks.
"""

from .base import (
    Reporter,
    get_reporter,
    get_verbosity,
    section,
    set_reporter,
    set_verbosity,
    task,
)
from .jsonl import JsonLinesReporter
from .plain import PlainReporter
from .rich_reporter import RichReporter
from .silent import SilentReporter

__all__ = [
    "Reporter",
    "get_reporter",
    "set_reporter",
    "get_verbosity",
    "set_verbosity",
    "section",
    "task",
    "JsonLinesReporter",
    "PlainReporter",
    "RichReporter",
    "SilentReporter",
]
