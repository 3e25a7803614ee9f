from __future__ import annotations

import sys
from typing import Any, Optional

from ..packing.progress import Milestone
from .base import (
    Reporter,
    TaskRecord,
    TaskStatus,
    format_meta,
    get_verbosity,
)

ICONS = {
    TaskStatus.SUCCESS: "✔",
    TaskStatus.FAILED: "✖",
}

# Per-file milestones are only echoed at -v to keep default output short.
_PER_FILE = {Milestone.RESOLVE, Milestone.MERGE}


class PlainReporter(Reporter):
    """Line-oriented reporter with optional ANSI colour."""

    def __init__(self, stream=None, use_color: bool | None = None):
        super().__init__()
        self.stream = stream or sys.stderr
        self.use_color = (
            use_color
            if use_color is not None
            else getattr(self.stream, "isatty", lambda: False)()
        )

    def _c(self, code: str, text: str) -> str:
        if not self.use_color:
            return text
        return f"\x1b[{code}m{text}\x1b[0m"

    def progress(
        self, task_id: str, percent: float, milestone: Milestone, message: str
    ) -> None:
        super().progress(task_id, percent, milestone, message)
        if milestone in _PER_FILE and get_verbosity() < 1:
            return
        self.stream.write(f"   · {percent:5.1f}% {message}\n")

    def end_task(
        self,
        task_id: str,
        status: TaskStatus = TaskStatus.SUCCESS,
        **final_meta: Any,
    ) -> Optional[TaskRecord]:
        rec = super().end_task(task_id, status, **final_meta)
        if rec is None:
            return None
        icon = ICONS.get(status, "?")
        self.stream.write(
            f" {icon} {rec.name} ({rec.duration:.2f}s){format_meta(rec.meta)}\n"
        )
        return rec

    def status(self, message: str, **fields: Any) -> None:
        self.stream.write(f"{self._c('32', 'INFO')}: {message}\n")

    def verbose(self, message: str, *, level: int = 1, **fields: Any) -> None:
        if get_verbosity() < level:
            return
        self.stream.write(f"{self._c('36', f'VERB{level}')}: {message}\n")

    def error(self, message: str, **fields: Any) -> None:
        self.stream.write(f"{self._c('31', 'ERROR')}: {message}\n")

    def warning(self, message: str, **fields: Any) -> None:
        self.stream.write(f"{self._c('33', 'WARN')}: {message}\n")

    def section(self, title: str) -> None:
        self.stream.write(f"\n[{title}]\n")
