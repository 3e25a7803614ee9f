from __future__ import annotations

import sys
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, Optional

from ..packing.progress import Milestone, ProgressCallback

__all__ = [
    "TaskStatus",
    "TaskRecord",
    "Reporter",
    "set_reporter",
    "get_reporter",
    "set_verbosity",
    "get_verbosity",
    "section",
    "task",
]


class TaskStatus(Enum):
    RUNNING = auto()
    SUCCESS = auto()
    FAILED = auto()


@dataclass(slots=True)
class TaskRecord:
    task_id: str
    name: str
    percent: float = 0.0
    status: TaskStatus = TaskStatus.RUNNING
    start_time: float = field(default_factory=time.time)
    end_time: float | None = None
    meta: Dict[str, Any] = field(default_factory=dict)

    @property
    def duration(self) -> float:
        return (self.end_time - self.start_time) if self.end_time else 0.0


_VERBOSITY: int = 0  # set by CLI (-v repeats)


def set_verbosity(level: int) -> None:
    global _VERBOSITY
    _VERBOSITY = max(0, level)


def get_verbosity() -> int:
    return _VERBOSITY


class Reporter:
    """Console feedback for a pack run.

    A task is one encoder run; ``progress`` receives its milestone updates
    (0-100). Messages are independent of tasks.
    """

    def __init__(self) -> None:
        self._tasks: Dict[str, TaskRecord] = {}

    def start_task(self, task_id: str, name: str, **meta: Any) -> None:
        self._tasks[task_id] = TaskRecord(task_id, name, meta=meta)

    def progress(
        self, task_id: str, percent: float, milestone: Milestone, message: str
    ) -> None:
        rec = self._tasks.get(task_id)
        if rec is not None:
            rec.percent = percent

    def annotate(self, task_id: str, **meta: Any) -> None:
        rec = self._tasks.get(task_id)
        if rec is not None:
            rec.meta.update(meta)

    def end_task(
        self,
        task_id: str,
        status: TaskStatus = TaskStatus.SUCCESS,
        **final_meta: Any,
    ) -> Optional[TaskRecord]:
        rec = self._tasks.pop(task_id, None)
        if rec is None:
            return None
        rec.status = status
        rec.end_time = time.time()
        rec.meta.update(final_meta)
        return rec

    def callback_for(self, task_id: str) -> ProgressCallback:
        def _cb(percent: float, milestone: Milestone, message: str) -> None:
            self.progress(task_id, percent, milestone, message)

        return _cb

    def status(self, message: str, **fields: Any) -> None:
        raise NotImplementedError

    def verbose(self, message: str, *, level: int = 1, **fields: Any) -> None:
        pass

    def error(self, message: str, **fields: Any) -> None:
        raise NotImplementedError

    def warning(self, message: str, **fields: Any) -> None:
        self.status(message, **fields)

    def section(self, title: str) -> None:
        raise NotImplementedError

    def flush(self) -> None:
        pass


def format_meta(meta: Dict[str, Any]) -> str:
    stats = [
        f"{key}={meta[key]}"
        for key in ("files", "models", "bytes", "checksum")
        if key in meta
    ]
    return f" [{' '.join(stats)}]" if stats else ""


_ACTIVE_REPORTER: Reporter | None = None


def set_reporter(rep: Reporter) -> None:
    global _ACTIVE_REPORTER
    _ACTIVE_REPORTER = rep


def get_reporter() -> Reporter:
    global _ACTIVE_REPORTER
    if _ACTIVE_REPORTER is None:
        from .plain import PlainReporter  # local import to avoid cycle

        _ACTIVE_REPORTER = PlainReporter(stream=sys.stderr)
    return _ACTIVE_REPORTER


@contextmanager
def section(title: str):
    get_reporter().section(title)
    yield


@contextmanager
def task(task_id: str, name: str, **meta: Any):
    """Run a block as a reporter task; yields the progress callback."""
    rep = get_reporter()
    rep.start_task(task_id, name, **meta)
    try:
        yield rep.callback_for(task_id)
    except Exception:
        rep.end_task(task_id, TaskStatus.FAILED)
        raise
    else:
        rep.end_task(task_id, TaskStatus.SUCCESS)
