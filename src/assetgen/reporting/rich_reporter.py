from __future__ import annotations

import os
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)

from ..packing.progress import Milestone
from .base import Reporter, TaskRecord, TaskStatus, format_meta, get_verbosity

_STATUS_ICON = {
    TaskStatus.SUCCESS: "[green]✔[/]",
    TaskStatus.FAILED: "[red]✖[/]",
}


class RichReporter(Reporter):
    """Progress-bar reporter; one bar per encoder run, scaled 0-100."""

    def __init__(self, console: Console | None = None):
        super().__init__()
        self.console = console or Console(
            stderr=True, highlight=False, soft_wrap=False
        )
        self._transient = os.getenv(
            "ASSETGEN_PROGRESS_TRANSIENT", "0"
        ).lower() in ("1", "true", "yes")
        self.progress_ui: Progress | None = None
        self._bar_ids: Dict[str, TaskID] = {}
        self._completions: List[str] = []

    def _ensure_progress(self) -> Progress:
        if self.progress_ui is None:
            self.progress_ui = Progress(
                SpinnerColumn(spinner_name="dots"),
                TextColumn("{task.fields[name]}", justify="left"),
                BarColumn(bar_width=None),
                TextColumn("{task.percentage:>5.1f}%"),
                TextColumn("[dim]{task.fields[detail]}"),
                TimeElapsedColumn(),
                transient=self._transient,
                console=self.console,
                expand=True,
            )
            self.progress_ui.start()
        return self.progress_ui

    def start_task(self, task_id: str, name: str, **meta: Any) -> None:
        super().start_task(task_id, name, **meta)
        ui = self._ensure_progress()
        self._bar_ids[task_id] = ui.add_task(
            "", total=100, name=name, detail=""
        )

    def progress(
        self, task_id: str, percent: float, milestone: Milestone, message: str
    ) -> None:
        super().progress(task_id, percent, milestone, message)
        bar = self._bar_ids.get(task_id)
        if bar is not None and self.progress_ui is not None:
            self.progress_ui.update(bar, completed=percent, detail=message)

    def end_task(
        self,
        task_id: str,
        status: TaskStatus = TaskStatus.SUCCESS,
        **final_meta: Any,
    ) -> Optional[TaskRecord]:
        rec = super().end_task(task_id, status, **final_meta)
        if rec is None:
            return None
        bar = self._bar_ids.pop(task_id, None)
        if bar is not None and self.progress_ui is not None:
            if status is TaskStatus.SUCCESS:
                self.progress_ui.update(bar, completed=100, detail="")
        line = (
            f"{_STATUS_ICON.get(status, '')} {rec.name} "
            f"({rec.duration:.2f}s){format_meta(rec.meta)}"
        )
        if self._transient:
            self._completions.append(line)
        else:
            self.console.print(line)
        if not self._bar_ids:
            self.flush()
        return rec

    def status(self, message: str, **fields: Any) -> None:
        self.console.print(f"[green]INFO[/]: {message}")

    def verbose(self, message: str, *, level: int = 1, **fields: Any) -> None:
        if get_verbosity() < level:
            return
        self.console.print(f"[cyan]VERB{level}[/]: {message}")

    def error(self, message: str, **fields: Any) -> None:
        self.console.print(f"[bold red]ERROR[/]: {message}")

    def warning(self, message: str, **fields: Any) -> None:
        self.console.print(f"[yellow]WARN[/]: {message}")

    def section(self, title: str) -> None:
        self.console.rule(title)

    def flush(self) -> None:
        if self.progress_ui is not None:
            try:
                self.progress_ui.stop()
            finally:
                self.progress_ui = None
                self._bar_ids.clear()
        if self._completions:
            self.console.print("\n".join(self._completions))
            self._completions.clear()
