"""Encoder progress milestones.

Encoders report through a plain callable ``(percent, milestone, message)``.
Percentages are fixed per milestone; per-file milestones interpolate
inside their band.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, Optional, Protocol

__all__ = ["Milestone", "ProgressCallback", "ProgressSink", "band_percent"]


class Milestone(Enum):
    START = (0.0, 0.0)
    RESOLVE = (10.0, 40.0)
    TABLE = (40.0, 40.0)
    MERGE = (60.0, 80.0)
    CHECKSUM = (80.0, 80.0)
    ASSEMBLE = (90.0, 90.0)
    DONE = (100.0, 100.0)

    @property
    def start(self) -> float:
        return self.value[0]

    @property
    def end(self) -> float:
        return self.value[1]


class ProgressCallback(Protocol):
    def __call__(
        self, percent: float, milestone: Milestone, message: str
    ) -> None: ...


def band_percent(milestone: Milestone, index: int, total: int) -> float:
    if total <= 0:
        return milestone.start
    return milestone.start + (index / total) * (milestone.end - milestone.start)


class ProgressSink:
    """Wraps an optional callback so encoders can report unconditionally."""

    def __init__(self, callback: Optional[ProgressCallback] = None):
        self._callback: Optional[Callable[..., None]] = callback

    def __call__(
        self,
        milestone: Milestone,
        message: str,
        *,
        index: int = 0,
        total: int = 0,
    ) -> None:
        if self._callback is None:
            return
        self._callback(band_percent(milestone, index, total), milestone, message)
