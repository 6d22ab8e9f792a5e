from __future__ import annotations

import heapq
import itertools
from dataclasses import dataclass, field
from typing import Any, Callable

class ManualTimerHandle:
    def __init__(self, due: float, callback: Callable[[], Any]):
        self.due = due
        self._callback = callback
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        self._active = False

    def fire(self) -> None:
        if self._active:
            self._active = False
            self._callback()

class ManualTimerService:
    """Timer service driven by a virtual clock.

    Time only moves when `advance` is called, which runs every due callback in
    order, including the ones scheduled while advancing.
    """

    def __init__(self, start: float = 0.0):
        self._now = start
        self._queue: list[tuple[float, int, ManualTimerHandle]] = []
        self._counter = itertools.count()

    def now(self) -> float:
        return self._now

    def call_later(self, delay: float, callback: Callable[[], Any]) -> ManualTimerHandle:
        handle = ManualTimerHandle(self._now + max(delay, 0.0), callback)
        heapq.heappush(self._queue, (handle.due, next(self._counter), handle))
        return handle

    def advance(self, dt: float) -> None:
        target = self._now + dt
        while self._queue and self._queue[0][0] <= target:
            due, _, handle = heapq.heappop(self._queue)
            self._now = max(self._now, due)
            handle.fire()
        self._now = target

    def pending(self) -> int:
        """Number of callbacks that will still fire."""
        return sum(1 for _, _, handle in self._queue if handle.active)

@dataclass
class StaticReportSupplier:
    """Report supplier that returns fixed binding reports."""

    local_report: str = ""
    all_report: str = ""
    map_reports: dict[Any, str] = field(default_factory=dict)
    calls: int = 0

    def active_bindings_report(self, local_only: bool) -> str:
        self.calls += 1
        if local_only:
            return self.local_report
        return self.all_report

    def map_bindings_report(self, target: Any) -> str:
        self.calls += 1
        return self.map_reports.get(target, "")

@dataclass
class RecordingSink:
    """Display sink that remembers what it was asked to do."""

    rich_text: bool = False
    percent_directives: bool = False
    shown: list[str] = field(default_factory=list)
    clear_count: int = 0

    def show(self, text: str) -> None:
        self.shown.append(text)

    def clear(self) -> None:
        self.clear_count += 1

