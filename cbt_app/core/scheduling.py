"""Scheduled-task handles used for the session clock and autosave.

The session engine never owns a raw interval: every recurring or delayed
callback is a :class:`ScheduledTask` that the engine cancels when the
session ends. ``QtScheduler`` (``cbt_app.qt.qt_scheduler``) backs these
handles with ``QTimer``; :class:`ManualScheduler` drives them from a
virtual clock.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol


class ScheduledTask(Protocol):
    @property
    def active(self) -> bool: ...

    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def schedule_repeating(self, interval_ms: int, callback: Callable[[], None]) -> ScheduledTask: ...

    def schedule_once(self, delay_ms: int, callback: Callable[[], None]) -> ScheduledTask: ...


@dataclass(slots=True)
class _ManualTask:
    due_ms: int
    interval_ms: int | None
    callback: Callable[[], None]
    sequence: int
    cancelled: bool = False
    fired: bool = False

    @property
    def active(self) -> bool:
        return not self.cancelled and not (self.interval_ms is None and self.fired)

    def cancel(self) -> None:
        self.cancelled = True


@dataclass(slots=True)
class ManualScheduler:
    """Deterministic scheduler advanced explicitly by the caller."""

    now_ms: int = 0
    _tasks: list[_ManualTask] = field(default_factory=list)
    _sequence: int = 0

    def schedule_repeating(self, interval_ms: int, callback: Callable[[], None]) -> _ManualTask:
        if interval_ms <= 0:
            raise ValueError("Repeating interval must be positive.")
        return self._add(self.now_ms + interval_ms, interval_ms, callback)

    def schedule_once(self, delay_ms: int, callback: Callable[[], None]) -> _ManualTask:
        return self._add(self.now_ms + max(0, delay_ms), None, callback)

    def advance(self, elapsed_ms: int) -> None:
        """Move the clock forward, firing due callbacks in time order."""
        target = self.now_ms + elapsed_ms
        while True:
            due = [task for task in self._tasks if task.active and task.due_ms <= target]
            if not due:
                break
            task = min(due, key=lambda t: (t.due_ms, t.sequence))
            self.now_ms = task.due_ms
            if task.interval_ms is None:
                task.fired = True
            else:
                task.due_ms += task.interval_ms
            task.callback()
        self.now_ms = target
        self._tasks = [task for task in self._tasks if task.active]

    def active_tasks(self) -> list[_ManualTask]:
        return [task for task in self._tasks if task.active]

    def _add(self, due_ms: int, interval_ms: int | None, callback: Callable[[], None]) -> _ManualTask:
        self._sequence += 1
        task = _ManualTask(due_ms=due_ms, interval_ms=interval_ms, callback=callback, sequence=self._sequence)
        self._tasks.append(task)
        return task
