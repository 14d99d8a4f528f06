"""QTimer-backed scheduler that drives session clocks from the Qt event loop."""

from __future__ import annotations

from collections.abc import Callable
from threading import Lock

from PySide6.QtCore import QObject, QTimer, Signal, Slot


class QtScheduledTask:
    """Handle for a QTimer owned by :class:`QtScheduler`."""

    def __init__(self, scheduler: QtScheduler, interval_ms: int, single_shot: bool, callback: Callable[[], None]) -> None:
        self._scheduler = scheduler
        self.interval_ms = interval_ms
        self.single_shot = single_shot
        self._callback = callback
        self._timer: QTimer | None = None
        self._cancelled = False
        self._fired = False
        self._lock = Lock()

    @property
    def active(self) -> bool:
        with self._lock:
            return not self._cancelled and not (self.single_shot and self._fired)

    def cancel(self) -> None:
        with self._lock:
            if self._cancelled:
                return
            self._cancelled = True
        self._scheduler._dispatch(self._stop_timer)

    def _start_timer(self) -> None:
        # Runs on the scheduler's thread.
        if not self.active:
            return
        timer = QTimer(self._scheduler)
        timer.setSingleShot(self.single_shot)
        timer.setInterval(self.interval_ms)
        timer.timeout.connect(self._fire)
        self._timer = timer
        timer.start()

    def _stop_timer(self) -> None:
        if self._timer is not None:
            self._timer.stop()
            self._timer.deleteLater()
            self._timer = None

    def _fire(self) -> None:
        with self._lock:
            if self._cancelled:
                return
            if self.single_shot:
                self._fired = True
        self._callback()
        if self.single_shot:
            self._stop_timer()


class QtScheduler(QObject):
    """Creates timers on the thread that owns this object.

    Requests from other threads (the API server runs in its own thread) are
    queued to the owner thread through a signal, since a QTimer only fires on
    the thread that started it.
    """

    _invoke = Signal(object)

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._invoke.connect(self._run)

    def schedule_repeating(self, interval_ms: int, callback: Callable[[], None]) -> QtScheduledTask:
        if interval_ms <= 0:
            raise ValueError("Repeating interval must be positive.")
        task = QtScheduledTask(self, interval_ms, single_shot=False, callback=callback)
        self._dispatch(task._start_timer)
        return task

    def schedule_once(self, delay_ms: int, callback: Callable[[], None]) -> QtScheduledTask:
        task = QtScheduledTask(self, max(0, delay_ms), single_shot=True, callback=callback)
        self._dispatch(task._start_timer)
        return task

    def _dispatch(self, action: Callable[[], None]) -> None:
        self._invoke.emit(action)

    @Slot(object)
    def _run(self, action: Callable[[], None]) -> None:
        action()
