"""A time limit that can be checked cheaply and cancelled early."""

from __future__ import annotations

import threading
import time
from datetime import timedelta


class Timeout:
    """Signals an abort once a limit in seconds has passed.

    A limit of zero means no time limit; an abort can still be requested with
    :meth:`trigger_early_abort`.
    """

    def __init__(self, limit: float | timedelta) -> None:
        if isinstance(limit, timedelta):
            limit = limit.total_seconds()
        self._abort = threading.Event()
        self._aborted = False
        self._condition = threading.Condition()
        self._thread: threading.Thread | None = None
        if limit != 0:
            self._thread = threading.Thread(
                target=self._watch, args=(float(limit),), daemon=True
            )
            self._thread.start()

    def _watch(self, limit: float) -> None:
        deadline = time.monotonic() + limit
        with self._condition:
            while not self._abort.is_set():
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    self._aborted = True
                    break
                self._condition.wait(remaining)
        self._abort.set()

    def should_abort(self) -> bool:
        """Return True once the limit has passed or an abort was requested."""
        return self._abort.is_set()

    def aborted(self) -> bool:
        """Return True if the abort was caused by the time limit running out."""
        return self._aborted

    def trigger_early_abort(self) -> None:
        """Request an abort now, without it counting as a timeout."""
        self._abort.set()

    def stop(self) -> None:
        """Stop the timer and wait for its thread to finish."""
        thread = self._thread
        if thread is None:
            return
        with self._condition:
            self._abort.set()
            self._condition.notify_all()
        thread.join()
        self._thread = None

    def __enter__(self) -> Timeout:
        return self

    def __exit__(self, *args) -> None:
        self.stop()