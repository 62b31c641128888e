from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class FrameTicker:
    """
    Calls `callback` once per frame interval on a background thread.

    cancel() is idempotent. Once it returns (from any thread other than the
    ticker's own), the callback will not run again.
    """

    def __init__(self, callback: Callable[[], object], fps: float = 60.0):
        if fps <= 0:
            raise ValueError("fps must be positive")
        self.callback = callback
        self.interval = 1.0 / fps
        self.frames = 0
        self.error: Optional[BaseException] = None
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive() and not self._stop.is_set()

    @property
    def cancelled(self) -> bool:
        return self._stop.is_set()

    def start(self) -> "FrameTicker":
        if self._thread is not None:
            raise RuntimeError("FrameTicker can only be started once")
        if self._stop.is_set():
            raise RuntimeError("FrameTicker was cancelled before it started")
        self._thread = threading.Thread(target=self._run, name="frame-ticker", daemon=True)
        self._thread.start()
        return self

    def _run(self) -> None:
        next_at = time.monotonic()
        while not self._stop.is_set():
            try:
                self.callback()
            except Exception as e:
                logger.exception("Frame callback failed; stopping ticker")
                self.error = e
                self._stop.set()
                break
            self.frames += 1
            next_at += self.interval
            delay = next_at - time.monotonic()
            if delay < 0:
                # Fell behind: drop the missed frames instead of bursting.
                next_at = time.monotonic()
                delay = 0.0
            self._stop.wait(delay)

    def cancel(self) -> None:
        self._stop.set()
        t = self._thread
        if t is not None and t is not threading.current_thread():
            t.join()
