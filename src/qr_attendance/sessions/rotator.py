from __future__ import annotations

import logging
import math
import threading
from typing import Callable, Optional

from ..common.datetime_utils import epoch_millis
from ..core.constants import DEFAULT_CODE_WINDOW_MS, SESSION_CODE_PREFIX
from ..core.exceptions import ValidationError
from . import codes
from .model import SessionCode

logger = logging.getLogger(__name__)


class CodeRotator:
    """Keeps the faculty display's current code fresh.

    A daemon thread regenerates the code once per window. ``stop()`` cancels
    it and clears the code; ``pause()`` hides the code without stopping the
    thread. The countdown is derived from the clock rather than a second
    timer.
    """

    def __init__(
        self,
        *,
        window_ms: int = DEFAULT_CODE_WINDOW_MS,
        prefix: str = SESSION_CODE_PREFIX,
        clock: Callable[[], int] = epoch_millis,
    ):
        if window_ms <= 0:
            raise ValidationError("Code window must be positive")
        self._window_ms = int(window_ms)
        self._prefix = prefix
        self._clock = clock
        self._lock = threading.Lock()
        self._stopped = threading.Event()
        # Set by a manual rotation so the worker restarts its full wait.
        self._rotated = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._current: Optional[SessionCode] = None
        self._paused = False

    @property
    def window_ms(self) -> int:
        return self._window_ms

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def is_paused(self) -> bool:
        return self._paused

    def start(self) -> SessionCode:
        with self._lock:
            if self._thread is None or not self._thread.is_alive():
                self._stopped.clear()
                self._rotated.clear()
                self._paused = False
                self._thread = threading.Thread(target=self._run, name="code-rotator", daemon=True)
                self._thread.start()
                logger.info("Code rotation started (window=%sms)", self._window_ms)
        return self.rotate()

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stopped.set()
        self._rotated.set()
        thread = self._thread
        if thread is not None:
            thread.join(timeout)
        with self._lock:
            self._thread = None
            self._current = None
        logger.info("Code rotation stopped")

    def pause(self) -> None:
        self._paused = True

    def resume(self) -> SessionCode:
        self._paused = False
        return self.rotate()

    def rotate(self) -> SessionCode:
        code = self._advance()
        self._rotated.set()
        return code

    def _advance(self) -> SessionCode:
        code = codes.generate(self._clock(), self._window_ms, prefix=self._prefix)
        with self._lock:
            self._current = code
        return code

    def current(self) -> Optional[SessionCode]:
        if self._paused:
            return None
        with self._lock:
            return self._current

    def seconds_remaining(self) -> int:
        code = self.current()
        if code is None:
            return 0
        left_ms = code.expires_at_ms - self._clock()
        return max(0, min(math.ceil(left_ms / 1000), math.ceil(self._window_ms / 1000)))

    def _run(self) -> None:
        while True:
            reset = self._rotated.wait(self._window_ms / 1000)
            if self._stopped.is_set():
                return
            if reset:
                self._rotated.clear()
                continue
            if not self._paused:
                self._advance()
