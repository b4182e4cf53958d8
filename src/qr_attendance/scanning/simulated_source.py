from __future__ import annotations

import random
import threading
from typing import Callable, Iterator, Optional

from ..common.datetime_utils import epoch_millis
from ..core.constants import (
    DEFAULT_CODE_WINDOW_MS,
    SESSION_CODE_PREFIX,
    SIMULATED_DETECTION_RATE,
    SIMULATED_FRAME_INTERVAL_SECONDS,
)
from ..sessions import codes
from .source import CodeSource


class SimulatedCodeSource(CodeSource):
    """Demo camera: each frame "detects" a fresh session code by chance.

    Stands in for a real decoder; nothing is read from a camera.
    """

    def __init__(
        self,
        *,
        rng: Optional[random.Random] = None,
        detection_rate: float = SIMULATED_DETECTION_RATE,
        frame_interval: float = SIMULATED_FRAME_INTERVAL_SECONDS,
        max_frames: Optional[int] = None,
        window_ms: int = DEFAULT_CODE_WINDOW_MS,
        prefix: str = SESSION_CODE_PREFIX,
        clock: Callable[[], int] = epoch_millis,
    ):
        self._rng = rng or random.Random()
        self._rate = float(detection_rate)
        self._interval = float(frame_interval)
        self._max_frames = max_frames
        self._window_ms = window_ms
        self._prefix = prefix
        self._clock = clock
        self._closed = threading.Event()

    def codes(self) -> Iterator[str]:
        frame = 0
        while not self._closed.is_set():
            if self._max_frames is not None and frame >= self._max_frames:
                return
            frame += 1
            if self._rng.random() < self._rate:
                yield codes.generate(self._clock(), self._window_ms, prefix=self._prefix).value
            if self._interval and self._closed.wait(self._interval):
                return

    def close(self) -> None:
        self._closed.set()
