from __future__ import annotations

import math

from .game_core import AngularSample, clamp01

DEFAULT_WINDOW = 10

# Any stored magnitude at or above 0.5 already pins the window's contribution
# to zero stability; 10.0 lets one saturated sample zero the whole window.
SATURATED_MAGNITUDE = 10.0


class StabilityFilter:
    """Moving-average jitter filter over the last ``window`` angular-rate magnitudes.

    stability = clamp(1 - 2 * mean(buffer), 0, 1)

    The buffer starts zero-filled, so the first few samples read steadier than
    they are until the window has been filled once.
    """

    def __init__(self, *, window: int = DEFAULT_WINDOW) -> None:
        if window <= 0:
            raise ValueError("window must be > 0")
        self._buffer = [0.0] * int(window)
        self._cursor = 0
        self._observed = 0
        self._stability = 1.0

    @property
    def capacity(self) -> int:
        return len(self._buffer)

    @property
    def observed(self) -> int:
        return self._observed

    def is_warm(self) -> bool:
        """True once every slot holds a real sample."""
        return self._observed >= len(self._buffer)

    def observe(self, sample: AngularSample) -> float:
        magnitude = sample.magnitude()
        if not math.isfinite(magnitude):
            magnitude = SATURATED_MAGNITUDE
        else:
            magnitude = min(magnitude, SATURATED_MAGNITUDE)

        self._buffer[self._cursor] = magnitude
        self._cursor = (self._cursor + 1) % len(self._buffer)
        self._observed += 1

        mean = sum(self._buffer) / len(self._buffer)
        self._stability = clamp01(1.0 - 2.0 * mean)
        return self._stability

    def stability(self) -> float:
        return self._stability

    def reset(self) -> None:
        for i in range(len(self._buffer)):
            self._buffer[i] = 0.0
        self._cursor = 0
        self._observed = 0
        self._stability = 1.0
