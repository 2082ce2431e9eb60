from __future__ import annotations

import math

from .game_core import AimPosition, AngularSample, SeededRng, clamp

DEFAULT_SENSITIVITY = 0.02
AIM_MIN = 0.1
AIM_MAX = 0.9


class AimModel:
    """Linear accumulation of angular rate into a clamped, normalized aim point.

    No rotation or perspective: each sample nudges x/y by ``rate * sensitivity``.
    """

    def __init__(
        self,
        *,
        rng: SeededRng,
        sensitivity: float = DEFAULT_SENSITIVITY,
        lo: float = AIM_MIN,
        hi: float = AIM_MAX,
    ) -> None:
        if sensitivity <= 0.0:
            raise ValueError("sensitivity must be > 0")
        if not (0.0 <= lo < hi <= 1.0):
            raise ValueError("aim bounds must satisfy 0 <= lo < hi <= 1")
        self._rng = rng
        self._sensitivity = float(sensitivity)
        self._lo = float(lo)
        self._hi = float(hi)
        self._x = 0.5
        self._y = 0.5

    @property
    def position(self) -> AimPosition:
        return AimPosition(x=self._x, y=self._y)

    def reposition(self, lo: float = 0.3, hi: float = 0.7) -> AimPosition:
        """Drop the aim somewhere new so every target has to be re-acquired."""
        if lo > hi:
            raise ValueError("reposition range must satisfy lo <= hi")
        self._x = clamp(self._rng.uniform(lo, hi), self._lo, self._hi)
        self._y = clamp(self._rng.uniform(lo, hi), self._lo, self._hi)
        return self.position

    def integrate(self, sample: AngularSample) -> AimPosition:
        dx = sample.x * self._sensitivity
        dy = sample.y * self._sensitivity
        # A non-finite axis contributes nothing rather than pinning the aim to an edge.
        if math.isfinite(dx):
            self._x = clamp(self._x + dx, self._lo, self._hi)
        if math.isfinite(dy):
            self._y = clamp(self._y + dy, self._lo, self._hi)
        return self.position
