from __future__ import annotations

from .game_core import SeededRng, Target

CENTER_RANGE = (0.2, 0.8)
RADIUS_RANGE = (0.05, 0.08)


class TargetGenerator:
    """Uniform random target placement. Targets may overlap."""

    def __init__(
        self,
        *,
        rng: SeededRng,
        center_range: tuple[float, float] = CENTER_RANGE,
        radius_range: tuple[float, float] = RADIUS_RANGE,
    ) -> None:
        c_lo, c_hi = center_range
        r_lo, r_hi = radius_range
        if c_lo > c_hi:
            raise ValueError("center_range must be (lo, hi) with lo <= hi")
        if not (0.0 < r_lo <= r_hi):
            raise ValueError("radius_range must be (lo, hi) with 0 < lo <= hi")
        self._rng = rng
        self._center_range = (float(c_lo), float(c_hi))
        self._radius_range = (float(r_lo), float(r_hi))

    def next_target(self) -> Target:
        c_lo, c_hi = self._center_range
        r_lo, r_hi = self._radius_range
        x = self._rng.uniform(c_lo, c_hi)
        y = self._rng.uniform(c_lo, c_hi)
        radius = self._rng.uniform(r_lo, r_hi)
        return Target(x=float(x), y=float(y), radius=float(radius))

    def generate(self, count: int) -> tuple[Target, ...]:
        if count < 0:
            raise ValueError("count must be >= 0")
        return tuple(self.next_target() for _ in range(int(count)))
