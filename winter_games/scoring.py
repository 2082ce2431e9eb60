from __future__ import annotations

import math

from .game_core import AimPosition, Target, clamp01, round_half_up

# (fraction of target radius, ring points), innermost first.
RINGS: tuple[tuple[float, int], ...] = (
    (0.2, 100),
    (0.4, 80),
    (0.6, 60),
    (0.8, 40),
    (1.0, 20),
)


def hit_distance(aim: AimPosition, target: Target) -> float:
    return math.hypot(aim.x - target.x, aim.y - target.y)


def ring_score(hit_distance: float, target_radius: float) -> int:
    """Points for the ring the shot landed in, before the stability multiplier."""

    if not math.isfinite(hit_distance) or not (target_radius > 0.0):
        return 0
    d = abs(hit_distance)
    for fraction, points in RINGS:
        if d <= fraction * target_radius:
            return points
    return 0


def score_shot(hit_distance: float, target_radius: float, stability: float) -> int:
    """Ring points scaled by stability, rounded half-up. Never negative."""

    s = 0.0 if math.isnan(stability) else clamp01(stability)
    return max(0, round_half_up(ring_score(hit_distance, target_radius) * s))
