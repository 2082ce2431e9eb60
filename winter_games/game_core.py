from __future__ import annotations

import math
import random
from dataclasses import dataclass
from enum import StrEnum


class Phase(StrEnum):
    IDLE = "idle"
    AIMING = "aiming"
    COOLDOWN = "cooldown"
    COMPLETE = "complete"


@dataclass(frozen=True, slots=True)
class AngularSample:
    """One three-axis angular-rate reading, units as delivered by the sensor."""

    x: float
    y: float
    z: float = 0.0

    def magnitude(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)


@dataclass(frozen=True, slots=True)
class AimPosition:
    x: float
    y: float


@dataclass(frozen=True, slots=True)
class Target:
    x: float
    y: float
    radius: float


@dataclass(frozen=True, slots=True)
class ShotRecord:
    target_index: int
    aim: AimPosition
    target: Target
    hit_distance: float
    ring_score: int
    stability: float
    points: int


@dataclass(frozen=True, slots=True)
class EventSnapshot:
    """View model for the UI (pure data)."""

    title: str
    phase: Phase
    prompt: str
    input_hint: str
    target_index: int
    target_count: int
    score: int
    stability: float
    is_stable: bool
    aim: AimPosition | None
    target: Target | None
    last_shot: ShotRecord | None = None


class SeededRng:
    """Seeded RNG wrapper to keep random streams explicit.

    ``seed=None`` gives a non-reproducible stream for live play.
    """

    def __init__(self, seed: int | None) -> None:
        self._seed = None if seed is None else int(seed)
        self._rng = random.Random(self._seed)

    @property
    def seed(self) -> int | None:
        return self._seed

    def randint(self, a: int, b: int) -> int:
        return self._rng.randint(a, b)

    def uniform(self, a: float, b: float) -> float:
        return self._rng.uniform(a, b)


def clamp(x: float, lo: float, hi: float) -> float:
    return lo if x <= lo else hi if x >= hi else float(x)


def clamp01(x: float) -> float:
    return clamp(x, 0.0, 1.0)


def round_half_up(x: float) -> int:
    # Python's round() is banker's rounding; points use schoolbook rounding.
    return int(math.floor(x + 0.5))
