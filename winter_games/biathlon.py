from __future__ import annotations

import logging
from dataclasses import dataclass

from .aim import AIM_MAX, AIM_MIN, DEFAULT_SENSITIVITY, AimModel
from .game_core import (
    AimPosition,
    AngularSample,
    EventSnapshot,
    Phase,
    SeededRng,
    ShotRecord,
    Target,
)
from .scoring import hit_distance, ring_score, score_shot
from .stability import DEFAULT_WINDOW, StabilityFilter
from .targets import CENTER_RANGE, RADIUS_RANGE, TargetGenerator
from .tournament import TournamentLedger

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class BiathlonConfig:
    target_count: int = 5
    stability_threshold: float = 0.7
    stability_window: int = DEFAULT_WINDOW
    sensitivity: float = DEFAULT_SENSITIVITY
    cooldown_s: float = 1.0

    aim_min: float = AIM_MIN
    aim_max: float = AIM_MAX
    reposition_min: float = 0.3
    reposition_max: float = 0.7

    center_range: tuple[float, float] = CENTER_RANGE
    radius_range: tuple[float, float] = RADIUS_RANGE


class BiathlonSession:
    """One player's pass through every target of the shooting range.

    IDLE -> start() -> AIMING -> fire() -> COOLDOWN -> advance() -> AIMING ... -> COMPLETE

    Calls made in the wrong phase are ignored and report False; the UI is
    expected to grey out controls rather than handle faults. The session never
    waits on time itself: whoever owns the frame loop calls advance() once the
    cooldown has elapsed.
    """

    def __init__(
        self,
        *,
        seed: int | None,
        config: BiathlonConfig | None = None,
        ledger: TournamentLedger | None = None,
        player_index: int = 0,
        event_index: int = 0,
    ) -> None:
        cfg = config or BiathlonConfig()

        if cfg.target_count <= 0:
            raise ValueError("target_count must be > 0")
        if not (0.0 <= cfg.stability_threshold < 1.0):
            raise ValueError("stability_threshold must be in [0.0, 1.0)")
        if cfg.cooldown_s < 0.0:
            raise ValueError("cooldown_s must be >= 0")
        if cfg.reposition_min > cfg.reposition_max:
            raise ValueError("reposition_min must be <= reposition_max")
        if ledger is not None and not ledger.in_bounds(player_index, event_index):
            raise ValueError(f"ledger has no cell for player {player_index}, event {event_index}")

        self._cfg = cfg
        self._rng = SeededRng(seed)
        self._filter = StabilityFilter(window=cfg.stability_window)
        self._aim = AimModel(
            rng=self._rng,
            sensitivity=cfg.sensitivity,
            lo=cfg.aim_min,
            hi=cfg.aim_max,
        )
        self._generator = TargetGenerator(
            rng=self._rng,
            center_range=cfg.center_range,
            radius_range=cfg.radius_range,
        )

        self._ledger = ledger
        self._player_index = int(player_index)
        self._event_index = int(event_index)

        self._phase = Phase.IDLE
        self._targets: tuple[Target, ...] = ()
        self._target_index = 0
        self._score = 0
        self._shots: list[ShotRecord] = []
        self._recorded = False

    @property
    def config(self) -> BiathlonConfig:
        return self._cfg

    @property
    def seed(self) -> int | None:
        return self._rng.seed

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def target_index(self) -> int:
        return self._target_index

    @property
    def target_count(self) -> int:
        return self._cfg.target_count

    @property
    def player_index(self) -> int:
        return self._player_index

    @property
    def event_index(self) -> int:
        return self._event_index

    def targets(self) -> tuple[Target, ...]:
        return self._targets

    def shots(self) -> list[ShotRecord]:
        return list(self._shots)

    # Transitions

    def start(self) -> None:
        self._targets = self._generator.generate(self._cfg.target_count)
        self._target_index = 0
        self._score = 0
        self._shots.clear()
        self._recorded = False
        self._filter.reset()
        self._enter_aiming()
        logger.debug("Biathlon session started (seed=%s, targets=%d)", self.seed, len(self._targets))

    def reset(self) -> None:
        self.start()

    def observe_sample(self, sample: AngularSample) -> bool:
        if self._phase is not Phase.AIMING:
            return False
        self._filter.observe(sample)
        self._aim.integrate(sample)
        return True

    def fire(self) -> bool:
        if self._phase is not Phase.AIMING or not self.is_stable():
            return False

        target = self._targets[self._target_index]
        aim = self._aim.position
        stability = self._filter.stability()
        distance = hit_distance(aim, target)
        points = score_shot(distance, target.radius, stability)

        self._shots.append(
            ShotRecord(
                target_index=self._target_index,
                aim=aim,
                target=target,
                hit_distance=distance,
                ring_score=ring_score(distance, target.radius),
                stability=stability,
                points=points,
            )
        )
        self._score += points
        self._target_index += 1
        self._phase = Phase.COOLDOWN
        logger.debug(
            "Shot %d/%d: distance=%.4f stability=%.3f points=%d",
            self._target_index,
            self.target_count,
            distance,
            stability,
            points,
        )
        return True

    def advance(self) -> bool:
        if self._phase is not Phase.COOLDOWN:
            return False
        if self._target_index < self.target_count:
            self._enter_aiming()
        else:
            self._phase = Phase.COMPLETE
            self._record_into_ledger()
        return True

    # Observables

    def is_aiming(self) -> bool:
        return self._phase is Phase.AIMING

    def is_complete(self) -> bool:
        return self._phase is Phase.COMPLETE

    def stability(self) -> float:
        return self._filter.stability()

    def is_stable(self) -> bool:
        return self._filter.stability() > self._cfg.stability_threshold

    def aim_position(self) -> AimPosition:
        return self._aim.position

    def current_target(self) -> Target | None:
        if self._phase is Phase.AIMING:
            return self._targets[self._target_index]
        if self._phase is Phase.COOLDOWN:
            # The target just shot at stays on screen during the cooldown.
            return self._targets[self._target_index - 1]
        return None

    def score(self) -> int:
        return self._score

    def targets_remaining(self) -> int:
        return self.target_count - self._target_index

    def snapshot(self) -> EventSnapshot:
        return EventSnapshot(
            title="Biathlon",
            phase=self._phase,
            prompt=self.current_prompt(),
            input_hint="Arrows/mouse = aim  Space = fire  R = restart",
            target_index=self._target_index,
            target_count=self.target_count,
            score=self._score,
            stability=self._filter.stability(),
            is_stable=self.is_stable(),
            aim=None if self._phase is Phase.IDLE else self._aim.position,
            target=self.current_target(),
            last_shot=self._shots[-1] if self._shots else None,
        )

    def current_prompt(self) -> str:
        if self._phase is Phase.IDLE:
            return "Press Enter to start shooting."
        if self._phase is Phase.COMPLETE:
            return f"Range complete. Score: {self._score}"
        if self._phase is Phase.COOLDOWN:
            last = self._shots[-1]
            return f"Hit for {last.points} points."
        if self.is_stable():
            return "Steady. Fire!"
        return "Hold steady..."

    def _enter_aiming(self) -> None:
        self._phase = Phase.AIMING
        self._aim.reposition(self._cfg.reposition_min, self._cfg.reposition_max)

    def _record_into_ledger(self) -> None:
        if self._ledger is None or self._recorded:
            return
        self._ledger.record_result(self._player_index, self._event_index, self._score)
        self._recorded = True
        logger.info(
            "Biathlon complete: player=%d event=%d score=%d",
            self._player_index,
            self._event_index,
            self._score,
        )


def build_biathlon_session(
    *,
    seed: int | None,
    config: BiathlonConfig | None = None,
    ledger: TournamentLedger | None = None,
    player_index: int = 0,
    event_index: int = 0,
) -> BiathlonSession:
    return BiathlonSession(
        seed=seed,
        config=config,
        ledger=ledger,
        player_index=player_index,
        event_index=event_index,
    )
