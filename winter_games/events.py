from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import Protocol

from .biathlon import BiathlonConfig, build_biathlon_session
from .game_core import AngularSample, EventSnapshot
from .tournament import TournamentLedger

logger = logging.getLogger(__name__)


class EventKind(StrEnum):
    BIATHLON = "biathlon"
    SKI_JUMP = "ski_jump"
    BOBSLED = "bobsled"
    SPEED_SKATING = "speed_skating"
    SLALOM = "slalom"
    SNOWBOARD_HALFPIPE = "snowboard_halfpipe"
    SKI_FREESTYLE = "ski_freestyle"
    LUGE = "luge"
    CURLING = "curling"
    ICE_HOCKEY = "ice_hockey"


@dataclass(frozen=True, slots=True)
class EventInfo:
    kind: EventKind
    name: str
    description: str


# Ledger column order.
EVENTS: tuple[EventInfo, ...] = (
    EventInfo(EventKind.BIATHLON, "Biathlon", "Cross-country skiing and precision shooting"),
    EventInfo(EventKind.SKI_JUMP, "Ski Jump", "Take off and stick the landing"),
    EventInfo(EventKind.BOBSLED, "Bobsled", "High-speed descent"),
    EventInfo(EventKind.SPEED_SKATING, "Speed Skating", "Race on the ice"),
    EventInfo(EventKind.SLALOM, "Slalom", "Zigzag through the gates"),
    EventInfo(EventKind.SNOWBOARD_HALFPIPE, "Snowboard Halfpipe", "Aerial tricks"),
    EventInfo(EventKind.SKI_FREESTYLE, "Ski Freestyle", "Acrobatics in flight"),
    EventInfo(EventKind.LUGE, "Luge", "Hold the line"),
    EventInfo(EventKind.CURLING, "Curling", "Precision and strategy"),
    EventInfo(EventKind.ICE_HOCKEY, "Ice Hockey", "Shots on goal"),
)


class EventEngine(Protocol):
    """What the tournament needs from any playable event."""

    @property
    def player_index(self) -> int: ...
    def start(self) -> None: ...
    def reset(self) -> None: ...
    def observe_sample(self, sample: AngularSample) -> bool: ...
    def fire(self) -> bool: ...
    def advance(self) -> bool: ...
    def score(self) -> int: ...
    def is_complete(self) -> bool: ...
    def snapshot(self) -> EventSnapshot: ...


class UnsupportedEventError(ValueError):
    """Raised when a catalogued event has no playable engine yet."""

    def __init__(self, kind: EventKind) -> None:
        super().__init__(f"event {kind.value!r} is not implemented")
        self.kind = kind


EngineFactory = Callable[..., EventEngine]


def _build_biathlon(
    *,
    seed: int | None,
    ledger: TournamentLedger | None,
    player_index: int,
    event_index: int,
    config: object | None,
) -> EventEngine:
    if config is not None and not isinstance(config, BiathlonConfig):
        raise TypeError("biathlon expects a BiathlonConfig")
    return build_biathlon_session(
        seed=seed,
        config=config,
        ledger=ledger,
        player_index=player_index,
        event_index=event_index,
    )


_FACTORIES: dict[EventKind, EngineFactory] = {
    EventKind.BIATHLON: _build_biathlon,
}


def event_index_of(kind: EventKind) -> int:
    for i, info in enumerate(EVENTS):
        if info.kind is kind:
            return i
    raise ValueError(f"unknown event kind {kind!r}")


def event_at(index: int) -> EventInfo:
    if not (0 <= index < len(EVENTS)):
        raise ValueError(f"event index {index} outside 0..{len(EVENTS) - 1}")
    return EVENTS[index]


def is_implemented(kind: EventKind) -> bool:
    return kind in _FACTORIES


def build_event_session(
    kind: EventKind,
    *,
    seed: int | None,
    ledger: TournamentLedger | None = None,
    player_index: int = 0,
    config: object | None = None,
) -> EventEngine:
    """Create a fresh, not yet started engine for ``kind``.

    Unimplemented events raise UnsupportedEventError instead of falling back to
    another event's engine.
    """

    factory = _FACTORIES.get(kind)
    if factory is None:
        logger.warning("Refusing to launch unimplemented event %s", kind.value)
        raise UnsupportedEventError(kind)
    return factory(
        seed=seed,
        ledger=ledger,
        player_index=player_index,
        event_index=event_index_of(kind),
        config=config,
    )
