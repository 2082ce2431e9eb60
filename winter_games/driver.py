"""Frame-loop glue between an input source, the wall clock and event engines.

Event engines never look at time. The driver owns the clock, starts the post-shot
cooldown when a shot lands and calls ``advance()`` on the first tick after it has
elapsed. It also walks the roster: when a session completes, the next player
who still has attempts left gets a fresh session.
"""

from __future__ import annotations

import logging
import time
from typing import Protocol

from .events import EventEngine, EventKind, build_event_session, event_index_of, is_implemented
from .game_core import AngularSample, Phase, SeededRng
from .tournament import EventStatus, Tournament, TournamentConfig

logger = logging.getLogger(__name__)

DEFAULT_COOLDOWN_S = 1.0
PRACTICE_NAME = "Practice"


class Clock(Protocol):
    """Monotonic clock abstraction."""

    def now(self) -> float:
        """Return monotonic seconds."""


class RealClock:
    """Production clock backed by time.monotonic()."""

    def now(self) -> float:
        return time.monotonic()


class SessionDriver:
    def __init__(
        self,
        *,
        tournament: Tournament,
        kind: EventKind,
        clock: Clock,
        seed: int | None = None,
        cooldown_s: float | None = None,
        config: object | None = None,
    ) -> None:
        if cooldown_s is None:
            # Defaults to the event config's cooldown when it has one.
            cooldown_s = float(getattr(config, "cooldown_s", DEFAULT_COOLDOWN_S))
        if cooldown_s < 0.0:
            raise ValueError("cooldown_s must be >= 0")
        self._tournament = tournament
        self._kind = kind
        self._event_index = event_index_of(kind)
        self._clock = clock
        self._seeds = SeededRng(seed)
        self._cooldown_s = float(cooldown_s)
        self._config = config

        self._session: EventEngine | None = None
        self._fired_at_s: float | None = None
        self._practice = False

    @classmethod
    def practice(
        cls,
        *,
        kind: EventKind,
        clock: Clock,
        seed: int | None = None,
        config: object | None = None,
    ) -> "SessionDriver":
        """Single-seat driver on a throwaway tournament.

        Results land in the private one-seat ledger only, so a practice run
        never shows up in the real standings.
        """

        scratch = Tournament.new([PRACTICE_NAME], config=TournamentConfig(max_players=1, max_attempts=1))
        driver = cls(tournament=scratch, kind=kind, clock=clock, seed=seed, config=config)
        driver._practice = True
        return driver

    @property
    def is_practice(self) -> bool:
        return self._practice

    @property
    def session(self) -> EventEngine | None:
        return self._session

    @property
    def event_index(self) -> int:
        return self._event_index

    @property
    def tournament(self) -> Tournament:
        return self._tournament

    def event_status(self) -> EventStatus:
        return self._tournament.ledger.event_status(self._event_index, implemented=is_implemented(self._kind))

    def begin_next(self) -> bool:
        """Start a session for the next player due at this event.

        Returns False once every player has used up their attempts.
        """

        player = self._tournament.ledger.next_player(self._event_index)
        if player is None:
            self._session = None
            return False

        session = build_event_session(
            self._kind,
            seed=self._seeds.randint(1, 2**31 - 1),
            ledger=self._tournament.ledger,
            player_index=player,
            config=self._config,
        )
        session.start()
        self._session = session
        self._fired_at_s = None
        logger.info(
            "%s: %s is up (attempt %d)",
            self._kind.value,
            self._tournament.roster.name_of(player),
            self._tournament.ledger.attempts_of(player, self._event_index) + 1,
        )
        return True

    def on_sample(self, sample: AngularSample) -> bool:
        if self._session is None:
            return False
        return self._session.observe_sample(sample)

    def fire(self) -> bool:
        if self._session is None:
            return False
        accepted = self._session.fire()
        if accepted:
            self._fired_at_s = self._clock.now()
        return accepted

    def cooldown_remaining_s(self) -> float | None:
        if self._session is None or self._fired_at_s is None:
            return None
        if self._session.snapshot().phase is not Phase.COOLDOWN:
            return None
        return max(0.0, self._cooldown_s - (self._clock.now() - self._fired_at_s))

    def tick(self) -> bool:
        """Advance out of the cooldown once it has elapsed. True on a transition."""

        remaining = self.cooldown_remaining_s()
        if remaining is None or remaining > 0.0:
            return False
        assert self._session is not None
        self._fired_at_s = None
        return self._session.advance()

    def restart(self) -> None:
        """Throw away the attempt in progress; it is not recorded."""
        if self._session is None or self._session.is_complete():
            return
        self._session.reset()
        self._fired_at_s = None
