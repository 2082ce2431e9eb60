"""Tournament state: roster plus the per-(player, event) score ledger.

The whole thing round-trips through ``Tournament.to_dict``/``from_dict`` (or the
JSON ``dumps``/``loads`` helpers) so screens can hand it to each other as an
opaque blob.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

logger = logging.getLogger(__name__)

MAX_PLAYERS = 4
EVENT_COUNT = 10
MAX_ATTEMPTS = 2

AI_COUNTRY = "AI"


class RecordPolicy(StrEnum):
    OVERWRITE = "overwrite"  # last write wins
    KEEP_BEST = "keep_best"
    KEEP_FIRST = "keep_first"


class EventStatus(StrEnum):
    LOCKED = "locked"
    AVAILABLE = "available"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


@dataclass(frozen=True, slots=True)
class TournamentConfig:
    max_players: int = MAX_PLAYERS
    event_count: int = EVENT_COUNT
    max_attempts: int = MAX_ATTEMPTS
    policy: RecordPolicy = RecordPolicy.OVERWRITE


@dataclass(slots=True)
class LedgerCell:
    score: int = 0
    attempts: int = 0


class TournamentLedger:
    """Scores and attempt counts keyed by (player_index, event_index).

    Writes are bounds-checked; reads outside the table simply return 0.
    """

    def __init__(
        self,
        *,
        player_count: int = MAX_PLAYERS,
        event_count: int = EVENT_COUNT,
        max_attempts: int = MAX_ATTEMPTS,
        policy: RecordPolicy = RecordPolicy.OVERWRITE,
    ) -> None:
        if player_count <= 0:
            raise ValueError("player_count must be > 0")
        if event_count <= 0:
            raise ValueError("event_count must be > 0")
        if max_attempts <= 0:
            raise ValueError("max_attempts must be > 0")
        self._player_count = int(player_count)
        self._event_count = int(event_count)
        self._max_attempts = int(max_attempts)
        self._policy = RecordPolicy(policy)
        self._cells: dict[tuple[int, int], LedgerCell] = {}

    @property
    def player_count(self) -> int:
        return self._player_count

    @property
    def event_count(self) -> int:
        return self._event_count

    @property
    def max_attempts(self) -> int:
        return self._max_attempts

    @property
    def policy(self) -> RecordPolicy:
        return self._policy

    def in_bounds(self, player: int, event: int) -> bool:
        return 0 <= player < self._player_count and 0 <= event < self._event_count

    def record_result(self, player: int, event: int, score: int) -> None:
        if not self.in_bounds(player, event):
            raise ValueError(
                f"cell ({player}, {event}) outside {self._player_count} players x {self._event_count} events"
            )
        if score < 0:
            raise ValueError("score must be >= 0")

        key = (int(player), int(event))
        cell = self._cells.get(key)
        if cell is None:
            cell = LedgerCell(score=int(score), attempts=1)
            self._cells[key] = cell
        else:
            if self._policy is RecordPolicy.OVERWRITE:
                cell.score = int(score)
            elif self._policy is RecordPolicy.KEEP_BEST:
                cell.score = max(cell.score, int(score))
            cell.attempts += 1

        logger.info(
            "Recorded player=%d event=%d score=%d (kept=%d, attempts=%d)",
            player,
            event,
            score,
            cell.score,
            cell.attempts,
        )

    def score_of(self, player: int, event: int) -> int:
        cell = self._cells.get((player, event))
        return 0 if cell is None else cell.score

    def attempts_of(self, player: int, event: int) -> int:
        cell = self._cells.get((player, event))
        return 0 if cell is None else cell.attempts

    def has_result(self, player: int, event: int) -> bool:
        return (player, event) in self._cells

    def total_score(self, player: int) -> int:
        return sum(self.score_of(player, e) for e in range(self._event_count))

    def can_attempt(self, player: int, event: int) -> bool:
        return self.in_bounds(player, event) and self.attempts_of(player, event) < self._max_attempts

    def next_player(self, event: int) -> int | None:
        """First player still allowed an attempt at ``event``; None when everyone is done."""
        for player in range(self._player_count):
            if self.can_attempt(player, event):
                return player
        return None

    def event_status(self, event: int, *, implemented: bool = True) -> EventStatus:
        attempts = [self.attempts_of(p, event) for p in range(self._player_count)]
        if all(a >= self._max_attempts for a in attempts):
            return EventStatus.COMPLETED
        if sum(attempts) > 0:
            return EventStatus.IN_PROGRESS
        if implemented:
            return EventStatus.AVAILABLE
        return EventStatus.LOCKED

    def to_dict(self) -> dict[str, Any]:
        return {
            "player_count": self._player_count,
            "event_count": self._event_count,
            "max_attempts": self._max_attempts,
            "policy": self._policy.value,
            "cells": [
                {"player": p, "event": e, "score": c.score, "attempts": c.attempts}
                for (p, e), c in sorted(self._cells.items())
            ],
        }

    @classmethod
    def from_dict(cls, data: object) -> "TournamentLedger":
        if not isinstance(data, dict):
            return cls()
        try:
            policy = RecordPolicy(str(data.get("policy", RecordPolicy.OVERWRITE.value)))
        except ValueError:
            policy = RecordPolicy.OVERWRITE
        ledger = cls(
            player_count=_as_positive_int(data.get("player_count"), MAX_PLAYERS),
            event_count=_as_positive_int(data.get("event_count"), EVENT_COUNT),
            max_attempts=_as_positive_int(data.get("max_attempts"), MAX_ATTEMPTS),
            policy=policy,
        )
        raw_cells = data.get("cells")
        if not isinstance(raw_cells, list):
            return ledger
        for item in raw_cells:
            if not isinstance(item, dict):
                continue
            try:
                player = int(item["player"])
                event = int(item["event"])
                score = int(item.get("score", 0))
                attempts = int(item.get("attempts", 1))
            except (KeyError, TypeError, ValueError):
                continue
            if not ledger.in_bounds(player, event) or score < 0 or attempts <= 0:
                continue
            ledger._cells[(player, event)] = LedgerCell(score=score, attempts=attempts)
        return ledger


@dataclass(slots=True)
class Roster:
    names: list[str] = field(default_factory=list)
    countries: list[str] = field(default_factory=list)

    @classmethod
    def padded(
        cls,
        names: list[str],
        countries: list[str] | None = None,
        *,
        size: int = MAX_PLAYERS,
    ) -> "Roster":
        """Fill empty seats up to ``size`` with AI placeholders."""

        if len(names) > size:
            raise ValueError(f"at most {size} players supported, got {len(names)}")
        out_names = [str(n).strip() for n in names]
        raw_countries = list(countries or [])
        out_countries = [
            str(raw_countries[i]).strip() if i < len(raw_countries) else "" for i in range(len(out_names))
        ]
        for i, name in enumerate(out_names):
            if name == "":
                out_names[i] = f"Player {i + 1}"
            if out_countries[i] == "":
                out_countries[i] = "?"
        while len(out_names) < size:
            out_names.append(f"AI {len(out_names) + 1}")
            out_countries.append(AI_COUNTRY)
        return cls(names=out_names, countries=out_countries)

    def __len__(self) -> int:
        return len(self.names)

    def name_of(self, index: int) -> str:
        if 0 <= index < len(self.names):
            return self.names[index]
        return f"Player {index + 1}"

    def country_of(self, index: int) -> str:
        if 0 <= index < len(self.countries):
            return self.countries[index]
        return "?"

    def is_ai(self, index: int) -> bool:
        return self.country_of(index) == AI_COUNTRY and self.name_of(index).startswith("AI ")


@dataclass(slots=True)
class Tournament:
    roster: Roster
    ledger: TournamentLedger

    @classmethod
    def new(
        cls,
        names: list[str],
        countries: list[str] | None = None,
        *,
        config: TournamentConfig | None = None,
    ) -> "Tournament":
        cfg = config or TournamentConfig()
        roster = Roster.padded(names, countries, size=cfg.max_players)
        ledger = TournamentLedger(
            player_count=len(roster),
            event_count=cfg.event_count,
            max_attempts=cfg.max_attempts,
            policy=cfg.policy,
        )
        return cls(roster=roster, ledger=ledger)

    def to_dict(self) -> dict[str, Any]:
        return {
            "player_names": list(self.roster.names),
            "player_countries": list(self.roster.countries),
            "ledger": self.ledger.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: object) -> "Tournament":
        if not isinstance(data, dict):
            return cls.new([])
        raw_names = data.get("player_names")
        raw_countries = data.get("player_countries")
        names = [str(n) for n in raw_names] if isinstance(raw_names, list) else []
        countries = [str(c) for c in raw_countries] if isinstance(raw_countries, list) else []
        ledger = TournamentLedger.from_dict(data.get("ledger"))
        # Roster entries past the ledger's seats have nowhere to score.
        names = names[: ledger.player_count]
        roster = Roster.padded(names, countries, size=ledger.player_count)
        return cls(roster=roster, ledger=ledger)


def dumps(tournament: Tournament) -> str:
    return json.dumps(tournament.to_dict(), indent=2)


def loads(text: str) -> Tournament:
    return Tournament.from_dict(json.loads(text))


def _as_positive_int(value: object, fallback: int) -> int:
    try:
        out = int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return fallback
    return out if out > 0 else fallback
