from __future__ import annotations

from dataclasses import dataclass

from .tournament import Roster, TournamentLedger

MIN_SCORERS_FOR_MEDALS = 2


@dataclass(frozen=True, slots=True)
class MedalCount:
    gold: int = 0
    silver: int = 0
    bronze: int = 0

    @property
    def total(self) -> int:
        return self.gold + self.silver + self.bronze


@dataclass(frozen=True, slots=True)
class PlayerRanking:
    player_index: int
    name: str
    country: str
    total_score: int
    gold: int
    silver: int
    bronze: int
    events_completed: int


@dataclass(frozen=True, slots=True)
class EventResult:
    player_index: int
    name: str
    country: str
    score: int
    attempts: int


def podium(ledger: TournamentLedger, event: int, player_count: int) -> list[int]:
    """Player indices awarded gold/silver/bronze in ``event`` (up to three).

    Only non-zero scores compete, and an event needs at least two of them
    before any medal is handed out. Equal scores keep player-index order.
    """

    scorers = [p for p in range(player_count) if ledger.score_of(p, event) > 0]
    if len(scorers) < MIN_SCORERS_FOR_MEDALS:
        return []
    scorers.sort(key=lambda p: ledger.score_of(p, event), reverse=True)
    return scorers[:3]


def medals_for(ledger: TournamentLedger, player: int, player_count: int, event_count: int) -> MedalCount:
    counts = [0, 0, 0]
    for event in range(event_count):
        placed = podium(ledger, event, player_count)
        if player in placed:
            counts[placed.index(player)] += 1
    return MedalCount(gold=counts[0], silver=counts[1], bronze=counts[2])


def events_completed(ledger: TournamentLedger, player: int, event_count: int) -> int:
    return sum(1 for e in range(event_count) if ledger.score_of(player, e) > 0)


def standings(
    ledger: TournamentLedger,
    player_count: int,
    event_count: int,
    roster: Roster | None = None,
) -> list[PlayerRanking]:
    """Players by total score, highest first; ties keep player-index order."""

    roster = roster or Roster()
    rankings: list[PlayerRanking] = []
    for player in range(player_count):
        medals = medals_for(ledger, player, player_count, event_count)
        rankings.append(
            PlayerRanking(
                player_index=player,
                name=roster.name_of(player),
                country=roster.country_of(player),
                total_score=sum(ledger.score_of(player, e) for e in range(event_count)),
                gold=medals.gold,
                silver=medals.silver,
                bronze=medals.bronze,
                events_completed=events_completed(ledger, player, event_count),
            )
        )
    # list.sort is stable, so reverse=True keeps index order among equal totals.
    rankings.sort(key=lambda r: r.total_score, reverse=True)
    return rankings


def event_results(
    ledger: TournamentLedger,
    event: int,
    player_count: int,
    roster: Roster | None = None,
) -> list[EventResult]:
    """Everyone who has attempted ``event``, best score first."""

    roster = roster or Roster()
    results = [
        EventResult(
            player_index=p,
            name=roster.name_of(p),
            country=roster.country_of(p),
            score=ledger.score_of(p, event),
            attempts=ledger.attempts_of(p, event),
        )
        for p in range(player_count)
        if ledger.has_result(p, event)
    ]
    results.sort(key=lambda r: r.score, reverse=True)
    return results
