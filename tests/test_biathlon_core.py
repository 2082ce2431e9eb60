from __future__ import annotations

import pytest

from winter_games.biathlon import BiathlonConfig, BiathlonSession, build_biathlon_session
from winter_games.game_core import AngularSample, Phase
from winter_games.scoring import hit_distance, score_shot
from winter_games.tournament import TournamentLedger

SHAKE = AngularSample(0.0, 0.0, 2.0)  # magnitude 2.0: zeroes stability over a full window


def _shake(session: BiathlonSession) -> None:
    for _ in range(session.config.stability_window):
        session.observe_sample(SHAKE)


def _fire_and_advance_all(session: BiathlonSession) -> None:
    for _ in range(session.target_count):
        assert session.fire() is True
        assert session.advance() is True


def test_new_session_is_idle_and_inert() -> None:
    s = build_biathlon_session(seed=1)
    assert s.phase is Phase.IDLE
    assert s.current_target() is None
    assert s.fire() is False
    assert s.advance() is False
    assert s.observe_sample(AngularSample(1.0, 1.0)) is False
    assert s.score() == 0
    assert s.targets_remaining() == 5


def test_start_enters_aiming_with_five_targets() -> None:
    s = build_biathlon_session(seed=11)
    s.start()
    assert s.phase is Phase.AIMING
    assert s.is_aiming() is True
    assert s.target_index == 0
    assert len(s.targets()) == 5
    assert s.current_target() == s.targets()[0]
    aim = s.aim_position()
    assert 0.3 <= aim.x <= 0.7
    assert 0.3 <= aim.y <= 0.7


def test_same_seed_same_targets() -> None:
    a = build_biathlon_session(seed=404)
    b = build_biathlon_session(seed=404)
    a.start()
    b.start()
    assert a.targets() == b.targets()
    assert a.aim_position() == b.aim_position()


def test_fire_is_noop_when_unstable() -> None:
    s = build_biathlon_session(seed=3)
    s.start()
    _shake(s)
    assert s.stability() == 0.0
    assert s.is_stable() is False

    assert s.fire() is False
    assert s.phase is Phase.AIMING
    assert s.score() == 0
    assert s.target_index == 0
    assert s.shots() == []


def test_fire_blocked_when_stability_at_or_below_threshold() -> None:
    s = build_biathlon_session(seed=3)
    s.start()
    # One 2.0 sample in a ten-slot window: mean 0.2 -> stability 0.6.
    s.observe_sample(AngularSample(0.0, 0.0, 2.0))
    assert s.stability() == pytest.approx(0.6)
    assert s.fire() is False


def test_fire_scores_current_aim_against_current_target() -> None:
    s = build_biathlon_session(seed=77)
    s.start()
    target = s.current_target()
    aim = s.aim_position()
    assert target is not None

    assert s.fire() is True
    expected = score_shot(hit_distance(aim, target), target.radius, 1.0)
    assert s.score() == expected
    assert s.phase is Phase.COOLDOWN
    assert s.target_index == 1
    assert s.targets_remaining() == 4

    shot = s.shots()[0]
    assert shot.target == target
    assert shot.aim == aim
    assert shot.points == expected
    assert shot.stability == 1.0


def test_cooldown_rejects_fire_and_samples_until_advance() -> None:
    s = build_biathlon_session(seed=8)
    s.start()
    assert s.fire() is True
    shot_target = s.targets()[0]

    assert s.current_target() == shot_target
    assert s.fire() is False
    assert s.observe_sample(AngularSample(1.0, 0.0)) is False
    assert s.target_index == 1

    aim_before = s.aim_position()
    assert s.advance() is True
    assert s.phase is Phase.AIMING
    assert s.current_target() == s.targets()[1]
    assert s.aim_position() != aim_before


def test_full_pass_reaches_complete() -> None:
    s = build_biathlon_session(seed=12)
    s.start()
    _fire_and_advance_all(s)

    assert s.phase is Phase.COMPLETE
    assert s.is_complete() is True
    assert s.current_target() is None
    assert s.targets_remaining() == 0
    assert s.target_index == s.target_count
    assert s.score() == sum(shot.points for shot in s.shots())

    # Terminal: nothing moves it except reset().
    assert s.fire() is False
    assert s.advance() is False
    s.reset()
    assert s.phase is Phase.AIMING
    assert s.score() == 0
    assert s.shots() == []


def test_reset_mid_run_discards_progress() -> None:
    s = build_biathlon_session(seed=5)
    s.start()
    assert s.fire() is True
    s.reset()
    assert s.phase is Phase.AIMING
    assert s.target_index == 0
    assert s.score() == 0
    assert s.stability() == 1.0


def test_stability_window_carries_over_between_targets() -> None:
    s = build_biathlon_session(seed=5)
    s.start()
    assert s.fire() is True
    assert s.advance() is True
    _shake(s)
    assert s.fire() is False
    assert s.stability() == 0.0


def test_completion_records_into_ledger_once() -> None:
    ledger = TournamentLedger()
    s = build_biathlon_session(seed=21, ledger=ledger, player_index=2, event_index=0)
    s.start()
    _fire_and_advance_all(s)

    assert ledger.score_of(2, 0) == s.score()
    assert ledger.attempts_of(2, 0) == 1
    assert s.advance() is False
    assert ledger.attempts_of(2, 0) == 1

    s.reset()
    _fire_and_advance_all(s)
    assert ledger.attempts_of(2, 0) == 2


def test_incomplete_session_records_nothing() -> None:
    ledger = TournamentLedger()
    s = build_biathlon_session(seed=21, ledger=ledger, player_index=1)
    s.start()
    assert s.fire() is True
    assert s.advance() is True
    assert ledger.has_result(1, 0) is False


def test_snapshot_reflects_state() -> None:
    s = build_biathlon_session(seed=9)
    idle = s.snapshot()
    assert idle.phase is Phase.IDLE
    assert idle.aim is None
    assert idle.target is None

    s.start()
    snap = s.snapshot()
    assert snap.title == "Biathlon"
    assert snap.phase is Phase.AIMING
    assert snap.target == s.current_target()
    assert snap.aim == s.aim_position()
    assert snap.is_stable is True
    assert snap.target_count == 5

    s.fire()
    snap = s.snapshot()
    assert snap.last_shot is not None
    assert snap.score == snap.last_shot.points


def test_custom_target_count() -> None:
    s = build_biathlon_session(seed=2, config=BiathlonConfig(target_count=2))
    s.start()
    _fire_and_advance_all(s)
    assert s.is_complete() is True
    assert len(s.shots()) == 2


def test_invalid_configuration_raises() -> None:
    with pytest.raises(ValueError):
        BiathlonSession(seed=1, config=BiathlonConfig(target_count=0))
    with pytest.raises(ValueError):
        BiathlonSession(seed=1, config=BiathlonConfig(stability_threshold=1.0))
    with pytest.raises(ValueError):
        BiathlonSession(seed=1, config=BiathlonConfig(cooldown_s=-1.0))
    with pytest.raises(ValueError):
        BiathlonSession(seed=1, ledger=TournamentLedger(player_count=2), player_index=3)
