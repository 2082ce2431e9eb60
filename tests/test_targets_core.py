from __future__ import annotations

import pytest

from winter_games.game_core import SeededRng
from winter_games.targets import TargetGenerator


def test_generator_determinism_same_seed_same_sequence() -> None:
    g1 = TargetGenerator(rng=SeededRng(2468))
    g2 = TargetGenerator(rng=SeededRng(2468))
    assert g1.generate(5) == g2.generate(5)
    assert g1.generate(25) == g2.generate(25)


def test_generate_exact_count_within_ranges() -> None:
    gen = TargetGenerator(rng=SeededRng(99))
    for count in (0, 1, 5, 40):
        targets = gen.generate(count)
        assert len(targets) == count
        for t in targets:
            assert 0.2 <= t.x <= 0.8
            assert 0.2 <= t.y <= 0.8
            assert 0.05 <= t.radius <= 0.08


def test_unseeded_generator_still_respects_ranges() -> None:
    targets = TargetGenerator(rng=SeededRng(None)).generate(5)
    assert len(targets) == 5
    assert all(0.05 <= t.radius <= 0.08 for t in targets)


def test_invalid_arguments_raise() -> None:
    gen = TargetGenerator(rng=SeededRng(1))
    with pytest.raises(ValueError):
        gen.generate(-1)
    with pytest.raises(ValueError):
        TargetGenerator(rng=SeededRng(1), radius_range=(0.0, 0.1))
    with pytest.raises(ValueError):
        TargetGenerator(rng=SeededRng(1), center_range=(0.8, 0.2))
