import random

import pytest

from boxing_sim.utils import (
    SequenceRandom,
    clamp_float,
    clamp_int,
    clamp_probability,
    random_int,
    select_from,
    weighted_select,
)


def test_clamp_helpers() -> None:
    assert clamp_int(140, 0, 100) == 100
    assert clamp_int(-3, 0, 100) == 0
    assert clamp_float(0.42, 0.1, 0.95) == 0.42
    assert clamp_float(2.0, 0.1, 0.95) == 0.95
    assert clamp_probability("0.3", 0.5) == pytest.approx(0.3)
    assert clamp_probability("nope", 1.7) == 1.0
    assert clamp_probability(-0.4, 0.5) == 0.0


def test_weighted_select_matches_weight_shares() -> None:
    rng = random.Random(42)
    weights = {"offensive": 1.0, "defensive": 2.0, "moving": 7.0}
    counts = {key: 0 for key in weights}
    draws = 100_000

    for _ in range(draws):
        counts[weighted_select(weights, rng)] += 1

    assert counts["offensive"] / draws == pytest.approx(0.1, abs=0.01)
    assert counts["defensive"] / draws == pytest.approx(0.2, abs=0.01)
    assert counts["moving"] / draws == pytest.approx(0.7, abs=0.01)


def test_weighted_select_skips_non_positive_weights() -> None:
    rng = random.Random(3)
    weights = {"never": 0.0, "negative": -4.0, "always": 0.5}

    picks = {weighted_select(weights, rng) for _ in range(1_000)}

    assert picks == {"always"}


def test_weighted_select_falls_back_to_first_key_when_all_weights_vanish() -> None:
    assert weighted_select({"first": 0.0, "second": -1.0}, random.Random(1)) == "first"


def test_weighted_select_rejects_empty_weights() -> None:
    with pytest.raises(ValueError):
        weighted_select({}, random.Random(1))


def test_weighted_select_uses_one_draw_per_pick() -> None:
    rng = SequenceRandom([0.05, 0.95])

    assert weighted_select({"a": 1.0, "b": 1.0}, rng) == "a"
    assert weighted_select({"a": 1.0, "b": 1.0}, rng) == "b"
    assert rng.draws_used == 2


def test_select_from_and_random_int_stay_in_bounds() -> None:
    rng = SequenceRandom([0.0, 0.999999])
    options = ("slip", "roll", "pull_back")

    assert select_from(options, rng) == "slip"
    assert select_from(options, rng) == "pull_back"
    assert random_int(2, 4, SequenceRandom([0.999999])) == 4
    assert random_int(5, 5, SequenceRandom([0.5])) == 5


def test_sequence_random_wraps_and_validates_draws() -> None:
    rng = SequenceRandom([0.1, 0.2])

    assert [rng.random() for _ in range(5)] == [0.1, 0.2, 0.1, 0.2, 0.1]
    with pytest.raises(ValueError):
        SequenceRandom([])
    with pytest.raises(ValueError):
        SequenceRandom([0.5, 1.0])
