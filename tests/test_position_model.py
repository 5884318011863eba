import random

import pytest

from boxing_sim.models import Action, MoveDirection, MovementSubState, Position
from boxing_sim.modules.attribute_engine import build_fighter
from boxing_sim.modules.position_model import (
    DistanceZone,
    apply_movement,
    apply_state_movement,
    center_control,
    distance,
    distance_zone,
    is_in_center,
    is_in_corner,
    is_on_ropes,
    movement_speed,
    prevent_overlap,
    reset_positions,
    ring_control,
    separate,
)
from boxing_sim.parameter_defaults import DEFAULT_PARAMETERS
from boxing_sim.rules_registry import ParameterStore

PARAMS = ParameterStore(DEFAULT_PARAMETERS)


def _pair():
    fighter_a = build_fighter({"name": "Red"}, fighter_id="A")
    fighter_b = build_fighter({"name": "Blue"}, fighter_id="B")
    return fighter_a, fighter_b


def _place(fighter, x: float, y: float) -> None:
    fighter.combat.position = Position(x, y)


def test_fighters_start_eight_feet_apart() -> None:
    fighter_a, fighter_b = _pair()

    assert distance(fighter_a, fighter_b) == pytest.approx(8.0)
    assert distance_zone(fighter_a, fighter_b, PARAMS) is DistanceZone.OUT_OF_RANGE


@pytest.mark.parametrize(
    ("gap", "zone"),
    [
        (1.0, DistanceZone.CLINCH),
        (2.0, DistanceZone.INSIDE),
        (3.0, DistanceZone.CLOSE),
        (4.0, DistanceZone.MEDIUM),
        (6.0, DistanceZone.LONG),
        (7.0, DistanceZone.OUT_OF_RANGE),
    ],
)
def test_distance_zones(gap: float, zone: DistanceZone) -> None:
    fighter_a, fighter_b = _pair()
    _place(fighter_a, 0.0, 0.0)
    _place(fighter_b, gap, 0.0)

    assert distance_zone(fighter_a, fighter_b, PARAMS) is zone


def test_ring_location_queries() -> None:
    fighter_a, _ = _pair()

    _place(fighter_a, 8.5, 8.5)
    assert is_in_corner(fighter_a, PARAMS)
    assert is_on_ropes(fighter_a, PARAMS)

    _place(fighter_a, 8.5, 0.0)
    assert not is_in_corner(fighter_a, PARAMS)
    assert is_on_ropes(fighter_a, PARAMS)

    _place(fighter_a, 1.0, -2.0)
    assert is_in_center(fighter_a, PARAMS)
    assert not is_on_ropes(fighter_a, PARAMS)


def test_center_and_ring_control() -> None:
    fighter_a, fighter_b = _pair()
    _place(fighter_a, 0.5, 0.0)
    _place(fighter_b, 7.0, 0.0)

    assert center_control(fighter_a, fighter_b) == "A"
    control = ring_control(fighter_a, fighter_b)
    assert control["A"] > control["B"]
    assert control["A"] + control["B"] == pytest.approx(100, abs=1)

    reset_positions(fighter_a, fighter_b)
    assert center_control(fighter_a, fighter_b) is None


def test_moving_forward_closes_distance() -> None:
    fighter_a, fighter_b = _pair()
    before = distance(fighter_a, fighter_b)

    apply_movement(fighter_a, fighter_b, Action.move(MoveDirection.FORWARD), 0.5, params=PARAMS)

    assert distance(fighter_a, fighter_b) < before


def test_speed_status_modifier_changes_step() -> None:
    fighter_a, _ = _pair()
    base = movement_speed(fighter_a, MoveDirection.FORWARD, params=PARAMS)
    slowed = movement_speed(fighter_a, MoveDirection.FORWARD, speed_modifier=-0.5, params=PARAMS)

    assert slowed == pytest.approx(base * 0.5)


def test_retreating_never_leaves_the_ring() -> None:
    fighter_a, fighter_b = _pair()
    rng = random.Random(5)
    actions = [
        Action.move(MoveDirection.BACKWARD),
        Action.move(MoveDirection.LEFT, lateral=True),
        Action.move(MoveDirection.RIGHT, lateral=True),
    ]

    for tick in range(400):
        apply_movement(fighter_a, fighter_b, actions[tick % 3], 0.5, speed_modifier=1.0, rng=rng, params=PARAMS)
        apply_movement(fighter_b, fighter_a, Action.move(MoveDirection.FORWARD, cutting=True), 0.5, params=PARAMS)
        prevent_overlap(fighter_a, fighter_b, PARAMS)
        for fighter in (fighter_a, fighter_b):
            assert abs(fighter.combat.position.x) <= 9.5 + 1e-9
            assert abs(fighter.combat.position.y) <= 9.5 + 1e-9


def test_state_movement_keeps_fighters_in_the_ring() -> None:
    fighter_a, fighter_b = _pair()
    rng = random.Random(11)

    for _ in range(300):
        apply_state_movement(fighter_a, fighter_b, MovementSubState.RETREATING, 0.5, rng=rng, params=PARAMS)
        apply_state_movement(fighter_b, fighter_a, MovementSubState.CUTTING_OFF, 0.5, rng=rng, params=PARAMS)

    assert abs(fighter_a.combat.position.x) <= 9.5
    assert abs(fighter_a.combat.position.y) <= 9.5


def test_prevent_overlap_restores_minimum_separation() -> None:
    fighter_a, fighter_b = _pair()
    _place(fighter_a, 0.0, 0.0)
    _place(fighter_b, 0.4, 0.0)

    prevent_overlap(fighter_a, fighter_b, PARAMS)

    assert distance(fighter_a, fighter_b) == pytest.approx(1.0)
    assert fighter_a.combat.position.x == pytest.approx(-0.3)
    assert fighter_b.combat.position.x == pytest.approx(0.7)


def test_separate_sets_requested_gap_on_the_same_line() -> None:
    fighter_a, fighter_b = _pair()
    _place(fighter_a, 1.0, 1.0)
    _place(fighter_b, 1.5, 1.0)

    separate(fighter_a, fighter_b, params=PARAMS)

    assert distance(fighter_a, fighter_b) == pytest.approx(3.0)
    assert fighter_a.combat.position.y == pytest.approx(1.0)
    assert fighter_a.combat.position.x < fighter_b.combat.position.x


def test_reset_positions_returns_to_opening_marks() -> None:
    fighter_a, fighter_b = _pair()
    _place(fighter_a, 3.0, 3.0)
    _place(fighter_b, -6.0, 2.0)

    reset_positions(fighter_a, fighter_b)

    assert (fighter_a.combat.position.x, fighter_a.combat.position.y) == (-4.0, 0.0)
    assert (fighter_b.combat.position.x, fighter_b.combat.position.y) == (4.0, 0.0)
