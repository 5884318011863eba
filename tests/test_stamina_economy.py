import random

import pytest

from boxing_sim.models import (
    Action,
    ActionType,
    BlockType,
    FightContext,
    FighterState,
    HitLocation,
    MoveDirection,
    PunchType,
)
from boxing_sim.modules import stamina_economy
from boxing_sim.modules.attribute_engine import build_fighter, set_hurt
from boxing_sim.modules.stamina_economy import FatigueTier
from boxing_sim.parameter_defaults import DEFAULT_PARAMETERS
from boxing_sim.rules_registry import ParameterStore
from boxing_sim.utils import SequenceRandom

PARAMS = ParameterStore(DEFAULT_PARAMETERS)


def _fighter(*, stamina_percent: float = 1.0, **groups):
    payload = {"name": "Engine Room"}
    payload.update(groups)
    fighter = build_fighter(payload, fighter_id="A")
    fighter.combat.stamina = fighter.combat.max_stamina * stamina_percent
    return fighter


def test_spend_and_restore_respect_pool_bounds() -> None:
    fighter = _fighter(stamina_percent=0.1)
    maximum = fighter.combat.max_stamina

    spent = stamina_economy.spend(fighter, maximum)
    assert fighter.combat.stamina == 0.0
    assert spent == pytest.approx(maximum * 0.1)

    restored = stamina_economy.restore(fighter, maximum * 5)
    assert fighter.combat.stamina == maximum
    assert restored == pytest.approx(maximum)


def test_stamina_stays_in_bounds_under_repeated_costly_ticks() -> None:
    fighter = _fighter(stamina={"cardio": 20, "work_rate": 10, "pace_control": 10, "recovery_rate": 20})
    combination = Action.combo([PunchType.REAR_HOOK, PunchType.CROSS, PunchType.REAR_UPPERCUT, PunchType.BODY_HOOK_REAR])
    fighter.transition_to(FighterState.OFFENSIVE)
    set_hurt(fighter, 1_000.0)

    for _ in range(2_000):
        stamina_economy.update(fighter, combination, 0.5, PARAMS)
        assert 0.0 <= fighter.combat.stamina <= fighter.combat.max_stamina

    assert fighter.combat.stamina == 0.0


def test_resting_never_overfills_the_pool() -> None:
    fighter = _fighter(stamina_percent=0.9, stamina={"cardio": 100, "recovery_rate": 100, "pace_control": 100})
    fighter.transition_to(FighterState.NEUTRAL)

    for _ in range(2_000):
        stamina_economy.update(fighter, Action.wait(), 0.5, PARAMS)
        assert 0.0 <= fighter.combat.stamina <= fighter.combat.max_stamina


def test_punch_cost_adds_combination_surcharge() -> None:
    single = stamina_economy.punch_cost(Action.punch(PunchType.CROSS), PARAMS)
    combo = stamina_economy.punch_cost(Action.combo([PunchType.JAB, PunchType.CROSS]), PARAMS)

    assert single == pytest.approx(0.8)
    assert combo == pytest.approx(0.35 + 0.8 + 0.15)


def test_action_costs_by_type() -> None:
    assert stamina_economy.action_cost(Action.wait(), PARAMS) == 0.0
    assert stamina_economy.action_cost(Action.block(BlockType.HIGH_GUARD), PARAMS) == pytest.approx(0.05)
    assert stamina_economy.action_cost(Action.clinch(), PARAMS) == pytest.approx(0.5)
    forward = stamina_economy.action_cost(Action.move(MoveDirection.FORWARD), PARAMS)
    cutting = stamina_economy.action_cost(Action.move(MoveDirection.FORWARD, cutting=True), PARAMS)
    assert forward > 0
    assert cutting > 0


def test_better_conditioning_makes_output_cheaper() -> None:
    engine = _fighter(stamina={"cardio": 95, "work_rate": 95, "pace_control": 95})
    sloth = _fighter(stamina={"cardio": 30, "work_rate": 30, "pace_control": 30})

    assert stamina_economy.cost_modifier(engine, PARAMS) < stamina_economy.cost_modifier(sloth, PARAMS)


def test_heavier_divisions_burn_more_per_tick() -> None:
    heavy = _fighter(physical={"weight": 105.0})
    middle = _fighter(physical={"weight": 75.0})
    # Same pool so only the division multiplier differs.
    heavy.combat.max_stamina = middle.combat.max_stamina
    heavy.combat.stamina = middle.combat.stamina

    action = Action.punch(PunchType.CROSS)
    assert stamina_economy.tick_cost(heavy, action, 0.5, PARAMS) > stamina_economy.tick_cost(middle, action, 0.5, PARAMS)


def test_tick_cost_never_drops_below_minimum_drain() -> None:
    fighter = _fighter(stamina={"cardio": 100, "work_rate": 100, "pace_control": 100})

    assert stamina_economy.tick_cost(fighter, Action.wait(), 0.5, PARAMS) >= 0.08 * 0.5


def test_body_hits_drain_more_than_head_hits() -> None:
    head = stamina_economy.hit_stamina_cost(10, HitLocation.HEAD, PARAMS)
    body = stamina_economy.hit_stamina_cost(10, HitLocation.BODY, PARAMS)

    assert head == pytest.approx(0.5)
    assert body == pytest.approx(0.75)


def test_body_hook_can_spike_the_drain() -> None:
    normal = stamina_economy.body_damage_drain(6, PunchType.BODY_HOOK_LEAD, SequenceRandom([0.9]), PARAMS)
    spiked = stamina_economy.body_damage_drain(6, PunchType.BODY_HOOK_LEAD, SequenceRandom([0.01]), PARAMS)

    assert spiked > normal


def test_non_punch_actions_are_never_gated() -> None:
    fighter = _fighter(stamina_percent=0.0)

    for action in (Action.wait(), Action.clinch(), Action.block(), Action.move(MoveDirection.BACKWARD)):
        check = stamina_economy.can_perform_action(fighter, action, PARAMS)
        assert check.can_perform
        assert check.cost == 0.0


def test_unaffordable_punch_reports_deficit() -> None:
    fighter = _fighter(stamina_percent=0.0)

    check = stamina_economy.can_perform_action(fighter, Action.punch(PunchType.REAR_HOOK), PARAMS)

    assert not check.can_perform
    assert check.reason == "insufficient_stamina"
    assert check.deficit == pytest.approx(check.cost)
    assert check.cost > 0


def test_fresh_fighter_can_afford_a_long_combination() -> None:
    fighter = _fighter()
    combo = Action.combo([PunchType.JAB, PunchType.CROSS, PunchType.LEAD_HOOK, PunchType.REAR_HOOK, PunchType.CROSS])

    assert stamina_economy.can_perform_action(fighter, combo, PARAMS).can_perform


@pytest.mark.parametrize(
    ("stamina_percent", "distance", "expected"),
    [
        (0.02, 2.0, ActionType.CLINCH),
        (0.02, 0.0, ActionType.CLINCH),
        (0.02, 5.0, ActionType.BLOCK),
        (0.08, 2.0, ActionType.BLOCK),
        (0.5, 2.0, ActionType.WAIT),
    ],
)
def test_gated_alternative_depends_on_how_tired_and_how_close(
    stamina_percent: float, distance: float, expected: ActionType
) -> None:
    fighter = _fighter(stamina_percent=stamina_percent)

    replacement = stamina_economy.get_stamina_gated_alternative(
        fighter, Action.punch(PunchType.CROSS), {"distance": distance}, PARAMS
    )

    assert replacement.type is expected
    if expected is ActionType.BLOCK:
        assert replacement.block_type is BlockType.HIGH_GUARD


def test_gated_alternative_without_distance_assumes_long_range() -> None:
    fighter = _fighter(stamina_percent=0.02)

    replacement = stamina_economy.get_stamina_gated_alternative(fighter, Action.punch(PunchType.CROSS), {}, PARAMS)

    assert replacement.type is ActionType.BLOCK


def test_hurt_fighters_do_not_recover() -> None:
    fighter = _fighter(stamina_percent=0.3)
    assert stamina_economy.passive_recovery(fighter, 0.5, PARAMS) > 0

    set_hurt(fighter, 3.0)

    assert stamina_economy.passive_recovery(fighter, 0.5, PARAMS) == 0.0


def test_recovery_slows_near_full_tank() -> None:
    assert stamina_economy.recovery_ceiling(0.3) == 1.0
    assert stamina_economy.recovery_ceiling(0.8) < stamina_economy.recovery_ceiling(0.6)
    assert stamina_economy.recovery_ceiling(1.0) == pytest.approx(0.0)


def test_older_fighters_recover_slower() -> None:
    assert stamina_economy.age_recovery_modifier(24, PARAMS) == 1.0
    assert stamina_economy.age_recovery_modifier(37, PARAMS) < stamina_economy.age_recovery_modifier(31, PARAMS)
    assert stamina_economy.age_recovery_modifier(44, PARAMS) == pytest.approx(0.6)


def test_between_rounds_recovery_is_capped() -> None:
    fighter = _fighter(stamina_percent=0.0, stamina={"cardio": 100, "recovery_rate": 100})

    restored = stamina_economy.between_rounds_recovery(fighter, corner_bonus=100, params=PARAMS)

    assert restored == pytest.approx(fighter.combat.max_stamina * 0.6)


def test_second_wind_only_late_and_once() -> None:
    fighter = _fighter(stamina_percent=0.3, stamina={"second_wind": 90})
    early = FightContext(round_number=8)
    late = FightContext(round_number=10)

    assert not stamina_economy.check_second_wind(fighter, early, SequenceRandom([0.0]), PARAMS)
    assert stamina_economy.check_second_wind(fighter, late, SequenceRandom([0.0]), PARAMS)
    assert fighter.stamina_percent() == pytest.approx(0.55)

    fighter.combat.stamina = fighter.combat.max_stamina * 0.3
    assert not stamina_economy.check_second_wind(fighter, late, SequenceRandom([0.0]), PARAMS)


def test_second_wind_needs_a_tired_fighter() -> None:
    fighter = _fighter(stamina_percent=0.7, stamina={"second_wind": 100})

    assert not stamina_economy.check_second_wind(fighter, FightContext(round_number=11), random.Random(1), PARAMS)


@pytest.mark.parametrize(
    ("stamina_percent", "tier"),
    [
        (0.95, FatigueTier.FRESH),
        (0.7, FatigueTier.GOOD),
        (0.5, FatigueTier.TIRED),
        (0.3, FatigueTier.EXHAUSTED),
        (0.1, FatigueTier.GASSED),
    ],
)
def test_fatigue_tiers(stamina_percent: float, tier: FatigueTier) -> None:
    assert stamina_economy.fatigue_tier(_fighter(stamina_percent=stamina_percent), PARAMS) is tier


def test_heart_softens_fatigue_penalties() -> None:
    assert stamina_economy.fatigue_penalties(FatigueTier.FRESH, params=PARAMS) == {}

    average = stamina_economy.fatigue_penalties(FatigueTier.GASSED, heart=70, params=PARAMS)
    brave = stamina_economy.fatigue_penalties(FatigueTier.GASSED, heart=95, params=PARAMS)

    assert average["power"] == -30
    assert brave["power"] > average["power"]


def test_empty_tank_weakens_the_chin() -> None:
    empty = stamina_economy.zero_stamina_vulnerability(_fighter(stamina_percent=0.0), PARAMS)
    fine = stamina_economy.zero_stamina_vulnerability(_fighter(stamina_percent=0.5), PARAMS)

    assert empty.chin_penalty == -30
    assert empty.ko_multiplier == pytest.approx(2.0)
    assert fine.chin_penalty == 0
    assert fine.ko_multiplier == 1.0
