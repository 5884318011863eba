import pytest

from boxing_sim.models import FighterConfigError, FighterState, FightingStyle, PunchType
from boxing_sim.modules.attribute_engine import (
    age_stamina_modifier,
    apply_stun,
    build_fighter,
    calculate_damage_capacity,
    calculate_optimal_range,
    can_throw_punch,
    reset_for_round,
    set_hurt,
    stun_vulnerability,
    update_stun,
)
from boxing_sim.utils import SequenceRandom


def _fighter(**groups):
    payload = {"name": "Test Fighter"}
    payload.update(groups)
    return build_fighter(payload, fighter_id="A")


def test_build_fighter_derives_pools_and_corner_position() -> None:
    fighter = _fighter()

    combat = fighter.combat
    assert combat.stamina == combat.max_stamina
    assert combat.max_stamina > 0
    assert combat.max_head_damage > 0
    assert combat.max_body_damage > 0
    assert (combat.position.x, combat.position.y) == (-4.0, 0.0)
    assert combat.state is FighterState.NEUTRAL


def test_build_fighter_requires_a_name() -> None:
    with pytest.raises(FighterConfigError):
        build_fighter({"name": "  "})


def test_build_fighter_rejects_unknown_style() -> None:
    with pytest.raises(FighterConfigError):
        build_fighter({"name": "Odd", "style": {"primary": "brawler-king"}})


def test_build_fighter_clamps_ratings() -> None:
    fighter = _fighter(power={"knockout_power": 150}, mental={"chin": -20})

    assert fighter.power.knockout_power == 100
    assert fighter.mental.chin == 0


def test_profile_dict_round_trips_through_build_fighter() -> None:
    fighter = _fighter(style={"primary": "swarmer", "offensive": "body-snatcher", "defensive": "peek-a-boo"})

    rebuilt = build_fighter(fighter.profile_dict())

    assert rebuilt.profile_dict() == fighter.profile_dict()
    assert rebuilt.style.primary is FightingStyle.SWARMER


def test_heavier_fighter_absorbs_more_and_chin_stretches_head_capacity() -> None:
    light_head, light_body = calculate_damage_capacity(55.0, 70)
    heavy_head, heavy_body = calculate_damage_capacity(100.0, 70)
    iron_head, _ = calculate_damage_capacity(100.0, 95)

    assert heavy_head > light_head
    assert heavy_body > light_body
    assert iron_head > heavy_head


def test_optimal_range_is_clamped() -> None:
    assert calculate_optimal_range(400.0, FightingStyle.OUT_BOXER) == 6.0
    assert calculate_optimal_range(60.0, FightingStyle.INSIDE_FIGHTER) == 2.5
    assert calculate_optimal_range(180.0, FightingStyle.SLUGGER) == pytest.approx(4.0)


def test_older_fighters_carry_smaller_tanks() -> None:
    assert age_stamina_modifier(24) == 1.0
    assert age_stamina_modifier(36) < age_stamina_modifier(30)
    assert age_stamina_modifier(45) == pytest.approx(0.78)


def test_heavy_stun_blocks_punching_until_it_wears_off() -> None:
    fighter = _fighter()
    apply_stun(fighter, 10, PunchType.REAR_HOOK)

    assert fighter.combat.stun_level == 2
    assert 1 <= fighter.combat.stun_duration <= 5
    assert can_throw_punch(fighter, SequenceRandom([0.0])) is False
    assert stun_vulnerability(fighter) == pytest.approx(1.3)

    for _ in range(5):
        update_stun(fighter)

    assert not fighter.combat.is_stunned
    assert can_throw_punch(fighter, SequenceRandom([0.99])) is True
    assert stun_vulnerability(fighter) == 1.0


def test_light_stun_sometimes_lets_a_punch_go() -> None:
    fighter = _fighter()
    apply_stun(fighter, 3, PunchType.JAB)

    assert fighter.combat.stun_level == 1
    assert can_throw_punch(fighter, SequenceRandom([0.2])) is True
    assert can_throw_punch(fighter, SequenceRandom([0.5])) is False
    assert stun_vulnerability(fighter) == pytest.approx(1.15)


def test_weaker_stun_does_not_replace_a_stronger_one() -> None:
    fighter = _fighter()
    apply_stun(fighter, 12, PunchType.CROSS)
    level, duration = fighter.combat.stun_level, fighter.combat.stun_duration

    apply_stun(fighter, 1, PunchType.JAB)

    assert (fighter.combat.stun_level, fighter.combat.stun_duration) == (level, duration)


def test_hurt_counts_down_in_seconds() -> None:
    fighter = _fighter()
    set_hurt(fighter, 1.0)

    update_stun(fighter, 0.5)
    assert fighter.combat.is_hurt
    update_stun(fighter, 0.5)
    assert not fighter.combat.is_hurt
    assert fighter.combat.hurt_duration == 0.0


def test_reset_for_round_clears_round_scoped_state() -> None:
    fighter = _fighter()
    fighter.transition_to(FighterState.KNOCKED_DOWN)
    fighter.combat.knockdowns_this_round = 2
    fighter.combat.knockdowns_total = 2
    set_hurt(fighter, 4.0)
    apply_stun(fighter, 8, PunchType.CROSS)

    reset_for_round(fighter)

    assert fighter.combat.state is FighterState.NEUTRAL
    assert fighter.combat.knockdowns_this_round == 0
    assert fighter.combat.knockdowns_total == 2
    assert not fighter.combat.is_hurt
    assert not fighter.combat.is_stunned
