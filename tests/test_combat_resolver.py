import random

import pytest

from boxing_sim.models import (
    Action,
    BlockType,
    Decision,
    DefensiveSubState,
    EvadeType,
    FightContext,
    FighterState,
    FightingStyle,
    HitLocation,
    Outcome,
    Position,
    PunchResult,
    PunchType,
    StatusModifiers,
)
from boxing_sim.modules.attribute_engine import apply_stun, build_fighter, set_hurt
from boxing_sim.modules.combat_resolver import (
    CombatResolver,
    chin_resistance,
    style_matchup_modifier,
    weight_differential_modifier,
)
from boxing_sim.parameter_defaults import DEFAULT_PARAMETERS
from boxing_sim.rules_registry import ParameterStore
from boxing_sim.utils import SequenceRandom

PARAMS = ParameterStore(DEFAULT_PARAMETERS)

_GROUP_KEYS = {
    "power": ("power_left", "power_right", "knockout_power", "body_punching", "punching_stamina"),
    "speed": ("hand_speed", "foot_speed", "reflexes", "first_step", "combination_speed"),
    "stamina": ("cardio", "recovery_rate", "work_rate", "second_wind", "pace_control"),
    "defense": ("head_movement", "blocking", "parrying", "shoulder_roll", "clinch_defense", "clinch_offense", "ring_awareness"),
    "offense": ("jab_accuracy", "power_accuracy", "body_accuracy", "counter_punching", "combination_punching"),
    "technical": (
        "footwork",
        "distance_management",
        "inside_fighting",
        "outside_fighting",
        "ring_generalship",
        "adaptability",
        "fight_iq",
    ),
    "mental": ("chin", "heart", "killer_instinct", "composure", "confidence", "experience", "clutch_factor"),
}


def _fighter(fighter_id: str, **groups):
    payload = {"name": f"Fighter {fighter_id}"}
    payload.update(groups)
    return build_fighter(payload, fighter_id=fighter_id)


def _average(fighter_id: str, **overrides):
    """A fighter with every rating at 70, plus *overrides* per group."""
    payload = {"name": f"Average {fighter_id}"}
    for group, keys in _GROUP_KEYS.items():
        payload[group] = {key: 70 for key in keys}
        payload[group].update(overrides.get(group, {}))
    return build_fighter(payload, fighter_id=fighter_id)


def _random_fighter(fighter_id: str, rng: random.Random):
    payload = {"name": f"Random {fighter_id}"}
    for group, keys in _GROUP_KEYS.items():
        payload[group] = {key: rng.randint(0, 100) for key in keys}
    payload["physical"] = {"weight": rng.uniform(48.0, 120.0), "reach": rng.uniform(150.0, 215.0)}
    payload["style"] = {
        "primary": rng.choice([style.value for style in FightingStyle]),
    }
    return build_fighter(payload, fighter_id=fighter_id)


def _square_off(fighter_a, fighter_b, gap: float) -> None:
    fighter_a.combat.position = Position(-gap / 2, 0.0)
    fighter_b.combat.position = Position(gap / 2, 0.0)


def _decision(action: Action, state: FighterState = FighterState.OFFENSIVE, sub_state=None) -> Decision:
    return Decision(state=state, sub_state=sub_state, action=action, target=action.target)


WAIT = _decision(Action.wait(), FighterState.NEUTRAL)


def _head_hit(punch: PunchType, damage: int) -> PunchResult:
    return PunchResult(Outcome.HIT, punch, "A", "B", location=HitLocation.HEAD, damage=damage, quality="clean")


# ---------------------------------------------------------------------------
# Range and activity
# ---------------------------------------------------------------------------


def test_punch_beyond_range_plus_one_misses_out_of_range() -> None:
    fighter_a, fighter_b = _fighter("A"), _fighter("B")
    resolver = CombatResolver(PARAMS, SequenceRandom([0.0]))

    result = resolver.resolve(fighter_a, fighter_b, _decision(Action.punch(PunchType.JAB)), WAIT)

    assert result.hits == []
    assert len(result.misses) == 1
    assert result.misses[0].reason == "out_of_range"
    assert result.misses[0].target == "B"


def test_range_gate_boundary() -> None:
    fighter_a, fighter_b = _fighter("A"), _fighter("B")
    resolver = CombatResolver(PARAMS, SequenceRandom([0.0, 0.99]))

    _square_off(fighter_a, fighter_b, 6.0)
    inside = resolver.resolve(fighter_a, fighter_b, _decision(Action.punch(PunchType.JAB)), WAIT)
    resolver.reset_cooldowns()
    _square_off(fighter_a, fighter_b, 6.05)
    outside = resolver.resolve(fighter_a, fighter_b, _decision(Action.punch(PunchType.JAB)), WAIT)

    assert inside.actions and all(miss.reason != "out_of_range" for miss in inside.misses)
    assert outside.misses[0].reason == "out_of_range"


def test_unknown_punch_is_an_automatic_miss() -> None:
    fighter_a, fighter_b = _fighter("A"), _fighter("B")
    _square_off(fighter_a, fighter_b, 3.0)
    resolver = CombatResolver(PARAMS, SequenceRandom([0.0]))

    result = resolver.resolve(fighter_a, fighter_b, _decision(Action.punch("haymaker")), WAIT)

    assert result.misses[0].reason == "unknown_punch"
    assert result.misses[0].punch_type == "haymaker"


def test_recovery_ticks_throttle_punch_output() -> None:
    fighter_a, fighter_b = _fighter("A"), _fighter("B")
    resolver = CombatResolver(PARAMS, SequenceRandom([0.0]))
    jab = _decision(Action.punch(PunchType.JAB))

    thrown = [len(resolver.resolve(fighter_a, fighter_b, jab, WAIT).actions) for _ in range(4)]

    # Middleweights wait two ticks between punches.
    assert thrown == [1, 0, 0, 1]


def test_heavily_stunned_fighter_cannot_punch() -> None:
    fighter_a, fighter_b = _fighter("A"), _fighter("B")
    _square_off(fighter_a, fighter_b, 3.0)
    apply_stun(fighter_a, 10, PunchType.CROSS)
    resolver = CombatResolver(PARAMS, SequenceRandom([0.0]))

    result = resolver.resolve(fighter_a, fighter_b, _decision(Action.punch(PunchType.CROSS)), WAIT)

    assert result.actions == []


# ---------------------------------------------------------------------------
# Accuracy and defense ranges
# ---------------------------------------------------------------------------


def test_accuracy_and_defense_chances_stay_in_range_across_attribute_sweeps() -> None:
    rng = random.Random(2024)
    resolver = CombatResolver(PARAMS, random.Random(1))

    for _ in range(200):
        attacker = _random_fighter("A", rng)
        defender = _random_fighter("B", rng)
        attacker.combat.stamina = attacker.combat.max_stamina * rng.random()
        defender.combat.head_damage = defender.combat.max_head_damage * rng.random()
        if rng.random() < 0.3:
            set_hurt(defender, 3.0)
        if rng.random() < 0.3:
            defender.transition_to(FighterState.MOVING)

        for punch in PunchType:
            distance = rng.uniform(0.5, 9.0)
            accuracy = resolver.calculate_accuracy(
                attacker,
                defender,
                punch,
                distance,
                is_counter=rng.random() < 0.5,
                accuracy_modifier=rng.uniform(-0.5, 0.5),
            )
            assert 0.1 <= accuracy <= 0.95
            evade = resolver.calculate_evade_chance(defender, punch, punch.location)
            assert 0.0 <= evade <= 0.45
            damage = resolver.calculate_damage(attacker, defender, punch, distance, power_modifier=rng.uniform(-0.5, 0.5))
            assert damage >= 1

        assert 0.0 <= resolver.calculate_passive_defense(defender) <= 1.0


def test_accuracy_status_modifier_raises_accuracy() -> None:
    attacker, defender = _fighter("A"), _fighter("B")
    resolver = CombatResolver(PARAMS, random.Random(1))

    plain = resolver.calculate_accuracy(attacker, defender, PunchType.JAB, 4.0)
    boosted = resolver.calculate_accuracy(attacker, defender, PunchType.JAB, 4.0, accuracy_modifier=0.2)

    assert boosted > plain


def test_style_matchups_and_weight_modifier() -> None:
    assert style_matchup_modifier(FightingStyle.INSIDE_FIGHTER, FightingStyle.SWARMER, 2.0) == pytest.approx(1.18)
    assert style_matchup_modifier(FightingStyle.INSIDE_FIGHTER, FightingStyle.SWARMER, 5.0) == pytest.approx(0.94)
    assert style_matchup_modifier(FightingStyle.OUT_BOXER, FightingStyle.OUT_BOXER, 3.5) == 1.0

    table = PARAMS.section("combat.resolution.damage")
    giant = _fighter("A", physical={"weight": 200.0})
    tiny = _fighter("B", physical={"weight": 50.0})
    assert weight_differential_modifier(giant, tiny, table) == pytest.approx(2.5)
    assert weight_differential_modifier(tiny, giant, table) == pytest.approx(0.3)
    assert weight_differential_modifier(tiny, tiny, table) == 1.0


def test_hurt_defender_usually_fails_to_defend() -> None:
    defender = _fighter("B")
    set_hurt(defender, 3.0)
    resolver = CombatResolver(PARAMS, SequenceRandom([0.9]))
    guard = _decision(Action.block(BlockType.HIGH_GUARD), FighterState.DEFENSIVE, DefensiveSubState.HIGH_GUARD)

    defense = resolver.resolve_defense(defender, guard, PunchType.CROSS, HitLocation.HEAD)

    assert not (defense.blocked or defense.evaded or defense.partial)


def test_high_guard_block_and_parry_labels() -> None:
    defender = _fighter("B")
    guard = _decision(Action.block(BlockType.HIGH_GUARD), FighterState.DEFENSIVE)

    blocked = CombatResolver(PARAMS, SequenceRandom([0.0])).resolve_defense(defender, guard, PunchType.JAB, HitLocation.HEAD)
    assert blocked.blocked
    assert blocked.block_type == "high_guard"
    assert blocked.damage_reduction == pytest.approx(0.7)

    parrier = _fighter("B", defense={"parrying": 85})
    parried = CombatResolver(PARAMS, SequenceRandom([0.0])).resolve_defense(parrier, guard, PunchType.CROSS, HitLocation.HEAD)
    assert parried.blocked
    assert parried.block_type == "parry"
    assert parried.damage_reduction == pytest.approx(0.9)


def test_evading_defender_reports_evade_type() -> None:
    defender = _fighter("B")
    duck = _decision(Action.evade(EvadeType.DUCK), FighterState.DEFENSIVE, DefensiveSubState.HEAD_MOVEMENT)

    defense = CombatResolver(PARAMS, SequenceRandom([0.0])).resolve_defense(defender, duck, PunchType.JAB, HitLocation.HEAD)

    assert defense.evaded
    assert defense.evade_type == "duck"


def test_passive_defense_turns_clean_shots_partial() -> None:
    defender = _fighter("B")

    partial = CombatResolver(PARAMS, SequenceRandom([0.0])).resolve_defense(defender, WAIT, PunchType.CROSS, HitLocation.HEAD)
    clean = CombatResolver(PARAMS, SequenceRandom([0.99])).resolve_defense(defender, WAIT, PunchType.CROSS, HitLocation.HEAD)

    assert partial.partial
    assert partial.damage_reduction == pytest.approx(0.3)
    assert not (clean.blocked or clean.evaded or clean.partial)


# ---------------------------------------------------------------------------
# Combinations
# ---------------------------------------------------------------------------


def test_combination_reports_first_hit_with_totals() -> None:
    fighter_a, fighter_b = _fighter("A"), _fighter("B")
    _square_off(fighter_a, fighter_b, 3.0)
    # gate, jab roll, passive, variance, cross roll, passive, variance
    rng = SequenceRandom([0.0, 0.0, 0.99, 0.5, 0.0, 0.99, 0.5])
    resolver = CombatResolver(PARAMS, rng)

    result = resolver.resolve(fighter_a, fighter_b, _decision(Action.combo([PunchType.JAB, PunchType.CROSS])), WAIT)

    assert len(result.hits) == 1
    first = result.hits[0]
    assert first.punch_type is PunchType.JAB
    assert first.combination_hits == 2
    assert first.combination_total == 2
    assert first.quality == "clean"
    assert result.knockdown is None
    assert rng.draws_used == 7


def test_combination_out_of_range_reports_first_miss() -> None:
    fighter_a, fighter_b = _fighter("A"), _fighter("B")
    resolver = CombatResolver(PARAMS, SequenceRandom([0.0]))

    result = resolver.resolve(
        fighter_a, fighter_b, _decision(Action.combo([PunchType.LEAD_HOOK, PunchType.REAR_HOOK])), WAIT
    )

    assert result.misses[0].reason == "out_of_range"
    assert result.misses[0].punch_type is PunchType.LEAD_HOOK


# ---------------------------------------------------------------------------
# Determinism and damage
# ---------------------------------------------------------------------------


def _exchange(draws: list[float]) -> list[tuple]:
    fighter_a, fighter_b = _average("A"), _average("B")
    _square_off(fighter_a, fighter_b, 3.0)
    resolver = CombatResolver(PARAMS, SequenceRandom(draws))
    context = FightContext(round_number=4, modifiers={"A": StatusModifiers(accuracy=0.1)})
    decision_a = _decision(Action.combo([PunchType.JAB, PunchType.CROSS, PunchType.LEAD_HOOK]))
    decision_b = _decision(Action.punch(PunchType.REAR_HOOK, is_counter=True), FighterState.TIMING)

    log = []
    for _ in range(60):
        result = resolver.resolve(fighter_a, fighter_b, decision_a, decision_b, context)
        for entry in result.hits + result.blocks + result.evades + result.misses:
            log.append((entry.attacker, entry.outcome, entry.punch_type, entry.damage, entry.reason, entry.block_type))
        log.append(result.knockdown)
    return log


def test_identical_draws_give_identical_resolutions() -> None:
    source = random.Random(9)
    draws = [source.random() for _ in range(500)]

    first = _exchange(draws)
    second = _exchange(draws)

    assert first == second
    assert any(entry for entry in first if entry is not None)


def test_heavier_attacker_lands_more_damage() -> None:
    heavy = _average("A")
    light = _average("B")
    heavy.physical.weight = 112.5
    light.physical.weight = 75.0
    resolver = CombatResolver(PARAMS, random.Random(4))

    heavy_on_light = [resolver.calculate_damage(heavy, light, PunchType.CROSS, 4.5) for _ in range(2_000)]
    light_on_heavy = [resolver.calculate_damage(light, heavy, PunchType.CROSS, 4.5) for _ in range(2_000)]

    assert sum(heavy_on_light) / 2_000 > 2 * sum(light_on_heavy) / 2_000


def test_partial_hits_and_counters_scale_damage() -> None:
    attacker, defender = _average("A"), _average("B")

    clean = CombatResolver(PARAMS, SequenceRandom([0.5])).calculate_damage(attacker, defender, PunchType.REAR_HOOK, 3.0)
    partial = CombatResolver(PARAMS, SequenceRandom([0.5])).calculate_damage(
        attacker, defender, PunchType.REAR_HOOK, 3.0, is_partial=True
    )
    counter = CombatResolver(PARAMS, SequenceRandom([0.5])).calculate_damage(
        attacker, defender, PunchType.REAR_HOOK, 3.0, is_counter=True
    )

    assert partial < clean < counter


# ---------------------------------------------------------------------------
# Knockdowns
# ---------------------------------------------------------------------------


def _knockdown_rate(attacker, target, hit: PunchResult, trials: int, seed: int) -> float:
    resolver = CombatResolver(PARAMS, random.Random(seed))
    return sum(resolver.check_knockdown(hit, attacker, target) is not None for _ in range(trials)) / trials


def test_big_puncher_drops_a_glass_chin_far_more_than_an_iron_chin() -> None:
    puncher = _average("A", power={"knockout_power": 99})
    glass = _average("B", mental={"chin": 40})
    iron = _average("B", mental={"chin": 95})
    for target in (glass, iron):
        target.combat.head_damage = target.combat.max_head_damage * 0.3

    hit = _head_hit(PunchType.REAR_HOOK, 6)
    glass_rate = _knockdown_rate(puncher, glass, hit, 2_000, seed=17)
    iron_rate = _knockdown_rate(puncher, iron, hit, 2_000, seed=17)

    assert glass_rate > 0.5
    assert iron_rate < 0.05
    assert glass_rate > 10 * iron_rate


def test_average_fighters_rarely_go_down_from_clean_power_shots() -> None:
    attacker = _average("A")
    target = _average("B")
    target.combat.head_damage = target.combat.max_head_damage * 0.3

    rate = _knockdown_rate(attacker, target, _head_hit(PunchType.CROSS, 3), 20_000, seed=5)

    assert rate < 0.1


def test_fresh_fighter_is_protected_from_ordinary_shots() -> None:
    attacker = _average("A")
    target = _average("B")

    assert _knockdown_rate(attacker, target, _head_hit(PunchType.REAR_HOOK, 4), 5_000, seed=8) == 0.0


def test_body_shots_and_jabs_never_flash_knockdown() -> None:
    attacker = _average("A", power={"knockout_power": 99})
    target = _average("B", mental={"chin": 40})
    target.combat.head_damage = target.combat.max_head_damage * 0.3
    body = PunchResult(Outcome.HIT, PunchType.BODY_HOOK_REAR, "A", "B", location=HitLocation.BODY, damage=30, quality="clean")

    assert _knockdown_rate(attacker, target, body, 500, seed=3) == 0.0
    assert _knockdown_rate(attacker, target, _head_hit(PunchType.JAB, 1), 500, seed=3) == 0.0


def test_knockdown_event_is_attached_to_the_tick() -> None:
    fighter_a = _average("A", power={"knockout_power": 99})
    fighter_a.physical.weight = 100.0
    fighter_b = _average("B", mental={"chin": 30})
    fighter_b.combat.head_damage = fighter_b.combat.max_head_damage * 0.6
    _square_off(fighter_a, fighter_b, 3.0)
    resolver = CombatResolver(PARAMS, SequenceRandom([0.0, 0.0, 0.99, 0.99, 0.99]))

    result = resolver.resolve(fighter_a, fighter_b, _decision(Action.punch(PunchType.REAR_HOOK)), WAIT)

    assert len(result.hits) == 1
    assert result.knockdown is not None
    assert result.knockdown.target == "B"
    assert result.knockdown.punch_type is PunchType.REAR_HOOK
    assert not result.knockdown.flash


def test_chin_resistance_rises_with_chin() -> None:
    assert chin_resistance(40) < chin_resistance(80) < chin_resistance(90) < chin_resistance(99)


@pytest.mark.parametrize("chin", [0, 10, 29, 30])
def test_glass_chins_have_no_resistance(chin: int) -> None:
    assert chin_resistance(chin) == 0.0


def test_chin_resistance_stays_a_probability() -> None:
    for chin in range(0, 101):
        assert 0.0 <= chin_resistance(chin) <= 1.0
