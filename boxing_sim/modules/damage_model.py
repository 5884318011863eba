"""Damage bookkeeping and its consequences.

Turns resolved hits into accumulated head/body damage and the states that
follow from it: stun, hurt, cuts, swelling, knockdown recovery and
stoppage risk.  All thresholds come from the ``damage`` parameter
category.  The knockdown helpers here are the standalone model used for
counts and stoppage decisions; the per-punch knockdown roll lives in the
combat resolver.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field

from boxing_sim.models import Cut, Fighter, FighterState, HitLocation, PunchResult, PunchType, Swelling
from boxing_sim.modules.attribute_engine import apply_stun, set_hurt
from boxing_sim.modules.stamina_economy import body_damage_drain, hit_stamina_cost, spend
from boxing_sim.rules_registry import ParameterStore, load_parameter_store
from boxing_sim.utils import weighted_select

logger = logging.getLogger(__name__)

_STUN_DAMAGE = 3


@dataclass(frozen=True)
class DamageEffect:
    """A cut or swelling produced by a hit."""

    kind: str
    location: str
    severity: int


@dataclass(frozen=True)
class DamageRecovery:
    head: float
    body: float


@dataclass
class HitOutcome:
    """Everything :func:`apply_hit` changed on the defender."""

    damage: int
    location: HitLocation
    stunned: bool = False
    hurt: bool = False
    stamina_drained: float = 0.0
    effects: list[DamageEffect] = field(default_factory=list)


def _store(params: ParameterStore | None) -> ParameterStore:
    return params or load_parameter_store()


def _location(value: HitLocation | str | None) -> HitLocation:
    if isinstance(value, HitLocation):
        return value
    return HitLocation.BODY if str(value) == HitLocation.BODY.value else HitLocation.HEAD


# ---------------------------------------------------------------------------
# Damage
# ---------------------------------------------------------------------------

def calculate_resistance(
    fighter: Fighter,
    location: HitLocation | str = HitLocation.HEAD,
    params: ParameterStore | None = None,
) -> float:
    """Fraction of incoming damage shrugged off (0.0 to the configured cap)."""
    table = _store(params).section("damage.resistance")
    resistance = (
        fighter.defense.blocking / float(table.get("blocking_factor", 500))
        + fighter.mental.experience / float(table.get("experience_factor", 1000))
        + float(table.get("body_types", {}).get(fighter.physical.body_type.value, 0.0))
    )
    return min(float(table.get("max_resistance", 0.3)), max(0.0, resistance))


def calculate_damage(
    raw_damage: float,
    location: HitLocation | str,
    attacker: Fighter,
    defender: Fighter,
    params: ParameterStore | None = None,
) -> int:
    """Scale a resolved hit by the defender's resistance and chin.

    A tired attacker loses snap unless they have good punching stamina.
    """
    store = _store(params)
    mods = store.section("damage.modifiers")
    where = _location(location)

    resistance_mod = 1 - calculate_resistance(defender, where, store)
    chin_mod = 1.0
    if where is HitLocation.HEAD:
        chin_mod = 1 + (1 - defender.mental.chin * float(mods.get("chin_factor", 0.005)) * 2)

    threshold = float(mods.get("stamina_threshold", 0.5))
    percent = attacker.stamina_percent()
    stamina_mod = 1.0
    if percent < threshold:
        retention = attacker.power.punching_stamina / 100
        stamina_mod = 1 - (threshold - percent) * (1 - retention)

    return max(1, int(round(raw_damage * resistance_mod * chin_mod * stamina_mod)))


def apply_damage(fighter: Fighter, location: HitLocation | str, amount: float) -> float:
    """Add *amount* to the fighter's head or body damage, capped at capacity.

    Returns the damage actually recorded.
    """
    combat = fighter.combat
    amount = max(0.0, float(amount))
    if _location(location) is HitLocation.BODY:
        before = combat.body_damage
        combat.body_damage = min(combat.max_body_damage, before + amount)
        return combat.body_damage - before
    before = combat.head_damage
    combat.head_damage = min(combat.max_head_damage, before + amount)
    return combat.head_damage - before


# ---------------------------------------------------------------------------
# Hurt and knockdowns
# ---------------------------------------------------------------------------

def hurt_chance(
    fighter: Fighter,
    damage: float,
    location: HitLocation | str = HitLocation.HEAD,
    params: ParameterStore | None = None,
) -> float:
    """Probability that *damage* leaves *fighter* hurt; zero below threshold."""
    store = _store(params)
    table = store.section("damage.hurt")
    thresholds = store.section("damage.thresholds").get("hurt", {})
    where = _location(location)

    base_threshold = float(thresholds.get(where.value, 5 if where is HitLocation.HEAD else 8))
    damage_percent = fighter.head_damage_percent()
    threshold = base_threshold * (1 - damage_percent * float(table.get("threshold_damage_factor", 0.25)))
    if threshold <= 0 or damage < threshold:
        return 0.0

    chance = float(table.get("base_chance", 0.25)) + (damage / threshold - 1) * float(
        table.get("damage_ratio_scaling", 0.3)
    )
    chance *= 1 - (fighter.mental.chin - 70) / 100 * float(table.get("chin_modifier_factor", 0.4))
    chance *= 1 - (fighter.mental.composure - 70) / float(table.get("composure_factor", 300))

    percent_threshold = float(table.get("damage_percent_threshold", 0.4))
    if damage_percent > percent_threshold:
        chance *= float(table.get("damage_percent_base", 1.2)) + (damage_percent - percent_threshold) * float(
            table.get("damage_percent_multiplier", 0.8)
        )

    stamina = fighter.stamina_percent()
    if stamina < float(table.get("low_stamina_threshold", 0.3)):
        chance *= float(table.get("low_stamina_multiplier", 1.3))
    elif stamina < float(table.get("medium_stamina_threshold", 0.5)):
        chance *= float(table.get("medium_stamina_multiplier", 1.15))

    return min(float(table.get("max_chance", 0.6)), max(float(table.get("min_chance", 0.1)), chance))


def check_hurt(
    fighter: Fighter,
    damage: float,
    rng: random.Random | None = None,
    *,
    location: HitLocation | str = HitLocation.HEAD,
    params: ParameterStore | None = None,
) -> bool:
    chance = hurt_chance(fighter, damage, location, params)
    if chance <= 0:
        return False
    randomizer = rng or random.Random()
    return randomizer.random() < chance


def calculate_knockdown_threshold(fighter: Fighter, params: ParameterStore | None = None) -> float:
    """Damage a single shot needs before a knockdown is possible at all."""
    store = _store(params)
    table = store.section("damage.knockdown")
    base = float(store.section("damage.thresholds").get("knockdown", {}).get("base", 8))

    threshold = base
    threshold += fighter.mental.chin / float(table.get("threshold_chin_divisor", 4))
    threshold += fighter.mental.experience / float(table.get("threshold_experience_divisor", 10))
    threshold *= 1 - fighter.head_damage_percent() * float(table.get("threshold_damage_factor", 0.55))
    threshold *= float(table.get("threshold_stamina_base", 0.7)) + fighter.stamina_percent() * float(
        table.get("threshold_stamina_factor", 0.3)
    )
    return max(float(table.get("threshold_floor", 10)), threshold)


def calculate_knockdown_chance(
    fighter: Fighter,
    damage: float,
    punch_type: PunchType | str,
    is_counter: bool = False,
    params: ParameterStore | None = None,
) -> float:
    store = _store(params)
    table = store.section("damage.knockdown")
    threshold = calculate_knockdown_threshold(fighter, store)
    if damage < threshold:
        return 0.0

    chance = float(table.get("base_chance_at_threshold", 0.5)) + (damage - threshold) / threshold * float(
        table.get("over_threshold_scaling", 0.3)
    )
    parsed = PunchType.parse(punch_type)
    if parsed is not None and (parsed.is_hook or parsed.is_uppercut):
        chance *= float(table.get("power_punch_multiplier", 1.3))
    if is_counter:
        chance *= float(table.get("counter_multiplier", 1.2))
    chance *= 1 + fighter.head_damage_percent() * float(table.get("cumulative_damage_factor", 0.5))
    if fighter.stamina_percent() < float(table.get("stamina_low_threshold", 0.3)):
        chance *= float(table.get("stamina_low_multiplier", 1.3))
    chance *= 1 - fighter.mental.chin / float(table.get("chin_factor", 200))
    return min(float(table.get("max_chance", 0.9)), max(0.0, chance))


def calculate_recovery_chance(fighter: Fighter, count: int, params: ParameterStore | None = None) -> float:
    """Chance a knocked-down fighter beats the count at *count*."""
    table = _store(params).section("damage.recovery.knockdown")
    mental = fighter.mental

    base = (mental.chin + mental.heart) / 200 * float(table.get("base_chance_multiplier", 0.5)) * 2
    experience = mental.experience / float(table.get("experience_bonus", 300))
    damage_mod = 1 - fighter.head_damage_percent() * float(table.get("damage_penalty", 0.4))
    stamina_factor = float(table.get("stamina_factor", 0.5))
    stamina_mod = stamina_factor + fighter.stamina_percent() * stamina_factor

    if count <= 4:
        count_mod = float(table.get("early_count_bonus", 1.3))
    elif count <= 6:
        count_mod = float(table.get("mid_count_bonus", 1.1))
    elif count >= 9:
        count_mod = float(table.get("late_count_penalty", 0.7))
    else:
        count_mod = 1.0

    previous = float(table.get("previous_kd_factor", 0.85)) ** fighter.combat.knockdowns_this_round
    chance = (base + experience) * damage_mod * stamina_mod * count_mod * previous
    return min(float(table.get("max_chance", 0.95)), max(float(table.get("min_chance", 0.1)), chance))


def calculate_tko_probability(
    fighter: Fighter,
    referee_protectiveness: float = 0.0,
    params: ParameterStore | None = None,
) -> float:
    """Chance the referee waves it off, before the referee's own lean."""
    table = _store(params).section("damage.tko")
    combat = fighter.combat

    damage_percent = fighter.head_damage_percent()
    levels = table.get("damage_thresholds", {})
    chances = table.get("damage_chances", {})
    damage_chance = 0.0
    for tier in ("severe", "moderate", "elevated"):
        if damage_percent > float(levels.get(tier, 1.0)):
            damage_chance = float(chances.get(tier, 0.0))
            break

    hurt = 0.0
    if combat.is_hurt:
        hurt = float(table.get("hurt_bonus", 0.15))
        if combat.hurt_duration > float(table.get("prolonged_hurt_seconds", 5.0)):
            hurt += float(table.get("prolonged_hurt_bonus", 0.15))

    knockdowns = table.get("knockdowns_this_round", {})
    count = combat.knockdowns_this_round
    if count >= 3:
        knockdown = float(knockdowns.get("three_plus", 0.7))
    elif count == 2:
        knockdown = float(knockdowns.get("two", 0.45))
    elif count == 1:
        knockdown = float(knockdowns.get("one", 0.2))
    else:
        knockdown = 0.0

    cut_table = table.get("cut_severity", {})
    cuts = 0.0
    for cut in combat.cuts:
        if cut.severity >= 3:
            cuts += float(cut_table.get("severe", 0.2))
        elif cut.severity >= 2:
            cuts += float(cut_table.get("moderate", 0.1))

    base = damage_chance + hurt + knockdown + cuts
    return base * (float(table.get("referee_protectiveness_base", 0.5)) + referee_protectiveness)


def apply_knockdown(fighter: Fighter, params: ParameterStore | None = None) -> None:
    """Put *fighter* on the canvas and charge the cost of getting up."""
    combat = fighter.combat
    fighter.transition_to(FighterState.KNOCKED_DOWN)
    combat.knockdowns_this_round += 1
    combat.knockdowns_total += 1
    combat.stun_level = 0
    combat.stun_duration = 0
    cost = float(_store(params).section("stamina.damage").get("knockdown_recovery", 10.0))
    spend(fighter, cost)
    logger.debug(
        "%s knocked down (%d this round, %d total)",
        fighter.fighter_id,
        combat.knockdowns_this_round,
        combat.knockdowns_total,
    )


def between_rounds_recovery(fighter: Fighter, params: ParameterStore | None = None) -> DamageRecovery:
    """Heal a share of accumulated damage in the corner."""
    table = _store(params).section("damage.recovery.between_rounds")
    combat = fighter.combat
    head = combat.head_damage * float(table.get("head_damage_recovery", 0.1))
    body = combat.body_damage * float(table.get("body_damage_recovery", 0.05))
    combat.head_damage = max(0.0, combat.head_damage - head)
    combat.body_damage = max(0.0, combat.body_damage - body)
    return DamageRecovery(head=head, body=body)


# ---------------------------------------------------------------------------
# Cuts and swelling
# ---------------------------------------------------------------------------

def calculate_cut_severity(damage: float, location: str, params: ParameterStore | None = None) -> int:
    table = _store(params).section("damage.cuts")
    steps = table.get("severity_thresholds", {})
    if damage >= 20:
        severity = int(steps.get("damage_20", 3))
    elif damage >= 15:
        severity = int(steps.get("damage_15", 2))
    elif damage >= 10:
        severity = int(steps.get("damage_10", 1))
    else:
        severity = 0
    if "eyebrow" in location:
        severity += int(table.get("eyebrow_bonus", 1))
    return min(int(table.get("max_severity", 4)), severity)


def calculate_swelling_severity(fighter: Fighter, params: ParameterStore | None = None) -> int:
    """Severity from the number of clean shots the fighter has absorbed."""
    table = _store(params).section("damage.swelling")
    hits = fighter.combat.clean_hits_taken
    if hits >= int(table.get("hits_threshold_severe", 15)):
        return 3
    if hits >= int(table.get("hits_threshold_moderate", 10)):
        return 2
    if hits >= int(table.get("hits_threshold_mild", 5)):
        return 1
    return 0


def apply_damage_effects(
    fighter: Fighter,
    damage: float,
    location: HitLocation | str,
    punch_type: PunchType | str,
    rng: random.Random | None = None,
    params: ParameterStore | None = None,
) -> list[DamageEffect]:
    """Roll for cuts and swelling after a head shot and record them."""
    if _location(location) is not HitLocation.HEAD:
        return []

    randomizer = rng or random.Random()
    store = _store(params)
    cuts = store.section("damage.cuts")
    swelling = store.section("damage.swelling")
    combat = fighter.combat
    effects: list[DamageEffect] = []

    parsed = PunchType.parse(punch_type)
    cut_threshold = float(cuts.get("damage_threshold", 12))
    if parsed is not None and (parsed.is_hook or parsed.is_uppercut) and damage > cut_threshold:
        bonus = float(cuts.get("hook_chance_bonus" if parsed.is_hook else "uppercut_chance_bonus", 0.0))
        if randomizer.random() < (damage - cut_threshold) / 100 + bonus:
            where = weighted_select(dict(cuts.get("locations", {"left_eyebrow": 1.0})), randomizer)
            severity = calculate_cut_severity(damage, where, store)
            combat.cuts.append(Cut(location=where, severity=severity))
            effects.append(DamageEffect("cut", where, severity))

    if combat.clean_hits_taken > int(swelling.get("min_clean_hits", 10)):
        if randomizer.random() < float(swelling.get("chance_per_check", 0.05)):
            where = "left_eye" if randomizer.random() > 0.5 else "right_eye"
            severity = calculate_swelling_severity(fighter, store)
            already = any(existing.location == where for existing in combat.swelling)
            if severity > 0 and not already:
                combat.swelling.append(Swelling(location=where, severity=severity))
                effects.append(DamageEffect("swelling", where, severity))

    return effects


def vision_impairment(fighter: Fighter, params: ParameterStore | None = None) -> float:
    """Fraction of vision lost to bleeding eye-area cuts and eye swelling."""
    table = _store(params).section("damage.vision")
    combat = fighter.combat
    cut_loss = sum(
        cut.severity * float(table.get("cut_impairment_per_severity", 0.1))
        for cut in combat.cuts
        if "eye" in cut.location and cut.bleeding
    )
    swelling_loss = sum(
        swell.severity * float(table.get("swelling_impairment_per_severity", 0.15))
        for swell in combat.swelling
        if "eye" in swell.location
    )
    return min(float(table.get("max_impairment", 0.5)), cut_loss + swelling_loss)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def apply_hit(
    defender: Fighter,
    hit: PunchResult,
    rng: random.Random | None = None,
    *,
    attacker: Fighter | None = None,
    params: ParameterStore | None = None,
) -> HitOutcome:
    """Record a landed punch on *defender*.

    When *attacker* is given the resolved damage is rescaled through
    :func:`calculate_damage` first.
    """
    randomizer = rng or random.Random()
    store = _store(params)
    where = _location(hit.location)
    punch = hit.punch_type

    damage = int(hit.damage)
    if attacker is not None:
        damage = calculate_damage(damage, where, attacker, defender, store)

    apply_damage(defender, where, damage)
    outcome = HitOutcome(damage=damage, location=where)
    if hit.is_clean:
        defender.combat.clean_hits_taken += 1

    if hit.caused_stun or damage >= _STUN_DAMAGE:
        apply_stun(defender, damage, punch)
        outcome.stunned = True

    drain = hit_stamina_cost(damage, where, store)
    if where is HitLocation.BODY:
        drain += body_damage_drain(damage, punch, randomizer, store)
    outcome.stamina_drained = spend(defender, drain)

    if not defender.combat.is_hurt and check_hurt(defender, damage, randomizer, location=where, params=store):
        table = store.section("damage.hurt")
        duration = float(table.get("duration_min", 3.0)) + randomizer.random() * float(table.get("duration_range", 3.0))
        set_hurt(defender, duration)
        outcome.hurt = True
        logger.debug("%s hurt by %s for %.1fs", defender.fighter_id, getattr(punch, "value", punch), duration)

    outcome.effects = apply_damage_effects(defender, damage, where, punch, randomizer, store)
    return outcome
