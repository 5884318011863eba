"""Stamina spending, recovery and action gating.

Every cost and recovery rate is read from the ``stamina`` category of the
model parameters.  Punches are gated: a fighter can only throw what the
current pool pays for, and :func:`get_stamina_gated_alternative` picks the
fallback when it cannot.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from boxing_sim.models import (
    Action,
    ActionType,
    BlockType,
    FightContext,
    Fighter,
    FighterState,
    HitLocation,
    PunchType,
)
from boxing_sim.modules.weight_class_engine import weight_class_profile
from boxing_sim.rules_registry import ParameterStore, load_parameter_store

logger = logging.getLogger(__name__)


class FatigueTier(str, Enum):
    FRESH = "fresh"
    GOOD = "good"
    TIRED = "tired"
    EXHAUSTED = "exhausted"
    GASSED = "gassed"


@dataclass(frozen=True)
class ActionCheck:
    """Outcome of asking whether the pool can pay for an action."""

    can_perform: bool
    cost: float
    deficit: float
    reason: str | None = None


@dataclass(frozen=True)
class ZeroStaminaVulnerability:
    chin_penalty: int
    ko_multiplier: float


def _store(params: ParameterStore | None) -> ParameterStore:
    return params or load_parameter_store()


# ---------------------------------------------------------------------------
# Pool bookkeeping
# ---------------------------------------------------------------------------

def spend(fighter: Fighter, amount: float) -> float:
    """Drain up to *amount* stamina; the pool never drops below zero.

    Returns the stamina actually spent.
    """
    combat = fighter.combat
    before = combat.stamina
    combat.stamina = max(0.0, min(combat.max_stamina, before - max(0.0, amount)))
    return before - combat.stamina


def restore(fighter: Fighter, amount: float) -> float:
    """Add up to *amount* stamina, capped at the fighter's maximum."""
    combat = fighter.combat
    before = combat.stamina
    combat.stamina = max(0.0, min(combat.max_stamina, before + max(0.0, amount)))
    return combat.stamina - before


# ---------------------------------------------------------------------------
# Costs
# ---------------------------------------------------------------------------

def cost_modifier(fighter: Fighter, params: ParameterStore | None = None) -> float:
    """Fighter-specific multiplier applied to every stamina cost.

    Work rate, pace control and cardio make output cheaper; body damage
    and the current fatigue level make it dearer.
    """
    mods = _store(params).section("stamina.modifiers")
    conditioning = fighter.conditioning

    work_rate = max(
        float(mods.get("work_rate_floor", 0.5)),
        1 - (conditioning.work_rate - 50) * float(mods.get("work_rate_per_point", 0.012)),
    )
    pace = max(
        float(mods.get("pace_control_floor", 0.7)),
        1 - (conditioning.pace_control - 50) * float(mods.get("pace_control_per_point", 0.0075)),
    )
    cardio = max(
        float(mods.get("cardio_floor", 0.8)),
        1 - (conditioning.cardio - 50) * float(mods.get("cardio_per_point", 0.005)),
    )
    body = 1 + fighter.combat.body_damage / float(mods.get("body_damage_divisor", 120))
    fatigue = 1 + (1 - fighter.stamina_percent()) * float(mods.get("fatigue_factor", 0.4))
    return work_rate * pace * cardio * body * fatigue


def punch_cost(action: Action, params: ParameterStore | None = None) -> float:
    """Unmodified cost of a single punch or a whole combination."""
    stamina = _store(params).section("stamina")
    costs = stamina.get("punch_costs", {})
    fallback = float(stamina.get("fallback_punch_cost", 2.0))

    def _one(punch: PunchType | str | None) -> float:
        parsed = PunchType.parse(punch)
        if parsed is None:
            return fallback
        return float(costs.get(parsed.value, fallback))

    if action.combination:
        total = sum(_one(punch) for punch in action.combination)
        surcharge = stamina.get("combination_surcharge", {})
        total += float(surcharge.get(str(min(5, len(action.combination))), 0.0))
        return total
    return _one(action.punch_type)


def action_cost(action: Action, params: ParameterStore | None = None) -> float:
    """Unmodified one-off cost of *action*."""
    stamina = _store(params).section("stamina")
    scale = float(stamina.get("action_cost_scale", 0.5))
    defense = stamina.get("defense_costs", {})
    movement = stamina.get("movement_costs", {})

    if action.type is ActionType.PUNCH:
        return punch_cost(action, params)
    if action.type is ActionType.BLOCK:
        return float(defense.get("HIGH_GUARD", 0.1)) * scale
    if action.type is ActionType.EVADE:
        return float(defense.get("HEAD_MOVEMENT", 0.2)) * scale
    if action.type is ActionType.MOVE:
        if action.cutting:
            return float(movement.get("cutting", 0.2)) * scale
        if action.lateral:
            return float(movement.get("lateral", 0.1)) * scale
        direction = action.direction.value if action.direction is not None else "forward"
        fallback = float(stamina.get("movement_fallback_cost", 0.5))
        return float(movement.get(direction, fallback)) * scale
    if action.type is ActionType.CLINCH:
        return float(stamina.get("clinch", {}).get("initiation", 0.5))
    return 0.0


def state_cost(fighter: Fighter, tick_seconds: float, params: ParameterStore | None = None) -> float:
    """Ongoing cost of holding the current state for one tick."""
    stamina = _store(params).section("stamina")
    combat = fighter.combat
    if combat.state is FighterState.DEFENSIVE and combat.sub_state is not None:
        per_second = float(stamina.get("defense_costs", {}).get(combat.sub_state.value, 1.0))
        return per_second * tick_seconds
    if combat.state is FighterState.MOVING:
        circling = float(stamina.get("movement_costs", {}).get("circling", 0.12))
        return circling * tick_seconds * float(stamina.get("action_cost_scale", 0.5))
    if combat.state is FighterState.CLINCH:
        return float(stamina.get("clinch", {}).get("holding", 0.1)) * tick_seconds
    return 0.0


def tick_cost(
    fighter: Fighter,
    action: Action | None,
    tick_seconds: float,
    params: ParameterStore | None = None,
) -> float:
    """Total stamina drained by one tick of fighting."""
    store = _store(params)
    stamina = store.section("stamina")

    cost = float(stamina.get("baseline_drain", 0.12)) * tick_seconds
    if action is not None:
        cost += action_cost(action, store)
    cost += state_cost(fighter, tick_seconds, store)
    if fighter.combat.is_hurt:
        cost += float(stamina.get("damage", {}).get("being_hurt", 1.5)) * tick_seconds

    cost *= cost_modifier(fighter, store)
    cost *= weight_class_profile(fighter, store).stamina_multiplier
    minimum = float(stamina.get("minimum_drain", 0.08)) * tick_seconds
    return max(0.0, cost, minimum)


def hit_stamina_cost(
    damage: float,
    location: HitLocation | str,
    params: ParameterStore | None = None,
) -> float:
    """Stamina drained by absorbing a punch; body shots cost more."""
    table = _store(params).section("stamina.damage")
    cost = float(table.get("getting_hit_base", 0.3)) + damage * float(table.get("getting_hit_per_point", 0.02))
    if str(getattr(location, "value", location)) == HitLocation.BODY.value:
        cost *= float(table.get("body_hit_multiplier", 1.5))
    return cost


def body_damage_drain(
    damage: float,
    punch_type: PunchType | str,
    rng: random.Random | None = None,
    params: ParameterStore | None = None,
) -> float:
    """Extra drain from body damage, with rare liver and solar plexus spikes."""
    randomizer = rng or random.Random()
    table = _store(params).section("stamina.body_drain")
    drain = damage * float(table.get("per_damage", 0.5))

    parsed = PunchType.parse(punch_type)
    if parsed in (PunchType.BODY_HOOK_LEAD, PunchType.BODY_HOOK_REAR):
        if randomizer.random() < float(table.get("hook_spike_chance", 0.15)):
            drain = damage * float(table.get("hook_spike_per_damage", 1.0))
    elif parsed is PunchType.BODY_CROSS:
        if randomizer.random() < float(table.get("cross_spike_chance", 0.1)):
            drain = damage * float(table.get("cross_spike_per_damage", 0.8)) + float(
                table.get("cross_spike_flat", 5.0)
            )
    return drain


# ---------------------------------------------------------------------------
# Gating
# ---------------------------------------------------------------------------

def can_perform_action(
    fighter: Fighter,
    action: Action | None,
    params: ParameterStore | None = None,
) -> ActionCheck:
    """Check whether *fighter* can pay for *action* right now.

    Only punches are gated; everything else always passes at zero cost.
    """
    if action is None or action.type is not ActionType.PUNCH:
        return ActionCheck(can_perform=True, cost=0.0, deficit=0.0)

    store = _store(params)
    cost = punch_cost(action, store) * cost_modifier(fighter, store)
    available = fighter.combat.stamina
    if available >= cost:
        return ActionCheck(can_perform=True, cost=cost, deficit=0.0)
    return ActionCheck(
        can_perform=False,
        cost=cost,
        deficit=cost - available,
        reason="insufficient_stamina",
    )


def get_stamina_gated_alternative(
    fighter: Fighter,
    action: Action | None = None,
    situation: Mapping[str, Any] | None = None,
    params: ParameterStore | None = None,
) -> Action:
    """Return the fallback for a punch the fighter cannot afford.

    Desperately tired and close in: clinch.  Very tired: cover up behind
    a high guard.  Otherwise wait and recover.
    """
    gating = _store(params).section("stamina.gating")
    situation = situation or {}
    distance = situation.get("distance")
    if distance is None:
        distance = gating.get("default_distance", 4.0)
    distance = float(distance)
    percent = fighter.stamina_percent()

    if percent < float(gating.get("clinch_stamina", 0.05)) and distance < float(gating.get("clinch_distance", 3.0)):
        replacement = Action.clinch()
    elif percent < float(gating.get("block_stamina", 0.1)):
        replacement = Action.block(BlockType.HIGH_GUARD)
    else:
        replacement = Action.wait()

    logger.debug(
        "%s cannot afford %s at %.1f%% stamina; substituting %s",
        fighter.fighter_id,
        action.to_dict() if action is not None else None,
        percent * 100,
        replacement.type.value,
    )
    return replacement


# ---------------------------------------------------------------------------
# Recovery
# ---------------------------------------------------------------------------

def recovery_ceiling(stamina_percent: float) -> float:
    """Recovery efficiency, falling off as the pool nears full."""
    if stamina_percent <= 0.5:
        return 1.0
    if stamina_percent <= 0.7:
        return 1.0 - (stamina_percent - 0.5)
    if stamina_percent <= 0.85:
        return 0.8 - (stamina_percent - 0.7) * 2.67
    if stamina_percent <= 0.95:
        return 0.4 - (stamina_percent - 0.85) * 3.0
    return max(0.0, 0.1 - (stamina_percent - 0.95) * 2.0)


def age_recovery_modifier(age: int, params: ParameterStore | None = None) -> float:
    stamina = _store(params).section("stamina")
    for ceiling, modifier in stamina.get("age_recovery", ()):
        if age <= ceiling:
            return float(modifier)
    return float(stamina.get("age_recovery_floor", 0.6))


def state_recovery_modifier(fighter: Fighter, params: ParameterStore | None = None) -> float:
    """A defensive sub-state replaces the state rate instead of scaling it."""
    rates = _store(params).section("stamina.recovery")
    combat = fighter.combat
    if combat.state is FighterState.DEFENSIVE and combat.sub_state is not None:
        return float(
            rates.get("defensive_sub_states", {}).get(
                combat.sub_state.value, rates.get("default_sub_state_rate", 0.5)
            )
        )
    return float(rates.get("states", {}).get(combat.state.value, 0.0))


def passive_recovery(fighter: Fighter, tick_seconds: float, params: ParameterStore | None = None) -> float:
    """Stamina recovered over one tick; hurt fighters recover nothing."""
    if fighter.combat.is_hurt:
        return 0.0

    store = _store(params)
    rates = store.section("stamina.recovery")
    conditioning = fighter.conditioning
    combat = fighter.combat

    base = conditioning.cardio * float(rates.get("cardio_rate", 0.008))
    per_point = float(rates.get("attribute_per_point", 0.005))
    bonus = (conditioning.pace_control - 50) * per_point + (conditioning.recovery_rate - 50) * per_point
    attribute_mod = 1 + min(float(rates.get("attribute_bonus_cap", 0.35)), bonus)
    body_mod = 1 - combat.body_damage / float(rates.get("body_damage_divisor", 150))
    head_mod = 1 - combat.head_damage / float(rates.get("head_damage_divisor", 300))

    recovery = (
        base
        * state_recovery_modifier(fighter, store)
        * attribute_mod
        * body_mod
        * head_mod
        * age_recovery_modifier(fighter.physical.age, store)
        * recovery_ceiling(fighter.stamina_percent())
        * tick_seconds
    )
    return max(0.0, recovery)


def update(
    fighter: Fighter,
    action: Action | None,
    tick_seconds: float,
    params: ParameterStore | None = None,
) -> float:
    """Charge one tick of costs, then apply passive recovery.

    Returns the net change to the pool.
    """
    store = _store(params)
    before = fighter.combat.stamina
    spend(fighter, tick_cost(fighter, action, tick_seconds, store))
    restore(fighter, passive_recovery(fighter, tick_seconds, store))
    return fighter.combat.stamina - before


def between_rounds_recovery(
    fighter: Fighter,
    corner_bonus: float = 0.0,
    params: ParameterStore | None = None,
) -> float:
    """Restore stamina during the one-minute rest.

    *corner_bonus* is the corner's 0-100 strategy rating.  Returns the
    amount restored.
    """
    store = _store(params)
    table = store.section("stamina.between_rounds")
    conditioning = fighter.conditioning
    combat = fighter.combat

    amount = combat.max_stamina * (conditioning.recovery_rate / 100) * float(table.get("recovery_factor", 0.55))
    amount *= 1 + (conditioning.cardio - 50) * float(table.get("cardio_per_point", 0.008))
    amount *= 1 + (max(0.0, corner_bonus) / 100) * float(table.get("corner_bonus_factor", 0.15))
    amount *= 1 - combat.body_damage / float(table.get("body_damage_divisor", 200))
    amount *= age_recovery_modifier(fighter.physical.age, store)
    amount = min(amount, combat.max_stamina * float(table.get("max_fraction", 0.6)))
    return restore(fighter, amount)


def check_second_wind(
    fighter: Fighter,
    context: FightContext,
    rng: random.Random | None = None,
    params: ParameterStore | None = None,
) -> bool:
    """Roll for a once-per-fight late-rounds stamina surge."""
    table = _store(params).section("stamina.second_wind")
    combat = fighter.combat
    if context.round_number < int(table.get("min_round", 9)):
        return False
    if fighter.stamina_percent() > float(table.get("max_stamina_percent", 0.4)):
        return False
    if combat.second_wind_used:
        return False

    randomizer = rng or random.Random()
    chance = fighter.conditioning.second_wind / 100
    chance += (fighter.mental.heart - 50) / float(table.get("heart_divisor", 200))
    if randomizer.random() >= chance:
        return False

    combat.second_wind_used = True
    restore(fighter, combat.max_stamina * float(table.get("restore_fraction", 0.25)))
    return True


# ---------------------------------------------------------------------------
# Fatigue
# ---------------------------------------------------------------------------

def fatigue_tier(fighter: Fighter, params: ParameterStore | None = None) -> FatigueTier:
    tiers = _store(params).section("stamina.fatigue_tiers")
    percent = fighter.stamina_percent()
    if percent >= float(tiers.get("fresh", 0.8)):
        return FatigueTier.FRESH
    if percent >= float(tiers.get("good", 0.6)):
        return FatigueTier.GOOD
    if percent >= float(tiers.get("tired", 0.4)):
        return FatigueTier.TIRED
    if percent >= float(tiers.get("exhausted", 0.25)):
        return FatigueTier.EXHAUSTED
    return FatigueTier.GASSED


def fatigue_penalties(
    tier: FatigueTier,
    heart: int = 70,
    params: ParameterStore | None = None,
) -> dict[str, int]:
    """Attribute penalties for *tier*; big hearts push through them."""
    stamina = _store(params).section("stamina")
    penalties = stamina.get("fatigue_penalties", {}).get(tier.value, {})
    if not penalties:
        return {}
    heart_table = stamina.get("fatigue_heart", {})
    factor = 1 - (heart - float(heart_table.get("reference", 70))) / float(heart_table.get("divisor", 75))
    return {stat: int(round(value * factor)) for stat, value in penalties.items()}


def zero_stamina_vulnerability(
    fighter: Fighter,
    params: ParameterStore | None = None,
) -> ZeroStaminaVulnerability:
    """Chin penalty and knockout multiplier for a fighter running on empty."""
    table = _store(params).section("stamina.zero_stamina")
    threshold = float(table.get("threshold", 0.1))
    percent = fighter.stamina_percent()
    if percent > threshold:
        return ZeroStaminaVulnerability(chin_penalty=0, ko_multiplier=1.0)

    severity = 1 - percent / threshold
    chin_penalty = int(round(-float(table.get("chin_penalty", 30)) * severity))
    ko_multiplier = 1.0 + (float(table.get("max_ko_multiplier", 2.0)) - 1.0) * severity
    return ZeroStaminaVulnerability(chin_penalty=chin_penalty, ko_multiplier=ko_multiplier)
