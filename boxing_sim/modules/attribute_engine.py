"""Derived fighter statistics and per-fight state helpers.

Turns a fighter profile payload into a :class:`~boxing_sim.models.Fighter`
with its derived pools (max stamina, damage capacity, optimal range) and
owns the small bookkeeping helpers for stun and hurt state that both the
resolver and the damage model lean on.
"""

from __future__ import annotations

import math
import random
from typing import Any

from boxing_sim.constants import START_POSITIONS, TICK_SECONDS
from boxing_sim.models import (
    BodyType,
    CombatState,
    ConditioningAttributes,
    DefenseAttributes,
    Fighter,
    FighterConfigError,
    FighterState,
    FightingStyle,
    MentalAttributes,
    OffenseAttributes,
    PhysicalAttributes,
    Position,
    PowerAttributes,
    PunchType,
    SpeedAttributes,
    StyleProfile,
    TechnicalAttributes,
)
from boxing_sim.utils import clamp_float

# ---------------------------------------------------------------------------
# Derived statistic tables
# ---------------------------------------------------------------------------

_AGE_STAMINA_BANDS: tuple[tuple[int, float], ...] = (
    (28, 1.0),
    (32, 0.97),
    (35, 0.92),
    (38, 0.85),
)
_AGE_STAMINA_FLOOR = 0.78

_BODY_TYPE_STAMINA: dict[BodyType, float] = {
    BodyType.LEAN: 1.05,
    BodyType.AVERAGE: 1.0,
    BodyType.MUSCULAR: 0.97,
    BodyType.STOCKY: 0.98,
    BodyType.LANKY: 1.02,
}

# (minimum kg, head capacity, body capacity), heaviest first.
_DAMAGE_CAPACITY: tuple[tuple[float, int, int], ...] = (
    (90.7, 350, 300),
    (79.4, 320, 280),
    (76.2, 300, 260),
    (72.6, 280, 240),
    (66.7, 260, 220),
    (61.2, 240, 200),
    (57.2, 220, 180),
    (53.5, 200, 170),
)
_LIGHTEST_CAPACITY = (180, 150)

_STYLE_RANGE_OFFSET: dict[FightingStyle, float] = {
    FightingStyle.OUT_BOXER: 0.3,
    FightingStyle.SWARMER: -0.5,
    FightingStyle.SLUGGER: 0.0,
    FightingStyle.BOXER_PUNCHER: 0.1,
    FightingStyle.COUNTER_PUNCHER: 0.2,
    FightingStyle.INSIDE_FIGHTER: -0.6,
    FightingStyle.VOLUME_PUNCHER: 0.0,
    FightingStyle.SWITCH_HITTER: 0.1,
}

_LONG_STUN_PUNCHES = frozenset(
    {PunchType.CROSS, PunchType.REAR_HOOK, PunchType.REAR_UPPERCUT, PunchType.BODY_HOOK_REAR}
)


def age_stamina_modifier(age: int) -> float:
    for ceiling, modifier in _AGE_STAMINA_BANDS:
        if age <= ceiling:
            return modifier
    return _AGE_STAMINA_FLOOR


def calculate_max_stamina(physical: PhysicalAttributes, conditioning: ConditioningAttributes) -> float:
    """Stamina pool from cardio, scaled by weight, age and body type."""
    base = 80 + conditioning.cardio * 0.4
    weight_mod = 1 - (physical.weight - 70) * 0.002
    body_mod = _BODY_TYPE_STAMINA.get(physical.body_type, 1.0)
    return base * weight_mod * age_stamina_modifier(physical.age) * body_mod


def calculate_damage_capacity(weight_kg: float, chin: int) -> tuple[float, float]:
    """Return ``(max_head_damage, max_body_damage)`` for a fighter.

    Heavier divisions absorb more; a good chin stretches head capacity.
    """
    head, body = _LIGHTEST_CAPACITY
    for minimum, head_cap, body_cap in _DAMAGE_CAPACITY:
        if weight_kg >= minimum:
            head, body = head_cap, body_cap
            break
    return float(round(head * (0.9 + chin / 400))), float(body)


def calculate_optimal_range(reach_cm: float, style: FightingStyle) -> float:
    """Preferred fighting distance in feet, about 4 ft for a 180 cm reach."""
    distance = reach_cm / 45 + _STYLE_RANGE_OFFSET.get(style, 0.0)
    return clamp_float(distance, 2.5, 6.0)


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------

def build_fighter(payload: dict[str, Any], *, fighter_id: str | None = None) -> Fighter:
    """Build a fight-ready fighter from a profile payload.

    The payload uses the same shape as :meth:`Fighter.profile_dict`.
    Missing groups and ratings fall back to their defaults.
    """
    name = str(payload.get("name", "")).strip()
    if not name:
        raise FighterConfigError("Fighter profile needs a name")
    resolved_id = fighter_id or str(payload.get("id") or name)

    fighter = Fighter(
        fighter_id=resolved_id,
        name=name,
        physical=PhysicalAttributes.from_dict(payload.get("physical")),
        power=PowerAttributes.from_dict(payload.get("power")),
        speed=SpeedAttributes.from_dict(payload.get("speed")),
        conditioning=ConditioningAttributes.from_dict(payload.get("stamina")),
        defense=DefenseAttributes.from_dict(payload.get("defense")),
        offense=OffenseAttributes.from_dict(payload.get("offense")),
        technical=TechnicalAttributes.from_dict(payload.get("technical")),
        mental=MentalAttributes.from_dict(payload.get("mental")),
        style=StyleProfile.from_dict(payload.get("style")),
    )
    fighter.optimal_range = calculate_optimal_range(fighter.physical.reach, fighter.style.primary)
    reset_combat_state(fighter)
    return fighter


def reset_combat_state(fighter: Fighter, corner: str | None = None) -> None:
    """Give *fighter* a fresh combat state for the opening bell."""
    max_stamina = calculate_max_stamina(fighter.physical, fighter.conditioning)
    max_head, max_body = calculate_damage_capacity(fighter.physical.weight, fighter.mental.chin)
    x, y = START_POSITIONS.get(corner or fighter.fighter_id, (0.0, 0.0))
    fighter.combat = CombatState(
        stamina=max_stamina,
        max_stamina=max_stamina,
        max_head_damage=max_head,
        max_body_damage=max_body,
        position=Position(x, y),
    )


def reset_for_round(fighter: Fighter) -> None:
    """Clear round-scoped state at the start of a new round."""
    combat = fighter.combat
    fighter.transition_to(FighterState.NEUTRAL)
    combat.knockdowns_this_round = 0
    combat.is_hurt = False
    combat.hurt_duration = 0.0
    combat.stun_level = 0
    combat.stun_duration = 0


# ---------------------------------------------------------------------------
# Stun and hurt
# ---------------------------------------------------------------------------

def apply_stun(fighter: Fighter, damage: float, punch_type: PunchType | str) -> None:
    """Stun *fighter* after a significant hit.

    Lasts one to five ticks; a harder or longer stun replaces a weaker one.
    """
    duration = math.ceil(damage / 2.5) * (1 - fighter.mental.chin / 200)
    if PunchType.parse(punch_type) in _LONG_STUN_PUNCHES:
        duration *= 1.3
    ticks = max(1, min(5, round(duration)))
    level = 2 if damage >= 5 else 1

    combat = fighter.combat
    if not combat.is_stunned or level > combat.stun_level or ticks > combat.stun_duration:
        combat.stun_level = level
        combat.stun_duration = ticks


def update_stun(fighter: Fighter, tick_seconds: float = TICK_SECONDS) -> None:
    """Advance stun (in ticks) and hurt (in seconds) by one tick."""
    combat = fighter.combat
    if combat.stun_duration > 0:
        combat.stun_duration -= 1
        if combat.stun_duration <= 0:
            combat.stun_duration = 0
            combat.stun_level = 0
    if combat.is_hurt and combat.hurt_duration > 0:
        combat.hurt_duration -= tick_seconds
        if combat.hurt_duration <= 0:
            combat.is_hurt = False
            combat.hurt_duration = 0.0


def set_hurt(fighter: Fighter, duration: float) -> None:
    fighter.combat.is_hurt = True
    fighter.combat.hurt_duration = max(0.0, float(duration))


def can_throw_punch(
    fighter: Fighter,
    rng: random.Random | None = None,
    *,
    light_stun_throw_chance: float = 0.3,
) -> bool:
    """Heavily stunned fighters cannot punch; lightly stunned ones sometimes can."""
    combat = fighter.combat
    if not combat.is_stunned:
        return True
    if combat.stun_level >= 2:
        return False
    randomizer = rng or random.Random()
    return randomizer.random() <= light_stun_throw_chance


def stun_vulnerability(fighter: Fighter, *, heavy: float = 1.3, light: float = 1.15) -> float:
    """Damage multiplier for follow-up shots on a stunned fighter."""
    combat = fighter.combat
    if not combat.is_stunned:
        return 1.0
    return heavy if combat.stun_level >= 2 else light
