"""Ring geometry and fighter movement.

Coordinates are in feet with the origin at the center of a 20 ft ring.
Positions live on each fighter's combat state; the functions here read
and move them and keep both fighters inside the ropes and apart.
"""

from __future__ import annotations

import math
import random
from enum import Enum

from boxing_sim.constants import (
    CENTER_THRESHOLD_FT,
    CORNER_THRESHOLD_FT,
    MIN_SEPARATION_FT,
    POSITION_LIMIT_FT,
    ROPES_THRESHOLD_FT,
    START_POSITIONS,
)
from boxing_sim.models import Action, ActionType, Fighter, MoveDirection, MovementSubState, Position
from boxing_sim.rules_registry import ParameterStore, load_parameter_store

_CENTER_CONTROL_MARGIN = 2.0


class DistanceZone(str, Enum):
    CLINCH = "clinch"
    INSIDE = "inside"
    CLOSE = "close"
    MEDIUM = "medium"
    LONG = "long"
    OUT_OF_RANGE = "out_of_range"


_ZONE_ORDER: tuple[DistanceZone, ...] = (
    DistanceZone.CLINCH,
    DistanceZone.INSIDE,
    DistanceZone.CLOSE,
    DistanceZone.MEDIUM,
    DistanceZone.LONG,
)


def _store(params: ParameterStore | None) -> ParameterStore:
    return params or load_parameter_store()


def _ring(params: ParameterStore | None, key: str, default: float) -> float:
    return float(_store(params).section("position.ring").get(key, default))


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------

def distance(fighter: Fighter, opponent: Fighter) -> float:
    a = fighter.combat.position
    b = opponent.combat.position
    return math.hypot(b.x - a.x, b.y - a.y)


def distance_zone(fighter: Fighter, opponent: Fighter, params: ParameterStore | None = None) -> DistanceZone:
    zones = _store(params).section("position.zones")
    gap = distance(fighter, opponent)
    for zone in _ZONE_ORDER:
        if gap < float(zones.get(zone.value, 0.0)):
            return zone
    return DistanceZone.OUT_OF_RANGE


def is_in_corner(fighter: Fighter, params: ParameterStore | None = None) -> bool:
    threshold = _ring(params, "corner_threshold", CORNER_THRESHOLD_FT)
    position = fighter.combat.position
    return abs(position.x) > threshold and abs(position.y) > threshold


def is_on_ropes(fighter: Fighter, params: ParameterStore | None = None) -> bool:
    threshold = _ring(params, "ropes_threshold", ROPES_THRESHOLD_FT)
    position = fighter.combat.position
    return abs(position.x) > threshold or abs(position.y) > threshold


def is_in_center(fighter: Fighter, params: ParameterStore | None = None) -> bool:
    threshold = _ring(params, "center_threshold", CENTER_THRESHOLD_FT)
    position = fighter.combat.position
    return abs(position.x) < threshold and abs(position.y) < threshold


def center_control(fighter_a: Fighter, fighter_b: Fighter) -> str | None:
    """Return the id of the fighter clearly closer to center, if either is."""
    dist_a = math.hypot(fighter_a.combat.position.x, fighter_a.combat.position.y)
    dist_b = math.hypot(fighter_b.combat.position.x, fighter_b.combat.position.y)
    diff = dist_b - dist_a
    if diff > _CENTER_CONTROL_MARGIN:
        return fighter_a.fighter_id
    if diff < -_CENTER_CONTROL_MARGIN:
        return fighter_b.fighter_id
    return None


def ring_control(fighter_a: Fighter, fighter_b: Fighter) -> dict[str, int]:
    """Share of ring control (0-100) for each fighter by distance to center."""
    dist_a = math.hypot(fighter_a.combat.position.x, fighter_a.combat.position.y)
    dist_b = math.hypot(fighter_b.combat.position.x, fighter_b.combat.position.y)
    total = dist_a + dist_b
    if total == 0:
        return {fighter_a.fighter_id: 50, fighter_b.fighter_id: 50}
    return {
        fighter_a.fighter_id: int(round((1 - dist_a / total) * 100)),
        fighter_b.fighter_id: int(round((1 - dist_b / total) * 100)),
    }


# ---------------------------------------------------------------------------
# Movement primitives
# ---------------------------------------------------------------------------

def clamp_to_ring(fighter: Fighter, params: ParameterStore | None = None) -> None:
    limit = _ring(params, "position_limit", POSITION_LIMIT_FT)
    position = fighter.combat.position
    position.x = max(-limit, min(limit, position.x))
    position.y = max(-limit, min(limit, position.y))


def move_toward(fighter: Fighter, target: Position, step: float) -> None:
    """Step toward *target* without overshooting it."""
    position = fighter.combat.position
    dx = target.x - position.x
    dy = target.y - position.y
    gap = math.hypot(dx, dy)
    if gap < 0.1:
        return
    ratio = min(1.0, step / gap)
    position.x += dx * ratio
    position.y += dy * ratio


def move_away(fighter: Fighter, target: Position, step: float, rng: random.Random | None = None) -> None:
    """Step directly away from *target*; on top of it, pick a random heading."""
    position = fighter.combat.position
    dx = position.x - target.x
    dy = position.y - target.y
    gap = math.hypot(dx, dy)
    if gap < 0.1:
        randomizer = rng or random.Random()
        angle = randomizer.random() * math.pi * 2
        position.x += math.cos(angle) * step
        position.y += math.sin(angle) * step
        return
    position.x += dx / gap * step
    position.y += dy / gap * step


def move_lateral(fighter: Fighter, target: Position, step: float, direction: MoveDirection) -> None:
    """Side-step around *target*, to the fighter's left or right."""
    position = fighter.combat.position
    dx = target.x - position.x
    dy = target.y - position.y
    if direction is MoveDirection.LEFT:
        perp_x, perp_y = -dy, dx
    else:
        perp_x, perp_y = dy, -dx
    length = math.hypot(perp_x, perp_y)
    if length < 0.1:
        return
    position.x += perp_x / length * step
    position.y += perp_y / length * step


def cut_off_ring(fighter: Fighter, opponent: Fighter, step: float, params: ParameterStore | None = None) -> None:
    """Move to a point between the opponent and the center, trapping them."""
    table = _store(params).section("position.cut_off")
    fraction = float(table.get("intercept_fraction", 0.3))
    target = opponent.combat.position
    intercept = Position(target.x + (0.0 - target.x) * fraction, target.y + (0.0 - target.y) * fraction)
    move_toward(fighter, intercept, step * float(table.get("speed_multiplier", 1.2)))


def movement_speed(
    fighter: Fighter,
    direction: MoveDirection | str | None,
    *,
    speed_modifier: float = 0.0,
    params: ParameterStore | None = None,
) -> float:
    """Feet per second for a move in *direction*."""
    store = _store(params)
    speeds = store.section("position.speeds")
    mods = store.section("position.speed_modifiers")
    key = str(getattr(direction, "value", direction))
    base = float(speeds.get(key, speeds.get("fallback", 1.5)))

    foot = float(mods.get("foot_speed_base", 0.5)) + fighter.speed.foot_speed / float(mods.get("foot_speed_divisor", 100))
    stamina = float(mods.get("stamina_base", 0.6)) + fighter.stamina_percent() * float(mods.get("stamina_factor", 0.4))
    footwork = float(mods.get("footwork_base", 0.8)) + fighter.technical.footwork / float(mods.get("footwork_divisor", 250))
    return max(0.0, base * foot * stamina * footwork * (1 + speed_modifier))


def apply_movement(
    fighter: Fighter,
    opponent: Fighter,
    action: Action,
    tick_seconds: float,
    *,
    speed_modifier: float = 0.0,
    rng: random.Random | None = None,
    params: ParameterStore | None = None,
) -> None:
    """Carry out a move action for one tick, then clamp to the ring."""
    if action.type is not ActionType.MOVE:
        return
    store = _store(params)
    step = movement_speed(fighter, action.direction, speed_modifier=speed_modifier, params=store) * tick_seconds
    target = opponent.combat.position

    if action.direction is MoveDirection.FORWARD:
        move_toward(fighter, target, step)
    elif action.direction is MoveDirection.BACKWARD:
        move_away(fighter, target, step, rng)
    elif action.direction in (MoveDirection.LEFT, MoveDirection.RIGHT):
        move_lateral(fighter, target, step, action.direction)

    if action.cutting:
        cut_off_ring(fighter, opponent, step, store)
    clamp_to_ring(fighter, store)


def apply_state_movement(
    fighter: Fighter,
    opponent: Fighter,
    sub_state: MovementSubState | None,
    tick_seconds: float,
    *,
    rng: random.Random | None = None,
    params: ParameterStore | None = None,
) -> None:
    """Drift implied by a movement sub-state when no explicit move was chosen."""
    store = _store(params)
    step = float(store.section("position.speeds").get("fallback", 1.5)) * tick_seconds
    target = opponent.combat.position

    if sub_state is MovementSubState.CUTTING_OFF:
        cut_off_ring(fighter, opponent, step, store)
    elif sub_state is MovementSubState.CIRCLING:
        randomizer = rng or random.Random()
        side = MoveDirection.LEFT if randomizer.random() > 0.5 else MoveDirection.RIGHT
        move_lateral(fighter, target, step, side)
    elif sub_state is MovementSubState.RETREATING:
        move_away(fighter, target, step, rng)
    clamp_to_ring(fighter, store)


# ---------------------------------------------------------------------------
# Both fighters
# ---------------------------------------------------------------------------

def prevent_overlap(fighter_a: Fighter, fighter_b: Fighter, params: ParameterStore | None = None) -> None:
    """Push the fighters apart symmetrically if they are closer than allowed.

    Both are clamped back inside the ropes afterwards, so a fighter pinned
    on the ropes can end up slightly closer than the minimum.
    """
    store = _store(params)
    minimum = _ring(store, "min_separation", MIN_SEPARATION_FT)
    a = fighter_a.combat.position
    b = fighter_b.combat.position
    dx = b.x - a.x
    dy = b.y - a.y
    gap = math.hypot(dx, dy)
    if gap <= 0 or gap >= minimum:
        return
    overlap = minimum - gap
    push_x = dx / gap * overlap * 0.5
    push_y = dy / gap * overlap * 0.5
    a.x -= push_x
    a.y -= push_y
    b.x += push_x
    b.y += push_y
    clamp_to_ring(fighter_a, store)
    clamp_to_ring(fighter_b, store)


def separate(
    fighter_a: Fighter,
    fighter_b: Fighter,
    target_distance: float | None = None,
    params: ParameterStore | None = None,
) -> None:
    """Referee break: set the fighters *target_distance* apart on their current line."""
    store = _store(params)
    gap = target_distance if target_distance is not None else _ring(store, "clinch_break_distance", 3.0)
    a = fighter_a.combat.position
    b = fighter_b.combat.position
    center_x = (a.x + b.x) / 2
    center_y = (a.y + b.y) / 2
    angle = math.atan2(b.y - a.y, b.x - a.x)
    half = gap / 2
    fighter_a.combat.position = Position(center_x - math.cos(angle) * half, center_y - math.sin(angle) * half)
    fighter_b.combat.position = Position(center_x + math.cos(angle) * half, center_y + math.sin(angle) * half)
    clamp_to_ring(fighter_a, store)
    clamp_to_ring(fighter_b, store)


def reset_positions(fighter_a: Fighter, fighter_b: Fighter) -> None:
    """Send both fighters back to their opening-bell marks."""
    fighter_a.combat.position = Position(*START_POSITIONS["A"])
    fighter_b.combat.position = Position(*START_POSITIONS["B"])
