"""Punch resolution for a single tick.

Given both fighters' decisions, decides which punches are thrown, whether
they land, how the defender answers them, how much damage lands and
whether a landed head shot drops the defender.  One resolver belongs to
one fight: it keeps the per-fighter activity cooldowns between ticks.

Tunable values are read once from ``combat.resolution`` and
``combat.punches`` in the model parameters.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from boxing_sim.models import (
    ActionType,
    BLOCK_SUB_STATES,
    BlockType,
    Decision,
    DefensiveSubState,
    EvadeType,
    FightContext,
    Fighter,
    FighterState,
    FightingStyle,
    HitLocation,
    KnockdownEvent,
    Outcome,
    PunchResult,
    PunchType,
    ResolutionResult,
)
from boxing_sim.modules.attribute_engine import can_throw_punch, stun_vulnerability
from boxing_sim.modules.position_model import distance as ring_distance
from boxing_sim.modules.position_model import is_in_corner, is_on_ropes
from boxing_sim.modules.weight_class_engine import weight_class_profile
from boxing_sim.rules_registry import ParameterStore, load_parameter_store
from boxing_sim.utils import clamp_float

logger = logging.getLogger(__name__)

# (close < 3 ft, mid, far >= 4 ft) accuracy multipliers by (attacker, defender).
STYLE_MATCHUPS: dict[tuple[FightingStyle, FightingStyle], tuple[float, float, float]] = {
    (FightingStyle.INSIDE_FIGHTER, FightingStyle.SWARMER): (1.18, 0.94, 0.94),
    (FightingStyle.SWARMER, FightingStyle.INSIDE_FIGHTER): (0.88, 1.04, 1.04),
    (FightingStyle.SLUGGER, FightingStyle.OUT_BOXER): (0.90, 0.90, 0.90),
    (FightingStyle.SLUGGER, FightingStyle.COUNTER_PUNCHER): (0.88, 0.88, 0.88),
    (FightingStyle.BOXER_PUNCHER, FightingStyle.SWARMER): (0.92, 1.0, 1.08),
    (FightingStyle.SWARMER, FightingStyle.BOXER_PUNCHER): (1.12, 1.0, 0.92),
}

_RANGY_DEFENDERS = frozenset(
    {FightingStyle.OUT_BOXER, FightingStyle.COUNTER_PUNCHER, FightingStyle.BOXER_PUNCHER}
)
_RANGY_ATTACKERS = frozenset({FightingStyle.OUT_BOXER, FightingStyle.BOXER_PUNCHER})
_INSIDE_STYLES = frozenset({FightingStyle.SLUGGER, FightingStyle.INSIDE_FIGHTER, FightingStyle.SWARMER})

_ARM_BLOCK = "arm"
_COMBINATION = "combination"


def style_matchup_modifier(attacker: FightingStyle, defender: FightingStyle, distance: float) -> float:
    """Accuracy multiplier for a stylistic edge at this distance."""
    row = STYLE_MATCHUPS.get((attacker, defender))
    if row is None:
        return 1.0
    close, mid, far = row
    if distance < 3.0:
        return close
    if distance >= 4.0:
        return far
    return mid


def weight_differential_modifier(attacker: Fighter, defender: Fighter, table: Mapping[str, Any]) -> float:
    """Damage multiplier from the weight ratio; heavier hits harder."""
    ratio = attacker.physical.weight / max(1.0, defender.physical.weight)
    if ratio > float(table.get("weight_bonus_threshold", 1.1)):
        return min(
            float(table.get("weight_bonus_cap", 2.5)),
            1 + (ratio - 1) * float(table.get("weight_bonus_factor", 2.0)),
        )
    if ratio < float(table.get("weight_penalty_threshold", 0.9)):
        return max(float(table.get("weight_penalty_floor", 0.3)), ratio)
    return 1.0


@dataclass
class DefenseResult:
    blocked: bool = False
    evaded: bool = False
    partial: bool = False
    block_type: str | None = None
    evade_type: str | None = None
    damage_reduction: float = 0.0


class CombatResolver:
    """Resolves both fighters' punches for one tick at a time."""

    def __init__(self, params: ParameterStore | None = None, rng: random.Random | None = None) -> None:
        self._params = params or load_parameter_store()
        self._rng = rng or random.Random()
        self._cooldowns: dict[str, int] = {}
        self._round = 1

        resolution = self._params.section("combat.resolution")
        self._punches = self._params.section("combat.punches")
        self._accuracy = resolution.get("accuracy", {})
        self._defense = resolution.get("defense", {})
        self._evasion = resolution.get("evasion", {})
        self._blocking = resolution.get("blocking", {})
        self._passive = resolution.get("passive", {})
        self._damage = resolution.get("damage", {})
        self._combos = resolution.get("combinations", {})
        self._knockdown = resolution.get("knockdown_check", {})
        self._stun = resolution.get("stun", {})
        self._light_stun_throw = float(resolution.get("activity", {}).get("light_stun_throw_chance", 0.3))

    # ------------------------------------------------------------------
    # Tick entry point
    # ------------------------------------------------------------------

    def resolve(
        self,
        fighter_a: Fighter,
        fighter_b: Fighter,
        decision_a: Decision,
        decision_b: Decision,
        context: FightContext | None = None,
    ) -> ResolutionResult:
        """Resolve one tick of punches from both corners.

        At most one knockdown is reported per tick.
        """
        context = context or FightContext()
        self._round = max(1, context.round_number)
        result = ResolutionResult()

        for attacker, defender, own, other in (
            (fighter_a, fighter_b, decision_a, decision_b),
            (fighter_b, fighter_a, decision_b, decision_a),
        ):
            if own.action.type is ActionType.PUNCH:
                if self._passes_activity_gate(attacker) and can_throw_punch(
                    attacker, self._rng, light_stun_throw_chance=self._light_stun_throw
                ):
                    result.add(self._resolve_punch(attacker, defender, own, other, context))
            elif self._cooldowns.get(attacker.fighter_id, 0) > 0:
                self._cooldowns[attacker.fighter_id] -= 1

        fighters = {fighter_a.fighter_id: fighter_a, fighter_b.fighter_id: fighter_b}
        for hit in result.hits:
            knockdown = self.check_knockdown(hit, fighters[hit.attacker], fighters[str(hit.target)])
            if knockdown is not None:
                result.knockdown = knockdown
                break
        return result

    def reset_cooldowns(self) -> None:
        self._cooldowns.clear()

    def _passes_activity_gate(self, fighter: Fighter) -> bool:
        profile = weight_class_profile(fighter, self._params)
        remaining = self._cooldowns.get(fighter.fighter_id, 0)
        if remaining > 0:
            self._cooldowns[fighter.fighter_id] = remaining - 1
            return False
        if self._rng.random() > profile.activity_rate:
            return False
        self._cooldowns[fighter.fighter_id] = profile.recovery_ticks
        return True

    # ------------------------------------------------------------------
    # Punches
    # ------------------------------------------------------------------

    def _punch_stats(self, punch: PunchType | None) -> Mapping[str, Any] | None:
        if punch is None:
            return None
        return self._punches.get(punch.value)

    def _resolve_punch(
        self,
        attacker: Fighter,
        defender: Fighter,
        decision: Decision,
        defender_decision: Decision,
        context: FightContext,
    ) -> PunchResult:
        action = decision.action
        if action.is_combination:
            return self._resolve_combination(attacker, defender, decision, defender_decision, context)

        attacker_id = attacker.fighter_id
        defender_id = defender.fighter_id
        punch = PunchType.parse(action.punch_type)
        stats = self._punch_stats(punch)
        if punch is None or stats is None:
            return PunchResult(Outcome.MISS, action.punch_type or "unknown", attacker_id, reason="unknown_punch")

        distance = ring_distance(attacker, defender)
        if distance > float(stats.get("range", 0.0)) + 1:
            return PunchResult(Outcome.MISS, punch, attacker_id, defender_id, reason="out_of_range")

        accuracy = self.calculate_accuracy(
            attacker,
            defender,
            punch,
            distance,
            is_counter=action.is_counter,
            accuracy_modifier=context.modifiers_for(attacker_id).accuracy,
        )
        roll = self._rng.random()
        if roll > accuracy:
            return PunchResult(Outcome.MISS, punch, attacker_id, defender_id, accuracy=accuracy, roll=roll)

        location = action.target or punch.location
        defense = self.resolve_defense(
            defender,
            defender_decision,
            punch,
            location,
            defense_modifier=context.modifiers_for(defender_id).defense,
        )
        if defense.blocked:
            return PunchResult(
                Outcome.BLOCKED,
                punch,
                attacker_id,
                defender_id,
                block_type=defense.block_type,
                damage_reduction=defense.damage_reduction,
            )
        if defense.evaded:
            return PunchResult(Outcome.EVADED, punch, attacker_id, defender_id, evade_type=defense.evade_type)

        base = self.calculate_damage(
            attacker,
            defender,
            punch,
            distance,
            is_counter=action.is_counter,
            is_partial=defense.partial,
            power_modifier=context.modifiers_for(attacker_id).power,
        )
        vulnerability = stun_vulnerability(
            defender,
            heavy=float(self._stun.get("heavy_vulnerability", 1.3)),
            light=float(self._stun.get("light_vulnerability", 1.15)),
        )
        damage = int(round(base * vulnerability))
        return PunchResult(
            Outcome.HIT,
            punch,
            attacker_id,
            defender_id,
            accuracy=accuracy,
            roll=roll,
            location=location,
            damage=damage,
            quality="partial" if defense.partial else "clean",
            is_counter=action.is_counter,
            caused_stun=damage >= int(self._stun.get("stun_damage_threshold", 3)),
        )

    def _resolve_combination(
        self,
        attacker: Fighter,
        defender: Fighter,
        decision: Decision,
        defender_decision: Decision,
        context: FightContext,
    ) -> PunchResult:
        attacker_id = attacker.fighter_id
        defender_id = defender.fighter_id
        combination = decision.action.combination
        profile = weight_class_profile(attacker, self._params)
        accuracy_decay = float(self._combos.get("accuracy_decay", 0.92))
        block_decay = float(self._combos.get("block_decay", 0.95))
        break_on_miss = float(self._combos.get("break_on_miss_chance", 0.5))
        break_on_evade = float(self._combos.get("break_on_evade_chance", 0.4))
        attacker_mods = context.modifiers_for(attacker_id)
        defense_modifier = context.modifiers_for(defender_id).defense

        results: list[PunchResult] = []
        accuracy_mod = 1.0
        for raw in combination[: min(len(combination), profile.max_combo_length)]:
            punch = PunchType.parse(raw)
            stats = self._punch_stats(punch)
            if punch is None or stats is None:
                continue

            distance = ring_distance(attacker, defender)
            if distance > float(stats.get("range", 0.0)) + 1:
                results.append(PunchResult(Outcome.MISS, punch, attacker_id, defender_id, reason="out_of_range"))
                continue

            accuracy = accuracy_mod * self.calculate_accuracy(
                attacker, defender, punch, distance, accuracy_modifier=attacker_mods.accuracy
            )
            roll = self._rng.random()
            if roll > accuracy:
                results.append(PunchResult(Outcome.MISS, punch, attacker_id, defender_id, accuracy=accuracy, roll=roll))
                if self._rng.random() > break_on_miss:
                    break
                continue

            defense = self.resolve_defense(
                defender, defender_decision, punch, HitLocation.HEAD, defense_modifier=defense_modifier
            )
            if defense.blocked:
                results.append(
                    PunchResult(
                        Outcome.BLOCKED,
                        punch,
                        attacker_id,
                        defender_id,
                        block_type=defense.block_type,
                        damage_reduction=defense.damage_reduction,
                    )
                )
                accuracy_mod *= block_decay
                continue
            if defense.evaded:
                results.append(PunchResult(Outcome.EVADED, punch, attacker_id, defender_id, evade_type=defense.evade_type))
                if self._rng.random() > 1 - break_on_evade:
                    break
                continue

            damage = self.calculate_damage(
                attacker,
                defender,
                punch,
                distance,
                is_partial=defense.partial,
                power_modifier=attacker_mods.power,
            )
            results.append(
                PunchResult(
                    Outcome.HIT,
                    punch,
                    attacker_id,
                    defender_id,
                    accuracy=accuracy,
                    roll=roll,
                    location=punch.location,
                    damage=damage,
                    quality="partial" if defense.partial else "clean",
                    caused_stun=damage >= int(self._stun.get("stun_damage_threshold", 3)),
                )
            )
            accuracy_mod *= accuracy_decay

        hits = [entry for entry in results if entry.outcome is Outcome.HIT]
        if hits:
            first = hits[0]
            first.combination_hits = len(hits)
            first.combination_total = len(combination)
            return first
        if results:
            return results[0]
        return PunchResult(Outcome.MISS, _COMBINATION, attacker_id, defender_id)

    # ------------------------------------------------------------------
    # Accuracy
    # ------------------------------------------------------------------

    def calculate_accuracy(
        self,
        attacker: Fighter,
        defender: Fighter,
        punch: PunchType,
        distance: float,
        *,
        is_counter: bool = False,
        accuracy_modifier: float = 0.0,
    ) -> float:
        """Chance the punch lands before the defender reacts, within [min, max]."""
        table = self._accuracy
        stats = self._punch_stats(punch) or {}
        optimal = float(stats.get("range", 4.0))

        skill = attacker.offense.jab_accuracy if punch.is_jab else attacker.offense.power_accuracy
        skill_mod = float(table.get("attacker_skill_base", 0.5)) + skill / float(table.get("attacker_skill_divisor", 100))
        hand_speed_mod = float(table.get("hand_speed_base", 0.8)) + attacker.speed.hand_speed / float(
            table.get("hand_speed_divisor", 500)
        )
        range_mod = max(
            float(table.get("range_floor", 0.3)),
            1 - abs(distance - optimal) * float(table.get("range_penalty", 0.15)),
        )
        accuracy = float(stats.get("base_accuracy", 0.3)) * (1 + accuracy_modifier) * skill_mod * hand_speed_mod * range_mod

        accuracy *= self._reach_modifier(attacker, defender, distance)

        attacker_style = attacker.style.primary
        defender_style = defender.style.primary
        if distance > 4 and defender_style in _RANGY_DEFENDERS:
            accuracy *= 0.95 - defender.technical.outside_fighting / 750
        if defender.combat.state is FighterState.MOVING:
            accuracy *= float(table.get("moving_target_penalty", 0.85))
        if is_counter:
            accuracy *= float(table.get("counter_multiplier", 1.2)) + attacker.offense.counter_punching / float(
                table.get("counter_skill_divisor", 200)
            )
        if distance < 3.5 and attacker_style in _INSIDE_STYLES:
            accuracy *= (1.0 + attacker.technical.inside_fighting / 250) * (1.0 if punch.is_jab else 1.10)
        if distance < 3 and attacker_style is FightingStyle.OUT_BOXER:
            accuracy *= 0.85
        if distance >= 4 and attacker_style in _RANGY_ATTACKERS:
            accuracy *= 1 + (attacker.technical.outside_fighting - 50) / 250

        management = attacker.technical.distance_management - defender.technical.distance_management
        if management > 10:
            accuracy *= 1 + management / 250
        elif management < -10:
            accuracy *= 1 + management / 300

        accuracy *= style_matchup_modifier(attacker_style, defender_style, distance)

        first_step = attacker.speed.first_step - defender.speed.first_step
        if first_step > 10 and distance < 3.5:
            accuracy *= 1 + (first_step - 10) / 100
        if defender.combat.is_hurt:
            accuracy *= float(table.get("hurt_target_bonus", 1.3))

        stamina = attacker.stamina_percent()
        if stamina < 0.4:
            accuracy *= float(table.get("fatigue_severe_penalty", 0.8))
        elif stamina < 0.6:
            accuracy *= float(table.get("fatigue_moderate_penalty", 0.9))

        adaptability = attacker.technical.adaptability
        if adaptability > 70 and self._round > 2:
            accuracy *= 1 + (self._round - 2) * 0.015 * (adaptability - 70) / 100
        experience = attacker.mental.experience
        if experience > 80:
            accuracy *= 1 + (experience - 80) / 500

        return min(float(table.get("max_accuracy", 0.95)), max(float(table.get("min_accuracy", 0.1)), accuracy))

    def _reach_modifier(self, attacker: Fighter, defender: Fighter, distance: float) -> float:
        reach_diff = attacker.physical.reach - defender.physical.reach
        if reach_diff != 0 and distance >= 3.5:
            return 1 + reach_diff / 100 * float(self._accuracy.get("reach_bonus_factor", 0.6)) * min(2.0, distance / 3.5)
        if reach_diff < 0 and distance < 2.5:
            # The shorter fighter works better once inside the long guard.
            return 1 + abs(reach_diff) / 100 * 0.30
        return 1.0

    # ------------------------------------------------------------------
    # Defense
    # ------------------------------------------------------------------

    def resolve_defense(
        self,
        defender: Fighter,
        defender_decision: Decision | None,
        punch: PunchType,
        location: HitLocation,
        *,
        defense_modifier: float = 0.0,
    ) -> DefenseResult:
        """Return exactly one of blocked, evaded, partial or a clean opening."""
        table = self._defense
        result = DefenseResult()
        combat = defender.combat
        action = defender_decision.action if defender_decision is not None else None

        if combat.is_hurt:
            chance = max(
                float(table.get("hurt_defense_floor", 0.1)),
                float(table.get("hurt_defense_chance", 0.3)) + defense_modifier,
            )
            if self._rng.random() > chance:
                return result

        if is_in_corner(defender, self._params):
            if self._rng.random() > float(table.get("corner_defense_chance", 0.4)):
                return result
        elif is_on_ropes(defender, self._params):
            if self._rng.random() > float(table.get("ropes_defense_chance", 0.6)):
                return result

        damage_percent = defender.head_damage_percent()
        gate = None
        if damage_percent >= float(table.get("critical_damage_threshold", 0.95)):
            gate = float(table.get("critical_defense_chance", 0.1))
        elif damage_percent >= float(table.get("high_damage_threshold", 0.85)):
            gate = float(table.get("high_damage_defense_chance", 0.25))
        elif damage_percent >= float(table.get("moderate_damage_threshold", 0.7)):
            gate = float(table.get("moderate_damage_defense_chance", 0.5))
        if gate is not None and self._rng.random() > gate:
            return result

        guard = combat.sub_state if isinstance(combat.sub_state, DefensiveSubState) else None
        evading = action is not None and action.type is ActionType.EVADE
        if evading or guard is DefensiveSubState.HEAD_MOVEMENT:
            if self._rng.random() < self.calculate_evade_chance(defender, punch, location):
                result.evaded = True
                evade = action.evade_type if evading and action.evade_type is not None else EvadeType.SLIP
                result.evade_type = evade.value
                return result

        blocking = action is not None and action.type is ActionType.BLOCK
        if blocking and guard is None and action.block_type is not None:
            guard = BLOCK_SUB_STATES.get(action.block_type)
        if blocking or guard in (DefensiveSubState.HIGH_GUARD, DefensiveSubState.PHILLY_SHELL):
            self._roll_block(defender, guard, punch, location, result)
            if result.blocked or result.partial:
                return result

        if self._rng.random() < self.calculate_passive_defense(defender):
            result.partial = True
            result.damage_reduction = float(self._passive.get("partial_reduction", 0.3))
        return result

    def calculate_evade_chance(self, defender: Fighter, punch: PunchType, location: HitLocation) -> float:
        table = self._evasion
        chance = (
            float(table.get("base_chance", 0.1))
            + defender.defense.head_movement / float(table.get("head_movement_divisor", 500))
            + defender.speed.reflexes / float(table.get("reflexes_divisor", 600))
        )
        if location is HitLocation.BODY:
            chance *= float(table.get("body_shot_multiplier", 0.4))
        if punch.is_hook or punch.is_uppercut:
            chance *= float(table.get("hook_uppercut_multiplier", 0.7))
        if defender.stamina_percent() < 0.4:
            chance *= float(table.get("fatigue_penalty", 0.7))

        threshold = float(table.get("experience_bonus_threshold", 80))
        if defender.mental.experience > threshold:
            chance *= 1 + (defender.mental.experience - threshold) / float(table.get("experience_bonus_divisor", 200))
        adaptability = defender.technical.adaptability
        if adaptability > 70 and self._round > 3:
            chance *= 1 + (self._round - 3) * 0.01 * (adaptability - 70) / 100
        return min(float(table.get("max_evade_chance", 0.45)), chance)

    def _roll_block(
        self,
        defender: Fighter,
        guard: DefensiveSubState | None,
        punch: PunchType,
        location: HitLocation,
        result: DefenseResult,
    ) -> None:
        table = self._blocking
        base = float(table.get("base_chance", 0.3))
        if guard is DefensiveSubState.HIGH_GUARD:
            if location is HitLocation.BODY:
                chance = base + float(table.get("high_guard_bonus", 0.25)) - float(table.get("high_guard_body_penalty", 0.15))
                reduction = float(table.get("high_guard_body_reduction", 0.4))
            else:
                chance = base + float(table.get("high_guard_bonus", 0.25))
                reduction = float(table.get("high_guard_reduction", 0.7))
            block_type = BlockType.HIGH_GUARD.value
        elif guard is DefensiveSubState.PHILLY_SHELL:
            if punch.is_straight:
                chance = base + float(table.get("philly_shell_straight_bonus", 0.3))
                reduction = float(table.get("philly_shell_straight_reduction", 0.8))
            else:
                chance = base + float(table.get("philly_shell_hook_bonus", 0.1))
                reduction = float(table.get("philly_shell_hook_reduction", 0.5))
            block_type = BlockType.PHILLY_SHELL.value
        else:
            chance = base
            reduction = float(table.get("arm_reduction", 0.6))
            block_type = _ARM_BLOCK

        chance += defender.defense.blocking / float(table.get("skill_divisor", 400))
        if punch.is_straight and defender.defense.parrying > float(table.get("parry_threshold", 60)):
            chance += float(table.get("parry_bonus", 0.1))
            reduction = float(table.get("parry_reduction", 0.9))
            block_type = BlockType.PARRY.value

        roll = self._rng.random()
        if roll < chance:
            result.blocked = True
            result.block_type = block_type
            result.damage_reduction = reduction
        elif roll < chance + float(table.get("partial_threshold", 0.15)):
            result.partial = True
            result.damage_reduction = float(table.get("partial_reduction", 0.3))

    def calculate_passive_defense(self, defender: Fighter) -> float:
        table = self._passive
        return (
            float(table.get("base_chance", 0.1))
            + defender.defense.ring_awareness / float(table.get("ring_awareness_divisor", 500))
            + defender.mental.experience / float(table.get("experience_divisor", 500))
        )

    # ------------------------------------------------------------------
    # Damage
    # ------------------------------------------------------------------

    def calculate_damage(
        self,
        attacker: Fighter,
        defender: Fighter,
        punch: PunchType,
        distance: float,
        *,
        is_counter: bool = False,
        is_partial: bool = False,
        power_modifier: float = 0.0,
    ) -> int:
        """Damage of a landed punch before stun vulnerability; at least 1."""
        table = self._damage
        stats = self._punch_stats(punch) or {}
        power = attacker.power

        if punch.is_jab:
            rating = (power.power_left + power.power_right) / 4
        elif punch.is_lead:
            rating = power.power_left
        else:
            rating = power.power_right
        power_mod = float(table.get("power_base", 0.6)) + rating / float(table.get("power_divisor", 250))

        ko = power.knockout_power
        elite = float(table.get("ko_power_elite_threshold", 85))
        good = float(table.get("ko_power_good_threshold", 70))
        if not punch.is_jab and ko >= elite:
            power_mod *= float(table.get("ko_power_elite_bonus", 1.15)) + (ko - elite) / 100
        elif not punch.is_jab and ko >= good:
            power_mod *= 1.0 + (ko - good) / 150

        damage = float(stats.get("base_damage", 1.0))
        damage *= weight_class_profile(attacker, self._params).damage_multiplier
        damage *= weight_differential_modifier(attacker, defender, table)
        damage *= 1 + power_modifier
        damage *= power_mod
        damage *= max(
            float(table.get("distance_floor", 0.5)),
            1 - abs(distance - float(stats.get("range", 4.0))) * float(table.get("distance_penalty", 0.1)),
        )
        if is_counter:
            damage *= float(table.get("counter_base_bonus", 1.15)) + attacker.offense.counter_punching / float(
                table.get("counter_skill_divisor", 400)
            )
        if is_partial:
            damage *= float(table.get("partial_hit_multiplier", 0.5))
        if punch.is_body:
            damage *= float(table.get("body_punch_base", 0.7)) + power.body_punching / float(
                table.get("body_punch_divisor", 150)
            )

        stamina = attacker.stamina_percent()
        if stamina < float(table.get("fatigue_severe_threshold", 0.25)):
            damage *= float(table.get("fatigue_severe_multiplier", 0.6))
        elif stamina < float(table.get("fatigue_moderate_threshold", 0.4)):
            damage *= float(table.get("fatigue_moderate_multiplier", 0.75))
        elif stamina < float(table.get("fatigue_mild_threshold", 0.6)):
            damage *= float(table.get("fatigue_mild_multiplier", 0.9))

        damage *= float(table.get("variance_min", 0.85)) + self._rng.random() * float(table.get("variance_range", 0.3))
        return max(1, int(round(damage)))

    # ------------------------------------------------------------------
    # Knockdowns
    # ------------------------------------------------------------------

    def check_knockdown(self, hit: PunchResult, attacker: Fighter, target: Fighter) -> KnockdownEvent | None:
        """Roll for a knockdown from a landed head shot.

        A direct knockdown needs damage past the chin threshold and then
        beats the chin's resistance roll.  A flash knockdown needs a clean
        power punch and is capped by chin tier.
        """
        if hit.location is not HitLocation.HEAD:
            return None
        punch = PunchType.parse(hit.punch_type)
        if punch is None:
            return None

        table = self._knockdown
        head = target.head_damage_percent()
        chin = target.mental.chin
        stamina = target.stamina_percent()
        fresh = head < float(table.get("min_damage_percent", 0.15))

        threshold = float(table.get("chin_base", 3)) + chin / float(table.get("chin_divisor", 15))
        reduction_start = float(table.get("damage_reduction_threshold", 0.5))
        if head > reduction_start:
            threshold *= 1 - (head - reduction_start) * float(table.get("damage_reduction_factor", 0.3))
        if stamina < float(table.get("stamina_severe_threshold", 0.25)):
            threshold *= float(table.get("stamina_severe_reduction", 0.85))
        elif stamina < float(table.get("stamina_moderate_threshold", 0.4)):
            threshold *= float(table.get("stamina_moderate_reduction", 0.92))

        zero_threshold = float(table.get("zero_stamina_threshold", 0.1))
        exhaustion = 1.0
        if stamina <= zero_threshold:
            exhaustion = 1.0 + (float(table.get("zero_stamina_max_multiplier", 2.0)) - 1.0) * (
                1 - stamina / zero_threshold
            )

        direct_possible = not fresh or hit.damage >= threshold * float(
            table.get("direct_knockdown_fresh_multiplier", 1.3)
        )
        if direct_possible and hit.damage >= threshold:
            if self._rng.random() > chin_resistance(chin) / exhaustion:
                return self._knockdown_event(hit, punch, flash=False)

        flash_possible = not fresh or hit.damage >= float(table.get("flash_damage_threshold", 8))
        if not (flash_possible and hit.is_clean and punch.is_power):
            return None

        ko = attacker.power.knockout_power
        if chin - ko >= float(table.get("flash_chin_advantage_immunity", 25)) and head < 0.5:
            return None

        chance = self._flash_chance(punch, ko, chin, head, stamina, fresh) * exhaustion
        if self._rng.random() < min(self._flash_cap(chin, ko), chance):
            return self._knockdown_event(hit, punch, flash=True)
        return None

    def _flash_chance(self, punch: PunchType, ko: int, chin: int, head: float, stamina: float, fresh: bool) -> float:
        chance = max(0.0, (ko - 40) / 200) * (1 - chin / 150)

        if chin >= 90:
            chance *= 0.25
        elif chin >= 85:
            chance *= 0.4
        elif chin >= 80:
            chance *= 0.6

        if ko < 60:
            chance *= 0.3
        elif ko < 70:
            chance *= 0.5

        if ko >= 95:
            chance *= 1.6 + (ko - 95) / 50
        elif ko >= 90:
            chance *= 1.4
        elif ko >= 80:
            chance *= 1.2

        if self._round <= 5 and ko >= 94:
            fade = 1 - (self._round - 1) / 5
            chance *= 1 + (ko - 92) / 25 * fade * 1.5

        if head > 0.4:
            chance *= 1 + (head - 0.4) * 1.5
        if fresh:
            chance *= 0.5 if ko >= 90 else 0.35
        if stamina < 0.2:
            chance *= 1.3
        elif stamina < 0.4:
            chance *= 1.1
        if punch.is_hook or punch.is_uppercut or punch is PunchType.CROSS:
            chance *= 1.2
        return chance

    def _flash_cap(self, chin: int, ko: int) -> float:
        table = self._knockdown
        if chin >= int(table.get("iron_chin_threshold", 95)):
            return float(table.get("flash_cap_iron_chin", 0.008))

        if chin >= 90:
            cap = float(table.get("flash_cap_elite_chin", 0.025))
        elif chin >= 85:
            cap = float(table.get("flash_cap_good_chin", 0.035))
        elif chin >= 80:
            cap = float(table.get("flash_cap_decent_chin", 0.045))
        elif chin < 70:
            cap = float(table.get("flash_cap_weak_chin", 0.1))
        else:
            cap = float(table.get("flash_cap_default", 0.06))

        if ko >= 95:
            cap *= 2.5
        elif ko >= 90:
            cap *= 2.0
        elif ko >= 85:
            cap *= 1.6
        elif ko >= 80:
            cap *= 1.3
        return cap

    def _knockdown_event(self, hit: PunchResult, punch: PunchType, *, flash: bool) -> KnockdownEvent:
        logger.debug(
            "%s knockdown: %s drops %s with %s for %d",
            "flash" if flash else "direct",
            hit.attacker,
            hit.target,
            punch.value,
            hit.damage,
        )
        return KnockdownEvent(
            attacker=hit.attacker,
            target=str(hit.target),
            punch_type=punch,
            damage=hit.damage,
            flash=flash,
        )


def chin_resistance(chin: int) -> float:
    """Chance to stay up once a shot crosses the knockdown threshold."""
    if chin >= 90:
        resistance = 0.85 + (chin - 90) * 0.012
    elif chin >= 85:
        resistance = 0.75 + (chin - 85) * 0.02
    elif chin >= 80:
        resistance = 0.65 + (chin - 80) * 0.02
    else:
        resistance = (chin - 30) / 80
    return clamp_float(resistance, 0.0, 1.0)
