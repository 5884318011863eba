"""Per-tick fighter decisions.

A :class:`DecisionSession` belongs to one fight.  Each tick it picks a
finite state for a fighter by weighted random selection over the
fighter's style table, after a long run of situational, psychological
and stylistic adjustments, then turns that state into a concrete action.
Punches the fighter cannot afford are swapped for a stamina-gated
alternative before the decision is returned.

Tunable values live under ``ai`` in the model parameters.
"""

from __future__ import annotations

import logging
import random
from collections import Counter, deque
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from boxing_sim.constants import CHAMPIONSHIP_ROUND, MEMORY_ACTION_LIMIT, RECENT_HURT_SECONDS
from boxing_sim.models import (
    BLOCK_SUB_STATES,
    Action,
    ActionType,
    BlockType,
    Decision,
    DefensiveStyle,
    DefensiveSubState,
    EvadeType,
    FightContext,
    Fighter,
    FighterState,
    FightingStyle,
    MoveDirection,
    MovementSubState,
    OffensiveStyle,
    OffensiveSubState,
    PunchType,
    SELECTABLE_STATES,
    SubState,
)
from boxing_sim.modules.position_model import distance as ring_distance
from boxing_sim.modules.position_model import is_in_corner, is_on_ropes
from boxing_sim.modules.stamina_economy import can_perform_action, get_stamina_gated_alternative
from boxing_sim.rules_registry import ParameterStore, load_parameter_store
from boxing_sim.utils import clamp_float, random_int, select_from, weighted_select

logger = logging.getLogger(__name__)

_OFF = FighterState.OFFENSIVE
_DEF = FighterState.DEFENSIVE
_TIM = FighterState.TIMING
_MOV = FighterState.MOVING
_CLI = FighterState.CLINCH

J, C, LH, RH, LU, RU, BJ, BC, BHL, BHR = (
    PunchType.JAB,
    PunchType.CROSS,
    PunchType.LEAD_HOOK,
    PunchType.REAR_HOOK,
    PunchType.LEAD_UPPERCUT,
    PunchType.REAR_UPPERCUT,
    PunchType.BODY_JAB,
    PunchType.BODY_CROSS,
    PunchType.BODY_HOOK_LEAD,
    PunchType.BODY_HOOK_REAR,
)


def _states(offensive: float, defensive: float, timing: float, moving: float, clinch: float) -> dict[FighterState, float]:
    return {_OFF: offensive, _DEF: defensive, _TIM: timing, _MOV: moving, _CLI: clinch}


STYLE_STATE_WEIGHTS: dict[FightingStyle, dict[FighterState, float]] = {
    FightingStyle.OUT_BOXER: _states(0.30, 0.20, 0.15, 0.30, 0.05),
    FightingStyle.SWARMER: _states(0.54, 0.05, 0.03, 0.32, 0.06),
    FightingStyle.SLUGGER: _states(0.47, 0.10, 0.08, 0.29, 0.06),
    FightingStyle.BOXER_PUNCHER: _states(0.40, 0.12, 0.13, 0.28, 0.07),
    FightingStyle.COUNTER_PUNCHER: _states(0.15, 0.22, 0.28, 0.30, 0.05),
    FightingStyle.INSIDE_FIGHTER: _states(0.50, 0.07, 0.03, 0.32, 0.08),
    FightingStyle.VOLUME_PUNCHER: _states(0.42, 0.10, 0.05, 0.38, 0.05),
    FightingStyle.SWITCH_HITTER: _states(0.30, 0.15, 0.12, 0.38, 0.05),
}
"""Base state weights per primary style, before situational modifiers."""

STYLE_PUNCH_WEIGHTS: dict[FightingStyle, dict[PunchType, float]] = {
    FightingStyle.OUT_BOXER: {J: 0.40, C: 0.20, LH: 0.10, RH: 0.05, LU: 0.05, RU: 0.05, BJ: 0.10, BC: 0.05},
    FightingStyle.SWARMER: {J: 0.20, C: 0.15, LH: 0.20, RH: 0.10, LU: 0.05, RU: 0.05, BJ: 0.05, BHL: 0.15, BHR: 0.05},
    FightingStyle.SLUGGER: {J: 0.30, C: 0.28, LH: 0.18, RH: 0.10, LU: 0.03, RU: 0.06, BC: 0.05},
    FightingStyle.BOXER_PUNCHER: {J: 0.25, C: 0.25, LH: 0.15, RH: 0.10, LU: 0.05, RU: 0.05, BJ: 0.05, BHL: 0.10},
    FightingStyle.COUNTER_PUNCHER: {J: 0.20, C: 0.30, LH: 0.15, RH: 0.10, LU: 0.10, RU: 0.10, BC: 0.05},
    FightingStyle.INSIDE_FIGHTER: {J: 0.10, C: 0.10, LH: 0.25, RH: 0.15, LU: 0.15, RU: 0.10, BHL: 0.10, BHR: 0.05},
    FightingStyle.VOLUME_PUNCHER: {J: 0.30, C: 0.20, LH: 0.15, RH: 0.10, LU: 0.05, RU: 0.05, BJ: 0.10, BHL: 0.05},
    FightingStyle.SWITCH_HITTER: {J: 0.25, C: 0.20, LH: 0.20, RH: 0.10, LU: 0.10, RU: 0.05, BJ: 0.05, BHL: 0.05},
}
"""Base punch weights per primary style; punches not listed are never picked."""

# Follow-up options by previous punch: (always, only when fresh enough).
_COMBO_FOLLOW_UPS: dict[PunchType, tuple[tuple[PunchType, ...], tuple[PunchType, ...]]] = {
    J: ((C, J, LH), (BC, RH)),
    C: ((LH, J), (BHL, RU)),
    LH: ((C,), (RH, RU, BHR)),
}
_DEFAULT_FOLLOW_UPS: tuple[PunchType, ...] = (J, LH, C)

_COUNTER_PUNCHES: tuple[PunchType, ...] = (C, LH, RU)
_EVADES: tuple[EvadeType, ...] = (EvadeType.SLIP, EvadeType.DUCK, EvadeType.LEAN)

_AGGRESSIVE_STYLES = frozenset({FightingStyle.SWARMER, FightingStyle.SLUGGER, FightingStyle.INSIDE_FIGHTER})
_CONSERVATIVE_STYLES = frozenset({FightingStyle.OUT_BOXER, FightingStyle.COUNTER_PUNCHER})
_POWER_STYLES = frozenset({FightingStyle.SLUGGER, FightingStyle.BOXER_PUNCHER})
_BOXER_TARGETS = frozenset({FightingStyle.BOXER_PUNCHER, FightingStyle.OUT_BOXER})

_DEFENSIVE_BLOCKS: dict[DefensiveSubState, BlockType] = {
    DefensiveSubState.HIGH_GUARD: BlockType.HIGH_GUARD,
    DefensiveSubState.PHILLY_SHELL: BlockType.PHILLY_SHELL,
    DefensiveSubState.PARRYING: BlockType.PARRY,
}


# ---------------------------------------------------------------------------
# Memory
# ---------------------------------------------------------------------------

@dataclass
class RoundStrategy:
    aggression: float = 0.0
    is_rest_round: bool = False


@dataclass
class FighterMemory:
    """What one fighter carries from tick to tick within a fight."""

    opponent_states: Counter = field(default_factory=Counter)
    last_actions: deque = field(default_factory=lambda: deque(maxlen=MEMORY_ACTION_LIMIT))
    last_hurt_round: int = 0
    last_hurt_time: float | None = None
    hurt_count: int = 0
    knockdowns_total: int = 0
    last_knockdown_round: int = 0
    round_strategy: RoundStrategy | None = None
    strategy_round: int = 0
    rest_rounds: list[int] = field(default_factory=list)

    def seconds_since_hurt(self, round_number: int, round_time: float, round_duration: float) -> float | None:
        if self.last_hurt_time is None:
            return None
        rounds_between = round_number - self.last_hurt_round
        return rounds_between * round_duration + round_time - self.last_hurt_time


@dataclass
class _Situation:
    stamina: float
    head_damage: float
    body_damage: float
    is_hurt: bool
    opponent_stamina: float
    opponent_body_damage: float
    opponent_hurt: bool
    opponent_state: FighterState
    distance: float
    optimal_range: float
    in_corner: bool
    on_ropes: bool
    round_number: int
    total_rounds: int
    score_diff: float
    recently_hurt: bool
    recently_knocked_down: bool
    hurt_count: int
    knockdowns: int
    strategy: RoundStrategy
    aggression: float = 0.0
    defense: float = 0.0
    ko_hunting: bool = False
    ko_intensity: float = 0.0
    opponent_offensive_share: float = 0.0
    opponent_defensive_share: float = 0.0
    recent_clinch_share: float = 0.0

    @property
    def rounds_left(self) -> int:
        return self.total_rounds - self.round_number

    @property
    def championship_rounds(self) -> bool:
        return self.round_number >= CHAMPIONSHIP_ROUND


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------

class DecisionSession:
    """Decision state machine plus per-fighter memory for one fight."""

    def __init__(self, params: ParameterStore | None = None, rng: random.Random | None = None) -> None:
        self._params = params or load_parameter_store()
        self._rng = rng or random.Random()
        self._ai: Mapping[str, Any] = self._params.section("ai")
        self._memory: dict[str, FighterMemory] = {}

    def _p(self, group: str, key: str, default: float) -> float:
        return float(self._ai.get(group, {}).get(key, default))

    def memory_for(self, fighter_id: str) -> FighterMemory:
        memory = self._memory.get(fighter_id)
        if memory is None:
            limit = int(self._p("memory", "action_limit", MEMORY_ACTION_LIMIT))
            memory = FighterMemory(last_actions=deque(maxlen=limit))
            self._memory[fighter_id] = memory
        return memory

    def reset(self, fighter_id: str | None = None) -> None:
        if fighter_id is None:
            self._memory.clear()
        else:
            self._memory.pop(fighter_id, None)

    def record_hurt(self, fighter_id: str, round_number: int, round_time: float) -> None:
        memory = self.memory_for(fighter_id)
        memory.last_hurt_round = round_number
        memory.last_hurt_time = round_time
        memory.hurt_count += 1

    def record_knockdown(self, fighter_id: str, round_number: int) -> None:
        memory = self.memory_for(fighter_id)
        memory.knockdowns_total += 1
        memory.last_knockdown_round = round_number

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    def decide(self, fighter: Fighter, opponent: Fighter, context: FightContext | None = None) -> Decision:
        """Choose this tick's state, sub-state and action for *fighter*."""
        context = context or FightContext()
        memory = self.memory_for(fighter.fighter_id)
        situation = self._assess(fighter, opponent, context, memory)

        state, sub_state = self._decide_state(fighter, opponent, situation)
        action = self._decide_action(fighter, opponent, state, sub_state, situation)

        if action.type is ActionType.PUNCH and not can_perform_action(fighter, action, self._params).can_perform:
            action = get_stamina_gated_alternative(
                fighter, action, {"distance": situation.distance}, self._params
            )
            if action.type is ActionType.CLINCH:
                state, sub_state = FighterState.CLINCH, None
            elif action.type is ActionType.BLOCK and action.block_type is not None:
                state, sub_state = FighterState.DEFENSIVE, BLOCK_SUB_STATES[action.block_type]
            else:
                state, sub_state = FighterState.DEFENSIVE, DefensiveSubState.HIGH_GUARD

        memory.last_actions.append(action)
        memory.opponent_states[situation.opponent_state] += 1
        return Decision(state=state, sub_state=sub_state, action=action, target=action.target)

    # ------------------------------------------------------------------
    # Situation
    # ------------------------------------------------------------------

    def _assess(self, fighter: Fighter, opponent: Fighter, context: FightContext, memory: FighterMemory) -> _Situation:
        round_number = context.round_number
        if memory.strategy_round != round_number:
            memory.round_strategy = self._round_strategy(fighter, memory, round_number, context.total_rounds)
            memory.strategy_round = round_number

        since_hurt = memory.seconds_since_hurt(round_number, context.round_time, context.round_duration)
        recent_window = self._p("memory", "recent_hurt_seconds", RECENT_HURT_SECONDS)
        modifiers = context.modifiers_for(fighter.fighter_id)
        offensive_share, defensive_share = self._opponent_read(memory)
        recent = memory.last_actions
        clinches = sum(1 for action in recent if action.type is ActionType.CLINCH)
        return _Situation(
            stamina=fighter.stamina_percent(),
            head_damage=fighter.head_damage_percent(),
            body_damage=fighter.body_damage_percent(),
            is_hurt=fighter.combat.is_hurt,
            opponent_stamina=opponent.stamina_percent(),
            opponent_body_damage=opponent.body_damage_percent(),
            opponent_hurt=opponent.combat.is_hurt,
            opponent_state=opponent.combat.state,
            distance=ring_distance(fighter, opponent),
            optimal_range=fighter.optimal_range,
            in_corner=is_in_corner(fighter, self._params),
            on_ropes=is_on_ropes(fighter, self._params),
            round_number=round_number,
            total_rounds=context.total_rounds,
            score_diff=context.score_diff_for(fighter.fighter_id),
            recently_hurt=since_hurt is not None and 0 <= since_hurt < recent_window,
            recently_knocked_down=memory.last_knockdown_round > 0
            and round_number - memory.last_knockdown_round in (0, 1),
            hurt_count=memory.hurt_count,
            knockdowns=memory.knockdowns_total,
            strategy=memory.round_strategy or RoundStrategy(),
            aggression=modifiers.aggression,
            defense=modifiers.defense,
            opponent_offensive_share=offensive_share,
            opponent_defensive_share=defensive_share,
            recent_clinch_share=clinches / len(recent) if recent else 0.0,
        )

    def _opponent_read(self, memory: FighterMemory) -> tuple[float, float]:
        """Offensive and defensive shares of the opponent states seen so far."""
        seen = sum(memory.opponent_states.values())
        if seen < self._p("memory", "read_min_samples", 20):
            return 0.0, 0.0
        return memory.opponent_states[_OFF] / seen, memory.opponent_states[_DEF] / seen

    def _round_strategy(self, fighter: Fighter, memory: FighterMemory, round_number: int, total_rounds: int) -> RoundStrategy:
        """Roll the per-round aggression drift and decide on a rest round."""
        variation = (self._rng.random() - 0.5) * self._p("round_strategy", "base_variation", 0.4)
        consistency = fighter.mental.composure / 100
        aggression = variation * (self._p("round_strategy", "composure_consistency_factor", 1.5) - consistency)
        if round_number >= 9:
            aggression += self._p("round_strategy", "late_round_aggression_boost", 0.1)
        if memory.hurt_count > 0 and round_number > 1:
            if fighter.mental.heart >= 85:
                aggression += self._p("round_strategy", "high_heart_post_hurt_boost", 0.1)
            elif fighter.mental.composure < 60:
                aggression += self._p("round_strategy", "low_composure_post_hurt_reduction", -0.15)

        resting = self._should_rest(fighter, memory, round_number, total_rounds)
        if resting:
            memory.rest_rounds.append(round_number)
            logger.debug(
                "%s takes round %d off at %.0f%% stamina",
                fighter.fighter_id,
                round_number,
                fighter.stamina_percent() * 100,
            )
        return RoundStrategy(aggression=aggression, is_rest_round=resting)

    def _should_rest(self, fighter: Fighter, memory: FighterMemory, round_number: int, total_rounds: int) -> bool:
        stamina = fighter.stamina_percent()
        fight_iq = fighter.technical.fight_iq
        iq_threshold = self._p("rest_round", "fight_iq_threshold", 70)
        if round_number <= self._p("rest_round", "early_rounds_exclude", 2):
            return False
        if round_number >= total_rounds - self._p("rest_round", "late_rounds_exclude", 1):
            return False
        if stamina > self._p("rest_round", "stamina_threshold", 0.6) or fight_iq < iq_threshold:
            return False

        chance = (fight_iq - iq_threshold) * self._p("rest_round", "fight_iq_factor", 0.01)
        chance += (fighter.conditioning.pace_control - 60) * self._p("rest_round", "pace_control_factor", 0.008)
        if stamina < 0.4:
            chance += self._p("rest_round", "low_stamina_rest_chance", 0.3)
        if stamina < 0.3:
            chance += self._p("rest_round", "very_low_stamina_rest_chance", 0.2)
        if round_number - 1 in memory.rest_rounds:
            chance *= self._p("rest_round", "consecutive_rest_penalty", 0.3)
        return self._rng.random() < chance

    # ------------------------------------------------------------------
    # States
    # ------------------------------------------------------------------

    def _decide_state(self, fighter: Fighter, opponent: Fighter, situation: _Situation) -> tuple[FighterState, SubState | None]:
        current = fighter.combat.state
        if current is FighterState.KNOCKED_DOWN:
            return FighterState.KNOCKED_DOWN, None
        if current is FighterState.RECOVERED:
            return FighterState.DEFENSIVE, DefensiveSubState.HIGH_GUARD
        if situation.is_hurt:
            return self._survival_state(fighter, situation)

        base = STYLE_STATE_WEIGHTS.get(fighter.style.primary, STYLE_STATE_WEIGHTS[FightingStyle.BOXER_PUNCHER])
        weights = {state: base[state] for state in SELECTABLE_STATES}
        self._apply_state_modifiers(weights, fighter, opponent, situation)
        state = weighted_select(weights, self._rng)
        return state, self._decide_sub_state(state, fighter, situation)

    def _survival_state(self, fighter: Fighter, situation: _Situation) -> tuple[FighterState, SubState | None]:
        if situation.distance < self._p("survival", "clinch_distance", 3.0) and fighter.defense.clinch_offense > self._p(
            "survival", "clinch_offense_threshold", 50
        ):
            return FighterState.CLINCH, None
        defensive = fighter.style.defensive
        if defensive is DefensiveStyle.PHILLY_SHELL:
            return FighterState.DEFENSIVE, DefensiveSubState.PHILLY_SHELL
        if defensive is DefensiveStyle.SLICK:
            return FighterState.DEFENSIVE, DefensiveSubState.HEAD_MOVEMENT
        if defensive is DefensiveStyle.DISTANCE:
            return FighterState.MOVING, MovementSubState.RETREATING
        return FighterState.DEFENSIVE, DefensiveSubState.HIGH_GUARD

    def _apply_state_modifiers(
        self,
        weights: dict[FighterState, float],
        fighter: Fighter,
        opponent: Fighter,
        situation: _Situation,
    ) -> None:
        """Scale *weights* in place for everything but the base style."""
        self._stamina_modifiers(weights, fighter, opponent, situation)
        if situation.opponent_hurt:
            weights[_OFF] *= self._p("opponent_hurt", "offensive_boost", 1.8)
            weights[_TIM] *= self._p("opponent_hurt", "timing_reduction", 0.5)
            weights[_OFF] *= 1 + fighter.mental.killer_instinct / 100 * self._p(
                "opponent_hurt", "killer_instinct_factor", 0.5
            )
        self._risk_modifiers(weights, fighter, situation)
        self._positional_modifiers(weights, fighter, opponent, situation)
        self._memory_modifiers(weights, fighter, situation)

        aggression = situation.aggression
        if aggression > 0:
            weights[_OFF] *= 1 + aggression
            weights[_TIM] *= 1 + aggression * 0.5
            weights[_DEF] *= 1 - aggression * 0.5
        elif aggression < 0:
            weights[_OFF] *= 1 + aggression
            weights[_DEF] *= 1 - aggression
        if situation.defense < 0:
            weights[_DEF] *= 1 + situation.defense
            weights[_MOV] *= 1 - situation.defense * 0.3

    def _stamina_modifiers(self, weights: dict[FighterState, float], fighter: Fighter, opponent: Fighter, situation: _Situation) -> None:
        critical = self._p("stamina_thresholds", "critical", 0.2)
        high = self._p("stamina_thresholds", "high", 0.8)
        moderate = self._p("stamina_thresholds", "moderate", 0.5)
        stamina = situation.stamina
        mental = fighter.mental

        if stamina < critical:
            level = stamina / critical
            intensity = (1 - level) * min(1.5, fighter.technical.fight_iq / 65)
            weights[_OFF] *= max(
                self._p("critical_stamina", "offensive_floor", 0.15),
                0.4 - intensity * self._p("critical_stamina", "offensive_reduction", 0.3),
            )
            weights[_DEF] *= self._p("critical_stamina", "defensive_boost", 1.8) + intensity * self._p(
                "critical_stamina", "defensive_intensity_factor", 0.6
            )
            weights[_TIM] *= self._p("critical_stamina", "timing_boost", 1.5) + intensity * self._p(
                "critical_stamina", "timing_intensity_factor", 0.3
            )
            weights[_MOV] *= self._p("critical_stamina", "movement_reduction", 0.7)
            weights[_CLI] *= self._p("critical_stamina", "clinch_boost", 1.3) + intensity * self._p(
                "critical_stamina", "clinch_intensity_factor", 0.4
            )

            # Heavy hitters with the nerve for it keep looking for one shot.
            group = "critical_stamina_power"
            can_still_hurt = fighter.power.knockout_power >= self._p(group, "knockout_power_threshold", 75)
            will_risk = mental.killer_instinct >= self._p(group, "killer_instinct_threshold", 70) or mental.heart >= self._p(
                group, "heart_threshold", 85
            )
            if can_still_hurt and will_risk and level > self._p(group, "critical_level_min", 0.25):
                weights[_TIM] *= self._p(group, "timing_boost", 1.4)
                if fighter.style.primary in _POWER_STYLES:
                    weights[_TIM] *= self._p(group, "slugger_timing_boost", 1.2)
                    weights[_OFF] *= self._p(group, "slugger_offensive_boost", 1.3)
                if situation.score_diff < -2:
                    weights[_OFF] *= self._p(group, "behind_offensive_boost", 1.3)
                    weights[_TIM] *= self._p(group, "behind_timing_boost", 1.2)
            if mental.heart >= self._p(group, "high_heart_threshold", 90) and level > 0.5:
                weights[_OFF] *= self._p(group, "high_heart_offensive_boost", 1.4)
                weights[_DEF] *= self._p(group, "high_heart_defensive_reduction", 0.85)
            if (
                situation.opponent_hurt
                and mental.killer_instinct >= self._p(group, "opponent_hurt_killer_threshold", 75)
                and level > self._p(group, "opponent_hurt_killer_level_min", 0.3)
            ):
                weights[_OFF] *= self._p(group, "opponent_hurt_offensive_boost", 1.6)
                weights[_TIM] *= self._p(group, "opponent_hurt_timing_reduction", 0.7)
        elif stamina >= high:
            group = "high_stamina"
            fresh = (stamina - high) / (1 - high) if high < 1 else 0.0
            weights[_OFF] *= self._p(group, "offensive_base_boost", 1.3) + fresh * self._p(group, "offensive_fresh_bonus", 0.4)
            weights[_TIM] *= self._p(group, "timing_reduction", 0.8)
            weights[_DEF] *= self._p(group, "defensive_base_reduction", 0.7) - fresh * self._p(
                group, "defensive_fresh_reduction", 0.2
            )
            weights[_OFF] *= 1 + fighter.conditioning.work_rate / 100 * self._p(group, "work_rate_offensive_factor", 0.3)
            if fighter.style.primary in (FightingStyle.SWARMER, FightingStyle.SLUGGER):
                weights[_OFF] *= self._p(group, "aggressive_style_offensive_boost", 1.2)
                weights[_MOV] *= self._p(group, "aggressive_style_movement_boost", 1.1)

        if stamina < moderate:
            for state, multiplier in self._conservation_multipliers(fighter, situation, moderate).items():
                weights[state] *= multiplier

    def _conservation_multipliers(self, fighter: Fighter, situation: _Situation, moderate: float) -> dict[FighterState, float]:
        """Pacing when tired, shaped by the scorecard, the round and temperament."""
        stamina = situation.stamina
        score = situation.score_diff
        round_number = situation.round_number
        total = max(1, situation.total_rounds)
        heart = fighter.mental.heart
        fight_iq = fighter.technical.fight_iq
        killer = fighter.mental.killer_instinct
        style = fighter.style.primary
        aggressive = style in _AGGRESSIVE_STYLES
        conservative = style in _CONSERVATIVE_STYLES

        offense = defense = clinch = timing = movement = 1.0
        if score > 0:
            style_factor = 1.3 if conservative else 0.8 if aggressive else 1.0
            killer_factor = 0.7 if killer >= 85 else 0.85 if killer >= 75 else 1.0
            protect = min(score / 10, 1) * (1 - situation.rounds_left / total) * fight_iq / 100 * style_factor * killer_factor
            offense -= protect * 0.35
            defense += protect * 0.4
            timing += protect * 0.2
            movement += protect * 0.3
            clinch += protect * 0.5
        elif score < 0:
            heart_factor = 1.4 if heart >= 90 else 1.2 if heart >= 80 else 1.0 if heart >= 70 else 0.8
            style_factor = 1.2 if aggressive else 0.9 if conservative else 1.0
            champs = 1.3 if round_number >= 9 else 1.0
            push = min(abs(score) / 10, 1) * (1 - situation.rounds_left / total) * champs * heart_factor * style_factor
            offense += push * 0.3
            defense -= push * 0.2
            timing -= push * 0.3
            clinch -= push * 0.4
        else:
            conservation = 1 - stamina / moderate
            offense -= conservation * 0.3 * fighter.conditioning.pace_control / 100
            defense += conservation * 0.25 * fight_iq / 100
            clinch += conservation * 0.4
            timing += conservation * 0.15

        if round_number <= 4 and fight_iq >= 75:
            offense *= 0.9
            defense *= 1.1
        if round_number >= 9 and heart >= 85:
            offense *= 1.15
            clinch *= 0.85
        if stamina < 0.15:
            offense *= 0.5 + stamina / 0.15 * 0.3
            clinch *= 1.15
            defense *= 1.3
        if stamina <= 0.05:
            offense *= 0.3
            clinch *= 1.3
            defense *= 1.5
            movement *= 0.5
        if aggressive:
            offense = max(0.6, offense)
        if conservative:
            defense *= 1.1
            timing *= 1.1
        if situation.opponent_hurt:
            offense *= 1.5
            clinch *= 0.3
            if killer >= 80:
                offense *= 1.2
        if situation.opponent_stamina < 0.3 and stamina >= situation.opponent_stamina:
            offense *= 1.15

        return {
            _OFF: clamp_float(offense, 0.2, 2.0),
            _DEF: clamp_float(defense, 0.5, 2.0),
            _CLI: clamp_float(clinch, 0.3, 1.5),
            _TIM: clamp_float(timing, 0.4, 1.8),
            _MOV: clamp_float(movement, 0.3, 1.5),
        }

    def _risk_modifiers(self, weights: dict[FighterState, float], fighter: Fighter, situation: _Situation) -> None:
        mental = fighter.mental
        heart = mental.heart
        killer = mental.killer_instinct
        tolerance = (
            (heart - 50) * 0.4 + (killer - 50) * 0.3 + (mental.composure - 50) * 0.15 + (mental.confidence - 50) * 0.15
        ) / 50
        score = situation.score_diff
        rounds_left = situation.rounds_left
        multiplier = 1.0
        take_risks = False

        if score < 0:
            urgency = 1.5 if rounds_left <= 3 else 1.2 if rounds_left <= 6 else 1.0
            multiplier += abs(score) / 10 * urgency
            if heart >= 80:
                take_risks = True
                multiplier *= 1 + (heart - 80) / 50
            elif heart < 60:
                multiplier *= 0.7
        elif score > 0:
            if killer >= 85:
                multiplier *= 1.1
            elif rounds_left <= 3 and score > 2:
                multiplier *= 0.7

        if (situation.head_damage + situation.body_damage) / 2 > 0.4:
            if mental.composure < 65:
                multiplier *= 0.6
                take_risks = False
            elif mental.composure >= 85:
                multiplier *= 1.1
        if situation.stamina < 0.25 and score < 0 and heart >= 75:
            take_risks = True
            multiplier *= 1.3

        self._ko_hunting(weights, fighter, situation)

        effective = tolerance * multiplier
        if effective > self._p("risk", "high_threshold", 0.5) or take_risks:
            weights[_OFF] *= 1 + (effective - 0.5) * 0.8
            weights[_DEF] *= max(0.5, 1 - (effective - 0.5) * 0.5)
            weights[_TIM] *= max(0.6, 1 - (effective - 0.5) * 0.3)
        elif effective < self._p("risk", "low_threshold", 0.3):
            weights[_DEF] *= 1 + (0.5 - effective) * 0.6
            weights[_OFF] *= max(0.6, 1 - (0.5 - effective) * 0.4)

    def _ko_hunting(self, weights: dict[FighterState, float], fighter: Fighter, situation: _Situation) -> None:
        group = "ko_hunting"
        power_puncher = (
            fighter.power.knockout_power >= self._p(group, "knockout_power_threshold", 80)
            or fighter.style.primary in _POWER_STYLES
        )
        rounds_threshold = self._p(group, "rounds_left_threshold", 4)
        rounds_left = situation.rounds_left
        if not (
            power_puncher
            and situation.score_diff < self._p(group, "score_deficit_threshold", -2)
            and rounds_left <= rounds_threshold
        ):
            return

        intensity = min(
            1.5,
            abs(situation.score_diff)
            / self._p(group, "desperation_score_divisor", 6)
            * (1 + (rounds_threshold - rounds_left) * self._p(group, "desperation_rounds_factor", 0.25)),
        )
        weights[_OFF] *= self._p(group, "offensive_base_boost", 1.5) + intensity * self._p(group, "offensive_intensity_factor", 0.5)
        weights[_TIM] *= self._p(group, "timing_base_boost", 1.4) + intensity * self._p(group, "timing_intensity_factor", 0.3)
        weights[_DEF] *= max(
            0.0,
            self._p(group, "defensive_base_reduction", 0.6) - intensity * self._p(group, "defensive_intensity_factor", 0.1),
        )
        weights[_CLI] *= self._p(group, "clinch_reduction", 0.3)
        if fighter.mental.heart >= 85:
            weights[_OFF] *= self._p(group, "high_heart_offensive_boost", 1.3)
            weights[_DEF] *= self._p(group, "high_heart_defensive_reduction", 0.6)
        if fighter.mental.killer_instinct >= 85:
            weights[_OFF] *= self._p(group, "high_killer_offensive_boost", 1.2)
            weights[_TIM] *= self._p(group, "high_killer_timing_boost", 1.2)
        situation.ko_hunting = True
        situation.ko_intensity = intensity

    def _positional_modifiers(self, weights: dict[FighterState, float], fighter: Fighter, opponent: Fighter, situation: _Situation) -> None:
        distance = situation.distance
        style = fighter.style.primary
        if distance > situation.optimal_range + 2:
            weights[_MOV] *= 1.5
            weights[_OFF] *= 0.5

        if style is FightingStyle.SWARMER and opponent.style.primary in _BOXER_TARGETS:
            if distance >= 4:
                weights[_MOV] *= 1.8
                weights[_OFF] *= 1.3
                weights[_DEF] *= 0.6
                pressure = (fighter.mental.heart + fighter.conditioning.cardio) / 200
                weights[_MOV] *= 0.9 + pressure * 0.3
            elif distance < 3:
                weights[_OFF] *= 1.4
                weights[_MOV] *= 0.6

        reach = fighter.physical.reach - opponent.physical.reach
        if reach > 15 and distance >= 4:
            weights[_OFF] *= 1.3 * (1 + (reach - 15) / 50)
            weights[_DEF] *= 0.7
            weights[_TIM] *= 1.2
        elif reach > 15 and distance < 3.5:
            weights[_MOV] *= 2.0
            weights[_CLI] *= 1.1
            weights[_OFF] *= 0.7
        elif reach < -15 and distance < 3:
            weights[_OFF] *= 1.2

        if distance < 3:
            if style is FightingStyle.OUT_BOXER:
                weights[_MOV] *= 1.5
            elif style is FightingStyle.BOXER_PUNCHER and reach > 10:
                weights[_MOV] *= 1.4

        if situation.in_corner or situation.on_ropes:
            weights[_MOV] *= 1.8
            weights[_OFF] *= 1.2

        if situation.championship_rounds:
            weights[_OFF] *= 1 + (fighter.mental.clutch_factor - 50) / 100
        if fighter.technical.fight_iq > 80 and situation.round_number < 4 and situation.stamina > 0.8:
            weights[_TIM] *= 1.2

    def _memory_modifiers(self, weights: dict[FighterState, float], fighter: Fighter, situation: _Situation) -> None:
        group = "hurt_memory"
        composure = fighter.mental.composure
        heart = fighter.mental.heart
        if situation.recently_knocked_down:
            weights[_OFF] *= self._p(group, "knockdown_offensive_reduction", 0.5)
            weights[_DEF] *= self._p(group, "knockdown_defensive_boost", 1.6)
            weights[_MOV] *= self._p(group, "knockdown_movement_boost", 1.3)
            weights[_TIM] *= self._p(group, "knockdown_timing_boost", 1.4)
            if composure >= self._p(group, "hurt_elite_composure_threshold", 85):
                weights[_OFF] *= self._p(group, "knockdown_high_composure_recovery", 1.2)
            if heart < 60:
                weights[_OFF] *= self._p(group, "knockdown_low_heart_offensive_reduction", 0.8)
                weights[_CLI] *= self._p(group, "knockdown_low_heart_clinch_boost", 1.3)
        elif situation.recently_hurt:
            elite = composure >= self._p(group, "hurt_elite_composure_threshold", 85) and heart >= self._p(
                group, "hurt_elite_heart_threshold", 80
            )
            if composure < 70 or heart < 70:
                weights[_OFF] *= self._p(group, "hurt_low_composure_offensive_reduction", 0.65)
                weights[_DEF] *= self._p(group, "hurt_low_composure_defensive_boost", 1.4)
                weights[_MOV] *= self._p(group, "hurt_low_composure_movement_boost", 1.2)
            elif elite:
                weights[_OFF] *= self._p(group, "hurt_elite_offensive_boost", 1.1)
            else:
                weights[_OFF] *= 0.8
                weights[_DEF] *= 1.2

        if situation.strategy.is_rest_round:
            weights[_OFF] *= self._p("rest_round", "offensive_reduction", 0.5)
            weights[_TIM] *= self._p("rest_round", "timing_boost", 1.5)
            weights[_DEF] *= self._p("rest_round", "defensive_boost", 1.4)
            weights[_MOV] *= self._p("rest_round", "movement_boost", 1.3)

        drift = situation.strategy.aggression
        if drift > 0:
            weights[_OFF] *= 1 + drift
            weights[_DEF] *= 1 - drift * 0.3
        elif drift < 0:
            weights[_OFF] *= 1 + drift
            weights[_DEF] *= 1 - drift
            weights[_TIM] *= 1 - drift * 0.5

        group = "accumulated_damage"
        if situation.hurt_count >= self._p(group, "hurt_count_threshold", 3) and heart < self._p(
            group, "hurt_low_heart_threshold", 80
        ):
            weights[_OFF] *= self._p(group, "hurt_offensive_reduction", 0.85)
            weights[_DEF] *= self._p(group, "hurt_defensive_boost", 1.15)
        if situation.knockdowns >= self._p(group, "knockdown_count_threshold", 2):
            weights[_OFF] *= self._p(group, "knockdown_offensive_reduction", 0.8)
            weights[_DEF] *= self._p(group, "knockdown_defensive_boost", 1.2)
            weights[_CLI] *= self._p(group, "knockdown_clinch_boost", 1.2)

        # Reading the opponent: counter a busy one, walk down a shell.
        group = "memory"
        threshold = self._p(group, "read_share_threshold", 0.5)
        if situation.opponent_offensive_share > threshold:
            read = (situation.opponent_offensive_share - threshold) * fighter.offense.counter_punching / 100
            weights[_TIM] *= 1 + read * self._p(group, "read_timing_factor", 2.0)
        elif situation.opponent_defensive_share > threshold:
            read = (situation.opponent_defensive_share - threshold) * fighter.technical.adaptability / 100
            weights[_OFF] *= 1 + read * self._p(group, "read_offensive_factor", 1.0)
        if situation.recent_clinch_share > self._p(group, "clinch_repeat_share", 0.5):
            weights[_CLI] *= self._p(group, "clinch_repeat_reduction", 0.5)

    # ------------------------------------------------------------------
    # Sub-states
    # ------------------------------------------------------------------

    def _decide_sub_state(self, state: FighterState, fighter: Fighter, situation: _Situation) -> SubState | None:
        if state is FighterState.OFFENSIVE:
            return self._offensive_sub_state(fighter, situation)
        if state is FighterState.DEFENSIVE:
            return self._defensive_sub_state(fighter)
        if state is FighterState.MOVING:
            if situation.distance > situation.optimal_range + 1:
                return MovementSubState.CUTTING_OFF
            if situation.distance < situation.optimal_range - 1:
                return MovementSubState.RETREATING
            return MovementSubState.CIRCLING
        return None

    def _offensive_sub_state(self, fighter: Fighter, situation: _Situation) -> OffensiveSubState:
        offensive = fighter.style.offensive
        primary = fighter.style.primary
        if offensive is OffensiveStyle.BODY_SNATCHER and situation.opponent_body_damage < 0.6:
            return OffensiveSubState.BODY_WORK
        if offensive is OffensiveStyle.JAB_AND_MOVE:
            return OffensiveSubState.JABBING
        if offensive is OffensiveStyle.COMBO_PUNCHER:
            return OffensiveSubState.COMBINATION
        if situation.opponent_hurt:
            if fighter.power.knockout_power > 75 or offensive is OffensiveStyle.HEADHUNTER:
                return OffensiveSubState.POWER_SHOT
            return OffensiveSubState.COMBINATION

        if situation.distance > situation.optimal_range + 1 and self._rng.random() < 0.7:
            return OffensiveSubState.JABBING
        if offensive is OffensiveStyle.HEADHUNTER or primary is FightingStyle.SLUGGER:
            power_share = 0.35 if offensive is OffensiveStyle.HEADHUNTER else 0.40
            roll = self._rng.random()
            if roll < power_share:
                return OffensiveSubState.POWER_SHOT
            if roll < power_share + 0.30:
                return OffensiveSubState.COMBINATION
            return OffensiveSubState.JABBING
        if primary is FightingStyle.INSIDE_FIGHTER:
            if situation.distance < 2:
                return OffensiveSubState.COMBINATION if self._rng.random() < 0.6 else OffensiveSubState.BODY_WORK
            return OffensiveSubState.JABBING
        if situation.distance > situation.optimal_range:
            return OffensiveSubState.JABBING
        return OffensiveSubState.COMBINATION

    @staticmethod
    def _defensive_sub_state(fighter: Fighter) -> DefensiveSubState:
        defensive = fighter.style.defensive
        skills = fighter.defense
        if defensive in (DefensiveStyle.PEEK_A_BOO, DefensiveStyle.HIGH_GUARD):
            return DefensiveSubState.HIGH_GUARD
        if defensive is DefensiveStyle.PHILLY_SHELL:
            return DefensiveSubState.PHILLY_SHELL if skills.shoulder_roll > 60 else DefensiveSubState.HIGH_GUARD
        if defensive is DefensiveStyle.SLICK:
            return DefensiveSubState.HEAD_MOVEMENT if skills.head_movement > 70 else DefensiveSubState.HIGH_GUARD
        if defensive is DefensiveStyle.DISTANCE:
            return DefensiveSubState.DISTANCE
        if skills.head_movement > skills.blocking:
            return DefensiveSubState.HEAD_MOVEMENT
        return DefensiveSubState.HIGH_GUARD

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def _decide_action(
        self,
        fighter: Fighter,
        opponent: Fighter,
        state: FighterState,
        sub_state: SubState | None,
        situation: _Situation,
    ) -> Action:
        opponent_attacking = situation.opponent_state is FighterState.OFFENSIVE
        if state is FighterState.OFFENSIVE:
            return self._offensive_action(fighter, sub_state, situation)
        if state is FighterState.DEFENSIVE:
            if not opponent_attacking:
                return Action.wait()
            if sub_state is DefensiveSubState.HEAD_MOVEMENT:
                return Action.evade(select_from(_EVADES, self._rng))
            if sub_state is DefensiveSubState.DISTANCE:
                return Action.move(MoveDirection.BACKWARD)
            block = _DEFENSIVE_BLOCKS.get(sub_state)  # type: ignore[arg-type]
            return Action.block(block) if block is not None else Action.wait()
        if state is FighterState.TIMING:
            if opponent_attacking:
                return Action.punch(select_from(_COUNTER_PUNCHES, self._rng), is_counter=True)
            return Action.wait()
        if state is FighterState.MOVING:
            if sub_state is MovementSubState.CUTTING_OFF:
                return Action.move(MoveDirection.FORWARD, cutting=True)
            if sub_state is MovementSubState.CIRCLING:
                side = MoveDirection.LEFT if self._rng.random() > 0.5 else MoveDirection.RIGHT
                return Action.move(side, lateral=True)
            if sub_state is MovementSubState.RETREATING:
                return Action.move(MoveDirection.BACKWARD)
            return Action.move(MoveDirection.FORWARD)
        if state is FighterState.CLINCH:
            return Action.clinch()
        return Action.wait()

    def _offensive_action(self, fighter: Fighter, sub_state: SubState | None, situation: _Situation) -> Action:
        if situation.distance > situation.optimal_range + 2:
            return Action.move(MoveDirection.FORWARD)
        if sub_state is OffensiveSubState.COMBINATION:
            return self.generate_combination(fighter, situation.stamina, situation.distance)
        return Action.punch(self._select_punch(fighter, sub_state, situation))

    def _select_punch(self, fighter: Fighter, sub_state: SubState | None, situation: _Situation) -> PunchType:
        base = STYLE_PUNCH_WEIGHTS.get(fighter.style.primary, STYLE_PUNCH_WEIGHTS[FightingStyle.BOXER_PUNCHER])
        weights = {punch: base.get(punch, 0.0) for punch in PunchType}

        if sub_state is OffensiveSubState.JABBING:
            weights[J] *= 2.0
            weights[BJ] *= 1.5
        elif sub_state is OffensiveSubState.POWER_SHOT:
            weights[C] *= 2.0
            weights[RH] *= 1.8
            weights[RU] *= 1.5
            weights[J] *= 0.3
        elif sub_state is OffensiveSubState.BODY_WORK:
            for punch in (BJ, BC, BHL, BHR):
                weights[punch] *= 2.0

        stamina = situation.stamina
        fresh = self._ai.get("punch_stamina_modifiers", {}).get("fresh", {})
        tired = self._ai.get("punch_stamina_modifiers", {}).get("tired", {})
        fresh_threshold = float(fresh.get("stamina_threshold", 0.75))
        if stamina >= fresh_threshold:
            bonus = (stamina - fresh_threshold) / (1 - fresh_threshold) if fresh_threshold < 1 else 0.0
            for punch, boost, extra in (
                (C, 1.3, 0.5),
                (RH, 1.3, 0.5),
                (RU, 1.2, 0.4),
                (LH, 1.2, 0.3),
                (BHR, 1.2, 0.4),
            ):
                weights[punch] *= float(fresh.get(f"{punch.value}_boost", boost)) + bonus * float(
                    fresh.get(f"{punch.value}_fresh_bonus", extra)
                )
            weights[J] *= float(fresh.get("jab_reduction", 0.7)) - bonus * float(fresh.get("jab_fresh_reduction", 0.2))
            weights[BJ] *= float(fresh.get("body_jab_reduction", 0.8))
            if fighter.power.knockout_power >= float(fresh.get("power_puncher_threshold", 80)):
                weights[C] *= float(fresh.get("power_puncher_extra_boost", 1.2))
                weights[RH] *= float(fresh.get("power_puncher_extra_boost", 1.2))

        tired_threshold = float(tired.get("stamina_threshold", 0.4))
        if stamina < tired_threshold:
            fatigue = 1 - stamina / tired_threshold
            weights[C] *= 1 - fatigue * float(tired.get("cross_reduction_factor", 0.4))
            weights[RH] *= 1 - fatigue * float(tired.get("rear_hook_reduction_factor", 0.5))
            weights[RU] *= 1 - fatigue * float(tired.get("rear_uppercut_reduction_factor", 0.5))
            weights[J] *= 1 + fatigue * float(tired.get("jab_boost_factor", 0.5))

        distance = situation.distance
        if distance < self._p("distance", "inside_threshold", 3.0):
            for punch in (LH, RH):
                weights[punch] *= self._p("distance", "inside_hook_boost", 1.5)
            for punch in (LU, RU):
                weights[punch] *= self._p("distance", "inside_uppercut_boost", 1.5)
            weights[J] *= self._p("distance", "inside_jab_reduction", 0.5)
            weights[C] *= self._p("distance", "inside_cross_reduction", 0.7)
        elif distance > self._p("distance", "outside_threshold", 4.5):
            weights[J] *= self._p("distance", "outside_jab_boost", 1.5)
            for punch in (LH, RH):
                weights[punch] *= self._p("distance", "outside_hook_reduction", 0.5)

        if situation.ko_hunting:
            intensity = situation.ko_intensity
            for punch, boost in ((C, 2.0), (RH, 2.5), (RU, 2.0), (LH, 1.8)):
                weights[punch] *= self._p("ko_hunting", f"{punch.value}_boost", boost) + intensity * self._p(
                    "ko_hunting", f"{punch.value}_intensity_bonus", 1.0
                )
            for punch, reduction in ((J, 0.4), (BJ, 0.3), (BC, 0.5), (BHL, 0.5), (BHR, 0.6)):
                weights[punch] *= self._p("ko_hunting", f"{punch.value}_reduction", reduction)

        return weighted_select(weights, self._rng)

    def generate_combination(self, fighter: Fighter, stamina: float, distance: float) -> Action:
        """Chain a combination whose length shrinks as the fighter tires."""
        table = self._ai.get("combination_length", {})
        minimum, maximum = 2, 2
        for band in ("fresh", "good", "tired"):
            limits = table.get(band, {})
            if stamina >= float(limits.get("stamina_threshold", 1.0)):
                minimum, maximum = int(limits.get("min", 2)), int(limits.get("max", 2))
                break
        else:
            gassed = table.get("gassed", {})
            minimum, maximum = int(gassed.get("min", 2)), int(gassed.get("max", 2))
        if fighter.conditioning.work_rate >= float(table.get("high_work_rate_threshold", 85)):
            maximum += int(table.get("high_work_rate_bonus", 1))

        length = random_int(minimum, maximum, self._rng)
        if distance > 3.5:
            punches = [J]
        else:
            punches = [J if self._rng.random() > 0.5 else LH]

        power_ok = stamina >= float(table.get("power_inclusion_stamina_threshold", 0.7))
        while len(punches) < length:
            always, when_fresh = _COMBO_FOLLOW_UPS.get(punches[-1], (_DEFAULT_FOLLOW_UPS, ()))
            options = always + when_fresh if power_ok else always
            punches.append(select_from(options, self._rng))
        return Action.combo(punches)
