"""Built-in parameter tree.

Mirrors the newest shipped documents under ``rules/model/``.  The
registry falls back to the matching branch of this tree whenever a
category file is missing or cannot be parsed, so a broken document never
takes the rest of the model down with it.
"""

from __future__ import annotations

from typing import Any

# ---------------------------------------------------------------------------
# combat
# ---------------------------------------------------------------------------

_PUNCHES: dict[str, dict[str, float]] = {
    "jab": {"base_damage": 0.5, "base_accuracy": 0.42, "speed": 1.0, "range": 5.0, "stamina_cost": 1.5},
    "cross": {"base_damage": 2.0, "base_accuracy": 0.32, "speed": 0.85, "range": 4.5, "stamina_cost": 3.5},
    "lead_hook": {"base_damage": 1.5, "base_accuracy": 0.28, "speed": 0.88, "range": 3.0, "stamina_cost": 3.0},
    "rear_hook": {"base_damage": 2.5, "base_accuracy": 0.26, "speed": 0.82, "range": 3.0, "stamina_cost": 4.0},
    "lead_uppercut": {"base_damage": 1.2, "base_accuracy": 0.25, "speed": 0.8, "range": 2.5, "stamina_cost": 2.5},
    "rear_uppercut": {"base_damage": 3.0, "base_accuracy": 0.22, "speed": 0.75, "range": 2.5, "stamina_cost": 4.5},
    "body_jab": {"base_damage": 0.6, "base_accuracy": 0.4, "speed": 0.95, "range": 4.5, "stamina_cost": 1.5},
    "body_cross": {"base_damage": 1.8, "base_accuracy": 0.3, "speed": 0.83, "range": 4.0, "stamina_cost": 3.5},
    "body_hook_lead": {"base_damage": 1.5, "base_accuracy": 0.3, "speed": 0.85, "range": 2.5, "stamina_cost": 3.0},
    "body_hook_rear": {"base_damage": 2.0, "base_accuracy": 0.28, "speed": 0.8, "range": 2.5, "stamina_cost": 4.0},
}


def _weight_class(
    min_weight: float,
    activity_rate: float,
    max_combo_length: int,
    combo_chance: float,
    recovery_ticks: int,
    stamina_multiplier: float,
    damage_multiplier: float,
    punches_min: int,
    punches_max: int,
) -> dict[str, Any]:
    return {
        "min_weight": min_weight,
        "activity_rate": activity_rate,
        "max_combo_length": max_combo_length,
        "combo_chance": combo_chance,
        "recovery_ticks": recovery_ticks,
        "stamina_multiplier": stamina_multiplier,
        "damage_multiplier": damage_multiplier,
        "punches_per_round": {"min": punches_min, "max": punches_max},
    }


_WEIGHT_CLASSES: dict[str, dict[str, Any]] = {
    "heavyweight": _weight_class(90.7, 0.42, 4, 0.35, 3, 1.1, 1.25, 40, 60),
    "cruiserweight": _weight_class(79.4, 0.45, 4, 0.37, 3, 1.05, 1.15, 45, 65),
    "light_heavyweight": _weight_class(76.2, 0.47, 5, 0.38, 2, 1.0, 1.1, 50, 70),
    "middleweight": _weight_class(72.6, 0.5, 5, 0.4, 2, 1.0, 1.0, 55, 75),
    "welterweight": _weight_class(66.7, 0.53, 5, 0.42, 2, 0.97, 0.95, 60, 80),
    "lightweight": _weight_class(61.2, 0.56, 6, 0.45, 2, 0.95, 0.9, 65, 85),
    "featherweight": _weight_class(57.2, 0.58, 6, 0.47, 2, 0.93, 0.85, 70, 90),
    "bantamweight": _weight_class(53.5, 0.6, 6, 0.48, 1, 0.92, 0.8, 70, 90),
    "flyweight": _weight_class(0.0, 0.62, 6, 0.5, 1, 0.9, 0.75, 70, 90),
}

_RESOLUTION: dict[str, Any] = {
    "activity": {"light_stun_throw_chance": 0.3},
    "stun": {
        "heavy_vulnerability": 1.3,
        "light_vulnerability": 1.15,
        "stun_damage_threshold": 3,
    },
    "combinations": {
        "accuracy_decay": 0.92,
        "block_decay": 0.95,
        "break_on_miss_chance": 0.5,
        "break_on_evade_chance": 0.4,
    },
    "accuracy": {
        "attacker_skill_base": 0.5,
        "attacker_skill_divisor": 100,
        "hand_speed_base": 0.8,
        "hand_speed_divisor": 500,
        "range_penalty": 0.15,
        "range_floor": 0.3,
        "reach_bonus_factor": 0.6,
        "counter_multiplier": 1.2,
        "counter_skill_divisor": 200,
        "moving_target_penalty": 0.85,
        "hurt_target_bonus": 1.3,
        "fatigue_severe_penalty": 0.8,
        "fatigue_moderate_penalty": 0.9,
        "min_accuracy": 0.1,
        "max_accuracy": 0.95,
    },
    "defense": {
        "hurt_defense_chance": 0.3,
        "hurt_defense_floor": 0.1,
        "corner_defense_chance": 0.4,
        "ropes_defense_chance": 0.6,
        "critical_damage_threshold": 0.95,
        "critical_defense_chance": 0.1,
        "high_damage_threshold": 0.85,
        "high_damage_defense_chance": 0.25,
        "moderate_damage_threshold": 0.7,
        "moderate_damage_defense_chance": 0.5,
    },
    "evasion": {
        "base_chance": 0.1,
        "head_movement_divisor": 500,
        "reflexes_divisor": 600,
        "body_shot_multiplier": 0.4,
        "hook_uppercut_multiplier": 0.7,
        "fatigue_penalty": 0.7,
        "experience_bonus_threshold": 80,
        "experience_bonus_divisor": 200,
        "max_evade_chance": 0.45,
    },
    "blocking": {
        "base_chance": 0.3,
        "high_guard_bonus": 0.25,
        "high_guard_reduction": 0.7,
        "high_guard_body_penalty": 0.15,
        "high_guard_body_reduction": 0.4,
        "philly_shell_straight_bonus": 0.3,
        "philly_shell_straight_reduction": 0.8,
        "philly_shell_hook_bonus": 0.1,
        "philly_shell_hook_reduction": 0.5,
        "arm_reduction": 0.6,
        "skill_divisor": 400,
        "parry_threshold": 60,
        "parry_bonus": 0.1,
        "parry_reduction": 0.9,
        "partial_threshold": 0.15,
        "partial_reduction": 0.3,
    },
    "passive": {
        "base_chance": 0.1,
        "ring_awareness_divisor": 500,
        "experience_divisor": 500,
        "partial_reduction": 0.3,
    },
    "damage": {
        "power_base": 0.6,
        "power_divisor": 250,
        "ko_power_elite_threshold": 85,
        "ko_power_elite_bonus": 1.15,
        "ko_power_good_threshold": 70,
        "counter_base_bonus": 1.15,
        "counter_skill_divisor": 400,
        "partial_hit_multiplier": 0.5,
        "body_punch_base": 0.7,
        "body_punch_divisor": 150,
        "distance_penalty": 0.1,
        "distance_floor": 0.5,
        "fatigue_severe_threshold": 0.25,
        "fatigue_severe_multiplier": 0.6,
        "fatigue_moderate_threshold": 0.4,
        "fatigue_moderate_multiplier": 0.75,
        "fatigue_mild_threshold": 0.6,
        "fatigue_mild_multiplier": 0.9,
        "variance_min": 0.85,
        "variance_range": 0.3,
        "weight_bonus_threshold": 1.1,
        "weight_bonus_factor": 2.0,
        "weight_bonus_cap": 2.5,
        "weight_penalty_threshold": 0.9,
        "weight_penalty_floor": 0.3,
    },
    "knockdown_check": {
        "min_damage_percent": 0.15,
        "chin_base": 3,
        "chin_divisor": 15,
        "damage_reduction_threshold": 0.5,
        "damage_reduction_factor": 0.3,
        "stamina_severe_threshold": 0.25,
        "stamina_severe_reduction": 0.85,
        "stamina_moderate_threshold": 0.4,
        "stamina_moderate_reduction": 0.92,
        "direct_knockdown_fresh_multiplier": 1.3,
        "flash_damage_threshold": 8,
        "flash_chin_advantage_immunity": 25,
        "iron_chin_threshold": 95,
        "flash_cap_iron_chin": 0.008,
        "flash_cap_elite_chin": 0.025,
        "flash_cap_good_chin": 0.035,
        "flash_cap_decent_chin": 0.045,
        "flash_cap_weak_chin": 0.1,
        "flash_cap_default": 0.06,
        "zero_stamina_threshold": 0.1,
        "zero_stamina_max_multiplier": 2.0,
    },
}

# ---------------------------------------------------------------------------
# stamina
# ---------------------------------------------------------------------------

_STAMINA: dict[str, Any] = {
    "punch_costs": {
        "jab": 0.35,
        "cross": 0.8,
        "lead_hook": 0.7,
        "rear_hook": 0.95,
        "lead_uppercut": 0.65,
        "rear_uppercut": 1.0,
        "body_jab": 0.4,
        "body_cross": 0.85,
        "body_hook_lead": 0.75,
        "body_hook_rear": 1.0,
    },
    "fallback_punch_cost": 2.0,
    "combination_surcharge": {"2": 0.15, "3": 0.35, "4": 0.6, "5": 1.0},
    "defense_costs": {
        "HIGH_GUARD": 0.1,
        "PHILLY_SHELL": 0.05,
        "HEAD_MOVEMENT": 0.2,
        "DISTANCE": 0.08,
        "PARRYING": 0.15,
    },
    "movement_costs": {
        "forward": 0.08,
        "backward": 0.05,
        "lateral": 0.1,
        "circling": 0.12,
        "cutting": 0.2,
        "retreating": 0.1,
        "burst": 0.3,
    },
    "movement_fallback_cost": 0.5,
    "action_cost_scale": 0.5,
    "baseline_drain": 0.12,
    "minimum_drain": 0.08,
    "clinch": {"initiation": 0.5, "holding": 0.1, "breaking": 0.8},
    "damage": {
        "getting_hit_base": 0.3,
        "getting_hit_per_point": 0.02,
        "body_hit_multiplier": 1.5,
        "being_hurt": 1.5,
        "knockdown_recovery": 10.0,
    },
    "body_drain": {
        "per_damage": 0.5,
        "hook_spike_chance": 0.15,
        "hook_spike_per_damage": 1.0,
        "cross_spike_chance": 0.1,
        "cross_spike_per_damage": 0.8,
        "cross_spike_flat": 5.0,
    },
    "modifiers": {
        "work_rate_floor": 0.5,
        "work_rate_per_point": 0.012,
        "pace_control_floor": 0.7,
        "pace_control_per_point": 0.0075,
        "cardio_floor": 0.8,
        "cardio_per_point": 0.005,
        "body_damage_divisor": 120,
        "fatigue_factor": 0.4,
    },
    "recovery": {
        "cardio_rate": 0.008,
        "attribute_per_point": 0.005,
        "attribute_bonus_cap": 0.35,
        "body_damage_divisor": 150,
        "head_damage_divisor": 300,
        "states": {
            "NEUTRAL": 1.0,
            "DEFENSIVE": 0.9,
            "TIMING": 0.6,
            "MOVING": 0.4,
            "OFFENSIVE": 0.2,
            "CLINCH": 1.5,
            "KNOCKED_DOWN": 0.0,
            "RECOVERED": 0.5,
        },
        "defensive_sub_states": {
            "HIGH_GUARD": 0.9,
            "PHILLY_SHELL": 1.0,
            "HEAD_MOVEMENT": 0.4,
            "DISTANCE": 0.7,
            "PARRYING": 0.5,
        },
        "default_sub_state_rate": 0.5,
    },
    "age_recovery": [[25, 1.0], [30, 0.95], [32, 0.9], [35, 0.82], [38, 0.72]],
    "age_recovery_floor": 0.6,
    "between_rounds": {
        "recovery_factor": 0.55,
        "cardio_per_point": 0.008,
        "corner_bonus_factor": 0.15,
        "body_damage_divisor": 200,
        "max_fraction": 0.6,
    },
    "second_wind": {
        "min_round": 9,
        "max_stamina_percent": 0.4,
        "heart_divisor": 200,
        "restore_fraction": 0.25,
    },
    "gating": {
        "clinch_stamina": 0.05,
        "clinch_distance": 3.0,
        "block_stamina": 0.1,
        "default_distance": 4.0,
    },
    "fatigue_tiers": {"fresh": 0.8, "good": 0.6, "tired": 0.4, "exhausted": 0.25},
    "fatigue_penalties": {
        "good": {"power": -3, "speed": -2},
        "tired": {"power": -8, "speed": -5, "accuracy": -5, "defense": -5},
        "exhausted": {"power": -15, "speed": -12, "accuracy": -10, "defense": -15, "movement": -10},
        "gassed": {
            "power": -30,
            "speed": -25,
            "accuracy": -20,
            "defense": -30,
            "movement": -25,
            "chin": -15,
        },
    },
    "fatigue_heart": {"reference": 70, "divisor": 75},
    "zero_stamina": {"threshold": 0.1, "chin_penalty": 30, "max_ko_multiplier": 2.0},
}

# ---------------------------------------------------------------------------
# ai
# ---------------------------------------------------------------------------

_AI: dict[str, Any] = {
    "stamina_thresholds": {"critical": 0.2, "moderate": 0.5, "high": 0.8},
    "memory": {
        "action_limit": 20,
        "recent_hurt_seconds": 45.0,
        "read_min_samples": 20,
        "read_share_threshold": 0.5,
        "read_timing_factor": 2.0,
        "read_offensive_factor": 1.0,
        "clinch_repeat_share": 0.5,
        "clinch_repeat_reduction": 0.5,
    },
    "survival": {"clinch_distance": 3.0, "clinch_offense_threshold": 50},
    "critical_stamina": {
        "offensive_floor": 0.15,
        "offensive_reduction": 0.3,
        "defensive_boost": 1.8,
        "defensive_intensity_factor": 0.6,
        "timing_boost": 1.5,
        "timing_intensity_factor": 0.3,
        "movement_reduction": 0.7,
        "clinch_boost": 1.3,
        "clinch_intensity_factor": 0.4,
    },
    "critical_stamina_power": {
        "knockout_power_threshold": 75,
        "killer_instinct_threshold": 70,
        "heart_threshold": 85,
        "critical_level_min": 0.25,
        "timing_boost": 1.4,
        "slugger_timing_boost": 1.2,
        "slugger_offensive_boost": 1.3,
        "behind_offensive_boost": 1.3,
        "behind_timing_boost": 1.2,
        "high_heart_threshold": 90,
        "high_heart_offensive_boost": 1.4,
        "high_heart_defensive_reduction": 0.85,
        "opponent_hurt_killer_threshold": 75,
        "opponent_hurt_killer_level_min": 0.3,
        "opponent_hurt_offensive_boost": 1.6,
        "opponent_hurt_timing_reduction": 0.7,
    },
    "high_stamina": {
        "offensive_base_boost": 1.3,
        "offensive_fresh_bonus": 0.4,
        "timing_reduction": 0.8,
        "defensive_base_reduction": 0.7,
        "defensive_fresh_reduction": 0.2,
        "work_rate_offensive_factor": 0.3,
        "aggressive_style_offensive_boost": 1.2,
        "aggressive_style_movement_boost": 1.1,
    },
    "opponent_hurt": {"offensive_boost": 1.8, "timing_reduction": 0.5, "killer_instinct_factor": 0.5},
    "risk": {"high_threshold": 0.5, "low_threshold": 0.3},
    "ko_hunting": {
        "knockout_power_threshold": 80,
        "score_deficit_threshold": -2,
        "rounds_left_threshold": 4,
        "desperation_score_divisor": 6,
        "desperation_rounds_factor": 0.25,
        "offensive_base_boost": 1.5,
        "offensive_intensity_factor": 0.5,
        "timing_base_boost": 1.4,
        "timing_intensity_factor": 0.3,
        "defensive_base_reduction": 0.6,
        "defensive_intensity_factor": 0.1,
        "clinch_reduction": 0.3,
        "high_heart_offensive_boost": 1.3,
        "high_heart_defensive_reduction": 0.6,
        "high_killer_offensive_boost": 1.2,
        "high_killer_timing_boost": 1.2,
        "cross_boost": 2.0,
        "cross_intensity_bonus": 1.0,
        "rear_hook_boost": 2.5,
        "rear_hook_intensity_bonus": 1.0,
        "rear_uppercut_boost": 2.0,
        "rear_uppercut_intensity_bonus": 1.0,
        "lead_hook_boost": 1.8,
        "lead_hook_intensity_bonus": 1.0,
        "jab_reduction": 0.4,
        "body_jab_reduction": 0.3,
        "body_cross_reduction": 0.5,
        "body_hook_lead_reduction": 0.5,
        "body_hook_rear_reduction": 0.6,
    },
    "hurt_memory": {
        "knockdown_offensive_reduction": 0.5,
        "knockdown_defensive_boost": 1.6,
        "knockdown_movement_boost": 1.3,
        "knockdown_timing_boost": 1.4,
        "knockdown_high_composure_recovery": 1.2,
        "knockdown_low_heart_offensive_reduction": 0.8,
        "knockdown_low_heart_clinch_boost": 1.3,
        "hurt_low_composure_offensive_reduction": 0.65,
        "hurt_low_composure_defensive_boost": 1.4,
        "hurt_low_composure_movement_boost": 1.2,
        "hurt_elite_composure_threshold": 85,
        "hurt_elite_heart_threshold": 80,
        "hurt_elite_offensive_boost": 1.1,
    },
    "rest_round": {
        "early_rounds_exclude": 2,
        "late_rounds_exclude": 1,
        "stamina_threshold": 0.6,
        "fight_iq_threshold": 70,
        "low_stamina_rest_chance": 0.3,
        "very_low_stamina_rest_chance": 0.2,
        "fight_iq_factor": 0.01,
        "pace_control_factor": 0.008,
        "consecutive_rest_penalty": 0.3,
        "offensive_reduction": 0.5,
        "timing_boost": 1.5,
        "defensive_boost": 1.4,
        "movement_boost": 1.3,
    },
    "round_strategy": {
        "base_variation": 0.4,
        "composure_consistency_factor": 1.5,
        "late_round_aggression_boost": 0.1,
        "high_heart_post_hurt_boost": 0.1,
        "low_composure_post_hurt_reduction": -0.15,
    },
    "accumulated_damage": {
        "hurt_count_threshold": 3,
        "hurt_low_heart_threshold": 80,
        "hurt_offensive_reduction": 0.85,
        "hurt_defensive_boost": 1.15,
        "knockdown_count_threshold": 2,
        "knockdown_offensive_reduction": 0.8,
        "knockdown_defensive_boost": 1.2,
        "knockdown_clinch_boost": 1.2,
    },
    "combination_length": {
        "fresh": {"stamina_threshold": 0.8, "min": 3, "max": 6},
        "good": {"stamina_threshold": 0.5, "min": 2, "max": 4},
        "tired": {"stamina_threshold": 0.25, "min": 2, "max": 3},
        "gassed": {"min": 2, "max": 2},
        "high_work_rate_threshold": 85,
        "high_work_rate_bonus": 1,
        "power_inclusion_stamina_threshold": 0.7,
    },
    "punch_stamina_modifiers": {
        "fresh": {
            "stamina_threshold": 0.75,
            "cross_boost": 1.3,
            "cross_fresh_bonus": 0.5,
            "rear_hook_boost": 1.3,
            "rear_hook_fresh_bonus": 0.5,
            "rear_uppercut_boost": 1.2,
            "rear_uppercut_fresh_bonus": 0.4,
            "lead_hook_boost": 1.2,
            "lead_hook_fresh_bonus": 0.3,
            "body_hook_rear_boost": 1.2,
            "body_hook_rear_fresh_bonus": 0.4,
            "jab_reduction": 0.7,
            "jab_fresh_reduction": 0.2,
            "body_jab_reduction": 0.8,
            "power_puncher_threshold": 80,
            "power_puncher_extra_boost": 1.2,
        },
        "tired": {
            "stamina_threshold": 0.4,
            "cross_reduction_factor": 0.4,
            "rear_hook_reduction_factor": 0.5,
            "rear_uppercut_reduction_factor": 0.5,
            "jab_boost_factor": 0.5,
        },
    },
    "distance": {
        "inside_threshold": 3.0,
        "inside_hook_boost": 1.5,
        "inside_uppercut_boost": 1.5,
        "inside_jab_reduction": 0.5,
        "inside_cross_reduction": 0.7,
        "outside_threshold": 4.5,
        "outside_jab_boost": 1.5,
        "outside_hook_reduction": 0.5,
    },
}

# ---------------------------------------------------------------------------
# damage
# ---------------------------------------------------------------------------

_DAMAGE: dict[str, Any] = {
    "thresholds": {
        "hurt": {"head": 5, "body": 8},
        "knockdown": {"base": 8, "cumulative": 50},
        "ko": {"head": 100, "body": 120},
    },
    "modifiers": {"chin_factor": 0.005, "stamina_threshold": 0.5},
    "resistance": {
        "blocking_factor": 500,
        "experience_factor": 1000,
        "max_resistance": 0.3,
        "body_types": {
            "stocky": 0.05,
            "muscular": 0.03,
            "average": 0.0,
            "lean": -0.02,
            "lanky": -0.03,
            "tall-rangy": -0.02,
        },
    },
    "hurt": {
        "base_chance": 0.25,
        "damage_ratio_scaling": 0.3,
        "threshold_damage_factor": 0.25,
        "chin_modifier_factor": 0.4,
        "composure_factor": 300,
        "damage_percent_threshold": 0.4,
        "damage_percent_base": 1.2,
        "damage_percent_multiplier": 0.8,
        "low_stamina_threshold": 0.3,
        "low_stamina_multiplier": 1.3,
        "medium_stamina_threshold": 0.5,
        "medium_stamina_multiplier": 1.15,
        "min_chance": 0.1,
        "max_chance": 0.6,
        "duration_min": 3.0,
        "duration_range": 3.0,
    },
    "knockdown": {
        "base_chance_at_threshold": 0.5,
        "over_threshold_scaling": 0.3,
        "power_punch_multiplier": 1.3,
        "counter_multiplier": 1.2,
        "cumulative_damage_factor": 0.5,
        "stamina_low_threshold": 0.3,
        "stamina_low_multiplier": 1.3,
        "chin_factor": 200,
        "max_chance": 0.9,
        "threshold_chin_divisor": 4,
        "threshold_experience_divisor": 10,
        "threshold_damage_factor": 0.55,
        "threshold_stamina_base": 0.7,
        "threshold_stamina_factor": 0.3,
        "threshold_floor": 10,
    },
    "recovery": {
        "knockdown": {
            "base_chance_multiplier": 0.5,
            "experience_bonus": 300,
            "damage_penalty": 0.4,
            "stamina_factor": 0.5,
            "early_count_bonus": 1.3,
            "mid_count_bonus": 1.1,
            "late_count_penalty": 0.7,
            "previous_kd_factor": 0.85,
            "max_chance": 0.95,
            "min_chance": 0.1,
        },
        "between_rounds": {"head_damage_recovery": 0.1, "body_damage_recovery": 0.05},
    },
    "tko": {
        "damage_thresholds": {"severe": 0.9, "moderate": 0.8, "elevated": 0.7},
        "damage_chances": {"severe": 0.4, "moderate": 0.2, "elevated": 0.1},
        "hurt_bonus": 0.15,
        "prolonged_hurt_seconds": 5.0,
        "prolonged_hurt_bonus": 0.15,
        "knockdowns_this_round": {"one": 0.2, "two": 0.45, "three_plus": 0.7},
        "cut_severity": {"severe": 0.2, "moderate": 0.1},
        "referee_protectiveness_base": 0.5,
    },
    "cuts": {
        "damage_threshold": 12,
        "hook_chance_bonus": 0.03,
        "uppercut_chance_bonus": 0.02,
        "severity_thresholds": {"damage_20": 3, "damage_15": 2, "damage_10": 1},
        "eyebrow_bonus": 1,
        "max_severity": 4,
        "locations": {
            "left_eyebrow": 0.3,
            "right_eyebrow": 0.3,
            "left_eye": 0.1,
            "right_eye": 0.1,
            "nose": 0.1,
            "lip": 0.1,
        },
    },
    "swelling": {
        "chance_per_check": 0.05,
        "min_clean_hits": 10,
        "hits_threshold_severe": 15,
        "hits_threshold_moderate": 10,
        "hits_threshold_mild": 5,
    },
    "vision": {
        "cut_impairment_per_severity": 0.1,
        "swelling_impairment_per_severity": 0.15,
        "max_impairment": 0.5,
    },
}

# ---------------------------------------------------------------------------
# position
# ---------------------------------------------------------------------------

_POSITION: dict[str, Any] = {
    "ring": {
        "position_limit": 9.5,
        "corner_threshold": 7.0,
        "ropes_threshold": 8.0,
        "center_threshold": 3.0,
        "min_separation": 1.0,
        "clinch_break_distance": 3.0,
    },
    "zones": {"clinch": 1.5, "inside": 2.5, "close": 3.5, "medium": 5.0, "long": 6.5},
    "speeds": {
        "forward": 2.0,
        "backward": 1.5,
        "lateral": 1.2,
        "circling": 1.0,
        "cutting": 2.5,
        "retreating": 1.8,
        "fallback": 1.5,
    },
    "speed_modifiers": {
        "foot_speed_base": 0.5,
        "foot_speed_divisor": 100,
        "stamina_base": 0.6,
        "stamina_factor": 0.4,
        "footwork_base": 0.8,
        "footwork_divisor": 250,
    },
    "cut_off": {"intercept_fraction": 0.3, "speed_multiplier": 1.2},
}


DEFAULT_PARAMETERS: dict[str, Any] = {
    "combat": {
        "punches": _PUNCHES,
        "weight_classes": _WEIGHT_CLASSES,
        "resolution": _RESOLUTION,
    },
    "stamina": _STAMINA,
    "ai": _AI,
    "damage": _DAMAGE,
    "position": _POSITION,
}
"""Complete fallback tree, one top-level key per parameter category."""
