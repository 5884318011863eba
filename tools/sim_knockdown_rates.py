#!/usr/bin/env python3
"""Knockdown-rate simulation for balance calibration.

Real-life anchors used for comparison:
- Evenly matched pros rarely see more than one knockdown in a full fight.
- Only a small share of clean power punches put an average chin down.

This script runs seeded fights of decide/resolve/apply ticks between
fighter templates and reports knockdowns per fight and the knockdown rate
on landed clean power punches.  It is a tuning aid, not a fight loop.
"""

from __future__ import annotations

import argparse
import logging
import random
import statistics
import sys
from dataclasses import dataclass
from pathlib import Path


def _bootstrap_project_path() -> None:
    root = Path(__file__).resolve().parents[1]
    candidate = str(root)
    if candidate not in sys.path:
        sys.path.insert(0, candidate)


_bootstrap_project_path()

from boxing_sim.constants import ROUND_SECONDS, TICK_SECONDS
from boxing_sim.models import FightContext, Fighter, FighterState, PunchType
from boxing_sim.modules import damage_model, stamina_economy
from boxing_sim.modules.attribute_engine import build_fighter, reset_for_round, update_stun
from boxing_sim.modules.combat_resolver import CombatResolver
from boxing_sim.modules.decision_engine import DecisionSession
from boxing_sim.modules.position_model import apply_movement, prevent_overlap, reset_positions
from boxing_sim.rules_registry import ParameterStore, load_parameter_store

logger = logging.getLogger("sim_knockdown_rates")

# Above these the model drops people far more often than real fights do.
REAL_WORLD_KNOCKDOWNS_PER_FIGHT_MAX = 1.0
REAL_WORLD_POWER_PUNCH_KNOCKDOWN_RATE_MAX = 0.10

_GROUPS = ("power", "speed", "stamina", "defense", "offense", "technical", "mental")


@dataclass(frozen=True)
class FightSample:
    knockdowns: int
    clean_power_punches: int
    stopped: bool
    rounds_completed: int


def template(name: str, *, rating: int = 70, chin: int | None = None, knockout_power: int | None = None) -> dict:
    """Profile payload with every rating set to *rating*."""
    payload: dict = {"name": name}
    for group in _GROUPS:
        payload[group] = _all_ratings(group, rating)
    if chin is not None:
        payload["mental"]["chin"] = chin
    if knockout_power is not None:
        payload["power"]["knockout_power"] = knockout_power
    return payload


def _all_ratings(group: str, rating: int) -> dict[str, int]:
    keys = {
        "power": ("power_left", "power_right", "knockout_power", "body_punching", "punching_stamina"),
        "speed": ("hand_speed", "foot_speed", "reflexes", "first_step", "combination_speed"),
        "stamina": ("cardio", "recovery_rate", "work_rate", "second_wind", "pace_control"),
        "defense": (
            "head_movement",
            "blocking",
            "parrying",
            "shoulder_roll",
            "clinch_defense",
            "clinch_offense",
            "ring_awareness",
        ),
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
    return {key: rating for key in keys[group]}


def simulate_fight(
    seed: int,
    payload_a: dict,
    payload_b: dict,
    *,
    rounds: int,
    params: ParameterStore,
) -> FightSample:
    rng = random.Random(seed)
    fighter_a = build_fighter(payload_a, fighter_id="A")
    fighter_b = build_fighter(payload_b, fighter_id="B")
    session = DecisionSession(params, rng)
    resolver = CombatResolver(params, rng)

    knockdowns = 0
    clean_power = 0
    ticks_per_round = int(ROUND_SECONDS / TICK_SECONDS)

    for round_number in range(1, rounds + 1):
        for tick in range(ticks_per_round):
            context = FightContext(round_number=round_number, total_rounds=rounds, round_time=tick * TICK_SECONDS)
            decision_a = session.decide(fighter_a, fighter_b, context)
            decision_b = session.decide(fighter_b, fighter_a, context)
            fighter_a.transition_to(decision_a.state, decision_a.sub_state)
            fighter_b.transition_to(decision_b.state, decision_b.sub_state)

            for fighter, opponent, decision in ((fighter_a, fighter_b, decision_a), (fighter_b, fighter_a, decision_b)):
                apply_movement(fighter, opponent, decision.action, TICK_SECONDS, rng=rng, params=params)
                stamina_economy.update(fighter, decision.action, TICK_SECONDS, params)
            prevent_overlap(fighter_a, fighter_b, params)

            result = resolver.resolve(fighter_a, fighter_b, decision_a, decision_b, context)
            fighters = {"A": fighter_a, "B": fighter_b}
            for hit in result.hits:
                target = fighters[str(hit.target)]
                punch = PunchType.parse(hit.punch_type)
                if hit.is_clean and punch is not None and punch.is_power:
                    clean_power += 1
                outcome = damage_model.apply_hit(target, hit, rng, params=params)
                if outcome.hurt:
                    session.record_hurt(target.fighter_id, round_number, context.round_time)

            if result.knockdown is not None:
                knockdowns += 1
                downed = fighters[result.knockdown.target]
                damage_model.apply_knockdown(downed, params)
                session.record_knockdown(downed.fighter_id, round_number)
                if not _beats_count(downed, rng, params):
                    return FightSample(knockdowns, clean_power, True, round_number - 1)
                downed.transition_to(FighterState.RECOVERED)
                reset_positions(fighter_a, fighter_b)

            update_stun(fighter_a)
            update_stun(fighter_b)

        for fighter in (fighter_a, fighter_b):
            stamina_economy.between_rounds_recovery(fighter, params=params)
            damage_model.between_rounds_recovery(fighter, params)
            reset_for_round(fighter)
        reset_positions(fighter_a, fighter_b)
        resolver.reset_cooldowns()

    return FightSample(knockdowns, clean_power, False, rounds)


def _beats_count(fighter: Fighter, rng: random.Random, params: ParameterStore) -> bool:
    if fighter.combat.knockdowns_this_round >= 3:
        return False
    for count in range(1, 11):
        if rng.random() < damage_model.calculate_recovery_chance(fighter, count, params):
            return True
    return False


def summarize(samples: list[FightSample]) -> dict[str, float]:
    knockdowns = [s.knockdowns for s in samples]
    power = sum(s.clean_power_punches for s in samples)
    return {
        "knockdowns_avg": statistics.mean(knockdowns),
        "knockdowns_max": max(knockdowns),
        "power_punch_kd_rate": 0.0 if power == 0 else sum(knockdowns) / power,
        "clean_power_avg": statistics.mean(s.clean_power_punches for s in samples),
        "stoppage_pct": sum(1 for s in samples if s.stopped) / len(samples),
    }


def _print_report(label: str, report: dict[str, float]) -> None:
    in_range = (
        report["knockdowns_avg"] <= REAL_WORLD_KNOCKDOWNS_PER_FIGHT_MAX
        and report["power_punch_kd_rate"] <= REAL_WORLD_POWER_PUNCH_KNOCKDOWN_RATE_MAX
    )
    print(f"\n== {label} ==")
    print(f"Knockdowns/fight avg {report['knockdowns_avg']:.2f} | max {report['knockdowns_max']:.0f}")
    print(
        "Clean power punches/fight "
        f"{report['clean_power_avg']:.1f} | knockdown rate {report['power_punch_kd_rate']:.4f}"
    )
    print(f"Stoppages {report['stoppage_pct']:.3f}")
    print(f"Benchmark: {'IN RANGE' if in_range else 'OUT OF RANGE'}")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run knockdown-rate simulations.")
    parser.add_argument(
        "--runs",
        type=int,
        default=50,
        help="Number of deterministic seeds to run per matchup (default: 50).",
    )
    parser.add_argument(
        "--rounds",
        type=int,
        default=12,
        help="Scheduled rounds per fight (default: 12).",
    )
    parser.add_argument(
        "--version",
        default=None,
        help="Parameter version under rules/model/ (default: newest).",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        help="Logging level for the simulation modules (default: WARNING).",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")
    if args.runs < 1:
        raise SystemExit("--runs must be >= 1")
    if args.rounds < 1:
        raise SystemExit("--rounds must be >= 1")

    params = load_parameter_store(args.version) if args.version else load_parameter_store()
    logger.info("Using parameter version %s", params.version)
    seeds = range(args.runs)

    matchups = {
        "Average vs Average": (template("Average A"), template("Average B")),
        "Puncher (KO 99) vs Glass Chin (40)": (
            template("Puncher", knockout_power=99),
            template("Glass Chin", chin=40),
        ),
        "Puncher (KO 99) vs Iron Chin (95)": (
            template("Puncher", knockout_power=99),
            template("Iron Chin", chin=95),
        ),
    }

    print(f"Knockdown-rate simulation | runs per matchup: {args.runs} | rounds: {args.rounds}")
    for label, (payload_a, payload_b) in matchups.items():
        samples = [simulate_fight(seed, payload_a, payload_b, rounds=args.rounds, params=params) for seed in seeds]
        _print_report(label, summarize(samples))


if __name__ == "__main__":
    main()
