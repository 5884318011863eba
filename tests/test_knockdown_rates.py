from sim_knockdown_rates import (
    REAL_WORLD_KNOCKDOWNS_PER_FIGHT_MAX,
    REAL_WORLD_POWER_PUNCH_KNOCKDOWN_RATE_MAX,
    simulate_fight,
    summarize,
    template,
)

from boxing_sim.parameter_defaults import DEFAULT_PARAMETERS
from boxing_sim.rules_registry import ParameterStore

PARAMS = ParameterStore(DEFAULT_PARAMETERS)


def _average_fights(seeds: range, rounds: int) -> dict[str, float]:
    samples = [
        simulate_fight(seed, template("Average A"), template("Average B"), rounds=rounds, params=PARAMS)
        for seed in seeds
    ]
    return summarize(samples)


def test_average_fighters_rarely_go_down() -> None:
    report = _average_fights(range(6), rounds=4)

    assert report["clean_power_avg"] > 0
    assert report["knockdowns_avg"] <= REAL_WORLD_KNOCKDOWNS_PER_FIGHT_MAX
    assert report["power_punch_kd_rate"] <= REAL_WORLD_POWER_PUNCH_KNOCKDOWN_RATE_MAX


def test_same_seed_same_fight() -> None:
    first = simulate_fight(3, template("A"), template("B"), rounds=2, params=PARAMS)
    second = simulate_fight(3, template("A"), template("B"), rounds=2, params=PARAMS)

    assert first == second
