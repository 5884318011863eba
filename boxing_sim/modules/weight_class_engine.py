"""Weight-class assignment engine.

Reads the weight-class table from ``combat.weight_classes`` in the
model parameters and maps a fighter's weight in kilograms to the punch
output profile of their division.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from boxing_sim.models import Fighter
from boxing_sim.rules_registry import ParameterStore, load_parameter_store


@dataclass(frozen=True)
class WeightClassProfile:
    """Punch-output parameters for one weight division."""

    name: str
    min_weight_kg: float
    activity_rate: float
    max_combo_length: int
    combo_chance: float
    recovery_ticks: int
    stamina_multiplier: float
    damage_multiplier: float
    punches_per_round_min: int
    punches_per_round_max: int


_FALLBACK_PROFILE = WeightClassProfile(
    name="middleweight",
    min_weight_kg=0.0,
    activity_rate=0.5,
    max_combo_length=5,
    combo_chance=0.4,
    recovery_ticks=2,
    stamina_multiplier=1.0,
    damage_multiplier=1.0,
    punches_per_round_min=55,
    punches_per_round_max=75,
)


@lru_cache(maxsize=16)
def list_weight_classes(params: ParameterStore | None = None) -> tuple[WeightClassProfile, ...]:
    """Return every configured weight class ordered from lightest to heaviest."""
    store = params or load_parameter_store()
    table = store.section("combat.weight_classes")
    classes = []
    for name, raw in table.items():
        band = raw.get("punches_per_round", {})
        classes.append(
            WeightClassProfile(
                name=name,
                min_weight_kg=float(raw.get("min_weight", 0.0)),
                activity_rate=float(raw.get("activity_rate", 0.5)),
                max_combo_length=int(raw.get("max_combo_length", 5)),
                combo_chance=float(raw.get("combo_chance", 0.4)),
                recovery_ticks=int(raw.get("recovery_ticks", 2)),
                stamina_multiplier=float(raw.get("stamina_multiplier", 1.0)),
                damage_multiplier=float(raw.get("damage_multiplier", 1.0)),
                punches_per_round_min=int(band.get("min", 55)),
                punches_per_round_max=int(band.get("max", 75)),
            )
        )
    if not classes:
        classes.append(_FALLBACK_PROFILE)
    return tuple(sorted(classes, key=lambda profile: profile.min_weight_kg))


def classify_weight_kg(weight_kg: float, params: ParameterStore | None = None) -> WeightClassProfile:
    """Return the heaviest class whose minimum weight *weight_kg* reaches.

    Weights below the lightest class minimum fall into the lightest class.
    """
    classes = list_weight_classes(params)
    selected = classes[0]
    for profile in classes:
        if weight_kg >= profile.min_weight_kg:
            selected = profile
    return selected


def weight_class_profile(fighter: Fighter, params: ParameterStore | None = None) -> WeightClassProfile:
    """Return the profile for *fighter*'s fight-night weight."""
    return classify_weight_kg(fighter.physical.weight, params)
