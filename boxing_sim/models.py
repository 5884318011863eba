from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, TypeVar, Union

from boxing_sim.constants import MAX_ATTRIBUTE, MIN_ATTRIBUTE, ROUND_SECONDS, SCHEDULED_ROUNDS
from boxing_sim.utils import clamp_int


class FighterConfigError(ValueError):
    """Raised when a fighter profile cannot be turned into a fighter."""


def _parse_enum(enum_type: type[Enum], value: object, label: str) -> Any:
    if isinstance(value, enum_type):
        return value
    try:
        return enum_type(str(value))
    except ValueError:
        raise FighterConfigError(f"Unknown {label}: {value}") from None


# ---------------------------------------------------------------------------
# States
# ---------------------------------------------------------------------------

class FighterState(str, Enum):
    NEUTRAL = "NEUTRAL"
    OFFENSIVE = "OFFENSIVE"
    DEFENSIVE = "DEFENSIVE"
    TIMING = "TIMING"
    MOVING = "MOVING"
    CLINCH = "CLINCH"
    KNOCKED_DOWN = "KNOCKED_DOWN"
    RECOVERED = "RECOVERED"


class OffensiveSubState(str, Enum):
    JABBING = "JABBING"
    COMBINATION = "COMBINATION"
    POWER_SHOT = "POWER_SHOT"
    BODY_WORK = "BODY_WORK"


class DefensiveSubState(str, Enum):
    HIGH_GUARD = "HIGH_GUARD"
    PHILLY_SHELL = "PHILLY_SHELL"
    HEAD_MOVEMENT = "HEAD_MOVEMENT"
    DISTANCE = "DISTANCE"
    PARRYING = "PARRYING"


class MovementSubState(str, Enum):
    CUTTING_OFF = "CUTTING_OFF"
    CIRCLING = "CIRCLING"
    RETREATING = "RETREATING"


SubState = Union[OffensiveSubState, DefensiveSubState, MovementSubState]

SUB_STATE_TYPES: dict[FighterState, type[Enum]] = {
    FighterState.OFFENSIVE: OffensiveSubState,
    FighterState.DEFENSIVE: DefensiveSubState,
    FighterState.MOVING: MovementSubState,
}
"""Which sub-state family is valid under each parent state."""

# States chosen by weighted selection each tick.
SELECTABLE_STATES: tuple[FighterState, ...] = (
    FighterState.OFFENSIVE,
    FighterState.DEFENSIVE,
    FighterState.TIMING,
    FighterState.MOVING,
    FighterState.CLINCH,
)


def sub_state_matches(state: FighterState, sub_state: SubState | None) -> bool:
    """Return ``True`` if *sub_state* is allowed under *state*."""
    if sub_state is None:
        return True
    expected = SUB_STATE_TYPES.get(state)
    return expected is not None and isinstance(sub_state, expected)


# ---------------------------------------------------------------------------
# Styles
# ---------------------------------------------------------------------------

class FightingStyle(str, Enum):
    OUT_BOXER = "out-boxer"
    SWARMER = "swarmer"
    SLUGGER = "slugger"
    BOXER_PUNCHER = "boxer-puncher"
    COUNTER_PUNCHER = "counter-puncher"
    INSIDE_FIGHTER = "inside-fighter"
    VOLUME_PUNCHER = "volume-puncher"
    SWITCH_HITTER = "switch-hitter"


class OffensiveStyle(str, Enum):
    COMBO_PUNCHER = "combo-puncher"
    JAB_AND_MOVE = "jab-and-move"
    HEADHUNTER = "headhunter"
    BODY_SNATCHER = "body-snatcher"
    BALANCED = "balanced"


class DefensiveStyle(str, Enum):
    HIGH_GUARD = "high-guard"
    PHILLY_SHELL = "philly-shell"
    PEEK_A_BOO = "peek-a-boo"
    SLICK = "slick"
    DISTANCE = "distance"
    HYBRID = "hybrid"


class Stance(str, Enum):
    ORTHODOX = "orthodox"
    SOUTHPAW = "southpaw"
    SWITCH = "switch"


class BodyType(str, Enum):
    LEAN = "lean"
    AVERAGE = "average"
    MUSCULAR = "muscular"
    STOCKY = "stocky"
    LANKY = "lanky"
    TALL_RANGY = "tall-rangy"


# ---------------------------------------------------------------------------
# Actions
# ---------------------------------------------------------------------------

class ActionType(str, Enum):
    PUNCH = "punch"
    BLOCK = "block"
    EVADE = "evade"
    MOVE = "move"
    CLINCH = "clinch"
    FEINT = "feint"
    WAIT = "wait"


class PunchType(str, Enum):
    JAB = "jab"
    CROSS = "cross"
    LEAD_HOOK = "lead_hook"
    REAR_HOOK = "rear_hook"
    LEAD_UPPERCUT = "lead_uppercut"
    REAR_UPPERCUT = "rear_uppercut"
    BODY_JAB = "body_jab"
    BODY_CROSS = "body_cross"
    BODY_HOOK_LEAD = "body_hook_lead"
    BODY_HOOK_REAR = "body_hook_rear"

    @classmethod
    def parse(cls, value: object) -> PunchType | None:
        """Return the punch named by *value*, or ``None`` if it is unknown."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value))
        except ValueError:
            return None

    @property
    def is_body(self) -> bool:
        return self.value.startswith("body")

    @property
    def is_jab(self) -> bool:
        return "jab" in self.value

    @property
    def is_lead(self) -> bool:
        return "lead" in self.value

    @property
    def is_hook(self) -> bool:
        return "hook" in self.value

    @property
    def is_uppercut(self) -> bool:
        return "uppercut" in self.value

    @property
    def is_straight(self) -> bool:
        return self in (PunchType.JAB, PunchType.CROSS)

    @property
    def is_power(self) -> bool:
        """Hooks, uppercuts and crosses (including the body cross)."""
        return self.is_hook or self.is_uppercut or self in (PunchType.CROSS, PunchType.BODY_CROSS)

    @property
    def location(self) -> HitLocation:
        return HitLocation.BODY if self.is_body else HitLocation.HEAD


class HitLocation(str, Enum):
    HEAD = "head"
    BODY = "body"


class BlockType(str, Enum):
    HIGH_GUARD = "high_guard"
    PHILLY_SHELL = "philly_shell"
    PARRY = "parry"


BLOCK_SUB_STATES: dict[BlockType, DefensiveSubState] = {
    BlockType.HIGH_GUARD: DefensiveSubState.HIGH_GUARD,
    BlockType.PHILLY_SHELL: DefensiveSubState.PHILLY_SHELL,
    BlockType.PARRY: DefensiveSubState.PARRYING,
}


class EvadeType(str, Enum):
    SLIP = "slip"
    DUCK = "duck"
    LEAN = "lean"


class MoveDirection(str, Enum):
    FORWARD = "forward"
    BACKWARD = "backward"
    LEFT = "left"
    RIGHT = "right"


@dataclass(frozen=True)
class Action:
    """One fighter's attempt for a single tick."""

    type: ActionType
    punch_type: PunchType | str | None = None
    combination: tuple[PunchType | str, ...] = ()
    target: HitLocation | None = None
    is_counter: bool = False
    block_type: BlockType | None = None
    evade_type: EvadeType | None = None
    direction: MoveDirection | None = None
    cutting: bool = False
    lateral: bool = False

    @property
    def is_combination(self) -> bool:
        return self.type is ActionType.PUNCH and bool(self.combination)

    @classmethod
    def punch(cls, punch_type: PunchType | str, *, is_counter: bool = False) -> Action:
        parsed = PunchType.parse(punch_type)
        target = parsed.location if parsed is not None else HitLocation.HEAD
        return cls(ActionType.PUNCH, punch_type=punch_type, target=target, is_counter=is_counter)

    @classmethod
    def combo(cls, punches: list[PunchType] | tuple[PunchType, ...]) -> Action:
        return cls(ActionType.PUNCH, combination=tuple(punches), target=HitLocation.HEAD)

    @classmethod
    def block(cls, block_type: BlockType = BlockType.HIGH_GUARD) -> Action:
        return cls(ActionType.BLOCK, block_type=block_type)

    @classmethod
    def evade(cls, evade_type: EvadeType = EvadeType.SLIP) -> Action:
        return cls(ActionType.EVADE, evade_type=evade_type)

    @classmethod
    def move(cls, direction: MoveDirection, *, cutting: bool = False, lateral: bool = False) -> Action:
        return cls(ActionType.MOVE, direction=direction, cutting=cutting, lateral=lateral)

    @classmethod
    def clinch(cls) -> Action:
        return cls(ActionType.CLINCH)

    @classmethod
    def wait(cls) -> Action:
        return cls(ActionType.WAIT)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"type": self.type.value}
        if self.punch_type is not None:
            payload["punch_type"] = str(getattr(self.punch_type, "value", self.punch_type))
        if self.combination:
            payload["combination"] = [str(getattr(p, "value", p)) for p in self.combination]
        if self.target is not None:
            payload["target"] = self.target.value
        if self.is_counter:
            payload["is_counter"] = True
        if self.block_type is not None:
            payload["block_type"] = self.block_type.value
        if self.evade_type is not None:
            payload["evade_type"] = self.evade_type.value
        if self.direction is not None:
            payload["direction"] = self.direction.value
        if self.cutting:
            payload["cutting"] = True
        if self.lateral:
            payload["lateral"] = True
        return payload


# ---------------------------------------------------------------------------
# Fighter attribute profile
# ---------------------------------------------------------------------------

_G = TypeVar("_G", bound="_RatingGroup")


@dataclass
class _RatingGroup:
    """Base for groups of 0-100 ratings."""

    def to_dict(self) -> dict[str, int]:
        return {item.name: getattr(self, item.name) for item in fields(self)}

    @classmethod
    def from_dict(cls: type[_G], payload: dict[str, Any] | None) -> _G:
        payload = payload or {}
        values: dict[str, int] = {}
        for item in fields(cls):
            if item.name in payload:
                values[item.name] = clamp_int(int(payload[item.name]), MIN_ATTRIBUTE, MAX_ATTRIBUTE)
        return cls(**values)


@dataclass
class PowerAttributes(_RatingGroup):
    power_left: int = 70
    power_right: int = 75
    knockout_power: int = 70
    body_punching: int = 70
    punching_stamina: int = 70


@dataclass
class SpeedAttributes(_RatingGroup):
    hand_speed: int = 70
    foot_speed: int = 70
    reflexes: int = 70
    first_step: int = 70
    combination_speed: int = 70


@dataclass
class ConditioningAttributes(_RatingGroup):
    """Stamina ratings (kept apart from the live stamina pool)."""

    cardio: int = 70
    recovery_rate: int = 70
    work_rate: int = 70
    second_wind: int = 50
    pace_control: int = 60


@dataclass
class DefenseAttributes(_RatingGroup):
    head_movement: int = 65
    blocking: int = 70
    parrying: int = 60
    shoulder_roll: int = 50
    clinch_defense: int = 65
    clinch_offense: int = 60
    ring_awareness: int = 65


@dataclass
class OffenseAttributes(_RatingGroup):
    jab_accuracy: int = 70
    power_accuracy: int = 65
    body_accuracy: int = 65
    counter_punching: int = 60
    combination_punching: int = 70


@dataclass
class TechnicalAttributes(_RatingGroup):
    footwork: int = 65
    distance_management: int = 65
    inside_fighting: int = 60
    outside_fighting: int = 65
    ring_generalship: int = 60
    adaptability: int = 60
    fight_iq: int = 65


@dataclass
class MentalAttributes(_RatingGroup):
    chin: int = 75
    heart: int = 75
    killer_instinct: int = 65
    composure: int = 65
    confidence: int = 70
    experience: int = 60
    clutch_factor: int = 60


@dataclass
class PhysicalAttributes:
    height: float = 180.0
    weight: float = 75.0
    reach: float = 180.0
    age: int = 25
    stance: Stance = Stance.ORTHODOX
    body_type: BodyType = BodyType.AVERAGE

    def to_dict(self) -> dict[str, Any]:
        return {
            "height": self.height,
            "weight": self.weight,
            "reach": self.reach,
            "age": self.age,
            "stance": self.stance.value,
            "body_type": self.body_type.value,
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any] | None) -> PhysicalAttributes:
        payload = payload or {}
        return cls(
            height=float(payload.get("height", 180.0)),
            weight=float(payload.get("weight", 75.0)),
            reach=float(payload.get("reach", 180.0)),
            age=int(payload.get("age", 25)),
            stance=_parse_enum(Stance, payload.get("stance", "orthodox"), "stance"),
            body_type=_parse_enum(BodyType, payload.get("body_type", "average"), "body type"),
        )


@dataclass
class StyleProfile:
    primary: FightingStyle = FightingStyle.BOXER_PUNCHER
    offensive: OffensiveStyle = OffensiveStyle.COMBO_PUNCHER
    defensive: DefensiveStyle = DefensiveStyle.HIGH_GUARD

    def to_dict(self) -> dict[str, str]:
        return {
            "primary": self.primary.value,
            "offensive": self.offensive.value,
            "defensive": self.defensive.value,
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any] | None) -> StyleProfile:
        payload = payload or {}
        return cls(
            primary=_parse_enum(FightingStyle, payload.get("primary", "boxer-puncher"), "fighting style"),
            offensive=_parse_enum(OffensiveStyle, payload.get("offensive", "combo-puncher"), "offensive style"),
            defensive=_parse_enum(DefensiveStyle, payload.get("defensive", "high-guard"), "defensive style"),
        )


# ---------------------------------------------------------------------------
# Fighter combat state
# ---------------------------------------------------------------------------

@dataclass
class Position:
    x: float = 0.0
    y: float = 0.0

    def to_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y}


@dataclass
class Cut:
    location: str
    severity: int
    bleeding: bool = True


@dataclass
class Swelling:
    location: str
    severity: int


@dataclass
class CombatState:
    """Mutable per-fight state, reset at the opening bell."""

    state: FighterState = FighterState.NEUTRAL
    sub_state: SubState | None = None
    stamina: float = 100.0
    max_stamina: float = 100.0
    head_damage: float = 0.0
    body_damage: float = 0.0
    max_head_damage: float = 280.0
    max_body_damage: float = 240.0
    is_hurt: bool = False
    hurt_duration: float = 0.0
    stun_level: int = 0
    stun_duration: int = 0
    knockdowns_this_round: int = 0
    knockdowns_total: int = 0
    position: Position = field(default_factory=Position)
    cuts: list[Cut] = field(default_factory=list)
    swelling: list[Swelling] = field(default_factory=list)
    second_wind_used: bool = False
    clean_hits_taken: int = 0

    @property
    def is_stunned(self) -> bool:
        return self.stun_level > 0 and self.stun_duration > 0


@dataclass
class Fighter:
    fighter_id: str
    name: str
    physical: PhysicalAttributes = field(default_factory=PhysicalAttributes)
    power: PowerAttributes = field(default_factory=PowerAttributes)
    speed: SpeedAttributes = field(default_factory=SpeedAttributes)
    conditioning: ConditioningAttributes = field(default_factory=ConditioningAttributes)
    defense: DefenseAttributes = field(default_factory=DefenseAttributes)
    offense: OffenseAttributes = field(default_factory=OffenseAttributes)
    technical: TechnicalAttributes = field(default_factory=TechnicalAttributes)
    mental: MentalAttributes = field(default_factory=MentalAttributes)
    style: StyleProfile = field(default_factory=StyleProfile)
    optimal_range: float = 4.0
    combat: CombatState = field(default_factory=CombatState)

    def stamina_percent(self) -> float:
        if self.combat.max_stamina <= 0:
            return 0.0
        return self.combat.stamina / self.combat.max_stamina

    def head_damage_percent(self) -> float:
        if self.combat.max_head_damage <= 0:
            return 0.0
        return self.combat.head_damage / self.combat.max_head_damage

    def body_damage_percent(self) -> float:
        if self.combat.max_body_damage <= 0:
            return 0.0
        return self.combat.body_damage / self.combat.max_body_damage

    def transition_to(self, state: FighterState, sub_state: SubState | None = None) -> None:
        """Move to *state*; a sub-state from the wrong family is dropped."""
        self.combat.state = state
        self.combat.sub_state = sub_state if sub_state_matches(state, sub_state) else None

    def profile_dict(self) -> dict[str, Any]:
        return {
            "id": self.fighter_id,
            "name": self.name,
            "physical": self.physical.to_dict(),
            "power": self.power.to_dict(),
            "speed": self.speed.to_dict(),
            "stamina": self.conditioning.to_dict(),
            "defense": self.defense.to_dict(),
            "offense": self.offense.to_dict(),
            "technical": self.technical.to_dict(),
            "mental": self.mental.to_dict(),
            "style": self.style.to_dict(),
        }


# ---------------------------------------------------------------------------
# Per-tick inputs and outputs
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class StatusModifiers:
    """Transient buff/debuff scalars supplied by an external effects system."""

    aggression: float = 0.0
    defense: float = 0.0
    accuracy: float = 0.0
    power: float = 0.0
    speed: float = 0.0


NO_MODIFIERS = StatusModifiers()


@dataclass
class FightContext:
    """What the orchestrator knows about the bout at this tick."""

    round_number: int = 1
    total_rounds: int = SCHEDULED_ROUNDS
    round_time: float = 0.0
    round_duration: float = ROUND_SECONDS
    score_diffs: dict[str, float] = field(default_factory=dict)
    modifiers: dict[str, StatusModifiers] = field(default_factory=dict)

    def score_diff_for(self, fighter_id: str) -> float:
        return float(self.score_diffs.get(fighter_id, 0.0))

    def modifiers_for(self, fighter_id: str) -> StatusModifiers:
        return self.modifiers.get(fighter_id, NO_MODIFIERS)


@dataclass(frozen=True)
class Decision:
    state: FighterState
    sub_state: SubState | None
    action: Action
    target: HitLocation | None = None


class Outcome(str, Enum):
    HIT = "hit"
    BLOCKED = "blocked"
    EVADED = "evaded"
    MISS = "miss"


@dataclass
class PunchResult:
    outcome: Outcome
    punch_type: PunchType | str
    attacker: str
    target: str | None = None
    reason: str | None = None
    accuracy: float | None = None
    roll: float | None = None
    location: HitLocation | None = None
    damage: int = 0
    quality: str | None = None
    is_counter: bool = False
    caused_stun: bool = False
    block_type: str | None = None
    evade_type: str | None = None
    damage_reduction: float = 0.0
    combination_hits: int | None = None
    combination_total: int | None = None

    @property
    def is_clean(self) -> bool:
        return self.outcome is Outcome.HIT and self.quality == "clean"


@dataclass(frozen=True)
class ActionLogEntry:
    attacker: str
    punch_type: str
    outcome: Outcome


@dataclass(frozen=True)
class KnockdownEvent:
    attacker: str
    target: str
    punch_type: PunchType
    damage: int
    flash: bool = False


@dataclass
class ResolutionResult:
    hits: list[PunchResult] = field(default_factory=list)
    blocks: list[PunchResult] = field(default_factory=list)
    evades: list[PunchResult] = field(default_factory=list)
    misses: list[PunchResult] = field(default_factory=list)
    actions: list[ActionLogEntry] = field(default_factory=list)
    knockdown: KnockdownEvent | None = None

    def add(self, result: PunchResult) -> None:
        """File *result* under its outcome and append it to the action log."""
        if result.outcome is Outcome.HIT:
            self.hits.append(result)
        elif result.outcome is Outcome.BLOCKED:
            self.blocks.append(result)
        elif result.outcome is Outcome.EVADED:
            self.evades.append(result)
        else:
            self.misses.append(result)
        self.actions.append(
            ActionLogEntry(
                attacker=result.attacker,
                punch_type=str(getattr(result.punch_type, "value", result.punch_type)),
                outcome=result.outcome,
            )
        )


