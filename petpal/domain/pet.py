"""
Pet - owns one pet's stat vector and profile, applies decay and actions.

Every action validates all of its stat deltas before touching state, so a
rejected action never leaves a partial mutation behind.
"""

import json
import logging
import random
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import uuid4

from .catalog import MYSTERY_SNACK_OUTCOMES, FoodItem, FoodKind, ToyItem, VetKind, VetOption, normalize_customization
from .stats import CRITICAL_HEALTH, Mood, PetStats, Stage, WeekSnapshot, derive_mood, evolution_stage
from .validators import (
    TRICK_NAME_CHARSET,
    TRICK_NAME_MAX_LEN,
    ErrorKind,
    validate_affordability,
    validate_bounded_delta,
    validate_name_token,
    validate_unique,
)

logger = logging.getLogger(__name__)

# Per-tick decay amounts
DECAY = {
    "hunger": -5,
    "happiness": -3,
    "energy": -2,
    "hygiene": -2,
}


@dataclass(frozen=True)
class PetTuning:
    """Fixed amounts for the catalog-free actions."""
    rest_energy_boost: int = 20
    clean_cost: int = 2
    clean_hygiene_boost: int = 30
    trick_cost: int = 10
    full_treatment_bonus: int = 10


@dataclass(frozen=True)
class ActionLogEntry:
    action: str
    cost: int
    note: str
    id: str = field(default_factory=lambda: uuid4().hex)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class ActionResult:
    """
    Outcome of a pet action.

    error holds the failure kind (Unaffordable, OutOfRange, ...);
    message is a player-facing sentence.
    """
    valid: bool
    error: Optional[str] = None
    message: Optional[str] = None
    cost: int = 0
    applied_effects: Dict[str, int] = field(default_factory=dict)

    @classmethod
    def rejected(cls, error: str, message: str) -> "ActionResult":
        return cls(valid=False, error=error, message=message)


@dataclass
class PetProfile:
    name: str
    species: str = "dog"
    owner_name: str = ""
    customization: Dict[str, Any] = field(default_factory=dict)
    age: int = 0
    stage: Stage = Stage.BABY
    mood: Mood = Mood.CONTENT
    tricks: List[str] = field(default_factory=list)
    minigames_played: int = 0
    health_crisis: bool = False
    action_log: List[ActionLogEntry] = field(default_factory=list)


class Pet:
    """
    Stat engine for a single pet.

    The wallet balance is passed in by the caller; Pet only checks
    affordability, the ledger does the actual spending.
    """

    def __init__(
        self,
        profile: PetProfile,
        stats: Optional[PetStats] = None,
        rng: Optional[random.Random] = None,
        tuning: Optional[PetTuning] = None,
    ):
        self.profile = profile
        self.profile.customization = normalize_customization(profile.customization)
        self.stats = stats or PetStats.baseline()
        self.rng = rng or random.Random()
        self.tuning = tuning or PetTuning()
        self._refresh()

    @classmethod
    def create(
        cls,
        name: str,
        species: str = "dog",
        owner_name: str = "",
        customization: Optional[Dict[str, Any]] = None,
        **kwargs,
    ) -> "Pet":
        profile = PetProfile(
            name=name.strip(),
            species=species,
            owner_name=owner_name.strip(),
            customization=customization or {},
        )
        return cls(profile, **kwargs)

    # ------------------------------------------------------------------
    # Derived state
    # ------------------------------------------------------------------

    def _refresh(self) -> None:
        """Recompute mood, stage and the sticky crisis flag."""
        self.profile.mood = derive_mood(self.stats)
        self.profile.stage = evolution_stage(self.profile.age)
        if self.stats.health < CRITICAL_HEALTH:
            self.profile.health_crisis = True

    @property
    def name(self) -> str:
        return self.profile.name

    @property
    def mood(self) -> Mood:
        return self.profile.mood

    @property
    def stage(self) -> Stage:
        return self.profile.stage

    def _deltas(self, requested: Dict[str, int]) -> Optional[Dict[str, int]]:
        """Validate every requested delta; None if any one is out of range."""
        effective = {}
        for stat, delta in requested.items():
            check = validate_bounded_delta(getattr(self.stats, stat), delta)
            if not check.valid:
                return None
            effective[stat] = check.delta
        return effective

    def _apply(self, effective: Dict[str, int]) -> None:
        for stat, delta in effective.items():
            setattr(self.stats, stat, getattr(self.stats, stat) + delta)
        self._refresh()

    def _log(self, action: str, cost: int, note: str) -> None:
        self.profile.action_log.append(ActionLogEntry(action=action, cost=cost, note=note))

    def _succeed(self, action: str, cost: int, note: str, effective: Dict[str, int]) -> ActionResult:
        self._apply(effective)
        self._log(action, cost, note)
        return ActionResult(valid=True, cost=cost, message=note, applied_effects=effective)

    # ------------------------------------------------------------------
    # Clock-driven updates
    # ------------------------------------------------------------------

    def apply_decay_tick(self) -> Dict[str, int]:
        """
        Apply one decay tick.

        Hunger, happiness, energy and hygiene drop independently (a stat
        already at 0 just stays there). Health then takes a penalty from
        low hunger and low hygiene, measured before this tick's decay.

        Returns:
            Dict of deltas actually applied
        """
        hunger, hygiene = self.stats.hunger, self.stats.hygiene
        applied: Dict[str, int] = {}

        for stat, delta in DECAY.items():
            check = validate_bounded_delta(getattr(self.stats, stat), delta)
            if check.valid and check.delta:
                applied[stat] = check.delta

        penalty = health_penalty(hunger, hygiene)
        if penalty:
            check = validate_bounded_delta(self.stats.health, -penalty)
            if check.valid and check.delta:
                applied["health"] = check.delta

        self._apply(applied)
        return applied

    def age_tick(self) -> Stage:
        previous = self.profile.stage
        self.profile.age += 1
        self._refresh()
        if self.profile.stage is not previous:
            logger.info(json.dumps({
                "event": "pet_evolved",
                "pet": self.profile.name,
                "age": self.profile.age,
                "stage": self.profile.stage.value,
            }))
        return self.profile.stage

    # ------------------------------------------------------------------
    # Player actions
    # ------------------------------------------------------------------

    def feed(self, item: FoodItem, wallet: int) -> ActionResult:
        affordability = validate_affordability(item.cost, wallet)
        if not affordability.valid:
            return ActionResult.rejected(affordability.error, "You can't afford that yet.")

        if item.kind is FoodKind.MYSTERY:
            low, high = MYSTERY_SNACK_OUTCOMES
            hunger_boost = low if self.rng.random() < 0.5 else high
        else:
            hunger_boost = item.hunger_restore

        effective = self._deltas({"hunger": hunger_boost, "happiness": item.happiness_bonus})
        if effective is None:
            return ActionResult.rejected(ErrorKind.OUT_OF_RANGE.value, "That would overfill a stat. Try a smaller treat.")

        return self._succeed("feed", item.cost, f"Fed {self.name} a {item.name}.", effective)

    def play(self, item: ToyItem, wallet: int) -> ActionResult:
        affordability = validate_affordability(item.cost, wallet)
        if not affordability.valid:
            return ActionResult.rejected(affordability.error, "You can't afford that yet.")

        effective = self._deltas({"happiness": item.happiness_restore, "energy": -item.energy_cost})
        if effective is None:
            return ActionResult.rejected(ErrorKind.OUT_OF_RANGE.value, "That would push a stat too far.")

        return self._succeed("play", item.cost, f"Played with {self.name} using {item.name}.", effective)

    def rest(self) -> ActionResult:
        effective = self._deltas({"energy": self.tuning.rest_energy_boost})
        if effective is None:
            return ActionResult.rejected(ErrorKind.OUT_OF_RANGE.value, "Energy is already maxed out.")
        return self._succeed("rest", 0, f"{self.name} took a power nap.", effective)

    def clean(self, wallet: int) -> ActionResult:
        cost = self.tuning.clean_cost
        affordability = validate_affordability(cost, wallet)
        if not affordability.valid:
            return ActionResult.rejected(affordability.error, "You can't afford that yet.")

        effective = self._deltas({"hygiene": self.tuning.clean_hygiene_boost})
        if effective is None:
            return ActionResult.rejected(ErrorKind.OUT_OF_RANGE.value, "Hygiene is already at the maximum.")
        return self._succeed("clean", cost, f"{self.name} got a fresh clean.", effective)

    def visit_vet(self, option: VetOption, wallet: int) -> ActionResult:
        """
        Restore health at the vet.

        The full treatment also gives a small bonus to the other four
        stats; each bonus must fit or the visit is rejected as a whole.
        """
        affordability = validate_affordability(option.cost, wallet)
        if not affordability.valid:
            return ActionResult.rejected(affordability.error, "You can't afford that yet.")

        health = self._deltas({"health": option.health_restore})
        if health is None:
            return ActionResult.rejected(ErrorKind.OUT_OF_RANGE.value, "Health is already at the maximum.")

        if option.kind is VetKind.FULL_TREATMENT:
            bonus = self.tuning.full_treatment_bonus
            extras = self._deltas({"hunger": bonus, "happiness": bonus, "energy": bonus, "hygiene": bonus})
            if extras is None:
                return ActionResult.rejected(ErrorKind.OUT_OF_RANGE.value, "Those boosts would overfill a stat.")
            health.update(extras)

        return self._succeed("vet", option.cost, f"{self.name} received {option.name}.", health)

    def teach_trick(self, trick_name: str, wallet: int) -> ActionResult:
        cost = self.tuning.trick_cost
        affordability = validate_affordability(cost, wallet)
        if not affordability.valid:
            return ActionResult.rejected(affordability.error, "You can't afford that yet.")

        fmt = validate_name_token(trick_name, TRICK_NAME_MAX_LEN, TRICK_NAME_CHARSET)
        if not fmt.valid:
            return ActionResult.rejected(fmt.error, "Use letters, numbers, spaces, apostrophes, periods, or hyphens only.")

        trimmed = trick_name.strip()
        unique = validate_unique(trimmed, self.profile.tricks)
        if not unique.valid:
            return ActionResult.rejected(unique.error, "That trick is already known.")

        self.profile.tricks.append(trimmed)
        self._log("trick", cost, f"{self.name} learned {trimmed}.")
        return ActionResult(valid=True, cost=cost, message=f"{self.name} learned {trimmed}.",
                            applied_effects={})

    def record_minigame(self) -> int:
        self.profile.minigames_played += 1
        return self.profile.minigames_played

    def snapshot(self) -> WeekSnapshot:
        return WeekSnapshot.from_stats(self.stats)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def reset(self) -> None:
        """Back to the baseline stats; identity and cosmetics are kept."""
        self.stats = PetStats.baseline()
        self.profile.age = 0
        self.profile.tricks = []
        self.profile.minigames_played = 0
        self.profile.health_crisis = False
        self.profile.action_log = []
        self._refresh()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.profile.name,
            "species": self.profile.species,
            "owner_name": self.profile.owner_name,
            "customization": dict(self.profile.customization),
            "age": self.profile.age,
            "stage": self.profile.stage.value,
            "mood": self.profile.mood.value,
            "tricks": list(self.profile.tricks),
            "minigames_played": self.profile.minigames_played,
            "health_crisis": self.profile.health_crisis,
            "stats": self.stats.as_dict(),
        }


def health_penalty(hunger: int, hygiene: int) -> int:
    """Health lost per decay tick from low hunger plus low hygiene."""
    if hunger < 30:
        from_hunger = 5
    elif hunger < 50:
        from_hunger = 2
    else:
        from_hunger = 0

    if hygiene < 30:
        from_hygiene = 3
    elif hygiene < 50:
        from_hygiene = 1
    else:
        from_hygiene = 0

    return from_hunger + from_hygiene
