from __future__ import annotations

from typing import Any, Dict, List

from pydantic import BaseModel, Field, field_validator, model_validator

from ..domain.catalog import get_species
from ..domain.pet import PetTuning
from ..domain.validators import validate_budget, validate_owner_name, validate_pet_name


class SalaryTier(BaseModel, frozen=True):
    min_health: int = Field(ge=0, le=100)
    amount: int = Field(ge=0)


class ActionTuning(BaseModel, frozen=True):
    rest_energy_boost: int = Field(default=20, gt=0)
    clean_cost: int = Field(default=2, gt=0)
    clean_hygiene_boost: int = Field(default=30, gt=0)
    trick_cost: int = Field(default=10, gt=0)
    full_treatment_bonus: int = Field(default=10, ge=0)


class GameConfig(BaseModel, extra="forbid"):
    """Game tuning loaded from config/game.yaml (all fields have defaults)."""

    total_weeks: int = Field(default=12, gt=0)
    week_duration_ms: int = Field(default=90_000, gt=0)
    decay_interval_ms: int = Field(default=4_000, gt=0)
    age_interval_ms: int = Field(default=60_000, gt=0)
    weekly_bill: int = Field(default=20, ge=0)
    starting_budget: int = 200
    salary_tiers: List[SalaryTier] = Field(
        default_factory=lambda: [SalaryTier(min_health=70, amount=30), SalaryTier(min_health=40, amount=15)]
    )
    actions: ActionTuning = Field(default_factory=ActionTuning)

    @field_validator("starting_budget")
    @classmethod
    def _check_budget(cls, value: int) -> int:
        check = validate_budget(value)
        if not check.valid:
            raise ValueError(f"starting_budget {value} rejected: {check.error}")
        return value

    @field_validator("salary_tiers")
    @classmethod
    def _sort_tiers(cls, tiers: List[SalaryTier]) -> List[SalaryTier]:
        return sorted(tiers, key=lambda t: t.min_health, reverse=True)

    def salary_for(self, health: int) -> int:
        """Weekly salary for the pet's current health (highest matching tier)."""
        for tier in self.salary_tiers:
            if health >= tier.min_health:
                return tier.amount
        return 0

    def pet_tuning(self) -> PetTuning:
        return PetTuning(**self.actions.model_dump())


class SessionSetup(BaseModel):
    """Player-supplied setup; customization is opaque to the engine."""

    name: str
    species: str = "dog"
    owner_name: str = ""
    customization: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        check = validate_pet_name(value)
        if not check.valid:
            raise ValueError(f"pet name rejected: {check.error}")
        return value.strip()

    @field_validator("owner_name")
    @classmethod
    def _check_owner(cls, value: str) -> str:
        if value and not validate_owner_name(value).valid:
            raise ValueError("owner name rejected: InvalidFormat")
        return value.strip()

    @model_validator(mode="after")
    def _check_species(self) -> "SessionSetup":
        if get_species(self.species) is None:
            raise ValueError(f"unknown species: {self.species}")
        return self


class SnapshotRow(BaseModel, extra="forbid"):
    happiness: int = Field(ge=0, le=100)
    health: int = Field(ge=0, le=100)
    energy: int = Field(ge=0, le=100)


class ScoreHistory(BaseModel, extra="forbid"):
    """Recorded session history fed to the `score` command."""

    snapshots: List[SnapshotRow] = Field(default_factory=list)
    weekly_spending: List[float] = Field(default_factory=list)
    preventive: float = Field(default=0, ge=0)
    reactive: float = Field(default=0, ge=0)


__all__ = [
    "ActionTuning",
    "GameConfig",
    "SalaryTier",
    "ScoreHistory",
    "SessionSetup",
    "SnapshotRow",
]
