"""
Pet stat vector and the values derived from it (mood, stage, care grade).
"""

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Dict

STAT_NAMES = ("hunger", "happiness", "energy", "health", "hygiene")

# Health below this sets the sticky crisis flag
CRITICAL_HEALTH = 20

MOOD_WEIGHTS = {
    "hunger": 0.30,
    "happiness": 0.30,
    "health": 0.25,
    "energy": 0.10,
    "hygiene": 0.05,
}


class Mood(str, Enum):
    SICK = "sick"
    TIRED = "tired"
    ENERGETIC = "energetic"
    HAPPY = "happy"
    SAD = "sad"
    CONTENT = "content"


class Stage(str, Enum):
    BABY = "baby"
    TEEN = "teen"
    ADULT = "adult"


@dataclass
class PetStats:
    """
    Five vital stats, each an integer in [0, 100].

    Mutated only through Pet, which validates every delta first.
    """
    hunger: int = 80
    happiness: int = 70
    energy: int = 80
    health: int = 80
    hygiene: int = 70

    @classmethod
    def baseline(cls) -> "PetStats":
        return cls()

    def as_dict(self) -> Dict[str, int]:
        return asdict(self)

    def copy(self) -> "PetStats":
        return PetStats(**asdict(self))


@dataclass(frozen=True)
class WeekSnapshot:
    """Stats captured at the end of a week. Hunger and hygiene are not scored."""
    happiness: int
    health: int
    energy: int

    @classmethod
    def from_stats(cls, stats: PetStats) -> "WeekSnapshot":
        return cls(happiness=stats.happiness, health=stats.health, energy=stats.energy)


def weighted_mood_score(stats: PetStats) -> float:
    return sum(getattr(stats, name) * weight for name, weight in MOOD_WEIGHTS.items())


def derive_mood(stats: PetStats) -> Mood:
    """
    Derive the pet mood from its stats.

    Overrides are checked in order and short-circuit the weighted score:
    health<30 -> sick, energy<25 -> tired, energy>85 -> energetic.
    Otherwise weighted>75 -> happy, weighted<40 -> sad, else content.
    """
    if stats.health < 30:
        return Mood.SICK
    if stats.energy < 25:
        return Mood.TIRED
    if stats.energy > 85:
        return Mood.ENERGETIC

    weighted = weighted_mood_score(stats)
    if weighted > 75:
        return Mood.HAPPY
    if weighted < 40:
        return Mood.SAD
    return Mood.CONTENT


def evolution_stage(age: int) -> Stage:
    if age < 5:
        return Stage.BABY
    if age < 10:
        return Stage.TEEN
    return Stage.ADULT


def average_stat(stats: PetStats) -> int:
    return round(sum(getattr(stats, name) for name in STAT_NAMES) / len(STAT_NAMES))


def care_grade(stats: PetStats) -> str:
    """Letter grade A-F from the mean of all five stats."""
    average = sum(getattr(stats, name) for name in STAT_NAMES) / len(STAT_NAMES)
    if average >= 90:
        return "A"
    if average >= 75:
        return "B"
    if average >= 60:
        return "C"
    if average >= 45:
        return "D"
    return "F"
