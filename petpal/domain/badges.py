"""
Achievement badges unlocked from pet and finance state.
"""

from dataclasses import dataclass
from typing import Callable, List

from .finance import FinanceState
from .pet import Pet
from .stats import STAT_NAMES, Stage


@dataclass(frozen=True)
class Badge:
    id: str
    name: str
    description: str
    condition: Callable[[Pet, FinanceState], bool]


def _has_action(pet: Pet, action: str) -> bool:
    return any(entry.action == action for entry in pet.profile.action_log)


BADGES: List[Badge] = [
    Badge("first_meal", "First Meal", "Fed your pet for the first time.",
          lambda pet, _f: _has_action(pet, "feed")),
    Badge("doctors_orders", "Doctor's Orders", "Booked the first vet visit.",
          lambda pet, _f: _has_action(pet, "vet")),
    Badge("joy_maximizer", "Joy Maximizer", "Reached maximum happiness.",
          lambda pet, _f: pet.stats.happiness >= 100),
    Badge("glow_up", "Glow Up", "Evolved into the growth stage.",
          lambda pet, _f: pet.stage in (Stage.TEEN, Stage.ADULT)),
    Badge("full_grown", "Full Grown", "Reached the established stage.",
          lambda pet, _f: pet.stage is Stage.ADULT),
    Badge("penny_pincher", "Penny Pincher", "Saved at least $50 beyond spending.",
          lambda _p, finance: finance.wallet - finance.total_spent >= 50),
    Badge("minigame_master", "Minigame Master", "Played the minigame five times.",
          lambda pet, _f: pet.profile.minigames_played >= 5),
    Badge("peak_performance", "Peak Performance", "All stats above 80 at once.",
          lambda pet, _f: all(getattr(pet.stats, name) > 80 for name in STAT_NAMES)),
    Badge("trick_master", "Trick Master", "Learned three tricks.",
          lambda pet, _f: len(pet.profile.tricks) >= 3),
    Badge("responsible_owner", "Responsible Owner", "Completed the session with safe health levels.",
          lambda pet, _f: not pet.profile.health_crisis and pet.stage is Stage.ADULT),
]


def evaluate_badges(pet: Pet, finance: FinanceState) -> List[Badge]:
    """Badges whose condition holds right now."""
    return [badge for badge in BADGES if badge.condition(pet, finance)]
