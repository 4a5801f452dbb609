"""
ScoringEngine - four-component score for a finished session.

Final = 0.4 * Wellbeing + 0.3 * Financial + 0.2 * Consistency - 0.1 * Volatility,
rounded and clamped to 0..100.

- Wellbeing averages (happiness + health + energy) / 3 over weekly snapshots.
- Financial rewards preventive over reactive (emergency) spending.
- Consistency penalizes big week-to-week stat swings.
- Volatility penalizes erratic weekly spending (coefficient of variation).
"""

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .stats import WeekSnapshot

WELLBEING_WEIGHT = 0.4
FINANCIAL_WEIGHT = 0.3
CONSISTENCY_WEIGHT = 0.2
VOLATILITY_WEIGHT = 0.1

NEUTRAL_SCORE = 50.0
# Three scored stats, each able to swing 100 points
MAX_INSTABILITY = 300.0


@dataclass(frozen=True)
class Tier:
    min_score: int
    label: str


TIERS: List[Tier] = [
    Tier(90, "Elite Owner"),
    Tier(75, "Responsible Owner"),
    Tier(60, "Learning Owner"),
    Tier(40, "Struggling Owner"),
    Tier(0, "Neglectful Owner"),
]


@dataclass(frozen=True)
class ScoreBreakdown:
    wellbeing: int
    financial: int
    consistency: int
    volatility: int
    final: int
    classification: str

    def as_dict(self) -> dict:
        return {
            "wellbeing": self.wellbeing,
            "financial": self.financial,
            "consistency": self.consistency,
            "volatility": self.volatility,
            "final": self.final,
            "classification": self.classification,
        }


def classify(score: float) -> str:
    for tier in TIERS:
        if score >= tier.min_score:
            return tier.label
    return TIERS[-1].label


def _clamp(value: float, lo: float = 0.0, hi: float = 100.0) -> float:
    return max(lo, min(hi, value))


def _mean(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    return sum(values) / len(values)


def _pstdev(values: Sequence[float]) -> float:
    if len(values) < 2:
        return 0.0
    mean = _mean(values)
    return math.sqrt(sum((v - mean) ** 2 for v in values) / len(values))


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class ScoringEngine:
    """
    Pure scoring over a session history.

    Args:
        weekly_snapshots: One snapshot per completed week
        weekly_spending: Closed per-week spend totals
        preventive_spending: Cumulative routine care spending
        reactive_spending: Cumulative emergency care spending
    """

    def __init__(
        self,
        weekly_snapshots: Optional[Sequence[WeekSnapshot]] = None,
        weekly_spending: Optional[Sequence[float]] = None,
        preventive_spending: float = 0,
        reactive_spending: float = 0,
    ):
        self.snapshots = list(weekly_snapshots or [])
        self.weekly_spending = list(weekly_spending or [])
        self.preventive_spending = preventive_spending
        self.reactive_spending = reactive_spending

    def calculate_wellbeing(self) -> float:
        if not self.snapshots:
            return NEUTRAL_SCORE
        weekly = [(s.happiness + s.health + s.energy) / 3 for s in self.snapshots]
        return _clamp(_mean(weekly))

    def calculate_financial_score(self) -> float:
        total = self.preventive_spending + self.reactive_spending
        if total == 0:
            return NEUTRAL_SCORE
        return _clamp(self.preventive_spending / total * 100)

    def calculate_consistency_score(self) -> float:
        if len(self.snapshots) < 2:
            return 100.0
        stability = []
        for prev, curr in zip(self.snapshots, self.snapshots[1:]):
            instability = (
                abs(curr.happiness - prev.happiness)
                + abs(curr.health - prev.health)
                + abs(curr.energy - prev.energy)
            )
            stability.append(_clamp(100 - instability / MAX_INSTABILITY * 100))
        return _clamp(_mean(stability))

    def calculate_volatility_score(self) -> float:
        if not self.weekly_spending:
            return 0.0
        mean = _mean(self.weekly_spending)
        if mean == 0:
            return 0.0
        return _clamp(_pstdev(self.weekly_spending) / mean * 100)

    def calculate_final_score(self) -> ScoreBreakdown:
        wellbeing = self.calculate_wellbeing()
        financial = self.calculate_financial_score()
        consistency = self.calculate_consistency_score()
        volatility = self.calculate_volatility_score()

        raw = (
            WELLBEING_WEIGHT * wellbeing
            + FINANCIAL_WEIGHT * financial
            + CONSISTENCY_WEIGHT * consistency
            - VOLATILITY_WEIGHT * volatility
        )
        final = int(_clamp(_round_half_up(raw)))

        return ScoreBreakdown(
            wellbeing=_round_half_up(wellbeing),
            financial=_round_half_up(financial),
            consistency=_round_half_up(consistency),
            volatility=_round_half_up(volatility),
            final=final,
            classification=classify(final),
        )

    @classmethod
    def compute(
        cls,
        weekly_snapshots: Sequence[WeekSnapshot],
        weekly_spending: Sequence[float],
        preventive_spending: float,
        reactive_spending: float,
    ) -> ScoreBreakdown:
        return cls(weekly_snapshots, weekly_spending, preventive_spending, reactive_spending).calculate_final_score()
