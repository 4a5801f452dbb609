"""
End-of-session report: score, care grade, money flow and insights.
"""

from collections import Counter
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from pydantic import BaseModel, Field

from ..domain.stats import Mood, average_stat, care_grade

if TYPE_CHECKING:
    from .session import GameSession

# Action log keys, in report order
REPORTED_ACTIONS = ("feed", "play", "rest", "clean", "vet", "trick")


class CategoryTotal(BaseModel):
    category: str
    value: int
    percent: int


class ExpenseView(BaseModel):
    category: str
    item: str
    amount: int


class BadgeView(BaseModel):
    id: str
    name: str
    description: str


class SessionReport(BaseModel):
    pet_name: str
    species: str
    owner_name: str
    stage: str
    mood: str
    weeks_played: int
    ended: bool

    score: Dict[str, Any]
    care_grade: str
    average_stat: int
    stats: Dict[str, int]
    health_crisis: bool

    wallet: int
    budget: int
    total_spent: int
    total_income: int
    total_bills: int
    spending_total: int
    spending_by_category: List[CategoryTotal] = Field(default_factory=list)
    biggest_expense: Optional[ExpenseView] = None
    savings_goal: Optional[int] = None
    savings_goal_met: Optional[bool] = None

    action_counts: Dict[str, int] = Field(default_factory=dict)
    tricks: List[str] = Field(default_factory=list)
    minigames_played: int = 0
    badges: List[BadgeView] = Field(default_factory=list)
    insights: List[str] = Field(default_factory=list)


def build_insights(action_counts: Dict[str, int], wallet: int, savings_goal: Optional[int],
                   mood: Mood, health: int) -> List[str]:
    insights = []
    if action_counts.get("vet", 0) == 0:
        insights.append("No health checks were recorded. Vet visits usually protect salary income.")
    if action_counts.get("clean", 0) < 2:
        insights.append("Cleaning was used rarely. Low hygiene can reduce health over time.")
    if wallet < 0:
        insights.append("The session ended in debt. Spending pace exceeded salary and minigame income.")
    if savings_goal and wallet >= savings_goal:
        insights.append("Savings goal was achieved while completing pet care.")
    if mood in (Mood.HAPPY, Mood.ENERGETIC) and health >= 70:
        insights.append(f"Final pet reaction was {mood.value} with healthy stats, showing strong care balance.")
    if not insights:
        insights.append("Care and spending stayed balanced overall, with no major risk pattern detected.")
    return insights


def build_report(session: "GameSession") -> SessionReport:
    pet = session.pet
    ledger = session.ledger
    state = ledger.state

    logged = Counter(entry.action for entry in pet.profile.action_log)
    action_counts = {action: logged.get(action, 0) for action in REPORTED_ACTIONS}

    breakdown = ledger.spending_breakdown()
    biggest = ledger.biggest_expense()

    # Weeks actually completed; the week counter runs one past the last week
    weeks_played = min(session.week - 1, session.config.total_weeks)

    return SessionReport(
        pet_name=pet.name,
        species=pet.profile.species,
        owner_name=pet.profile.owner_name,
        stage=pet.stage.value,
        mood=pet.mood.value,
        weeks_played=weeks_played,
        ended=session.ended,
        score=session.score().as_dict(),
        care_grade=care_grade(pet.stats),
        average_stat=average_stat(pet.stats),
        stats=pet.stats.as_dict(),
        health_crisis=pet.profile.health_crisis,
        wallet=state.wallet,
        budget=state.budget,
        total_spent=state.total_spent,
        total_income=ledger.total_income(),
        total_bills=ledger.total_bills(),
        spending_total=breakdown["total"],
        spending_by_category=[CategoryTotal(**row) for row in breakdown["rows"]],
        biggest_expense=(
            ExpenseView(category=biggest.category, item=biggest.item, amount=biggest.amount) if biggest else None
        ),
        savings_goal=state.savings_goal,
        savings_goal_met=ledger.savings_goal_met(),
        action_counts=action_counts,
        tricks=list(pet.profile.tricks),
        minigames_played=pet.profile.minigames_played,
        badges=[BadgeView(id=b.id, name=b.name, description=b.description) for b in session.badges()],
        insights=build_insights(action_counts, state.wallet, state.savings_goal, pet.mood, pet.stats.health),
    )
