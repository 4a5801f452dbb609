"""
GameSession - one player's pet, ledger and snapshot history.

Every player action and every clock step goes through the session lock,
so the decay/week clocks and the player never write concurrently.
"""

import random
import threading
from typing import Any, Dict, List, Mapping, Optional, Union

import structlog
from pydantic import ValidationError

from ..common import metrics
from ..common.clock import Clock, SimClock
from ..common.errors import SessionEndedError, SetupError
from ..common.logging_config import bind_session_id
from ..domain.badges import Badge, evaluate_badges
from ..domain.catalog import FoodItem, ToyItem, VetOption, get_food, get_toy, get_vet_option
from ..domain.finance import FinanceLedger, FinanceState
from ..domain.pet import ActionResult, Pet
from ..domain.scoring import ScoreBreakdown, ScoringEngine
from ..domain.stats import WeekSnapshot
from ..domain.validators import ErrorKind, ValidationResult, validate_budget
from ..models.base import GameConfig, SessionSetup
from .report import SessionReport, build_report
from .scheduler import WeekScheduler, WeekSummary

logger = structlog.get_logger(__name__)

FOOD_CATEGORY = "food"
TOYS_CATEGORY = "toys"
CLEANING_CATEGORY = "cleaning"
VET_CATEGORY = "vet"
TRICKS_CATEGORY = "tricks"


def _resolve(item, lookup, model):
    """Catalog id or model instance; anything else resolves to None."""
    if isinstance(item, str):
        return lookup(item)
    if isinstance(item, model):
        return item
    return None


class GameSession:
    """
    Owns the three state containers of a game and the scheduler driving them.

    Build one with start_session(); the constructor expects ready parts.
    """

    def __init__(
        self,
        pet: Pet,
        ledger: FinanceLedger,
        config: GameConfig,
        clock: Optional[Clock] = None,
        session_id: Optional[str] = None,
    ):
        self.config = config
        self._lock = threading.RLock()
        self._pet = pet
        self._ledger = ledger
        self._snapshots: List[WeekSnapshot] = []
        self._earned: Dict[str, Badge] = {}
        self._finished = False
        self.session_id = bind_session_id(session_id)
        self.scheduler = WeekScheduler(pet, ledger, self._snapshots, config, clock or SimClock())

    @classmethod
    def start_session(
        cls,
        setup: Union[SessionSetup, Mapping[str, Any]],
        config: Optional[GameConfig] = None,
        budget: Optional[int] = None,
        rng: Optional[random.Random] = None,
        clock: Optional[Clock] = None,
        session_id: Optional[str] = None,
    ) -> "GameSession":
        """
        Create a pet and a ledger from player setup and start the clocks.

        Args:
            setup: SessionSetup or a plain mapping with the same fields
            config: Game tuning; defaults to GameConfig()
            budget: Starting budget; defaults to config.starting_budget
            rng: Random source for the mystery snack
            clock: Game clock; defaults to a manual SimClock

        Raises:
            SetupError: invalid name, owner, species or budget
        """
        config = config or GameConfig()
        if not isinstance(setup, SessionSetup):
            try:
                setup = SessionSetup(**dict(setup))
            except ValidationError as e:
                raise SetupError(f"Invalid session setup: {e}") from e

        budget = config.starting_budget if budget is None else budget
        check = validate_budget(budget)
        if not check.valid:
            raise SetupError(f"Invalid starting budget {budget}: {check.error}")

        pet = Pet.create(
            setup.name,
            species=setup.species,
            owner_name=setup.owner_name,
            customization=setup.customization,
            rng=rng,
            tuning=config.pet_tuning(),
        )
        ledger = FinanceLedger(int(budget))
        session = cls(pet, ledger, config, clock=clock, session_id=session_id)
        session.scheduler.start()
        metrics.session_started()

        logger.info(
            "session_started",
            pet=pet.name,
            species=setup.species,
            budget=ledger.state.budget,
            total_weeks=config.total_weeks,
        )
        return session

    def reset_session(self, new_budget: Optional[int] = None) -> ValidationResult:
        """
        Restart from baseline stats and a fresh ledger.

        Queued clock events from before the reset are dropped. An invalid
        budget leaves the session untouched.
        """
        with self._lock:
            budget = self._ledger.state.budget if new_budget is None else new_budget
            check = validate_budget(budget)
            if not check.valid:
                logger.info("reset_rejected", budget=budget, error=check.error)
                return check

            self.scheduler.stop()
            self._pet.reset()
            self._ledger.reset(budget)
            self._snapshots.clear()
            self._earned.clear()
            self.scheduler.restart()
            if self._finished:
                metrics.session_started()
                self._finished = False

            logger.info("session_reset", budget=self._ledger.state.budget, generation=self.scheduler.generation)
            return check

    def shutdown(self) -> None:
        """
        Abandon the session before its last week.

        Queued clock events are dropped and the session stops counting as
        active. Later actions raise SessionEndedError; later ticks are no-ops.
        """
        with self._lock:
            self.scheduler.halt()
            if self._finished:
                return
            self._finished = True
            metrics.session_finished()
            logger.info("session_shutdown", week=self.week, wallet=self._ledger.wallet)

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------

    @property
    def pet(self) -> Pet:
        return self._pet

    @property
    def ledger(self) -> FinanceLedger:
        return self._ledger

    @property
    def finance(self) -> FinanceState:
        return self._ledger.state

    @property
    def snapshots(self) -> List[WeekSnapshot]:
        return list(self._snapshots)

    @property
    def week(self) -> int:
        return self.scheduler.week

    @property
    def remaining_ms(self) -> float:
        return self.scheduler.remaining_ms

    @property
    def ended(self) -> bool:
        return self.scheduler.ended

    def badges(self) -> List[Badge]:
        """Badges earned so far; once earned a badge stays for the session."""
        with self._lock:
            self._update_badges()
            return list(self._earned.values())

    # ------------------------------------------------------------------
    # Clock
    # ------------------------------------------------------------------

    def tick(self, delta_ms: float) -> List[WeekSummary]:
        with self._lock:
            summaries = self.scheduler.tick(delta_ms)
            self._after_clock()
            return summaries

    def advance_to(self, target_time: float) -> List[WeekSummary]:
        with self._lock:
            summaries = self.scheduler.advance_to(target_time)
            self._after_clock()
            return summaries

    async def run_realtime(self, on_week=None) -> None:
        """Run the clocks against the scheduler's clock until the session ends."""
        await self.scheduler.run_realtime(on_week=on_week, advance=self.advance_to)

    def _after_clock(self) -> None:
        self._update_badges()
        if self.scheduler.ended and not self._finished:
            self._finished = True
            breakdown = self.score()
            metrics.session_finished()
            metrics.record_final_score(breakdown.final)
            logger.info(
                "session_ended",
                weeks=self.config.total_weeks,
                final=breakdown.final,
                classification=breakdown.classification,
                wallet=self._ledger.wallet,
            )

    # ------------------------------------------------------------------
    # Player actions
    # ------------------------------------------------------------------

    def _require_active(self, action: str) -> None:
        if self.scheduler.ended:
            raise SessionEndedError(f"Cannot {action}: the session has ended")

    def _finish(self, action: str, result: ActionResult, category: Optional[str] = None,
                item: str = "", is_preventive: bool = True) -> ActionResult:
        if result.valid and result.cost > 0:
            self._ledger.spend(result.cost, category, item, is_preventive=is_preventive)
        metrics.record_action(action, result.valid)
        if result.valid:
            self._update_badges()
        else:
            logger.info("action_rejected", action=action, error=result.error)
        return result

    def _unknown_item(self, action: str, item_id: Any) -> ActionResult:
        metrics.record_action(action, False)
        logger.info("action_rejected", action=action, error=ErrorKind.INVALID_FORMAT.value, item=item_id)
        return ActionResult.rejected(ErrorKind.INVALID_FORMAT.value, f"Unknown item: {item_id}")

    def feed(self, item: Union[str, FoodItem]) -> ActionResult:
        with self._lock:
            self._require_active("feed")
            food = _resolve(item, get_food, FoodItem)
            if food is None:
                return self._unknown_item("feed", item)
            result = self._pet.feed(food, self._ledger.wallet)
            return self._finish("feed", result, FOOD_CATEGORY, food.name)

    def play(self, item: Union[str, ToyItem]) -> ActionResult:
        with self._lock:
            self._require_active("play")
            toy = _resolve(item, get_toy, ToyItem)
            if toy is None:
                return self._unknown_item("play", item)
            result = self._pet.play(toy, self._ledger.wallet)
            return self._finish("play", result, TOYS_CATEGORY, toy.name)

    def rest(self) -> ActionResult:
        with self._lock:
            self._require_active("rest")
            return self._finish("rest", self._pet.rest())

    def clean(self) -> ActionResult:
        with self._lock:
            self._require_active("clean")
            result = self._pet.clean(self._ledger.wallet)
            return self._finish("clean", result, CLEANING_CATEGORY, "Bath time")

    def visit_vet(self, option: Union[str, VetOption]) -> ActionResult:
        """Vet visit; the full treatment is booked as reactive (emergency) spending."""
        with self._lock:
            self._require_active("visit the vet")
            vet = _resolve(option, get_vet_option, VetOption)
            if vet is None:
                return self._unknown_item("vet", option)
            result = self._pet.visit_vet(vet, self._ledger.wallet)
            return self._finish("vet", result, VET_CATEGORY, vet.name, is_preventive=not vet.is_emergency)

    def teach_trick(self, trick_name: str) -> ActionResult:
        with self._lock:
            self._require_active("teach a trick")
            result = self._pet.teach_trick(trick_name, self._ledger.wallet)
            label = trick_name.strip() if isinstance(trick_name, str) else ""
            return self._finish("trick", result, TRICKS_CATEGORY, f"Trick: {label}")

    def record_minigame(self, reward: int, source: str = "Minigame reward") -> ActionResult:
        """Count a minigame play and pay out its reward (zero is allowed)."""
        with self._lock:
            self._require_active("play a minigame")
            if isinstance(reward, bool) or not isinstance(reward, int):
                metrics.record_action("minigame", False)
                return ActionResult.rejected(ErrorKind.INVALID_FORMAT.value, "Reward must be a whole number.")
            if reward < 0:
                metrics.record_action("minigame", False)
                return ActionResult.rejected(ErrorKind.OUT_OF_RANGE.value, "Reward cannot be negative.")

            played = self._pet.record_minigame()
            if reward > 0:
                self._ledger.earn(reward, source)
                metrics.record_minigame_reward(reward)
            metrics.record_action("minigame", True)
            self._update_badges()
            return ActionResult(valid=True, message=f"Earned ${reward} from {source}.",
                                applied_effects={"minigames_played": played})

    def set_savings_goal(self, goal: int) -> ValidationResult:
        with self._lock:
            return self._ledger.set_savings_goal(goal)

    # ------------------------------------------------------------------
    # Scoring and reporting
    # ------------------------------------------------------------------

    def score(self) -> ScoreBreakdown:
        with self._lock:
            state = self._ledger.state
            return ScoringEngine.compute(
                self._snapshots,
                state.weekly_spending,
                state.preventive_spent,
                state.reactive_spent,
            )

    def build_report(self) -> SessionReport:
        with self._lock:
            return build_report(self)

    def _update_badges(self) -> None:
        for badge in evaluate_badges(self._pet, self._ledger.state):
            if badge.id not in self._earned:
                self._earned[badge.id] = badge
                logger.info("badge_earned", badge=badge.id)
