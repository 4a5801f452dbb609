"""
WeekScheduler - drives decay, ageing and week boundaries on game time.

Time only moves when the scheduler is told so (tick / advance_to), which
keeps every rule testable without real time passing. A realtime driver
just feeds it wall-clock time.
"""

from typing import Callable, Dict, List, Optional
import heapq
import itertools
from dataclasses import dataclass, field
from enum import Enum

import structlog

from ..common import metrics
from ..common.clock import Clock, SimClock
from ..domain.events import AgeTickEvent, BaseEvent, DecayTickEvent, WeekEndEvent
from ..domain.finance import FinanceLedger
from ..domain.pet import Pet
from ..domain.stats import WeekSnapshot
from ..models.base import GameConfig

logger = structlog.get_logger(__name__)


class SchedulerState(str, Enum):
    ACTIVE = "active"
    ENDED = "ended"


@dataclass
class WeekSummary:
    """What happened at one week boundary, for the weekly update popup."""
    completed_week: int
    next_week: int
    bill: int
    salary: int
    pet_health: int
    wallet: int
    is_game_over: bool


@dataclass(order=True)
class PriorityEvent:
    """Queue entry: earliest timestamp first, then higher priority, then FIFO."""
    timestamp: float
    neg_priority: int
    seq: int
    event: BaseEvent = field(compare=False)


class WeekScheduler:
    """
    Finite-state driver for one session: active -> ended.

    Owns the event queue and the week counter; mutates the pet and the
    ledger it is given, and appends to the shared snapshot list.
    """

    def __init__(
        self,
        pet: Pet,
        ledger: FinanceLedger,
        snapshots: List[WeekSnapshot],
        config: Optional[GameConfig] = None,
        clock: Optional[Clock] = None,
    ):
        self.pet = pet
        self.ledger = ledger
        self.snapshots = snapshots
        self.config = config or GameConfig()
        self.clock = clock or SimClock()

        self.current_time: float = self.clock.now()
        self.week: int = 1
        self.week_started_at: float = self.current_time
        self.state = SchedulerState.ACTIVE
        self.generation = 0
        self.event_queue: List[PriorityEvent] = []
        self.summaries: List[WeekSummary] = []
        self._seq = itertools.count()

    # ------------------------------------------------------------------
    # Queue management
    # ------------------------------------------------------------------

    @property
    def is_active(self) -> bool:
        return self.state is SchedulerState.ACTIVE

    @property
    def ended(self) -> bool:
        return self.state is SchedulerState.ENDED

    @property
    def remaining_ms(self) -> float:
        if self.ended:
            return 0.0
        elapsed = self.current_time - self.week_started_at
        return max(0.0, self.config.week_duration_ms - elapsed)

    def add_event(self, event: BaseEvent) -> None:
        heapq.heappush(self.event_queue, PriorityEvent(event.timestamp, -int(event.priority), next(self._seq), event))

    def start(self) -> None:
        """Queue the first decay, age and week-end events from the current time."""
        now = self.current_time
        self.week_started_at = now
        self.add_event(WeekEndEvent(now + self.config.week_duration_ms, self.generation))
        self.add_event(AgeTickEvent(now + self.config.age_interval_ms, self.generation))
        self.add_event(DecayTickEvent(now + self.config.decay_interval_ms, self.generation))
        logger.info("scheduler_started", week=self.week, total_weeks=self.config.total_weeks, timestamp=now)

    def stop(self) -> None:
        """Invalidate every queued event; anything still in flight becomes a no-op."""
        self.generation += 1
        self.event_queue.clear()

    def halt(self) -> None:
        """Stop and move to the terminal state without closing the current week."""
        self.stop()
        self.state = SchedulerState.ENDED

    def restart(self) -> None:
        self.stop()
        self.week = 1
        self.state = SchedulerState.ACTIVE
        self.summaries = []
        self.start()

    # ------------------------------------------------------------------
    # Time
    # ------------------------------------------------------------------

    def tick(self, delta_ms: float) -> List[WeekSummary]:
        """
        Advance game time by delta_ms and process every event that falls due.

        Returns:
            Week summaries produced during this step (usually none)
        """
        if delta_ms < 0:
            raise ValueError(f"delta_ms must be non-negative, got {delta_ms}")
        return self.advance_to(self.current_time + delta_ms)

    def advance_to(self, target_time: float) -> List[WeekSummary]:
        produced: List[WeekSummary] = []
        if not self.is_active:
            return produced

        while self.event_queue and self.event_queue[0].timestamp <= target_time:
            entry = heapq.heappop(self.event_queue)
            self.current_time = max(self.current_time, entry.timestamp)
            entry.event.process(self)
            summary = getattr(entry.event, "summary", None)
            if summary is not None:
                produced.append(summary)
            if not self.is_active:
                break

        if self.is_active:
            self.current_time = max(self.current_time, target_time)
        return produced

    def next_event_time(self) -> Optional[float]:
        if not self.event_queue:
            return None
        return self.event_queue[0].timestamp

    async def run_realtime(
        self,
        on_week: Optional[Callable[[WeekSummary], None]] = None,
        advance: Optional[Callable[[float], List[WeekSummary]]] = None,
    ) -> None:
        """
        Drive the scheduler from its clock until the session ends or is stopped.

        Args:
            on_week: Optional callback for every week summary produced
            advance: Replacement for advance_to, e.g. one that takes a lock
        """
        advance = advance or self.advance_to
        generation = self.generation
        while self.is_active and self.generation == generation:
            next_time = self.next_event_time()
            if next_time is None:
                break
            await self.clock.sleep_until(next_time)
            if self.generation != generation:
                break
            for summary in advance(self.clock.now()):
                if on_week is not None:
                    on_week(summary)

        logger.info("realtime_loop_finished", week=self.week, state=self.state.value)

    # ------------------------------------------------------------------
    # Event callbacks
    # ------------------------------------------------------------------

    def on_decay(self, applied: Dict[str, int]) -> None:
        metrics.record_decay_tick()

    def take_snapshot(self) -> WeekSnapshot:
        snapshot = self.pet.snapshot()
        self.snapshots.append(snapshot)
        return snapshot

    def close_week(self, timestamp: float) -> WeekSummary:
        """
        Week boundary, in this exact order:

        1. snapshot happiness/health/energy
        2. close the ledger week
        3. charge the recurring bill
        4. pay salary from current health (if any)
        5. advance the week counter
        6. past the last week: end the session with a final snapshot
           and ledger close so the last week still counts
        """
        completed = self.week

        self.take_snapshot()
        closed_spend = self.ledger.close_week()

        bill = self.config.weekly_bill
        self.ledger.charge_bill(bill, f"Week {completed} living costs")

        health = self.pet.stats.health
        salary = self.config.salary_for(health)
        if salary > 0:
            self.ledger.earn(salary, f"Week {completed} salary")

        self.week += 1
        self.week_started_at = timestamp

        game_over = self.week > self.config.total_weeks
        if game_over:
            self.state = SchedulerState.ENDED
            self.take_snapshot()
            self.ledger.close_week()
            self.event_queue.clear()

        summary = WeekSummary(
            completed_week=completed,
            next_week=self.week,
            bill=bill,
            salary=salary,
            pet_health=health,
            wallet=self.ledger.wallet,
            is_game_over=game_over,
        )
        self.summaries.append(summary)

        metrics.record_week_closed(bill, salary, self._salary_tier(salary), self.ledger.wallet)
        logger.info(
            "week_closed",
            week=completed,
            spent=closed_spend,
            bill=bill,
            salary=salary,
            health=health,
            wallet=self.ledger.wallet,
            game_over=game_over,
        )
        return summary

    def _salary_tier(self, salary: int) -> str:
        if salary <= 0:
            return "none"
        if salary >= self.config.salary_tiers[0].amount:
            return "full"
        return "partial"
