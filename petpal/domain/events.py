"""
Events - periodic clock events driven by the week scheduler.
"""

from abc import ABC, abstractmethod
from typing import Optional, TYPE_CHECKING
from uuid import UUID, uuid4
from dataclasses import dataclass
from enum import IntEnum
import json
import logging

if TYPE_CHECKING:
    from ..engine.scheduler import WeekScheduler, WeekSummary

logger = logging.getLogger(__name__)


class EventPriority(IntEnum):
    """
    Tie-break order for events due at the same moment.

    Higher runs first: the week boundary reads health for salary before
    that moment's decay tick lands.
    """
    WEEK_END = 100
    AGE = 50
    DECAY = 20


@dataclass
class BaseEvent(ABC):
    """Base class for scheduled events."""
    event_id: UUID
    priority: int
    timestamp: float  # game time in milliseconds
    generation: int

    def __init__(self, priority: int, timestamp: float, generation: int):
        self.event_id = uuid4()
        self.priority = priority
        self.timestamp = timestamp
        self.generation = generation

    def is_stale(self, scheduler: "WeekScheduler") -> bool:
        """True if the session ended or was reset after this event was queued."""
        return not scheduler.is_active or self.generation != scheduler.generation

    @abstractmethod
    def process(self, scheduler: "WeekScheduler") -> None:
        """
        Apply the event.

        Args:
            scheduler: WeekScheduler instance
        """
        pass


class DecayTickEvent(BaseEvent):
    """Stat decay for the pet, repeats every decay interval."""

    def __init__(self, timestamp: float, generation: int):
        super().__init__(EventPriority.DECAY, timestamp, generation)

    def process(self, scheduler: "WeekScheduler") -> None:
        if self.is_stale(scheduler):
            return

        applied = scheduler.pet.apply_decay_tick()
        scheduler.on_decay(applied)

        next_timestamp = self.timestamp + scheduler.config.decay_interval_ms
        scheduler.add_event(DecayTickEvent(next_timestamp, self.generation))

        logger.debug(json.dumps({
            "event": "decay_tick",
            "applied": applied,
            "timestamp": self.timestamp,
        }))


class AgeTickEvent(BaseEvent):
    """Pet ages by one, repeats every age interval."""

    def __init__(self, timestamp: float, generation: int):
        super().__init__(EventPriority.AGE, timestamp, generation)

    def process(self, scheduler: "WeekScheduler") -> None:
        if self.is_stale(scheduler):
            return

        scheduler.pet.age_tick()

        next_timestamp = self.timestamp + scheduler.config.age_interval_ms
        scheduler.add_event(AgeTickEvent(next_timestamp, self.generation))


class WeekEndEvent(BaseEvent):
    """Week boundary: snapshot, bills, salary, week counter."""

    def __init__(self, timestamp: float, generation: int):
        super().__init__(EventPriority.WEEK_END, timestamp, generation)
        self.summary: Optional["WeekSummary"] = None

    def process(self, scheduler: "WeekScheduler") -> None:
        if self.is_stale(scheduler):
            return

        self.summary = scheduler.close_week(self.timestamp)

        if scheduler.is_active:
            next_timestamp = self.timestamp + scheduler.config.week_duration_ms
            scheduler.add_event(WeekEndEvent(next_timestamp, self.generation))
        else:
            logger.info(json.dumps({
                "event": "week_cycle_ended",
                "reason": "total_weeks_reached",
                "timestamp": self.timestamp,
            }))
