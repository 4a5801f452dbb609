"""
Game-time sources for the week scheduler.

All game time is in milliseconds since the session began. SimClock only
moves when told to; RealTimeClock follows the wall clock, optionally sped up.
"""

import asyncio
import json
import logging
import time
from typing import Optional, Protocol

from .settings import settings

logger = logging.getLogger(__name__)

MIN_SPEED_FACTOR = 0.1
MAX_SPEED_FACTOR = 1000.0


class Clock(Protocol):
    """What the scheduler needs from a clock."""

    def now(self) -> float:
        ...

    async def sleep_until(self, timestamp: float) -> None:
        ...


class SimClock:
    """Manual clock for tests and headless autoplay. Sleeping jumps ahead instantly."""

    def __init__(self, start_time: float = 0.0):
        self.current_time = start_time

    def now(self) -> float:
        return self.current_time

    def advance(self, delta_ms: float) -> float:
        if delta_ms < 0:
            raise ValueError(f"Clock cannot go backwards (delta={delta_ms})")
        self.current_time += delta_ms
        return self.current_time

    async def sleep_until(self, timestamp: float) -> None:
        if timestamp > self.current_time:
            self.current_time = timestamp
        # let other tasks (e.g. a UI loop) run between events
        await asyncio.sleep(0)


class RealTimeClock:
    """
    Wall-clock game time scaled by a speed factor.

    A factor of 1.0 plays a 90 s week in 90 s; 30.0 plays it in 3 s.
    """

    def __init__(self, speed_factor: Optional[float] = None):
        factor = settings.SIM_SPEED_FACTOR if speed_factor is None else speed_factor
        if not MIN_SPEED_FACTOR <= factor <= MAX_SPEED_FACTOR:
            raise ValueError(
                f"speed factor must be between {MIN_SPEED_FACTOR} and {MAX_SPEED_FACTOR}, got {factor}"
            )
        self.speed_factor = factor
        self._origin = time.monotonic()
        logger.info(json.dumps({"event": "realtime_clock_started", "speed_factor": factor}))

    def now(self) -> float:
        return (time.monotonic() - self._origin) * 1000.0 * self.speed_factor

    def real_seconds(self, game_ms: float) -> float:
        """Wall-clock seconds that cover game_ms of game time."""
        return max(0.0, game_ms) / 1000.0 / self.speed_factor

    async def sleep_until(self, timestamp: float) -> None:
        delay = self.real_seconds(timestamp - self.now())
        await asyncio.sleep(delay)


def create_clock(realtime: Optional[bool] = None) -> Clock:
    """RealTimeClock when realtime (default: ENABLE_REALTIME), else SimClock."""
    if realtime is None:
        realtime = settings.ENABLE_REALTIME
    return RealTimeClock() if realtime else SimClock()
