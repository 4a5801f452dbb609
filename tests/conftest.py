"""
Shared test configuration and fixtures for the PetPal test suite.

Sessions here run on a manual SimClock and a seeded RNG, so every run is
deterministic and no test waits on real time.
"""

import logging
import os
import random

import pytest

# Set test environment variables before petpal reads them
os.environ.update({
    "PETPAL_LOG_LEVEL": "WARNING",
    "PETPAL_ENABLE_JSON_LOGS": "false",
    "ENABLE_REALTIME": "false",
    "SIM_SPEED_FACTOR": "1.0",
})

from petpal.common.clock import SimClock
from petpal.common.logging_config import setup_logging
from petpal.domain.finance import FinanceLedger
from petpal.domain.pet import Pet
from petpal.domain.stats import PetStats
from petpal.engine.scheduler import WeekScheduler
from petpal.engine.session import GameSession
from petpal.models.base import GameConfig, SessionSetup

# Reduce noise during tests
setup_logging(level="WARNING", enable_json=False)
logging.getLogger('petpal').setLevel(logging.WARNING)


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def pet(rng):
    """A freshly created pet at baseline stats."""
    return Pet.create("Biscuit", species="dog", owner_name="Sam", rng=rng)


def make_pet(rng=None, **stats):
    """Pet with selected stats overridden, e.g. make_pet(hunger=25)."""
    base = PetStats.baseline()
    for name, value in stats.items():
        setattr(base, name, value)
    return Pet.create("Biscuit", stats=base, rng=rng or random.Random(0))


@pytest.fixture
def pet_factory():
    return make_pet


@pytest.fixture
def ledger():
    return FinanceLedger(200)


@pytest.fixture
def config():
    return GameConfig()


@pytest.fixture
def short_config():
    """Three short weeks; decay and age clocks kept far apart from the week clock."""
    return GameConfig(
        total_weeks=3,
        week_duration_ms=10_000,
        decay_interval_ms=3_000,
        age_interval_ms=7_000,
    )


@pytest.fixture
def scheduler(pet, ledger, short_config):
    sched = WeekScheduler(pet, ledger, [], short_config, SimClock())
    sched.start()
    return sched


@pytest.fixture
def setup():
    return SessionSetup(name="Biscuit", species="dog", owner_name="Sam")


@pytest.fixture
def session(setup, config, rng):
    return GameSession.start_session(setup, config=config, rng=rng, clock=SimClock())


@pytest.fixture
def short_session(setup, short_config, rng):
    return GameSession.start_session(setup, config=short_config, rng=rng, clock=SimClock())
