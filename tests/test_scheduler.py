"""
Tests for WeekScheduler - clock events, week boundary order and session end.
"""

import pytest

from petpal.common.clock import SimClock
from petpal.domain.events import DecayTickEvent, EventPriority, WeekEndEvent
from petpal.domain.finance import INCOME_CATEGORY, FinanceLedger
from petpal.engine.scheduler import WeekScheduler
from petpal.models.base import GameConfig


def build(pet, config, budget=200):
    ledger = FinanceLedger(budget)
    snapshots = []
    sched = WeekScheduler(pet, ledger, snapshots, config, SimClock())
    sched.start()
    return sched, ledger, snapshots


class TestClockEvents:

    def test_decay_fires_on_interval(self, scheduler):
        scheduler.tick(2999)
        assert scheduler.pet.stats.hunger == 80
        scheduler.tick(1)
        assert scheduler.pet.stats.hunger == 75
        scheduler.tick(3000)
        assert scheduler.pet.stats.hunger == 70

    def test_age_ticks(self, scheduler):
        scheduler.tick(7000)
        assert scheduler.pet.profile.age == 1

    def test_remaining_time(self, scheduler):
        assert scheduler.remaining_ms == 10_000
        scheduler.tick(4000)
        assert scheduler.remaining_ms == 6000
        scheduler.tick(6000)
        assert scheduler.remaining_ms == 10_000

    def test_negative_tick_rejected(self, scheduler):
        with pytest.raises(ValueError):
            scheduler.tick(-1)

    def test_priorities(self):
        assert EventPriority.WEEK_END > EventPriority.AGE > EventPriority.DECAY


class TestWeekBoundary:

    def test_first_week(self, scheduler):
        summaries = scheduler.tick(10_000)

        assert len(summaries) == 1
        summary = summaries[0]
        assert summary.completed_week == 1
        assert summary.next_week == 2
        assert summary.bill == 20
        assert summary.salary == 30
        assert not summary.is_game_over
        assert scheduler.week == 2

        # three decay ticks before the boundary
        snapshot = scheduler.snapshots[0]
        assert (snapshot.happiness, snapshot.health, snapshot.energy) == (61, 80, 74)
        assert scheduler.ledger.wallet == 210
        assert scheduler.ledger.state.weekly_spending == [0]

    def test_week_end_runs_before_decay_due_at_same_time(self, pet):
        config = GameConfig(total_weeks=3, week_duration_ms=10_000, decay_interval_ms=5_000, age_interval_ms=60_000)
        sched, _ledger, snapshots = build(pet, config)
        sched.tick(10_000)
        # only the 5000 ms decay is in the snapshot; the 10000 ms one lands after it
        assert snapshots[0].energy == 78
        assert pet.stats.energy == 76

    def test_spending_is_closed_before_bill(self, scheduler):
        scheduler.ledger.spend(12, "food", "Gourmet Feast")
        scheduler.tick(10_000)
        assert scheduler.ledger.state.weekly_spending == [12]
        assert scheduler.ledger.state.current_week_spent == 0

    @pytest.mark.parametrize("health,salary", [(90, 30), (70, 30), (69, 15), (40, 15), (39, 0), (10, 0)])
    def test_salary_tiers(self, pet_factory, short_config, health, salary):
        pet = pet_factory(health=health)
        sched, ledger, _ = build(pet, short_config)
        summary = sched.tick(10_000)[0]
        assert summary.salary == salary
        assert ledger.wallet == 200 - 20 + salary
        income_rows = [e for e in ledger.state.expenses if e.category == INCOME_CATEGORY]
        assert len(income_rows) == (1 if salary else 0)

    def test_bill_can_drive_wallet_negative(self, pet_factory, short_config):
        pet = pet_factory(health=10)
        sched, ledger, _ = build(pet, short_config, budget=50)
        ledger.spend(40, "toys", "Luxury Playset")
        sched.tick(10_000)
        assert ledger.wallet == -10


class TestSessionEnd:

    def test_ends_after_total_weeks(self, scheduler):
        summaries = scheduler.tick(30_000)
        assert [s.completed_week for s in summaries] == [1, 2, 3]
        assert summaries[-1].is_game_over
        assert scheduler.ended
        assert scheduler.week == 4
        assert scheduler.remaining_ms == 0
        # one snapshot per week plus the final one
        assert len(scheduler.snapshots) == 4
        assert len(scheduler.ledger.state.weekly_spending) == 4

    def test_ticks_after_end_are_noops(self, scheduler):
        scheduler.tick(30_000)
        before = scheduler.pet.stats.as_dict()
        wallet = scheduler.ledger.wallet
        assert scheduler.tick(100_000) == []
        assert scheduler.pet.stats.as_dict() == before
        assert scheduler.ledger.wallet == wallet
        assert scheduler.next_event_time() is None

    def test_stale_events_do_nothing(self, scheduler):
        old_generation = scheduler.generation
        scheduler.stop()
        before = scheduler.pet.stats.as_dict()

        DecayTickEvent(3000, old_generation).process(scheduler)
        event = WeekEndEvent(10_000, old_generation)
        event.process(scheduler)

        assert scheduler.pet.stats.as_dict() == before
        assert event.summary is None
        assert scheduler.event_queue == []

    def test_restart_starts_over(self, scheduler):
        scheduler.tick(30_000)
        scheduler.restart()
        assert scheduler.is_active
        assert scheduler.week == 1
        assert scheduler.tick(10_000)[0].completed_week == 1
