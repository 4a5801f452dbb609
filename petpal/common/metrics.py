"""
Prometheus metrics for PetPal sessions.
Action, scheduler and finance counters plus final score distribution.
"""

from prometheus_client import Counter, Gauge, Histogram, generate_latest


ACTIONS_TOTAL = Counter(
    'petpal_actions_total',
    'Player actions attempted',
    ['action', 'status']
)

DECAY_TICKS_TOTAL = Counter(
    'petpal_decay_ticks_total',
    'Decay ticks applied'
)

WEEKS_CLOSED_TOTAL = Counter(
    'petpal_weeks_closed_total',
    'Week boundaries processed'
)

BILLS_CHARGED_TOTAL = Counter(
    'petpal_bills_charged_amount_total',
    'Total amount charged as recurring bills'
)

SALARY_PAID_TOTAL = Counter(
    'petpal_salary_paid_amount_total',
    'Total weekly salary paid',
    ['tier']
)

MINIGAME_REWARDS_TOTAL = Counter(
    'petpal_minigame_rewards_amount_total',
    'Total amount earned from minigames'
)

SESSIONS_ACTIVE = Gauge(
    'petpal_sessions_active',
    'Sessions currently running'
)

WALLET_BALANCE = Gauge(
    'petpal_wallet_balance',
    'Wallet balance after the last week boundary'
)

FINAL_SCORE = Histogram(
    'petpal_final_score',
    'Final session scores',
    buckets=[10, 20, 30, 40, 50, 60, 70, 75, 80, 90, 100]
)


def record_action(action: str, valid: bool):
    ACTIONS_TOTAL.labels(action=action, status="ok" if valid else "rejected").inc()


def record_decay_tick():
    DECAY_TICKS_TOTAL.inc()


def record_week_closed(bill: int, salary: int, tier: str, wallet: int):
    WEEKS_CLOSED_TOTAL.inc()
    BILLS_CHARGED_TOTAL.inc(bill)
    SALARY_PAID_TOTAL.labels(tier=tier).inc(salary)
    WALLET_BALANCE.set(wallet)


def record_minigame_reward(amount: int):
    MINIGAME_REWARDS_TOTAL.inc(amount)


def session_started():
    SESSIONS_ACTIVE.inc()


def session_finished():
    SESSIONS_ACTIVE.dec()


def record_final_score(score: int):
    FINAL_SCORE.observe(score)


def get_metrics() -> bytes:
    """Generate Prometheus metrics output."""
    return generate_latest()
