"""
Finance ledger - wallet, spending buckets and the expense log.

Income is stored in the same log as a negative-cost row in the "income"
category, so one list covers both directions of cash flow.
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import uuid4

from .validators import ValidationResult, validate_affordability, validate_budget, validate_savings_goal

logger = logging.getLogger(__name__)

INCOME_CATEGORY = "income"
BILLS_CATEGORY = "bills"


@dataclass(frozen=True)
class Expense:
    category: str
    item: str
    amount: int
    id: str = field(default_factory=lambda: uuid4().hex)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class FinanceState:
    """
    Wallet and cumulative totals for one session.

    wallet is signed: recurring bills may push it below zero.
    """
    wallet: int
    budget: int
    total_spent: int = 0
    preventive_spent: int = 0
    reactive_spent: int = 0
    current_week_spent: int = 0
    weekly_spending: List[int] = field(default_factory=list)
    savings_goal: Optional[int] = None
    expenses: List[Expense] = field(default_factory=list)

    @classmethod
    def fresh(cls, budget: int) -> "FinanceState":
        return cls(wallet=budget, budget=budget)


class FinanceLedger:
    """Owns a FinanceState and every operation that changes it."""

    def __init__(self, budget: int):
        self.state = FinanceState.fresh(budget)

    @property
    def wallet(self) -> int:
        return self.state.wallet

    def _record(self, category: str, item: str, amount: int) -> Expense:
        expense = Expense(category=category, item=item, amount=amount)
        self.state.expenses.append(expense)
        return expense

    def spend(self, amount: int, category: str, item: str, is_preventive: bool = True) -> ValidationResult:
        """
        Pay for something out of the wallet.

        Args:
            amount: Cost, must be positive and affordable
            category: Expense category (food, toys, vet, ...)
            item: Human-readable label
            is_preventive: Routine care (True) or emergency care (False)

        Returns:
            ValidationResult; nothing changes on failure
        """
        check = validate_affordability(amount, self.state.wallet)
        if not check.valid:
            logger.debug(json.dumps({
                "event": "spend_rejected",
                "amount": amount,
                "wallet": self.state.wallet,
                "error": check.error,
            }))
            return check

        s = self.state
        s.wallet -= amount
        s.total_spent += amount
        if is_preventive:
            s.preventive_spent += amount
        else:
            s.reactive_spent += amount
        s.current_week_spent += amount
        self._record(category, item, amount)
        return check

    def earn(self, amount: int, source: str) -> Expense:
        self.state.wallet += amount
        return self._record(INCOME_CATEGORY, source, -amount)

    def charge_bill(self, amount: int, label: str) -> Expense:
        """Charge a recurring bill. Always applies, even into debt."""
        self.state.wallet -= amount
        self.state.total_spent += amount
        if self.state.wallet < 0:
            logger.info(json.dumps({"event": "wallet_in_debt", "wallet": self.state.wallet, "bill": label}))
        return self._record(BILLS_CATEGORY, label, amount)

    def close_week(self) -> int:
        """Archive this week's spend total and start a new week at zero."""
        closed = self.state.current_week_spent
        self.state.weekly_spending.append(closed)
        self.state.current_week_spent = 0
        return closed

    def reset(self, new_budget: Optional[int] = None) -> ValidationResult:
        budget = self.state.budget if new_budget is None else new_budget
        check = validate_budget(budget)
        if not check.valid:
            return check
        self.state = FinanceState.fresh(int(budget))
        return check

    def set_savings_goal(self, goal: int) -> ValidationResult:
        check = validate_savings_goal(goal, self.state.budget)
        if check.valid:
            self.state.savings_goal = int(goal)
        return check

    # ------------------------------------------------------------------
    # Reporting helpers
    # ------------------------------------------------------------------

    def expense_report(self) -> List[Dict[str, Any]]:
        """Expenses grouped by category, in first-seen order, with subtotals."""
        grouped: Dict[str, Dict[str, Any]] = {}
        for expense in self.state.expenses:
            group = grouped.setdefault(expense.category, {"category": expense.category, "items": [], "subtotal": 0})
            group["items"].append(expense)
            group["subtotal"] += expense.amount
        return list(grouped.values())

    def spending_breakdown(self) -> Dict[str, Any]:
        """Positive-cost totals per category with their share of all spending."""
        totals: Dict[str, int] = {}
        for expense in self.state.expenses:
            if expense.amount <= 0:
                continue
            totals[expense.category] = totals.get(expense.category, 0) + expense.amount
        total = sum(totals.values())
        rows = [
            {"category": category, "value": value, "percent": round(value / total * 100) if total else 0}
            for category, value in totals.items()
        ]
        return {"total": total, "rows": rows}

    def total_income(self) -> int:
        return sum(-e.amount for e in self.state.expenses if e.category == INCOME_CATEGORY)

    def total_bills(self) -> int:
        return sum(e.amount for e in self.state.expenses if e.category == BILLS_CATEGORY)

    def biggest_expense(self) -> Optional[Expense]:
        spending = [e for e in self.state.expenses if e.amount > 0]
        if not spending:
            return None
        return max(spending, key=lambda e: e.amount)

    def savings_goal_met(self) -> Optional[bool]:
        if self.state.savings_goal is None:
            return None
        return self.state.wallet >= self.state.savings_goal
