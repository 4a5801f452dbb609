"""
Validators - pure predicates guarding every state mutation.

None of these functions touch state. Each returns a ValidationResult so
callers can reject an action without raising.
"""

import string
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional

STAT_MIN = 0
STAT_MAX = 100

MIN_BUDGET = 50
MAX_BUDGET = 500
BUDGET_STEP = 10

PET_NAME_MAX_LEN = 20
OWNER_NAME_MAX_LEN = 30
TRICK_NAME_MAX_LEN = 20

PET_NAME_CHARSET = frozenset(string.ascii_letters + string.digits + " ")
OWNER_NAME_CHARSET = frozenset(string.ascii_letters + string.digits + " .'-")
TRICK_NAME_CHARSET = OWNER_NAME_CHARSET


class ErrorKind(str, Enum):
    """Failure kinds reported in ValidationResult.error."""
    UNAFFORDABLE = "Unaffordable"
    OUT_OF_RANGE = "OutOfRange"
    INVALID_FORMAT = "InvalidFormat"
    DUPLICATE = "Duplicate"


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    error: Optional[str] = None

    @classmethod
    def ok(cls) -> "ValidationResult":
        return cls(True, None)

    @classmethod
    def fail(cls, kind: ErrorKind) -> "ValidationResult":
        return cls(False, kind.value)


@dataclass(frozen=True)
class DeltaResult(ValidationResult):
    """ValidationResult carrying the delta that can actually be applied."""
    delta: int = 0


def clamp_stat(value: float) -> int:
    return int(max(STAT_MIN, min(STAT_MAX, value)))


def validate_affordability(cost: float, wallet: float) -> ValidationResult:
    """
    Check that a purchase is possible.

    Args:
        cost: Item cost, must be strictly positive
        wallet: Current wallet balance (may be negative)

    Returns:
        ValidationResult, error=Unaffordable on failure
    """
    if cost is None or cost <= 0 or wallet < cost:
        return ValidationResult.fail(ErrorKind.UNAFFORDABLE)
    return ValidationResult.ok()


def validate_bounded_delta(current: int, requested_delta: int) -> DeltaResult:
    """
    Clamp a requested stat change into [0, 100] and check it can happen.

    The effective delta is what the caller must apply; it differs from the
    requested one when the target would overshoot a bound. A non-zero
    request that clamps to zero (stat already at the bound in that
    direction) fails with OutOfRange.

    Examples:
        >>> validate_bounded_delta(90, 20).delta
        10
        >>> validate_bounded_delta(100, 5).error
        'OutOfRange'
    """
    target = clamp_stat(current + requested_delta)
    effective = target - current
    if requested_delta != 0 and effective == 0:
        return DeltaResult(False, ErrorKind.OUT_OF_RANGE.value, 0)
    return DeltaResult(True, None, effective)


def validate_name_token(text: Optional[str], max_len: int, allowed_charset: Iterable[str]) -> ValidationResult:
    """Check a free-text name (pet, owner, trick) after trimming whitespace."""
    if text is not None and not isinstance(text, str):
        return ValidationResult.fail(ErrorKind.INVALID_FORMAT)
    trimmed = (text or "").strip()
    if not trimmed or len(trimmed) > max_len:
        return ValidationResult.fail(ErrorKind.INVALID_FORMAT)
    allowed = set(allowed_charset)
    if any(ch not in allowed for ch in trimmed):
        return ValidationResult.fail(ErrorKind.INVALID_FORMAT)
    return ValidationResult.ok()


def validate_unique(candidate: str, existing: Iterable[str]) -> ValidationResult:
    needle = candidate.strip().lower()
    if any(item.lower() == needle for item in existing):
        return ValidationResult.fail(ErrorKind.DUPLICATE)
    return ValidationResult.ok()


def validate_pet_name(name: Optional[str]) -> ValidationResult:
    return validate_name_token(name, PET_NAME_MAX_LEN, PET_NAME_CHARSET)


def validate_owner_name(name: Optional[str]) -> ValidationResult:
    return validate_name_token(name, OWNER_NAME_MAX_LEN, OWNER_NAME_CHARSET)


def validate_trick_name(name: Optional[str], existing: Iterable[str] = ()) -> ValidationResult:
    fmt = validate_name_token(name, TRICK_NAME_MAX_LEN, TRICK_NAME_CHARSET)
    if not fmt.valid:
        return fmt
    return validate_unique(name, existing)


def validate_budget(amount) -> ValidationResult:
    """Starting budget: a number in [50, 500] in steps of 10."""
    if isinstance(amount, bool) or not isinstance(amount, (int, float)) or amount != amount:
        return ValidationResult.fail(ErrorKind.INVALID_FORMAT)
    if amount < MIN_BUDGET or amount > MAX_BUDGET:
        return ValidationResult.fail(ErrorKind.OUT_OF_RANGE)
    if amount % BUDGET_STEP != 0:
        return ValidationResult.fail(ErrorKind.INVALID_FORMAT)
    return ValidationResult.ok()


def validate_savings_goal(goal, budget: float) -> ValidationResult:
    """Savings goal: a whole positive amount no larger than the budget."""
    if isinstance(goal, bool) or not isinstance(goal, (int, float)) or goal != goal:
        return ValidationResult.fail(ErrorKind.INVALID_FORMAT)
    if goal <= 0 or goal > budget:
        return ValidationResult.fail(ErrorKind.OUT_OF_RANGE)
    if int(goal) != goal:
        return ValidationResult.fail(ErrorKind.INVALID_FORMAT)
    return ValidationResult.ok()
