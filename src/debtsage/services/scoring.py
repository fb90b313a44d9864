"""Priority score used by the PriorityScore repayment strategy.

Score = 0.4 * interest + 0.3 * overdue + 0.2 * minimum payment + 0.1 * balance,
with each continuous term min-max normalized across the debts currently in
play. The overdue flag is a proxy derived from the due day versus today's
day of month; it is not a record of missed payments.
"""

from __future__ import annotations

from datetime import date
from typing import Sequence

from ..config import EngineConfig, default_engine_config
from .debts import Debt, DebtId

INTEREST_WEIGHT = 0.4
OVERDUE_WEIGHT = 0.3
MINIMUM_PAYMENT_WEIGHT = 0.2
BALANCE_WEIGHT = 0.1


def _normalize(value: float, low: float, high: float) -> float:
    # Identical values on a dimension all score full marks.
    if high <= low:
        return 1.0
    return (value - low) / (high - low)


def is_overdue(debt: Debt, today: date | None = None) -> bool:
    """True when the debt's due day has already passed this month."""

    if not debt.payment_due_day:
        return False
    today = today or date.today()
    return debt.payment_due_day < today.day


def priority_score(
    debts: Sequence[Debt],
    debt: Debt,
    *,
    today: date | None = None,
    config: EngineConfig | None = None,
) -> float:
    """Return the composite priority of ``debt`` within ``debts`` (0..1)."""

    if not debts:
        return 0.0
    config = config or default_engine_config()

    rates = [d.interest_rate for d in debts]
    minimums = [d.nominal_minimum_payment(config=config) for d in debts]
    balances = [d.remaining_amount for d in debts]

    score = (
        INTEREST_WEIGHT * _normalize(debt.interest_rate, min(rates), max(rates))
        + OVERDUE_WEIGHT * (1.0 if is_overdue(debt, today) else 0.0)
        + MINIMUM_PAYMENT_WEIGHT
        * _normalize(debt.nominal_minimum_payment(config=config), min(minimums), max(minimums))
        + BALANCE_WEIGHT * _normalize(debt.remaining_amount, min(balances), max(balances))
    )
    return min(max(score, 0.0), 1.0)


def priority_scores(
    debts: Sequence[Debt],
    *,
    today: date | None = None,
    config: EngineConfig | None = None,
) -> dict[DebtId, float]:
    """Score every debt in ``debts`` against the same normalization bounds."""

    today = today or date.today()
    return {
        debt.id: priority_score(debts, debt, today=today, config=config) for debt in debts
    }
