"""Debt records fed to the payoff engine."""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Any, Iterable, Union

from ..config import EngineConfig, default_engine_config
from .interest import InterestMethod

DebtId = Union[int, str]

CATEGORY_IDS = ("credit_card", "home", "car", "personal", "business", "other")

# Stored debt-type labels (English and the original Thai product labels).
_CATEGORY_ALIASES: dict[str, str] = {
    "credit_card": "credit_card",
    "credit card": "credit_card",
    "revolving": "credit_card",
    "revolving credit": "credit_card",
    "บัตรเครดิต": "credit_card",
    "หนี้สินหมุนเวียน": "credit_card",
    "home": "home",
    "home_loan": "home",
    "home loan": "home",
    "mortgage": "home",
    "สินเชื่อบ้าน": "home",
    "สินเชื่อที่อยู่อาศัย": "home",
    "car": "car",
    "auto": "car",
    "auto_loan": "car",
    "auto loan": "car",
    "car loan": "car",
    "สินเชื่อรถยนต์": "car",
    "สินเชื่อยานพาหนะ": "car",
    "personal": "personal",
    "personal_loan": "personal",
    "personal loan": "personal",
    "สินเชื่อส่วนบุคคล": "personal",
    "business": "business",
    "business_loan": "business",
    "business loan": "business",
    "สินเชื่อธุรกิจ": "business",
    "informal": "other",
    "installment": "other",
    "เงินกู้นอกระบบ": "other",
    "หนี้สินผ่อนสินค้า": "other",
}


def clamp_amount(value: Any) -> float:
    """Coerce a financial input to a finite, non-negative float."""

    if value is None:
        return 0.0
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(amount) or amount < 0:
        return 0.0
    return amount


@dataclass(frozen=True, slots=True)
class Debt:
    """Snapshot of one outstanding obligation for a simulation run."""

    id: DebtId
    remaining_amount: float
    interest_rate: float  # annual, percent units
    minimum_payment: float | None = None
    payment_due_day: int | None = None  # Day of the month the payment is due
    debt_type: str = "other"
    interest_method: InterestMethod | None = None
    name: str = ""

    def normalized(self) -> "Debt":
        """Return a copy with corrupt values clamped instead of rejected."""

        minimum = self.minimum_payment
        if minimum is not None:
            minimum = clamp_amount(minimum) or None

        due_day = self.payment_due_day
        try:
            due_day = int(due_day) if due_day is not None else None
        except (TypeError, ValueError):
            due_day = None
        if due_day is not None and not 1 <= due_day <= 31:
            due_day = None

        method = self.interest_method
        if method is not None:
            try:
                method = InterestMethod.parse(method)
            except ValueError:
                method = None

        return replace(
            self,
            remaining_amount=clamp_amount(self.remaining_amount),
            interest_rate=clamp_amount(self.interest_rate),
            minimum_payment=minimum,
            payment_due_day=due_day,
            debt_type=self.debt_type or "other",
            interest_method=method,
        )

    def nominal_minimum_payment(
        self, *, balance: float | None = None, config: EngineConfig | None = None
    ) -> float:
        """Declared minimum payment, or the derived floor when none is set.

        The floor is ``max(balance * min_payment_rate, min_payment_floor)`` and
        is not capped at the balance; callers cap when applying it.
        """

        if self.minimum_payment:
            return float(self.minimum_payment)
        config = config or default_engine_config()
        current = self.remaining_amount if balance is None else balance
        return max(current * config.min_payment_rate, config.min_payment_floor)

    @property
    def category(self) -> str:
        return category_for(self.debt_type)


def normalize_debts(debts: Iterable[Debt]) -> list[Debt]:
    """Return normalized copies of ``debts`` in their original order."""

    return [debt.normalized() for debt in debts]


def snapshot_debts(liabilities: Iterable[Any]) -> list[Debt]:
    """Convert stored liability rows into engine ``Debt`` values.

    Accepts :class:`debtsage.models.Liability` rows or any object exposing
    the same attributes. Inactive rows and rows without an id are skipped.
    """

    debts: list[Debt] = []
    for row in liabilities:
        row_id = getattr(row, "id", None)
        if row_id is None or not getattr(row, "is_active", True):
            continue
        method = getattr(row, "interest_method", None)
        debts.append(
            Debt(
                id=row_id,
                remaining_amount=getattr(row, "balance", 0.0),
                interest_rate=getattr(row, "apr", 0.0),
                minimum_payment=getattr(row, "minimum_payment", None),
                payment_due_day=getattr(row, "due_day", None),
                debt_type=getattr(row, "debt_type", None) or "other",
                interest_method=method or None,
                name=getattr(row, "name", "") or "",
            ).normalized()
        )
    return debts


def category_for(debt_type: str | None) -> str:
    """Map a stored debt-type label onto one of :data:`CATEGORY_IDS`."""

    if not debt_type:
        return "other"
    key = debt_type.strip().lower()
    if key in _CATEGORY_ALIASES:
        return _CATEGORY_ALIASES[key]
    key = key.replace("-", "_")
    return _CATEGORY_ALIASES.get(key, _CATEGORY_ALIASES.get(key.replace("_", " "), "other"))


def filter_by_category(debts: Iterable[Debt], category: str) -> list[Debt]:
    """Return debts in ``category``; ``"all"`` returns every debt."""

    if category == "all":
        return list(debts)
    return [debt for debt in debts if category_for(debt.debt_type) == category]


def group_by_category(debts: Iterable[Debt]) -> dict[str, list[Debt]]:
    """Partition debts by category, preserving input order within each group."""

    groups: dict[str, list[Debt]] = {}
    for debt in debts:
        groups.setdefault(category_for(debt.debt_type), []).append(debt)
    return groups


def minimum_monthly_payment(
    debts: Iterable[Debt],
    *,
    epsilon: float | None = None,
    config: EngineConfig | None = None,
) -> float:
    """Sum of nominal (uncapped) minimum payments across ``debts``.

    Debts at or below ``epsilon`` (default: the config threshold) are paid off
    and contribute nothing.
    """

    config = config or default_engine_config()
    epsilon = config.epsilon if epsilon is None else epsilon
    return sum(
        debt.nominal_minimum_payment(config=config)
        for debt in debts
        if debt.remaining_amount > epsilon
    )


def total_remaining_debt(debts: Iterable[Debt]) -> float:
    return sum(debt.remaining_amount for debt in debts)


def recommended_payment(debts: Iterable[Debt], target_months: int) -> float:
    """Quick estimate of the monthly payment to be debt-free in ``target_months``.

    Assumes interest adds 15% over the period; use
    :func:`debtsage.services.simulation.solve_budget_for_target` for an
    answer that runs the full simulation.
    """

    if target_months <= 0:
        raise ValueError("target_months must be positive")
    return float(math.ceil(total_remaining_debt(debts) * 1.15 / target_months))
