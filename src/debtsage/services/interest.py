"""Monthly interest accrual and closed-form payoff estimates."""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum

from ..config import default_engine_config

MONTHS_PER_YEAR = 12
_CENT = Decimal("0.01")


class InterestMethod(str, Enum):
    """How a debt's monthly interest is computed."""

    REDUCING_BALANCE = "reducing_balance"
    FIXED_INTEREST = "fixed_interest"
    # Opt-in: pick one of the two above from the debt's rate.
    BY_RATE = "by_rate"

    @classmethod
    def parse(cls, value: "InterestMethod | str") -> "InterestMethod":
        """Return the member matching ``value`` (case and separator insensitive)."""

        if isinstance(value, cls):
            return value
        key = str(value).strip().lower().replace("-", "_").replace(" ", "_")
        for member in cls:
            if member.value == key or member.name.lower() == key:
                return member
        raise ValueError(f"Unknown interest calculation method: {value!r}")


def method_for_rate(annual_rate_percent: float, threshold: float | None = None) -> InterestMethod:
    """Return the method the rate heuristic assigns to a debt.

    Rates at or above ``threshold`` compound on the live balance (cards,
    unsecured loans); lower rates are treated as flat-rate installment loans.
    """

    if threshold is None:
        threshold = default_engine_config().reducing_balance_threshold
    if annual_rate_percent >= threshold:
        return InterestMethod.REDUCING_BALANCE
    return InterestMethod.FIXED_INTEREST


def resolve_method(
    method: InterestMethod | str,
    annual_rate_percent: float,
    threshold: float | None = None,
) -> InterestMethod:
    """Resolve ``BY_RATE`` to a concrete method; other methods pass through."""

    method = InterestMethod.parse(method)
    if method is InterestMethod.BY_RATE:
        return method_for_rate(annual_rate_percent, threshold)
    return method


def monthly_rate(annual_rate_percent: float) -> float:
    """Convert an annual percentage rate to a monthly decimal rate."""

    return max(float(annual_rate_percent), 0.0) / 100.0 / MONTHS_PER_YEAR


def _quantize_cents(value: float) -> float:
    return float(Decimal(str(value)).quantize(_CENT, rounding=ROUND_HALF_UP))


def accrue_interest(
    balance: float,
    annual_rate_percent: float,
    method: InterestMethod | str = InterestMethod.REDUCING_BALANCE,
    *,
    principal: float | None = None,
    elapsed_fraction: float = 1.0 / MONTHS_PER_YEAR,
) -> tuple[float, float]:
    """Return ``(new_balance, interest_for_month)`` for one accrual period.

    Reducing balance charges ``balance * rate / 12`` on the live balance.
    Fixed interest charges ``principal * rate * elapsed_fraction`` so the
    charge does not shrink as the balance is paid down; ``principal``
    defaults to ``balance``. Interest is rounded half-up to cents.
    """

    balance = max(float(balance), 0.0)
    rate = max(float(annual_rate_percent), 0.0)
    if balance <= 0 or rate <= 0:
        return balance, 0.0

    method = resolve_method(method, rate)
    if method is InterestMethod.FIXED_INTEREST:
        base = balance if principal is None else max(float(principal), 0.0)
        interest = base * (rate / 100.0) * max(float(elapsed_fraction), 0.0)
    else:
        interest = balance * monthly_rate(rate)

    interest = _quantize_cents(interest)
    return balance + interest, interest


def months_to_payoff_reducing_balance(
    principal: float, annual_rate_percent: float, monthly_payment: float
) -> float:
    """Months to clear ``principal`` with compounding interest.

    ``T = log(P / (P - D * r)) / log(1 + r)``, rounded up. Returns
    ``math.inf`` when the payment never covers the monthly interest.
    """

    if principal <= 0:
        return 0
    if monthly_payment <= 0:
        return math.inf
    r = monthly_rate(annual_rate_percent)
    if r == 0:
        return math.ceil(principal / monthly_payment)
    if monthly_payment <= principal * r:
        return math.inf
    return math.ceil(
        math.log(monthly_payment / (monthly_payment - principal * r)) / math.log(1 + r)
    )


def months_to_payoff_fixed_interest(
    principal: float, annual_rate_percent: float, monthly_payment: float
) -> float:
    """Months to clear ``principal`` when interest is flat on the principal.

    ``T = D / (P - D * r)``, rounded up; ``math.inf`` when the payment does
    not exceed the flat monthly charge.
    """

    if principal <= 0:
        return 0
    r = monthly_rate(annual_rate_percent)
    if monthly_payment <= principal * r:
        return math.inf
    return math.ceil(principal / (monthly_payment - principal * r))


def remaining_debt_reducing_balance(
    monthly_payment: float, annual_rate_percent: float, months: int
) -> float:
    """Debt that ``months`` payments retire under compounding interest."""

    r = monthly_rate(annual_rate_percent)
    if r == 0:
        return monthly_payment * months
    return monthly_payment * (1 - (1 + r) ** (-months)) / r


def remaining_debt_fixed_interest(
    monthly_payment: float, annual_rate_percent: float, months: int
) -> float:
    """Debt that ``months`` payments retire under flat interest."""

    r = monthly_rate(annual_rate_percent)
    return monthly_payment * months / (1 + r * months)
