"""Repayment strategies: who gets the money left over after minimums."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date
from enum import Enum
from typing import Sequence

from ..config import EngineConfig, default_engine_config
from .debts import Debt, DebtId
from .scoring import priority_scores


class RepaymentStrategy(str, Enum):
    """Policy for distributing extra payment across active debts."""

    SNOWBALL = "Snowball"
    AVALANCHE = "Avalanche"
    PRIORITY_SCORE = "PriorityScore"
    PROPORTIONAL = "Proportional"

    @classmethod
    def parse(cls, value: "RepaymentStrategy | str") -> "RepaymentStrategy":
        """Return the strategy named by ``value``.

        Accepts member values, member names and the chart labels
        ``lowest-balance`` / ``highest-interest``, case-insensitively.
        """

        if isinstance(value, cls):
            return value
        key = str(value).strip().lower().replace("-", "_").replace(" ", "_")
        for member in cls:
            if key in {member.value.lower(), member.name.lower()}:
                return member
        if key in _ALIASES:
            return _ALIASES[key]
        raise ValueError(f"Invalid debt payoff strategy: {value!r}")


_ALIASES = {
    "lowest_balance": RepaymentStrategy.SNOWBALL,
    "highest_interest": RepaymentStrategy.AVALANCHE,
    "priority": RepaymentStrategy.PRIORITY_SCORE,
    "balanced": RepaymentStrategy.PROPORTIONAL,
}

STRATEGY_DESCRIPTIONS: dict[RepaymentStrategy, str] = {
    RepaymentStrategy.SNOWBALL: "Start with the smallest balance and work up",
    RepaymentStrategy.AVALANCHE: "Start with the highest interest rate",
    RepaymentStrategy.PRIORITY_SCORE: "Order debts by a weighted priority score",
    RepaymentStrategy.PROPORTIONAL: "Spread extra payment across every debt",
}

STRATEGY_GOALS: dict[RepaymentStrategy, str] = {
    RepaymentStrategy.SNOWBALL: "quick_wins",
    RepaymentStrategy.AVALANCHE: "save_interest",
    RepaymentStrategy.PRIORITY_SCORE: "by_priority",
    RepaymentStrategy.PROPORTIONAL: "balanced",
}


@dataclass(slots=True)
class AllocationResult:
    """Debts after one month's extra payment, plus where the money went."""

    debts: list[Debt]
    allocations: dict[DebtId, float] = field(default_factory=dict)
    unallocated: float = 0.0

    @property
    def allocated(self) -> float:
        return sum(self.allocations.values())


def order_debts(
    debts: Sequence[Debt],
    strategy: RepaymentStrategy | str,
    *,
    today: date | None = None,
    config: EngineConfig | None = None,
) -> list[Debt]:
    """Return ``debts`` in the order the strategy pays extra into them.

    Sorting is stable so ties keep their input order. Proportional has no
    recipient order and returns the input order.
    """

    strategy = RepaymentStrategy.parse(strategy)
    if strategy is RepaymentStrategy.SNOWBALL:
        return sorted(debts, key=lambda d: d.remaining_amount)
    if strategy is RepaymentStrategy.AVALANCHE:
        return sorted(debts, key=lambda d: d.interest_rate, reverse=True)
    if strategy is RepaymentStrategy.PRIORITY_SCORE:
        # Bounds move as debts leave the active set, so score on every call.
        scores = priority_scores(debts, today=today, config=config)
        return sorted(debts, key=lambda d: scores[d.id], reverse=True)
    return list(debts)


def _proportional_shares(active: Sequence[Debt], extra: float) -> dict[DebtId, float]:
    total = sum(d.remaining_amount for d in active)
    if total <= 0:
        return {}
    # A share above the debt's balance is capped; the excess is dropped.
    return {
        d.id: min(d.remaining_amount, extra * d.remaining_amount / total) for d in active
    }


def _rollover_shares(ordered: Sequence[Debt], extra: float) -> dict[DebtId, float]:
    shares: dict[DebtId, float] = {}
    remaining = extra
    for debt in ordered:
        if remaining <= 0:
            break
        payment = min(remaining, debt.remaining_amount)
        shares[debt.id] = payment
        remaining -= payment
    return shares


def allocate_extra_payment(
    debts: Sequence[Debt],
    extra_amount: float,
    strategy: RepaymentStrategy | str,
    *,
    epsilon: float | None = None,
    today: date | None = None,
    config: EngineConfig | None = None,
) -> AllocationResult:
    """Apply ``extra_amount`` to ``debts`` according to ``strategy``.

    Snowball, Avalanche and PriorityScore pay the first debt in strategy
    order up to its balance and roll any remainder to the next debt in the
    same month. Proportional splits the extra by balance share. Inputs are
    not mutated; the returned debts keep the input order and only their
    ``remaining_amount`` changes.
    """

    strategy = RepaymentStrategy.parse(strategy)
    config = config or default_engine_config()
    epsilon = config.epsilon if epsilon is None else epsilon
    extra = max(float(extra_amount or 0.0), 0.0)

    active = [d for d in debts if d.remaining_amount > epsilon]
    if extra <= 0 or not active:
        return AllocationResult(debts=list(debts), unallocated=extra)

    if strategy is RepaymentStrategy.PROPORTIONAL:
        shares = _proportional_shares(active, extra)
    else:
        ordered = order_debts(active, strategy, today=today, config=config)
        shares = _rollover_shares(ordered, extra)

    updated = [
        replace(d, remaining_amount=max(d.remaining_amount - shares[d.id], 0.0))
        if d.id in shares
        else d
        for d in debts
    ]
    unallocated = max(extra - sum(shares.values()), 0.0)
    return AllocationResult(debts=updated, allocations=shares, unallocated=unallocated)
