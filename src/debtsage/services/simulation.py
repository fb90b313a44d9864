"""Month-by-month debt payoff simulation."""

# Each run owns a scratch list of Debt snapshots. A month is:
#    1. accrue interest on every active debt
#    2. pay each debt's minimum (capped at its balance)
#    3. drop cleared debts
#    4. extra = effective budget - minimums actually paid
#    5. hand extra to the repayment strategy (rollover or proportional)
#    6. drop cleared debts
#    7. record the total remaining balance
# until nothing is owed or the horizon cap is hit.

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from datetime import date
from enum import Enum
from typing import Iterable, Sequence

from ..config import EngineConfig, default_engine_config
from ..logging_config import get_logger
from .debts import Debt, DebtId, clamp_amount, minimum_monthly_payment, normalize_debts
from .interest import InterestMethod, accrue_interest, resolve_method
from .strategies import RepaymentStrategy, allocate_extra_payment

logger = get_logger("services.simulation")


class SimulationStatus(str, Enum):
    DEBT_FREE = "debt_free"
    HORIZON_EXCEEDED = "horizon_exceeded"


@dataclass(frozen=True, slots=True)
class SimulationOptions:
    """Recognized options for a simulation run."""

    strategy: RepaymentStrategy = RepaymentStrategy.SNOWBALL
    interest_method: InterestMethod = InterestMethod.REDUCING_BALANCE
    horizon_cap_months: int = 1200
    epsilon: float = 0.01

    def __post_init__(self) -> None:
        object.__setattr__(self, "strategy", RepaymentStrategy.parse(self.strategy))
        object.__setattr__(self, "interest_method", InterestMethod.parse(self.interest_method))
        if self.horizon_cap_months < 1:
            raise ValueError("horizon_cap_months must be at least 1")
        if self.epsilon <= 0:
            raise ValueError("epsilon must be positive")

    @classmethod
    def from_config(cls, config: EngineConfig | None = None, **overrides) -> "SimulationOptions":
        """Build options from the engine policy, applying keyword overrides."""

        config = config or default_engine_config()
        values = {
            "strategy": config.default_strategy,
            "interest_method": config.default_interest_method,
            "horizon_cap_months": config.horizon_cap_months,
            "epsilon": config.epsilon,
        }
        values.update(overrides)
        return cls(**values)


@dataclass(frozen=True, slots=True)
class TrajectoryPoint:
    month: int
    total_remaining: float


@dataclass(frozen=True, slots=True)
class DebtPayment:
    """What happened to one debt in one simulated month."""

    payment_amount: float
    interest_paid: float
    remaining_balance: float


@dataclass(slots=True)
class MonthlyRow:
    month: int
    payments: dict[DebtId, DebtPayment] = field(default_factory=dict)


@dataclass(slots=True)
class SimulationResult:
    """Outcome of one simulation run."""

    months_to_debt_free: int
    total_interest_paid: float
    monthly_trajectory: list[TrajectoryPoint]
    status: SimulationStatus = SimulationStatus.DEBT_FREE
    strategy: RepaymentStrategy = RepaymentStrategy.SNOWBALL
    effective_budget: float = 0.0
    total_paid: float = 0.0
    horizon_cap_months: int = 1200
    payoff_months: dict[DebtId, int] = field(default_factory=dict)
    schedule: list[MonthlyRow] = field(default_factory=list)

    @property
    def horizon_exceeded(self) -> bool:
        return self.status is SimulationStatus.HORIZON_EXCEEDED

    @property
    def balances(self) -> list[float]:
        return [point.total_remaining for point in self.monthly_trajectory]

    def padded_trajectory(self, length: int) -> list[float]:
        """Balances padded with trailing zeros to at least ``length`` months."""

        balances = self.balances
        return balances + [0.0] * max(length - len(balances), 0)


def _money(value: float) -> float:
    return round(value + 0.0, 2)


def simulate(
    debts: Iterable[Debt],
    monthly_budget: float,
    options: SimulationOptions | None = None,
    *,
    today: date | None = None,
    config: EngineConfig | None = None,
    include_schedule: bool = False,
) -> SimulationResult:
    """Simulate paying ``debts`` with ``monthly_budget`` until debt-free.

    A budget below the sum of minimum payments is raised to that sum, so a
    zero or negative budget means "minimum payments only". Hitting the
    horizon cap is reported through ``status``; it is never raised.
    Set ``include_schedule`` to keep a per-debt row for every month.
    """

    config = config or default_engine_config()
    options = options or SimulationOptions.from_config(config)
    epsilon = options.epsilon
    today = today or date.today()

    active = [d for d in normalize_debts(debts) if d.remaining_amount > epsilon]
    budget = clamp_amount(monthly_budget)
    effective_budget = max(
        budget, minimum_monthly_payment(active, epsilon=epsilon, config=config)
    )

    if not active:
        return SimulationResult(
            months_to_debt_free=0,
            total_interest_paid=0.0,
            monthly_trajectory=[],
            strategy=options.strategy,
            effective_budget=effective_budget,
            horizon_cap_months=options.horizon_cap_months,
        )

    principals = {d.id: d.remaining_amount for d in active}
    methods = {
        d.id: resolve_method(
            d.interest_method or options.interest_method,
            d.interest_rate,
            config.reducing_balance_threshold,
        )
        for d in active
    }

    logger.debug(
        "Starting payoff simulation",
        extra={
            "debt_count": len(active),
            "strategy": options.strategy.value,
            "monthly_budget": budget,
            "effective_budget": effective_budget,
        },
    )

    month = 0
    total_interest = 0.0
    total_paid = 0.0
    trajectory: list[TrajectoryPoint] = []
    payoff_months: dict[DebtId, int] = {}
    schedule: list[MonthlyRow] = []

    def _still_owed(items: Sequence[Debt]) -> list[Debt]:
        owed = []
        for debt in items:
            if debt.remaining_amount > epsilon:
                owed.append(debt)
            else:
                payoff_months.setdefault(debt.id, month)
        return owed

    while active and month < options.horizon_cap_months:
        month += 1
        interest_by_debt: dict[DebtId, float] = {}
        paid_by_debt: dict[DebtId, float] = {}

        accrued = []
        for debt in active:
            new_balance, interest = accrue_interest(
                debt.remaining_amount,
                debt.interest_rate,
                methods[debt.id],
                principal=principals[debt.id],
            )
            interest_by_debt[debt.id] = interest
            accrued.append(replace(debt, remaining_amount=new_balance))
        total_interest += sum(interest_by_debt.values())

        applied_minimum_total = 0.0
        after_minimums = []
        for debt in accrued:
            payment = min(
                debt.nominal_minimum_payment(config=config), debt.remaining_amount
            )
            applied_minimum_total += payment
            paid_by_debt[debt.id] = payment
            after_minimums.append(
                replace(debt, remaining_amount=max(debt.remaining_amount - payment, 0.0))
            )

        cleared = [d for d in after_minimums if d.remaining_amount <= epsilon]
        active = _still_owed(after_minimums)

        extra = max(effective_budget - applied_minimum_total, 0.0)
        allocation = allocate_extra_payment(
            active, extra, options.strategy, epsilon=epsilon, today=today, config=config
        )
        for debt_id, amount in allocation.allocations.items():
            paid_by_debt[debt_id] += amount
        total_paid += applied_minimum_total + allocation.allocated

        if include_schedule:
            row = MonthlyRow(month=month)
            for debt in cleared + allocation.debts:
                row.payments[debt.id] = DebtPayment(
                    payment_amount=_money(paid_by_debt[debt.id]),
                    interest_paid=interest_by_debt[debt.id],
                    remaining_balance=(
                        _money(debt.remaining_amount) if debt.remaining_amount > epsilon else 0.0
                    ),
                )
            schedule.append(row)

        active = _still_owed(allocation.debts)
        trajectory.append(
            TrajectoryPoint(month=month, total_remaining=_money(sum(d.remaining_amount for d in active)))
        )

    status = SimulationStatus.HORIZON_EXCEEDED if active else SimulationStatus.DEBT_FREE
    if active:
        logger.warning(
            "Payoff simulation hit the horizon cap",
            extra={
                "horizon_cap_months": options.horizon_cap_months,
                "strategy": options.strategy.value,
                "remaining_balance": trajectory[-1].total_remaining,
            },
        )
    else:
        logger.debug(
            "Payoff simulation finished",
            extra={"months": month, "total_interest": _money(total_interest)},
        )

    return SimulationResult(
        months_to_debt_free=month,
        total_interest_paid=_money(total_interest),
        monthly_trajectory=trajectory,
        status=status,
        strategy=options.strategy,
        effective_budget=effective_budget,
        total_paid=_money(total_paid),
        horizon_cap_months=options.horizon_cap_months,
        payoff_months=payoff_months,
        schedule=schedule,
    )


def solve_budget_for_target(
    debts: Iterable[Debt],
    target_months: int,
    options: SimulationOptions | None = None,
    *,
    today: date | None = None,
    config: EngineConfig | None = None,
    tolerance: float = 1.0,
) -> float:
    """Smallest monthly budget (rounded up to whole units) that clears ``debts``
    within ``target_months``, found by bisecting on :func:`simulate`.
    """

    if target_months < 1:
        raise ValueError("target_months must be at least 1")
    config = config or default_engine_config()
    options = options or SimulationOptions.from_config(config)
    snapshot = [d for d in normalize_debts(debts) if d.remaining_amount > options.epsilon]
    if not snapshot:
        return 0.0

    def _meets_target(budget: float) -> bool:
        result = simulate(snapshot, budget, options, today=today, config=config)
        return not result.horizon_exceeded and result.months_to_debt_free <= target_months

    low = minimum_monthly_payment(snapshot, epsilon=options.epsilon, config=config)
    if _meets_target(low):
        return float(math.ceil(low))

    # Enough to clear every balance, interest included, in the first month.
    high = sum(
        accrue_interest(d.remaining_amount, d.interest_rate, InterestMethod.REDUCING_BALANCE)[0]
        + accrue_interest(d.remaining_amount, d.interest_rate, InterestMethod.FIXED_INTEREST)[1]
        for d in snapshot
    ) + low
    for _ in range(100):
        if high - low <= tolerance:
            break
        middle = (low + high) / 2
        if _meets_target(middle):
            high = middle
        else:
            low = middle
    return float(math.ceil(high))
