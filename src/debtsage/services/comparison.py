"""Compare an original repayment plan against a proposed one."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Iterable

from ..config import EngineConfig, default_engine_config
from ..logging_config import get_logger
from .debts import (
    Debt,
    clamp_amount,
    group_by_category,
    minimum_monthly_payment,
    normalize_debts,
)
from .simulation import SimulationOptions, SimulationResult, simulate
from .strategies import RepaymentStrategy

logger = get_logger("services.comparison")


@dataclass(slots=True)
class PlanComparison:
    """Savings of the proposed plan over the original plan."""

    original: SimulationResult
    proposed: SimulationResult
    original_budget: float
    proposed_budget: float
    months_saved: int
    interest_saved: float
    months_saved_percent: float
    interest_saved_percent: float
    by_category: dict[str, "PlanComparison"] = field(default_factory=dict)


def _percent(saved: float, original: float) -> float:
    if original == 0:
        return 0.0
    return round(saved / original * 100, 2)


def _category_share(
    subset: list[Debt], debts: list[Debt], epsilon: float, config: EngineConfig
) -> float:
    """Fraction of the plan budget a category is given."""

    total_minimum = minimum_monthly_payment(debts, epsilon=epsilon, config=config)
    if total_minimum > 0:
        return (
            minimum_monthly_payment(subset, epsilon=epsilon, config=config) / total_minimum
        )
    total_balance = sum(d.remaining_amount for d in debts)
    if total_balance <= 0:
        return 0.0
    return sum(d.remaining_amount for d in subset) / total_balance


def compare_plans(
    debts: Iterable[Debt],
    strategy: RepaymentStrategy | str,
    original_budget: float,
    proposed_budget: float,
    options: SimulationOptions | None = None,
    *,
    today: date | None = None,
    config: EngineConfig | None = None,
    include_categories: bool = True,
) -> PlanComparison:
    """Run both plans on independent copies of ``debts`` and diff the outcomes.

    Savings are floored at zero, so a proposed budget below the original
    never reports negative savings. When ``include_categories`` is set, each
    debt category is compared on its own with both budgets scaled by the
    category's share of the minimum payments.
    """

    config = config or default_engine_config()
    options = replace(
        options or SimulationOptions.from_config(config),
        strategy=RepaymentStrategy.parse(strategy),
    )
    today = today or date.today()
    snapshot = normalize_debts(debts)
    original_budget = clamp_amount(original_budget)
    proposed_budget = clamp_amount(proposed_budget)

    original = simulate(snapshot, original_budget, options, today=today, config=config)
    proposed = simulate(snapshot, proposed_budget, options, today=today, config=config)

    months_saved = max(original.months_to_debt_free - proposed.months_to_debt_free, 0)
    interest_saved = round(
        max(original.total_interest_paid - proposed.total_interest_paid, 0.0), 2
    )

    comparison = PlanComparison(
        original=original,
        proposed=proposed,
        original_budget=original_budget,
        proposed_budget=proposed_budget,
        months_saved=months_saved,
        interest_saved=interest_saved,
        months_saved_percent=_percent(months_saved, original.months_to_debt_free),
        interest_saved_percent=_percent(interest_saved, original.total_interest_paid),
    )

    if include_categories:
        for category, subset in group_by_category(snapshot).items():
            share = _category_share(subset, snapshot, options.epsilon, config)
            comparison.by_category[category] = compare_plans(
                subset,
                options.strategy,
                original_budget * share,
                proposed_budget * share,
                options,
                today=today,
                config=config,
                include_categories=False,
            )

    logger.debug(
        "Compared repayment plans",
        extra={
            "strategy": options.strategy.value,
            "months_saved": months_saved,
            "interest_saved": interest_saved,
            "categories": sorted(comparison.by_category),
        },
    )
    return comparison


def compare_strategies(
    debts: Iterable[Debt],
    monthly_budget: float,
    options: SimulationOptions | None = None,
    *,
    strategies: Iterable[RepaymentStrategy | str] | None = None,
    max_workers: int | None = None,
    today: date | None = None,
    config: EngineConfig | None = None,
) -> dict[RepaymentStrategy, SimulationResult]:
    """Simulate every strategy for the same debts and budget in parallel.

    Runs share only the immutable input snapshot, so no locking is needed.
    """

    config = config or default_engine_config()
    options = options or SimulationOptions.from_config(config)
    today = today or date.today()
    snapshot = tuple(normalize_debts(debts))
    selected = [RepaymentStrategy.parse(s) for s in (strategies or RepaymentStrategy)]

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = {
            strategy: executor.submit(
                simulate,
                snapshot,
                monthly_budget,
                replace(options, strategy=strategy),
                today=today,
                config=config,
            )
            for strategy in selected
        }
        return {strategy: future.result() for strategy, future in futures.items()}


def rank_strategies(
    results: dict[RepaymentStrategy, SimulationResult],
) -> list[RepaymentStrategy]:
    """Order strategies that reach debt-free first, then by total interest and months."""

    return sorted(
        results,
        key=lambda s: (
            results[s].horizon_exceeded,
            results[s].total_interest_paid,
            results[s].months_to_debt_free,
        ),
    )
