"""Hand a chosen repayment plan to the persistence layer."""

from __future__ import annotations

from datetime import date
from typing import Iterable, Protocol

from sqlmodel import Session

from ..logging_config import get_logger
from ..models.debt_plan import DebtPlan, DebtPlanItem
from .debts import Debt, normalize_debts
from .simulation import SimulationResult
from .strategies import STRATEGY_GOALS, order_debts

logger = get_logger("services.plans")


class PlanWriter(Protocol):
    """Persists a chosen plan for later retrieval."""

    def write_plan(
        self, *, plan: DebtPlan, items: list[DebtPlanItem]
    ) -> DebtPlan:  # pragma: no cover - interface
        ...


class SessionPlanWriter:
    """PlanWriter backed by a SQLModel session."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def write_plan(self, *, plan: DebtPlan, items: list[DebtPlanItem]) -> DebtPlan:
        self.session.add(plan)
        self.session.flush()
        for item in items:
            item.plan_id = plan.id
            self.session.add(item)
        self.session.commit()
        self.session.refresh(plan)
        return plan


def build_plan(
    *,
    debts: Iterable[Debt],
    result: SimulationResult,
    monthly_payment: float,
    debt_type_id: str = "all",
    today: date | None = None,
) -> tuple[DebtPlan, list[DebtPlanItem]]:
    """Describe a simulation run as unsaved plan rows.

    Items are ordered by the month each debt is cleared; debts cleared in the
    same month keep the strategy's starting order.
    """

    snapshot = normalize_debts(debts)
    start_order = {
        debt.id: index
        for index, debt in enumerate(order_debts(snapshot, result.strategy, today=today))
    }
    never = result.horizon_cap_months + 1
    ranked = sorted(
        snapshot,
        key=lambda d: (result.payoff_months.get(d.id, never), start_order[d.id]),
    )

    plan = DebtPlan(
        goal_type=STRATEGY_GOALS[result.strategy],
        payment_strategy=result.strategy.value,
        monthly_payment=float(monthly_payment),
        time_in_months=result.months_to_debt_free,
        debt_type_id=debt_type_id,
    )
    items = [
        DebtPlanItem(
            debt_id=str(debt.id),
            name=debt.name,
            debt_type=debt.debt_type,
            original_amount=debt.remaining_amount,
            interest_rate=debt.interest_rate,
            minimum_payment=debt.minimum_payment or 0.0,
            payment_order=position,
            payoff_month=result.payoff_months.get(debt.id),
        )
        for position, debt in enumerate(ranked, start=1)
    ]
    return plan, items


def persist_plan(
    *,
    writer: PlanWriter,
    debts: Iterable[Debt],
    result: SimulationResult,
    monthly_payment: float,
    debt_type_id: str = "all",
    today: date | None = None,
) -> DebtPlan:
    """Build plan rows for ``result`` and hand them to ``writer``."""

    if result.horizon_exceeded:
        raise ValueError("Cannot save a plan that does not reach debt-free.")

    plan, items = build_plan(
        debts=debts,
        result=result,
        monthly_payment=monthly_payment,
        debt_type_id=debt_type_id,
        today=today,
    )
    saved = writer.write_plan(plan=plan, items=items)
    logger.info(
        "Saved repayment plan",
        extra={
            "strategy": plan.payment_strategy,
            "months": plan.time_in_months,
            "items": len(items),
        },
    )
    return saved
