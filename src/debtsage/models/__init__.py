"""SQLModel table exports."""

from .debt_plan import DebtPlan, DebtPlanItem
from .liability import Liability

__all__ = [
    "DebtPlan",
    "DebtPlanItem",
    "Liability",
]
