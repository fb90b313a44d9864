"""DebtSage debt repayment simulation engine."""

from __future__ import annotations

from .config import BaseConfig, DevConfig, EngineConfig
from .services.comparison import PlanComparison, compare_plans, compare_strategies
from .services.debts import Debt
from .services.interest import InterestMethod, accrue_interest
from .services.simulation import SimulationOptions, SimulationResult, simulate
from .services.strategies import RepaymentStrategy, allocate_extra_payment

__all__ = [
    "BaseConfig",
    "DevConfig",
    "EngineConfig",
    "Debt",
    "InterestMethod",
    "PlanComparison",
    "RepaymentStrategy",
    "SimulationOptions",
    "SimulationResult",
    "accrue_interest",
    "allocate_extra_payment",
    "compare_plans",
    "compare_strategies",
    "simulate",
]
