"""Service module exports."""

from . import (
    comparison,
    debts,
    interest,
    plans,
    reports,
    scoring,
    simulation,
    strategies,
)

__all__ = [
    "comparison",
    "debts",
    "interest",
    "plans",
    "reports",
    "scoring",
    "simulation",
    "strategies",
]
