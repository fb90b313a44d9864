"""Chart and summary data derived from plan comparisons.

Rendering is left to the presentation layer; these helpers only shape the
simulation output into rows it can plot directly.
"""

from __future__ import annotations

from .comparison import PlanComparison
from .debts import CATEGORY_IDS

CATEGORY_LABELS: dict[str, str] = {
    "total": "Total debt",
    "credit_card": "Credit cards",
    "home": "Home loans",
    "car": "Car loans",
    "personal": "Personal loans",
    "business": "Business loans",
    "other": "Other debt",
}


def payoff_chart_rows(comparison: PlanComparison, *, min_months: int = 0) -> list[dict]:
    """Return ``{month, original, proposed}`` rows for a payoff line chart.

    Both series are padded with zeros to the same length so an early payoff
    needs no special casing. ``min_months`` stretches short plans to a fixed
    chart width.
    """

    length = max(
        len(comparison.original.monthly_trajectory),
        len(comparison.proposed.monthly_trajectory),
        min_months,
    )
    original = comparison.original.padded_trajectory(length)
    proposed = comparison.proposed.padded_trajectory(length)
    return [
        {"month": index + 1, "original": original[index], "proposed": proposed[index]}
        for index in range(length)
    ]


def category_summary_rows(comparison: PlanComparison) -> list[dict]:
    """Per-category totals for bar charts, in a fixed category order."""

    rows: list[dict] = []
    for category in CATEGORY_IDS:
        item = comparison.by_category.get(category)
        if item is None:
            continue
        rows.append(
            {
                "category": category,
                "label": CATEGORY_LABELS[category],
                "original_months": item.original.months_to_debt_free,
                "proposed_months": item.proposed.months_to_debt_free,
                "original_interest": item.original.total_interest_paid,
                "proposed_interest": item.proposed.total_interest_paid,
                "months_saved": item.months_saved,
                "interest_saved": item.interest_saved,
            }
        )
    return rows


def plan_summary(comparison: PlanComparison) -> dict:
    """Flat numbers for the "months saved / interest saved" summary cards."""

    return {
        "strategy": comparison.proposed.strategy.value,
        "original_budget": comparison.original.effective_budget,
        "proposed_budget": comparison.proposed.effective_budget,
        "original_months": comparison.original.months_to_debt_free,
        "proposed_months": comparison.proposed.months_to_debt_free,
        "original_interest": comparison.original.total_interest_paid,
        "proposed_interest": comparison.proposed.total_interest_paid,
        "months_saved": comparison.months_saved,
        "interest_saved": comparison.interest_saved,
        "months_saved_percent": comparison.months_saved_percent,
        "interest_saved_percent": comparison.interest_saved_percent,
        "exceeds_horizon": (
            comparison.original.horizon_exceeded or comparison.proposed.horizon_exceeded
        ),
    }
