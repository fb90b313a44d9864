"""Chart and summary row tests."""

from __future__ import annotations

from debtsage.services.comparison import compare_plans
from debtsage.services.reports import category_summary_rows, payoff_chart_rows, plan_summary


def _zero_rate_comparison(debt_factory, engine_config, today):
    debts = [
        debt_factory(id="card", remaining_amount=600.0, interest_rate=0.0, minimum_payment=100.0),
        debt_factory(id="car", remaining_amount=600.0, interest_rate=0.0, minimum_payment=100.0, debt_type="car"),
    ]
    return compare_plans(debts, "Snowball", 200.0, 400.0, today=today, config=engine_config)


def test_payoff_rows_pad_the_shorter_plan(debt_factory, engine_config, today):
    comparison = _zero_rate_comparison(debt_factory, engine_config, today)

    rows = payoff_chart_rows(comparison)

    assert len(rows) == 6
    assert rows[0] == {"month": 1, "original": 1000.0, "proposed": 800.0}
    assert [row["proposed"] for row in rows[3:]] == [0.0, 0.0, 0.0]
    assert rows[-1]["original"] == 0.0


def test_payoff_rows_honor_minimum_chart_width(debt_factory, engine_config, today):
    comparison = _zero_rate_comparison(debt_factory, engine_config, today)

    rows = payoff_chart_rows(comparison, min_months=24)

    assert len(rows) == 24
    assert [row["month"] for row in rows] == list(range(1, 25))
    assert all(row["original"] == 0.0 and row["proposed"] == 0.0 for row in rows[6:])


def test_category_rows_follow_fixed_order(debt_factory, engine_config, today):
    comparison = _zero_rate_comparison(debt_factory, engine_config, today)

    rows = category_summary_rows(comparison)

    assert [row["category"] for row in rows] == ["credit_card", "car"]
    assert rows[0]["label"] == "Credit cards"
    assert rows[0]["original_months"] == 6
    assert rows[0]["proposed_months"] == 3
    assert rows[0]["months_saved"] == 3


def test_plan_summary(debt_factory, engine_config, today):
    comparison = _zero_rate_comparison(debt_factory, engine_config, today)

    summary = plan_summary(comparison)

    assert summary["strategy"] == "Snowball"
    assert summary["original_months"] == 6
    assert summary["proposed_months"] == 3
    assert summary["months_saved"] == 3
    assert summary["months_saved_percent"] == 50.0
    assert summary["interest_saved_percent"] == 0.0
    assert summary["exceeds_horizon"] is False
