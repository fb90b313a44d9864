"""Plan comparison and aggregation tests."""

from __future__ import annotations

import pytest

from debtsage.services.comparison import compare_plans, compare_strategies, rank_strategies
from debtsage.services.simulation import SimulationOptions, simulate
from debtsage.services.strategies import RepaymentStrategy


@pytest.fixture
def mixed_debts(debt_factory):
    return [
        debt_factory(id="visa", remaining_amount=1800.0, interest_rate=22.0, minimum_payment=90.0, debt_type="credit_card"),
        debt_factory(id="store", remaining_amount=600.0, interest_rate=26.0, minimum_payment=40.0, debt_type="บัตรเครดิต"),
        debt_factory(id="car", remaining_amount=9000.0, interest_rate=6.0, minimum_payment=270.0, debt_type="auto loan"),
    ]


class TestComparePlans:
    def test_higher_budget_saves_time_and_interest(self, mixed_debts, today, engine_config):
        comparison = compare_plans(mixed_debts, "Avalanche", 400.0, 800.0, today=today, config=engine_config)

        original, proposed = comparison.original, comparison.proposed
        assert comparison.months_saved == original.months_to_debt_free - proposed.months_to_debt_free
        assert comparison.months_saved > 0
        assert comparison.interest_saved == pytest.approx(
            original.total_interest_paid - proposed.total_interest_paid, abs=0.01
        )
        assert comparison.months_saved_percent == pytest.approx(
            comparison.months_saved / original.months_to_debt_free * 100, abs=0.01
        )
        assert comparison.interest_saved_percent == pytest.approx(
            comparison.interest_saved / original.total_interest_paid * 100, abs=0.01
        )

    def test_lower_proposed_budget_never_reports_negative_savings(self, mixed_debts, today, engine_config):
        comparison = compare_plans(mixed_debts, "Snowball", 900.0, 400.0, today=today, config=engine_config)

        assert comparison.months_saved == 0
        assert comparison.interest_saved == 0.0
        assert comparison.months_saved_percent == 0.0
        assert comparison.interest_saved_percent == 0.0

    def test_zero_interest_original_reports_zero_percent(self, debt_factory, today, engine_config):
        debts = [debt_factory(remaining_amount=1200.0, interest_rate=0.0, minimum_payment=100.0)]

        comparison = compare_plans(debts, "Snowball", 100.0, 200.0, today=today, config=engine_config)

        assert comparison.months_saved == 6
        assert comparison.months_saved_percent == 50.0
        assert comparison.interest_saved == 0.0
        assert comparison.interest_saved_percent == 0.0

    def test_plans_match_independent_simulations(self, mixed_debts, today, engine_config):
        options = SimulationOptions(strategy="Proportional")

        comparison = compare_plans(
            mixed_debts, "Proportional", 400.0, 700.0, options, today=today, config=engine_config
        )

        assert comparison.original.balances == simulate(mixed_debts, 400.0, options, today=today, config=engine_config).balances
        assert comparison.proposed.balances == simulate(mixed_debts, 700.0, options, today=today, config=engine_config).balances

    def test_strategy_argument_wins_over_options(self, mixed_debts, today, engine_config):
        comparison = compare_plans(
            mixed_debts, "Avalanche", 400.0, 700.0, SimulationOptions(strategy="Snowball"),
            today=today, config=engine_config,
        )
        assert comparison.proposed.strategy is RepaymentStrategy.AVALANCHE

    def test_non_finite_budgets_are_clamped(self, mixed_debts, today, engine_config):
        comparison = compare_plans(
            mixed_debts, "Snowball", float("nan"), 800.0, today=today, config=engine_config
        )

        assert comparison.original_budget == 0.0
        assert comparison.original.effective_budget == 400.0
        assert not comparison.original.horizon_exceeded
        assert comparison.by_category["credit_card"].original_budget == 0.0
        assert comparison.by_category["credit_card"].proposed_budget == pytest.approx(260.0)

    def test_empty_debts(self, engine_config):
        comparison = compare_plans([], "Snowball", 0.0, 500.0, config=engine_config)

        assert comparison.months_saved == 0
        assert comparison.by_category == {}


class TestCategoryBreakdown:
    def test_categories_partition_the_debts(self, mixed_debts, today, engine_config):
        comparison = compare_plans(mixed_debts, "Snowball", 400.0, 600.0, today=today, config=engine_config)

        assert set(comparison.by_category) == {"credit_card", "car"}
        card = comparison.by_category["credit_card"]
        car = comparison.by_category["car"]
        assert set(card.original.payoff_months) == {"visa", "store"}
        assert set(car.original.payoff_months) == {"car"}
        assert card.by_category == {}

    def test_category_budgets_scale_with_minimum_share(self, mixed_debts, today, engine_config):
        comparison = compare_plans(mixed_debts, "Snowball", 400.0, 800.0, today=today, config=engine_config)

        card = comparison.by_category["credit_card"]
        # Cards carry 130 of the 400 minimum.
        assert card.original_budget == pytest.approx(130.0)
        assert card.proposed_budget == pytest.approx(260.0)

    def test_breakdown_does_not_change_overall_numbers(self, mixed_debts, today, engine_config):
        with_categories = compare_plans(mixed_debts, "Snowball", 400.0, 600.0, today=today, config=engine_config)
        without = compare_plans(
            mixed_debts, "Snowball", 400.0, 600.0, today=today, config=engine_config, include_categories=False
        )

        assert with_categories.months_saved == without.months_saved
        assert with_categories.interest_saved == without.interest_saved
        assert with_categories.original.balances == without.original.balances


class TestCompareStrategies:
    def test_runs_every_strategy(self, mixed_debts, today, engine_config):
        results = compare_strategies(mixed_debts, 600.0, max_workers=4, today=today, config=engine_config)

        assert set(results) == set(RepaymentStrategy)
        for strategy, result in results.items():
            direct = simulate(
                mixed_debts, 600.0, SimulationOptions(strategy=strategy), today=today, config=engine_config
            )
            assert result.balances == direct.balances
            assert result.total_interest_paid == direct.total_interest_paid

    def test_subset_of_strategies(self, mixed_debts, today, engine_config):
        results = compare_strategies(
            mixed_debts, 600.0, strategies=["Snowball", "avalanche"], today=today, config=engine_config
        )
        assert list(results) == [RepaymentStrategy.SNOWBALL, RepaymentStrategy.AVALANCHE]

    def test_rank_prefers_least_interest(self, mixed_debts, today, engine_config):
        results = compare_strategies(mixed_debts, 600.0, today=today, config=engine_config)

        ranking = rank_strategies(results)

        assert results[ranking[0]].total_interest_paid == min(
            r.total_interest_paid for r in results.values()
        )
