"""Pytest configuration and shared fixtures for DebtSage tests.

This module provides database fixtures for the plan persistence boundary,
debt factories and helper utilities for testing the payoff engine.
"""

from __future__ import annotations

import tempfile
from datetime import date
from pathlib import Path

import pytest

# Import all models to ensure they're registered with SQLModel metadata
from debtsage.models import DebtPlan, DebtPlanItem, Liability  # noqa: F401
from debtsage.config import EngineConfig
from debtsage.services.debts import Debt
from sqlmodel import Session, SQLModel, create_engine

# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database for each test.

    Yields:
        Engine: SQLModel engine connected to test database
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(f"sqlite:///{db_path}", echo=False)
    SQLModel.metadata.create_all(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def db_session(db_engine):
    """Create a database session for a single test.

    Yields:
        Session: SQLModel session for test
    """
    session = Session(db_engine, expire_on_commit=False)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@pytest.fixture
def liability_factory(db_session):
    """Factory for creating stored liabilities (debts).

    Returns:
        Callable: Function that creates and persists Liability instances
    """

    def _create_liability(
        name: str = "Test Debt",
        balance: float = 1000.00,
        apr: float = 18.0,
        minimum_payment: float | None = 25.00,
        due_day: int | None = 15,
        debt_type: str = "credit_card",
        is_active: bool = True,
    ) -> Liability:
        liability = Liability(
            name=name,
            balance=balance,
            total_amount=balance,
            apr=apr,
            minimum_payment=minimum_payment,
            due_day=due_day,
            debt_type=debt_type,
            is_active=is_active,
        )
        db_session.add(liability)
        db_session.commit()
        db_session.refresh(liability)
        return liability

    return _create_liability


# =============================================================================
# Engine Fixtures
# =============================================================================


@pytest.fixture
def engine_config() -> EngineConfig:
    """Default numeric policy, independent of any DEBTSAGE_* environment."""

    return EngineConfig()


@pytest.fixture
def today() -> date:
    """A fixed 'today' so overdue flags are deterministic."""

    return date(2024, 1, 15)


@pytest.fixture
def debt_factory():
    """Factory for engine Debt snapshots with sensible defaults."""

    counter = {"next": 1}

    def _create_debt(
        remaining_amount: float = 1000.0,
        interest_rate: float = 18.0,
        minimum_payment: float | None = 100.0,
        payment_due_day: int | None = None,
        debt_type: str = "credit_card",
        id=None,
        **kwargs,
    ) -> Debt:
        if id is None:
            id = counter["next"]
            counter["next"] += 1
        return Debt(
            id=id,
            remaining_amount=remaining_amount,
            interest_rate=interest_rate,
            minimum_payment=minimum_payment,
            payment_due_day=payment_due_day,
            debt_type=debt_type,
            **kwargs,
        )

    return _create_debt


@pytest.fixture
def two_debts(debt_factory) -> list[Debt]:
    """Debt A: 1000 @ 20% min 100; Debt B: 5000 @ 10% min 200."""

    return [
        debt_factory(id="A", remaining_amount=1000.0, interest_rate=20.0, minimum_payment=100.0),
        debt_factory(id="B", remaining_amount=5000.0, interest_rate=10.0, minimum_payment=200.0),
    ]


# =============================================================================
# Helper Utilities
# =============================================================================


def assert_float_equal(actual: float, expected: float, tolerance: float = 0.01):
    """Assert that two floats are equal within a tolerance.

    Args:
        actual: Actual value
        expected: Expected value
        tolerance: Maximum allowed difference (default 0.01 = 1 cent)

    Raises:
        AssertionError: If values differ by more than tolerance
    """
    assert (
        abs(actual - expected) < tolerance
    ), f"Expected {expected}, got {actual} (diff: {abs(actual - expected)})"
