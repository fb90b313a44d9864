"""Saved repayment plans."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import ClassVar, Optional

from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DebtPlan(SQLModel, table=True):
    """A repayment plan the user chose after comparing simulations."""

    __tablename__: ClassVar[str] = "debt_plan"

    id: Optional[int] = Field(default=None, primary_key=True)
    goal_type: str = Field(nullable=False, max_length=32)
    payment_strategy: str = Field(nullable=False, max_length=32, index=True)
    monthly_payment: float = Field(nullable=False)
    time_in_months: int = Field(nullable=False)
    debt_type_id: str = Field(default="all", max_length=32)
    is_active: bool = Field(default=True, nullable=False)
    created_at: datetime = Field(default_factory=_utcnow, nullable=False)

    items: list["DebtPlanItem"] = Relationship(
        back_populates="plan",
        sa_relationship=relationship("DebtPlanItem", back_populates="plan"),
    )


class DebtPlanItem(SQLModel, table=True):
    """One debt inside a saved plan, in payment order."""

    __tablename__: ClassVar[str] = "debt_plan_item"

    id: Optional[int] = Field(default=None, primary_key=True)
    plan_id: int = Field(foreign_key="debt_plan.id", nullable=False, index=True)
    debt_id: str = Field(nullable=False, max_length=64)
    name: str = Field(default="", max_length=80)
    debt_type: str = Field(default="other", max_length=64)
    original_amount: float = Field(nullable=False)
    interest_rate: float = Field(default=0.0, nullable=False)
    minimum_payment: float = Field(default=0.0, nullable=False)
    payment_order: int = Field(default=1, nullable=False)
    payoff_month: Optional[int] = Field(default=None)

    plan: "DebtPlan" = Relationship(
        back_populates="items",
        sa_relationship=relationship("DebtPlan", back_populates="items"),
    )
