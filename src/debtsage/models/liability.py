"""Stored debt rows handed to the engine by the persistence layer."""

from __future__ import annotations

from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel


class Liability(SQLModel, table=True):
    """Installment or revolving debt as stored by the host application."""

    __tablename__: ClassVar[str] = "liability"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(nullable=False, max_length=80, index=True)
    debt_type: str = Field(default="other", max_length=64, index=True)
    total_amount: float = Field(default=0.0, nullable=False)
    balance: float = Field(nullable=False)
    apr: float = Field(default=0.0, nullable=False)
    minimum_payment: Optional[float] = Field(default=None)
    due_day: Optional[int] = Field(default=None, ge=1, le=31)
    interest_method: Optional[str] = Field(default=None, max_length=32)
    is_active: bool = Field(default=True, nullable=False)
