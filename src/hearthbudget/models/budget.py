"""Budgeting tables."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING, ClassVar, Optional

from sqlalchemy import UniqueConstraint
from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:  # pragma: no cover
    from .family import Family


class Budget(SQLModel, table=True):
    """A single calendar month of planned spending for a family."""

    __tablename__: ClassVar[str] = "budget"
    # At most one budget per family and month, even under concurrent bootstraps.
    __table_args__ = (UniqueConstraint("family_id", "start_date", name="uq_budget_family_month"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    family_id: int = Field(foreign_key="family.id", nullable=False, index=True)
    start_date: date = Field(index=True, nullable=False)
    end_date: date = Field(nullable=False)
    budgeted_spending: Optional[float] = Field(default=None)
    expected_income: Optional[float] = Field(default=None)

    lines: list["BudgetCategory"] = Relationship(
        back_populates="budget",
        sa_relationship=relationship("BudgetCategory", back_populates="budget"),
    )
    family: "Family" = Relationship(
        sa_relationship=relationship("Family", back_populates="budgets")
    )


class BudgetCategory(SQLModel, table=True):
    """Planned spending for one category within a monthly budget."""

    __tablename__: ClassVar[str] = "budget_category"
    __table_args__ = (
        UniqueConstraint("budget_id", "category_id", name="uq_budget_category"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    budget_id: int = Field(foreign_key="budget.id", nullable=False, index=True)
    category_id: int = Field(foreign_key="category.id", nullable=False)
    budgeted_spending: Optional[float] = Field(default=None)

    budget: "Budget" = Relationship(
        back_populates="lines",
        sa_relationship=relationship("Budget", back_populates="lines"),
    )
