"""Household (family) model scoping all budgeting data."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING, ClassVar, Optional

from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:  # pragma: no cover
    from .budget import Budget
    from .category import Category


class Family(SQLModel, table=True):
    """A household sharing one set of budgets and categories."""

    __tablename__: ClassVar[str] = "family"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(nullable=False, max_length=128)
    currency: str = Field(default="USD", max_length=3, description="ISO-4217 currency code")
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    categories: list["Category"] = Relationship(
        back_populates="family",
        sa_relationship=relationship("Category", back_populates="family"),
    )
    budgets: list["Budget"] = Relationship(
        back_populates="family",
        sa_relationship=relationship("Budget", back_populates="family"),
    )
