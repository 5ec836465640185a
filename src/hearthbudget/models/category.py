"""Ledger category definitions."""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar, Optional

from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:  # pragma: no cover
    from .family import Family

EXPENSE = "expense"
INCOME = "income"


class Category(SQLModel, table=True):
    """Transaction category used for budgeting and reporting.

    Categories nest one level deep: a category with ``parent_id`` set is a
    subcategory whose spending rolls up into the parent.
    """

    __tablename__: ClassVar[str] = "category"

    id: Optional[int] = Field(default=None, primary_key=True)
    family_id: int = Field(foreign_key="family.id", nullable=False, index=True)
    name: str = Field(index=True, nullable=False, max_length=64)
    color: Optional[str] = Field(default=None, max_length=7)
    classification: str = Field(default=EXPENSE, nullable=False, max_length=32)
    parent_id: Optional[int] = Field(default=None, foreign_key="category.id", index=True)

    family: "Family" = Relationship(
        sa_relationship=relationship("Family", back_populates="categories")
    )

    @property
    def is_subcategory(self) -> bool:
        return self.parent_id is not None
