"""Read-only budget snapshots handed from a budget store to the variance engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional, Union


class PeriodType(str, Enum):
    """Granularity of a variance report."""

    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"

    @classmethod
    def coerce(cls, value: Union[str, "PeriodType", None]) -> "PeriodType":
        """Return the matching period type, falling back to ``MONTH``."""

        if isinstance(value, cls):
            return value
        if not value:
            return cls.MONTH
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.MONTH


@dataclass(frozen=True, slots=True)
class CategoryRef:
    """Category details passed through untouched into variance output."""

    id: int
    name: str
    color: Optional[str] = None
    classification: str = "expense"
    parent_id: Optional[int] = None

    @property
    def is_subcategory(self) -> bool:
        return self.parent_id is not None


@dataclass(frozen=True, slots=True)
class BudgetCategoryLine:
    """Planned spending for one category inside a monthly budget."""

    id: int
    category: CategoryRef
    budgeted_spending: Optional[float] = None

    @property
    def category_id(self) -> int:
        return self.category.id

    @property
    def is_subcategory(self) -> bool:
        return self.category.is_subcategory


@dataclass(frozen=True, slots=True)
class MonthlyBudget:
    """One family's budget for a single calendar month.

    ``actual_spending`` is computed by the store when the snapshot is built;
    ``budgeted_spending`` stays ``None`` until the family sets a total.
    """

    id: int
    family_id: int
    start_date: date
    end_date: date
    budgeted_spending: Optional[float] = None
    actual_spending: float = 0.0
    category_lines: tuple[BudgetCategoryLine, ...] = field(default_factory=tuple)
