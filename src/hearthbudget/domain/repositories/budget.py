"""Budget store protocol."""

from __future__ import annotations

from datetime import date
from typing import Optional, Protocol

from ..budget import BudgetCategoryLine, MonthlyBudget


class BudgetStore(Protocol):
    """Source of monthly budgets and their actual spending."""

    def find_or_create_budget(self, family_id: int, month_start: date) -> Optional[MonthlyBudget]:
        """Return the family's budget for the month, bootstrapping it if missing.

        Idempotent. Returns ``None`` when no budget can exist for the family
        (for example an unknown family) instead of raising.
        """
        ...

    def actual_spending_for(self, budget: MonthlyBudget, line: BudgetCategoryLine) -> float:
        """Actual spending for the line's category during the budget month.

        Includes spending recorded against the category's subcategories.
        """
        ...
