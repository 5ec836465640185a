"""Storage-independent budgeting types shared by services and stores."""

from .budget import BudgetCategoryLine, CategoryRef, MonthlyBudget, PeriodType

__all__ = ["BudgetCategoryLine", "CategoryRef", "MonthlyBudget", "PeriodType"]
