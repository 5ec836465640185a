"""SQLModel table exports."""

from .budget import Budget, BudgetCategory
from .category import Category
from .family import Family
from .transaction import Transaction

__all__ = [
    "Budget",
    "BudgetCategory",
    "Category",
    "Family",
    "Transaction",
]
