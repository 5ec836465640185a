"""Repository protocol definitions for domain layer."""

from .budget import BudgetStore

__all__ = ["BudgetStore"]
