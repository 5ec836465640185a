"""Concrete repository implementations using SQLModel."""

from .budget import SQLModelBudgetStore

__all__ = ["SQLModelBudgetStore"]
