"""Pytest configuration and shared fixtures for HearthBudget tests.

Provides an in-memory budget store for exercising the variance engine without a
database, SQLite-backed fixtures for the SQLModel store, and small factories for
households, categories and transactions.
"""

from __future__ import annotations

import logging
import tempfile
from calendar import monthrange
from datetime import date
from pathlib import Path
from typing import Iterable, Optional

import pytest
from sqlmodel import SQLModel, create_engine

from hearthbudget.config import TestConfig
from hearthbudget.domain.budget import BudgetCategoryLine, CategoryRef, MonthlyBudget
from hearthbudget.infra.database import bootstrap_database, create_session_factory

# Import all models to ensure they're registered with SQLModel metadata
from hearthbudget.models import Budget, BudgetCategory, Category, Family, Transaction  # noqa: F401
from hearthbudget.models.category import EXPENSE

# =============================================================================
# Domain fixtures
# =============================================================================

GROCERIES = CategoryRef(id=1, name="Groceries", color="#FF5733")
RENT = CategoryRef(id=2, name="Rent", color="#3357FF")
UTILITIES = CategoryRef(id=3, name="Utilities", color="#FF33A1")
FOOD = CategoryRef(id=4, name="Food", color="#FFB833")
DINING_OUT = CategoryRef(id=5, name="Dining Out", color="#FF8C33", parent_id=4)


class FakeBudgetStore:
    """In-memory ``BudgetStore``.

    Months without a prepared budget are bootstrapped as empty budgets, the
    same way a real store creates missing months. Months listed in
    ``unavailable_months`` (or any other family) produce ``None``.
    """

    def __init__(self, family_id: int = 1):
        self.family_id = family_id
        self.unavailable_months: set[date] = set()
        self.requests: list[tuple[int, date]] = []
        self._budgets: dict[date, MonthlyBudget] = {}
        self._line_actuals: dict[tuple[int, int], float] = {}
        self._next_id = 1

    def _allocate_id(self) -> int:
        allocated = self._next_id
        self._next_id += 1
        return allocated

    def add_budget(
        self,
        month: date,
        *,
        budgeted: Optional[float] = None,
        actual: float = 0.0,
        lines: Iterable[tuple[CategoryRef, Optional[float], float]] = (),
    ) -> MonthlyBudget:
        """Prepare a month; ``lines`` holds (category, budgeted, actual) triples."""
        budget_id = self._allocate_id()
        built_lines = []
        for category, line_budgeted, line_actual in lines:
            line = BudgetCategoryLine(
                id=self._allocate_id(), category=category, budgeted_spending=line_budgeted
            )
            self._line_actuals[(budget_id, line.id)] = line_actual
            built_lines.append(line)

        budget = MonthlyBudget(
            id=budget_id,
            family_id=self.family_id,
            start_date=month,
            end_date=date(month.year, month.month, monthrange(month.year, month.month)[1]),
            budgeted_spending=budgeted,
            actual_spending=actual,
            category_lines=tuple(built_lines),
        )
        self._budgets[month] = budget
        return budget

    def find_or_create_budget(self, family_id: int, month_start: date) -> Optional[MonthlyBudget]:
        self.requests.append((family_id, month_start))
        if family_id != self.family_id or month_start in self.unavailable_months:
            return None
        if month_start not in self._budgets:
            self.add_budget(month_start)
        return self._budgets[month_start]

    def actual_spending_for(self, budget: MonthlyBudget, line: BudgetCategoryLine) -> float:
        return self._line_actuals.get((budget.id, line.id), 0.0)


@pytest.fixture
def fake_store() -> FakeBudgetStore:
    return FakeBudgetStore(family_id=1)


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database file for each test."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(f"sqlite:///{db_path}", echo=False)
    SQLModel.metadata.create_all(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Session factory matching what the repositories expect."""
    return create_session_factory(db_engine)


@pytest.fixture
def memory_session_factory(tmp_path, monkeypatch):
    """Session factory over the in-memory database a ``TestConfig`` points at."""
    monkeypatch.setenv("HEARTHBUDGET_DATA_DIR", str(tmp_path))
    engine, factory = bootstrap_database(TestConfig())

    yield factory

    engine.dispose()


@pytest.fixture
def family_factory(session_factory):
    """Factory for persisted households."""

    def _create_family(name: str = "Test Family") -> Family:
        with session_factory() as session:
            family = Family(name=name)
            session.add(family)
            session.commit()
            session.refresh(family)
            return family

    return _create_family


@pytest.fixture
def category_factory(session_factory):
    """Factory for persisted categories."""

    def _create_category(
        family: Family,
        name: str,
        *,
        classification: str = EXPENSE,
        parent: Category | None = None,
        color: str = "#FF5733",
    ) -> Category:
        with session_factory() as session:
            category = Category(
                family_id=family.id,
                name=name,
                color=color,
                classification=classification,
                parent_id=parent.id if parent else None,
            )
            session.add(category)
            session.commit()
            session.refresh(category)
            return category

    return _create_category


@pytest.fixture
def transaction_factory(session_factory):
    """Factory for persisted transactions (negative amount = outflow)."""

    def _create_transaction(
        family: Family,
        amount: float,
        occurred_on: date,
        category: Category | None = None,
        memo: str = "Test transaction",
    ) -> Transaction:
        with session_factory() as session:
            transaction = Transaction(
                family_id=family.id,
                amount=amount,
                occurred_on=occurred_on,
                category_id=category.id if category else None,
                memo=memo,
            )
            session.add(transaction)
            session.commit()
            session.refresh(transaction)
            return transaction

    return _create_transaction


# =============================================================================
# Logging isolation
# =============================================================================


@pytest.fixture(autouse=True)
def _reset_package_logger():
    """Drop handlers installed by setup_logging so streams don't leak between tests."""
    yield
    package_logger = logging.getLogger("hearthbudget")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
    package_logger.setLevel(logging.NOTSET)


# =============================================================================
# Helper Utilities
# =============================================================================


def assert_float_equal(actual: float, expected: float, tolerance: float = 0.01):
    """Assert that two floats are equal within a tolerance (default one cent)."""
    assert (
        abs(actual - expected) < tolerance
    ), f"Expected {expected}, got {actual} (diff: {abs(actual - expected)})"
