"""SQLModel implementation of the budget store."""

from __future__ import annotations

import logging
from calendar import monthrange
from datetime import date
from typing import Callable, Optional

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from ...domain.budget import BudgetCategoryLine, CategoryRef, MonthlyBudget
from ...models.budget import Budget, BudgetCategory
from ...models.category import EXPENSE, Category
from ...models.family import Family
from ...models.transaction import Transaction

logger = logging.getLogger(__name__)


class SQLModelBudgetStore:
    """SQLModel-based budget store with find-or-create bootstrap."""

    def __init__(self, session_factory: Callable[[], Session]):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def find_or_create_budget(self, family_id: int, month_start: date) -> Optional[MonthlyBudget]:
        """Return the month's budget, creating it and its category lines if missing."""
        if month_start.day != 1:
            logger.warning(f"Refusing to bootstrap budget for non month-aligned date {month_start}")
            return None

        with self.session_factory() as session:
            if session.get(Family, family_id) is None:
                logger.warning(f"Cannot bootstrap budget for unknown family {family_id}")
                return None

            budget = self._select_budget(session, family_id, month_start)
            if budget is None:
                budget = self._create_budget(session, family_id, month_start)
            self._sync_category_lines(session, budget)
            return self._snapshot(session, budget)

    def actual_spending_for(self, budget: MonthlyBudget, line: BudgetCategoryLine) -> float:
        """Outflow for the line's category and its subcategories in the budget month."""
        with self.session_factory() as session:
            category_ids = select(Category.id).where(
                or_(Category.id == line.category_id, Category.parent_id == line.category_id)
            )
            statement = (
                select(func.coalesce(func.sum(-Transaction.amount), 0.0))
                .where(Transaction.family_id == budget.family_id)
                .where(Transaction.occurred_on >= budget.start_date)
                .where(Transaction.occurred_on <= budget.end_date)
                .where(Transaction.amount < 0)
                .where(Transaction.category_id.in_(category_ids))  # type: ignore[union-attr]
            )
            return float(session.exec(statement).one())

    def oldest_entry_date(self, family_id: int) -> Optional[date]:
        """Date of the family's earliest transaction, if any."""
        with self.session_factory() as session:
            statement = select(func.min(Transaction.occurred_on)).where(
                Transaction.family_id == family_id
            )
            return session.exec(statement).one()

    def record_budgeted_spending(
        self, budget_id: int, *, family_id: int, amount: Optional[float]
    ) -> None:
        """Set the planned total for a budget month."""
        with self.session_factory() as session:
            budget = session.exec(
                select(Budget).where(Budget.id == budget_id, Budget.family_id == family_id)
            ).first()
            if budget is None:
                raise LookupError(f"Budget {budget_id} not found for family {family_id}")
            budget.budgeted_spending = amount
            session.add(budget)
            session.commit()

    def record_line_budgeted_spending(
        self, line_id: int, *, family_id: int, amount: Optional[float]
    ) -> None:
        """Set the planned amount for one category line."""
        with self.session_factory() as session:
            line = session.exec(
                select(BudgetCategory)
                .join(Budget, BudgetCategory.budget_id == Budget.id)  # type: ignore[arg-type]
                .where(BudgetCategory.id == line_id, Budget.family_id == family_id)
            ).first()
            if line is None:
                raise LookupError(f"Budget line {line_id} not found for family {family_id}")
            line.budgeted_spending = amount
            session.add(line)
            session.commit()

    def _select_budget(self, session: Session, family_id: int, month_start: date) -> Optional[Budget]:
        statement = (
            select(Budget)
            .where(Budget.family_id == family_id)
            .where(Budget.start_date == month_start)
        )
        return session.exec(statement).first()

    def _create_budget(self, session: Session, family_id: int, month_start: date) -> Budget:
        last_day = monthrange(month_start.year, month_start.month)[1]
        budget = Budget(
            family_id=family_id,
            start_date=month_start,
            end_date=date(month_start.year, month_start.month, last_day),
        )
        session.add(budget)
        try:
            session.commit()
        except IntegrityError:
            # Another request bootstrapped the same month first; use its row.
            session.rollback()
            existing = self._select_budget(session, family_id, month_start)
            if existing is None:
                raise
            logger.info(f"Budget for family {family_id} {month_start:%Y-%m} created concurrently")
            return existing
        session.refresh(budget)
        logger.info(
            f"Bootstrapped budget for family {family_id} {month_start:%Y-%m}",
            extra={"family_id": family_id, "budget_id": budget.id},
        )
        return budget

    def _missing_categories(self, session: Session, budget: Budget) -> list[Category]:
        """Expense categories of the family that have no line in the budget yet."""
        existing = set(
            session.exec(
                select(BudgetCategory.category_id).where(BudgetCategory.budget_id == budget.id)
            ).all()
        )
        categories = session.exec(
            select(Category)
            .where(Category.family_id == budget.family_id)
            .where(Category.classification == EXPENSE)
        ).all()
        return [c for c in categories if c.id not in existing]

    def _add_lines(self, session: Session, budget: Budget, categories: list[Category]) -> None:
        for category in categories:
            session.add(BudgetCategory(budget_id=budget.id, category_id=category.id))
        session.commit()

    def _sync_category_lines(self, session: Session, budget: Budget) -> None:
        """Add a line for every expense category the budget does not cover yet."""
        missing = self._missing_categories(session, budget)
        if not missing:
            return
        try:
            self._add_lines(session, budget, missing)
        except IntegrityError:
            # A concurrent bootstrap added some of the lines; the rollback also
            # dropped ours, so add whatever is still missing.
            session.rollback()
            logger.info(
                f"Category lines for budget {budget.id} added concurrently; re-syncing",
                extra={"budget_id": budget.id},
            )
            missing = self._missing_categories(session, budget)
            if missing:
                self._add_lines(session, budget, missing)

    def _snapshot(self, session: Session, budget: Budget) -> MonthlyBudget:
        rows = session.exec(
            select(BudgetCategory, Category)
            .join(Category, BudgetCategory.category_id == Category.id)  # type: ignore[arg-type]
            .where(BudgetCategory.budget_id == budget.id)
            .order_by(BudgetCategory.id)  # type: ignore[arg-type]
        ).all()
        lines = tuple(
            BudgetCategoryLine(
                id=line.id,
                category=CategoryRef(
                    id=category.id,
                    name=category.name,
                    color=category.color,
                    classification=category.classification,
                    parent_id=category.parent_id,
                ),
                budgeted_spending=line.budgeted_spending,
            )
            for line, category in rows
        )
        return MonthlyBudget(
            id=budget.id,
            family_id=budget.family_id,
            start_date=budget.start_date,
            end_date=budget.end_date,
            budgeted_spending=budget.budgeted_spending,
            actual_spending=self._budget_actual_spending(session, budget),
            category_lines=lines,
        )

    def _budget_actual_spending(self, session: Session, budget: Budget) -> float:
        statement = (
            select(func.coalesce(func.sum(-Transaction.amount), 0.0))
            .select_from(Transaction)
            .outerjoin(Category, Transaction.category_id == Category.id)  # type: ignore[arg-type]
            .where(Transaction.family_id == budget.family_id)
            .where(Transaction.occurred_on >= budget.start_date)
            .where(Transaction.occurred_on <= budget.end_date)
            .where(Transaction.amount < 0)
            .where(
                or_(
                    Transaction.category_id.is_(None),  # type: ignore[union-attr]
                    Category.classification == EXPENSE,
                )
            )
        )
        return float(session.exec(statement).one())
