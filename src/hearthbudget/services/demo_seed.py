"""Demo household seeding for local exploration of variance reports."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Callable

from sqlmodel import Session, select

from ..infra.repositories.budget import SQLModelBudgetStore
from ..models.category import EXPENSE, INCOME, Category
from ..models.family import Family
from ..models.transaction import Transaction
from .variance import beginning_of_month

logger = logging.getLogger(__name__)

DEMO_FAMILY_NAME = "Demo Household"

# name -> (classification, parent, color, planned monthly amount)
_DEMO_CATEGORIES: dict[str, tuple[str, str | None, str, float | None]] = {
    "Housing": (EXPENSE, None, "#3357FF", 1500.0),
    "Food": (EXPENSE, None, "#FF5733", 600.0),
    "Groceries": (EXPENSE, "Food", "#FF8C33", None),
    "Dining Out": (EXPENSE, "Food", "#FFB833", None),
    "Transport": (EXPENSE, None, "#33C1FF", 250.0),
    "Entertainment": (EXPENSE, None, "#A133FF", 100.0),
    "Salary": (INCOME, None, "#33FF57", None),
}

# (day offset, amount, memo, category)
_DEMO_TRANSACTIONS: list[tuple[int, float, str, str]] = [
    (0, 4200.0, "Paycheck", "Salary"),
    (0, -1500.0, "Rent", "Housing"),
    (2, -142.37, "Weekly groceries", "Groceries"),
    (9, -118.02, "Weekly groceries", "Groceries"),
    (11, -86.50, "Anniversary dinner", "Dining Out"),
    (12, -64.10, "Fuel", "Transport"),
    (16, -131.45, "Weekly groceries", "Groceries"),
    (19, -189.99, "Concert tickets", "Entertainment"),
    (21, -48.75, "Fuel", "Transport"),
    (23, -95.60, "Weekly groceries", "Groceries"),
]


@dataclass(slots=True)
class SeedSummary:
    family_id: int
    categories: int
    transactions: int
    created: bool


def seed_demo_family(
    session_factory: Callable[[], Session], *, month: date, name: str = DEMO_FAMILY_NAME
) -> SeedSummary:
    """Create a demo family with one month of activity; reuse it if it exists."""

    month_start = beginning_of_month(month)
    with session_factory() as session:
        family = session.exec(select(Family).where(Family.name == name)).first()
        if family is not None:
            category_count = len(
                session.exec(select(Category.id).where(Category.family_id == family.id)).all()
            )
            tx_count = len(
                session.exec(select(Transaction.id).where(Transaction.family_id == family.id)).all()
            )
            return SeedSummary(family.id, category_count, tx_count, created=False)

        family = Family(name=name)
        session.add(family)
        session.commit()
        session.refresh(family)
        family_id = family.id

        categories: dict[str, Category] = {}
        for category_name, (classification, parent, color, _) in _DEMO_CATEGORIES.items():
            category = Category(
                family_id=family_id,
                name=category_name,
                color=color,
                classification=classification,
                parent_id=categories[parent].id if parent else None,
            )
            session.add(category)
            session.commit()
            session.refresh(category)
            categories[category_name] = category

        for offset, amount, memo, category_name in _DEMO_TRANSACTIONS:
            session.add(
                Transaction(
                    family_id=family_id,
                    occurred_on=month_start + timedelta(days=offset),
                    amount=amount,
                    memo=memo,
                    category_id=categories[category_name].id,
                )
            )
        session.commit()
        planned = {
            categories[category_name].id: amount
            for category_name, (_, _, _, amount) in _DEMO_CATEGORIES.items()
            if amount is not None
        }

    store = SQLModelBudgetStore(session_factory)
    budget = store.find_or_create_budget(family_id, month_start)
    if budget is not None:
        store.record_budgeted_spending(
            budget.id, family_id=family_id, amount=sum(planned.values())
        )
        for line in budget.category_lines:
            if line.category_id in planned:
                store.record_line_budgeted_spending(
                    line.id, family_id=family_id, amount=planned[line.category_id]
                )

    logger.info(f"Seeded demo family {family_id} for {month_start:%Y-%m}")
    return SeedSummary(family_id, len(_DEMO_CATEGORIES), len(_DEMO_TRANSACTIONS), created=True)
