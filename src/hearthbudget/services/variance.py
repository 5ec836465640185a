"""Budget vs. actual variance over month, quarter, and year periods.

The report for a period is built in one pass:

1. resolve the inclusive period end from a month-aligned start date,
2. enumerate the first-of-month dates inside the period,
3. fetch (bootstrapping if needed) each month's budget from the store,
4. total budgeted vs. actual spending and rank per-category variances.

Nothing is cached between calls; every call returns a fresh immutable report.
"""

from __future__ import annotations

import logging
from calendar import monthrange
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Iterable, Optional, Union

from ..domain.budget import CategoryRef, MonthlyBudget, PeriodType
from ..domain.repositories.budget import BudgetStore

logger = logging.getLogger(__name__)

START_DATE_FORMATS = ("%Y-%m-%d", "%Y-%m")


def beginning_of_month(value: date) -> date:
    return value.replace(day=1)


def _end_of_month(year: int, month: int) -> date:
    return date(year, month, monthrange(year, month)[1])


def _next_month(value: date) -> date:
    if value.month == 12:
        return date(value.year + 1, 1, 1)
    return date(value.year, value.month + 1, 1)


def resolve_period_end(start_date: date, period_type: Union[str, PeriodType, None]) -> date:
    """Return the last day (inclusive) of the period starting at ``start_date``."""

    period = PeriodType.coerce(period_type)
    if period is PeriodType.QUARTER:
        quarter_end_month = ((start_date.month - 1) // 3) * 3 + 3
        return _end_of_month(start_date.year, quarter_end_month)
    if period is PeriodType.YEAR:
        return date(start_date.year, 12, 31)
    return _end_of_month(start_date.year, start_date.month)


def month_starts(start_date: date, end_date: date) -> tuple[date, ...]:
    """First-of-month dates from ``start_date`` through ``end_date``, inclusive."""

    if start_date > end_date:
        return ()
    months: list[date] = []
    current = beginning_of_month(start_date)
    while current <= end_date:
        months.append(current)
        current = _next_month(current)
    return tuple(months)


def gather_budgets(
    *, store: BudgetStore, family_id: int, months: Iterable[date]
) -> list[MonthlyBudget]:
    """Fetch each month's budget, skipping months the store cannot produce."""

    budgets: list[MonthlyBudget] = []
    for month in months:
        budget = store.find_or_create_budget(family_id, month)
        if budget is None:
            logger.warning(
                f"No budget available for family {family_id} in {month:%Y-%m}; skipping month",
                extra={"family_id": family_id, "month": month.isoformat()},
            )
            continue
        budgets.append(budget)
    return budgets


def _variance_percent(variance: float, budgeted: float) -> float:
    if budgeted == 0:
        return 0.0
    return (variance / float(budgeted)) * 100


@dataclass(frozen=True, slots=True)
class BudgetTotals:
    """Period-wide budgeted vs. actual totals."""

    total_budgeted: float
    total_actual: float
    total_variance: float
    total_variance_percent: float

    @classmethod
    def from_budgets(cls, budgets: Iterable[MonthlyBudget]) -> "BudgetTotals":
        total_budgeted = 0.0
        total_actual = 0.0
        for budget in budgets:
            total_budgeted += budget.budgeted_spending or 0
            total_actual += budget.actual_spending or 0
        total_variance = total_budgeted - total_actual
        return cls(
            total_budgeted=total_budgeted,
            total_actual=total_actual,
            total_variance=total_variance,
            total_variance_percent=_variance_percent(total_variance, total_budgeted),
        )


@dataclass(frozen=True, slots=True)
class CategoryVariance:
    """Budgeted vs. actual spending for one top-level category over a period."""

    category: CategoryRef
    budgeted: float
    actual: float
    variance: float
    variance_percent: float
    over_budget: bool

    @classmethod
    def from_amounts(cls, category: CategoryRef, budgeted: float, actual: float) -> "CategoryVariance":
        variance = budgeted - actual
        return cls(
            category=category,
            budgeted=budgeted,
            actual=actual,
            variance=variance,
            variance_percent=_variance_percent(variance, budgeted),
            over_budget=variance < 0,
        )

    def as_dict(self) -> dict[str, Any]:
        return {
            "category": {
                "id": self.category.id,
                "name": self.category.name,
                "color": self.category.color,
                "classification": self.category.classification,
            },
            "budgeted": self.budgeted,
            "actual": self.actual,
            "variance": self.variance,
            "variance_percent": self.variance_percent,
            "over_budget": self.over_budget,
        }


def aggregate_category_variances(
    *, store: BudgetStore, budgets: Iterable[MonthlyBudget]
) -> list[CategoryVariance]:
    """Merge category lines across budgets into variances, largest deviation first.

    Subcategory lines are skipped: their spending is already part of the
    parent category's actual spending. Equal absolute variances are ordered by
    category id.
    """

    accumulated: dict[int, dict[str, Any]] = {}
    for budget in budgets:
        for line in budget.category_lines:
            if line.is_subcategory:
                continue
            entry = accumulated.setdefault(
                line.category_id, {"category": line.category, "budgeted": 0.0, "actual": 0.0}
            )
            entry["budgeted"] += line.budgeted_spending or 0
            entry["actual"] += store.actual_spending_for(budget, line) or 0

    variances = [
        CategoryVariance.from_amounts(data["category"], data["budgeted"], data["actual"])
        for data in accumulated.values()
    ]
    return sorted(variances, key=lambda cv: (-abs(cv.variance), cv.category.id))


@dataclass(frozen=True, slots=True)
class VarianceReport:
    """Budget variance for one family over one period."""

    period_type: PeriodType
    start_date: date
    end_date: date
    budgets: tuple[MonthlyBudget, ...]
    total_budgeted: float
    total_actual: float
    total_variance: float
    total_variance_percent: float
    category_variances: tuple[CategoryVariance, ...]

    def as_dict(self) -> dict[str, Any]:
        """JSON-friendly representation (dates as ISO strings)."""

        return {
            "period_type": self.period_type.value,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "budgets": [
                {"id": b.id, "start_date": b.start_date.isoformat()} for b in self.budgets
            ],
            "total_budgeted": self.total_budgeted,
            "total_actual": self.total_actual,
            "total_variance": self.total_variance,
            "total_variance_percent": self.total_variance_percent,
            "category_variances": [cv.as_dict() for cv in self.category_variances],
        }


def calculate_variance(
    *,
    store: BudgetStore,
    family_id: int,
    start_date: date,
    period_type: Union[str, PeriodType, None] = PeriodType.MONTH,
) -> VarianceReport:
    """Build the variance report for a family's period starting at ``start_date``.

    ``start_date`` is moved to the first of its month and unknown period types
    are treated as ``month``. Fetching budgets may bootstrap missing months in
    the store.
    """

    period = PeriodType.coerce(period_type)
    start = beginning_of_month(start_date)
    end = resolve_period_end(start, period)

    budgets = gather_budgets(store=store, family_id=family_id, months=month_starts(start, end))
    totals = BudgetTotals.from_budgets(budgets)
    category_variances = aggregate_category_variances(store=store, budgets=budgets)

    logger.info(
        f"Variance computed for family {family_id} ({period.value} {start:%Y-%m}): "
        f"{len(budgets)} months, {len(category_variances)} categories",
        extra={"family_id": family_id, "period_type": period.value},
    )

    return VarianceReport(
        period_type=period,
        start_date=start,
        end_date=end,
        budgets=tuple(budgets),
        total_budgeted=totals.total_budgeted,
        total_actual=totals.total_actual,
        total_variance=totals.total_variance,
        total_variance_percent=totals.total_variance_percent,
        category_variances=tuple(category_variances),
    )


@dataclass(frozen=True, slots=True)
class VarianceRequest:
    """Validated inputs for one variance report."""

    family_id: int
    start_date: date
    period_type: PeriodType


def parse_start_date(raw: Union[str, date, None], *, default: date) -> date:
    """Parse ``YYYY-MM-DD`` or ``YYYY-MM``; anything unparseable yields ``default``."""

    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    if not raw or not str(raw).strip():
        return default

    text = str(raw).strip()
    for fmt in START_DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    logger.debug(f"Unparseable variance start date {text!r}; using {default.isoformat()}")
    return default


def parse_variance_request(
    *,
    family_id: int,
    period_param: Optional[str],
    start_param: Union[str, date, None],
    default_start: date,
) -> VarianceRequest:
    """Turn raw caller parameters into a request, never raising on bad input."""

    start = parse_start_date(start_param, default=default_start)
    return VarianceRequest(
        family_id=family_id,
        start_date=beginning_of_month(start),
        period_type=PeriodType.coerce(period_param),
    )
