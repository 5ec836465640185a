"""Display helpers derived from a variance report."""

from __future__ import annotations

from datetime import date
from typing import Optional

from .variance import PeriodType, VarianceReport, beginning_of_month, month_starts

UNDER_BUDGET = "under_budget"
OVER_BUDGET = "over_budget"


def period_label(report: VarianceReport) -> str:
    """Human label such as ``January 2024``, ``Q1 2024`` or ``2024``."""

    start = report.start_date
    if report.period_type is PeriodType.MONTH:
        return start.strftime("%B %Y")
    if report.period_type is PeriodType.QUARTER:
        return f"Q{(start.month - 1) // 3 + 1} {start.year}"
    return str(start.year)


def variance_status(report: VarianceReport) -> str:
    return UNDER_BUDGET if report.total_variance >= 0 else OVER_BUDGET


def actual_percent_of_budget(report: VarianceReport) -> float:
    """Share of the budget already spent, clamped to 0-100 for progress bars."""

    if report.total_budgeted == 0:
        return 0.0
    actual_percent = (report.total_actual / float(report.total_budgeted)) * 100
    return min(max(actual_percent, 0.0), 100.0)


def _months_back(value: date, months: int) -> date:
    index = value.year * 12 + (value.month - 1) - months
    return date(index // 12, index % 12 + 1, 1)


def available_variance_months(
    *,
    today: date,
    oldest_entry_date: Optional[date] = None,
    lookback_months: int = 24,
) -> list[date]:
    """Months a user can start a variance report from, newest first.

    Goes back ``lookback_months`` from the current month, or further when the
    family has older entries.
    """

    current_month = beginning_of_month(today)
    oldest = _months_back(current_month, lookback_months)
    if oldest_entry_date is not None:
        oldest = min(oldest, beginning_of_month(oldest_entry_date))
    return list(reversed(month_starts(oldest, current_month)))
