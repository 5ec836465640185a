"""Command line entry points for HearthBudget."""

from __future__ import annotations

import json
from datetime import date

import click

from .config import BaseConfig
from .infra.database import bootstrap_database
from .infra.repositories.budget import SQLModelBudgetStore
from .logging_config import setup_logging
from .services.demo_seed import seed_demo_family
from .services.variance import (
    VarianceReport,
    calculate_variance,
    parse_start_date,
    parse_variance_request,
)
from .services.variance_display import (
    actual_percent_of_budget,
    available_variance_months,
    period_label,
    variance_status,
)


def _money(value: float) -> str:
    return f"{value:,.2f}"


def _render_report(report: VarianceReport) -> None:
    click.echo(
        f"{period_label(report)} ({report.start_date.isoformat()} to {report.end_date.isoformat()}, "
        f"{len(report.budgets)} month(s))"
    )
    click.echo(
        f"Budgeted: {_money(report.total_budgeted)}  Actual: {_money(report.total_actual)}  "
        f"Variance: {_money(report.total_variance)} ({report.total_variance_percent:.1f}%)"
    )
    click.echo(
        f"Status: {variance_status(report)}  Spent: {actual_percent_of_budget(report):.1f}% of budget"
    )
    if not report.category_variances:
        click.echo("No categories budgeted for this period.")
        return
    click.echo("Categories:")
    for cv in report.category_variances:
        flag = " OVER" if cv.over_budget else ""
        click.echo(
            f"  {cv.category.name:<20} budgeted {_money(cv.budgeted):>12}  "
            f"actual {_money(cv.actual):>12}  variance {_money(cv.variance):>12} "
            f"({cv.variance_percent:.1f}%){flag}"
        )


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Household budget vs. actual variance reports."""

    config = BaseConfig()
    setup_logging(config)
    ctx.obj = config


@cli.command("init-db")
@click.pass_obj
def init_db(config: BaseConfig) -> None:
    """Create database tables."""

    bootstrap_database(config)
    click.echo(f"Database ready: {config.DATABASE_URL}")


@cli.command("seed-demo")
@click.option("--month", "month", default=None, help="Month to seed (YYYY-MM); defaults to current")
@click.pass_obj
def seed_demo(config: BaseConfig, month: str | None) -> None:
    """Seed a demo household with one month of activity."""

    seed_month = parse_start_date(month, default=date.today())
    _, session_factory = bootstrap_database(config)
    summary = seed_demo_family(session_factory, month=seed_month)
    verb = "Created" if summary.created else "Found existing"
    click.echo(
        f"{verb} demo family {summary.family_id}: "
        f"{summary.categories} categories, {summary.transactions} transactions"
    )


@cli.command("variance")
@click.argument("family_id", type=int)
@click.option("--start", "start", default=None, help="Start month (YYYY-MM or YYYY-MM-DD)")
@click.option(
    "--period",
    "period",
    default=None,
    help="Period granularity: month, quarter or year",
)
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the report as JSON")
@click.pass_obj
def variance(
    config: BaseConfig, family_id: int, start: str | None, period: str | None, as_json: bool
) -> None:
    """Show budget variance for FAMILY_ID."""

    request = parse_variance_request(
        family_id=family_id,
        period_param=period or config.DEFAULT_PERIOD,
        start_param=start,
        default_start=date.today(),
    )
    _, session_factory = bootstrap_database(config)
    store = SQLModelBudgetStore(session_factory)
    report = calculate_variance(
        store=store,
        family_id=request.family_id,
        start_date=request.start_date,
        period_type=request.period_type,
    )
    if as_json:
        click.echo(json.dumps(report.as_dict(), indent=2))
    else:
        _render_report(report)


@cli.command("months")
@click.option("--family", "family_id", type=int, default=None, help="Extend back to this family's oldest entry")
@click.pass_obj
def months(config: BaseConfig, family_id: int | None) -> None:
    """List months a variance report can start from, newest first."""

    oldest = None
    if family_id is not None:
        _, session_factory = bootstrap_database(config)
        oldest = SQLModelBudgetStore(session_factory).oldest_entry_date(family_id)
    for month_start in available_variance_months(
        today=date.today(),
        oldest_entry_date=oldest,
        lookback_months=config.VARIANCE_LOOKBACK_MONTHS,
    ):
        click.echo(month_start.strftime("%Y-%m"))


def main() -> None:  # pragma: no cover - console script
    cli()


__all__ = ["cli", "main"]
