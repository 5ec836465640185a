"""Command line interface."""

from __future__ import annotations

import json
from datetime import date

import pytest
from click.testing import CliRunner

from hearthbudget.cli import cli


@pytest.fixture
def runner(tmp_path, monkeypatch):
    monkeypatch.setenv("HEARTHBUDGET_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("HEARTHBUDGET_DATABASE_URL", f"sqlite:///{tmp_path / 'cli.db'}")
    monkeypatch.setenv("HEARTHBUDGET_DEV_MODE", "false")
    monkeypatch.delenv("HEARTHBUDGET_DEFAULT_PERIOD", raising=False)
    monkeypatch.delenv("HEARTHBUDGET_VARIANCE_LOOKBACK_MONTHS", raising=False)
    return CliRunner()


@pytest.fixture
def seeded(runner):
    result = runner.invoke(cli, ["seed-demo", "--month", "2024-01"])
    assert result.exit_code == 0, result.output
    return runner


def test_init_db(runner, tmp_path):
    result = runner.invoke(cli, ["init-db"])

    assert result.exit_code == 0, result.output
    assert "Database ready" in result.output
    assert (tmp_path / "cli.db").exists()


def test_seed_demo(runner):
    first = runner.invoke(cli, ["seed-demo", "--month", "2024-01"])
    second = runner.invoke(cli, ["seed-demo", "--month", "2024-01"])

    assert "Created demo family 1: 7 categories, 10 transactions" in first.output
    assert "Found existing demo family 1" in second.output


def test_variance_json(seeded):
    result = seeded.invoke(cli, ["variance", "1", "--start", "2024-01", "--json"])

    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert payload["period_type"] == "month"
    assert payload["start_date"] == "2024-01-01"
    assert payload["end_date"] == "2024-01-31"
    assert payload["total_budgeted"] == pytest.approx(2450.0)
    assert payload["total_actual"] == pytest.approx(2376.78)
    assert payload["total_variance"] == pytest.approx(73.22)
    assert [cv["category"]["name"] for cv in payload["category_variances"]] == [
        "Transport",
        "Entertainment",
        "Food",
        "Housing",
    ]


def test_variance_text(seeded):
    result = seeded.invoke(cli, ["variance", "1", "--start", "2024-01-10"])

    assert result.exit_code == 0, result.output
    assert "January 2024 (2024-01-01 to 2024-01-31, 1 month(s))" in result.output
    assert "Budgeted: 2,450.00" in result.output
    assert "Status: under_budget" in result.output
    assert "Entertainment" in result.output
    assert "OVER" in result.output


def test_variance_quarter(seeded):
    result = seeded.invoke(
        cli, ["variance", "1", "--start", "2024-01", "--period", "quarter", "--json"]
    )

    payload = json.loads(result.stdout)
    assert payload["period_type"] == "quarter"
    assert payload["end_date"] == "2024-03-31"
    assert len(payload["budgets"]) == 3
    assert payload["total_budgeted"] == pytest.approx(2450.0)


def test_variance_bad_period_defaults_to_month(seeded):
    result = seeded.invoke(
        cli, ["variance", "1", "--start", "2024-01", "--period", "weekly", "--json"]
    )

    assert json.loads(result.stdout)["period_type"] == "month"


def test_variance_unknown_family_is_empty(runner):
    runner.invoke(cli, ["init-db"])

    result = runner.invoke(cli, ["variance", "42", "--start", "2024-01", "--json"])

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["budgets"] == []
    assert payload["total_variance_percent"] == 0


def test_months_lists_lookback_window(runner, monkeypatch):
    monkeypatch.setenv("HEARTHBUDGET_VARIANCE_LOOKBACK_MONTHS", "2")

    result = runner.invoke(cli, ["months"])

    assert result.exit_code == 0, result.output
    lines = result.output.split()
    assert len(lines) == 3
    assert lines[0] == date.today().strftime("%Y-%m")


def test_months_extends_to_oldest_entry(seeded, monkeypatch):
    monkeypatch.setenv("HEARTHBUDGET_VARIANCE_LOOKBACK_MONTHS", "1")

    result = seeded.invoke(cli, ["months", "--family", "1"])

    assert result.exit_code == 0, result.output
    assert result.output.split()[-1] == "2024-01"


def test_variance_uses_configured_default_period(seeded, monkeypatch):
    monkeypatch.setenv("HEARTHBUDGET_DEFAULT_PERIOD", "Quarter")

    result = seeded.invoke(cli, ["variance", "1", "--start", "2024-01", "--json"])

    payload = json.loads(result.stdout)
    assert payload["period_type"] == "quarter"
    assert payload["end_date"] == "2024-03-31"
