"""Shared pytest fixtures for auditsampler tests."""

from decimal import Decimal

import pytest

from auditsampler.domain.entities import SamplingConfig, Transaction


@pytest.fixture
def make_transaction():
    """Return a factory building transactions with sensible defaults."""

    def _make(account_name, amount, id=None, account_number="", **kwargs):
        defaults = {
            "date": "01/15/2024",
            "description": f"{account_name} entry",
        }
        defaults.update(kwargs)
        return Transaction(
            account_name=account_name,
            account_number=account_number,
            amount=Decimal(str(amount)),
            id=id,
            **defaults,
        )

    return _make


@pytest.fixture
def park_config():
    """Configuration used by the city park scenario."""
    return SamplingConfig(
        tolerable_misstatement=Decimal("15000"),
        testing_scope=Decimal("11000"),
        sample_size=2,
        target_keywords=("PARK",),
    )


@pytest.fixture
def park_transactions(make_transaction):
    """City park maintenance account plus an unrelated admin account."""
    return [
        make_transaction("CITY PARK MAINT", 20000, account_number="5100"),
        make_transaction("CITY PARK MAINT", 12000, account_number="5100"),
        make_transaction("CITY PARK MAINT", 5000, account_number="5100"),
        make_transaction("ADMIN", 100000, account_number="6000"),
    ]


@pytest.fixture
def hierarchical_grid():
    """A QuickBooks-style drill-down GL export as decoded cell rows."""
    return [
        ["City of Springfield", None, None, None, None, None, None, None, None],
        ["General Ledger", None, None, None, None, None, None, None, None],
        [None, "Type", "Date", "Num", "Name", "Memo/Description", "Split", "Amount", "Balance"],
        ["Utilities", None, None, None, None, None, None, None, None],
        [None, "Check", "01/03/2024", "1001", "City Gas", "January gas", "Cash", 300, 300],
        [None, "Check", 45300, "1002", "City Gas", "Refund", "Cash", "(50)", 250],
        ["Total for Utilities", None, None, None, None, None, None, 250, None],
        ["Office Supplies", None, None, None, None, None, None, None, None],
        [None, None, "Beginning Balance", None, None, None, None, 1000, 1000],
        [None, "Bill", "02/01/2024", "", "Staples", "Paper", "AP", "$1,200.00", 2200],
        [None, "Bill", "02/02/2024", "", "Staples", "Void", "AP", 0, 2200],
        [None, "Bill", "02/03/2024", "", "Staples", "No amount", "AP", None, 2200],
        [None, "Bill", "02/04/2024", "", "Staples", "Bad amount", "AP", "n/a", 2200],
        ["Total for Office Supplies", None, None, None, None, None, None, 2200, None],
    ]


@pytest.fixture
def flat_csv(tmp_path):
    """Write a flat GL export as CSV and return its path."""
    csv_path = tmp_path / "ledger.csv"
    csv_path.write_text(
        "Date,Account,Account Name,Memo,Amount,Ref,Vendor\n"
        "2024-01-03,5100,CITY PARK MAINT,Mowing,20000,INV-1,Green Co\n"
        "2024-01-04,5100,CITY PARK MAINT,Irrigation,12000,INV-2,Green Co\n"
        "2024-01-05,5100,CITY PARK MAINT,Benches,5000,INV-3,Parkworks\n"
        "2024-01-06,6000,ADMIN,Salaries,100000,PAY-1,Payroll\n",
        encoding="utf-8",
    )
    return csv_path


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
