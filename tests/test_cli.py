"""Tests for the console interface."""

import pytest

from finance_core.ledger import Ledger
from finance_core.storage import JSONStorage
from finance_tracker.cli import build_parser, main


@pytest.fixture
def data_dir(tmp_path):
    return tmp_path / "data"


def run(data_dir, *args):
    return main(["--data-dir", str(data_dir), *args])


def test_add_and_list_transactions(data_dir, capsys):
    assert run(data_dir, "transaction", "add", "expense", "42.50", "2024-03-01", "5", "--notes", "lunch") == 0
    assert run(data_dir, "transaction", "list", "--type", "expense") == 0

    out = capsys.readouterr().out
    assert "Transaction added" in out
    assert "Found 1 transactions" in out
    assert "-$42.50" in out
    assert "Category: Food" in out

    ledger = Ledger(JSONStorage(data_dir))
    assert [t.notes for t in ledger.transactions] == ["lunch"]


def test_list_with_no_matches(data_dir, capsys):
    assert run(data_dir, "transaction", "list", "--start", "2030-01-01") == 0
    assert "No transactions found." in capsys.readouterr().out


def test_duplicate_category_fails(data_dir, capsys):
    assert run(data_dir, "category", "add", "Food", "expense") == 1
    assert "already exists" in capsys.readouterr().err


def test_category_in_use_fails(data_dir, capsys):
    run(data_dir, "transaction", "add", "expense", "10", "2024-03-01", "5")
    assert run(data_dir, "category", "delete", "5") == 1
    assert "used by transactions" in capsys.readouterr().err
    assert Ledger(JSONStorage(data_dir)).get_category(5) is not None


def test_category_list_groups_by_type(data_dir, capsys):
    run(data_dir, "category", "add", "Rent", "expense")
    assert run(data_dir, "category", "list") == 0
    out = capsys.readouterr().out
    assert out.index("Income categories:") < out.index("[1] Salary") < out.index("Expense categories:")
    assert "[10] Rent" in out


def test_summary_and_monthly(data_dir, capsys):
    run(data_dir, "transaction", "add", "income", "100", "2024-01-10", "1")
    run(data_dir, "transaction", "add", "income", "200", "2024-02-10", "1")
    run(data_dir, "transaction", "add", "expense", "50", "2024-02-11", "5")
    capsys.readouterr()

    assert run(data_dir, "summary") == 0
    assert run(data_dir, "monthly") == 0
    out = capsys.readouterr().out
    assert "Total income:   $300.00" in out
    assert "Balance:        $250.00" in out
    assert "Jan 2024: income $100.00, expenses $0.00" in out
    assert "Feb 2024: income $200.00, expenses $50.00" in out


def test_currency_commands(data_dir, capsys):
    assert run(data_dir, "currency", "eur") == 0
    assert run(data_dir, "currency") == 0
    assert run(data_dir, "currency", "BTC") == 1
    captured = capsys.readouterr()
    assert captured.out.splitlines()[-1] == "EUR"
    assert "Validation error" in captured.err


def test_export_to_file(data_dir, tmp_path, capsys):
    output = tmp_path / "out.csv"
    assert run(data_dir, "export", "--output", str(output)) == 0
    assert "No transactions to export." in capsys.readouterr().out

    run(data_dir, "transaction", "add", "income", "5", "2024-01-01", "1")
    assert run(data_dir, "export", "--output", str(output)) == 0
    assert output.read_text(encoding="utf-8").startswith("Type,Amount,Currency,Date,Category,Notes\n")


def test_clear_requires_confirmation(data_dir, capsys):
    run(data_dir, "transaction", "add", "income", "5", "2024-01-01", "1")
    assert run(data_dir, "clear") == 1
    assert len(Ledger(JSONStorage(data_dir)).transactions) == 1

    assert run(data_dir, "clear", "--yes") == 0
    assert Ledger(JSONStorage(data_dir)).transactions == []


def test_parser_rejects_bad_amount():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["transaction", "add", "expense", "abc", "2024-01-01", "5"])


def test_non_ascii_digit_category_filter_fails_cleanly(data_dir, capsys):
    assert run(data_dir, "transaction", "list", "--category", "²") == 1
    assert "Validation error" in capsys.readouterr().err


def test_oversized_amount_fails_cleanly(data_dir, capsys):
    assert run(data_dir, "transaction", "add", "income", "1e400", "2024-01-01", "1") == 1
    assert "Validation error" in capsys.readouterr().err
    assert Ledger(JSONStorage(data_dir)).transactions == []
