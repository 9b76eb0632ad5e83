"""Console interface for the finance tracker."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from datetime import date
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import List, Optional

from finance_core.currency import CURRENCY_FORMATS, DEFAULT_CURRENCY
from finance_core.exceptions import ConflictError, PersistenceError, ValidationError
from finance_core.export import export_filename, transactions_to_csv
from finance_core.ledger import Ledger
from finance_core.models import Category, Transaction
from finance_core.storage import JSONStorage


def _parse_date(value: str) -> str:
    try:
        date.fromisoformat(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(
            f"Invalid date '{value}'. Expected format YYYY-MM-DD."
        ) from exc
    return value


def _parse_amount(value: str) -> str:
    try:
        amount = Decimal(value)
        negative = amount < 0
    except InvalidOperation as exc:
        raise argparse.ArgumentTypeError("Amount must be a numeric value") from exc
    if negative:
        raise argparse.ArgumentTypeError("Amount must not be negative")
    return value


def _load_ledger(data_dir: Path) -> Ledger:
    storage = JSONStorage(data_dir)
    return Ledger(storage, default_currency=os.getenv("FINANCE_TRACKER_CURRENCY", DEFAULT_CURRENCY))


def _format_transaction(transaction: Transaction, ledger: Ledger) -> str:
    sign = "+" if transaction.type.value == "income" else "-"
    return (
        f"[{transaction.id}] {transaction.date.isoformat()} "
        f"{sign}{ledger.format_amount(transaction.amount)}\n"
        f"  Category: {ledger.category_name(transaction.category_id)} | Type: {transaction.type.value}\n"
        f"  Notes: {transaction.notes or '-'}\n"
    )


def _format_category(category: Category) -> str:
    return f"[{category.id}] {category.name}"


def handle_transaction(args: argparse.Namespace, ledger: Ledger) -> None:
    if args.command == "add":
        transaction = ledger.add_transaction(
            args.type, args.amount, args.date, args.category_id, args.notes
        )
        print("Transaction added:\n" + _format_transaction(transaction, ledger))
    elif args.command == "list":
        transactions = ledger.filter_transactions(
            type=args.type, category=args.category, start=args.start, end=args.end
        )
        if not transactions:
            print("No transactions found.")
            return
        print(f"Found {len(transactions)} transactions:")
        for transaction in transactions:
            print(_format_transaction(transaction, ledger))
    elif args.command == "delete":
        ledger.delete_transaction(args.id)
        print(f"Transaction {args.id} deleted.")


def handle_category(args: argparse.Namespace, ledger: Ledger) -> None:
    if args.command == "add":
        category = ledger.add_category(args.name, args.type)
        print(f"Category added: {_format_category(category)} ({category.type.value})")
    elif args.command == "list":
        for entry_type in ("income", "expense"):
            categories = ledger.categories_by_type(entry_type)
            print(f"{entry_type.capitalize()} categories:")
            if not categories:
                print("  (none)")
            for category in categories:
                print("  " + _format_category(category))
    elif args.command == "delete":
        ledger.delete_category(args.id)
        print(f"Category {args.id} deleted.")


def handle_summary(args: argparse.Namespace, ledger: Ledger) -> None:
    summary = ledger.compute_summary()
    print(f"Total income:   {ledger.format_amount(summary.total_income)}")
    print(f"Total expenses: {ledger.format_amount(summary.total_expenses)}")
    print(f"Balance:        {ledger.format_amount(summary.balance)}")


def handle_monthly(args: argparse.Namespace, ledger: Ledger) -> None:
    series = ledger.compute_monthly_series()
    if not series:
        print("No transactions found.")
        return
    for month in series:
        print(
            f"{month.label}: income {ledger.format_amount(month.income)}, "
            f"expenses {ledger.format_amount(month.expense)}"
        )


def handle_currency(args: argparse.Namespace, ledger: Ledger) -> None:
    if args.code:
        ledger.set_currency(args.code)
        print(f"Currency set to {ledger.currency}.")
    else:
        print(ledger.currency)


def handle_currencies(args: argparse.Namespace, ledger: Ledger) -> None:
    for code, fmt in CURRENCY_FORMATS.items():
        marker = "*" if code == ledger.currency else " "
        print(f"{marker} {code} {fmt.symbol} ({fmt.locale})")


def handle_export(args: argparse.Namespace, ledger: Ledger) -> None:
    if not ledger.transactions:
        print("No transactions to export.")
        return
    content = transactions_to_csv(ledger)
    if args.output == "-":
        sys.stdout.write(content)
        return
    output = Path(args.output or export_filename(ledger.currency))
    try:
        output.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise PersistenceError(f"Unable to write to {output}") from exc
    print(f"Exported {len(ledger.transactions)} transactions to {output}.")


def handle_clear(args: argparse.Namespace, ledger: Ledger) -> None:
    if not args.yes:
        raise ValidationError("Refusing to delete all data without --yes")
    ledger.clear_all()
    print("All data has been cleared. Default categories have been restored.")


HANDLERS = {
    "transaction": handle_transaction,
    "category": handle_category,
    "summary": handle_summary,
    "monthly": handle_monthly,
    "currency": handle_currency,
    "currencies": handle_currencies,
    "export": handle_export,
    "clear": handle_clear,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Personal Finance Tracker CLI")
    parser.add_argument(
        "--data-dir",
        default=os.getenv("FINANCE_TRACKER_DATA_DIR", "data"),
        type=Path,
        help="Directory to store JSON data (default: $FINANCE_TRACKER_DATA_DIR or ./data)",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="entity", required=True)

    transaction_parser = subparsers.add_parser("transaction", help="Manage transactions")
    transaction_sub = transaction_parser.add_subparsers(dest="command", required=True)

    transaction_add = transaction_sub.add_parser("add", help="Record a new transaction")
    transaction_add.add_argument("type", choices=["income", "expense"])
    transaction_add.add_argument("amount", type=_parse_amount)
    transaction_add.add_argument("date", type=_parse_date)
    transaction_add.add_argument("category_id", type=int)
    transaction_add.add_argument("--notes")

    transaction_list = transaction_sub.add_parser("list", help="List transactions")
    transaction_list.add_argument("--type", choices=["all", "income", "expense"])
    transaction_list.add_argument("--category", help="Category id or 'all'")
    transaction_list.add_argument("--start", type=_parse_date)
    transaction_list.add_argument("--end", type=_parse_date)

    transaction_delete = transaction_sub.add_parser("delete", help="Delete a transaction")
    transaction_delete.add_argument("id", type=int)

    category_parser = subparsers.add_parser("category", help="Manage categories")
    category_sub = category_parser.add_subparsers(dest="command", required=True)

    category_add = category_sub.add_parser("add", help="Add a new category")
    category_add.add_argument("name")
    category_add.add_argument("type", choices=["income", "expense"])

    category_sub.add_parser("list", help="List categories")

    category_delete = category_sub.add_parser("delete", help="Delete an unused category")
    category_delete.add_argument("id", type=int)

    subparsers.add_parser("summary", help="Show total income, expenses and balance")
    subparsers.add_parser("monthly", help="Show income and expenses per month")

    currency_parser = subparsers.add_parser("currency", help="Show or change the display currency")
    currency_parser.add_argument("code", nargs="?")

    subparsers.add_parser("currencies", help="List supported currencies")

    export_parser = subparsers.add_parser("export", help="Export transactions to CSV")
    export_parser.add_argument(
        "--output", "-o", help="Destination file, or '-' for stdout (default: finance-transactions-<CODE>.csv)"
    )

    clear_parser = subparsers.add_parser("clear", help="Delete all data and restore default categories")
    clear_parser.add_argument("--yes", action="store_true", help="Confirm deletion")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        ledger = _load_ledger(args.data_dir)
        HANDLERS[args.entity](args, ledger)
    except ValidationError as exc:
        print(f"Validation error: {exc}", file=sys.stderr)
        return 1
    except ConflictError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    except PersistenceError as exc:
        print(f"Storage error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
