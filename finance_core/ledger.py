"""The ledger: in-memory owner of transactions, categories and currency."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from .currency import CURRENCY_FORMATS, DEFAULT_CURRENCY, format_amount
from .events import (
    CATEGORY_ADDED,
    CATEGORY_DELETED,
    CURRENCY_CHANGED,
    LEDGER_CLEARED,
    TRANSACTION_ADDED,
    TRANSACTION_DELETED,
    EventBus,
)
from .exceptions import CategoryInUseError, DuplicateCategoryError, PersistenceError
from .models import Category, EntryType, MonthlyTotals, Summary, Transaction
from .storage import Storage
from .validators import (
    CATEGORY_NAME_MAX_LENGTH,
    optional_filter,
    parse_amount,
    parse_identifier,
    validate_currency,
    validate_date,
    validate_entry_type,
    validate_notes,
    validate_required_str,
)

logger = logging.getLogger(__name__)

TRANSACTIONS_KEY = "transactions"
CATEGORIES_KEY = "categories"
CURRENCY_KEY = "currency"

UNKNOWN_CATEGORY = "Unknown"

DEFAULT_CATEGORIES: Tuple[Tuple[str, EntryType], ...] = (
    ("Salary", EntryType.INCOME),
    ("Freelance", EntryType.INCOME),
    ("Investment", EntryType.INCOME),
    ("Gift", EntryType.INCOME),
    ("Food", EntryType.EXPENSE),
    ("Transportation", EntryType.EXPENSE),
    ("Entertainment", EntryType.EXPENSE),
    ("Utilities", EntryType.EXPENSE),
    ("Healthcare", EntryType.EXPENSE),
)


def default_categories() -> List[Category]:
    return [
        Category(id=index, name=name, type=entry_type)
        for index, (name, entry_type) in enumerate(DEFAULT_CATEGORIES, start=1)
    ]


def _next_id(records: Iterable[Any]) -> int:
    return max((record.id for record in records), default=0) + 1


class Ledger:
    """Manages transactions and categories and mediates persistence.

    Every successful mutation is written to storage before the call returns
    and then announced on :attr:`events`. Rejected mutations raise and leave
    the ledger untouched.
    """

    def __init__(
        self,
        storage: Storage,
        *,
        default_currency: str = DEFAULT_CURRENCY,
        events: Optional[EventBus] = None,
    ) -> None:
        self._storage = storage
        self._default_currency = validate_currency(default_currency)
        self.events = events or EventBus()
        self._transactions: List[Transaction] = []
        self._categories: List[Category] = []
        self._currency = self._default_currency
        self._next_transaction_id = 1
        self._next_category_id = 1
        self.load()  # Hydrate in-memory state from persistence on construction.

    # Public API -----------------------------------------------------------
    def load(self) -> None:
        """(Re)load all slots from storage, seeding defaults for absent ones.

        Id counters are not stored; they restart at ``max(id) + 1``. Ids are
        never reused within one Ledger instance, but if the highest-id record
        was deleted before a restart its id is issued again.
        """
        raw_transactions = self._storage.load(TRANSACTIONS_KEY)
        raw_categories = self._storage.load(CATEGORIES_KEY)
        raw_currency = self._storage.load(CURRENCY_KEY)

        try:
            self._transactions = [Transaction.from_dict(payload) for payload in raw_transactions or []]
            if raw_categories is None:
                self._categories = default_categories()
            else:
                self._categories = [Category.from_dict(payload) for payload in raw_categories]
        except (KeyError, TypeError, ValueError, ArithmeticError) as exc:
            raise PersistenceError(f"Malformed ledger data in storage: {exc}") from exc

        if raw_currency is None:
            self._currency = self._default_currency
        elif isinstance(raw_currency, str) and raw_currency.upper() in CURRENCY_FORMATS:
            self._currency = raw_currency.upper()
        else:
            logger.warning(
                "Ignoring unsupported stored currency %r; using %s", raw_currency, self._default_currency
            )
            self._currency = self._default_currency

        self._next_transaction_id = _next_id(self._transactions)
        self._next_category_id = _next_id(self._categories)
        logger.debug(
            "Loaded %d transactions and %d categories",
            len(self._transactions),
            len(self._categories),
        )

    def add_transaction(
        self,
        type: object,
        amount: object,
        date: object,
        category_id: object,
        notes: Optional[str] = None,
    ) -> Transaction:
        transaction = Transaction(
            id=self._next_transaction_id,
            type=validate_entry_type(type),
            amount=parse_amount(amount, "amount"),
            date=validate_date(date, "date"),
            category_id=parse_identifier(category_id, "category_id"),
            notes=validate_notes(notes),
        )
        self._next_transaction_id += 1
        self._transactions.append(transaction)
        logger.info("Added transaction %d (%s %s)", transaction.id, transaction.type.value, transaction.amount)
        self._persist_transactions()
        self.events.publish(TRANSACTION_ADDED, transaction.to_dict())
        return transaction

    def delete_transaction(self, transaction_id: object) -> None:
        target = parse_identifier(transaction_id, "id")
        remaining = [t for t in self._transactions if t.id != target]
        removed = len(remaining) != len(self._transactions)
        self._transactions = remaining
        if removed:
            logger.info("Deleted transaction %d", target)
        else:
            logger.debug("Transaction %d not found; nothing to delete", target)
        self._persist_transactions()
        self.events.publish(TRANSACTION_DELETED, {"id": target, "removed": removed})

    def add_category(self, name: object, type: object) -> Category:
        clean_name = validate_required_str(name, "name", CATEGORY_NAME_MAX_LENGTH)
        entry_type = validate_entry_type(type)
        canonical = clean_name.lower()
        for category in self._categories:
            if category.type is entry_type and category.name.lower() == canonical:
                logger.warning("Rejected duplicate category %r (%s)", clean_name, entry_type.value)
                raise DuplicateCategoryError(
                    f"Category '{clean_name}' already exists for {entry_type.value}"
                )

        category = Category(id=self._next_category_id, name=clean_name, type=entry_type)
        self._next_category_id += 1
        self._categories.append(category)
        logger.info("Added category %d (%s)", category.id, category.name)
        self._persist_categories()
        self.events.publish(CATEGORY_ADDED, category.to_dict())
        return category

    def delete_category(self, category_id: object) -> None:
        target = parse_identifier(category_id, "id")
        if any(t.category_id == target for t in self._transactions):
            logger.warning("Rejected deletion of category %d: still referenced", target)
            raise CategoryInUseError(
                f"Category {target} is used by transactions; "
                "reassign or delete those transactions first"
            )
        remaining = [c for c in self._categories if c.id != target]
        removed = len(remaining) != len(self._categories)
        self._categories = remaining
        if removed:
            logger.info("Deleted category %d", target)
        self._persist_categories()
        self.events.publish(CATEGORY_DELETED, {"id": target, "removed": removed})

    def set_currency(self, code: object) -> str:
        self._currency = validate_currency(code)
        logger.info("Currency set to %s", self._currency)
        self._save(CURRENCY_KEY, self._currency)
        self.events.publish(CURRENCY_CHANGED, {"currency": self._currency})
        return self._currency

    def filter_transactions(
        self,
        type: object = None,
        category: object = None,
        start: object = None,
        end: object = None,
    ) -> List[Transaction]:
        """Return transactions matching every supplied filter, in insertion order."""
        type_value = optional_filter(type)
        category_value = optional_filter(category)
        start_value = optional_filter(start)
        end_value = optional_filter(end)

        entry_type = validate_entry_type(type_value) if type_value is not None else None
        category_id = (
            parse_identifier(category_value, "category") if category_value is not None else None
        )
        start_date = validate_date(start_value, "start") if start_value is not None else None
        end_date = validate_date(end_value, "end") if end_value is not None else None

        def matches(transaction: Transaction) -> bool:
            if entry_type is not None and transaction.type is not entry_type:
                return False
            if category_id is not None and transaction.category_id != category_id:
                return False
            if start_date is not None and transaction.date < start_date:
                return False
            if end_date is not None and transaction.date > end_date:
                return False
            return True

        return [t for t in self._transactions if matches(t)]

    def compute_summary(self) -> Summary:
        total_income = self._total(EntryType.INCOME, self._transactions)
        total_expenses = self._total(EntryType.EXPENSE, self._transactions)
        return Summary(
            total_income=total_income,
            total_expenses=total_expenses,
            balance=total_income - total_expenses,
        )

    def compute_monthly_series(self) -> List[MonthlyTotals]:
        """Income and expense totals per calendar month, oldest month first."""
        months: Dict[str, Dict[EntryType, Decimal]] = {}
        for transaction in self._transactions:
            key = f"{transaction.date.year:04d}-{transaction.date.month:02d}"
            bucket = months.setdefault(
                key, {EntryType.INCOME: Decimal("0"), EntryType.EXPENSE: Decimal("0")}
            )
            bucket[transaction.type] += transaction.amount

        return [
            MonthlyTotals(
                month_key=key,
                income=months[key][EntryType.INCOME],
                expense=months[key][EntryType.EXPENSE],
            )
            for key in sorted(months)
        ]

    def clear_all(self) -> None:
        """Drop every transaction and restore the default categories."""
        self._transactions = []
        self._categories = default_categories()
        self._next_transaction_id = 1
        self._next_category_id = len(self._categories) + 1
        logger.info("Cleared all ledger data")
        self._persist_transactions()
        self._persist_categories()
        self._save(CURRENCY_KEY, self._currency)
        self.events.publish(LEDGER_CLEARED, {"currency": self._currency})

    def get_category(self, category_id: int) -> Optional[Category]:
        for category in self._categories:
            if category.id == category_id:
                return category
        return None

    def category_name(self, category_id: int) -> str:
        category = self.get_category(category_id)
        return category.name if category else UNKNOWN_CATEGORY

    def categories_by_type(self, type: object) -> List[Category]:
        entry_type = validate_entry_type(type)
        return [c for c in self._categories if c.type is entry_type]

    def format_amount(self, amount: Decimal) -> str:
        return format_amount(amount, self._currency)

    def subscribe(self, name: str, handler: Callable[..., Any]) -> None:
        self.events.subscribe(name, handler)

    def unsubscribe(self, name: str, handler: Callable[..., Any]) -> None:
        self.events.unsubscribe(name, handler)

    @property
    def transactions(self) -> List[Transaction]:
        return list(self._transactions)

    @property
    def categories(self) -> List[Category]:
        return list(self._categories)

    @property
    def currency(self) -> str:
        return self._currency

    @property
    def next_transaction_id(self) -> int:
        return self._next_transaction_id

    @property
    def next_category_id(self) -> int:
        return self._next_category_id

    # Internal helpers -----------------------------------------------------
    @staticmethod
    def _total(entry_type: EntryType, transactions: Iterable[Transaction]) -> Decimal:
        return sum(
            (t.amount for t in transactions if t.type is entry_type),
            start=Decimal("0.00"),
        )

    def _persist_transactions(self) -> None:
        self._save(TRANSACTIONS_KEY, [t.to_dict() for t in self._transactions])

    def _persist_categories(self) -> None:
        self._save(CATEGORIES_KEY, [c.to_dict() for c in self._categories])

    def _save(self, key: str, value: Any) -> None:
        try:
            self._storage.save(key, value)
        except PersistenceError:
            raise
        except Exception as exc:  # pragma: no cover
            raise PersistenceError(f"Unexpected error while saving {key}") from exc
