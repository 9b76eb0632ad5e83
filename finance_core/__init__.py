"""Core ledger package for the personal finance tracker."""

from .currency import CURRENCY_FORMATS, DEFAULT_CURRENCY, format_amount
from .events import Event, EventBus
from .exceptions import (
    CategoryInUseError,
    ConflictError,
    DuplicateCategoryError,
    PersistenceError,
    ValidationError,
)
from .export import transactions_to_csv
from .ledger import Ledger
from .models import Category, EntryType, MonthlyTotals, Summary, Transaction
from .storage import JSONStorage, MemoryStorage, Storage

__all__ = [
    "CURRENCY_FORMATS",
    "DEFAULT_CURRENCY",
    "Category",
    "CategoryInUseError",
    "ConflictError",
    "DuplicateCategoryError",
    "EntryType",
    "Event",
    "EventBus",
    "JSONStorage",
    "Ledger",
    "MemoryStorage",
    "MonthlyTotals",
    "PersistenceError",
    "Storage",
    "Summary",
    "Transaction",
    "ValidationError",
    "format_amount",
    "transactions_to_csv",
]
