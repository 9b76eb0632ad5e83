"""Data models for the finance tracker domain."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Dict

__all__ = [
    "Category",
    "EntryType",
    "MonthlyTotals",
    "Summary",
    "Transaction",
    "parse_datetime",
]


def parse_datetime(value: str) -> datetime:
    """Parse ISO 8601 datetime strings with optional trailing Z into UTC-aware datetime."""
    value = value.strip()
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    dt = datetime.fromisoformat(value)
    if dt.tzinfo is None:
        # Naive datetimes are read as UTC so the calendar date stays stable.
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


class EntryType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


@dataclass(frozen=True)
class Category:
    id: int
    name: str
    type: EntryType

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "type": self.type.value}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Category":
        return cls(id=int(data["id"]), name=data["name"], type=EntryType(data["type"]))


@dataclass(frozen=True)
class Transaction:
    id: int
    type: EntryType
    amount: Decimal
    date: date
    category_id: int
    notes: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """Serialise the transaction to the persisted JSON shape."""
        return {
            "id": self.id,
            "type": self.type.value,
            "amount": float(self.amount),
            "date": self.date.isoformat(),
            "categoryId": self.category_id,
            "notes": self.notes,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Transaction":
        """Hydrate a Transaction from JSON-native data."""
        raw_date = str(data["date"])
        try:
            parsed = date.fromisoformat(raw_date)
        except ValueError:
            # Older records may carry a full timestamp.
            parsed = parse_datetime(raw_date).date()
        amount = Decimal(str(data["amount"]))
        if not amount.is_finite():
            raise ValueError(f"Transaction {data['id']} has a non-finite amount")
        return cls(
            id=int(data["id"]),
            type=EntryType(data["type"]),
            amount=amount,
            date=parsed,
            category_id=int(data["categoryId"]),
            notes=data.get("notes") or "",
        )


@dataclass(frozen=True)
class Summary:
    total_income: Decimal
    total_expenses: Decimal
    balance: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_income": f"{self.total_income:.2f}",
            "total_expenses": f"{self.total_expenses:.2f}",
            "balance": f"{self.balance:.2f}",
        }


@dataclass(frozen=True)
class MonthlyTotals:
    month_key: str
    income: Decimal
    expense: Decimal

    @property
    def label(self) -> str:
        """Short chart label such as ``Jan 2024``."""
        year, month = self.month_key.split("-")
        return date(int(year), int(month), 1).strftime("%b %Y")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "month": self.month_key,
            "label": self.label,
            "income": f"{self.income:.2f}",
            "expense": f"{self.expense:.2f}",
        }
