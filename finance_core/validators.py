"""Validation helpers shared across the ledger and its interfaces."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Optional

from .currency import CURRENCY_FORMATS
from .exceptions import ValidationError
from .models import EntryType, parse_datetime

CATEGORY_NAME_MAX_LENGTH = 50
NOTES_MAX_LENGTH = 200
MAX_AMOUNT = Decimal("999999999999.99")


def parse_amount(raw: object, field: str) -> Decimal:
    """Convert raw input to a non-negative Decimal."""
    if raw is None or isinstance(raw, bool):
        raise ValidationError(f"{field} is required")
    try:
        amount = Decimal(str(raw).strip())
    except (InvalidOperation, TypeError) as exc:  # type: ignore[arg-type]
        raise ValidationError(f"{field} must be a numeric value") from exc

    if not amount.is_finite():
        raise ValidationError(f"{field} must be a finite number")
    if amount < 0:
        raise ValidationError(f"{field} must not be negative")
    if amount > MAX_AMOUNT:
        raise ValidationError(f"{field} must be at most {MAX_AMOUNT}")
    return amount


def parse_identifier(raw: object, field: str) -> int:
    if isinstance(raw, bool):
        raise ValidationError(f"{field} must be an integer")
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str):
        text = raw.strip()
        # isdigit() also accepts superscripts and other digits int() rejects.
        if text.isascii() and text.isdecimal():
            return int(text)
    raise ValidationError(f"{field} must be an integer")


def validate_currency(code: object) -> str:
    if not isinstance(code, str):
        raise ValidationError("currency must be a string")
    canonical = code.strip().upper()
    if canonical not in CURRENCY_FORMATS:
        raise ValidationError(
            f"currency must be one of: {', '.join(sorted(CURRENCY_FORMATS))}"
        )
    return canonical


def validate_required_str(value: object, field: str, max_length: int) -> str:
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string")
    trimmed = value.strip()
    if not trimmed:
        raise ValidationError(f"{field} cannot be empty")
    if len(trimmed) > max_length:
        raise ValidationError(f"{field} must be at most {max_length} characters")
    return trimmed


def validate_notes(value: object) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValidationError("notes must be a string")
    trimmed = value.strip()
    if len(trimmed) > NOTES_MAX_LENGTH:
        raise ValidationError(f"notes must be at most {NOTES_MAX_LENGTH} characters")
    return trimmed


def validate_date(value: object, field: str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field} must be a date or ISO 8601 string")
    text = value.strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return parse_datetime(text).date()
    except ValueError as exc:
        raise ValidationError(f"{field} must be a valid ISO 8601 date") from exc


def validate_entry_type(value: object, field: str = "type") -> EntryType:
    if isinstance(value, EntryType):
        return value
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string")
    canonical = value.strip().lower()
    try:
        return EntryType(canonical)
    except ValueError as exc:
        allowed = ", ".join(member.value for member in EntryType)
        raise ValidationError(f"{field} must be one of: {allowed}") from exc


def optional_filter(value: object) -> Optional[object]:
    """Map the UI's "no constraint" spellings (None, "", "all") to None."""
    if value is None:
        return None
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped or stripped.lower() == "all":
            return None
        return stripped
    return value
