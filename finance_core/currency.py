"""Supported currencies and display formatting.

Amounts in the ledger are currency-agnostic. The selected currency only
controls how amounts are rendered: symbol, digit grouping and decimal mark
follow the locale paired with each code below.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Union

__all__ = ["CURRENCY_FORMATS", "DEFAULT_CURRENCY", "CurrencyFormat", "format_amount"]

DEFAULT_CURRENCY = "USD"


@dataclass(frozen=True)
class CurrencyFormat:
    code: str
    symbol: str
    locale: str

    def to_dict(self) -> Dict[str, str]:
        return {"code": self.code, "symbol": self.symbol, "locale": self.locale}


@dataclass(frozen=True)
class _LocaleRule:
    group: str
    decimal: str
    pattern: str
    indian_grouping: bool = False


CURRENCY_FORMATS: Dict[str, CurrencyFormat] = {
    fmt.code: fmt
    for fmt in (
        CurrencyFormat("USD", "$", "en-US"),
        CurrencyFormat("EUR", "€", "de-DE"),
        CurrencyFormat("GBP", "£", "en-GB"),
        CurrencyFormat("JPY", "¥", "ja-JP"),
        CurrencyFormat("CAD", "C$", "en-CA"),
        CurrencyFormat("AUD", "A$", "en-AU"),
        CurrencyFormat("INR", "₹", "en-IN"),
        CurrencyFormat("CNY", "¥", "zh-CN"),
        CurrencyFormat("BRL", "R$", "pt-BR"),
        CurrencyFormat("ZAR", "R", "en-ZA"),
        CurrencyFormat("NGN", "₦", "en-NG"),
    )
}

_DEFAULT_RULE = _LocaleRule(group=",", decimal=".", pattern="{symbol}{number}")

_LOCALE_RULES: Dict[str, _LocaleRule] = {
    "de-DE": _LocaleRule(group=".", decimal=",", pattern="{number} {symbol}"),
    "pt-BR": _LocaleRule(group=".", decimal=",", pattern="{symbol} {number}"),
    "en-ZA": _LocaleRule(group=" ", decimal=",", pattern="{symbol} {number}"),
    "en-IN": _LocaleRule(group=",", decimal=".", pattern="{symbol}{number}", indian_grouping=True),
}


def _quantize_two_decimals(amount: Decimal) -> Decimal:
    return amount.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def _group_digits(digits: str, separator: str, indian: bool) -> str:
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    # Indian grouping uses pairs above the first thousand: 1,23,456.
    size = 2 if indian else 3
    groups = []
    while len(head) > size:
        groups.insert(0, head[-size:])
        head = head[:-size]
    groups.insert(0, head)
    return separator.join(groups + [tail])


def format_amount(amount: Union[Decimal, int, float, str], code: str) -> str:
    """Render ``amount`` with two decimals in the display style of ``code``."""
    currency = CURRENCY_FORMATS[code]
    rule = _LOCALE_RULES.get(currency.locale, _DEFAULT_RULE)

    value = _quantize_two_decimals(Decimal(str(amount)))
    sign = "-" if value < 0 else ""
    whole, fraction = f"{abs(value):.2f}".split(".")
    number = _group_digits(whole, rule.group, rule.indian_grouping) + rule.decimal + fraction
    return sign + rule.pattern.format(symbol=currency.symbol, number=number)
