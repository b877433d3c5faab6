# Overview: pt-BR value shaping for exports and narrative prompts.

"""
Formatters

Mirrors pt-BR locale output: "." groups thousands, "," separates decimals,
amounts always carry 2 decimals and dates read DD/MM/YYYY. The currency
symbol is followed by a non-breaking space.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal, ROUND_HALF_UP

NBSP = " "

CURRENCY_SYMBOLS = {
    "EUR": "€",
    "BRL": "R$",
    "USD": "US$",
    "GBP": "£",
}


def format_number(value: float | int | None) -> str:
    amount = Decimal(str(value or 0)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    sign = "-" if amount < 0 else ""
    grouped = f"{abs(amount):,.2f}"  # 1,234.56
    return sign + grouped.replace(",", "_").replace(".", ",").replace("_", ".")


def format_currency(value: float | int | None, currency: str = "EUR") -> str:
    code = (currency or "EUR").upper()
    symbol = CURRENCY_SYMBOLS.get(code, code)
    number = format_number(value)
    if number.startswith("-"):
        return f"-{symbol}{NBSP}{number[1:]}"
    return f"{symbol}{NBSP}{number}"


def format_hours(value: float | int | None) -> str:
    return f"{format_number(value)}h"


def format_date(value: str | date | None) -> str:
    if not value:
        return ""
    if isinstance(value, date):
        return value.strftime("%d/%m/%Y")
    return date.fromisoformat(str(value)[:10]).strftime("%d/%m/%Y")
