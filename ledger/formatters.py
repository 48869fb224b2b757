"""Display formatting for money, distances and volumes."""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import NamedTuple, Optional

CENT = Decimal("0.01")


class CurrencyFormat(NamedTuple):
    symbol: str
    thousands: str
    decimal: str


LOCALES = {
    "en-US": CurrencyFormat("$", ",", "."),
    "pt-BR": CurrencyFormat("R$ ", ".", ","),
}

DEFAULT_LOCALE = "en-US"


def _localize(number: str, fmt: CurrencyFormat) -> str:
    """Swap the ',' / '.' produced by Python formatting for the locale's marks."""
    return number.translate(str.maketrans({",": fmt.thousands, ".": fmt.decimal}))


def format_currency(value: Optional[float], locale: Optional[str] = None) -> str:
    """
    Format an amount with currency symbol, grouping and two decimals.

    Rounds through Decimal so e.g. 0.1 + 0.2 renders as 0.30, not 0.30000000000000004.
    """
    if value is None:
        return "-"
    fmt = LOCALES.get(locale or DEFAULT_LOCALE, LOCALES[DEFAULT_LOCALE])
    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        return "-"
    if not amount.is_finite():
        return "-"
    amount = amount.quantize(CENT, rounding=ROUND_HALF_UP)
    sign = "-" if amount < 0 else ""
    return f"{sign}{fmt.symbol}{_localize(f'{abs(amount):,.2f}', fmt)}"


def format_km(km: Optional[float]) -> str:
    """Format kilometers for display."""
    return f"{km:,.0f} km" if km is not None else "-"


def format_liters(liters: Optional[float]) -> str:
    return f"{liters:,.2f} L" if liters is not None else "-"


def format_consumption(km_per_liter: Optional[float]) -> str:
    """Format consumption as km/l, one decimal."""
    if not km_per_liter:
        return "N/A"
    return f"{km_per_liter:.1f} km/l"


def format_change(percent: float) -> str:
    """Format a percent change with explicit sign, e.g. '+12.5%'."""
    sign = "+" if percent >= 0 else ""
    return f"{sign}{percent:.1f}%"


def truncate(text: Optional[str], max_len: int = 30) -> str:
    """Truncate text with ellipsis if too long."""
    if not text:
        return "-"
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."
