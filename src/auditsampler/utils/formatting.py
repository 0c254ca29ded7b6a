"""Display formatting helpers."""

from decimal import ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")


def format_currency(value: Decimal | float | int) -> str:
    """Format a value as US dollars, e.g. ``$1,234.50`` or ``-$50.00``.

    Cents are rounded half up, so ``0.125`` shows as ``$0.13``.
    """
    amount = Decimal(str(value))
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount).quantize(CENT, rounding=ROUND_HALF_UP):,.2f}"


def format_percentage(value: Decimal | float | int) -> str:
    """Format a percentage value with two decimals, e.g. ``12.35%``."""
    return f"{float(value):.2f}%"
