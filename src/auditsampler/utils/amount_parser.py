"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation, getcontext
import re

# Longest leading numeric prefix, the way spreadsheet tools read "100 USD"
_LEADING_NUMBER = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_PARENTHESISED = re.compile(r"\(([^)]+)\)")

ZERO = Decimal("0")


def _in_range(amount: Decimal) -> bool:
    # Exponents past Emax overflow on the first arithmetic operation
    return amount.is_finite() and amount.adjusted() <= getcontext().Emax


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "123.45"
    - "$123.45"
    - "-123.45"
    - "-$123.45"
    - "1,234.56"
    - "(123.45)" (negative in parentheses)

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    amount_str = amount_str.strip()

    # Remove currency symbols and thousands separators first so "$(1,234)" works
    amount_str = re.sub(r"[$€£¥]", "", amount_str)
    amount_str = amount_str.replace(",", "").strip()

    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1].strip()

    try:
        amount = Decimal(amount_str)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e}")

    if not _in_range(amount):
        raise ValueError(f"Could not parse amount '{amount_str}': not a finite number in range")

    return -amount if is_negative else amount


def coerce_amount(raw) -> Decimal:
    """Coerce a raw spreadsheet cell into a finite Decimal amount.

    Never raises. Numeric cells pass through; strings lose ``$`` and ``,``,
    have the first parenthesised group turned negative and are read up to
    the end of their leading number. Anything unreadable becomes zero.

    Args:
        raw: Cell value (str, int, float, Decimal or None)

    Returns:
        Decimal amount, zero when the value cannot be read
    """
    if raw is None or isinstance(raw, bool):
        return ZERO

    if isinstance(raw, Decimal):
        return raw if _in_range(raw) else ZERO

    if isinstance(raw, int):
        amount = Decimal(raw)
        return amount if _in_range(amount) else ZERO

    if isinstance(raw, float):
        amount = Decimal(str(raw))
        return amount if _in_range(amount) else ZERO

    if not isinstance(raw, str):
        return ZERO

    cleaned = raw.replace("$", "").replace(",", "")
    cleaned = _PARENTHESISED.sub(r"-\1", cleaned, count=1).strip()

    match = _LEADING_NUMBER.match(cleaned)
    if match is None:
        return ZERO

    try:
        amount = Decimal(match.group(0))
    except InvalidOperation:
        return ZERO
    return amount if _in_range(amount) else ZERO
