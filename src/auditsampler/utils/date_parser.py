"""Date parsing utilities for spreadsheet cells."""

import math
from datetime import date, datetime, timedelta
from decimal import Decimal

# Spreadsheet day zero (accounts for the 1900 leap-year bug)
SERIAL_EPOCH = date(1899, 12, 30)


def serial_to_date(serial: float | int | Decimal) -> date:
    """Convert a spreadsheet serial day number into a calendar date.

    The fractional part of the serial (time of day) is dropped.

    Args:
        serial: Serial day number anchored at 1899-12-30

    Returns:
        Date object

    Raises:
        ValueError: If the serial is not finite or falls outside the date range
    """
    value = float(serial)
    if not math.isfinite(value):
        raise ValueError(f"Could not convert serial date '{serial}': not a finite number")

    try:
        return SERIAL_EPOCH + timedelta(days=math.floor(value))
    except OverflowError as e:
        raise ValueError(f"Could not convert serial date '{serial}': {e}")


def format_us_date(value: date) -> str:
    """Format a date the way US-locale spreadsheets display it (M/D/YYYY)."""
    return f"{value.month}/{value.day}/{value.year}"


def format_cell_date(raw) -> str:
    """Render a raw date cell as a string.

    Numeric cells are treated as serial dates, date and datetime objects are
    formatted directly, and everything else is kept as its string form so
    unparseable dates are preserved rather than rejected.

    Args:
        raw: Cell value from a decoded sheet

    Returns:
        Date string, empty when the cell is empty
    """
    if raw is None:
        return ""

    if isinstance(raw, datetime):
        return format_us_date(raw.date())

    if isinstance(raw, date):
        return format_us_date(raw)

    if isinstance(raw, (int, float, Decimal)) and not isinstance(raw, bool):
        try:
            return format_us_date(serial_to_date(raw))
        except ValueError:
            return str(raw)

    return str(raw)
