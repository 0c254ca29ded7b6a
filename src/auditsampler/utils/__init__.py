"""Utility functions for auditsampler."""

from auditsampler.utils.amount_parser import parse_amount, coerce_amount
from auditsampler.utils.date_parser import format_cell_date, serial_to_date
from auditsampler.utils.formatting import format_currency, format_percentage

__all__ = [
    "parse_amount",
    "coerce_amount",
    "format_cell_date",
    "serial_to_date",
    "format_currency",
    "format_percentage",
]
