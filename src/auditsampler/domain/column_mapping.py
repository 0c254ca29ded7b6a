"""Column auto-detection for flat ledger exports."""

from typing import Any, Mapping, Optional, Sequence

from auditsampler.domain.entities import ColumnMapping, Transaction
from auditsampler.domain.normalizer import build_transaction, cell_text
from auditsampler.logging_setup import get_logger

logger = get_logger(__name__)

# Header variants per canonical field, most specific intent first.
# A header matches a variant when it equals it or contains it (case-insensitive).
COLUMN_PATTERNS: dict[str, tuple[str, ...]] = {
    "date": ("date", "transaction date", "trans date", "posting date", "gl date"),
    "account_number": (
        "account",
        "account number",
        "acct",
        "acct no",
        "account no",
        "gl account",
    ),
    "account_name": (
        "account name",
        "account description",
        "acct name",
        "description",
        "account desc",
        "gl description",
    ),
    "amount": (
        "amount",
        "debit",
        "credit",
        "value",
        "transaction amount",
        "trans amount",
    ),
    "description": (
        "memo",
        "description",
        "transaction description",
        "line description",
        "detail",
        "narration",
    ),
    "reference": (
        "reference",
        "ref",
        "doc no",
        "document",
        "invoice",
        "check no",
        "voucher",
    ),
    "vendor": ("vendor", "payee", "supplier", "customer", "party"),
}


def find_column(headers: Sequence[str], patterns: Sequence[str]) -> Optional[str]:
    """Return the first header matching the highest-priority pattern.

    Args:
        headers: Original header names, in column order
        patterns: Variants to try, in priority order

    Returns:
        Original header name, or None if no variant matches any header
    """
    normalized = [str(h).lower().strip() for h in headers]
    for pattern in patterns:
        for index, column in enumerate(normalized):
            if column == pattern or pattern in column:
                return headers[index]
    return None


def detect_column_mapping(headers: Sequence[str]) -> ColumnMapping:
    """Resolve every canonical field against a header row."""
    return ColumnMapping(
        **{field: find_column(headers, patterns) for field, patterns in COLUMN_PATTERNS.items()}
    )


def map_records(
    data: Sequence[Mapping[str, Any]], mapping: Optional[ColumnMapping] = None
) -> list[Transaction]:
    """Turn flat key-value records into canonical transactions.

    The header set is taken from the first record. Fields with no matching
    header stay empty for every record; amounts that cannot be read become
    zero. Returned transactions carry no id yet.

    Args:
        data: Records mapping header text to raw cell values
        mapping: Optional pre-resolved mapping (detected from headers if omitted)

    Returns:
        Transactions in input order
    """
    if not data:
        return []

    headers = list(data[0].keys())
    if mapping is None:
        mapping = detect_column_mapping(headers)
    logger.debug("Column mapping for %d records: %s", len(data), mapping)

    consumed = mapping.mapped_columns()

    def value(row: Mapping[str, Any], column: Optional[str]) -> Any:
        return row.get(column) if column is not None else None

    transactions = []
    for index, row in enumerate(data):
        transactions.append(
            build_transaction(
                raw_date=value(row, mapping.date),
                raw_amount=value(row, mapping.amount),
                account_number=cell_text(value(row, mapping.account_number)),
                account_name=cell_text(value(row, mapping.account_name)),
                description=value(row, mapping.description),
                reference=value(row, mapping.reference),
                vendor=value(row, mapping.vendor),
                has_reference=mapping.reference is not None,
                has_vendor=mapping.vendor is not None,
                extra={k: v for k, v in row.items() if k not in consumed},
                row_index=index + 1,
            )
        )
    return transactions
