"""Hierarchical general-ledger layout: detection and flattening.

Drill-down GL reports (QuickBooks style) put the account name alone in the
first column as a banner row, followed by transaction rows whose first
column is blank::

    |              | Date       | Num  | Name     | Memo        | Amount |
    | Utilities    |            |      |          |             |        |
    |              | 01/03/2024 | 1001 | City Gas | January gas | 300    |
    |              | 01/09/2024 | 1002 | City Gas | Refund      | (50)   |
    | Total for... |            |      |          |             | 250    |

Detection and parsing share ``find_header_row`` so they always agree on
where the data starts.
"""

from typing import Any, Callable, Optional, Sequence

from auditsampler.domain.entities import (
    LayoutDetection,
    LedgerLayout,
    LedgerParseResult,
    Transaction,
)
from auditsampler.domain.errors import HEADER_ROW_NOT_FOUND
from auditsampler.domain.normalizer import build_transaction, cell_text
from auditsampler.logging_setup import get_logger
from auditsampler.utils.amount_parser import coerce_amount

logger = get_logger(__name__)

Grid = Sequence[Optional[Sequence[Any]]]

HEADER_SCAN_ROWS = 10
BANNER_LOOKAHEAD_ROWS = 10


def _is_row(row: Any) -> bool:
    return isinstance(row, (list, tuple))


def _cell(row: Sequence[Any], index: Optional[int]) -> Any:
    if index is None or index >= len(row):
        return None
    return row[index]


def _first_cell(row: Sequence[Any]) -> Any:
    return row[0] if row else None


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _is_total_label(text: str) -> bool:
    return text.strip().lower().startswith("total")


def _is_account_banner(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip()) and not _is_total_label(value)


def find_header_row(grid: Grid) -> Optional[int]:
    """Locate the column-header row within the first rows of a sheet.

    A header row is one whose lowercased text mentions "date" together with
    "amount" or "balance".

    Args:
        grid: Decoded sheet as rows of raw cells

    Returns:
        Row index, or None when no header row is found
    """
    for index in range(min(HEADER_SCAN_ROWS, len(grid))):
        row = grid[index]
        if not _is_row(row):
            continue
        text = " ".join(cell_text(c).lower() for c in row)
        if "date" in text and ("amount" in text or "balance" in text):
            return index
    return None


def detect_layout(grid: Grid) -> LayoutDetection:
    """Classify a sheet as flat or hierarchical.

    After the header row, a string account name in the first column that is
    immediately followed by a row with a blank first column confirms the
    hierarchical layout. Anything else is flat.

    A hierarchical file whose accounts each have a single transaction line
    still matches because the banner is followed by that line; a file whose
    banners are immediately followed by other banners or totals does not.
    """
    header_index = find_header_row(grid)
    if header_index is None:
        return LayoutDetection(layout=LedgerLayout.FLAT)

    stop = min(header_index + BANNER_LOOKAHEAD_ROWS, len(grid))
    for index in range(header_index + 1, stop):
        row = grid[index]
        if not _is_row(row) or not _is_account_banner(_first_cell(row)):
            continue
        next_row = grid[index + 1] if index + 1 < len(grid) else None
        if _is_row(next_row) and _is_blank(_first_cell(next_row)):
            return LayoutDetection(
                layout=LedgerLayout.HIERARCHICAL, header_row_index=header_index
            )

    return LayoutDetection(layout=LedgerLayout.FLAT, header_row_index=header_index)


def _find_index(headers: Sequence[str], predicate: Callable[[str], bool]) -> Optional[int]:
    for index, header in enumerate(headers):
        if header and predicate(header):
            return index
    return None


def parse_hierarchical_ledger(grid: Grid) -> LedgerParseResult:
    """Flatten a hierarchical GL sheet into transactions.

    Banner rows set the current account; "Total..." rows are ignored.
    Rows with a blank first column become transactions of the current
    account unless their amount cell is empty, their date mentions
    "beginning balance", or their amount reads as zero.

    Args:
        grid: Decoded sheet as rows of raw cells

    Returns:
        LedgerParseResult; empty with a warning when no header row exists
    """
    header_index = find_header_row(grid)
    if header_index is None:
        logger.warning(HEADER_ROW_NOT_FOUND)
        return LedgerParseResult(
            transactions=(),
            layout=LedgerLayout.HIERARCHICAL,
            warnings=(HEADER_ROW_NOT_FOUND,),
        )

    header_cells = grid[header_index]
    headers = [cell_text(c).lower().strip() for c in header_cells]

    date_idx = _find_index(headers, lambda h: h == "date")
    amount_idx = _find_index(headers, lambda h: h == "amount")
    memo_idx = _find_index(headers, lambda h: "memo" in h or "description" in h)
    num_idx = _find_index(headers, lambda h: h == "num")
    name_idx = _find_index(headers, lambda h: h == "name")

    canonical = {0, date_idx, amount_idx, memo_idx, num_idx, name_idx}
    passthrough = [
        (index, cell_text(cell).strip())
        for index, cell in enumerate(header_cells)
        if index not in canonical and cell_text(cell).strip()
    ]

    transactions: list[Transaction] = []
    current_account = ""

    for index in range(header_index + 1, len(grid)):
        row = grid[index]
        if not _is_row(row):
            continue

        first = _first_cell(row)
        if isinstance(first, str) and first.strip():
            if not _is_total_label(first):
                current_account = first.strip()
            continue

        raw_amount = _cell(row, amount_idx)
        if _is_blank(raw_amount):
            continue

        raw_date = _cell(row, date_idx)
        if "beginning balance" in cell_text(raw_date).lower():
            continue

        amount = coerce_amount(raw_amount)
        if amount == 0:
            continue

        transactions.append(
            build_transaction(
                raw_date=raw_date,
                raw_amount=amount,
                account_name=current_account,
                description=_cell(row, memo_idx),
                reference=_cell(row, num_idx),
                vendor=_cell(row, name_idx),
                has_reference=num_idx is not None,
                has_vendor=name_idx is not None,
                extra={label: _cell(row, col) for col, label in passthrough},
                row_index=index + 1,
            )
        )

    logger.debug(
        "Parsed %d transactions from hierarchical GL (header row %d)",
        len(transactions),
        header_index + 1,
    )
    return LedgerParseResult(
        transactions=tuple(transactions), layout=LedgerLayout.HIERARCHICAL
    )
