"""Ledger file import service.

Decodes CSV and Excel files into a grid of raw cells, classifies the grid as
flat or hierarchical, and hands it to the matching parser.
"""

import csv
from pathlib import Path
from typing import Any, Optional, Sequence

from auditsampler.domain.column_mapping import detect_column_mapping, map_records
from auditsampler.domain.entities import LedgerLayout, LedgerParseResult
from auditsampler.domain.errors import UNSUPPORTED_FILE_FORMAT, UnsupportedFormatError
from auditsampler.domain.hierarchical_gl import Grid, detect_layout, parse_hierarchical_ledger
from auditsampler.domain.normalizer import cell_text
from auditsampler.logging_setup import get_logger

logger = get_logger(__name__)

CSV_EXTENSIONS = {".csv"}
EXCEL_EXTENSIONS = {".xlsx", ".xlsm"}


def _is_blank_row(row: Optional[Sequence[Any]]) -> bool:
    if not row:
        return True
    return all(c is None or (isinstance(c, str) and not c.strip()) for c in row)


def grid_to_records(grid: Grid) -> list[dict[str, Any]]:
    """Convert a grid into key-value records.

    The first non-blank row supplies the headers. Columns with an empty
    header are dropped, repeated headers get ``_1``, ``_2``... suffixes, and
    blank rows are skipped.
    """
    header_index = next(
        (i for i, row in enumerate(grid) if not _is_blank_row(row)), None
    )
    if header_index is None:
        return []

    columns: list[tuple[int, str]] = []
    seen: dict[str, int] = {}
    for index, cell in enumerate(grid[header_index]):
        label = cell_text(cell).strip()
        if not label:
            continue
        if label in seen:
            seen[label] += 1
            label = f"{label}_{seen[label]}"
        else:
            seen[label] = 0
        columns.append((index, label))

    records = []
    for row in grid[header_index + 1:]:
        if _is_blank_row(row):
            continue
        records.append(
            {label: row[index] if index < len(row) else None for index, label in columns}
        )
    return records


def parse_ledger_grid(
    grid: Grid, records: Optional[Sequence[dict[str, Any]]] = None
) -> LedgerParseResult:
    """Classify a decoded sheet and parse it with the matching parser.

    Args:
        grid: Decoded sheet as rows of raw cells
        records: Optional flat records already decoded from the same sheet

    Returns:
        LedgerParseResult describing the transactions and the layout used
    """
    detection = detect_layout(grid)
    logger.debug("Detected %s ledger layout", detection.layout.value)

    if detection.layout is LedgerLayout.HIERARCHICAL:
        return parse_hierarchical_ledger(grid)

    if records is None:
        records = grid_to_records(grid)

    mapping = detect_column_mapping(list(records[0].keys())) if records else None
    transactions = map_records(records, mapping)
    return LedgerParseResult(
        transactions=tuple(transactions),
        layout=LedgerLayout.FLAT,
        column_mapping=mapping,
    )


class LedgerImportService:
    """Service for reading ledger exports from disk."""

    def load(self, file_path: str | Path) -> LedgerParseResult:
        """Read a ledger file and parse its transactions.

        Args:
            file_path: Path to a .csv, .xlsx or .xlsm file

        Returns:
            LedgerParseResult

        Raises:
            FileNotFoundError: If the file doesn't exist
            UnsupportedFormatError: If the file extension is not supported
        """
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"Ledger file not found: {file_path}")

        extension = path.suffix.lower()
        if extension in CSV_EXTENSIONS:
            grid = self.read_csv_grid(path)
        elif extension in EXCEL_EXTENSIONS:
            grid = self.read_excel_grid(path)
        else:
            raise UnsupportedFormatError(UNSUPPORTED_FILE_FORMAT)

        result = parse_ledger_grid(grid)
        logger.info(
            "Loaded %d transactions from %s (%s layout)",
            len(result.transactions),
            path.name,
            result.layout.value,
        )
        for warning in result.warnings:
            logger.warning("%s: %s", path.name, warning)
        return result

    def read_csv_grid(self, path: Path) -> list[list[str]]:
        """Decode a CSV file into rows of string cells."""
        with open(path, "r", encoding="utf-8-sig", newline="") as f:
            sample = f.read(1024)
            f.seek(0)
            try:
                delimiter = csv.Sniffer().sniff(sample, delimiters=",;\t|").delimiter
            except csv.Error:
                delimiter = ","

            return [row for row in csv.reader(f, delimiter=delimiter) if row]

    def read_excel_grid(self, path: Path) -> list[list[Any]]:
        """Decode the first worksheet of an Excel workbook into rows of raw cells."""
        from openpyxl import load_workbook

        workbook = load_workbook(path, read_only=True, data_only=True)
        try:
            worksheet = workbook.worksheets[0]
            return [list(row) for row in worksheet.iter_rows(values_only=True)]
        finally:
            workbook.close()
