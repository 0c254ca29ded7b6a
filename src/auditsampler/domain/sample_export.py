"""Export of selected samples for working papers."""

import csv
from datetime import date
from pathlib import Path
from typing import Any, Sequence

from auditsampler.domain.entities import SelectedSample
from auditsampler.domain.errors import ValidationError, unsupported_export_format
from auditsampler.logging_setup import get_logger

logger = get_logger(__name__)

EXPORT_COLUMNS = (
    "Account Name",
    "Account Number",
    "Date",
    "Description",
    "Amount",
    "Reference",
    "Vendor",
    "Selection Reason",
    "Group Total Balance",
)

SHEET_TITLE = "Selected Samples"
MIN_COLUMN_WIDTH = 15


def default_export_name(today: date) -> str:
    """Return the default export file name for a given day."""
    return f"audit_samples_{today.isoformat()}.xlsx"


class SampleExportService:
    """Service for writing selected samples to CSV or Excel files."""

    def build_rows(self, samples: Sequence[SelectedSample]) -> list[dict[str, Any]]:
        """Build one export row per sample, keyed by EXPORT_COLUMNS."""
        return [
            {
                "Account Name": sample.account_group,
                "Account Number": sample.account_number,
                "Date": sample.date,
                "Description": sample.description,
                "Amount": sample.amount,
                "Reference": sample.reference or "",
                "Vendor": sample.vendor or "",
                "Selection Reason": sample.selection_reason.label,
                "Group Total Balance": sample.group_total_balance,
            }
            for sample in samples
        ]

    def export(self, samples: Sequence[SelectedSample], file_path: str | Path) -> Path:
        """Write samples to a file, choosing the format from its extension.

        Raises:
            ValidationError: If the extension is neither .csv nor .xlsx
        """
        path = Path(file_path)
        extension = path.suffix.lower()
        if extension == ".csv":
            self.write_csv(samples, path)
        elif extension == ".xlsx":
            self.write_xlsx(samples, path)
        else:
            raise ValidationError(unsupported_export_format(str(file_path)))
        logger.info("Exported %d samples to %s", len(samples), path)
        return path

    def write_csv(self, samples: Sequence[SelectedSample], path: Path) -> None:
        with open(path, "w", encoding="utf-8", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=EXPORT_COLUMNS)
            writer.writeheader()
            writer.writerows(self.build_rows(samples))

    def write_xlsx(self, samples: Sequence[SelectedSample], path: Path) -> None:
        from openpyxl import Workbook
        from openpyxl.utils import get_column_letter

        workbook = Workbook()
        worksheet = workbook.active
        worksheet.title = SHEET_TITLE
        worksheet.append(list(EXPORT_COLUMNS))
        for row in self.build_rows(samples):
            worksheet.append([row[column] for column in EXPORT_COLUMNS])

        for index, column in enumerate(EXPORT_COLUMNS, start=1):
            width = max(len(column), MIN_COLUMN_WIDTH)
            worksheet.column_dimensions[get_column_letter(index)].width = width

        workbook.save(path)
