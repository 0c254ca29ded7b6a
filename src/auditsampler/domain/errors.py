"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class UnsupportedFormatError(ValidationError):
    """Ledger file type that no decoder is registered for."""


HEADER_ROW_NOT_FOUND = "Could not find header row in hierarchical GL"

UNSUPPORTED_FILE_FORMAT = "Unsupported file format. Please upload a CSV or Excel file."


def invalid_config_value(name: str, value, requirement: str) -> str:
    """Return message for a sampling setting that fails validation."""
    return f"Invalid {name} {value!r}: must be {requirement}"


def unsupported_export_format(path: str) -> str:
    """Return message for an export path with an unknown extension."""
    return f"Cannot export to '{path}': use a .csv or .xlsx file name"
