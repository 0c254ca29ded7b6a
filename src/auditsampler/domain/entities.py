"""Domain model entities for auditsampler.

These are pure data classes describing general-ledger lines and the outcome
of a sampling run. They carry no behaviour beyond small conveniences, so the
sampling pipeline can treat them as immutable values.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Optional, Sequence


@dataclass(frozen=True)
class Transaction:
    """One general-ledger line item.

    ``extra`` keeps source columns that did not map to a canonical field,
    keyed by their original header text.
    """

    date: str
    account_number: str
    account_name: str
    description: str
    amount: Decimal
    reference: Optional[str] = None
    vendor: Optional[str] = None
    id: Optional[str] = None
    extra: dict[str, Any] = field(default_factory=dict)
    row_index: Optional[int] = None


@dataclass(frozen=True)
class AccountGroup:
    """Transactions sharing one account name, with aggregate balance."""

    account_name: str
    account_number: str
    transactions: tuple[Transaction, ...]
    total_balance: Decimal
    transaction_count: int


class SelectionReason(str, Enum):
    """Why a transaction was picked for testing."""

    OVER_SCOPE = "OVER_SCOPE"
    HIGH_VALUE_KEY_ITEM = "HIGH_VALUE_KEY_ITEM"

    @property
    def label(self) -> str:
        if self is SelectionReason.OVER_SCOPE:
            return "Over Scope"
        return "High Value Key Item"


@dataclass(frozen=True)
class SelectedSample:
    """A transaction chosen for audit testing."""

    transaction: Transaction
    selection_reason: SelectionReason
    account_group: str
    group_total_balance: Decimal

    @property
    def id(self) -> Optional[str]:
        return self.transaction.id

    @property
    def amount(self) -> Decimal:
        return self.transaction.amount

    @property
    def date(self) -> str:
        return self.transaction.date

    @property
    def account_number(self) -> str:
        return self.transaction.account_number

    @property
    def account_name(self) -> str:
        return self.transaction.account_name

    @property
    def description(self) -> str:
        return self.transaction.description

    @property
    def reference(self) -> Optional[str]:
        return self.transaction.reference

    @property
    def vendor(self) -> Optional[str]:
        return self.transaction.vendor


@dataclass(frozen=True)
class SamplingConfig:
    """Thresholds and limits for one sampling run.

    Values are used as given; validation belongs to the caller.
    """

    tolerable_misstatement: Decimal
    testing_scope: Decimal
    sample_size: int
    target_keywords: Sequence[str] = ()


@dataclass(frozen=True)
class SamplingSummary:
    """Dashboard statistics derived from a sample set."""

    total_material_accounts: int
    total_value_tested: Decimal
    total_material_balance: Decimal
    coverage_percentage: float
    total_transactions_reviewed: int
    over_scope_count: int
    high_value_count: int


@dataclass(frozen=True)
class SamplingResults:
    """Complete output of a sampling run."""

    samples: tuple[SelectedSample, ...]
    summary: SamplingSummary
    account_groups: tuple[AccountGroup, ...]
    filtered_transaction_count: int


@dataclass(frozen=True)
class ColumnMapping:
    """Source header chosen for each canonical transaction field."""

    date: Optional[str] = None
    account_number: Optional[str] = None
    account_name: Optional[str] = None
    amount: Optional[str] = None
    description: Optional[str] = None
    reference: Optional[str] = None
    vendor: Optional[str] = None

    def mapped_columns(self) -> set[str]:
        """Return the set of source headers consumed by canonical fields."""
        return {
            column
            for column in (
                self.date,
                self.account_number,
                self.account_name,
                self.amount,
                self.description,
                self.reference,
                self.vendor,
            )
            if column is not None
        }


class LedgerLayout(str, Enum):
    """Shape of a decoded ledger sheet."""

    FLAT = "flat"
    HIERARCHICAL = "hierarchical"


@dataclass(frozen=True)
class LayoutDetection:
    """Outcome of classifying a sheet as flat or hierarchical."""

    layout: LedgerLayout
    header_row_index: Optional[int] = None


@dataclass(frozen=True)
class LedgerParseResult:
    """Transactions read from a ledger, with the layout used and any warnings."""

    transactions: tuple[Transaction, ...]
    layout: LedgerLayout
    warnings: tuple[str, ...] = ()
    column_mapping: Optional[ColumnMapping] = None
