"""Sampling domain service.

Pipeline for one run, in fixed order:

1. backfill transaction ids
2. keep accounts whose name matches a target keyword
3. group transactions by account name
4. keep accounts whose absolute balance exceeds tolerable misstatement
5. pick up to ``sample_size`` transactions per material account
6. summarise the selection
"""

from collections import defaultdict
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from auditsampler.domain.entities import (
    AccountGroup,
    SamplingConfig,
    SamplingResults,
    SamplingSummary,
    SelectedSample,
    SelectionReason,
    Transaction,
)
from auditsampler.domain.normalizer import IdFactory, assign_ids
from auditsampler.logging_setup import get_logger

logger = get_logger(__name__)

ZERO = Decimal("0")


def filter_by_keywords(
    transactions: Sequence[Transaction], keywords: Optional[Iterable[str]]
) -> list[Transaction]:
    """Keep transactions whose account name contains any keyword.

    Matching is case-insensitive. Blank keywords are ignored, and with no
    keyword left every transaction is kept.
    """
    upper_keywords = [k.strip().upper() for k in keywords or () if k and k.strip()]
    if not upper_keywords:
        return list(transactions)

    return [
        txn
        for txn in transactions
        if any(keyword in (txn.account_name or "").upper() for keyword in upper_keywords)
    ]


def group_by_account(transactions: Sequence[Transaction]) -> list[AccountGroup]:
    """Group transactions by exact account name, in first-seen order."""
    grouped: dict[str, list[Transaction]] = defaultdict(list)
    for txn in transactions:
        grouped[txn.account_name].append(txn)

    return [
        AccountGroup(
            account_name=account_name,
            account_number=txns[0].account_number or "",
            transactions=tuple(txns),
            total_balance=sum((abs(t.amount) for t in txns), ZERO),
            transaction_count=len(txns),
        )
        for account_name, txns in grouped.items()
    ]


def identify_material_accounts(
    account_groups: Sequence[AccountGroup], tolerable_misstatement
) -> list[AccountGroup]:
    """Keep account groups whose balance is strictly above the threshold."""
    return [g for g in account_groups if g.total_balance > tolerable_misstatement]


def select_samples_from_account(
    account_group: AccountGroup, config: SamplingConfig
) -> list[SelectedSample]:
    """Select up to ``config.sample_size`` transactions from one account.

    Transactions are ranked by absolute amount, largest first (stable, so
    ties keep input order). Everything above the testing scope is taken
    first as OVER_SCOPE; remaining slots are filled from the same ranking
    as HIGH_VALUE_KEY_ITEM.
    """
    sample_size = config.sample_size
    ranked = sorted(account_group.transactions, key=lambda t: abs(t.amount), reverse=True)

    selected: list[SelectedSample] = []

    def take(txn: Transaction, reason: SelectionReason) -> None:
        selected.append(
            SelectedSample(
                transaction=txn,
                selection_reason=reason,
                account_group=account_group.account_name,
                group_total_balance=account_group.total_balance,
            )
        )

    for txn in ranked:
        if len(selected) >= sample_size:
            break
        if abs(txn.amount) > config.testing_scope:
            take(txn, SelectionReason.OVER_SCOPE)

    if len(selected) < sample_size:
        selected_ids = {s.id for s in selected}
        for txn in ranked:
            if len(selected) >= sample_size:
                break
            if txn.id in selected_ids:
                continue
            take(txn, SelectionReason.HIGH_VALUE_KEY_ITEM)
            selected_ids.add(txn.id)

    return selected


def calculate_summary(
    samples: Sequence[SelectedSample], material_accounts: Sequence[AccountGroup]
) -> SamplingSummary:
    """Compute dashboard statistics for a sample set."""
    total_value_tested = sum((abs(s.amount) for s in samples), ZERO)
    total_material_balance = sum((g.total_balance for g in material_accounts), ZERO)

    coverage = 0.0
    if total_material_balance > 0:
        coverage = float(total_value_tested / total_material_balance * 100)

    return SamplingSummary(
        total_material_accounts=len(material_accounts),
        total_value_tested=total_value_tested,
        total_material_balance=total_material_balance,
        coverage_percentage=coverage,
        total_transactions_reviewed=sum(g.transaction_count for g in material_accounts),
        over_scope_count=sum(
            1 for s in samples if s.selection_reason is SelectionReason.OVER_SCOPE
        ),
        high_value_count=sum(
            1 for s in samples if s.selection_reason is SelectionReason.HIGH_VALUE_KEY_ITEM
        ),
    )


class SamplingService:
    """Service running the sampling pipeline for one configuration."""

    def __init__(self, config: SamplingConfig, id_factory: Optional[IdFactory] = None):
        """Initialize sampling service.

        Args:
            config: Sampling thresholds and limits
            id_factory: Optional callable producing ids for transactions without one
        """
        self.config = config
        self.id_factory = id_factory

    def filter_by_keywords(self, transactions: Sequence[Transaction]) -> list[Transaction]:
        return filter_by_keywords(transactions, self.config.target_keywords)

    def group_by_account(self, transactions: Sequence[Transaction]) -> list[AccountGroup]:
        return group_by_account(transactions)

    def identify_material_accounts(
        self, account_groups: Sequence[AccountGroup]
    ) -> list[AccountGroup]:
        return identify_material_accounts(account_groups, self.config.tolerable_misstatement)

    def select_samples_from_account(self, account_group: AccountGroup) -> list[SelectedSample]:
        return select_samples_from_account(account_group, self.config)

    def calculate_summary(
        self,
        samples: Sequence[SelectedSample],
        material_accounts: Sequence[AccountGroup],
    ) -> SamplingSummary:
        return calculate_summary(samples, material_accounts)

    def run(self, transactions: Iterable[Transaction]) -> SamplingResults:
        """Run the full pipeline over a transaction set.

        Args:
            transactions: All ledger transactions

        Returns:
            SamplingResults with samples in account-processing order
        """
        with_ids = assign_ids(transactions, self.id_factory)

        filtered = self.filter_by_keywords(with_ids)
        logger.debug("%d of %d transactions match keywords", len(filtered), len(with_ids))

        account_groups = self.group_by_account(filtered)
        material_accounts = self.identify_material_accounts(account_groups)
        logger.debug(
            "%d of %d accounts are material", len(material_accounts), len(account_groups)
        )

        samples: list[SelectedSample] = []
        for account_group in material_accounts:
            samples.extend(self.select_samples_from_account(account_group))

        summary = self.calculate_summary(samples, material_accounts)
        logger.info(
            "Selected %d samples from %d material accounts (%d transactions after filtering)",
            len(samples),
            len(material_accounts),
            len(filtered),
        )

        return SamplingResults(
            samples=tuple(samples),
            summary=summary,
            account_groups=tuple(material_accounts),
            filtered_transaction_count=len(filtered),
        )


def perform_sampling(
    transactions: Iterable[Transaction],
    config: SamplingConfig,
    id_factory: Optional[IdFactory] = None,
) -> SamplingResults:
    """Run the sampling pipeline with a one-off SamplingService."""
    return SamplingService(config, id_factory=id_factory).run(transactions)
