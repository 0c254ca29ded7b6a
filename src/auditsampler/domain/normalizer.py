"""Transaction normalization: canonical records and id assignment."""

import itertools
from dataclasses import replace
from typing import Any, Callable, Iterable, Optional

from auditsampler.domain.entities import Transaction
from auditsampler.utils.amount_parser import coerce_amount
from auditsampler.utils.date_parser import format_cell_date

IdFactory = Callable[[], str]


def cell_text(raw: Any) -> str:
    """Stringify a raw cell, mapping empty cells to ``""``.

    Whole-number floats lose their trailing ``.0`` so account numbers and
    check numbers read from spreadsheets keep their printed form.
    """
    if raw is None:
        return ""
    if isinstance(raw, float) and raw.is_integer():
        return str(int(raw))
    return str(raw)


def build_transaction(
    *,
    raw_date: Any,
    raw_amount: Any,
    account_name: str,
    account_number: str = "",
    description: Any = None,
    reference: Any = None,
    vendor: Any = None,
    has_reference: bool = False,
    has_vendor: bool = False,
    extra: Optional[dict[str, Any]] = None,
    row_index: Optional[int] = None,
) -> Transaction:
    """Build a canonical Transaction from raw cell values.

    Reference and vendor stay ``None`` when the source has no such column
    (``has_reference`` / ``has_vendor`` false) and become ``""`` when the
    column exists but the cell is empty.
    """
    return Transaction(
        date=format_cell_date(raw_date),
        account_number=account_number,
        account_name=account_name,
        description=cell_text(description),
        amount=coerce_amount(raw_amount),
        reference=cell_text(reference) if has_reference else None,
        vendor=cell_text(vendor) if has_vendor else None,
        extra=dict(extra or {}),
        row_index=row_index,
    )


class IdGenerator:
    """Hands out ``<prefix><n>`` ids from a counter, skipping reserved ids.

    One generator scopes one run; ids never repeat within it.
    """

    def __init__(self, prefix: str = "txn_", start: int = 1):
        self.prefix = prefix
        self._counter = itertools.count(start)
        self._reserved: set[str] = set()

    def reserve(self, ids: Iterable[str]) -> None:
        """Mark ids as taken so they are never generated."""
        self._reserved.update(ids)

    def __call__(self) -> str:
        while True:
            candidate = f"{self.prefix}{next(self._counter)}"
            if candidate not in self._reserved:
                self._reserved.add(candidate)
                return candidate


def assign_ids(
    transactions: Iterable[Transaction], id_factory: Optional[IdFactory] = None
) -> list[Transaction]:
    """Return transactions with an id on every record.

    Records that already carry an id are returned unchanged. The rest get a
    new id from ``id_factory``; by default a fresh IdGenerator that first
    reserves every existing id, so generated ids cannot collide with them.

    Args:
        transactions: Transactions, some possibly without ids
        id_factory: Optional zero-argument callable producing new ids

    Returns:
        New list in input order
    """
    transactions = list(transactions)

    if id_factory is None:
        generator = IdGenerator()
        generator.reserve(t.id for t in transactions if t.id)
        id_factory = generator

    return [t if t.id else replace(t, id=id_factory()) for t in transactions]
