"""Tests for hierarchical GL detection and parsing."""

from decimal import Decimal

from auditsampler.domain.entities import LedgerLayout
from auditsampler.domain.errors import HEADER_ROW_NOT_FOUND
from auditsampler.domain.hierarchical_gl import (
    detect_layout,
    find_header_row,
    parse_hierarchical_ledger,
)

HEADER = [None, "Date", "Memo", "Amount"]


class TestFindHeaderRow:
    """Tests for header row location."""

    def test_finds_header_after_title_rows(self, hierarchical_grid):
        assert find_header_row(hierarchical_grid) == 2

    def test_balance_column_also_qualifies(self):
        grid = [["Report"], ["Date", "Description", "Balance"]]

        assert find_header_row(grid) == 1

    def test_date_alone_is_not_a_header(self):
        assert find_header_row([["Date", "Memo"]]) is None

    def test_header_beyond_scan_window(self):
        grid = [["title"]] * 10 + [["Date", "Amount"]]

        assert find_header_row(grid) is None

    def test_skips_non_row_entries(self):
        grid = [None, "not a row", ["Date", "Amount"]]

        assert find_header_row(grid) == 2


class TestDetectLayout:
    """Tests for flat/hierarchical classification."""

    def test_hierarchical_export(self, hierarchical_grid):
        detection = detect_layout(hierarchical_grid)

        assert detection.layout is LedgerLayout.HIERARCHICAL
        assert detection.header_row_index == 2

    def test_minimal_hierarchical(self):
        grid = [HEADER, ["Utilities"], [None, "1/2/2024", "Gas", 300]]

        assert detect_layout(grid).layout is LedgerLayout.HIERARCHICAL

    def test_flat_ledger(self):
        grid = [
            ["Date", "Account", "Amount"],
            ["01/02/2024", "Cash", 100],
            ["01/03/2024", "Cash", 200],
        ]

        assert detect_layout(grid).layout is LedgerLayout.FLAT

    def test_no_header_is_flat(self):
        detection = detect_layout([["a", "b"], ["c", "d"]])

        assert detection.layout is LedgerLayout.FLAT
        assert detection.header_row_index is None

    def test_empty_grid_is_flat(self):
        assert detect_layout([]).layout is LedgerLayout.FLAT

    def test_total_rows_are_not_banners(self):
        grid = [HEADER, ["Total for Utilities"], [None, "1/2/2024", "Gas", 300]]

        assert detect_layout(grid).layout is LedgerLayout.FLAT

    def test_banner_followed_by_total_is_not_detected(self):
        """Known corner case: banners never followed by a blank-first-column row."""
        grid = [
            HEADER,
            ["Utilities"],
            ["Total for Utilities", None, None, 0],
            ["Rent"],
            ["Total for Rent", None, None, 0],
        ]

        assert detect_layout(grid).layout is LedgerLayout.FLAT

    def test_whitespace_first_cell_counts_as_blank(self):
        grid = [HEADER, ["Utilities"], ["  ", "1/2/2024", "Gas", 300]]

        assert detect_layout(grid).layout is LedgerLayout.HIERARCHICAL
        assert parse_hierarchical_ledger(grid).transactions[0].account_name == "Utilities"

    def test_banner_as_last_row_is_not_detected(self):
        assert detect_layout([HEADER, ["Utilities"]]).layout is LedgerLayout.FLAT

    def test_banner_inside_lookahead(self):
        filler = [[i, "1/2/2024", "x", 1] for i in range(1, 9)]
        grid = [HEADER] + filler + [["Utilities"], [None, "1/2/2024", "Gas", 5]]

        assert detect_layout(grid).layout is LedgerLayout.HIERARCHICAL

    def test_banner_beyond_lookahead(self):
        filler = [[i, "1/2/2024", "x", 1] for i in range(1, 10)]
        grid = [HEADER] + filler + [["Utilities"], [None, "1/2/2024", "Gas", 5]]

        assert detect_layout(grid).layout is LedgerLayout.FLAT


class TestParseHierarchicalLedger:
    """Tests for flattening hierarchical exports."""

    def test_banner_with_two_transactions(self):
        grid = [
            HEADER,
            ["Utilities"],
            [None, "1/2/2024", "Gas", 300],
            [None, "1/3/2024", "Refund", "(50)"],
        ]

        result = parse_hierarchical_ledger(grid)

        assert result.layout is LedgerLayout.HIERARCHICAL
        assert result.warnings == ()
        assert [t.account_name for t in result.transactions] == ["Utilities", "Utilities"]
        assert [t.amount for t in result.transactions] == [Decimal("300"), Decimal("-50")]
        assert str(result.transactions[1].amount) == "-50"

    def test_full_export(self, hierarchical_grid):
        result = parse_hierarchical_ledger(hierarchical_grid)

        assert [(t.account_name, t.amount) for t in result.transactions] == [
            ("Utilities", Decimal("300")),
            ("Utilities", Decimal("-50")),
            ("Office Supplies", Decimal("1200.00")),
        ]

    def test_transaction_fields(self, hierarchical_grid):
        first, second, third = parse_hierarchical_ledger(hierarchical_grid).transactions

        assert first.date == "01/03/2024"
        assert first.account_number == ""
        assert first.description == "January gas"
        assert first.reference == "1001"
        assert first.vendor == "City Gas"
        assert first.id is None
        assert first.row_index == 5
        assert first.extra == {"Type": "Check", "Split": "Cash", "Balance": 300}

        assert second.date == "1/9/2024"
        assert third.reference == ""
        assert third.vendor == "Staples"

    def test_skips_beginning_balance_zero_and_blank_amounts(self, hierarchical_grid):
        descriptions = [
            t.description for t in parse_hierarchical_ledger(hierarchical_grid).transactions
        ]

        assert "Void" not in descriptions
        assert "No amount" not in descriptions
        assert "Bad amount" not in descriptions
        assert len(descriptions) == 3

    def test_total_row_keeps_current_account(self):
        grid = [
            HEADER,
            ["Utilities"],
            [None, "1/2/2024", "Gas", 300],
            ["Total for Utilities", None, None, 300],
            [None, "1/5/2024", "Late entry", 20],
        ]

        result = parse_hierarchical_ledger(grid)

        assert [t.account_name for t in result.transactions] == ["Utilities", "Utilities"]

    def test_banner_is_trimmed(self):
        grid = [HEADER, ["  Rent  "], [None, "1/2/2024", "March", 900]]

        assert parse_hierarchical_ledger(grid).transactions[0].account_name == "Rent"

    def test_missing_optional_columns(self):
        grid = [HEADER, ["Rent"], [None, "1/2/2024", "March", 900]]

        txn = parse_hierarchical_ledger(grid).transactions[0]
        assert txn.reference is None
        assert txn.vendor is None

    def test_short_rows(self):
        grid = [HEADER, ["Rent"], [None, "1/2/2024"], [None, "1/3/2024", "April", 900]]

        result = parse_hierarchical_ledger(grid)

        assert len(result.transactions) == 1
        assert result.transactions[0].description == "April"

    def test_header_not_found(self):
        result = parse_hierarchical_ledger([["Report"], ["Nothing here"]])

        assert result.transactions == ()
        assert result.warnings == (HEADER_ROW_NOT_FOUND,)
