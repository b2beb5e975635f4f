"""
Tests for the repository index and order line processing.

Run with: pytest tests/test_processor.py -v
"""

from pod_orders.index import build_index
from pod_orders.loaders import process_repository_data
from pod_orders.models import LookupMethod
from pod_orders.processor import consolidate_lines, process_order_rows, resolve_row_isbn


class TestRepositoryIndex:
    def test_lookup_by_isbn(self, index):
        assert index.lookup_isbn("9780140000001")["title"] == "Penguin One"

    def test_lookup_normalizes_query(self, index):
        assert index.lookup_isbn("978-0-14-000000-2")["title"] == "Penguin Two"
        assert index.lookup_isbn("12345") is None

    def test_alternate_id_case_insensitive(self, index):
        assert index.lookup_alternate_id("sa1657")["isbn"] == "9780140000001"
        assert index.lookup_alternate_id(" SA1700 ")["isbn"] == "9780140000002"
        assert index.lookup_alternate_id("") is None

    def test_scientific_notation_repository_isbn(self, index):
        assert index.lookup_isbn("1000000000000")["title"] == "Scientific Notation Title"

    def test_duplicates_last_wins(self):
        records = process_repository_data(
            [
                {"ISBN": "9780140000001", "Title": "First"},
                {"ISBN": "9780140000001", "Title": "Second"},
                {"ISBN": "9780140000001", "Title": "Third"},
                {"ISBN": "9780140000009", "Title": "Other"},
            ]
        )
        index = build_index(records)
        assert index.lookup_isbn("9780140000001")["title"] == "Third"
        assert index.duplicate_count() == 2
        assert len(index) == 4

    def test_status_counts(self, index):
        assert index.status_counts() == {"POD Ready": 3, "MPI": 1}

    def test_unidentified_records_not_indexed(self):
        index = build_index(process_repository_data([{"ISBN": "123", "Title": "Short"}]))
        assert index.by_isbn == {}
        assert len(index.records) == 1


class TestResolveRowIsbn:
    def test_case_insensitive_column(self):
        assert resolve_row_isbn({"isbn": "9780140000001"}) == "9780140000001"
        assert resolve_row_isbn({"Isbn": "9780140000001"}) == "9780140000001"

    def test_invalid_length(self, metrics):
        assert resolve_row_isbn({"ISBN": "12345"}, metrics) == ""
        assert metrics.isbn_invalid == 1
        assert metrics.isbn_invalid_samples == ["12345"]

    def test_missing(self, metrics):
        assert resolve_row_isbn({"Qty": 1}, metrics) == ""
        assert metrics.isbn_missing == 1

    def test_repaired(self, metrics):
        assert resolve_row_isbn({"ISBN": "9.78014e+12"}, metrics) == "9780140000000"
        assert metrics.isbn_repaired == 1


class TestProcessOrderRows:
    def test_single_match(self, index):
        lines = process_order_rows([{"ISBN": "9780140000001", "Qty": "5"}], index, "PO-1")

        assert len(lines) == 1
        line = lines[0]
        assert line.line_number == "001"
        assert line.isbn == "9780140000001"
        assert line.description == "Penguin One"
        assert line.status == "POD Ready"
        assert line.paper_desc == "Cream 80gsm"
        assert line.quantity == 5
        assert line.available
        assert line.lookup_method is LookupMethod.ISBN
        assert line.order_ref == "PO-1"

    def test_consolidation(self, index, metrics):
        rows = [
            {"ISBN": "9780140000001", "Qty": "3"},
            {"ISBN": "9780140000001", "Qty": "4"},
        ]
        lines = process_order_rows(rows, index, "PO-1", metrics)

        assert len(lines) == 1
        assert lines[0].quantity == 7
        assert lines[0].consolidated_count == 2
        assert metrics.rows_consolidated == 1

    def test_scientific_notation_row(self, index):
        lines = process_order_rows([{"ISBN": "1E+12", "Qty": 2}], index)

        assert lines[0].isbn == "1000000000000"
        assert lines[0].available

    def test_master_order_id_fallback(self, index):
        lines = process_order_rows([{"ISBN": "", "Master": "SA1657", "Qty": 1}], index)

        assert lines[0].isbn == "9780140000001"
        assert lines[0].lookup_method is LookupMethod.MASTER_ORDER_ID
        assert lines[0].available

    def test_master_fallback_after_unknown_isbn(self, index):
        lines = process_order_rows([{"ISBN": "9789999999999", "master": "sa1700", "Qty": 1}], index)

        assert lines[0].isbn == "9780140000002"
        assert lines[0].requested_isbn == "9789999999999"
        assert lines[0].lookup_method is LookupMethod.MASTER_ORDER_ID

    def test_isbn_and_master_rows_consolidate(self, index):
        rows = [
            {"ISBN": "9780140000001", "Qty": 2},
            {"Master": "SA1657", "Qty": 3},
        ]
        lines = process_order_rows(rows, index)

        assert len(lines) == 1
        assert lines[0].quantity == 5

    def test_unmatched_row_kept(self, index):
        lines = process_order_rows([{"ISBN": "9789999999999", "Qty": 5}], index)

        line = lines[0]
        assert line.isbn == ""
        assert line.requested_isbn == "9789999999999"
        assert line.description == "Not Found"
        assert line.status == "Not Available"
        assert line.paper_desc == "Not specified"
        assert line.quantity == 5
        assert not line.available
        assert line.lookup_method is LookupMethod.NONE

    def test_unmatched_rows_never_consolidate(self, index):
        rows = [
            {"ISBN": "9789999999999", "Qty": 1},
            {"ISBN": "9789999999999", "Qty": 1},
            {"ISBN": "", "Qty": 1},
        ]
        lines = process_order_rows(rows, index)

        assert len(lines) == 3
        assert all(line.consolidated_count == 1 for line in lines)

    def test_invalid_quantity_becomes_zero(self, index, metrics):
        rows = [
            {"ISBN": "9780140000001", "Qty": "abc"},
            {"ISBN": "9780140000002", "Qty": 20000},
        ]
        lines = process_order_rows(rows, index, metrics=metrics)

        assert [line.quantity for line in lines] == [0, 0]
        assert metrics.quantity_invalid == 2

    def test_quantity_column_variants(self, index):
        lines = process_order_rows([{"isbn": "9780140000001", "rem": "9"}], index)
        assert lines[0].quantity == 9

    def test_lines_numbered_in_first_appearance_order(self, index):
        rows = [
            {"ISBN": "9780140000002", "Qty": 1},
            {"ISBN": "9780140000001", "Qty": 1},
            {"ISBN": "9780140000002", "Qty": 1},
            {"ISBN": "9780140000003", "Qty": 1},
        ]
        lines = process_order_rows(rows, index)

        assert [line.isbn for line in lines] == ["9780140000002", "9780140000001", "9780140000003"]
        assert [line.line_number for line in lines] == ["001", "002", "003"]
        assert [line.position for line in lines] == [0, 1, 2]

    def test_quantity_conserved(self, index):
        rows = [
            {"ISBN": "9780140000001", "Qty": 3},
            {"ISBN": "9780140000002", "Qty": 4},
            {"ISBN": "9780140000001", "Qty": 5},
            {"ISBN": "9789999999999", "Qty": 6},
            {"ISBN": "9780140000001", "Qty": "bad"},
        ]
        lines = process_order_rows(rows, index)

        assert sum(line.quantity for line in lines) == 3 + 4 + 5 + 6

    def test_default_status_from_repository(self, index):
        lines = process_order_rows([{"ISBN": "9780140000003", "Qty": 1}], index)
        assert lines[0].status == "POD Ready"

    def test_order_date_kept(self, index):
        lines = process_order_rows([{"ISBN": "9780140000001", "Qty": 1, "Date": "2024-03-01"}], index)
        assert lines[0].order_date == "2024-03-01"

    def test_empty_batch(self, index):
        assert process_order_rows([], index) == []

    def test_metrics_lookups(self, index, metrics):
        rows = [
            {"ISBN": "9780140000001", "Qty": 1},
            {"Master": "SA1700", "Qty": 1},
            {"ISBN": "9789999999999", "Qty": 1},
        ]
        process_order_rows(rows, index, metrics=metrics)

        assert metrics.lookups == {"isbn": 1, "master_order_id": 1, "none": 1}
        assert metrics.rows_total == 3


class TestConsolidateLines:
    def test_candidates_not_modified(self, index):
        rows = [{"ISBN": "9780140000001", "Qty": 3}, {"ISBN": "9780140000001", "Qty": 4}]
        lines = process_order_rows(rows, index)
        candidates = [lines[0]]

        result = consolidate_lines(candidates + candidates)

        assert result[0].quantity == 14
        assert result[0].consolidated_count == 2

        assert candidates[0].quantity == 7
        assert candidates[0].consolidated_count == 2
