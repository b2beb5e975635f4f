"""
Tests for single-title search and statistics.

Run with: pytest tests/test_search.py -v
"""

from pod_orders.index import build_index
from pod_orders.loaders import process_repository_data
from pod_orders.models import LookupMethod
from pod_orders.processor import process_order_rows
from pod_orders.search import find_book
from pod_orders.stats import order_stats, print_order_stats, repository_stats


class TestFindBook:
    def test_by_isbn(self, index):
        result = find_book("9780140000001", index)

        assert result.matched_by is LookupMethod.ISBN
        assert result.book["title"] == "Penguin One"

    def test_by_master_order_id(self, index):
        result = find_book("sa1700", index)

        assert result.matched_by is LookupMethod.MASTER_ORDER_ID
        assert result.book["isbn"] == "9780140000002"

    def test_numeric_master_order_id(self):
        index = build_index(process_repository_data([{"ISBN": "9780140000001", "Master Order ID": "1234567890"}]))

        result = find_book("1234567890", index)

        assert result.matched_by is LookupMethod.MASTER_ORDER_ID

    def test_not_found(self, index):
        assert find_book("9789999999999", index) is None
        assert find_book("nothing", index) is None
        assert find_book("   ", index) is None

    def test_describe(self, index):
        text = find_book("SA1657", index).describe()

        assert "Title: Penguin One" in text
        assert "Found by Master Order ID" in text


class TestStats:
    def test_order_stats(self, index):
        rows = [
            {"ISBN": "9780140000001", "Qty": 3},
            {"ISBN": "9780140000001", "Qty": 4},
            {"ISBN": "9780140000002", "Qty": "0"},
            {"ISBN": "9789999999999", "Qty": 2},
        ]
        stats = order_stats(process_order_rows(rows, index))

        assert stats["total"] == 3
        assert stats["available"] == 2
        assert stats["pod_ready"] == 1
        assert stats["mpi"] == 1
        assert stats["not_available"] == 1
        assert stats["total_quantity"] == 9
        assert stats["zero_quantity"] == 1
        assert stats["consolidated_rows"] == 1
        assert stats["lookup_methods"] == {"isbn": 2, "none": 1}

    def test_empty(self):
        assert order_stats([])["total"] == 0

    def test_print_order_stats_saves_report(self, index, tmp_path):
        lines = process_order_rows([{"ISBN": "9780140000001", "Qty": 3}], index)

        print_order_stats(lines, output_path=tmp_path / "summary.txt")

        assert "1/1 items found" in (tmp_path / "summary.txt").read_text(encoding="utf-8")

    def test_repository_stats(self):
        records = process_repository_data(
            [
                {"ISBN": "9780140000001", "Status": "MPI"},
                {"ISBN": "9780140000001"},
                {"ISBN": "9780140000002"},
                {"ISBN": ""},
            ]
        )

        stats = repository_stats(build_index(records))

        assert stats == {"titles": 4, "pod_ready": 3, "mpi": 1, "duplicates": 1, "without_isbn": 1}
