"""
Tests for the order session (upload, edit, view, export).

Run with: pytest tests/test_session.py -v
"""

from datetime import date, datetime

import pandas as pd
import pytest

from pod_orders.metrics import QualityMetrics
from pod_orders.models import StatusFilter
from pod_orders.session import OrderSession
from pod_orders.validators import UploadParseError, UploadValidationError

from conftest import write_csv


@pytest.fixture
def session(repository):
    session = OrderSession(metrics=QualityMetrics())
    session.load_repository(repository)
    return session


@pytest.fixture
def order_file(tmp_path):
    return write_csv(
        tmp_path / "order.csv",
        "ISBN,Qty,Master\n"
        "9780140000001,3,\n"
        "9780140000001,4,\n"
        "9789999999999,2,\n"
        ",1,SA1700\n"
        "9780140000003,5,\n",
    )


class TestUpload:
    def test_upload(self, session, order_file):
        message = session.upload(order_file, "PO-1")

        assert [line.line_number for line in session.lines] == ["001", "002", "003", "004"]
        assert session.lines[0].quantity == 7
        assert session.lines[0].consolidated_count == 2
        assert session.order_ref == "PO-1"
        assert message == "Data loaded successfully! 3/4 items found in repository (2 POD Ready, 1 MPI, 1 Not Available)."

    def test_upload_excel(self, session, tmp_path):
        path = tmp_path / "order.xlsx"
        pd.DataFrame([{"ISBN": 9780140000002, "Qty": 2}, {"ISBN": 9780140000002, "Qty": 1}]).to_excel(path, index=False)

        session.upload(path, "PO-2")

        assert len(session.lines) == 1
        assert session.lines[0].quantity == 3
        assert session.lines[0].status == "MPI"

    def test_failed_upload_keeps_previous_batch(self, session, order_file, tmp_path):
        session.upload(order_file, "PO-1")
        before = list(session.lines)

        with pytest.raises(UploadValidationError):
            session.upload(tmp_path / "missing.csv", "PO-2")
        with pytest.raises(UploadValidationError):
            session.upload(order_file, "  ")

        broken = tmp_path / "broken.xlsx"
        broken.write_bytes(b"not a workbook")
        with pytest.raises(UploadParseError):
            session.upload(broken, "PO-3")

        assert session.lines == before
        assert session.order_ref == "PO-1"

    def test_upload_resets_view(self, session, order_file):
        session.upload(order_file, "PO-1")
        session.toggle_paper_sort()
        session.set_status_filter(StatusFilter.MPI)

        session.upload(order_file, "PO-2")

        assert not session.sorted_by_paper
        assert not session.order_filter.is_active
        assert session.lines[0].isbn == "9780140000001"

    def test_metrics_collected(self, session, order_file):
        session.upload(order_file, "PO-1")

        assert session.metrics.rows_total == 5
        assert session.metrics.rows_consolidated == 1

    def test_clear(self, session, order_file):
        session.upload(order_file, "PO-1")
        session.set_paper_filter("Bond 70gsm")
        session.clear()

        assert session.lines == []
        assert not session.order_filter.is_active


class TestEditsAndViews:
    def test_delete_renumbers(self, session, order_file):
        session.upload(order_file, "PO-1")
        third = session.lines[2]

        session.delete_line_number("002")

        assert third.line_number == "002"
        assert len(session.lines) == 3

    def test_delete_unknown_line_number(self, session, order_file):
        session.upload(order_file, "PO-1")
        with pytest.raises(KeyError):
            session.delete_line_number("099")

    def test_delete_many(self, session, order_file):
        session.upload(order_file, "PO-1")
        assert session.delete_many([0, 1]) == 2
        assert [line.line_number for line in session.lines] == ["001", "002"]

    def test_status_filters_exclusive(self, session, order_file):
        session.upload(order_file, "PO-1")

        session.set_status_filter(StatusFilter.MPI)
        session.set_status_filter(StatusFilter.NOT_AVAILABLE)

        assert [line.requested_isbn for line in session.visible_lines()] == ["9789999999999"]

    def test_paper_and_status_combined(self, session, order_file):
        session.upload(order_file, "PO-1")

        session.set_status_filter(StatusFilter.POD_READY)
        session.set_paper_filter("Bond 70gsm")

        assert [line.isbn for line in session.visible_lines()] == ["9780140000003"]

        session.set_status_filter(None)
        session.set_paper_filter(None)
        assert len(session.visible_lines()) == 4

    def test_toggle_paper_sort(self, session, order_file):
        session.upload(order_file, "PO-1")

        assert session.toggle_paper_sort() is True
        assert session.lines[0].paper_desc == "Bond 70gsm"
        assert session.toggle_paper_sort() is False
        assert session.lines[0].isbn == "9780140000001"

    def test_summary(self, session, order_file):
        session.upload(order_file, "PO-1")
        session.set_status_filter(StatusFilter.MPI)

        summary = session.summary()

        assert summary["total"] == 4
        assert summary["available"] == 3
        assert summary["visible"] == 1
        assert summary["total_quantity"] == 7 + 2 + 1 + 5
        assert summary["filter"] == "Showing 1 MPI items"


class TestExport:
    def test_export_ignores_filter(self, session, order_file, tmp_path):
        session.upload(order_file, "PO-1")
        session.set_status_filter(StatusFilter.MPI)

        path = session.export_csv(tmp_path, export_date=date(2024, 3, 1), now=datetime(2024, 3, 1, 10, 0, 0))

        assert path == tmp_path / "pod_order_2024_03_01_10_00_00.csv"
        rows = path.read_text(encoding="utf-8").splitlines()
        assert len(rows) == 4  # Header and three available lines
        assert rows[1] == "DTL,PO-1,001,9780140000001,7"
        assert all("9789999999999" not in row for row in rows)

    def test_export_nothing_loaded(self, session, tmp_path):
        assert session.export_csv(tmp_path) is None

    def test_export_refused(self, session, tmp_path):
        path = write_csv(tmp_path / "order.csv", "ISBN,Qty\n9789999999999,1\n")
        session.upload(path, "PO-1")

        assert session.export_csv(tmp_path / "out") is None
        assert not (tmp_path / "out").exists()
