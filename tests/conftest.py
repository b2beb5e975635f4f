"""Shared fixtures for pod_orders tests."""

import pytest

from pod_orders.index import build_index
from pod_orders.loaders import process_repository_data
from pod_orders.metrics import QualityMetrics, reset_metrics


@pytest.fixture
def raw_repository():
    """Repository rows as they arrive in data.json (mixed key spellings)."""
    return [
        {
            "ISBN": "9780140000001",
            "Title": "Penguin One",
            "Master Order ID": "SA1657",
            "Status": "POD Ready",
            "Paper Desc": "Cream 80gsm",
            "Trim Height": 198,
            "Trim Width": 129,
        },
        {
            "ISBN": "9780140000002",
            "Title": "Penguin Two",
            "Master Order ID": "SA1700",
            "Status": "MPI",
            "Paper Desc": "White 90gsm",
        },
        {
            "isbn": "9780140000003",
            "title": "Penguin Three",
            "paperDesc": "Bond 70gsm",
        },
        {
            "ISBN": "1E+12",
            "Title": "Scientific Notation Title",
            "Paper Desc": "Cream 80gsm",
        },
    ]


@pytest.fixture
def repository(raw_repository):
    return process_repository_data(raw_repository)


@pytest.fixture
def index(repository):
    return build_index(repository)


@pytest.fixture
def metrics():
    return QualityMetrics()


@pytest.fixture(autouse=True)
def _reset_global_metrics():
    reset_metrics()
    yield
    reset_metrics()


def write_csv(path, text):
    """Write CSV text to a path and return the path."""
    path.write_text(text, encoding="utf-8")
    return path
