"""Shared test configuration and fixtures."""

from pathlib import Path

import pytest
from dotenv import load_dotenv

from flatbread.data import Data
from helpers import make_record

# Load .env from project root for all tests
root = Path(__file__).parent.parent.resolve()
load_dotenv(root / ".env")


@pytest.fixture
def pivot_record() -> dict:
    """Two-level index and two-level columns with names, dtypes and a Total margin."""
    return {
        "columns": [["Revenue", "Q1"], ["Revenue", "Q2"], ["Margin", "Q1"], ["Total", ""]],
        "columnNames": ["measure", "quarter"],
        "index": [["EU", "Germany"], ["EU", "France"], ["US", "Texas"], ["Total", ""]],
        "indexNames": ["region", "country"],
        "data": [
            [100.0, 110.0, 0.25, 210.0],
            [200.0, None, 0.5, 200.0],
            [300.0, 330.0, 0.125, 630.0],
            [600.0, 440.0, 0.3, 1040.0],
        ],
        "dtypes": ["float", "float", "float", "float"],
        "formatOptions": ["currency", "currency", "percentage", None],
    }

@pytest.fixture
def pivot_data(pivot_record) -> Data:
    return Data(pivot_record)

@pytest.fixture
def flat_data() -> Data:
    """Single-level index and columns, no names."""
    return Data(make_record(["a", "b", "c"], ["x", "y"]))
