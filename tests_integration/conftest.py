"""Integration test fixtures for rendering the bundled sample datasets.

Each run writes to tests_integration/logs/<timestamp>/:
  - run.log        full logging output (INFO+)
  - <dataset>.html one rendered page per dataset and option case

Run with:  pytest tests_integration/ -v
"""

import logging
from datetime import datetime
from pathlib import Path

import pytest
from dotenv import load_dotenv

from flatbread.catalog import Catalog

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).parent.parent.resolve()
LOGS_DIR = Path(__file__).parent / "logs"
DATASETS_DIR = PROJECT_ROOT / "data" / "datasets"

load_dotenv(PROJECT_ROOT / ".env")


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session")
def run_log_dir():
    """Create a timestamped log directory for this test run and attach a file handler."""
    timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
    log_dir = LOGS_DIR / timestamp
    log_dir.mkdir(parents=True, exist_ok=True)

    # Attach a file handler to the root logger so all INFO+ output is captured
    log_file = log_dir / "run.log"
    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    root_logger = logging.getLogger()
    root_logger.addHandler(file_handler)
    root_logger.setLevel(logging.INFO)

    logger.info("Integration test run started. Logs: %s", log_dir)
    yield log_dir

    # Cleanup: remove file handler at end of session
    root_logger.removeHandler(file_handler)
    file_handler.close()


@pytest.fixture(scope="session")
def sample_catalog() -> Catalog:
    """The catalog shipped in data/datasets."""
    return Catalog.from_directory(DATASETS_DIR)


@pytest.fixture(scope="session")
def html_writer(run_log_dir):  # pylint: disable=redefined-outer-name
    """Provide a callable that saves a rendered table page into the run directory."""

    def _write(name: str, html: str) -> Path:
        safe_name = "".join(ch if ch.isalnum() or ch in "-_" else "_" for ch in name)
        path = run_log_dir / f"{safe_name}.html"
        path.write_text(f"<!DOCTYPE html>\n<meta charset=\"utf-8\">\n{html}\n", encoding="utf-8")
        return path

    return _write
