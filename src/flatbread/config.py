"""Shared configuration for table layout, formatting and the web viewer.

Values are read once at import time from the environment, after loading the
project-root ``.env`` file.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

ROOT = Path(__file__).parent.parent.parent.resolve()
load_dotenv(ROOT / ".env")


def _split_labels(raw: str) -> tuple[str, ...]:
    """Split a comma-separated env value into stripped, non-empty labels."""
    return tuple(label.strip() for label in raw.split(",") if label.strip())


def _optional_int(raw: str | None) -> int | None:
    """Parse an optional integer env value (empty/unset -> None)."""
    if raw is None or not raw.strip():
        return None
    return int(raw)


# ─── Formatting ───────────────────────────────────────────────────────────────

# Locale used whenever options ask for "default"
DEFAULT_LOCALE = os.getenv("FLATBREAD_LOCALE", "en_US")

# Rendered in place of null / NaN cell values
DEFAULT_NA_REP = os.getenv("FLATBREAD_NA_REP", "-")

# Index/column labels that mark summary rows and columns
MARGIN_LABELS = _split_labels(os.getenv("FLATBREAD_MARGIN_LABELS", "Total,Subtotal"))

# Body rows beyond this are truncated (None = render everything)
DEFAULT_MAX_ROWS = _optional_int(os.getenv("FLATBREAD_MAX_ROWS"))


# ─── Datasets & Web ───────────────────────────────────────────────────────────

DATA_DIR = Path(os.getenv("FLATBREAD_DATA_DIR", str(ROOT / "data" / "datasets")))
CATALOG_FILE = DATA_DIR / "catalog.json"

WEB_HOST = os.getenv("FLATBREAD_HOST", "127.0.0.1")
WEB_PORT = int(os.getenv("FLATBREAD_PORT", "8000"))


def resolve_locale(locale: str | None) -> str:
    """Map ``None``/``"default"`` to DEFAULT_LOCALE and BCP-47 tags to POSIX form."""
    if not locale or locale == "default":
        locale = DEFAULT_LOCALE
    return locale.replace("-", "_")
