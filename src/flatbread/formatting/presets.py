"""Named format-option bundles.

Option keys follow the JSON input contract (camelCase, the same vocabulary as
ECMA-402 number/date formatting options); formatters.py translates them into
Babel calls.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Preset:
    """A labelled, concrete option bag."""

    label: str
    options: dict[str, Any] = field(default_factory=dict)


# ─── Numeric Presets (int, float) ─────────────────────────────────────────────

NUMBER_PRESETS: dict[str, Preset] = {
    "default": Preset("Default"),
    "currency": Preset(
        "Currency (€)",
        {"style": "currency", "currency": "EUR", "minimumFractionDigits": 2, "maximumFractionDigits": 2},
    ),
    "percentage": Preset(
        "Percentage",
        {"style": "percent", "minimumFractionDigits": 1, "maximumFractionDigits": 1},
    ),
    "compact": Preset(
        "Compact",
        {"notation": "compact", "minimumFractionDigits": 1, "maximumFractionDigits": 1},
    ),
}


# ─── Temporal Presets (datetime) ──────────────────────────────────────────────

DATE_PRESETS: dict[str, Preset] = {
    "default": Preset("Default"),
    "date": Preset("Date only", {"dateStyle": "short"}),
    "datetime": Preset("Date & Time", {"dateStyle": "short", "timeStyle": "short"}),
}
