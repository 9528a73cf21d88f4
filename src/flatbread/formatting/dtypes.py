"""Closed set of column dtypes, each with its formatter and preset table.

A dtype name outside the vocabulary maps to ``DType.OTHER`` (plain string
rendering); a missing dtype maps to ``None`` and the value is passed through.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from flatbread.formatting.formatters import format_datetime, format_number, format_text, is_na
from flatbread.formatting.presets import DATE_PRESETS, NUMBER_PRESETS, Preset

logger = logging.getLogger(__name__)

Formatter = Callable[[Any, dict[str, Any] | None, str | None], str]


class DType(str, Enum):
    """Column data types understood by the formatter."""

    INT = "int"
    FLOAT = "float"
    DATETIME = "datetime"
    OTHER = "other"


@dataclass(frozen=True)
class DTypeSpec:
    """Formatter and named presets for one dtype."""

    formatter: Formatter
    presets: dict[str, Preset]


DTYPE_SPECS: dict[DType, DTypeSpec] = {
    DType.INT: DTypeSpec(format_number, NUMBER_PRESETS),
    DType.FLOAT: DTypeSpec(format_number, NUMBER_PRESETS),
    DType.DATETIME: DTypeSpec(format_datetime, DATE_PRESETS),
    DType.OTHER: DTypeSpec(format_text, {}),
}


def resolve_dtype(name: str | DType | None) -> DType | None:
    """Map a dtype name to DType; unknown names become OTHER, missing stays None."""
    if name is None or name == "":
        return None
    if isinstance(name, DType):
        return name
    try:
        return DType(name)
    except ValueError:
        logger.debug("Unknown dtype %r — rendering as plain text", name)
        return DType.OTHER


def get_presets_for_type(dtype: str | DType | None) -> dict[str, Preset]:
    """Return the preset table for *dtype* (empty when it has none)."""
    resolved = resolve_dtype(dtype)
    if resolved is None:
        return {}
    return DTYPE_SPECS[resolved].presets


def resolve_format_options(dtype: str | DType | None, options: dict[str, Any] | str | None) -> dict[str, Any] | None:
    """Resolve a preset name against *dtype*'s presets; option dicts pass through.

    An unknown preset name yields None so the ambient defaults apply.
    """
    if not isinstance(options, str):
        return options
    preset = get_presets_for_type(dtype).get(options)
    if preset is None:
        logger.warning("No %r format preset for dtype %r — using default options", options, dtype)
        return None
    return dict(preset.options)


def format_value(
    value: Any,
    dtype: str | DType | None,
    options: dict[str, Any] | None,
    locale: str | None,
    na_rep: str,
) -> str:
    """Render one cell value as text.

    null / NaN -> *na_rep* regardless of dtype; no dtype -> the raw value as a
    string; otherwise the dtype's formatter.  A value the formatter cannot
    convert falls back to its string form.
    """
    if is_na(value):
        return na_rep
    resolved = resolve_dtype(dtype)
    if resolved is None:
        return str(value)

    spec = DTYPE_SPECS[resolved]
    try:
        return spec.formatter(value, options, locale)
    except (TypeError, ValueError, ArithmeticError) as exc:
        logger.warning("Could not format %r as %s: %s", value, resolved.value, exc)
        return str(value)
