"""Locale-aware value formatting backed by Babel.

Option bags use the ECMA-402 vocabulary of the input records (``style``,
``currency``, ``notation``, ``minimumFractionDigits``, ``dateStyle`` ...) and
are translated here into Babel number patterns and date formats.  Unknown
option keys are ignored.
"""

import copy
import decimal
import logging
import math
from datetime import date, datetime, time, timezone
from functools import lru_cache
from typing import Any

from babel import Locale, UnknownLocaleError
from babel.dates import format_date, format_time, get_datetime_format, get_timezone
from babel.numbers import (
    format_compact_currency,
    format_compact_decimal,
    format_scientific,
    get_currency_precision,
    get_plus_sign_symbol,
)

from flatbread import config

logger = logging.getLogger(__name__)

# roundingMode -> decimal rounding constant (halfExpand is the ECMA-402 default)
_ROUNDING_MODES = {
    "halfExpand": decimal.ROUND_HALF_UP,
    "ceil": decimal.ROUND_CEILING,
    "floor": decimal.ROUND_FLOOR,
    "expand": decimal.ROUND_UP,
    "trunc": decimal.ROUND_DOWN,
}

# "none" is how the format dialog spells "omit this part"
_DATE_STYLES = ("full", "long", "medium", "short")


# ─── Helpers ──────────────────────────────────────────────────────────────────


def is_na(value: Any) -> bool:
    """Return True for null and NaN values (empty strings are real values)."""
    if value is None:
        return True
    if isinstance(value, float):
        return math.isnan(value)
    if isinstance(value, decimal.Decimal):
        return value.is_nan()
    return False


@lru_cache(maxsize=64)
def get_locale(name: str | None) -> Locale:
    """Parse a locale identifier, falling back to the configured default."""
    resolved = config.resolve_locale(name)
    try:
        return Locale.parse(resolved)
    except (UnknownLocaleError, ValueError):
        logger.warning("Unknown locale %r — falling back to %s", name, config.DEFAULT_LOCALE)
        return Locale.parse(config.resolve_locale(None))


def _to_decimal(value: Any) -> decimal.Decimal:
    """Convert a numeric cell value to Decimal, rejecting booleans and non-numbers."""
    if isinstance(value, bool):
        raise TypeError(f"Boolean {value!r} is not a number")
    if isinstance(value, decimal.Decimal):
        return value
    if isinstance(value, (int, float)):
        return decimal.Decimal(str(value))
    if isinstance(value, str):
        return decimal.Decimal(value.strip())
    raise TypeError(f"Cannot format {type(value).__name__} as a number")


def _fraction_digits(options: dict[str, Any], style: str) -> tuple[int, int]:
    """Resolve (minimum, maximum) fraction digits with ECMA-402 style defaults."""
    if style == "currency":
        precision = get_currency_precision(options.get("currency", "EUR"))
        default_min, default_max = precision, precision
    elif style == "percent":
        default_min, default_max = 0, 0
    else:
        default_min, default_max = 0, 3

    minimum = int(options.get("minimumFractionDigits", default_min))
    maximum = int(options.get("maximumFractionDigits", max(default_max, minimum)))
    return minimum, max(minimum, maximum)


# ─── Numbers ──────────────────────────────────────────────────────────────────


def _standard_number(number: decimal.Decimal, options: dict[str, Any], locale: Locale, digits: tuple[int, int]) -> str:
    """Format with the locale's decimal / percent / currency pattern and overridden precision."""
    style = options.get("style", "decimal")
    currency = None

    if style == "percent":
        pattern = copy.copy(locale.percent_formats[None])
    elif style == "currency":
        currency = options.get("currency", "EUR")
        pattern_key = "accounting" if options.get("currencySign") == "accounting" else "standard"
        pattern = copy.copy(locale.currency_formats.get(pattern_key) or locale.currency_formats["standard"])
        # Babel substitutes ¤¤ with the ISO code and ¤¤¤ with the display name
        marker = {"code": "¤¤", "name": "¤¤¤"}.get(options.get("currencyDisplay", "symbol"))
        if marker:
            pattern.prefix = tuple(p.replace("¤", marker) for p in pattern.prefix)
            pattern.suffix = tuple(s.replace("¤", marker) for s in pattern.suffix)
    else:
        pattern = copy.copy(locale.decimal_formats[None])

    pattern.frac_prec = digits
    return pattern.apply(
        number,
        locale,
        currency=currency,
        currency_digits=False,
        group_separator=bool(options.get("useGrouping", True)),
    )


def format_number(value: Any, options: dict[str, Any] | None, locale: str | None) -> str:
    """Format a numeric value for *locale* using an ECMA-402 style option bag.

    Supports ``style`` (decimal / percent / currency), ``currency``,
    ``currencyDisplay``, ``currencySign``, ``notation`` (standard / compact /
    scientific / engineering), ``useGrouping``, ``signDisplay``,
    ``roundingMode`` and the fraction-digit bounds.
    """
    options = options or {}
    babel_locale = get_locale(locale)
    number = _to_decimal(value)

    sign_display = options.get("signDisplay", "auto")
    if sign_display == "never":
        number = abs(number)

    style = options.get("style", "decimal")
    notation = options.get("notation", "standard")
    digits = _fraction_digits(options, style)
    rounding = _ROUNDING_MODES.get(options.get("roundingMode", "halfExpand"), decimal.ROUND_HALF_UP)

    with decimal.localcontext() as ctx:
        ctx.rounding = rounding
        if notation == "compact":
            format_type = options.get("compactDisplay", "short")
            if style == "currency":
                text = format_compact_currency(
                    number, options.get("currency", "EUR"), format_type="short", fraction_digits=digits[1], locale=babel_locale
                )
            else:
                text = format_compact_decimal(number, format_type=format_type, fraction_digits=digits[1], locale=babel_locale)
        elif notation in ("scientific", "engineering"):
            text = format_scientific(number, locale=babel_locale)
        else:
            text = _standard_number(number, options, babel_locale, digits)

    if (sign_display == "always" and number >= 0) or (sign_display == "exceptZero" and number > 0):
        text = get_plus_sign_symbol(babel_locale) + text
    return text


# ─── Dates & Times ────────────────────────────────────────────────────────────


def parse_datetime(value: Any) -> datetime:
    """Coerce a cell value to a datetime.

    Numbers are epoch milliseconds (UTC); strings are ISO 8601 (a trailing
    ``Z`` is accepted); naive values are treated as UTC by Babel.
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time())
    if isinstance(value, bool):
        raise TypeError(f"Boolean {value!r} is not a datetime")
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        return datetime.fromisoformat(text)
    raise TypeError(f"Cannot format {type(value).__name__} as a datetime")


def _style(options: dict[str, Any], key: str) -> str | None:
    """Return a valid date/time style from *options*, or None."""
    style = options.get(key)
    return style if style in _DATE_STYLES else None


def format_datetime(value: Any, options: dict[str, Any] | None, locale: str | None) -> str:
    """Format a date/time value using ``dateStyle`` / ``timeStyle`` / ``timeZone`` options.

    With neither style set, renders a short date followed by a medium time
    (the usual ``toLocaleString`` shape).
    """
    options = options or {}
    babel_locale = get_locale(locale)
    moment = parse_datetime(value)

    if options.get("timeZone") and moment.tzinfo is not None:
        moment = moment.astimezone(get_timezone(options["timeZone"]))

    date_style = _style(options, "dateStyle")
    time_style = _style(options, "timeStyle")
    if date_style is None and time_style is None:
        date_style, time_style = "short", "medium"

    if time_style is None:
        return format_date(moment, date_style, locale=babel_locale)
    if date_style is None:
        return format_time(moment, time_style, locale=babel_locale)

    # Same composition Babel's own format_datetime uses, but with independent styles
    return (
        get_datetime_format(date_style, locale=babel_locale)
        .replace("'", "")
        .replace("{0}", format_time(moment, time_style, locale=babel_locale))
        .replace("{1}", format_date(moment, date_style, locale=babel_locale))
    )


# ─── Text ─────────────────────────────────────────────────────────────────────


def format_text(value: Any, options: dict[str, Any] | None = None, locale: str | None = None) -> str:  # pylint: disable=unused-argument
    """Plain string conversion for categorical / other columns."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
