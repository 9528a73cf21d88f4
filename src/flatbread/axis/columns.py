"""Column axis with per-column dtype, format options and group membership."""

import bisect
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from flatbread.axis.axis import Axis
from flatbread.errors import DataStructureError
from flatbread.formatting.dtypes import resolve_format_options

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ColumnAttrs:
    """Derived display attributes of one column position."""

    iloc: int
    dtype: str | None
    format_options: dict[str, Any] | None
    groups: tuple[int, ...]  # span group id covering this column, per level


class Columns(Axis):
    """Column labels plus the metadata the formatter and the layout need per position.

    Format options given as preset names are resolved against the column's
    dtype once, at construction.
    """

    def __init__(
        self,
        values: Sequence[Any],
        dtypes: Sequence[str | None] | None = None,
        format_options: Sequence[dict[str, Any] | str | None] | None = None,
    ):
        super().__init__(values, name="columns")
        self._dtypes = self._check_length("dtypes", dtypes)
        self._raw_format_options = self._check_length("format options", format_options)
        self._format_options = self._resolve_format_options()
        self._span_starts = tuple(tuple(span.iloc for span in level) for level in self.spans)
        self._attrs = tuple(self._attrs_for(iloc) for iloc in self.ilocs)

    def _check_length(self, what: str, values: Sequence[Any] | None) -> tuple[Any, ...] | None:
        """Copy optional per-column metadata, rejecting a length mismatch."""
        if values is None:
            return None
        if len(values) != self.length:
            raise DataStructureError(f"{len(values)} {what} given for {self.length} columns")
        return tuple(values)

    def _resolve_format_options(self) -> tuple[dict[str, Any] | None, ...] | None:
        if self._raw_format_options is None:
            return None
        return tuple(resolve_format_options(self.dtype_at(iloc), opt) for iloc, opt in enumerate(self._raw_format_options))

    def _attrs_for(self, iloc: int) -> ColumnAttrs:
        """Build the attrs of one column: the covering span group at every level."""
        groups = []
        for level, starts in zip(self.spans, self._span_starts):
            # Spans partition the axis in order, so the covering span is the last start <= iloc
            groups.append(level[bisect.bisect_right(starts, iloc) - 1].group)
        return ColumnAttrs(
            iloc=iloc,
            dtype=self.dtype_at(iloc),
            format_options=self._format_options[iloc] if self._format_options is not None else None,
            groups=tuple(groups),
        )

    @property
    def dtypes(self) -> tuple[str | None, ...] | None:
        return self._dtypes

    @property
    def raw_format_options(self) -> tuple[dict[str, Any] | str | None, ...] | None:
        """Format options as given (preset names unresolved)."""
        return self._raw_format_options

    @property
    def format_options(self) -> tuple[dict[str, Any] | None, ...] | None:
        """Format options with preset names resolved to concrete option bags."""
        return self._format_options

    @property
    def attrs(self) -> tuple[ColumnAttrs, ...]:
        return self._attrs

    def dtype_at(self, iloc: int) -> str | None:
        return self._dtypes[iloc] if self._dtypes is not None else None

    def slice(self, start: int, stop: int) -> "Columns":
        """Return the columns over positions ``[start, stop)`` with their metadata."""
        dtypes = self._dtypes[start:stop] if self._dtypes is not None else None
        options = self._raw_format_options[start:stop] if self._raw_format_options is not None else None
        return Columns(self.values[start:stop], dtypes, options)

    def drop_levels(self, n: int) -> "Columns":
        """Return the columns with the first *n* label levels removed, metadata kept."""
        if n > 0 and self.values and n >= self.nlevels:
            raise DataStructureError(f"Cannot drop {n} levels from columns with {self.nlevels} levels")
        return Columns([v[n:] for v in self.values] if n > 0 else self.values, self._dtypes, self._raw_format_options)
