"""Axis labels, per-level spans and column attributes.

Submodules:
  spans    -- Span dataclass and contiguous_value_counts run-length encoding (strict key equality)
  axis     -- Axis: normalised labels, spans per level, group edges
  columns  -- Columns: Axis plus dtypes, resolved format options and per-column attrs
"""

from flatbread.axis.axis import Axis
from flatbread.axis.columns import ColumnAttrs, Columns
from flatbread.axis.spans import Span, contiguous_value_counts, same_key

__all__ = ["Axis", "ColumnAttrs", "Columns", "Span", "contiguous_value_counts", "same_key"]
