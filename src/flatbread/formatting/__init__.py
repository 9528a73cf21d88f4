"""Per-column value formatting.

Submodules:
  presets     -- named option bundles for numeric and temporal columns
  formatters  -- NA detection and Babel-backed number / datetime / text formatting
  dtypes      -- closed DType enum with one mapping to each dtype's formatter and presets
"""

from flatbread.formatting.dtypes import DType, format_value, get_presets_for_type, resolve_dtype, resolve_format_options
from flatbread.formatting.formatters import is_na

__all__ = ["DType", "format_value", "get_presets_for_type", "is_na", "resolve_dtype", "resolve_format_options"]
