"""Hierarchical (multi-level) table layout for pivot-style HTML tables.

Submodules:
  config      -- .env-driven defaults (locale, NA representation, margin labels, paths)
  errors      -- DataStructureError for fatal structural violations
  schema      -- DataRecord / TableOptions / StylingOptions Pydantic models
  axis        -- Axis, Columns and contiguous span computation
  formatting  -- dtype dispatch, format presets, Babel-backed value formatting
  data        -- Data model with immutable snapshots, batched updates and sliced views
  layout      -- structural table layout (header rows, index spans, sections, edges)
  render      -- HTML serialisation of a TableLayout
  viewer      -- TableView: cached layout rebuilt after data/option changes
  catalog     -- dataset catalog with filter-based lookup
  cli         -- flatbread-render command line entry point
  web         -- FastAPI app serving rendered datasets
"""

from flatbread.data import Data
from flatbread.errors import DataStructureError
from flatbread.layout.builder import build_layout
from flatbread.render import render_html
from flatbread.schema import DataRecord, StylingOptions, TableOptions
from flatbread.viewer import TableView

__all__ = [
    "Data",
    "DataRecord",
    "DataStructureError",
    "StylingOptions",
    "TableOptions",
    "TableView",
    "build_layout",
    "render_html",
]
