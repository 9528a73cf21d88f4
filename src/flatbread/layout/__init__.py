"""Structural table layout.

Submodules:
  cells     -- Cell / Row / TableLayout output contract consumed by renderers
  edges     -- margin-label tests, edge flags and attribute-dict helpers
  sections  -- partition of the body into nested section banners and sliced views
  builder   -- LayoutBuilder protocol, DefaultLayoutBuilder and builder registry
"""

from flatbread.layout.builder import BUILDERS, DefaultLayoutBuilder, LayoutBuilder, build_layout, create_builder
from flatbread.layout.cells import Cell, CellKind, Row, RowKind, TableLayout
from flatbread.layout.sections import Banner, Section, partition_sections

__all__ = [
    "BUILDERS",
    "Banner",
    "Cell",
    "CellKind",
    "DefaultLayoutBuilder",
    "LayoutBuilder",
    "Row",
    "RowKind",
    "Section",
    "TableLayout",
    "build_layout",
    "create_builder",
    "partition_sections",
]
