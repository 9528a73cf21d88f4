"""Output contract of the layout builder: cells, rows and the table layout.

Everything here is plain data.  A renderer walks ``TableLayout.header`` and
``TableLayout.body`` in order and emits one element per Cell using
``Cell.attributes()``; it never needs to look at the Data object again.
"""

import math
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any

from flatbread.layout.edges import attribute_dict


class CellKind(str, Enum):
    """What a cell represents; header-like kinds render as <th>, DATA as <td>."""

    COLUMN_GROUP = "column-group"  # spanning column header at a non-leaf level
    COLUMN_LABEL = "column-label"  # leaf column header
    COLUMN_NAME = "column-name"  # name of a column level, above the index columns
    INDEX_NAME = "index-name"  # name of an index level
    INDEX = "index"  # row label (possibly row-spanning)
    SECTION = "section"  # full-width section banner
    DATA = "data"

    @property
    def is_header(self) -> bool:
        return self is not CellKind.DATA


class RowKind(str, Enum):
    HEADER = "header"
    BODY = "body"
    SECTION = "section"


@dataclass
class Cell:
    """One rendered cell and the hooks a renderer needs to style it."""

    kind: CellKind
    text: str
    value: Any = None
    colspan: int = 1
    rowspan: int = 1
    level: int | None = None
    group: int | None = None
    col: int | None = None
    groups: tuple[int, ...] | None = None
    dtype: str | None = None
    index_edge: bool = False
    group_edge: bool = False
    margin_edge_idx: bool = False
    margin_edge_col: bool = False
    css_class: str | None = None

    def attributes(self) -> dict[str, Any]:
        """Return the element attributes (None = omit, bool = bare flag)."""
        return attribute_dict(
            {
                "class": self.css_class,
                "colspan": self.colspan if self.colspan > 1 else None,
                "rowspan": self.rowspan if self.rowspan > 1 else None,
                "data-col": self.col,
                "data-groups": " ".join(str(g) for g in self.groups) if self.groups is not None else None,
                "data-dtype": self.dtype,
                "data-level": self.level,
                "data-group": self.group,
                "index-edge": self.index_edge,
                "group-edge": self.group_edge,
                "margin-edge-idx": self.margin_edge_idx,
                "margin-edge-col": self.margin_edge_col,
            }
        )


@dataclass
class Row:
    kind: RowKind
    cells: list[Cell] = field(default_factory=list)
    level: int | None = None  # section level for SECTION rows

    @property
    def width(self) -> int:
        """Sum of colspans (row-spanned cells from rows above not included)."""
        return sum(cell.colspan for cell in self.cells)


@dataclass
class TableLayout:
    """Complete structural description of one table."""

    header: list[Row] = field(default_factory=list)
    body: list[Row] = field(default_factory=list)
    flags: dict[str, bool] = field(default_factory=dict)
    truncated: bool = False
    total_rows: int = 0
    section_levels: int = 0

    @property
    def rows(self) -> list[Row]:
        return self.header + self.body

    @property
    def section_rows(self) -> list[Row]:
        return [row for row in self.body if row.kind is RowKind.SECTION]

    @property
    def data_rows(self) -> list[Row]:
        return [row for row in self.body if row.kind is RowKind.BODY]

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready representation (enums as their string values)."""
        payload = asdict(self)
        for part in ("header", "body"):
            for row in payload[part]:
                row["kind"] = row["kind"].value
                for cell in row["cells"]:
                    cell["kind"] = cell["kind"].value
                    if cell["groups"] is not None:
                        cell["groups"] = list(cell["groups"])
                    cell["value"] = _json_value(cell["value"])
        return payload


def _json_value(value: Any) -> Any:
    """Make a raw cell / label value JSON serialisable."""
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, (list, tuple)):
        return [_json_value(v) for v in value]
    return str(value)
