"""HTML serialisation of a TableLayout.

Produces bare ``<table>`` markup: header-like cells become ``<th>``, data
cells ``<td>``.  Styling switches are emitted as boolean attributes on the
``<table>`` element; no stylesheet is generated.
"""

from html import escape
from typing import Any

from flatbread.layout.cells import Cell, Row, RowKind, TableLayout


def format_attribute(key: str, value: Any) -> str:
    """Render one attribute: True -> bare flag, None/False -> omitted, else key="value"."""
    if value is None or value is False:
        return ""
    if value is True:
        return key
    return f'{key}="{escape(str(value), quote=True)}"'


def build_attribute_string(attributes: dict[str, Any]) -> str:
    """Join the non-empty rendered attributes with single spaces."""
    return " ".join(part for part in (format_attribute(k, v) for k, v in attributes.items()) if part)


def _open_tag(tag: str, attributes: dict[str, Any]) -> str:
    attribute_string = build_attribute_string(attributes)
    return f"<{tag} {attribute_string}>" if attribute_string else f"<{tag}>"


def render_cell(cell: Cell) -> str:
    tag = "th" if cell.kind.is_header else "td"
    return f"{_open_tag(tag, cell.attributes())}{escape(cell.text)}</{tag}>"


def render_row(row: Row) -> str:
    attributes = {"class": "section" if row.kind is RowKind.SECTION else None, "data-level": row.level}
    return f"{_open_tag('tr', attributes)}{''.join(render_cell(cell) for cell in row.cells)}</tr>"


def render_html(layout: TableLayout) -> str:
    """Serialise *layout* to a ``<table>`` element string."""
    table_attributes: dict[str, Any] = dict(layout.flags)
    table_attributes["data-truncated"] = True if layout.truncated else None
    thead = "".join(render_row(row) for row in layout.header)
    tbody = "".join(render_row(row) for row in layout.body)
    return f"{_open_tag('table', table_attributes)}<thead>{thead}</thead><tbody>{tbody}</tbody></table>"
