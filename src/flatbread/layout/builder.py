"""Layout builders: Data + TableOptions -> TableLayout.

The builder never writes markup.  It walks the spans of a Data snapshot and
emits structural cells (spans, group ids, edge and margin flags, formatted
text); see render.py for the HTML serialisation.

Builders are selected by ``TableOptions.type`` through the BUILDERS registry.
"""

import logging
from dataclasses import dataclass
from typing import Any, Protocol

from flatbread.axis import Axis, Columns, Span
from flatbread.data import Data
from flatbread.formatting import format_value
from flatbread.layout.cells import Cell, CellKind, Row, RowKind, TableLayout
from flatbread.layout.edges import is_group_edge, is_index_edge, is_margin
from flatbread.layout.sections import Banner, clamp_section_levels, partition_sections
from flatbread.schema import StylingOptions, TableOptions

logger = logging.getLogger(__name__)


class LayoutBuilder(Protocol):
    """Anything that turns a Data object into a TableLayout."""

    def build(self, data: Data, options: TableOptions) -> TableLayout: ...


def label_text(value: Any) -> str:
    """Display text of an axis label component."""
    return "" if value is None else str(value)


def resolve_collapse_columns(data: Data, styling: StylingOptions) -> bool:
    """Decide whether the column-name row is folded into the leaf label row.

    An explicit ``collapse_columns`` wins.  Otherwise collapse when there are
    no column names, or when a multi-level column axis has no name for its
    deepest level.
    """
    if styling.collapse_columns is not None:
        return styling.collapse_columns
    names = data.column_names
    if not names:
        return True
    return data.columns.is_multi_index and names[-1] in (None, "")


@dataclass(frozen=True)
class _Context:
    """Per-build settings resolved once from TableOptions."""

    locale: str
    na_rep: str
    margin_labels: frozenset[Any]
    collapse_columns: bool
    merge_leaf_index: bool


class DefaultLayoutBuilder:
    """Pivot-table layout: spanning column headers, row-spanning index cells, optional sections."""

    # ─── Entry Point ──────────────────────────────────────────────────────

    def build(self, data: Data, options: TableOptions) -> TableLayout:
        """Build the layout from a private view of *data*'s current snapshot."""
        source = data.view()
        total_rows = source.index.length

        truncated = options.max_rows is not None and total_rows > options.max_rows
        if truncated:
            source = source.truncate(options.max_rows)

        depth = clamp_section_levels(options.section_levels, source.index)
        context = _Context(
            locale=options.resolved_locale(),
            na_rep=options.na_rep,
            margin_labels=frozenset(options.margin_labels),
            collapse_columns=resolve_collapse_columns(source, options.styling),
            merge_leaf_index=options.merge_leaf_index,
        )

        header = self.build_header(source.view(drop_levels=depth), context)
        if depth:
            body = self.build_sectioned_body(source, depth, context)
        else:
            body = self.build_body(source, context)

        layout = TableLayout(
            header=[row for row in header if row.cells],
            body=body,
            flags=options.styling.flags(),
            truncated=truncated,
            total_rows=total_rows,
            section_levels=depth,
        )
        logger.info(
            "Built layout: %d header rows, %d body rows (%d sections)%s",
            len(layout.header),
            len(layout.data_rows),
            len(layout.section_rows),
            f", truncated {total_rows} -> {source.index.length} rows" if truncated else "",
        )
        return layout

    # ─── Header ───────────────────────────────────────────────────────────

    def build_header(self, data: Data, context: _Context) -> list[Row]:
        """One row per column level (minus the last when collapsed), then the leaf row."""
        columns = data.columns
        if columns.nlevels == 0:
            return [self.build_columns_row(data, context)]

        if columns.is_multi_index:
            levels = columns.ilevels[:-1] if context.collapse_columns else columns.ilevels
            rows = [self.build_column_groups_row(data, level, context) for level in levels]
        else:
            rows = [] if context.collapse_columns else [self.build_column_groups_row(data, 0, context)]

        final = self.build_columns_row(data, context) if context.collapse_columns else self.build_index_names_row(data, context)
        rows.append(final)
        return rows

    def build_column_groups_row(self, data: Data, level: int, context: _Context) -> Row:
        """Column-level name over the index columns, then one spanning cell per span at *level*."""
        cells = []
        if data.index.nlevels:
            name = data.column_names[level] if data.column_names else None
            cells.append(Cell(CellKind.COLUMN_NAME, label_text(name), value=name, colspan=data.index.nlevels, level=level, css_class="columnLabel"))
        cells.extend(self._column_group_cell(span, level, context) for span in data.columns.spans[level])
        return Row(RowKind.HEADER, cells)

    @staticmethod
    def _column_group_cell(span: Span, level: int, context: _Context) -> Cell:
        return Cell(
            CellKind.COLUMN_GROUP,
            label_text(span.value[level]),
            value=span.value[level],
            colspan=span.count,
            level=level,
            group=span.group,
            index_edge=is_index_edge(span.iloc),
            group_edge=span.iloc > 0,
            margin_edge_col=is_margin(span.value, context.margin_labels),
        )

    def build_columns_row(self, data: Data, context: _Context) -> Row:
        """Index names followed by the leaf column labels."""
        return self._header_row(data, context, show_labels=True)

    def build_index_names_row(self, data: Data, context: _Context) -> Row:
        """Index names followed by empty column cells (labels already shown above)."""
        return self._header_row(data, context, show_labels=False)

    def _header_row(self, data: Data, context: _Context, show_labels: bool) -> Row:
        names = data.index_names if data.index_names is not None else (None,) * data.index.nlevels
        cells = [Cell(CellKind.INDEX_NAME, label_text(name), value=name, level=level, css_class="indexLabel") for level, name in enumerate(names)]

        columns = data.columns
        for iloc, label in enumerate(columns):
            attrs = columns.attrs[iloc]
            cells.append(
                Cell(
                    CellKind.COLUMN_LABEL,
                    label_text(label[-1]) if show_labels else "",
                    value=label[-1],
                    col=iloc,
                    groups=attrs.groups,
                    dtype=attrs.dtype,
                    index_edge=is_index_edge(iloc),
                    group_edge=is_group_edge(iloc, columns.edges),
                    margin_edge_col=is_margin(label, context.margin_labels),
                )
            )
        return Row(RowKind.HEADER, cells)

    # ─── Body ─────────────────────────────────────────────────────────────

    def build_sectioned_body(self, data: Data, depth: int, context: _Context) -> list[Row]:
        """Banner rows interleaved with the body rows of each section."""
        width = (data.index.nlevels - depth) + data.columns.length
        rows: list[Row] = []
        for section in partition_sections(data, depth):
            rows.extend(self.build_banner_row(banner, width, context) for banner in section.banners)
            prefix = tuple(data.index[section.iloc][:depth])
            rows.extend(self.build_body(section.data, context, prefix=prefix))
        return rows

    @staticmethod
    def build_banner_row(banner: Banner, width: int, context: _Context) -> Row:
        cell = Cell(
            CellKind.SECTION,
            label_text(banner.label),
            value=banner.label,
            colspan=max(width, 1),
            level=banner.level,
            group=banner.group,
            margin_edge_idx=is_margin(banner.value, context.margin_labels),
        )
        return Row(RowKind.SECTION, [cell], level=banner.level)

    def build_body(self, data: Data, context: _Context, prefix: tuple[Any, ...] = ()) -> list[Row]:
        """Index cells (with row spans) followed by formatted data cells, one Row per data row.

        *prefix* holds the outer index levels dropped by sectioning; margin
        tests run against the full label.
        """
        index_cells = self.build_index_cells(data.index, context, prefix=prefix)
        columns = data.columns
        column_flags = [
            (is_group_edge(iloc, columns.edges), is_margin(label, context.margin_labels)) for iloc, label in enumerate(columns)
        ]

        rows = []
        for irow, values in enumerate(data.values):
            margin_idx = is_margin(prefix + tuple(data.index[irow]), context.margin_labels)
            cells = index_cells[irow]
            for icol, value in enumerate(values):
                attrs = columns.attrs[icol]
                group_edge, margin_col = column_flags[icol]
                cells.append(
                    Cell(
                        CellKind.DATA,
                        format_value(value, attrs.dtype, attrs.format_options, context.locale, context.na_rep),
                        value=value,
                        col=icol,
                        groups=attrs.groups,
                        dtype=attrs.dtype,
                        index_edge=is_index_edge(icol),
                        group_edge=group_edge,
                        margin_edge_idx=margin_idx,
                        margin_edge_col=margin_col,
                    )
                )
            rows.append(Row(RowKind.BODY, cells))
        return rows

    def build_index_cells(self, index: Axis, context: _Context, prefix: tuple[Any, ...] = ()) -> list[list[Cell]]:
        """Per-row index cells, outer levels first.

        The leaf label is placed first; then, deepest spanned level first, each
        span's cell is inserted at the front of its anchor row (the run's first
        row) so outer levels end up to the left.
        """
        rows: list[list[Cell]] = [[] for _ in index.ilocs]
        if index.nlevels == 0:
            return rows

        spanned_levels = list(index.ilevels) if context.merge_leaf_index else list(index.ilevels)[:-1]
        if not context.merge_leaf_index:
            leaf_level = index.nlevels - 1
            for irow, label in enumerate(index):
                rows[irow].append(
                    Cell(
                        CellKind.INDEX,
                        label_text(label[-1]),
                        value=label[-1],
                        level=leaf_level,
                        margin_edge_idx=is_margin(prefix + tuple(label), context.margin_labels),
                    )
                )

        for level in reversed(spanned_levels):
            for span in index.spans[level]:
                rows[span.iloc].insert(
                    0,
                    Cell(
                        CellKind.INDEX,
                        label_text(span.value[level]),
                        value=span.value[level],
                        rowspan=span.count,
                        level=level,
                        group=span.group,
                        margin_edge_idx=is_margin(prefix + span.value, context.margin_labels),
                    ),
                )
        return rows


# ─── Registry ─────────────────────────────────────────────────────────────────

BUILDERS: dict[str, type] = {
    "default": DefaultLayoutBuilder,
}


def create_builder(kind: str) -> LayoutBuilder:
    """Instantiate the builder registered under *kind*."""
    builder_cls = BUILDERS.get(kind)
    if builder_cls is None:
        raise ValueError(f"Unknown table type: {kind!r} (available: {', '.join(sorted(BUILDERS))})")
    return builder_cls()


def build_layout(data: Data, options: TableOptions | dict[str, Any] | None = None) -> TableLayout:
    """Build a TableLayout for *data* with the builder selected by ``options.type``."""
    if options is None:
        options = TableOptions()
    elif not isinstance(options, TableOptions):
        options = TableOptions.model_validate(options)
    return create_builder(options.type).build(data, options)
