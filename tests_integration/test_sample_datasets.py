"""Render every bundled sample dataset under a grid of layout options.

Checks structural consistency of the produced layout (every header and body
row fills the same number of grid columns once row spans are accounted for)
and saves the rendered HTML for manual inspection.

Run:
    pytest tests_integration/ -v
    pytest tests_integration/ -v -k "sections"     # one option case
"""

import logging
from pathlib import Path

import pytest

from flatbread.catalog import Catalog
from flatbread.layout import build_layout
from flatbread.layout.cells import Row, RowKind, TableLayout
from flatbread.render import render_html

logger = logging.getLogger(__name__)

DATASETS_DIR = Path(__file__).parent.parent / "data" / "datasets"
DATASET_IDS = [entry.id for entry in Catalog.from_directory(DATASETS_DIR).datasets]

# ---------------------------------------------------------------------------
# Option cases: (id, options)
# ---------------------------------------------------------------------------

OPTION_CASES = [
    ("plain", {}),
    ("sections", {"section_levels": 1}),
    ("deep-sections", {"section_levels": 5}),
    ("collapsed", {"styling": {"collapse_columns": True}}),
    ("expanded", {"styling": {"collapse_columns": False}}),
    ("merged-leaf", {"merge_leaf_index": True}),
    ("truncated-de", {"max_rows": 2, "locale": "de_DE", "na_rep": "n/a"}),
]


def grid_widths(rows: list[Row]) -> list[int]:
    """Number of grid columns each row occupies, including cells row-spanned from above."""
    carried: list[int] = []  # remaining rowspan per open cell
    widths = []
    for row in rows:
        spanning = [(cell.rowspan, cell.colspan) for cell in row.cells]
        width = sum(colspan for _, colspan in spanning) + sum(colspan for _, colspan in carried)
        widths.append(width)
        carried = [(remaining - 1, colspan) for remaining, colspan in carried + spanning if remaining > 1]
    return widths


def assert_rectangular(layout: TableLayout):
    widths = set(grid_widths(layout.header))
    body_rows = [row for row in layout.body if row.kind is RowKind.BODY]
    widths |= set(grid_widths(body_rows))
    widths |= {row.width for row in layout.section_rows}
    assert len(widths) <= 1, f"Ragged layout, row widths {sorted(widths)}"


@pytest.mark.parametrize("dataset_id", DATASET_IDS)
@pytest.mark.parametrize("case_id,options", OPTION_CASES, ids=[case[0] for case in OPTION_CASES])
def test_sample_dataset(dataset_id, case_id, options, sample_catalog, html_writer):
    data = sample_catalog.load(dataset_id)
    layout = build_layout(data, options)

    assert_rectangular(layout)
    assert len(layout.data_rows) == min(data.index.length, options.get("max_rows", data.index.length))
    assert layout.truncated == (data.index.length > options.get("max_rows", data.index.length))

    html = render_html(layout)
    assert html.count("<tr") == len(layout.header) + len(layout.body)
    path = html_writer(f"{dataset_id}-{case_id}", html)
    logger.info("Rendered %s (%s): %d header rows, %d body rows -> %s", dataset_id, case_id, len(layout.header), len(layout.body), path.name)
