"""Partition of a table body into nested section banners.

With ``section_levels = k`` the outer ``k`` index levels stop being
row-spanning index columns.  Every run at level ``k - 1`` becomes one section:
the banners it needs (shallower levels only when their value changed since the
previous run) followed by a sliced view of its rows with the first ``k`` index
levels dropped.
"""

import bisect
import logging
from dataclasses import dataclass, field
from typing import Any

from flatbread.axis import Axis, Span, same_key
from flatbread.data import Data

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Banner:
    """A full-width section header for one index level."""

    level: int
    value: tuple[Any, ...]  # index prefix up to and including ``level``
    iloc: int  # first row covered, in the parent data
    count: int  # rows covered
    group: int  # span group id at ``level``

    @property
    def label(self) -> Any:
        return self.value[-1]


@dataclass
class Section:
    """Banners to emit, then the rows of one run at the deepest section level."""

    banners: list[Banner]
    data: Data
    iloc: int  # first row of the run in the parent data

    @property
    def length(self) -> int:
        return self.data.index.length


@dataclass
class _Cursor:
    """Previous run's prefix while walking the section spans."""

    value: tuple[Any, ...] | None = None
    starts: dict[int, list[int]] = field(default_factory=dict)


def clamp_section_levels(requested: int, index: Axis) -> int:
    """Clamp *requested* to ``nlevels - 1`` (at least one index level must remain)."""
    if requested <= 0 or not index.is_multi_index:
        return 0
    clamped = min(requested, index.nlevels - 1)
    if clamped != requested:
        logger.info("section_levels=%d clamped to %d for a %d-level index", requested, clamped, index.nlevels)
    return clamped


def first_changed_level(previous: tuple[Any, ...] | None, current: tuple[Any, ...], depth: int) -> int:
    """Return the shallowest level in ``0..depth - 1`` whose value differs, else *depth*.

    Compares the tuples component by component, which is the "new path" test
    for nested outlines: once level L changes every deeper level is new too.
    """
    if previous is None:
        return 0
    for level in range(depth):
        if not same_key(previous[level : level + 1], current[level : level + 1]):
            return level
    return depth


def _covering_span(index: Axis, cursor: _Cursor, level: int, iloc: int) -> Span:
    """Return the span at *level* that contains row *iloc*."""
    starts = cursor.starts.setdefault(level, [span.iloc for span in index.spans[level]])
    return index.spans[level][bisect.bisect_right(starts, iloc) - 1]


def partition_sections(data: Data, section_levels: int) -> list[Section]:
    """Split *data* into sections for the outer *section_levels* index levels.

    Returns an empty list when no sectioning applies (``section_levels`` of 0
    or a single-level index).  The request is clamped to ``nlevels - 1``.
    """
    index = data.index
    depth = clamp_section_levels(section_levels, index)
    if depth == 0:
        return []

    cursor = _Cursor()
    sections: list[Section] = []
    for span in index.spans[depth - 1]:
        banners = []
        for level in range(first_changed_level(cursor.value, span.value, depth - 1), depth):
            covering = _covering_span(index, cursor, level, span.iloc)
            banners.append(Banner(level=level, value=covering.value, iloc=covering.iloc, count=covering.count, group=covering.group))
        sections.append(Section(banners=banners, data=data.view(span.iloc, span.stop, drop_levels=depth), iloc=span.iloc))
        cursor.value = span.value

    logger.info("Partitioned %d rows into %d sections over %d index levels", index.length, len(sections), depth)
    return sections
