"""Ordered row or column labels with per-level spans and group edges."""

import logging
from collections.abc import Iterator, Sequence
from typing import Any

from flatbread.axis.spans import Span, contiguous_value_counts
from flatbread.errors import DataStructureError

logger = logging.getLogger(__name__)


def normalize_label(label: Any) -> tuple[Any, ...]:
    """Return *label* as a tuple of levels (scalars become 1-tuples)."""
    if isinstance(label, (list, tuple)):
        return tuple(label)
    return (label,)


class Axis:
    """Immutable sequence of axis labels and the spans derived from them.

    Every label is stored as a tuple with ``nlevels`` components.  ``spans[L]``
    run-length encodes the prefixes ``label[:L + 1]``; ``edges`` is the sorted
    union of every span start across all levels.
    """

    def __init__(self, values: Sequence[Any], name: str = "axis"):
        if isinstance(values, (str, bytes)) or not isinstance(values, Sequence):
            raise DataStructureError(f"{name} labels must be a list, got {type(values).__name__}")
        self._name = name
        self._values = tuple(normalize_label(v) for v in values)
        self._validate()
        self._spans = self._compute_spans()
        self._edges = tuple(sorted({span.iloc for level in self._spans for span in level}))
        logger.debug("Built %s: %d labels, %d levels, %d edges", name, self.length, self.nlevels, len(self._edges))

    def _validate(self) -> None:
        """Fail fast on labels with differing depth."""
        if not self._values:
            return
        depth = len(self._values[0])
        if depth == 0:
            raise DataStructureError(f"{self._name} label 0 is empty; labels need at least one level")
        for iloc, value in enumerate(self._values):
            if len(value) != depth:
                raise DataStructureError(f"{self._name} label {iloc} has {len(value)} levels, expected {depth} (matching label 0)")

    def _compute_spans(self) -> tuple[tuple[Span, ...], ...]:
        """Compute spans independently for every level, shallowest first."""
        return tuple(tuple(contiguous_value_counts(v[: level + 1] for v in self._values)) for level in self.ilevels)

    # ─── Shape ────────────────────────────────────────────────────────────

    @property
    def name(self) -> str:
        return self._name

    @property
    def values(self) -> tuple[tuple[Any, ...], ...]:
        return self._values

    @property
    def length(self) -> int:
        return len(self._values)

    @property
    def nlevels(self) -> int:
        """Depth of every label (0 for an empty axis)."""
        return len(self._values[0]) if self._values else 0

    @property
    def ilevels(self) -> range:
        return range(self.nlevels)

    @property
    def ilocs(self) -> range:
        return range(self.length)

    @property
    def is_multi_index(self) -> bool:
        return self.nlevels > 1

    @property
    def spans(self) -> tuple[tuple[Span, ...], ...]:
        return self._spans

    @property
    def edges(self) -> tuple[int, ...]:
        return self._edges

    def __len__(self) -> int:
        return self.length

    def __iter__(self) -> Iterator[tuple[Any, ...]]:
        return iter(self._values)

    def __getitem__(self, iloc: int) -> tuple[Any, ...]:
        return self._values[iloc]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Axis):
            return NotImplemented
        return self._values == other._values

    def __hash__(self) -> int:
        return hash(self._values)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(length={self.length}, nlevels={self.nlevels})"

    # ─── Lookups ──────────────────────────────────────────────────────────

    def label(self, iloc: int) -> Any:
        """Return the leaf (deepest) component of the label at *iloc*."""
        return self._values[iloc][-1]

    # ─── Derived axes ─────────────────────────────────────────────────────

    def drop_levels(self, n: int) -> "Axis":
        """Return a new Axis without the first *n* levels of every label."""
        if n <= 0:
            return Axis(self._values, name=self._name)
        if self._values and n >= self.nlevels:
            raise DataStructureError(f"Cannot drop {n} levels from {self._name} with {self.nlevels} levels")
        return Axis([v[n:] for v in self._values], name=self._name)

    def slice(self, start: int, stop: int) -> "Axis":
        """Return a new Axis over positions ``[start, stop)``."""
        return Axis(self._values[start:stop], name=self._name)
