"""Run-length encoding of axis label prefixes into contiguous spans."""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Span:
    """A run of identical label prefixes at one hierarchy level.

    ``value`` is the prefix tuple shared by the run (levels ``0..level``),
    ``group`` is the span's position within its level, assigned in first-seen
    order starting at 0.
    """

    iloc: int
    value: tuple[Any, ...]
    count: int
    group: int

    @property
    def stop(self) -> int:
        """Position one past the end of the run."""
        return self.iloc + self.count

    def contains(self, iloc: int) -> bool:
        """Return True if *iloc* falls inside this run."""
        return self.iloc <= iloc < self.stop


def same_key(left: tuple[Any, ...], right: tuple[Any, ...]) -> bool:
    """Element-wise equality that keeps booleans apart from numbers (``True != 1``)."""
    if len(left) != len(right):
        return False
    return all(isinstance(a, bool) == isinstance(b, bool) and a == b for a, b in zip(left, right))


def contiguous_value_counts(keys: Iterable[tuple[Any, ...]]) -> list[Span]:
    """Reduce a sequence of prefix tuples to spans of contiguous equal tuples.

    Equality is element-wise over the whole prefix, so a run at level 1 never
    crosses a level-0 boundary.  Single linear pass; group ids increase by one
    for every new span.

    >>> [(s.iloc, s.count) for s in contiguous_value_counts([("A",), ("A",), ("B",), ("A",)])]
    [(0, 2), (2, 1), (3, 1)]
    """
    spans: list[Span] = []
    prev: tuple[Any, ...] | None = None
    start = 0
    count = 0

    for idx, cur in enumerate(keys):
        if prev is not None and same_key(cur, prev):
            count += 1
            continue
        # Close the running span before starting a new one
        if prev is not None:
            spans.append(Span(iloc=start, value=prev, count=count, group=len(spans)))
        prev, start, count = cur, idx, 1

    if prev is not None:
        spans.append(Span(iloc=start, value=prev, count=count, group=len(spans)))
    return spans
