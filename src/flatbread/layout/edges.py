"""Edge and margin tests plus attribute-dict helpers shared by layout builders.

Free functions rather than builder methods so every layout strategy (and any
renderer) can reuse them.
"""

from collections.abc import Collection, Iterable, Mapping
from typing import Any


def is_margin(label: Any, margin_labels: Collection[Any]) -> bool:
    """Return True if *label* (or any component of a tuple label) is a margin label."""
    if not margin_labels:
        return False
    if isinstance(label, (list, tuple)):
        return any(_member(component, margin_labels) for component in label)
    return _member(label, margin_labels)


def _member(value: Any, margin_labels: Collection[Any]) -> bool:
    # Unhashable components (dicts, lists) can never be margin labels
    try:
        return value in margin_labels
    except TypeError:
        return False


def is_index_edge(iloc: int) -> bool:
    """The first data column borders the index."""
    return iloc == 0


def is_group_edge(iloc: int, edges: Iterable[int]) -> bool:
    """A column starting a span at any level (other than position 0) gets a separator."""
    return iloc != 0 and iloc in edges


def attribute_dict(attributes: Mapping[str, Any]) -> dict[str, Any]:
    """Drop attributes a renderer should omit: None values and False flags."""
    return {key: value for key, value in attributes.items() if value is not None and value is not False}
