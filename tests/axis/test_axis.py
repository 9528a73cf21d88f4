"""Unit tests for Axis: label normalisation, per-level spans and edges."""

# pylint: disable=missing-class-docstring,missing-function-docstring

import pytest

from flatbread.axis import Axis
from flatbread.axis.axis import normalize_label
from flatbread.errors import DataStructureError

LABELS = [["A", "x"], ["A", "y"], ["A", "y"], ["B", "z"]]


def span_runs(axis: Axis, level: int) -> list[tuple[int, int]]:
    return [(span.iloc, span.count) for span in axis.spans[level]]


class TestNormalizeLabel:

    def test_scalar_becomes_tuple(self):
        assert normalize_label("a") == ("a",)

    def test_list_becomes_tuple(self):
        assert normalize_label(["a", 1]) == ("a", 1)

    def test_none_is_a_scalar(self):
        assert normalize_label(None) == (None,)


class TestAxisSpans:

    def test_level_zero_spans(self):
        assert span_runs(Axis(LABELS), 0) == [(0, 3), (3, 1)]

    def test_level_one_spans(self):
        assert span_runs(Axis(LABELS), 1) == [(0, 1), (1, 2), (3, 1)]

    def test_edges_are_union_of_span_starts(self):
        assert Axis(LABELS).edges == (0, 1, 3)

    def test_span_values_are_prefixes(self):
        axis = Axis(LABELS)
        assert [span.value for span in axis.spans[0]] == [("A",), ("B",)]
        assert axis.spans[1][1].value == ("A", "y")

    def test_deeper_span_never_crosses_parent_boundary(self):
        axis = Axis([["A", "x"], ["B", "x"], ["B", "x"]])
        assert span_runs(axis, 1) == [(0, 1), (1, 2)]

    def test_single_level(self):
        axis = Axis(["a", "a", "b"])
        assert axis.nlevels == 1
        assert not axis.is_multi_index
        assert span_runs(axis, 0) == [(0, 2), (2, 1)]

    def test_boolean_label_starts_its_own_span(self):
        axis = Axis([[1, "a"], [True, "b"]])
        assert span_runs(axis, 0) == [(0, 1), (1, 1)]
        assert [span.value for span in axis.spans[0]] == [(1,), (True,)]


class TestAxisShape:

    def test_length_and_levels(self):
        axis = Axis(LABELS)
        assert axis.length == len(axis) == 4
        assert axis.nlevels == 2
        assert list(axis.ilevels) == [0, 1]
        assert list(axis.ilocs) == [0, 1, 2, 3]

    def test_empty_axis(self):
        axis = Axis([])
        assert axis.length == 0
        assert axis.nlevels == 0
        assert axis.spans == ()
        assert axis.edges == ()

    def test_label_returns_leaf(self):
        assert Axis(LABELS).label(3) == "z"

    def test_getitem_and_iter(self):
        axis = Axis(LABELS)
        assert axis[1] == ("A", "y")
        assert list(axis)[0] == ("A", "x")

    def test_equality(self):
        assert Axis(LABELS) == Axis([tuple(label) for label in LABELS])
        assert Axis(LABELS) != Axis(LABELS[:2])


class TestAxisValidation:

    def test_ragged_labels(self):
        with pytest.raises(DataStructureError, match="label 1 has 1 levels"):
            Axis([["A", "x"], ["B"]])

    def test_empty_label(self):
        with pytest.raises(DataStructureError, match="empty"):
            Axis([[], []])

    def test_string_is_not_a_label_list(self):
        with pytest.raises(DataStructureError, match="must be a list"):
            Axis("abc")

    def test_data_structure_error_is_value_error(self):
        with pytest.raises(ValueError):
            Axis([["A"], ["A", "x"]])


class TestDerivedAxes:

    def test_drop_levels(self):
        axis = Axis(LABELS).drop_levels(1)
        assert axis.values == (("x",), ("y",), ("y",), ("z",))
        assert span_runs(axis, 0) == [(0, 1), (1, 2), (3, 1)]

    def test_drop_zero_levels_is_a_copy(self):
        axis = Axis(LABELS)
        assert axis.drop_levels(0) == axis

    def test_drop_all_levels_fails(self):
        with pytest.raises(DataStructureError):
            Axis(LABELS).drop_levels(2)

    def test_slice_recomputes_spans(self):
        axis = Axis(LABELS).slice(1, 4)
        assert axis.length == 3
        assert span_runs(axis, 0) == [(0, 2), (2, 1)]
        assert axis.edges == (0, 2)
