"""Unit tests for contiguous span computation."""

# pylint: disable=missing-class-docstring,missing-function-docstring

from flatbread.axis import Span, contiguous_value_counts, same_key


def runs(keys) -> list[tuple[int, int]]:
    return [(span.iloc, span.count) for span in contiguous_value_counts(keys)]


class TestContiguousValueCounts:

    def test_empty(self):
        assert not contiguous_value_counts([])

    def test_single_key(self):
        spans = contiguous_value_counts([("A",)])
        assert spans == [Span(iloc=0, value=("A",), count=1, group=0)]

    def test_runs_are_contiguous_only(self):
        """A repeated value after a different one starts a new span."""
        assert runs([("A",), ("A",), ("B",), ("A",)]) == [(0, 2), (2, 1), (3, 1)]

    def test_prefix_equality_is_elementwise(self):
        """Same leaf under different parents is not one run."""
        keys = [("A", "x"), ("B", "x")]
        assert runs(keys) == [(0, 1), (1, 1)]

    def test_group_ids_count_up(self):
        spans = contiguous_value_counts([("A",), ("B",), ("B",), ("C",)])
        assert [span.group for span in spans] == [0, 1, 2]

    def test_spans_partition_positions(self):
        keys = [("A",), ("A",), ("B",), ("C",), ("C",), ("C",)]
        spans = contiguous_value_counts(keys)
        assert sum(span.count for span in spans) == len(keys)
        for previous, current in zip(spans, spans[1:]):
            assert previous.stop == current.iloc

    def test_accepts_generator(self):
        assert runs(label[:1] for label in [("A", 1), ("A", 2)]) == [(0, 2)]

    def test_none_components(self):
        assert runs([(None,), (None,), ("A",)]) == [(0, 2), (2, 1)]

    def test_booleans_do_not_merge_with_numbers(self):
        assert runs([(1,), (True,), (True,), (0,), (False,)]) == [(0, 1), (1, 2), (3, 1), (4, 1)]

    def test_int_and_float_merge(self):
        assert runs([(1,), (1.0,)]) == [(0, 2)]


class TestSpan:

    def test_stop(self):
        assert Span(iloc=3, value=("A",), count=2, group=1).stop == 5

    def test_contains(self):
        span = Span(iloc=3, value=("A",), count=2, group=1)
        assert span.contains(3)
        assert span.contains(4)
        assert not span.contains(5)
        assert not span.contains(2)


class TestSameKey:

    def test_equal_tuples(self):
        assert same_key(("A", 1), ("A", 1))

    def test_length_mismatch(self):
        assert not same_key(("A",), ("A", None))

    def test_bool_versus_int(self):
        assert not same_key((1, "a"), (True, "a"))
