"""Unit tests for TableView layout caching and invalidation."""

# pylint: disable=missing-class-docstring,missing-function-docstring

from helpers import make_record

from flatbread.data import Data
from flatbread.schema import TableOptions
from flatbread.viewer import TableView


class TestTableView:

    def test_layout_is_cached(self, pivot_data):
        view = TableView(pivot_data)
        first = view.layout
        assert view.layout is first
        assert view.rebuilds == 1
        assert not view.is_stale

    def test_data_change_marks_stale(self, flat_data):
        view = TableView(flat_data)
        _ = view.layout
        flat_data.update_values([[7, 8], [9, 10], [11, 12]])
        assert view.is_stale
        assert view.layout.body[0].cells[1].text == "7"
        assert view.rebuilds == 2

    def test_batch_triggers_one_rebuild(self, flat_data):
        view = TableView(flat_data)
        _ = view.layout
        with flat_data.batch() as update:
            update.index = ["a"]
            update.values = [[1, 2]]
        _ = view.layout
        _ = view.layout
        assert view.rebuilds == 2

    def test_set_options_overrides(self, pivot_data):
        view = TableView(pivot_data)
        view.set_options(section_levels=1)
        assert view.options.section_levels == 1
        assert len(view.layout.section_rows) == 3

    def test_set_options_model(self, pivot_data):
        view = TableView(pivot_data, {"locale": "de_DE"})
        view.set_options(TableOptions(na_rep="?"))
        assert view.options.locale == "default"
        assert view.options.na_rep == "?"

    def test_set_data_detaches_previous(self, flat_data):
        view = TableView(flat_data)
        other = Data(make_record(["z"], ["x", "y"]))
        view.set_data(other)
        _ = view.layout
        flat_data.update_values([[0, 0]] * 3)
        assert not view.is_stale
        assert view.data is other

    def test_close(self, flat_data):
        view = TableView(flat_data)
        _ = view.layout
        view.close()
        flat_data.update_values([[0, 0]] * 3)
        assert not view.is_stale

    def test_without_data(self):
        view = TableView()
        assert view.render() == "<table><thead></thead><tbody></tbody></table>"

    def test_render(self, pivot_data):
        assert "€100.00" in TableView(pivot_data).render()
