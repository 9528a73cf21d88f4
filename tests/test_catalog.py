"""Unit tests for the dataset catalog: ids, filter lookup and cached loading."""

# pylint: disable=missing-class-docstring,missing-function-docstring

import json

import pytest
from helpers import make_record

from flatbread.catalog import Catalog, DatasetEntry, FilterValue, generate_dataset_id


@pytest.fixture
def catalog_dir(tmp_path):
    (tmp_path / "a.json").write_text(json.dumps(make_record(["r1", "r2"], ["x"])), encoding="utf-8")
    (tmp_path / "b.json").write_text(json.dumps(make_record(["r1"], ["x", "y"])), encoding="utf-8")
    spec = {
        "datasets": [
            {"src": "a.json", "label": "A 2024", "filters": {"year": 2024, "region": "EU"}},
            {"src": "b.json", "filters": {"year": 2023, "region": {"value": "EU", "label": "Europe"}}},
            {"id": "custom", "src": "a.json"},
        ]
    }
    (tmp_path / "catalog.json").write_text(json.dumps(spec), encoding="utf-8")
    return tmp_path


class TestFilterValue:

    def test_bare_value(self):
        value = FilterValue.model_validate(2024)
        assert (value.value, value.label) == (2024, 2024)

    def test_value_with_label(self):
        value = FilterValue.model_validate({"value": "EU", "label": "Europe"})
        assert (value.value, value.label) == ("EU", "Europe")


class TestDatasetIds:

    def test_sorted_by_key(self):
        filters = {"year": FilterValue.model_validate(2024), "region": FilterValue.model_validate("EU")}
        assert generate_dataset_id(filters) == "region:EU|year:2024"

    def test_no_filters(self):
        assert generate_dataset_id({}) == "default"

    def test_entry_defaults(self):
        entry = DatasetEntry(src="x.json", filters={"year": 2024})
        assert entry.id == "year:2024"
        assert entry.label == "year:2024"

    def test_matches(self):
        entry = DatasetEntry(src="x.json", filters={"year": 2024, "region": "EU"})
        assert entry.matches({"year": 2024})
        assert not entry.matches({"year": 2023})
        assert not entry.matches({"colour": "red"})


class TestCatalog:

    def test_from_file(self, catalog_dir):
        catalog = Catalog.from_file(catalog_dir / "catalog.json")
        assert [entry.id for entry in catalog.datasets] == ["region:EU|year:2024", "region:EU|year:2023", "custom"]

    def test_default_control_thresholds(self, catalog_dir):
        assert Catalog.from_file(catalog_dir / "catalog.json").control_thresholds == {"radioMaxOptions": 4}

    def test_custom_control_thresholds(self, tmp_path):
        catalog = Catalog({"datasets": [], "controlThresholds": {"radioMaxOptions": 2, "other": 9}}, tmp_path)
        assert catalog.control_thresholds == {"radioMaxOptions": 2, "other": 9}

    def test_find(self, catalog_dir):
        catalog = Catalog.from_directory(catalog_dir)
        assert catalog.find({"year": 2023}).src == "b.json"
        assert catalog.find({"year": 1999}) is None

    def test_filter_options_first_seen(self, catalog_dir):
        options = Catalog.from_directory(catalog_dir).filter_options()
        assert [v.value for v in options["year"]] == [2024, 2023]
        assert [(v.value, v.label) for v in options["region"]] == [("EU", "EU")]

    def test_get_unknown(self, catalog_dir):
        with pytest.raises(KeyError):
            Catalog.from_directory(catalog_dir).get("nope")

    def test_load_is_cached(self, catalog_dir):
        catalog = Catalog.from_directory(catalog_dir)
        first = catalog.load("custom")
        assert first.shape == (2, 1)
        assert catalog.load("custom") is first
        catalog.clear_cache()
        assert catalog.load("custom") is not first

    def test_directory_without_catalog_file(self, catalog_dir):
        (catalog_dir / "catalog.json").unlink()
        catalog = Catalog.from_directory(catalog_dir)
        assert [entry.id for entry in catalog.datasets] == ["a", "b"]
        assert catalog.load("b").shape == (1, 2)
