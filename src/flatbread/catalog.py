"""Dataset catalog: record files described by filter values.

A catalog file lists datasets (a ``src`` record file relative to the catalog
directory) tagged with filter values such as ``{"year": 2024, "region":
"EU"}``.  Callers pick a dataset by id or by a combination of filter values.

Catalog JSON::

    {
      "controlThresholds": {"radioMaxOptions": 4},
      "datasets": [
        {"src": "sales_2024.json", "label": "Sales 2024", "filters": {"year": 2024}},
        {"id": "totals", "src": "totals.json"}
      ]
    }
"""

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from flatbread import config
from flatbread.data import Data

logger = logging.getLogger(__name__)

DEFAULT_CONTROL_THRESHOLDS = {"radioMaxOptions": 4}


class FilterValue(BaseModel):
    """A filter value with its display label (label defaults to the value)."""

    value: Any
    label: Any = None

    @model_validator(mode="before")
    @classmethod
    def normalize(cls, data: Any) -> Any:
        """Accept a bare value or a ``{value, label}`` object."""
        if isinstance(data, dict) and "value" in data:
            label = data.get("label")
            return {"value": data["value"], "label": data["value"] if label is None else label}
        return {"value": data, "label": data}


def generate_dataset_id(filters: dict[str, FilterValue]) -> str:
    """Build a stable id from filter values sorted by key, e.g. ``region:EU|year:2024``."""
    if not filters:
        return "default"
    return "|".join(f"{key}:{filters[key].value}" for key in sorted(filters))


class DatasetEntry(BaseModel):
    """One dataset in the catalog."""

    id: str | None = None
    label: str | None = None
    src: str
    filters: dict[str, FilterValue] = Field(default_factory=dict)

    @model_validator(mode="after")
    def fill_defaults(self) -> "DatasetEntry":
        """Generate a missing id from the filters; the label defaults to the id."""
        if not self.id:
            self.id = generate_dataset_id(self.filters)
        if self.label is None:
            self.label = self.id
        return self

    def matches(self, filters: dict[str, Any]) -> bool:
        """Return True if every given filter value equals this dataset's value."""
        for key, value in filters.items():
            own = self.filters.get(key)
            if own is None or own.value != value:
                return False
        return True


class CatalogSpec(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    datasets: list[DatasetEntry] = Field(default_factory=list)
    control_thresholds: dict[str, int] = Field(default_factory=dict, alias="controlThresholds")

    @model_validator(mode="after")
    def merge_thresholds(self) -> "CatalogSpec":
        """Custom thresholds override the defaults key by key."""
        self.control_thresholds = {**DEFAULT_CONTROL_THRESHOLDS, **self.control_thresholds}
        return self


class Catalog:
    """Datasets available to the viewer, with cached loading."""

    def __init__(self, spec: CatalogSpec | dict[str, Any], base_dir: Path | str):
        self.spec = spec if isinstance(spec, CatalogSpec) else CatalogSpec.model_validate(spec)
        self.base_dir = Path(base_dir)
        self._cache: dict[str, Data] = {}

        ids = [entry.id for entry in self.spec.datasets]
        duplicates = sorted({i for i in ids if ids.count(i) > 1})
        if duplicates:
            logger.warning("Duplicate dataset ids in catalog (first one wins): %s", ", ".join(duplicates))

    @classmethod
    def from_file(cls, path: Path | str = config.CATALOG_FILE) -> "Catalog":
        """Load a catalog JSON file; record paths resolve relative to its directory."""
        path = Path(path)
        with open(path, "r", encoding="utf-8") as fopen:
            spec = json.load(fopen)
        catalog = cls(spec, path.parent)
        logger.info("Loaded catalog %s with %d datasets", path, len(catalog.datasets))
        return catalog

    @classmethod
    def from_directory(cls, directory: Path | str = config.DATA_DIR) -> "Catalog":
        """Use ``catalog.json`` in *directory* if present, else one dataset per ``*.json`` file."""
        directory = Path(directory)
        catalog_file = directory / "catalog.json"
        if catalog_file.exists():
            return cls.from_file(catalog_file)
        entries = [{"id": p.stem, "label": p.stem, "src": p.name} for p in sorted(directory.glob("*.json"))]
        logger.info("No catalog.json in %s — using %d record files", directory, len(entries))
        return cls({"datasets": entries}, directory)

    # ─── Lookup ───────────────────────────────────────────────────────────

    @property
    def datasets(self) -> list[DatasetEntry]:
        return self.spec.datasets

    @property
    def control_thresholds(self) -> dict[str, int]:
        return self.spec.control_thresholds

    def get(self, dataset_id: str) -> DatasetEntry:
        """Return the dataset with *dataset_id*; raises KeyError if absent."""
        for entry in self.spec.datasets:
            if entry.id == dataset_id:
                return entry
        raise KeyError(dataset_id)

    def find(self, filters: dict[str, Any]) -> DatasetEntry | None:
        """Return the first dataset matching all *filters*, or None."""
        return next((entry for entry in self.spec.datasets if entry.matches(filters)), None)

    def filter_options(self) -> dict[str, list[FilterValue]]:
        """Distinct values per filter key, in first-seen order."""
        options: dict[str, list[FilterValue]] = {}
        for entry in self.spec.datasets:
            for key, filter_value in entry.filters.items():
                seen = options.setdefault(key, [])
                if all(existing.value != filter_value.value for existing in seen):
                    seen.append(filter_value)
        return options

    # ─── Loading ──────────────────────────────────────────────────────────

    def load(self, dataset_id: str) -> Data:
        """Load (and cache) the Data for *dataset_id*."""
        if dataset_id not in self._cache:
            entry = self.get(dataset_id)
            self._cache[dataset_id] = Data.from_json(self.base_dir / entry.src)
        return self._cache[dataset_id]

    def clear_cache(self) -> None:
        self._cache.clear()
