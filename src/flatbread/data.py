"""Table data model: axes, value matrix and metadata behind one immutable snapshot.

Every mutation builds a complete new DataSnapshot (new Axis / Columns objects,
spans and attrs recomputed) and swaps it in, then notifies listeners once.
Layout code reads a snapshot, so a layout build never observes a half-applied
update.  Several fields can be changed together through ``Data.batch()``,
which validates, rebuilds and notifies a single time on commit.
"""

import json
import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from flatbread.axis import Axis, Columns
from flatbread.errors import DataStructureError
from flatbread.schema import DataRecord

logger = logging.getLogger(__name__)

# Fields a caller may replace; "values" is the value matrix ("data" in records)
FIELDS = ("columns", "index", "values", "dtypes", "format_options", "index_names", "column_names")

Listener = Callable[["Data", frozenset[str]], None]


def _plain_labels(labels: Any) -> Any:
    """Unwrap Axis objects so they can be re-validated as raw label lists."""
    return list(labels.values) if isinstance(labels, Axis) else labels


def _export_label(label: tuple[Any, ...]) -> Any:
    """Single-level labels export as scalars, multi-level ones as lists."""
    return label[0] if len(label) == 1 else list(label)


@dataclass(frozen=True)
class DataSnapshot:
    """One consistent, immutable state of a Data object."""

    columns: Columns
    index: Axis
    values: tuple[tuple[Any, ...], ...]
    index_names: tuple[Any, ...] | None = None
    column_names: tuple[Any, ...] | None = None

    @property
    def dtypes(self) -> tuple[str | None, ...] | None:
        return self.columns.dtypes

    @property
    def format_options(self) -> tuple[dict[str, Any] | str | None, ...] | None:
        return self.columns.raw_format_options

    def fields(self) -> dict[str, Any]:
        """Return the snapshot as a field dict accepted by build_snapshot."""
        return {
            "columns": self.columns.values,
            "index": self.index.values,
            "values": self.values,
            "dtypes": self.dtypes,
            "format_options": self.format_options,
            "index_names": self.index_names,
            "column_names": self.column_names,
        }


def build_snapshot(fields: dict[str, Any]) -> DataSnapshot:
    """Validate raw fields and build the axes, spans and column attrs.

    Raises DataStructureError for any structural violation.
    """
    try:
        record = DataRecord(
            columns=_plain_labels(fields["columns"]),
            index=_plain_labels(fields["index"]),
            data=fields["values"],
            index_names=fields.get("index_names"),
            column_names=fields.get("column_names"),
            dtypes=fields.get("dtypes"),
            format_options=fields.get("format_options"),
        )
    except ValidationError as exc:
        raise DataStructureError(f"Invalid table record: {exc}") from exc

    columns = Columns(record.columns, record.dtypes, record.format_options)
    index = Axis(record.index, name="index")
    return DataSnapshot(
        columns=columns,
        index=index,
        values=tuple(tuple(row) for row in record.data),
        index_names=tuple(record.index_names) if record.index_names is not None else None,
        column_names=tuple(record.column_names) if record.column_names is not None else None,
    )


class DataUpdate:
    """Buffered field changes applied to a Data object in one commit."""

    def __init__(self, data: "Data"):
        object.__setattr__(self, "_data", data)
        object.__setattr__(self, "_changes", {})
        object.__setattr__(self, "_committed", False)

    def __setattr__(self, name: str, value: Any) -> None:
        if name not in FIELDS:
            raise AttributeError(f"Unknown data field {name!r}; expected one of {', '.join(FIELDS)}")
        self._changes[name] = value

    def set(self, **fields: Any) -> "DataUpdate":
        """Buffer several field changes at once."""
        for name, value in fields.items():
            setattr(self, name, value)
        return self

    @property
    def changes(self) -> dict[str, Any]:
        return dict(self._changes)

    def commit(self) -> None:
        """Apply the buffered changes (one rebuild, one notification)."""
        if self._committed:
            raise RuntimeError("DataUpdate already committed")
        object.__setattr__(self, "_committed", True)
        self._data._apply(self._changes)  # pylint: disable=protected-access


class Data:
    """Rows x columns table with hierarchical index and column axes.

    Construct from a raw record (dict with ``columns``, ``index``, ``data`` and
    the optional ``indexNames``, ``columnNames``, ``dtypes``,
    ``formatOptions``) or a validated DataRecord.
    """

    def __init__(self, record: dict[str, Any] | DataRecord):
        if not isinstance(record, DataRecord):
            if not isinstance(record, dict):
                raise DataStructureError(f"Table record must be a mapping, got {type(record).__name__}")
            try:
                record = DataRecord.model_validate(record)
            except ValidationError as exc:
                raise DataStructureError(f"Invalid table record: {exc}") from exc

        self._snapshot = build_snapshot(
            {
                "columns": record.columns,
                "index": record.index,
                "values": record.data,
                "dtypes": record.dtypes,
                "format_options": record.format_options,
                "index_names": record.index_names,
                "column_names": record.column_names,
            }
        )
        self._listeners: list[Listener] = []
        logger.debug("Data created: %d rows x %d columns", self.index.length, self.columns.length)

    @classmethod
    def _from_snapshot(cls, snapshot: DataSnapshot) -> "Data":
        data = cls.__new__(cls)
        data._snapshot = snapshot  # pylint: disable=protected-access
        data._listeners = []  # pylint: disable=protected-access
        return data

    @classmethod
    def from_json(cls, path: Path | str) -> "Data":
        """Load and validate a record from a JSON file."""
        path = Path(path)
        with open(path, "r", encoding="utf-8") as fopen:
            raw = json.load(fopen)
        data = cls(raw)
        logger.info("Loaded %s: %d rows x %d columns", path.name, data.index.length, data.columns.length)
        return data

    # ─── Snapshot Accessors ───────────────────────────────────────────────

    @property
    def snapshot(self) -> DataSnapshot:
        """The current immutable state; hold on to it for the duration of a layout build."""
        return self._snapshot

    @property
    def columns(self) -> Columns:
        return self._snapshot.columns

    @columns.setter
    def columns(self, value: Any) -> None:
        self.update(columns=value)

    @property
    def index(self) -> Axis:
        return self._snapshot.index

    @index.setter
    def index(self, value: Any) -> None:
        self.update(index=value)

    @property
    def values(self) -> tuple[tuple[Any, ...], ...]:
        return self._snapshot.values

    @values.setter
    def values(self, value: Any) -> None:
        self.update(values=value)

    @property
    def dtypes(self) -> tuple[str | None, ...] | None:
        return self._snapshot.dtypes

    @dtypes.setter
    def dtypes(self, value: Any) -> None:
        self.update(dtypes=value)

    @property
    def format_options(self) -> tuple[dict[str, Any] | str | None, ...] | None:
        return self._snapshot.format_options

    @format_options.setter
    def format_options(self, value: Any) -> None:
        self.update(format_options=value)

    @property
    def index_names(self) -> tuple[Any, ...] | None:
        return self._snapshot.index_names

    @index_names.setter
    def index_names(self, value: Any) -> None:
        self.update(index_names=value)

    @property
    def column_names(self) -> tuple[Any, ...] | None:
        return self._snapshot.column_names

    @column_names.setter
    def column_names(self, value: Any) -> None:
        self.update(column_names=value)

    @property
    def shape(self) -> tuple[int, int]:
        return self.index.length, self.columns.length

    @property
    def is_empty(self) -> bool:
        return self.index.length == 0 or self.columns.length == 0

    def __repr__(self) -> str:
        return f"Data(rows={self.index.length}, columns={self.columns.length}, index_levels={self.index.nlevels}, column_levels={self.columns.nlevels})"

    # ─── Mutation & Notification ──────────────────────────────────────────

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register *listener* for change notifications; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    @contextmanager
    def batch(self) -> Iterator[DataUpdate]:
        """Group several field changes into one rebuild and one notification.

        Changes assigned inside the block are discarded if it raises.

            with data.batch() as update:
                update.index = new_index
                update.values = new_values
        """
        update = DataUpdate(self)
        yield update
        update.commit()

    def update(self, **fields: Any) -> None:
        """Replace one or more fields in a single transaction."""
        with self.batch() as txn:
            txn.set(**fields)

    def update_values(self, values: Any) -> None:
        """Replace the value matrix, keeping both axes.

        Rejects anything that is not a list of rows matching the index length.
        """
        if not isinstance(values, (list, tuple)) or len(values) != self.index.length:
            raise DataStructureError(f"Expected a list of {self.index.length} rows for the new values")
        self.update(values=values)

    def _apply(self, changes: dict[str, Any]) -> None:
        """Build the next snapshot from *changes*, swap it in and notify once."""
        if not changes:
            return
        fields = self._snapshot.fields()
        fields.update(changes)
        self._snapshot = build_snapshot(fields)
        changed = frozenset(changes)
        logger.debug("Data updated (%s): %d rows x %d columns", ", ".join(sorted(changed)), *self.shape)
        for listener in list(self._listeners):
            listener(self, changed)

    # ─── Views ────────────────────────────────────────────────────────────

    def view(self, start: int = 0, stop: int | None = None, drop_levels: int = 0) -> "Data":
        """Return an independent Data over rows ``[start, stop)`` without the first *drop_levels* index levels.

        Columns and their metadata are shared (they are immutable); the view
        has its own listeners and never notifies the parent.
        """
        snapshot = self._snapshot
        stop = snapshot.index.length if stop is None else stop
        index_names = snapshot.index_names[drop_levels:] if snapshot.index_names is not None else None
        return Data._from_snapshot(
            DataSnapshot(
                columns=snapshot.columns,
                index=snapshot.index.slice(start, stop).drop_levels(drop_levels),
                values=snapshot.values[start:stop],
                index_names=index_names,
                column_names=snapshot.column_names,
            )
        )

    def truncate(self, max_rows: int) -> "Data":
        """Return a view over the first *max_rows* rows."""
        return self.view(0, max(0, max_rows))

    # ─── Export ───────────────────────────────────────────────────────────

    def to_record(self) -> dict[str, Any]:
        """Return the data as a JSON-ready camelCase record."""
        snapshot = self._snapshot
        record: dict[str, Any] = {
            "columns": [_export_label(label) for label in snapshot.columns],
            "index": [_export_label(label) for label in snapshot.index],
            "data": [list(row) for row in snapshot.values],
        }
        optional = {
            "indexNames": snapshot.index_names,
            "columnNames": snapshot.column_names,
            "dtypes": snapshot.dtypes,
            "formatOptions": snapshot.format_options,
        }
        record.update({key: list(value) for key, value in optional.items() if value is not None})
        return record
