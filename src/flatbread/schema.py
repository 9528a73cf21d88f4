"""Pydantic models for the input record and the per-render options.

DataRecord is the JSON contract loaded from dataset files (camelCase keys,
snake_case also accepted).  TableOptions / StylingOptions configure one layout
build; they are plain value objects and never mutate a Data instance.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from flatbread import config


def label_depth(label: Any) -> int:
    """Number of levels in an axis label (scalars are depth 1)."""
    return len(label) if isinstance(label, (list, tuple)) else 1


class DataRecord(BaseModel):
    """Raw table record: axis labels, the value matrix and optional per-column metadata.

    The model_validator guarantees the value matrix matches both axes, so a
    Data built from a validated record never has to deal with ragged rows.
    Tuple-length consistency of the labels themselves is checked by Axis.
    """

    model_config = ConfigDict(populate_by_name=True)

    columns: list[Any]
    index: list[Any]
    data: list[list[Any]]
    index_names: list[Any] | None = Field(default=None, alias="indexNames")
    column_names: list[Any] | None = Field(default=None, alias="columnNames")
    dtypes: list[str | None] | None = None
    format_options: list[dict[str, Any] | str | None] | None = Field(default=None, alias="formatOptions")

    @model_validator(mode="after")
    def validate_shape(self) -> "DataRecord":
        """Ensure the value matrix and the optional metadata line up with the axes."""
        n_rows, n_cols = len(self.index), len(self.columns)
        if len(self.data) != n_rows:
            raise ValueError(f"data has {len(self.data)} rows, expected {n_rows} (matching index)")
        for i, row in enumerate(self.data):
            if len(row) != n_cols:
                raise ValueError(f"Row {i} has {len(row)} cells, expected {n_cols} (matching columns)")

        # Per-column metadata must cover every column position
        for name, values in (("dtypes", self.dtypes), ("formatOptions", self.format_options)):
            if values is not None and len(values) != n_cols:
                raise ValueError(f"{name} has {len(values)} entries, expected {n_cols} (matching columns)")

        # Level names must match the depth of their axis
        for name, names, labels in (("indexNames", self.index_names, self.index), ("columnNames", self.column_names, self.columns)):
            if names is None or not labels:
                continue
            depth = label_depth(labels[0])
            if len(names) != depth:
                raise ValueError(f"{name} has {len(names)} entries, expected {depth} (one per level)")
        return self


class StylingOptions(BaseModel):
    """Border / hover switches and the column-collapse override."""

    column_borders: bool = True
    row_borders: bool = True
    index_border: bool = True
    thead_border: bool = True
    margin_borders: bool = True
    hover: bool = False
    # None = collapse when column names are missing (see layout.builder.resolve_collapse_columns)
    collapse_columns: bool | None = None

    def flags(self) -> dict[str, bool]:
        """Return the switches as table-level attribute names for the renderer."""
        return {
            "column-borders": self.column_borders,
            "row-borders": self.row_borders,
            "index-border": self.index_border,
            "thead-border": self.thead_border,
            "margin-borders": self.margin_borders,
            "hover": self.hover,
        }


class TableOptions(BaseModel):
    """Options for one layout build."""

    type: str = "default"
    locale: str = "default"
    na_rep: str = Field(default_factory=lambda: config.DEFAULT_NA_REP)
    section_levels: int = Field(default=0, ge=0)
    margin_labels: list[str] = Field(default_factory=lambda: list(config.MARGIN_LABELS))
    max_rows: int | None = Field(default_factory=lambda: config.DEFAULT_MAX_ROWS, ge=0)
    merge_leaf_index: bool = False
    styling: StylingOptions = Field(default_factory=StylingOptions)

    def resolved_locale(self) -> str:
        """Locale identifier with "default" mapped to the configured default."""
        return config.resolve_locale(self.locale)
