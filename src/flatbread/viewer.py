"""TableView: a Data object, render options and the layout cached between changes."""

import logging
from typing import Any

from flatbread.data import Data
from flatbread.layout.builder import build_layout
from flatbread.layout.cells import TableLayout
from flatbread.render import render_html
from flatbread.schema import TableOptions

logger = logging.getLogger(__name__)


class TableView:
    """Keeps a layout in sync with its Data and options.

    The layout is rebuilt lazily: a data change notification or an options
    change only marks the view stale, and the next ``layout`` access rebuilds.
    """

    def __init__(self, data: Data | None = None, options: TableOptions | dict[str, Any] | None = None):
        self._options = self._coerce_options(options)
        self._data: Data | None = None
        self._unsubscribe = None
        self._layout: TableLayout | None = None
        self.rebuilds = 0
        if data is not None:
            self.set_data(data)

    @staticmethod
    def _coerce_options(options: TableOptions | dict[str, Any] | None) -> TableOptions:
        if options is None:
            return TableOptions()
        if isinstance(options, TableOptions):
            return options
        return TableOptions.model_validate(options)

    # ─── State ────────────────────────────────────────────────────────────

    @property
    def data(self) -> Data | None:
        return self._data

    @property
    def options(self) -> TableOptions:
        return self._options

    @property
    def is_stale(self) -> bool:
        """True when the data or options changed since the layout was last built."""
        return self._layout is None

    def set_data(self, data: Data) -> None:
        """Attach *data* (detaching from any previous Data object)."""
        if self._unsubscribe is not None:
            self._unsubscribe()
        self._data = data
        self._unsubscribe = data.subscribe(self._on_data_changed)
        self._invalidate()

    def set_options(self, options: TableOptions | dict[str, Any] | None = None, **overrides: Any) -> None:
        """Replace the options, or update individual fields with keyword overrides."""
        base = self._coerce_options(options) if options is not None else self._options
        if overrides:
            base = TableOptions.model_validate({**base.model_dump(), **overrides})
        self._options = base
        self._invalidate()

    def close(self) -> None:
        """Stop listening to the attached Data object."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _on_data_changed(self, _data: Data, changed: frozenset[str]) -> None:
        logger.debug("Data changed (%s) — layout marked stale", ", ".join(sorted(changed)))
        self._invalidate()

    def _invalidate(self) -> None:
        self._layout = None

    # ─── Output ───────────────────────────────────────────────────────────

    @property
    def layout(self) -> TableLayout:
        """The current layout, rebuilt if stale.  An empty layout when no data is attached."""
        if self._layout is None:
            self._layout = build_layout(self._data, self._options) if self._data is not None else TableLayout()
            self.rebuilds += 1
        return self._layout

    def render(self) -> str:
        """Return the table as HTML."""
        return render_html(self.layout)
