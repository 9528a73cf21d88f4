"""FastAPI web server for browsing catalog datasets as rendered tables.

Serves every dataset listed in the catalog (``FLATBREAD_DATA_DIR``) as an HTML
table, exposes the structural layout as JSON, and renders ad-hoc records
posted by other tools.

Usage:
    python -m flatbread.web.app
    # => Uvicorn running on http://127.0.0.1:8000
"""

import logging
from contextlib import asynccontextmanager
from html import escape
from typing import Any

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.responses import HTMLResponse, JSONResponse
from pydantic import BaseModel, Field

from flatbread import config
from flatbread.catalog import Catalog
from flatbread.data import Data
from flatbread.errors import DataStructureError
from flatbread.layout.builder import build_layout
from flatbread.render import render_html
from flatbread.schema import DataRecord, StylingOptions, TableOptions

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# In-memory state (catalog and its loaded datasets, reloaded on restart)
# ---------------------------------------------------------------------------

_CATALOG: Catalog | None = None

PAGE_TEMPLATE = """\
<!DOCTYPE html>
<html lang="en">
<head><meta charset="utf-8"><title>{title}</title></head>
<body>
<h1>{title}</h1>
{body}
</body>
</html>
"""


def get_catalog() -> Catalog:
    """Return the active catalog, loading it from DATA_DIR on first use."""
    global _CATALOG  # pylint: disable=global-statement
    if _CATALOG is None:
        _CATALOG = Catalog.from_directory(config.DATA_DIR)
    return _CATALOG


def set_catalog(catalog: Catalog | None) -> None:
    """Swap the active catalog (None = reload from DATA_DIR on next request)."""
    global _CATALOG  # pylint: disable=global-statement
    _CATALOG = catalog


def _load_dataset(dataset_id: str) -> Data:
    """Load a catalog dataset, mapping unknown ids to 404."""
    try:
        return get_catalog().load(dataset_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=f"Unknown dataset: {dataset_id}") from exc


def table_options(
    section_levels: int = Query(0, ge=0),
    locale: str = Query("default"),
    na_rep: str | None = Query(None),
    max_rows: int | None = Query(None, ge=0),
    collapse_columns: bool | None = Query(None),
    merge_leaf_index: bool = Query(False),
) -> TableOptions:
    """Build TableOptions from query parameters (unset ones keep their defaults)."""
    fields: dict[str, Any] = {
        "section_levels": section_levels,
        "locale": locale,
        "merge_leaf_index": merge_leaf_index,
        "styling": StylingOptions(collapse_columns=collapse_columns),
    }
    if na_rep is not None:
        fields["na_rep"] = na_rep
    if max_rows is not None:
        fields["max_rows"] = max_rows
    return TableOptions(**fields)


class RenderRequest(BaseModel):
    """Body of POST /api/render."""

    record: DataRecord
    options: TableOptions = Field(default_factory=TableOptions)


# ---------------------------------------------------------------------------
# FastAPI application
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Load the dataset catalog on server startup."""
    catalog = get_catalog()
    logger.info("Catalog ready — %d datasets from %s", len(catalog.datasets), catalog.base_dir)
    yield


app = FastAPI(title="Flatbread Table Viewer", lifespan=lifespan)


@app.exception_handler(DataStructureError)
async def data_structure_error_handler(_request: Request, exc: DataStructureError):
    """Structural record errors are the client's problem (422), not a server fault."""
    logger.warning("Rejected table record: %s", exc)
    return JSONResponse(status_code=422, content={"detail": str(exc)})


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


@app.get("/", response_class=HTMLResponse)
async def index():
    """List the catalog datasets with links to their rendered tables."""
    catalog = get_catalog()
    items = "".join(f'<li><a href="/datasets/{escape(entry.id)}">{escape(str(entry.label))}</a></li>' for entry in catalog.datasets)
    return HTMLResponse(PAGE_TEMPLATE.format(title="Datasets", body=f"<ul>{items}</ul>"))


@app.get("/api/datasets")
async def list_datasets():
    """Catalog entries, the distinct values of every filter and the control thresholds."""
    catalog = get_catalog()
    return {
        "datasets": [entry.model_dump() for entry in catalog.datasets],
        "filterOptions": {key: [v.model_dump() for v in values] for key, values in catalog.filter_options().items()},
        "controlThresholds": catalog.control_thresholds,
    }


@app.get("/datasets/{dataset_id}", response_class=HTMLResponse)
async def show_dataset(dataset_id: str, options: TableOptions = Depends(table_options)):
    """Render one dataset as an HTML page."""
    data = _load_dataset(dataset_id)
    layout = build_layout(data, options)
    title = escape(str(get_catalog().get(dataset_id).label))
    return HTMLResponse(PAGE_TEMPLATE.format(title=title, body=render_html(layout)))


@app.get("/api/datasets/{dataset_id}/layout")
async def dataset_layout(dataset_id: str, options: TableOptions = Depends(table_options)):
    """Return the structural layout of one dataset as JSON."""
    data = _load_dataset(dataset_id)
    return build_layout(data, options).to_dict()


@app.post("/api/render")
async def render_record(body: RenderRequest):
    """Render a posted record with the posted options."""
    try:
        layout = build_layout(Data(body.record), body.options)
    except DataStructureError:
        raise
    except ValueError as exc:
        # Unknown layout type
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    logger.info("Rendered posted record: %d rows x %d columns", len(body.record.index), len(body.record.columns))
    return {"html": render_html(layout), "truncated": layout.truncated, "totalRows": layout.total_rows}


# ---------------------------------------------------------------------------
# Entrypoint
# ---------------------------------------------------------------------------


def main():
    """Start the web server via uvicorn."""
    import uvicorn  # pylint: disable=import-outside-toplevel

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    uvicorn.run(app, host=config.WEB_HOST, port=config.WEB_PORT)


if __name__ == "__main__":
    main()
