"""Render a table record file to HTML (or layout JSON).

Usage:
    flatbread-render data/datasets/sales.json --section-levels 1 -o sales.html
    flatbread-render data/datasets/sales.json --layout-json
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from flatbread.data import Data
from flatbread.errors import DataStructureError
from flatbread.layout.builder import build_layout
from flatbread.render import render_html
from flatbread.schema import StylingOptions, TableOptions

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="flatbread-render", description="Render a hierarchical table record as HTML.")
    parser.add_argument("input", type=Path, help="JSON record file (columns / index / data ...)")
    parser.add_argument("-o", "--output", type=Path, default=None, help="Write to this file instead of stdout")
    parser.add_argument("--section-levels", type=int, default=0, help="Outer index levels rendered as section banners")
    parser.add_argument("--locale", default="default", help="Locale for number/date formatting, e.g. en_US or de-DE")
    parser.add_argument("--na-rep", default=None, help="Text shown for null / NaN values")
    parser.add_argument("--max-rows", type=int, default=None, help="Truncate the body to this many rows")
    parser.add_argument("--margin-label", action="append", dest="margin_labels", default=None, help="Margin label (repeatable)")
    collapse = parser.add_mutually_exclusive_group()
    collapse.add_argument("--collapse-columns", dest="collapse_columns", action="store_const", const=True, default=None)
    collapse.add_argument("--expand-columns", dest="collapse_columns", action="store_const", const=False)
    parser.add_argument("--merge-leaf-index", action="store_true", help="Row-span repeated leaf index labels too")
    parser.add_argument("--layout-json", action="store_true", help="Print the structural layout as JSON instead of HTML")
    return parser


def options_from_args(args: argparse.Namespace) -> TableOptions:
    """Translate parsed arguments into TableOptions (unset flags keep their defaults)."""
    fields = {
        "locale": args.locale,
        "section_levels": args.section_levels,
        "merge_leaf_index": args.merge_leaf_index,
        "styling": StylingOptions(collapse_columns=args.collapse_columns),
    }
    if args.na_rep is not None:
        fields["na_rep"] = args.na_rep
    if args.max_rows is not None:
        fields["max_rows"] = args.max_rows
    if args.margin_labels is not None:
        fields["margin_labels"] = args.margin_labels
    return TableOptions(**fields)


def run(argv: list[str] | None = None) -> int:
    """Parse *argv*, render, and return the process exit status."""
    args = build_parser().parse_args(argv)
    try:
        data = Data.from_json(args.input)
    except (OSError, json.JSONDecodeError, DataStructureError) as exc:
        logger.error("Cannot load %s: %s", args.input, exc)
        return 1

    layout = build_layout(data, options_from_args(args))
    output = json.dumps(layout.to_dict(), indent=2, ensure_ascii=False) if args.layout_json else render_html(layout)

    if args.output is None:
        sys.stdout.write(output + "\n")
    else:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(output, encoding="utf-8")
        logger.info("Wrote %s (%d chars)", args.output, len(output))
    return 0


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    sys.exit(run())


if __name__ == "__main__":
    main()
