"""Seamark filter — add light sectors and arcs to the seamarks of an OSM file.

Reads an OSM/XML document and writes it back unchanged, followed after every
seamark node by the nodes and ways of its light sectors.  Problems with
individual sectors are logged (see ``-l``) and the sector is skipped.

Usage:
    uv run python scripts/filter_seamarks.py < input.osm > output.osm
    uv run python scripts/filter_seamarks.py -c -l stderr input.osm output.osm
    uv run python scripts/filter_seamarks.py -a 0 -r 0.5 -U input.osm output.osm

Defaults can be set in a ``.env`` file via ``SEAMARK_*`` variables
(e.g. ``SEAMARK_SECTOR_RADIUS=0.5``); command-line options win.
"""

from __future__ import annotations

import argparse
import logging
import sys

from dotenv import load_dotenv

load_dotenv()

from lxml import etree  # noqa: E402

from seamark_sectors.config.settings import ProcessingConfig, ProcessingContext  # noqa: E402
from seamark_sectors.osm.filter import SeamarkFilter  # noqa: E402
from seamark_sectors.pipeline.processor import FeatureProcessor  # noqa: E402

_LOG_HEADER = (
    "# Seamark filter log file. Each line names the sector and node the "
    "problem was found in."
)


def _build_parser(defaults: ProcessingConfig) -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Add light sectors and arcs to seamarks")
    ap.add_argument("input", nargs="?", help="Input OSM file (default: stdin)")
    ap.add_argument("output", nargs="?", help="Output OSM file (default: stdout)")
    ap.add_argument(
        "-a", dest="arc_max", type=float, default=defaults.arc_max,
        help=f"Maximum arc segment distance in nm, 0 = unlimited (default {defaults.arc_max:.2f})",
    )
    ap.add_argument(
        "-b", dest="dir_arc", type=float, default=defaults.dir_arc,
        help=f"Degrees (+/-) of arc for directional lights (default {defaults.dir_arc:.1f})",
    )
    ap.add_argument(
        "-c", dest="light_character", action="store_true", default=defaults.light_character,
        help="Generate nodes with 'seamark:light_character' tag",
    )
    ap.add_argument(
        "-d", dest="arc_div", type=float, default=defaults.arc_div,
        help=f"Arc divisor (default {defaults.arc_div:.2f})",
    )
    ap.add_argument(
        "-H", dest="parse_hints", action="store_true", default=defaults.parse_hints,
        help="Parse renderer hint (seamark:light:#=<col>:<start>:<end>:<r>)",
    )
    ap.add_argument(
        "-i", dest="first_id", type=int, default=defaults.first_id,
        help=f"First id for numbering new nodes (default {defaults.first_id})",
    )
    ap.add_argument(
        "-l", dest="log_file",
        help='Write errors to this file; use "stderr" for standard error',
    )
    ap.add_argument(
        "-r", dest="sector_radius", type=float, default=defaults.sector_radius,
        help=f"Default radius in nm (default {defaults.sector_radius:.2f})",
    )
    ap.add_argument(
        "-S", dest="render_sectors", action="store_false", default=defaults.render_sectors,
        help="Do not render sectors",
    )
    ap.add_argument(
        "-U", dest="untagged_circle", action="store_true", default=defaults.untagged_circle,
        help="Render a circle if a sector has neither start nor end angle",
    )
    ap.add_argument(
        "--simple-radius", dest="extended_radius", action="store_false",
        default=defaults.extended_radius,
        help="Treat 'radius' as a single number instead of a segment list",
    )
    ap.add_argument(
        "--unsectored-radius", dest="unsectored_radius", action="store_true",
        default=defaults.unsectored_radius,
        help="Honour seamark:light:radius on lights without sectors",
    )
    ap.add_argument("--verbose", action="store_true", help="Log progress to stderr")
    return ap


def _setup_logging(log_file: str | None, verbose: bool) -> None:
    root = logging.getLogger()
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)
    if log_file is None and not verbose:
        root.addHandler(logging.NullHandler())
        return

    if log_file is None or log_file == "stderr":
        handler: logging.Handler = logging.StreamHandler(sys.stderr)
    else:
        handler = logging.FileHandler(log_file, mode="w", encoding="utf-8")
    handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
    root.addHandler(handler)
    if log_file is not None:
        handler.stream.write(_LOG_HEADER + "\n")


def main() -> None:
    try:
        defaults = ProcessingConfig.from_env()
    except ValueError as exc:
        print(f"*** {exc}", file=sys.stderr)
        sys.exit(1)

    args = _build_parser(defaults).parse_args()

    try:
        _setup_logging(args.log_file, args.verbose)
    except OSError as exc:
        print(f"*** Cannot open file '{args.log_file}': {exc}", file=sys.stderr)
        sys.exit(1)

    try:
        config = ProcessingConfig(
            arc_max=args.arc_max,
            dir_arc=args.dir_arc,
            light_character=args.light_character,
            arc_div=args.arc_div,
            parse_hints=args.parse_hints,
            first_id=args.first_id,
            sector_radius=args.sector_radius,
            render_sectors=args.render_sectors,
            untagged_circle=args.untagged_circle,
            extended_radius=args.extended_radius,
            unsectored_radius=args.unsectored_radius,
        )
    except ValueError as exc:
        print(f"*** {exc}", file=sys.stderr)
        sys.exit(1)

    context = ProcessingContext(config)
    source = args.input or sys.stdin.buffer
    sink = args.output or sys.stdout.buffer

    try:
        stats = SeamarkFilter(FeatureProcessor(context)).run(source, sink)
    except (OSError, etree.XMLSyntaxError) as exc:
        print(f"*** {exc}", file=sys.stderr)
        sys.exit(1)

    if args.verbose:
        print(
            f"[OK] {stats.seamarks} seamarks, {stats.generated} generated elements, "
            f"{len(context.diagnostics)} diagnostics, next free id {context.peek_id}",
            file=sys.stderr,
        )


if __name__ == "__main__":
    main()
