"""
Command-line entry point.

    orbit-trace propagate -t collection.tle -s 1700000000 -e 1700086400 -d 60
    orbit-trace coverage -t collection.tle -s 1700000000 -p 1440 -v
    orbit-trace summary -t tle_collections/ -o database/output.db
    orbit-trace plot propagations/run/25544.prop -o out/25544.html
"""
from __future__ import annotations

import argparse
import logging
import sys
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from orbit_trace.analysis.coverage import check_coverage, largest_epoch_gap_s
from orbit_trace.analysis.element_summary import summarize_tle, write_summary_csv
from orbit_trace.core.errors import CoverageGapError, PropagationError
from orbit_trace.core.propagator import Sgp4Propagator
from orbit_trace.core.tle import iter_tle_files, load_tle_from_file
from orbit_trace.simulation.batch import propagate_catalog
from orbit_trace.simulation.catalog import Catalog
from orbit_trace.simulation.request import PropagationRequest
from orbit_trace.visualization.plotly_viewer import PLOT_KINDS, render_trace
from orbit_trace.visualization.prop_writer import read_prop_file

logger = logging.getLogger(__name__)

DEFAULT_TLE_PATH = "collection.tle"
DEFAULT_SPAN_S = 60000
DEFAULT_STEP_S = 60


def configure_logging(debug: bool = False) -> None:
    """Configure basic console logging."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _positive_int(value: str) -> int:
    try:
        n = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value!r}")
    if n <= 0:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value!r}")
    return n


def _default_output_dir(now: float) -> str:
    stamp = datetime.fromtimestamp(now, tz=timezone.utc).strftime("%Y-%m-%d_%H%M%S")
    return f"propagations/{stamp}"


def _add_window_arguments(p: argparse.ArgumentParser) -> None:
    p.add_argument("-t", "--tle", action="append", metavar="PATH",
                   help=f"TLE file or folder of TLE files (repeatable, default: {DEFAULT_TLE_PATH}).")
    p.add_argument("-s", "--start", type=_positive_int, metavar="UNIX",
                   help="Propagation start time (default: now).")
    p.add_argument("-e", "--end", type=_positive_int, metavar="UNIX",
                   help=f"Propagation end time (default: start + {DEFAULT_SPAN_S}).")
    p.add_argument("-d", "--step", type=_positive_int, default=DEFAULT_STEP_S, metavar="SECONDS",
                   help=f"Seconds between propagation points (default: {DEFAULT_STEP_S}).")
    p.add_argument("-p", "--points", type=_positive_int, metavar="N",
                   help="Number of points to generate (the end time is ignored).")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="orbit-trace",
        description="Stitch historic TLE sets into continuous trajectory traces.",
    )
    parser.add_argument("--debug", action="store_true", help="Debug-level logging.")
    sub = parser.add_subparsers(dest="command", required=True)

    prop = sub.add_parser("propagate", help="Propagate every object found in the TLE files.")
    _add_window_arguments(prop)
    prop.add_argument("-o", "--output", metavar="DIR",
                      help="Results folder (created if missing, default: propagations/<UTC time>).")
    prop.add_argument("-v", "--verbose", action="store_true",
                      help="Print every data point as it is generated.")

    cov = sub.add_parser("coverage", help="Check which objects the element sets cover over the window.")
    _add_window_arguments(cov)
    cov.add_argument("-v", "--verbose", action="store_true",
                     help="List the validity interval of every element set used.")

    summ = sub.add_parser("summary", help="Tabulate the orbital parameters of every TLE.")
    summ.add_argument("-t", "--tle", action="append", metavar="PATH",
                      help="TLE file or folder of TLE files (repeatable, default: tle_collections).")
    summ.add_argument("-o", "--output", metavar="FILE", help="CSV output path.")
    summ.add_argument("-v", "--verbose", action="store_true", help="Print each summary line.")

    plot = sub.add_parser("plot", help="Render a .prop trace to HTML.")
    plot.add_argument("prop_file", help="Path to a .prop file.")
    plot.add_argument("-o", "--output", metavar="FILE", help="HTML output path.")
    plot.add_argument("--kind", choices=PLOT_KINDS, default="ground",
                      help="Ground-track map or 3D orbit (default: ground).")

    return parser


def request_from_args(args: argparse.Namespace, parser: argparse.ArgumentParser,
                      now: Optional[float] = None) -> PropagationRequest:
    now = time.time() if now is None else now
    start = args.start if args.start is not None else int(now)
    if args.points is not None:
        return PropagationRequest.from_points(start, args.step, args.points, verbose=args.verbose)

    end = args.end if args.end is not None else start + DEFAULT_SPAN_S
    if start > end:
        parser.error("start time is after end time")
    return PropagationRequest(start=start, end=end, step=args.step, verbose=args.verbose)


def _fmt_utc(t_unix: int) -> str:
    return datetime.fromtimestamp(t_unix, tz=timezone.utc).strftime("%Y-%m-%d %H:%M:%S")


def cmd_propagate(args: argparse.Namespace, parser: argparse.ArgumentParser) -> int:
    now = time.time()
    request = request_from_args(args, parser, now=now)
    output_dir = args.output or _default_output_dir(now)

    logger.info("T(start): %d (%s UTC)", request.start, _fmt_utc(request.start))
    logger.info("T(end)  : %d (%s UTC)", request.end, _fmt_utc(request.end))
    logger.info("T(step) : %d seconds (%.2f min.)", request.step, request.step / 60.0)
    logger.info("Span    : %.2f hours, %d points", request.span_hours, request.point_count)

    try:
        catalog = Catalog.from_paths(args.tle or [DEFAULT_TLE_PATH])
    except FileNotFoundError as e:
        logger.error("%s", e)
        return 1
    if not len(catalog):
        logger.error("No element sets found")
        return 1

    report = propagate_catalog(catalog, request, output_dir)
    logger.info("Done: %d objects propagated, %d with coverage gaps, %d failed, %d skipped (%s)",
                len(report.completed), len(report.coverage_gaps), len(report.failed),
                len(report.skipped), output_dir)
    return 0 if report.completed or not (report.coverage_gaps or report.failed) else 1


def cmd_coverage(args: argparse.Namespace, parser: argparse.ArgumentParser) -> int:
    request = request_from_args(args, parser)
    try:
        catalog = Catalog.from_paths(args.tle or [DEFAULT_TLE_PATH])
    except FileNotFoundError as e:
        logger.error("%s", e)
        return 1

    gaps = 0
    propagator = Sgp4Propagator()
    for store in catalog.set_list():
        try:
            used = check_coverage(store, request, propagator)
        except CoverageGapError as e:
            gaps += 1
            print(f"{store.sat_id:6d} {store.display_name:<24} GAP  earliest epoch {_fmt_utc(e.earliest_epoch)}")
            continue
        except PropagationError as e:
            gaps += 1
            print(f"{store.sat_id:6d} {store.display_name:<24} FAIL {e}")
            continue
        widest_h = largest_epoch_gap_s(used) / 3600.0
        print(f"{store.sat_id:6d} {store.display_name:<24} OK   {len(used)} element sets, "
              f"widest {widest_h:.1f} h")
        if args.verbose:
            for iv in used:
                end = _fmt_utc(iv.end) if iv.end is not None else "open"
                print(f"{'':6} #{iv.record_index:<4d} {_fmt_utc(iv.start)} -> {end}")

    logger.info("%d objects checked, %d with coverage gaps", len(catalog), gaps)
    return 1 if gaps else 0


def cmd_summary(args: argparse.Namespace) -> int:
    output = args.output or f"database/{datetime.now().strftime('%Y-%m-%d_%H%M%S')}/output.db"
    summaries = []
    try:
        for path in args.tle or ["tle_collections"]:
            for tle_file in iter_tle_files(path):
                for tle in load_tle_from_file(tle_file):
                    try:
                        summaries.append(summarize_tle(tle))
                    except ValueError as e:
                        logger.warning("%s: %d skipped (%s)", tle_file, tle.catalog_number, e)
    except FileNotFoundError as e:
        logger.error("%s", e)
        return 1

    if args.verbose:
        for s in summaries:
            print(",".join(s.as_csv_fields()))

    count = write_summary_csv(summaries, output)
    logger.info("%d element sets summarized into %s", count, output)
    return 0


def cmd_plot(args: argparse.Namespace) -> int:
    metadata, rows = read_prop_file(args.prop_file)
    if not rows:
        logger.error("%s holds no data rows", args.prop_file)
        return 1
    label = Path(args.prop_file).stem
    out_html = args.output or f"out/{label}_{args.kind}.html"
    render_trace(rows, label, out_html=out_html, kind=args.kind)
    logger.info("%d points (step %s s) rendered to %s", len(rows), metadata.get("Time (step)", "?"), out_html)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.debug)

    if args.command == "propagate":
        return cmd_propagate(args, parser)
    if args.command == "coverage":
        return cmd_coverage(args, parser)
    if args.command == "summary":
        return cmd_summary(args)
    return cmd_plot(args)


if __name__ == "__main__":
    sys.exit(main())
