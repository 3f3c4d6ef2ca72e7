"""Summarize parameters of a saved trace from the command line.

Usage:
    tidydraws-summary trace.nc "b[group]" sigma --probs 0.5 0.95 --interval hdi
    python -m tidydraws.cli trace.nc "b[group]" --by group
"""

import argparse
from collections.abc import Sequence

import pandas as pd

from tidydraws.analysis.point_interval import DEFAULT_PROBS, INTERVALS, POINTS, summarize_table
from tidydraws.data.reshape import spread_samples
from tidydraws.data.specs import parse_spec
from tidydraws.data.store import load_store
from tidydraws.errors import TidyDrawsError

LINE_WIDTH = 60


def build_parser() -> argparse.ArgumentParser:
    """Command-line options for the summary tool."""
    parser = argparse.ArgumentParser(description="Summarize posterior draws from a NetCDF trace")
    parser.add_argument("trace", help="NetCDF file written by arviz")
    parser.add_argument("specs", nargs="+", help='Parameter specs, e.g. "b[group]" sigma')
    parser.add_argument("--group", default="posterior", help="InferenceData group to read")
    parser.add_argument(
        "--probs", type=float, nargs="+", default=list(DEFAULT_PROBS), help="Coverage probabilities"
    )
    parser.add_argument("--point", choices=POINTS, default="median", help="Point estimate")
    parser.add_argument("--interval", choices=INTERVALS, default="qi", help="Interval type")
    parser.add_argument("--by", nargs="*", default=None, help="Grouping columns (default: all indices)")
    parser.add_argument("--regex", action="store_true", help="Treat parameter names as regexes")
    parser.add_argument("-v", "--verbose", action="store_true", help="Print the store and row counts")
    return parser


def run(args: argparse.Namespace) -> pd.DataFrame:
    """Load the trace and return the summary table."""
    store = load_store(args.trace, group=args.group)
    specs = [parse_spec(text, regex=args.regex) for text in args.specs]
    draws = spread_samples(store, *specs)
    index_names = list(dict.fromkeys(name for spec in specs for name in spec.index_names))
    values = [
        str(name)
        for name in draws.columns
        if name not in index_names and not str(name).startswith(".")
    ]
    by = index_names if args.by is None else args.by

    if args.verbose:
        print("=" * LINE_WIDTH)
        print(repr(store))
        print(f"Draws table: {len(draws)} rows, {store.nbytes / 1e6:.1f} MB of samples")
        print("=" * LINE_WIDTH)

    return summarize_table(
        draws,
        values,
        by=by,
        probs=args.probs,
        point=args.point,
        interval=args.interval,
    )


def main(argv: Sequence[str] | None = None) -> int:
    """Run the summary tool; returns a process exit code."""
    args = build_parser().parse_args(argv)
    try:
        summary = run(args)
    except (TidyDrawsError, ValueError, OSError) as error:
        print(f"Error: {error}")
        return 1

    with pd.option_context("display.max_rows", None, "display.width", 120):
        print(summary.to_string(index=False))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
