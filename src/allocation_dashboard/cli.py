"""Command-line interface for the allocation dashboard views.

Provides subcommands: `summary`, `top`, `drill`, `gaps` and `export`. Each
command is implemented as a `cmd_*` function that accepts an argparse
namespace and a loaded `DashboardSession`.
"""
from __future__ import annotations

import argparse
import logging

from dotenv import load_dotenv

from allocation_dashboard.aggregate.selection import ASC, DESC, LIMIT_CHOICES, parse_limit
from allocation_dashboard.aggregate.views import format_fill_percent
from allocation_dashboard.config import Settings, get_settings
from allocation_dashboard.ingest.parse_csv import CsvParseError, read_allocation_csv
from allocation_dashboard.logging_config import configure_logging
from allocation_dashboard.models import GroupTotal
from allocation_dashboard.session import DashboardSession

log = logging.getLogger(__name__)


# --------------------------------------------------
# Helpers
# --------------------------------------------------
def _print_totals(title: str, totals: list[GroupTotal]) -> None:
    print(title)
    for g in totals:
        print(f"  {g.key}\t{g.total}")


def _limit(text: str) -> int | None:
    """argparse type for `--limit`: a positive integer or "All"."""
    try:
        return parse_limit(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected a positive integer or 'All', got {text!r}") from None


# --------------------------------------------------
# Commands
# --------------------------------------------------
def cmd_summary(_: argparse.Namespace, session: DashboardSession) -> None:
    """Print the KPI summary for the loaded dataset."""
    views = session.require_views()
    for name, value in views.summary.model_dump().items():
        print(f"{name}: {value}")
    print(f"zero_unit_products: {len(views.zero_unit_products)}")


def cmd_top(args: argparse.Namespace, session: DashboardSession) -> None:
    """Print location or product totals sorted and cut to `--limit`."""
    if args.by == "location":
        _print_totals("Units per location", session.top_locations(args.sort, args.limit))
    else:
        _print_totals("Units per product", session.top_products(args.sort, args.limit))


def cmd_drill(args: argparse.Namespace, session: DashboardSession) -> None:
    """Print the drill-down for one location or one product."""
    if args.location is not None:
        _print_totals(f"Products in {args.location}", session.drill_location(args.location))
    else:
        _print_totals(f"Locations for {args.product}", session.drill_product(args.product))


def cmd_gaps(args: argparse.Namespace, session: DashboardSession) -> None:
    """Print the gap-analysis table."""
    print("product\tunits\tgap\tfill%")
    for r in session.gap_table(args.limit):
        print(f"{r.product}\t{r.units}\t{r.gap}\t{format_fill_percent(r.fill_percent)}")


def cmd_export(args: argparse.Namespace, session: DashboardSession) -> None:
    """Write every view to CSV files in `--out-dir`."""
    written = session.export_all(args.out_dir)
    log.info("Exported %d files", len(written))


COMMANDS = {
    "summary": cmd_summary,
    "top": cmd_top,
    "drill": cmd_drill,
    "gaps": cmd_gaps,
    "export": cmd_export,
}


# --------------------------------------------------
# CLI
# --------------------------------------------------
def build_parser(settings: Settings | None = None) -> argparse.ArgumentParser:
    """Build and return the top-level argument parser for the CLI.

    Every subcommand takes the allocation CSV as its first positional
    argument. Default limits come from `settings`.

    Returns:
        Configured argparse.ArgumentParser instance.
    """
    s = settings or get_settings()
    p = argparse.ArgumentParser(prog="allocation-dashboard")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_summary = sub.add_parser("summary")
    p_summary.add_argument("csv")

    p_top = sub.add_parser("top")
    p_top.add_argument("csv")
    p_top.add_argument("--by", choices=["location", "product"], default="location")
    p_top.add_argument("--sort", choices=[ASC, DESC], default=DESC)
    p_top.add_argument("--limit", type=_limit, default=s.default_top_n, help=f"one of {', '.join(LIMIT_CHOICES)}")

    p_drill = sub.add_parser("drill")
    p_drill.add_argument("csv")
    target = p_drill.add_mutually_exclusive_group(required=True)
    target.add_argument("--location")
    target.add_argument("--product")

    p_gaps = sub.add_parser("gaps")
    p_gaps.add_argument("csv")
    p_gaps.add_argument("--limit", type=_limit, default=s.gap_table_limit)

    p_export = sub.add_parser("export")
    p_export.add_argument("csv")
    p_export.add_argument("--out-dir", default=None)

    return p


def run(argv: list[str] | None = None) -> int:
    """Parse `argv`, load the CSV and dispatch; returns the exit status."""
    settings = get_settings()
    args = build_parser(settings).parse_args(argv)

    try:
        frame = read_allocation_csv(args.csv)
    except CsvParseError as e:
        log.error("%s: %s", args.csv, e)
        return 1

    if len(frame) == 0:
        log.warning("%s has no allocation rows; nothing to report.", args.csv)
        return 0

    session = DashboardSession(settings)
    session.load_frame(frame)
    COMMANDS[args.cmd](args, session)
    return 0


def main() -> None:
    """CLI entry point: load .env, configure logging and dispatch commands."""
    load_dotenv()
    configure_logging(get_settings().log_path)
    raise SystemExit(run())


if __name__ == "__main__":
    main()
