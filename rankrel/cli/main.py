"""
rankrel CLI — Consensus Ranking and Source Reliability.

Commands:
    rankrel run --out DIR SRC...        — Execute full pipeline, write outputs
    rankrel consensus SRC...            — Show the consensus ordering
    rankrel summary SRC...              — Show per-source reliability
    rankrel positions NAME SRC...       — Show one source's position sequence

Every command reads its sources fresh; nothing is cached between runs.

Exit codes:
    0 success
    1 unknown source name (positions)
    2 configuration or invalid input
    3 unreadable source file
    4 invariant violation (engine defect)
"""

from __future__ import annotations

import argparse
import sys
from typing import Callable, Optional

from pydantic import ValidationError

from ..config import get_settings
from ..domain import ConsensusEntry, ErrorKind, InversionReport, RankRelError
from ..ingestion.loader import load_sources
from ..logs import LOG_FORMATS, configure_logging
from ..reporting.writer import format_avg_rank, format_reliability, write_outputs
from .pipeline import PipelineResult, run_pipeline

EXIT_OK = 0
EXIT_UNKNOWN_SOURCE = 1

EXIT_CODES = {
    ErrorKind.CONFIGURATION: 2,
    ErrorKind.INVALID_SOURCE: 2,
    ErrorKind.SOURCE_UNREADABLE: 3,
    ErrorKind.INVARIANT_VIOLATION: 4,
}


# =============================================================================
# OUTPUT FORMATTING
# =============================================================================

def format_consensus_row(entry: ConsensusEntry) -> str:
    return (
        f"{entry.combined_position:>5} | {entry.sum_rank:>8} | "
        f"{format_avg_rank(entry.avg_rank):>10} | {entry.item}"
    )


def format_summary_row(report: InversionReport) -> str:
    return (
        f"{report.source_name} | n={report.n} | merge={report.inv_merge} "
        f"bit={report.inv_bit} quick={report.inv_quick} | max={report.max_inv} "
        f"| reliability={format_reliability(report.reliability)}"
    )


def print_statistics(result: PipelineResult) -> None:
    print("STATISTICS:")
    print(f"  Sources:            {result.source_count}")
    print(f"  Unique items:       {result.universe_size}")
    print(f"  Max inversions:     {result.max_inversions}")
    print(f"  Diagnostics:        {len(result.diagnostics)}")


# =============================================================================
# CLI COMMANDS
# =============================================================================

def _execute(args: argparse.Namespace) -> PipelineResult:
    """Load the sources named on the command line and run the pipeline."""
    sources = load_sources(args.sources)
    return run_pipeline(sources, workers=args.workers)


def cmd_run(args: argparse.Namespace) -> int:
    """Execute the full pipeline and write every output file."""
    print("Ranking Reliability Engine")
    print("=" * 50)

    result = _execute(args)
    written = write_outputs(args.out, result.consensus, result.evaluations)

    print_statistics(result)
    print()
    print("RELIABILITY (merge-based):")
    for report in result.reports:
        print(f"  {report.source_name}: {format_reliability(report.reliability)}")
    print()

    if result.diagnostics:
        print("DIAGNOSTICS (informational):")
        for diagnostic in result.diagnostics:
            print(f"  • {diagnostic.message}")
        print()

    print(f"Wrote {len(written)} files under: {args.out}")
    return EXIT_OK


def cmd_consensus(args: argparse.Namespace) -> int:
    """Show the consensus ordering."""
    result = _execute(args)

    print("Consensus Ordering")
    print("=" * 50)
    print(f"{'pos':>5} | {'sum_rank':>8} | {'avg_rank':>10} | item")
    for entry in result.consensus.entries:
        print(format_consensus_row(entry))
    print()
    print(f"Total: {result.universe_size} items from {result.source_count} sources")
    return EXIT_OK


def cmd_summary(args: argparse.Namespace) -> int:
    """Show per-source inversion counts and reliability."""
    result = _execute(args)

    print("Source Reliability")
    print("=" * 70)
    for report in result.reports:
        print(format_summary_row(report))

    if result.diagnostics:
        print()
        print("Diagnostics:")
        for diagnostic in result.diagnostics:
            print(f"  • {diagnostic.message}")
    return EXIT_OK


def cmd_positions(args: argparse.Namespace) -> int:
    """Show the consensus position sequence of one source."""
    result = _execute(args)

    evaluation = result.get_evaluation(args.source_name)
    if evaluation is None:
        print(f"Source not found: {args.source_name}")
        print()
        print("Available sources:")
        for name in result.source_names:
            print(f"  {name}")
        return EXIT_UNKNOWN_SOURCE

    sequence = evaluation.sequence
    print(f"Positions for: {sequence.source_name}")
    print("=" * 50)
    print("index_in_source | combined_position")
    for index, position in enumerate(sequence.values, start=1):
        marker = "" if index <= sequence.listed else "  (appended)"
        print(f"{index:>15} | {position}{marker}")
    return EXIT_OK


# =============================================================================
# MAIN ENTRY POINT
# =============================================================================

def _common_options() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Threads for per-source evaluation (default: RANKREL_WORKERS or 1)",
    )
    common.add_argument(
        "--log-level",
        default=None,
        help="DEBUG, INFO, WARNING or ERROR (default: RANKREL_LOG_LEVEL or WARNING)",
    )
    common.add_argument(
        "--log-format",
        choices=LOG_FORMATS,
        default=None,
        help="Log renderer (default: RANKREL_LOG_FORMAT or console)",
    )
    return common


def create_parser() -> argparse.ArgumentParser:
    """Create the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="rankrel",
        description="Ranking Reliability Engine — consensus fusion and source disagreement",
    )

    subparsers = parser.add_subparsers(
        title="commands",
        description="Available commands",
        dest="command",
    )
    common = _common_options()

    run_parser = subparsers.add_parser(
        "run",
        parents=[common],
        help="Execute the full pipeline and write outputs",
    )
    run_parser.add_argument("--out", required=True, help="Output directory")
    run_parser.add_argument("sources", nargs="+", help="Source list files, best item first")
    run_parser.set_defaults(func=cmd_run)

    consensus_parser = subparsers.add_parser(
        "consensus",
        parents=[common],
        help="Show the consensus ordering",
    )
    consensus_parser.add_argument("sources", nargs="+", help="Source list files")
    consensus_parser.set_defaults(func=cmd_consensus)

    summary_parser = subparsers.add_parser(
        "summary",
        parents=[common],
        help="Show per-source reliability",
    )
    summary_parser.add_argument("sources", nargs="+", help="Source list files")
    summary_parser.set_defaults(func=cmd_summary)

    positions_parser = subparsers.add_parser(
        "positions",
        parents=[common],
        help="Show one source's consensus position sequence",
    )
    positions_parser.add_argument("source_name", help="Source name (file basename)")
    positions_parser.add_argument("sources", nargs="+", help="Source list files")
    positions_parser.set_defaults(func=cmd_positions)

    return parser


def _run_command(func: Callable[[argparse.Namespace], int], args: argparse.Namespace) -> int:
    try:
        return func(args)
    except RankRelError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_CODES[e.kind]


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_OK

    try:
        settings = get_settings(
            workers=args.workers,
            log_level=args.log_level,
            log_format=args.log_format,
        )
    except ValidationError as e:
        print(f"ERROR: invalid settings: {e}", file=sys.stderr)
        return EXIT_CODES[ErrorKind.CONFIGURATION]

    configure_logging(log_level=settings.log_level, log_format=settings.log_format)
    args.workers = settings.workers

    return _run_command(args.func, args)


if __name__ == "__main__":
    sys.exit(main())
