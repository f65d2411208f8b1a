"""
Report Writers for the Ranking Reliability Engine.

Files written to the output directory:
    combined_order.csv          — position,item,sum_rank,avg_rank
    inversions_summary.csv      — source,n,inv_merge,inv_bit,inv_quick,max_inv,reliability
    <source_name>_positions.csv — index_in_source,combined_position
    report.md                   — methodology and results table

Row builders return plain records with typed values; numeric precision
(4 decimals for avg_rank, 6 for reliability) is applied only when writing.
"""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Any, Sequence, Union

from ..domain import Consensus, Diagnostic, InversionReport, PositionSequence
from ..logs import get_logger
from ..reliability.scorer import SourceEvaluation, max_inversions

logger = get_logger(__name__)

PathLike = Union[str, Path]

AVG_RANK_PRECISION = 4
RELIABILITY_PRECISION = 6

COMBINED_ORDER_FILE = "combined_order.csv"
SUMMARY_FILE = "inversions_summary.csv"
REPORT_FILE = "report.md"
POSITIONS_SUFFIX = "_positions.csv"

CONSENSUS_FIELDS = ["position", "item", "sum_rank", "avg_rank"]
SUMMARY_FIELDS = ["source", "n", "inv_merge", "inv_bit", "inv_quick", "max_inv", "reliability"]
POSITION_FIELDS = ["index_in_source", "combined_position"]


# =============================================================================
# NUMBER FORMATTING
# =============================================================================

def format_avg_rank(value: float) -> str:
    return f"{value:.{AVG_RANK_PRECISION}f}"


def format_reliability(value: float) -> str:
    return f"{value:.{RELIABILITY_PRECISION}f}"


# =============================================================================
# ROW BUILDERS
# =============================================================================

def consensus_rows(consensus: Consensus) -> list[dict[str, Any]]:
    return [
        {
            "position": entry.combined_position,
            "item": entry.item,
            "sum_rank": entry.sum_rank,
            "avg_rank": entry.avg_rank,
        }
        for entry in consensus.entries
    ]


def summary_rows(reports: Sequence[InversionReport]) -> list[dict[str, Any]]:
    return [
        {
            "source": report.source_name,
            "n": report.n,
            "inv_merge": report.inv_merge,
            "inv_bit": report.inv_bit,
            "inv_quick": report.inv_quick,
            "max_inv": report.max_inv,
            "reliability": report.reliability,
        }
        for report in reports
    ]


def position_rows(sequence: PositionSequence) -> list[dict[str, Any]]:
    return [
        {"index_in_source": index, "combined_position": position}
        for index, position in enumerate(sequence.values, start=1)
    ]


# =============================================================================
# CSV WRITERS
# =============================================================================

def _write_csv(path: Path, fields: list[str], rows: list[dict[str, Any]]) -> Path:
    with path.open("w", encoding="utf-8", newline="") as fh:
        writer = csv.DictWriter(fh, fieldnames=fields, lineterminator="\n")
        writer.writeheader()
        writer.writerows(rows)
    return path


def write_combined_order(path: PathLike, consensus: Consensus) -> Path:
    rows = consensus_rows(consensus)
    for row in rows:
        row["avg_rank"] = format_avg_rank(row["avg_rank"])
    return _write_csv(Path(path), CONSENSUS_FIELDS, rows)


def write_summary(path: PathLike, reports: Sequence[InversionReport]) -> Path:
    rows = summary_rows(reports)
    for row in rows:
        row["reliability"] = format_reliability(row["reliability"])
    return _write_csv(Path(path), SUMMARY_FIELDS, rows)


def write_positions(path: PathLike, sequence: PositionSequence) -> Path:
    return _write_csv(Path(path), POSITION_FIELDS, position_rows(sequence))


def positions_filename(source_name: str) -> str:
    return f"{source_name}{POSITIONS_SUFFIX}"


# =============================================================================
# MARKDOWN REPORT
# =============================================================================

def render_report(
    consensus: Consensus,
    reports: Sequence[InversionReport],
    diagnostics: Sequence[Diagnostic] = (),
) -> str:
    """Render the Markdown summary."""
    n = len(consensus)
    lines = [
        "# Ranking Reliability Report",
        "",
        f"- Sources: {consensus.source_count}",
        f"- Total unique items: {n}",
        f"- Max inversions for N items: {max_inversions(n)}",
        "",
        "## Methodology",
        "We computed a **combined ranking** by summing per-source ranks (lower sum = better). "
        "For each source, we mapped its order to the combined order and counted inversions using "
        "two authoritative methods (Merge sort and Fenwick/BIT). A quicksort-style method is included "
        "for **diagnostic** insight only.",
        "",
        "A **reliability score** is defined as `1 - (inversions / max_inversions)` in [0,1]. "
        "Higher means closer to the consensus.",
        "",
        "## Results (Merge-based)",
        "| Source | n | Inversions (merge) | Reliability |",
        "|---|---:|---:|---:|",
    ]
    for report in reports:
        lines.append(
            f"| {report.source_name} | {report.n} | {report.inv_merge} "
            f"| {format_reliability(report.reliability)} |"
        )
    lines.append("")
    lines.append(
        "_The quick partition counter is diagnostic and may differ; "
        f"see `{SUMMARY_FILE}` for all counters._"
    )

    if diagnostics:
        lines.append("")
        lines.append("## Diagnostics")
        for diagnostic in diagnostics:
            lines.append(f"- {diagnostic.message}")

    lines.append("")
    return "\n".join(lines)


def write_report(
    path: PathLike,
    consensus: Consensus,
    reports: Sequence[InversionReport],
    diagnostics: Sequence[Diagnostic] = (),
) -> Path:
    path = Path(path)
    path.write_text(render_report(consensus, reports, diagnostics), encoding="utf-8")
    return path


# =============================================================================
# ALL OUTPUTS
# =============================================================================

def write_outputs(
    out_dir: PathLike,
    consensus: Consensus,
    evaluations: Sequence[SourceEvaluation],
) -> list[Path]:
    """
    Write every output file, creating out_dir if needed.

    Returns:
        Paths written, in a stable order
    """
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    reports = [evaluation.report for evaluation in evaluations]
    diagnostics = [e.diagnostic for e in evaluations if e.diagnostic is not None]

    written = [write_combined_order(out_dir / COMBINED_ORDER_FILE, consensus)]
    for evaluation in evaluations:
        written.append(
            write_positions(
                out_dir / positions_filename(evaluation.source.name),
                evaluation.sequence,
            )
        )
    written.append(write_summary(out_dir / SUMMARY_FILE, reports))
    written.append(write_report(out_dir / REPORT_FILE, consensus, reports, diagnostics))

    logger.info("outputs_written", out_dir=str(out_dir), files=len(written))
    return written
