"""
Reliability Scorer for the Ranking Reliability Engine.

Per source:
    1. Map the source onto the consensus
    2. Count inversions three ways
    3. Check the authoritative counters agree
    4. reliability = 1 - inv_merge / max_inv

Core principle:
    Only the merge-sort count feeds the score. The partition counter is
    reported, never trusted.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Optional, Sequence

from ..domain import (
    Consensus,
    Diagnostic,
    InvariantViolationError,
    InversionCounts,
    InversionReport,
    PositionSequence,
    Source,
)
from ..logs import get_logger
from ..ranking.positions import map_positions
from .inversions import count_inversions

logger = get_logger(__name__)


# =============================================================================
# SCORING
# =============================================================================

def max_inversions(n: int) -> int:
    """Number of pairs in a sequence of length n; 0 when n <= 1."""
    if n <= 1:
        return 0
    return n * (n - 1) // 2


def reliability_score(inversions: int, n: int) -> float:
    """
    Normalised agreement with the consensus, in [0, 1].

    A sequence of zero or one element has no pairs and scores 1.0.

    Raises:
        ValueError: If inversions is outside 0..max_inversions(n)
    """
    max_inv = max_inversions(n)
    if inversions < 0 or inversions > max_inv:
        raise ValueError(
            f"inversion count {inversions} outside 0..{max_inv} for n={n}"
        )
    if max_inv == 0:
        return 1.0
    return 1.0 - inversions / max_inv


def check_counter_agreement(source_name: str, counts: InversionCounts) -> None:
    """
    Raises:
        InvariantViolationError: If the merge and Fenwick counts differ
    """
    if not counts.authoritative_agree:
        logger.error(
            "inversion_counters_disagree",
            source=source_name,
            inv_merge=counts.merge,
            inv_bit=counts.bit,
        )
        raise InvariantViolationError(
            f"merge count {counts.merge} != Fenwick count {counts.bit}",
            source_name,
        )


def build_report(sequence: PositionSequence, counts: InversionCounts) -> InversionReport:
    """Assemble the per-source summary row."""
    n = len(sequence)
    return InversionReport(
        source_name=sequence.source_name,
        n=n,
        inv_merge=counts.merge,
        inv_bit=counts.bit,
        inv_quick=counts.quick,
        max_inv=max_inversions(n),
        reliability=reliability_score(counts.merge, n),
    )


# =============================================================================
# SOURCE EVALUATION
# =============================================================================

@dataclass(frozen=True)
class SourceEvaluation:
    """
    Everything computed for one source.

    ``diagnostic`` is set when the partition counter disagrees with the
    authoritative count.
    """
    source: Source
    sequence: PositionSequence
    counts: InversionCounts
    report: InversionReport
    diagnostic: Optional[Diagnostic] = None

    @property
    def reliability(self) -> float:
        return self.report.reliability


def evaluate_source(source: Source, consensus: Consensus) -> SourceEvaluation:
    """
    Score one source against the consensus.

    Raises:
        InvariantViolationError: If the authoritative counters disagree
    """
    sequence = map_positions(source, consensus)
    counts = count_inversions(sequence.values)

    check_counter_agreement(source.name, counts)

    diagnostic = None
    if not counts.quick_agrees:
        diagnostic = Diagnostic.quick_mismatch(source.name, counts)
        logger.info(
            "quick_count_mismatch",
            source=source.name,
            inv_merge=counts.merge,
            inv_quick=counts.quick,
            delta=counts.merge - counts.quick,
        )

    report = build_report(sequence, counts)
    logger.debug(
        "source_scored",
        source=source.name,
        n=report.n,
        inv_merge=report.inv_merge,
        reliability=report.reliability,
    )

    return SourceEvaluation(
        source=source,
        sequence=sequence,
        counts=counts,
        report=report,
        diagnostic=diagnostic,
    )


def evaluate_sources(
    sources: Sequence[Source],
    consensus: Consensus,
    workers: int = 1,
) -> list[SourceEvaluation]:
    """
    Score every source, returning results in input order.

    Sources are independent given the consensus, so with workers > 1
    they are evaluated on a thread pool. The first worker exception is
    re-raised here.
    """
    if workers <= 1 or len(sources) <= 1:
        return [evaluate_source(source, consensus) for source in sources]

    with ThreadPoolExecutor(max_workers=workers) as pool:
        futures = [pool.submit(evaluate_source, source, consensus) for source in sources]
        return [future.result() for future in futures]
