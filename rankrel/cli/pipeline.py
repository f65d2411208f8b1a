"""
Pipeline Orchestrator for the Ranking Reliability Engine.

Pipeline stages:
    1. Run validation
    2. Rank table
    3. Consensus
    4. Per-source evaluation (positions, inversions, reliability)

The pipeline is pure and deterministic: the same sources always give
the same result, whatever the worker count.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence

from ..domain import (
    Consensus,
    Diagnostic,
    InversionReport,
    PositionSequence,
    RankTable,
    Source,
)
from ..ranking.consensus import build_consensus
from ..ranking.rank_table import build_rank_table
from ..reliability.scorer import SourceEvaluation, evaluate_sources, max_inversions
from ..validation import validate_sources, validate_workers


# =============================================================================
# PIPELINE RESULT
# =============================================================================

@dataclass
class PipelineResult:
    """
    Complete result of one run.

    Exposes:
    - The rank table and consensus ordering
    - One evaluation per source, in input order
    - Diagnostics (non-fatal findings)
    """
    rank_table: RankTable
    consensus: Consensus
    evaluations: list[SourceEvaluation] = field(default_factory=list)

    @property
    def source_count(self) -> int:
        return self.rank_table.source_count

    @property
    def universe_size(self) -> int:
        return len(self.consensus)

    @property
    def max_inversions(self) -> int:
        return max_inversions(self.universe_size)

    @property
    def reports(self) -> list[InversionReport]:
        return [e.report for e in self.evaluations]

    @property
    def sequences(self) -> dict[str, PositionSequence]:
        return {e.source.name: e.sequence for e in self.evaluations}

    @property
    def diagnostics(self) -> list[Diagnostic]:
        return [e.diagnostic for e in self.evaluations if e.diagnostic is not None]

    @property
    def source_names(self) -> list[str]:
        return [e.source.name for e in self.evaluations]

    def get_evaluation(self, source_name: str) -> Optional[SourceEvaluation]:
        for evaluation in self.evaluations:
            if evaluation.source.name == source_name:
                return evaluation
        return None

    def get_report(self, source_name: str) -> Optional[InversionReport]:
        evaluation = self.get_evaluation(source_name)
        return evaluation.report if evaluation else None


# =============================================================================
# PIPELINE EXECUTION
# =============================================================================

def run_pipeline(sources: Sequence[Source], workers: int = 1) -> PipelineResult:
    """
    Execute the full pipeline.

    Args:
        sources: Source lists, best item first, in reporting order
        workers: Threads used for per-source evaluation

    Returns:
        PipelineResult with consensus, per-source reports and diagnostics

    Raises:
        ConfigurationError: No sources, duplicate names or bad worker count
        InvariantViolationError: Authoritative counters disagree
    """
    validate_workers(workers)
    validate_sources(sources)

    table = build_rank_table(sources)
    consensus = build_consensus(table)
    evaluations = evaluate_sources(sources, consensus, workers=workers)

    return PipelineResult(
        rank_table=table,
        consensus=consensus,
        evaluations=evaluations,
    )
