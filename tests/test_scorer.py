"""
Tests for the Reliability Scorer.

These tests verify:
1. max_inversions and reliability_score edge cases
2. Reliability is non-increasing in the inversion count
3. Authoritative counter disagreement halts processing
4. Partition-counter mismatches become diagnostics, not errors
5. Threaded evaluation preserves input order
"""

import pytest

from rankrel.domain import InvariantViolationError, InversionCounts, Source
from rankrel.ranking.consensus import build_consensus
from rankrel.ranking.rank_table import build_rank_table
from rankrel.reliability import scorer
from rankrel.reliability.scorer import (
    check_counter_agreement,
    evaluate_source,
    evaluate_sources,
    max_inversions,
    reliability_score,
)


# =============================================================================
# TEST FIXTURES
# =============================================================================

def make_sources() -> list[Source]:
    return [
        Source("A", ["x", "y", "z"]),
        Source("B", ["y", "x", "z"]),
    ]


def consensus_of(sources):
    return build_consensus(build_rank_table(sources))


# =============================================================================
# SCORE TESTS
# =============================================================================

class TestMaxInversions:
    """Test the pair count."""

    @pytest.mark.parametrize("n,expected", [(0, 0), (1, 0), (2, 1), (3, 3), (5, 10), (100, 4950)])
    def test_values(self, n, expected):
        assert max_inversions(n) == expected


class TestReliabilityScore:
    """Test normalisation."""

    def test_no_inversions_is_perfect(self):
        assert reliability_score(0, 10) == 1.0

    def test_all_inversions_is_zero(self):
        assert reliability_score(45, 10) == 0.0

    def test_one_of_three(self):
        assert reliability_score(1, 3) == pytest.approx(2 / 3)

    @pytest.mark.parametrize("n", [0, 1])
    def test_degenerate_length_is_perfect(self, n):
        """No pairs, no division by zero."""
        assert reliability_score(0, n) == 1.0

    def test_monotonic_non_increasing(self):
        n = 8
        scores = [reliability_score(inv, n) for inv in range(max_inversions(n) + 1)]

        assert all(a >= b for a, b in zip(scores, scores[1:]))
        assert all(0.0 <= s <= 1.0 for s in scores)

    @pytest.mark.parametrize("inversions", [-1, 4])
    def test_out_of_range_rejected(self, inversions):
        with pytest.raises(ValueError):
            reliability_score(inversions, 3)


# =============================================================================
# INVARIANT TESTS
# =============================================================================

class TestCounterAgreement:
    """Merge/Fenwick disagreement is fatal."""

    def test_agreement_passes(self):
        check_counter_agreement("A", InversionCounts(merge=2, bit=2, quick=0))

    def test_disagreement_raises(self):
        with pytest.raises(InvariantViolationError, match="merge count 2 != Fenwick count 3"):
            check_counter_agreement("A", InversionCounts(merge=2, bit=3, quick=2))

    def test_evaluate_source_halts_on_disagreement(self, monkeypatch):
        monkeypatch.setattr(
            scorer,
            "count_inversions",
            lambda values: InversionCounts(merge=1, bit=0, quick=1),
        )
        sources = make_sources()

        with pytest.raises(InvariantViolationError) as exc_info:
            evaluate_source(sources[1], consensus_of(sources))

        assert exc_info.value.source == "B"


# =============================================================================
# EVALUATION TESTS
# =============================================================================

class TestEvaluateSource:
    """Test single-source evaluation."""

    def test_matching_source(self):
        sources = make_sources()
        evaluation = evaluate_source(sources[0], consensus_of(sources))

        report = evaluation.report
        assert evaluation.sequence.values == (1, 2, 3)
        assert (report.n, report.inv_merge, report.inv_bit, report.max_inv) == (3, 0, 0, 3)
        assert report.reliability == 1.0
        assert evaluation.diagnostic is None

    def test_swapped_source(self):
        sources = make_sources()
        evaluation = evaluate_source(sources[1], consensus_of(sources))

        report = evaluation.report
        assert evaluation.sequence.values == (2, 1, 3)
        assert report.inv_merge == report.inv_bit == 1
        assert report.reliability == pytest.approx(0.6667, abs=1e-4)
        assert evaluation.reliability == report.reliability

    def test_quick_mismatch_is_diagnostic(self):
        sources = make_sources()
        evaluation = evaluate_source(sources[1], consensus_of(sources))

        assert evaluation.report.inv_quick == 0
        assert evaluation.diagnostic is not None
        assert evaluation.diagnostic.source_name == "B"

    def test_reliability_uses_merge_count(self, monkeypatch):
        monkeypatch.setattr(
            scorer,
            "count_inversions",
            lambda values: InversionCounts(merge=0, bit=0, quick=3),
        )
        sources = make_sources()
        evaluation = evaluate_source(sources[1], consensus_of(sources))

        assert evaluation.report.reliability == 1.0

    def test_reversed_source_scores_zero(self):
        sources = [Source("A", ["a", "b", "c", "d"]), Source("R", ["d", "c", "b", "a"])]
        consensus = consensus_of([sources[0], Source("A2", ["a", "b", "c", "d"])])

        evaluation = evaluate_source(sources[1], consensus)

        assert evaluation.report.inv_merge == 6
        assert evaluation.report.reliability == 0.0


class TestEvaluateSources:
    """Test multi-source evaluation."""

    def test_sequential_order(self):
        sources = make_sources()
        evaluations = evaluate_sources(sources, consensus_of(sources))

        assert [e.source.name for e in evaluations] == ["A", "B"]

    def test_threaded_matches_sequential(self):
        sources = [Source(f"S{i}", [f"i{(i * k) % 13}" for k in range(1, 13)]) for i in range(1, 9)]
        consensus = consensus_of(sources)

        sequential = evaluate_sources(sources, consensus, workers=1)
        threaded = evaluate_sources(sources, consensus, workers=4)

        assert [e.report for e in threaded] == [e.report for e in sequential]
        assert [e.source.name for e in threaded] == [s.name for s in sources]

    def test_threaded_propagates_errors(self, monkeypatch):
        monkeypatch.setattr(
            scorer,
            "count_inversions",
            lambda values: InversionCounts(merge=1, bit=2, quick=1),
        )
        sources = make_sources()

        with pytest.raises(InvariantViolationError):
            evaluate_sources(sources, consensus_of(sources), workers=2)
