"""
Inversion Counters.

An inversion is a pair of positions i < j with values[i] > values[j].
Three independent counters are provided:

    merge_count           — modified merge sort, O(n log n), authoritative
    fenwick_count         — Fenwick tree sweep, O(n log n), authoritative
    quick_partition_count — pivot partition recursion, diagnostic only

The two authoritative counters must agree on every input. The
partition counter only counts pairs split across a pivot; pairs that
involve a pivot-equal element are never counted, so it is a lower bound
and routinely reads lower than the others.
"""

from __future__ import annotations

from typing import Sequence

from ..domain import InversionCounts


# =============================================================================
# MERGE SORT
# =============================================================================

def merge_count(values: Sequence[int]) -> int:
    """
    Count inversions with a modified merge sort.

    When a right-half element is placed ahead of the remaining left-half
    elements during a merge, it forms one inversion with each of them.
    Equal values are taken from the left first and add nothing.
    """
    work = list(values)
    buffer = [0] * len(work)
    return _merge_count(work, buffer, 0, len(work))


def _merge_count(work: list[int], buffer: list[int], lo: int, hi: int) -> int:
    """Sort work[lo:hi] in place using buffer; return its inversion count."""
    if hi - lo <= 1:
        return 0

    mid = (lo + hi) // 2
    inversions = _merge_count(work, buffer, lo, mid) + _merge_count(work, buffer, mid, hi)

    i, j, k = lo, mid, lo
    while i < mid and j < hi:
        if work[i] <= work[j]:
            buffer[k] = work[i]
            i += 1
        else:
            buffer[k] = work[j]
            j += 1
            inversions += mid - i
        k += 1

    # One of the halves is exhausted; copy the other through.
    tail = work[i:mid] if i < mid else work[j:hi]
    buffer[k:hi] = tail
    work[lo:hi] = buffer[lo:hi]

    return inversions


# =============================================================================
# FENWICK TREE
# =============================================================================

class FenwickTree:
    """
    Binary indexed tree over 1..size supporting point update and
    prefix-sum query in O(log n).
    """

    def __init__(self, size: int):
        if size < 0:
            raise ValueError(f"size must be non-negative, got {size}")
        self.size = size
        self._tree = [0] * (size + 1)

    def add(self, index: int, delta: int = 1) -> None:
        """Add delta at 1-based index."""
        if not 1 <= index <= self.size:
            raise IndexError(f"index {index} outside 1..{self.size}")
        while index <= self.size:
            self._tree[index] += delta
            index += index & -index

    def prefix_sum(self, index: int) -> int:
        """Sum over 1..index. An index of 0 yields 0."""
        if index > self.size:
            index = self.size
        total = 0
        while index > 0:
            total += self._tree[index]
            index -= index & -index
        return total


def compress_ranks(values: Sequence[int]) -> list[int]:
    """Map values to dense 1-based ranks, preserving relative order."""
    rank_of = {value: rank for rank, value in enumerate(sorted(set(values)), start=1)}
    return [rank_of[value] for value in values]


def fenwick_count(values: Sequence[int]) -> int:
    """
    Count inversions with a right-to-left Fenwick sweep.

    For each element, add how many strictly smaller values have already
    been seen to its right, then record it.
    """
    ranks = compress_ranks(values)
    tree = FenwickTree(max(ranks, default=0))
    inversions = 0
    for rank in reversed(ranks):
        inversions += tree.prefix_sum(rank - 1)
        tree.add(rank)
    return inversions


# =============================================================================
# QUICKSORT PARTITION (DIAGNOSTIC)
# =============================================================================

def quick_partition_count(values: Sequence[int]) -> int:
    """
    Count cross-pivot inversions while partitioning.

    The middle element of each range is the pivot. A single pass splits
    the range into less/equal/greater buckets, and every less-than element
    met after k greater-than elements adds k. The less and greater
    buckets are then processed independently; equal elements are dropped.

    Ranges are kept on an explicit work stack so deep partitions cannot
    hit the interpreter's recursion limit.
    """
    inversions = 0
    pending: list[list[int]] = [list(values)]

    while pending:
        segment = pending.pop()
        if len(segment) <= 1:
            continue

        pivot = segment[len(segment) // 2]
        less: list[int] = []
        greater: list[int] = []
        seen_greater = 0

        for value in segment:
            if value > pivot:
                greater.append(value)
                seen_greater += 1
            elif value < pivot:
                less.append(value)
                inversions += seen_greater

        pending.append(less)
        pending.append(greater)

    return inversions


# =============================================================================
# THREE-WAY
# =============================================================================

def count_inversions(values: Sequence[int]) -> InversionCounts:
    """Run all three counters on the same sequence."""
    snapshot = tuple(values)
    return InversionCounts(
        merge=merge_count(snapshot),
        bit=fenwick_count(snapshot),
        quick=quick_partition_count(snapshot),
    )
