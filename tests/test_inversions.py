"""
Tests for the Inversion Counters.

These tests verify:
1. Merge and Fenwick counts equal the brute-force count on every permutation
2. Identity gives 0, reversal gives n(n-1)/2
3. Equal values never count as inversions
4. The partition counter is a lower bound (diagnostic only)
5. FenwickTree and coordinate compression behave as documented
"""

import itertools
import random

import pytest

from rankrel.reliability.inversions import (
    FenwickTree,
    compress_ranks,
    count_inversions,
    fenwick_count,
    merge_count,
    quick_partition_count,
)


# =============================================================================
# TEST FIXTURES
# =============================================================================

def brute_force_count(values) -> int:
    """Reference O(n^2) count."""
    return sum(
        1
        for i in range(len(values))
        for j in range(i + 1, len(values))
        if values[i] > values[j]
    )


def all_permutations(max_n: int):
    for n in range(max_n + 1):
        yield from itertools.permutations(range(1, n + 1))


# =============================================================================
# AUTHORITATIVE COUNTER TESTS
# =============================================================================

class TestAuthoritativeCounters:
    """Merge sort and Fenwick tree must always agree."""

    def test_all_small_permutations(self):
        for permutation in all_permutations(7):
            expected = brute_force_count(permutation)

            assert merge_count(permutation) == expected, permutation
            assert fenwick_count(permutation) == expected, permutation

    @pytest.mark.parametrize("seed", [1, 2, 3])
    def test_random_permutations(self, seed):
        rng = random.Random(seed)
        values = list(range(1, 301))
        rng.shuffle(values)

        assert merge_count(values) == fenwick_count(values) == brute_force_count(values)

    def test_large_permutation_agreement(self):
        rng = random.Random(11)
        values = list(range(1, 20001))
        rng.shuffle(values)

        assert merge_count(values) == fenwick_count(values)

    @pytest.mark.parametrize("n", [0, 1, 2, 5, 100])
    def test_identity_has_no_inversions(self, n):
        values = list(range(1, n + 1))

        assert merge_count(values) == 0
        assert fenwick_count(values) == 0

    @pytest.mark.parametrize("n", [0, 1, 2, 5, 100])
    def test_reversal_has_all_inversions(self, n):
        values = list(range(n, 0, -1))

        assert merge_count(values) == n * (n - 1) // 2
        assert fenwick_count(values) == n * (n - 1) // 2

    def test_equal_values_do_not_count(self):
        values = [2, 2, 1, 3, 3, 1]

        assert merge_count(values) == brute_force_count(values) == 6
        assert fenwick_count(values) == 6

    def test_input_not_mutated(self):
        values = [3, 1, 2]
        merge_count(values)
        fenwick_count(values)

        assert values == [3, 1, 2]

    def test_arbitrary_integers(self):
        """Fenwick compresses sparse values before indexing."""
        values = [1000, -5, 42, 42, 7]

        assert fenwick_count(values) == merge_count(values) == brute_force_count(values)


# =============================================================================
# PARTITION COUNTER TESTS
# =============================================================================

class TestQuickPartitionCounter:
    """The diagnostic counter only sees cross-pivot pairs."""

    def test_identity(self):
        assert quick_partition_count([1, 2, 3, 4]) == 0

    def test_counts_cross_pivot_pairs(self):
        """[3,2,1]: pivot 2 splits 3 and 1, one cross inversion."""
        assert quick_partition_count([3, 2, 1]) == 1

    def test_misses_pairs_with_pivot(self):
        """[2,1,3]: the only inversion involves the pivot 1."""
        assert quick_partition_count([2, 1, 3]) == 0
        assert merge_count([2, 1, 3]) == 1

    def test_never_exceeds_exact_count(self):
        for permutation in all_permutations(6):
            assert quick_partition_count(permutation) <= merge_count(permutation)

    def test_deep_input_does_not_recurse(self):
        """Worst-case partitions must not hit the recursion limit."""
        values = list(range(1, 2001))
        values = values[::2] + values[1::2]

        assert quick_partition_count(values) <= merge_count(values)

    def test_empty(self):
        assert quick_partition_count([]) == 0


# =============================================================================
# THREE-WAY TESTS
# =============================================================================

class TestCountInversions:
    """Test the three-way runner."""

    def test_swapped_pair(self):
        counts = count_inversions([2, 1, 3])

        assert (counts.merge, counts.bit, counts.quick) == (1, 1, 0)
        assert counts.authoritative_agree
        assert not counts.quick_agrees

    def test_missing_item_example(self):
        counts = count_inversions((3, 1, 2))

        assert counts.merge == counts.bit == 2


# =============================================================================
# FENWICK TREE TESTS
# =============================================================================

class TestFenwickTree:
    """Test the prefix-sum tree."""

    def test_prefix_sums(self):
        tree = FenwickTree(8)
        for index, value in enumerate([5, 1, 0, 3, 2, 0, 4, 1], start=1):
            if value:
                tree.add(index, value)

        assert tree.prefix_sum(0) == 0
        assert tree.prefix_sum(1) == 5
        assert tree.prefix_sum(4) == 9
        assert tree.prefix_sum(8) == 16

    def test_prefix_beyond_size_is_clamped(self):
        tree = FenwickTree(3)
        tree.add(3)

        assert tree.prefix_sum(10) == 1

    @pytest.mark.parametrize("index", [0, 4])
    def test_add_out_of_range(self, index):
        with pytest.raises(IndexError):
            FenwickTree(3).add(index)

    def test_negative_size(self):
        with pytest.raises(ValueError):
            FenwickTree(-1)


class TestCompressRanks:
    """Test coordinate compression."""

    def test_dense_ranks(self):
        assert compress_ranks([30, 10, 20, 10]) == [3, 1, 2, 1]

    def test_permutation_unchanged(self):
        assert compress_ranks([3, 1, 2]) == [3, 1, 2]

    def test_empty(self):
        assert compress_ranks([]) == []
