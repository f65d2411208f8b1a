# rankrel — Ranking Reliability Engine
# Consensus fusion of ranked lists and per-source disagreement scoring.

"""
Core invariant: every source list is judged against a single, deterministic
consensus order, and the two authoritative inversion counters must agree.

Pipeline stages:
    1. Rank table      (ranking.rank_table)
    2. Consensus       (ranking.consensus)
    3. Position map    (ranking.positions)
    4. Inversions      (reliability.inversions)
    5. Reliability     (reliability.scorer)
"""

__version__ = "0.1.0"
