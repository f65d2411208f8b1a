"""
Consensus Aggregator.

Stage 2: Borda-style fusion. Each item's ranks are summed across
sources; a lower sum means the sources collectively rate it higher.

Ordering (total, deterministic):
    1. sum_rank ascending
    2. avg_rank ascending
    3. item identifier ascending (code point order)

With a fixed source count the average never breaks a tie the sum did
not; it is kept so the ordering stays well defined if partial
participation is ever allowed. The identifier key guarantees no ties
survive, so combined_position is a bijection onto 1..N.
"""

from __future__ import annotations

from ..domain import Consensus, ConsensusEntry, RankTable
from ..logs import get_logger

logger = get_logger(__name__)


def aggregate_ranks(vector: tuple[int, ...], source_count: int) -> tuple[int, float]:
    """Return (sum_rank, avg_rank) for one rank vector."""
    sum_rank = sum(vector)
    avg_rank = sum_rank / source_count if source_count else 0.0
    return sum_rank, avg_rank


def build_consensus(table: RankTable) -> Consensus:
    """
    Fuse a rank table into a consensus ordering.

    Positions are assigned only after an explicit sort, never from
    mapping iteration order.
    """
    scored = []
    for item, vector in table.ranks.items():
        sum_rank, avg_rank = aggregate_ranks(vector, table.source_count)
        scored.append((sum_rank, avg_rank, item))

    scored.sort()

    entries = tuple(
        ConsensusEntry(
            item=item,
            sum_rank=sum_rank,
            avg_rank=avg_rank,
            combined_position=position,
        )
        for position, (sum_rank, avg_rank, item) in enumerate(scored, start=1)
    )

    consensus = Consensus(entries=entries, source_count=table.source_count)
    logger.info("consensus_built", universe_size=len(consensus))
    return consensus
