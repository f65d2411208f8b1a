"""
Rank Table Builder.

Stage 1: collect the universe of items and give every item a rank
in every source.

Rules:
    - Every item listed anywhere appears in the universe exactly once
    - rank = 1-based position within the source
    - Items a source omits get missing_rank = (longest source length) + 1

The sentinel is a finite upper bound rather than infinity so rank sums
stay plain integers.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Sequence

from ..domain import RankTable, Source
from ..logs import get_logger

logger = get_logger(__name__)


def build_universe(sources: Sequence[Source]) -> frozenset[str]:
    """Every distinct item appearing in any source."""
    universe: set[str] = set()
    for source in sources:
        universe.update(source.items)
    return frozenset(universe)


def compute_missing_rank(sources: Sequence[Source]) -> int:
    """Rank assigned to items a source does not list."""
    max_len = max((len(source) for source in sources), default=0)
    return max_len + 1


def build_rank_table(sources: Sequence[Source]) -> RankTable:
    """
    Build the per-item rank vectors.

    Args:
        sources: Source lists in input order; vector index s refers to sources[s]

    Returns:
        RankTable covering the full universe
    """
    source_count = len(sources)
    missing_rank = compute_missing_rank(sources)

    for source in sources:
        if source.is_empty:
            logger.warning("empty_source", source=source.name)

    # Iterate sources, not the universe set, so construction never
    # depends on hash order.
    vectors: dict[str, list[int]] = {}
    for s, source in enumerate(sources):
        for rank, item in enumerate(source.items, start=1):
            vector = vectors.get(item)
            if vector is None:
                vector = [missing_rank] * source_count
                vectors[item] = vector
            vector[s] = rank

    table = RankTable(
        source_names=tuple(source.name for source in sources),
        ranks=MappingProxyType({item: tuple(v) for item, v in vectors.items()}),
        max_len=missing_rank - 1,
        missing_rank=missing_rank,
    )

    logger.debug(
        "rank_table_built",
        universe_size=table.universe_size,
        sources=source_count,
        missing_rank=missing_rank,
    )
    if table.universe_size <= 1:
        logger.warning("degenerate_universe", universe_size=table.universe_size)

    return table
