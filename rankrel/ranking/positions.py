"""
Position Mapper.

Stage 3: rewrite a source as the sequence of consensus positions of
its items, in the source's own order.

Items the source never ranked are treated as coming after everything
it did rank, in their consensus order among themselves. The result is
always a full permutation of 1..N, ready for inversion counting.
"""

from __future__ import annotations

from ..domain import Consensus, PositionSequence, Source
from ..logs import get_logger

logger = get_logger(__name__)


def map_positions(source: Source, consensus: Consensus) -> PositionSequence:
    """
    Map one source onto the consensus.

    Args:
        source: The source list to map
        consensus: Consensus built from a set of sources including this one

    Returns:
        PositionSequence of length N (the universe size, not len(source))
    """
    values: list[int] = []
    for item in source.items:
        position = consensus.position_of(item)
        if position is None:
            # Cannot happen when the consensus was built from this source.
            logger.debug("item_not_in_consensus", source=source.name, item=item)
            continue
        values.append(position)

    listed = len(values)

    if listed < len(consensus):
        present = set(source.items)
        values.extend(
            entry.combined_position
            for entry in consensus.entries
            if entry.item not in present
        )

    return PositionSequence(
        source_name=source.name,
        values=tuple(values),
        listed=listed,
    )
