"""
Core Domain Objects for the Ranking Reliability Engine.

All domain objects are immutable snapshots, derived once per run.
Nothing is mutated after construction.

Domain Objects:
    Source            — One ranked list of item identifiers, best first
    RankTable         — Per-item vector of per-source ranks
    ConsensusEntry    — One row of the fused (Borda) ordering
    Consensus         — The full fused ordering with position lookup
    PositionSequence  — A source re-expressed in consensus positions
    InversionCounts   — Results of the three inversion counters
    InversionReport   — Per-source disagreement summary
    Diagnostic        — A non-fatal, informational finding
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Iterable, Mapping, Optional


# =============================================================================
# ERROR TAXONOMY
# =============================================================================

class ErrorKind(Enum):
    """
    Fatal error categories.

    CONFIGURATION:       No sources, conflicting source names, bad settings
    INVALID_SOURCE:      Malformed item identifier or duplicate item in a list
    SOURCE_UNREADABLE:   A source file could not be opened or decoded
    INVARIANT_VIOLATION: Authoritative counters disagree (implementation bug)
    """
    CONFIGURATION = "configuration"
    INVALID_SOURCE = "invalid_source"
    SOURCE_UNREADABLE = "source_unreadable"
    INVARIANT_VIOLATION = "invariant_violation"


class RankRelError(Exception):
    """Base class for every fatal error raised by the engine."""

    kind: ErrorKind = ErrorKind.CONFIGURATION

    def __init__(self, reason: str, source: Optional[str] = None):
        self.reason = reason
        self.source = source
        super().__init__(f"[{self.kind.value}] {reason}")


class ConfigurationError(RankRelError):
    """Raised when the run itself is misconfigured (e.g. zero sources)."""
    kind = ErrorKind.CONFIGURATION


class InvalidSourceError(RankRelError):
    """Raised when a source list contains an invalid or duplicate item."""
    kind = ErrorKind.INVALID_SOURCE


class SourceLoadError(RankRelError):
    """Raised when a source file cannot be read."""
    kind = ErrorKind.SOURCE_UNREADABLE


class InvariantViolationError(RankRelError):
    """
    Raised when the merge-sort and Fenwick counters disagree.

    Both counters are exact, so a mismatch is a defect in the engine,
    never a property of the data.
    """
    kind = ErrorKind.INVARIANT_VIOLATION


# =============================================================================
# SOURCE
# =============================================================================

@dataclass(frozen=True)
class Source:
    """
    A ranked list of item identifiers, ordered best to worst.

    Items are opaque strings compared by exact equality. A source
    may be empty, but it may not contain the same item twice.
    """
    name: str
    items: tuple[str, ...] = ()

    def __post_init__(self):
        """Validate identifiers and reject duplicates."""
        items = tuple(self.items)
        object.__setattr__(self, "items", items)

        if not self.name:
            raise ConfigurationError("source name is required")

        first_seen: dict[str, int] = {}
        for index, item in enumerate(items, start=1):
            if not isinstance(item, str) or not item:
                raise InvalidSourceError(
                    f"item at position {index} is not a non-empty string: {item!r}",
                    self.name,
                )
            if item in first_seen:
                raise InvalidSourceError(
                    f"duplicate item {item!r} at positions "
                    f"{first_seen[item]} and {index}",
                    self.name,
                )
            first_seen[item] = index

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)

    def __contains__(self, item: object) -> bool:
        return item in self.items

    @property
    def is_empty(self) -> bool:
        return not self.items


def sources_from_mapping(lists: Mapping[str, Iterable[str]]) -> list[Source]:
    """Build sources from ``{name: items}``, preserving mapping order."""
    return [Source(name=name, items=tuple(items)) for name, items in lists.items()]


# =============================================================================
# RANK TABLE
# =============================================================================

@dataclass(frozen=True)
class RankTable:
    """
    Universe-wide rank table.

    ``ranks[item][s]`` is the 1-based position of ``item`` in source ``s``,
    or ``missing_rank`` if the source does not list it.
    """
    source_names: tuple[str, ...]
    ranks: Mapping[str, tuple[int, ...]]
    max_len: int
    missing_rank: int

    @property
    def source_count(self) -> int:
        return len(self.source_names)

    @property
    def universe(self) -> frozenset[str]:
        return frozenset(self.ranks)

    @property
    def universe_size(self) -> int:
        return len(self.ranks)

    def rank_vector(self, item: str) -> tuple[int, ...]:
        return self.ranks[item]


# =============================================================================
# CONSENSUS
# =============================================================================

@dataclass(frozen=True)
class ConsensusEntry:
    """One row of the consensus ordering."""
    item: str
    sum_rank: int
    avg_rank: float
    combined_position: int

    def sort_key(self) -> tuple[int, float, str]:
        """
        Total order used to assign positions.

        1. Summed rank (ascending)
        2. Average rank (ascending)
        3. Item identifier (lexicographic, guarantees no ties survive)
        """
        return (self.sum_rank, self.avg_rank, self.item)


@dataclass(frozen=True)
class Consensus:
    """
    The fused ordering.

    ``entries`` are sorted by combined_position (1..N) and
    ``positions`` maps each item to its combined_position.
    """
    entries: tuple[ConsensusEntry, ...]
    source_count: int
    positions: Mapping[str, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        entries = tuple(self.entries)
        object.__setattr__(self, "entries", entries)
        object.__setattr__(
            self,
            "positions",
            MappingProxyType({e.item: e.combined_position for e in entries}),
        )

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def items(self) -> list[str]:
        """Items in consensus order."""
        return [entry.item for entry in self.entries]

    def position_of(self, item: str) -> Optional[int]:
        return self.positions.get(item)


# =============================================================================
# POSITION SEQUENCE
# =============================================================================

@dataclass(frozen=True)
class PositionSequence:
    """
    A source expressed in consensus positions.

    The first ``listed`` values follow the source's own order; the rest are
    the positions of items the source omitted, in ascending order. For a
    well-formed run the values are a permutation of 1..N.
    """
    source_name: str
    values: tuple[int, ...]
    listed: int

    def __len__(self) -> int:
        return len(self.values)

    @property
    def appended(self) -> int:
        """Number of positions appended for items the source omitted."""
        return len(self.values) - self.listed

    def is_permutation(self) -> bool:
        return sorted(self.values) == list(range(1, len(self.values) + 1))


# =============================================================================
# INVERSION RESULTS
# =============================================================================

@dataclass(frozen=True)
class InversionCounts:
    """Inversion counts from the three independent counters."""
    merge: int
    bit: int
    quick: int

    @property
    def authoritative_agree(self) -> bool:
        return self.merge == self.bit

    @property
    def quick_agrees(self) -> bool:
        return self.quick == self.merge


@dataclass(frozen=True)
class InversionReport:
    """
    Per-source disagreement summary.

    ``reliability`` is always derived from the merge-sort count.
    """
    source_name: str
    n: int
    inv_merge: int
    inv_bit: int
    inv_quick: int
    max_inv: int
    reliability: float


@dataclass(frozen=True)
class Diagnostic:
    """
    A non-fatal finding surfaced alongside successful output.

    Currently produced when the quicksort-partition counter disagrees
    with the authoritative count.
    """
    source_name: str
    inv_merge: int
    inv_quick: int
    message: str

    @classmethod
    def quick_mismatch(cls, source_name: str, counts: InversionCounts) -> Diagnostic:
        delta = counts.merge - counts.quick
        return cls(
            source_name=source_name,
            inv_merge=counts.merge,
            inv_quick=counts.quick,
            message=f"quick counter differs by {delta} for {source_name}",
        )
