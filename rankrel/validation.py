"""
Run-level Validation for the Ranking Reliability Engine.

Item-level checks (non-empty identifiers, no duplicates within a list)
happen when a ``Source`` is constructed. This module gates the run as a
whole before any ranking work begins.

Minimum requirements (ALL must be true):
1. At least MIN_SOURCES source lists
2. Source names are unique (outputs and lookups are keyed by name)
3. Source names are usable as a file name prefix
4. Worker count is a positive integer
"""

from __future__ import annotations

from typing import Sequence

from .domain import ConfigurationError, Source


# =============================================================================
# CONFIGURATION CONSTANTS
# =============================================================================

MIN_SOURCES = 1
MIN_WORKERS = 1

RESERVED_NAMES = frozenset({".", ".."})
NAME_SEPARATORS = ("/", "\\")


# =============================================================================
# RUN VALIDATION
# =============================================================================

def validate_source_count(sources: Sequence[Source]) -> None:
    """
    Raises:
        ConfigurationError: If fewer than MIN_SOURCES sources were supplied
    """
    if len(sources) < MIN_SOURCES:
        raise ConfigurationError(
            f"at least {MIN_SOURCES} source list is required, got {len(sources)}"
        )


def validate_unique_names(sources: Sequence[Source]) -> None:
    """
    Raises:
        ConfigurationError: If two sources share a name
    """
    seen: set[str] = set()
    for source in sources:
        if source.name in seen:
            raise ConfigurationError(
                f"source name {source.name!r} is used more than once",
                source.name,
            )
        seen.add(source.name)


def validate_source_names(sources: Sequence[Source]) -> None:
    """
    Raises:
        ConfigurationError: If a name contains a path separator or is "." or ".."
    """
    for source in sources:
        name = source.name
        if name in RESERVED_NAMES or any(sep in name for sep in NAME_SEPARATORS):
            raise ConfigurationError(
                f"source name {name!r} cannot be used in an output file name",
                name,
            )


def validate_workers(workers: int) -> None:
    if isinstance(workers, bool) or not isinstance(workers, int) or workers < MIN_WORKERS:
        raise ConfigurationError(
            f"workers must be an integer >= {MIN_WORKERS}, got {workers!r}"
        )


def validate_sources(sources: Sequence[Source]) -> None:
    """Apply every run-level check to the supplied sources."""
    validate_source_count(sources)
    validate_source_names(sources)
    validate_unique_names(sources)
