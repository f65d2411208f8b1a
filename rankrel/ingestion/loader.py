"""
Source File Loader for the Ranking Reliability Engine.

File format:
- UTF-8 text, one item identifier per line, best first
- A trailing carriage return is stripped (files written on Windows)
- Blank lines are skipped
- The source name is the file's basename, extension included

Identifiers are otherwise taken verbatim; no trimming or case folding.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Sequence, Union

from ..domain import ConfigurationError, Source, SourceLoadError
from ..logs import get_logger

logger = get_logger(__name__)

PathLike = Union[str, Path]


# =============================================================================
# PARSING
# =============================================================================

def parse_source_lines(name: str, lines: Iterable[str]) -> Source:
    """
    Build a Source from raw lines.

    Raises:
        InvalidSourceError: If an item appears twice
    """
    items: list[str] = []
    for line in lines:
        line = line.rstrip("\n")
        if line.endswith("\r"):
            line = line[:-1]
        if not line:
            continue
        items.append(line)
    return Source(name=name, items=tuple(items))


def source_name_for(path: PathLike) -> str:
    return Path(path).name


# =============================================================================
# LOADING
# =============================================================================

def read_source_file(path: PathLike) -> Source:
    """
    Load one source file.

    Raises:
        SourceLoadError: If the file cannot be opened or is not UTF-8
        InvalidSourceError: If the list contains a duplicate item
    """
    path = Path(path)
    name = source_name_for(path)
    try:
        with path.open("r", encoding="utf-8", newline="") as fh:
            return parse_source_lines(name, fh)
    except (OSError, UnicodeDecodeError) as e:
        raise SourceLoadError(f"failed to open {path}: {e}", name) from e


def load_sources(paths: Sequence[PathLike]) -> list[Source]:
    """
    Load source files in the given order.

    Raises:
        ConfigurationError: If no paths are given or two share a basename
        SourceLoadError: If any file cannot be read
    """
    if not paths:
        raise ConfigurationError("at least one source file is required")

    sources: list[Source] = []
    seen: dict[str, Path] = {}
    for raw in paths:
        path = Path(raw)
        name = source_name_for(path)
        if name in seen:
            raise ConfigurationError(
                f"source files {seen[name]} and {path} share the name {name!r}",
                name,
            )
        seen[name] = path
        sources.append(read_source_file(path))

    logger.info(
        "sources_loaded",
        sources=len(sources),
        total_items=sum(len(source) for source in sources),
    )
    return sources
