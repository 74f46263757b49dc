"""
Results of running a single command, and the line splitter that builds them.

run() either collects the engine's reply (Collected) or returns straight
away without reading (Deferred). Deferred is only produced for searches
started with 'go infinite': the reply is picked up later by stop() or quit().
"""

from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple, Union


@dataclass(frozen=True)
class Collected:
    """Lines read back for one command, in arrival order."""

    command: str
    lines: Tuple[str, ...] = ()

    @property
    def last(self) -> Optional[str]:
        """Last collected line, or None if the engine said nothing."""
        return self.lines[-1] if self.lines else None

    @property
    def first(self) -> Optional[str]:
        """First collected line, or None if the engine said nothing."""
        return self.lines[0] if self.lines else None

    def __iter__(self) -> Iterator[str]:
        return iter(self.lines)

    def __len__(self) -> int:
        return len(self.lines)


@dataclass(frozen=True)
class Deferred:
    """Command was sent without waiting; output is left for a later command."""

    command: str


RunResult = Union[Collected, Deferred]


def split_lines(chunk: str, separator: str) -> List[str]:
    """
    Split raw engine output into lines.

    A single trailing separator does not produce an empty final line;
    empty lines in the middle of the chunk are kept.

    Args:
        chunk: Raw output as returned by EngineProcess.poll_output()
        separator: Line separator to split on (e.g. "\\n" or "\\r\\n")

    Returns:
        List of lines without separators
    """
    if not chunk:
        return []
    if chunk.endswith(separator):
        chunk = chunk[: -len(separator)]
    return chunk.split(separator)
