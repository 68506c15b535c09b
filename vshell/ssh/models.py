"""
Session data models.

Dataclasses returned by bounded reads and delivered by chunk readers.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple


@dataclass(frozen=True)
class CommandResult:
    """Output of one bounded read."""

    match_index: int
    output: str
    markers: Tuple[str, ...] = field(default=(), repr=False)

    @property
    def ok(self) -> bool:
        """True if a marker matched."""
        return self.match_index >= 0

    @property
    def matched(self) -> Optional[str]:
        """The winning marker, or None on timeout/error."""
        if 0 <= self.match_index < len(self.markers):
            return self.markers[self.match_index]
        return None


@dataclass(frozen=True)
class Chunk:
    """One delivery from a chunk reader.

    Exactly one of ``data`` (possibly empty at end of stream) or ``error``
    is meaningful.
    """

    data: bytes = b""
    error: Optional[BaseException] = None

    @property
    def eof(self) -> bool:
        return self.error is None and not self.data
