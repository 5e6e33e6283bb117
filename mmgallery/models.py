"""
Models - Data records produced by an aggregation run.
"""

from dataclasses import dataclass, field, asdict
from datetime import datetime
from enum import Enum
from typing import List, Optional


PERIOD_PREFIX = 'CW_'


class Phase(Enum):
    """Workflow phase of a period, derived from its lock markers."""
    SUBMITTING = 'submitting'
    VOTING_OPEN = 'voting_open'
    CLOSED = 'closed'


@dataclass(frozen=True)
class ThumbnailMetadata:
    """
    Display metadata for one image.
    
    Attributes:
        width: Display width (the fixed box width)
        height: Display height, derived from the source aspect ratio
        preview: Base64 of a tiny JPEG preview ('' when degraded)
        error: Reason the image could not be decoded, None on success
    """
    width: int
    height: int
    preview: str = ''
    error: Optional[str] = None
    
    @property
    def is_placeholder(self) -> bool:
        """True if this is the fallback used for an undecodable image."""
        return self.error is not None
    
    @property
    def size(self):
        return (self.width, self.height)


@dataclass
class Entry:
    """
    One submitted image within a period.
    
    Attributes:
        file_name: Base name of the image file
        href: Relative link (prefix/CW_<id>/file_name)
        modified: Last modification time
        thumbnail: Display metadata from the thumbnail cache
    """
    file_name: str
    href: str
    modified: datetime
    thumbnail: ThumbnailMetadata


@dataclass
class RankedResult:
    """A ballot choice with its tallied vote count and 1-based rank."""
    file_name: str
    votes: int
    rank: int
    href: Optional[str] = None
    
    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class Period:
    """
    One aggregation unit (a calendar week) with its workflow state.
    
    Attributes:
        id: Integer identifier parsed from the folder name
        entries: Entries ordered by modification time, newest first
        phase: Workflow phase derived from lock markers
        results: Ranked ballot results, only set for closed periods
        template: Link to an override template file, passed through as-is
        ballot_error: Reason the ballot file could not be tallied
        voting_enabled: Cleared for views that never allow voting
    """
    id: int
    entries: List[Entry] = field(default_factory=list)
    phase: Phase = Phase.SUBMITTING
    results: Optional[List[RankedResult]] = None
    template: Optional[str] = None
    ballot_error: Optional[str] = None
    voting_enabled: bool = True
    
    @property
    def folder_name(self) -> str:
        return f"{PERIOD_PREFIX}{self.id}"
    
    @property
    def can_vote(self) -> bool:
        """True while the period accepts votes."""
        return self.voting_enabled and self.phase is Phase.VOTING_OPEN
    
    @property
    def has_results(self) -> bool:
        return bool(self.results)
