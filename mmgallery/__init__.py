"""
Weekly image gallery with lock-driven submission, voting and results.

Each week lives in its own CW_<n> folder:
    1. Submitting: images are collected
    2. Voting open: upload.lock is present
    3. Closed: vote.lock is also present, votes.txt is tallied
"""

__version__ = "1.0.0"

from .errors import GalleryError, FilesystemError, DecodeError, ParseError, NotFoundError
from .models import Phase, ThumbnailMetadata, Entry, RankedResult, Period
from .scanner import ContentScanner
from .thumbnail_cache import ThumbnailRenderer, ThumbnailCache
from .phase import check_lock, resolve_phase, can_vote
from .ballots import parse_ballots, read_ballot_file
from .slots import slot_count, slot_positions
from .aggregator import Aggregator, creator_key, parse_period_id
from .config import GalleryConfig
from .reporter import Reporter

__all__ = [
    "GalleryError",
    "FilesystemError",
    "DecodeError",
    "ParseError",
    "NotFoundError",
    "Phase",
    "ThumbnailMetadata",
    "Entry",
    "RankedResult",
    "Period",
    "ContentScanner",
    "ThumbnailRenderer",
    "ThumbnailCache",
    "check_lock",
    "resolve_phase",
    "can_vote",
    "parse_ballots",
    "read_ballot_file",
    "slot_count",
    "slot_positions",
    "Aggregator",
    "creator_key",
    "parse_period_id",
    "GalleryConfig",
    "Reporter",
]
