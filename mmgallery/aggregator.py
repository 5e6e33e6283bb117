"""
Aggregator - Builds period listings from a base directory of CW_<n> folders.
"""

import fnmatch
import logging
import os
from typing import List, Optional, Union

from .ballots import read_ballot_file
from .errors import FilesystemError, NotFoundError, ParseError
from .models import PERIOD_PREFIX, Entry, Period, Phase
from .phase import resolve_phase
from .scanner import ContentScanner
from .thumbnail_cache import ThumbnailCache

CREATOR_STRIP_CHARS = '_0123456789'


def parse_period_id(folder_name: str) -> int:
    """
    Return the integer identifier of a period folder name like 'CW_42'.
    
    Leading zeros are rejected so every identifier maps to exactly one folder.
    
    Raises:
        ValueError: If the name does not have the CW_<integer> form
    """
    if not folder_name.startswith(PERIOD_PREFIX):
        raise ValueError(f"Not a period folder: {folder_name!r}")
    suffix = folder_name[len(PERIOD_PREFIX):]
    if not suffix.isdigit() or str(int(suffix)) != suffix:
        raise ValueError(f"Not a period folder: {folder_name!r}")
    return int(suffix)


def creator_key(file_name: str) -> str:
    """
    Derive the creator key of a file name.
    
    Takes the part before the first '.', strips digits and underscores from
    both ends and lowercases it: 'alice_03.png' -> 'alice'.
    """
    stem = file_name.split('.', 1)[0]
    return stem.strip(CREATOR_STRIP_CHARS).lower()


class Aggregator:
    """
    Composes scanner, thumbnail cache, phase resolver and ballot tally into
    period listings.
    
    Every call rescans the filesystem; only thumbnails are cached.
    """
    
    def __init__(
        self,
        base_dir: str,
        cache: Optional[ThumbnailCache] = None,
        link_prefix: str = 'mm',
        scanner: Optional[ContentScanner] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize aggregator.
        
        Args:
            base_dir: Directory holding the CW_<n> period folders
            cache: Shared thumbnail cache (default: a new private cache)
            link_prefix: URL prefix for entry and result links (default: 'mm')
            scanner: Content scanner (default: ContentScanner())
            logger: Optional logger instance
        """
        self.base_dir = base_dir
        self.logger = logger or logging.getLogger(__name__)
        self.cache = cache if cache is not None else ThumbnailCache(logger=self.logger)
        self.scanner = scanner or ContentScanner(logger=self.logger)
        self.link_prefix = link_prefix
        self.skipped_folders: List[str] = []
    
    def period_dir(self, period_id: Union[int, str]) -> str:
        return os.path.join(self.base_dir, f"{PERIOD_PREFIX}{period_id}")
    
    def _link(self, folder: str, file_name: str) -> str:
        return '/'.join((self.link_prefix, os.path.basename(os.path.normpath(folder)), file_name))
    
    def _discover(self) -> List[str]:
        """Return the period folders under the base directory."""
        if not os.path.isdir(self.base_dir):
            raise FilesystemError(f"Base directory not found: {self.base_dir}")
        try:
            names = fnmatch.filter(os.listdir(self.base_dir), f"{PERIOD_PREFIX}*")
        except OSError as e:
            raise FilesystemError(f"Cannot list base directory {self.base_dir}: {e}") from e
        candidates = (os.path.join(self.base_dir, name) for name in names)
        return sorted(c for c in candidates if os.path.isdir(c))
    
    def _build_period(self, period_id: int, folder: str) -> Period:
        """Scan one period folder into a Period without ballot results."""
        entries = []
        for file_name, modified in self.scanner.list_entries(folder):
            entries.append(Entry(
                file_name=file_name,
                href=self._link(folder, file_name),
                modified=modified,
                thumbnail=self.cache.get_thumbnail(os.path.join(folder, file_name)),
            ))
        
        template = self.scanner.find_template(folder)
        return Period(
            id=period_id,
            entries=entries,
            phase=resolve_phase(folder),
            template=self._link(folder, template) if template else None,
        )
    
    def _attach_results(self, period: Period, folder: str) -> None:
        try:
            results = read_ballot_file(folder)
        except (ParseError, FilesystemError) as e:
            self.logger.error(f"Ballots for {period.folder_name} not tallied: {e}")
            period.ballot_error = str(e)
            return
        for result in results:
            result.href = self._link(folder, result.file_name)
        period.results = results
    
    def aggregate_all(self) -> List[Period]:
        """
        Aggregate every period under the base directory.
        
        Folders whose name is not CW_<integer> are skipped and listed in
        skipped_folders.
        
        Returns:
            Periods sorted by identifier, highest first
            
        Raises:
            FilesystemError: If the base directory or a period folder cannot be listed
        """
        periods = []
        skipped = []
        for folder in self._discover():
            name = os.path.basename(folder)
            try:
                period_id = parse_period_id(name)
            except ValueError:
                self.logger.warning(f"Skipping folder with malformed period name: {name}")
                skipped.append(name)
                continue
            
            period = self._build_period(period_id, folder)
            if period.phase is Phase.CLOSED:
                self._attach_results(period, folder)
            periods.append(period)
        
        self.skipped_folders = skipped
        periods.sort(key=lambda p: p.id, reverse=True)
        self.logger.debug(f"Aggregated {len(periods)} periods from {self.base_dir}")
        return periods
    
    def aggregate_one(self, period: Union[int, str]) -> Period:
        """
        Aggregate a single period, without ballot results.
        
        Args:
            period: Period identifier (e.g. 42 or '42') or path of its folder
            
        Raises:
            NotFoundError: If the period folder does not exist
            FilesystemError: If the folder cannot be listed
        """
        if isinstance(period, int) or str(period).isdigit():
            folder = self.period_dir(period)
        else:
            folder = str(period)
        
        try:
            period_id = parse_period_id(os.path.basename(os.path.normpath(folder)))
        except ValueError as e:
            raise NotFoundError(str(e)) from e
        if not os.path.isdir(folder):
            raise NotFoundError(f"No such period: {PERIOD_PREFIX}{period_id}")
        return self._build_period(period_id, folder)
    
    def aggregate_by_creator(self, creator: str) -> List[Period]:
        """
        Aggregate all periods, keeping only the entries of one creator.
        
        Periods without matching entries are kept with an empty entry list.
        Voting and results are cleared on every period.
        
        Raises:
            NotFoundError: If no entry in any period matches the creator
        """
        periods = self.aggregate_all()
        matched = False
        for period in periods:
            period.entries = [e for e in period.entries if creator_key(e.file_name) == creator]
            period.voting_enabled = False
            period.results = None
            period.ballot_error = None
            matched = matched or bool(period.entries)
        if not matched:
            raise NotFoundError(f"No entries for creator: {creator}")
        return periods
