"""
ContentScanner - Lists the media entries of one period folder.
"""

import logging
import os
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from .errors import FilesystemError


class ContentScanner:
    """
    Lists eligible image files directly inside a period folder.
    
    Extension matching is case-sensitive: 'photo.JPG' is not listed.
    """
    
    IMAGE_EXTENSIONS = frozenset(('jpg', 'jpeg', 'gif', 'png'))
    TEMPLATE_PREFIX = 'template.'
    
    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)
    
    @classmethod
    def is_image_name(cls, name: str) -> bool:
        """Return True if the file name has one of the image extensions."""
        if '.' not in name:
            return False
        return name.rsplit('.', 1)[1] in cls.IMAGE_EXTENSIONS
    
    def list_entries(self, period_dir: str) -> List[Tuple[str, datetime]]:
        """
        List image files in a period folder.
        
        Args:
            period_dir: Path of the period folder
            
        Returns:
            List of (file_name, modified) tuples, newest first
            
        Raises:
            FilesystemError: If the folder cannot be listed
        """
        found = []
        try:
            with os.scandir(period_dir) as it:
                for dir_entry in it:
                    name = dir_entry.name
                    if name.startswith(self.TEMPLATE_PREFIX):
                        continue
                    if not self.is_image_name(name):
                        continue
                    if dir_entry.is_dir():
                        continue
                    mtime = dir_entry.stat().st_mtime
                    found.append((name, datetime.fromtimestamp(mtime, tz=timezone.utc)))
        except OSError as e:
            raise FilesystemError(f"Cannot list period folder {period_dir}: {e}") from e
        
        # Name order first so equal timestamps keep a stable order
        found.sort(key=lambda item: item[0])
        found.sort(key=lambda item: item[1], reverse=True)
        self.logger.debug(f"Found {len(found)} images in {period_dir}")
        return found
    
    def find_template(self, period_dir: str) -> Optional[str]:
        """Return the name of the first template.* file in the folder, if any."""
        try:
            names = sorted(
                name for name in os.listdir(period_dir)
                if name.startswith(self.TEMPLATE_PREFIX)
            )
        except OSError as e:
            raise FilesystemError(f"Cannot list period folder {period_dir}: {e}") from e
        return names[0] if names else None
