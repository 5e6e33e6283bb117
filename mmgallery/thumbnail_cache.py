"""
ThumbnailCache - Computes and memoizes display metadata for images.
"""

import base64
import io
import logging
import os
import threading
from concurrent.futures import Future
from typing import Dict, Optional

from PIL import Image

from .errors import DecodeError
from .models import ThumbnailMetadata


class ThumbnailRenderer:
    """
    Decodes an image and derives its display size and tiny preview using Pillow.
    """
    
    def __init__(
        self,
        box_width: int = 330,
        preview_width: int = 20,
        quality: int = 75
    ):
        """
        Initialize thumbnail renderer.
        
        Args:
            box_width: Fixed display width (default: 330)
            preview_width: Width of the embedded preview (default: 20)
            quality: JPEG quality for the preview (default: 75)
        """
        self.box_width = box_width
        self.preview_width = preview_width
        self.quality = quality
    
    def render(self, path: str) -> ThumbnailMetadata:
        """
        Decode the image at path and compute its metadata.
        
        Args:
            path: Path of the image file
            
        Returns:
            ThumbnailMetadata with scaled size and preview
            
        Raises:
            DecodeError: If the file cannot be opened or decoded
        """
        try:
            with Image.open(path) as img:
                img.load()
                width, height = img.size
                if width == 0 or height == 0:
                    raise DecodeError(f"Image has no pixels: {path}")
                ratio = height / width
                preview_size = (self.preview_width, max(1, int(ratio * self.preview_width + 0.5)))
                small = self._convert_color_mode(img).resize(
                    preview_size, Image.Resampling.LANCZOS
                )
        except DecodeError:
            raise
        except Exception as e:
            raise DecodeError(f"Cannot decode {path}: {e}") from e
        
        output = io.BytesIO()
        small.save(output, format='JPEG', quality=self.quality)
        preview = base64.b64encode(output.getvalue()).decode('ascii').rstrip('=')
        
        return ThumbnailMetadata(
            width=self.box_width,
            height=int(ratio * self.box_width + 0.5),
            preview=preview,
        )
    
    def placeholder(self, reason: str) -> ThumbnailMetadata:
        """Return the fallback metadata for an image that failed to decode."""
        return ThumbnailMetadata(
            width=self.box_width,
            height=self.box_width,
            preview='',
            error=reason,
        )
    
    def _convert_color_mode(self, img: Image.Image) -> Image.Image:
        """Flatten the image onto white RGB so it can be saved as JPEG."""
        if img.mode == 'P':
            img = img.convert('RGBA')
        if img.mode in ('RGBA', 'LA'):
            if img.mode == 'LA':
                img = img.convert('RGBA')
            background = Image.new('RGB', img.size, (255, 255, 255))
            background.paste(img, mask=img.split()[-1])
            return background
        elif img.mode != 'RGB':
            return img.convert('RGB')
        return img


class ThumbnailCache:
    """
    Process-wide cache of ThumbnailMetadata keyed by absolute file path.
    
    Entries are computed at most once per path, even when several threads
    ask for the same uncached path at the same time. Entries are never
    invalidated: a changed or deleted file keeps its first result.
    """
    
    def __init__(
        self,
        renderer: Optional[ThumbnailRenderer] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize thumbnail cache.
        
        Args:
            renderer: Renderer used on cache misses (default: ThumbnailRenderer())
            logger: Optional logger instance
        """
        self.renderer = renderer or ThumbnailRenderer()
        self.logger = logger or logging.getLogger(__name__)
        self._entries: Dict[str, ThumbnailMetadata] = {}
        self._pending: Dict[str, Future] = {}
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0
        self.degraded = 0
    
    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
    
    def __contains__(self, path: str) -> bool:
        with self._lock:
            return os.path.abspath(path) in self._entries
    
    def get_thumbnail(self, path: str) -> ThumbnailMetadata:
        """
        Return the metadata for an image, computing it on first request.
        
        Args:
            path: Path of the image file
            
        Returns:
            ThumbnailMetadata, a placeholder when the image cannot be decoded
        """
        key = os.path.abspath(path)
        
        with self._lock:
            cached = self._entries.get(key)
            if cached is not None:
                self.hits += 1
                return cached
            future = self._pending.get(key)
            owner = future is None
            if owner:
                future = Future()
                self._pending[key] = future
                self.misses += 1
        
        if not owner:
            return future.result()
        
        try:
            metadata = self._compute(key)
        except BaseException as e:
            with self._lock:
                del self._pending[key]
            future.set_exception(e)
            raise
        
        with self._lock:
            self._entries[key] = metadata
            del self._pending[key]
        future.set_result(metadata)
        return metadata
    
    def _compute(self, key: str) -> ThumbnailMetadata:
        try:
            return self.renderer.render(key)
        except DecodeError as e:
            self.logger.error(f"Error generating thumbnail: {e}")
            with self._lock:
                self.degraded += 1
            return self.renderer.placeholder(str(e))
    
    def stats(self) -> Dict[str, int]:
        """Return hit/miss counters and the number of cached entries."""
        with self._lock:
            return {
                'entries': len(self._entries),
                'hits': self.hits,
                'misses': self.misses,
                'degraded': self.degraded,
            }
