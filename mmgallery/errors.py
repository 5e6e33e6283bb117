"""
Errors - Exception types raised by the gallery core.
"""


class GalleryError(Exception):
    """Base class for all gallery errors."""
    pass


class FilesystemError(GalleryError):
    """Raised when a base or period directory cannot be listed."""
    pass


class DecodeError(GalleryError):
    """Raised when an image file cannot be opened or decoded."""
    pass


class ParseError(GalleryError):
    """Raised when a ballot file cannot be parsed."""
    pass


class NotFoundError(GalleryError):
    """Raised when a requested period or creator matches nothing."""
    pass
