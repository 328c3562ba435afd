"""
Exceptions raised by the thumbnail engine.
"""


class ThumbnailError(Exception):
    """Base class for all thumbnail errors."""
    pass


class ConfigurationError(ThumbnailError):
    """Raised when a profile or option cannot produce a thumbnail."""
    pass


class ThumbnailIOError(ThumbnailError, OSError):
    """Raised when a directory or file cannot be created, read or written."""
    pass
