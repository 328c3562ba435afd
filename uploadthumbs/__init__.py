"""
Thumbnail generation for uploaded images.

Derives named thumbnail variants ("profiles") from a single uploaded
source image:
    - Eager generation right after upload, or lazy generation on first
      URL request
    - Deterministic "{profile}-{filename}" naming; an existing file is
      never re-rendered
    - Placeholder thumbnails when no upload exists
    - Removal of every variant together with the source
"""

__version__ = "1.0.0"

from .errors import ThumbnailError, ConfigurationError, ThumbnailIOError
from .profile import ThumbnailProfile, ResolvedProfile, MODE_INSET, MODE_OUTBOUND, MODE_RESIZE
from .dimensions import resolve_dimensions
from .codec import ImageCodec, PillowCodec
from .thumbnail_generator import ThumbnailGenerator
from .artifact import ArtifactPathResolver, ThumbnailArtifact
from .upload_manager import UploadManager, LocalUploadManager
from .placeholder import PlaceholderPublisher
from .config import ThumbConfig
from .generation_stats import GenerationStats, PassState
from .generation_progress import GenerationProgress
from .generator import ThumbnailManager

__all__ = [
    "ThumbnailError",
    "ConfigurationError",
    "ThumbnailIOError",
    "ThumbnailProfile",
    "ResolvedProfile",
    "MODE_INSET",
    "MODE_OUTBOUND",
    "MODE_RESIZE",
    "resolve_dimensions",
    "ImageCodec",
    "PillowCodec",
    "ThumbnailGenerator",
    "ArtifactPathResolver",
    "ThumbnailArtifact",
    "UploadManager",
    "LocalUploadManager",
    "PlaceholderPublisher",
    "ThumbConfig",
    "GenerationStats",
    "PassState",
    "GenerationProgress",
    "ThumbnailManager",
]
