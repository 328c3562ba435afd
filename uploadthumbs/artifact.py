"""
ThumbnailArtifact and ArtifactPathResolver - Deterministic thumbnail naming.
"""

import logging
import os
import re
from collections.abc import Mapping
from dataclasses import dataclass, asdict
from typing import Any, Optional

from .errors import ConfigurationError, ThumbnailIOError


_TOKEN = re.compile(r'{([^}]+)}')


def resolve_template(template: str, owner: Any) -> str:
    """
    Substitute ``{name}`` tokens with values read from the owner.

    Mappings are read by key, other objects by attribute. Nothing is
    cached: the same template resolves differently for different owners.
    """
    def lookup(match):
        name = match.group(1)
        if isinstance(owner, Mapping):
            if name in owner:
                return str(owner[name])
        elif owner is not None and hasattr(owner, name):
            return str(getattr(owner, name))
        raise ConfigurationError(f"Cannot resolve '{{{name}}}' in path template '{template}'")

    return _TOKEN.sub(lookup, template)


def join_url(base: str, filename: str) -> str:
    """Join a URL and a filename with a single forward slash."""
    return base.rstrip('/') + '/' + filename


def format_bytes(bytes_val: Optional[int]) -> str:
    """Format bytes as human-readable string."""
    if bytes_val is None:
        return "unknown"
    for unit in ['B', 'KB', 'MB', 'GB']:
        if bytes_val < 1024:
            return f"{bytes_val:.1f} {unit}"
        bytes_val /= 1024
    return f"{bytes_val:.1f} TB"


@dataclass(frozen=True)
class ThumbnailArtifact:
    """
    A single thumbnail variant of a source file.

    Attributes:
        profile: Profile name
        source_filename: Stored filename of the source image
        filename: Derived thumbnail filename
        path: Absolute filesystem path
        url: Public URL
    """
    profile: str
    source_filename: str
    filename: str
    path: str
    url: Optional[str]

    @property
    def exists(self) -> bool:
        """True if the thumbnail file is present on disk."""
        return os.path.isfile(self.path)

    @property
    def size(self) -> Optional[int]:
        """Size in bytes, or None if missing."""
        try:
            return os.path.getsize(self.path)
        except OSError:
            return None

    def to_dict(self) -> dict:
        data = asdict(self)
        data['exists'] = self.exists
        return data

    def format_status(self) -> str:
        """
        Format a human-readable status string.

        Returns:
            Status string like "thumb-photo.jpg - EXISTS (45.2 KB)"
        """
        if self.exists:
            return f"{self.filename} - EXISTS ({format_bytes(self.size)})"
        return f"{self.filename} - MISSING"


class ArtifactPathResolver:
    """
    Computes thumbnail paths and URLs from directory and URL templates.
    """

    def __init__(
        self,
        thumb_path: str,
        thumb_url: Optional[str] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize resolver.

        Args:
            thumb_path: Directory template, e.g. '/srv/upload/{id}/thumb'
            thumb_url: URL template, e.g. '/upload/{id}/thumb'
            logger: Optional logger instance
        """
        self.thumb_path = thumb_path
        self.thumb_url = thumb_url
        self.logger = logger or logging.getLogger(__name__)

    @staticmethod
    def thumb_filename(source_filename: str, profile: str) -> str:
        """Get the thumbnail filename for a source filename and profile."""
        return f"{profile}-{source_filename}"

    def artifact(
        self,
        owner: Any,
        source_filename: Optional[str],
        profile: str
    ) -> Optional[ThumbnailArtifact]:
        """
        Build the artifact for a stored filename.

        Returns:
            ThumbnailArtifact, or None if there is no source filename
        """
        if not source_filename:
            return None
        filename = self.thumb_filename(source_filename, profile)
        directory = resolve_template(self.thumb_path, owner)
        url = None
        if self.thumb_url is not None:
            url = join_url(resolve_template(self.thumb_url, owner), filename)
        return ThumbnailArtifact(
            profile=profile,
            source_filename=source_filename,
            filename=filename,
            path=os.path.join(directory, filename),
            url=url,
        )

    def ensure_directory(self, path: str) -> None:
        """
        Create the parent directory of ``path`` if needed.

        Concurrent callers creating the same directory all succeed.
        """
        directory = os.path.dirname(path)
        if not directory:
            return
        try:
            os.makedirs(directory, exist_ok=True)
        except OSError as e:
            self.logger.error(f"Cannot create thumbnail directory {directory}: {e}")
            raise ThumbnailIOError(
                f"Directory specified in 'thumb_path' doesn't exist or cannot be created: "
                f"{directory}"
            ) from e
