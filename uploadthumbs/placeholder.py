"""
PlaceholderPublisher - Publishes a static placeholder image to a public location.
"""

import hashlib
import logging
import os
import shutil
import tempfile
from typing import Optional, Tuple

from .artifact import join_url
from .errors import ConfigurationError, ThumbnailIOError


class PlaceholderPublisher:
    """
    Copies a source asset into a public directory once.

    Assets are published to ``<publish_path>/<hash>/<basename>`` where the
    hash is derived from the asset's directory, so repeated calls with the
    same asset reuse the published copy.
    """

    def __init__(
        self,
        publish_path: str,
        publish_url: str,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize publisher.

        Args:
            publish_path: Public directory, e.g. '/srv/www/assets'
            publish_url: URL of that directory, e.g. '/assets'
            logger: Optional logger instance
        """
        self.publish_path = publish_path
        self.publish_url = publish_url
        self.logger = logger or logging.getLogger(__name__)

    @staticmethod
    def hash_dir(asset_path: str) -> str:
        """Get the published subdirectory name for an asset."""
        directory = os.path.dirname(os.path.abspath(asset_path))
        return hashlib.sha1(directory.encode('utf-8')).hexdigest()[:8]

    def publish(self, asset_path: str) -> Tuple[str, str]:
        """
        Publish an asset.

        The copy is refreshed only when the asset is newer than the
        published file. It is written to a temporary sibling and moved into
        place, so the published path never holds a partial copy.

        Args:
            asset_path: Path of the source asset

        Returns:
            Tuple of (published_path, published_url)
        """
        if not os.path.isfile(asset_path):
            raise ConfigurationError(f"Placeholder asset not found: {asset_path}")

        subdir = self.hash_dir(asset_path)
        basename = os.path.basename(asset_path)
        target_dir = os.path.join(self.publish_path, subdir)
        target = os.path.join(target_dir, basename)
        url = join_url(join_url(self.publish_url, subdir), basename)

        if os.path.isfile(target) and os.path.getmtime(target) >= os.path.getmtime(asset_path):
            return target, url

        tmp_path = None
        try:
            os.makedirs(target_dir, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(prefix='.publish-', dir=target_dir)
            os.close(fd)
            shutil.copy2(asset_path, tmp_path)
            os.replace(tmp_path, target)
            tmp_path = None
        except OSError as e:
            raise ThumbnailIOError(f"Cannot publish placeholder {asset_path}: {e}") from e
        finally:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.remove(tmp_path)

        self.logger.info(f"Published placeholder {asset_path} -> {target}")
        return target, url
