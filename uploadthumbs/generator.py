"""
ThumbnailManager - Creates, serves and deletes the thumbnails of an upload.
"""

import logging
import os
import threading
import zlib
from typing import Any, Callable, Iterable, Optional

from PIL import Image

from .artifact import ArtifactPathResolver, ThumbnailArtifact
from .codec import ImageCodec, PillowCodec
from .config import ThumbConfig
from .errors import ConfigurationError, ThumbnailIOError
from .generation_progress import GenerationProgress
from .generation_stats import GenerationStats, PassState
from .placeholder import PlaceholderPublisher
from .profile import ThumbnailProfile
from .thumbnail_generator import ThumbnailGenerator
from .upload_manager import LocalUploadManager, UploadManager, get_attribute_value


class _PassSource:
    """Decodes the source image at most once per generation pass."""

    def __init__(self, codec: ImageCodec, path: str, stats: GenerationStats,
                 image: Optional[Image.Image] = None):
        self.codec = codec
        self.path = path
        self.stats = stats
        self.image = image
        self.failed = False
        if image is not None:
            stats.state = PassState.SOURCE_READY

    def get(self) -> Image.Image:
        if self.image is None:
            try:
                self.image = self.codec.open(self.path)
            except ThumbnailIOError:
                self.failed = True
                raise
            self.stats.state = PassState.SOURCE_READY
        return self.image


class ThumbnailManager:
    """
    Keeps the thumbnails of one upload attribute in step with its source.

    All operations take the owning record explicitly; path templates are
    resolved against it on every call and nothing record-specific is kept
    between calls.
    """

    LOCK_STRIPES = 64

    def __init__(
        self,
        config: ThumbConfig,
        upload_manager: Optional[UploadManager] = None,
        codec: Optional[ImageCodec] = None,
        publisher: Optional[PlaceholderPublisher] = None,
        progress: Optional[GenerationProgress] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize thumbnail manager.

        Args:
            config: Thumbnail options
            upload_manager: Collaborator owning the original file
                (default: LocalUploadManager on config.path/config.url)
            codec: Image codec (default: PillowCodec)
            publisher: Placeholder publisher (default: built from
                config.publish_path/config.publish_url when set)
            progress: Optional per-profile progress reporter
            logger: Optional logger instance
        """
        self.config = config
        self.logger = logger or logging.getLogger(__name__)
        self.upload_manager = upload_manager or LocalUploadManager(
            config.path, config.url, logger=self.logger
        )
        self.codec = codec or PillowCodec(logger=self.logger)
        self.thumb_gen = ThumbnailGenerator(codec=self.codec, logger=self.logger)
        self.resolver = ArtifactPathResolver(config.thumb_path, config.thumb_url, logger=self.logger)
        if publisher is None and config.publish_path and config.publish_url:
            publisher = PlaceholderPublisher(config.publish_path, config.publish_url, logger=self.logger)
        self.publisher = publisher
        self.progress = progress
        self._locks = [threading.Lock() for _ in range(self.LOCK_STRIPES)]

    # --- Upload lifecycle hooks ---------------------------------------------

    def after_upload(self, owner: Any, scenario: Optional[str] = None) -> Optional[GenerationStats]:
        """
        Process a freshly stored upload.

        Autorotates the original if configured, renders every profile when
        thumbnails are created on save, then removes the original if
        ``delete_original_file`` is set and every profile succeeded.

        Args:
            owner: Record the upload belongs to
            scenario: Scenario the record was saved in, if any

        Returns:
            GenerationStats of the eager pass, or None if nothing was rendered
        """
        if not self.config.should_process(scenario):
            self.logger.debug(f"Scenario {scenario!r} does not process uploads")
            return None

        attribute = self.config.attribute
        path = self._get_original_path(owner, attribute)
        if path is None:
            self.logger.debug(f"No uploaded file for '{attribute}', nothing to do")
            return None

        image = None
        if self.config.autorotate:
            image = self.codec.open(path)
            rotated = self.codec.autorotate(image)
            if rotated is not image:
                self.logger.debug(f"Autorotated {path}")
                self.codec.encode(rotated, path, 100)
                image = rotated

        if not self.config.create_thumbs_on_save:
            return None

        stats = self.ensure_all(owner, path, image=image)

        if self.config.delete_original_file:
            self.upload_manager.delete(owner, attribute)
        return stats

    def after_delete(self, owner: Any) -> None:
        """Remove the source and all thumbnails of a deleted record."""
        self.delete(owner, self.config.attribute)

    def after_replace(self, owner: Any) -> None:
        """Remove the previous source and its thumbnails after a new upload."""
        attribute = self.config.attribute
        old_value = get_attribute_value(owner, attribute, old=True)
        if old_value and old_value != get_attribute_value(owner, attribute):
            self.delete(owner, attribute, old=True)

    # --- Generation ----------------------------------------------------------

    def ensure_all(
        self,
        owner: Any,
        source_path: str,
        profiles: Optional[Iterable[str]] = None,
        image: Optional[Image.Image] = None,
        attribute: Optional[str] = None
    ) -> GenerationStats:
        """
        Make sure a thumbnail exists for every requested profile.

        Profiles are processed in declaration order. A profile whose file
        is already present is skipped without re-rendering. The source is
        decoded at most once, and only if some profile needs rendering.

        Args:
            owner: Record the upload belongs to
            source_path: Path of the source image
            profiles: Profile names (default: all configured profiles)
            image: Already decoded source image, reused instead of decoding
            attribute: Attribute holding the stored filename
                (default: config.attribute)

        Returns:
            GenerationStats for the pass

        Raises:
            ConfigurationError: A profile cannot be rendered
            ThumbnailIOError: The thumbnail directory cannot be created, the
                source cannot be read, or one or more profiles failed to write
        """
        attribute = attribute or self.config.attribute
        names = list(self.config.thumbs) if profiles is None else list(profiles)
        stats = GenerationStats(source_path=source_path, total_profiles=len(names))
        source = _PassSource(self.codec, source_path, stats, image)
        failed = []

        try:
            for name in names:
                profile = self.config.profile(name)
                artifact = self.get_thumb_artifact(owner, attribute, name)
                if artifact is None:
                    stats.skipped += 1
                    continue

                self.resolver.ensure_directory(artifact.path)
                try:
                    size = self._render_if_absent(artifact.path, profile, owner, source.get)
                except ThumbnailIOError as e:
                    if source.failed:
                        raise
                    error_msg = f"Error generating '{name}' for {source_path}: {e}"
                    self.logger.error(error_msg)
                    stats.errors += 1
                    stats.error_details.append(error_msg)
                    failed.append(name)
                    if self.progress:
                        self.progress.on_profile_failed(artifact, str(e))
                    continue

                if size is None:
                    stats.skipped += 1
                    self.logger.debug(f"Thumbnail exists, skipping: {artifact.path}")
                    if self.progress:
                        self.progress.on_profile_skipped(artifact, "already exists")
                else:
                    stats.generated += 1
                    stats.bytes_generated += size
                    self.logger.debug(f"Generated: {artifact.path} ({size} bytes)")
                    if self.progress:
                        self.progress.on_profile_generated(artifact, size)
        except Exception:
            stats.state = PassState.FAILED
            raise

        if self.progress:
            self.progress.on_pass_complete(stats)

        if failed:
            stats.state = PassState.FAILED
            raise ThumbnailIOError(
                f"{len(failed)} of {len(names)} thumbnails failed for {source_path}: "
                f"{', '.join(failed)}"
            )

        stats.state = PassState.DONE
        return stats

    def _render_if_absent(
        self,
        target_path: str,
        profile: ThumbnailProfile,
        owner: Any,
        load_source: Callable[[], Image.Image]
    ) -> Optional[int]:
        """
        Render a profile unless its file already exists.

        Returns:
            Bytes written, or None if the file was already present
        """
        lock = self._locks[zlib.crc32(target_path.encode('utf-8')) % self.LOCK_STRIPES]
        with lock:
            if os.path.isfile(target_path):
                return None
            return self.thumb_gen.render(load_source(), profile.resolve(owner), target_path)

    # --- Lookup ----------------------------------------------------------------

    def get_thumb_artifact(
        self,
        owner: Any,
        attribute: str,
        profile: str = 'thumb',
        old: bool = False
    ) -> Optional[ThumbnailArtifact]:
        """Get the artifact for a profile, or None if no file is stored."""
        filename = get_attribute_value(owner, attribute, old)
        return self.resolver.artifact(owner, filename, profile)

    def get_thumb_upload_path(
        self,
        owner: Any,
        attribute: str,
        profile: str = 'thumb',
        old: bool = False
    ) -> Optional[str]:
        """
        Get the filesystem path of a thumbnail.

        Args:
            owner: Record the upload belongs to
            attribute: Attribute holding the stored filename
            profile: Profile name
            old: Use the previously stored filename

        Returns:
            Path, or None if the record has no stored file
        """
        self.config.profile(profile)
        artifact = self.get_thumb_artifact(owner, attribute, profile, old)
        return artifact.path if artifact else None

    def get_thumb_upload_url(
        self,
        owner: Any,
        attribute: str,
        profile: str = 'thumb'
    ) -> Optional[str]:
        """
        Get the public URL of a thumbnail.

        With ``create_thumbs_on_request`` the thumbnail is rendered first if
        missing. Falls back to the placeholder thumbnail when configured.

        Returns:
            URL, or None if no image is available
        """
        self.config.profile(profile)
        if self.config.create_thumbs_on_request:
            source_path = self._get_original_path(owner, attribute)
            if source_path:
                self.ensure_all(owner, source_path, profiles=[profile], attribute=attribute)

        artifact = self.get_thumb_artifact(owner, attribute, profile)
        if artifact is not None and artifact.exists:
            return artifact.url
        if self.config.placeholder:
            return self.get_placeholder_url(owner, profile)
        return None

    def get_placeholder_url(self, owner: Any, profile: str = 'thumb') -> str:
        """
        Get the URL of a placeholder thumbnail, rendering it if missing.

        The placeholder is published once and the thumbnail is written next
        to the published copy.
        """
        if not self.config.placeholder:
            raise ConfigurationError("No placeholder configured")
        if self.publisher is None:
            raise ConfigurationError("A placeholder requires publish_path and publish_url")

        thumb_profile = self.config.profile(profile)
        published_path, published_url = self.publisher.publish(self.config.placeholder)
        filename = self.resolver.thumb_filename(os.path.basename(published_path), profile)
        thumb_path = os.path.join(os.path.dirname(published_path), filename)
        thumb_url = published_url.rsplit('/', 1)[0] + '/' + filename

        size = self._render_if_absent(
            thumb_path, thumb_profile, owner, lambda: self.codec.open(published_path)
        )
        if size is not None:
            self.logger.info(f"Generated placeholder thumbnail: {thumb_path}")
        return thumb_url

    # --- Deletion ----------------------------------------------------------------

    def delete(self, owner: Any, attribute: str, old: bool = False) -> int:
        """
        Delete the source file and every profile's thumbnail.

        Missing files are ignored.

        Args:
            owner: Record the upload belongs to
            attribute: Attribute holding the stored filename
            old: Delete files of the previously stored filename

        Returns:
            Number of thumbnails removed
        """
        self.upload_manager.delete(owner, attribute, old)

        removed = 0
        for profile in self.config.thumbs:
            path = self.get_thumb_upload_path(owner, attribute, profile, old)
            if not path:
                continue
            try:
                os.remove(path)
            except FileNotFoundError:
                continue
            removed += 1
            self.logger.info(f"Deleted thumbnail: {path}")
        return removed

    def _get_original_path(self, owner: Any, attribute: str) -> Optional[str]:
        """Get the path of the stored source, or None if it is not on disk."""
        path = self.upload_manager.get_upload_path(owner, attribute)
        if not path or not os.path.isfile(path):
            return None
        return path
