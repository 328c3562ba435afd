"""
GenerationProgress - Reports per-profile generation results.
"""

import logging
from typing import Optional

from .artifact import ThumbnailArtifact, format_bytes
from .generation_stats import GenerationStats


class GenerationProgress:
    """
    Tracks and displays generation progress with optional per-profile output.
    """

    def __init__(
        self,
        show_profiles: bool = False,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize progress tracker.

        Args:
            show_profiles: If True, print each profile as it's processed
            logger: Optional logger instance
        """
        self.show_profiles = show_profiles
        self.logger = logger or logging.getLogger(__name__)

    def on_profile_generated(self, artifact: ThumbnailArtifact, size: Optional[int] = None) -> None:
        """Called when a thumbnail has been rendered."""
        if self.show_profiles:
            size_str = format_bytes(size) if size else "unknown"
            print(f"  [OK] {artifact.profile} -> {artifact.filename} ({size_str})")

    def on_profile_skipped(self, artifact: ThumbnailArtifact, reason: str) -> None:
        """Called when a profile is skipped."""
        if self.show_profiles:
            print(f"  [SKIP] {artifact.profile} -> {reason}")

    def on_profile_failed(self, artifact: ThumbnailArtifact, error: str) -> None:
        """Called when rendering a profile failed."""
        if self.show_profiles:
            print(f"  [ERROR] {artifact.profile} -> {error}")

    def on_pass_complete(self, stats: GenerationStats) -> None:
        """Called once all profiles of a pass are processed."""
        self.logger.info(
            f"Thumbnails for {stats.source_path}: "
            f"{stats.completed_count}/{stats.total_profiles} profiles, {stats.generated} generated, "
            f"{stats.skipped} skipped, {stats.errors} errors "
            f"({stats.elapsed_seconds:.2f}s)"
        )
