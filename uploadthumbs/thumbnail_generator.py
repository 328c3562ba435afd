"""
ThumbnailGenerator - Handles image resizing and thumbnail generation.
"""

import logging
import re
from typing import Optional, Tuple

from PIL import Image, ImageColor, ImageOps

from .codec import ImageCodec, PillowCodec
from .dimensions import resolve_dimensions
from .errors import ConfigurationError
from .profile import MODE_INSET, MODE_OUTBOUND, MODE_RESIZE, ResolvedProfile


_BARE_HEX = re.compile(r'^(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$')


class ThumbnailGenerator:
    """
    Renders thumbnails from a decoded source image using Pillow.

    The source image passed to :meth:`render` is never modified; every
    render works on its own copy so one decode can serve many profiles.
    """

    def __init__(
        self,
        codec: Optional[ImageCodec] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize thumbnail generator.

        Args:
            codec: Image codec used to encode output (default: PillowCodec)
            logger: Optional logger instance
        """
        self.logger = logger or logging.getLogger(__name__)
        self.codec = codec or PillowCodec(logger=self.logger)

    def render(
        self,
        image: Image.Image,
        profile: ResolvedProfile,
        target_path: str
    ) -> int:
        """
        Generate a thumbnail for a profile and write it to disk.

        Args:
            image: Decoded source image
            profile: Profile with all config values resolved
            target_path: Destination file path

        Returns:
            Number of bytes written
        """
        width, height = resolve_dimensions(profile.width, profile.height, *image.size)
        self.logger.debug(
            f"Rendering '{profile.name}' {width}x{height} ({profile.mode}, "
            f"q={profile.quality}) -> {target_path}"
        )

        thumb = self.transform(
            image.copy(), width, height, profile.mode, profile.bg_color, profile.processor
        )
        try:
            return self.codec.encode(thumb, target_path, profile.quality)
        except Exception as e:
            self.logger.error(f"Error writing thumbnail '{profile.name}': {e}")
            raise

    def transform(
        self,
        image: Image.Image,
        width: int,
        height: int,
        mode: str = MODE_INSET,
        bg_color: str = 'FFF',
        processor=None
    ) -> Image.Image:
        """
        Apply a transform strategy to a working copy.

        Args:
            image: Working copy of the source, may be modified in place
            width: Box width
            height: Box height
            mode: One of 'inset', 'outbound', 'resize'
            bg_color: Padding colour used by 'inset'
            processor: Optional callable (image, width, height, mode) -> image
                replacing the built-in strategies

        Returns:
            Transformed image
        """
        if processor is not None:
            try:
                result = processor(image, width, height, mode)
            except Exception as e:
                raise ConfigurationError(f"Thumbnail processor failed: {e}") from e
            if not isinstance(result, Image.Image):
                raise ConfigurationError(
                    f"Thumbnail processor must return an image, got {type(result).__name__}"
                )
            return result

        if mode == MODE_INSET:
            return self._inset(image, (width, height), parse_color(bg_color))
        elif mode == MODE_OUTBOUND:
            return ImageOps.fit(image, (width, height), method=Image.Resampling.LANCZOS)
        elif mode == MODE_RESIZE:
            return image.resize((width, height), Image.Resampling.LANCZOS)
        raise ConfigurationError(f"Unknown thumbnail mode: {mode!r}")

    def _inset(
        self,
        image: Image.Image,
        box: Tuple[int, int],
        color: Tuple[int, ...]
    ) -> Image.Image:
        """Fit within the box without upscaling, then pad to the exact box."""
        image.thumbnail(box, Image.Resampling.LANCZOS)
        if image.size == box:
            return image

        has_alpha = image.mode in ('RGBA', 'LA') or 'transparency' in image.info
        canvas_mode = 'RGBA' if has_alpha else 'RGB'
        if len(color) == 3 and canvas_mode == 'RGBA':
            color = color + (255,)
        elif len(color) == 4 and canvas_mode == 'RGB':
            color = color[:3]

        canvas = Image.new(canvas_mode, box, color)
        if image.mode != canvas_mode:
            image = image.convert(canvas_mode)
        offset = ((box[0] - image.size[0]) // 2, (box[1] - image.size[1]) // 2)
        if canvas_mode == 'RGBA':
            canvas.paste(image, offset, mask=image)
        else:
            canvas.paste(image, offset)
        return canvas


def parse_color(value) -> Tuple[int, ...]:
    """
    Parse a background colour.

    Accepts bare hex ('FFF', 'ffffff'), '#'-prefixed hex, colour names
    and RGB(A) tuples.
    """
    if isinstance(value, (tuple, list)):
        return tuple(int(c) for c in value)
    text = str(value).strip()
    if _BARE_HEX.match(text):
        text = '#' + text
    try:
        return ImageColor.getrgb(text)
    except ValueError:
        raise ConfigurationError(f"Invalid background colour: {value!r}") from None
