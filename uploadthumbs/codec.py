"""
ImageCodec - Decoding and encoding of images on disk.
"""

import logging
import os
import tempfile
from typing import Optional, Tuple

from PIL import ExifTags, Image, ImageOps, UnidentifiedImageError

from .errors import ThumbnailIOError


class ImageCodec:
    """
    Narrow interface the transform engine uses to read and write images.

    Subclass to plug in another image library.
    """

    def open(self, path: str) -> Image.Image:
        raise NotImplementedError

    def autorotate(self, image: Image.Image) -> Image.Image:
        raise NotImplementedError

    def encode(self, image: Image.Image, path: str, quality: int) -> int:
        raise NotImplementedError


class PillowCodec(ImageCodec):
    """
    ImageCodec backed by Pillow.
    """

    # extension -> (Pillow format, lossy)
    OUTPUT_FORMATS = {
        '.jpg': ('JPEG', True),
        '.jpeg': ('JPEG', True),
        '.webp': ('WEBP', True),
        '.png': ('PNG', False),
        '.gif': ('GIF', False),
        '.bmp': ('BMP', False),
        '.tif': ('TIFF', False),
        '.tiff': ('TIFF', False),
    }

    ALPHA_FORMATS = {'PNG', 'WEBP', 'GIF', 'TIFF'}

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    def open(self, path: str) -> Image.Image:
        """
        Decode an image fully into memory.

        Args:
            path: Absolute path of the image file

        Returns:
            Decoded image, detached from the file handle
        """
        try:
            with Image.open(path) as img:
                img.load()
                self.logger.debug(f"Decoded {path} ({img.size[0]}x{img.size[1]}, {img.mode})")
                return img.copy()
        except (OSError, UnidentifiedImageError, Image.DecompressionBombError) as e:
            raise ThumbnailIOError(f"Cannot read image {path}: {e}") from e

    def autorotate(self, image: Image.Image) -> Image.Image:
        """
        Apply the EXIF orientation tag.

        Returns the same image object when no rotation is needed.
        """
        if image.getexif().get(ExifTags.Base.Orientation, 1) == 1:
            return image
        return ImageOps.exif_transpose(image) or image

    def encode(self, image: Image.Image, path: str, quality: int) -> int:
        """
        Encode an image to ``path``.

        The image is written to a temporary file in the target directory
        and moved into place, so the target never exists half written.

        Args:
            image: Image to encode
            path: Target path; its extension selects the output format
            quality: Quality for lossy formats (0-100)

        Returns:
            Number of bytes written
        """
        output_format, lossy = self._get_output_format(os.path.splitext(path)[1])
        img = image
        if output_format not in self.ALPHA_FORMATS:
            img = self._convert_color_mode(img)

        options = {}
        if lossy:
            options['quality'] = quality
        if output_format == 'JPEG':
            options['optimize'] = True

        directory = os.path.dirname(path) or '.'
        tmp_path = None
        try:
            fd, tmp_path = tempfile.mkstemp(prefix='.thumb-', dir=directory)
            with os.fdopen(fd, 'wb') as f:
                img.save(f, format=output_format, **options)
            os.chmod(tmp_path, 0o644)
            os.replace(tmp_path, path)
            tmp_path = None
            return os.path.getsize(path)
        except OSError as e:
            raise ThumbnailIOError(f"Cannot write thumbnail {path}: {e}") from e
        finally:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.remove(tmp_path)

    def _convert_color_mode(self, img: Image.Image) -> Image.Image:
        """Flatten transparency onto white for formats without alpha."""
        if img.mode in ('RGBA', 'LA'):
            background = Image.new('RGB', img.size, (255, 255, 255))
            if img.mode == 'LA':
                img = img.convert('RGBA')
            background.paste(img, mask=img.split()[-1])
            return background
        elif img.mode == 'P':
            img = img.convert('RGBA')
            background = Image.new('RGB', img.size, (255, 255, 255))
            background.paste(img, mask=img.split()[-1])
            return background
        elif img.mode not in ('RGB', 'L'):
            return img.convert('RGB')
        return img

    def _get_output_format(self, extension: str) -> Tuple[str, bool]:
        """Determine output format based on the target extension."""
        return self.OUTPUT_FORMATS.get(extension.lower(), ('JPEG', True))
