"""
Dimension resolution for thumbnail profiles.
"""

from typing import Optional, Tuple

from .errors import ConfigurationError


def resolve_dimensions(
    width: Optional[int],
    height: Optional[int],
    source_width: int,
    source_height: int
) -> Tuple[int, int]:
    """
    Compute the concrete thumbnail box for a profile.

    Explicit width and height win over the source aspect ratio. When only
    one side is set the other is scaled from the source ratio and rounded
    up.

    Args:
        width: Requested width, None or < 1 when unset
        height: Requested height, None or < 1 when unset
        source_width: Intrinsic width of the source image
        source_height: Intrinsic height of the source image

    Returns:
        Tuple of (width, height), both positive
    """
    width = width if width and width > 0 else 0
    height = height if height and height > 0 else 0

    if width < 1 and height < 1:
        raise ConfigurationError(
            f"Length of either side of thumb cannot be 0 or negative, "
            f"current size is {width}x{height}"
        )
    if width and height:
        return width, height

    if source_width < 1 or source_height < 1:
        raise ConfigurationError(
            f"Cannot derive thumbnail size from a {source_width}x{source_height} source"
        )

    # ceil(width / (W / H)) and ceil(height * (W / H)) without float error
    if width:
        height = -(-width * source_height // source_width)
    else:
        width = -(-height * source_width // source_height)

    return width, height
