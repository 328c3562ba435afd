"""
ThumbnailProfile - Declarative description of one thumbnail variant.
"""

from dataclasses import dataclass
from typing import Any, Callable, Optional

from .errors import ConfigurationError


MODE_INSET = 'inset'
MODE_OUTBOUND = 'outbound'
MODE_RESIZE = 'resize'

MODES = (MODE_INSET, MODE_OUTBOUND, MODE_RESIZE)

DEFAULT_QUALITY = 100
DEFAULT_BG_COLOR = 'FFF'


def config_value(value: Any, owner: Any) -> Any:
    """Evaluate a config value: callables are invoked with the owner."""
    if callable(value):
        return value(owner)
    return value


@dataclass(frozen=True)
class ResolvedProfile:
    """
    A profile with every config value evaluated for one owner.

    Attributes:
        name: Profile name
        width: Requested width (None or < 1 means unset)
        height: Requested height (None or < 1 means unset)
        quality: Encoder quality 0-100
        mode: Transform mode
        bg_color: Padding colour for inset mode
        processor: Optional custom transform
    """
    name: str
    width: Optional[int]
    height: Optional[int]
    quality: int
    mode: str
    bg_color: str
    processor: Optional[Callable] = None


@dataclass
class ThumbnailProfile:
    """
    Named thumbnail configuration.

    Width, height, quality, mode and bg_color may each be a static value
    or a callable taking the owning record. Callables are evaluated on
    every call to :meth:`resolve` and never cached.
    """
    name: str
    width: Any = None
    height: Any = None
    quality: Any = DEFAULT_QUALITY
    mode: Any = MODE_INSET
    bg_color: Any = DEFAULT_BG_COLOR
    processor: Optional[Callable] = None

    def resolve(self, owner: Any = None) -> ResolvedProfile:
        """Evaluate all config values against the owner."""
        return ResolvedProfile(
            name=self.name,
            width=_to_size(config_value(self.width, owner), self.name, 'width'),
            height=_to_size(config_value(self.height, owner), self.name, 'height'),
            quality=_to_quality(config_value(self.quality, owner), self.name),
            mode=config_value(self.mode, owner) or MODE_INSET,
            bg_color=config_value(self.bg_color, owner) or DEFAULT_BG_COLOR,
            processor=self.processor if callable(self.processor) else None,
        )

    def validate(self) -> list:
        """Check static values; callables are checked when resolved."""
        errors = []
        if self.width is None and self.height is None:
            errors.append(f"Profile '{self.name}' needs a width or a height")
        quality = self.quality
        if not callable(quality) and quality is not None:
            if not isinstance(quality, int) or not 0 <= quality <= 100:
                errors.append(f"Profile '{self.name}' quality must be 0-100, got {quality!r}")
        mode = self.mode
        if not callable(mode) and mode is not None and mode not in MODES and self.processor is None:
            errors.append(f"Profile '{self.name}' has unknown mode {mode!r}")
        return errors

    @classmethod
    def from_dict(cls, name: str, data: dict) -> 'ThumbnailProfile':
        """Create from a configuration mapping."""
        unknown = set(data) - {'width', 'height', 'quality', 'mode', 'bg_color', 'processor'}
        if unknown:
            raise ConfigurationError(
                f"Profile '{name}' has unknown options: {', '.join(sorted(unknown))}"
            )
        return cls(
            name=name,
            width=data.get('width'),
            height=data.get('height'),
            quality=data.get('quality', DEFAULT_QUALITY),
            mode=data.get('mode', MODE_INSET),
            bg_color=data.get('bg_color', DEFAULT_BG_COLOR),
            processor=data.get('processor'),
        )


def _to_size(value: Any, profile: str, side: str) -> Optional[int]:
    if value is None or value == '':
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ConfigurationError(
            f"Profile '{profile}' {side} must be an integer, got {value!r}"
        ) from None


def _to_quality(value: Any, profile: str) -> int:
    if value is None or value == '':
        return DEFAULT_QUALITY
    try:
        quality = int(value)
    except (TypeError, ValueError):
        raise ConfigurationError(
            f"Profile '{profile}' quality must be an integer, got {value!r}"
        ) from None
    if not 0 <= quality <= 100:
        raise ConfigurationError(f"Profile '{profile}' quality must be 0-100, got {quality}")
    return quality
