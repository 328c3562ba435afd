"""
ThumbConfig - Options controlling upload thumbnailing.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from .errors import ConfigurationError
from .profile import ThumbnailProfile


def default_thumbs() -> Dict[str, ThumbnailProfile]:
    return {'thumb': ThumbnailProfile(name='thumb', width=200, height=200, quality=90)}


@dataclass
class ThumbConfig:
    """
    Thumbnail options for one upload attribute.

    Attributes:
        path: Directory template for originals, e.g. '/srv/upload/{id}/images'
        url: URL template for originals, e.g. '/upload/{id}/images'
        attribute: Record attribute holding the stored filename
        scenarios: Scenarios in which uploads are processed
        placeholder: Path of an image used when no upload exists
        thumb_path: Directory template for thumbnails (default: path)
        thumb_url: URL template for thumbnails (default: url)
        autorotate: Rotate the original according to its EXIF orientation
        delete_original_file: Remove the original once all thumbnails exist
        create_thumbs_on_save: Render every profile right after upload
        create_thumbs_on_request: Render a profile when its URL is requested
        thumbs: Ordered mapping of profile name -> ThumbnailProfile
        publish_path: Public directory placeholders are published to
        publish_url: URL of publish_path
    """
    path: str
    url: Optional[str] = None
    attribute: str = 'file'
    scenarios: List[str] = field(default_factory=lambda: ['insert', 'update'])
    placeholder: Optional[str] = None
    thumb_path: Optional[str] = None
    thumb_url: Optional[str] = None
    autorotate: bool = False
    delete_original_file: bool = False
    create_thumbs_on_save: bool = True
    create_thumbs_on_request: bool = False
    thumbs: Dict[str, ThumbnailProfile] = field(default_factory=default_thumbs)
    publish_path: Optional[str] = None
    publish_url: Optional[str] = None

    def __post_init__(self):
        if self.thumb_path is None:
            self.thumb_path = self.path
        if self.thumb_url is None:
            self.thumb_url = self.url

    def profile(self, name: str) -> ThumbnailProfile:
        """Get a profile by name."""
        try:
            return self.thumbs[name]
        except KeyError:
            raise ConfigurationError(f"Unknown thumbnail profile: {name!r}") from None

    def should_process(self, scenario: Optional[str]) -> bool:
        """Check whether uploads are processed in a scenario."""
        return scenario is None or scenario in self.scenarios

    def validate(self) -> List[str]:
        """
        Validate configuration.

        Returns:
            List of error messages (empty if valid)
        """
        errors = []
        if not self.path:
            errors.append("path is required")
        if not self.attribute:
            errors.append("attribute is required")
        if not self.thumbs:
            errors.append("At least one thumbnail profile is required")
        for name, profile in self.thumbs.items():
            if name != profile.name:
                errors.append(f"Profile key '{name}' does not match profile name '{profile.name}'")
            errors.extend(profile.validate())
        if self.placeholder and not (self.publish_path and self.publish_url):
            errors.append("publish_path and publish_url are required with a placeholder")
        return errors

    @classmethod
    def from_dict(cls, data: dict) -> 'ThumbConfig':
        """Create from dictionary."""
        data = dict(data)
        thumbs_data = data.pop('thumbs', None)
        known = set(cls.__dataclass_fields__)
        unknown = set(data) - known
        if unknown:
            raise ConfigurationError(f"Unknown options: {', '.join(sorted(unknown))}")
        if 'path' not in data:
            raise ConfigurationError("path is required")

        config = cls(**data)
        if thumbs_data is not None:
            config.thumbs = {
                name: ThumbnailProfile.from_dict(name, profile or {})
                for name, profile in thumbs_data.items()
            }
        return config

    @classmethod
    def load(cls, filepath: str) -> 'ThumbConfig':
        """Load configuration from a JSON file."""
        with open(Path(filepath), 'r') as f:
            data = json.load(f)
        return cls.from_dict(data)
