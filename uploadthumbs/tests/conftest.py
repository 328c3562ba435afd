"""
Pytest fixtures for uploadthumbs tests.
"""

import logging
from pathlib import Path

import pytest
from PIL import Image


class Record:
    """Minimal record with a current and a previously stored value."""

    def __init__(self, id, file=None, old_file=None, **extra):
        self.id = id
        self.file = file
        self._old = {'file': old_file if old_file is not None else file}
        for name, value in extra.items():
            setattr(self, name, value)

    def get_old_attribute(self, name):
        return self._old.get(name)


def make_image(path: Path, size=(800, 600), color='red', mode='RGB', **save_kwargs) -> Path:
    """Create a test image on disk."""
    path.parent.mkdir(parents=True, exist_ok=True)
    img = Image.new(mode, size, color=color)
    img.save(path, **save_kwargs)
    return path


@pytest.fixture(name="make_image")
def make_image_fixture():
    """Fixture providing the test image factory."""
    return make_image


@pytest.fixture
def make_record():
    """Fixture providing the record factory."""
    return Record


@pytest.fixture
def logger():
    """Fixture providing a logger."""
    return logging.getLogger('test')


@pytest.fixture
def config(tmp_path):
    """Fixture providing a configuration with two profiles and a placeholder root."""
    from uploadthumbs.config import ThumbConfig
    from uploadthumbs.profile import ThumbnailProfile

    return ThumbConfig(
        path=str(tmp_path / 'upload' / '{id}'),
        url='/upload/{id}',
        thumb_path=str(tmp_path / 'upload' / '{id}' / 'thumb'),
        thumb_url='/upload/{id}/thumb',
        thumbs={
            'thumb': ThumbnailProfile('thumb', width=400, quality=90),
            'preview': ThumbnailProfile('preview', width=200, height=200),
        },
        publish_path=str(tmp_path / 'assets'),
        publish_url='/assets',
    )


@pytest.fixture
def manager(config, logger):
    """Fixture providing a ThumbnailManager on the test configuration."""
    from uploadthumbs.generator import ThumbnailManager

    return ThumbnailManager(config, logger=logger)


@pytest.fixture
def record():
    """Fixture providing a record with a stored upload filename."""
    return Record(id=7, file='photo.jpg')


@pytest.fixture
def empty_record():
    """Fixture providing a record without an upload."""
    return Record(id=8)


@pytest.fixture
def source_image(tmp_path, record):
    """Fixture providing an 800x600 JPEG stored for the record."""
    return make_image(tmp_path / 'upload' / '7' / record.file)


@pytest.fixture
def thumb_dir(tmp_path):
    """Thumbnail directory of the record fixture."""
    return tmp_path / 'upload' / '7' / 'thumb'


@pytest.fixture
def placeholder_image(tmp_path):
    """Fixture providing a placeholder PNG outside the public directory."""
    return make_image(tmp_path / 'static' / 'userpic.png', size=(100, 100), color='gray')
