"""Tests for ThumbConfig."""

import json

import pytest

from uploadthumbs.config import ThumbConfig
from uploadthumbs.errors import ConfigurationError
from uploadthumbs.profile import ThumbnailProfile


class TestThumbConfig:
    """Tests for ThumbConfig class."""

    def test_defaults(self):
        """Thumbnail locations default to the upload locations."""
        config = ThumbConfig(path='/srv/upload/{id}', url='/upload/{id}')

        assert config.thumb_path == '/srv/upload/{id}'
        assert config.thumb_url == '/upload/{id}'
        assert config.attribute == 'file'
        assert config.scenarios == ['insert', 'update']
        assert config.create_thumbs_on_save is True
        assert config.create_thumbs_on_request is False
        assert config.delete_original_file is False
        assert config.autorotate is False
        assert list(config.thumbs) == ['thumb']
        assert config.thumbs['thumb'].width == 200
        assert config.thumbs['thumb'].quality == 90

    def test_from_dict(self):
        """Test creating configuration from a mapping."""
        config = ThumbConfig.from_dict({
            'path': '/srv/upload/{id}',
            'thumb_path': '/srv/upload/{id}/thumb',
            'create_thumbs_on_request': True,
            'thumbs': {
                'thumb': {'width': 400, 'quality': 90},
                'preview': {'width': 200, 'height': 200},
            },
        })

        assert config.thumb_path == '/srv/upload/{id}/thumb'
        assert config.create_thumbs_on_request is True
        assert list(config.thumbs) == ['thumb', 'preview']
        assert config.thumbs['preview'].height == 200

    def test_from_dict_unknown_option(self):
        with pytest.raises(ConfigurationError, match='colour'):
            ThumbConfig.from_dict({'path': '/x', 'colour': 'red'})

    def test_from_dict_requires_path(self):
        with pytest.raises(ConfigurationError):
            ThumbConfig.from_dict({'url': '/x'})

    def test_load(self, tmp_path):
        """Test loading configuration from a JSON file."""
        filepath = tmp_path / 'thumbs.json'
        filepath.write_text(json.dumps({'path': '/srv/u', 'thumbs': {'small': {'height': 50}}}))

        config = ThumbConfig.load(str(filepath))

        assert config.path == '/srv/u'
        assert config.thumbs['small'].height == 50

    def test_validate_valid(self, config):
        assert config.validate() == []

    def test_validate_errors(self):
        """Test validation reports every problem."""
        config = ThumbConfig(
            path='',
            placeholder='/static/userpic.png',
            thumbs={'thumb': ThumbnailProfile('other')},
        )

        errors = config.validate()

        assert any('path' in e for e in errors)
        assert any('does not match' in e for e in errors)
        assert any('width or a height' in e for e in errors)
        assert any('publish_path' in e for e in errors)

    def test_validate_no_profiles(self):
        assert ThumbConfig(path='/x', thumbs={}).validate() != []

    def test_profile_lookup(self, config):
        assert config.profile('preview').width == 200

        with pytest.raises(ConfigurationError, match='missing'):
            config.profile('missing')

    def test_should_process(self, config):
        assert config.should_process('insert') is True
        assert config.should_process(None) is True
        assert config.should_process('search') is False
