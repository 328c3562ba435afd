"""Tests for ThumbnailProfile."""

import pytest

from uploadthumbs.errors import ConfigurationError
from uploadthumbs.profile import MODE_INSET, MODE_OUTBOUND, ThumbnailProfile


class TestThumbnailProfile:
    """Tests for ThumbnailProfile class."""

    def test_resolve_static_values(self):
        """Static values are returned as they are."""
        profile = ThumbnailProfile('thumb', width=400, quality=90, mode=MODE_OUTBOUND)

        resolved = profile.resolve()

        assert resolved.name == 'thumb'
        assert resolved.width == 400
        assert resolved.height is None
        assert resolved.quality == 90
        assert resolved.mode == MODE_OUTBOUND
        assert resolved.bg_color == 'FFF'

    def test_defaults(self):
        """Quality, mode and colour have defaults."""
        resolved = ThumbnailProfile('thumb', width=10).resolve()

        assert resolved.quality == 100
        assert resolved.mode == MODE_INSET
        assert resolved.bg_color == 'FFF'

    def test_callable_evaluated_per_resolve(self, make_record):
        """Callables are evaluated on every resolve, never cached."""
        calls = []

        def width(owner):
            calls.append(owner)
            return owner.size

        profile = ThumbnailProfile('thumb', width=width, height=lambda owner: owner.size // 2)
        first = make_record(1, size=100)
        second = make_record(2, size=300)

        assert profile.resolve(first).width == 100
        assert profile.resolve(second).width == 300
        assert profile.resolve(first).height == 50
        assert calls == [first, second, first]

    def test_numeric_strings_converted(self):
        """Sizes given as strings are converted to integers."""
        resolved = ThumbnailProfile('thumb', width='120', height='').resolve()

        assert resolved.width == 120
        assert resolved.height is None

    def test_invalid_size(self):
        """A non-numeric size is a configuration error."""
        with pytest.raises(ConfigurationError):
            ThumbnailProfile('thumb', width='wide').resolve()

    @pytest.mark.parametrize('quality', ['high', lambda owner: 'high', 101, -1, lambda owner: 250])
    def test_invalid_quality(self, quality):
        """A quality that is not an integer in 0-100 is a configuration error."""
        with pytest.raises(ConfigurationError, match='quality'):
            ThumbnailProfile('thumb', width=100, quality=quality).resolve()

    def test_quality_string_converted(self):
        assert ThumbnailProfile('thumb', width=100, quality='75').resolve().quality == 75
        assert ThumbnailProfile('thumb', width=100, quality=None).resolve().quality == 100

    def test_processor_kept(self):
        """A callable processor is carried into the resolved profile."""
        def processor(image, width, height, mode):
            return image

        assert ThumbnailProfile('thumb', width=1, processor=processor).resolve().processor is processor
        assert ThumbnailProfile('thumb', width=1, processor='nope').resolve().processor is None

    def test_from_dict(self):
        """Test creating a profile from a mapping."""
        profile = ThumbnailProfile.from_dict('preview', {'width': 200, 'height': 200})

        assert profile.name == 'preview'
        assert profile.width == 200
        assert profile.height == 200
        assert profile.quality == 100
        assert profile.mode == MODE_INSET

    def test_from_dict_unknown_option(self):
        """Unknown options are rejected."""
        with pytest.raises(ConfigurationError, match='depth'):
            ThumbnailProfile.from_dict('thumb', {'width': 10, 'depth': 3})

    def test_validate(self):
        """Test validation of static values."""
        assert ThumbnailProfile('ok', width=10).validate() == []
        assert len(ThumbnailProfile('nosize').validate()) == 1
        assert len(ThumbnailProfile('q', width=10, quality=101).validate()) == 1
        assert len(ThumbnailProfile('m', width=10, mode='sideways').validate()) == 1

    def test_validate_skips_callables(self):
        """Callables are only checked when resolved."""
        profile = ThumbnailProfile('dyn', width=lambda o: 10, quality=lambda o: 500)

        assert profile.validate() == []
