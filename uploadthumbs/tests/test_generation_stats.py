"""Tests for GenerationStats class."""

import time

from uploadthumbs.generation_stats import GenerationStats, PassState


class TestGenerationStats:
    """Tests for GenerationStats class."""

    def test_defaults(self):
        stats = GenerationStats()

        assert stats.state == PassState.IDLE
        assert stats.error_details == []
        assert stats.succeeded is False

    def test_elapsed_seconds(self):
        """Test elapsed time calculation."""
        stats = GenerationStats()
        stats.start_time = time.time() - 10

        assert stats.elapsed_seconds >= 10
        assert stats.elapsed_seconds < 12

    def test_completed_count(self):
        """Test completed count."""
        stats = GenerationStats(total_profiles=5)
        stats.generated = 2
        stats.skipped = 1
        stats.errors = 1

        assert stats.completed_count == 4

    def test_succeeded(self):
        """Only a finished pass without errors succeeded."""
        stats = GenerationStats(total_profiles=2, generated=2)
        assert stats.succeeded is False

        stats.state = PassState.DONE
        assert stats.succeeded is True

        stats.errors = 1
        assert stats.succeeded is False

    def test_error_details_not_shared(self):
        first = GenerationStats()
        first.error_details.append('boom')

        assert GenerationStats().error_details == []
