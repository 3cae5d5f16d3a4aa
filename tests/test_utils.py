"""
Tests for shared helpers.
"""
from deskradio.utils import format_time, clamp


class TestFormatTime:
    """Tests for MM:SS formatting."""

    def test_basic(self):
        assert format_time(0) == '00:00'
        assert format_time(45) == '00:45'
        assert format_time(185) == '03:05'

    def test_over_an_hour(self):
        """Minutes keep counting past 59."""
        assert format_time(3725) == '62:05'

    def test_bad_values(self):
        """None and negatives show as zero."""
        assert format_time(None) == '00:00'
        assert format_time(-5) == '00:00'


def test_clamp():
    assert clamp(150, 0, 100) == 100
    assert clamp(-1, 0, 100) == 0
    assert clamp(42.5, 0, 100) == 42.5
