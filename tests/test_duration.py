"""Tests for duration parsing."""

from datetime import timedelta

import pytest

from livery import parse_duration
from livery.duration import parse_seconds


class TestParseDuration:
    """Tests for parse_duration function."""

    def test_milliseconds(self) -> None:
        assert parse_duration("100ms") == 100
        assert parse_duration("0ms") == 0

    def test_seconds_minutes_hours_days(self) -> None:
        assert parse_duration("30s") == 30_000
        assert parse_duration("5m") == 300_000
        assert parse_duration("2h") == 7_200_000
        assert parse_duration("1d") == 86_400_000

    def test_integer_passthrough(self) -> None:
        """Integers are already milliseconds."""
        assert parse_duration(1000) == 1000
        assert parse_duration(0) == 0

    def test_timedelta(self) -> None:
        assert parse_duration(timedelta(minutes=5)) == 300_000
        assert parse_duration(timedelta(milliseconds=250)) == 250

    def test_surrounding_whitespace_ignored(self) -> None:
        assert parse_duration(" 5m ") == 300_000

    @pytest.mark.parametrize("bad", ["invalid", "10x", "s10", "", "10", "-5s", "1.5s"])
    def test_invalid_format(self, bad: str) -> None:
        with pytest.raises(ValueError, match="Invalid duration"):
            parse_duration(bad)

    def test_negative_and_bool_rejected(self) -> None:
        with pytest.raises(ValueError, match="Invalid duration"):
            parse_duration(-1)
        with pytest.raises(ValueError, match="Invalid duration"):
            parse_duration(True)

    def test_negative_timedelta_rejected(self) -> None:
        with pytest.raises(ValueError, match="Invalid duration"):
            parse_duration(timedelta(seconds=-1))
        with pytest.raises(ValueError, match="Invalid duration"):
            parse_seconds(timedelta(minutes=-5))


class TestParseSeconds:
    """Tests for header-oriented second parsing."""

    def test_integer_is_seconds(self) -> None:
        assert parse_seconds(300) == 300

    def test_strings_convert_to_whole_seconds(self) -> None:
        assert parse_seconds("5m") == 300
        assert parse_seconds("1h") == 3600
        assert parse_seconds("1500ms") == 1

    def test_negative_rejected(self) -> None:
        with pytest.raises(ValueError, match="Invalid duration"):
            parse_seconds(-10)
