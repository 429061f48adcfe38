"""Tests for output_helper.py - Output control utilities."""

from datetime import datetime

import pytest

from smart_calculator.output_helper import (
    OutputConfig,
    format_timestamp,
    format_value,
    truncate_list,
    truncate_text,
)


class TestOutputConfig:
    """Tests for OutputConfig dataclass."""

    def test_defaults(self):
        """Test default values."""
        config = OutputConfig()
        assert config.compact_mode is False
        assert config.max_history_shown == 20
        assert config.truncate_long_values is True
        assert config.value_max_length == 60

    def test_from_dict_partial(self):
        """Test missing keys keep defaults."""
        config = OutputConfig.from_dict({"compact_mode": True})
        assert config.compact_mode is True
        assert config.max_history_shown == 20

    def test_round_trip(self):
        """Test to_dict and from_dict agree."""
        config = OutputConfig(compact_mode=True, max_history_shown=5, value_max_length=30)
        assert OutputConfig.from_dict(config.to_dict()) == config

    @pytest.mark.parametrize(
        "data",
        [
            {"max_history_shown": None},
            {"max_history_shown": "5"},
            {"max_history_shown": True},
            {"compact_mode": "yes", "truncate_long_values": 1},
            {"value_max_length": 2},
        ],
    )
    def test_from_dict_wrong_types_keep_defaults(self, data):
        """Test mistyped values fall back to defaults."""
        assert OutputConfig.from_dict(data) == OutputConfig()


class TestTruncateText:
    """Tests for truncate_text function."""

    def test_short_text_unchanged(self):
        """Test short text is returned unchanged."""
        assert truncate_text("5*24", 10) == "5*24"

    def test_long_text_truncated(self):
        """Test long text is cut with a suffix."""
        result = truncate_text("a" * 100, 20)
        assert len(result) == 20
        assert result.endswith("...")


class TestTruncateList:
    """Tests for truncate_list function."""

    def test_empty(self):
        """Test an empty list."""
        assert truncate_list([], 5) == []

    def test_within_limit(self):
        """Test lists within the limit are not summarized."""
        assert truncate_list([1, 2], 5) == ["1", "2"]

    def test_over_limit(self):
        """Test lists over the limit get a summary line."""
        result = truncate_list([1, 2, 3, 4], 2)
        assert result == ["1", "2", "... and 2 more"]

    def test_unlimited(self):
        """Test a zero limit shows everything."""
        assert len(truncate_list(list(range(50)), 0)) == 50


class TestFormatValue:
    """Tests for format_value function."""

    def test_collapses_whitespace(self):
        """Test runs of whitespace become single spaces."""
        assert format_value("x  +\n 1", OutputConfig()) == "x + 1"

    def test_truncates_when_enabled(self):
        """Test truncation when enabled."""
        config = OutputConfig(value_max_length=10)
        assert format_value("1234567890123", config) == "1234567..."

    def test_no_truncation_when_disabled(self):
        """Test no truncation when disabled."""
        config = OutputConfig(truncate_long_values=False, value_max_length=10)
        assert format_value("1234567890123", config) == "1234567890123"


class TestFormatTimestamp:
    """Tests for format_timestamp function."""

    def test_time_only(self):
        """Test hour and minute formatting."""
        moment = datetime(2024, 3, 1, 14, 5)
        millis = int(moment.timestamp() * 1000)
        assert format_timestamp(millis) == "14:05"

    def test_with_date(self):
        """Test formatting with the date."""
        moment = datetime(2024, 3, 1, 14, 5)
        millis = int(moment.timestamp() * 1000)
        assert format_timestamp(millis, with_date=True) == "2024-03-01 14:05"
