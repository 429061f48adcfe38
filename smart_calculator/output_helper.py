"""Output helper for Smart Calculator.

Keeps terminal output readable:
- Truncate long expressions and results in history listings
- Limit how many history entries are shown
- Compact mode (hide explanations)
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, List, Optional


logger = logging.getLogger(__name__)


def typed_setting(data: dict, key: str, default: Any, minimum: Optional[int] = None) -> Any:
    """Read a setting, keeping the default when the stored value has the wrong type.

    The expected type is taken from the default. Booleans are not accepted
    where a number is expected, and blank strings count as unset.
    """
    if key not in data:
        return default
    value = data[key]
    expected = type(default)
    valid = isinstance(value, expected) and not (expected is int and isinstance(value, bool))
    if valid and isinstance(value, str) and not value.strip():
        valid = False
    if valid and minimum is not None and value < minimum:
        valid = False
    if not valid:
        logger.warning("Ignoring setting %r=%r; using default %r", key, value, default)
        return default
    return value


@dataclass
class OutputConfig:
    """Output configuration options."""

    compact_mode: bool = False
    max_history_shown: int = 20  # 0 = unlimited
    truncate_long_values: bool = True
    value_max_length: int = 60  # Max length for truncated values

    @classmethod
    def from_dict(cls, data: dict) -> "OutputConfig":
        defaults = cls()
        return cls(
            compact_mode=typed_setting(data, "compact_mode", defaults.compact_mode),
            max_history_shown=typed_setting(data, "max_history_shown", defaults.max_history_shown),
            truncate_long_values=typed_setting(
                data, "truncate_long_values", defaults.truncate_long_values
            ),
            value_max_length=typed_setting(
                data, "value_max_length", defaults.value_max_length, minimum=4
            ),
        )

    def to_dict(self) -> dict:
        return {
            "compact_mode": self.compact_mode,
            "max_history_shown": self.max_history_shown,
            "truncate_long_values": self.truncate_long_values,
            "value_max_length": self.value_max_length,
        }


def truncate_text(text: str, max_length: int = 60, suffix: str = "...") -> str:
    """Truncate text to max length with suffix.

    Args:
        text: Text to truncate.
        max_length: Maximum length including suffix.
        suffix: Suffix to add when truncated.

    Returns:
        Truncated text or original if within limit.
    """
    if len(text) <= max_length:
        return text
    return text[: max_length - len(suffix)] + suffix


def truncate_list(
    items: List[Any],
    max_items: int,
    format_item: Optional[Callable[[Any], str]] = None,
    summary_format: str = "... and {count} more",
) -> List[str]:
    """Truncate a list with a summary of remaining items.

    Args:
        items: List of items to truncate.
        max_items: Maximum items to show (0 = unlimited).
        format_item: Optional function to format each item.
        summary_format: Format string for remaining count.

    Returns:
        List of formatted strings, possibly truncated with summary.
    """
    if not items:
        return []

    formatter = format_item or str

    if max_items <= 0 or len(items) <= max_items:
        return [formatter(item) for item in items]

    result = [formatter(item) for item in items[:max_items]]
    remaining = len(items) - max_items
    result.append(summary_format.format(count=remaining))
    return result


def format_value(value: Any, config: OutputConfig) -> str:
    """Format a value for display with optional truncation."""
    text = " ".join(str(value).split())
    if config.truncate_long_values:
        return truncate_text(text, config.value_max_length)
    return text


def format_timestamp(timestamp_ms: int, with_date: bool = False) -> str:
    """Format a millisecond timestamp in local time.

    Args:
        timestamp_ms: Milliseconds since the Unix epoch.
        with_date: Include the calendar date, not just hours and minutes.
    """
    moment = datetime.fromtimestamp(timestamp_ms / 1000)
    if with_date:
        return moment.strftime("%Y-%m-%d %H:%M")
    return moment.strftime("%H:%M")
