"""Time-of-day arithmetic for lesson schedules.

Times are plain ``HH:MM`` or ``HH:MM:SS`` strings on a 24 hour clock. Every
result is normalised to ``HH:MM:SS`` and wraps around midnight in both
directions, so a lesson starting late in the evening keeps producing valid
times of day.
"""

from __future__ import annotations

import re
from typing import Tuple

SECONDS_PER_DAY = 24 * 60 * 60

_TIME_PATTERN = re.compile(r"^(\d{1,2}):(\d{1,2})(?::(\d{1,2}))?$")
_TIME_OF_DAY_PATTERN = re.compile(r"^([01]?[0-9]|2[0-3]):[0-5][0-9](?::\d{2})?$")


def _parse(time: str) -> Tuple[int, int, int]:
    match = _TIME_PATTERN.match(time.strip())
    if match is None:
        raise ValueError(f"Malformed time of day: {time!r}")
    hours, minutes, seconds = match.groups()
    return int(hours), int(minutes), int(seconds or 0)


def _format(total_seconds: int) -> str:
    total_seconds %= SECONDS_PER_DAY
    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def add_seconds(time: str, seconds: int) -> str:
    """Return ``time`` shifted by ``seconds`` (may be negative), as ``HH:MM:SS``."""
    hours, minutes, secs = _parse(time)
    return _format(hours * 3600 + minutes * 60 + secs + int(seconds))


def normalize_time(time: str) -> str:
    """Append ``:00`` to ``HH:MM`` input; ``HH:MM:SS`` passes through unchanged."""
    if time.count(":") == 1:
        return f"{time}:00"
    return time


def is_valid_time_of_day(time: str) -> bool:
    # Seconds are accepted but not range-checked.
    return bool(_TIME_OF_DAY_PATTERN.match(time))


def format_time(time: str) -> str:
    """Render a time of day as ``HH:MM`` for display."""
    hours, minutes, _ = _parse(time)
    return f"{hours:02d}:{minutes:02d}"


def format_duration(seconds: int) -> str:
    if seconds < 0:
        return "0 sec"
    minutes, remaining = divmod(int(seconds), 60)
    if minutes == 0:
        return f"{remaining} sec"
    if remaining == 0:
        return f"{minutes} min"
    return f"{minutes} min {remaining} sec"


def minutes_to_seconds(minutes: float) -> int:
    return int(round(minutes * 60))


def seconds_to_minutes(seconds: int) -> float:
    return seconds / 60


__all__ = [
    "SECONDS_PER_DAY",
    "add_seconds",
    "format_duration",
    "format_time",
    "is_valid_time_of_day",
    "minutes_to_seconds",
    "normalize_time",
    "seconds_to_minutes",
]
