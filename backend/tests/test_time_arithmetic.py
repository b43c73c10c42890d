from __future__ import annotations

import pytest

from lesson_planner.time_arithmetic import (
    add_seconds,
    format_duration,
    format_time,
    is_valid_time_of_day,
    minutes_to_seconds,
    normalize_time,
    seconds_to_minutes,
)


def test_add_seconds_wraps_past_midnight() -> None:
    assert add_seconds("23:59:30", 45) == "00:00:15"


def test_add_seconds_accepts_negative_offsets() -> None:
    assert add_seconds("10:00:00", -3600) == "09:00:00"
    assert add_seconds("00:00:00", -1) == "23:59:59"


def test_add_seconds_defaults_missing_seconds_to_zero() -> None:
    assert add_seconds("14:00", 300) == "14:05:00"
    assert add_seconds("9:5", 0) == "09:05:00"


def test_add_seconds_handles_multi_day_offsets() -> None:
    assert add_seconds("12:00:00", 2 * 86400 + 61) == "12:01:01"
    assert add_seconds("12:00:00", -86400) == "12:00:00"


def test_add_seconds_rejects_malformed_input() -> None:
    with pytest.raises(ValueError):
        add_seconds("noon", 10)


def test_normalize_time_appends_seconds_only_when_absent() -> None:
    assert normalize_time("14:00") == "14:00:00"
    assert normalize_time("14:00:30") == "14:00:30"


@pytest.mark.parametrize("value", ["0:00", "09:30", "23:59", "7:05", "14:00:00", "14:00:99"])
def test_valid_times_of_day(value: str) -> None:
    assert is_valid_time_of_day(value)


@pytest.mark.parametrize("value", ["24:00", "12:60", "12", "", "ab:cd", "12:5"])
def test_invalid_times_of_day(value: str) -> None:
    assert not is_valid_time_of_day(value)


def test_format_time_drops_seconds() -> None:
    assert format_time("7:05:59") == "07:05"


def test_format_duration_variants() -> None:
    assert format_duration(45) == "45 sec"
    assert format_duration(300) == "5 min"
    assert format_duration(330) == "5 min 30 sec"
    assert format_duration(-5) == "0 sec"


def test_minute_second_conversions() -> None:
    assert minutes_to_seconds(1.5) == 90
    assert seconds_to_minutes(90) == 1.5
