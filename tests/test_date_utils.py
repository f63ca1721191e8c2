from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from dishduty.exceptions import InvalidDateFormat
from dishduty.utils.date_utils import (
    add_days, date_range, format_ymd, parse_ymd, to_calendar_day,
)


def test_parse_and_format_ymd() -> None:
    assert parse_ymd("2024-02-29") == date(2024, 2, 29)
    assert format_ymd(date(2024, 1, 5)) == "2024-01-05"


@pytest.mark.parametrize("value", ["2024-2-1", "20240201", "2024/02/01", "", "2024-02-30", "2023-02-29"])
def test_parse_ymd_rejects_bad_dates(value: str) -> None:
    with pytest.raises(InvalidDateFormat):
        parse_ymd(value)


def test_parse_ymd_rejects_non_string() -> None:
    with pytest.raises(InvalidDateFormat):
        parse_ymd(20240201)


def test_add_days_crosses_month_and_year() -> None:
    assert add_days("2024-02-28", 2) == "2024-03-01"
    assert add_days("2024-12-31", 1) == "2025-01-01"
    assert add_days("2024-03-01", -1) == "2024-02-29"


def test_to_calendar_day_uses_utc_for_aware_datetimes() -> None:
    # 2024-02-01 23:30 at UTC-05:00 is already 2024-02-02 in UTC
    value = datetime(2024, 2, 1, 23, 30, tzinfo=timezone(timedelta(hours=-5)))
    assert to_calendar_day(value) == date(2024, 2, 2)


def test_to_calendar_day_strips_time() -> None:
    assert to_calendar_day(datetime(2024, 2, 1, 23, 59)) == date(2024, 2, 1)
    assert to_calendar_day(date(2024, 2, 1)) == date(2024, 2, 1)
    assert to_calendar_day("2024-02-01") == date(2024, 2, 1)


def test_to_calendar_day_rejects_unknown_types() -> None:
    with pytest.raises(TypeError):
        to_calendar_day(1706745600)


def test_date_range() -> None:
    assert date_range(date(2024, 2, 28), 3) == [date(2024, 2, 28), date(2024, 2, 29), date(2024, 3, 1)]
