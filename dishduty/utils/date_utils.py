"""
日期工具

所有日期比較都先轉成 UTC 的日曆日（date），
資料庫的 datetime、查詢參數字串與「今天」才能直接比較。
"""

import re
from datetime import date, datetime, timedelta, timezone

from dishduty.exceptions import InvalidDateFormat

YMD_FORMAT = "%Y-%m-%d"
YMD_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def format_ymd(value: date) -> str:
    """格式化為 YYYY-MM-DD"""
    return to_calendar_day(value).strftime(YMD_FORMAT)


def parse_ymd(value: str) -> date:
    """
    解析 YYYY-MM-DD

    Raises:
        InvalidDateFormat: 格式不符，或是不存在的日期（例如 2024-02-30）
    """
    if not isinstance(value, str) or not YMD_PATTERN.match(value):
        raise InvalidDateFormat(f"Invalid date {value!r}: expected YYYY-MM-DD.")
    try:
        return datetime.strptime(value, YMD_FORMAT).date()
    except ValueError as e:
        raise InvalidDateFormat(f"Invalid date {value!r}: {e}.") from e


def add_days(ymd: str, days: int) -> str:
    """YYYY-MM-DD 字串加減天數（days 可為負數）"""
    return format_ymd(parse_ymd(ymd) + timedelta(days=days))


def today_utc() -> date:
    """今天（UTC）"""
    return datetime.now(timezone.utc).date()


def to_calendar_day(value) -> date:
    """
    去掉時間部分，只留日期

    有時區的 datetime 先轉成 UTC；沒有時區的視為 UTC。
    字串必須是 YYYY-MM-DD。
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return parse_ymd(value)
    raise TypeError(f"Cannot convert {type(value).__name__} to a calendar day")


def date_range(start: date, days: int) -> list[date]:
    """從 start 開始連續 days 天"""
    return [start + timedelta(days=i) for i in range(days)]
