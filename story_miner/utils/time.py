"""Time utilities for timezone-aware datetime handling."""

from datetime import datetime, timezone, timedelta
from typing import Optional
import pytz


EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
EARLIEST = datetime.min.replace(tzinfo=timezone.utc)


def utcnow() -> datetime:
    """取得當前 UTC 時間 (tz-aware)"""
    return datetime.now(timezone.utc)


def to_utc(dt: datetime, tz_name: Optional[str] = None) -> datetime:
    """
    轉換時間為 UTC tz-aware datetime

    Args:
        dt: 輸入時間
        tz_name: 原時區名稱 (若 dt 為 naive)

    Returns:
        UTC tz-aware datetime
    """
    if dt.tzinfo is None:
        # Naive datetime，需要指定時區
        if tz_name:
            tz = pytz.timezone(tz_name)
            dt = tz.localize(dt)
        else:
            # 假設為 UTC
            dt = dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(timezone.utc)


def to_local(dt: datetime, tz_name: str) -> datetime:
    """轉換為指定時區的 tz-aware datetime"""
    return to_utc(dt).astimezone(pytz.timezone(tz_name))


def start_of_day(dt: datetime, tz_name: str = "UTC") -> datetime:
    """
    取得 dt 所在日 (依 tz_name) 的 00:00

    Returns:
        UTC tz-aware datetime
    """
    local = to_local(dt, tz_name)
    midnight = datetime(local.year, local.month, local.day)
    return to_utc(midnight, tz_name)


def end_of_day(dt: datetime, tz_name: str = "UTC") -> datetime:
    """取得 dt 所在日 (依 tz_name) 的 23:59:59.999999 (UTC)"""
    local = to_local(dt, tz_name)
    last_moment = datetime(local.year, local.month, local.day, 23, 59, 59, 999999)
    return to_utc(last_moment, tz_name)


def start_of_week(dt: datetime, tz_name: str = "UTC") -> datetime:
    """週一 00:00 (依 tz_name)"""
    local = to_local(dt, tz_name)
    monday = local - timedelta(days=local.weekday())
    return start_of_day(monday, tz_name)


def start_of_month(dt: datetime, tz_name: str = "UTC") -> datetime:
    """當月 1 日 00:00 (依 tz_name)"""
    local = to_local(dt, tz_name)
    return to_utc(datetime(local.year, local.month, 1), tz_name)


def local_date_str(dt: datetime, tz_name: str = "UTC") -> str:
    """格式化為 YYYY-MM-DD (依 tz_name)"""
    return to_local(dt, tz_name).strftime("%Y-%m-%d")
