"""时间工具."""

from datetime import UTC, datetime, timedelta


def utcnow() -> datetime:
    """当前 UTC 时间（naive，与数据库存储格式一致）."""
    return datetime.now(UTC).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    """转换为 naive UTC 时间."""
    if value.tzinfo is None:
        return value
    return value.astimezone(UTC).replace(tzinfo=None)


def utc_day_bounds(now: datetime | None = None) -> tuple[datetime, datetime]:
    """返回当前 UTC 日历日的 [开始, 结束) 区间."""
    now = to_naive_utc(now) if now else utcnow()
    start = now.replace(hour=0, minute=0, second=0, microsecond=0)
    return start, start + timedelta(days=1)
