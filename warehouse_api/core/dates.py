from datetime import datetime, timezone


def to_utc(value: datetime) -> datetime:
    """Naive values are taken to be UTC already."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def utc_range(start: datetime, end: datetime) -> tuple[datetime, datetime]:
    return to_utc(start), to_utc(end)
