from datetime import datetime, timedelta, timezone


def utcnow() -> datetime:
    # Columns are naive UTC timestamps.
    return datetime.now(timezone.utc).replace(tzinfo=None)


def calculate_premium_expiry(days: int, start: datetime | None = None) -> datetime:
    return (start or utcnow()) + timedelta(days=days)
