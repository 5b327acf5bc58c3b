from datetime import UTC, datetime


def utcnow() -> datetime:
    """Naive UTC timestamp; SQLite drops tzinfo so all stored datetimes are naive."""
    return datetime.now(UTC).replace(tzinfo=None)
