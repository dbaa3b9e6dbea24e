from datetime import UTC, datetime


def ensure_utc(value: datetime) -> datetime:
    """Naive timestamps are taken to be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def format_timestamp(value: datetime) -> str:
    """ISO-8601 with microseconds and a ``Z`` suffix, e.g. ``2024-05-01T09:30:00.000000Z``."""
    return ensure_utc(value).isoformat(timespec="microseconds").replace("+00:00", "Z")
