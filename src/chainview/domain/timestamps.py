"""UTC normalization for the timestamp encodings explorers use."""

from datetime import UTC, datetime

# Anything at or above this is unix milliseconds (1e11 seconds is the year 5138)
_MILLIS_THRESHOLD = 100_000_000_000


def to_utc_datetime(value: datetime | int | float | str) -> datetime:
    """Normalize unix seconds, unix millis, ISO-8601 strings or datetimes to an aware UTC datetime."""
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    if isinstance(value, bool):
        raise ValueError(f"Unsupported timestamp: {value!r}")

    if isinstance(value, (int, float)):
        seconds = value / 1000 if abs(value) >= _MILLIS_THRESHOLD else value
        return datetime.fromtimestamp(seconds, tz=UTC)

    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise ValueError("Empty timestamp")
        if text.lstrip("-").isdigit():
            return to_utc_datetime(int(text))
        return to_utc_datetime(datetime.fromisoformat(text.replace("Z", "+00:00")))

    raise ValueError(f"Unsupported timestamp: {value!r}")


def to_unix_millis(value: datetime) -> int:
    dt = to_utc_datetime(value)
    return int(dt.replace(microsecond=0).timestamp()) * 1000 + dt.microsecond // 1000
