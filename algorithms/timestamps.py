import datetime
import math


def to_unix_ms(value) -> int:
    """Normalize ``value`` to integer Unix milliseconds.

    Integers are already milliseconds and pass through unchanged. Floats are
    rounded, numeric strings are parsed as integers and ISO-8601 strings,
    ``datetime`` and ``date`` objects are converted. Naive datetimes are read
    as UTC.
    """
    if isinstance(value, bool):
        raise ValueError("boolean is not a timestamp")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError("timestamp must be finite")
        return int(round(value))
    if isinstance(value, datetime.datetime):
        return _datetime_to_ms(value)
    if isinstance(value, datetime.date):
        return _datetime_to_ms(
            datetime.datetime(value.year, value.month, value.day)
        )
    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise ValueError("empty timestamp")
        if text.lstrip("-").isdigit():
            return int(text)
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.datetime.fromisoformat(text)
        except ValueError:
            raise ValueError(f"unrecognized timestamp: {value!r}")
        return _datetime_to_ms(parsed)
    raise ValueError(f"unsupported timestamp type: {type(value).__name__}")


def _datetime_to_ms(value: datetime.datetime) -> int:
    if value.tzinfo is None:
        value = value.replace(tzinfo=datetime.timezone.utc)
    return int(round(value.timestamp() * 1000))


def from_unix_ms(ms: int) -> datetime.datetime:
    """Return an aware UTC datetime for ``ms``."""
    return datetime.datetime.fromtimestamp(ms / 1000, tz=datetime.timezone.utc)


def now_ms() -> int:
    return to_unix_ms(datetime.datetime.now(datetime.timezone.utc))


def format_ms(ms: int, time_format: str = "24h") -> str:
    """Human readable date for an entry detail view."""
    dt = from_unix_ms(ms)
    if time_format == "12h":
        return dt.strftime("%Y-%m-%d %I:%M %p")
    return dt.strftime("%Y-%m-%d %H:%M")
