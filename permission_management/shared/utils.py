"""Small shared helpers: UTC timestamps and CUID2 row identifiers."""

from datetime import UTC, datetime

from cuid2 import cuid_wrapper

_cuid = cuid_wrapper()


def utc_now() -> datetime:
    """Return the current time as a timezone-aware UTC datetime."""
    return datetime.now(UTC)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """Normalize a datetime read from storage to aware UTC.

    Naive values (SQLite returns these) are assumed to be UTC already.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def generate_cuid() -> str:
    """Return a new collision-resistant id for grant and definition rows."""
    value = _cuid()
    if not isinstance(value, str):
        raise TypeError(f"Expected str from cuid generator, got {type(value).__name__}")
    return value
