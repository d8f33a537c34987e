from datetime import datetime, timezone


def now_utc() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(tz=timezone.utc)


def now_utc_iso() -> str:
    """Current UTC time as the ISO 8601 string the backend stores."""
    return now_utc().isoformat()
