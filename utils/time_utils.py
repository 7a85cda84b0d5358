from datetime import datetime, timezone


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def now_iso() -> str:
    """Microsecond ISO timestamps keep created_at ordering stable within the same second."""
    return now_utc().isoformat()
