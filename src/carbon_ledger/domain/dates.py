"""Date keys and identifier helpers shared by the ledger and its adapters."""

import secrets
import string
from datetime import UTC, date, datetime, timedelta

_BASE36 = string.digits + string.ascii_lowercase
WEEK_DAYS = 7


def get_date_string(value: date | datetime | None = None) -> str:
    """Return the canonical YYYY-MM-DD key for a date.

    Datetimes are converted to UTC first; naive datetimes are assumed UTC.
    """
    if value is None:
        value = datetime.now(tz=UTC)
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(UTC)
        return value.date().isoformat()
    return value.isoformat()


def parse_date_string(key: str) -> date:
    """Parse a YYYY-MM-DD key, raising ValueError on anything else."""
    return date.fromisoformat(key)


def generate_id(prefix: str = "id") -> str:
    """Return a unique id like ``act_1700000000000_k3j9x0a1b``."""
    millis = int(datetime.now(tz=UTC).timestamp() * 1000)
    suffix = "".join(secrets.choice(_BASE36) for _ in range(9))
    return f"{prefix}_{millis}_{suffix}"


def week_start(day: date) -> date:
    """Return the Sunday that starts the calendar week containing day."""
    return day - timedelta(days=(day.weekday() + 1) % WEEK_DAYS)


def week_dates(start: date) -> list[str]:
    """Return the seven date keys starting at start."""
    return [
        get_date_string(start + timedelta(days=offset)) for offset in range(WEEK_DAYS)
    ]
