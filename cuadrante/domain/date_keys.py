"""Date-key helpers — the ``YYYY-MM-DD`` identity used by calendar entries.

Keys are zero-padded ISO dates, so lexicographic order equals calendar
order and a month can be queried as a plain string range.
"""

import calendar
import re
from datetime import date, datetime, timezone

from cuadrante.domain.exceptions import InvalidEntityError

_DATE_KEY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def make_date_key(year: int, month: int, day: int) -> str:
    """Build the canonical key for a calendar day."""
    return f"{year:04d}-{month:02d}-{day:02d}"


def validate_date_key(date_key: str) -> str:
    """Return *date_key* unchanged if it names a real calendar day."""
    if not _DATE_KEY_RE.match(date_key):
        raise InvalidEntityError("date_key", f"'{date_key}' is not in YYYY-MM-DD format")
    try:
        date.fromisoformat(date_key)
    except ValueError as exc:
        raise InvalidEntityError("date_key", f"'{date_key}' is not a valid date") from exc
    return date_key


def validate_month(year: int, month: int) -> None:
    if not 1 <= month <= 12:
        raise InvalidEntityError("month", f"{month} is not between 1 and 12")
    if not 1 <= year <= 9999:
        raise InvalidEntityError("year", f"{year} is out of range")


def month_key_range(year: int, month: int) -> tuple[str, str]:
    """Inclusive ``(first_key, last_key)`` bounds of a month."""
    validate_month(year, month)
    last_day = calendar.monthrange(year, month)[1]
    return make_date_key(year, month, 1), make_date_key(year, month, last_day)


def is_in_month(date_key: str, year: int, month: int) -> bool:
    """True when *date_key* falls within the given month."""
    start, end = month_key_range(year, month)
    return start <= date_key <= end


def month_time_range(year: int, month: int) -> tuple[datetime, datetime]:
    """Half-open UTC ``[start, end)`` interval covering a whole month."""
    validate_month(year, month)
    start = datetime(year, month, 1, tzinfo=timezone.utc)
    if month == 12:
        end = datetime(year + 1, 1, 1, tzinfo=timezone.utc)
    else:
        end = datetime(year, month + 1, 1, tzinfo=timezone.utc)
    return start, end
