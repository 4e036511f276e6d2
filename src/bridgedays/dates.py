"""Calendar arithmetic shared by the holiday builder and the optimizer.

Every date is a naive ``datetime.date`` on the proleptic Gregorian calendar,
so adding days never depends on local time or daylight-saving shifts.
"""

from __future__ import annotations

import datetime
from collections.abc import Iterator

MIN_YEAR = 1900
MAX_YEAR = 2300


class InvalidYearError(ValueError):
    """Raised when a year is not an integer within ``MIN_YEAR..MAX_YEAR``."""


def validate_year(year: object) -> int:
    """Return *year* unchanged, or raise ``InvalidYearError``."""
    if isinstance(year, bool) or not isinstance(year, int):
        msg = f"Year must be an integer, got {year!r}"
        raise InvalidYearError(msg)
    if not MIN_YEAR <= year <= MAX_YEAR:
        msg = f"Please enter a valid year ({MIN_YEAR}-{MAX_YEAR}), got {year}"
        raise InvalidYearError(msg)
    return year


def add_days(d: datetime.date, n: int) -> datetime.date:
    return d + datetime.timedelta(days=n)


def format_date_key(d: datetime.date) -> str:
    """Return the canonical ``YYYY-MM-DD`` key for *d*."""
    return d.isoformat()


def parse_date_key(key: str) -> datetime.date:
    """Inverse of :func:`format_date_key`. Raises ``ValueError`` if malformed."""
    return datetime.date.fromisoformat(key)


def is_weekend(d: datetime.date) -> bool:
    return d.weekday() >= 5  # Saturday, Sunday


def all_days_in_year(year: int) -> Iterator[datetime.date]:
    """Yield every date from January 1 to December 31 of *year*.

    Each call returns a new generator, so the sequence can be restarted.
    """
    d = datetime.date(year, 1, 1)
    while d.year == year:
        yield d
        d += datetime.timedelta(days=1)
