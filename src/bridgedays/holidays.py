"""Cyprus public holidays.

The calendar has two kinds of rules: fixed month/day holidays and
holidays placed at a day offset from Orthodox Easter Sunday.  Both are
merged into a single ``{date_key: name}`` map scoped to one year.
"""

from __future__ import annotations

import datetime
import logging
from collections.abc import Iterable
from typing import NamedTuple

from bridgedays.dates import add_days, format_date_key, parse_date_key, validate_year

logger = logging.getLogger(__name__)

HolidayMap = dict[str, str]

# Julian-to-Gregorian shift applied to the computed Easter date.
JULIAN_CORRECTION_DAYS = 13


class HolidayRule(NamedTuple):
    """A holiday that falls on the same month/day every year."""

    name: str
    month: int
    day: int


class MovableRule(NamedTuple):
    """A holiday placed *offset* days from Orthodox Easter Sunday."""

    name: str
    offset: int


FIXED_HOLIDAYS: tuple[HolidayRule, ...] = (
    HolidayRule("New Year's Day", 1, 1),
    HolidayRule("Epiphany", 1, 6),
    HolidayRule("Greek Independence Day", 3, 25),
    HolidayRule("Cyprus National Day (EOKA Day)", 4, 1),
    HolidayRule("Labour Day / May Day", 5, 1),
    HolidayRule("Assumption Day", 8, 15),
    HolidayRule("Cyprus Independence Day", 10, 1),
    HolidayRule("Ochi Day (Greek National Day)", 10, 28),
    HolidayRule("Christmas Day", 12, 25),
    HolidayRule("Boxing Day", 12, 26),
)

MOVABLE_HOLIDAYS: tuple[MovableRule, ...] = (
    MovableRule("Clean Monday", -48),
    MovableRule("Orthodox Good Friday", -2),
    MovableRule("Orthodox Easter Monday", 1),
    MovableRule("Orthodox Whit Monday (Kataklysmos)", 50),
)


# ---------------------------------------------------------------------------
# Movable feasts
# ---------------------------------------------------------------------------


def orthodox_easter(year: int) -> datetime.date:
    """Return Orthodox Easter Sunday of *year* on the Gregorian calendar.

    The Julian date comes from Meeus' closed form; the fixed 13-day
    correction is then added, which may roll the day into the next month.
    """
    a = year % 4
    b = year % 7
    c = year % 19
    d = (19 * c + 15) % 30
    e = (2 * a + 4 * b - d + 34) % 7
    month = (d + e + 114) // 31
    day = (d + e + 114) % 31 + 1
    return add_days(datetime.date(year, month, day), JULIAN_CORRECTION_DAYS)


def movable_holidays(
    year: int, rules: Iterable[MovableRule] = MOVABLE_HOLIDAYS
) -> HolidayMap:
    """Return the Easter-relative holidays of *year*.

    A derived date that leaves *year* is still returned under its own key.
    """
    easter = orthodox_easter(year)
    return {format_date_key(add_days(easter, rule.offset)): rule.name for rule in rules}


# ---------------------------------------------------------------------------
# Holiday map
# ---------------------------------------------------------------------------


def build_holiday_map(
    year: int,
    fixed_rules: Iterable[HolidayRule] = FIXED_HOLIDAYS,
    movable_rules: Iterable[MovableRule] = MOVABLE_HOLIDAYS,
) -> HolidayMap:
    """Merge fixed and movable rules into one map for *year*.

    Fixed rules that cannot be built for *year* (e.g. Feb 29 outside a
    leap year) are skipped.  Movable rules are applied last and win any
    date collision.
    """
    holidays: HolidayMap = {}

    for rule in fixed_rules:
        try:
            d = datetime.date(year, rule.month, rule.day)
        except ValueError as exc:
            logger.warning("Could not create date for %s in %d: %s", rule.name, year, exc)
            continue
        if d.year != year:
            logger.warning("Skipping %s: %s is outside %d", rule.name, d, year)
            continue
        holidays[format_date_key(d)] = rule.name

    for key, name in movable_holidays(year, movable_rules).items():
        previous = holidays.get(key)
        if previous is not None and previous != name:
            logger.debug("%s: %r replaces %r", key, name, previous)
        holidays[key] = name

    return holidays


def compute_public_holidays(year: int) -> HolidayMap:
    """Public holidays of *year*, keyed by ``YYYY-MM-DD``.

    Raises ``InvalidYearError`` if *year* is out of range.
    """
    validate_year(year)
    return build_holiday_map(year)


def sorted_holidays(holidays: HolidayMap) -> list[tuple[datetime.date, str]]:
    """Return ``(date, name)`` pairs in chronological order."""
    return sorted((parse_date_key(key), name) for key, name in holidays.items())
