"""Vacation opportunity finder.

Finds short runs of leave that turn weekends and public holidays into
long continuous breaks.

Pipeline:
  1. Free blocks     - maximal runs of weekend/holiday days
  2. Gap bridging    - leave spent on the workdays between two free blocks
  3. Chunk extension - 1..N consecutive workdays, grown over adjacent free days
  4. Ranking         - dedupe by signature, sort best-first, keep the top N
"""

from __future__ import annotations

import datetime
import logging
import math
from collections.abc import Iterable, Sequence
from typing import NamedTuple

from bridgedays.dates import (
    add_days,
    all_days_in_year,
    format_date_key,
    is_weekend,
    validate_year,
)
from bridgedays.holidays import HolidayMap

logger = logging.getLogger(__name__)

DEFAULT_MAX_CHUNK_SIZE = 4
DEFAULT_TOP_N = 30

# ---------------------------------------------------------------------------
# Data types
# ---------------------------------------------------------------------------


class FreeBlock(NamedTuple):
    """A maximal run of non-working days."""

    start: datetime.date
    end: datetime.date

    @property
    def total_days(self) -> int:
        return (self.end - self.start).days + 1


class Opportunity(NamedTuple):
    """Leave days to take and the continuous break they produce."""

    vacation_days_to_take: tuple[str, ...]
    cost_vacation_days: int
    resulting_start_date: str
    resulting_end_date: str
    total_days_off: int
    efficiency_score: float

    @property
    def signature(self) -> tuple[tuple[str, ...], str, str]:
        return (self.vacation_days_to_take, self.resulting_start_date, self.resulting_end_date)

    def to_dict(self) -> dict[str, object]:
        data = self._asdict()
        data["vacation_days_to_take"] = list(self.vacation_days_to_take)
        return data


def make_opportunity(
    vacation_days: Sequence[datetime.date],
    start: datetime.date,
    end: datetime.date,
) -> Opportunity:
    cost = len(vacation_days)
    total = (end - start).days + 1
    return Opportunity(
        vacation_days_to_take=tuple(format_date_key(d) for d in vacation_days),
        cost_vacation_days=cost,
        resulting_start_date=format_date_key(start),
        resulting_end_date=format_date_key(end),
        total_days_off=total,
        efficiency_score=total / cost if cost > 0 else math.inf,
    )


# ---------------------------------------------------------------------------
# Free blocks
# ---------------------------------------------------------------------------


def is_non_working(d: datetime.date, holidays: HolidayMap) -> bool:
    return is_weekend(d) or format_date_key(d) in holidays


def compute_free_blocks(year: int, holidays: HolidayMap) -> list[FreeBlock]:
    """Group the weekend and holiday days of *year* into maximal blocks.

    Blocks come out in chronological order and never overlap.
    """
    validate_year(year)
    blocks: list[FreeBlock] = []
    open_start: datetime.date | None = None

    for d in all_days_in_year(year):
        if is_non_working(d, holidays):
            if open_start is None:
                open_start = d
        elif open_start is not None:
            blocks.append(FreeBlock(open_start, add_days(d, -1)))
            open_start = None

    if open_start is not None:
        blocks.append(FreeBlock(open_start, datetime.date(year, 12, 31)))

    return blocks


# ---------------------------------------------------------------------------
# Candidate generation
# ---------------------------------------------------------------------------


def _check_chunk_size(max_chunk_size: int) -> None:
    if max_chunk_size < 0:
        msg = f"max_chunk_size must be >= 0, got {max_chunk_size}"
        raise ValueError(msg)


def bridge_gaps(
    free_blocks: Sequence[FreeBlock],
    holidays: HolidayMap,
    max_chunk_size: int = DEFAULT_MAX_CHUNK_SIZE,
) -> list[Opportunity]:
    """Spend leave on the gap between each pair of adjacent free blocks.

    Holidays inside a gap are free.  Gaps needing more than
    *max_chunk_size* leave days are ignored.
    """
    _check_chunk_size(max_chunk_size)
    candidates: list[Opportunity] = []

    for left, right in zip(free_blocks, free_blocks[1:]):
        gap_start = add_days(left.end, 1)
        gap_end = add_days(right.start, -1)
        if gap_start > gap_end:
            continue

        workdays: list[datetime.date] = []
        d = gap_start
        while d <= gap_end:
            if not is_non_working(d, holidays):
                workdays.append(d)
            d = add_days(d, 1)

        if 1 <= len(workdays) <= max_chunk_size:
            candidates.append(make_opportunity(workdays, left.start, right.end))

    return candidates


def extend_chunks(
    year: int,
    holidays: HolidayMap,
    max_chunk_size: int = DEFAULT_MAX_CHUNK_SIZE,
) -> list[Opportunity]:
    """Try every run of 1..*max_chunk_size* consecutive workdays.

    Each run is grown backward and forward over adjacent non-working days,
    never past January 1 or December 31 of *year*.
    """
    _check_chunk_size(max_chunk_size)
    dates = list(all_days_in_year(year))
    num_days = len(dates)
    off = [is_non_working(d, holidays) for d in dates]
    candidates: list[Opportunity] = []

    for first in range(num_days):
        if off[first]:
            continue
        for size in range(1, max_chunk_size + 1):
            last = first + size - 1
            # Runs are contiguous, so the first off day ends every longer size too.
            if last >= num_days or off[last]:
                break

            start = first
            while start > 0 and off[start - 1]:
                start -= 1
            end = last
            while end < num_days - 1 and off[end + 1]:
                end += 1

            candidates.append(make_opportunity(dates[first : last + 1], dates[start], dates[end]))

    return candidates


# ---------------------------------------------------------------------------
# Ranking
# ---------------------------------------------------------------------------


def _beats(candidate: Opportunity, incumbent: Opportunity) -> bool:
    if candidate.total_days_off != incumbent.total_days_off:
        return candidate.total_days_off > incumbent.total_days_off
    return candidate.cost_vacation_days < incumbent.cost_vacation_days


def rank_opportunities(
    candidates: Iterable[Opportunity],
    top_n: int = DEFAULT_TOP_N,
) -> list[Opportunity]:
    """Keep the best candidate per signature, sort best-first, cap at *top_n*.

    Best means more total days off, then fewer leave days.
    """
    best: dict[tuple[tuple[str, ...], str, str], Opportunity] = {}
    for op in candidates:
        incumbent = best.get(op.signature)
        if incumbent is None or _beats(op, incumbent):
            best[op.signature] = op

    ranked = sorted(best.values(), key=lambda op: (-op.total_days_off, op.cost_vacation_days))
    return ranked[:top_n]


def compute_opportunities(
    year: int,
    free_blocks: Sequence[FreeBlock],
    holidays: HolidayMap,
    max_chunk_size: int = DEFAULT_MAX_CHUNK_SIZE,
    top_n: int = DEFAULT_TOP_N,
    budget: int | None = None,
) -> list[Opportunity]:
    """Return the best vacation opportunities of *year*.

    Parameters
    ----------
    year : int
        Target year; ``InvalidYearError`` if out of range.
    free_blocks : sequence of FreeBlock
        Output of :func:`compute_free_blocks` for the same year.
    holidays : dict
        Output of :func:`compute_public_holidays` for the same year.
    max_chunk_size : int
        Largest number of consecutive leave days suggested at once.
    top_n : int
        Maximum number of opportunities returned.
    budget : int, optional
        Drop candidates that cost more leave days than this.

    Returns
    -------
    list of Opportunity, best first.  Empty when nothing qualifies.
    """
    validate_year(year)
    candidates = bridge_gaps(free_blocks, holidays, max_chunk_size)
    bridged = len(candidates)
    candidates.extend(extend_chunks(year, holidays, max_chunk_size))
    logger.debug(
        "%d: %d bridge candidates, %d chunk candidates",
        year,
        bridged,
        len(candidates) - bridged,
    )

    if budget is not None:
        candidates = [op for op in candidates if op.cost_vacation_days <= budget]

    ranked = rank_opportunities(candidates, top_n)
    if not ranked:
        logger.info("No opportunities found for %d", year)
    return ranked
