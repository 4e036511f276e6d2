"""Plain-text rendering of holidays and vacation opportunities."""

from __future__ import annotations

import calendar
import datetime
import math

from bridgedays.dates import parse_date_key
from bridgedays.holidays import HolidayMap, sorted_holidays
from bridgedays.optimizer import Opportunity

WIDTH = 64


def format_efficiency(score: float) -> str:
    if math.isinf(score):
        return "inf"
    return f"{score:.2f}"


def format_holidays(holidays: HolidayMap, year: int) -> str:
    """Return the holiday list of *year*, one line per date."""
    lines = [f"  Public holidays for {year}:", ""]
    for d, name in sorted_holidays(holidays):
        lines.append(f"    {d.strftime('%a, %b %d %Y'):>16}  {name}")
    return "\n".join(lines)


def format_opportunity(op: Opportunity, index: int) -> str:
    """Return one numbered suggestion."""
    start = parse_date_key(op.resulting_start_date)
    end = parse_date_key(op.resulting_end_date)
    day_word = "day" if op.cost_vacation_days == 1 else "days"

    lines = [
        f"  {index:>2}. Take {op.cost_vacation_days} vacation {day_word}:",
    ]
    for key in op.vacation_days_to_take:
        lines.append(f"        -> {parse_date_key(key).strftime('%a, %b %d')}")
    lines.append(f"      {op.total_days_off} continuous days off")
    lines.append(
        f"      From {start.strftime('%a, %b %d %Y')} to {end.strftime('%a, %b %d %Y')}"
    )
    lines.append(
        f"      Efficiency: {format_efficiency(op.efficiency_score)}"
        " (total off / vacation spent)"
    )
    return "\n".join(lines)


def format_opportunities(opportunities: list[Opportunity], year: int) -> str:
    """Return all suggestions, or a neutral message when there are none."""
    if not opportunities:
        return f"  No specific high-value opportunities found for {year}."

    lines = [
        "",
        f"  Top Vacation Opportunities for {year}",
        "  " + "-" * (WIDTH - 4),
    ]
    for i, op in enumerate(opportunities, 1):
        lines.append(format_opportunity(op, i))
        lines.append("")
    return "\n".join(lines)


def format_calendar_view(
    opportunities: list[Opportunity], holidays: HolidayMap, year: int
) -> str:
    """Return a month-by-month calendar of the months the suggestions touch.

    Vacation days are marked ``V`` and public holidays ``H``.
    """
    vacation: set[datetime.date] = {
        parse_date_key(key) for op in opportunities for key in op.vacation_days_to_take
    }
    holiday_dates = {d for d, _name in sorted_holidays(holidays)}

    active_months: set[int] = set()
    for op in opportunities:
        start = parse_date_key(op.resulting_start_date)
        end = parse_date_key(op.resulting_end_date)
        active_months.update(range(start.month, end.month + 1))

    if not active_months:
        return ""

    lines: list[str] = [
        "",
        f"  Calendar View {year}",
        "  Legend: V=Vacation day  H=Holiday",
        "",
    ]

    cal = calendar.Calendar(firstweekday=0)

    for month in sorted(active_months):
        lines.append(f"  {calendar.month_name[month]} {year}")
        lines.append("  Mo  Tu  We  Th  Fr  Sa  Su")

        row = ""
        for day_num, weekday in cal.itermonthdays2(year, month):
            if day_num == 0:
                row += "    "
            else:
                d = datetime.date(year, month, day_num)
                if d in vacation:
                    cell = f" {day_num:>2}V"
                elif d in holiday_dates:
                    cell = f" {day_num:>2}H"
                else:
                    cell = f"  {day_num:>2}"
                row += cell

            if weekday == 6:
                lines.append(row)
                row = ""

        if row.strip():
            lines.append(row)
        lines.append("")

    return "\n".join(lines)
