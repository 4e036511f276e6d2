"""Typer CLI for the vacation opportunity finder."""

from __future__ import annotations

import datetime
import json
import logging
import pathlib
import sys

import typer

from bridgedays.dates import InvalidYearError, validate_year
from bridgedays.holidays import HolidayMap, compute_public_holidays, sorted_holidays
from bridgedays.optimizer import (
    DEFAULT_MAX_CHUNK_SIZE,
    DEFAULT_TOP_N,
    FreeBlock,
    Opportunity,
    compute_free_blocks,
    compute_opportunities,
)
from bridgedays.report import (
    WIDTH,
    format_calendar_view,
    format_holidays,
    format_opportunities,
)

app = typer.Typer(
    name="bridgedays",
    help="Find the vacation days that turn Cyprus weekends and public "
    "holidays into the longest continuous breaks.",
    add_completion=False,
)

CONFIG_KEYS = ("year", "max_chunk_size", "top", "budget")


def _current_year() -> int:
    return datetime.date.today().year


def _configure_logging(verbose: bool) -> None:
    # Without --verbose, warnings reach stderr through logging's last-resort handler.
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(levelname)s %(name)s: %(message)s",
            force=True,
        )


def _resolve_year(year: int | None) -> int:
    resolved = year if year is not None else _current_year()
    try:
        return validate_year(resolved)
    except InvalidYearError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


# ---------------------------------------------------------------------------
# Config file
# ---------------------------------------------------------------------------


def _load_config(path: str) -> dict[str, int]:
    """Load and validate a JSON config file."""
    p = pathlib.Path(path)
    if not p.exists():
        typer.echo(f"Error: Config file not found: {path}", err=True)
        raise typer.Exit(code=1)

    try:
        data = json.loads(p.read_text())
    except json.JSONDecodeError as exc:
        typer.echo(f"Error: Invalid JSON in config file: {exc}", err=True)
        raise typer.Exit(code=1) from None

    if not isinstance(data, dict):
        typer.echo("Error: Config file must contain a JSON object.", err=True)
        raise typer.Exit(code=1)

    unknown = sorted(set(data) - set(CONFIG_KEYS))
    if unknown:
        typer.echo(
            f"Error: Unknown config key(s): {', '.join(unknown)}. "
            f"Allowed: {', '.join(CONFIG_KEYS)}",
            err=True,
        )
        raise typer.Exit(code=1)

    for key, value in data.items():
        if value is not None and (isinstance(value, bool) or not isinstance(value, int)):
            typer.echo(f"Error: Config key {key!r} must be an integer.", err=True)
            raise typer.Exit(code=1)

    return {k: v for k, v in data.items() if v is not None}


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command()
def suggest(
    year: int = typer.Option(
        None,
        "--year",
        "-y",
        help="Target year. Defaults to the current year.",
    ),
    max_chunk: int = typer.Option(
        None,
        "--max-chunk",
        "-m",
        help="Most consecutive vacation days suggested at once "
        f"[default: {DEFAULT_MAX_CHUNK_SIZE}].",
        min=0,
    ),
    top: int = typer.Option(
        None,
        "--top",
        "-n",
        help=f"Number of suggestions to show [default: {DEFAULT_TOP_N}].",
        min=1,
    ),
    budget: int = typer.Option(
        None,
        "--budget",
        "-b",
        help="Only suggest opportunities costing at most this many vacation days.",
        min=0,
    ),
    calendar: bool = typer.Option(
        True,
        "--calendar/--no-calendar",
        help="Show month-by-month calendar view.",
    ),
    output_json: bool = typer.Option(
        False,
        "--json",
        help="Output results as JSON.",
    ),
    config: str | None = typer.Option(
        None,
        "--config",
        help="Path to a JSON config file (year, max_chunk_size, top, budget).",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log debug details to stderr.",
    ),
) -> None:
    """Suggest the most rewarding vacation days for a year."""
    _configure_logging(verbose)

    # Explicit options win over the config file.
    settings: dict[str, int] = _load_config(config) if config is not None else {}
    if year is not None:
        settings["year"] = year
    if max_chunk is not None:
        settings["max_chunk_size"] = max_chunk
    if top is not None:
        settings["top"] = top
    if budget is not None:
        settings["budget"] = budget

    resolved_year = _resolve_year(settings.get("year"))
    max_chunk_size = settings.get("max_chunk_size", DEFAULT_MAX_CHUNK_SIZE)
    top_n = settings.get("top", DEFAULT_TOP_N)
    resolved_budget = settings.get("budget")

    if max_chunk_size < 0 or top_n < 1 or (resolved_budget is not None and resolved_budget < 0):
        typer.echo(
            "Error: max_chunk_size and budget must be >= 0 and top must be >= 1.",
            err=True,
        )
        raise typer.Exit(code=1)

    holidays = compute_public_holidays(resolved_year)
    free_blocks = compute_free_blocks(resolved_year, holidays)
    opportunities = compute_opportunities(
        resolved_year,
        free_blocks,
        holidays,
        max_chunk_size=max_chunk_size,
        top_n=top_n,
        budget=resolved_budget,
    )

    if output_json:
        _print_json(
            resolved_year, max_chunk_size, resolved_budget, holidays, free_blocks, opportunities
        )
    else:
        _print_text(
            resolved_year, max_chunk_size, resolved_budget, holidays, opportunities, calendar
        )


def _print_text(
    year: int,
    max_chunk_size: int,
    budget: int | None,
    holidays: HolidayMap,
    opportunities: list[Opportunity],
    show_calendar: bool,
) -> None:
    typer.echo("=" * WIDTH)
    typer.echo("  CYPRUS HOLIDAY OPTIMIZER")
    typer.echo("=" * WIDTH)
    typer.echo(f"  Year:              {year}")
    typer.echo(f"  Max chunk size:    {max_chunk_size} days")
    if budget is not None:
        typer.echo(f"  Vacation budget:   {budget} days")
    typer.echo(f"  Public holidays:   {len(holidays)}")
    typer.echo()
    typer.echo(format_holidays(holidays, year))
    typer.echo(format_opportunities(opportunities, year))

    if show_calendar and opportunities:
        typer.echo(format_calendar_view(opportunities, holidays, year))

    n = len(opportunities)
    typer.echo()
    typer.echo("=" * WIDTH)
    typer.echo(f"  Found {n} vacation opportunit{'y' if n == 1 else 'ies'}.")
    typer.echo("=" * WIDTH)


def _print_json(
    year: int,
    max_chunk_size: int,
    budget: int | None,
    holidays: HolidayMap,
    free_blocks: list[FreeBlock],
    opportunities: list[Opportunity],
) -> None:
    output = {
        "year": year,
        "max_chunk_size": max_chunk_size,
        "budget": budget,
        "holidays": [
            {"date": d.isoformat(), "name": name} for d, name in sorted_holidays(holidays)
        ],
        "free_blocks": [
            {
                "start": b.start.isoformat(),
                "end": b.end.isoformat(),
                "total_days": b.total_days,
            }
            for b in free_blocks
        ],
        "opportunities": [op.to_dict() for op in opportunities],
    }
    json.dump(output, sys.stdout, indent=2)
    typer.echo()


@app.command()
def holidays(
    year: int = typer.Option(
        None,
        "--year",
        "-y",
        help="Year to list holidays for. Defaults to the current year.",
    ),
    output_json: bool = typer.Option(
        False,
        "--json",
        help="Output holidays as JSON.",
    ),
) -> None:
    """List Cyprus public holidays for a year."""
    resolved_year = _resolve_year(year)
    holiday_map = compute_public_holidays(resolved_year)

    if output_json:
        json.dump(
            [{"date": d.isoformat(), "name": name} for d, name in sorted_holidays(holiday_map)],
            sys.stdout,
            indent=2,
        )
        typer.echo()
        return

    typer.echo(format_holidays(holiday_map, resolved_year))


def main() -> None:
    """Entry point for the CLI."""
    app()
