from __future__ import annotations

import json
import logging
import os
import tempfile
from collections.abc import Iterator

import pytest
from typer.testing import CliRunner

from bridgedays.cli import app

runner = CliRunner()


def _write_config(data: object) -> str:
    """Write a JSON config to a temp file and return its path."""
    fd, path = tempfile.mkstemp(suffix=".json")
    with os.fdopen(fd, "w") as f:
        json.dump(data, f)
    return path


@pytest.fixture
def restore_logging() -> Iterator[None]:
    """Undo the root logger setup done by --verbose."""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in root.handlers[:]:
        if type(handler) is logging.StreamHandler:
            root.removeHandler(handler)
    root.setLevel(level)


class TestSuggestCommand:
    def test_suggest_basic(self) -> None:
        result = runner.invoke(app, ["suggest", "--year", "2025", "--no-calendar"])
        assert result.exit_code == 0
        assert "CYPRUS HOLIDAY OPTIMIZER" in result.output
        assert "Top Vacation Opportunities for 2025" in result.output
        assert "Found 30 vacation opportunities." in result.output
        assert "Calendar View" not in result.output

    def test_suggest_with_calendar(self) -> None:
        result = runner.invoke(app, ["suggest", "--year", "2025", "--top", "3", "--calendar"])
        assert result.exit_code == 0
        assert "Calendar View 2025" in result.output
        assert "April 2025" in result.output

    def test_suggest_json_output(self) -> None:
        result = runner.invoke(app, ["suggest", "--year", "2025", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["year"] == 2025
        assert data["max_chunk_size"] == 4
        assert data["budget"] is None
        assert len(data["holidays"]) == 14
        assert data["holidays"][0] == {"date": "2025-01-01", "name": "New Year's Day"}
        assert data["free_blocks"][0] == {
            "start": "2025-01-01",
            "end": "2025-01-01",
            "total_days": 1,
        }
        assert len(data["opportunities"]) == 30
        best = data["opportunities"][0]
        assert best["vacation_days_to_take"] == [
            "2025-04-14",
            "2025-04-15",
            "2025-04-16",
            "2025-04-17",
        ]
        assert best["total_days_off"] == 10
        assert best["efficiency_score"] == 2.5

    def test_suggest_top(self) -> None:
        result = runner.invoke(app, ["suggest", "--year", "2025", "--top", "5", "--json"])
        assert result.exit_code == 0
        assert len(json.loads(result.output)["opportunities"]) == 5

    def test_suggest_budget(self) -> None:
        result = runner.invoke(app, ["suggest", "--year", "2025", "--budget", "1", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["budget"] == 1
        assert all(op["cost_vacation_days"] <= 1 for op in data["opportunities"])

    def test_suggest_no_opportunities(self) -> None:
        result = runner.invoke(
            app, ["suggest", "--year", "2025", "--max-chunk", "0", "--no-calendar"]
        )
        assert result.exit_code == 0
        assert "No specific high-value opportunities found for 2025." in result.output
        assert "Found 0 vacation opportunities." in result.output

    def test_suggest_invalid_year(self) -> None:
        result = runner.invoke(app, ["suggest", "--year", "1800"])
        assert result.exit_code == 1
        assert "valid year (1900-2300)" in result.output

    def test_suggest_negative_chunk_rejected(self) -> None:
        result = runner.invoke(app, ["suggest", "--year", "2025", "--max-chunk", "-1"])
        assert result.exit_code != 0

    @pytest.mark.usefixtures("restore_logging")
    def test_suggest_verbose(self) -> None:
        result = runner.invoke(
            app, ["suggest", "--year", "2025", "--top", "1", "--no-calendar", "--verbose"]
        )
        assert result.exit_code == 0
        assert "Found 1 vacation opportunity." in result.output


class TestConfigFile:
    def test_config_values_used(self) -> None:
        path = _write_config({"year": 2024, "top": 3, "max_chunk_size": 2})
        try:
            result = runner.invoke(app, ["suggest", "--config", path, "--json"])
            assert result.exit_code == 0
            data = json.loads(result.output)
            assert data["year"] == 2024
            assert data["max_chunk_size"] == 2
            assert len(data["opportunities"]) == 3
        finally:
            os.unlink(path)

    def test_options_override_config(self) -> None:
        path = _write_config({"year": 2024, "top": 3})
        try:
            result = runner.invoke(
                app, ["suggest", "--config", path, "--year", "2025", "--top", "2", "--json"]
            )
            assert result.exit_code == 0
            data = json.loads(result.output)
            assert data["year"] == 2025
            assert len(data["opportunities"]) == 2
        finally:
            os.unlink(path)

    def test_config_not_found(self) -> None:
        result = runner.invoke(app, ["suggest", "--config", "/nonexistent/config.json"])
        assert result.exit_code == 1
        assert "Config file not found" in result.output

    def test_config_invalid_json(self) -> None:
        fd, path = tempfile.mkstemp(suffix=".json")
        with os.fdopen(fd, "w") as f:
            f.write("{not json")
        try:
            result = runner.invoke(app, ["suggest", "--config", path])
            assert result.exit_code == 1
            assert "Invalid JSON" in result.output
        finally:
            os.unlink(path)

    def test_config_not_an_object(self) -> None:
        path = _write_config([2025])
        try:
            result = runner.invoke(app, ["suggest", "--config", path])
            assert result.exit_code == 1
            assert "JSON object" in result.output
        finally:
            os.unlink(path)

    def test_config_unknown_key(self) -> None:
        path = _write_config({"year": 2025, "country": "gr"})
        try:
            result = runner.invoke(app, ["suggest", "--config", path])
            assert result.exit_code == 1
            assert "Unknown config key(s): country" in result.output
        finally:
            os.unlink(path)

    def test_config_non_integer(self) -> None:
        path = _write_config({"year": "2025"})
        try:
            result = runner.invoke(app, ["suggest", "--config", path])
            assert result.exit_code == 1
            assert "'year' must be an integer" in result.output
        finally:
            os.unlink(path)

    def test_config_negative_budget(self) -> None:
        path = _write_config({"year": 2025, "budget": -2})
        try:
            result = runner.invoke(app, ["suggest", "--config", path])
            assert result.exit_code == 1
            assert "must be >= 0" in result.output
        finally:
            os.unlink(path)

    def test_config_year_out_of_range(self) -> None:
        path = _write_config({"year": 2400})
        try:
            result = runner.invoke(app, ["suggest", "--config", path])
            assert result.exit_code == 1
            assert "valid year" in result.output
        finally:
            os.unlink(path)


class TestHolidaysCommand:
    def test_holidays_text(self) -> None:
        result = runner.invoke(app, ["holidays", "--year", "2025"])
        assert result.exit_code == 0
        assert "Public holidays for 2025" in result.output
        assert "Mon, Mar 03 2025  Clean Monday" in result.output

    def test_holidays_json(self) -> None:
        result = runner.invoke(app, ["holidays", "--year", "2025", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert len(data) == 14
        assert data[-1] == {"date": "2025-12-26", "name": "Boxing Day"}

    def test_holidays_invalid_year(self) -> None:
        result = runner.invoke(app, ["holidays", "--year", "2301"])
        assert result.exit_code == 1
        assert "valid year" in result.output
