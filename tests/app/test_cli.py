from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from app.cli import app

runner = CliRunner()


def test_layout_prints_json(tasks_file: Path) -> None:
    result = runner.invoke(
        app,
        [
            "layout",
            str(tasks_file),
            "--date",
            "2025-03-14",
            "--pixels-per-hour",
            "10",
            "--min-width",
            "60",
            "--json",
        ],
    )

    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    rows = {entry["item"]["id"]: entry["row"] for entry in payload["layout"]["items"]}
    assert rows == {"priority-event": 0, "t1": 0, "t2": 1, "t3": 0}
    assert payload["stats"]["total_tasks"] == 3


def test_layout_prints_table(tasks_file: Path) -> None:
    result = runner.invoke(app, ["layout", str(tasks_file), "--date", "2025-03-14"])

    assert result.exit_code == 0, result.output
    assert "Standup" in result.output
    assert "next day" in result.output


def test_layout_missing_file_fails(tmp_path: Path) -> None:
    result = runner.invoke(app, ["layout", str(tmp_path / "missing.json")])

    assert result.exit_code == 1
    assert "File not found" in result.output


def test_layout_rejects_bad_date(tasks_file: Path) -> None:
    result = runner.invoke(app, ["layout", str(tasks_file), "--date", "yesterday"])

    assert result.exit_code == 1
    assert "Invalid date" in result.output


def test_stats_command(tasks_file: Path) -> None:
    result = runner.invoke(app, ["stats", str(tasks_file), "--date", "2025-03-14"])

    assert result.exit_code == 0, result.output
    assert "Total tasks: 3" in result.output
    assert "Scheduled hours: 5.0" in result.output
    assert "Completion rate: 33%" in result.output


def test_validate_reports_rejected_items(tmp_path: Path) -> None:
    path = tmp_path / "tasks.json"
    path.write_text(
        json.dumps(
            [
                {"startTime": "09:00", "endTime": "10:00"},
                {"startTime": "09:75", "endTime": "10:00"},
            ]
        ),
        encoding="utf-8",
    )

    result = runner.invoke(app, ["validate", str(path)])

    assert result.exit_code == 1
    assert "Item 1 rejected" in result.output


def test_validate_accepts_clean_file(tasks_file: Path) -> None:
    result = runner.invoke(app, ["validate", str(tasks_file)])

    assert result.exit_code == 0, result.output
    assert "All 4 items are valid" in result.output


def test_missing_config_file_fails(tmp_path: Path, tasks_file: Path) -> None:
    result = runner.invoke(
        app, ["--config", str(tmp_path / "nope.yaml"), "validate", str(tasks_file)]
    )

    assert result.exit_code == 1
    assert "Config file not found" in result.output


def test_commands_report_broken_json(tmp_path: Path) -> None:
    path = tmp_path / "tasks.json"
    path.write_text("{not json", encoding="utf-8")

    for command in ("layout", "stats", "validate"):
        result = runner.invoke(app, [command, str(path)])

        assert result.exit_code == 1, command
        assert "Invalid JSON" in result.output
        assert result.exception is None or isinstance(result.exception, SystemExit)
