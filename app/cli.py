from __future__ import annotations

import logging
from datetime import date
from pathlib import Path
from typing import Any, Optional

import orjson
import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from adapters.filesystem.schedule_repository import FileSystemScheduleRepository
from adapters.layout.timeline import TimelinePacker
from app.config import AppSettings, load_settings
from domain.models import format_minutes
from domain.services.build_day_timeline import (
    PRIORITY_EVENT_INDEX,
    BuildDayTimeline,
    DayTimeline,
    validate_schedule_items,
)
from domain.services.schedule_stats import compute_schedule_stats

app = typer.Typer(no_args_is_help=True)
console = Console()


@app.callback()
def main(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(None, help="YAML settings file."),
) -> None:
    try:
        settings = load_settings(config)
    except FileNotFoundError as exc:
        console.print(f"[red]{escape(str(exc))}[/]")
        raise typer.Exit(code=1) from exc
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = settings


@app.command("layout")
def layout(
    ctx: typer.Context,
    tasks_file: Path = typer.Argument(..., help="JSON file with tasks (list or {tasks: [...]})."),
    day: Optional[str] = typer.Option(None, "--date", help="Only lay out tasks for YYYY-MM-DD."),
    pixels_per_hour: Optional[float] = typer.Option(None, min=0.001, help="Horizontal scale."),
    left_offset: Optional[float] = typer.Option(None, min=0.0, help="Left padding in pixels."),
    min_width: Optional[float] = typer.Option(None, min=0.0, help="Minimum block width."),
    reserve_min_width: bool = typer.Option(
        False, "--reserve-min-width", help="Keep widened blocks from sharing a row."
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the layout as JSON."),
) -> None:
    settings: AppSettings = ctx.obj
    raw_items, priority_event = _load_schedule(tasks_file)
    config = settings.timeline.to_layout_config(
        pixels_per_hour=pixels_per_hour,
        left_offset_pixels=left_offset,
        min_width_pixels=min_width,
        reserve_min_width=reserve_min_width or None,
    )
    timeline = BuildDayTimeline(TimelinePacker(config)).build(
        raw_items,
        day=_parse_day(day),
        priority_event=priority_event,
    )
    if as_json:
        typer.echo(orjson.dumps(timeline.to_dict(), option=orjson.OPT_INDENT_2).decode("utf-8"))
        return
    _print_timeline(timeline)


@app.command("stats")
def stats(
    tasks_file: Path = typer.Argument(..., help="JSON file with tasks."),
    day: Optional[str] = typer.Option(None, "--date", help="Only count tasks for YYYY-MM-DD."),
) -> None:
    raw_items, _ = _load_schedule(tasks_file)
    selected_day = _parse_day(day)
    accepted, _ = validate_schedule_items(raw_items)
    if selected_day is not None:
        accepted = [item for item in accepted if item.date is None or item.date == selected_day]
    summary = compute_schedule_stats(accepted)
    console.print(f"Total tasks: {summary.total_tasks}")
    console.print(f"Scheduled hours: {summary.scheduled_hours}")
    console.print(f"Free hours: {summary.free_hours}")
    console.print(f"Completion rate: {summary.completion_rate}%")


@app.command("validate")
def validate(tasks_file: Path = typer.Argument(..., help="JSON file with tasks.")) -> None:
    raw_items, _ = _load_schedule(tasks_file)
    accepted, rejected = validate_schedule_items(raw_items)
    if rejected:
        for entry in rejected:
            console.print(f"[red]Item {entry.index} rejected:[/] {escape(entry.reason)}")
        raise typer.Exit(code=1)
    console.print(f"[green]All {len(accepted)} items are valid:[/] {tasks_file}")


@app.command("serve")
def serve(
    ctx: typer.Context,
    host: str = typer.Option("127.0.0.1", help="Bind address."),
    port: int = typer.Option(8000, help="Bind port."),
) -> None:
    import uvicorn

    from app.web_main import create_app

    settings: AppSettings = ctx.obj
    uvicorn.run(create_app(settings), host=host, port=port, log_level=settings.log_level.lower())


def _load_schedule(tasks_file: Path) -> tuple[list[Any], dict[str, Any] | None]:
    if not tasks_file.exists():
        console.print(f"[red]File not found:[/] {tasks_file}")
        raise typer.Exit(code=1)
    try:
        return FileSystemScheduleRepository(tasks_file).load_schedule()
    except ValueError as exc:
        console.print(f"[red]Invalid JSON in {escape(str(tasks_file))}:[/] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc


def _parse_day(value: Optional[str]) -> date | None:
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        console.print(f"[red]Invalid date:[/] {value}")
        raise typer.Exit(code=1) from exc


def _print_timeline(timeline: DayTimeline) -> None:
    table = Table(title=f"Timeline {timeline.day.isoformat() if timeline.day else ''}".strip())
    table.add_column("Row", justify="right")
    table.add_column("Start")
    table.add_column("End")
    table.add_column("Left", justify="right")
    table.add_column("Width", justify="right")
    table.add_column("Task")
    for row in timeline.layout.rows():
        for entry in row:
            end = format_minutes(entry.interval.end_minutes)
            if entry.continues_next_day:
                end = f"{end} (next day)"
            label = getattr(entry.item, "description", "") or getattr(entry.item, "id", "")
            if getattr(entry.item, "kind", "task") == "priority":
                label = f"* {label}"
            table.add_row(
                str(entry.row),
                format_minutes(entry.interval.start_minutes),
                end,
                f"{entry.left_pixels:.1f}",
                f"{entry.width_pixels:.1f}",
                escape(label),
            )
    console.print(table)
    for rejected in timeline.rejected:
        where = (
            "priority event" if rejected.index == PRIORITY_EVENT_INDEX else f"item {rejected.index}"
        )
        console.print(f"[yellow]Skipped {where}:[/] {escape(rejected.reason)}")


if __name__ == "__main__":
    app()
