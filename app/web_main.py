from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, cast

import httpx
from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.responses import ORJSONResponse
from pydantic import BaseModel, Field

from adapters.layout.timeline import TimelinePacker
from app.config import AppSettings
from app.schedule_wiring import build_schedule_repository
from domain.models import HOURS_PER_DAY
from domain.ports.repositories import ScheduleRepository
from domain.services.build_day_timeline import BuildDayTimeline, validate_schedule_items
from domain.services.schedule_stats import compute_schedule_stats

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TimelineContext:
    settings: AppSettings
    schedule_repo: ScheduleRepository


class LayoutRequest(BaseModel):
    items: list[Any] = Field(default_factory=list)
    priority_event: dict[str, Any] | None = None
    pixels_per_hour: float | None = Field(default=None, gt=0)
    left_offset_pixels: float | None = Field(default=None, ge=0)
    min_width_pixels: float | None = Field(default=None, ge=0)
    reserve_min_width: bool | None = None


def create_app(
    settings: AppSettings, schedule_repo: ScheduleRepository | None = None
) -> FastAPI:
    app = FastAPI(title=settings.title)
    context = TimelineContext(
        settings=settings,
        schedule_repo=schedule_repo or build_schedule_repository(settings),
    )
    app.state.context = context

    @app.get("/health")
    def health() -> ORJSONResponse:
        return ORJSONResponse({"status": "ok"})

    @app.get("/api/timeline")
    def api_timeline(
        day: str | None = Query(default=None, alias="date"),
        container_width: float | None = Query(default=None, gt=0),
        context: TimelineContext = Depends(get_context),
    ) -> ORJSONResponse:
        selected_day = parse_day(day)
        raw_items, priority_event = load_schedule(context)
        pixels_per_hour = container_width / HOURS_PER_DAY if container_width else None
        builder = build_timeline_builder(context.settings, pixels_per_hour=pixels_per_hour)
        timeline = builder.build(raw_items, day=selected_day, priority_event=priority_event)
        return ORJSONResponse(timeline.to_dict())

    @app.post("/api/timeline/layout")
    def api_timeline_layout(
        payload: LayoutRequest,
        context: TimelineContext = Depends(get_context),
    ) -> ORJSONResponse:
        builder = build_timeline_builder(
            context.settings,
            pixels_per_hour=payload.pixels_per_hour,
            left_offset_pixels=payload.left_offset_pixels,
            min_width_pixels=payload.min_width_pixels,
            reserve_min_width=payload.reserve_min_width,
        )
        timeline = builder.build(payload.items, priority_event=payload.priority_event)
        return ORJSONResponse(timeline.to_dict())

    @app.get("/api/schedule/stats")
    def api_schedule_stats(
        day: str | None = Query(default=None, alias="date"),
        context: TimelineContext = Depends(get_context),
    ) -> ORJSONResponse:
        selected_day = parse_day(day)
        raw_items, _ = load_schedule(context)
        accepted, rejected = validate_schedule_items(raw_items)
        if selected_day is not None:
            accepted = [
                item for item in accepted if item.date is None or item.date == selected_day
            ]
        payload = compute_schedule_stats(accepted).to_dict()
        payload["date"] = selected_day.isoformat() if selected_day else None
        payload["rejected"] = [entry.to_dict() for entry in rejected]
        return ORJSONResponse(payload)

    return app


def get_context(request: Request) -> TimelineContext:
    return cast(TimelineContext, request.app.state.context)


def parse_day(value: str | None) -> date | None:
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=f"Invalid date: {value}") from exc


def load_schedule(context: TimelineContext) -> tuple[list[Any], dict[str, Any] | None]:
    try:
        return context.schedule_repo.load_schedule()
    except (httpx.HTTPError, ValueError) as exc:
        logger.exception("Loading tasks from the schedule source failed.")
        raise HTTPException(status_code=502, detail="Task store unavailable") from exc


def build_timeline_builder(settings: AppSettings, **overrides: object) -> BuildDayTimeline:
    config = settings.timeline.to_layout_config(**overrides)
    return BuildDayTimeline(TimelinePacker(config))
