from __future__ import annotations

from adapters.filesystem.schedule_repository import FileSystemScheduleRepository
from adapters.http.task_api_repository import HttpScheduleRepository
from app.config import AppSettings
from domain.ports.repositories import ScheduleRepository


def build_schedule_repository(settings: AppSettings) -> ScheduleRepository:
    source = settings.source
    if source.kind == "http":
        if not source.api_base_url:
            msg = "source.api_base_url is required when source kind is http"
            raise ValueError(msg)
        return HttpScheduleRepository(source.api_base_url, timeout=source.timeout_seconds)
    return FileSystemScheduleRepository(source.tasks_path)
