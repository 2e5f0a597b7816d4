from __future__ import annotations

import os
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import pytest

from adapters.filesystem.schedule_repository import FileSystemScheduleRepository
from app.config import AppSettings, SourceSettings, TimelineSettings


def _clear_timeline_env() -> None:
    for key in list(os.environ):
        if key.startswith("TIMELINE_"):
            os.environ.pop(key, None)


_clear_timeline_env()


@pytest.fixture(autouse=True)
def clear_timeline_env() -> Generator[None, None, None]:
    _clear_timeline_env()
    yield
    _clear_timeline_env()


@pytest.fixture
def tasks_payload() -> dict[str, Any]:
    return {
        "tasks": [
            {
                "id": "t1",
                "description": "Standup",
                "startTime": "09:00",
                "endTime": "11:00",
                "date": "2025-03-14",
                "status": "COMPLETED",
                "priority": "HIGH",
            },
            {
                "id": "t2",
                "description": "Code review",
                "startTime": "10:00",
                "endTime": "12:00",
                "date": "2025-03-14",
                "status": "PENDING",
                "priority": "MEDIUM",
            },
            {
                "id": "t3",
                "description": "Night deploy",
                "startTime": "23:00",
                "endTime": "01:00",
                "date": "2025-03-14",
                "status": "PENDING",
                "priority": "LOW",
            },
            {
                "id": "t4",
                "description": "Other day",
                "startTime": "09:00",
                "endTime": "10:00",
                "date": "2025-03-15",
                "status": "PENDING",
                "priority": "LOW",
            },
        ],
        "priorityEvent": {
            "id": "priority-event",
            "title": "Exam",
            "startTime": "13:00",
            "endTime": "15:00",
            "date": "2025-03-14",
            "type": "priority",
        },
    }


@pytest.fixture
def tasks_file(tmp_path: Path, tasks_payload: dict[str, Any]) -> Path:
    path = tmp_path / "tasks.json"
    FileSystemScheduleRepository(path).save_items(
        tasks_payload["tasks"], tasks_payload["priorityEvent"]
    )
    return path


@pytest.fixture
def timeline_settings() -> TimelineSettings:
    return TimelineSettings(
        pixels_per_hour=10.0,
        left_offset_pixels=0.0,
        min_width_pixels=60.0,
        row_height_pixels=40.0,
        base_offset_pixels=0.0,
        reserve_min_width=False,
    )


@pytest.fixture
def app_settings_factory(
    tmp_path: Path, timeline_settings: TimelineSettings
) -> Callable[..., AppSettings]:
    def _factory(**source_overrides: object) -> AppSettings:
        source = SourceSettings(kind="filesystem", tasks_path=tmp_path / "tasks.json")
        return AppSettings(
            title="Test Timeline",
            timeline=timeline_settings,
            source=source.model_copy(update=source_overrides),
        )

    return _factory


@pytest.fixture
def app_settings(app_settings_factory: Callable[..., AppSettings]) -> AppSettings:
    return app_settings_factory()
