from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from filelock import FileLock

from adapters.filesystem.json_utils import load_json_value, write_json_atomic
from domain.ports.repositories import ScheduleRepository

TASKS_KEY = "tasks"
PRIORITY_EVENT_KEY = "priorityEvent"


class FileSystemScheduleRepository(ScheduleRepository):
    def __init__(self, path: Path) -> None:
        self.path = path

    def load_items(self) -> list[Any]:
        return _tasks_of(self._load())

    def load_priority_event(self) -> dict[str, Any] | None:
        return _priority_event_of(self._load())

    def load_schedule(self) -> tuple[list[Any], dict[str, Any] | None]:
        payload = self._load()
        return _tasks_of(payload), _priority_event_of(payload)

    def save_items(
        self,
        items: Sequence[Mapping[str, Any]],
        priority_event: Mapping[str, Any] | None = None,
    ) -> None:
        payload: dict[str, Any] = {TASKS_KEY: [dict(item) for item in items]}
        if priority_event:
            payload[PRIORITY_EVENT_KEY] = dict(priority_event)
        lock_path = self.path.with_suffix(f"{self.path.suffix}.lock")
        with FileLock(str(lock_path)):
            write_json_atomic(self.path, payload)

    def _load(self) -> Any:
        try:
            return load_json_value(self.path)
        except FileNotFoundError:
            return None


def _tasks_of(payload: Any) -> list[Any]:
    if isinstance(payload, dict):
        payload = payload.get(TASKS_KEY)
    if not isinstance(payload, list):
        return []
    return list(payload)


def _priority_event_of(payload: Any) -> dict[str, Any] | None:
    if not isinstance(payload, dict):
        return None
    event = payload.get(PRIORITY_EVENT_KEY)
    return event if isinstance(event, dict) and event else None
