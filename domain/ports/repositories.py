from __future__ import annotations

from typing import Any, Protocol


class ScheduleRepository(Protocol):
    def load_items(self) -> list[Any]: ...

    def load_priority_event(self) -> dict[str, Any] | None: ...

    def load_schedule(self) -> tuple[list[Any], dict[str, Any] | None]: ...
