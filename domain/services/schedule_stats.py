from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from domain.models import HOURS_PER_DAY, MINUTES_PER_HOUR, ScheduleItem, TaskStatus, TimeInterval


@dataclass(frozen=True)
class ScheduleStats:
    total_tasks: int
    completed_tasks: int
    scheduled_minutes: int
    scheduled_hours: float
    free_hours: float
    completion_rate: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_tasks": self.total_tasks,
            "completed_tasks": self.completed_tasks,
            "scheduled_minutes": self.scheduled_minutes,
            "scheduled_hours": self.scheduled_hours,
            "free_hours": self.free_hours,
            "completion_rate": self.completion_rate,
        }


def compute_schedule_stats(items: Iterable[ScheduleItem]) -> ScheduleStats:
    tasks = [item for item in items if item.kind == "task"]
    scheduled_minutes = 0
    completed = 0
    for task in tasks:
        scheduled_minutes += TimeInterval.from_times(task.start_time, task.end_time).duration_minutes
        if task.status == TaskStatus.COMPLETED:
            completed += 1

    scheduled_hours = round(scheduled_minutes / MINUTES_PER_HOUR, 1)
    free_hours = round(max(HOURS_PER_DAY - scheduled_hours, 0.0), 1)
    completion_rate = round(completed / len(tasks) * 100) if tasks else 0
    return ScheduleStats(
        total_tasks=len(tasks),
        completed_tasks=completed,
        scheduled_minutes=scheduled_minutes,
        scheduled_hours=scheduled_hours,
        free_hours=free_hours,
        completion_rate=completion_rate,
    )
