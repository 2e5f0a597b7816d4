from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date as Date
from enum import Enum
from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

HOURS_PER_DAY = 24
MINUTES_PER_HOUR = 60
MINUTES_PER_DAY = HOURS_PER_DAY * MINUTES_PER_HOUR

_TIME_OF_DAY_RE = re.compile(r"^(\d{2}):(\d{2})$")


class InvalidTimeFormat(ValueError):
    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(f"InvalidTimeFormat: expected HH:MM (00:00-23:59), got {value!r}")


def parse_time_of_day(value: object) -> int:
    if not isinstance(value, str):
        raise InvalidTimeFormat(value)
    match = _TIME_OF_DAY_RE.match(value)
    if not match:
        raise InvalidTimeFormat(value)
    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        raise InvalidTimeFormat(value)
    return hour * MINUTES_PER_HOUR + minute


def format_minutes(minutes: int) -> str:
    hour, minute = divmod(minutes, MINUTES_PER_HOUR)
    return f"{hour:02d}:{minute:02d}"


class TaskStatus(str, Enum):
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class ScheduleItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str = ""
    description: str = Field(default="", validation_alias=AliasChoices("description", "title"))
    start_time: str = Field(..., validation_alias=AliasChoices("start_time", "startTime"))
    end_time: str = Field(..., validation_alias=AliasChoices("end_time", "endTime"))
    date: Date | None = None
    status: TaskStatus = TaskStatus.PENDING
    priority: str = "MEDIUM"
    kind: Literal["task", "priority"] = Field(
        default="task", validation_alias=AliasChoices("kind", "type")
    )

    @field_validator("start_time", "end_time", mode="after")
    @classmethod
    def ensure_time_of_day(cls, value: str) -> str:
        parse_time_of_day(value)
        return value

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, value: object) -> object:
        return value.strip().upper() if isinstance(value, str) else value

    @field_validator("date", mode="before")
    @classmethod
    def normalize_date(cls, value: object) -> object:
        # ISO datetimes from the task store carry a time part; only the day matters.
        if isinstance(value, str) and "T" in value:
            return value.split("T", 1)[0]
        if value == "":
            return None
        return value

    @model_validator(mode="after")
    def ensure_positive_duration(self) -> ScheduleItem:
        # Equal times are empty, not a wrap past midnight.
        if self.start_time == self.end_time:
            msg = f"end_time must differ from start_time, got {self.start_time} for both"
            raise ValueError(msg)
        return self

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "description": self.description,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "date": self.date.isoformat() if self.date else None,
            "status": self.status.value,
            "priority": self.priority,
            "type": self.kind,
        }


@dataclass(frozen=True)
class TimeInterval:
    start_minutes: int
    end_minutes: int

    @classmethod
    def from_times(cls, start_time: str, end_time: str) -> TimeInterval:
        start = parse_time_of_day(start_time)
        end = parse_time_of_day(end_time)
        if end < start:
            end = MINUTES_PER_DAY
        return cls(start_minutes=start, end_minutes=end)

    @property
    def duration_minutes(self) -> int:
        return self.end_minutes - self.start_minutes

    def overlaps(self, other: TimeInterval) -> bool:
        return not (
            self.end_minutes <= other.start_minutes or self.start_minutes >= other.end_minutes
        )


def crosses_midnight(start_time: str, end_time: str) -> bool:
    return parse_time_of_day(end_time) < parse_time_of_day(start_time)


@dataclass(frozen=True)
class LayoutItem:
    index: int
    item: Any
    interval: TimeInterval
    left_pixels: float
    width_pixels: float
    row: int
    top_pixels: float = 0.0
    continues_next_day: bool = False

    @property
    def right_pixels(self) -> float:
        return self.left_pixels + self.width_pixels

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "index": self.index,
            "start": format_minutes(self.interval.start_minutes),
            "end": format_minutes(self.interval.end_minutes),
            "start_minutes": self.interval.start_minutes,
            "end_minutes": self.interval.end_minutes,
            "left_pixels": self.left_pixels,
            "width_pixels": self.width_pixels,
            "top_pixels": self.top_pixels,
            "row": self.row,
            "continues_next_day": self.continues_next_day,
        }
        to_dict = getattr(self.item, "to_dict", None)
        if callable(to_dict):
            payload["item"] = to_dict()
        return payload


@dataclass(frozen=True)
class TimelineLayout:
    items: list[LayoutItem] = field(default_factory=list)
    row_count: int = 0

    def rows(self) -> list[list[LayoutItem]]:
        grouped: list[list[LayoutItem]] = [[] for _ in range(self.row_count)]
        for entry in sorted(self.items, key=lambda e: (e.interval.start_minutes, e.index)):
            grouped[entry.row].append(entry)
        return grouped

    def to_dict(self) -> dict[str, Any]:
        return {
            "row_count": self.row_count,
            "items": [entry.to_dict() for entry in self.items],
        }
