from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from pydantic import ValidationError

from domain.models import ScheduleItem, TimelineLayout
from domain.ports.layout import TimelineLayoutEngine
from domain.services.schedule_stats import ScheduleStats, compute_schedule_stats

logger = logging.getLogger(__name__)

PRIORITY_EVENT_INDEX = -1


@dataclass(frozen=True)
class RejectedItem:
    index: int
    reason: str

    def to_dict(self) -> dict[str, Any]:
        return {"index": self.index, "reason": self.reason}


@dataclass(frozen=True)
class DayTimeline:
    day: date | None
    layout: TimelineLayout
    stats: ScheduleStats
    rejected: list[RejectedItem] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.day.isoformat() if self.day else None,
            "layout": self.layout.to_dict(),
            "stats": self.stats.to_dict(),
            "rejected": [entry.to_dict() for entry in self.rejected],
        }


class BuildDayTimeline:
    def __init__(self, layout: TimelineLayoutEngine) -> None:
        self._layout = layout

    def build(
        self,
        raw_items: Sequence[Any],
        day: date | None = None,
        priority_event: Mapping[str, Any] | None = None,
    ) -> DayTimeline:
        accepted, rejected = validate_schedule_items(raw_items)
        if day is not None:
            accepted = [item for item in accepted if item.date is None or item.date == day]

        packed: list[ScheduleItem] = []
        event = self._resolve_priority_event(priority_event, day, rejected)
        if event is not None:
            packed.append(event)
        packed.extend(accepted)

        return DayTimeline(
            day=day,
            layout=self._layout.pack(packed),
            stats=compute_schedule_stats(accepted),
            rejected=rejected,
        )

    def _resolve_priority_event(
        self,
        raw_event: Mapping[str, Any] | None,
        day: date | None,
        rejected: list[RejectedItem],
    ) -> ScheduleItem | None:
        if not raw_event:
            return None
        try:
            event = ScheduleItem.model_validate({**raw_event, "kind": "priority"})
        except ValidationError as exc:
            reason = _describe_validation_error(exc)
            logger.warning("Rejected priority event: %s", reason)
            rejected.append(RejectedItem(index=PRIORITY_EVENT_INDEX, reason=reason))
            return None
        if day is not None and event.date is not None and event.date != day:
            return None
        return event


def validate_schedule_items(
    raw_items: Sequence[Any],
) -> tuple[list[ScheduleItem], list[RejectedItem]]:
    accepted: list[ScheduleItem] = []
    rejected: list[RejectedItem] = []
    for index, raw in enumerate(raw_items):
        if not isinstance(raw, Mapping):
            reason = f"expected an object, got {type(raw).__name__}"
            logger.warning("Rejected schedule item %s: %s", index, reason)
            rejected.append(RejectedItem(index=index, reason=reason))
            continue
        try:
            accepted.append(ScheduleItem.model_validate(dict(raw)))
        except ValidationError as exc:
            reason = _describe_validation_error(exc)
            logger.warning("Rejected schedule item %s: %s", index, reason)
            rejected.append(RejectedItem(index=index, reason=reason))
    return accepted, rejected


def _describe_validation_error(exc: ValidationError) -> str:
    parts: list[str] = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()))
        message = str(error.get("msg", "invalid value"))
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts)
