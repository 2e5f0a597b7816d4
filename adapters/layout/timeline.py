from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any, Callable, List, Tuple

from domain.models import (
    HOURS_PER_DAY,
    MINUTES_PER_HOUR,
    LayoutItem,
    TimeInterval,
    TimelineLayout,
    crosses_midnight,
)
from domain.ports.layout import TimedItem, TimelineLayoutEngine


@dataclass(frozen=True)
class TimelineLayoutConfig:
    pixels_per_hour: float = 60.0
    left_offset_pixels: float = 0.0
    min_width_pixels: float = 60.0
    row_height_pixels: float = 48.0
    base_offset_pixels: float = 0.0
    # Pack on the widened display spans instead of the true time spans.
    reserve_min_width: bool = False

    @classmethod
    def for_container(
        cls,
        container_width: float,
        left_offset_pixels: float = 0.0,
        min_width_pixels: float = 60.0,
        **overrides: object,
    ) -> TimelineLayoutConfig:
        return cls(
            pixels_per_hour=container_width / HOURS_PER_DAY,
            left_offset_pixels=left_offset_pixels,
            min_width_pixels=min_width_pixels,
            **overrides,  # type: ignore[arg-type]
        )


@dataclass(frozen=True)
class _Span:
    left: float
    right: float


class TimelinePacker(TimelineLayoutEngine):
    def __init__(self, config: TimelineLayoutConfig | None = None) -> None:
        self.config = config or TimelineLayoutConfig()

    def pack(self, items: Sequence[TimedItem]) -> TimelineLayout:
        self._check_config()
        if not items:
            return TimelineLayout(items=[], row_count=0)

        prepared: List[Tuple[int, TimedItem, TimeInterval, bool]] = []
        for index, item in enumerate(items):
            interval = TimeInterval.from_times(item.start_time, item.end_time)
            prepared.append(
                (index, item, interval, crosses_midnight(item.start_time, item.end_time))
            )
        # sorted() is stable, so equal starts keep their input order.
        ordered = sorted(prepared, key=lambda entry: entry[2].start_minutes)

        rows: List[List[Any]] = []
        placed: dict[int, LayoutItem] = {}
        for index, item, interval, next_day in ordered:
            left = self._edge(interval.start_minutes)
            width = self._width(interval)
            if self.config.reserve_min_width:
                row = _first_fit(rows, self._display_span(interval, left), _spans_overlap)
            else:
                # Whole minutes compare exactly; pixel edges can drift at scales like 1000/24.
                row = _first_fit(rows, interval, TimeInterval.overlaps)
            placed[index] = LayoutItem(
                index=index,
                item=item,
                interval=interval,
                left_pixels=left,
                width_pixels=width,
                row=row,
                top_pixels=self.config.base_offset_pixels + row * self.config.row_height_pixels,
                continues_next_day=next_day,
            )

        return TimelineLayout(
            items=[placed[index] for index in range(len(items))],
            row_count=len(rows),
        )

    def _check_config(self) -> None:
        if self.config.pixels_per_hour <= 0:
            msg = f"pixels_per_hour must be positive, got {self.config.pixels_per_hour}"
            raise ValueError(msg)
        if self.config.min_width_pixels < 0:
            msg = f"min_width_pixels must not be negative, got {self.config.min_width_pixels}"
            raise ValueError(msg)

    def _edge(self, minutes: int) -> float:
        return self.config.left_offset_pixels + minutes / MINUTES_PER_HOUR * self.config.pixels_per_hour

    def _width(self, interval: TimeInterval) -> float:
        true_width = interval.duration_minutes / MINUTES_PER_HOUR * self.config.pixels_per_hour
        return max(true_width, self.config.min_width_pixels)

    def _display_span(self, interval: TimeInterval, left: float) -> _Span:
        # Unwidened blocks end on the same edge the next block starts on.
        right = max(self._edge(interval.end_minutes), left + self.config.min_width_pixels)
        return _Span(left, right)


def _first_fit(rows: List[List[Any]], span: Any, overlaps: Callable[[Any, Any], bool]) -> int:
    for row_idx, occupied in enumerate(rows):
        if not any(overlaps(span, existing) for existing in occupied):
            occupied.append(span)
            return row_idx
    rows.append([span])
    return len(rows) - 1


def _spans_overlap(new: _Span, existing: _Span) -> bool:
    return not (new.right <= existing.left or new.left >= existing.right)


def pack_timeline(
    items: Sequence[TimedItem],
    pixels_per_hour: float,
    left_offset_pixels: float = 0.0,
    min_width_pixels: float = 0.0,
) -> TimelineLayout:
    config = TimelineLayoutConfig(
        pixels_per_hour=pixels_per_hour,
        left_offset_pixels=left_offset_pixels,
        min_width_pixels=min_width_pixels,
    )
    return TimelinePacker(config).pack(items)


def max_overlap_depth(intervals: Iterable[TimeInterval]) -> int:
    events: List[Tuple[int, int]] = []
    for interval in intervals:
        if interval.duration_minutes <= 0:
            continue
        events.append((interval.start_minutes, 1))
        events.append((interval.end_minutes, -1))
    # Ends sort before starts at the same minute: back-to-back spans do not stack.
    events.sort(key=lambda event: (event[0], event[1]))
    depth = 0
    deepest = 0
    for _, delta in events:
        depth += delta
        deepest = max(deepest, depth)
    return deepest
