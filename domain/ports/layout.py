from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from domain.models import TimelineLayout


class TimedItem(Protocol):
    @property
    def start_time(self) -> str: ...

    @property
    def end_time(self) -> str: ...


class TimelineLayoutEngine(Protocol):
    def pack(self, items: Sequence[TimedItem]) -> TimelineLayout:
        ...
