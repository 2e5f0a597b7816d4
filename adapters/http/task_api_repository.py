from __future__ import annotations

import logging
from typing import Any

import httpx

from domain.ports.repositories import ScheduleRepository

logger = logging.getLogger(__name__)

TASKS_ENDPOINT = "/api/tasks"


class HttpScheduleRepository(ScheduleRepository):
    def __init__(
        self,
        base_url: str,
        timeout: float = 5.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def load_items(self) -> list[Any]:
        with httpx.Client(
            base_url=self.base_url, timeout=self.timeout, transport=self._transport
        ) as client:
            response = client.get(TASKS_ENDPOINT)
            response.raise_for_status()
            payload = response.json()
        if not isinstance(payload, list):
            logger.warning("Task store returned %s instead of a list.", type(payload).__name__)
            return []
        return payload

    def load_priority_event(self) -> dict[str, Any] | None:
        return None

    def load_schedule(self) -> tuple[list[Any], dict[str, Any] | None]:
        return self.load_items(), None
