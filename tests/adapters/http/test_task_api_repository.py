from __future__ import annotations

import httpx
import pytest

from adapters.http.task_api_repository import HttpScheduleRepository


def test_loads_tasks_from_rest_endpoint() -> None:
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        return httpx.Response(200, json=[{"startTime": "09:00", "endTime": "10:00"}])

    repo = HttpScheduleRepository("http://tasks.local/", transport=httpx.MockTransport(handler))

    assert repo.load_items() == [{"startTime": "09:00", "endTime": "10:00"}]
    assert seen == ["http://tasks.local/api/tasks"]
    assert repo.load_priority_event() is None


def test_non_list_payload_is_treated_as_empty() -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"error": "nope"}))

    repo = HttpScheduleRepository("http://tasks.local", transport=transport)

    assert repo.load_items() == []


def test_error_status_raises() -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(500, text="boom"))

    repo = HttpScheduleRepository("http://tasks.local", transport=transport)

    with pytest.raises(httpx.HTTPStatusError):
        repo.load_items()


def test_load_schedule_has_no_priority_event() -> None:
    transport = httpx.MockTransport(
        lambda request: httpx.Response(200, json=[{"startTime": "09:00", "endTime": "10:00"}])
    )

    repo = HttpScheduleRepository("http://tasks.local", transport=transport)

    assert repo.load_schedule() == ([{"startTime": "09:00", "endTime": "10:00"}], None)
