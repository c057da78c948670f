from __future__ import annotations

import threading
from contextlib import contextmanager
from datetime import datetime, timedelta

import pytest

from core.domain import UserRole
from core.exceptions import AnalyticsLoadError, FetchFailure, ValidationError
from core.services.analytics import AnalyticsCoordinator, AnalyticsQuery, AnalyticsResult, DateRange

NOW = datetime(2024, 1, 31, 12, 0, 0)


def _query(workspace_id: str = "ws-1") -> AnalyticsQuery:
    return AnalyticsQuery(
        workspace_id=workspace_id,
        user_id="u-1",
        role=UserRole.ADMIN,
        date_range=DateRange(NOW - timedelta(days=7), NOW),
    )


def _capture(signal) -> list:
    received: list = []
    signal.connect(received.append)
    return received


def test_generations_are_counted_per_view(events):
    coordinator = AnalyticsCoordinator(events=events)

    first = coordinator.request("stats", _query())
    second = coordinator.request("stats", _query())
    other = coordinator.request("branches", _query())

    assert (first.generation, second.generation, other.generation) == (1, 2, 1)
    assert not coordinator.is_current(first)
    assert coordinator.is_current(second)
    assert coordinator.is_current(other)


def test_current_result_is_stamped_and_published(events):
    coordinator = AnalyticsCoordinator(events=events)
    published = _capture(events.result_published)
    request = coordinator.request("stats", _query())

    result = coordinator.run(request, lambda q: AnalyticsResult(data={"ws": q.workspace_id}))

    assert result is not None
    assert (result.view, result.generation) == ("stats", 1)
    assert published == [result]


def test_superseded_result_is_computed_but_not_published(events):
    coordinator = AnalyticsCoordinator(events=events)
    published = _capture(events.result_published)
    computed: list[str] = []

    stale = coordinator.request("stats", _query("ws-old"))
    fresh = coordinator.request("stats", _query("ws-new"))

    def compute(query):
        computed.append(query.workspace_id)
        return AnalyticsResult(data=query.workspace_id)

    assert coordinator.run(fresh, compute).data == "ws-new"
    assert coordinator.run(stale, compute) is None
    assert computed == ["ws-new", "ws-old"]
    assert [r.data for r in published] == ["ws-new"]


def test_out_of_order_completion_publishes_only_the_latest(events):
    coordinator = AnalyticsCoordinator(events=events, max_workers=2)
    published = _capture(events.result_published)
    release_first = threading.Event()

    def slow(query):
        release_first.wait(timeout=5)
        return AnalyticsResult(data="first")

    def fast(query):
        return AnalyticsResult(data="second")

    try:
        first = coordinator.submit("branches", _query(), slow)
        second = coordinator.submit("branches", _query(), fast)
        assert second.result(timeout=5).data == "second"
        release_first.set()
        assert first.result(timeout=5) is None
    finally:
        release_first.set()
        coordinator.shutdown()

    assert [r.data for r in published] == ["second"]
    assert coordinator.latest_generation("branches") == 2


def test_load_failure_is_published_and_reraised(events):
    coordinator = AnalyticsCoordinator(events=events)
    failed = _capture(events.load_failed)
    failure = FetchFailure("tasks.workspace", "ws-1", "down", "ConnectionError")
    request = coordinator.request("stats", _query())

    def compute(query):
        raise AnalyticsLoadError("every source failed", [failure], code="ANALYTICS_LOAD_FAILED")

    with pytest.raises(AnalyticsLoadError):
        coordinator.run(request, compute)

    assert len(failed) == 1
    assert failed[0].view == "stats"
    assert failed[0].generation == 1
    assert failed[0].failures == (failure,)


def test_stale_failure_is_dropped_silently(events):
    coordinator = AnalyticsCoordinator(events=events)
    failed = _capture(events.load_failed)
    stale = coordinator.request("stats", _query())
    coordinator.request("stats", _query())

    def compute(query):
        raise ValidationError("bad range", code="INVALID_DATE_RANGE")

    assert coordinator.run(stale, compute) is None
    assert failed == []


def test_unexpected_errors_propagate_without_a_load_event(events):
    coordinator = AnalyticsCoordinator(events=events)
    failed = _capture(events.load_failed)
    request = coordinator.request("stats", _query())

    def compute(query):
        raise KeyError("boom")

    with pytest.raises(KeyError):
        coordinator.run(request, compute)
    assert failed == []


def test_each_run_is_bound_to_a_trace(events):
    bound: list = []

    @contextmanager
    def binder(trace_id):
        bound.append(trace_id)
        yield "trace-1"

    coordinator = AnalyticsCoordinator(events=events, trace_binder=binder)
    coordinator.run(coordinator.request("trends", _query()), lambda q: AnalyticsResult(data=[]))

    assert bound == [None]


class _PausingCoordinator(AnalyticsCoordinator):
    """Holds generation 1 right after its freshness check passes."""

    def __init__(self, events) -> None:
        super().__init__(events=events)
        self.checked = threading.Event()
        self.resume = threading.Event()

    def is_current(self, request) -> bool:
        current = super().is_current(request)
        if request.generation == 1 and current:
            self.checked.set()
            self.resume.wait(timeout=5)
        return current


def test_older_generation_never_publishes_after_a_newer_one(events):
    coordinator = _PausingCoordinator(events)
    published = _capture(events.result_published)
    first = coordinator.request("stats", _query("ws-old"))

    def compute(query):
        return AnalyticsResult(data=query.workspace_id)

    older = threading.Thread(target=coordinator.run, args=(first, compute))
    older.start()
    try:
        assert coordinator.checked.wait(timeout=5)
        second = coordinator.request("stats", _query("ws-new"))
        newer = threading.Thread(target=coordinator.run, args=(second, compute))
        newer.start()
    finally:
        coordinator.resume.set()
    older.join(timeout=5)
    newer.join(timeout=5)

    assert [r.generation for r in published][-1] == 2
    assert published[-1].data == "ws-new"


def test_generation_already_published_is_not_emitted_again(events):
    coordinator = AnalyticsCoordinator(events=events)
    published = _capture(events.result_published)
    request = coordinator.request("stats", _query())

    assert coordinator.run(request, lambda q: AnalyticsResult(data=1)) is not None
    assert coordinator.run(request, lambda q: AnalyticsResult(data=2)) is None
    assert [r.data for r in published] == [1]
