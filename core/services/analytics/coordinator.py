from __future__ import annotations

import contextvars
import logging
from concurrent.futures import Future, ThreadPoolExecutor
from contextlib import AbstractContextManager, nullcontext
from dataclasses import dataclass
from threading import Lock
from typing import Any, Callable, Dict, Optional

from core.events.domain_events import AnalyticsEvents, analytics_events
from core.exceptions import DomainError, FetchFailureError
from core.services.analytics.models import AnalyticsFailure, AnalyticsQuery, AnalyticsResult

logger = logging.getLogger(__name__)

TraceBinder = Callable[[Optional[str]], AbstractContextManager]


@dataclass(frozen=True)
class ComputationRequest:
    view: str
    generation: int
    query: AnalyticsQuery


class AnalyticsCoordinator:
    """
    Issues generation-stamped computation requests and publishes only the latest.

    Each view (``"stats"``, ``"branches"``, ...) has its own counter. A request whose
    generation has been superseded still computes to completion, but its result is
    dropped instead of being published.
    """

    def __init__(
        self,
        events: AnalyticsEvents | None = None,
        trace_binder: TraceBinder | None = None,
        max_workers: int = 2,
    ) -> None:
        self._events = events or analytics_events
        self._trace_binder = trace_binder
        self._lock = Lock()
        self._generations: Dict[str, int] = {}
        # guarded by the per-view publish lock, not by self._lock
        self._published: Dict[str, int] = {}
        self._publish_locks: Dict[str, Lock] = {}
        self._max_workers = max_workers
        self._pool: ThreadPoolExecutor | None = None

    # --------------------------------------------------------------
    # Generations
    # --------------------------------------------------------------

    def request(self, view: str, query: AnalyticsQuery) -> ComputationRequest:
        with self._lock:
            generation = self._generations.get(view, 0) + 1
            self._generations[view] = generation
        return ComputationRequest(view=view, generation=generation, query=query)

    def latest_generation(self, view: str) -> int:
        with self._lock:
            return self._generations.get(view, 0)

    def is_current(self, request: ComputationRequest) -> bool:
        return request.generation >= self.latest_generation(request.view)

    # --------------------------------------------------------------
    # Execution
    # --------------------------------------------------------------

    def run(
        self,
        request: ComputationRequest,
        compute: Callable[[AnalyticsQuery], AnalyticsResult[Any]],
    ) -> AnalyticsResult[Any] | None:
        with self._bind_trace(request):
            try:
                result = compute(request.query)
            except (FetchFailureError, DomainError) as exc:
                failures = tuple(getattr(exc, "failures", ()) or ())
                if not self.is_current(request):
                    logger.debug(
                        "Dropping stale failure for %s (generation %s): %s",
                        request.view,
                        request.generation,
                        exc,
                    )
                    return None
                logger.error("Analytics view %s failed to load: %s", request.view, exc)
                self._events.load_failed.emit(
                    AnalyticsFailure(
                        view=request.view,
                        generation=request.generation,
                        message=str(exc),
                        failures=failures,
                    )
                )
                raise

            if not self._publish(request, result):
                logger.debug(
                    "Discarding stale %s result (generation %s < %s)",
                    request.view,
                    request.generation,
                    self.latest_generation(request.view),
                )
                return None
            return result

    def submit(
        self,
        view: str,
        query: AnalyticsQuery,
        compute: Callable[[AnalyticsQuery], AnalyticsResult[Any]],
    ) -> "Future[AnalyticsResult[Any] | None]":
        request = self.request(view, query)
        pool = self._ensure_pool()
        return pool.submit(contextvars.copy_context().run, self.run, request, compute)

    def shutdown(self, wait: bool = True) -> None:
        with self._lock:
            pool, self._pool = self._pool, None
        if pool is not None:
            pool.shutdown(wait=wait)

    # --------------------------------------------------------------
    # Helpers
    # --------------------------------------------------------------

    def _ensure_pool(self) -> ThreadPoolExecutor:
        with self._lock:
            if self._pool is None:
                self._pool = ThreadPoolExecutor(
                    max_workers=self._max_workers,
                    thread_name_prefix="analytics-view",
                )
            return self._pool

    def _publish_lock(self, view: str) -> Lock:
        with self._lock:
            return self._publish_locks.setdefault(view, Lock())

    def _publish(self, request: ComputationRequest, result: AnalyticsResult[Any]) -> bool:
        """Check freshness and emit as one step per view, so an older generation never lands last."""
        view = request.view
        with self._publish_lock(view):
            if not self.is_current(request) or request.generation <= self._published.get(view, 0):
                return False
            result.generation = request.generation
            result.view = view
            logger.info(
                "Analytics view %s computed (generation %s, %d fetch failure(s))",
                view,
                request.generation,
                len(result.failures),
            )
            self._events.result_published.emit(result)
            self._published[view] = request.generation
            return True

    def _bind_trace(self, request: ComputationRequest) -> AbstractContextManager:
        if self._trace_binder is None:
            return nullcontext()
        return self._trace_binder(None)


__all__ = ["ComputationRequest", "AnalyticsCoordinator", "TraceBinder"]
