from __future__ import annotations

import contextvars
import logging
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Generic, Hashable, Iterable, List, Mapping, Optional, Sequence, TypeVar

from core.exceptions import FetchFailure
from core.services.analytics.policy import analytics_max_workers

logger = logging.getLogger(__name__)

E = TypeVar("E")
K = TypeVar("K", bound=Hashable)


@dataclass(frozen=True)
class FetchCall:
    """One independent read against a single workspace."""
    source: str
    workspace_id: Optional[str]
    fetch: Callable[[], Sequence[Any]]


@dataclass
class AggregateResult(Generic[E]):
    items: List[E] = field(default_factory=list)
    failures: List[FetchFailure] = field(default_factory=list)
    attempted: int = 0
    raw_count: int = 0

    @property
    def all_failed(self) -> bool:
        return self.attempted > 0 and len(self.failures) == self.attempted

    @property
    def is_partial(self) -> bool:
        return bool(self.failures) and not self.all_failed


def merge_unique(batches: Iterable[Iterable[E]]) -> List[E]:
    """Concatenate batches keeping the first entity seen for each ``id``; fields are never merged."""
    seen: set[str] = set()
    merged: List[E] = []
    for batch in batches:
        for entity in batch:
            key = getattr(entity, "id")
            if key in seen:
                continue
            seen.add(key)
            merged.append(entity)
    return merged


class Aggregator:
    """
    Fans read-port calls out on a thread pool, joins, and folds each group of
    results into a deduplicated list.

    A rejected call never aborts the group: it becomes a ``FetchFailure`` next to
    whatever the other calls returned. Batches are folded in call order, so
    "first seen" means the first workspace in scope order, independent of which
    call happened to finish first.
    """

    def __init__(
        self,
        max_workers: int | None = None,
        on_failure: Callable[[FetchFailure], None] | None = None,
    ) -> None:
        self._max_workers = max_workers or analytics_max_workers()
        self._on_failure = on_failure

    def aggregate(self, calls: Sequence[FetchCall]) -> AggregateResult[Any]:
        return self.collect({"items": calls})["items"]

    def collect(self, plan: Mapping[K, Sequence[FetchCall]]) -> Dict[K, AggregateResult[Any]]:
        flat: list[tuple[K, FetchCall]] = [(key, call) for key, calls in plan.items() for call in calls]
        outcomes = self._run(flat)

        grouped: Dict[K, list[tuple[FetchCall, Sequence[Any] | FetchFailure]]] = {key: [] for key in plan}
        for (key, call), outcome in zip(flat, outcomes):
            grouped[key].append((call, outcome))

        results: Dict[K, AggregateResult[Any]] = {}
        for key, rows in grouped.items():
            batches: list[Sequence[Any]] = []
            failures: list[FetchFailure] = []
            for _call, outcome in rows:
                if isinstance(outcome, FetchFailure):
                    failures.append(outcome)
                else:
                    batches.append(outcome)
            results[key] = AggregateResult(
                items=merge_unique(batches),
                failures=failures,
                attempted=len(rows),
                raw_count=sum(len(batch) for batch in batches),
            )
        return results

    # --------------------------------------------------------------
    # Helpers
    # --------------------------------------------------------------

    def _run(self, flat: Sequence[tuple[Any, FetchCall]]) -> list[Sequence[Any] | FetchFailure]:
        if not flat:
            return []
        if len(flat) == 1:
            return [self._invoke(flat[0][1])]

        workers = min(self._max_workers, len(flat))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="analytics-fetch") as pool:
            # each task runs in a copy of the caller context so log trace ids follow the fetch
            futures: list[Future] = [
                pool.submit(contextvars.copy_context().run, self._invoke, call) for _key, call in flat
            ]
            return [f.result() for f in futures]

    def _invoke(self, call: FetchCall) -> Sequence[Any] | FetchFailure:
        try:
            return list(call.fetch() or [])
        except Exception as exc:  # noqa: BLE001
            failure = FetchFailure.from_exception(call.source, call.workspace_id, exc)
            logger.warning(
                "Fetch %s failed for workspace %s: %s",
                call.source,
                call.workspace_id or "-",
                exc,
            )
            if self._on_failure is not None:
                self._on_failure(failure)
            return failure


__all__ = ["FetchCall", "AggregateResult", "Aggregator", "merge_unique"]
