from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Mapping, Sequence, Tuple

from core.domain import Workspace
from core.exceptions import AnalyticsLoadError, FetchFailure
from core.interfaces import WorkspaceReadRepository
from core.services.analytics.access import AccessPolicy, ReadPorts, access_policy_for
from core.services.analytics.aggregator import AggregateResult, Aggregator, FetchCall
from core.services.analytics.models import AnalyticsQuery, AnalyticsResult
from core.services.analytics.scope import AnalyticsScope, resolve_scope

logger = logging.getLogger(__name__)


class AnalyticsLoadingMixin:
    """Scope resolution and fan-out shared by every analytics view."""

    _ports: ReadPorts
    _workspace_repo: WorkspaceReadRepository
    _aggregator: Aggregator
    _clock: Callable[[], datetime]

    def list_accessible_workspaces(self, user_id: str) -> List[Workspace]:
        return self._workspace_repo.list_accessible(user_id).flatten()

    # --------------------------------------------------------------
    # Helpers
    # --------------------------------------------------------------

    def _resolve(self, query: AnalyticsQuery) -> Tuple[AnalyticsScope, AccessPolicy, List[FetchFailure]]:
        failures: List[FetchFailure] = []
        policy = access_policy_for(query.role)
        accessible = query.accessible_workspaces

        if (
            accessible is None
            and query.show_all_workspaces
            and policy.spans_workspaces
            and query.user_id
            and query.workspace_id
        ):
            try:
                accessible = self.list_accessible_workspaces(query.user_id)
            except Exception as exc:  # noqa: BLE001
                # scope narrows to the current workspace; the failure is still reported
                logger.warning("Could not load accessible workspaces for %s: %s", query.user_id, exc)
                failures.append(FetchFailure.from_exception("workspaces.accessible", None, exc))
                accessible = None

        scope = resolve_scope(
            query.role,
            query.workspace_id,
            query.user_id,
            show_all_workspaces=query.show_all_workspaces,
            accessible_workspaces=accessible,
        )

        missing = scope.missing_workspace_ids()
        if missing:
            lookup = self._aggregator.aggregate(
                [
                    FetchCall("workspaces.get", ws_id, lambda ws_id=ws_id: self._single(self._workspace_repo.get(ws_id)))
                    for ws_id in missing
                ]
            )
            failures.extend(lookup.failures)
            scope = scope.with_workspaces(lookup.items)

        return scope, policy, failures

    def _collect(
        self,
        plan: Mapping[str, Sequence[FetchCall]],
        failures: List[FetchFailure],
    ) -> Dict[str, AggregateResult[Any]]:
        results = self._aggregator.collect(plan)
        for result in results.values():
            failures.extend(result.failures)
        return results

    @staticmethod
    def _ensure_loaded(view: str, results: Mapping[str, AggregateResult[Any]], failures: List[FetchFailure]) -> None:
        attempted = sum(r.attempted for r in results.values())
        if attempted and all(r.all_failed for r in results.values() if r.attempted):
            raise AnalyticsLoadError(
                f"Could not load {view}: every data source failed.",
                failures,
                code="ANALYTICS_LOAD_FAILED",
            )

    @staticmethod
    def _result(view: str, data: Any, failures: List[FetchFailure]) -> AnalyticsResult[Any]:
        if failures:
            logger.info("%s computed from partial data (%d failed fetch(es))", view, len(failures))
        return AnalyticsResult(data=data, failures=list(failures), view=view)

    @staticmethod
    def _single(entity: Any) -> list:
        return [entity] if entity is not None else []


__all__ = ["AnalyticsLoadingMixin"]
