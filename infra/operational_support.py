"""
Support journal for the analytics engine.

Trace ids travel in a context variable (copied into every fetch and view thread),
are stamped on log records, and key the JSON-lines journal of support events:
fetch failures, failed view loads and unhandled crashes. Everything written to the
journal passes through the redaction rules first.
"""
from __future__ import annotations

import json
import logging
import os
import re
import sys
import threading
import traceback
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import asdict
from datetime import date, datetime, timezone
from pathlib import Path
from threading import Lock
from typing import Any, Callable, Iterator, Mapping

from core.events.domain_events import AnalyticsEvents, analytics_events
from core.exceptions import FetchFailure
from core.services.analytics.models import AnalyticsFailure
from infra.path import logs_dir
from infra.version import get_app_version

logger = logging.getLogger(__name__)

REDACTED = "<redacted>"
REDACTED_EMAIL = "<redacted-email>"
_MAX_REDACTION_DEPTH = 8

_TRACE_ID_CTX: ContextVar[str | None] = ContextVar("wa_trace_id", default=None)

# a mapping key containing any of these has its whole value replaced
_SENSITIVE_KEY_PARTS = frozenset(
    {
        "password",
        "passwd",
        "pwd",
        "token",
        "secret",
        "api_key",
        "apikey",
        "authorization",
        "cookie",
        "session",
        "private_key",
        "db_url",
    }
)

# applied in order; connection urls first so their user part survives the email rule
_TEXT_RULES: tuple[tuple[re.Pattern[str], Callable[[re.Match[str]], str]], ...] = (
    (
        re.compile(r"(?i)\b([a-z][a-z0-9+.\-]*://)([^/\s:@]+):([^/\s@]+)@"),
        lambda m: f"{m.group(1)}{m.group(2)}:{REDACTED}@",
    ),
    (
        re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b"),
        lambda m: REDACTED_EMAIL,
    ),
    (
        re.compile(r"(?i)\b(password|passwd|pwd|token|secret|api[_-]?key|authorization)\b\s*[:=]\s*([^\s,;]+)"),
        lambda m: f"{m.group(1)}={REDACTED}",
    ),
    (
        re.compile(r"(?i)\bbearer\s+[A-Za-z0-9._\-~=+/]+"),
        lambda m: f"Bearer {REDACTED}",
    ),
)


# --------------------------------------------------------------
# Trace ids
# --------------------------------------------------------------


def create_incident_id() -> str:
    stamp = datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S")
    return f"inc-{stamp}-{uuid.uuid4().hex[:8]}"


def current_trace_id() -> str | None:
    value = (_TRACE_ID_CTX.get() or "").strip()
    return value or None


@contextmanager
def bind_trace_id(trace_id: str | None) -> Iterator[str]:
    """Bind ``trace_id`` (or a fresh incident id) for the duration of the block."""
    resolved = (trace_id or "").strip() or create_incident_id()
    token = _TRACE_ID_CTX.set(resolved)
    try:
        yield resolved
    finally:
        _TRACE_ID_CTX.reset(token)


class TraceIdLogFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.trace_id = current_trace_id() or "-"
        return True


# --------------------------------------------------------------
# Redaction
# --------------------------------------------------------------


def _is_sensitive_key(key: object) -> bool:
    normalized = str(key or "").strip().lower().replace("-", "_")
    return any(part in normalized for part in _SENSITIVE_KEY_PARTS)


def redact_text(value: str) -> str:
    text = str(value or "")
    for pattern, replacement in _TEXT_RULES:
        text = pattern.sub(replacement, text)
    return text


def redact_value(value: Any, _depth: int = 0) -> Any:
    """JSON-safe copy of ``value`` with sensitive keys and secret-looking text masked."""
    if _depth >= _MAX_REDACTION_DEPTH:
        return "<max-depth>"
    if value is None or isinstance(value, (bool, int, float)):
        return value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Mapping):
        return {
            str(key): REDACTED if _is_sensitive_key(key) else redact_value(item, _depth + 1)
            for key, item in value.items()
        }
    if isinstance(value, (set, frozenset)):
        value = sorted(value, key=str)
    if isinstance(value, (list, tuple)):
        return [redact_value(item, _depth + 1) for item in value]
    return redact_text(str(value))


# --------------------------------------------------------------
# Journal
# --------------------------------------------------------------


class OperationalSupport:
    """Append-only JSON-lines journal of support events."""

    def __init__(self, events_path: str | Path | None = None) -> None:
        self._events_path = Path(events_path) if events_path is not None else logs_dir() / "support-events.jsonl"
        self._events_path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = Lock()

    @property
    def events_path(self) -> Path:
        return self._events_path

    def emit_event(
        self,
        *,
        event_type: str,
        message: str,
        level: str = "INFO",
        trace_id: str | None = None,
        data: Mapping[str, Any] | None = None,
    ) -> str:
        trace = (trace_id or current_trace_id() or create_incident_id()).strip()
        payload: dict[str, Any] = {
            "timestamp_utc": datetime.now(timezone.utc).isoformat(),
            "event_type": (event_type or "").strip() or "support.event",
            "level": (level or "INFO").strip().upper(),
            "trace_id": trace,
            "message": redact_text(message or ""),
            "app_version": get_app_version(),
            "pid": os.getpid(),
        }
        if data:
            payload["data"] = redact_value(dict(data))

        line = json.dumps(payload, ensure_ascii=True, sort_keys=True)
        with self._lock, self._events_path.open("a", encoding="utf-8") as handle:
            handle.write(line + "\n")
        return trace

    def record_fetch_failure(self, failure: FetchFailure) -> str:
        return self.emit_event(
            event_type="analytics.fetch_failed",
            level="WARNING",
            message=f"{failure.source} failed for workspace {failure.workspace_id or '-'}: {failure.message}",
            data=asdict(failure),
        )

    def record_load_failure(self, failure: AnalyticsFailure) -> str:
        return self.emit_event(
            event_type="analytics.load_failed",
            level="ERROR",
            message=f"Analytics view {failure.view} failed to load: {failure.message}",
            data={
                "view": failure.view,
                "generation": failure.generation,
                "failures": [asdict(f) for f in failure.failures],
            },
        )

    def capture_exception(
        self,
        *,
        exc_type: type[BaseException],
        exc_value: BaseException,
        exc_traceback: Any,
        context: str,
        trace_id: str | None = None,
    ) -> str:
        return self.emit_event(
            event_type="app.crash",
            level="ERROR",
            trace_id=trace_id,
            message=f"Unhandled exception in {context}: {exc_value}",
            data={
                "context": context,
                "exception_type": getattr(exc_type, "__name__", str(exc_type)),
                "stacktrace": "".join(traceback.format_exception(exc_type, exc_value, exc_traceback)),
            },
        )

    def read_events(self, *, trace_id: str | None = None, event_type: str | None = None) -> list[dict[str, Any]]:
        """Journal rows matching the filters, skipping lines that are not JSON objects."""
        if not self._events_path.exists():
            return []
        wanted_trace = (trace_id or "").strip()
        rows: list[dict[str, Any]] = []
        for line in self._events_path.read_text(encoding="utf-8", errors="ignore").splitlines():
            if not line.strip():
                continue
            try:
                payload = json.loads(line)
            except json.JSONDecodeError:
                continue
            if not isinstance(payload, dict):
                continue
            if wanted_trace and str(payload.get("trace_id") or "").strip() != wanted_trace:
                continue
            if event_type and payload.get("event_type") != event_type:
                continue
            rows.append(payload)
        return rows


_GLOBAL_SUPPORT: OperationalSupport | None = None
_HOOKS_INSTALLED = False


def get_operational_support() -> OperationalSupport:
    global _GLOBAL_SUPPORT
    if _GLOBAL_SUPPORT is None:
        _GLOBAL_SUPPORT = OperationalSupport()
    return _GLOBAL_SUPPORT


def install_analytics_support_hooks(
    support: OperationalSupport | None = None,
    events: AnalyticsEvents | None = None,
) -> OperationalSupport:
    """Journal every fetch failure and failed view load published on the analytics signals."""
    recorder = support or get_operational_support()
    signals = events or analytics_events
    signals.fetch_failed.connect(recorder.record_fetch_failure)
    signals.load_failed.connect(recorder.record_load_failure)
    return recorder


def _journal_crash(recorder: OperationalSupport, exc_type, exc_value, exc_tb, context: str) -> None:
    try:
        recorder.capture_exception(exc_type=exc_type, exc_value=exc_value, exc_traceback=exc_tb, context=context)
    except OSError:
        logger.exception("Could not journal unhandled exception in %s", context)


def install_global_exception_hooks(support: OperationalSupport | None = None) -> None:
    """Chain crash journaling in front of the existing sys and threading excepthooks."""
    global _HOOKS_INSTALLED
    if _HOOKS_INSTALLED:
        return

    recorder = support or get_operational_support()
    previous_sys_hook = sys.excepthook
    previous_thread_hook = threading.excepthook

    def _sys_hook(exc_type, exc_value, exc_tb) -> None:
        _journal_crash(recorder, exc_type, exc_value, exc_tb, "main-thread")
        previous_sys_hook(exc_type, exc_value, exc_tb)

    def _thread_hook(args: Any) -> None:
        name = getattr(args.thread, "name", None) or "worker-thread"
        _journal_crash(recorder, args.exc_type, args.exc_value, args.exc_traceback, f"thread:{name}")
        previous_thread_hook(args)

    sys.excepthook = _sys_hook
    threading.excepthook = _thread_hook
    _HOOKS_INSTALLED = True


__all__ = [
    "OperationalSupport",
    "REDACTED",
    "REDACTED_EMAIL",
    "TraceIdLogFilter",
    "bind_trace_id",
    "create_incident_id",
    "current_trace_id",
    "get_operational_support",
    "install_analytics_support_hooks",
    "install_global_exception_hooks",
    "redact_text",
    "redact_value",
]
