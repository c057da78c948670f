from __future__ import annotations

import os


DEFAULT_MAX_WORKERS = 8
_MAX_WORKERS_CEILING = 32


def analytics_max_workers() -> int:
    raw = (os.getenv("WA_ANALYTICS_MAX_WORKERS", "") or "").strip()
    if not raw:
        return DEFAULT_MAX_WORKERS
    try:
        value = int(raw)
    except ValueError:
        return DEFAULT_MAX_WORKERS
    return max(1, min(_MAX_WORKERS_CEILING, value))


__all__ = ["analytics_max_workers", "DEFAULT_MAX_WORKERS"]
