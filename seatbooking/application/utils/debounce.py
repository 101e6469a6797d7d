from __future__ import annotations

import time


class SearchDebouncer:
    """
    Coalesce search-as-you-type keystrokes.

    Each keystroke replaces the pending query; the query is released once no new
    keystroke arrived for ``quiet_period_seconds``. Timestamps can be injected so
    callers (and tests) control the clock.
    """

    def __init__(self, quiet_period_seconds: float = 0.3) -> None:
        self._quiet_period = quiet_period_seconds
        self._pending: str | None = None
        self._last_keystroke_at: float | None = None

    def register(self, query: str, now_ts: float | None = None) -> None:
        self._pending = query
        self._last_keystroke_at = time.monotonic() if now_ts is None else now_ts

    def due(self, now_ts: float | None = None) -> str | None:
        """Return and consume the pending query if the quiet period has elapsed."""
        if self._pending is None or self._last_keystroke_at is None:
            return None
        now = time.monotonic() if now_ts is None else now_ts
        if now - self._last_keystroke_at < self._quiet_period:
            return None
        query, self._pending = self._pending, None
        return query
