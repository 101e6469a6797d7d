from __future__ import annotations

import logging

from seatbooking.application.ports.student_directory import StudentDirectoryPort
from seatbooking.application.utils.debounce import SearchDebouncer
from seatbooking.domain.entities.student import Student


class StudentSearchUseCase:
    """Search-as-you-type lookup used by the staff flow's student step."""

    def __init__(
        self,
        directory: StudentDirectoryPort,
        min_chars: int = 2,
        limit: int = 5,
        debouncer: SearchDebouncer | None = None,
    ) -> None:
        self._directory = directory
        self._min_chars = min_chars
        self._limit = limit
        self._debouncer = debouncer or SearchDebouncer()
        self._logger = logging.getLogger(__name__)

    def search(self, query: str) -> list[Student]:
        query = (query or "").strip()
        if len(query) < self._min_chars:
            return []
        try:
            return list(self._directory.search(query, limit=self._limit))[: self._limit]
        except Exception as e:
            self._logger.warning("Student search failed", extra={"reason": str(e)})
            return []

    def keystroke(self, query: str, now_ts: float | None = None) -> None:
        self._debouncer.register(query, now_ts)

    def poll(self, now_ts: float | None = None) -> list[Student] | None:
        """Results for the latest keystroke once typing has paused, otherwise None."""
        query = self._debouncer.due(now_ts)
        if query is None:
            return None
        return self.search(query)
