from __future__ import annotations

from pathlib import Path

from seatbooking.application.ports.student_directory import StudentDirectoryPort
from seatbooking.domain.entities.student import Student
from seatbooking.infrastructure.catalog_file import deserialize_student, load_catalog


class MemoryStudentDirectory(StudentDirectoryPort):
    def __init__(self, students: list[Student] | None = None) -> None:
        self._students = {s.id: s for s in students or []}

    @classmethod
    def from_json(cls, path: str | Path) -> "MemoryStudentDirectory":
        data = load_catalog(path)
        return cls([deserialize_student(s) for s in data.get("students", [])])

    def search(self, query: str, limit: int = 5) -> list[Student]:
        """Case-insensitive substring match on name, email and phone."""
        needle = query.strip().casefold()
        matches = [
            s
            for s in self._students.values()
            if any(needle in (field or "").casefold() for field in (s.name, s.email, s.phone))
        ]
        return sorted(matches, key=lambda s: s.name.casefold())[:limit]

    def get(self, student_id: str) -> Student | None:
        return self._students.get(student_id)
