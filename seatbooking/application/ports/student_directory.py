from abc import ABC, abstractmethod

from seatbooking.domain.entities.student import Student


class StudentDirectoryPort(ABC):
    @abstractmethod
    def search(self, query: str, limit: int = 5) -> list[Student]:
        raise NotImplementedError

    @abstractmethod
    def get(self, student_id: str) -> Student | None:
        raise NotImplementedError
