from __future__ import annotations

from abc import ABC, abstractmethod

from seatbooking.domain.entities.booking import BookingRequest, BookingResponse


class BookingGatewayPort(ABC):
    @abstractmethod
    def create_booking(self, request: BookingRequest) -> BookingResponse:
        """
        Persist the booking and its subscription(s).

        This is the only place seat/locker conflicts are decided: implementations must
        enforce at most one active subscription per seat and report a conflict as
        BookingResponse(success=False, error=...).
        """
        raise NotImplementedError
