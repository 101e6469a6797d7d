from __future__ import annotations

import logging
import threading
from dataclasses import replace

from seatbooking.application.exceptions import CollaboratorError
from seatbooking.application.ports.booking_gateway import BookingGatewayPort
from seatbooking.application.utils.labels import format_seat_number
from seatbooking.domain.entities.booking import BookingRequest, BookingResponse
from seatbooking.domain.entities.inventory import InventorySnapshot
from seatbooking.infrastructure.inventory.memory_inventory import MemoryInventoryProvider


class MockBookingGateway(BookingGatewayPort):
    """
    In-process booking store for dev/local runs and tests.

    Holds at most one active booking per seat and per locker. When backed by a
    MemoryInventoryProvider, booked seats and lockers are marked occupied there too.
    """

    def __init__(self, inventory: MemoryInventoryProvider | None = None) -> None:
        self._inventory = inventory
        self._seat_holders: dict[tuple[str, str], str] = {}
        self._locker_holders: dict[tuple[str, str], str] = {}
        self._bookings: list[BookingRequest] = []
        self._lock = threading.Lock()
        self._logger = logging.getLogger(__name__)

    @property
    def bookings(self) -> list[BookingRequest]:
        return list(self._bookings)

    def create_booking(self, request: BookingRequest) -> BookingResponse:
        with self._lock:
            error = self._conflict(request)
            if error:
                self._logger.info("Mock booking rejected", extra={"branch_id": request.branch_id, "reason": error})
                return BookingResponse(success=False, error=error)

            if request.seat_id:
                self._seat_holders[(request.branch_id, request.seat_id)] = request.student_id
            if request.locker_id:
                self._locker_holders[(request.branch_id, request.locker_id)] = request.student_id
            self._bookings.append(request)
            number = len(self._bookings)
            self._mark_occupied(request)

        invoice_no = f"INV-{number:04d}"
        subscription_ids = tuple(f"mock_sub_{number}_{i + 1}" for i in range(request.quantity))
        self._logger.info(
            "Mock booking created",
            extra={"branch_id": request.branch_id, "seat_id": request.seat_id, "invoice_no": invoice_no},
        )
        return BookingResponse(
            success=True,
            payment_id=request.payment_id or f"mock_payment_{number}",
            invoice_no=invoice_no,
            subscription_ids=subscription_ids,
        )

    def _conflict(self, request: BookingRequest) -> str | None:
        snapshot = None
        if self._inventory is not None:
            try:
                snapshot = self._inventory.get_snapshot(request.branch_id)
            except CollaboratorError as e:
                return str(e)
            if snapshot.plan(request.plan_id) is None:
                return "Plan not found"

        if request.seat_id:
            seat = snapshot.seat(request.seat_id) if snapshot else None
            taken = (request.branch_id, request.seat_id) in self._seat_holders
            if taken or (seat is not None and seat.is_occupied):
                label = format_seat_number(seat.number) if seat else request.seat_id
                return f"Seat {label} is already occupied"
        if request.locker_id:
            locker = snapshot.locker(request.locker_id) if snapshot else None
            taken = (request.branch_id, request.locker_id) in self._locker_holders
            if taken or (locker is not None and locker.is_occupied):
                label = locker.number if locker else request.locker_id
                return f"Locker {label} is already occupied"
        return None

    def _mark_occupied(self, request: BookingRequest) -> None:
        if self._inventory is None or not (request.seat_id or request.locker_id):
            return
        snapshot = self._inventory.get_snapshot(request.branch_id)
        seats = [replace(s, is_occupied=True) if s.id == request.seat_id else s for s in snapshot.seats]
        lockers = [replace(lk, is_occupied=True) if lk.id == request.locker_id else lk for lk in snapshot.lockers]
        self._inventory.put_snapshot(
            InventorySnapshot(branch=snapshot.branch, plans=snapshot.plans, fees=snapshot.fees, seats=seats, lockers=lockers)
        )
