from __future__ import annotations

from datetime import date

import pytest

from seatbooking.domain.entities.fee import AdditionalFee
from seatbooking.domain.entities.inventory import Branch, InventorySnapshot, Locker, Seat
from seatbooking.domain.entities.plan import Plan
from seatbooking.domain.entities.student import Student

TODAY = date(2025, 1, 15)


def make_snapshot(
    plans: list[Plan] | None = None,
    fees: list[AdditionalFee] | None = None,
    has_lockers: bool = True,
    is_locker_separate: bool = True,
) -> InventorySnapshot:
    return InventorySnapshot(
        branch=Branch(
            id="br_1",
            name="Central Library",
            address="12 MG Road",
            city="Pune",
            has_lockers=has_lockers,
            is_locker_separate=is_locker_separate,
        ),
        plans=plans
        if plans is not None
        else [
            Plan(id="p_basic", name="Basic", price=300),
            Plan(id="p_full", name="Full Day", price=500, includes_seat=True, hours_per_day=12),
            Plan(id="p_premium", name="Premium", price=4200, duration=3, includes_seat=True, includes_locker=True),
            Plan(id="p_day", name="Day Pass", price=100, duration_unit="days", category="flexible"),
        ],
        fees=fees
        if fees is not None
        else [
            AdditionalFee(id="f1", name="Seat Reservation", amount=50),
            AdditionalFee(id="f_locker", name="Locker", amount=200),
            AdditionalFee(id="f_reg", name="Registration", amount=100),
        ],
        seats=[
            Seat(id="s1", number="1", section="Hall A"),
            Seat(id="s2", number="2", section="Hall A", is_occupied=True),
            Seat(id="s3", number="3", section="Hall A"),
            Seat(id="s10", number="10"),
        ],
        lockers=[
            Locker(id="l1", number="1"),
            Locker(id="l2", number="2", is_occupied=True),
        ],
    )


@pytest.fixture
def snapshot() -> InventorySnapshot:
    return make_snapshot()


@pytest.fixture
def student() -> Student:
    return Student(id="stu_1", name="Asha Kulkarni", email="asha@example.com", phone="9820011111")
