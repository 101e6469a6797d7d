"""
Tests for labels, subscription periods and receipt data.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

import pytest

from seatbooking.application.use_cases.pricing import calculate_quote
from seatbooking.application.utils.labels import (
    format_seat_number,
    format_time_12h,
    plan_duration_label,
    plan_hours_label,
    seat_label,
)
from seatbooking.application.utils.periods import add_months, subscription_periods
from seatbooking.application.utils.receipt import build_receipt, fallback_invoice_no
from seatbooking.domain.entities.inventory import Seat
from seatbooking.domain.entities.plan import Plan


def test_seat_number_formatting():
    assert format_seat_number("5") == "S-05"
    assert format_seat_number(12) == "S-12"
    assert format_seat_number("S-07") == "S-07"
    assert format_seat_number(None) == "N/A"
    assert seat_label(Seat(id="s", number="3")) == "S-03 (General)"


def test_time_formatting():
    assert format_time_12h("09:00") == "09:00 AM"
    assert format_time_12h("13:30") == "01:30 PM"
    assert format_time_12h("00:15") == "12:15 AM"
    assert format_time_12h(None) == "-"


def test_plan_labels():
    shift = Plan(id="p", name="Morning", price=800, shift_start="06:00", shift_end="12:00")
    full = Plan(id="f", name="Full", price=1500, hours_per_day=12, duration=3)

    assert plan_hours_label(shift) == "06:00 AM - 12:00 PM"
    assert plan_hours_label(full) == "12 Hrs/Day"
    assert plan_duration_label(full, quantity=2) == "6 months"


def test_add_months_clamps_to_month_end():
    assert add_months(date(2025, 1, 31), 1) == date(2025, 2, 28)
    assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
    assert add_months(date(2025, 11, 15), 3) == date(2026, 2, 15)


def test_periods_are_back_to_back():
    plan = Plan(id="p", name="Monthly", price=100)
    periods = subscription_periods(plan, date(2025, 1, 15), quantity=3)

    assert [(p.start, p.end) for p in periods] == [
        (date(2025, 1, 15), date(2025, 2, 15)),
        (date(2025, 2, 15), date(2025, 3, 15)),
        (date(2025, 3, 15), date(2025, 4, 15)),
    ]


def test_day_and_week_periods():
    days = Plan(id="d", name="Day", price=10, duration=1, duration_unit="days")
    weeks = Plan(id="w", name="Week", price=10, duration=2, duration_unit="weeks")
    assert subscription_periods(days, date(2025, 1, 31))[0].end == date(2025, 2, 1)
    assert subscription_periods(weeks, date(2025, 1, 1))[0].end == date(2025, 1, 15)
    with pytest.raises(ValueError):
        subscription_periods(Plan(id="x", name="X", price=1, duration_unit="years"), date(2025, 1, 1))


def test_fallback_invoice_number():
    assert fallback_invoice_no(datetime(2025, 1, 15, 10, 0)).startswith("INV-")


def test_receipt_fields(snapshot, student):
    plan = snapshot.plan("p_basic")
    fees = [snapshot.fee("f1")]
    quote = calculate_quote(plan, snapshot.fees, ["f1"], quantity=2, manual_discount=100, amount_received=500)

    receipt = build_receipt(
        student=student,
        branch=snapshot.branch,
        plan=plan,
        fees=fees,
        quote=quote,
        start_date=date(2025, 1, 15),
        payment_method="cash",
        seat=snapshot.seat("s1"),
        invoice_no="INV-42",
        issued_at=datetime(2025, 1, 15, 9, 0),
    )

    assert receipt.invoice_no == "INV-42"
    assert receipt.branch_address == "12 MG Road, Pune"
    assert receipt.plan_duration == "2 months"
    assert receipt.end_date == date(2025, 3, 15)
    assert receipt.sub_total == Decimal("700")
    assert receipt.discount == Decimal("100")
    assert receipt.due == Decimal("100")
    assert receipt.locker_label is None
    assert [i.description for i in receipt.items] == ["Plan: Basic × 2", "Seat Reservation × 2"]
    assert [i.amount for i in receipt.items] == [Decimal("600"), Decimal("100")]
    assert sum(i.amount for i in receipt.items) == receipt.sub_total
