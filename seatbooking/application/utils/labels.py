from __future__ import annotations

from seatbooking.domain.entities.inventory import Locker, Seat
from seatbooking.domain.entities.plan import Plan


def format_seat_number(number: str | int | None) -> str:
    """Display form of a seat number: "5" -> "S-05", already prefixed numbers pass through."""
    if number is None:
        return "N/A"
    text = str(number)
    if text.startswith("S-"):
        return text
    return f"S-{text.zfill(2)}"


def format_time_12h(value: str | None) -> str:
    """Convert "HH:MM" to "hh:MM AM/PM"."""
    if not value:
        return "-"
    hours_text, _, minutes = value.partition(":")
    hours = int(hours_text)
    suffix = "PM" if hours >= 12 else "AM"
    display = hours % 12 or 12
    return f"{display:02d}:{minutes or '00'} {suffix}"


def seat_label(seat: Seat | None) -> str | None:
    if seat is None:
        return None
    return f"{format_seat_number(seat.number)} ({seat.section_name})"


def locker_label(locker: Locker | None) -> str | None:
    if locker is None:
        return None
    return f"Locker {locker.number}"


def plan_duration_label(plan: Plan, quantity: int = 1) -> str:
    return f"{plan.duration * quantity} {plan.duration_unit}"


def plan_hours_label(plan: Plan) -> str | None:
    if plan.hours_per_day:
        return f"{plan.hours_per_day} Hrs/Day"
    if plan.shift_start and plan.shift_end:
        return f"{format_time_12h(plan.shift_start)} - {format_time_12h(plan.shift_end)}"
    return None
