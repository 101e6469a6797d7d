from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from seatbooking.application.use_cases.pricing import PriceQuote
from seatbooking.application.utils.labels import (
    locker_label,
    plan_duration_label,
    plan_hours_label,
    seat_label,
)
from seatbooking.application.utils.periods import subscription_periods
from seatbooking.domain.entities.fee import AdditionalFee
from seatbooking.domain.entities.inventory import Branch, Locker, Seat
from seatbooking.domain.entities.plan import Plan
from seatbooking.domain.entities.receipt import ReceiptData, ReceiptLineItem
from seatbooking.domain.entities.student import Student


def fallback_invoice_no(now: datetime) -> str:
    return f"INV-{int(now.timestamp() * 1000)}"


def _line_item(description: str, unit_amount: Decimal, quantity: int) -> ReceiptLineItem:
    if quantity > 1:
        description = f"{description} × {quantity}"
    return ReceiptLineItem(description=description, amount=unit_amount * quantity)


def build_receipt(
    student: Student,
    branch: Branch,
    plan: Plan,
    fees: list[AdditionalFee],
    quote: PriceQuote,
    start_date: date,
    payment_method: str,
    seat: Seat | None = None,
    locker: Locker | None = None,
    invoice_no: str | None = None,
    issued_at: datetime | None = None,
) -> ReceiptData:
    """Fully resolved receipt record; PDF rendering, email and sharing consume this."""
    issued_at = issued_at or datetime.now()
    periods = subscription_periods(plan, start_date, quote.quantity)
    address = ", ".join(part for part in (branch.address or "", branch.city) if part)

    # each line is extended by quantity so the items add up to sub_total
    items = [_line_item(f"Plan: {plan.name}", plan.price, quote.quantity)]
    items.extend(_line_item(fee.name or "Additional Fee", fee.amount, quote.quantity) for fee in fees)

    return ReceiptData(
        invoice_no=invoice_no or fallback_invoice_no(issued_at),
        issued_at=issued_at,
        student_name=student.name,
        student_email=student.email,
        student_phone=student.phone,
        branch_name=branch.name,
        branch_address=address,
        plan_name=plan.name,
        plan_type=plan.category,
        plan_duration=plan_duration_label(plan, quote.quantity),
        plan_hours=plan_hours_label(plan),
        seat_label=seat_label(seat),
        locker_label=locker_label(locker),
        start_date=periods[0].start,
        end_date=periods[-1].end,
        amount=quote.amount_received,
        payment_method=payment_method,
        sub_total=quote.sub_total,
        discount=quote.total_discount,
        due=quote.due,
        items=tuple(items),
    )
