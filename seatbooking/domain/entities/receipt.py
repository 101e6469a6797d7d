from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal


@dataclass(frozen=True)
class ReceiptLineItem:
    description: str
    amount: Decimal


@dataclass(frozen=True)
class ReceiptData:
    invoice_no: str
    issued_at: datetime
    student_name: str
    student_email: str | None
    student_phone: str | None
    branch_name: str
    branch_address: str
    plan_name: str
    plan_type: str
    plan_duration: str
    plan_hours: str | None
    seat_label: str | None
    locker_label: str | None
    start_date: date
    end_date: date
    amount: Decimal
    payment_method: str
    sub_total: Decimal
    discount: Decimal
    due: Decimal
    items: tuple[ReceiptLineItem, ...]
