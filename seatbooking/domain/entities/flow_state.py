from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import ClassVar, Union

from seatbooking.domain.entities.coupon import AppliedCoupon
from seatbooking.domain.entities.receipt import ReceiptData
from seatbooking.domain.entities.selection_state import SelectionState
from seatbooking.domain.entities.student import Student


# Student self-service flow: selection -> payment -> success


@dataclass(frozen=True)
class SelectionStep:
    selection: SelectionState = SelectionState()
    step: ClassVar[str] = "selection"


@dataclass(frozen=True)
class PaymentStep:
    selection: SelectionState
    coupon: AppliedCoupon | None = None
    step: ClassVar[str] = "payment"


@dataclass(frozen=True)
class SuccessStep:
    selection: SelectionState
    status: str  # "completed", "pending_verification"
    payment_id: str | None = None
    invoice_no: str | None = None
    step: ClassVar[str] = "success"


StudentFlowState = Union[SelectionStep, PaymentStep, SuccessStep]


# Staff payment collection flow: student -> booking -> payment -> preview -> success


@dataclass(frozen=True)
class PaymentEntry:
    amount: str = ""  # raw operator input, validated when leaving the payment step
    additional_discount: Decimal = Decimal("0")
    method: str = "cash"
    remarks: str = ""
    coupon: AppliedCoupon | None = None


@dataclass(frozen=True)
class StudentStep:
    student: Student | None = None
    step: ClassVar[str] = "student"


@dataclass(frozen=True)
class BookingStep:
    student: Student
    selection: SelectionState = SelectionState()
    step: ClassVar[str] = "booking"


@dataclass(frozen=True)
class StaffPaymentStep:
    student: Student
    selection: SelectionState
    entry: PaymentEntry = PaymentEntry()
    step: ClassVar[str] = "payment"


@dataclass(frozen=True)
class PreviewStep:
    student: Student
    selection: SelectionState
    entry: PaymentEntry
    step: ClassVar[str] = "preview"


@dataclass(frozen=True)
class ReceiptStep:
    student: Student
    selection: SelectionState
    entry: PaymentEntry
    receipt: ReceiptData
    payment_id: str | None = None
    step: ClassVar[str] = "success"


StaffFlowState = Union[StudentStep, BookingStep, StaffPaymentStep, PreviewStep, ReceiptStep]
