from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any

COMPLETED = "completed"
PENDING_VERIFICATION = "pending_verification"


@dataclass(frozen=True)
class PaymentDetails:
    amount: Decimal
    method: str = "cash"
    remarks: str | None = None
    type: str = "subscription"
    discount: Decimal = Decimal("0")
    proof_url: str | None = None
    promo_code: str | None = None


@dataclass(frozen=True)
class BookingRequest:
    student_id: str
    branch_id: str
    plan_id: str
    start_date: date
    quantity: int = 1
    seat_id: str | None = None
    locker_id: str | None = None
    additional_fee_ids: tuple[str, ...] = ()
    payment_id: str | None = None
    payment_details: PaymentDetails | None = None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "studentId": self.student_id,
            "branchId": self.branch_id,
            "planId": self.plan_id,
            "startDate": self.start_date.isoformat(),
            "quantity": self.quantity,
            "additionalFeeIds": list(self.additional_fee_ids),
        }
        if self.seat_id:
            payload["seatId"] = self.seat_id
        if self.locker_id:
            payload["lockerId"] = self.locker_id
        if self.payment_id:
            payload["paymentId"] = self.payment_id
        if self.payment_details:
            details = self.payment_details
            payload["paymentDetails"] = {
                "amount": float(details.amount),
                "method": details.method,
                "remarks": details.remarks,
                "type": details.type,
                "discount": float(details.discount),
                "proofUrl": details.proof_url,
                "promoCode": details.promo_code,
            }
        return payload


@dataclass(frozen=True)
class BookingResponse:
    success: bool
    payment_id: str | None = None
    invoice_no: str | None = None
    subscription_ids: tuple[str, ...] = field(default_factory=tuple)
    error: str | None = None
