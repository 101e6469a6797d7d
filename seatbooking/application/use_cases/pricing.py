from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable

from seatbooking.application.exceptions import BookingValidationError
from seatbooking.domain.entities.coupon import AppliedCoupon
from seatbooking.domain.entities.fee import AdditionalFee
from seatbooking.domain.entities.money import ZERO, round_currency, to_decimal
from seatbooking.domain.entities.plan import Plan


@dataclass(frozen=True)
class PriceQuote:
    plan_price: Decimal
    fees_total: Decimal
    quantity: int
    sub_total: Decimal
    coupon_discount: Decimal
    gross_after_coupon: Decimal
    manual_discount: Decimal
    adjustment_credit: Decimal
    payable: Decimal  # rounded to a whole currency unit
    amount_received: Decimal
    due: Decimal  # rounded to a whole currency unit

    @property
    def total_discount(self) -> Decimal:
        return self.coupon_discount + self.manual_discount


def fees_total(fees: Iterable[AdditionalFee], selected_fee_ids: Iterable[str]) -> Decimal:
    selected = {str(fee_id) for fee_id in selected_fee_ids}
    return sum((fee.amount for fee in fees if str(fee.id) in selected), ZERO)


def calculate_sub_total(
    plan: Plan | None,
    fees: Iterable[AdditionalFee],
    selected_fee_ids: Iterable[str],
    quantity: int = 1,
) -> Decimal:
    if quantity < 1:
        raise BookingValidationError("Quantity must be at least 1")
    plan_price = plan.price if plan else ZERO
    # quantity multiplies the whole bundle, fees included
    return (plan_price + fees_total(fees, selected_fee_ids)) * quantity


def calculate_quote(
    plan: Plan | None,
    fees: Iterable[AdditionalFee],
    selected_fee_ids: Iterable[str],
    quantity: int = 1,
    coupon: AppliedCoupon | None = None,
    manual_discount: Decimal | int | str = ZERO,
    adjustment_credit: Decimal | int | str = ZERO,
    amount_received: Decimal | int | str = ZERO,
) -> PriceQuote:
    """
    Price a selection.

        sub_total = (plan price + selected fees) * quantity
        gross     = coupon final amount if a coupon is applied, else sub_total
        payable   = max(0, gross - manual discount - adjustment credit)
        due       = max(0, payable - amount received)

    Arithmetic is exact; payable and due are rounded half-up to a whole unit.
    """
    fees = list(fees)
    selected = list(selected_fee_ids)
    manual = to_decimal(manual_discount)
    credit = to_decimal(adjustment_credit)
    received = to_decimal(amount_received)
    if manual < 0:
        raise BookingValidationError("Discount cannot be negative")
    if credit < 0:
        raise BookingValidationError("Adjustment cannot be negative")
    if received < 0:
        raise BookingValidationError("Please enter a valid amount")

    sub_total = calculate_sub_total(plan, fees, selected, quantity)
    gross = coupon.final_amount if coupon else sub_total
    payable = round_currency(max(ZERO, gross - manual - credit))
    due = round_currency(max(ZERO, payable - received))

    return PriceQuote(
        plan_price=plan.price if plan else ZERO,
        fees_total=fees_total(fees, selected),
        quantity=quantity,
        sub_total=sub_total,
        coupon_discount=coupon.discount if coupon else ZERO,
        gross_after_coupon=gross,
        manual_discount=manual,
        adjustment_credit=credit,
        payable=payable,
        amount_received=received,
        due=due,
    )
