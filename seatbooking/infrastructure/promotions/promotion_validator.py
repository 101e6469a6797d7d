from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Callable

from seatbooking.application.ports.coupon_validator import CouponValidatorPort
from seatbooking.domain.entities.coupon import CouponValidation, Promotion
from seatbooking.domain.entities.money import ZERO, to_decimal
from seatbooking.infrastructure.catalog_file import deserialize_promotion, load_catalog

HUNDRED = Decimal("100")


class PromotionCouponValidator(CouponValidatorPort):
    """
    Validates coupon codes against a fixed list of promotions.

    Checks run in order and the first failing one is reported: existence, active flag,
    validity window, usage limit, branch and plan scope, minimum order value.
    """

    def __init__(
        self,
        promotions: list[Promotion] | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._promotions = {p.code: p for p in promotions or []}
        self._clock = clock
        self._logger = logging.getLogger(__name__)

    @classmethod
    def from_json(cls, path: str | Path) -> "PromotionCouponValidator":
        data = load_catalog(path)
        return cls([deserialize_promotion(p) for p in data.get("promotions", [])])

    def validate(
        self,
        code: str,
        amount: Decimal,
        student_id: str | None = None,
        plan_id: str | None = None,
        branch_id: str | None = None,
    ) -> CouponValidation:
        promo = self._promotions.get((code or "").strip().upper())
        if promo is None:
            return CouponValidation(success=False, error="Invalid coupon code")
        if not promo.is_active:
            return CouponValidation(success=False, error="This coupon is no longer active")

        now = self._clock()
        if promo.start_date and now < promo.start_date:
            return CouponValidation(success=False, error="This coupon is not valid yet")
        if promo.end_date and now > promo.end_date:
            return CouponValidation(success=False, error="This coupon has expired")

        if promo.usage_limit and promo.used_count >= promo.usage_limit:
            return CouponValidation(success=False, error="Coupon usage limit reached")
        if promo.branch_id and branch_id and promo.branch_id != branch_id:
            return CouponValidation(success=False, error="This coupon is not valid for this branch")
        if promo.plan_id and promo.plan_id != plan_id:
            return CouponValidation(success=False, error="This coupon is not valid for the selected plan")

        amount = to_decimal(amount)
        if promo.min_order_value and amount < promo.min_order_value:
            return CouponValidation(
                success=False,
                error=f"Minimum order of ₹{promo.min_order_value} required to use this coupon",
            )

        discount = self._discount(promo, amount)
        self._logger.info("Promotion matched", extra={"code": promo.code, "branch_id": branch_id})
        return CouponValidation(
            success=True,
            discount=discount,
            final_amount=max(ZERO, amount - discount),
            promotion=promo,
        )

    @staticmethod
    def _discount(promo: Promotion, amount: Decimal) -> Decimal:
        if promo.discount_type == "percentage":
            discount = amount * promo.value / HUNDRED
            if promo.max_discount and discount > promo.max_discount:
                discount = promo.max_discount
            return discount
        if promo.discount_type == "fixed":
            return promo.value
        return ZERO
