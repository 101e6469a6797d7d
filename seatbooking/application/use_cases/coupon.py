from __future__ import annotations

import logging
from decimal import Decimal

from seatbooking.application.exceptions import BookingValidationError, CollaboratorError
from seatbooking.application.ports.coupon_validator import CouponValidatorPort
from seatbooking.domain.entities.coupon import AppliedCoupon


class ApplyCouponUseCase:
    """Validate a coupon code and produce the single coupon that applies to the order."""

    def __init__(self, validator: CouponValidatorPort) -> None:
        self._validator = validator
        self._logger = logging.getLogger(__name__)

    def execute(
        self,
        code: str,
        sub_total: Decimal,
        student_id: str | None = None,
        plan_id: str | None = None,
        branch_id: str | None = None,
    ) -> AppliedCoupon:
        """
        Returns the new AppliedCoupon. It replaces any previously applied coupon, coupons
        never stack. Raises CollaboratorError with the validator's reason when rejected.
        """
        normalized = (code or "").strip().upper()
        if not normalized:
            raise BookingValidationError("Please enter a coupon code")

        try:
            result = self._validator.validate(
                normalized,
                sub_total,
                student_id=student_id,
                plan_id=plan_id,
                branch_id=branch_id,
            )
        except CollaboratorError:
            raise
        except Exception as e:
            self._logger.exception("Coupon validation failed", extra={"code": normalized})
            raise CollaboratorError("Failed to validate coupon") from e

        if not result.success or result.discount is None or result.final_amount is None:
            reason = result.error or "Invalid coupon"
            self._logger.info("Coupon rejected", extra={"code": normalized, "reason": reason})
            raise CollaboratorError(reason)

        self._logger.info("Coupon applied", extra={"code": normalized, "discount": str(result.discount)})
        return AppliedCoupon(
            code=normalized,
            discount=result.discount,
            final_amount=result.final_amount,
            base_amount=sub_total,
            promotion=result.promotion,
        )
