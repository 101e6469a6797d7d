from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal

from seatbooking.domain.entities.coupon import CouponValidation


class CouponValidatorPort(ABC):
    @abstractmethod
    def validate(
        self,
        code: str,
        amount: Decimal,
        student_id: str | None = None,
        plan_id: str | None = None,
        branch_id: str | None = None,
    ) -> CouponValidation:
        """
        Validate a coupon code against an order amount.

        Returns CouponValidation(success=True, discount, final_amount, promotion) when the
        code applies, or CouponValidation(success=False, error=<reason>) when it does not.
        """
        raise NotImplementedError
