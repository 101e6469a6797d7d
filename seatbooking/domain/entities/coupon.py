from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from seatbooking.domain.entities.money import to_decimal


@dataclass(frozen=True)
class Promotion:
    code: str
    discount_type: str  # "percentage", "fixed"
    value: Decimal
    start_date: datetime | None = None
    end_date: datetime | None = None
    is_active: bool = True
    min_order_value: Decimal | None = None
    max_discount: Decimal | None = None
    usage_limit: int | None = None
    used_count: int = 0
    branch_id: str | None = None  # None applies to every branch
    plan_id: str | None = None  # None applies to every plan
    description: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "code", self.code.upper())
        object.__setattr__(self, "value", to_decimal(self.value))
        if self.min_order_value is not None:
            object.__setattr__(self, "min_order_value", to_decimal(self.min_order_value))
        if self.max_discount is not None:
            object.__setattr__(self, "max_discount", to_decimal(self.max_discount))


@dataclass(frozen=True)
class CouponValidation:
    success: bool
    discount: Decimal | None = None
    final_amount: Decimal | None = None
    promotion: Promotion | None = None
    error: str | None = None


@dataclass(frozen=True)
class AppliedCoupon:
    code: str
    discount: Decimal
    final_amount: Decimal
    base_amount: Decimal  # sub total the coupon was validated against
    promotion: Promotion | None = None
