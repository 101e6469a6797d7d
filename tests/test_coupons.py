"""
Tests for coupon application and the promotion rule set.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

import pytest

from seatbooking.application.exceptions import BookingValidationError, CollaboratorError
from seatbooking.application.ports.coupon_validator import CouponValidatorPort
from seatbooking.application.use_cases.coupon import ApplyCouponUseCase
from seatbooking.domain.entities.coupon import CouponValidation, Promotion
from seatbooking.infrastructure.promotions.promotion_validator import PromotionCouponValidator

NOW = datetime(2025, 1, 15, 12, 0)


def _validator(*promotions: Promotion) -> PromotionCouponValidator:
    return PromotionCouponValidator(list(promotions), clock=lambda: NOW)


def _promo(**overrides) -> Promotion:
    data = dict(
        code="SAVE10",
        discount_type="percentage",
        value=10,
        start_date=datetime(2025, 1, 1),
        end_date=datetime(2025, 12, 31),
    )
    data.update(overrides)
    return Promotion(**data)


class ExplodingValidator(CouponValidatorPort):
    def validate(self, code, amount, student_id=None, plan_id=None, branch_id=None):
        raise ConnectionError("validator down")


class FixedDiscountValidator(CouponValidatorPort):
    def __init__(self, discounts: dict[str, Decimal]) -> None:
        self.discounts = discounts

    def validate(self, code, amount, student_id=None, plan_id=None, branch_id=None):
        discount = self.discounts.get(code)
        if discount is None:
            return CouponValidation(success=False)
        return CouponValidation(success=True, discount=discount, final_amount=amount - discount)


def test_percentage_discount():
    result = _validator(_promo()).validate("save10", Decimal("350"))
    assert result.success is True
    assert result.discount == Decimal("35")
    assert result.final_amount == Decimal("315")


def test_percentage_discount_capped():
    result = _validator(_promo(max_discount=20)).validate("SAVE10", Decimal("1000"))
    assert result.discount == Decimal("20")
    assert result.final_amount == Decimal("980")


def test_fixed_discount_never_below_zero():
    result = _validator(_promo(discount_type="fixed", value=500)).validate("SAVE10", Decimal("300"))
    assert result.discount == Decimal("500")
    assert result.final_amount == Decimal("0")


@pytest.mark.parametrize(
    "overrides, amount, error",
    [
        ({"code": "OTHER"}, "350", "Invalid coupon code"),
        ({"is_active": False}, "350", "This coupon is no longer active"),
        ({"start_date": datetime(2025, 2, 1)}, "350", "This coupon is not valid yet"),
        ({"end_date": datetime(2025, 1, 10)}, "350", "This coupon has expired"),
        ({"usage_limit": 5, "used_count": 5}, "350", "Coupon usage limit reached"),
        ({"min_order_value": 500}, "350", "Minimum order of ₹500 required to use this coupon"),
    ],
)
def test_promotion_rejections(overrides, amount, error):
    result = _validator(_promo(**overrides)).validate("SAVE10", Decimal(amount))
    assert result.success is False
    assert result.error == error


def test_scoped_promotions():
    validator = _validator(_promo(branch_id="br_1", plan_id="p_basic"))
    assert validator.validate("SAVE10", Decimal("100"), plan_id="p_basic", branch_id="br_1").success is True
    assert validator.validate("SAVE10", Decimal("100"), plan_id="p_basic", branch_id="br_2").success is False
    assert validator.validate("SAVE10", Decimal("100"), plan_id="p_full", branch_id="br_1").success is False


def test_apply_coupon_normalizes_code():
    use_case = ApplyCouponUseCase(_validator(_promo()))
    coupon = use_case.execute("  save10 ", Decimal("350"), branch_id="br_1")

    assert coupon.code == "SAVE10"
    assert coupon.discount == Decimal("35")
    assert coupon.base_amount == Decimal("350")


def test_apply_coupon_rejects_blank_code():
    use_case = ApplyCouponUseCase(_validator(_promo()))
    with pytest.raises(BookingValidationError, match="Please enter a coupon code"):
        use_case.execute("   ", Decimal("350"))


def test_apply_coupon_surfaces_rejection_reason():
    use_case = ApplyCouponUseCase(_validator(_promo(is_active=False)))
    with pytest.raises(CollaboratorError, match="This coupon is no longer active"):
        use_case.execute("SAVE10", Decimal("350"))


def test_apply_coupon_falls_back_to_generic_reason():
    use_case = ApplyCouponUseCase(FixedDiscountValidator({}))
    with pytest.raises(CollaboratorError, match="Invalid coupon"):
        use_case.execute("NOPE", Decimal("350"))


def test_apply_coupon_wraps_validator_failures():
    use_case = ApplyCouponUseCase(ExplodingValidator())
    with pytest.raises(CollaboratorError, match="Failed to validate coupon"):
        use_case.execute("SAVE10", Decimal("350"))


def test_second_coupon_replaces_first():
    """Coupon A (50) then coupon B (80): only B's discount applies."""
    use_case = ApplyCouponUseCase(FixedDiscountValidator({"A": Decimal("50"), "B": Decimal("80")}))
    first = use_case.execute("A", Decimal("500"))
    second = use_case.execute("B", Decimal("500"))

    assert first.discount == Decimal("50")
    assert second.discount == Decimal("80")
    assert second.final_amount == Decimal("420")
