from __future__ import annotations

from decimal import Decimal

from seatbooking.domain.entities.money import ZERO
from seatbooking.domain.entities.plan import Plan

DURATION_FILTERS = ("all", "1mo", "3mo", "6mo", "other")
_STANDARD_MONTHS = {"1mo": 1, "3mo": 3, "6mo": 6}


def _is_months(plan: Plan) -> bool:
    return (plan.duration_unit or "").lower().startswith("month")


def matches_duration(plan: Plan, duration_filter: str) -> bool:
    if duration_filter == "all":
        return True
    if duration_filter in _STANDARD_MONTHS:
        return _is_months(plan) and plan.duration == _STANDARD_MONTHS[duration_filter]
    if duration_filter == "other":
        return not (_is_months(plan) and plan.duration in _STANDARD_MONTHS.values())
    raise ValueError(f"Unknown duration filter: {duration_filter}")


def filter_plans(
    plans: list[Plan] | tuple[Plan, ...],
    action: str | None = None,
    current_plan: Plan | None = None,
    category: str = "all",
    duration_filter: str = "all",
) -> list[Plan]:
    """Plans offered to the student. Upgrades only list plans priced above the current one."""
    result = list(plans)
    if action == "upgrade" and current_plan is not None:
        result = [p for p in result if p.price > current_plan.price]
    return [
        p
        for p in result
        if (category == "all" or p.category == category) and matches_duration(p, duration_filter)
    ]


def upgrade_credit(action: str | None, current_plan: Plan | None) -> Decimal:
    if action == "upgrade" and current_plan is not None:
        return current_plan.price
    return ZERO
