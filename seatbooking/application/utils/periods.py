from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, timedelta

from seatbooking.domain.entities.plan import Plan


@dataclass(frozen=True)
class SubscriptionPeriod:
    start: date
    end: date


def add_months(value: date, months: int) -> date:
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(value.day, last_day))


def plan_cycle_end(plan: Plan, start: date) -> date:
    unit = (plan.duration_unit or "").lower()
    if unit.startswith("day"):
        return start + timedelta(days=plan.duration)
    if unit.startswith("week"):
        return start + timedelta(weeks=plan.duration)
    if unit.startswith("month"):
        return add_months(start, plan.duration)
    raise ValueError(f"Unsupported duration unit: {plan.duration_unit}")


def subscription_periods(plan: Plan, start: date, quantity: int = 1) -> list[SubscriptionPeriod]:
    """Back-to-back cycles: each one starts the day the previous one ends."""
    if quantity < 1:
        raise ValueError("quantity must be at least 1")
    periods: list[SubscriptionPeriod] = []
    current = start
    for _ in range(quantity):
        end = plan_cycle_end(plan, current)
        periods.append(SubscriptionPeriod(start=current, end=end))
        current = end
    return periods
