from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from seatbooking.domain.entities.money import to_decimal


@dataclass(frozen=True)
class Plan:
    id: str
    name: str
    price: Decimal
    duration: int = 1
    duration_unit: str = "months"  # "days", "weeks", "months"
    category: str = "fixed"  # "fixed", "flexible"
    billing_cycle: str = "one_time"
    shift_start: str | None = None  # HH:MM
    shift_end: str | None = None  # HH:MM
    hours_per_day: int | None = None
    includes_seat: bool = False
    includes_locker: bool = False
    description: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "price", to_decimal(self.price))
