from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class SelectionState:
    plan_id: str | None = None
    fee_ids: frozenset[str] = frozenset()
    seat_id: str | None = None
    locker_id: str | None = None
    quantity: int = 1  # number of back-to-back plan cycles
    start_date: date | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "fee_ids", frozenset(str(f) for f in self.fee_ids))
