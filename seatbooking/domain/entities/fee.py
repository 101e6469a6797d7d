from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from seatbooking.domain.entities.money import to_decimal


class FeeKind(str, Enum):
    seat = "seat"
    locker = "locker"
    other = "other"


SEAT_FEE_KEYWORDS = ("seat", "reservation")
LOCKER_FEE_KEYWORDS = ("locker",)


@dataclass(frozen=True)
class AdditionalFee:
    id: str
    name: str
    amount: Decimal
    type: str | None = None
    description: str | None = None
    kind: FeeKind | None = None  # explicit tag; name matching is only the fallback

    def __post_init__(self) -> None:
        object.__setattr__(self, "amount", to_decimal(self.amount))
        if self.kind is not None and not isinstance(self.kind, FeeKind):
            object.__setattr__(self, "kind", FeeKind(self.kind))

    @property
    def resolved_kind(self) -> FeeKind:
        return classify_fee(self)


def classify_fee(fee: AdditionalFee) -> FeeKind:
    """Bucket a fee as seat, locker or other.

    An explicit ``kind`` always wins. Untagged fees are classified by a
    case-insensitive substring match on the name: "seat" or "reservation"
    means a seat fee, "locker" means a locker fee.
    """
    if fee.kind is not None:
        return fee.kind
    name = (fee.name or "").lower()
    if any(keyword in name for keyword in SEAT_FEE_KEYWORDS):
        return FeeKind.seat
    if any(keyword in name for keyword in LOCKER_FEE_KEYWORDS):
        return FeeKind.locker
    return FeeKind.other
