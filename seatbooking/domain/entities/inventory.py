from __future__ import annotations

from dataclasses import dataclass, field

from seatbooking.domain.entities.fee import AdditionalFee, FeeKind, classify_fee
from seatbooking.domain.entities.plan import Plan

DEFAULT_SECTION = "General"


@dataclass(frozen=True)
class Seat:
    id: str
    number: str
    section: str | None = None
    is_occupied: bool = False  # advisory only, the booking gateway decides

    @property
    def section_name(self) -> str:
        return self.section or DEFAULT_SECTION


@dataclass(frozen=True)
class Locker:
    id: str
    number: str
    is_occupied: bool = False

    @property
    def section_name(self) -> str:
        return DEFAULT_SECTION


@dataclass(frozen=True)
class Branch:
    id: str
    name: str
    address: str | None = None
    city: str = ""
    phone: str | None = None
    has_lockers: bool = False
    is_locker_separate: bool = False


@dataclass(frozen=True)
class InventorySnapshot:
    branch: Branch
    plans: tuple[Plan, ...] = ()
    fees: tuple[AdditionalFee, ...] = ()
    seats: tuple[Seat, ...] = ()
    lockers: tuple[Locker, ...] = ()
    _plans_by_id: dict[str, Plan] = field(init=False, repr=False, compare=False)
    _fees_by_id: dict[str, AdditionalFee] = field(init=False, repr=False, compare=False)
    _seats_by_id: dict[str, Seat] = field(init=False, repr=False, compare=False)
    _lockers_by_id: dict[str, Locker] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "plans", tuple(self.plans))
        object.__setattr__(self, "fees", tuple(self.fees))
        object.__setattr__(self, "seats", tuple(self.seats))
        object.__setattr__(self, "lockers", tuple(self.lockers))
        object.__setattr__(self, "_plans_by_id", {p.id: p for p in self.plans})
        object.__setattr__(self, "_fees_by_id", {f.id: f for f in self.fees})
        object.__setattr__(self, "_seats_by_id", {s.id: s for s in self.seats})
        object.__setattr__(self, "_lockers_by_id", {lk.id: lk for lk in self.lockers})

    def plan(self, plan_id: str | None) -> Plan | None:
        return self._plans_by_id.get(plan_id) if plan_id else None

    def fee(self, fee_id: str) -> AdditionalFee | None:
        return self._fees_by_id.get(fee_id)

    def seat(self, seat_id: str | None) -> Seat | None:
        return self._seats_by_id.get(seat_id) if seat_id else None

    def locker(self, locker_id: str | None) -> Locker | None:
        return self._lockers_by_id.get(locker_id) if locker_id else None

    def fees_of_kind(self, kind: FeeKind) -> list[AdditionalFee]:
        return [f for f in self.fees if classify_fee(f) == kind]
