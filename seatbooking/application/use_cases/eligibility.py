from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date
from typing import Union

from seatbooking.application.exceptions import BookingValidationError
from seatbooking.application.utils.labels import format_seat_number
from seatbooking.domain.entities.fee import FeeKind, classify_fee
from seatbooking.domain.entities.inventory import InventorySnapshot
from seatbooking.domain.entities.selection_state import SelectionState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Eligibility:
    seat_selection_enabled: bool
    seat_mandatory: bool
    locker_selection_visible: bool
    locker_mandatory: bool


@dataclass(frozen=True)
class PlanSelected:
    plan_id: str


@dataclass(frozen=True)
class PlanCleared:
    pass


@dataclass(frozen=True)
class FeeToggled:
    fee_id: str


@dataclass(frozen=True)
class SeatSelected:
    seat_id: str


@dataclass(frozen=True)
class SeatCleared:
    pass


@dataclass(frozen=True)
class LockerSelected:
    locker_id: str


@dataclass(frozen=True)
class LockerCleared:
    pass


@dataclass(frozen=True)
class QuantityChanged:
    quantity: int


@dataclass(frozen=True)
class StartDateChanged:
    start_date: date


SelectionEvent = Union[
    PlanSelected,
    PlanCleared,
    FeeToggled,
    SeatSelected,
    SeatCleared,
    LockerSelected,
    LockerCleared,
    QuantityChanged,
    StartDateChanged,
]


def resolve_eligibility(snapshot: InventorySnapshot, selection: SelectionState) -> Eligibility:
    """
    Decide whether seat and locker pickers are enabled and required.

    Seat rules, first match wins:
      1. no plan selected -> disabled
      2. plan includes a seat -> enabled and mandatory
      3. catalogue has no seat fee -> enabled, optional
      4. otherwise enabled (and mandatory) only while a seat fee is selected

    The locker picker is shown when the branch has lockers and either a locker fee is
    selected or the plan includes a locker that lives apart from the seat. A visible
    locker picker is always mandatory.
    """
    plan = snapshot.plan(selection.plan_id)
    selected_kinds = _selected_fee_kinds(snapshot, selection)

    if plan is None:
        seat_enabled = False
        seat_mandatory = False
    elif plan.includes_seat:
        seat_enabled = True
        seat_mandatory = True
    elif not snapshot.fees_of_kind(FeeKind.seat):
        seat_enabled = True
        seat_mandatory = False
    else:
        seat_enabled = FeeKind.seat in selected_kinds
        seat_mandatory = seat_enabled

    branch = snapshot.branch
    locker_via_plan = bool(plan and plan.includes_locker and branch.is_locker_separate)
    locker_visible = branch.has_lockers and (FeeKind.locker in selected_kinds or locker_via_plan)

    return Eligibility(
        seat_selection_enabled=seat_enabled,
        seat_mandatory=seat_mandatory,
        locker_selection_visible=locker_visible,
        locker_mandatory=locker_visible,
    )


def reconcile(snapshot: InventorySnapshot, selection: SelectionState) -> SelectionState:
    """Drop selections the current plan and fees no longer allow."""
    plan = snapshot.plan(selection.plan_id)
    fee_ids = selection.fee_ids

    if plan is not None and (plan.includes_seat or plan.includes_locker):
        included = set()
        if plan.includes_seat:
            included.add(FeeKind.seat)
        if plan.includes_locker:
            included.add(FeeKind.locker)
        fee_ids = frozenset(
            fee_id for fee_id in fee_ids if _fee_kind(snapshot, fee_id) not in included
        )

    updated = replace(selection, fee_ids=fee_ids) if fee_ids != selection.fee_ids else selection
    eligibility = resolve_eligibility(snapshot, updated)

    if updated.seat_id and not eligibility.seat_selection_enabled:
        logger.info("Seat cleared, selection disabled", extra={"seat_id": updated.seat_id})
        updated = replace(updated, seat_id=None)
    if updated.locker_id and not eligibility.locker_selection_visible:
        logger.info("Locker cleared, selection hidden", extra={"locker_id": updated.locker_id})
        updated = replace(updated, locker_id=None)
    return updated


def apply_event(
    snapshot: InventorySnapshot,
    selection: SelectionState,
    event: SelectionEvent,
) -> SelectionState:
    """Apply one selection change and reconcile the result."""
    return reconcile(snapshot, _apply(snapshot, selection, event))


def _apply(snapshot: InventorySnapshot, selection: SelectionState, event: SelectionEvent) -> SelectionState:
    if isinstance(event, PlanSelected):
        if event.plan_id == selection.plan_id:
            return selection
        if snapshot.plan(event.plan_id) is None:
            raise BookingValidationError("Plan not found")
        return replace(selection, plan_id=event.plan_id)

    if isinstance(event, PlanCleared):
        return replace(selection, plan_id=None)

    if isinstance(event, FeeToggled):
        fee_id = str(event.fee_id)
        fee = snapshot.fee(fee_id)
        if fee is None:
            raise BookingValidationError("Fee not found")
        if fee_id in selection.fee_ids:
            return replace(selection, fee_ids=selection.fee_ids - {fee_id})

        kind = classify_fee(fee)
        plan = snapshot.plan(selection.plan_id)
        if kind == FeeKind.seat and plan is None:
            raise BookingValidationError("Please select a plan first")
        if plan is not None and (
            (kind == FeeKind.seat and plan.includes_seat) or (kind == FeeKind.locker and plan.includes_locker)
        ):
            # already part of the plan
            return selection
        return replace(selection, fee_ids=selection.fee_ids | {fee_id})

    if isinstance(event, SeatSelected):
        seat = snapshot.seat(event.seat_id)
        if seat is None:
            raise BookingValidationError("Seat not found")
        if seat.is_occupied:
            raise BookingValidationError(f"Seat {format_seat_number(seat.number)} is already occupied")
        if not resolve_eligibility(snapshot, selection).seat_selection_enabled:
            raise BookingValidationError("Seat selection is not available for the selected plan")
        return replace(selection, seat_id=seat.id)

    if isinstance(event, SeatCleared):
        return replace(selection, seat_id=None)

    if isinstance(event, LockerSelected):
        locker = snapshot.locker(event.locker_id)
        if locker is None:
            raise BookingValidationError("Locker not found")
        if locker.is_occupied:
            raise BookingValidationError(f"Locker {locker.number} is already occupied")
        if not resolve_eligibility(snapshot, selection).locker_selection_visible:
            raise BookingValidationError("Locker selection is not available for the selected plan")
        return replace(selection, locker_id=locker.id)

    if isinstance(event, LockerCleared):
        return replace(selection, locker_id=None)

    if isinstance(event, QuantityChanged):
        if event.quantity < 1:
            raise BookingValidationError("Quantity must be at least 1")
        return replace(selection, quantity=event.quantity)

    if isinstance(event, StartDateChanged):
        return replace(selection, start_date=event.start_date)

    raise TypeError(f"Unsupported selection event: {type(event).__name__}")


def _fee_kind(snapshot: InventorySnapshot, fee_id: str) -> FeeKind | None:
    fee = snapshot.fee(fee_id)
    return classify_fee(fee) if fee else None


def _selected_fee_kinds(snapshot: InventorySnapshot, selection: SelectionState) -> set[FeeKind]:
    kinds = set()
    for fee_id in selection.fee_ids:
        kind = _fee_kind(snapshot, fee_id)
        if kind is not None:
            kinds.add(kind)
    return kinds
