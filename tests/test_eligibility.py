"""
Tests for seat/locker eligibility and the selection reducer.
"""

from __future__ import annotations

import pytest

from seatbooking.application.exceptions import BookingValidationError
from seatbooking.application.use_cases.eligibility import (
    FeeToggled,
    LockerSelected,
    PlanCleared,
    PlanSelected,
    QuantityChanged,
    SeatCleared,
    SeatSelected,
    apply_event,
    reconcile,
    resolve_eligibility,
)
from seatbooking.domain.entities.fee import AdditionalFee, FeeKind, classify_fee
from seatbooking.domain.entities.plan import Plan
from seatbooking.domain.entities.selection_state import SelectionState

from conftest import make_snapshot


def _run(snapshot, *events, selection=None):
    selection = selection or SelectionState()
    for event in events:
        selection = apply_event(snapshot, selection, event)
    return selection


def test_no_plan_disables_seat_selection(snapshot):
    """Without a plan the seat picker is disabled and not mandatory."""
    eligibility = resolve_eligibility(snapshot, SelectionState())
    assert eligibility.seat_selection_enabled is False
    assert eligibility.seat_mandatory is False


def test_plan_including_seat_makes_seat_mandatory():
    """Plan {price:500, includesSeat:true} with no fees: seat enabled and mandatory."""
    snapshot = make_snapshot(plans=[Plan(id="p", name="Full", price=500, includes_seat=True)], fees=[])
    selection = _run(snapshot, PlanSelected("p"))

    eligibility = resolve_eligibility(snapshot, selection)
    assert eligibility.seat_selection_enabled is True
    assert eligibility.seat_mandatory is True


def test_seat_fee_required_before_seat_selection():
    """Plan {price:300} with a seat fee: disabled until the fee is selected, then mandatory."""
    snapshot = make_snapshot(
        plans=[Plan(id="p", name="Basic", price=300)],
        fees=[AdditionalFee(id="f1", name="Seat Reservation", amount=50)],
    )
    selection = _run(snapshot, PlanSelected("p"))
    assert resolve_eligibility(snapshot, selection).seat_selection_enabled is False

    selection = apply_event(snapshot, selection, FeeToggled("f1"))
    eligibility = resolve_eligibility(snapshot, selection)
    assert eligibility.seat_selection_enabled is True
    assert eligibility.seat_mandatory is True


def test_catalogue_without_seat_fee_makes_seat_optional():
    """No seat fee exists at all: the seat is enabled but optional."""
    snapshot = make_snapshot(fees=[AdditionalFee(id="f_reg", name="Registration", amount=100)])
    selection = _run(snapshot, PlanSelected("p_basic"))

    eligibility = resolve_eligibility(snapshot, selection)
    assert eligibility.seat_selection_enabled is True
    assert eligibility.seat_mandatory is False


def test_deselecting_seat_fee_clears_seat(snapshot):
    """Removing the seat fee disables the picker and drops the chosen seat."""
    selection = _run(snapshot, PlanSelected("p_basic"), FeeToggled("f1"), SeatSelected("s1"))
    assert selection.seat_id == "s1"

    selection = apply_event(snapshot, selection, FeeToggled("f1"))
    assert "f1" not in selection.fee_ids
    assert selection.seat_id is None


def test_switching_to_plan_with_included_seat_drops_seat_fee(snapshot):
    """A plan that includes a seat deselects seat fees but keeps the seat."""
    selection = _run(snapshot, PlanSelected("p_basic"), FeeToggled("f1"), FeeToggled("f_reg"), SeatSelected("s1"))

    selection = apply_event(snapshot, selection, PlanSelected("p_full"))
    assert selection.plan_id == "p_full"
    assert selection.fee_ids == frozenset({"f_reg"})
    assert selection.seat_id == "s1"


def test_clearing_plan_clears_seat(snapshot):
    selection = _run(snapshot, PlanSelected("p_full"), SeatSelected("s1"))
    selection = apply_event(snapshot, selection, PlanCleared())
    assert selection.plan_id is None
    assert selection.seat_id is None


def test_toggling_included_fee_is_ignored(snapshot):
    """A seat fee cannot be added on top of a plan that already includes the seat."""
    selection = _run(snapshot, PlanSelected("p_full"), FeeToggled("f1"))
    assert selection.fee_ids == frozenset()


def test_seat_fee_without_plan_is_rejected(snapshot):
    with pytest.raises(BookingValidationError, match="Please select a plan first"):
        _run(snapshot, FeeToggled("f1"))


def test_occupied_seat_is_rejected(snapshot):
    with pytest.raises(BookingValidationError, match="Seat S-02 is already occupied"):
        _run(snapshot, PlanSelected("p_full"), SeatSelected("s2"))


def test_seat_rejected_while_selection_disabled(snapshot):
    with pytest.raises(BookingValidationError, match="not available"):
        _run(snapshot, PlanSelected("p_basic"), SeatSelected("s1"))


def test_unknown_ids_are_rejected(snapshot):
    with pytest.raises(BookingValidationError, match="Plan not found"):
        _run(snapshot, PlanSelected("nope"))
    with pytest.raises(BookingValidationError, match="Fee not found"):
        _run(snapshot, PlanSelected("p_basic"), FeeToggled("nope"))
    with pytest.raises(BookingValidationError, match="Seat not found"):
        _run(snapshot, PlanSelected("p_full"), SeatSelected("nope"))


def test_locker_visible_with_locker_fee(snapshot):
    """A selected locker fee shows the locker picker, and a visible picker is mandatory."""
    selection = _run(snapshot, PlanSelected("p_basic"), FeeToggled("f_locker"))
    eligibility = resolve_eligibility(snapshot, selection)
    assert eligibility.locker_selection_visible is True
    assert eligibility.locker_mandatory is True


def test_locker_hidden_when_branch_has_no_lockers():
    snapshot = make_snapshot(has_lockers=False)
    selection = _run(snapshot, PlanSelected("p_basic"), FeeToggled("f_locker"))
    assert resolve_eligibility(snapshot, selection).locker_selection_visible is False


def test_plan_included_locker_depends_on_separate_lockers():
    """A plan-included locker is only picked separately when the branch keeps lockers apart."""
    separate = make_snapshot(is_locker_separate=True)
    bundled = make_snapshot(is_locker_separate=False)

    assert resolve_eligibility(separate, _run(separate, PlanSelected("p_premium"))).locker_selection_visible is True
    assert resolve_eligibility(bundled, _run(bundled, PlanSelected("p_premium"))).locker_selection_visible is False


def test_deselecting_locker_fee_clears_locker(snapshot):
    selection = _run(snapshot, PlanSelected("p_basic"), FeeToggled("f_locker"), LockerSelected("l1"))
    assert selection.locker_id == "l1"

    selection = apply_event(snapshot, selection, FeeToggled("f_locker"))
    assert selection.locker_id is None


def test_occupied_locker_is_rejected(snapshot):
    with pytest.raises(BookingValidationError, match="Locker 2 is already occupied"):
        _run(snapshot, PlanSelected("p_basic"), FeeToggled("f_locker"), LockerSelected("l2"))


def test_reconcile_is_idempotent(snapshot):
    """Running reconciliation twice yields the same selection and flags."""
    raw = SelectionState(plan_id="p_premium", fee_ids=frozenset({"f1", "f_locker", "f_reg"}), seat_id="s1", locker_id="l1")
    once = reconcile(snapshot, raw)
    twice = reconcile(snapshot, once)

    assert once == twice
    assert once.fee_ids == frozenset({"f_reg"})
    assert resolve_eligibility(snapshot, once) == resolve_eligibility(snapshot, twice)


def test_quantity_below_one_is_rejected(snapshot):
    with pytest.raises(BookingValidationError, match="Quantity must be at least 1"):
        _run(snapshot, PlanSelected("p_basic"), QuantityChanged(0))


def test_seat_cleared_event(snapshot):
    selection = _run(snapshot, PlanSelected("p_full"), SeatSelected("s1"), SeatCleared())
    assert selection.seat_id is None


def test_unknown_event_type_raises(snapshot):
    with pytest.raises(TypeError):
        apply_event(snapshot, SelectionState(), object())


def test_fee_classification_prefers_explicit_kind():
    """Explicit kind wins; otherwise the name decides."""
    assert classify_fee(AdditionalFee(id="a", name="Seat Reservation", amount=1)) == FeeKind.seat
    assert classify_fee(AdditionalFee(id="b", name="Cabin reservation", amount=1)) == FeeKind.seat
    assert classify_fee(AdditionalFee(id="c", name="Locker rent", amount=1)) == FeeKind.locker
    assert classify_fee(AdditionalFee(id="d", name="Wifi", amount=1)) == FeeKind.other
    assert classify_fee(AdditionalFee(id="e", name="Seat Reservation", amount=1, kind="other")) == FeeKind.other
