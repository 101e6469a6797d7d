from __future__ import annotations

import logging
from datetime import date

from seatbooking.application.dto.flow_result import FlowResult
from seatbooking.application.exceptions import BookingValidationError, CollaboratorError
from seatbooking.application.ports.booking_gateway import BookingGatewayPort
from seatbooking.application.use_cases.coupon import ApplyCouponUseCase
from seatbooking.application.use_cases.eligibility import (
    Eligibility,
    PlanSelected,
    SeatSelected,
    SelectionEvent,
    apply_event,
    resolve_eligibility,
)
from seatbooking.application.use_cases.pricing import PriceQuote, calculate_quote, calculate_sub_total
from seatbooking.application.utils.plan_filters import filter_plans, upgrade_credit
from seatbooking.domain.entities.booking import (
    COMPLETED,
    PENDING_VERIFICATION,
    BookingRequest,
    BookingResponse,
    PaymentDetails,
)
from seatbooking.domain.entities.flow_state import PaymentStep, SelectionStep, StudentFlowState, SuccessStep
from seatbooking.domain.entities.inventory import InventorySnapshot
from seatbooking.domain.entities.plan import Plan
from seatbooking.domain.entities.selection_state import SelectionState

SOMETHING_WENT_WRONG = "Something went wrong"
ALREADY_SUBMITTING = "A booking is already being submitted"
PROOF_REQUIRED = "Payment proof is required"


def confirmation_message(status: str) -> str:
    if status == PENDING_VERIFICATION:
        return "Your transaction has been sent for verification"
    return "Booking successful!"


def validate_selection(snapshot: InventorySnapshot, selection: SelectionState) -> None:
    """Gate for leaving the plan/booking step."""
    if snapshot.plan(selection.plan_id) is None:
        raise BookingValidationError("Please select a plan")
    eligibility = resolve_eligibility(snapshot, selection)
    if eligibility.seat_mandatory and not selection.seat_id:
        raise BookingValidationError("Please select a seat")
    if eligibility.locker_selection_visible and not selection.locker_id:
        raise BookingValidationError("Please select a locker")


def build_booking_request(
    student_id: str,
    snapshot: InventorySnapshot,
    selection: SelectionState,
    today: date,
    payment_id: str | None = None,
    payment_details: PaymentDetails | None = None,
) -> BookingRequest:
    if not selection.plan_id:
        raise BookingValidationError("No plan selected")
    return BookingRequest(
        student_id=student_id,
        branch_id=snapshot.branch.id,
        plan_id=selection.plan_id,
        seat_id=selection.seat_id,
        locker_id=selection.locker_id,
        start_date=selection.start_date or today,
        quantity=selection.quantity,
        additional_fee_ids=tuple(sorted(selection.fee_ids)),
        payment_id=payment_id,
        payment_details=payment_details,
    )


class StudentBookingFlow:
    """
    Student self-service booking: selection -> payment -> success.

    One instance per booking session. Every method returns a FlowResult instead of
    raising; failures keep the current step and selections so the student can retry.
    """

    def __init__(
        self,
        snapshot: InventorySnapshot,
        student_id: str,
        booking_gateway: BookingGatewayPort,
        apply_coupon: ApplyCouponUseCase,
        action: str | None = None,  # "renew", "upgrade" or None
        current_plan: Plan | None = None,
        today: date | None = None,
    ) -> None:
        self._snapshot = snapshot
        self._student_id = student_id
        self._gateway = booking_gateway
        self._apply_coupon = apply_coupon
        self._action = action
        self._current_plan = current_plan
        self._today = today or date.today()
        self._state: StudentFlowState = SelectionStep(SelectionState(start_date=self._today))
        self._submitting = False
        self._logger = logging.getLogger(__name__)

    @property
    def state(self) -> StudentFlowState:
        return self._state

    @property
    def eligibility(self) -> Eligibility:
        return resolve_eligibility(self._snapshot, self._state.selection)

    def visible_plans(self, category: str = "all", duration_filter: str = "all") -> list[Plan]:
        return filter_plans(
            self._snapshot.plans,
            action=self._action,
            current_plan=self._current_plan,
            category=category,
            duration_filter=duration_filter,
        )

    def start_renewal(self, plan_id: str, previous_seat_id: str | None = None) -> FlowResult[StudentFlowState]:
        """Pre-select the renewed plan and, when still free, the seat held before."""
        result = self.dispatch(PlanSelected(plan_id))
        if not result.ok or not previous_seat_id:
            return result
        seat = self._snapshot.seat(previous_seat_id)
        if seat is None or seat.is_occupied or not self.eligibility.seat_selection_enabled:
            return result
        return self.dispatch(SeatSelected(previous_seat_id))

    def dispatch(self, event: SelectionEvent) -> FlowResult[StudentFlowState]:
        if not isinstance(self._state, SelectionStep):
            return FlowResult.error(self._state, "Selections can only be changed on the selection step")
        try:
            selection = apply_event(self._snapshot, self._state.selection, event)
        except BookingValidationError as e:
            return FlowResult.error(self._state, str(e))
        self._state = SelectionStep(selection)
        return FlowResult.success(self._state)

    def quote(self) -> PriceQuote:
        selection = self._state.selection
        coupon = self._state.coupon if isinstance(self._state, PaymentStep) else None
        return calculate_quote(
            plan=self._snapshot.plan(selection.plan_id),
            fees=self._snapshot.fees,
            selected_fee_ids=selection.fee_ids,
            quantity=selection.quantity,
            coupon=coupon,
            adjustment_credit=upgrade_credit(self._action, self._current_plan),
        )

    def next(self) -> FlowResult[StudentFlowState]:
        if not isinstance(self._state, SelectionStep):
            return FlowResult.error(self._state, "Nothing to advance to")
        try:
            validate_selection(self._snapshot, self._state.selection)
        except BookingValidationError as e:
            return FlowResult.error(self._state, str(e))
        self._state = PaymentStep(self._state.selection)
        self._logger.info("Proceeding to payment", extra={"step": self._state.step, "plan_id": self._state.selection.plan_id})
        return FlowResult.success(self._state)

    def back(self) -> FlowResult[StudentFlowState]:
        if isinstance(self._state, PaymentStep):
            self._state = SelectionStep(self._state.selection)
        return FlowResult.success(self._state)

    def apply_coupon(self, code: str) -> FlowResult[StudentFlowState]:
        if not isinstance(self._state, PaymentStep):
            return FlowResult.error(self._state, "Coupons can only be applied at payment")
        selection = self._state.selection
        sub_total = calculate_sub_total(
            self._snapshot.plan(selection.plan_id), self._snapshot.fees, selection.fee_ids, selection.quantity
        )
        try:
            coupon = self._apply_coupon.execute(
                code,
                sub_total,
                student_id=self._student_id,
                plan_id=selection.plan_id,
                branch_id=self._snapshot.branch.id,
            )
        except (BookingValidationError, CollaboratorError) as e:
            self._state = PaymentStep(selection, coupon=None)
            return FlowResult.error(self._state, str(e))
        self._state = PaymentStep(selection, coupon=coupon)
        return FlowResult.success(self._state, f"Coupon applied! Saved ₹{coupon.discount}")

    def remove_coupon(self) -> FlowResult[StudentFlowState]:
        if isinstance(self._state, PaymentStep):
            self._state = PaymentStep(self._state.selection, coupon=None)
        return FlowResult.success(self._state)

    def submit(
        self,
        payment_id: str | None = None,
        status: str = COMPLETED,
        proof_url: str | None = None,
    ) -> FlowResult[StudentFlowState]:
        """
        Hand the booking to the booking gateway once payment was made.

        ``status`` is "completed" when the subscription is active right away and
        "pending_verification" when a manual payment proof awaits staff confirmation.
        A ``proof_url`` is sent as a manual payment for the payable amount.
        """
        if not isinstance(self._state, PaymentStep):
            return FlowResult.error(self._state, "No plan selected")
        if self._submitting:
            return FlowResult.error(self._state, ALREADY_SUBMITTING)

        payment_state = self._state
        self._submitting = True
        try:
            request = build_booking_request(
                self._student_id,
                self._snapshot,
                payment_state.selection,
                self._today,
                payment_id=payment_id,
                payment_details=self._manual_payment(proof_url),
            )
            response = self._gateway.create_booking(request)
        except BookingValidationError as e:
            return FlowResult.error(payment_state, str(e))
        except CollaboratorError as e:
            self._logger.warning("Booking rejected", extra={"branch_id": self._snapshot.branch.id, "reason": str(e)})
            return FlowResult.error(payment_state, str(e) or "Booking failed")
        except Exception as e:
            self._logger.exception("Booking error", extra={"branch_id": self._snapshot.branch.id, "error": str(e)})
            return FlowResult.error(payment_state, SOMETHING_WENT_WRONG)
        finally:
            self._submitting = False

        return self._on_response(payment_state, response, payment_id, status)

    def _manual_payment(self, proof_url: str | None) -> PaymentDetails | None:
        if not proof_url:
            return None
        quote = self.quote()
        coupon = self._state.coupon if isinstance(self._state, PaymentStep) else None
        return PaymentDetails(
            amount=quote.payable,
            method="manual",
            discount=quote.total_discount,
            proof_url=proof_url,
            promo_code=coupon.code if coupon else None,
        )

    def _on_response(
        self,
        payment_state: PaymentStep,
        response: BookingResponse,
        payment_id: str | None,
        status: str,
    ) -> FlowResult[StudentFlowState]:
        if not response.success:
            reason = response.error or "Booking failed"
            self._logger.info("Booking failed", extra={"branch_id": self._snapshot.branch.id, "reason": reason})
            return FlowResult.error(payment_state, reason)

        self._state = SuccessStep(
            selection=payment_state.selection,
            status=status,
            payment_id=response.payment_id or payment_id,
            invoice_no=response.invoice_no,
        )
        self._logger.info(
            "Booking created",
            extra={"branch_id": self._snapshot.branch.id, "plan_id": payment_state.selection.plan_id, "invoice_no": response.invoice_no},
        )
        return FlowResult.success(self._state, confirmation_message(status))
