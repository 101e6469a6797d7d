from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Callable

from seatbooking.application.dto.flow_result import FlowResult
from seatbooking.application.exceptions import BookingValidationError, CollaboratorError
from seatbooking.application.ports.booking_gateway import BookingGatewayPort
from seatbooking.application.ports.student_directory import StudentDirectoryPort
from seatbooking.application.use_cases.booking_flow import (
    ALREADY_SUBMITTING,
    SOMETHING_WENT_WRONG,
    build_booking_request,
    validate_selection,
)
from seatbooking.application.use_cases.coupon import ApplyCouponUseCase
from seatbooking.application.use_cases.eligibility import (
    Eligibility,
    SelectionEvent,
    apply_event,
    resolve_eligibility,
)
from seatbooking.application.use_cases.pricing import PriceQuote, calculate_quote, calculate_sub_total
from seatbooking.application.utils.receipt import build_receipt
from seatbooking.domain.entities.booking import PaymentDetails
from seatbooking.domain.entities.flow_state import (
    BookingStep,
    PaymentEntry,
    PreviewStep,
    ReceiptStep,
    StaffFlowState,
    StaffPaymentStep,
    StudentStep,
)
from seatbooking.domain.entities.inventory import InventorySnapshot
from seatbooking.domain.entities.money import ZERO, to_decimal
from seatbooking.domain.entities.selection_state import SelectionState
from seatbooking.domain.entities.student import Student


def parse_amount(raw: str) -> Decimal:
    """Operator-entered amount: must be a non-negative number."""
    try:
        value = Decimal((raw or "").strip())
    except InvalidOperation:
        raise BookingValidationError("Please enter a valid amount")
    if not value.is_finite() or value < 0:
        raise BookingValidationError("Please enter a valid amount")
    return value


class StaffPaymentFlow:
    """
    Front-desk payment collection: student -> booking -> payment -> preview -> success.

    Staff pick the student, configure the booking with the same eligibility rules the
    student flow uses, record what was collected and confirm a preview before the
    booking is submitted. The amount field is pre-filled with the payable total and
    refreshed whenever the total changes.
    """

    def __init__(
        self,
        snapshot: InventorySnapshot,
        booking_gateway: BookingGatewayPort,
        apply_coupon: ApplyCouponUseCase,
        students: StudentDirectoryPort,
        today: date | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._snapshot = snapshot
        self._gateway = booking_gateway
        self._apply_coupon = apply_coupon
        self._students = students
        self._today = today or date.today()
        self._clock = clock
        self._state: StaffFlowState = StudentStep()
        # payment inputs survive a trip back to the booking step
        self._saved_entry: PaymentEntry | None = None
        self._submitting = False
        self._logger = logging.getLogger(__name__)

    @property
    def state(self) -> StaffFlowState:
        return self._state

    @property
    def eligibility(self) -> Eligibility:
        return resolve_eligibility(self._snapshot, self._selection())

    def prefill_student(self, student_id: str) -> FlowResult[StaffFlowState]:
        """Load a student by id and jump straight to the booking step."""
        try:
            student = self._students.get(student_id)
        except Exception as e:
            self._logger.exception("Error fetching student", extra={"error": str(e)})
            return FlowResult.error(self._state, "Failed to load student")
        if student is None:
            return FlowResult.error(self._state, "Student not found")
        self._state = BookingStep(student=student, selection=self._fresh_selection())
        return FlowResult.success(self._state)

    def select_student(self, student: Student) -> FlowResult[StaffFlowState]:
        if not isinstance(self._state, StudentStep):
            return FlowResult.error(self._state, "Student can only be changed on the student step")
        self._state = StudentStep(student=student)
        return FlowResult.success(self._state)

    def dispatch(self, event: SelectionEvent) -> FlowResult[StaffFlowState]:
        if not isinstance(self._state, BookingStep):
            return FlowResult.error(self._state, "Selections can only be changed on the booking step")
        try:
            selection = apply_event(self._snapshot, self._state.selection, event)
        except BookingValidationError as e:
            return FlowResult.error(self._state, str(e))
        self._state = BookingStep(student=self._state.student, selection=selection)
        return FlowResult.success(self._state)

    def quote(self) -> PriceQuote:
        selection = self._selection()
        entry = getattr(self._state, "entry", None)
        received = ZERO
        if entry is not None:
            try:
                received = parse_amount(entry.amount)
            except BookingValidationError:
                received = ZERO
        return calculate_quote(
            plan=self._snapshot.plan(selection.plan_id),
            fees=self._snapshot.fees,
            selected_fee_ids=selection.fee_ids,
            quantity=selection.quantity,
            coupon=entry.coupon if entry else None,
            manual_discount=entry.additional_discount if entry else ZERO,
            amount_received=received,
        )

    def next(self) -> FlowResult[StaffFlowState]:
        state = self._state
        if isinstance(state, StudentStep):
            if state.student is None:
                return FlowResult.error(state, "Please select a student")
            self._state = BookingStep(student=state.student, selection=self._fresh_selection())
            return FlowResult.success(self._state)

        if isinstance(state, BookingStep):
            try:
                validate_selection(self._snapshot, state.selection)
            except BookingValidationError as e:
                return FlowResult.error(state, str(e))
            entry = self._restore_entry(state.selection)
            self._state = self._with_autofilled_amount(
                StaffPaymentStep(student=state.student, selection=state.selection, entry=entry)
            )
            return FlowResult.success(self._state)

        if isinstance(state, StaffPaymentStep):
            try:
                parse_amount(state.entry.amount)
            except BookingValidationError as e:
                return FlowResult.error(state, str(e))
            self._state = PreviewStep(student=state.student, selection=state.selection, entry=state.entry)
            return FlowResult.success(self._state)

        return FlowResult.error(state, "Nothing to advance to")

    def back(self) -> FlowResult[StaffFlowState]:
        state = self._state
        if isinstance(state, BookingStep):
            self._state = StudentStep(student=state.student)
        elif isinstance(state, StaffPaymentStep):
            self._saved_entry = state.entry
            self._state = BookingStep(student=state.student, selection=state.selection)
        elif isinstance(state, PreviewStep):
            self._state = StaffPaymentStep(student=state.student, selection=state.selection, entry=state.entry)
        return FlowResult.success(self._state)

    def set_amount(self, amount: str) -> FlowResult[StaffFlowState]:
        return self._update_entry(amount=str(amount))

    def set_method(self, method: str) -> FlowResult[StaffFlowState]:
        return self._update_entry(method=method)

    def set_remarks(self, remarks: str) -> FlowResult[StaffFlowState]:
        return self._update_entry(remarks=remarks)

    def set_additional_discount(self, discount: Decimal | int | str) -> FlowResult[StaffFlowState]:
        try:
            value = to_decimal(discount)
        except ValueError:
            return FlowResult.error(self._state, "Please enter a valid discount")
        if value < 0:
            return FlowResult.error(self._state, "Discount cannot be negative")
        return self._update_entry(additional_discount=value, refill=True)

    def apply_coupon(self, code: str) -> FlowResult[StaffFlowState]:
        state = self._state
        if not isinstance(state, StaffPaymentStep):
            return FlowResult.error(state, "Coupons can only be applied at payment")
        selection = state.selection
        sub_total = calculate_sub_total(
            self._snapshot.plan(selection.plan_id), self._snapshot.fees, selection.fee_ids, selection.quantity
        )
        try:
            coupon = self._apply_coupon.execute(
                code,
                sub_total,
                student_id=state.student.id,
                plan_id=selection.plan_id,
                branch_id=self._snapshot.branch.id,
            )
        except (BookingValidationError, CollaboratorError) as e:
            self._update_entry(coupon=None, refill=True)
            return FlowResult.error(self._state, str(e))
        self._update_entry(coupon=coupon, refill=True)
        return FlowResult.success(self._state, f"Coupon applied! Saved ₹{coupon.discount}")

    def submit(self) -> FlowResult[StaffFlowState]:
        state = self._state
        if not isinstance(state, PreviewStep):
            return FlowResult.error(state, "Review the payment before submitting")
        if self._submitting:
            return FlowResult.error(state, ALREADY_SUBMITTING)

        self._submitting = True
        try:
            quote = self.quote()
            entry = state.entry
            details = PaymentDetails(
                amount=parse_amount(entry.amount),
                method=entry.method,
                remarks=entry.remarks or None,
                discount=quote.total_discount,
                promo_code=entry.coupon.code if entry.coupon else None,
            )
            request = build_booking_request(
                state.student.id, self._snapshot, state.selection, self._today, payment_details=details
            )
            response = self._gateway.create_booking(request)
        except BookingValidationError as e:
            return FlowResult.error(state, str(e))
        except CollaboratorError as e:
            self._logger.warning("Payment rejected", extra={"branch_id": self._snapshot.branch.id, "reason": str(e)})
            return FlowResult.error(state, str(e) or "Failed to process payment")
        except Exception as e:
            self._logger.exception("Payment error", extra={"branch_id": self._snapshot.branch.id, "error": str(e)})
            return FlowResult.error(state, SOMETHING_WENT_WRONG)
        finally:
            self._submitting = False

        if not response.success:
            reason = response.error or "Failed to process payment"
            self._logger.info("Payment failed", extra={"branch_id": self._snapshot.branch.id, "reason": reason})
            return FlowResult.error(state, reason)

        selection = state.selection
        receipt = build_receipt(
            student=state.student,
            branch=self._snapshot.branch,
            plan=self._snapshot.plan(selection.plan_id),
            fees=[f for f in self._snapshot.fees if f.id in selection.fee_ids],
            quote=quote,
            start_date=request.start_date,
            payment_method=state.entry.method,
            seat=self._snapshot.seat(selection.seat_id),
            locker=self._snapshot.locker(selection.locker_id),
            invoice_no=response.invoice_no,
            issued_at=self._clock(),
        )
        self._state = ReceiptStep(
            student=state.student,
            selection=selection,
            entry=state.entry,
            receipt=receipt,
            payment_id=response.payment_id,
        )
        self._saved_entry = None
        self._logger.info(
            "Payment collected",
            extra={"branch_id": self._snapshot.branch.id, "plan_id": selection.plan_id, "invoice_no": receipt.invoice_no},
        )
        return FlowResult.success(self._state, "Payment collected successfully")

    def reset(self) -> FlowResult[StaffFlowState]:
        self._state = StudentStep()
        self._saved_entry = None
        return FlowResult.success(self._state)

    def _fresh_selection(self) -> SelectionState:
        return SelectionState(start_date=self._today)

    def _selection(self) -> SelectionState:
        return getattr(self._state, "selection", None) or self._fresh_selection()

    def _restore_entry(self, selection: SelectionState) -> PaymentEntry:
        entry = self._saved_entry or PaymentEntry()
        self._saved_entry = None
        if entry.coupon is not None:
            sub_total = calculate_sub_total(
                self._snapshot.plan(selection.plan_id), self._snapshot.fees, selection.fee_ids, selection.quantity
            )
            if entry.coupon.base_amount != sub_total:
                self._logger.info("Coupon dropped, order total changed", extra={"code": entry.coupon.code})
                entry = replace(entry, coupon=None)
        return entry

    def _with_autofilled_amount(self, state: StaffPaymentStep) -> StaffPaymentStep:
        self._state = state
        payable = self.quote().payable
        return replace(state, entry=replace(state.entry, amount=str(payable)))

    def _update_entry(self, refill: bool = False, **changes) -> FlowResult[StaffFlowState]:
        state = self._state
        if not isinstance(state, StaffPaymentStep):
            return FlowResult.error(state, "Payment details can only be changed on the payment step")
        updated = replace(state, entry=replace(state.entry, **changes))
        self._state = self._with_autofilled_amount(updated) if refill else updated
        return FlowResult.success(self._state)
