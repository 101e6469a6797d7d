from __future__ import annotations

import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from seatbooking.api.v1.schemas import (
    BookingCreateSchema,
    BookingResponseSchema,
    BookingStatus,
    BranchSchema,
    CatalogResponseSchema,
    CouponValidateRequestSchema,
    CouponValidateResponseSchema,
    DisplayMode,
    EligibilityRequestSchema,
    EligibilityResponseSchema,
    EventType,
    FeeSchema,
    InventoryItemSchema,
    InventoryKind,
    PlanSchema,
    QuoteRequestSchema,
    QuoteResponseSchema,
    SeatMapResponseSchema,
    SectionPageSchema,
    SelectionEventSchema,
    SelectionSchema,
    StudentSchema,
)
from seatbooking.application.exceptions import BookingValidationError, BranchNotFoundError, CollaboratorError
from seatbooking.application.ports.booking_gateway import BookingGatewayPort
from seatbooking.application.ports.inventory import InventoryPort
from seatbooking.application.use_cases.booking_flow import (
    PROOF_REQUIRED,
    build_booking_request,
    confirmation_message,
    validate_selection,
)
from seatbooking.application.use_cases.coupon import ApplyCouponUseCase
from seatbooking.application.use_cases.eligibility import (
    FeeToggled,
    LockerCleared,
    LockerSelected,
    PlanCleared,
    PlanSelected,
    QuantityChanged,
    SeatCleared,
    SeatSelected,
    SelectionEvent,
    StartDateChanged,
    apply_event,
    resolve_eligibility,
)
from seatbooking.application.use_cases.pagination import columns_for_viewport, paginate
from seatbooking.application.use_cases.pricing import calculate_quote, calculate_sub_total
from seatbooking.application.use_cases.student_search import StudentSearchUseCase
from seatbooking.application.utils.labels import (
    format_seat_number,
    locker_label,
    plan_duration_label,
    plan_hours_label,
)
from seatbooking.application.utils.plan_filters import upgrade_credit
from seatbooking.core.config import settings
from seatbooking.domain.entities.booking import PaymentDetails
from seatbooking.domain.entities.fee import classify_fee
from seatbooking.domain.entities.inventory import InventorySnapshot, Locker, Seat
from seatbooking.domain.entities.selection_state import SelectionState
from seatbooking.wiring.dependencies import (
    get_apply_coupon_use_case,
    get_booking_gateway,
    get_inventory,
    get_student_search_use_case,
)

router = APIRouter()
logger = logging.getLogger(__name__)

PAGE_PARAM_PREFIX = "page_"


def _load_snapshot(inventory: InventoryPort, branch_id: str) -> InventorySnapshot:
    try:
        return inventory.get_snapshot(branch_id)
    except BranchNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except CollaboratorError as e:
        raise HTTPException(status_code=502, detail=str(e))


def _to_event(schema: SelectionEventSchema) -> SelectionEvent:
    value = schema.value
    if schema.type in (EventType.plan_selected, EventType.fee_toggled, EventType.seat_selected, EventType.locker_selected):
        if not value:
            raise ValueError(f"{schema.type.value} requires a value")
    if schema.type == EventType.plan_selected:
        return PlanSelected(value)
    if schema.type == EventType.plan_cleared:
        return PlanCleared()
    if schema.type == EventType.fee_toggled:
        return FeeToggled(value)
    if schema.type == EventType.seat_selected:
        return SeatSelected(value)
    if schema.type == EventType.seat_cleared:
        return SeatCleared()
    if schema.type == EventType.locker_selected:
        return LockerSelected(value)
    if schema.type == EventType.locker_cleared:
        return LockerCleared()
    if schema.type == EventType.quantity_changed:
        return QuantityChanged(int(value or ""))
    return StartDateChanged(date.fromisoformat(value or ""))


def _build_selection(snapshot: InventorySnapshot, schema: SelectionSchema) -> SelectionState:
    """Replay a client-held selection through the reducer so every rule is re-checked."""
    events: list[SelectionEvent] = []
    if schema.plan_id:
        events.append(PlanSelected(schema.plan_id))
    events.extend(FeeToggled(fee_id) for fee_id in dict.fromkeys(schema.fee_ids))
    events.append(QuantityChanged(schema.quantity))
    if schema.seat_id:
        events.append(SeatSelected(schema.seat_id))
    if schema.locker_id:
        events.append(LockerSelected(schema.locker_id))

    selection = SelectionState(start_date=schema.start_date)
    for event in events:
        selection = apply_event(snapshot, selection, event)
    return selection


def _selection_schema(selection: SelectionState) -> SelectionSchema:
    return SelectionSchema(
        plan_id=selection.plan_id,
        fee_ids=sorted(selection.fee_ids),
        seat_id=selection.seat_id,
        locker_id=selection.locker_id,
        quantity=selection.quantity,
        start_date=selection.start_date,
    )


def _seat_item(seat: Seat) -> InventoryItemSchema:
    return InventoryItemSchema(
        id=seat.id,
        number=seat.number,
        label=format_seat_number(seat.number),
        section=seat.section_name,
        is_occupied=seat.is_occupied,
    )


def _locker_item(locker: Locker) -> InventoryItemSchema:
    return InventoryItemSchema(
        id=locker.id,
        number=locker.number,
        label=locker_label(locker) or "",
        section=locker.section_name,
        is_occupied=locker.is_occupied,
    )


@router.get("/branches/{branch_id}/catalog", response_model=CatalogResponseSchema)
def get_catalog(branch_id: str, inventory: InventoryPort = Depends(get_inventory)):
    snapshot = _load_snapshot(inventory, branch_id)
    branch = snapshot.branch
    return CatalogResponseSchema(
        branch=BranchSchema(
            id=branch.id,
            name=branch.name,
            address=branch.address,
            city=branch.city,
            phone=branch.phone,
            has_lockers=branch.has_lockers,
            is_locker_separate=branch.is_locker_separate,
        ),
        plans=[
            PlanSchema(
                id=p.id,
                name=p.name,
                price=p.price,
                duration=p.duration,
                duration_unit=p.duration_unit,
                category=p.category,
                includes_seat=p.includes_seat,
                includes_locker=p.includes_locker,
                duration_label=plan_duration_label(p),
                hours_label=plan_hours_label(p),
            )
            for p in snapshot.plans
        ],
        fees=[FeeSchema(id=f.id, name=f.name, amount=f.amount, kind=classify_fee(f).value) for f in snapshot.fees],
        seats=[_seat_item(s) for s in snapshot.seats],
        lockers=[_locker_item(lk) for lk in snapshot.lockers],
    )


@router.post("/branches/{branch_id}/eligibility", response_model=EligibilityResponseSchema)
def check_eligibility(
    branch_id: str,
    req: EligibilityRequestSchema,
    inventory: InventoryPort = Depends(get_inventory),
):
    snapshot = _load_snapshot(inventory, branch_id)
    try:
        selection = _build_selection(snapshot, req.selection)
        for event in req.events:
            selection = apply_event(snapshot, selection, _to_event(event))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    eligibility = resolve_eligibility(snapshot, selection)
    return EligibilityResponseSchema(
        seat_selection_enabled=eligibility.seat_selection_enabled,
        seat_mandatory=eligibility.seat_mandatory,
        locker_selection_visible=eligibility.locker_selection_visible,
        locker_mandatory=eligibility.locker_mandatory,
        selection=_selection_schema(selection),
    )


@router.post("/branches/{branch_id}/quote", response_model=QuoteResponseSchema)
def quote(
    branch_id: str,
    req: QuoteRequestSchema,
    inventory: InventoryPort = Depends(get_inventory),
    apply_coupon: ApplyCouponUseCase = Depends(get_apply_coupon_use_case),
):
    snapshot = _load_snapshot(inventory, branch_id)
    coupon = None
    coupon_error = None
    try:
        selection = _build_selection(snapshot, req.selection)
        plan = snapshot.plan(selection.plan_id)
        if req.coupon_code:
            sub_total = calculate_sub_total(plan, snapshot.fees, selection.fee_ids, selection.quantity)
            try:
                coupon = apply_coupon.execute(
                    req.coupon_code,
                    sub_total,
                    student_id=req.student_id,
                    plan_id=selection.plan_id,
                    branch_id=branch_id,
                )
            except CollaboratorError as e:
                coupon_error = str(e)
        price = calculate_quote(
            plan=plan,
            fees=snapshot.fees,
            selected_fee_ids=selection.fee_ids,
            quantity=selection.quantity,
            coupon=coupon,
            manual_discount=req.manual_discount,
            adjustment_credit=upgrade_credit(req.action, snapshot.plan(req.current_plan_id)),
            amount_received=req.amount_received,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return QuoteResponseSchema(
        plan_price=price.plan_price,
        fees_total=price.fees_total,
        quantity=price.quantity,
        sub_total=price.sub_total,
        coupon_code=coupon.code if coupon else None,
        coupon_discount=price.coupon_discount,
        coupon_error=coupon_error,
        manual_discount=price.manual_discount,
        adjustment_credit=price.adjustment_credit,
        total_discount=price.total_discount,
        payable=price.payable,
        amount_received=price.amount_received,
        due=price.due,
    )


@router.get("/branches/{branch_id}/seat-map", response_model=SeatMapResponseSchema)
def seat_map(
    branch_id: str,
    request: Request,
    width: int = Query(1280, ge=0),
    mode: DisplayMode = Query(DisplayMode.paged),
    kind: InventoryKind = Query(InventoryKind.seats),
    inventory: InventoryPort = Depends(get_inventory),
):
    """Seats or lockers grouped by section; ``page_<section>=n`` picks a section's page."""
    snapshot = _load_snapshot(inventory, branch_id)
    try:
        page_by_section = {
            key[len(PAGE_PARAM_PREFIX):]: int(value)
            for key, value in request.query_params.items()
            if key.startswith(PAGE_PARAM_PREFIX)
        }
        columns = columns_for_viewport(width)
        items = snapshot.seats if kind == InventoryKind.seats else snapshot.lockers
        pages = paginate(items, columns, page_by_section, mode=mode.value, rows_per_page=settings.SEAT_ROWS_PER_PAGE)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    to_item = _seat_item if kind == InventoryKind.seats else _locker_item
    return SeatMapResponseSchema(
        kind=kind,
        mode=mode,
        columns=columns,
        sections=[
            SectionPageSchema(
                section=p.section,
                page=p.page,
                total_pages=p.total_pages,
                has_previous=p.has_previous,
                has_next=p.has_next,
                items=[to_item(item) for item in p.items],
            )
            for p in pages
        ],
    )


@router.post("/coupons/validate", response_model=CouponValidateResponseSchema)
def validate_coupon(
    req: CouponValidateRequestSchema,
    apply_coupon: ApplyCouponUseCase = Depends(get_apply_coupon_use_case),
):
    try:
        coupon = apply_coupon.execute(
            req.code,
            req.amount,
            student_id=req.student_id,
            plan_id=req.plan_id,
            branch_id=req.branch_id,
        )
    except CollaboratorError as e:
        return CouponValidateResponseSchema(success=False, error=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return CouponValidateResponseSchema(
        success=True,
        code=coupon.code,
        discount=coupon.discount,
        final_amount=coupon.final_amount,
    )


@router.post("/bookings", response_model=BookingResponseSchema)
def create_booking(
    req: BookingCreateSchema,
    inventory: InventoryPort = Depends(get_inventory),
    gateway: BookingGatewayPort = Depends(get_booking_gateway),
):
    snapshot = _load_snapshot(inventory, req.branch_id)
    try:
        selection = _build_selection(snapshot, req.selection)
        validate_selection(snapshot, selection)
        if req.status == BookingStatus.pending_verification and not (req.payment and req.payment.proof_url):
            raise BookingValidationError(PROOF_REQUIRED)
        details = None
        if req.payment is not None:
            details = PaymentDetails(**req.payment.model_dump())
        booking_request = build_booking_request(
            req.student_id,
            snapshot,
            selection,
            date.today(),
            payment_id=req.payment_id,
            payment_details=details,
        )
        response = gateway.create_booking(booking_request)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except CollaboratorError as e:
        raise HTTPException(status_code=502, detail=str(e))

    if not response.success:
        logger.info("Booking rejected", extra={"branch_id": req.branch_id, "reason": response.error})
        raise HTTPException(status_code=409, detail=response.error or "Booking failed")

    return BookingResponseSchema(
        success=True,
        message=confirmation_message(req.status.value),
        payment_id=response.payment_id or req.payment_id,
        invoice_no=response.invoice_no,
        subscription_ids=list(response.subscription_ids),
    )


@router.get("/students", response_model=list[StudentSchema])
def search_students(
    q: str = Query(""),
    search: StudentSearchUseCase = Depends(get_student_search_use_case),
):
    return [StudentSchema(id=s.id, name=s.name, email=s.email, phone=s.phone) for s in search.search(q)]
