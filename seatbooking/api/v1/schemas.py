from datetime import date
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field


class EventType(str, Enum):
    plan_selected = "plan_selected"
    plan_cleared = "plan_cleared"
    fee_toggled = "fee_toggled"
    seat_selected = "seat_selected"
    seat_cleared = "seat_cleared"
    locker_selected = "locker_selected"
    locker_cleared = "locker_cleared"
    quantity_changed = "quantity_changed"
    start_date_changed = "start_date_changed"


class DisplayMode(str, Enum):
    paged = "paged"
    scroll = "scroll"


class InventoryKind(str, Enum):
    seats = "seats"
    lockers = "lockers"


class BookingStatus(str, Enum):
    completed = "completed"
    pending_verification = "pending_verification"


class SelectionSchema(BaseModel):
    plan_id: str | None = None
    fee_ids: list[str] = Field(default_factory=list)
    seat_id: str | None = None
    locker_id: str | None = None
    quantity: int = 1
    start_date: date | None = None


class SelectionEventSchema(BaseModel):
    type: EventType
    value: str | None = None


class BranchSchema(BaseModel):
    id: str
    name: str
    address: str | None = None
    city: str = ""
    phone: str | None = None
    has_lockers: bool = False
    is_locker_separate: bool = False


class PlanSchema(BaseModel):
    id: str
    name: str
    price: Decimal
    duration: int
    duration_unit: str
    category: str
    includes_seat: bool
    includes_locker: bool
    duration_label: str
    hours_label: str | None = None


class FeeSchema(BaseModel):
    id: str
    name: str
    amount: Decimal
    kind: str


class InventoryItemSchema(BaseModel):
    id: str
    number: str
    label: str
    section: str
    is_occupied: bool


class CatalogResponseSchema(BaseModel):
    branch: BranchSchema
    plans: list[PlanSchema]
    fees: list[FeeSchema]
    seats: list[InventoryItemSchema]
    lockers: list[InventoryItemSchema]


class EligibilityRequestSchema(BaseModel):
    selection: SelectionSchema = Field(default_factory=SelectionSchema)
    events: list[SelectionEventSchema] = Field(default_factory=list)


class EligibilityResponseSchema(BaseModel):
    seat_selection_enabled: bool
    seat_mandatory: bool
    locker_selection_visible: bool
    locker_mandatory: bool
    selection: SelectionSchema


class QuoteRequestSchema(BaseModel):
    selection: SelectionSchema
    student_id: str | None = None
    coupon_code: str | None = None
    manual_discount: Decimal = Decimal("0")
    amount_received: Decimal = Decimal("0")
    action: str | None = None  # "renew", "upgrade"
    current_plan_id: str | None = None


class QuoteResponseSchema(BaseModel):
    plan_price: Decimal
    fees_total: Decimal
    quantity: int
    sub_total: Decimal
    coupon_code: str | None = None
    coupon_discount: Decimal
    coupon_error: str | None = None
    manual_discount: Decimal
    adjustment_credit: Decimal
    total_discount: Decimal
    payable: Decimal
    amount_received: Decimal
    due: Decimal


class SectionPageSchema(BaseModel):
    section: str
    page: int
    total_pages: int
    has_previous: bool
    has_next: bool
    items: list[InventoryItemSchema]


class SeatMapResponseSchema(BaseModel):
    kind: InventoryKind
    mode: DisplayMode
    columns: int
    sections: list[SectionPageSchema]


class CouponValidateRequestSchema(BaseModel):
    code: str
    amount: Decimal
    student_id: str | None = None
    plan_id: str | None = None
    branch_id: str | None = None


class CouponValidateResponseSchema(BaseModel):
    success: bool
    code: str | None = None
    discount: Decimal | None = None
    final_amount: Decimal | None = None
    error: str | None = None


class PaymentDetailsSchema(BaseModel):
    amount: Decimal
    method: str = "cash"
    remarks: str | None = None
    type: str = "subscription"
    discount: Decimal = Decimal("0")
    proof_url: str | None = None
    promo_code: str | None = None


class BookingCreateSchema(BaseModel):
    student_id: str
    branch_id: str
    selection: SelectionSchema
    payment_id: str | None = None
    payment: PaymentDetailsSchema | None = None
    status: BookingStatus = BookingStatus.completed


class BookingResponseSchema(BaseModel):
    success: bool
    message: str
    payment_id: str | None = None
    invoice_no: str | None = None
    subscription_ids: list[str] = Field(default_factory=list)


class StudentSchema(BaseModel):
    id: str
    name: str
    email: str | None = None
    phone: str | None = None
