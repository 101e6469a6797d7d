from functools import lru_cache
import logging

from seatbooking.core.config import settings
from seatbooking.application.ports.booking_gateway import BookingGatewayPort
from seatbooking.application.ports.coupon_validator import CouponValidatorPort
from seatbooking.application.ports.inventory import InventoryPort
from seatbooking.application.ports.student_directory import StudentDirectoryPort
from seatbooking.application.use_cases.coupon import ApplyCouponUseCase
from seatbooking.application.use_cases.student_search import StudentSearchUseCase
from seatbooking.application.utils.debounce import SearchDebouncer
from seatbooking.infrastructure.bookings.http_booking_gateway import HttpBookingGateway
from seatbooking.infrastructure.bookings.mock_booking_gateway import MockBookingGateway
from seatbooking.infrastructure.inventory.http_inventory import HttpInventoryProvider
from seatbooking.infrastructure.inventory.memory_inventory import MemoryInventoryProvider
from seatbooking.infrastructure.promotions.promotion_validator import PromotionCouponValidator
from seatbooking.infrastructure.students.memory_directory import MemoryStudentDirectory

logger = logging.getLogger(__name__)


def _is_local() -> bool:
    return settings.ENV.lower() in {"dev", "local"}


@lru_cache
def get_inventory() -> InventoryPort:
    if settings.INVENTORY_API_BASE_URL and not _is_local():
        logger.info("Using HttpInventoryProvider")
        return HttpInventoryProvider()
    logger.info("Using MemoryInventoryProvider catalog=%s", settings.CATALOG_PATH)
    return MemoryInventoryProvider.from_json(settings.CATALOG_PATH or "")


@lru_cache
def get_coupon_validator() -> CouponValidatorPort:
    return PromotionCouponValidator.from_json(settings.CATALOG_PATH or "")


@lru_cache
def get_booking_gateway() -> BookingGatewayPort:
    if not settings.BOOKING_API_BASE_URL or _is_local():
        logger.info("Using MockBookingGateway (no booking API configured or ENV=dev/local)")
        inventory = get_inventory()
        return MockBookingGateway(inventory if isinstance(inventory, MemoryInventoryProvider) else None)
    logger.info("Using HttpBookingGateway")
    return HttpBookingGateway()


@lru_cache
def get_student_directory() -> StudentDirectoryPort:
    return MemoryStudentDirectory.from_json(settings.CATALOG_PATH or "")


def get_apply_coupon_use_case() -> ApplyCouponUseCase:
    return ApplyCouponUseCase(validator=get_coupon_validator())


def get_student_search_use_case() -> StudentSearchUseCase:
    return StudentSearchUseCase(
        directory=get_student_directory(),
        min_chars=settings.STUDENT_SEARCH_MIN_CHARS,
        limit=settings.STUDENT_SEARCH_LIMIT,
        debouncer=SearchDebouncer(settings.SEARCH_DEBOUNCE_MS / 1000),
    )
