from __future__ import annotations

import logging

import httpx

from seatbooking.application.exceptions import CollaboratorError
from seatbooking.application.ports.booking_gateway import BookingGatewayPort
from seatbooking.core.config import settings
from seatbooking.domain.entities.booking import BookingRequest, BookingResponse


class HttpBookingGateway(BookingGatewayPort):
    def __init__(self, base_url: str | None = None, api_key: str | None = None, timeout: float | None = None) -> None:
        self._base_url = (base_url or settings.BOOKING_API_BASE_URL or "").rstrip("/")
        self._api_key = api_key or settings.BOOKING_API_KEY
        self._client = httpx.Client(timeout=timeout or settings.HTTP_TIMEOUT_SECONDS)
        self._logger = logging.getLogger(__name__)

        if not self._base_url:
            raise ValueError("BOOKING_API_BASE_URL is required for the HTTP booking gateway")

    def create_booking(self, request: BookingRequest) -> BookingResponse:
        url = f"{self._base_url}/bookings"
        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"

        try:
            response = self._client.post(url, json=request.to_payload(), headers=headers)
        except httpx.HTTPError as e:
            self._logger.error("Error creating booking", extra={"branch_id": request.branch_id, "error": str(e)})
            raise CollaboratorError("Booking service unavailable") from e

        if response.status_code >= 500:
            self._logger.error(
                "Booking service error",
                extra={"branch_id": request.branch_id, "error": f"HTTP {response.status_code}"},
            )
            raise CollaboratorError("Booking service unavailable")

        try:
            data = response.json()
        except ValueError:
            data = {}

        # 4xx carries the business reason, e.g. a seat taken since the snapshot was read
        if response.status_code >= 400 or not data.get("success", False):
            return BookingResponse(success=False, error=data.get("error") or "Booking failed")

        return BookingResponse(
            success=True,
            payment_id=data.get("paymentId"),
            invoice_no=data.get("invoiceNo"),
            subscription_ids=tuple(str(s) for s in data.get("subscriptionIds", [])),
        )
