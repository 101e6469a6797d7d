from __future__ import annotations

import logging
from typing import Any

import httpx

from seatbooking.application.exceptions import BranchNotFoundError, CollaboratorError
from seatbooking.application.ports.inventory import InventoryPort
from seatbooking.core.config import settings
from seatbooking.domain.entities.fee import AdditionalFee
from seatbooking.domain.entities.inventory import Branch, InventorySnapshot, Locker, Seat
from seatbooking.domain.entities.plan import Plan


class HttpInventoryProvider(InventoryPort):
    """Reads a branch's plans, fees, seats and lockers from the library management API."""

    def __init__(self, base_url: str | None = None, api_key: str | None = None, timeout: float | None = None) -> None:
        self._base_url = (base_url or settings.INVENTORY_API_BASE_URL or "").rstrip("/")
        self._api_key = api_key or settings.BOOKING_API_KEY
        self._client = httpx.Client(timeout=timeout or settings.HTTP_TIMEOUT_SECONDS)
        self._logger = logging.getLogger(__name__)

        if not self._base_url:
            raise ValueError("INVENTORY_API_BASE_URL is required for the HTTP inventory provider")

    def get_snapshot(self, branch_id: str) -> InventorySnapshot:
        url = f"{self._base_url}/branches/{branch_id}/inventory"
        headers = {"Authorization": f"Bearer {self._api_key}"} if self._api_key else {}
        try:
            response = self._client.get(url, headers=headers)
            if response.status_code == 404:
                raise BranchNotFoundError("Branch not found")
            response.raise_for_status()
            data = response.json()
        except CollaboratorError:
            raise
        except (httpx.HTTPError, ValueError) as e:
            self._logger.error("Error fetching inventory", extra={"branch_id": branch_id, "error": str(e)})
            raise CollaboratorError("Failed to load branch inventory") from e

        return self._parse_snapshot(data)

    def _parse_snapshot(self, data: dict[str, Any]) -> InventorySnapshot:
        library = data.get("library") or {}
        branch_data = data.get("branch") or {}
        branch = Branch(
            id=str(branch_data.get("id", "")),
            name=branch_data.get("name", ""),
            address=branch_data.get("address"),
            city=branch_data.get("city") or "",
            phone=branch_data.get("contactPhone"),
            has_lockers=bool(branch_data.get("hasLockers", False)),
            is_locker_separate=bool(library.get("isLockerSeparate", branch_data.get("isLockerSeparate", False))),
        )
        plans = [
            Plan(
                id=str(p["id"]),
                name=p.get("name", ""),
                price=p.get("price", 0),
                duration=int(p.get("duration", 1)),
                duration_unit=p.get("durationUnit", "months"),
                category=p.get("category", "fixed"),
                billing_cycle=p.get("billingCycle", "one_time"),
                shift_start=p.get("shiftStart"),
                shift_end=p.get("shiftEnd"),
                hours_per_day=p.get("hoursPerDay"),
                includes_seat=bool(p.get("includesSeat", False)),
                includes_locker=bool(p.get("includesLocker", False)),
                description=p.get("description"),
            )
            for p in data.get("plans", [])
        ]
        fees = [
            AdditionalFee(
                id=str(f["id"]),
                name=f.get("name", ""),
                amount=f.get("amount", 0),
                type=f.get("billType"),
                description=f.get("description"),
                kind=f.get("kind"),
            )
            for f in data.get("fees", [])
        ]
        seats = [
            Seat(id=str(s["id"]), number=str(s["number"]), section=s.get("section"), is_occupied=bool(s.get("isOccupied")))
            for s in data.get("seats", [])
        ]
        lockers = [
            Locker(id=str(lk["id"]), number=str(lk["number"]), is_occupied=bool(lk.get("isOccupied")))
            for lk in data.get("lockers", [])
        ]
        return InventorySnapshot(branch=branch, plans=plans, fees=fees, seats=seats, lockers=lockers)
